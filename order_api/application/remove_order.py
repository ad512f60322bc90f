import logging

from order_api.domain.exceptions import OrderNotFoundError, OrderItemNotFoundError
from order_api.application.stock import release_stock


logger = logging.getLogger(__name__)


class RemoveOrderItemUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, order_id: str, item_id: str) -> None:
        logger.info(f"Removing item {item_id} from order {order_id}")

        async with self._uow() as uow:
            order = await uow.orders.get_by_id(order_id, for_update=True)
            if not order:
                logger.warning(f"Attempted operation on non-existent order {order_id}")
                raise OrderNotFoundError(order_id)

            item = order.find_item(item_id)
            if not item:
                logger.warning(f"Attempted operation on non-existent order item {item_id} in order {order_id}")
                raise OrderItemNotFoundError(order_id, item_id)

            # Only the request that actually removed the line restocks it
            if not await uow.orders.delete_item(item.id):
                raise OrderItemNotFoundError(order_id, item_id)
            # Removal releases the reservation regardless of order status
            await release_stock(uow, item.product_id, item.quantity)
            await uow.commit()

        logger.info(f"Item {item_id} was removed from order {order_id}")


class DeleteOrderUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, order_id: str) -> None:
        logger.info(f"Deleting order {order_id}")

        async with self._uow() as uow:
            order = await uow.orders.get_by_id(order_id, for_update=True)
            if not order:
                logger.warning(f"Attempted operation on non-existent order {order_id}")
                raise OrderNotFoundError(order_id)

            if not await uow.orders.delete(order.id):
                raise OrderNotFoundError(order_id)

            # TODO: restock only orders that have not shipped once the status rules are agreed
            for item in order.items:
                await release_stock(uow, item.product_id, item.quantity)

            await uow.commit()

        logger.info(f"Order {order_id} was deleted")
