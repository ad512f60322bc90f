import logging
from pydantic import BaseModel

from order_api.domain.models import Order
from order_api.domain.exceptions import (
    OrderNotFoundError, OrderItemNotFoundError, OrderItemChangedError, MissingProductInfoError
)
from order_api.application.stock import reserve_stock, release_stock, ensure_line_discount_fits


logger = logging.getLogger(__name__)


class UpdateOrderItemDTO(BaseModel):
    quantity: int


class UpdateOrderItemUseCase:
    """Sets the line to an absolute quantity and reconciles stock by the difference.

    The unit price is never re-snapshotted here, even when the product price
    changed after the line was created.
    """

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, order_id: str, item_id: str, item_data: UpdateOrderItemDTO) -> Order:
        logger.info(f"Updating item {item_id} in order {order_id}")

        async with self._uow() as uow:
            order = await uow.orders.get_by_id(order_id, for_update=True)
            if not order:
                logger.warning(f"Attempted operation on non-existent order {order_id}")
                raise OrderNotFoundError(order_id)

            item = order.find_item(item_id)
            if not item:
                logger.warning(f"Attempted operation on non-existent order item {item_id} in order {order_id}")
                raise OrderItemNotFoundError(order_id, item_id)

            product = await uow.products.get_by_id(item.product_id)
            if not product:
                raise MissingProductInfoError(item.product_id)

            ensure_line_discount_fits(item, item_data.quantity)

            # The delta is only valid against the quantity that was read
            if not await uow.orders.update_item_quantity(item.id, item_data.quantity, item.quantity):
                raise OrderItemChangedError(order_id, item_id)

            delta = item_data.quantity - item.quantity
            if delta > 0:
                await reserve_stock(uow, product, delta, additional=True)
            elif delta < 0:
                await release_stock(uow, product.id, -delta)

            item.quantity = item_data.quantity
            await uow.commit()

        logger.info(f"Item {item_id} in order {order_id} was updated")
        return order
