import logging
from typing import List, Optional

from order_api.domain.models import Order, OrderStatus
from order_api.domain.exceptions import OrderNotFoundError


logger = logging.getLogger(__name__)


class GetOrderUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, order_id: str) -> Order:
        async with self._uow() as uow:
            order = await uow.orders.get_by_id(order_id)
            if not order:
                raise OrderNotFoundError(order_id)
            return order


class ListOrdersUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, customer_name: Optional[str] = None) -> List[Order]:
        async with self._uow() as uow:
            return await uow.orders.list(customer_name=customer_name)


class UpdateOrderStatusUseCase:
    """Any status may move to any other; no transition rules are enforced."""

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, order_id: str, status: OrderStatus) -> None:
        logger.info(f"Updating status for order {order_id} to {status.value}")

        async with self._uow() as uow:
            order = await uow.orders.get_by_id(order_id, for_update=True)
            if not order:
                logger.warning(f"Attempted operation on non-existent order {order_id}")
                raise OrderNotFoundError(order_id)

            await uow.orders.update_status(order_id, status)
            await uow.commit()

        logger.info(f"Status for order {order_id} was updated to {status.value}")
