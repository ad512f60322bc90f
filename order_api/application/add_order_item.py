import logging
import uuid
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel

from order_api.domain.models import Order, OrderItem
from order_api.domain.exceptions import OrderNotFoundError, OrderItemChangedError, ProductNotFoundError
from order_api.application.stock import reserve_stock, ensure_line_discount_fits


logger = logging.getLogger(__name__)


class AddOrderItemDTO(BaseModel):
    product_id: int
    quantity: int
    discount_amount: Optional[Decimal] = None


class AddItemToOrderUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, order_id: str, item_data: AddOrderItemDTO) -> Order:
        logger.info(f"Adding product {item_data.product_id} to order {order_id}")

        async with self._uow() as uow:
            order = await uow.orders.get_by_id(order_id, for_update=True)
            if not order:
                logger.warning(f"Attempted operation on non-existent order {order_id}")
                raise OrderNotFoundError(order_id)

            product = await uow.products.get_by_id(item_data.product_id)
            if not product:
                raise ProductNotFoundError(item_data.product_id)

            existing = order.find_item_for_product(product.id)
            if existing:
                # Merge: the price snapshot and discount of the existing line are kept
                merged_quantity = existing.quantity + item_data.quantity
                if not await uow.orders.update_item_quantity(existing.id, merged_quantity, existing.quantity):
                    raise OrderItemChangedError(order.id, existing.id)
                await reserve_stock(uow, product, item_data.quantity)
                existing.quantity = merged_quantity
            else:
                item = OrderItem(
                    id=str(uuid.uuid4()),
                    order_id=order.id,
                    product_id=product.id,
                    product_name=product.name,
                    quantity=item_data.quantity,
                    unit_price=product.price,
                    discount_amount=item_data.discount_amount or Decimal("0"),
                )
                ensure_line_discount_fits(item)
                await reserve_stock(uow, product, item_data.quantity)
                await uow.orders.add_item(item)
                order.items.append(item)

            await uow.commit()

        logger.info(f"Item with product ID {item_data.product_id} added to order {order_id}")
        return order
