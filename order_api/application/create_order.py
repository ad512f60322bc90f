import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional
from pydantic import BaseModel

from order_api.domain.models import Order, OrderItem, OrderStatus, Product
from order_api.domain.exceptions import CustomerNotFoundError, OrderDiscountTooLargeError, ProductNotFoundError
from order_api.application.stock import reserve_stock, ensure_line_discount_fits


logger = logging.getLogger(__name__)


class OrderItemDTO(BaseModel):
    product_id: int
    quantity: int
    discount_amount: Optional[Decimal] = None


class CreateOrderDTO(BaseModel):
    customer_id: str
    items: List[OrderItemDTO]
    discount_amount: Optional[Decimal] = None


class CreateOrderUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, order_data: CreateOrderDTO) -> Order:
        logger.info(f"Creating order for customer {order_data.customer_id}")

        async with self._uow() as uow:
            # 1. Customer must exist
            customer = await uow.customers.get_by_id(order_data.customer_id)
            if not customer:
                raise CustomerNotFoundError(order_data.customer_id)

            order = Order(
                id=str(uuid.uuid4()),
                customer_id=customer.id,
                customer_name=customer.name,
                order_date=datetime.now(timezone.utc),
                status=OrderStatus.PENDING,
                discount_amount=order_data.discount_amount or Decimal("0"),
            )

            # 2. Stock check and decrement per item, in the order supplied.
            # Nothing is committed until every item has passed.
            products: Dict[int, Product] = {}
            for requested in order_data.items:
                product = products.get(requested.product_id)
                if product is None:
                    product = await uow.products.get_by_id(requested.product_id)
                    if not product:
                        raise ProductNotFoundError(requested.product_id)
                    products[product.id] = product

                item = OrderItem(
                    id=str(uuid.uuid4()),
                    order_id=order.id,
                    product_id=product.id,
                    product_name=product.name,
                    quantity=requested.quantity,
                    unit_price=product.price,
                    discount_amount=requested.discount_amount or Decimal("0"),
                )
                ensure_line_discount_fits(item)
                await reserve_stock(uow, product, requested.quantity)
                order.items.append(item)

            if order.discount_amount > order.subtotal:
                raise OrderDiscountTooLargeError(order.subtotal, order.discount_amount)

            # 3. Order and items in the same transaction as the stock changes
            await uow.orders.create(order)
            await uow.commit()

        logger.info(f"Order {order.id} created for customer {order.customer_id}")
        return order
