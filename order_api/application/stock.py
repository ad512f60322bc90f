from typing import Optional

from order_api.domain.models import OrderItem, Product
from order_api.domain.exceptions import InsufficientStockError, LineDiscountTooLargeError
from order_api.application.interfaces import UnitOfWork


async def reserve_stock(uow: UnitOfWork, product: Product, quantity: int, additional: bool = False) -> None:
    """Takes quantity units off the product's stock inside the current transaction.

    The check on the loaded product gives the early failure; the conditional
    UPDATE is what guarantees stock never goes negative under concurrent
    requests, since the loaded value may already be stale.
    """
    if product.stock_quantity < quantity:
        raise InsufficientStockError(product.id, product.stock_quantity, quantity, additional)

    if not await uow.products.reserve_stock(product.id, quantity):
        current = await uow.products.get_by_id(product.id)
        available = current.stock_quantity if current else 0
        raise InsufficientStockError(product.id, available, quantity, additional)

    product.stock_quantity -= quantity


async def release_stock(uow: UnitOfWork, product_id: int, quantity: int) -> None:
    """Restock: returns previously reserved units to the product"""
    await uow.products.release_stock(product_id, quantity)


def ensure_line_discount_fits(item: OrderItem, quantity: Optional[int] = None) -> None:
    """Raises when the line discount would exceed quantity x unit price"""
    if not item.discount_fits(quantity):
        line_amount = (item.quantity if quantity is None else quantity) * item.unit_price
        raise LineDiscountTooLargeError(item.product_id, line_amount, item.discount_amount)
