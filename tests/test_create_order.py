from decimal import Decimal

import pytest

from order_api.application.create_order import CreateOrderUseCase, CreateOrderDTO, OrderItemDTO
from order_api.domain.exceptions import (
    CustomerNotFoundError, InsufficientStockError, LineDiscountTooLargeError,
    OrderDiscountTooLargeError, ProductNotFoundError,
)
from order_api.domain.models import OrderStatus


def order_request(customer_id, *items, discount=None):
    return CreateOrderDTO(
        customer_id=customer_id,
        items=[OrderItemDTO(product_id=p, quantity=q) for p, q in items],
        discount_amount=discount,
    )


async def test_create_order_snapshots_prices_and_takes_stock(store, uow, customer):
    widget = store.add_product("Widget", "10.00", 5)
    gadget = store.add_product("Gadget", "20.00", 5)

    order = await CreateOrderUseCase(uow)(order_request(customer.id, (widget.id, 2), (gadget.id, 1)))

    assert order.status == OrderStatus.PENDING
    assert order.customer_name == "Connor McDavid"
    assert [(i.product_id, i.quantity, i.unit_price) for i in order.items] == [
        (widget.id, 2, Decimal("10.00")),
        (gadget.id, 1, Decimal("20.00")),
    ]
    assert order.total == Decimal("40.00")
    assert store.stock(widget.id) == 3
    assert store.stock(gadget.id) == 4
    assert order.id in store.orders
    assert uow.commits == 1


@pytest.mark.parametrize("quantities", [(1,), (2, 3), (1, 1, 1)])
async def test_created_quantity_plus_remaining_stock_is_constant(store, uow, customer, quantities):
    products = [store.add_product(f"Product {n}", "5.00", 10) for n in range(len(quantities))]

    order = await CreateOrderUseCase(uow)(
        order_request(customer.id, *[(p.id, q) for p, q in zip(products, quantities)])
    )

    for product, item in zip(products, order.items):
        assert item.quantity + store.stock(product.id) == 10


async def test_insufficient_stock_leaves_every_product_untouched(store, uow, customer):
    first = store.add_product("First", "1.00", 10)
    scarce = store.add_product("Scarce", "1.00", 5)

    with pytest.raises(InsufficientStockError) as exc_info:
        await CreateOrderUseCase(uow)(order_request(customer.id, (first.id, 4), (scarce.id, 6)))

    assert str(exc_info.value) == (
        f"Not enough stock for Product ID {scarce.id}. Available: 5, Requested: 6."
    )
    assert store.stock(first.id) == 10
    assert store.stock(scarce.id) == 5
    assert store.orders == {}
    assert uow.commits == 0


async def test_unknown_product_aborts_the_whole_order(store, uow, customer):
    widget = store.add_product("Widget", "10.00", 5)

    with pytest.raises(ProductNotFoundError):
        await CreateOrderUseCase(uow)(order_request(customer.id, (widget.id, 1), (999, 1)))

    assert store.stock(widget.id) == 5
    assert store.orders == {}


async def test_unknown_customer_is_rejected(store, uow):
    widget = store.add_product("Widget", "10.00", 5)

    with pytest.raises(CustomerNotFoundError):
        await CreateOrderUseCase(uow)(order_request("missing", (widget.id, 1)))

    assert store.stock(widget.id) == 5


async def test_same_product_twice_sees_earlier_reservation(store, uow, customer):
    widget = store.add_product("Widget", "10.00", 5)

    with pytest.raises(InsufficientStockError) as exc_info:
        await CreateOrderUseCase(uow)(order_request(customer.id, (widget.id, 3), (widget.id, 3)))

    assert exc_info.value.available == 2
    assert store.stock(widget.id) == 5


async def test_item_discount_is_taken_once_off_the_line(store, uow, customer):
    widget = store.add_product("Widget", "10.00", 5)
    request = CreateOrderDTO(
        customer_id=customer.id,
        items=[OrderItemDTO(product_id=widget.id, quantity=2, discount_amount=Decimal("2.50"))],
        discount_amount=Decimal("5.00"),
    )

    order = await CreateOrderUseCase(uow)(request)

    item = order.items[0]
    assert item.unit_price == Decimal("10.00")
    assert item.discount_amount == Decimal("2.50")
    assert item.line_total == Decimal("17.50")
    assert order.subtotal == Decimal("17.50")
    assert order.total == Decimal("12.50")


async def test_discount_above_line_amount_is_rejected(store, uow, customer):
    widget = store.add_product("Widget", "10.00", 5)
    request = CreateOrderDTO(
        customer_id=customer.id,
        items=[OrderItemDTO(product_id=widget.id, quantity=1, discount_amount=Decimal("10.01"))],
    )

    with pytest.raises(LineDiscountTooLargeError):
        await CreateOrderUseCase(uow)(request)

    assert store.stock(widget.id) == 5


async def test_discount_equal_to_line_amount_is_accepted(store, uow, customer):
    widget = store.add_product("Widget", "10.00", 5)
    request = CreateOrderDTO(
        customer_id=customer.id,
        items=[OrderItemDTO(product_id=widget.id, quantity=2, discount_amount=Decimal("20.00"))],
    )

    order = await CreateOrderUseCase(uow)(request)

    assert order.items[0].line_total == Decimal("0.00")
    assert order.total == Decimal("0.00")


async def test_order_discount_above_subtotal_is_rejected(store, uow, customer):
    widget = store.add_product("Widget", "10.00", 5)

    with pytest.raises(OrderDiscountTooLargeError):
        await CreateOrderUseCase(uow)(
            order_request(customer.id, (widget.id, 2), discount=Decimal("20.01"))
        )

    assert store.stock(widget.id) == 5
    assert store.orders == {}
