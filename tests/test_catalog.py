from decimal import Decimal

import pytest

from order_api.application.create_order import CreateOrderUseCase, CreateOrderDTO, OrderItemDTO
from order_api.application.products import (
    ProductDTO, ProductUpdateDTO, CreateProductUseCase, UpdateProductUseCase, DeleteProductUseCase,
    FindProductsByNameUseCase, GetProductUseCase
)
from order_api.application.customers import (
    CustomerDTO, CreateCustomerUseCase, UpdateCustomerUseCase, DeleteCustomerUseCase,
    FindCustomersByNameUseCase
)
from order_api.application.auth import RegisterUserUseCase, LoginUseCase, CredentialsDTO
from order_api.domain.exceptions import (
    CustomerHasOrdersError, CustomerNotFoundError, EmailAlreadyRegisteredError,
    InvalidCredentialsError, ProductInUseError, ProductNotFoundError
)
from order_api.infrastructure.security import PasslibPasswordHasher


async def test_product_crud(store, uow):
    product = await CreateProductUseCase(uow)(ProductDTO(name="Widget", price=Decimal("9.99"), stock_quantity=3))
    assert store.products[product.id].stock_quantity == 3

    await UpdateProductUseCase(uow)(product.id, ProductUpdateDTO(name="Widget XL", price=Decimal("12.00")))
    updated = await GetProductUseCase(uow)(product.id)
    assert (updated.name, updated.price, updated.stock_quantity) == ("Widget XL", Decimal("12.00"), 3)

    assert [p.id for p in await FindProductsByNameUseCase(uow)("widget xl")] == [product.id]

    await DeleteProductUseCase(uow)(product.id)
    with pytest.raises(ProductNotFoundError):
        await GetProductUseCase(uow)(product.id)


async def test_product_on_an_order_cannot_be_deleted(store, uow, customer):
    widget = store.add_product("Widget", "1.00", 5)
    await CreateOrderUseCase(uow)(
        CreateOrderDTO(customer_id=customer.id, items=[OrderItemDTO(product_id=widget.id, quantity=1)])
    )

    with pytest.raises(ProductInUseError):
        await DeleteProductUseCase(uow)(widget.id)

    assert widget.id in store.products


async def test_update_missing_product(uow):
    with pytest.raises(ProductNotFoundError):
        await UpdateProductUseCase(uow)(1, ProductUpdateDTO(name="Widget", price=Decimal("1.00")))


async def test_customer_crud(store, uow):
    created = await CreateCustomerUseCase(uow)(CustomerDTO(name="Zach Hyman", address="Edmonton"))
    assert store.customers[created.id].address == "Edmonton"

    await UpdateCustomerUseCase(uow)(created.id, CustomerDTO(name="Zach Hyman", phone_number="780-555-0100"))
    assert store.customers[created.id].address is None
    assert store.customers[created.id].phone_number == "780-555-0100"

    assert len(await FindCustomersByNameUseCase(uow)("ZACH HYMAN")) == 1

    await DeleteCustomerUseCase(uow)(created.id)
    assert created.id not in store.customers


async def test_customer_with_orders_cannot_be_deleted(store, uow, customer):
    widget = store.add_product("Widget", "1.00", 5)
    await CreateOrderUseCase(uow)(
        CreateOrderDTO(customer_id=customer.id, items=[OrderItemDTO(product_id=widget.id, quantity=1)])
    )

    with pytest.raises(CustomerHasOrdersError):
        await DeleteCustomerUseCase(uow)(customer.id)


async def test_delete_missing_customer(uow):
    with pytest.raises(CustomerNotFoundError):
        await DeleteCustomerUseCase(uow)("missing")


async def test_register_then_login(store, uow):
    class FakeTokens:
        def create_access_token(self, user):
            return f"token-for-{user.email}"

    hasher = PasslibPasswordHasher()
    user = await RegisterUserUseCase(uow, hasher)(CredentialsDTO(email="Demo@Example.com", password="Demo123"))

    assert user.email == "demo@example.com"
    assert store.users["demo@example.com"].password_hash != "Demo123"

    login = LoginUseCase(uow, hasher, FakeTokens())
    assert await login(CredentialsDTO(email="DEMO@example.com", password="Demo123")) == "token-for-demo@example.com"

    with pytest.raises(InvalidCredentialsError):
        await login(CredentialsDTO(email="demo@example.com", password="wrong"))
    with pytest.raises(InvalidCredentialsError):
        await login(CredentialsDTO(email="nobody@example.com", password="Demo123"))


async def test_email_can_only_register_once(uow):
    register = RegisterUserUseCase(uow, PasslibPasswordHasher())
    await register(CredentialsDTO(email="demo@example.com", password="Demo123"))

    with pytest.raises(EmailAlreadyRegisteredError) as exc_info:
        await register(CredentialsDTO(email="demo@example.com", password="Other123"))

    assert "email" in exc_info.value.errors
