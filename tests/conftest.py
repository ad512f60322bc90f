import copy
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import List, Optional

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine

from order_api.config import Settings
from order_api.database import build_session_factory, create_tables
from order_api.domain.models import Order, OrderItem, OrderStatus, Product, Customer, User
from order_api.application.interfaces import (
    UnitOfWork, OrderRepository, ProductRepository, CustomerRepository, UserRepository
)
from order_api.application.seed_demo import DEMO_ADMIN_EMAIL
from order_api.main import create_app


# --- In-memory persistence for use case tests ---

class InMemoryStore:
    def __init__(self):
        self.products = {}
        self.customers = {}
        self.orders = {}
        self.users = {}
        self.next_product_id = 1

    def add_product(self, name: str, price: str, stock: int) -> Product:
        product = Product(id=self.next_product_id, name=name, price=Decimal(price), stock_quantity=stock)
        self.products[product.id] = product
        self.next_product_id += 1
        return product

    def add_customer(self, name: str) -> Customer:
        customer = Customer(id=f"customer-{len(self.customers) + 1}", name=name)
        self.customers[customer.id] = customer
        return customer

    def stock(self, product_id: int) -> int:
        return self.products[product_id].stock_quantity


class InMemoryOrderRepository(OrderRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    async def get_by_id(self, order_id: str, for_update: bool = False) -> Optional[Order]:
        order = self._store.orders.get(order_id)
        return order.model_copy(deep=True) if order else None

    async def list(self, customer_name: Optional[str] = None) -> List[Order]:
        orders = list(self._store.orders.values())
        if customer_name:
            orders = [o for o in orders if (o.customer_name or "").upper() == customer_name.upper()]
        return [o.model_copy(deep=True) for o in orders]

    async def create(self, order: Order) -> None:
        self._store.orders[order.id] = order.model_copy(deep=True)

    async def add_item(self, item: OrderItem) -> None:
        self._store.orders[item.order_id].items.append(item.model_copy(deep=True))

    def _find_item(self, item_id: str) -> Optional[OrderItem]:
        for order in self._store.orders.values():
            for item in order.items:
                if item.id == item_id:
                    return item
        return None

    async def update_item_quantity(self, item_id: str, quantity: int, expected_quantity: int) -> bool:
        item = self._find_item(item_id)
        if not item or item.quantity != expected_quantity:
            return False
        item.quantity = quantity
        return True

    async def delete_item(self, item_id: str) -> bool:
        item = self._find_item(item_id)
        if not item:
            return False
        order = self._store.orders[item.order_id]
        order.items = [i for i in order.items if i.id != item_id]
        return True

    async def update_status(self, order_id: str, status: OrderStatus) -> None:
        self._store.orders[order_id].status = status

    async def delete(self, order_id: str) -> bool:
        return self._store.orders.pop(order_id, None) is not None

    async def exists_for_customer(self, customer_id: str) -> bool:
        return any(o.customer_id == customer_id for o in self._store.orders.values())


class InMemoryProductRepository(ProductRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    async def get_by_id(self, product_id: int) -> Optional[Product]:
        product = self._store.products.get(product_id)
        return product.model_copy() if product else None

    async def list(self) -> List[Product]:
        return [p.model_copy() for p in self._store.products.values()]

    async def find_by_name(self, name: str) -> List[Product]:
        return [p.model_copy() for p in self._store.products.values() if p.name.upper() == name.upper()]

    async def create(self, name: str, price: Decimal, stock_quantity: int) -> Product:
        return self._store.add_product(name, str(price), stock_quantity).model_copy()

    async def update(self, product: Product) -> None:
        stored = self._store.products[product.id]
        stored.name = product.name
        stored.price = product.price

    async def delete(self, product_id: int) -> None:
        del self._store.products[product_id]

    async def reserve_stock(self, product_id: int, quantity: int) -> bool:
        product = self._store.products.get(product_id)
        if not product or product.stock_quantity < quantity:
            return False
        product.stock_quantity -= quantity
        return True

    async def release_stock(self, product_id: int, quantity: int) -> None:
        product = self._store.products.get(product_id)
        if product:
            product.stock_quantity += quantity

    async def is_referenced(self, product_id: int) -> bool:
        return any(
            item.product_id == product_id
            for order in self._store.orders.values()
            for item in order.items
        )


class InMemoryCustomerRepository(CustomerRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    async def get_by_id(self, customer_id: str) -> Optional[Customer]:
        customer = self._store.customers.get(customer_id)
        return customer.model_copy() if customer else None

    async def list(self) -> List[Customer]:
        return [c.model_copy() for c in self._store.customers.values()]

    async def find_by_name(self, name: str) -> List[Customer]:
        return [c.model_copy() for c in self._store.customers.values() if c.name.upper() == name.upper()]

    async def create(self, customer: Customer) -> None:
        self._store.customers[customer.id] = customer.model_copy()

    async def update(self, customer: Customer) -> None:
        self._store.customers[customer.id] = customer.model_copy()

    async def delete(self, customer_id: str) -> None:
        del self._store.customers[customer_id]


class InMemoryUserRepository(UserRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    async def get_by_email(self, email: str) -> Optional[User]:
        return self._store.users.get(email)

    async def create(self, user: User) -> None:
        self._store.users[user.email] = user


class _InMemoryTransaction(UnitOfWork):
    def __init__(self, owner: "InMemoryUnitOfWork", working: InMemoryStore):
        self._owner = owner
        self._working = working
        self.orders = InMemoryOrderRepository(working)
        self.products = InMemoryProductRepository(working)
        self.customers = InMemoryCustomerRepository(working)
        self.users = InMemoryUserRepository(working)

    async def commit(self):
        self._owner.store.__dict__.update(copy.deepcopy(self._working.__dict__))
        self._owner.commits += 1

    async def rollback(self):
        self._working.__dict__.update(copy.deepcopy(self._owner.store.__dict__))


class InMemoryUnitOfWork:
    """Works on a copy of the store; only commit() publishes the changes."""

    def __init__(self, store: InMemoryStore):
        self.store = store
        self.commits = 0

    @asynccontextmanager
    async def __call__(self):
        yield _InMemoryTransaction(self, copy.deepcopy(self.store))


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def uow(store):
    return InMemoryUnitOfWork(store)


@pytest.fixture
def customer(store):
    return store.add_customer("Connor McDavid")


# --- SQLite-backed persistence ---

@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'orders.db'}")
    await create_tables(engine)
    yield build_session_factory(engine)
    await engine.dispose()


# --- HTTP ---

@pytest.fixture
def settings(tmp_path):
    return Settings(
        POSTGRES_CONNECTION_STRING=f"sqlite+aiosqlite:///{tmp_path / 'api.db'}",
        CREATE_TABLES=True,
        JWT_SECRET_KEY="test-secret-key",
        SEED_DEMO_USERS=True,
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client):
    credentials = {"email": "demo@example.com", "password": "Demo123"}
    response = client.post("/api/auth/register", json=credentials)
    assert response.status_code == 201
    response = client.post("/api/auth/login", json=credentials)
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client, settings):
    credentials = {"email": DEMO_ADMIN_EMAIL, "password": settings.DEMO_USER_PASSWORD}
    response = client.post("/api/auth/login", json=credentials)
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
