from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional, List
from order_api.domain.models import Order, OrderItem, OrderStatus, Product, Customer, User


class OrderRepository(ABC):
    @abstractmethod
    async def get_by_id(self, order_id: str, for_update: bool = False) -> Optional[Order]:
        """Order with its items, product names and customer name.

        for_update locks the order and its item rows until the transaction ends.
        """
        pass

    @abstractmethod
    async def list(self, customer_name: Optional[str] = None) -> List[Order]:
        pass

    @abstractmethod
    async def create(self, order: Order) -> None:
        pass

    @abstractmethod
    async def add_item(self, item: OrderItem) -> None:
        pass

    @abstractmethod
    async def update_item_quantity(self, item_id: str, quantity: int, expected_quantity: int) -> bool:
        """Sets the quantity only if the line still holds expected_quantity"""
        pass

    @abstractmethod
    async def delete_item(self, item_id: str) -> bool:
        """False when there was no such line left to delete"""
        pass

    @abstractmethod
    async def update_status(self, order_id: str, status: OrderStatus) -> None:
        pass

    @abstractmethod
    async def delete(self, order_id: str) -> bool:
        """Deletes the order together with its items. False when it was already gone."""
        pass

    @abstractmethod
    async def exists_for_customer(self, customer_id: str) -> bool:
        pass


class ProductRepository(ABC):
    @abstractmethod
    async def get_by_id(self, product_id: int) -> Optional[Product]:
        pass

    @abstractmethod
    async def list(self) -> List[Product]:
        pass

    @abstractmethod
    async def find_by_name(self, name: str) -> List[Product]:
        pass

    @abstractmethod
    async def create(self, name: str, price: Decimal, stock_quantity: int) -> Product:
        pass

    @abstractmethod
    async def update(self, product: Product) -> None:
        """Name and price only. Stock is changed by the order workflow alone."""
        pass

    @abstractmethod
    async def delete(self, product_id: int) -> None:
        pass

    @abstractmethod
    async def reserve_stock(self, product_id: int, quantity: int) -> bool:
        """Conditional decrement. False when the stock cannot cover quantity."""
        pass

    @abstractmethod
    async def release_stock(self, product_id: int, quantity: int) -> None:
        pass

    @abstractmethod
    async def is_referenced(self, product_id: int) -> bool:
        pass


class CustomerRepository(ABC):
    @abstractmethod
    async def get_by_id(self, customer_id: str) -> Optional[Customer]:
        pass

    @abstractmethod
    async def list(self) -> List[Customer]:
        pass

    @abstractmethod
    async def find_by_name(self, name: str) -> List[Customer]:
        pass

    @abstractmethod
    async def create(self, customer: Customer) -> None:
        pass

    @abstractmethod
    async def update(self, customer: Customer) -> None:
        pass

    @abstractmethod
    async def delete(self, customer_id: str) -> None:
        pass


class UserRepository(ABC):
    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    async def create(self, user: User) -> None:
        pass


class UnitOfWork(ABC):
    """One transaction. Rolled back on exit unless commit() was called."""
    orders: OrderRepository
    products: ProductRepository
    customers: CustomerRepository
    users: UserRepository

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass


class PasswordHasher(ABC):
    @abstractmethod
    def hash(self, password: str) -> str:
        pass

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool:
        pass


class TokenService(ABC):
    @abstractmethod
    def create_access_token(self, user: User) -> str:
        pass
