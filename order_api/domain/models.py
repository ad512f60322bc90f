from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    CANCELLED = "CANCELLED"


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class Product(BaseModel):
    """Domain Entity: product together with its available stock"""
    id: int
    name: str
    price: Decimal
    stock_quantity: int


class Customer(BaseModel):
    """Domain Entity: customer, referenced by orders"""
    id: str
    name: str
    address: Optional[str] = None
    phone_number: Optional[str] = None


class OrderItem(BaseModel):
    """Order line.

    unit_price is the product price snapshotted when the line is created;
    discount_amount is taken once off the whole line.
    """
    id: str
    order_id: str
    product_id: int
    quantity: int
    unit_price: Decimal
    discount_amount: Decimal = Decimal("0")
    product_name: Optional[str] = None

    @property
    def gross_amount(self) -> Decimal:
        return self.quantity * self.unit_price

    @property
    def line_total(self) -> Decimal:
        return self.gross_amount - self.discount_amount

    def discount_fits(self, quantity: Optional[int] = None) -> bool:
        """Business rule: a line discount may not exceed the line amount"""
        quantity = self.quantity if quantity is None else quantity
        return self.discount_amount <= quantity * self.unit_price


class Order(BaseModel):
    """Aggregate root: order and the items it owns"""
    id: str
    customer_id: str
    customer_name: Optional[str] = None
    order_date: datetime
    status: OrderStatus
    discount_amount: Decimal = Decimal("0")
    items: List[OrderItem] = Field(default_factory=list)

    def find_item(self, item_id: str) -> Optional[OrderItem]:
        return next((item for item in self.items if item.id == item_id), None)

    def find_item_for_product(self, product_id: int) -> Optional[OrderItem]:
        """Business rule: one line per product, adding it again grows that line"""
        return next((item for item in self.items if item.product_id == product_id), None)

    @property
    def subtotal(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal("0"))

    @property
    def total(self) -> Decimal:
        # The order discount can outgrow the subtotal once items are removed
        return max(self.subtotal - self.discount_amount, Decimal("0"))


class User(BaseModel):
    id: str
    email: str
    password_hash: str
    role: UserRole = UserRole.USER
