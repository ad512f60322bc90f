import re
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from order_api.domain.models import Order, OrderItem, OrderStatus

PHONE_PATTERN = re.compile(r"^(?:\+?1[\s.-]?)?(?:\([2-9]\d{2}\)|[2-9]\d{2})[\s.-]?\d{3}[\s.-]?\d{4}$")


# --- Orders ---

class OrderItemRequest(BaseModel):
    product_id: int = Field(gt=0)
    quantity: int = Field(gt=0)
    discount_amount: Optional[Decimal] = Field(default=None, ge=0)


class CreateOrderRequest(BaseModel):
    customer_id: str = Field(min_length=1)
    items: List[OrderItemRequest] = Field(min_length=1)
    discount_amount: Optional[Decimal] = Field(default=None, ge=0)


class UpdateOrderItemRequest(BaseModel):
    quantity: int = Field(gt=0)


class StatusUpdateRequest(BaseModel):
    status: OrderStatus


class OrderItemResponse(BaseModel):
    id: str
    product_id: int
    product_name: Optional[str] = None
    quantity: int
    unit_price: Decimal
    discount_amount: Decimal
    line_total: Decimal

    @classmethod
    def from_domain(cls, item: OrderItem):
        return cls(
            id=item.id,
            product_id=item.product_id,
            product_name=item.product_name,
            quantity=item.quantity,
            unit_price=item.unit_price,
            discount_amount=item.discount_amount,
            line_total=item.line_total,
        )


class OrderResponse(BaseModel):
    id: str
    customer_id: str
    customer_name: Optional[str] = None
    order_date: datetime
    status: OrderStatus
    discount_amount: Decimal
    items: List[OrderItemResponse]
    subtotal: Decimal
    total: Decimal

    @classmethod
    def from_domain(cls, order: Order):
        return cls(
            id=order.id,
            customer_id=order.customer_id,
            customer_name=order.customer_name,
            order_date=order.order_date,
            status=order.status,
            discount_amount=order.discount_amount,
            items=[OrderItemResponse.from_domain(item) for item in order.items],
            subtotal=order.subtotal,
            total=order.total,
        )


# --- Products ---

class ProductFields(BaseModel):
    """Rules shared by the create and update product requests"""
    name: str = Field(min_length=2, max_length=100)
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)


class CreateProductRequest(ProductFields):
    stock_quantity: int = Field(default=0, ge=0)


class UpdateProductRequest(ProductFields):
    """Stock is set at creation and afterwards moved only by orders"""


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: Decimal
    stock_quantity: int


# --- Customers ---

class CustomerFields(BaseModel):
    """Rules shared by the create and update customer requests"""
    name: str = Field(min_length=2, max_length=100)
    address: Optional[str] = Field(default=None, max_length=200)
    phone_number: Optional[str] = Field(default=None, max_length=50)

    @field_validator("phone_number")
    @classmethod
    def check_phone_number(cls, value: Optional[str]) -> Optional[str]:
        if value and not PHONE_PATTERN.match(value):
            raise ValueError("Invalid phone number format.")
        return value


class CreateCustomerRequest(CustomerFields):
    pass


class UpdateCustomerRequest(CustomerFields):
    pass


class CustomerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    address: Optional[str] = None
    phone_number: Optional[str] = None


# --- Auth ---

class CredentialsRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RegisterRequest(CredentialsRequest):
    @field_validator("password")
    @classmethod
    def check_password_policy(cls, value: str) -> str:
        if len(value) < 6:
            raise ValueError("Password must be at least 6 characters long.")
        if not re.search(r"\d", value):
            raise ValueError("Password must contain a digit.")
        if not re.search(r"[a-z]", value) or not re.search(r"[A-Z]", value):
            raise ValueError("Password must contain lower and upper case letters.")
        return value


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: str


class ErrorResponse(BaseModel):
    error: str
