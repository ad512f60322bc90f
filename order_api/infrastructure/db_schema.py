from sqlalchemy import (
    Table, Column, String, Integer, Numeric, Enum, DateTime, MetaData, ForeignKey, CheckConstraint
)
from sqlalchemy.sql import func

from order_api.domain.models import OrderStatus, UserRole

metadata = MetaData()


products_tbl = Table(
    "products",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(100), nullable=False, index=True),
    Column("price", Numeric(10, 2), nullable=False),
    Column("stock_quantity", Integer, nullable=False, default=0),
    CheckConstraint("price > 0", name="ck_products_price_positive"),
    CheckConstraint("stock_quantity >= 0", name="ck_products_stock_non_negative"),
)


customers_tbl = Table(
    "customers",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", String(100), nullable=False, index=True),
    Column("address", String(200), nullable=True),
    Column("phone_number", String(50), nullable=True),
)


orders_tbl = Table(
    "orders",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("customer_id", String(36), ForeignKey("customers.id"), nullable=False, index=True),
    Column("order_date", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("status", Enum(OrderStatus, name="order_status"), nullable=False, default=OrderStatus.PENDING),
    Column("discount_amount", Numeric(10, 2), nullable=False, default=0),
    CheckConstraint("discount_amount >= 0", name="ck_orders_discount_non_negative"),
)


order_items_tbl = Table(
    "order_items",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("order_id", String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("product_id", Integer, ForeignKey("products.id"), nullable=False, index=True),
    Column("position", Integer, nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("unit_price", Numeric(10, 2), nullable=False),
    Column("discount_amount", Numeric(10, 2), nullable=False, default=0),
    CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
    CheckConstraint("unit_price >= 0", name="ck_order_items_unit_price_non_negative"),
)


users_tbl = Table(
    "users",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("email", String(255), nullable=False, unique=True, index=True),
    Column("password_hash", String(255), nullable=False),
    Column("role", Enum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
           nullable=False, default=UserRole.USER),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
)
