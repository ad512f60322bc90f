from collections import defaultdict
from decimal import Decimal
from typing import Optional, List
from sqlalchemy import select, insert, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from order_api.domain.models import Order, OrderItem, OrderStatus, Product, Customer, User, UserRole
from order_api.infrastructure.db_schema import (
    orders_tbl, order_items_tbl, products_tbl, customers_tbl, users_tbl
)
from order_api.application.interfaces import (
    OrderRepository, ProductRepository, CustomerRepository, UserRepository
)


class SQLAlchemyOrderRepository(OrderRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    def _orders_query(self):
        return (
            select(orders_tbl, customers_tbl.c.name.label("customer_name"))
            .select_from(orders_tbl.outerjoin(customers_tbl, orders_tbl.c.customer_id == customers_tbl.c.id))
        )

    async def get_by_id(self, order_id: str, for_update: bool = False) -> Optional[Order]:
        query = self._orders_query().where(orders_tbl.c.id == order_id)
        if for_update:
            # PostgreSQL rejects FOR UPDATE on the nullable side of an outer join
            query = query.with_for_update(of=orders_tbl)
        result = await self._session.execute(query)
        row = result.fetchone()
        if not row:
            return None
        items = await self._load_items([order_id], for_update=for_update)
        return self._to_domain(row, items[order_id])

    async def list(self, customer_name: Optional[str] = None) -> List[Order]:
        query = self._orders_query().order_by(orders_tbl.c.order_date.asc())
        if customer_name:
            query = query.where(func.upper(customers_tbl.c.name) == customer_name.upper())
        result = await self._session.execute(query)
        rows = result.fetchall()
        items = await self._load_items([row.id for row in rows])
        return [self._to_domain(row, items[row.id]) for row in rows]

    async def create(self, order: Order) -> None:
        await self._session.execute(
            insert(orders_tbl).values(
                id=order.id,
                customer_id=order.customer_id,
                order_date=order.order_date,
                status=order.status,
                discount_amount=order.discount_amount,
            )
        )
        if order.items:
            await self._session.execute(
                insert(order_items_tbl),
                [self._item_values(item, position) for position, item in enumerate(order.items)],
            )

    async def add_item(self, item: OrderItem) -> None:
        result = await self._session.execute(
            select(func.coalesce(func.max(order_items_tbl.c.position), -1))
            .where(order_items_tbl.c.order_id == item.order_id)
        )
        position = result.scalar_one() + 1
        await self._session.execute(insert(order_items_tbl).values(**self._item_values(item, position)))

    async def update_item_quantity(self, item_id: str, quantity: int, expected_quantity: int) -> bool:
        result = await self._session.execute(
            update(order_items_tbl)
            .where(order_items_tbl.c.id == item_id, order_items_tbl.c.quantity == expected_quantity)
            .values(quantity=quantity)
        )
        return result.rowcount == 1

    async def delete_item(self, item_id: str) -> bool:
        result = await self._session.execute(
            delete(order_items_tbl).where(order_items_tbl.c.id == item_id)
        )
        return result.rowcount == 1

    async def update_status(self, order_id: str, status: OrderStatus) -> None:
        await self._session.execute(
            update(orders_tbl)
            .where(orders_tbl.c.id == order_id)
            .values(status=status)
        )

    async def delete(self, order_id: str) -> bool:
        # Items first: SQLite does not enforce ON DELETE CASCADE unless asked to
        await self._session.execute(
            delete(order_items_tbl).where(order_items_tbl.c.order_id == order_id)
        )
        result = await self._session.execute(
            delete(orders_tbl).where(orders_tbl.c.id == order_id)
        )
        return result.rowcount == 1

    async def exists_for_customer(self, customer_id: str) -> bool:
        result = await self._session.execute(
            select(orders_tbl.c.id).where(orders_tbl.c.customer_id == customer_id).limit(1)
        )
        return result.fetchone() is not None

    async def _load_items(self, order_ids: List[str], for_update: bool = False) -> dict:
        items = defaultdict(list)
        if not order_ids:
            return items
        query = (
            select(order_items_tbl, products_tbl.c.name.label("product_name"))
            .select_from(
                order_items_tbl.outerjoin(products_tbl, order_items_tbl.c.product_id == products_tbl.c.id)
            )
            .where(order_items_tbl.c.order_id.in_(order_ids))
            .order_by(order_items_tbl.c.position.asc())
        )
        if for_update:
            query = query.with_for_update(of=order_items_tbl)
        result = await self._session.execute(query)
        for row in result.fetchall():
            items[row.order_id].append(
                OrderItem(
                    id=row.id,
                    order_id=row.order_id,
                    product_id=row.product_id,
                    product_name=row.product_name,
                    quantity=row.quantity,
                    unit_price=Decimal(row.unit_price),
                    discount_amount=Decimal(row.discount_amount),
                )
            )
        return items

    @staticmethod
    def _item_values(item: OrderItem, position: int) -> dict:
        return {
            "id": item.id,
            "order_id": item.order_id,
            "product_id": item.product_id,
            "position": position,
            "quantity": item.quantity,
            "unit_price": item.unit_price,
            "discount_amount": item.discount_amount,
        }

    def _to_domain(self, row, items: List[OrderItem]) -> Order:
        """DB → Domain"""
        return Order(
            id=row.id,
            customer_id=row.customer_id,
            customer_name=row.customer_name,
            order_date=row.order_date,
            status=OrderStatus(row.status),
            discount_amount=Decimal(row.discount_amount),
            items=items,
        )


class SQLAlchemyProductRepository(ProductRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, product_id: int) -> Optional[Product]:
        result = await self._session.execute(
            select(products_tbl).where(products_tbl.c.id == product_id)
        )
        row = result.fetchone()
        return self._to_domain(row) if row else None

    async def list(self) -> List[Product]:
        result = await self._session.execute(select(products_tbl).order_by(products_tbl.c.id))
        return [self._to_domain(row) for row in result.fetchall()]

    async def find_by_name(self, name: str) -> List[Product]:
        result = await self._session.execute(
            select(products_tbl)
            .where(func.upper(products_tbl.c.name) == name.upper())
            .order_by(products_tbl.c.id)
        )
        return [self._to_domain(row) for row in result.fetchall()]

    async def create(self, name: str, price: Decimal, stock_quantity: int) -> Product:
        result = await self._session.execute(
            insert(products_tbl).values(name=name, price=price, stock_quantity=stock_quantity)
        )
        product_id = result.inserted_primary_key[0]
        return Product(id=product_id, name=name, price=price, stock_quantity=stock_quantity)

    async def update(self, product: Product) -> None:
        await self._session.execute(
            update(products_tbl)
            .where(products_tbl.c.id == product.id)
            .values(name=product.name, price=product.price)
        )

    async def delete(self, product_id: int) -> None:
        await self._session.execute(
            delete(products_tbl).where(products_tbl.c.id == product_id)
        )

    async def reserve_stock(self, product_id: int, quantity: int) -> bool:
        # Check and decrement in one statement; no read-then-write window
        result = await self._session.execute(
            update(products_tbl)
            .where(products_tbl.c.id == product_id, products_tbl.c.stock_quantity >= quantity)
            .values(stock_quantity=products_tbl.c.stock_quantity - quantity)
        )
        return result.rowcount == 1

    async def release_stock(self, product_id: int, quantity: int) -> None:
        await self._session.execute(
            update(products_tbl)
            .where(products_tbl.c.id == product_id)
            .values(stock_quantity=products_tbl.c.stock_quantity + quantity)
        )

    async def is_referenced(self, product_id: int) -> bool:
        result = await self._session.execute(
            select(order_items_tbl.c.id).where(order_items_tbl.c.product_id == product_id).limit(1)
        )
        return result.fetchone() is not None

    def _to_domain(self, row) -> Product:
        return Product(
            id=row.id,
            name=row.name,
            price=Decimal(row.price),
            stock_quantity=row.stock_quantity,
        )


class SQLAlchemyCustomerRepository(CustomerRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, customer_id: str) -> Optional[Customer]:
        result = await self._session.execute(
            select(customers_tbl).where(customers_tbl.c.id == customer_id)
        )
        row = result.fetchone()
        return self._to_domain(row) if row else None

    async def list(self) -> List[Customer]:
        result = await self._session.execute(select(customers_tbl).order_by(customers_tbl.c.name))
        return [self._to_domain(row) for row in result.fetchall()]

    async def find_by_name(self, name: str) -> List[Customer]:
        result = await self._session.execute(
            select(customers_tbl).where(func.upper(customers_tbl.c.name) == name.upper())
        )
        return [self._to_domain(row) for row in result.fetchall()]

    async def create(self, customer: Customer) -> None:
        await self._session.execute(
            insert(customers_tbl).values(**customer.model_dump())
        )

    async def update(self, customer: Customer) -> None:
        await self._session.execute(
            update(customers_tbl)
            .where(customers_tbl.c.id == customer.id)
            .values(name=customer.name, address=customer.address, phone_number=customer.phone_number)
        )

    async def delete(self, customer_id: str) -> None:
        await self._session.execute(
            delete(customers_tbl).where(customers_tbl.c.id == customer_id)
        )

    def _to_domain(self, row) -> Customer:
        return Customer(
            id=row.id,
            name=row.name,
            address=row.address,
            phone_number=row.phone_number,
        )


class SQLAlchemyUserRepository(UserRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self._session.execute(
            select(users_tbl).where(users_tbl.c.email == email)
        )
        row = result.fetchone()
        if not row:
            return None
        return User(id=row.id, email=row.email, password_hash=row.password_hash, role=UserRole(row.role))

    async def create(self, user: User) -> None:
        await self._session.execute(
            insert(users_tbl).values(
                id=user.id,
                email=user.email,
                password_hash=user.password_hash,
                role=user.role,
            )
        )
