import logging
import uuid
from decimal import Decimal

from order_api.domain.models import Customer, User, UserRole
from order_api.application.interfaces import PasswordHasher
from order_api.application.create_order import CreateOrderUseCase, CreateOrderDTO, OrderItemDTO


logger = logging.getLogger(__name__)

DEMO_ADMIN_EMAIL = "captainconnor97@oilers.com"

DEMO_USER_EMAILS = [
    DEMO_ADMIN_EMAIL,
    "germangretzky29@oilers.com",
    "thenugeishuge93@oilers.com",
    "jamestkirk@ussenterprise.co",
    "jeanlucpicard@ussenterprised.fed",
    "kathrynjaneway@ussvoyager.delta",
]

DEMO_PRODUCTS = [
    ("Rustic Steel Chair", "129.99", 40),
    ("Ergonomic Wooden Desk", "249.00", 15),
    ("Handcrafted Cotton Towel", "19.50", 100),
    ("Practical Granite Mug", "12.75", 80),
    ("Sleek Rubber Keyboard", "59.90", 25),
    ("Generic Concrete Lamp", "45.00", 0),
    ("Refined Frozen Pizza", "8.99", 60),
    ("Intelligent Soft Hat", "22.00", 35),
]

DEMO_CUSTOMERS = [
    ("Connor McDavid", "97 Ice District Plaza, Edmonton", "780-555-0197"),
    ("Leon Draisaitl", "29 Jasper Ave, Edmonton", "780-555-0129"),
    ("Jean-Luc Picard", "1 Chateau Picard, La Barre", None),
    ("Kathryn Janeway", "74656 Delta Quadrant Way", "555-123-4567"),
]

# (customer index, [(product index, quantity, item discount)], order discount)
DEMO_ORDERS = [
    (0, [(0, 2, "0"), (3, 4, "2.00")], "0"),
    (1, [(1, 1, "0")], "10.00"),
    (2, [(2, 6, "0"), (6, 3, "0"), (7, 1, "0")], "0"),
]


async def seed_demo_users(unit_of_work, hasher: PasswordHasher, password: str) -> int:
    """Fixed demo accounts; the first one is the administrator. Existing emails are skipped."""
    created = 0
    async with unit_of_work() as uow:
        for email in DEMO_USER_EMAILS:
            if await uow.users.get_by_email(email):
                continue
            role = UserRole.ADMIN if email == DEMO_ADMIN_EMAIL else UserRole.USER
            await uow.users.create(
                User(id=str(uuid.uuid4()), email=email, password_hash=hasher.hash(password), role=role)
            )
            created += 1
        await uow.commit()

    logger.info(f"Seeded {created} demo users")
    return created


async def seed_demo_data(unit_of_work) -> None:
    """Catalog rows and a few orders, each group only when its table is empty.

    Orders go through CreateOrderUseCase so their stock is taken like any other order's.
    """
    async with unit_of_work() as uow:
        products = await uow.products.list()
        seeded_catalog = not products
        if seeded_catalog:
            for name, price, stock in DEMO_PRODUCTS:
                products.append(await uow.products.create(name=name, price=Decimal(price), stock_quantity=stock))

        customers = await uow.customers.list()
        seeded_customers = not customers
        if seeded_customers:
            for name, address, phone_number in DEMO_CUSTOMERS:
                customer = Customer(id=str(uuid.uuid4()), name=name, address=address, phone_number=phone_number)
                await uow.customers.create(customer)
                customers.append(customer)

        has_orders = bool(await uow.orders.list())
        await uow.commit()

    if has_orders or not (seeded_catalog and seeded_customers):
        logger.info("Demo orders skipped: orders, products or customers already existed")
        return

    create_order = CreateOrderUseCase(unit_of_work)
    for customer_index, lines, order_discount in DEMO_ORDERS:
        await create_order(
            CreateOrderDTO(
                customer_id=customers[customer_index].id,
                items=[
                    OrderItemDTO(
                        product_id=products[product_index].id,
                        quantity=quantity,
                        discount_amount=Decimal(discount),
                    )
                    for product_index, quantity, discount in lines
                ],
                discount_amount=Decimal(order_discount),
            )
        )
    logger.info(f"Seeded {len(DEMO_ORDERS)} demo orders")
