import logging
import uuid
from typing import List, Optional
from pydantic import BaseModel

from order_api.domain.models import Customer
from order_api.domain.exceptions import CustomerNotFoundError, CustomerHasOrdersError


logger = logging.getLogger(__name__)


class CustomerDTO(BaseModel):
    name: str
    address: Optional[str] = None
    phone_number: Optional[str] = None


class ListCustomersUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self) -> List[Customer]:
        async with self._uow() as uow:
            return await uow.customers.list()


class FindCustomersByNameUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, name: str) -> List[Customer]:
        async with self._uow() as uow:
            return await uow.customers.find_by_name(name)


class GetCustomerUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, customer_id: str) -> Customer:
        async with self._uow() as uow:
            customer = await uow.customers.get_by_id(customer_id)
            if not customer:
                raise CustomerNotFoundError(customer_id)
            return customer


class CreateCustomerUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, customer_data: CustomerDTO) -> Customer:
        customer = Customer(id=str(uuid.uuid4()), **customer_data.model_dump())
        async with self._uow() as uow:
            await uow.customers.create(customer)
            await uow.commit()

        logger.info(f"Customer {customer.id} created")
        return customer


class UpdateCustomerUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, customer_id: str, customer_data: CustomerDTO) -> None:
        async with self._uow() as uow:
            customer = await uow.customers.get_by_id(customer_id)
            if not customer:
                raise CustomerNotFoundError(customer_id)

            updated = customer.model_copy(update=customer_data.model_dump())
            await uow.customers.update(updated)
            await uow.commit()

        logger.info(f"Customer {customer_id} updated")


class DeleteCustomerUseCase:
    """Customers with orders are kept; their orders reference them."""

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, customer_id: str) -> None:
        async with self._uow() as uow:
            customer = await uow.customers.get_by_id(customer_id)
            if not customer:
                raise CustomerNotFoundError(customer_id)
            if await uow.orders.exists_for_customer(customer_id):
                raise CustomerHasOrdersError(customer_id)

            await uow.customers.delete(customer_id)
            await uow.commit()

        logger.info(f"Customer {customer_id} deleted")
