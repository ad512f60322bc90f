import logging
from decimal import Decimal
from typing import List
from pydantic import BaseModel

from order_api.domain.models import Product
from order_api.domain.exceptions import ProductNotFoundError, ProductInUseError


logger = logging.getLogger(__name__)


class ProductDTO(BaseModel):
    name: str
    price: Decimal
    stock_quantity: int = 0


class ProductUpdateDTO(BaseModel):
    """Stock is not part of a product update; only orders move it"""
    name: str
    price: Decimal


class ListProductsUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self) -> List[Product]:
        async with self._uow() as uow:
            return await uow.products.list()


class FindProductsByNameUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, name: str) -> List[Product]:
        async with self._uow() as uow:
            return await uow.products.find_by_name(name)


class GetProductUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, product_id: int) -> Product:
        async with self._uow() as uow:
            product = await uow.products.get_by_id(product_id)
            if not product:
                raise ProductNotFoundError(product_id)
            return product


class CreateProductUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, product_data: ProductDTO) -> Product:
        async with self._uow() as uow:
            product = await uow.products.create(
                name=product_data.name,
                price=product_data.price,
                stock_quantity=product_data.stock_quantity,
            )
            await uow.commit()

        logger.info(f"Product {product.id} created")
        return product


class UpdateProductUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, product_id: int, product_data: ProductUpdateDTO) -> None:
        async with self._uow() as uow:
            product = await uow.products.get_by_id(product_id)
            if not product:
                raise ProductNotFoundError(product_id)

            product.name = product_data.name
            product.price = product_data.price
            await uow.products.update(product)
            await uow.commit()

        logger.info(f"Product {product_id} updated")


class DeleteProductUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, product_id: int) -> None:
        async with self._uow() as uow:
            product = await uow.products.get_by_id(product_id)
            if not product:
                raise ProductNotFoundError(product_id)
            if await uow.products.is_referenced(product_id):
                raise ProductInUseError(product_id)

            await uow.products.delete(product_id)
            await uow.commit()

        logger.info(f"Product {product_id} deleted")
