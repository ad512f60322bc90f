from typing import List
from fastapi import APIRouter, Depends, Response, status

from order_api.presentation.dependencies import get_unit_of_work, get_current_user, require_admin
from order_api.presentation.schemas import (
    CreateProductRequest, UpdateProductRequest, ProductResponse,
    CreateCustomerRequest, UpdateCustomerRequest, CustomerResponse, ErrorResponse
)
from order_api.application.products import (
    ProductDTO, ProductUpdateDTO, ListProductsUseCase, FindProductsByNameUseCase, GetProductUseCase,
    CreateProductUseCase, UpdateProductUseCase, DeleteProductUseCase
)
from order_api.application.customers import (
    CustomerDTO, ListCustomersUseCase, FindCustomersByNameUseCase, GetCustomerUseCase,
    CreateCustomerUseCase, UpdateCustomerUseCase, DeleteCustomerUseCase
)

products_router = APIRouter(prefix="/products", tags=["products"], dependencies=[Depends(get_current_user)])
customers_router = APIRouter(prefix="/customers", tags=["customers"], dependencies=[Depends(get_current_user)])

NOT_FOUND = {404: {"model": ErrorResponse}}
BAD_REQUEST = {400: {"model": ErrorResponse}}
ADMIN_ONLY = [Depends(require_admin)]


# --- Products ---

@products_router.get("", response_model=List[ProductResponse])
async def list_products(uow=Depends(get_unit_of_work)):
    return await ListProductsUseCase(uow)()


@products_router.get("/search/{name}", response_model=List[ProductResponse])
async def find_products_by_name(name: str, uow=Depends(get_unit_of_work)):
    """Case-insensitive exact name match; names are not unique"""
    return await FindProductsByNameUseCase(uow)(name)


@products_router.get("/{product_id}", response_model=ProductResponse, responses=NOT_FOUND)
async def get_product(product_id: int, uow=Depends(get_unit_of_work)):
    return await GetProductUseCase(uow)(product_id)


@products_router.post(
    "", response_model=ProductResponse, status_code=status.HTTP_201_CREATED, dependencies=ADMIN_ONLY
)
async def create_product(request: CreateProductRequest, uow=Depends(get_unit_of_work)):
    return await CreateProductUseCase(uow)(ProductDTO(**request.model_dump()))


@products_router.put(
    "/{product_id}", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND, dependencies=ADMIN_ONLY
)
async def update_product(product_id: int, request: UpdateProductRequest, uow=Depends(get_unit_of_work)):
    await UpdateProductUseCase(uow)(product_id, ProductUpdateDTO(**request.model_dump()))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@products_router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**BAD_REQUEST, **NOT_FOUND},
    dependencies=ADMIN_ONLY
)
async def delete_product(product_id: int, uow=Depends(get_unit_of_work)):
    await DeleteProductUseCase(uow)(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- Customers ---

@customers_router.get("", response_model=List[CustomerResponse])
async def list_customers(uow=Depends(get_unit_of_work)):
    return await ListCustomersUseCase(uow)()


@customers_router.get("/search/{name}", response_model=List[CustomerResponse])
async def find_customers_by_name(name: str, uow=Depends(get_unit_of_work)):
    return await FindCustomersByNameUseCase(uow)(name)


@customers_router.get("/{customer_id}", response_model=CustomerResponse, responses=NOT_FOUND)
async def get_customer(customer_id: str, uow=Depends(get_unit_of_work)):
    return await GetCustomerUseCase(uow)(customer_id)


@customers_router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(request: CreateCustomerRequest, uow=Depends(get_unit_of_work)):
    return await CreateCustomerUseCase(uow)(CustomerDTO(**request.model_dump()))


@customers_router.put("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND)
async def update_customer(customer_id: str, request: UpdateCustomerRequest, uow=Depends(get_unit_of_work)):
    await UpdateCustomerUseCase(uow)(customer_id, CustomerDTO(**request.model_dump()))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@customers_router.delete(
    "/{customer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**BAD_REQUEST, **NOT_FOUND}
)
async def delete_customer(customer_id: str, uow=Depends(get_unit_of_work)):
    """Customers that still have orders cannot be deleted"""
    await DeleteCustomerUseCase(uow)(customer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
