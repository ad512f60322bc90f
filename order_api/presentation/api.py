from typing import List, Optional
from fastapi import APIRouter, Depends, Response, status

from order_api.presentation.dependencies import get_unit_of_work, get_current_user
from order_api.presentation.schemas import (
    CreateOrderRequest, OrderItemRequest, UpdateOrderItemRequest, StatusUpdateRequest,
    OrderResponse, ErrorResponse
)
from order_api.application.create_order import CreateOrderUseCase, CreateOrderDTO, OrderItemDTO
from order_api.application.add_order_item import AddItemToOrderUseCase, AddOrderItemDTO
from order_api.application.update_order_item import UpdateOrderItemUseCase, UpdateOrderItemDTO
from order_api.application.remove_order import RemoveOrderItemUseCase, DeleteOrderUseCase
from order_api.application.get_order import GetOrderUseCase, ListOrdersUseCase, UpdateOrderStatusUseCase

router = APIRouter(prefix="/orders", tags=["orders"], dependencies=[Depends(get_current_user)])

NOT_FOUND = {404: {"model": ErrorResponse}}
BAD_REQUEST = {400: {"model": ErrorResponse}}


# Use case factories
def get_create_order_use_case(uow=Depends(get_unit_of_work)):
    return CreateOrderUseCase(uow)


def get_add_item_use_case(uow=Depends(get_unit_of_work)):
    return AddItemToOrderUseCase(uow)


def get_update_item_use_case(uow=Depends(get_unit_of_work)):
    return UpdateOrderItemUseCase(uow)


def get_remove_item_use_case(uow=Depends(get_unit_of_work)):
    return RemoveOrderItemUseCase(uow)


def get_delete_order_use_case(uow=Depends(get_unit_of_work)):
    return DeleteOrderUseCase(uow)


def get_get_order_use_case(uow=Depends(get_unit_of_work)):
    return GetOrderUseCase(uow)


def get_list_orders_use_case(uow=Depends(get_unit_of_work)):
    return ListOrdersUseCase(uow)


def get_update_status_use_case(uow=Depends(get_unit_of_work)):
    return UpdateOrderStatusUseCase(uow)


@router.get("", response_model=List[OrderResponse])
async def list_orders(
    customer_name: Optional[str] = None,
    use_case: ListOrdersUseCase = Depends(get_list_orders_use_case)
):
    """List orders, optionally only those of customers with this name"""
    orders = await use_case(customer_name=customer_name)
    return [OrderResponse.from_domain(order) for order in orders]


@router.get("/{order_id}", response_model=OrderResponse, responses=NOT_FOUND)
async def get_order(
    order_id: str,
    use_case: GetOrderUseCase = Depends(get_get_order_use_case)
):
    order = await use_case(order_id)
    return OrderResponse.from_domain(order)


@router.post(
    "",
    response_model=OrderResponse,
    responses={**BAD_REQUEST, **NOT_FOUND},
    status_code=status.HTTP_201_CREATED
)
async def create_order(
    request: CreateOrderRequest,
    use_case: CreateOrderUseCase = Depends(get_create_order_use_case)
):
    """Create an order and reserve stock for all of its items"""
    dto = CreateOrderDTO(
        customer_id=request.customer_id,
        items=[
            OrderItemDTO(
                product_id=item.product_id,
                quantity=item.quantity,
                discount_amount=item.discount_amount
            )
            for item in request.items
        ],
        discount_amount=request.discount_amount
    )
    order = await use_case(dto)
    return OrderResponse.from_domain(order)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND)
async def delete_order(
    order_id: str,
    use_case: DeleteOrderUseCase = Depends(get_delete_order_use_case)
):
    """Delete an order; its items are restocked"""
    await use_case(order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{order_id}/items", response_model=OrderResponse, responses={**BAD_REQUEST, **NOT_FOUND})
async def add_item_to_order(
    order_id: str,
    request: OrderItemRequest,
    use_case: AddItemToOrderUseCase = Depends(get_add_item_use_case)
):
    dto = AddOrderItemDTO(
        product_id=request.product_id,
        quantity=request.quantity,
        discount_amount=request.discount_amount
    )
    order = await use_case(order_id, dto)
    return OrderResponse.from_domain(order)


@router.put(
    "/{order_id}/items/{item_id}",
    response_model=OrderResponse,
    responses={**BAD_REQUEST, **NOT_FOUND}
)
async def update_order_item(
    order_id: str,
    item_id: str,
    request: UpdateOrderItemRequest,
    use_case: UpdateOrderItemUseCase = Depends(get_update_item_use_case)
):
    order = await use_case(order_id, item_id, UpdateOrderItemDTO(quantity=request.quantity))
    return OrderResponse.from_domain(order)


@router.delete("/{order_id}/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND)
async def remove_order_item(
    order_id: str,
    item_id: str,
    use_case: RemoveOrderItemUseCase = Depends(get_remove_item_use_case)
):
    await use_case(order_id, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{order_id}/status", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND)
async def update_order_status(
    order_id: str,
    request: StatusUpdateRequest,
    use_case: UpdateOrderStatusUseCase = Depends(get_update_status_use_case)
):
    await use_case(order_id, request.status)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
