"""FastAPI routes for the Ordering domain — products and orders."""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from ordering.access.caller import Caller
from ordering.api.auth import current_caller
from ordering.api.schemas import (
    CreateProductRequest,
    OrderResponse,
    OrderSummaryResponse,
    PlaceOrderRequest,
    ProductResponse,
    UpdateOrderRequest,
    UpdateProductRequest,
)
from ordering.catalogue.management import CreateProduct, UpdateProduct
from ordering.catalogue.reading import get_product, list_products
from ordering.order.placement import PlaceOrder
from ordering.order.reading import get_order, list_orders, read_order
from ordering.order.repository import DEFAULT_PAGE_SIZE
from ordering.order.status import UpdateOrderStatus

# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.post("", status_code=201, response_model=ProductResponse)
async def create_product(body: CreateProductRequest) -> ProductResponse:
    command = CreateProduct(
        name=body.name,
        description=body.description,
        image=body.image,
        price=body.price,
    )
    product_id = current_domain.process(command, asynchronous=False)
    return ProductResponse(**get_product(product_id))


@product_router.get("", response_model=list[ProductResponse])
async def list_all_products(limit: int = Query(100, ge=1, le=500)) -> list[ProductResponse]:
    return [ProductResponse(**product) for product in list_products(limit=limit)]


@product_router.get("/{product_id}", response_model=ProductResponse)
async def fetch_product(product_id: str) -> ProductResponse:
    return ProductResponse(**get_product(product_id))


@product_router.put("/{product_id}", response_model=ProductResponse)
async def update_product(product_id: str, body: UpdateProductRequest) -> ProductResponse:
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        description=body.description,
        image=body.image,
        price=body.price,
    )
    current_domain.process(command, asynchronous=False)
    return ProductResponse(**get_product(product_id))


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(body: PlaceOrderRequest, caller: Caller = Depends(current_caller)) -> OrderResponse:
    """Place an order for the calling buyer.

    The `order` envelope in the body is accepted but ignored; the buyer is
    always the authenticated caller.
    """
    command = PlaceOrder(
        user_id=caller.user_id,
        items=json.dumps([line.model_dump() for line in body.items]),
    )
    order_id = current_domain.process(command, asynchronous=False)
    return OrderResponse(**get_order(order_id))


@order_router.get("", response_model=list[OrderSummaryResponse])
async def list_visible_orders(
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=500),
    caller: Caller = Depends(current_caller),
) -> list[OrderSummaryResponse]:
    return [OrderSummaryResponse(**order) for order in list_orders(caller, limit=limit)]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def fetch_order(order_id: str, caller: Caller = Depends(current_caller)) -> OrderResponse:
    return OrderResponse(**read_order(caller, order_id))


@order_router.put("/{order_id}", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    body: UpdateOrderRequest,
    caller: Caller = Depends(current_caller),
) -> OrderResponse:
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        caller_id=caller.user_id,
        caller_role=caller.role.value,
    )
    current_domain.process(command, asynchronous=False)
    return OrderResponse(**get_order(order_id))
