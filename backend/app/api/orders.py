"""
orders.py — Order Placement Endpoints (API Layer)

Both routes need a bearer token of any role. Orders always belong to the
token's subject; a client cannot place or read orders for someone else.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from app.api.deps import current_claims, get_orders, validated_body
from app.core.security import SessionClaims
from app.models.order import Order
from app.services.orders import OrderEngine
from app.validation.shapes import OrderCreateRequest

router = APIRouter(
    prefix="/orders",
    tags=["orders"]
)


@router.post("", response_model=Order, status_code=status.HTTP_201_CREATED)
async def create_order(
    payload: OrderCreateRequest = Depends(validated_body(OrderCreateRequest)),
    claims: SessionClaims = Depends(current_claims),
    orders: OrderEngine = Depends(get_orders),
):
    """
    POST /orders

    400 INVALID_PRODUCT names the first unknown productId; no order is recorded.
    """
    return orders.place_order(claims.subject_id, payload.normalized()["items"])


@router.get("/me", response_model=List[Order])
async def my_orders(
    claims: SessionClaims = Depends(current_claims),
    orders: OrderEngine = Depends(get_orders),
):
    return orders.list_for_user(claims.subject_id)
