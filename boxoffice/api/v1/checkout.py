"""Checkout API endpoints."""

from fastapi import APIRouter, status

from boxoffice.api.v1.dependencies import CurrentUser, Gateway
from boxoffice.schemas.checkout import OrderCreateRequest, OrderResponse

router = APIRouter()


@router.post(
    "/orders",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create payment order",
)
async def create_order(
    order_data: OrderCreateRequest,
    current_user: CurrentUser,
    gateway: Gateway,
) -> OrderResponse:
    """
    Create a gateway order for the checkout amount.

    The returned amount is in paise. Amounts under ₹1 are rejected.
    """
    order = await gateway.create_order(
        amount=order_data.amount,
        event_title=order_data.event_title,
        user_id=current_user,
    )
    return OrderResponse(
        order_id=order.order_id,
        amount=order.amount,
        currency=order.currency,
        key_id=order.key_id,
    )
