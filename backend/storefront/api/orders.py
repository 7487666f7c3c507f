"""Customer order and review routes."""

import logging

from fastapi import APIRouter, Depends, status

from storefront.api.dependencies import get_current_user
from storefront.models.request import OrderCreateRequest, OrderListResponse, OrderResponse
from storefront.models.review import ReviewCreate, ReviewInDB
from storefront.models.user import UserInDB
from storefront.services.order_service import order_service
from storefront.services.review_service import review_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["orders"])


@router.post("/orders", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    request: OrderCreateRequest,
    user: UserInDB = Depends(get_current_user),
) -> OrderResponse:
    """Place an order without card payment.

    Items are merged into the customer's pending order from today when one
    exists. Stock for every requested item is taken immediately.

    Headers:
        X-User-ID: Identity-provider user id

    Body:
        orderItems: Line items with product id, name, price, quantity and image
        shippingAddress: Address snapshot for the order
        totalPrice: Optional total for a new order
    """
    order = await order_service.create_order(user, request)
    return OrderResponse(message="Order created successfully", order=order)


@router.get("/orders", response_model=OrderListResponse)
async def get_user_orders(user: UserInDB = Depends(get_current_user)) -> OrderListResponse:
    """List the caller's orders, newest first, flagged with ``hasReviewed``."""
    return OrderListResponse(orders=await order_service.list_customer_orders(user.externalId))


@router.post("/reviews", response_model=ReviewInDB, status_code=status.HTTP_201_CREATED)
async def create_review(
    review: ReviewCreate,
    user: UserInDB = Depends(get_current_user),
) -> ReviewInDB:
    """Rate a product from one of the caller's delivered orders."""
    return await review_service.create_review(user, review)
