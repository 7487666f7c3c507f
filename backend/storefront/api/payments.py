"""Payment routes."""

import logging

from fastapi import APIRouter, Depends, Header, Request

from storefront.api.dependencies import get_current_user
from storefront.models.request import PaymentIntentRequest, PaymentIntentResponse, WebhookAck
from storefront.models.user import UserInDB
from storefront.services.payment_service import payment_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payment", tags=["payment"])


@router.post("/create-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    request: PaymentIntentRequest,
    user: UserInDB = Depends(get_current_user),
) -> PaymentIntentResponse:
    """Start a card payment for the given cart.

    The total is computed server-side: subtotal, shipping fee and tax.
    """
    client_secret = await payment_service.create_payment_intent(
        user, request.cartItems, request.shippingAddress
    )
    return PaymentIntentResponse(clientSecret=client_secret)


@router.post("/webhook", response_model=WebhookAck)
async def stripe_webhook(
    request: Request,
    signature: str = Header("", alias="Stripe-Signature"),
) -> WebhookAck:
    """Receive Stripe events.

    A bad signature is rejected with 400. Any delivery that passes
    verification is acknowledged, even when no order could be written.
    """
    payload = await request.body()
    await payment_service.handle_webhook(payload, signature)
    return WebhookAck(received=True)
