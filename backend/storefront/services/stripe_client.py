"""Thin async wrapper around the Stripe SDK."""

import asyncio
import json
import logging
from typing import Any, Optional

import stripe

from storefront.config import get_settings
from storefront.exceptions import InvalidRequestError, PaymentError

logger = logging.getLogger(__name__)
settings = get_settings()


class StripeClient:
    """Client for interacting with Stripe API.

    SDK calls are blocking, so each one runs in a worker thread.
    """

    def __init__(self) -> None:
        stripe.api_key = settings.stripe_secret_key
        if not settings.stripe_secret_key:
            logger.warning("Stripe secret key not provided - payments disabled")

    async def get_or_create_customer(
        self,
        customer_id: Optional[str],
        *,
        email: str,
        name: str,
        metadata: dict[str, str],
    ) -> str:
        """Return a Stripe customer id, creating the customer when ``customer_id`` is unset."""
        try:
            if customer_id:
                customer = await asyncio.to_thread(stripe.Customer.retrieve, customer_id)
            else:
                customer = await asyncio.to_thread(
                    stripe.Customer.create, email=email, name=name, metadata=metadata
                )
                logger.info("Created Stripe customer %s", customer.id)
            return customer.id
        except stripe.StripeError as e:
            logger.error("Stripe customer lookup failed: %s", e)
            raise PaymentError("Payment provider unavailable") from e

    async def create_payment_intent(
        self,
        *,
        amount_cents: int,
        customer_id: str,
        metadata: dict[str, str],
    ) -> str:
        """Create a PaymentIntent and return its client secret."""
        try:
            intent = await asyncio.to_thread(
                stripe.PaymentIntent.create,
                amount=amount_cents,
                currency=settings.stripe_currency,
                customer=customer_id,
                automatic_payment_methods={"enabled": True},
                metadata=metadata,
            )
            logger.info("Created PaymentIntent %s for %d cents", intent.id, amount_cents)
            return intent.client_secret
        except stripe.StripeError as e:
            logger.error("Failed to create PaymentIntent: %s", e)
            raise PaymentError("Failed to create payment intent") from e

    @staticmethod
    def parse_event(payload: bytes, signature: str) -> dict[str, Any]:
        """Verify a webhook delivery's signature and decode its event.

        Raises:
            InvalidRequestError: the signature is missing or does not match
        """
        if not signature:
            raise InvalidRequestError("Missing Stripe-Signature header")

        body = payload.decode("utf-8")
        try:
            stripe.WebhookSignature.verify_header(
                body,
                signature,
                settings.stripe_webhook_secret,
                settings.stripe_webhook_tolerance,
            )
        except stripe.SignatureVerificationError as e:
            logger.error("Webhook signature verification failed: %s", e)
            raise InvalidRequestError(f"Webhook Error: {e}") from e

        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise InvalidRequestError("Webhook payload is not valid JSON") from e


# Global Stripe client instance
stripe_client = StripeClient()
