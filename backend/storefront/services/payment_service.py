"""Card checkout: PaymentIntent creation and the payment-succeeded webhook."""

import json
import logging
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError

from storefront.config import get_settings
from storefront.database.payments import unfulfilled_payment_repository
from storefront.database.products import product_repository
from storefront.database.users import user_repository
from storefront.exceptions import (
    InvalidRequestError,
    NotFoundError,
    OutOfStockError,
    StorefrontError,
)
from storefront.models.order import OrderInDB, OrderItem, PaymentResult, ShippingAddress
from storefront.models.user import CartItem, UserInDB
from storefront.services.order_service import OrderService, order_service
from storefront.services.stripe_client import StripeClient, stripe_client
from storefront.services.user_service import user_service
from storefront.utils.helpers import to_cents

logger = logging.getLogger(__name__)
settings = get_settings()

PAYMENT_SUCCEEDED = "payment_intent.succeeded"

_order_items_adapter = TypeAdapter(list[OrderItem])


class PaymentService:
    """Payment service bridging Stripe and order consolidation."""

    def __init__(
        self,
        client: StripeClient = stripe_client,
        orders: OrderService = order_service,
    ) -> None:
        self.client = client
        self.orders = orders

    async def create_payment_intent(
        self,
        user: UserInDB,
        cart_items: list[CartItem],
        shipping_address: ShippingAddress,
    ) -> str:
        """Price the cart server-side and open a PaymentIntent for it.

        The validated items, address and total travel in the intent metadata
        and come back through the webhook once the charge succeeds.

        Returns:
            The PaymentIntent client secret
        """
        if not cart_items:
            raise InvalidRequestError("Cart is empty")

        subtotal = 0.0
        validated_items: list[OrderItem] = []

        for item in cart_items:
            product = await product_repository.get(item.productId)
            if product is None:
                raise NotFoundError("Product", item.productId)
            if product.stock < item.quantity:
                raise OutOfStockError(product.name, product.stock)
            if product.price is None:
                raise InvalidRequestError(f"Product {product.name} is not for sale")

            subtotal += product.price * item.quantity
            validated_items.append(
                OrderItem(
                    product=product.productId,
                    name=product.name,
                    price=product.price,
                    quantity=item.quantity,
                    image=product.images[0] if product.images else "",
                )
            )

        tax = subtotal * settings.checkout_tax_rate
        total = subtotal + settings.checkout_shipping_fee + tax
        if total <= 0:
            raise InvalidRequestError("Invalid order total")

        customer_id = await self.client.get_or_create_customer(
            user.stripeCustomerId,
            email=user.email,
            name=user.name,
            metadata={"externalId": user.externalId, "userId": user.userId},
        )
        if customer_id != user.stripeCustomerId:
            await user_repository.update(user.externalId, {"stripeCustomerId": customer_id})

        return await self.client.create_payment_intent(
            amount_cents=to_cents(total),
            customer_id=customer_id,
            metadata={
                "userId": user.userId,
                "externalId": user.externalId,
                "orderItems": json.dumps([i.model_dump() for i in validated_items]),
                "shippingAddress": shipping_address.model_dump_json(),
                "totalPrice": f"{total:.2f}",
            },
        )

    async def handle_webhook(self, payload: bytes, signature: str) -> Optional[OrderInDB]:
        """Process one verified webhook delivery.

        Failures after a successful charge are logged and written to the
        unfulfilled payment ledger instead of being raised, so the processor
        is still acknowledged.

        Returns:
            The order the payment was consolidated into, or None
        """
        event = self.client.parse_event(payload, signature)
        event_type = event.get("type")

        if event_type != PAYMENT_SUCCEEDED:
            logger.info("Ignoring webhook event %s", event_type)
            return None

        intent = (event.get("data") or {}).get("object") or {}
        payment_id = intent.get("id", "")
        metadata = intent.get("metadata") or {}
        logger.info("Payment succeeded: %s", payment_id)

        try:
            order = await self.fulfill_payment(payment_id, metadata)
        except StorefrontError as e:
            logger.error("Error creating order from payment %s: %s", payment_id, e.message)
            await unfulfilled_payment_repository.record(payment_id, metadata, e.message)
            return None

        logger.info("Order %s holds payment %s", order.orderId, payment_id)
        return order

    async def fulfill_payment(self, payment_id: str, metadata: dict[str, Any]) -> OrderInDB:
        """Consolidate a succeeded payment into the customer's order and clear their cart."""
        if not payment_id:
            raise InvalidRequestError("Payment intent has no id")

        try:
            user_id = metadata["userId"]
            external_id = metadata["externalId"]
            items = _order_items_adapter.validate_json(metadata["orderItems"])
            address = ShippingAddress.model_validate_json(metadata["shippingAddress"])
            total_price = float(metadata["totalPrice"])
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            raise InvalidRequestError(f"Malformed payment metadata: {e}") from e

        order, written = await self.orders.consolidate_payment(
            user_id=user_id,
            external_id=external_id,
            items=items,
            shipping_address=address,
            total_price=total_price,
            payment_result=PaymentResult(id=payment_id, status="succeeded"),
        )
        # A redelivered payment leaves the current cart alone
        if written:
            await user_service.clear_cart(external_id)
        return order


# Global payment service instance
payment_service = PaymentService()
