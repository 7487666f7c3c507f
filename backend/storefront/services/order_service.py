"""Order consolidation, inventory accounting and order lifecycle.

Both order entry points go through :meth:`OrderService.consolidate`:

  1. direct checkout  (``POST /orders`` -> :meth:`OrderService.create_order`)
  2. payment webhook  (``POST /payment/webhook`` -> ``PaymentService``)

A customer has at most one pending order per calendar day. New items are
merged into that order when it exists, otherwise a new order is created.
Stock is taken with a conditional decrement and given back if any later
step fails, and each customer's calls are serialised within the process.
"""

import asyncio
import logging
from typing import Optional
from weakref import WeakValueDictionary

from storefront.config import get_settings
from storefront.database.orders import OrderRepository, order_repository
from storefront.database.products import ProductRepository, product_repository
from storefront.database.reviews import ReviewRepository, review_repository
from storefront.exceptions import (
    InvalidRequestError,
    InvalidStatusError,
    NotFoundError,
    OutOfStockError,
)
from storefront.models.order import (
    OrderInDB,
    OrderItem,
    OrderStatus,
    OrderWithReviewStatus,
    PaymentResult,
    ShippingAddress,
)
from storefront.models.request import OrderCreateRequest
from storefront.models.user import UserInDB
from storefront.utils.helpers import day_bounds, generate_uuid, utc_now

logger = logging.getLogger(__name__)
settings = get_settings()


def merge_items(existing: list[OrderItem], requested: list[OrderItem]) -> list[OrderItem]:
    """Fold ``requested`` into a copy of ``existing``.

    A product already on the order keeps its line (and snapshot) and only
    gains quantity; any other product is appended as a new line.
    """
    merged = [item.model_copy() for item in existing]
    for new_item in requested:
        for line in merged:
            if line.product == new_item.product:
                line.quantity += new_item.quantity
                break
        else:
            merged.append(new_item.model_copy())
    return merged


def snapshot_total(items: list[OrderItem]) -> float:
    """Sum ``price x quantity`` over the items' snapshot prices."""
    return round(sum(item.price * item.quantity for item in items), 2)


class OrderService:
    """Order service for consolidation, status changes and listings."""

    def __init__(
        self,
        products: ProductRepository = product_repository,
        orders: OrderRepository = order_repository,
        reviews: ReviewRepository = review_repository,
    ) -> None:
        self.products = products
        self.orders = orders
        self.reviews = reviews
        self._locks: WeakValueDictionary[str, asyncio.Lock] = WeakValueDictionary()

    def _customer_lock(self, external_id: str) -> asyncio.Lock:
        lock = self._locks.get(external_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[external_id] = lock
        return lock

    # ── Consolidation ──────────────────────────────────────────────────────────

    async def consolidate(
        self,
        *,
        user_id: str,
        external_id: str,
        items: list[OrderItem],
        shipping_address: ShippingAddress,
        total_price: Optional[float] = None,
        payment_result: Optional[PaymentResult] = None,
        payment_reference: Optional[str] = None,
    ) -> OrderInDB:
        """Merge ``items`` into today's pending order or create a new one.

        Args:
            user_id: Internal customer id
            external_id: Identity-provider customer id; orders are matched on it
            items: Requested line items, in request order
            shipping_address: Address snapshot used when a new order is created
            total_price: Total for a new order; defaults to the snapshot sum
            payment_result: Payment to attach; a synthetic pending one is used otherwise
            payment_reference: When set, an order already holding this payment
                is returned untouched

        Returns:
            The created or updated order

        Raises:
            InvalidRequestError: ``items`` is empty
            NotFoundError: an item references a missing product
            OutOfStockError: a product cannot cover its requested quantity
            StorageError: the database failed; reserved stock has been restored
        """
        order, _ = await self._consolidate(
            user_id=user_id,
            external_id=external_id,
            items=items,
            shipping_address=shipping_address,
            total_price=total_price,
            payment_result=payment_result,
            payment_reference=payment_reference,
        )
        return order

    async def consolidate_payment(
        self,
        *,
        user_id: str,
        external_id: str,
        items: list[OrderItem],
        shipping_address: ShippingAddress,
        total_price: Optional[float],
        payment_result: PaymentResult,
    ) -> tuple[OrderInDB, bool]:
        """Consolidate a succeeded payment, keyed on its id.

        Returns:
            The order holding the payment, and False when the payment had
            already been recorded and nothing was written
        """
        return await self._consolidate(
            user_id=user_id,
            external_id=external_id,
            items=items,
            shipping_address=shipping_address,
            total_price=total_price,
            payment_result=payment_result,
            payment_reference=payment_result.id,
        )

    async def _consolidate(
        self,
        *,
        user_id: str,
        external_id: str,
        items: list[OrderItem],
        shipping_address: ShippingAddress,
        total_price: Optional[float],
        payment_result: Optional[PaymentResult],
        payment_reference: Optional[str],
    ) -> tuple[OrderInDB, bool]:
        async with self._customer_lock(external_id):
            if payment_reference:
                existing = await self.orders.find_by_payment(payment_reference)
                if existing:
                    logger.info(
                        "Payment %s already recorded on order %s", payment_reference, existing.orderId
                    )
                    return existing, False

            await self._validate_items(items)
            await self._reserve_stock(items)

            try:
                order = await self._merge_or_create(
                    user_id=user_id,
                    external_id=external_id,
                    items=items,
                    shipping_address=shipping_address,
                    total_price=total_price,
                    payment_result=payment_result,
                )
            except Exception:
                logger.error("Order write failed for customer %s, restoring stock", external_id)
                await self._release_stock(items)
                raise

        return order, True

    async def _validate_items(self, items: list[OrderItem]) -> None:
        if not items:
            raise InvalidRequestError("No order items")

        for item in items:
            product = await self.products.get(item.product)
            if product is None:
                raise NotFoundError("Product", item.name)
            if product.stock < item.quantity:
                raise OutOfStockError(product.name, product.stock)

    async def _reserve_stock(self, items: list[OrderItem]) -> None:
        """Decrement stock for every item, or for none of them."""
        reserved: list[OrderItem] = []
        try:
            for item in items:
                if not await self.products.decrement_stock(item.product, item.quantity):
                    product = await self.products.get(item.product)
                    raise OutOfStockError(
                        product.name if product else item.name,
                        product.stock if product else 0,
                    )
                reserved.append(item)
        except Exception:
            await self._release_stock(reserved)
            raise

    async def _release_stock(self, items: list[OrderItem]) -> None:
        for item in items:
            await self.products.increment_stock(item.product, item.quantity)

    async def _merge_or_create(
        self,
        *,
        user_id: str,
        external_id: str,
        items: list[OrderItem],
        shipping_address: ShippingAddress,
        total_price: Optional[float],
        payment_result: Optional[PaymentResult],
    ) -> OrderInDB:
        start, end = day_bounds(settings.order_merge_timezone)

        # An order that leaves pending mid-merge is not written; look again
        while True:
            existing = await self.orders.find_pending_between(external_id, start, end)
            if existing is None:
                break

            existing.orderItems = merge_items(existing.orderItems, items)
            existing.totalPrice = await self._current_total(existing.orderItems)
            if payment_result:
                existing.paymentResult = payment_result
                if payment_result.id not in existing.paymentIds:
                    existing.paymentIds.append(payment_result.id)
            existing.updatedAt = utc_now()

            if await self.orders.merge_pending(existing):
                logger.info(
                    "Merged %d item(s) into order %s for customer %s",
                    len(items),
                    existing.orderId,
                    external_id,
                )
                return existing
            logger.warning("Order %s left pending during merge, looking again", existing.orderId)

        payment = payment_result or PaymentResult(id=f"order-{generate_uuid()}", status="pending")
        order = OrderInDB(
            orderId=generate_uuid(),
            userId=user_id,
            externalId=external_id,
            orderItems=[item.model_copy() for item in items],
            shippingAddress=shipping_address,
            paymentResult=payment,
            paymentIds=[payment.id] if payment_result else [],
            totalPrice=round(total_price, 2) if total_price is not None else snapshot_total(items),
            status=OrderStatus.PENDING,
        )
        return await self.orders.create(order)

    async def _current_total(self, items: list[OrderItem]) -> float:
        """Price merged lines at the catalog's current price.

        Lines whose product is gone or has no price contribute nothing.
        """
        products = {p.productId: p for p in await self.products.get_many([i.product for i in items])}
        total = 0.0
        for item in items:
            product = products.get(item.product)
            if product and product.price:
                total += product.price * item.quantity
        return round(total, 2)

    # ── Entry points ───────────────────────────────────────────────────────────

    async def create_order(self, user: UserInDB, request: OrderCreateRequest) -> OrderInDB:
        """Place an order directly from the storefront checkout."""
        return await self.consolidate(
            user_id=user.userId,
            external_id=user.externalId,
            items=request.orderItems,
            shipping_address=request.shippingAddress,
            total_price=request.totalPrice,
            payment_result=request.paymentResult,
        )

    async def update_status(self, order_id: str, status: str) -> OrderInDB:
        """Move an order to ``status``, stamping the first shipped/delivered time."""
        try:
            new_status = OrderStatus(status)
        except ValueError:
            raise InvalidStatusError(status)

        order = await self.orders.get(order_id)
        if order is None:
            raise NotFoundError("Order", order_id)

        now = utc_now()
        changes = {"status": new_status.value, "updatedAt": now}
        if new_status is OrderStatus.SHIPPED and order.shippedAt is None:
            changes["shippedAt"] = now
        if new_status is OrderStatus.DELIVERED and order.deliveredAt is None:
            changes["deliveredAt"] = now

        # Only status fields are written; a concurrent merge keeps its items
        if not await self.orders.update_fields(order_id, changes):
            raise NotFoundError("Order", order_id)
        logger.info("Order %s moved to %s", order_id, new_status.value)
        return order.model_copy(update={**changes, "status": new_status})

    # ── Queries ────────────────────────────────────────────────────────────────

    async def list_customer_orders(self, external_id: str) -> list[OrderWithReviewStatus]:
        """List a customer's orders, each flagged with whether it has a review."""
        orders = await self.orders.list_for_customer(external_id)
        reviewed = await self.reviews.reviewed_order_ids([order.orderId for order in orders])
        return [
            OrderWithReviewStatus(**order.model_dump(), hasReviewed=order.orderId in reviewed)
            for order in orders
        ]

    async def list_all_orders(self) -> list[OrderInDB]:
        """List every order for the admin dashboard."""
        return await self.orders.list_all()


# Global order service instance
order_service = OrderService()
