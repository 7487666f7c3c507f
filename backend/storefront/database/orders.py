"""Order collection access."""

import logging
from datetime import datetime
from typing import Optional

from storefront.config import get_settings
from storefront.database.mongodb import MongoDB, mongodb, storage_errors
from storefront.models.order import OrderInDB, OrderStatus

logger = logging.getLogger(__name__)
settings = get_settings()


class OrderRepository:
    """Reads and writes order documents."""

    def __init__(self, db: MongoDB) -> None:
        self._db = db

    @property
    def _orders(self):
        return self._db.collection(settings.mongodb_order_collection)

    @storage_errors
    async def get(self, order_id: str) -> Optional[OrderInDB]:
        """Get order by ID."""
        data = await self._orders.find_one({"orderId": order_id}, {"_id": 0})
        if data:
            return OrderInDB(**data)
        return None

    @storage_errors
    async def find_pending_between(
        self, external_id: str, start: datetime, end: datetime
    ) -> Optional[OrderInDB]:
        """Find the customer's pending order created within ``[start, end]``."""
        data = await self._orders.find_one(
            {
                "externalId": external_id,
                "status": OrderStatus.PENDING.value,
                "createdAt": {"$gte": start, "$lte": end},
            },
            {"_id": 0},
            sort=[("createdAt", 1)],
        )
        if data:
            return OrderInDB(**data)
        return None

    @storage_errors
    async def find_by_payment(self, payment_id: str) -> Optional[OrderInDB]:
        """Find the order a payment reference was consolidated into."""
        data = await self._orders.find_one(
            {"$or": [{"paymentResult.id": payment_id}, {"paymentIds": payment_id}]},
            {"_id": 0},
        )
        if data:
            return OrderInDB(**data)
        return None

    @storage_errors
    async def create(self, order: OrderInDB) -> OrderInDB:
        """Insert a new order."""
        await self._orders.insert_one(order.model_dump())
        logger.info("Created order %s for customer %s", order.orderId, order.externalId)
        return order

    @storage_errors
    async def merge_pending(self, order: OrderInDB) -> bool:
        """Write merged lines, total and payment onto ``order`` if it is still pending.

        Returns:
            False when the stored order is gone or has left ``pending``
        """
        result = await self._orders.update_one(
            {"orderId": order.orderId, "status": OrderStatus.PENDING.value},
            {
                "$set": {
                    "orderItems": [item.model_dump() for item in order.orderItems],
                    "totalPrice": order.totalPrice,
                    "paymentResult": order.paymentResult.model_dump(),
                    "paymentIds": order.paymentIds,
                    "updatedAt": order.updatedAt,
                }
            },
        )
        return result.matched_count == 1

    @storage_errors
    async def update_fields(self, order_id: str, fields: dict) -> bool:
        """Set ``fields`` on an order, leaving its other fields as stored."""
        result = await self._orders.update_one({"orderId": order_id}, {"$set": fields})
        if result.matched_count == 0:
            logger.warning("Update matched no stored order: %s", order_id)
        return result.matched_count == 1

    @storage_errors
    async def list_for_customer(self, external_id: str) -> list[OrderInDB]:
        """List a customer's orders, newest first."""
        cursor = self._orders.find({"externalId": external_id}, {"_id": 0}).sort("createdAt", -1)
        return [OrderInDB(**doc) for doc in await cursor.to_list(length=None)]

    @storage_errors
    async def list_all(self) -> list[OrderInDB]:
        """List every order, newest first."""
        cursor = self._orders.find({}, {"_id": 0}).sort("createdAt", -1)
        return [OrderInDB(**doc) for doc in await cursor.to_list(length=None)]

    @storage_errors
    async def count(self) -> int:
        """Count all orders."""
        return await self._orders.count_documents({})

    @storage_errors
    async def total_revenue(self) -> float:
        """Sum ``totalPrice`` over all orders."""
        cursor = self._orders.aggregate([{"$group": {"_id": None, "total": {"$sum": "$totalPrice"}}}])
        result = await cursor.to_list(length=1)
        return float(result[0]["total"]) if result else 0.0


# Global order repository instance
order_repository = OrderRepository(mongodb)
