"""Unfulfilled payment ledger.

A payment lands here when the processor reported success but no order could
be written for it, so it can be refunded or replayed by an operator.
"""

import logging
from typing import Any

from storefront.config import get_settings
from storefront.database.mongodb import MongoDB, mongodb, storage_errors
from storefront.utils.helpers import utc_now

logger = logging.getLogger(__name__)
settings = get_settings()


class UnfulfilledPaymentRepository:
    """Records payments that succeeded without a matching order."""

    def __init__(self, db: MongoDB) -> None:
        self._db = db

    @property
    def _payments(self):
        return self._db.collection(settings.mongodb_unfulfilled_payment_collection)

    @storage_errors
    async def record(self, payment_id: str, metadata: dict[str, Any], error: str) -> None:
        """Store or refresh the failure record for ``payment_id``."""
        now = utc_now()
        await self._payments.update_one(
            {"paymentId": payment_id},
            {
                "$set": {"metadata": metadata, "error": error, "updatedAt": now},
                "$setOnInsert": {"createdAt": now, "resolved": False},
                "$inc": {"attempts": 1},
            },
            upsert=True,
        )
        logger.warning("Recorded unfulfilled payment %s: %s", payment_id, error)

    @storage_errors
    async def list_open(self) -> list[dict[str, Any]]:
        """List unresolved failures, oldest first."""
        cursor = self._payments.find({"resolved": False}, {"_id": 0}).sort("createdAt", 1)
        return await cursor.to_list(length=None)


# Global repository instance
unfulfilled_payment_repository = UnfulfilledPaymentRepository(mongodb)
