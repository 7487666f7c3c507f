"""Review collection access."""

import logging

from pymongo.errors import DuplicateKeyError

from storefront.config import get_settings
from storefront.database.mongodb import MongoDB, mongodb, storage_errors
from storefront.exceptions import ConflictError
from storefront.models.review import ReviewInDB

logger = logging.getLogger(__name__)
settings = get_settings()


class ReviewRepository:
    """Reads and writes review documents."""

    def __init__(self, db: MongoDB) -> None:
        self._db = db

    @property
    def _reviews(self):
        return self._db.collection(settings.mongodb_review_collection)

    @storage_errors
    async def create(self, review: ReviewInDB) -> ReviewInDB:
        """Insert a review; one per order, product and user."""
        try:
            await self._reviews.insert_one(review.model_dump())
        except DuplicateKeyError:
            raise ConflictError("Product already reviewed for this order")
        return review

    @storage_errors
    async def reviewed_order_ids(self, order_ids: list[str]) -> set[str]:
        """Return the subset of ``order_ids`` that have at least one review."""
        if not order_ids:
            return set()
        cursor = self._reviews.find({"orderId": {"$in": order_ids}}, {"_id": 0, "orderId": 1})
        return {doc["orderId"] for doc in await cursor.to_list(length=None)}

    @storage_errors
    async def ratings_for_product(self, product_id: str) -> list[int]:
        """Return every rating left for a product."""
        cursor = self._reviews.find({"productId": product_id}, {"_id": 0, "rating": 1})
        return [doc["rating"] for doc in await cursor.to_list(length=None)]

    @storage_errors
    async def list_all(self) -> list[ReviewInDB]:
        """List all reviews, newest first."""
        cursor = self._reviews.find({}, {"_id": 0}).sort("createdAt", -1)
        return [ReviewInDB(**doc) for doc in await cursor.to_list(length=None)]


# Global review repository instance
review_repository = ReviewRepository(mongodb)
