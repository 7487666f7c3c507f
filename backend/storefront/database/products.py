"""Product collection access."""

import logging
from typing import Any, Optional

from storefront.config import get_settings
from storefront.database.mongodb import MongoDB, mongodb, storage_errors
from storefront.models.product import ProductInDB
from storefront.utils.helpers import utc_now

logger = logging.getLogger(__name__)
settings = get_settings()


class ProductRepository:
    """Reads and writes product documents, including the stock counter."""

    def __init__(self, db: MongoDB) -> None:
        self._db = db

    @property
    def _products(self):
        return self._db.collection(settings.mongodb_product_collection)

    @storage_errors
    async def get(self, product_id: str) -> Optional[ProductInDB]:
        """Get product by ID."""
        data = await self._products.find_one({"productId": product_id}, {"_id": 0})
        if data:
            return ProductInDB(**data)
        return None

    @storage_errors
    async def get_many(self, product_ids: list[str]) -> list[ProductInDB]:
        """Get every product whose ID is in ``product_ids``."""
        cursor = self._products.find({"productId": {"$in": product_ids}}, {"_id": 0})
        return [ProductInDB(**doc) for doc in await cursor.to_list(length=None)]

    @storage_errors
    async def list_all(self) -> list[ProductInDB]:
        """List all products, newest first."""
        cursor = self._products.find({}, {"_id": 0}).sort("createdAt", -1)
        return [ProductInDB(**doc) for doc in await cursor.to_list(length=None)]

    @storage_errors
    async def create(self, product: ProductInDB) -> ProductInDB:
        """Insert a new product."""
        await self._products.insert_one(product.model_dump())
        return product

    @storage_errors
    async def update(self, product_id: str, fields: dict[str, Any]) -> Optional[ProductInDB]:
        """Set ``fields`` on a product and return the updated document."""
        if fields:
            fields = {**fields, "updatedAt": utc_now()}
            await self._products.update_one({"productId": product_id}, {"$set": fields})
        return await self.get(product_id)

    @storage_errors
    async def delete(self, product_id: str) -> bool:
        """Delete product by ID."""
        result = await self._products.delete_one({"productId": product_id})
        return result.deleted_count > 0

    @storage_errors
    async def count(self) -> int:
        """Count all products."""
        return await self._products.count_documents({})

    @storage_errors
    async def count_in_category(self, category: str) -> int:
        """Count products filed under ``category``."""
        return await self._products.count_documents({"category": category})

    @storage_errors
    async def decrement_stock(self, product_id: str, quantity: int) -> bool:
        """Atomically take ``quantity`` units out of stock.

        The filter only matches while enough stock remains, so the counter can
        never go negative. Returns False when nothing was decremented.
        """
        result = await self._products.update_one(
            {"productId": product_id, "stock": {"$gte": quantity}},
            {"$inc": {"stock": -quantity}},
        )
        return result.modified_count == 1

    @storage_errors
    async def increment_stock(self, product_id: str, quantity: int) -> None:
        """Atomically put ``quantity`` units back into stock."""
        await self._products.update_one(
            {"productId": product_id},
            {"$inc": {"stock": quantity}},
        )

    @storage_errors
    async def set_rating(self, product_id: str, average: float, total: int) -> None:
        """Store the review aggregate for a product."""
        await self._products.update_one(
            {"productId": product_id},
            {"$set": {"averageRating": average, "totalReviews": total, "updatedAt": utc_now()}},
        )


# Global product repository instance
product_repository = ProductRepository(mongodb)
