"""Category collection access."""

import logging
from typing import Any, Optional

from pymongo.errors import DuplicateKeyError

from storefront.config import get_settings
from storefront.database.mongodb import MongoDB, mongodb, storage_errors
from storefront.exceptions import ConflictError
from storefront.models.category import CategoryInDB
from storefront.utils.helpers import utc_now

logger = logging.getLogger(__name__)
settings = get_settings()


class CategoryRepository:
    """Reads and writes category documents."""

    def __init__(self, db: MongoDB) -> None:
        self._db = db

    @property
    def _categories(self):
        return self._db.collection(settings.mongodb_category_collection)

    @storage_errors
    async def get(self, category_id: str) -> Optional[CategoryInDB]:
        """Get category by ID."""
        data = await self._categories.find_one({"categoryId": category_id}, {"_id": 0})
        if data:
            return CategoryInDB(**data)
        return None

    @storage_errors
    async def get_by_name(self, name: str) -> Optional[CategoryInDB]:
        """Get category by exact name."""
        data = await self._categories.find_one({"name": name}, {"_id": 0})
        if data:
            return CategoryInDB(**data)
        return None

    @storage_errors
    async def list_all(self) -> list[CategoryInDB]:
        """List categories in display order, newest first within the same order."""
        cursor = self._categories.find({}, {"_id": 0}).sort([("order", 1), ("createdAt", -1)])
        return [CategoryInDB(**doc) for doc in await cursor.to_list(length=None)]

    @storage_errors
    async def create(self, category: CategoryInDB) -> CategoryInDB:
        """Insert a new category."""
        try:
            await self._categories.insert_one(category.model_dump())
        except DuplicateKeyError:
            raise ConflictError("Category already exists")
        return category

    @storage_errors
    async def update(self, category_id: str, fields: dict[str, Any]) -> Optional[CategoryInDB]:
        """Set ``fields`` on a category and return the updated document."""
        if fields:
            try:
                await self._categories.update_one(
                    {"categoryId": category_id},
                    {"$set": {**fields, "updatedAt": utc_now()}},
                )
            except DuplicateKeyError:
                raise ConflictError("Category name already exists")
        return await self.get(category_id)

    @storage_errors
    async def delete(self, category_id: str) -> bool:
        """Delete category by ID."""
        result = await self._categories.delete_one({"categoryId": category_id})
        return result.deleted_count > 0


# Global category repository instance
category_repository = CategoryRepository(mongodb)
