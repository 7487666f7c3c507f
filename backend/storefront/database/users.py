"""User and cart collection access."""

import logging
from typing import Any, Optional

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from storefront.config import get_settings
from storefront.database.mongodb import MongoDB, mongodb, storage_errors
from storefront.exceptions import ConflictError
from storefront.models.user import Address, Cart, CartItem, UserInDB
from storefront.utils.helpers import utc_now

logger = logging.getLogger(__name__)
settings = get_settings()


class UserRepository:
    """Reads and writes user documents, including embedded addresses and wishlist."""

    def __init__(self, db: MongoDB) -> None:
        self._db = db

    @property
    def _users(self):
        return self._db.collection(settings.mongodb_user_collection)

    @storage_errors
    async def create(self, user: UserInDB) -> UserInDB:
        """Create a new user."""
        try:
            await self._users.insert_one(user.model_dump())
        except DuplicateKeyError:
            raise ConflictError(f"User with externalId '{user.externalId}' already exists")
        return user

    @storage_errors
    async def get(self, user_id: str) -> Optional[UserInDB]:
        """Get user by internal ID."""
        data = await self._users.find_one({"userId": user_id}, {"_id": 0})
        if data:
            return UserInDB(**data)
        return None

    @storage_errors
    async def get_by_external_id(self, external_id: str) -> Optional[UserInDB]:
        """Get user by identity-provider ID."""
        data = await self._users.find_one({"externalId": external_id}, {"_id": 0})
        if data:
            return UserInDB(**data)
        return None

    @storage_errors
    async def update(self, external_id: str, fields: dict[str, Any]) -> Optional[UserInDB]:
        """Set ``fields`` on a user and return the updated document."""
        data = await self._users.find_one_and_update(
            {"externalId": external_id},
            {"$set": {**fields, "updatedAt": utc_now()}},
            projection={"_id": 0},
            return_document=ReturnDocument.AFTER,
        )
        if data:
            return UserInDB(**data)
        return None

    @storage_errors
    async def set_addresses(self, external_id: str, addresses: list[Address]) -> Optional[UserInDB]:
        """Replace the user's address book."""
        return await self.update(external_id, {"addresses": [a.model_dump() for a in addresses]})

    @storage_errors
    async def add_to_wishlist(self, external_id: str, product_id: str) -> bool:
        """Add a product to the wishlist; False if it was already there."""
        result = await self._users.update_one(
            {"externalId": external_id, "wishlist": {"$nin": [product_id]}},
            {"$push": {"wishlist": product_id}, "$set": {"updatedAt": utc_now()}},
        )
        return result.matched_count == 1

    @storage_errors
    async def remove_from_wishlist(self, external_id: str, product_id: str) -> bool:
        """Remove a product from the wishlist; False if it was not there."""
        result = await self._users.update_one(
            {"externalId": external_id, "wishlist": product_id},
            {"$pull": {"wishlist": product_id}, "$set": {"updatedAt": utc_now()}},
        )
        return result.matched_count == 1

    @storage_errors
    async def list_all(self) -> list[UserInDB]:
        """List all users, newest first."""
        cursor = self._users.find({}, {"_id": 0}).sort("createdAt", -1)
        return [UserInDB(**doc) for doc in await cursor.to_list(length=None)]

    @storage_errors
    async def count(self) -> int:
        """Count all users."""
        return await self._users.count_documents({})


class CartRepository:
    """Reads and writes one cart document per customer."""

    def __init__(self, db: MongoDB) -> None:
        self._db = db

    @property
    def _carts(self):
        return self._db.collection(settings.mongodb_cart_collection)

    @storage_errors
    async def get(self, external_id: str) -> Cart:
        """Get the customer's cart, empty if none was stored yet."""
        data = await self._carts.find_one({"externalId": external_id}, {"_id": 0})
        if data:
            return Cart(**data)
        return Cart(externalId=external_id)

    @storage_errors
    async def save_items(self, external_id: str, items: list[CartItem]) -> Cart:
        """Replace the cart contents."""
        cart = Cart(externalId=external_id, items=items, updatedAt=utc_now())
        await self._carts.replace_one({"externalId": external_id}, cart.model_dump(), upsert=True)
        return cart

    @storage_errors
    async def clear(self, external_id: str) -> None:
        """Empty the customer's cart."""
        await self._carts.update_one(
            {"externalId": external_id},
            {"$set": {"items": [], "updatedAt": utc_now()}},
        )


# Global repository instances
user_repository = UserRepository(mongodb)
cart_repository = CartRepository(mongodb)
