"""MongoDB database connection and operations."""

import logging
from functools import wraps
from typing import Any, Awaitable, Callable, Optional, TypeVar

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import ConnectionFailure, DuplicateKeyError, PyMongoError

from storefront.config import get_settings
from storefront.exceptions import StorageError

logger = logging.getLogger(__name__)
settings = get_settings()

T = TypeVar("T")


def storage_errors(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """Translate driver failures raised by a repository method into ``StorageError``.

    ``DuplicateKeyError`` is passed through untouched so callers can turn it
    into a domain conflict.
    """

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return await func(*args, **kwargs)
        except DuplicateKeyError:
            raise
        except PyMongoError as e:
            logger.error("Database error in %s: %s", func.__qualname__, e)
            raise StorageError(f"Database operation failed: {e}") from e

    return wrapper


class MongoDB:
    """MongoDB connection manager."""

    def __init__(self) -> None:
        """Initialize MongoDB connection."""
        self.client: Optional[AsyncIOMotorClient] = None
        self.db: Optional[AsyncIOMotorDatabase] = None

    async def connect(self) -> None:
        """Connect to MongoDB."""
        try:
            self.client = AsyncIOMotorClient(
                settings.mongodb_url,
                maxPoolSize=settings.mongodb_max_pool_size,
                minPoolSize=settings.mongodb_min_pool_size,
            )
            self.db = self.client[settings.mongodb_database]

            # Test connection
            await self.client.admin.command("ping")
            logger.info("Connected to MongoDB: %s", settings.mongodb_database)

            await self.create_indexes()

        except ConnectionFailure as e:
            logger.error("Failed to connect to MongoDB: %s", e)
            raise

    async def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self.client:
            self.client.close()
            self.client = None
            self.db = None
            logger.info("Disconnected from MongoDB")

    def collection(self, name: str) -> AsyncIOMotorCollection:
        """Return a collection handle, failing if the database is not connected."""
        if self.db is None:
            raise StorageError("Database not connected")
        return self.db[name]

    async def create_indexes(self) -> None:
        """Create database indexes."""
        if self.db is None:
            raise StorageError("Database not connected")

        users = self.db[settings.mongodb_user_collection]
        await users.create_index("userId", unique=True, name="userId_unique")
        await users.create_index("externalId", unique=True, name="externalId_unique")
        await users.create_index("email", name="email_index")

        products = self.db[settings.mongodb_product_collection]
        await products.create_index("productId", unique=True, name="productId_unique")
        await products.create_index("category", name="category_index")

        orders = self.db[settings.mongodb_order_collection]
        await orders.create_index("orderId", unique=True, name="orderId_unique")
        # Serves the same-day pending order lookup
        await orders.create_index(
            [("externalId", ASCENDING), ("status", ASCENDING), ("createdAt", DESCENDING)],
            name="customer_status_createdAt",
        )
        await orders.create_index("paymentResult.id", name="paymentResult_id")
        await orders.create_index("paymentIds", name="paymentIds_index")

        reviews = self.db[settings.mongodb_review_collection]
        await reviews.create_index("reviewId", unique=True, name="reviewId_unique")
        await reviews.create_index(
            [("orderId", ASCENDING), ("productId", ASCENDING), ("userId", ASCENDING)],
            unique=True,
            name="order_product_user_unique",
        )

        categories = self.db[settings.mongodb_category_collection]
        await categories.create_index("categoryId", unique=True, name="categoryId_unique")
        await categories.create_index("name", unique=True, name="name_unique")

        await self.db[settings.mongodb_cart_collection].create_index(
            "externalId", unique=True, name="cart_externalId_unique"
        )
        await self.db[settings.mongodb_unfulfilled_payment_collection].create_index(
            "paymentId", unique=True, name="paymentId_unique"
        )
        logger.info("MongoDB indexes created")

    async def ping(self) -> bool:
        """Return True when the server answers a ping."""
        if self.client is None:
            return False
        try:
            await self.client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning("MongoDB ping failed: %s", e)
            return False


# Global MongoDB instance
mongodb = MongoDB()
