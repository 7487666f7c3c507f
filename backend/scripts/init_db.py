"""Database initialization script.

Connects to MongoDB, creates indexes and seeds sample categories, products
and users. Existing records are left alone, so the script can be re-run.

Usage:
    python -m scripts.init_db
    python -m scripts.init_db --skip-products
"""

import argparse
import asyncio
import logging

from storefront.database.mongodb import mongodb
from storefront.exceptions import ConflictError
from storefront.models.category import CategoryCreate
from storefront.models.product import ProductCreate, UnitType
from storefront.models.user import UserCreate
from storefront.services.catalog_service import catalog_service
from storefront.services.user_service import user_service
from storefront.utils.logger import setup_logging

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

SAMPLE_CATEGORIES = [
    CategoryCreate(name="Pantry", description="Oils, grains and dry goods", icon="basket", order=1),
    CategoryCreate(name="Dairy", description="Cheese, yogurt and milk", icon="water", order=2),
    CategoryCreate(name="Bakery", description="Fresh bread and pastries", icon="cafe", order=3),
]

SAMPLE_PRODUCTS = [
    ProductCreate(
        name="Extra Virgin Olive Oil",
        description="Cold pressed Koroneiki olive oil.",
        price=10.0,
        stock=50,
        category="Pantry",
        images=["https://res.cloudinary.com/demo/image/upload/products/olive-oil.jpg"],
        unitType=UnitType.LITERS,
        unitOptions=["1L", "5L"],
    ),
    ProductCreate(
        name="Feta PDO",
        description="Barrel-aged sheep and goat milk feta.",
        price=5.0,
        stock=80,
        category="Dairy",
        images=["https://res.cloudinary.com/demo/image/upload/products/feta.jpg"],
        unitType=UnitType.KG,
        unitOptions=["0.5kg", "1kg"],
    ),
    ProductCreate(
        name="Sourdough Loaf",
        description="Naturally leavened whole wheat loaf.",
        price=3.5,
        stock=20,
        category="Bakery",
        images=["https://res.cloudinary.com/demo/image/upload/products/sourdough.jpg"],
    ),
]

SAMPLE_USERS = [
    UserCreate(externalId="user_seed_001", email="maria@example.com", name="Maria Papadopoulou"),
    UserCreate(externalId="user_seed_002", email="nikos@example.com", name="Nikos Georgiou"),
]


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create indexes and seed sample data")
    parser.add_argument(
        "--skip-products",
        action="store_true",
        help="Only seed categories and users",
    )
    return parser.parse_args()


async def init_databases(*, skip_products: bool = False) -> None:
    """Initialize database indexes and seed sample data."""
    try:
        logger.info("Initializing database...")

        # connect() also creates the indexes
        await mongodb.connect()

        for category in SAMPLE_CATEGORIES:
            try:
                await catalog_service.create_category(category)
                logger.info("Created category: %s", category.name)
            except ConflictError:
                logger.warning("Category %s already exists", category.name)

        if not skip_products:
            existing = {p.name for p in await catalog_service.list_products()}
            for product in SAMPLE_PRODUCTS:
                if product.name in existing:
                    logger.warning("Product %s already exists", product.name)
                    continue
                await catalog_service.create_product(product)
                logger.info("Created product: %s", product.name)

        for user in SAMPLE_USERS:
            try:
                await user_service.create_user(user)
                logger.info("Created user: %s", user.externalId)
            except ConflictError as e:
                logger.warning("User %s already exists: %s", user.externalId, e)

        logger.info("Database initialization completed successfully")

    except Exception as e:
        logger.error("Error initializing database: %s", e)
        raise

    finally:
        await mongodb.disconnect()


if __name__ == "__main__":
    args = _parse_args()
    asyncio.run(init_databases(skip_products=args.skip_products))
