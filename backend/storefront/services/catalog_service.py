"""Product and category catalog management."""

import logging

from storefront.config import get_settings
from storefront.database.categories import category_repository
from storefront.database.products import product_repository
from storefront.exceptions import ConflictError, InvalidRequestError, NotFoundError
from storefront.models.category import (
    CategoryCreate,
    CategoryInDB,
    CategorySummary,
    CategoryUpdate,
)
from storefront.models.product import ProductCreate, ProductInDB, ProductUpdate
from storefront.utils.helpers import generate_uuid

logger = logging.getLogger(__name__)
settings = get_settings()


class CatalogService:
    """Catalog service for products and categories."""

    @staticmethod
    def _check_images(images: list[str]) -> None:
        if len(images) > settings.max_product_images:
            raise InvalidRequestError(f"Maximum {settings.max_product_images} images allowed")

    # ── Products ───────────────────────────────────────────────────────────────

    @staticmethod
    async def create_product(product: ProductCreate) -> ProductInDB:
        """Create a new product."""
        CatalogService._check_images(product.images)
        created = await product_repository.create(
            ProductInDB(productId=generate_uuid(), **product.model_dump())
        )
        logger.info("Created product %s (%s)", created.productId, created.name)
        return created

    @staticmethod
    async def get_product(product_id: str) -> ProductInDB:
        """Get product by ID."""
        product = await product_repository.get(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    @staticmethod
    async def list_products() -> list[ProductInDB]:
        """List all products, newest first."""
        return await product_repository.list_all()

    @staticmethod
    async def update_product(product_id: str, update: ProductUpdate) -> ProductInDB:
        """Apply the supplied fields to a product."""
        fields = update.model_dump(exclude_unset=True, mode="json")
        if "images" in fields:
            CatalogService._check_images(fields["images"])

        product = await product_repository.update(product_id, fields)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    @staticmethod
    async def delete_product(product_id: str) -> None:
        """Delete a product."""
        if not await product_repository.delete(product_id):
            raise NotFoundError("Product", product_id)
        logger.info("Deleted product %s", product_id)

    # ── Categories ─────────────────────────────────────────────────────────────

    @staticmethod
    async def list_active_categories() -> list[CategorySummary]:
        """List active categories as shown in the storefront."""
        categories = await category_repository.list_all()
        return [
            CategorySummary(name=c.name, icon=c.icon, image=c.image, order=c.order)
            for c in categories
            if c.isActive
        ]

    @staticmethod
    async def list_categories() -> list[CategoryInDB]:
        """List all categories, including inactive ones."""
        return await category_repository.list_all()

    @staticmethod
    async def create_category(category: CategoryCreate) -> CategoryInDB:
        """Create a category with a unique, trimmed name."""
        name = category.name.strip()
        if not name:
            raise InvalidRequestError("Category name is required")
        if await category_repository.get_by_name(name):
            raise ConflictError("Category already exists")

        data = category.model_dump()
        data["name"] = name
        return await category_repository.create(CategoryInDB(categoryId=generate_uuid(), **data))

    @staticmethod
    async def update_category(category_id: str, update: CategoryUpdate) -> CategoryInDB:
        """Apply the supplied fields to a category."""
        category = await category_repository.get(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)

        fields = update.model_dump(exclude_unset=True)
        if "name" in fields:
            name = fields["name"].strip()
            if not name:
                raise InvalidRequestError("Category name is required")
            if name != category.name and await category_repository.get_by_name(name):
                raise ConflictError("Category name already exists")
            fields["name"] = name

        updated = await category_repository.update(category_id, fields)
        if updated is None:
            raise NotFoundError("Category", category_id)
        return updated

    @staticmethod
    async def delete_category(category_id: str) -> None:
        """Delete a category that no product is filed under."""
        category = await category_repository.get(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)

        in_use = await product_repository.count_in_category(category.name)
        if in_use:
            raise InvalidRequestError(
                f"Cannot delete category. It is used by {in_use} product(s). "
                "Please update or remove those products first."
            )
        await category_repository.delete(category_id)
        logger.info("Deleted category %s (%s)", category_id, category.name)


# Global catalog service instance
catalog_service = CatalogService()
