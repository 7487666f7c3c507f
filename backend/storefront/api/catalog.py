"""Storefront catalog routes."""

from fastapi import APIRouter, Depends

from storefront.api.dependencies import get_current_user
from storefront.models.category import CategorySummary
from storefront.models.product import ProductInDB
from storefront.services.catalog_service import catalog_service

router = APIRouter(prefix="/products", tags=["products"])


# Registered before /{product_id} so "categories" is never read as an id
@router.get("/categories", response_model=list[CategorySummary])
async def get_categories() -> list[CategorySummary]:
    """List active categories. Public, no user header required."""
    return await catalog_service.list_active_categories()


@router.get("", response_model=list[ProductInDB], dependencies=[Depends(get_current_user)])
async def get_products() -> list[ProductInDB]:
    """List all products, newest first."""
    return await catalog_service.list_products()


@router.get("/{product_id}", response_model=ProductInDB, dependencies=[Depends(get_current_user)])
async def get_product(product_id: str) -> ProductInDB:
    """Get a product by ID."""
    return await catalog_service.get_product(product_id)
