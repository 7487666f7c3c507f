"""Admin dashboard routes."""

import logging

from fastapi import APIRouter, Depends, status

from storefront.api.dependencies import require_admin
from storefront.models.category import CategoryCreate, CategoryInDB, CategoryUpdate
from storefront.models.product import ProductCreate, ProductInDB, ProductUpdate
from storefront.models.request import (
    AdminOrderListResponse,
    DashboardStats,
    MessageResponse,
    OrderResponse,
    OrderStatusUpdate,
    UnfulfilledPayment,
)
from storefront.models.review import ReviewInDB
from storefront.models.user import UserResponse
from storefront.services.admin_service import admin_service
from storefront.services.catalog_service import catalog_service
from storefront.services.order_service import order_service
from storefront.services.review_service import review_service
from storefront.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# ── Products ───────────────────────────────────────────────────────────────────


@router.post("/products", response_model=ProductInDB, status_code=status.HTTP_201_CREATED)
async def create_product(product: ProductCreate) -> ProductInDB:
    """Create a product. Images are URLs already uploaded to the media host."""
    return await catalog_service.create_product(product)


@router.get("/products", response_model=list[ProductInDB])
async def get_all_products() -> list[ProductInDB]:
    return await catalog_service.list_products()


@router.put("/products/{product_id}", response_model=ProductInDB)
async def update_product(product_id: str, update: ProductUpdate) -> ProductInDB:
    return await catalog_service.update_product(product_id, update)


@router.delete("/products/{product_id}", response_model=MessageResponse)
async def delete_product(product_id: str) -> MessageResponse:
    await catalog_service.delete_product(product_id)
    return MessageResponse(message="Product deleted successfully")


# ── Orders ─────────────────────────────────────────────────────────────────────


@router.get("/orders", response_model=AdminOrderListResponse)
async def get_all_orders() -> AdminOrderListResponse:
    return AdminOrderListResponse(orders=await order_service.list_all_orders())


@router.patch("/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status(order_id: str, update: OrderStatusUpdate) -> OrderResponse:
    """Move an order to pending, shipped or delivered."""
    order = await order_service.update_status(order_id, update.status)
    return OrderResponse(message="Order status updated successfully", order=order)


# ── Customers and stats ────────────────────────────────────────────────────────


@router.get("/customers", response_model=list[UserResponse])
async def get_all_customers() -> list[UserResponse]:
    users = await user_service.list_users()
    return [UserResponse(**user.model_dump()) for user in users]


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats() -> DashboardStats:
    return await admin_service.dashboard_stats()


# ── Payments ───────────────────────────────────────────────────────────────────


@router.get("/unfulfilled-payments", response_model=list[UnfulfilledPayment])
async def get_unfulfilled_payments() -> list[UnfulfilledPayment]:
    """Succeeded payments that still need a refund or a replay."""
    return await admin_service.unfulfilled_payments()


# ── Categories ─────────────────────────────────────────────────────────────────


@router.get("/categories", response_model=list[CategoryInDB])
async def get_all_categories() -> list[CategoryInDB]:
    return await catalog_service.list_categories()


@router.post("/categories", response_model=CategoryInDB, status_code=status.HTTP_201_CREATED)
async def create_category(category: CategoryCreate) -> CategoryInDB:
    return await catalog_service.create_category(category)


@router.put("/categories/{category_id}", response_model=CategoryInDB)
async def update_category(category_id: str, update: CategoryUpdate) -> CategoryInDB:
    return await catalog_service.update_category(category_id, update)


@router.delete("/categories/{category_id}", response_model=MessageResponse)
async def delete_category(category_id: str) -> MessageResponse:
    """Delete a category no product uses."""
    await catalog_service.delete_category(category_id)
    return MessageResponse(message="Category deleted successfully")


# ── Reviews ────────────────────────────────────────────────────────────────────


@router.get("/reviews", response_model=list[ReviewInDB])
async def get_all_reviews() -> list[ReviewInDB]:
    return await review_service.list_reviews()
