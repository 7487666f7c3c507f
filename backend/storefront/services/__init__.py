"""Services package."""

from storefront.services.admin_service import AdminService, admin_service
from storefront.services.catalog_service import CatalogService, catalog_service
from storefront.services.order_service import OrderService, order_service
from storefront.services.payment_service import PaymentService, payment_service
from storefront.services.review_service import ReviewService, review_service
from storefront.services.stripe_client import StripeClient, stripe_client
from storefront.services.user_service import UserService, user_service

__all__ = [
    "AdminService",
    "admin_service",
    "CatalogService",
    "catalog_service",
    "OrderService",
    "order_service",
    "PaymentService",
    "payment_service",
    "ReviewService",
    "review_service",
    "StripeClient",
    "stripe_client",
    "UserService",
    "user_service",
]
