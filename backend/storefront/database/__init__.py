"""Database package."""

from storefront.database.categories import CategoryRepository, category_repository
from storefront.database.mongodb import MongoDB, mongodb
from storefront.database.orders import OrderRepository, order_repository
from storefront.database.payments import (
    UnfulfilledPaymentRepository,
    unfulfilled_payment_repository,
)
from storefront.database.products import ProductRepository, product_repository
from storefront.database.reviews import ReviewRepository, review_repository
from storefront.database.users import (
    CartRepository,
    UserRepository,
    cart_repository,
    user_repository,
)

__all__ = [
    "MongoDB",
    "mongodb",
    "CategoryRepository",
    "category_repository",
    "OrderRepository",
    "order_repository",
    "ProductRepository",
    "product_repository",
    "ReviewRepository",
    "review_repository",
    "UnfulfilledPaymentRepository",
    "unfulfilled_payment_repository",
    "CartRepository",
    "cart_repository",
    "UserRepository",
    "user_repository",
]
