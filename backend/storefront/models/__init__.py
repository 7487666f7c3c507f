"""Data models package."""

from storefront.models.category import (
    CategoryCreate,
    CategoryInDB,
    CategorySummary,
    CategoryUpdate,
)
from storefront.models.order import (
    OrderInDB,
    OrderItem,
    OrderStatus,
    OrderWithReviewStatus,
    PaymentResult,
    ShippingAddress,
)
from storefront.models.product import ProductCreate, ProductInDB, ProductUpdate, UnitType
from storefront.models.review import ReviewCreate, ReviewInDB
from storefront.models.user import (
    Address,
    AddressCreate,
    AddressUpdate,
    Cart,
    CartItem,
    UserCreate,
    UserInDB,
    UserResponse,
)

__all__ = [
    # Order models
    "OrderInDB",
    "OrderItem",
    "OrderStatus",
    "OrderWithReviewStatus",
    "PaymentResult",
    "ShippingAddress",
    # Product models
    "ProductCreate",
    "ProductInDB",
    "ProductUpdate",
    "UnitType",
    # Category models
    "CategoryCreate",
    "CategoryInDB",
    "CategorySummary",
    "CategoryUpdate",
    # Review models
    "ReviewCreate",
    "ReviewInDB",
    # User models
    "Address",
    "AddressCreate",
    "AddressUpdate",
    "Cart",
    "CartItem",
    "UserCreate",
    "UserInDB",
    "UserResponse",
]
