"""API request and response models."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from storefront.models.order import (
    OrderInDB,
    OrderItem,
    OrderWithReviewStatus,
    PaymentResult,
    ShippingAddress,
)
from storefront.models.product import ProductInDB
from storefront.models.user import CartItem


class OrderCreateRequest(BaseModel):
    """Direct order creation from the storefront."""

    orderItems: list[OrderItem] = Field(default_factory=list)
    shippingAddress: ShippingAddress
    paymentResult: Optional[PaymentResult] = None
    totalPrice: Optional[float] = Field(None, ge=0)

    model_config = {
        "json_schema_extra": {
            "example": {
                "orderItems": [
                    {
                        "product": "9c1e2d3f-4a5b-6c7d-8e9f-0a1b2c3d4e5f",
                        "name": "Greek Olive Oil 1L",
                        "price": 10.0,
                        "quantity": 2,
                        "image": "https://res.cloudinary.com/demo/image/upload/products/olive-oil.jpg",
                    }
                ],
                "shippingAddress": {
                    "fullName": "Maria Papadopoulou",
                    "streetAddress": "Ermou 12",
                    "city": "Athens",
                    "state": "Attica",
                    "zipCode": "10563",
                    "phoneNumber": "+302101234567",
                },
                "totalPrice": 31.6,
            }
        }
    }


class OrderResponse(BaseModel):
    """Single order response."""

    message: str
    order: OrderInDB


class OrderListResponse(BaseModel):
    """Customer order listing."""

    orders: list[OrderWithReviewStatus]


class AdminOrderListResponse(BaseModel):
    """Admin order listing."""

    orders: list[OrderInDB]


class OrderStatusUpdate(BaseModel):
    """Admin status change.

    ``status`` is a plain string so unknown values reach the service and are
    reported as an invalid status instead of a schema error.
    """

    status: str


class PaymentIntentRequest(BaseModel):
    """Checkout request that starts a card payment."""

    cartItems: list[CartItem] = Field(default_factory=list)
    shippingAddress: ShippingAddress


class PaymentIntentResponse(BaseModel):
    """Client secret the storefront hands to the payment sheet."""

    clientSecret: str


class WebhookAck(BaseModel):
    """Acknowledgement returned to the payment processor."""

    received: bool = True


class WishlistRequest(BaseModel):
    """Wishlist add request."""

    productId: str = Field(..., min_length=1)


class WishlistResponse(BaseModel):
    """Wishlisted products."""

    wishlist: list[ProductInDB]


class CartQuantityUpdate(BaseModel):
    """New quantity for a cart line."""

    quantity: int = Field(..., ge=1)


class DashboardStats(BaseModel):
    """Admin dashboard totals."""

    totalRevenue: float
    totalOrders: int
    totalCustomers: int
    totalProducts: int


class UnfulfilledPayment(BaseModel):
    """A succeeded payment no order could be written for."""

    paymentId: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    error: str
    attempts: int = 1
    resolved: bool = False
    createdAt: datetime
    updatedAt: datetime


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    services: dict[str, str]
