"""Order data models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from storefront.utils.helpers import utc_now


class OrderStatus(str, Enum):
    """Order lifecycle states, in shipping order."""

    PENDING = "pending"
    SHIPPED = "shipped"
    DELIVERED = "delivered"


class OrderItem(BaseModel):
    """Line item in an order.

    ``name``, ``price`` and ``image`` are snapshots taken when the item was
    ordered and do not follow later catalog edits.
    """

    product: str = Field(..., min_length=1, description="Referenced productId")
    name: str = Field(..., description="Product name at order time")
    price: float = Field(..., ge=0, description="Unit price at order time")
    quantity: int = Field(..., ge=1, description="Quantity ordered")
    image: str = Field(default="", description="Product image URL at order time")


class ShippingAddress(BaseModel):
    """Shipping address copied into the order."""

    fullName: str
    streetAddress: str
    city: str
    state: str
    zipCode: str
    phoneNumber: str


class PaymentResult(BaseModel):
    """Payment reference attached to an order."""

    id: str = Field(..., description="Payment processor reference")
    status: str = Field(..., description="Payment status, e.g. 'pending' or 'succeeded'")


class OrderInDB(BaseModel):
    """Order model as stored in database."""

    model_config = ConfigDict(
        use_enum_values=True,
        validate_default=True,
        json_schema_extra={
            "example": {
                "orderId": "5b0f7a3e-2f57-4e8a-9a55-0b1c3f9d2e11",
                "userId": "0d6f6b8e-7a0b-4c55-8f0e-7f0b5d2a1c33",
                "externalId": "user_2abcXYZ",
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
                "paymentResult": {"id": "pi_3Nabc", "status": "succeeded"},
                "totalPrice": 20.0,
                "status": "pending",
            }
        },
    )

    orderId: str = Field(..., description="Unique order identifier")
    userId: str = Field(..., description="Internal id of the customer")
    externalId: str = Field(..., description="Identity-provider id of the customer")
    orderItems: list[OrderItem] = Field(..., min_length=1)
    shippingAddress: ShippingAddress
    paymentResult: PaymentResult
    paymentIds: list[str] = Field(
        default_factory=list,
        description="Every payment reference consolidated into this order",
    )
    totalPrice: float = Field(..., ge=0)
    status: OrderStatus = OrderStatus.PENDING
    shippedAt: Optional[datetime] = None
    deliveredAt: Optional[datetime] = None
    createdAt: datetime = Field(default_factory=utc_now)
    updatedAt: datetime = Field(default_factory=utc_now)


class OrderWithReviewStatus(OrderInDB):
    """Order as shown to its customer."""

    hasReviewed: bool = False
