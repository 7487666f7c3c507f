"""User, address and cart data models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from storefront.utils.helpers import utc_now


class AddressBase(BaseModel):
    """Fields shared by every address payload."""

    label: str = Field(..., min_length=1, max_length=50, description="e.g. 'Home' or 'Work'")
    fullName: str = Field(..., min_length=1, max_length=100)
    streetAddress: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zipCode: str = Field(..., min_length=1, max_length=20)
    phoneNumber: str = Field(..., pattern=r"^\+?\d{7,15}$")


class AddressCreate(AddressBase):
    """Address creation model."""

    isDefault: bool = False


class AddressUpdate(BaseModel):
    """Address update model."""

    label: Optional[str] = Field(None, min_length=1, max_length=50)
    fullName: Optional[str] = Field(None, min_length=1, max_length=100)
    streetAddress: Optional[str] = Field(None, min_length=1)
    city: Optional[str] = Field(None, min_length=1)
    state: Optional[str] = Field(None, min_length=1)
    zipCode: Optional[str] = Field(None, min_length=1, max_length=20)
    phoneNumber: Optional[str] = Field(None, pattern=r"^\+?\d{7,15}$")
    isDefault: Optional[bool] = None


class Address(AddressCreate):
    """Address as stored on the user document."""

    addressId: str


class UserBase(BaseModel):
    """Base user model."""

    externalId: str = Field(..., min_length=1, description="Identity-provider user id")
    email: EmailStr
    name: str = Field(default="", max_length=200)
    imageUrl: str = ""


class UserCreate(UserBase):
    """User creation model, sent when the identity provider registers a user."""

    model_config = {
        "json_schema_extra": {
            "example": {
                "externalId": "user_2abcXYZ",
                "email": "maria@example.com",
                "name": "Maria Papadopoulou",
                "imageUrl": "https://img.clerk.com/avatar.png",
            }
        }
    }


class UserInDB(UserBase):
    """User model as stored in database."""

    userId: str
    addresses: list[Address] = Field(default_factory=list)
    wishlist: list[str] = Field(default_factory=list, description="Wishlisted productIds")
    stripeCustomerId: Optional[str] = None
    createdAt: datetime = Field(default_factory=utc_now)
    updatedAt: datetime = Field(default_factory=utc_now)


class UserResponse(UserBase):
    """User response model."""

    userId: str
    addresses: list[Address]
    wishlist: list[str]
    createdAt: datetime
    updatedAt: datetime


class CartItem(BaseModel):
    """Product and quantity held in a cart."""

    productId: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)


class Cart(BaseModel):
    """Customer cart as stored in database."""

    externalId: str
    items: list[CartItem] = Field(default_factory=list)
    updatedAt: datetime = Field(default_factory=utc_now)
