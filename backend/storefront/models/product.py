"""Product data models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from storefront.utils.helpers import utc_now


class UnitType(str, Enum):
    """Unit a product is sold in."""

    PIECES = "pieces"
    KG = "kg"
    LITERS = "liters"


class ProductBase(BaseModel):
    """Base product model."""

    name: str = Field(..., min_length=1, max_length=500)
    description: str = Field(..., min_length=1)
    price: Optional[float] = Field(None, ge=0, description="Unit price; None hides the product from checkout")
    showPrice: bool = True
    stock: int = Field(..., ge=0)
    category: str = Field(..., min_length=1, max_length=200)
    images: list[str] = Field(default_factory=list, description="Image URLs on the media host")
    unitType: UnitType = UnitType.PIECES
    unitOptions: list[str] = Field(default_factory=list)


class ProductCreate(ProductBase):
    """Product creation model."""

    price: float = Field(..., gt=0)
    stock: int = Field(..., gt=0)
    images: list[str] = Field(..., min_length=1)

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Greek Olive Oil 1L",
                "description": "Extra virgin, cold pressed.",
                "price": 10.0,
                "stock": 40,
                "category": "Pantry",
                "images": ["https://res.cloudinary.com/demo/image/upload/products/olive-oil.jpg"],
                "unitType": "liters",
                "unitOptions": ["1L", "5L"],
            }
        }
    }


class ProductUpdate(BaseModel):
    """Product update model; only supplied fields change."""

    name: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    showPrice: Optional[bool] = None
    stock: Optional[int] = Field(None, ge=0)
    category: Optional[str] = Field(None, min_length=1, max_length=200)
    images: Optional[list[str]] = Field(None, min_length=1)
    unitType: Optional[UnitType] = None
    unitOptions: Optional[list[str]] = None


class ProductInDB(ProductBase):
    """Product model as stored in database."""

    model_config = {"use_enum_values": True, "validate_default": True}

    productId: str = Field(..., description="Unique product identifier")
    averageRating: float = Field(default=0.0, ge=0, le=5)
    totalReviews: int = Field(default=0, ge=0)
    createdAt: datetime = Field(default_factory=utc_now)
    updatedAt: datetime = Field(default_factory=utc_now)
