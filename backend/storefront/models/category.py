"""Category data models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from storefront.utils.helpers import utc_now


class CategoryCreate(BaseModel):
    """Category creation model."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str = ""
    icon: str = ""
    image: str = Field(default="", description="Image URL on the media host")
    order: int = 0


class CategoryUpdate(BaseModel):
    """Category update model."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    icon: Optional[str] = None
    image: Optional[str] = None
    isActive: Optional[bool] = None
    order: Optional[int] = None


class CategoryInDB(CategoryCreate):
    """Category model as stored in database."""

    categoryId: str
    isActive: bool = True
    createdAt: datetime = Field(default_factory=utc_now)
    updatedAt: datetime = Field(default_factory=utc_now)


class CategorySummary(BaseModel):
    """Category as listed to shoppers."""

    name: str
    icon: str = ""
    image: str = ""
    order: int = 0
