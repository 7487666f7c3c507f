"""Review data models."""

from datetime import datetime

from pydantic import BaseModel, Field

from storefront.utils.helpers import utc_now


class ReviewCreate(BaseModel):
    """Review submitted by a customer for a product in one of their orders."""

    productId: str = Field(..., min_length=1)
    orderId: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(default="", max_length=1000)


class ReviewInDB(ReviewCreate):
    """Review model as stored in database."""

    reviewId: str
    userId: str
    createdAt: datetime = Field(default_factory=utc_now)
