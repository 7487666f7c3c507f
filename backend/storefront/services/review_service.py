"""Review service for product ratings left on delivered orders."""

import logging

from storefront.database.orders import order_repository
from storefront.database.products import product_repository
from storefront.database.reviews import review_repository
from storefront.exceptions import InvalidRequestError, NotFoundError
from storefront.models.order import OrderStatus
from storefront.models.review import ReviewCreate, ReviewInDB
from storefront.models.user import UserInDB
from storefront.utils.helpers import generate_uuid

logger = logging.getLogger(__name__)


class ReviewService:
    """Review service for creating and listing reviews."""

    @staticmethod
    async def create_review(user: UserInDB, review: ReviewCreate) -> ReviewInDB:
        """Create a review and refresh the product's rating aggregate.

        Raises:
            NotFoundError: the order does not exist or belongs to someone else
            InvalidRequestError: the order is not delivered or lacks the product
            ConflictError: the user already reviewed this product on this order
        """
        order = await order_repository.get(review.orderId)
        if order is None or order.externalId != user.externalId:
            raise NotFoundError("Order", review.orderId)
        if order.status != OrderStatus.DELIVERED.value:
            raise InvalidRequestError("Can only review delivered orders")
        if not any(item.product == review.productId for item in order.orderItems):
            raise InvalidRequestError("Product not found in this order")

        created = await review_repository.create(
            ReviewInDB(reviewId=generate_uuid(), userId=user.userId, **review.model_dump())
        )

        ratings = await review_repository.ratings_for_product(review.productId)
        average = round(sum(ratings) / len(ratings), 2) if ratings else 0.0
        await product_repository.set_rating(review.productId, average, len(ratings))

        logger.info("Review %s added for product %s", created.reviewId, review.productId)
        return created

    @staticmethod
    async def list_reviews() -> list[ReviewInDB]:
        """List all reviews, newest first."""
        return await review_repository.list_all()


# Global review service instance
review_service = ReviewService()
