"""Tests for product reviews and the per-order review flag."""

import pytest
from conftest import item_for

from storefront.database.products import product_repository
from storefront.exceptions import ConflictError, InvalidRequestError, NotFoundError
from storefront.models.review import ReviewCreate
from storefront.services.order_service import order_service
from storefront.services.review_service import review_service


@pytest.fixture
async def delivered_order(customer, make_product, shipping_address):
    p1 = await make_product("P1", stock=10)
    p2 = await make_product("P2", stock=10)
    order = await order_service.consolidate(
        user_id=customer.userId,
        external_id=customer.externalId,
        items=[item_for(p1, 1), item_for(p2, 1)],
        shipping_address=shipping_address,
    )
    await order_service.update_status(order.orderId, "delivered")
    return order, p1, p2


class TestCreateReview:
    async def test_review_updates_product_rating(self, customer, delivered_order):
        order, p1, _ = delivered_order

        review = await review_service.create_review(
            customer, ReviewCreate(productId=p1.productId, orderId=order.orderId, rating=4, comment="Good")
        )

        assert review.userId == customer.userId
        product = await product_repository.get(p1.productId)
        assert product.averageRating == 4.0
        assert product.totalReviews == 1

    async def test_average_over_customers(self, customer, make_user, delivered_order, shipping_address):
        order, p1, _ = delivered_order
        other = await make_user("user_nikos", "nikos@example.com")
        other_order = await order_service.consolidate(
            user_id=other.userId,
            external_id=other.externalId,
            items=[item_for(p1, 1)],
            shipping_address=shipping_address,
        )
        await order_service.update_status(other_order.orderId, "delivered")

        await review_service.create_review(
            customer, ReviewCreate(productId=p1.productId, orderId=order.orderId, rating=5)
        )
        await review_service.create_review(
            other, ReviewCreate(productId=p1.productId, orderId=other_order.orderId, rating=2)
        )

        product = await product_repository.get(p1.productId)
        assert product.averageRating == 3.5
        assert product.totalReviews == 2

    async def test_one_review_per_product_per_order(self, customer, delivered_order):
        order, p1, p2 = delivered_order
        await review_service.create_review(
            customer, ReviewCreate(productId=p1.productId, orderId=order.orderId, rating=5)
        )

        with pytest.raises(ConflictError):
            await review_service.create_review(
                customer, ReviewCreate(productId=p1.productId, orderId=order.orderId, rating=1)
            )

        # A different product on the same order is fine
        await review_service.create_review(
            customer, ReviewCreate(productId=p2.productId, orderId=order.orderId, rating=3)
        )
        assert (await product_repository.get(p1.productId)).totalReviews == 1

    async def test_pending_order_cannot_be_reviewed(self, customer, make_product, shipping_address):
        p1 = await make_product("P1")
        order = await order_service.consolidate(
            user_id=customer.userId,
            external_id=customer.externalId,
            items=[item_for(p1, 1)],
            shipping_address=shipping_address,
        )

        with pytest.raises(InvalidRequestError, match="delivered"):
            await review_service.create_review(
                customer, ReviewCreate(productId=p1.productId, orderId=order.orderId, rating=5)
            )

    async def test_product_must_be_on_order(self, customer, make_product, delivered_order):
        order, _, _ = delivered_order
        stranger = await make_product("Stranger")

        with pytest.raises(InvalidRequestError):
            await review_service.create_review(
                customer, ReviewCreate(productId=stranger.productId, orderId=order.orderId, rating=5)
            )

    async def test_someone_elses_order(self, make_user, delivered_order):
        order, p1, _ = delivered_order
        other = await make_user("user_nikos", "nikos@example.com")

        with pytest.raises(NotFoundError):
            await review_service.create_review(
                other, ReviewCreate(productId=p1.productId, orderId=order.orderId, rating=5)
            )


class TestReviewFlag:
    async def test_orders_flag_reviews(self, customer, make_product, delivered_order, shipping_address):
        order, p1, _ = delivered_order
        await review_service.create_review(
            customer, ReviewCreate(productId=p1.productId, orderId=order.orderId, rating=5)
        )
        p3 = await make_product("P3")
        fresh = await order_service.consolidate(
            user_id=customer.userId,
            external_id=customer.externalId,
            items=[item_for(p3, 1)],
            shipping_address=shipping_address,
        )

        orders = await order_service.list_customer_orders(customer.externalId)

        flags = {o.orderId: o.hasReviewed for o in orders}
        assert flags == {order.orderId: True, fresh.orderId: False}

    async def test_reviews_api(self, client, customer, delivered_order):
        order, p1, _ = delivered_order
        headers = {"X-User-ID": customer.externalId}

        created = await client.post(
            "/api/reviews",
            headers=headers,
            json={"productId": p1.productId, "orderId": order.orderId, "rating": 5, "comment": "Great"},
        )
        duplicate = await client.post(
            "/api/reviews",
            headers=headers,
            json={"productId": p1.productId, "orderId": order.orderId, "rating": 4},
        )
        listed = await client.get("/api/orders", headers=headers)

        assert created.status_code == 201
        assert duplicate.status_code == 409
        assert listed.json()["orders"][0]["hasReviewed"] is True

    async def test_rating_out_of_range(self, client, customer, delivered_order):
        order, p1, _ = delivered_order

        response = await client.post(
            "/api/reviews",
            headers={"X-User-ID": customer.externalId},
            json={"productId": p1.productId, "orderId": order.orderId, "rating": 6},
        )

        assert response.status_code == 422
