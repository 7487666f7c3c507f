"""Tests for checkout payments and the Stripe webhook."""

import json
from types import SimpleNamespace

import pytest
import stripe
from conftest import item_for, payment_succeeded_event, sign_webhook, user_headers

from storefront.database.orders import order_repository
from storefront.database.payments import unfulfilled_payment_repository
from storefront.database.products import product_repository
from storefront.database.users import cart_repository, user_repository
from storefront.exceptions import PaymentError
from storefront.models.user import CartItem
from storefront.services.stripe_client import StripeClient, stripe_client

WEBHOOK_URL = "/api/payment/webhook"
INTENT_URL = "/api/payment/create-intent"


@pytest.fixture
def stripe_calls(monkeypatch):
    """Replace the Stripe client's network calls and record their arguments."""
    calls = {}

    async def get_or_create_customer(customer_id, *, email, name, metadata):
        calls["customer"] = {"customer_id": customer_id, "email": email, "metadata": metadata}
        return customer_id or "cus_test_1"

    async def create_payment_intent(*, amount_cents, customer_id, metadata):
        calls["intent"] = {"amount_cents": amount_cents, "customer_id": customer_id, "metadata": metadata}
        return "pi_test_1_secret_abc"

    monkeypatch.setattr(stripe_client, "get_or_create_customer", get_or_create_customer)
    monkeypatch.setattr(stripe_client, "create_payment_intent", create_payment_intent)
    return calls


def metadata_for(user, items, address, total="31.60"):
    return {
        "userId": user.userId,
        "externalId": user.externalId,
        "orderItems": json.dumps([item.model_dump() for item in items]),
        "shippingAddress": address.model_dump_json(),
        "totalPrice": total,
    }


async def post_event(client, body, signature=None):
    return await client.post(
        WEBHOOK_URL,
        content=body,
        headers={
            "Content-Type": "application/json",
            "Stripe-Signature": signature if signature is not None else sign_webhook(body),
        },
    )


class TestCreatePaymentIntent:
    async def test_total_includes_shipping_and_tax(
        self, client, customer, make_product, shipping_address, stripe_calls
    ):
        p1 = await make_product("P1", price=10.0, stock=5)

        response = await client.post(
            INTENT_URL,
            headers=user_headers(customer),
            json={
                "cartItems": [{"productId": p1.productId, "quantity": 2}],
                "shippingAddress": shipping_address.model_dump(),
            },
        )

        assert response.status_code == 200
        assert response.json() == {"clientSecret": "pi_test_1_secret_abc"}
        # 20.00 subtotal + 10.00 shipping + 1.60 tax
        assert stripe_calls["intent"]["amount_cents"] == 3160
        metadata = stripe_calls["intent"]["metadata"]
        assert metadata["totalPrice"] == "31.60"
        assert metadata["externalId"] == customer.externalId
        items = json.loads(metadata["orderItems"])
        assert items[0]["product"] == p1.productId
        assert items[0]["price"] == 10.0
        assert items[0]["quantity"] == 2

    async def test_stripe_customer_is_remembered(
        self, client, customer, make_product, shipping_address, stripe_calls
    ):
        p1 = await make_product("P1")
        body = {
            "cartItems": [{"productId": p1.productId, "quantity": 1}],
            "shippingAddress": shipping_address.model_dump(),
        }

        await client.post(INTENT_URL, headers=user_headers(customer), json=body)
        stored = await user_repository.get_by_external_id(customer.externalId)
        assert stored.stripeCustomerId == "cus_test_1"

        await client.post(INTENT_URL, headers=user_headers(customer), json=body)
        assert stripe_calls["customer"]["customer_id"] == "cus_test_1"

    async def test_empty_cart(self, client, customer, shipping_address, stripe_calls):
        response = await client.post(
            INTENT_URL,
            headers=user_headers(customer),
            json={"cartItems": [], "shippingAddress": shipping_address.model_dump()},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Cart is empty"
        assert "intent" not in stripe_calls

    async def test_insufficient_stock(self, client, customer, make_product, shipping_address, stripe_calls):
        p1 = await make_product("P1", stock=1)

        response = await client.post(
            INTENT_URL,
            headers=user_headers(customer),
            json={
                "cartItems": [{"productId": p1.productId, "quantity": 4}],
                "shippingAddress": shipping_address.model_dump(),
            },
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Insufficient stock for P1"

    async def test_unknown_product(self, client, customer, shipping_address, stripe_calls):
        response = await client.post(
            INTENT_URL,
            headers=user_headers(customer),
            json={
                "cartItems": [{"productId": "missing", "quantity": 1}],
                "shippingAddress": shipping_address.model_dump(),
            },
        )

        assert response.status_code == 404

    async def test_provider_failure(self, client, customer, make_product, shipping_address, monkeypatch):
        p1 = await make_product("P1")

        async def unavailable(*args, **kwargs):
            raise PaymentError("Payment provider unavailable")

        monkeypatch.setattr(stripe_client, "get_or_create_customer", unavailable)

        response = await client.post(
            INTENT_URL,
            headers=user_headers(customer),
            json={
                "cartItems": [{"productId": p1.productId, "quantity": 1}],
                "shippingAddress": shipping_address.model_dump(),
            },
        )

        assert response.status_code == 502


class TestStripeClient:
    async def test_sdk_errors_become_payment_errors(self, monkeypatch):
        def boom(**kwargs):
            raise stripe.StripeError("card network down")

        monkeypatch.setattr(stripe.PaymentIntent, "create", boom)

        with pytest.raises(PaymentError):
            await StripeClient().create_payment_intent(
                amount_cents=1000, customer_id="cus_1", metadata={}
            )

    async def test_creates_customer_when_unset(self, monkeypatch):
        created = {}

        def create(**kwargs):
            created.update(kwargs)
            return SimpleNamespace(id="cus_new")

        monkeypatch.setattr(stripe.Customer, "create", create)

        customer_id = await StripeClient().get_or_create_customer(
            None, email="maria@example.com", name="Maria", metadata={"externalId": "user_1"}
        )

        assert customer_id == "cus_new"
        assert created["email"] == "maria@example.com"


class TestWebhook:
    async def test_payment_creates_order_and_clears_cart(
        self, client, customer, make_product, shipping_address
    ):
        p1 = await make_product("P1", price=10.0, stock=5)
        await cart_repository.save_items(customer.externalId, [CartItem(productId=p1.productId, quantity=2)])
        body = payment_succeeded_event("pi_100", metadata_for(customer, [item_for(p1, 2)], shipping_address))

        response = await post_event(client, body)

        assert response.status_code == 200
        assert response.json() == {"received": True}
        order = await order_repository.find_by_payment("pi_100")
        assert order is not None
        assert order.totalPrice == 31.6
        assert order.paymentResult.status == "succeeded"
        assert (await product_repository.get(p1.productId)).stock == 3
        assert (await cart_repository.get(customer.externalId)).items == []

    async def test_redelivery_is_a_no_op(self, client, customer, make_product, shipping_address):
        p1 = await make_product("P1", stock=5)
        body = payment_succeeded_event("pi_200", metadata_for(customer, [item_for(p1, 2)], shipping_address))

        await post_event(client, body)
        response = await post_event(client, body)

        assert response.status_code == 200
        orders = await order_repository.list_for_customer(customer.externalId)
        assert len(orders) == 1
        assert orders[0].orderItems[0].quantity == 2
        assert (await product_repository.get(p1.productId)).stock == 3

    async def test_redelivery_keeps_newer_cart(self, client, customer, make_product, shipping_address):
        p1 = await make_product("P1", stock=5)
        p2 = await make_product("P2", stock=5)
        body = payment_succeeded_event("pi_210", metadata_for(customer, [item_for(p1, 1)], shipping_address))

        await post_event(client, body)
        await cart_repository.save_items(customer.externalId, [CartItem(productId=p2.productId, quantity=2)])
        response = await post_event(client, body)

        assert response.status_code == 200
        cart = await cart_repository.get(customer.externalId)
        assert [(i.productId, i.quantity) for i in cart.items] == [(p2.productId, 2)]

    async def test_event_without_data_acknowledged(self, client, db):
        body = json.dumps({"id": "evt_2", "type": "payment_intent.succeeded", "data": None})

        response = await post_event(client, body)

        assert response.status_code == 200
        assert response.json() == {"received": True}
        assert await order_repository.count() == 0
        open_payments = await unfulfilled_payment_repository.list_open()
        assert open_payments[0]["error"] == "Payment intent has no id"

    async def test_second_payment_same_day_merges(self, client, customer, make_product, shipping_address):
        p1 = await make_product("P1", stock=10)
        p2 = await make_product("P2", price=5.0, stock=10)

        await post_event(client, payment_succeeded_event("pi_1", metadata_for(customer, [item_for(p1, 1)], shipping_address)))
        await post_event(client, payment_succeeded_event("pi_2", metadata_for(customer, [item_for(p2, 2)], shipping_address)))

        orders = await order_repository.list_for_customer(customer.externalId)
        assert len(orders) == 1
        assert orders[0].paymentIds == ["pi_1", "pi_2"]
        assert orders[0].totalPrice == 20.0

    async def test_bad_signature_rejected(self, client, customer, make_product, shipping_address):
        p1 = await make_product("P1")
        body = payment_succeeded_event("pi_300", metadata_for(customer, [item_for(p1, 1)], shipping_address))

        response = await post_event(client, body, signature=sign_webhook(body, secret="whsec_wrong"))

        assert response.status_code == 400
        assert response.json()["error"].startswith("Webhook Error")
        assert await order_repository.find_by_payment("pi_300") is None

    async def test_missing_signature_rejected(self, client):
        response = await post_event(client, payment_succeeded_event("pi_301", {}), signature="")

        assert response.status_code == 400

    async def test_other_events_acknowledged(self, client, db):
        body = json.dumps({"id": "evt_1", "type": "payment_intent.created", "data": {"object": {"id": "pi_400"}}})

        response = await post_event(client, body)

        assert response.status_code == 200
        assert response.json() == {"received": True}
        assert await order_repository.count() == 0

    async def test_malformed_metadata_recorded(self, client, customer):
        body = payment_succeeded_event("pi_500", {"userId": customer.userId, "externalId": customer.externalId})

        response = await post_event(client, body)

        assert response.status_code == 200
        open_payments = await unfulfilled_payment_repository.list_open()
        assert [p["paymentId"] for p in open_payments] == ["pi_500"]
        assert "Malformed payment metadata" in open_payments[0]["error"]

    async def test_out_of_stock_after_payment_recorded(
        self, client, customer, make_product, shipping_address
    ):
        p1 = await make_product("P1", stock=1)
        body = payment_succeeded_event("pi_600", metadata_for(customer, [item_for(p1, 3)], shipping_address))

        await post_event(client, body)
        response = await post_event(client, body)

        assert response.status_code == 200
        assert await order_repository.count() == 0
        assert (await product_repository.get(p1.productId)).stock == 1
        open_payments = await unfulfilled_payment_repository.list_open()
        assert len(open_payments) == 1
        assert open_payments[0]["attempts"] == 2
        assert open_payments[0]["error"] == "Insufficient stock for P1"
