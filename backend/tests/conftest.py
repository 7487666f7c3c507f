"""Pytest fixtures for storefront tests."""

import hashlib
import hmac
import json
import os
import time

# Settings are read once at import time, so the environment is fixed first
os.environ["MONGODB_DATABASE"] = "storefront_test"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_storefront"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test_storefront"
os.environ["ADMIN_EMAILS"] = '["admin@example.com"]'
os.environ["RATE_LIMIT_REQUESTS"] = "100000"
os.environ["ORDER_MERGE_TIMEZONE"] = "UTC"
os.environ["LOG_LEVEL"] = "WARNING"

import httpx
import pytest
from mongomock_motor import AsyncMongoMockClient

from storefront.config import get_settings
from storefront.database.mongodb import mongodb
from storefront.database.products import product_repository
from storefront.database.users import user_repository
from storefront.models.order import OrderItem, ShippingAddress
from storefront.models.product import ProductInDB
from storefront.models.user import UserInDB
from storefront.utils.helpers import generate_uuid

settings = get_settings()

ADMIN_EMAIL = "admin@example.com"


@pytest.fixture
async def db():
    """Point the global MongoDB manager at a fresh in-memory database."""
    client = AsyncMongoMockClient()
    mongodb.client = client
    mongodb.db = client[settings.mongodb_database]
    await mongodb.create_indexes()

    yield mongodb.db

    mongodb.client = None
    mongodb.db = None


@pytest.fixture
def make_product(db):
    """Factory inserting a product straight into the database."""

    async def _make(name="Olive Oil", price=10.0, stock=10, category="Pantry", **fields):
        product = ProductInDB(
            productId=fields.pop("productId", generate_uuid()),
            name=name,
            description=fields.pop("description", f"{name} description"),
            price=price,
            stock=stock,
            category=category,
            images=fields.pop("images", [f"https://cdn.example.com/{name.lower().replace(' ', '-')}.jpg"]),
            **fields,
        )
        return await product_repository.create(product)

    return _make


@pytest.fixture
def make_user(db):
    """Factory inserting a user straight into the database."""

    async def _make(external_id="user_1", email="maria@example.com", name="Maria"):
        user = UserInDB(userId=generate_uuid(), externalId=external_id, email=email, name=name)
        return await user_repository.create(user)

    return _make


@pytest.fixture
async def customer(make_user):
    return await make_user()


@pytest.fixture
async def admin(make_user):
    return await make_user(external_id="admin_1", email=ADMIN_EMAIL, name="Admin")


@pytest.fixture
def shipping_address():
    return ShippingAddress(
        fullName="Maria Papadopoulou",
        streetAddress="Ermou 12",
        city="Athens",
        state="Attica",
        zipCode="10563",
        phoneNumber="+302101234567",
    )


@pytest.fixture
async def client(db):
    """HTTP client driving the ASGI app in-process."""
    from storefront.main import app

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def item_for(product, quantity):
    """Order line for ``product`` at its current price."""
    return OrderItem(
        product=product.productId,
        name=product.name,
        price=product.price,
        quantity=quantity,
        image=product.images[0],
    )


def user_headers(user):
    return {"X-User-ID": user.externalId}


def sign_webhook(payload, secret=None, timestamp=None):
    """Build a Stripe-Signature header for ``payload``."""
    secret = secret or settings.stripe_webhook_secret
    timestamp = timestamp or int(time.time())
    signed = f"{timestamp}.{payload}".encode("utf-8")
    digest = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


def payment_succeeded_event(payment_id, metadata):
    """Serialized ``payment_intent.succeeded`` event body."""
    return json.dumps(
        {
            "id": f"evt_{payment_id}",
            "object": "event",
            "type": "payment_intent.succeeded",
            "data": {"object": {"id": payment_id, "object": "payment_intent", "metadata": metadata}},
        }
    )
