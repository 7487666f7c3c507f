"""Tests for the MongoDB layer and logging setup."""

import json
import logging

import pytest
from pymongo.errors import AutoReconnect, DuplicateKeyError

from storefront.config import get_settings
from storefront.database.mongodb import MongoDB, storage_errors
from storefront.database.payments import unfulfilled_payment_repository
from storefront.database.products import product_repository
from storefront.exceptions import StorageError
from storefront.utils.logger import _build_formatter, setup_logging

settings = get_settings()


class TestStorageErrors:
    async def test_driver_errors_become_storage_errors(self):
        @storage_errors
        async def flaky():
            raise AutoReconnect("connection reset")

        with pytest.raises(StorageError, match="connection reset"):
            await flaky()

    async def test_duplicate_keys_pass_through(self):
        @storage_errors
        async def duplicate():
            raise DuplicateKeyError("E11000 duplicate key")

        with pytest.raises(DuplicateKeyError):
            await duplicate()

    async def test_disconnected_database(self):
        with pytest.raises(StorageError, match="not connected"):
            MongoDB().collection("orders")

    async def test_ping_without_client(self):
        assert await MongoDB().ping() is False


class TestStock:
    async def test_conditional_decrement(self, make_product):
        product = await make_product("Bread", stock=3)

        assert await product_repository.decrement_stock(product.productId, 2) is True
        assert await product_repository.decrement_stock(product.productId, 2) is False
        assert (await product_repository.get(product.productId)).stock == 1

    async def test_increment(self, make_product):
        product = await make_product("Bread", stock=3)

        await product_repository.increment_stock(product.productId, 4)

        assert (await product_repository.get(product.productId)).stock == 7


class TestUnfulfilledPayments:
    async def test_record_counts_attempts(self, db):
        await unfulfilled_payment_repository.record("pi_1", {"externalId": "user_1"}, "first")
        await unfulfilled_payment_repository.record("pi_1", {"externalId": "user_1"}, "second")

        [entry] = await unfulfilled_payment_repository.list_open()
        assert entry["attempts"] == 2
        assert entry["error"] == "second"
        assert entry["resolved"] is False


class TestLogging:
    def test_json_records_carry_service(self):
        record = logging.LogRecord("storefront.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)

        payload = json.loads(_build_formatter("json").format(record))

        assert payload["message"] == "hello world"
        assert payload["level"] == "INFO"
        assert payload["service"] == settings.app_name

    def test_text_format(self):
        record = logging.LogRecord("storefront.test", logging.WARNING, __file__, 1, "careful", None, None)

        assert "WARNING - careful" in _build_formatter("text").format(record)

    def test_setup_overrides_level(self):
        root = logging.getLogger()
        previous = root.level
        try:
            setup_logging(level="debug", log_format="text")
            assert root.level == logging.DEBUG
            assert logging.getLogger("pymongo").level == logging.WARNING
        finally:
            setup_logging(level=logging.getLevelName(previous))
