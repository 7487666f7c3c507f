"""Domain exceptions raised by the storefront services."""

from typing import Optional


class StorefrontError(Exception):
    """Base exception for all storefront errors."""

    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidRequestError(StorefrontError):
    """Raised when a request is empty or malformed."""

    status_code = 400


class NotFoundError(StorefrontError):
    """Raised when a referenced entity does not exist."""

    status_code = 404

    def __init__(self, entity: str, identifier: str):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} {identifier} not found")


class OutOfStockError(StorefrontError):
    """Raised when a product cannot cover the requested quantity."""

    status_code = 400

    def __init__(self, product_name: str, available: Optional[int] = None):
        self.product_name = product_name
        self.available = available
        super().__init__(f"Insufficient stock for {product_name}")


class InvalidStatusError(StorefrontError):
    """Raised when an order status is not one of the known values."""

    status_code = 400

    def __init__(self, status: str):
        self.status = status
        super().__init__(f"Invalid status: {status}")


class ConflictError(StorefrontError):
    """Raised when a write would violate a uniqueness rule."""

    status_code = 409


class StorageError(StorefrontError):
    """Raised when the database is unreachable or a write fails."""

    status_code = 503


class PaymentError(StorefrontError):
    """Raised when the payment processor rejects or fails a call."""

    status_code = 502
