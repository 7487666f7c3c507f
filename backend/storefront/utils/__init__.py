"""Utilities package."""

from storefront.utils.helpers import (
    day_bounds,
    generate_uuid,
    to_cents,
    utc_now,
)
from storefront.utils.logger import setup_logging

__all__ = [
    "setup_logging",
    "generate_uuid",
    "utc_now",
    "day_bounds",
    "to_cents",
]
