"""Application configuration management using Pydantic Settings."""
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the directory where settings.py is located
BASE_DIR = Path(__file__).resolve().parent

class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application
    app_name: str = "Storefront API"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = Field(default="development", pattern="^(development|staging|production)$")

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_prefix: str = "/api"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:8081"]

    # MongoDB
    mongodb_url: str = Field(default="mongodb://localhost:27017")
    mongodb_database: str = "storefront"
    mongodb_user_collection: str = "users"
    mongodb_product_collection: str = "products"
    mongodb_order_collection: str = "orders"
    mongodb_review_collection: str = "reviews"
    mongodb_category_collection: str = "categories"
    mongodb_cart_collection: str = "carts"
    mongodb_unfulfilled_payment_collection: str = "unfulfilled_payments"
    mongodb_max_pool_size: int = 10
    mongodb_min_pool_size: int = 1

    # Stripe
    stripe_secret_key: str = Field(default="", description="Stripe secret API key")
    stripe_webhook_secret: str = Field(default="", description="Stripe webhook signing secret")
    stripe_currency: str = "usd"
    stripe_webhook_tolerance: int = 300  # seconds

    # Checkout
    checkout_shipping_fee: float = Field(default=10.0, ge=0)
    checkout_tax_rate: float = Field(default=0.08, ge=0)

    # Orders placed on the same calendar day in this zone are merged
    order_merge_timezone: str = "UTC"

    # Catalog
    max_product_images: int = 3

    # Admin
    admin_emails: list[str] = Field(default_factory=list)

    # Rate Limiting
    rate_limit_requests: int = 100
    rate_limit_period: int = 60  # seconds

    # Logging
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_format: str = "json"

    model_config = SettingsConfigDict(
        env_file= BASE_DIR.parent / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("cors_origins", "admin_emails", mode="before")
    @classmethod
    def parse_list(cls, v: str | list[str]) -> list[str]:
        """Parse comma-separated values from string or list."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("order_merge_timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject zone names the tz database does not know."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
