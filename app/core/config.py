from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Dict, List
from dotenv import load_dotenv

from app.core.exceptions import ConfigurationError

load_dotenv('.env.local')

class Settings(BaseSettings):
    # Environment
    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=False)

    # FastAPI
    API_V1_STR: str = Field(default="/api/v1")

    # Stripe
    STRIPE_SECRET_KEY: str = Field(default="")
    STRIPE_WEBHOOK_SECRET: str = Field(default="")
    STRIPE_API_VERSION: str = Field(default="2023-10-16")

    # Checkout
    CHECKOUT_CURRENCY: str = Field(default="usd")
    CHECKOUT_LOCALE: str = Field(default="en")
    CHECKOUT_SUCCESS_URL: str = Field(default="https://jmefit.com/checkout/success")
    CHECKOUT_CANCEL_URL: str = Field(default="https://jmefit.com/checkout/canceled")
    PAYMENT_METHOD_TYPES: List[str] = Field(default=["card", "link", "cashapp"])
    SUBSCRIPTION_PAYMENT_METHOD_TYPES: List[str] = Field(default=["card"])

    # Price ids that are billed as subscriptions even when Stripe has them as one-time prices.
    # JSON object in the environment, e.g. {"price_123": "month"}
    SUBSCRIPTION_PRICE_INTERVALS: Dict[str, str] = Field(default_factory=dict)

    # Product sync
    SYNC_PRODUCT_IDS: List[str] = Field(default_factory=list)
    PUBLIC_BASE_URL: str = Field(default="https://jmefit.com")

    # Supabase
    SUPABASE_URL: str = Field(default="")
    SUPABASE_SERVICE_ROLE_KEY: str = Field(default="")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="console")

    # CORS
    BACKEND_CORS_ORIGINS: str = Field(default="http://localhost:3000,http://localhost:5173")


    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.BACKEND_CORS_ORIGINS.split(",")]

    @property
    def webhook_url(self) -> str:
        return self.PUBLIC_BASE_URL.rstrip("/") + self.API_V1_STR + "/webhook"

    def require(self, *names: str) -> None:
        """Raise ConfigurationError naming every listed setting that is empty."""
        missing = [name for name in names if not getattr(self, name)]
        if missing:
            raise ConfigurationError(
                f"{', '.join(missing)} is required but was not provided in environment variables"
            )

    def validate_required(self) -> None:
        from app.core.utils.price_catalog import SubscriptionPriceCatalog

        self.require("STRIPE_SECRET_KEY")
        SubscriptionPriceCatalog.from_settings(self)


    model_config = SettingsConfigDict(
        env_file=".env.local",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
