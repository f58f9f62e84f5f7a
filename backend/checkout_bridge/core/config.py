import logging
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Sent to Stripe when no key is configured, so calls fail with an auth error
PLACEHOLDER_SECRET_KEY = "sk_test_xxx"
PLACEHOLDER_PUBLISHABLE_KEY = "pk_test_xxx"


class Settings(BaseSettings):
    port: int = 4242
    host: str = "0.0.0.0"
    client_url: str | None = None
    stripe_secret_key: str | None = None
    stripe_publishable_key: str | None = None
    stripe_webhook_secret: str | None = None
    stripe_api_version: str = "2024-06-20"
    stripe_webhook_tolerance: int = 300
    max_body_size: int = 1_048_576  # 1 MiB
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    @field_validator(
        "client_url",
        "stripe_secret_key",
        "stripe_publishable_key",
        "stripe_webhook_secret",
        mode="before",
    )
    @classmethod
    def _blank_is_missing(cls, value):
        # An empty variable means the same thing as an unset one
        return value or None

    @property
    def base_url(self) -> str:
        return self.client_url or f"http://localhost:{self.port}"

    @property
    def allowed_origins(self) -> list[str]:
        return [self.client_url] if self.client_url else ["*"]

    @property
    def secret_key(self) -> str:
        return self.stripe_secret_key or PLACEHOLDER_SECRET_KEY

    @property
    def publishable_key(self) -> str:
        return self.stripe_publishable_key or PLACEHOLDER_PUBLISHABLE_KEY

    def report_missing(self) -> list[str]:
        """Log every Stripe variable that is not set and return their names."""
        missing = []
        for env_name, value in (
            ("STRIPE_SECRET_KEY", self.stripe_secret_key),
            ("STRIPE_PUBLISHABLE_KEY", self.stripe_publishable_key),
            ("STRIPE_WEBHOOK_SECRET", self.stripe_webhook_secret),
        ):
            if not value:
                logger.error(f"Missing {env_name} in environment")
                missing.append(env_name)
        return missing


@lru_cache
def get_settings() -> Settings:
    return Settings()
