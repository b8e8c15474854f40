"""
Process configuration.

All values come from the environment (or a local .env file) and are read once.
The Settings object is frozen; handlers receive it through get_settings().
"""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from app.errors import ConfigurationError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, frozen=True)

    service_name: str = "shopantik-payment-relay"
    port: int = 3030

    frontend_url: str = "http://localhost:3000"
    backend_url: str = "http://localhost:3030"

    # SSLCommerz
    sslc_store_id: str = ""
    sslc_store_password: str = ""
    is_live: bool = False
    gateway_timeout_seconds: float = 30.0

    # Session request defaults
    currency: str = "BDT"
    country: str = "Bangladesh"
    product_category: str = "Books"
    product_profile: str = "physical-goods"
    shipping_method: str = "Courier"

    # Order store
    database_url: str = "sqlite:///./orders.db"

    # Fulfillment hooks (empty = log only)
    confirmation_webhook_url: str = ""
    inventory_service_url: str = ""

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def mode(self) -> str:
        return "live" if self.is_live else "sandbox"


def check_live_credentials(settings: Settings) -> None:
    """
    Refuse to run live with sandbox credentials.

    Raises:
        ConfigurationError: live mode is on and the store id or password contains "test"
    """
    if not settings.is_live:
        return
    if "test" in settings.sslc_store_id or "test" in settings.sslc_store_password:
        raise ConfigurationError("Using sandbox credentials in live mode!")


@lru_cache
def get_settings() -> Settings:
    return Settings()
