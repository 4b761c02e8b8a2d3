from functools import lru_cache
from typing import Any, List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_CORS = ["http://localhost:3000"]

RAZORPAY_API_BASE = "https://api.razorpay.com/v1"
RAZORPAY_TIMEOUT_SECONDS = 30.0
ORDER_DESCRIPTION = "Wallet topup"


class ConfigurationError(RuntimeError):
    """Raised at startup when required configuration is missing."""


def _parse_cors_origins(v: Any) -> List[str]:
    if v is None or v == "":
        return _DEFAULT_CORS.copy()
    if isinstance(v, list):
        return [x for x in v if isinstance(x, str) and x.strip()]
    s = str(v).strip()
    if not s:
        return _DEFAULT_CORS.copy()
    if s.startswith("["):
        import json
        try:
            out = json.loads(s)
        except ValueError:
            return _DEFAULT_CORS.copy()
        return [x for x in out if isinstance(x, str) and x.strip()] or _DEFAULT_CORS.copy()
    return [x.strip() for x in s.split(",") if x.strip()] or _DEFAULT_CORS.copy()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    # App
    env: str = Field(default="development", description="ENV")
    debug: bool = Field(default=False, description="DEBUG")
    version: str = "1.0.0"

    # Shared secret expected from clients (x-api-key / Bearer)
    api_key: str = Field(default="", alias="API_KEY")

    # Razorpay
    razorpay_key_id: str = Field(default="", alias="RAZORPAY_KEY_ID")
    razorpay_key_secret: str = Field(default="", alias="RAZORPAY_KEY_SECRET")
    razorpay_base_url: str = Field(default=RAZORPAY_API_BASE, alias="RAZORPAY_BASE_URL")
    razorpay_timeout_seconds: float = Field(default=RAZORPAY_TIMEOUT_SECONDS, gt=0, alias="RAZORPAY_TIMEOUT_SECONDS")
    razorpay_environment: str = Field(default="LIVE", alias="RAZORPAY_ENVIRONMENT")

    # Default order notes
    order_description: str = Field(default=ORDER_DESCRIPTION, alias="ORDER_DESCRIPTION")

    # Sentry
    sentry_dsn: str | None = Field(default=None, alias="SENTRY_DSN")

    # CORS: env as string, exposed as list
    cors_origins_raw: str = Field(
        default="http://localhost:3000",
        alias="CORS_ORIGINS",
        description="Comma-separated or JSON list",
    )

    @property
    def cors_origins(self) -> List[str]:
        return _parse_cors_origins(self.cors_origins_raw)

    @property
    def gateway_configured(self) -> bool:
        return bool(self.razorpay_key_id and self.razorpay_key_secret)

    def require_gateway_credentials(self) -> None:
        """Refuse to start without a Razorpay key pair; there are no fallbacks."""
        missing = [
            name
            for name, value in (
                ("RAZORPAY_KEY_ID", self.razorpay_key_id),
                ("RAZORPAY_KEY_SECRET", self.razorpay_key_secret),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")


@lru_cache
def get_settings() -> Settings:
    return Settings()
