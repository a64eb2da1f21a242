"""Settings and configuration."""
from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings

DEV_APP_SECRET = "dev-secret-do-not-use-in-prod-01234567890123456789012345678901"


class Settings(BaseSettings):
    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    mode: str = "dev"  # dev, prod
    log_level: str = "INFO"
    cors_allowed_origins: List[str] = ["*"]

    # Security
    # Padded/truncated to the 32-byte AES-256 key; must stay stable across
    # deploys or every issued token becomes unreadable.
    app_secret: str = DEV_APP_SECRET

    # Credentials shorter than this are rejected before reaching Kraken
    min_credential_length: int = Field(default=10, ge=0)

    # Kraken
    kraken_api_url: str = "https://api.kraken.com"
    kraken_timeout_seconds: float = 10.0

    model_config = {
        "env_file": ".env",
        "extra": "ignore"
    }

    @property
    def is_prod(self) -> bool:
        return self.mode.lower() == "prod"

    @property
    def uses_dev_secret(self) -> bool:
        return self.app_secret == DEV_APP_SECRET


@lru_cache()
def get_settings() -> Settings:
    """Load settings from the environment once per process."""
    return Settings()
