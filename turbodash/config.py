"""Application settings loaded from the environment or a .env file."""

from typing import Literal
from typing import Optional

from pydantic import Field
from pydantic import SecretStr
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

from turbodash.session.config import SessionConfig
from turbodash.types import DEFAULT_TTL


class Settings(BaseSettings):
    """TurboDash settings, read from ``TURBODASH_*`` variables."""

    model_config = SettingsConfigDict(
        env_prefix="TURBODASH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "test", "production"] = "development"
    log_level: str = "INFO"

    session_secret: SecretStr = Field(
        default=SecretStr("development-secret-change-in-production"),
        description="Secret used to sign session cookies (min 32 characters)",
    )
    session_max_age: int = Field(default=7 * 24 * 60 * 60, description="Seconds")

    # When set, sessions and users live in Redis instead of process memory
    redis_url: Optional[str] = None

    kpi_cache_ttl: float = Field(default=DEFAULT_TTL, gt=0)
    kpi_cache_max_entries: Optional[int] = Field(default=None, ge=1)
    user_cache_ttl: float = Field(default=5 * 60, gt=0)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def session_config(self) -> SessionConfig:
        return SessionConfig(
            secret_key=self.session_secret,
            cookie_max_age=self.session_max_age,
            cookie_secure=self.is_production,
        )


def load_settings() -> Settings:
    return Settings()
