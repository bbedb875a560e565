"""Configuration for the Transaction API."""

from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import Account, Category


class Settings(BaseSettings):
    """
    Transaction API configuration.

    All settings can be overridden via environment variables.
    """

    # Service configuration
    SERVICE_NAME: str = Field(default="transaction-api")
    SERVICE_HOST: str = Field(default="0.0.0.0")
    SERVICE_PORT: int = Field(default=8020, ge=1, le=65535)
    DEBUG: bool = Field(default=True)
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    LOG_JSON: bool = Field(default=True)

    # Routing
    API_PREFIX: str = Field(default="")

    # Transaction backend (in-memory store when unset)
    TRANSACTION_SERVICE_URL: Optional[str] = Field(default=None)
    REQUEST_TIMEOUT: float = Field(default=10.0, gt=0)

    # In-memory store seed data, as JSON lists of {"id": ..., "name": ...}
    SEED_ACCOUNTS: List[Account] = Field(default_factory=list)
    SEED_CATEGORIES: List[Category] = Field(default_factory=list)

    # CORS
    CORS_ORIGINS: str = Field(default="http://localhost:8080,http://localhost:3000")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins string into list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
