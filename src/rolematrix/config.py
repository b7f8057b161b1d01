"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rolematrix.core.constants import DEFAULT_ACTIONS, DEFAULT_ROLES


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ROLEMATRIX_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Role Matrix"
    debug: bool = False
    environment: str = "development"  # development, staging, production

    # CORS
    cors_origins: list[str] = []

    # API Documentation
    api_docs_base_url: str = "https://api.example.com"

    # Permission matrix
    roles: list[str] = list(DEFAULT_ROLES)
    actions: list[str] = list(DEFAULT_ACTIONS)
    hierarchy_file: Path | None = None  # YAML; built-in ERP tree when unset
    seed_file: Path | None = None  # YAML with initial grants and visibility

    # Popup dialogs
    popup_session_max_age_seconds: int = 3600  # abandoned Configure dialogs expire
    popup_session_max_count: int = 100

    # Observability
    log_level: str = "INFO"

    @field_validator("roles", "actions")
    @classmethod
    def validate_not_empty(cls, v: list[str]) -> list[str]:
        """Reject empty role or action lists.

        Raises:
            ValueError: If the list is empty or holds blank names
        """
        if not v or any(not item.strip() for item in v):
            raise ValueError("must contain at least one non-blank name")
        return v

    @field_validator("popup_session_max_age_seconds", "popup_session_max_count")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Reject popup session limits that would evict every dialog."""
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize the log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR"}:
            raise ValueError(f"Unsupported log level: {v}")
        return level

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
