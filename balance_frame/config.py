from __future__ import annotations

from loguru import logger
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from balance_frame.domain.entities.theme import THEMES, Theme, get_theme
from balance_frame.domain.errors import ConfigurationError
from balance_frame.infrastructure.airstack.airstack_client import AIRSTACK_API_URL


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    # Airstack
    airstack_api_key: str = Field(..., min_length=1, alias="AIRSTACK_API_KEY")
    airstack_api_url: str = Field(default=AIRSTACK_API_URL, alias="AIRSTACK_API_URL")
    airstack_timeout_seconds: float = Field(default=5.0, gt=0, alias="AIRSTACK_TIMEOUT_SECONDS")

    # Frame presentation
    frame_theme: str = Field(default="classic", alias="FRAME_THEME")
    frame_base_url: str | None = Field(default=None, alias="FRAME_BASE_URL")
    asset_timeout_seconds: float = Field(default=3.0, gt=0, alias="ASSET_TIMEOUT_SECONDS")

    # Only trust identities carried in button values / text input when enabled
    allow_carried_identity: bool = Field(default=False, alias="ALLOW_CARRIED_IDENTITY")

    env: str = Field(default="development", alias="ENV")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")

    @field_validator("frame_theme")
    @classmethod
    def _known_theme(cls, value: str) -> str:
        if value.lower() not in THEMES:
            raise ValueError(f"unknown theme '{value}', expected one of {sorted(THEMES)}")
        return value.lower()

    @field_validator("airstack_api_key")
    @classmethod
    def _non_blank_key(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    @property
    def theme(self) -> Theme:
        return get_theme(self.frame_theme)


def load_settings() -> Settings:
    """Read settings from the environment, failing fast when they are invalid."""
    try:
        return Settings()  # type: ignore[call-arg]
    except ValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        logger.error("Invalid configuration ({}): {}", fields, exc)
        raise ConfigurationError(
            f"Invalid configuration for: {fields}"
        ) from exc
