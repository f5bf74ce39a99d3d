"""Pagination helper settings loaded from environment."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_PACKAGE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Runtime settings shared by the helpers and the demo app."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PAGELINKS_",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "pagelinks"
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    param_name: str = "page"
    params_on_first_page: bool = False
    window: int = Field(default=4, ge=0)
    outer_window: int = Field(default=0, ge=0)
    left: int = Field(default=0, ge=0)
    right: int = Field(default=0, ge=0)

    default_per_page: int = Field(default=25, ge=1)
    max_per_page: int = Field(default=100, ge=1)

    default_locale: str = "en"
    views_dir: Path = _PACKAGE_DIR / "views"

    @field_validator("param_name", mode="before")
    @classmethod
    def normalize_param_name(cls, value: object) -> object:
        """Strip whitespace and reject an empty page parameter name."""
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValueError("PAGELINKS_PARAM_NAME must not be empty")
        return value

    @field_validator("default_locale", mode="before")
    @classmethod
    def normalize_locale(cls, value: object) -> object:
        """Normalize locale token for case-insensitive env parsing."""
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @model_validator(mode="after")
    def validate_per_page_bounds(self) -> "Settings":
        """Keep the default page size inside the allowed maximum."""
        if self.default_per_page > self.max_per_page:
            raise ValueError(
                "PAGELINKS_DEFAULT_PER_PAGE must not exceed PAGELINKS_MAX_PER_PAGE",
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
