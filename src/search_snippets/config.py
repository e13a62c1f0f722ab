"""Centralized configuration for search-snippets using Pydantic Settings."""

from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strictly typed configuration loaded from ``SEARCH_SNIPPETS_*`` environment variables.

    The window constants control how much context surrounds each match. Both
    paddings must stay below ``max_chars`` so the space lookup has room to
    search before falling back to a fixed offset.
    """

    model_config = SettingsConfigDict(
        env_prefix="SEARCH_SNIPPETS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Window settings
    prev_chars: int = Field(default=30, ge=0, description="Characters of context looked back from each match")
    next_chars: int = Field(default=50, ge=0, description="Characters of context looked ahead from each match")
    max_chars: int = Field(
        default=200,
        ge=1,
        description="Distance beyond which a found space is ignored and the fixed padding is used instead",
    )

    # Result settings
    result_cap: int = Field(default=100, ge=1, description="Maximum highlights rendered across all pages")
    highlight_style: Literal["plain", "html"] = Field(
        default="plain", description="Markup used when rendering highlights: [[term]] or <span> elements"
    )

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    @model_validator(mode="after")
    def _check_window_bounds(self) -> "Settings":
        if self.prev_chars >= self.max_chars:
            raise ValueError(
                f"SEARCH_SNIPPETS_PREV_CHARS ({self.prev_chars}) must be smaller than "
                f"SEARCH_SNIPPETS_MAX_CHARS ({self.max_chars})"
            )
        if self.next_chars >= self.max_chars:
            raise ValueError(
                f"SEARCH_SNIPPETS_NEXT_CHARS ({self.next_chars}) must be smaller than "
                f"SEARCH_SNIPPETS_MAX_CHARS ({self.max_chars})"
            )
        return self
