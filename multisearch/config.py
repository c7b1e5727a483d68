"""Runtime configuration based on environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AnyHttpUrl, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SearchSettings(BaseModel):
    stackoverflow_api_url: AnyHttpUrl = Field(
        default="https://api.stackexchange.com/2.3/search/advanced",
        description="Stack Exchange advanced search endpoint.",
    )
    stackoverflow_site: str = Field(default="stackoverflow", min_length=1)
    wikipedia_api_url: AnyHttpUrl = Field(default="https://en.wikipedia.org/w/api.php")
    wikipedia_article_base_url: str = Field(
        default="https://en.wikipedia.org/wiki/",
        description="Prefix joined with the encoded article title.",
    )
    spotify_search_base_url: str = Field(default="https://open.spotify.com/search/")
    page_size: int = Field(default=10, ge=1, le=50)
    description_char_limit: int = Field(default=200, ge=1)
    mock_delay_seconds: float = Field(default=0.8, ge=0)
    request_timeout_seconds: int = Field(default=10, ge=1, le=60)
    user_agent: str = "multisearch-bot/0.1"

    @field_validator("wikipedia_article_base_url", "spotify_search_base_url")
    @classmethod
    def _ensure_trailing_slash(cls, value: str) -> str:
        return value if value.endswith("/") else f"{value}/"


class BotSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MULTISEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__"
    )

    environment: Literal["dev", "staging", "prod"] = "dev"
    telegram_token: SecretStr
    telegram_proxy: str | None = None
    default_language: str = "en"
    default_source: Literal["stackoverflow", "wikipedia", "spotify"] = "stackoverflow"
    admin_telegram_id: int | None = None
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    json_logs: bool | None = Field(
        default=None,
        description="Render logs as JSON; defaults to on outside of dev.",
    )

    search: SearchSettings = Field(default_factory=SearchSettings)

    @property
    def use_json_logs(self) -> bool:
        if self.json_logs is not None:
            return self.json_logs
        return self.environment != "dev"


@lru_cache
def get_settings() -> BotSettings:
    """Return cached settings instance."""

    return BotSettings()  # type: ignore[call-arg]


__all__ = [
    "BotSettings",
    "SearchSettings",
    "get_settings",
]
