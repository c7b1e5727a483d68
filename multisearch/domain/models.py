"""Pydantic models shared across logic/application layers."""

from __future__ import annotations

import re
from enum import Enum
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SearchSource(str, Enum):
    STACKOVERFLOW = "stackoverflow"
    WIKIPEDIA = "wikipedia"
    SPOTIFY = "spotify"

    @property
    def label(self) -> str:
        return _SOURCE_LABELS[self]

    @classmethod
    def parse(cls, value: str) -> "SearchSource":
        """Resolve user input such as ``"Stack Overflow"`` to a source.

        Raises ``ValueError`` for anything that is not one of the known sources.
        """

        normalized = "".join(value.split()).lower()
        return cls(normalized)


_SOURCE_LABELS = {
    SearchSource.STACKOVERFLOW: "Stack Overflow",
    SearchSource.WIKIPEDIA: "Wikipedia",
    SearchSource.SPOTIFY: "Spotify",
}


_UNSAFE_URL_CHARS = re.compile(r"[\s\"<>]")


def _require_web_url(value: str) -> str:
    parts = urlsplit(value)
    if parts.scheme not in {"http", "https"} or not parts.netloc:
        raise ValueError(f"not an absolute http(s) URL: {value!r}")
    if _UNSAFE_URL_CHARS.search(value):
        raise ValueError(f"URL must be percent-encoded: {value!r}")
    return value


class SearchResult(BaseModel):
    """A provider result reshaped into the common record."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1)
    link: str
    description: str | None = None
    image: str | None = None

    @field_validator("link")
    @classmethod
    def _validate_link(cls, value: str) -> str:
        return _require_web_url(value)

    @field_validator("image")
    @classmethod
    def _validate_image(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _require_web_url(value)


__all__ = [
    "SearchResult",
    "SearchSource",
]
