"""File-based i18n helper with in-memory caching."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any


@lru_cache(maxsize=32)
def _load_catalog(file_path: Path) -> dict[str, str]:
    if not file_path.exists():
        return {}
    with file_path.open("r", encoding="utf-8") as fp:
        return json.load(fp)


class I18nService:
    """Look up message templates by key, falling back to the default locale."""

    def __init__(self, *, locales_path: str | Path | None = None, default_locale: str = "en") -> None:
        self.locales_path = Path(locales_path or Path(__file__).with_name("locales"))
        self.default_locale = default_locale

    def gettext(self, key: str, *, locale: str | None = None, **kwargs: Any) -> str:
        loc = self._normalize(locale)
        text = self._lookup(loc, key)
        if text is None and loc != self.default_locale:
            text = self._lookup(self.default_locale, key)
        if text is None:
            text = key
        return text.format(**kwargs) if kwargs else text

    def _normalize(self, locale: str | None) -> str:
        # Telegram reports tags like "pt-br"; catalogs are keyed by language only.
        loc = (locale or self.default_locale).lower()
        return loc.split("-", 1)[0]

    def _lookup(self, locale: str, key: str) -> str | None:
        return _load_catalog(self.locales_path / f"{locale}.json").get(key)


__all__ = ["I18nService"]
