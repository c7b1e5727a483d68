"""Inline keyboards: the source picker and the Search button."""

from __future__ import annotations

from aiogram.filters.callback_data import CallbackData
from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from multisearch.domain.models import SearchSource
from multisearch.i18n import I18nService
from multisearch.services.sessions import SearchSession

SELECTED_MARK = "✅ "


class SourceCallback(CallbackData, prefix="source"):
    source: str


class SearchCallback(CallbackData, prefix="search"):
    action: str = "run"


def build_search_keyboard(
    session: SearchSession,
    i18n: I18nService,
    locale: str | None = None,
) -> InlineKeyboardMarkup | None:
    """Source buttons plus Search; nothing at all while a search is pending."""

    if session.is_loading:
        return None

    builder = InlineKeyboardBuilder()
    for source in SearchSource:
        prefix = SELECTED_MARK if source is session.source else ""
        builder.button(
            text=f"{prefix}{source.label}",
            callback_data=SourceCallback(source=source.value),
        )
    rows = [len(SearchSource)]
    if session.query.strip():
        builder.button(
            text=i18n.gettext("search.button", locale=locale),
            callback_data=SearchCallback(action="run"),
        )
        rows.append(1)
    builder.adjust(*rows)
    return builder.as_markup()


__all__ = ["SearchCallback", "SourceCallback", "build_search_keyboard"]
