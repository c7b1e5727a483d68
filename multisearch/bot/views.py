"""Render search states as Telegram HTML messages."""

from __future__ import annotations

import html
from typing import Iterable

from aiogram.utils.text_decorations import html_decoration

from multisearch.domain.models import SearchResult
from multisearch.domain.state import Failed, Idle, Loaded, Loading, SearchState
from multisearch.i18n import I18nService

# Telegram rejects messages over 4096 characters; leave room for entities.
MESSAGE_CHAR_LIMIT = 3900
CARD_SEPARATOR = "\n\n"
# Caps on raw text; escaping grows a character to at most five.
TITLE_CHAR_LIMIT = 200
DESCRIPTION_CHAR_LIMIT = 400


def render_result_card(result: SearchResult, i18n: I18nService, locale: str | None = None) -> str:
    quote = html_decoration.quote
    title = quote(result.title[:TITLE_CHAR_LIMIT])
    lines = [html_decoration.bold(html_decoration.link(title, _attribute(result.link)))]
    if result.description:
        lines.append(quote(result.description[:DESCRIPTION_CHAR_LIMIT]))
    if result.image:
        label = i18n.gettext("search.image", locale=locale)
        lines.append(html_decoration.link(quote(label), _attribute(result.image)))
    return "\n".join(lines)


def _attribute(value: str) -> str:
    # href values need quotes escaped too; html_decoration.quote leaves them.
    return html.escape(value, quote=True)


def chunk_blocks(blocks: Iterable[str], limit: int = MESSAGE_CHAR_LIMIT) -> list[str]:
    """Pack whole blocks into as few messages as fit under ``limit``.

    Blocks are never split, so markup inside a block stays intact.
    """

    chunks: list[str] = []
    buffer = ""
    for block in blocks:
        candidate = f"{buffer}{CARD_SEPARATOR}{block}" if buffer else block
        if buffer and len(candidate) > limit:
            chunks.append(buffer)
            buffer = block
        else:
            buffer = candidate
    if buffer:
        chunks.append(buffer)
    return chunks


def render_state(state: SearchState, i18n: I18nService, locale: str | None = None) -> list[str]:
    """Return the message texts for ``state``; always at least one."""

    if isinstance(state, Loading):
        return [html_decoration.quote(i18n.gettext("search.loading", locale=locale, source=state.source.value))]
    if isinstance(state, Failed):
        return [html_decoration.quote(state.message)]
    if isinstance(state, Loaded):
        if not state.results:
            return [html_decoration.quote(i18n.gettext("search.empty", locale=locale))]
        return chunk_blocks(render_result_card(result, i18n, locale) for result in state.results)
    if isinstance(state, Idle):
        return [html_decoration.quote(i18n.gettext("search.prompt", locale=locale))]
    raise TypeError(f"unknown search state: {state!r}")


__all__ = ["chunk_blocks", "render_result_card", "render_state"]
