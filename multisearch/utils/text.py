"""Plain-text helpers for provider payloads."""

from __future__ import annotations

import html
import re

TAG_RE = re.compile(r"<[^<>]*>")


def strip_html(text: str | None) -> str:
    """Remove well-formed tags, leaving stray ``<`` characters alone.

    Stripping repeats until no tag is left so ``"<<b>i>"`` does not
    reassemble into a new tag.
    """

    if not text:
        return ""
    previous = None
    while previous != text:
        previous = text
        text = TAG_RE.sub("", text)
    return text


def plain_text(text: str | None) -> str:
    return html.unescape(strip_html(text))


def truncate(text: str, limit: int, suffix: str = "...") -> str:
    """Cut to ``limit`` characters and always append ``suffix``."""

    return f"{text[:limit]}{suffix}"


__all__ = ["plain_text", "strip_html", "truncate"]
