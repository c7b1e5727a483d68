"""Attach the chat's search session and message catalog to every update."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import CallbackQuery, Message, TelegramObject

from multisearch.i18n import I18nService
from multisearch.services.sessions import SessionStore


class SearchSessionMiddleware(BaseMiddleware):
    def __init__(self, store: SessionStore, i18n: I18nService) -> None:
        self.store = store
        self.i18n = i18n

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        data["i18n"] = self.i18n
        data["locale"] = self._extract_locale(event) or self.i18n.default_locale
        chat_id = self._extract_chat_id(event)
        if chat_id is not None:
            data["search_session"] = self.store.get(chat_id)
        return await handler(event, data)

    @staticmethod
    def _extract_chat_id(event: TelegramObject) -> int | None:
        if isinstance(event, Message):
            return event.chat.id
        if isinstance(event, CallbackQuery):
            if event.message is not None:
                return event.message.chat.id
            return event.from_user.id
        chat = getattr(event, "chat", None)
        return getattr(chat, "id", None)

    @staticmethod
    def _extract_locale(event: TelegramObject) -> str | None:
        from_user = getattr(event, "from_user", None)
        return getattr(from_user, "language_code", None)
