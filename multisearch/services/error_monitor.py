"""Report unhandled handler errors to the log and the administrator."""

from __future__ import annotations

import traceback
from typing import Any

from aiogram import Bot
from aiogram.dispatcher.event.bases import UNHANDLED
from aiogram.types import ErrorEvent, Update

from multisearch.bot.utils.telegram import bot_send_with_retry
from multisearch.config import BotSettings
from multisearch.logging import logger

# Telegram messages are limited to 4096 characters.
TELEGRAM_MESSAGE_LIMIT = 3900
TRACEBACK_CHAR_LIMIT = 2500
TRUNCATION_MARK = "\n...[truncated]"
UPDATE_KINDS = ("message", "edited_message", "callback_query")


class ErrorMonitor:
    """Error observer for the dispatcher; register ``handle_error``."""

    def __init__(self, settings: BotSettings) -> None:
        self._settings = settings

    async def handle_error(self, event: ErrorEvent, bot: Bot):
        update_kind, chat_id, user_id = self._describe(event.update)
        logger.error(
            "bot_error_captured",
            exception_type=event.exception.__class__.__name__,
            exception=str(event.exception),
            update_id=getattr(event.update, "update_id", None),
            update_kind=update_kind,
            chat_id=chat_id,
        )

        admin_id = self._settings.admin_telegram_id
        if admin_id is None:
            return UNHANDLED

        text = self.build_report(event, update_kind=update_kind, chat_id=chat_id, user_id=user_id)
        try:
            await bot_send_with_retry(bot, chat_id=admin_id, text=text, parse_mode=None)
        except Exception:
            logger.exception(
                "error_monitor_notification_failed",
                update_id=getattr(event.update, "update_id", None),
            )
        return UNHANDLED

    def build_report(
        self,
        event: ErrorEvent,
        *,
        update_kind: str,
        chat_id: Any,
        user_id: Any,
    ) -> str:
        exception = event.exception
        lines = [
            "SEARCH BOT ERROR",
            f"Environment: {self._settings.environment}",
            f"Exception: {exception.__class__.__name__}: {exception}",
            f"Update: {getattr(event.update, 'update_id', 'unknown')} ({update_kind})",
            f"Chat: {chat_id}",
            f"User: {user_id}",
        ]
        trace = "".join(
            traceback.format_exception(exception.__class__, exception, exception.__traceback__)
        ).strip()
        if trace:
            lines.extend(["", "Traceback:", _truncate(trace, TRACEBACK_CHAR_LIMIT)])
        return _truncate("\n".join(lines), TELEGRAM_MESSAGE_LIMIT)

    @staticmethod
    def _describe(update: Update | None) -> tuple[str, Any, Any]:
        if update is None:
            return "unknown", "unknown", "unknown"
        for kind in UPDATE_KINDS:
            payload = getattr(update, kind, None)
            if payload is None:
                continue
            user = getattr(payload, "from_user", None)
            chat = getattr(payload, "chat", None)
            if chat is None:
                chat = getattr(getattr(payload, "message", None), "chat", None)
            return kind, getattr(chat, "id", "unknown"), getattr(user, "id", "unknown")
        return "other", "unknown", "unknown"


def _truncate(value: str, limit: int) -> str:
    if len(value) <= limit:
        return value
    return f"{value[: limit - len(TRUNCATION_MARK)].rstrip()}{TRUNCATION_MARK}"


__all__ = ["ErrorMonitor"]
