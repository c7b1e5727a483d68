"""Telegram sending helpers with retry support."""

from __future__ import annotations

from typing import Any

from aiogram import Bot
from aiogram.exceptions import TelegramNetworkError
from aiogram.types import Message

from multisearch.logging import logger
from multisearch.utils.retry import retry_async

TELEGRAM_SEND_MAX_ATTEMPTS = 3
TELEGRAM_SEND_BASE_DELAY = 0.3
RETRYABLE_ERRORS = (TelegramNetworkError,)


async def _with_retry(operation, name: str) -> Any:
    return await retry_async(
        operation,
        max_attempts=TELEGRAM_SEND_MAX_ATTEMPTS,
        base_delay=TELEGRAM_SEND_BASE_DELAY,
        retry_on=RETRYABLE_ERRORS,
        logger=logger,
        operation_name=name,
    )


async def answer_with_retry(message: Message, text: str, **kwargs: Any) -> Any:
    """Send a reply with retry/backoff."""

    async def _send():
        return await message.answer(text, **kwargs)

    return await _with_retry(_send, "telegram_answer")


async def edit_with_retry(message: Message, text: str, **kwargs: Any) -> Any:
    """Replace the text of a previously sent message."""

    async def _edit():
        return await message.edit_text(text, **kwargs)

    return await _with_retry(_edit, "telegram_edit_text")


async def bot_send_with_retry(bot: Bot, *, chat_id: int, text: str, **kwargs: Any) -> Any:
    """Send a message via Bot with retry/backoff."""

    async def _send():
        return await bot.send_message(chat_id=chat_id, text=text, **kwargs)

    return await _with_retry(_send, "telegram_send_message")


__all__ = ["answer_with_retry", "bot_send_with_retry", "edit_with_retry"]
