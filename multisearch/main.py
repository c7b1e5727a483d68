"""Application entrypoint."""

from __future__ import annotations

import asyncio

import httpx
from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.client.session.aiohttp import AiohttpSession
from aiogram.enums import ParseMode

from multisearch.bot.middlewares import SearchSessionMiddleware
from multisearch.bot.routers import setup_routers
from multisearch.config import get_settings
from multisearch.domain.models import SearchSource
from multisearch.i18n import I18nService
from multisearch.logging import configure_logging, logger
from multisearch.services.error_monitor import ErrorMonitor
from multisearch.services.search import SearchService
from multisearch.services.sessions import SessionStore


async def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level, json_logs=settings.use_json_logs)

    session = (
        AiohttpSession(proxy=settings.telegram_proxy) if settings.telegram_proxy else None
    )
    bot = Bot(
        token=settings.telegram_token.get_secret_value(),
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
        session=session,
    )
    dp = Dispatcher()
    dp.include_router(setup_routers())
    error_monitor = ErrorMonitor(settings=settings)
    dp.errors.register(error_monitor.handle_error)

    store = SessionStore(default_source=SearchSource(settings.default_source))
    i18n = I18nService(default_locale=settings.default_language)
    session_middleware = SearchSessionMiddleware(store, i18n)
    dp.message.middleware(session_middleware)
    dp.callback_query.middleware(session_middleware)

    async with httpx.AsyncClient(follow_redirects=True) as http_client:
        search_service = SearchService(http_client, settings=settings.search)
        logger.info(
            "bot_starting",
            environment=settings.environment,
            default_source=settings.default_source,
        )
        await dp.start_polling(bot, search_service=search_service)


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
