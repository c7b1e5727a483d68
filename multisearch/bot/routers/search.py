"""Telegram search handlers."""

from __future__ import annotations

from time import perf_counter

from aiogram import F, Router
from aiogram.enums import ParseMode
from aiogram.filters import Command, CommandObject, CommandStart
from aiogram.types import CallbackQuery, LinkPreviewOptions, Message

from multisearch.bot.keyboards import SearchCallback, SourceCallback, build_search_keyboard
from multisearch.bot.utils.telegram import answer_with_retry, edit_with_retry
from multisearch.bot.views import render_state
from multisearch.domain.models import SearchSource
from multisearch.i18n import I18nService
from multisearch.logging import logger
from multisearch.services.exceptions import SearchFailed
from multisearch.services.search import SearchService
from multisearch.services.sessions import SearchSession

router = Router()
NO_PREVIEW = LinkPreviewOptions(is_disabled=True)


@router.message(CommandStart())
async def handle_start(
    message: Message,
    search_session: SearchSession,
    i18n: I18nService,
    locale: str | None = None,
) -> None:
    name = message.from_user.full_name if message.from_user else ""
    greeting = i18n.gettext(
        "start.greeting",
        locale=locale,
        name=name,
        source=search_session.source.label,
    )
    await answer_with_retry(message, greeting, parse_mode=None)
    await _send_view(message, search_session, i18n, locale)


@router.message(Command("help"))
async def handle_help(message: Message, i18n: I18nService, locale: str | None = None) -> None:
    await answer_with_retry(message, i18n.gettext("help.text", locale=locale), parse_mode=None)


@router.message(Command("source"))
async def handle_source(
    message: Message,
    command: CommandObject,
    search_session: SearchSession,
    i18n: I18nService,
    locale: str | None = None,
) -> None:
    name = (command.args or "").strip()
    if name:
        try:
            source = SearchSource.parse(name)
        except ValueError:
            choices = ", ".join(source.value for source in SearchSource)
            await answer_with_retry(
                message,
                i18n.gettext("source.unknown", locale=locale, name=name, choices=choices),
                parse_mode=None,
            )
            return
        search_session.select_source(source)
        logger.info("source_selected", source=source.value, via="command")
        text = i18n.gettext("source.selected", locale=locale, source=source.label)
    else:
        text = i18n.gettext("source.prompt", locale=locale, source=search_session.source.label)
    await answer_with_retry(
        message,
        text,
        parse_mode=None,
        reply_markup=build_search_keyboard(search_session, i18n, locale),
    )


@router.callback_query(SourceCallback.filter())
async def handle_source_pick(
    callback: CallbackQuery,
    callback_data: SourceCallback,
    search_session: SearchSession,
    i18n: I18nService,
    locale: str | None = None,
) -> None:
    try:
        source = SearchSource.parse(callback_data.source)
    except ValueError:
        logger.warning("source_callback_invalid", value=callback_data.source)
        await callback.answer()
        return
    search_session.select_source(source)
    logger.info("source_selected", source=source.value, via="button")
    await callback.answer(i18n.gettext("source.selected", locale=locale, source=source.label))
    target = _accessible_message(callback)
    if target is not None and not search_session.is_loading:
        await target.edit_reply_markup(
            reply_markup=build_search_keyboard(search_session, i18n, locale)
        )


@router.callback_query(SearchCallback.filter())
async def handle_search_button(
    callback: CallbackQuery,
    search_session: SearchSession,
    search_service: SearchService,
    i18n: I18nService,
    locale: str | None = None,
) -> None:
    await callback.answer()
    target = _accessible_message(callback)
    if target is None:
        return
    if not search_session.query.strip():
        await answer_with_retry(target, i18n.gettext("search.no_query", locale=locale), parse_mode=None)
        return
    await submit_search(
        target,
        search_session.query,
        search_session=search_session,
        search_service=search_service,
        i18n=i18n,
        locale=locale,
    )


@router.message(Command("search"))
async def handle_search_command(
    message: Message,
    command: CommandObject,
    search_session: SearchSession,
    search_service: SearchService,
    i18n: I18nService,
    locale: str | None = None,
) -> None:
    query = command.args or ""
    if not query.strip():
        await answer_with_retry(message, i18n.gettext("search.usage", locale=locale), parse_mode=None)
        return
    await submit_search(
        message,
        query,
        search_session=search_session,
        search_service=search_service,
        i18n=i18n,
        locale=locale,
    )


@router.message(Command("cancel"))
async def handle_cancel(
    message: Message,
    search_session: SearchSession,
    i18n: I18nService,
    locale: str | None = None,
) -> None:
    if not search_session.cancel():
        await answer_with_retry(message, i18n.gettext("search.nothing_to_cancel", locale=locale), parse_mode=None)
        return
    logger.info("search_cancelled", query=search_session.query)
    await answer_with_retry(message, i18n.gettext("search.cancelled", locale=locale), parse_mode=None)


@router.message(F.text & ~F.text.startswith("/"))
async def handle_text(
    message: Message,
    search_session: SearchSession,
    search_service: SearchService,
    i18n: I18nService,
    locale: str | None = None,
) -> None:
    await submit_search(
        message,
        message.text or "",
        search_session=search_session,
        search_service=search_service,
        i18n=i18n,
        locale=locale,
    )


async def submit_search(
    message: Message,
    query: str,
    *,
    search_session: SearchSession,
    search_service: SearchService,
    i18n: I18nService,
    locale: str | None = None,
) -> None:
    """Run one search for the chat and render its lifecycle.

    Blank queries are ignored outright; a pending search makes the
    submission a no-op apart from a notice.
    """

    if not query.strip():
        return
    if search_session.is_loading:
        await answer_with_retry(message, i18n.gettext("search.busy", locale=locale), parse_mode=None)
        return
    ticket = search_session.begin(query)
    if ticket is None:
        return

    log = logger.bind(request_id=ticket.request_id, source=ticket.source.value)
    log.info("search_started", query=ticket.query)
    try:
        (loading_text,) = render_state(search_session.state, i18n, locale)
        loading_message = await answer_with_retry(message, loading_text, parse_mode=ParseMode.HTML)
    except Exception:
        search_session.cancel()
        raise

    error_text = i18n.gettext("search.error", locale=locale)
    started_at = perf_counter()
    try:
        results = await search_service.search(ticket.query, ticket.source)
    except SearchFailed as exc:
        log.warning("search_error_shown", error=str(exc))
        applied = search_session.fail(ticket, error_text)
    except Exception:
        log.exception("search_unexpected_error")
        if search_session.fail(ticket, error_text):
            await _send_view(message, search_session, i18n, locale, edit=loading_message)
        raise
    else:
        applied = search_session.complete(ticket, results)
        log.info(
            "search_completed",
            result_count=len(results),
            latency_ms=int((perf_counter() - started_at) * 1000),
        )

    if not applied:
        log.info("search_result_discarded")
        await edit_with_retry(
            loading_message,
            i18n.gettext("search.cancelled", locale=locale),
            parse_mode=None,
        )
        return
    await _send_view(message, search_session, i18n, locale, edit=loading_message)


def _accessible_message(callback: CallbackQuery) -> Message | None:
    # Messages older than 48h arrive as InaccessibleMessage and cannot be edited.
    message = callback.message
    return message if isinstance(message, Message) else None


async def _send_view(
    message: Message,
    search_session: SearchSession,
    i18n: I18nService,
    locale: str | None,
    *,
    edit: Message | None = None,
) -> None:
    """Show the session's current state, replacing ``edit`` with the first part."""

    texts = render_state(search_session.state, i18n, locale)
    keyboard = build_search_keyboard(search_session, i18n, locale)
    last_index = len(texts) - 1
    for index, text in enumerate(texts):
        kwargs = {
            "parse_mode": ParseMode.HTML,
            "link_preview_options": NO_PREVIEW,
            "reply_markup": keyboard if index == last_index else None,
        }
        if index == 0 and edit is not None:
            await edit_with_retry(edit, text, **kwargs)
        else:
            await answer_with_retry(message, text, **kwargs)


__all__ = ["router", "submit_search"]
