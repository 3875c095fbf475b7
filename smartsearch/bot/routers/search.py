"""Telegram search handlers."""

from __future__ import annotations

import asyncio
import contextlib

from aiogram import F, Router
from aiogram.filters import Command, CommandObject, CommandStart
from aiogram.types import Message

from smartsearch.bot.utils.messages import iter_fragments
from smartsearch.bot.utils.telegram import answer_markdown, answer_with_retry, send_typing_action
from smartsearch.bot.views import render_idle, render_state
from smartsearch.domain.models import Loading
from smartsearch.i18n import I18nService
from smartsearch.logging import logger
from smartsearch.services.controller import SearchController

router = Router()


@router.message(CommandStart())
async def handle_start(
    message: Message,
    i18n: I18nService,
    search_controller: SearchController,
    locale: str | None = None,
    use_markdown: bool = True,
) -> None:
    name = message.from_user.full_name if message.from_user else ""
    greeting = i18n.gettext("start.greeting", locale=locale, name=name)
    await answer_with_retry(message, greeting, parse_mode=None)
    state = search_controller.state_for(message.chat.id)
    await _send_views(message, render_state(state, i18n, locale=locale), use_markdown=use_markdown)


@router.message(Command("help"))
async def handle_help(message: Message, i18n: I18nService, locale: str | None = None) -> None:
    text = "\n\n".join(
        [
            i18n.gettext("help.body", locale=locale),
            i18n.gettext("help.tip", locale=locale),
        ]
    )
    await answer_with_retry(message, text, parse_mode=None)


@router.message(Command("search"))
async def handle_search_command(
    message: Message,
    command: CommandObject,
    i18n: I18nService,
    search_controller: SearchController,
    locale: str | None = None,
    use_markdown: bool = True,
) -> None:
    query = (command.args or "").strip()
    if not query:
        await _send_views(message, [render_idle(i18n, locale=locale)], use_markdown=use_markdown)
        return
    await run_search(
        message,
        query,
        i18n=i18n,
        search_controller=search_controller,
        locale=locale,
        use_markdown=use_markdown,
    )


@router.message(F.text & ~F.text.startswith("/"))
async def handle_text(
    message: Message,
    i18n: I18nService,
    search_controller: SearchController,
    locale: str | None = None,
    use_markdown: bool = True,
) -> None:
    await run_search(
        message,
        message.text or "",
        i18n=i18n,
        search_controller=search_controller,
        locale=locale,
        use_markdown=use_markdown,
    )


async def run_search(
    message: Message,
    query: str,
    *,
    i18n: I18nService,
    search_controller: SearchController,
    locale: str | None = None,
    use_markdown: bool = True,
) -> None:
    chat_id = message.chat.id
    if search_controller.is_busy(chat_id):
        await answer_with_retry(message, i18n.gettext("search.busy", locale=locale), parse_mode=None)
        return

    typing_task: asyncio.Task | None = None

    async def _show_loading(state: Loading) -> None:
        nonlocal typing_task
        await _send_views(message, render_state(state, i18n, locale=locale), use_markdown=use_markdown)
        typing_task = asyncio.create_task(send_typing_action(message))

    try:
        state = await search_controller.submit(chat_id, query, on_loading=_show_loading)
    finally:
        if typing_task is not None:
            typing_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await typing_task

    if state is None:
        logger.debug("search_not_started", chat_id=chat_id)
        return
    await _send_views(message, render_state(state, i18n, locale=locale), use_markdown=use_markdown)


async def _send_views(message: Message, views: list[str], *, use_markdown: bool = True) -> None:
    for view in views:
        for formatted, plain in iter_fragments(view):
            await answer_markdown(message, formatted, plain, use_markdown=use_markdown)


__all__ = ["router", "run_search"]
