"""Telegram sending helpers with retry support."""

from __future__ import annotations

import asyncio
from typing import Any

from aiogram import Bot
from aiogram.enums import ChatAction
from aiogram.exceptions import TelegramNetworkError, TelegramRetryAfter, TelegramServerError
from aiogram.types import Message

from smartsearch.logging import logger
from smartsearch.utils.retry import retry_async

TELEGRAM_SEND_MAX_ATTEMPTS = 3
TELEGRAM_SEND_BASE_DELAY = 0.3
CHAT_ACTION_INTERVAL_SECONDS = 4
# Bad requests (e.g. unparsable MarkdownV2) are never retried.
TRANSIENT_TELEGRAM_ERRORS = (TelegramNetworkError, TelegramRetryAfter, TelegramServerError)


async def answer_with_retry(message: Message, text: str, **kwargs: Any) -> Any:
    """Send a reply, retrying transient Telegram failures."""

    async def _send():
        return await message.answer(text, **kwargs)

    return await retry_async(
        _send,
        max_attempts=TELEGRAM_SEND_MAX_ATTEMPTS,
        base_delay=TELEGRAM_SEND_BASE_DELAY,
        retry_on=TRANSIENT_TELEGRAM_ERRORS,
        logger=logger,
        operation_name="telegram_answer",
    )


async def answer_markdown(message: Message, formatted: str, plain: str, *, use_markdown: bool = True) -> Any:
    """Send MarkdownV2, falling back to plain text when Telegram rejects the markup.

    With ``use_markdown`` off the plain fragment is sent directly.
    """

    if not use_markdown:
        return await answer_with_retry(message, plain, parse_mode=None)
    try:
        return await answer_with_retry(message, formatted, parse_mode="MarkdownV2")
    except Exception:
        logger.info("markdown_send_fallback", chat_id=getattr(message.chat, "id", None))
        return await answer_with_retry(message, plain, parse_mode=None)


async def bot_send_with_retry(bot: Bot, *, chat_id: int, text: str, **kwargs: Any) -> Any:
    """Send a message via Bot, retrying transient Telegram failures."""

    async def _send():
        return await bot.send_message(chat_id=chat_id, text=text, **kwargs)

    return await retry_async(
        _send,
        max_attempts=TELEGRAM_SEND_MAX_ATTEMPTS,
        base_delay=TELEGRAM_SEND_BASE_DELAY,
        retry_on=TRANSIENT_TELEGRAM_ERRORS,
        logger=logger,
        operation_name="telegram_send_message",
    )


async def send_typing_action(message: Message) -> None:
    """Keep the typing indicator alive until cancelled."""

    try:
        while True:
            await message.bot.send_chat_action(message.chat.id, ChatAction.TYPING)
            await asyncio.sleep(CHAT_ACTION_INTERVAL_SECONDS)
    except asyncio.CancelledError:
        pass
    except Exception as exc:
        logger.debug("chat_action_failed", error=str(exc))


__all__ = ["answer_markdown", "answer_with_retry", "bot_send_with_retry", "send_typing_action"]
