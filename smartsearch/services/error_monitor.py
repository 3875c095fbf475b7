"""Report unhandled bot errors to the log and, optionally, to an admin chat."""

from __future__ import annotations

import traceback

from aiogram import Bot
from aiogram.dispatcher.event.bases import UNHANDLED
from aiogram.types import ErrorEvent, Update

from smartsearch.bot.utils.telegram import bot_send_with_retry
from smartsearch.config import BotSettings
from smartsearch.logging import logger

# Telegram messages are limited to 4096 characters.
TELEGRAM_MESSAGE_LIMIT = 3900
TRACEBACK_CHAR_LIMIT = 1800
QUERY_CHAR_LIMIT = 300


class ErrorMonitor:
    """Error observer callback; register ``handle_error`` with the dispatcher."""

    def __init__(self, settings: BotSettings) -> None:
        self._settings = settings

    async def handle_error(self, event: ErrorEvent, bot: Bot):
        update_id = getattr(event.update, "update_id", None)
        logger.error(
            "bot_error_captured",
            exception_type=event.exception.__class__.__name__,
            exception=str(event.exception),
            update_id=update_id,
        )

        admin_id = self._settings.admin_telegram_id
        if admin_id is None:
            return UNHANDLED

        try:
            await bot_send_with_retry(bot, chat_id=admin_id, text=self.build_report(event), parse_mode=None)
        except Exception:
            logger.exception("error_monitor_notification_failed", update_id=update_id)
        return UNHANDLED

    def build_report(self, event: ErrorEvent) -> str:
        exception = event.exception
        chat_id, text = self._describe_message(event.update)
        lines = [
            "SMARTSEARCH ERROR",
            f"Environment: {self._settings.environment}",
            f"Exception: {exception.__class__.__name__}: {exception}",
            f"Update ID: {getattr(event.update, 'update_id', 'unknown')}",
            f"Chat: {chat_id}",
        ]
        if text:
            lines.append(f"Text: {self._truncate(text, QUERY_CHAR_LIMIT)}")
        trace = "".join(traceback.format_exception(exception.__class__, exception, exception.__traceback__))
        if trace.strip():
            lines.extend(["", "Traceback:", self._truncate(trace, TRACEBACK_CHAR_LIMIT)])
        return self._truncate("\n".join(lines), TELEGRAM_MESSAGE_LIMIT)

    @staticmethod
    def _describe_message(update: Update | None) -> tuple[str, str]:
        message = getattr(update, "message", None) or getattr(update, "edited_message", None)
        if message is None:
            return "unknown", ""
        chat = getattr(message, "chat", None)
        chat_id = str(chat.id) if chat is not None else "unknown"
        return chat_id, message.text or message.caption or ""

    @staticmethod
    def _truncate(value: str, limit: int) -> str:
        value = value.strip()
        if len(value) <= limit:
            return value
        return f"{value[: limit - 15].rstrip()}\n...[truncated]"


__all__ = ["ErrorMonitor"]
