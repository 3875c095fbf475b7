"""Resolve the reply locale from the Telegram sender."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject

from smartsearch.config import BotSettings, get_settings
from smartsearch.i18n import I18nService


class LocaleMiddleware(BaseMiddleware):
    def __init__(self, i18n: I18nService, settings: BotSettings | None = None) -> None:
        self.i18n = i18n
        self.settings = settings or get_settings()

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        from_user = getattr(event, "from_user", None)
        language_code = getattr(from_user, "language_code", None)
        data["locale"] = self.i18n.normalize_locale(language_code or self.settings.default_language)
        data.setdefault("i18n", self.i18n)
        return await handler(event, data)


__all__ = ["LocaleMiddleware"]
