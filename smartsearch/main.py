"""Application entrypoint."""

from __future__ import annotations

import asyncio

import httpx
from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.client.session.aiohttp import AiohttpSession
from aiogram.enums import ParseMode

from smartsearch.bot.middlewares import LocaleMiddleware
from smartsearch.bot.routers import setup_routers
from smartsearch.config import get_settings
from smartsearch.i18n import I18nService
from smartsearch.logging import configure_logging, logger
from smartsearch.services.controller import SearchController
from smartsearch.services.error_monitor import ErrorMonitor
from smartsearch.services.search import SearchService


async def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level, json_output=settings.environment != "dev")

    session = (
        AiohttpSession(proxy=settings.telegram_proxy) if settings.telegram_proxy else None
    )
    bot = Bot(
        token=settings.telegram_token.get_secret_value(),
        default=DefaultBotProperties(
            parse_mode=ParseMode.MARKDOWN_V2 if settings.enable_markdown_v2 else None
        ),
        session=session,
    )
    dp = Dispatcher()
    dp.include_router(setup_routers())
    error_monitor = ErrorMonitor(settings=settings)
    dp.errors.register(error_monitor.handle_error)

    i18n = I18nService(default_locale=settings.default_language)
    dp.message.middleware(LocaleMiddleware(i18n, settings))

    if settings.gemini.api_key is None:
        # Searches will answer with a configuration error until the key is set.
        logger.warning("gemini_api_key_missing")

    async with httpx.AsyncClient(timeout=settings.gemini.request_timeout_seconds) as http_client:
        search_service = SearchService(http_client, settings=settings.gemini)
        search_controller = SearchController(search_service)

        logger.info("bot_starting", environment=settings.environment, model=settings.gemini.model)
        await dp.start_polling(
            bot,
            i18n=i18n,
            search_controller=search_controller,
            use_markdown=settings.enable_markdown_v2,
        )


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
