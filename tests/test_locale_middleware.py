"""Tests for the locale-resolving middleware."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from smartsearch.bot.middlewares import LocaleMiddleware


def _settings(default_language: str = "en"):
    return SimpleNamespace(default_language=default_language)


async def _run(middleware, event):
    seen = {}

    async def handler(evt, data):
        seen.update(data)
        return "handled"

    result = await middleware(handler, event, {})
    return result, seen


@pytest.mark.asyncio
async def test_locale_from_sender_language(i18n):
    middleware = LocaleMiddleware(i18n, _settings())
    event = SimpleNamespace(from_user=SimpleNamespace(language_code="zh-hans"))

    result, data = await _run(middleware, event)

    assert result == "handled"
    assert data["locale"] == "zh"
    assert data["i18n"] is i18n


@pytest.mark.asyncio
async def test_locale_defaults_without_sender(i18n):
    middleware = LocaleMiddleware(i18n, _settings("en"))

    _, data = await _run(middleware, SimpleNamespace())

    assert data["locale"] == "en"
