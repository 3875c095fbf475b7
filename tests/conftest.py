"""Shared pytest fixtures for bot and service tests."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from smartsearch.bot.utils import messages
from smartsearch.i18n import I18nService


@pytest.fixture
def i18n() -> I18nService:
    return I18nService(default_locale="en")


@pytest.fixture
def plain_markdown(monkeypatch):
    """Make Markdown conversion an identity so replies are easy to assert on."""

    stub = SimpleNamespace(markdownify=lambda text, **kwargs: text)
    monkeypatch.setattr(messages, "telegramify_markdown", stub)
    return stub
