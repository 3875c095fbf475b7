"""Tests for the async retry helper and Telegram send wrappers."""

from __future__ import annotations

import pytest

from smartsearch.bot.utils import telegram as telegram_module
from smartsearch.utils import retry as retry_module
from smartsearch.utils.retry import retry_async


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    delays: list[float] = []

    async def fake_sleep(delay):
        delays.append(delay)

    monkeypatch.setattr(retry_module.asyncio, "sleep", fake_sleep)
    return delays


class RecordingLogger:
    def __init__(self) -> None:
        self.warnings: list[tuple[str, dict]] = []

    def warning(self, event, **kwargs):
        self.warnings.append((event, kwargs))


@pytest.mark.asyncio
async def test_retry_async_recovers_with_linear_backoff(no_sleep):
    attempts = 0
    logger = RecordingLogger()

    async def flaky():
        nonlocal attempts
        attempts += 1
        if attempts < 3:
            raise ConnectionError("flaky")
        return "ok"

    result = await retry_async(flaky, max_attempts=3, base_delay=0.5, logger=logger, operation_name="send")

    assert result == "ok"
    assert no_sleep == [0.5, 1.0]
    assert [kwargs["attempt"] for _, kwargs in logger.warnings] == [1, 2]


@pytest.mark.asyncio
async def test_retry_async_reraises_last_error(no_sleep):
    async def broken():
        raise ValueError("nope")

    with pytest.raises(ValueError, match="nope"):
        await retry_async(broken, max_attempts=2)
    assert no_sleep == [0.5]


@pytest.mark.asyncio
async def test_bot_send_with_retry_passes_arguments():
    sent = []

    class DummyBot:
        async def send_message(self, chat_id, text, **kwargs):
            sent.append((chat_id, text, kwargs))

    await telegram_module.bot_send_with_retry(DummyBot(), chat_id=9, text="hello", parse_mode=None)

    assert sent == [(9, "hello", {"parse_mode": None})]


@pytest.mark.asyncio
async def test_retry_async_only_retries_listed_errors(no_sleep):
    attempts = 0

    async def rejected():
        nonlocal attempts
        attempts += 1
        raise ValueError("bad request")

    with pytest.raises(ValueError):
        await retry_async(rejected, max_attempts=3, retry_on=(ConnectionError,))

    assert attempts == 1
    assert no_sleep == []


@pytest.mark.asyncio
async def test_retry_async_honours_retry_after_hint(no_sleep):
    class Throttled(Exception):
        retry_after = 7

    attempts = 0

    async def throttled_once():
        nonlocal attempts
        attempts += 1
        if attempts == 1:
            raise Throttled()
        return "sent"

    assert await retry_async(throttled_once, base_delay=0.5) == "sent"
    assert no_sleep == [7.0]


@pytest.mark.asyncio
async def test_answer_with_retry_does_not_retry_rejected_markup(no_sleep):
    calls = []

    class RejectingMessage:
        async def answer(self, text, **kwargs):
            calls.append((text, kwargs))
            raise RuntimeError("can't parse entities")

    with pytest.raises(RuntimeError):
        await telegram_module.answer_with_retry(RejectingMessage(), "*x*", parse_mode="MarkdownV2")

    assert len(calls) == 1
    assert no_sleep == []
