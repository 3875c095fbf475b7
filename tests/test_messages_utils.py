"""Tests for Markdown utility helpers."""

from __future__ import annotations

from smartsearch.bot.utils import messages


def test_chunk_markdown_message_keeps_short_text_together():
    text = "First\n\nSecond\n- item"
    assert messages.chunk_markdown_message(text) == [text]


def test_chunk_markdown_message_splits_on_limit_without_breaking_code():
    text = "aaaa\n```python\nprint('hi')\n```\nbbbb"
    parts = messages.chunk_markdown_message(text, limit=28)

    assert "```python\nprint('hi')\n```" in parts
    assert parts[0] == "aaaa"
    assert parts[-1] == "bbbb"


def test_chunk_markdown_message_hard_wraps_long_lines():
    parts = messages.chunk_markdown_message("x" * 25, limit=10)
    assert parts == ["x" * 10, "x" * 10, "x" * 5]


def test_iter_fragments_returns_converted_and_plain_pairs(plain_markdown, monkeypatch):
    monkeypatch.setattr(
        messages.telegramify_markdown,
        "markdownify",
        lambda text, **kwargs: text.upper(),
    )
    result = list(messages.iter_fragments("Line1\n\nLine2"))
    assert result == [("LINE1\n\nLINE2", "Line1\n\nLine2")]
