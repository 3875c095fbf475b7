"""Formatting helpers for Telegram MarkdownV2."""

from __future__ import annotations

from typing import Iterable

import telegramify_markdown

# Telegram rejects messages above 4096 characters; escaping adds a margin.
MESSAGE_CHAR_LIMIT = 3500


def chunk_markdown_message(text: str, limit: int = MESSAGE_CHAR_LIMIT) -> list[str]:
    """Group lines into chunks under ``limit`` without splitting fenced blocks.

    A single line or fenced block longer than ``limit`` is hard-wrapped.
    """

    blocks: list[str] = []
    buffer: list[str] = []
    in_code = False
    for line in text.splitlines():
        if line.strip().startswith("```"):
            if not in_code and buffer:
                blocks.append("\n".join(buffer))
                buffer = []
            in_code = not in_code
            buffer.append(line)
            if not in_code:
                blocks.append("\n".join(buffer))
                buffer = []
            continue
        if in_code:
            buffer.append(line)
        else:
            blocks.append(line)
    if buffer:
        blocks.append("\n".join(buffer))

    chunks: list[str] = []
    current = ""
    for block in blocks:
        while len(block) > limit:
            if current.strip():
                chunks.append(current)
            current = ""
            chunks.append(block[:limit])
            block = block[limit:]
        candidate = f"{current}\n{block}" if current else block
        if len(candidate) > limit:
            chunks.append(current)
            current = block
        else:
            current = candidate
    if current:
        chunks.append(current)

    return [chunk.strip("\n") for chunk in chunks if chunk.strip()]


def to_telegram_markdown(text: str) -> str:
    return telegramify_markdown.markdownify(
        text,
        max_line_length=None,
        normalize_whitespace=False,
    ).strip()


def iter_fragments(text: str) -> Iterable[tuple[str, str]]:
    """Yield ``(markdown_v2, plain)`` pairs, one per outgoing message."""

    for chunk in chunk_markdown_message(text):
        yield to_telegram_markdown(chunk), chunk


__all__ = ["MESSAGE_CHAR_LIMIT", "chunk_markdown_message", "iter_fragments", "to_telegram_markdown"]
