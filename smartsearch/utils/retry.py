"""Async retry helper for outgoing Telegram calls."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, TypeVar

T = TypeVar("T")
AsyncFactory = Callable[[], Awaitable[T]]


def backoff_delay(exc: BaseException, attempt: int, base_delay: float) -> float:
    """Linear backoff, stretched to any ``retry_after`` hint the error carries."""

    hinted = getattr(exc, "retry_after", None)
    delay = base_delay * attempt
    if isinstance(hinted, (int, float)) and hinted > delay:
        return float(hinted)
    return delay


async def retry_async(
    operation: AsyncFactory[T],
    *,
    max_attempts: int = 3,
    base_delay: float = 0.5,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    logger=None,
    operation_name: str = "operation",
) -> T:
    """Await ``operation`` until it succeeds, retrying only ``retry_on`` errors."""

    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(1, max_attempts + 1):
        try:
            return await operation()
        except retry_on as exc:
            if attempt >= max_attempts:
                raise
            delay = backoff_delay(exc, attempt, base_delay)
            if logger is not None:
                logger.warning(
                    "retrying_operation",
                    operation=operation_name,
                    attempt=attempt,
                    max_attempts=max_attempts,
                    delay=delay,
                    error=str(exc),
                )
            await asyncio.sleep(delay)

    raise RuntimeError(f"{operation_name} failed after {max_attempts} attempts")


__all__ = ["backoff_delay", "retry_async"]
