"""Per-chat search lifecycle: idle, loading, succeeded or failed."""

from __future__ import annotations

from typing import Awaitable, Callable, Protocol

from smartsearch.domain.models import (
    Failed,
    Idle,
    LifecycleState,
    Loading,
    SearchResult,
    Succeeded,
)
from smartsearch.logging import logger

DEFAULT_ERROR_MESSAGE = "Something went wrong"

LoadingCallback = Callable[[Loading], Awaitable[None]]


class Searcher(Protocol):
    async def search(self, query: str) -> SearchResult: ...


class SearchController:
    """Owns the lifecycle state of every chat and runs one search at a time per chat.

    A chat that is ``Loading`` rejects new submissions instead of queueing them,
    which is the chat equivalent of a disabled submit button.
    """

    __slots__ = ("_searcher", "_states", "fallback_error")

    def __init__(self, searcher: Searcher, *, fallback_error: str = DEFAULT_ERROR_MESSAGE) -> None:
        self._searcher = searcher
        self._states: dict[int, LifecycleState] = {}
        self.fallback_error = fallback_error

    def state_for(self, chat_id: int) -> LifecycleState:
        return self._states.get(chat_id, Idle())

    def is_busy(self, chat_id: int) -> bool:
        return isinstance(self.state_for(chat_id), Loading)

    async def submit(
        self,
        chat_id: int,
        query: str,
        *,
        on_loading: LoadingCallback | None = None,
    ) -> LifecycleState | None:
        """Run a search for ``query`` and return the resulting state.

        Returns ``None`` without touching state when the query is blank or the
        chat already has a search in flight.
        """

        trimmed = (query or "").strip()
        if not trimmed:
            return None
        if self.is_busy(chat_id):
            logger.info("search_rejected_busy", chat_id=chat_id)
            return None

        loading = Loading(query=trimmed)
        self._states[chat_id] = loading
        logger.info("search_submitted", chat_id=chat_id, query_length=len(trimmed))

        # Cancellation skips both branches below; the chat must not stay Loading.
        state: LifecycleState = Failed(message=self.fallback_error)
        try:
            if on_loading is not None:
                await on_loading(loading)
            result = await self._searcher.search(trimmed)
        except Exception as exc:
            message = str(exc).strip() or self.fallback_error
            logger.warning(
                "search_failed",
                chat_id=chat_id,
                error_type=exc.__class__.__name__,
                error=message,
            )
            state = Failed(message=message)
        else:
            logger.info("search_succeeded", chat_id=chat_id, source_count=len(result.sources))
            state = Succeeded(result=result)
        finally:
            self._states[chat_id] = state
        return state


__all__ = ["DEFAULT_ERROR_MESSAGE", "SearchController", "Searcher"]
