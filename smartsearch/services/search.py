"""Gemini-backed image search with Google Search grounding."""

from __future__ import annotations

from time import perf_counter
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from smartsearch.config import GeminiSettings
from smartsearch.domain.models import SearchResult, Source
from smartsearch.logging import logger
from smartsearch.services.exceptions import SearchConfigurationError, SearchProviderError

MISSING_API_KEY_MESSAGE = "Gemini API key is missing. Please configure it via BOT_GEMINI__API_KEY."
SEARCH_PROMPT_TEMPLATE = (
    'I want to find images related to: "{query}".\n'
    "Please provide a list of relevant image descriptions and search terms that would help "
    "find high-quality visuals for this query.\n"
    "Also, provide a brief summary of what these images should represent."
)


class _GeminiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class Part(_GeminiModel):
    text: str | None = None
    thought: bool | None = None


class Content(_GeminiModel):
    parts: list[Part] | None = None


class WebChunk(_GeminiModel):
    title: str | None = None
    uri: str | None = None


class GroundingChunk(_GeminiModel):
    web: WebChunk | None = None


class SearchEntryPoint(_GeminiModel):
    rendered_content: str | None = None


class GroundingMetadata(_GeminiModel):
    # Validated one entry at a time by extract_sources.
    grounding_chunks: list[Any] | None = None
    web_search_queries: list[str] | None = None
    search_entry_point: SearchEntryPoint | None = None


class Candidate(_GeminiModel):
    content: Content | None = None
    grounding_metadata: GroundingMetadata | None = None
    finish_reason: str | None = None

    @field_validator("grounding_metadata", mode="wrap")
    @classmethod
    def _tolerate_malformed_grounding(cls, value, handler):
        # Citations are optional; a broken block must not cost us the answer.
        try:
            return handler(value)
        except ValidationError:
            return None


class GenerateContentResponse(_GeminiModel):
    candidates: list[Candidate] | None = None

    @property
    def first_candidate(self) -> Candidate | None:
        return self.candidates[0] if self.candidates else None

    @property
    def text(self) -> str | None:
        candidate = self.first_candidate
        if candidate is None or candidate.content is None:
            return None
        pieces = [
            part.text
            for part in candidate.content.parts or []
            if part.text is not None and not part.thought
        ]
        if not pieces:
            return None
        return "".join(pieces)

    @property
    def grounding_chunks(self) -> list[Any]:
        candidate = self.first_candidate
        if candidate is None or candidate.grounding_metadata is None:
            return []
        return candidate.grounding_metadata.grounding_chunks or []


def build_search_prompt(query: str) -> str:
    return SEARCH_PROMPT_TEMPLATE.format(query=query)


def extract_sources(chunks: list[Any]) -> list[Source]:
    """Map raw grounding chunks to sources, in order.

    Entries that are malformed or lack a title or URI are dropped individually.
    """

    sources: list[Source] = []
    for index, raw in enumerate(chunks):
        try:
            chunk = GroundingChunk.model_validate(raw)
        except ValidationError as exc:
            logger.debug("grounding_chunk_skipped", index=index, errors=exc.error_count())
            continue
        web = chunk.web
        if web is None or not web.title or not web.uri:
            continue
        sources.append(Source(title=web.title, uri=web.uri))
    return sources


def normalize_response(payload: Any) -> SearchResult:
    try:
        response = GenerateContentResponse.model_validate(payload)
    except ValidationError as exc:
        raise SearchProviderError("Gemini returned an unexpected response.") from exc

    text = response.text
    if text is None:
        candidate = response.first_candidate
        reason = candidate.finish_reason if candidate is not None else None
        suffix = f" (finish reason: {reason})" if reason else ""
        raise SearchProviderError(f"Gemini returned no text for this query{suffix}.")

    return SearchResult(text=text, sources=extract_sources(response.grounding_chunks))


def _provider_error_message(response: httpx.Response) -> str:
    try:
        message = response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        message = None
    if isinstance(message, str) and message.strip():
        return message.strip()
    return f"Gemini request failed with status {response.status_code}."


class SearchService:
    """Single-call adapter between the bot and the Gemini generateContent API.

    The API key is injected through ``GeminiSettings``; it is never read from
    the process environment at call time. No retries, caching or timeouts are
    layered on top of the shared ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: GeminiSettings | None = None,
    ) -> None:
        self._client = http_client
        self._settings = settings or GeminiSettings()

    @property
    def endpoint(self) -> str:
        base_url = str(self._settings.base_url).rstrip("/")
        return f"{base_url}/models/{self._settings.model}:generateContent"

    @staticmethod
    def _read_secret(secret: Any) -> str | None:
        if not secret:
            return None
        try:
            return secret.get_secret_value()
        except AttributeError:
            return str(secret)

    async def search(self, query: str) -> SearchResult:
        api_key = self._read_secret(self._settings.api_key)
        if not api_key:
            raise SearchConfigurationError(MISSING_API_KEY_MESSAGE)

        payload = {
            "contents": [{"role": "user", "parts": [{"text": build_search_prompt(query)}]}],
            "tools": [{"google_search": {}}],
        }
        started = perf_counter()
        logger.info("search_request_started", model=self._settings.model, query_length=len(query))
        try:
            response = await self._client.post(
                self.endpoint,
                json=payload,
                headers={"x-goog-api-key": api_key},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            detail = _provider_error_message(exc.response)
            logger.warning(
                "search_request_failed",
                status_code=exc.response.status_code,
                error=detail,
            )
            raise SearchProviderError(detail) from exc
        except httpx.RequestError as exc:
            logger.warning(
                "search_request_failed",
                error_type=exc.__class__.__name__,
                error=str(exc),
            )
            raise SearchProviderError(str(exc)) from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise SearchProviderError("Gemini returned a non-JSON response.") from exc

        result = normalize_response(data)
        logger.info(
            "search_request_completed",
            model=self._settings.model,
            source_count=len(result.sources),
            latency_ms=int((perf_counter() - started) * 1000),
        )
        return result


__all__ = [
    "GenerateContentResponse",
    "MISSING_API_KEY_MESSAGE",
    "SearchService",
    "build_search_prompt",
    "extract_sources",
    "normalize_response",
]
