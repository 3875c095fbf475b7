"""Models shared between the search adapter and the presentation layer."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit

from pydantic import BaseModel, Field


class Source(BaseModel):
    """A web page the provider used to ground its answer."""

    title: str
    uri: str

    @property
    def host(self) -> str:
        try:
            hostname = urlsplit(self.uri).hostname
        except ValueError:
            hostname = None
        return hostname or self.uri


class SearchResult(BaseModel):
    text: str
    sources: list[Source] = Field(default_factory=list)


@dataclass(frozen=True, slots=True)
class Idle:
    pass


@dataclass(frozen=True, slots=True)
class Loading:
    query: str


@dataclass(frozen=True, slots=True)
class Succeeded:
    result: SearchResult


@dataclass(frozen=True, slots=True)
class Failed:
    message: str


LifecycleState = Idle | Loading | Succeeded | Failed


__all__ = [
    "Failed",
    "Idle",
    "LifecycleState",
    "Loading",
    "SearchResult",
    "Source",
    "Succeeded",
]
