"""Render search lifecycle states as Markdown replies."""

from __future__ import annotations

from smartsearch.domain.models import (
    Failed,
    Idle,
    LifecycleState,
    Loading,
    SearchResult,
    Source,
    Succeeded,
)
from smartsearch.i18n import I18nService


def _link_label(title: str) -> str:
    return title.replace("[", "(").replace("]", ")").strip()


def _link_target(uri: str) -> str:
    return uri.replace(" ", "%20").replace("(", "%28").replace(")", "%29")


def render_source(index: int, source: Source) -> str:
    return f"{index}. [{_link_label(source.title)}]({_link_target(source.uri)}) ({source.host})"


def render_sources(result: SearchResult, i18n: I18nService, *, locale: str | None = None) -> str:
    lines = [f"**{i18n.gettext('search.sources_title', locale=locale)}**"]
    if result.sources:
        lines.extend(render_source(i, source) for i, source in enumerate(result.sources, start=1))
    else:
        lines.append(f"_{i18n.gettext('search.no_sources', locale=locale)}_")
    return "\n".join(lines)


def render_idle(i18n: I18nService, *, locale: str | None = None) -> str:
    return "\n".join(
        [
            f"**{i18n.gettext('search.idle.title', locale=locale)}**",
            i18n.gettext("search.idle.body", locale=locale),
            "",
            i18n.gettext("search.idle.example", locale=locale),
        ]
    )


def render_state(state: LifecycleState, i18n: I18nService, *, locale: str | None = None) -> list[str]:
    """Return the Markdown messages that represent ``state``; one view per state."""

    if isinstance(state, Idle):
        return [render_idle(i18n, locale=locale)]
    if isinstance(state, Loading):
        return [i18n.gettext("search.loading", locale=locale)]
    if isinstance(state, Succeeded):
        title = i18n.gettext("search.insights_title", locale=locale)
        return [
            f"**{title}**\n\n{state.result.text}",
            render_sources(state.result, i18n, locale=locale),
        ]
    if isinstance(state, Failed):
        return [i18n.gettext("search.error", locale=locale, message=state.message)]
    raise TypeError(f"Unknown lifecycle state: {state!r}")


__all__ = ["render_idle", "render_source", "render_sources", "render_state"]
