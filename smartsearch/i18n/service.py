"""JSON message catalogs with locale and key fallback."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


class I18nService:
    """Look up reply strings in ``locales/<locale>.json``.

    Unknown locales fall back to the default catalog, unknown keys to the key
    itself. Catalogs are read once per instance.
    """

    def __init__(self, *, locales_path: str | Path | None = None, default_locale: str = "en") -> None:
        self.locales_path = Path(locales_path or Path(__file__).with_name("locales"))
        self.default_locale = default_locale.lower()
        self._catalogs: dict[str, dict[str, str]] = {}

    def gettext(self, key: str, *, locale: str | None = None, **kwargs: Any) -> str:
        loc = self.normalize_locale(locale)
        text = self.catalog(loc).get(key)
        if text is None and loc != self.default_locale:
            text = self.catalog(self.default_locale).get(key)
        if text is None:
            text = key
        return text.format(**kwargs) if kwargs else text

    def normalize_locale(self, locale: str | None) -> str:
        """Reduce Telegram codes such as ``pt-br`` or ``zh-hans`` to a catalog name."""

        if not locale:
            return self.default_locale
        return locale.replace("_", "-").split("-", 1)[0].lower() or self.default_locale

    def available_locales(self) -> list[str]:
        return sorted(path.stem for path in self.locales_path.glob("*.json"))

    def catalog(self, locale: str) -> dict[str, str]:
        cached = self._catalogs.get(locale)
        if cached is None:
            file_path = self.locales_path / f"{locale}.json"
            cached = {}
            if file_path.exists():
                with file_path.open("r", encoding="utf-8") as fp:
                    cached = json.load(fp)
            self._catalogs[locale] = cached
        return cached


__all__ = ["I18nService"]
