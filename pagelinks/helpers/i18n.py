"""Translations for pagination labels loaded from JSON locale files."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

BUNDLED_LOCALES_DIR = Path(__file__).resolve().parent / "locales"


def _deep_merge(target: dict[str, Any], source: dict[str, Any]) -> None:
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_merge(target[key], value)
        else:
            target[key] = value


class Translator:
    """Dotted-key lookup over locale files; later files override earlier ones."""

    def __init__(self, load_path: Iterable[Path | str] = (), default_locale: str = "en") -> None:
        self.load_path: list[Path] = [Path(item) for item in load_path]
        self.default_locale = default_locale
        self._translations: dict[str, Any] | None = None
        self._loaded_from: tuple[Path, ...] = ()

    def add_files(self, paths: Iterable[Path | str]) -> None:
        """Append locale files to the load path."""
        self.load_path.extend(Path(item) for item in paths)

    def reload(self) -> None:
        """Drop cached translations so the load path is read again."""
        self._translations = None

    def _load(self) -> dict[str, Any]:
        current = tuple(self.load_path)
        if self._translations is not None and current == self._loaded_from:
            return self._translations

        translations: dict[str, Any] = {}
        for path in current:
            try:
                payload = json.loads(path.read_text(encoding="utf-8"))
            except FileNotFoundError:
                logger.warning("Locale file %s not found, skipping", path)
                continue
            except json.JSONDecodeError:
                logger.warning("Locale file %s is not valid JSON, skipping", path)
                continue
            if isinstance(payload, dict):
                _deep_merge(translations, payload)

        self._translations = translations
        self._loaded_from = current
        return translations

    def _lookup(self, locale: str, key: str) -> str | None:
        node: Any = self._load().get(locale)
        for part in key.split("."):
            if not isinstance(node, dict):
                return None
            node = node.get(part)
        return node if isinstance(node, str) else None

    def translate(self, key: str, locale: str | None = None) -> str:
        """Return the label for ``key``, falling back to the default locale and the key."""
        for candidate in (locale, self.default_locale):
            if candidate:
                value = self._lookup(candidate, key)
                if value is not None:
                    return value
        return key

    def locales(self) -> list[str]:
        return sorted(self._load())


translator = Translator(sorted(BUNDLED_LOCALES_DIR.glob("*.json")))
