"""Form-encoded query strings with bracket notation for lists and mappings."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qsl, quote_plus

_KEY_PATTERN = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])*)$")
_SEGMENT_PATTERN = re.compile(r"\[([^\[\]]*)\]")


def _split_key(key: str) -> list[str]:
    """Split ``a[b][]`` into ``["a", "b", ""]``; unparseable keys stay whole."""
    match = _KEY_PATTERN.match(key)
    if match is None:
        return [key]
    return [match.group(1), *_SEGMENT_PATTERN.findall(match.group(2))]


def _assign(target: dict[str, Any], segments: list[str], value: str) -> None:
    key, rest = segments[0], segments[1:]
    if not rest:
        target[key] = value
        return

    if rest[0] == "":
        items = target.get(key)
        if not isinstance(items, list):
            items = target[key] = []
        nested = rest[1:]
        if not nested:
            items.append(value)
        elif items and isinstance(items[-1], dict) and nested[0] not in items[-1]:
            _assign(items[-1], nested, value)
        else:
            item: dict[str, Any] = {}
            _assign(item, nested, value)
            items.append(item)
        return

    child = target.get(key)
    if not isinstance(child, dict):
        child = target[key] = {}
    _assign(child, rest, value)


def parse_query(query_string: str | bytes | None) -> dict[str, Any]:
    """Decode a query string into nested params.

    A repeated plain key keeps its last value, ``key[]`` collects a list and
    ``key[sub]`` builds a nested mapping. Blank values are kept.
    """
    if not query_string:
        return {}
    if isinstance(query_string, bytes):
        query_string = query_string.decode("latin-1")

    params: dict[str, Any] = {}
    for key, value in parse_qsl(query_string, keep_blank_values=True):
        if not key:
            continue
        _assign(params, _split_key(key), value)
    return params


def _flatten(name: str, value: Any) -> list[tuple[str, str | None]]:
    if isinstance(value, Mapping):
        return flatten_query(value, prefix=name)
    if isinstance(value, (list, tuple)):
        pairs: list[tuple[str, str | None]] = []
        for item in value:
            pairs.extend(_flatten(f"{name}[]", item))
        return pairs
    if value is None:
        return [(name, None)]
    if isinstance(value, bool):
        return [(name, "true" if value else "false")]
    return [(name, str(value))]


def flatten_query(params: Mapping[Any, Any], prefix: str | None = None) -> list[tuple[str, str | None]]:
    """Flatten nested params into ordered ``(key, value)`` pairs."""
    pairs: list[tuple[str, str | None]] = []
    for key, value in params.items():
        name = f"{prefix}[{key}]" if prefix else str(key)
        pairs.extend(_flatten(name, value))
    return pairs


def encode_query(params: Mapping[Any, Any] | None) -> str:
    """Serialize params with form encoding, keeping key order."""
    if not params:
        return ""
    parts = []
    for key, value in flatten_query(params):
        if value is None:
            parts.append(quote_plus(key))
        else:
            parts.append(f"{quote_plus(key)}={quote_plus(value)}")
    return "&".join(parts)
