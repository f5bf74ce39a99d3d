"""Explicit per-request context for link building."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from starlette.requests import Request

from pagelinks.helpers.query import parse_query

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestContext:
    """Path and decoded query params of the request being rendered."""

    path: str | None = None
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", MappingProxyType(dict(self.params or {})))

    @classmethod
    def empty(cls) -> RequestContext:
        return cls()

    @classmethod
    def from_query_string(cls, path: str | None, query_string: str | bytes | None) -> RequestContext:
        """Build a context from a raw path and query string."""
        return cls(path=path, params=parse_query(query_string))

    @classmethod
    def from_scope(cls, scope: Mapping[str, Any] | None) -> RequestContext:
        """Build a context from an ASGI scope; a missing scope gives an empty one."""
        if not scope:
            logger.debug("No request scope available, using empty request context")
            return cls.empty()
        path = scope.get("path")
        if not isinstance(path, str):
            path = None
        return cls.from_query_string(path, scope.get("query_string"))

    @classmethod
    def from_request(cls, request: Request | None) -> RequestContext:
        """Build a context from a Starlette request; ``None`` gives an empty one."""
        if request is None:
            logger.debug("No request available, using empty request context")
            return cls.empty()
        return cls.from_scope(getattr(request, "scope", None))

    def params_without(self, key: str) -> dict[str, Any]:
        """Return a copy of the params with ``key`` removed."""
        return {name: value for name, value in self.params.items() if name != key}
