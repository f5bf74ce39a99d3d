"""Page collections and request/statement pagination helpers."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from fastapi import Query, Request
from pydantic import BaseModel, Field
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pagelinks.core.config import get_settings

T = TypeVar("T")


@runtime_checkable
class PaginationState(Protocol):
    """Read-only view of a paginated collection used by the link helpers."""

    @property
    def current_page(self) -> int: ...

    @property
    def total_pages(self) -> int: ...

    @property
    def limit_value(self) -> int: ...

    @property
    def is_first_page(self) -> bool: ...

    @property
    def is_last_page(self) -> bool: ...

    @property
    def is_out_of_range(self) -> bool: ...

    @property
    def prev_page(self) -> int | None: ...

    @property
    def next_page(self) -> int | None: ...


class PaginationParams(BaseModel):
    """Pagination request params."""

    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=25, ge=1)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


def _coerce_page(raw_value: str | None) -> int:
    if raw_value is None:
        return 1
    try:
        page = int(raw_value)
    except ValueError:
        return 1
    return page if page >= 1 else 1


def get_pagination_params(
    request: Request,
    per_page: int | None = Query(default=None, ge=1),
) -> PaginationParams:
    """FastAPI dependency reading the configured page parameter."""
    settings = get_settings()
    page = _coerce_page(request.query_params.get(settings.param_name))
    size = min(per_page or settings.default_per_page, settings.max_per_page)
    return PaginationParams(page=page, per_page=size)


class Page(BaseModel, Generic[T]):
    """Generic paginated collection."""

    items: list[T]
    total: int
    page: int
    per_page: int

    @property
    def current_page(self) -> int:
        return self.page

    @property
    def limit_value(self) -> int:
        return self.per_page

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    @property
    def total_pages(self) -> int:
        if self.per_page <= 0:
            return 1
        return math.ceil(self.total / self.per_page)

    @property
    def is_first_page(self) -> bool:
        return self.page == 1

    @property
    def is_last_page(self) -> bool:
        return self.page == self.total_pages

    @property
    def is_out_of_range(self) -> bool:
        return self.page > self.total_pages

    @property
    def prev_page(self) -> int | None:
        if self.is_first_page:
            return None
        return self.page - 1

    @property
    def next_page(self) -> int | None:
        if self.is_last_page or self.is_out_of_range:
            return None
        return self.page + 1


def build_page(items: list[T], total: int, params: PaginationParams) -> Page[T]:
    """Build page object from query result and params."""
    return Page(items=items, total=total, page=params.page, per_page=params.per_page)


def paginate_sequence(items: Sequence[T], params: PaginationParams) -> Page[T]:
    """Slice an in-memory sequence into a page."""
    window = list(items[params.offset : params.offset + params.per_page])
    return build_page(window, len(items), params)


async def paginate_statement(
    session: AsyncSession,
    statement: Select[Any],
    params: PaginationParams,
) -> Page[Any]:
    """Run count and windowed queries for a select statement."""
    count_stmt = select(func.count()).select_from(statement.order_by(None).subquery())
    total = int((await session.scalar(count_stmt)) or 0)

    stmt = statement.limit(params.per_page).offset(params.offset)
    items = list((await session.scalars(stmt)).all())
    return build_page(items, total, params)
