"""Pagination link helpers for FastAPI / Jinja2 views."""

from pagelinks.helpers.context import RequestContext
from pagelinks.helpers.links import (
    LinkOptions,
    build_page_url,
    link_to_next_page,
    link_to_previous_page,
)
from pagelinks.helpers.paginator import PaginateOptions, Paginator, paginate
from pagelinks.helpers.registration import register_helpers, view_paths

__all__ = [
    "LinkOptions",
    "PaginateOptions",
    "Paginator",
    "RequestContext",
    "build_page_url",
    "link_to_next_page",
    "link_to_previous_page",
    "paginate",
    "register_helpers",
    "view_paths",
]
