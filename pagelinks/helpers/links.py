"""Page URL construction and previous/next link helpers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from typing import Any

from markupsafe import Markup, escape
from starlette.requests import Request

from pagelinks.core.config import get_settings
from pagelinks.core.metrics import track_helper_render
from pagelinks.helpers.context import RequestContext
from pagelinks.helpers.query import encode_query
from pagelinks.shared.pagination import PaginationState


@dataclass(frozen=True)
class LinkOptions:
    """Options for a single previous/next link.

    Keys without a named field end up in ``attributes`` and are rendered as
    attributes of the ``<a>`` tag.
    """

    params: Mapping[str, Any] | None = None
    param_name: str | None = None
    placeholder: str | None = None
    remote: bool = False
    rel: str | None = None
    params_on_first_page: bool | None = None
    attributes: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_kwargs(cls, **kwargs: Any) -> LinkOptions:
        kwargs = dict(kwargs)
        extra = dict(kwargs.pop("attributes", None) or {})
        names = _field_names(cls)
        known = {key: value for key, value in kwargs.items() if key in names}
        extra.update((key, value) for key, value in kwargs.items() if key not in names)
        return cls(**known, attributes=extra)

    def merged(self, **kwargs: Any) -> LinkOptions:
        """Return a copy with keyword overrides applied."""
        if not kwargs:
            return self
        override = LinkOptions.from_kwargs(**kwargs)
        changes = {key: value for key, value in kwargs.items() if key in _field_names(LinkOptions)}
        changes["attributes"] = {**self.attributes, **override.attributes}
        return replace(self, **changes)


def _field_names(cls: type) -> set[str]:
    return {item.name for item in fields(cls)} - {"attributes"}


def resolve_context(request: RequestContext | Request | None) -> RequestContext:
    """Accept either a prepared context or a Starlette request."""
    if isinstance(request, RequestContext):
        return request
    return RequestContext.from_request(request)


def build_page_url(
    base_path: str | None,
    current_params: Mapping[str, Any] | None,
    param_name: str,
    page: int,
    params_on_first_page: bool,
) -> str:
    """Return ``base_path`` with the query params and page number applied.

    The page key goes after the other params and is left out for page 1
    unless ``params_on_first_page`` is set.
    """
    query: dict[str, Any] = dict(current_params) if isinstance(current_params, Mapping) else {}
    query.pop(param_name, None)
    if page != 1 or params_on_first_page:
        query[param_name] = page

    path = base_path or ""
    if not query:
        return path
    return f"{path}?{encode_query(query)}"


def tag_attributes(attributes: Mapping[str, Any]) -> Markup:
    """Render a mapping as escaped HTML attributes."""
    rendered = Markup("")
    for raw_name, value in attributes.items():
        name = str(raw_name).rstrip("_")
        if name == "remote":
            name, value = "data-remote", ("true" if value else None)
        if name == "data" and isinstance(value, Mapping):
            rendered += tag_attributes({f"data-{key}": item for key, item in value.items()})
            continue
        if value is None or value is False:
            continue
        if value is True:
            value = name
        rendered += Markup(' {}="{}"').format(name, value)
    return rendered


def link_to(text: Any, url: str, attributes: Mapping[str, Any] | None = None) -> Markup:
    """Build an ``<a>`` tag; text is escaped unless already markup."""
    return Markup('<a href="{}"{}>{}</a>').format(url, tag_attributes(attributes or {}), text)


def link_to_unless(
    condition: bool,
    text: Any,
    url: str,
    attributes: Mapping[str, Any] | None = None,
) -> Markup:
    """Return the bare text when ``condition`` holds, otherwise a link."""
    if condition:
        return escape(text)
    return link_to(text, url, attributes)


def _page_link(
    page: int,
    text: Any,
    options: LinkOptions,
    context: RequestContext,
    default_rel: str,
) -> Markup:
    settings = get_settings()
    params = options.params if options.params is not None else context.params
    param_name = options.param_name or settings.param_name
    include_first = True if options.params_on_first_page is None else options.params_on_first_page
    url = build_page_url(context.path, params, param_name, page, include_first)
    attributes = {
        **options.attributes,
        "remote": options.remote,
        "rel": options.rel or default_rel,
    }
    return link_to(text, url, attributes)


def link_to_previous_page(
    scope: PaginationState,
    text: Any,
    options: LinkOptions | None = None,
    *,
    request: RequestContext | Request | None = None,
    **kwargs: Any,
) -> Markup:
    """Link to the previous page, or the placeholder on the first page.

    ``<a href="/articles?page=4" rel="previous">Previous Page</a>``
    """
    with track_helper_render("link_to_previous_page"):
        options = (options or LinkOptions()).merged(**kwargs)
        if scope.is_first_page:
            return Markup(options.placeholder or "")
        return _page_link(scope.prev_page, text, options, resolve_context(request), "previous")


def link_to_next_page(
    scope: PaginationState,
    text: Any,
    options: LinkOptions | None = None,
    *,
    request: RequestContext | Request | None = None,
    **kwargs: Any,
) -> Markup:
    """Link to the next page, or the placeholder on the last or an out-of-range page."""
    with track_helper_render("link_to_next_page"):
        options = (options or LinkOptions()).merged(**kwargs)
        if scope.is_last_page or scope.is_out_of_range:
            return Markup(options.placeholder or "")
        return _page_link(scope.next_page, text, options, resolve_context(request), "next")
