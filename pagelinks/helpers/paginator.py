"""Page window computation and rendering of the ``paginate`` helper."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from typing import Any

from jinja2 import Environment, TemplateNotFound
from markupsafe import Markup
from starlette.requests import Request

from pagelinks.core.config import get_settings
from pagelinks.core.metrics import track_helper_render
from pagelinks.helpers.context import RequestContext
from pagelinks.helpers.i18n import Translator, translator as default_translator
from pagelinks.helpers.links import build_page_url, link_to, link_to_unless, resolve_context
from pagelinks.helpers.views import default_environment, view_paths
from pagelinks.shared.exceptions import TemplateLookupException
from pagelinks.shared.pagination import PaginationState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaginateOptions:
    """Options for the ``paginate`` helper.

    Unknown keys are collected in ``locals`` and handed to every partial
    template as extra variables. ``None`` means "use the configured default".
    """

    window: int | None = None
    outer_window: int | None = None
    left: int | None = None
    right: int | None = None
    param_name: str | None = None
    params: Mapping[str, Any] | None = None
    params_on_first_page: bool | None = None
    remote: bool = False
    theme: str | None = None
    views_prefix: str | None = None
    locale: str | None = None
    locals: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_kwargs(cls, **kwargs: Any) -> PaginateOptions:
        kwargs = dict(kwargs)
        extra = dict(kwargs.pop("locals", None) or {})
        names = {item.name for item in fields(cls)} - {"locals"}
        known = {key: value for key, value in kwargs.items() if key in names}
        extra.update((key, value) for key, value in kwargs.items() if key not in names)
        return cls(**known, locals=extra)

    def merged(self, **kwargs: Any) -> PaginateOptions:
        """Return a copy with keyword overrides applied."""
        if not kwargs:
            return self
        override = PaginateOptions.from_kwargs(**kwargs)
        names = {item.name for item in fields(self)} - {"locals"}
        changes = {key: value for key, value in kwargs.items() if key in names}
        changes["locals"] = {**self.locals, **override.locals}
        return replace(self, **changes)


class TemplateProxy:
    """Request-bound view adapter used by the paginator to build URLs and render partials."""

    def __init__(
        self,
        environment: Environment,
        context: RequestContext,
        *,
        param_name: str,
        params_on_first_page: bool,
        extra_params: Mapping[str, Any] | None = None,
        translator: Translator | None = None,
        locale: str | None = None,
    ) -> None:
        self.environment = environment
        self.current_path = context.path
        self.param_name = param_name
        self.params_on_first_page = params_on_first_page
        self.params = context.params_without(param_name)
        if extra_params:
            self.params.update(
                (key, value) for key, value in extra_params.items() if key != param_name
            )
        self.translator = translator or default_translator
        self.locale = locale

    def url_for(self, page: int) -> str:
        return build_page_url(
            self.current_path,
            self.params,
            self.param_name,
            page,
            self.params_on_first_page,
        )

    def t(self, key: str) -> Markup:
        """Translated label; locale files hold trusted markup."""
        return Markup(self.translator.translate(key, self.locale))

    def render(self, template_name: str, **context: Any) -> Markup:
        try:
            template = self.environment.get_template(template_name)
        except TemplateNotFound as exc:
            raise TemplateLookupException(template_name, view_paths(self.environment)) from exc
        return Markup(template.render(**context))


class Gap:
    """Marker for a run of hidden pages."""

    is_gap = True


GAP = Gap()


class PageProxy:
    """A page number seen relative to the current page and window settings."""

    is_gap = False

    def __init__(self, paginator: Paginator, number: int, last_was_gap: bool = False) -> None:
        self._paginator = paginator
        self.number = number
        self.was_truncated = last_was_gap

    def __str__(self) -> str:
        return str(self.number)

    def __int__(self) -> int:
        return self.number

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PageProxy):
            return self.number == other.number
        if isinstance(other, int):
            return self.number == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.number)

    def __repr__(self) -> str:
        return f"PageProxy({self.number})"

    @property
    def _current(self) -> int:
        return self._paginator.current

    @property
    def is_current(self) -> bool:
        return self.number == self._current

    @property
    def is_first(self) -> bool:
        return self.number == 1

    @property
    def is_last(self) -> bool:
        return self.number == self._paginator.total_pages

    @property
    def is_prev(self) -> bool:
        return self.number == self._current - 1

    @property
    def is_next(self) -> bool:
        return self.number == self._current + 1

    @property
    def rel(self) -> str | None:
        if self.is_next:
            return "next"
        if self.is_prev:
            return "prev"
        return None

    @property
    def is_left_outer(self) -> bool:
        return self.number <= self._paginator.left

    @property
    def is_right_outer(self) -> bool:
        return self._paginator.total_pages - self.number < self._paginator.right

    @property
    def is_inside_window(self) -> bool:
        return abs(self._current - self.number) <= self._paginator.window

    @property
    def is_single_gap(self) -> bool:
        """True when hiding this page would leave a gap of exactly one page."""
        paginator = self._paginator
        return (
            self.number == self._current - paginator.window - 1
            and self.number == paginator.left + 1
        ) or (
            self.number == self._current + paginator.window + 1
            and self.number == paginator.total_pages - paginator.right
        )

    @property
    def is_out_of_range(self) -> bool:
        return self.number > self._paginator.total_pages

    @property
    def display_tag(self) -> bool:
        return (
            self.is_left_outer
            or self.is_right_outer
            or self.is_inside_window
            or self.is_single_gap
        )


class Paginator:
    """Computes the visible page list and renders it through partial templates."""

    def __init__(
        self,
        template: TemplateProxy,
        *,
        current_page: int,
        total_pages: int,
        per_page: int,
        window: int = 4,
        outer_window: int = 0,
        left: int = 0,
        right: int = 0,
        remote: bool = False,
        theme: str | None = None,
        views_prefix: str | None = None,
        locals: Mapping[str, Any] | None = None,
    ) -> None:
        self.template = template
        self.current = current_page
        self.total_pages = total_pages
        self.per_page = per_page
        self.window = window
        self.left = left or outer_window
        self.right = right or outer_window
        self.remote = remote
        self.theme = theme
        self.views_prefix = views_prefix
        self.locals = dict(locals or {})

    @property
    def current_page(self) -> PageProxy:
        return PageProxy(self, self.current)

    def relevant_pages(self) -> list[int]:
        """Pages inside the outer windows or the inner window widened by one."""
        left_side = range(1, self.left + 2)
        right_side = range(self.total_pages - self.right, self.total_pages + 1)
        inside = range(self.current - self.window - 1, self.current + self.window + 2)
        pages = set(left_side) | set(inside) | set(right_side)
        return sorted(page for page in pages if 1 <= page <= self.total_pages)

    def each_page(self) -> list[PageProxy | Gap]:
        """Displayed pages in order, with each hidden run collapsed into one gap."""
        items: list[PageProxy | Gap] = []
        last_was_gap = False
        for number in self.relevant_pages():
            page = PageProxy(self, number, last_was_gap)
            if page.display_tag:
                items.append(page)
                last_was_gap = False
            elif not last_was_gap:
                items.append(GAP)
                last_was_gap = True
        return items

    def partial_name(self, name: str) -> str:
        parts = [self.views_prefix, "pagelinks", self.theme, f"_{name}.html"]
        return "/".join(part.strip("/") for part in parts if part)

    def _context(self, **extra: Any) -> dict[str, Any]:
        return {
            **self.locals,
            "paginator": self,
            "current_page": self.current_page,
            "total_pages": self.total_pages,
            "per_page": self.per_page,
            "remote": self.remote,
            "t": self.template.t,
            "link_to": link_to,
            "link_to_unless": link_to_unless,
            **extra,
        }

    def _tag(self, name: str, target_page: int | None = None, **extra: Any) -> Markup:
        context = self._context(**extra)
        if target_page is not None:
            context["url"] = self.template.url_for(target_page)
        return self.template.render(self.partial_name(name), **context)

    def page_tag(self, page: PageProxy) -> Markup:
        return self._tag("page", page.number, page=page)

    def first_page_tag(self) -> Markup:
        return self._tag("first_page", 1)

    def prev_page_tag(self) -> Markup:
        return self._tag("prev_page", self.current - 1)

    def next_page_tag(self) -> Markup:
        return self._tag("next_page", self.current + 1)

    def last_page_tag(self) -> Markup:
        return self._tag("last_page", self.total_pages)

    def gap_tag(self) -> Markup:
        return self._tag("gap")

    def render(self) -> Markup:
        if self.total_pages <= 1:
            return Markup("")
        logger.debug(
            "Rendering paginator page=%s total_pages=%s window=%s",
            self.current,
            self.total_pages,
            self.window,
        )
        return self.template.render(self.partial_name("paginator"), **self._context())

    def __html__(self) -> str:
        return str(self.render())

    def __str__(self) -> str:
        return str(self.render())


def _first_set(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def paginate(
    scope: PaginationState,
    options: PaginateOptions | None = None,
    *,
    request: RequestContext | Request | None = None,
    environment: Environment | None = None,
    translator: Translator | None = None,
    **kwargs: Any,
) -> Markup:
    """Render the page links for ``scope``.

    Keyword options: ``window`` (inner window, 4 by default), ``outer_window``
    (0), ``left`` / ``right`` (0), ``params`` (extra query params for every
    link), ``param_name`` (``page``), ``remote`` (False), ``theme``,
    ``views_prefix``, ``locale``. Any other keyword is passed to the partial
    templates as a variable.
    """
    settings = get_settings()
    options = (options or PaginateOptions()).merged(**kwargs)
    param_name = options.param_name or settings.param_name

    template = TemplateProxy(
        environment or default_environment(),
        resolve_context(request),
        param_name=param_name,
        params_on_first_page=_first_set(
            options.params_on_first_page,
            settings.params_on_first_page,
        ),
        extra_params=options.params,
        translator=translator,
        locale=options.locale or settings.default_locale,
    )
    paginator = Paginator(
        template,
        current_page=scope.current_page,
        total_pages=scope.total_pages,
        per_page=scope.limit_value,
        window=_first_set(options.window, settings.window),
        outer_window=_first_set(options.outer_window, settings.outer_window),
        left=_first_set(options.left, settings.left),
        right=_first_set(options.right, settings.right),
        remote=options.remote,
        theme=options.theme,
        views_prefix=options.views_prefix,
        locals=options.locals,
    )
    with track_helper_render("paginate"):
        return paginator.render()
