"""Install the pagination helpers into a Jinja2 environment."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, pass_context
from jinja2.runtime import Context
from markupsafe import Markup

from pagelinks.helpers.context import RequestContext
from pagelinks.helpers.links import link_to_next_page, link_to_previous_page
from pagelinks.helpers.paginator import paginate
from pagelinks.helpers.views import append_bundled_views, view_paths as environment_view_paths
from pagelinks.shared.pagination import PaginationState

logger = logging.getLogger(__name__)


def _environment_of(target: Any) -> Environment:
    """Accept a Jinja2 environment or anything exposing one as ``.env``."""
    if isinstance(target, Environment):
        return target
    environment = getattr(target, "env", None)
    if isinstance(environment, Environment):
        return environment
    raise TypeError(f"Cannot register pagination helpers on {type(target).__name__}")


def _request_context(context: Context) -> RequestContext:
    prepared = context.get("request_context")
    if isinstance(prepared, RequestContext):
        return prepared
    return RequestContext.from_request(context.get("request"))


@pass_context
def _paginate(context: Context, scope: PaginationState, **options: Any) -> Markup:
    return paginate(
        scope,
        request=_request_context(context),
        environment=context.environment,
        **options,
    )


@pass_context
def _link_to_previous_page(context: Context, scope: PaginationState, text: Any, **options: Any) -> Markup:
    return link_to_previous_page(scope, text, request=_request_context(context), **options)


@pass_context
def _link_to_next_page(context: Context, scope: PaginationState, text: Any, **options: Any) -> Markup:
    return link_to_next_page(scope, text, request=_request_context(context), **options)


HELPERS = {
    "paginate": _paginate,
    "link_to_previous_page": _link_to_previous_page,
    "link_to_next_page": _link_to_next_page,
}


def register_helpers(target: Any, views_dir: Path | str | None = None) -> Environment:
    """Make the helpers callable from templates of ``target``.

    ``target`` is a Jinja2 ``Environment`` or a FastAPI ``Jinja2Templates``.
    Templates need ``request`` (or a prepared ``request_context``) in their
    context for links to carry the current path and query params.
    """
    environment = _environment_of(target)
    if views_dir is not None:
        app_loader = FileSystemLoader([str(views_dir)])
        if environment.loader is None:
            environment.loader = app_loader
        elif str(views_dir) not in environment_view_paths(environment):
            environment.loader = ChoiceLoader([app_loader, environment.loader])
    append_bundled_views(environment)
    environment.globals.update(HELPERS)
    logger.info("Pagination helpers registered, view paths: %s", environment_view_paths(environment))
    return environment


def view_paths(target: Any) -> list[str]:
    """Directories searched for templates by ``target``, app views first."""
    return environment_view_paths(_environment_of(target))
