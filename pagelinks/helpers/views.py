"""Jinja2 environments and view search paths for the pagination partials."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from jinja2 import BaseLoader, ChoiceLoader, Environment, FileSystemLoader, select_autoescape

from pagelinks.core.config import get_settings

BUNDLED_VIEWS_DIR = Path(__file__).resolve().parent / "templates"


def append_bundled_views(environment: Environment) -> Environment:
    """Add the bundled partials as the last view path of ``environment``."""
    bundled = str(BUNDLED_VIEWS_DIR)
    loader = environment.loader
    if isinstance(loader, FileSystemLoader):
        if bundled not in [str(item) for item in loader.searchpath]:
            loader.searchpath.append(bundled)
    elif loader is None:
        environment.loader = FileSystemLoader([bundled])
    elif bundled not in view_paths(environment):
        environment.loader = ChoiceLoader([loader, FileSystemLoader([bundled])])
    return environment


def _loader_paths(loader: BaseLoader | None) -> list[str]:
    if isinstance(loader, FileSystemLoader):
        return [str(item) for item in loader.searchpath]
    if isinstance(loader, ChoiceLoader):
        paths: list[str] = []
        for item in loader.loaders:
            paths.extend(_loader_paths(item))
        return paths
    return []


def view_paths(environment: Environment) -> list[str]:
    """List the filesystem directories searched for templates, in order."""
    return _loader_paths(environment.loader)


def build_environment(views_dir: Path | str | None = None) -> Environment:
    """Create an environment searching ``views_dir`` then the bundled partials."""
    searchpath = [str(views_dir)] if views_dir is not None else []
    environment = Environment(
        loader=FileSystemLoader(searchpath),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    return append_bundled_views(environment)


@lru_cache
def default_environment() -> Environment:
    """Return the cached environment used when no host environment is given."""
    return build_environment(get_settings().views_dir)
