from __future__ import annotations

import pytest
from markupsafe import Markup

import pagelinks.helpers.links as links_module
from pagelinks.core.config import Settings
from pagelinks.helpers.context import RequestContext
from pagelinks.helpers.links import (
    LinkOptions,
    build_page_url,
    link_to,
    link_to_next_page,
    link_to_previous_page,
    link_to_unless,
)
from pagelinks.shared.pagination import Page


def _page(page: int, total: int = 100, per_page: int = 10) -> Page[int]:
    return Page(items=[], total=total, page=page, per_page=per_page)


@pytest.fixture(autouse=True)
def _default_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(links_module, "get_settings", lambda: Settings(_env_file=None))


ARTICLES = RequestContext(path="/articles", params={"locale": "en", "page": "5"})


def test_build_page_url_appends_page_after_existing_params() -> None:
    url = build_page_url("/articles", {"locale": "en"}, "page", 3, False)
    assert url == "/articles?locale=en&page=3"


@pytest.mark.parametrize("page", [2, 7, 120])
def test_build_page_url_ignores_first_page_flag_after_page_one(page: int) -> None:
    without_flag = build_page_url("/articles", {"q": "x"}, "page", page, False)
    with_flag = build_page_url("/articles", {"q": "x"}, "page", page, True)

    assert f"page={page}" in without_flag
    assert without_flag == with_flag


def test_build_page_url_omits_page_one_by_default() -> None:
    assert build_page_url("/articles", {}, "page", 1, False) == "/articles"
    assert build_page_url("/articles", {"locale": "en"}, "page", 1, False) == "/articles?locale=en"


def test_build_page_url_keeps_page_one_when_configured() -> None:
    assert build_page_url("/articles", {}, "page", 1, True) == "/articles?page=1"


def test_build_page_url_drops_stale_page_key_for_page_one() -> None:
    assert build_page_url("/articles", {"page": "4"}, "page", 1, False) == "/articles"


def test_build_page_url_moves_overridden_page_key_last() -> None:
    assert build_page_url("/articles", {"page": "2", "q": "a"}, "page", 5, False) == "/articles?q=a&page=5"
    assert (
        build_page_url("/articles", {"page": "2", "locale": "en"}, "page", 3, False)
        == "/articles?locale=en&page=3"
    )


def test_next_link_puts_page_after_request_params() -> None:
    request = RequestContext(path="/articles", params={"page": "5", "locale": "en"})

    result = link_to_next_page(_page(5), "Next", request=request)

    assert 'href="/articles?locale=en&amp;page=6"' in result


def test_build_page_url_flattens_nested_params() -> None:
    url = build_page_url("/articles", {"filter": {"tag": "py"}, "ids": ["1", "2"]}, "p", 2, False)
    assert url == "/articles?filter%5Btag%5D=py&ids%5B%5D=1&ids%5B%5D=2&p=2"


def test_build_page_url_treats_missing_inputs_as_empty() -> None:
    assert build_page_url(None, None, "page", 2, False) == "?page=2"
    assert build_page_url("/a", "not-a-mapping", "page", 2, False) == "/a?page=2"  # type: ignore[arg-type]


def test_link_to_escapes_text_and_attributes() -> None:
    html = link_to("<b>", "/a?x=1&y=2", {"title": '"quoted"', "remote": True, "hidden": None})

    assert html == Markup(
        '<a href="/a?x=1&amp;y=2" title="&#34;quoted&#34;" data-remote="true">&lt;b&gt;</a>',
    )


def test_link_to_expands_data_attributes_and_trailing_underscore() -> None:
    html = link_to("Next", "/a", {"class_": "btn", "data": {"turbo": "false"}})
    assert html == Markup('<a href="/a" class="btn" data-turbo="false">Next</a>')


def test_link_to_unless_returns_escaped_text_when_condition_holds() -> None:
    assert link_to_unless(True, "<5>", "/a") == Markup("&lt;5&gt;")
    assert link_to_unless(False, "5", "/a") == Markup('<a href="/a">5</a>')


def test_previous_link_on_first_page_returns_empty_placeholder() -> None:
    result = link_to_previous_page(_page(1), "Previous", request=ARTICLES)

    assert result == Markup("")
    assert "rel" not in result


def test_previous_link_on_first_page_returns_placeholder_verbatim() -> None:
    placeholder = "<span>At the Beginning</span>"
    result = link_to_previous_page(_page(1), "Previous", request=ARTICLES, placeholder=placeholder)

    assert isinstance(result, Markup)
    assert str(result) == placeholder


def test_previous_link_points_to_previous_page() -> None:
    result = link_to_previous_page(_page(5), "Previous", request=ARTICLES)

    assert result == Markup('<a href="/articles?locale=en&amp;page=4" rel="previous">Previous</a>')


def test_previous_link_to_page_one_keeps_page_key() -> None:
    result = link_to_previous_page(_page(2), "Previous", request=RequestContext(path="/articles"))
    assert 'href="/articles?page=1"' in result


def test_previous_link_per_call_first_page_flag() -> None:
    result = link_to_previous_page(
        _page(2),
        "Previous",
        request=RequestContext(path="/articles"),
        params_on_first_page=False,
    )
    assert 'href="/articles"' in result


def test_previous_link_params_option_replaces_request_params() -> None:
    result = link_to_previous_page(_page(5), "Previous", request=ARTICLES, params={"q": "x"})

    assert 'href="/articles?q=x&amp;page=4"' in result
    assert "locale" not in result


def test_previous_link_passes_extra_attributes_and_rel_override() -> None:
    options = LinkOptions(remote=True, rel="prev-link", attributes={"class": "pager"})
    result = link_to_previous_page(_page(5), "Previous", options, request=ARTICLES)

    assert 'class="pager"' in result
    assert 'data-remote="true"' in result
    assert 'rel="prev-link"' in result
    assert 'rel="previous"' not in result


def test_custom_param_name_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        links_module,
        "get_settings",
        lambda: Settings(_env_file=None, param_name="p"),
    )

    result = link_to_next_page(_page(5), "Next", request=RequestContext(path="/articles"))
    assert 'href="/articles?p=6"' in result


def test_per_call_param_name_wins_over_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        links_module,
        "get_settings",
        lambda: Settings(_env_file=None, param_name="p"),
    )

    result = link_to_next_page(
        _page(5),
        "Next",
        request=RequestContext(path="/articles"),
        param_name="pg",
    )
    assert 'href="/articles?pg=6"' in result


def test_next_link_points_to_next_page() -> None:
    result = link_to_next_page(_page(5), "Next", request=ARTICLES)

    assert result == Markup('<a href="/articles?locale=en&amp;page=6" rel="next">Next</a>')


def test_next_link_on_last_page_returns_placeholder() -> None:
    result = link_to_next_page(_page(10), "Next", request=ARTICLES, placeholder="<span>End</span>")
    assert result == Markup("<span>End</span>")


def test_next_link_out_of_range_returns_placeholder_even_if_not_last() -> None:
    scope = _page(3, total=10, per_page=10)
    assert scope.is_out_of_range is True
    assert scope.is_last_page is False

    assert link_to_next_page(scope, "Next", request=ARTICLES) == Markup("")


def test_links_without_request_fall_back_to_empty_path() -> None:
    result = link_to_next_page(_page(5), "Next")
    assert 'href="?page=6"' in result


def test_link_options_split_unknown_keys_into_attributes() -> None:
    options = LinkOptions.from_kwargs(placeholder="-", remote=True, id="next", data={"x": 1})

    assert options.placeholder == "-"
    assert options.remote is True
    assert options.attributes == {"id": "next", "data": {"x": 1}}
