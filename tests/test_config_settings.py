from __future__ import annotations

import pytest
from pydantic import ValidationError

from pagelinks.core.config import Settings


def test_defaults_match_paginator_conventions() -> None:
    settings = Settings(_env_file=None)

    assert settings.param_name == "page"
    assert settings.params_on_first_page is False
    assert settings.window == 4
    assert settings.outer_window == 0
    assert settings.left == 0
    assert settings.right == 0


def test_param_name_is_stripped() -> None:
    settings = Settings(_env_file=None, param_name="  p  ")
    assert settings.param_name == "p"


def test_blank_param_name_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, param_name="   ")


def test_negative_window_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, window=-1)


def test_default_per_page_must_not_exceed_maximum() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, default_per_page=50, max_per_page=20)


def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PAGELINKS_PARAM_NAME", "p")
    monkeypatch.setenv("PAGELINKS_PARAMS_ON_FIRST_PAGE", "true")
    monkeypatch.setenv("PAGELINKS_DEFAULT_LOCALE", "RU")

    settings = Settings(_env_file=None)

    assert settings.param_name == "p"
    assert settings.params_on_first_page is True
    assert settings.default_locale == "ru"
