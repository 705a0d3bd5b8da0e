"""Startup configuration: signing secrets and row caps."""

from __future__ import annotations

import pytest

from api import create_app
from api.config import DevelopmentConfig, ProductionConfig, TestingConfig, get_config
from services.limits import parse_row_limit
from utils.security import ConfigurationError


@pytest.mark.parametrize(
    "name, expected",
    [("test", TestingConfig), ("testing", TestingConfig), ("prod", ProductionConfig), ("dev", DevelopmentConfig)],
)
def test_get_config(name, expected):
    assert get_config(name) is expected


def test_shared_secret_refuses_to_start(monkeypatch):
    monkeypatch.setattr(TestingConfig, "JWT_REFRESH_SECRET", TestingConfig.JWT_ACCESS_SECRET)
    with pytest.raises(ConfigurationError):
        create_app("test")


def test_missing_secret_refuses_to_start(monkeypatch):
    monkeypatch.setattr(TestingConfig, "JWT_ACCESS_SECRET", None)
    with pytest.raises(ConfigurationError):
        create_app("test")


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, None),
        ("", None),
        ("unlimited", None),
        ("UNLIMITED", None),
        ("25", 25),
        (" 3 ", 3),
        ("0", None),
        ("-4", None),
        ("lots", None),
    ],
)
def test_parse_row_limit(raw, expected):
    assert parse_row_limit(raw, "MAX_ROWS_USERS") == expected
