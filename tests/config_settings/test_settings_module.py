from __future__ import annotations

import importlib

import pytest

from config import get_settings_module


@pytest.mark.parametrize(
    "env, expected",
    [
        ("production", "config.production"),
        ("PROD", "config.production"),
        ("testing", "config.testing"),
        ("staging", "config.development"),
    ],
)
def test_app_env_selects_settings_module(monkeypatch, env, expected):
    monkeypatch.setenv("APP_ENV", env)
    assert get_settings_module() == expected


def test_testing_settings_carry_ledger_defaults():
    settings = importlib.import_module("config.testing")
    assert settings.TESTING is True
    assert settings.DB_CONFIG["database"] == "site_ledger_test"
    assert settings.WEEK_START == 6
    assert settings.FETCH_LIMIT == 1000
