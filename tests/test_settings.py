from __future__ import annotations

import importlib

import pytest

from config import get_settings_module
from src.attendance_tracker.attendance_tracker.database.bootstrap import describe_target


@pytest.mark.parametrize(
    "app_env, expected",
    [
        ("production", "config.production"),
        (" PROD ", "config.production"),
        ("test", "config.testing"),
        ("development", "config.development"),
        ("staging", "config.development"),
    ],
)
def test_app_env_selects_settings_module(monkeypatch, app_env, expected):
    monkeypatch.setenv("APP_ENV", app_env)
    assert get_settings_module() == expected


def test_missing_app_env_defaults_to_development(monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)
    assert get_settings_module() == "config.development"


def test_explicit_env_wins_over_app_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    assert get_settings_module("testing") == "config.testing"


def test_testing_settings_module_loads():
    settings = importlib.import_module(get_settings_module("testing"))

    assert settings.TESTING is True
    assert settings.JWT_SECRET == "test-jwt-secret"
    assert "database" in settings.DB_CONFIG


def test_describe_target_hides_password():
    target = describe_target(
        {"user": "app", "password": "s3cret", "host": "db", "port": 3307, "database": "attendance_tracker"}
    )

    assert target == "app@db:3307/attendance_tracker"
    assert "s3cret" not in target
