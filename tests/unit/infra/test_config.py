"""Unit tests for Settings."""

import pytest
from pydantic import ValidationError

from resource_cache.infra.config import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("RESOURCE_CACHE_PORT", raising=False)
    settings = Settings(_env_file=None)

    assert settings.key_prefix == "/apisix"
    assert settings.http_port == 9000
    assert settings.reinit_sweeper_enabled is True
    assert settings.watch_history_revisions == 10_000


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("RESOURCE_CACHE_KEY_PREFIX", "/gateway/")
    monkeypatch.setenv("RESOURCE_CACHE_LOAD_TIMEOUT_SECONDS", "1.5")
    monkeypatch.setenv("PORT", "8080")

    settings = Settings(_env_file=None)

    assert settings.key_prefix == "/gateway"
    assert settings.load_timeout_seconds == 1.5
    assert settings.http_port == 8080


def test_empty_prefix_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, key_prefix="/")
