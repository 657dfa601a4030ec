"""Shared test fixtures."""

from __future__ import annotations

import pytest

# Variables the tests read through os.environ.
_ENV_KEYS = (
    "HOST",
    "PORT",
    "DEBUG",
    "APP_HOST",
    "APP_PORT",
    "APP_DEBUG",
    "SECRET_KEY",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every variable the tests bind so os.environ starts empty for them."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch
