"""Shared pytest fixtures for superflux_highlights tests."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from superflux_highlights.config import get_settings

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Isolate each test from cached settings and stray env vars."""
    for key in list(os.environ):
        if key.startswith(("ANCHOR__", "APP__")):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
