"""Shared fixtures: pin time settings so results do not depend on the host."""

from __future__ import annotations

import pytest

from calendar_state.config import get_settings


@pytest.fixture(autouse=True)
def pinned_settings(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("CALENDAR_STATE_TIMEZONE", "UTC")
    monkeypatch.setenv("CALENDAR_STATE_WEEK_START", "monday")
    monkeypatch.delenv("CALENDAR_STATE_VERIFY_SEED_ORDER", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
