"""Shared fixtures."""

import time

import pytest


def _set_zone(monkeypatch, zone: str) -> None:
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", zone)
    time.tzset()


@pytest.fixture
def utc_zone(monkeypatch):
    """Pin the host's local zone to UTC."""
    _set_zone(monkeypatch, "UTC")
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def est_zone(monkeypatch):
    """Pin the host's local zone to a fixed UTC-5 named EST."""
    _set_zone(monkeypatch, "EST5")
    yield
    monkeypatch.undo()
    time.tzset()
