"""Pytest configuration and fixtures."""

from __future__ import annotations

import threading

import pytest

from receipt_print.classify import CategoryMatcher
from receipt_print.data import labels_for_locale


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep locale and printer settings independent of the host environment."""
    monkeypatch.delenv("RECEIPT_LOCALE", raising=False)
    for name in ("TYPE", "HOST", "PORT", "LINE_WIDTH", "MEDIA_WIDTH", "TIMEOUT", "QR_NATIVE", "PROFILE"):
        monkeypatch.delenv(f"RECEIPT_PRINTER_{name}", raising=False)


@pytest.fixture
def labels():
    return labels_for_locale("en")


@pytest.fixture
def matcher():
    return CategoryMatcher.for_locale("en")


@pytest.fixture
def receipt_payload():
    return {
        "orderNumber": "A-1001",
        "date": "2026-10-18 12:30",
        "total": "42.50",
        "footerText": "Thank you!",
        "items": [
            {"name": "Coffee", "price": "3.00", "description": "Large, oat milk"},
            {"name": "Discount 10%", "price": "-1.00"},
            {"name": "Sandwich", "price": "6.50"},
            {"name": "Payment method", "price": "Cash"},
            {"name": "Change", "price": "2.50"},
            {"name": "Store Credit", "price": "-0.50"},
            {"name": "Amount tendered", "price": "50.00"},
        ],
    }


class RecordingDriver:
    """In-memory PrinterDriver that records calls and tracks overlap."""

    def __init__(
        self,
        fail_with: Exception | None = None,
        delay: float = 0.0,
        gate: threading.Event | None = None,
    ) -> None:
        self.fail_with = fail_with
        self.delay = delay
        self.gate = gate
        self.started = threading.Event()
        self.executed = []
        self.resets = 0
        self.character_sets = []
        self.max_in_flight = 0
        self._in_flight = 0
        self._lock = threading.Lock()
        self.online = True

    def execute(self, sequence):
        with self._lock:
            self._in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self._in_flight)
        self.started.set()
        try:
            if self.gate is not None:
                self.gate.wait(5)
            if self.delay:
                threading.Event().wait(self.delay)
            if self.fail_with is not None:
                raise self.fail_with
            self.executed.append(sequence)
        finally:
            with self._lock:
                self._in_flight -= 1

    def reset(self):
        self.resets += 1

    def is_online(self):
        return self.online

    def set_character_set(self, name):
        self.character_sets.append(name)


@pytest.fixture
def driver():
    return RecordingDriver()


@pytest.fixture
def make_driver():
    return RecordingDriver
