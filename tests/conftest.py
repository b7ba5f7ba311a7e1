# tests/conftest.py
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable

import pytest

from unicode_atlas.services.catalog_store import Catalog

# Timer and idle tests only need an event loop, not a screen.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

SAMPLE_DATA = Path(__file__).resolve().parents[1] / "data" / "unicode-data.json"


def raw_record(index: int, **overrides: Any) -> dict[str, Any]:
    """A synthetic catalog entry; codepoints are unique per index."""
    cp = 0x4E00 + index
    raw = {
        "Codepoint": "U+{:04X}".format(cp),
        "Character": chr(cp),
        "Name": "CJK UNIFIED IDEOGRAPH-{:04X}".format(cp),
        "Category_long": "Letter, Other",
        "Unicode Block": "CJK Unified Ideographs",
    }
    raw.update(overrides)
    return raw


def raw_records(count: int) -> list[dict[str, Any]]:
    return [raw_record(i) for i in range(count)]


class ManualDefer:
    """Stands in for QTimer.singleShot; callbacks run only when the test says so."""

    def __init__(self) -> None:
        self.pending: list[Callable[[], None]] = []
        self.delays: list[int] = []

    def __call__(self, delay_ms: int, callback: Callable[[], None]) -> None:
        self.delays.append(delay_ms)
        self.pending.append(callback)

    def run_all(self) -> None:
        while self.pending:
            self.pending.pop(0)()


class CountingDeadline:
    """Idle deadline that expires after `budget` records."""

    def __init__(self, budget: int) -> None:
        self._left = budget

    def time_remaining(self) -> float:
        self._left -= 1
        return float(max(0, self._left))


class ManualIdleScheduler:
    def __init__(self, budget: int = 3) -> None:
        self.budget = budget
        self.pending: list[Callable[[Any], None]] = []

    def request_idle(self, callback: Callable[[Any], None]) -> None:
        self.pending.append(callback)

    def run_next(self) -> bool:
        if not self.pending:
            return False
        self.pending.pop(0)(CountingDeadline(self.budget))
        return True

    def run_all(self) -> None:
        while self.run_next():
            pass


@pytest.fixture
def manual_defer() -> ManualDefer:
    return ManualDefer()


@pytest.fixture
def idle() -> ManualIdleScheduler:
    return ManualIdleScheduler()


@pytest.fixture
def sample_catalog() -> Catalog:
    return Catalog.from_raw(json.loads(SAMPLE_DATA.read_text(encoding="utf-8")))


@pytest.fixture
def catalog_file(tmp_path: Path) -> Callable[[Any], Path]:
    def _write(payload: Any) -> Path:
        path = tmp_path / "unicode-data.json"
        text = payload if isinstance(payload, str) else json.dumps(payload)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
