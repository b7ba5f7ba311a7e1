from __future__ import annotations

import time
from typing import Callable, Protocol

from PyQt6.QtCore import QTimer


class IdleDeadline(Protocol):
    def time_remaining(self) -> float:
        """Milliseconds left in the current idle slice."""
        ...


IdleCallback = Callable[[IdleDeadline], None]


class IdleScheduler(Protocol):
    def request_idle(self, callback: IdleCallback) -> None: ...


class _MonotonicDeadline:
    def __init__(self, budget_ms: float) -> None:
        self._end = time.monotonic() + budget_ms / 1000.0

    def time_remaining(self) -> float:
        return max(0.0, (self._end - time.monotonic()) * 1000.0)


class QtIdleScheduler:
    """Run callbacks from the Qt event loop once pending events are handled.

    A zero-delay single-shot timer fires after the queued events, which is
    the closest Qt equivalent of an idle callback. Each callback gets a fixed
    time budget so one slice never monopolizes the loop.
    """

    def __init__(self, *, budget_ms: float = 8.0) -> None:
        self._budget_ms = float(budget_ms)

    def request_idle(self, callback: IdleCallback) -> None:
        QTimer.singleShot(0, lambda: callback(_MonotonicDeadline(self._budget_ms)))
