from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Sequence

from PyQt6.QtCore import QTimer

from unicode_atlas.domain.character_record import CharacterRecord
from unicode_atlas.domain.enums import BATCH_SIZE, LOAD_MORE_DELAY_MS, WindowStatus

logger = logging.getLogger(__name__)

Defer = Callable[[int, Callable[[], None]], None]


def _qt_defer(delay_ms: int, callback: Callable[[], None]) -> None:
    QTimer.singleShot(max(0, int(delay_ms)), callback)


class WindowManager:
    """Incrementally growing prefix of a result sequence.

    Owns:
    - the current result sequence
    - the window size (grows one batch per completed request_more())
    - the in-flight flag for the pending batch append

    The consumer decides when to ask for more (scroll proximity etc.); this
    class never polls.
    """

    def __init__(
        self,
        *,
        batch_size: int = BATCH_SIZE,
        delay_ms: int = LOAD_MORE_DELAY_MS,
        defer: Optional[Defer] = None,
    ) -> None:
        self._batch_size = max(1, int(batch_size))
        self._delay_ms = max(0, int(delay_ms))
        self._defer: Defer = defer or _qt_defer
        self._results: tuple[CharacterRecord, ...] = ()
        self._revealed: tuple[CharacterRecord, ...] = ()
        self._size = 0
        self._loading = False
        self._gen = 0
        self._lock = threading.Lock()
        self._on_changed: list[Callable[[], None]] = []

    # --- Callbacks ---

    def add_on_window_changed(self, callback: Callable[[], None] | None) -> None:
        if callback is None:
            return
        self._on_changed.append(callback)

    def _notify_changed(self) -> None:
        for cb in list(self._on_changed):
            try:
                cb()
            except Exception:
                logger.exception("Window change callback failed")

    # --- Accessors ---

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def size(self) -> int:
        return self._size

    @property
    def revealed(self) -> tuple[CharacterRecord, ...]:
        return self._revealed

    @property
    def total(self) -> int:
        return len(self._results)

    @property
    def is_loading(self) -> bool:
        return self._loading

    def has_more(self) -> bool:
        return len(self._revealed) < len(self._results)

    @property
    def status(self) -> WindowStatus:
        if not self._results:
            return WindowStatus.NO_RESULTS
        if self._loading:
            return WindowStatus.LOADING
        if self.has_more():
            return WindowStatus.PARTIAL
        return WindowStatus.COMPLETE

    # --- Operations ---

    def reset(self, results: Sequence[CharacterRecord]) -> None:
        """Re-base onto a new result sequence showing exactly one batch."""
        with self._lock:
            # Any append scheduled for the previous sequence is now stale.
            self._gen += 1
            self._loading = False
            self._results = tuple(results)
            self._size = self._batch_size
            self._revealed = self._results[: self._size]
        self._notify_changed()

    def request_more(self) -> bool:
        """Schedule the next batch; return False when nothing was scheduled."""
        with self._lock:
            if self._loading or not self.has_more():
                return False
            self._loading = True
            token = self._gen
        logger.debug("Scheduling batch append at %d/%d", len(self._revealed), len(self._results))
        self._defer(self._delay_ms, lambda: self._append_batch(token))
        return True

    def _append_batch(self, token: int) -> None:
        with self._lock:
            if token != self._gen:
                return
            self._size += self._batch_size
            self._revealed = self._results[: self._size]
            self._loading = False
        self._notify_changed()
