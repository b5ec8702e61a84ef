"""Display-refresh scheduling for the capture loop."""

import itertools
from collections import OrderedDict
from typing import Callable, Protocol


class Scheduler(Protocol):
    """Protocol for per-frame callback schedulers."""

    def schedule_next(self, callback: Callable[[], None]) -> int:
        """Queue a callback for the next repaint and return its handle."""
        ...

    def cancel(self, handle: int) -> None:
        """Drop a queued callback. Unknown handles are ignored."""
        ...


class FrameScheduler:
    """Callbacks fired once per repaint.

    Whoever owns the display (the live runner, a headless loop or a test)
    calls run_pending() once per rendered frame. Callbacks scheduled while a
    repaint is running fire on the following repaint.
    """

    def __init__(self):
        self._pending: "OrderedDict[int, Callable[[], None]]" = OrderedDict()
        self._running: "OrderedDict[int, Callable[[], None]]" = OrderedDict()
        self._handles = itertools.count(1)

    def schedule_next(self, callback: Callable[[], None]) -> int:
        handle = next(self._handles)
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)
        self._running.pop(handle, None)

    @property
    def pending(self) -> int:
        """Number of callbacks waiting for the next repaint."""
        return len(self._pending)

    def run_pending(self) -> int:
        """Fire every callback queued before this repaint.

        Returns:
            Number of callbacks fired.
        """
        self._running = self._pending
        self._pending = OrderedDict()
        fired = 0
        try:
            while self._running:
                _, callback = self._running.popitem(last=False)
                callback()
                fired += 1
        finally:
            self._running = OrderedDict()
        return fired
