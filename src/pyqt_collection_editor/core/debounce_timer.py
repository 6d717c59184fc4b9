"""Reusable trailing debounce timer."""

from typing import Any, Callable, Optional, Protocol

from PyQt6.QtCore import QTimer


class TimerScheduler(Protocol):
    """Single-threaded timer queue the debounce timer schedules on."""

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        """Schedule ``callback`` after ``delay_ms`` and return a cancellable handle."""
        ...

    def cancel(self, handle: Any) -> None:
        ...


class QtTimerScheduler:
    """Schedules on the Qt event loop with one single-shot QTimer per handle."""

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> QTimer:
        timer = QTimer()
        timer.setSingleShot(True)
        timer.timeout.connect(callback)
        timer.start(delay_ms)
        return timer

    def cancel(self, handle: QTimer) -> None:
        handle.stop()


class DebounceTimer:
    """
    Reusable trailing debounce timer.

    Restarts timer on each call. Handler fires only after delay_ms of inactivity.
    At most one handle is pending; triggering again cancels it first.
    Timers run on the given scheduler (default: the Qt event loop).

    Usage:
        self._debounce = DebounceTimer(delay_ms=500, handler=self._write)

        def on_change(self):
            self._debounce.trigger()  # Restarts timer
    """

    def __init__(self, delay_ms: int, handler: Callable[[], None],
                 scheduler: Optional[TimerScheduler] = None):
        self._delay_ms = delay_ms
        self._handler = handler
        self._scheduler = scheduler or QtTimerScheduler()
        self._handle: Any = None
        self._pending = False

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    @property
    def is_pending(self) -> bool:
        return self._pending

    def trigger(self):
        """Trigger debounce: cancel the pending handle and reschedule."""
        self.cancel()
        self._handle = self._scheduler.schedule(self._delay_ms, self._fire)
        self._pending = True

    def cancel(self):
        """Cancel pending trigger."""
        if self._handle is not None:
            self._scheduler.cancel(self._handle)
            self._handle = None
        self._pending = False

    def force(self):
        """Cancel timer and fire handler immediately."""
        self.cancel()
        self._handler()

    def _fire(self):
        # Handle stays referenced until the next trigger or cancel
        self._pending = False
        self._handler()
