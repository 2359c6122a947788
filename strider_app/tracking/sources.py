"""
Position and tick sources that drive the run tracker.

Both are push-based: the tracker registers callbacks and receives a
Subscription handle it must cancel when the run leaves TRACKING.
Cancellation is idempotent so every exit path can release safely.
"""

import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional

import structlog

from ..errors import PositionUnavailableError
from .models import Sample

logger = structlog.get_logger(__name__)

SampleCallback = Callable[[Sample], None]
ErrorCallback = Callable[[PositionUnavailableError], None]
TickCallback = Callable[[], None]


class Subscription:
    """Cancellation handle for a registered callback."""

    def __init__(self, on_cancel: Optional[Callable[[], None]] = None):
        self._on_cancel = on_cancel
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        """Release the registration. Safe to call more than once."""
        if not self._active:
            return
        self._active = False
        if self._on_cancel is not None:
            self._on_cancel()


class BasePositionSource(ABC):
    """Base class for push-based position streams."""

    @abstractmethod
    def subscribe(self, on_sample: SampleCallback, on_error: ErrorCallback) -> Subscription:
        """
        Start delivering samples.

        Args:
            on_sample: Called for every position fix, in arrival order
            on_error: Called when the source cannot produce samples

        Returns:
            Subscription whose cancel() stops delivery
        """
        pass


class BaseTicker(ABC):
    """Base class for periodic tick sources."""

    @abstractmethod
    def schedule(self, interval_seconds: float, callback: TickCallback) -> Subscription:
        """Invoke callback roughly every interval_seconds until cancelled."""
        pass


class ManualPositionSource(BasePositionSource):
    """Position source fed explicitly by the caller (replays, tests, demos)."""

    def __init__(self) -> None:
        self._subscribers: list[tuple[SampleCallback, ErrorCallback]] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, on_sample: SampleCallback, on_error: ErrorCallback) -> Subscription:
        entry = (on_sample, on_error)
        self._subscribers.append(entry)
        return Subscription(lambda: self._subscribers.remove(entry))

    def push(self, sample: Sample) -> None:
        for on_sample, _ in list(self._subscribers):
            on_sample(sample)

    def push_position(self, latitude: float, longitude: float, **kwargs) -> None:
        self.push(Sample.at(latitude, longitude, **kwargs))

    def fail(self, message: str, code: Optional[int] = None) -> None:
        error = PositionUnavailableError(message, code=code)
        for _, on_error in list(self._subscribers):
            on_error(error)


class ManualTicker(BaseTicker):
    """Tick source advanced explicitly with fire()."""

    def __init__(self) -> None:
        self._callbacks: list[TickCallback] = []
        self.intervals: list[float] = []

    @property
    def active_count(self) -> int:
        return len(self._callbacks)

    def schedule(self, interval_seconds: float, callback: TickCallback) -> Subscription:
        self._callbacks.append(callback)
        self.intervals.append(interval_seconds)
        return Subscription(lambda: self._callbacks.remove(callback))

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            for callback in list(self._callbacks):
                callback()


class ThreadingTicker(BaseTicker):
    """
    Tick source backed by one daemon thread per schedule.

    Cancelling stops the thread and joins it, except from the ticking
    thread itself. The join is bounded by ``join_timeout_seconds`` since a
    tick may be waiting on a lock held by whoever is cancelling; that tick
    then runs once against a stopped tracker and the thread exits.
    """

    def __init__(self, join_timeout_seconds: float = 1.0) -> None:
        self.join_timeout_seconds = join_timeout_seconds
        self._threads: list[threading.Thread] = []

    @property
    def active_count(self) -> int:
        return sum(1 for thread in self._threads if thread.is_alive())

    def schedule(self, interval_seconds: float, callback: TickCallback) -> Subscription:
        stop_event = threading.Event()

        def run() -> None:
            while not stop_event.wait(interval_seconds):
                try:
                    callback()
                except Exception as e:
                    logger.error("Tick callback failed", error=str(e), exc_info=True)

        thread = threading.Thread(target=run, name="strider-ticker", daemon=True)
        self._threads = [t for t in self._threads if t.is_alive()]
        self._threads.append(thread)
        thread.start()

        def cancel() -> None:
            stop_event.set()
            if thread is threading.current_thread():
                return
            thread.join(self.join_timeout_seconds)
            if thread.is_alive():
                logger.warning("Ticker thread still running after cancel",
                               timeout_s=self.join_timeout_seconds)

        return Subscription(cancel)
