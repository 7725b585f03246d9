"""
Time, scheduling and keying capabilities consumed by the decorators.

Everything here is injectable: decorators accept any object with the same
``now()`` / ``schedule_after(ms, callback)`` shape.
"""

import asyncio
import heapq
import itertools
import json
import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

from .models import LibrarySettings, SchedulerBackend
from .utils import SchedulerUnavailableError, StableKeyError

logger = logging.getLogger(__name__)


class Clock(Protocol):
    def now(self) -> float:
        """Current time in milliseconds."""
        ...


class Scheduler(Protocol):
    def schedule_after(self, ms: float, callback: Callable[[], Any]) -> None:
        """Run callback once, no earlier than ms milliseconds from now."""
        ...


class MonotonicClock:
    """Milliseconds from time.monotonic()."""

    def now(self) -> float:
        return time.monotonic() * 1000.0


class ThreadingScheduler:
    """Runs each callback on a daemon threading.Timer."""

    def schedule_after(self, ms: float, callback: Callable[[], Any]) -> None:
        timer = threading.Timer(max(0.0, ms) / 1000.0, callback)
        timer.daemon = True
        timer.start()
        logger.debug(f"Scheduled {callback!r} on timer thread in {ms:.1f}ms")


class AsyncioScheduler:
    """Runs callbacks on an asyncio event loop via call_later.

    Without an explicit loop, the loop running at schedule time is used.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def schedule_after(self, ms: float, callback: Callable[[], Any]) -> None:
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError as e:
                raise SchedulerUnavailableError(
                    "AsyncioScheduler needs a running event loop or an explicit loop"
                ) from e
        if loop.is_closed():
            raise SchedulerUnavailableError("Event loop is closed")
        loop.call_later(max(0.0, ms) / 1000.0, callback)
        logger.debug(f"Scheduled {callback!r} on event loop in {ms:.1f}ms")


class VirtualTimeline:
    """Manually advanced clock and scheduler in one object.

    Time only moves on advance(); due callbacks run in time order, ties in
    the order they were scheduled.
    """

    def __init__(self, start: float = 0.0):
        self._now = float(start)
        self._queue: List[Tuple[float, int, Callable[[], Any]]] = []
        self._sequence = itertools.count()

    def now(self) -> float:
        return self._now

    def schedule_after(self, ms: float, callback: Callable[[], Any]) -> None:
        due = self._now + max(0.0, ms)
        heapq.heappush(self._queue, (due, next(self._sequence), callback))

    @property
    def pending(self) -> int:
        """Number of callbacks not yet run."""
        return len(self._queue)

    def advance(self, ms: float) -> int:
        """Move time forward by ms, running every callback that falls due.

        Callbacks scheduled by callbacks run too if they fall inside the
        window. Returns the number of callbacks run.
        """
        target = self._now + max(0.0, ms)
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, callback = heapq.heappop(self._queue)
            self._now = max(self._now, due)
            callback()
            ran += 1
        self._now = target
        return ran


def json_stable_key(args: Tuple[Any, ...], kwargs: Optional[Dict[str, Any]] = None) -> str:
    """Encode an argument list as canonical JSON.

    Equal primitive argument lists give equal keys; 1, 1.0 and True give
    different ones.
    """
    payload = [list(args), sorted((kwargs or {}).items())]
    try:
        return json.dumps(payload, sort_keys=True, separators=(',', ':'), allow_nan=True)
    except (TypeError, ValueError) as e:
        raise StableKeyError(f"Cannot derive a cache key from arguments: {e}") from e


_default_clock = MonotonicClock()


def default_clock() -> Clock:
    return _default_clock


def default_scheduler(settings: Optional[LibrarySettings] = None) -> Scheduler:
    """Scheduler for the configured backend (environment settings by default)."""
    settings = settings or LibrarySettings.from_env()
    if settings.scheduler_backend == SchedulerBackend.ASYNCIO:
        return AsyncioScheduler()
    return ThreadingScheduler()
