"""
Function decorators: once, memoize, delay, throttle.

Each wrapper owns its state (flag, cache, timestamps); nothing is shared
between wrappers. Exceptions from the wrapped function propagate unchanged
and are never cached.
"""

import functools
import logging
import threading
import types
from typing import Any, Callable, Dict, Optional, Tuple

from .models import WaitWindow
from .scheduling import Clock, Scheduler, default_clock, default_scheduler, json_stable_key

logger = logging.getLogger(__name__)


def _label(func: Callable) -> str:
    return getattr(func, '__qualname__', None) or repr(func)


class Once:
    """Calls the wrapped function until it first returns, then replays that result."""

    def __init__(self, func: Callable):
        functools.update_wrapper(self, func)
        self._func = func
        self.called = False
        self._result: Any = None

    def __call__(self, *args, **kwargs):
        if not self.called:
            self._result = self._func(*args, **kwargs)
            self.called = True
            logger.debug(f"once({_label(self._func)}) fired")
        return self._result

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return types.MethodType(self, instance)


class Memoized:
    """Caches results per stable key of the argument list. Unbounded."""

    def __init__(self, func: Callable, stable_key: Callable = json_stable_key):
        functools.update_wrapper(self, func)
        self._func = func
        self._stable_key = stable_key
        self.cache: Dict[Any, Any] = {}
        self._hits = 0
        self._misses = 0

    def __call__(self, *args, **kwargs):
        key = self._stable_key(args, kwargs)
        if key in self.cache:
            self._hits += 1
            return self.cache[key]

        self._misses += 1
        logger.debug(f"memoize({_label(self._func)}) miss for key {key}")
        result = self._func(*args, **kwargs)
        self.cache[key] = result
        return result

    def cache_info(self) -> Tuple[int, int, int]:
        """(hits, misses, cached entries)."""
        return self._hits, self._misses, len(self.cache)


class Throttled:
    """Runs the wrapped function at most once per wait window.

    The first call in a quiet period runs immediately. Calls inside the
    window are suppressed; the latest one's arguments run once when the
    window closes. Suppressed calls return the latest real result.

    A call that raises does not open a window. Caller threads and the
    scheduler's trailing callback are serialized by a reentrant lock, so
    the wrapped function may call its own wrapper.
    """

    def __init__(self, func: Callable, wait_ms: float,
                 clock: Optional[Clock] = None, scheduler: Optional[Scheduler] = None):
        functools.update_wrapper(self, func)
        self._func = func
        self.wait_ms = WaitWindow(wait_ms=wait_ms).wait_ms
        self._clock = clock or default_clock()
        self._scheduler = scheduler or default_scheduler()
        self._last_invoked: Optional[float] = None
        self._pending_call: Optional[Tuple[tuple, dict]] = None
        self._trailing_scheduled = False
        self._last_result: Any = None
        self._lock = threading.RLock()

    @property
    def pending(self) -> bool:
        """True while a trailing call is scheduled."""
        return self._trailing_scheduled

    def _remaining(self, now: float) -> float:
        if self._last_invoked is None:
            return 0.0
        return self.wait_ms - (now - self._last_invoked)

    def _invoke(self, args: tuple, kwargs: dict) -> Any:
        # The window opens before the call so reentrant calls are suppressed,
        # and is rolled back if the call raises.
        previous = self._last_invoked
        self._last_invoked = self._clock.now()
        try:
            self._last_result = self._func(*args, **kwargs)
        except Exception:
            self._last_invoked = previous
            raise
        return self._last_result

    def _schedule_trailing(self, remaining: float) -> None:
        try:
            self._scheduler.schedule_after(remaining, self._flush)
        except Exception:
            self._pending_call = None
            raise
        self._trailing_scheduled = True
        logger.debug(f"throttle({_label(self._func)}) suppressed; trailing call in {remaining:.1f}ms")

    def _flush(self) -> None:
        with self._lock:
            try:
                if self._pending_call is None:
                    return
                args, kwargs = self._pending_call
                self._pending_call = None
                logger.debug(f"throttle({_label(self._func)}) trailing call")
                self._invoke(args, kwargs)
            finally:
                self._trailing_scheduled = False
                # Calls made while the trailing call ran get their own window.
                if self._pending_call is not None:
                    self._schedule_trailing(self._remaining(self._clock.now()))

    def __call__(self, *args, **kwargs):
        with self._lock:
            remaining = self._remaining(self._clock.now())
            if remaining <= 0 and not self._trailing_scheduled:
                return self._invoke(args, kwargs)

            self._pending_call = (args, kwargs)
            if not self._trailing_scheduled:
                self._schedule_trailing(remaining)
            return self._last_result


def once(func: Callable) -> Once:
    return Once(func)


def memoize(func: Callable, stable_key: Callable = json_stable_key) -> Memoized:
    """Cache func's results by argument list.

    Only meaningful when results depend solely on primitive arguments;
    stable_key receives ``(args, kwargs)``.
    """
    return Memoized(func, stable_key)


def delay(func: Callable, wait_ms: float, *args, scheduler: Optional[Scheduler] = None) -> None:
    """Call func(*args) once, no earlier than wait_ms from now. Returns immediately."""
    wait = WaitWindow(wait_ms=wait_ms).wait_ms
    scheduler = scheduler or default_scheduler()
    scheduler.schedule_after(wait, functools.partial(func, *args))


def throttle(func: Callable, wait_ms: float,
             clock: Optional[Clock] = None, scheduler: Optional[Scheduler] = None) -> Throttled:
    return Throttled(func, wait_ms, clock=clock, scheduler=scheduler)
