"""Functional collection and function utilities."""

from .algebra import difference, flatten, intersection, invoke, shuffle, sort_by, zip
from .chain import Chain, chain
from .decorators import Memoized, Once, Throttled, delay, memoize, once, throttle
from .iteration import (
    CollectionShape,
    classify,
    contains,
    each,
    every,
    filter,
    first,
    identity,
    index_of,
    last,
    map,
    pluck,
    reduce,
    reject,
    some,
    uniq,
)
from .models import LibrarySettings, SchedulerBackend, WaitWindow
from .objects import defaults, extend
from .scheduling import (
    AsyncioScheduler,
    Clock,
    MonotonicClock,
    Scheduler,
    ThreadingScheduler,
    VirtualTimeline,
    default_clock,
    default_scheduler,
    json_stable_key,
)
from .utils import SchedulerUnavailableError, StableKeyError, UnderbarError, configure_logging

__version__ = "0.1.0"

__all__ = [
    "AsyncioScheduler",
    "Chain",
    "Clock",
    "CollectionShape",
    "LibrarySettings",
    "Memoized",
    "MonotonicClock",
    "Once",
    "Scheduler",
    "SchedulerBackend",
    "SchedulerUnavailableError",
    "StableKeyError",
    "ThreadingScheduler",
    "Throttled",
    "UnderbarError",
    "VirtualTimeline",
    "WaitWindow",
    "chain",
    "classify",
    "configure_logging",
    "contains",
    "default_clock",
    "default_scheduler",
    "defaults",
    "delay",
    "difference",
    "each",
    "every",
    "extend",
    "filter",
    "first",
    "flatten",
    "identity",
    "index_of",
    "intersection",
    "invoke",
    "json_stable_key",
    "last",
    "map",
    "memoize",
    "once",
    "pluck",
    "reduce",
    "reject",
    "shuffle",
    "some",
    "sort_by",
    "throttle",
    "uniq",
    "zip",
]
