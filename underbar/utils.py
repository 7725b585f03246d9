"""Shared helpers: exceptions, strict equality, argument trimming, logging setup."""

import inspect
import logging
from collections.abc import Mapping
from typing import Any, Callable, List, Optional, Set, Tuple

from .models import LibrarySettings


class UnderbarError(Exception):
    """Base class for errors raised by the library itself."""
    pass


class StableKeyError(UnderbarError, TypeError):
    """Raised when a call's arguments cannot be encoded into a cache key."""
    pass


class SchedulerUnavailableError(UnderbarError, RuntimeError):
    """Raised when a scheduler has no event loop to schedule on."""
    pass


# Sentinel for "argument omitted" where None is a legitimate value.
MISSING = object()


def strictly_equal(left: Any, right: Any) -> bool:
    """Equality without cross-type coercion (1, 1.0 and True are all different).

    Lists, tuples, sets and dicts compare element by element under the same
    rule, so [1] and [True] differ too.
    """
    if left is right:
        return True
    if type(left) is not type(right):
        return False
    if isinstance(left, (list, tuple)):
        return len(left) == len(right) and all(
            strictly_equal(a, b) for a, b in zip(left, right)
        )
    if isinstance(left, (set, frozenset)):
        return len(left) == len(right) and all(
            any(strictly_equal(a, b) for b in right) for a in left
        )
    if isinstance(left, dict):
        return left.keys() == right.keys() and all(
            strictly_equal(left[key], right[key]) for key in left
        )
    return left == right


def _strict_key(value: Any) -> Any:
    """Hashable key that only collides for strictly equal values."""
    if isinstance(value, tuple):
        return (type(value), tuple(_strict_key(item) for item in value))
    if isinstance(value, frozenset):
        return (type(value), frozenset(_strict_key(item) for item in value))
    return (type(value), value)


class SeenValues:
    """Membership tracker using strict equality.

    Hashable values go through a set of type-tagged keys; unhashable ones
    fall back to a linear scan.
    """

    def __init__(self):
        self._hashed: Set[Tuple[type, Any]] = set()
        self._unhashable: List[Any] = []

    def __contains__(self, value: Any) -> bool:
        try:
            return _strict_key(value) in self._hashed
        except TypeError:
            return any(strictly_equal(seen, value) for seen in self._unhashable)

    def add(self, value: Any) -> bool:
        """Record value; return False if it was already present."""
        if value in self:
            return False
        try:
            self._hashed.add(_strict_key(value))
        except TypeError:
            self._unhashable.append(value)
        return True


def property_of(record: Any, key: Any) -> Any:
    """Look up key on a mapping-like record, or as an attribute; None if absent."""
    if isinstance(record, Mapping):
        return record.get(key)
    if isinstance(key, str):
        return getattr(record, key, None)
    try:
        return record[key]
    except (LookupError, TypeError):
        return None


def accepted_arity(func: Callable) -> Optional[int]:
    """Count of positional arguments func accepts, or None if unbounded/unknown."""
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return None

    count = 0
    for param in sig.parameters.values():
        if param.kind == inspect.Parameter.VAR_POSITIONAL:
            return None
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY,
                          inspect.Parameter.POSITIONAL_OR_KEYWORD):
            count += 1
    return count


def positional_caller(func: Callable) -> Callable:
    """Wrap func so surplus positional arguments are dropped before the call.

    Lets ``lambda x: ...`` be used where the library supplies
    ``(element, key, collection)``.
    """
    arity = accepted_arity(func)
    if arity is None:
        return func

    def call(*args):
        return func(*args[:arity])

    return call


def configure_logging(settings=None) -> None:
    """Configure root logging from LibrarySettings (or the environment)."""
    settings = settings or LibrarySettings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
