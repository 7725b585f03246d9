"""
Iteration core.

``each`` is the only function that looks at a collection's shape; the rest
of the module is built from ``each`` and ``reduce``.
"""

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Callable, List, Optional

from .utils import MISSING, SeenValues, positional_caller, property_of, strictly_equal


class CollectionShape(Enum):
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    OTHER = "other"


def classify(collection: Any) -> CollectionShape:
    """Tag a value as an ordered sequence, a mapping, or neither.

    Strings and bytes are scalars here, not sequences.
    """
    if isinstance(collection, (str, bytes, bytearray)):
        return CollectionShape.OTHER
    if isinstance(collection, Sequence):
        return CollectionShape.SEQUENCE
    if isinstance(collection, Mapping):
        return CollectionShape.MAPPING
    return CollectionShape.OTHER


def identity(value: Any) -> Any:
    return value


def each(collection: Any, iterator: Callable) -> None:
    """Call iterator(element, index_or_key, collection) for every element.

    Sequences are walked by ascending index, mappings in their own key
    order. Anything else is treated as empty.
    """
    call = positional_caller(iterator)
    shape = classify(collection)
    if shape is CollectionShape.SEQUENCE:
        for index in range(len(collection)):
            call(collection[index], index, collection)
    elif shape is CollectionShape.MAPPING:
        for key in collection:
            call(collection[key], key, collection)


def map(collection: Any, iterator: Callable) -> List[Any]:
    """New list of iterator(element) for an ordered sequence; [] otherwise."""
    mapped: List[Any] = []
    if classify(collection) is not CollectionShape.SEQUENCE:
        return mapped
    each(collection, lambda item: mapped.append(iterator(item)))
    return mapped


def filter(collection: Any, predicate: Callable) -> List[Any]:
    """Elements for which predicate(element) is exactly True, in order."""
    kept: List[Any] = []

    def keep_if_true(item):
        if predicate(item) is True:
            kept.append(item)

    each(collection, keep_if_true)
    return kept


def reject(collection: Any, predicate: Callable) -> List[Any]:
    """Elements for which predicate(element) is anything but True."""
    return filter(collection, lambda item: predicate(item) is not True)


def reduce(collection: Any, iterator: Callable, seed: Any = MISSING) -> Any:
    """Left fold calling iterator(accumulator, element, index_or_key, collection).

    Without a seed the first element becomes the accumulator and is never
    passed to iterator. An empty collection without a seed gives None.
    """
    call = positional_caller(iterator)
    state = {'acc': seed, 'seeded': seed is not MISSING}

    def fold(item, key, coll):
        if not state['seeded']:
            state['acc'] = item
            state['seeded'] = True
            return
        state['acc'] = call(state['acc'], item, key, coll)

    each(collection, fold)
    return state['acc'] if state['seeded'] else None


def every(collection: Any, predicate: Optional[Callable] = None) -> bool:
    """True unless some element fails predicate (default: its own truthiness).

    The predicate is not called again after the first failure.
    """
    test = predicate or identity
    return reduce(collection, lambda passed, item: passed and bool(test(item)), True)


def some(collection: Any, predicate: Optional[Callable] = None) -> bool:
    """True if any element passes predicate (default: its own truthiness)."""
    test = predicate or identity
    return not every(collection, lambda item: not test(item))


def contains(collection: Any, target: Any) -> bool:
    """True if some element strictly equals target."""
    return reduce(
        collection,
        lambda found, item: found or strictly_equal(item, target),
        False,
    )


def index_of(array: Any, target: Any) -> int:
    """First index holding a value strictly equal to target, or -1."""
    result = -1

    def check(item, index):
        nonlocal result
        if result == -1 and strictly_equal(item, target):
            result = index

    each(array, check)
    return result


def pluck(collection: Any, key: Any) -> List[Any]:
    """Value of key from each record (None where a record lacks it)."""
    return map(collection, lambda record: property_of(record, key))


def uniq(array: Any, is_sorted: bool = False, iterator: Optional[Callable] = None) -> List[Any]:
    """Duplicate-free copy keeping first occurrences in original order.

    With an iterator, duplicates are judged on iterator(element) but the
    original elements are returned. ``is_sorted`` is accepted for
    compatibility and has no effect.
    """
    transform = iterator or identity
    seen = SeenValues()
    unique: List[Any] = []

    def keep_first(item):
        if seen.add(transform(item)):
            unique.append(item)

    each(array, keep_first)
    return unique


def _as_sequence(array: Any) -> Any:
    return array if classify(array) is CollectionShape.SEQUENCE else []


def first(array: Any, n: Any = MISSING) -> Any:
    """First element, or a list of the first n elements."""
    array = _as_sequence(array)
    if n is MISSING:
        return array[0] if len(array) else None
    return list(array[:n])


def last(array: Any, n: Any = MISSING) -> Any:
    """Last element, or a list of the last n elements; last(array, 0) is []."""
    array = _as_sequence(array)
    if n is MISSING:
        return array[-1] if len(array) else None
    if n == 0:
        return []
    return list(array[-n:])
