"""
Collection algebra built on the iteration core: shuffling, flattening,
zipping, set operations, sorting and method invocation.
"""

import random
from typing import Any, Callable, List, Optional, Sequence

from .iteration import CollectionShape, classify, contains, each, every, filter, map, reject, some, uniq
from .utils import property_of


def _is_sequence(value: Any) -> bool:
    return classify(value) is CollectionShape.SEQUENCE


def _values(collection: Any) -> List[Any]:
    values: List[Any] = []
    each(collection, lambda item: values.append(item))
    return values


def shuffle(array: Any, random_unit: Callable[[], float] = random.random) -> List[Any]:
    """Uniformly random permutation of array as a new list (Fisher-Yates).

    ``random_unit`` must return floats in [0, 1).
    """
    shuffled = list(array) if _is_sequence(array) else []
    for unplaced in range(len(shuffled) - 1, 0, -1):
        pick = min(int(random_unit() * (unplaced + 1)), unplaced)
        shuffled[unplaced], shuffled[pick] = shuffled[pick], shuffled[unplaced]
    return shuffled


def flatten(nested: Any, shallow: bool = False) -> List[Any]:
    """Leaves of nested sequences, depth-first and left to right.

    With ``shallow`` only the outermost level of nesting is removed.
    """
    flat: List[Any] = []
    if not _is_sequence(nested):
        return flat

    def collect(item):
        if not _is_sequence(item):
            flat.append(item)
        elif shallow:
            flat.extend(item)
        else:
            flat.extend(flatten(item))

    each(nested, collect)
    return flat


def zip(*arrays: Sequence) -> List[List[Any]]:
    """Group the i-th elements of every array; short arrays pad with None."""
    arrays = tuple(array if _is_sequence(array) else [] for array in arrays)
    longest = max((len(array) for array in arrays), default=0)
    return [
        [array[i] if i < len(array) else None for array in arrays]
        for i in range(longest)
    ]


def intersection(*arrays: Sequence) -> List[Any]:
    """Distinct elements of the first array present in all the others."""
    if not arrays:
        return []
    head, rest = arrays[0], arrays[1:]
    return filter(uniq(head), lambda item: every(rest, lambda other: contains(other, item)))


def difference(array: Sequence, *others: Sequence) -> List[Any]:
    """Elements of array found in none of the others, in original order."""
    return reject(array, lambda item: some(others, lambda other: contains(other, item)))


def sort_by(collection: Any, iterator_or_key: Any) -> List[Any]:
    """Stable ascending sort by iterator(element) or element[key].

    Elements whose sort value is None go last.
    """
    if callable(iterator_or_key):
        criterion = iterator_or_key
    else:
        criterion = lambda item: property_of(item, iterator_or_key)

    def sort_key(item):
        value = criterion(item)
        return (value is None, value)

    return sorted(_values(collection), key=sort_key)


def invoke(collection: Any, function_or_key: Any, args: Optional[Sequence] = None) -> List[Any]:
    """Call a function (with each element as receiver) or a named method on every element."""
    args = list(args or [])

    def call(item):
        if callable(function_or_key):
            return function_or_key(item, *args)
        return getattr(item, function_or_key)(*args)

    return map(_values(collection), call)
