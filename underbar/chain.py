"""
Chainable wrapper over the library functions.

Transformations are recorded and only applied when ``value()`` is called or
the chain is iterated; every evaluation replays the pipeline from the
source. Reductions force evaluation.
"""

from typing import Any, Callable, List, Optional

from . import algebra, iteration
from .utils import MISSING


class Chain:
    """
    A chainable pipeline. Each operator returns a new Chain; the source is
    never mutated.
    """
    def __init__(self, source, ops=None):
        self._source = source
        self._ops = ops or []          # sequence of (func, args)

    # --------- chainable operators (deferred) ----------
    def map(self, fn):
        return self._with_op(iteration.map, fn)

    def filter(self, pred):
        return self._with_op(iteration.filter, pred)

    def reject(self, pred):
        return self._with_op(iteration.reject, pred)

    def pluck(self, key):
        return self._with_op(iteration.pluck, key)

    def uniq(self, iterator=None):
        return self._with_op(iteration.uniq, False, iterator)

    def first(self, n):
        return self._with_op(iteration.first, n)

    def last(self, n):
        return self._with_op(iteration.last, n)

    def flatten(self, shallow=False):
        return self._with_op(algebra.flatten, shallow)

    def sort_by(self, iterator_or_key):
        return self._with_op(algebra.sort_by, iterator_or_key)

    def shuffle(self, random_unit=None):
        if random_unit is None:
            return self._with_op(algebra.shuffle)
        return self._with_op(algebra.shuffle, random_unit)

    def invoke(self, function_or_key, args=None):
        return self._with_op(algebra.invoke, function_or_key, args)

    # --------- forcing evaluation ----------
    def value(self) -> Any:
        """Run the recorded pipeline and return its result."""
        result = self._source
        for func, args in self._ops:
            result = func(result, *args)
        return result

    def to_list(self) -> List[Any]:
        return list(self)

    # --------- reducing operations (force evaluation) ----------
    def reduce(self, fn: Callable, seed: Any = MISSING) -> Any:
        return iteration.reduce(self.value(), fn, seed)

    def every(self, pred: Optional[Callable] = None) -> bool:
        return iteration.every(self.value(), pred)

    def some(self, pred: Optional[Callable] = None) -> bool:
        return iteration.some(self.value(), pred)

    def contains(self, target) -> bool:
        return iteration.contains(self.value(), target)

    def index_of(self, target) -> int:
        return iteration.index_of(self.value(), target)

    # --------- iterator protocol ----------
    def __iter__(self):
        values = []
        iteration.each(self.value(), lambda item: values.append(item))
        yield from values

    # --------- helpers ----------
    def _with_op(self, func, *args):
        return Chain(self._source, self._ops + [(func, args)])


def chain(collection: Any) -> Chain:
    return Chain(collection)
