"""Shallow object merging: extend (last writer wins) and defaults (first writer wins)."""

from collections.abc import Mapping
from typing import Any, MutableMapping


def _mapping_sources(sources):
    return (source for source in sources if isinstance(source, Mapping))


def extend(target: MutableMapping, *sources: Any) -> MutableMapping:
    """Copy every key of each source into target, overwriting; returns target."""
    for source in _mapping_sources(sources):
        for key in source:
            target[key] = source[key]
    return target


def defaults(target: MutableMapping, *sources: Any) -> MutableMapping:
    """Fill in keys target does not already have; returns target."""
    for source in _mapping_sources(sources):
        for key in source:
            if key not in target:
                target[key] = source[key]
    return target
