# threshold_extension/resolver.py
"""
Threshold resolution over a destination collection.

Everything returned from here except :func:`locate_maximum` is a value copied out
of the destination. ``locate_maximum`` hands back the winning element itself and
exists only for strategies that release it before any mutation happens.
"""
from __future__ import annotations

import copy
import logging
from collections.abc import Sequence
from typing import Any

from threshold_extension.contracts import MISSING, EmptyDestinationError, KeyFunc, ThresholdSource

LOGGER = logging.getLogger("threshold_extension.resolver")


def copy_out_key(element: Any, key: KeyFunc) -> Any:
    """Apply ``key`` to ``element`` and return a copy that shares nothing with it."""
    return copy.copy(key(element))


def locate_maximum(destination: Sequence[Any], key: KeyFunc) -> Any:
    """
    Return the element of ``destination`` with the largest key.

    Ties resolve to the first maximal element, as ``max`` does.
    """
    if not destination:
        raise EmptyDestinationError()
    return max(destination, key=key)


def resolve_threshold(destination: Sequence[Any], key: KeyFunc, *, default: Any = MISSING) -> Any:
    """
    Maximum key over ``destination``, extracted by value.

    Only keys are compared; no element reference survives the call. An empty
    destination raises :class:`EmptyDestinationError` unless the caller passes an
    explicit ``default``.
    """
    threshold, _ = resolve_threshold_with_source(destination, key, default=default)
    return threshold


def resolve_threshold_with_source(
    destination: Sequence[Any],
    key: KeyFunc,
    *,
    default: Any = MISSING,
) -> tuple[Any, ThresholdSource]:
    if not destination:
        if default is MISSING:
            raise EmptyDestinationError()
        LOGGER.debug("empty destination, using caller default threshold %r", default)
        return copy.copy(default), ThresholdSource.DEFAULT

    elements = iter(destination)
    best = copy_out_key(next(elements), key)
    for element in elements:
        candidate = copy_out_key(element, key)
        if candidate > best:
            best = candidate
    return best, ThresholdSource.RESOLVED
