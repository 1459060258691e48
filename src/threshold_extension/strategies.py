# threshold_extension/strategies.py
from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Iterator, MutableSequence, Sequence, Sized
from dataclasses import dataclass
from itertools import islice
from typing import Any, Protocol

from threshold_extension.contracts import (
    MISSING,
    CopyMode,
    ExtensionReport,
    KeyFunc,
    StrategyTag,
    ThresholdSource,
)
from threshold_extension.resolver import copy_out_key, locate_maximum, resolve_threshold_with_source
from threshold_extension.stable_ids import fingerprint_collection

LOGGER = logging.getLogger("threshold_extension.strategies")


class ExtensionStrategy(Protocol):
    tag: StrategyTag

    def extend(
        self,
        destination: MutableSequence[Any],
        source: Iterable[Any],
        key: KeyFunc,
        *,
        default: Any = MISSING,
        copy_mode: CopyMode = CopyMode.SHALLOW,
    ) -> ExtensionReport: ...


def copy_element(element: Any, copy_mode: CopyMode) -> Any:
    if copy_mode == CopyMode.DEEP:
        return copy.deepcopy(element)
    return copy.copy(element)


def _bounded(source: Iterable[Any]) -> Iterator[Any]:
    # Pin the pass to the elements present at call start; the source may be the
    # destination itself.
    if isinstance(source, Sized):
        return islice(source, len(source))
    return iter(source)


def _report(
    tag: StrategyTag,
    *,
    threshold: Any,
    threshold_source: ThresholdSource,
    original_length: int,
    before_fingerprint: str,
    destination: Sequence[Any],
) -> ExtensionReport:
    return ExtensionReport(
        strategy=tag,
        threshold=threshold,
        threshold_source=threshold_source,
        original_length=original_length,
        appended_count=len(destination) - original_length,
        final_length=len(destination),
        before_fingerprint=before_fingerprint,
        after_fingerprint=fingerprint_collection(destination),
    )


@dataclass(frozen=True)
class CopyThenMutate:
    """Find the maximal element, copy its key out, drop the element, then append one at a time."""

    tag: StrategyTag = StrategyTag.COPY_THEN_MUTATE

    def extend(
        self,
        destination: MutableSequence[Any],
        source: Iterable[Any],
        key: KeyFunc,
        *,
        default: Any = MISSING,
        copy_mode: CopyMode = CopyMode.SHALLOW,
    ) -> ExtensionReport:
        original_length = len(destination)
        before = fingerprint_collection(destination)

        if destination:
            winner = locate_maximum(destination, key)
            threshold = copy_out_key(winner, key)
            del winner
            threshold_source = ThresholdSource.RESOLVED
        else:
            threshold, threshold_source = resolve_threshold_with_source(destination, key, default=default)
        LOGGER.debug("%s: threshold=%r (%s)", self.tag.value, threshold, threshold_source.value)

        for element in _bounded(source):
            if key(element) > threshold:
                destination.append(copy_element(element, copy_mode))

        return _report(
            self.tag,
            threshold=threshold,
            threshold_source=threshold_source,
            original_length=original_length,
            before_fingerprint=before,
            destination=destination,
        )


@dataclass(frozen=True)
class CollectThenExtend:
    """
    Filter against a held reference to the maximal element into an owned buffer,
    release the reference, then append the buffer in one bulk extend.

    Costs up to ``len(source)`` extra elements of memory. A key function that
    raises while filtering leaves the destination untouched.
    """

    tag: StrategyTag = StrategyTag.COLLECT_THEN_EXTEND

    def extend(
        self,
        destination: MutableSequence[Any],
        source: Iterable[Any],
        key: KeyFunc,
        *,
        default: Any = MISSING,
        copy_mode: CopyMode = CopyMode.SHALLOW,
    ) -> ExtensionReport:
        original_length = len(destination)
        before = fingerprint_collection(destination)

        if destination:
            winner = locate_maximum(destination, key)
            winner_key = key(winner)
            pending = [copy_element(element, copy_mode) for element in _bounded(source) if key(element) > winner_key]
            threshold = copy.copy(winner_key)
            del winner, winner_key
            threshold_source = ThresholdSource.RESOLVED
        else:
            threshold, threshold_source = resolve_threshold_with_source(destination, key, default=default)
            pending = [copy_element(element, copy_mode) for element in _bounded(source) if key(element) > threshold]
        LOGGER.debug(
            "%s: threshold=%r (%s), %d pending",
            self.tag.value,
            threshold,
            threshold_source.value,
            len(pending),
        )

        destination.extend(pending)

        return _report(
            self.tag,
            threshold=threshold,
            threshold_source=threshold_source,
            original_length=original_length,
            before_fingerprint=before,
            destination=destination,
        )


@dataclass(frozen=True)
class ScalarOnly:
    """Resolve only the scalar key; no element reference is ever produced."""

    tag: StrategyTag = StrategyTag.SCALAR_ONLY

    def extend(
        self,
        destination: MutableSequence[Any],
        source: Iterable[Any],
        key: KeyFunc,
        *,
        default: Any = MISSING,
        copy_mode: CopyMode = CopyMode.SHALLOW,
    ) -> ExtensionReport:
        original_length = len(destination)
        before = fingerprint_collection(destination)

        threshold, threshold_source = resolve_threshold_with_source(destination, key, default=default)
        LOGGER.debug("%s: threshold=%r (%s)", self.tag.value, threshold, threshold_source.value)

        for element in _bounded(source):
            if key(element) > threshold:
                destination.append(copy_element(element, copy_mode))

        return _report(
            self.tag,
            threshold=threshold,
            threshold_source=threshold_source,
            original_length=original_length,
            before_fingerprint=before,
            destination=destination,
        )


STRATEGY_REGISTRY: dict[StrategyTag, ExtensionStrategy] = {
    StrategyTag.COPY_THEN_MUTATE: CopyThenMutate(),
    StrategyTag.COLLECT_THEN_EXTEND: CollectThenExtend(),
    StrategyTag.SCALAR_ONLY: ScalarOnly(),
}


def get_strategy(tag: StrategyTag | str) -> ExtensionStrategy:
    return STRATEGY_REGISTRY[StrategyTag(tag)]


def register_strategy(strategy: ExtensionStrategy, *, replace: bool = False) -> ExtensionStrategy:
    if strategy.tag in STRATEGY_REGISTRY and not replace:
        raise ValueError(f"strategy already registered for tag {strategy.tag.value!r}")
    STRATEGY_REGISTRY[strategy.tag] = strategy
    return strategy
