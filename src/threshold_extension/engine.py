# threshold_extension/engine.py
from __future__ import annotations

import logging
from collections.abc import Iterable, MutableSequence, Sequence
from typing import Any

from threshold_extension.contracts import MISSING, ExtensionReport, InvariantViolationError, KeyFunc, StrategyTag
from threshold_extension.invariants import ExtensionCheckContext, failed, run_checkers
from threshold_extension.settings import ExtensionSettings, get_settings
from threshold_extension.strategies import get_strategy

LOGGER = logging.getLogger("threshold_extension")


def _resolve_strategy_tag(strategy: StrategyTag | str | None, settings: ExtensionSettings) -> StrategyTag:
    if strategy is None:
        return settings.default_strategy
    return StrategyTag(strategy)


def extend(
    destination: MutableSequence[Any],
    source: Iterable[Any],
    key: KeyFunc = len,
    *,
    strategy: StrategyTag | str | None = None,
    default: Any = MISSING,
    verify: bool | None = None,
    settings: ExtensionSettings | None = None,
) -> ExtensionReport:
    """
    Append copies of the ``source`` elements whose key strictly exceeds the largest
    key already in ``destination``.

    The threshold is resolved once over the destination as it was when the call
    started. ``EmptyDestinationError`` propagates for an empty destination unless an
    explicit ``default`` threshold is given; the destination is left unchanged
    in that case.

    With ``verify`` (or ``verify_invariants`` in settings) the post-conditions in
    :mod:`threshold_extension.invariants` are checked after the mutation and an
    ``InvariantViolationError`` is raised on the first failing call, after the
    destination has been restored to its original elements.
    """
    cfg = settings or get_settings()
    tag = _resolve_strategy_tag(strategy, cfg)
    impl = get_strategy(tag)
    should_verify = cfg.verify_invariants if verify is None else verify

    if not should_verify:
        report = impl.extend(destination, source, key, default=default, copy_mode=cfg.copy_mode)
        LOGGER.debug("extended with %s: +%d", tag.value, report.appended_count)
        return report

    original = list(destination)
    candidates: Sequence[Any] = source if isinstance(source, Sequence) else tuple(source)
    if candidates is destination:
        candidates = original
    report = impl.extend(destination, candidates, key, default=default, copy_mode=cfg.copy_mode)

    outcomes = run_checkers(
        ExtensionCheckContext(
            original=original,
            destination=destination,
            source=candidates,
            key=key,
            report=report,
        )
    )
    failures = failed(outcomes)
    if failures:
        LOGGER.error("%s violated %d invariant(s): %s", tag.value, len(failures), [f.code for f in failures])
        destination[:] = original
        raise InvariantViolationError(failures)

    LOGGER.debug("extended with %s: +%d (verified)", tag.value, report.appended_count)
    return report


def extended(
    destination: Iterable[Any],
    source: Iterable[Any],
    key: KeyFunc = len,
    *,
    strategy: StrategyTag | str | None = None,
    default: Any = MISSING,
    verify: bool | None = None,
    settings: ExtensionSettings | None = None,
) -> tuple[list[Any], ExtensionReport]:
    """Non-mutating form of :func:`extend`: returns a new list and the report."""
    result = list(destination)
    report = extend(result, source, key, strategy=strategy, default=default, verify=verify, settings=settings)
    return result, report
