from __future__ import annotations

import copy
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Protocol, Sequence

from threshold_extension.contracts import ExtensionReport, KeyFunc
from threshold_extension.stable_ids import fingerprint_collection, fingerprint_element


class InvariantId(str, Enum):
    PREFIX_PRESERVED = "prefix_preserved.v1"
    THRESHOLD_RESPECTED = "threshold_respected.v1"
    SOURCE_ORDER_PRESERVED = "source_order_preserved.v1"
    THRESHOLD_DETACHED = "threshold_detached.v1"


class Flow(str, Enum):
    CONTINUE = "continue"
    STOP = "stop"


@dataclass(frozen=True)
class InvariantOutcome:
    invariant_id: InvariantId
    passed: bool
    reason: str
    flow: Flow
    code: str
    evidence: Sequence[Mapping[str, Any]] = field(default_factory=tuple)
    details: Mapping[str, Any] = field(default_factory=dict)


class CheckContext(Protocol):
    original: Sequence[Any]
    destination: Sequence[Any]
    source: Sequence[Any]
    key: KeyFunc
    report: ExtensionReport


@dataclass(frozen=True)
class ExtensionCheckContext:
    original: Sequence[Any]
    destination: Sequence[Any]
    source: Sequence[Any]
    key: KeyFunc
    report: ExtensionReport


Checker = Callable[[CheckContext], InvariantOutcome]


def _ok(invariant_id: InvariantId, code: str, details: Optional[Mapping[str, Any]] = None) -> InvariantOutcome:
    detail_map = dict(details or {})
    reason = str(detail_map.get("message") or code)
    return InvariantOutcome(
        invariant_id=invariant_id,
        passed=True,
        reason=reason,
        flow=Flow.CONTINUE,
        code=code,
        details=detail_map,
    )


def _fail(
    invariant_id: InvariantId,
    code: str,
    reason: str,
    *,
    evidence: Sequence[Mapping[str, Any]] = (),
    details: Optional[Mapping[str, Any]] = None,
) -> InvariantOutcome:
    return InvariantOutcome(
        invariant_id=invariant_id,
        passed=False,
        reason=reason,
        flow=Flow.STOP,
        code=code,
        evidence=tuple(evidence),
        details={"message": reason, **dict(details or {})},
    )


def check_prefix_preserved(ctx: CheckContext) -> InvariantOutcome:
    n = len(ctx.original)
    if len(ctx.destination) < n:
        return _fail(
            InvariantId.PREFIX_PRESERVED,
            "destination_shrank",
            "Extension removed pre-existing destination elements.",
            details={"original_length": n, "final_length": len(ctx.destination)},
        )

    for index, (before, after) in enumerate(zip(ctx.original, ctx.destination)):
        if before is not after:
            return _fail(
                InvariantId.PREFIX_PRESERVED,
                "prefix_element_replaced",
                "A pre-existing destination element was replaced or reordered.",
                evidence=({"kind": "index", "value": index}, {"kind": "element", "value": fingerprint_element(after)}),
            )

    prefix_fingerprint = fingerprint_collection(ctx.destination[:n])
    if prefix_fingerprint != ctx.report.before_fingerprint:
        return _fail(
            InvariantId.PREFIX_PRESERVED,
            "prefix_content_changed",
            "Pre-existing destination elements changed content during extension.",
            evidence=(
                {"kind": "fingerprint", "value": ctx.report.before_fingerprint},
                {"kind": "fingerprint", "value": prefix_fingerprint},
            ),
        )

    return _ok(InvariantId.PREFIX_PRESERVED, "prefix_preserved", {"original_length": n})


def check_threshold_respected(ctx: CheckContext) -> InvariantOutcome:
    threshold = ctx.report.threshold
    appended = ctx.destination[len(ctx.original) :]
    for offset, element in enumerate(appended):
        if not ctx.key(element) > threshold:
            return _fail(
                InvariantId.THRESHOLD_RESPECTED,
                "appended_below_threshold",
                "An appended element does not strictly exceed the threshold.",
                evidence=({"kind": "index", "value": len(ctx.original) + offset},),
                details={"threshold": repr(threshold)},
            )
    return _ok(InvariantId.THRESHOLD_RESPECTED, "threshold_respected", {"appended": len(appended)})


def check_source_order_preserved(ctx: CheckContext) -> InvariantOutcome:
    threshold = ctx.report.threshold
    expected = [element for element in ctx.source if ctx.key(element) > threshold]
    appended = list(ctx.destination[len(ctx.original) :])
    if appended != expected:
        return _fail(
            InvariantId.SOURCE_ORDER_PRESERVED,
            "appended_sequence_mismatch",
            "Appended elements do not match the qualifying source elements in source order.",
            evidence=(
                {"kind": "fingerprint", "value": fingerprint_collection(expected)},
                {"kind": "fingerprint", "value": fingerprint_collection(appended)},
            ),
            details={"expected_count": len(expected), "appended_count": len(appended)},
        )
    return _ok(InvariantId.SOURCE_ORDER_PRESERVED, "source_order_preserved", {"appended": len(appended)})


def check_threshold_detached(ctx: CheckContext) -> InvariantOutcome:
    threshold = ctx.report.threshold
    # copy.copy hands back immutable values (str, int, tuple, ...) unchanged; sharing
    # one with the destination cannot be observed through mutation.
    if copy.copy(threshold) is threshold:
        return _ok(InvariantId.THRESHOLD_DETACHED, "threshold_immutable")

    for index, element in enumerate(ctx.destination):
        if threshold is element:
            return _fail(
                InvariantId.THRESHOLD_DETACHED,
                "threshold_aliases_element",
                "The resolved threshold is a destination element, not a copied value.",
                evidence=({"kind": "index", "value": index},),
            )
    return _ok(InvariantId.THRESHOLD_DETACHED, "threshold_detached")


REGISTRY: dict[InvariantId, Checker] = {
    InvariantId.PREFIX_PRESERVED: check_prefix_preserved,
    InvariantId.THRESHOLD_RESPECTED: check_threshold_respected,
    InvariantId.SOURCE_ORDER_PRESERVED: check_source_order_preserved,
    InvariantId.THRESHOLD_DETACHED: check_threshold_detached,
}


def run_checkers(ctx: CheckContext, invariant_ids: Optional[Iterable[InvariantId]] = None) -> list[InvariantOutcome]:
    selected = tuple(invariant_ids) if invariant_ids is not None else tuple(REGISTRY)
    return [REGISTRY[invariant_id](ctx) for invariant_id in selected]


def failed(outcomes: Iterable[InvariantOutcome]) -> list[InvariantOutcome]:
    return [outcome for outcome in outcomes if not outcome.passed]
