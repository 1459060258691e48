from __future__ import annotations

from typing import Any

from threshold_extension.contracts import ExtensionReport, StrategyTag
from threshold_extension.invariants import (
    REGISTRY,
    ExtensionCheckContext,
    Flow,
    InvariantId,
    check_prefix_preserved,
    check_source_order_preserved,
    check_threshold_detached,
    check_threshold_respected,
    failed,
    run_checkers,
)
from threshold_extension.stable_ids import fingerprint_collection


def _context(
    original: list[Any],
    destination: list[Any],
    source: list[Any],
    *,
    threshold: Any,
    key: Any = len,
) -> ExtensionCheckContext:
    report = ExtensionReport(
        strategy=StrategyTag.SCALAR_ONLY,
        threshold=threshold,
        original_length=len(original),
        appended_count=max(len(destination) - len(original), 0),
        final_length=len(destination),
        before_fingerprint=fingerprint_collection(original),
        after_fingerprint=fingerprint_collection(destination),
    )
    return ExtensionCheckContext(original=original, destination=destination, source=source, key=key, report=report)


def test_all_invariants_pass_for_a_correct_extension() -> None:
    original = ["ab", "c"]
    destination = [*original, "abcd"]
    outcomes = run_checkers(_context(original, destination, ["a", "abcd"], threshold=2))

    assert [outcome.invariant_id for outcome in outcomes] == list(REGISTRY)
    assert failed(outcomes) == []
    assert all(outcome.flow is Flow.CONTINUE for outcome in outcomes)


def test_run_checkers_accepts_a_subset() -> None:
    original = ["ab"]
    outcomes = run_checkers(
        _context(original, list(original), [], threshold=2),
        invariant_ids=(InvariantId.THRESHOLD_RESPECTED,),
    )
    assert len(outcomes) == 1
    assert outcomes[0].code == "threshold_respected"


def test_prefix_preserved_detects_replaced_and_removed_elements() -> None:
    original = ["ab", "cd"]

    replaced = check_prefix_preserved(_context(original, ["ab", "zz"], [], threshold=2))
    assert replaced.passed is False
    assert replaced.code == "prefix_element_replaced"
    assert replaced.flow is Flow.STOP
    assert replaced.evidence[0] == {"kind": "index", "value": 1}

    shrunk = check_prefix_preserved(_context(original, ["ab"], [], threshold=2))
    assert shrunk.code == "destination_shrank"


def test_prefix_preserved_detects_in_place_content_changes() -> None:
    first = ["x"]
    original = [first]
    ctx = _context(original, [first], [], threshold=1)
    first.append("y")

    outcome = check_prefix_preserved(ctx)
    assert outcome.passed is False
    assert outcome.code == "prefix_content_changed"


def test_threshold_respected_rejects_ties() -> None:
    original = ["abc"]
    outcome = check_threshold_respected(_context(original, [*original, "xyz"], ["xyz"], threshold=3))

    assert outcome.passed is False
    assert outcome.code == "appended_below_threshold"
    assert outcome.details["message"] == outcome.reason


def test_source_order_preserved_detects_reordering_and_omissions() -> None:
    original = ["a"]
    source = ["bb", "ccc"]

    reordered = check_source_order_preserved(_context(original, [*original, "ccc", "bb"], source, threshold=1))
    assert reordered.code == "appended_sequence_mismatch"

    missing = check_source_order_preserved(_context(original, [*original, "bb"], source, threshold=1))
    assert missing.passed is False
    assert missing.details["expected_count"] == 2


def test_threshold_detached_flags_a_threshold_that_is_an_element() -> None:
    element = [5]
    destination = [[1], element]
    outcome = check_threshold_detached(_context(destination, list(destination), [], threshold=element, key=lambda e: e))

    assert outcome.passed is False
    assert outcome.code == "threshold_aliases_element"


def test_threshold_detached_accepts_immutable_scalars() -> None:
    destination = ["abc"]
    outcome = check_threshold_detached(_context(destination, list(destination), [], threshold=destination[0]))
    assert outcome.passed is True
    assert outcome.code == "threshold_immutable"


def test_threshold_detached_accepts_a_shared_tuple() -> None:
    element = (2, "b")
    destination = [(1, "a"), element]
    outcome = check_threshold_detached(_context(destination, list(destination), [], threshold=element, key=lambda e: e))

    assert outcome.passed is True
    assert outcome.code == "threshold_immutable"
