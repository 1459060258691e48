# tests/test_stable_ids.py
from __future__ import annotations

import sys

from threshold_extension.stable_ids import fingerprint_collection, fingerprint_element


def test_collection_fingerprints_are_deterministic() -> None:
    words = ["Lorem", "Ipsum", "is"]
    assert fingerprint_collection(words) == fingerprint_collection(list(words))
    assert fingerprint_collection(words).startswith("col_")


def test_collection_fingerprints_depend_on_order_and_content() -> None:
    assert fingerprint_collection(["a", "b"]) != fingerprint_collection(["b", "a"])
    assert fingerprint_collection(["a"]) != fingerprint_collection(["a", "a"])
    assert fingerprint_collection([]) != fingerprint_collection([[]])


def test_fingerprints_accept_non_json_elements() -> None:
    assert fingerprint_collection([{1, 2}]) == fingerprint_collection([{1, 2}])
    assert fingerprint_collection([b"ab"]) != fingerprint_collection(["b'ab'"])


def test_fingerprints_accept_any_iterable() -> None:
    assert fingerprint_collection(iter(["x", "y"])) == fingerprint_collection(("x", "y"))


def test_element_fingerprints_are_deterministic() -> None:
    assert fingerprint_element({"b": 1, "a": 2}) == fingerprint_element({"a": 2, "b": 1})
    assert fingerprint_element("x").startswith("elm_")


def test_fingerprints_tolerate_cycles() -> None:
    cyclic: list[object] = []
    cyclic.append(cyclic)

    assert fingerprint_collection([cyclic]) == fingerprint_collection([cyclic])
    assert fingerprint_collection([cyclic]) != fingerprint_collection([[]])
    assert fingerprint_element(cyclic).startswith("elm_")


def test_shared_non_cyclic_references_render_in_full() -> None:
    shared = ["x"]
    assert fingerprint_collection([[shared, shared]]) == fingerprint_collection([[["x"], ["x"]]])


class _NoRepr:
    def __repr__(self) -> str:
        raise RuntimeError("no repr")


def test_fingerprints_tolerate_failing_repr() -> None:
    assert fingerprint_collection([_NoRepr()]) == fingerprint_collection([_NoRepr()])


def test_fingerprints_tolerate_nesting_beyond_the_recursion_limit() -> None:
    deep: list[object] = []
    for _ in range(sys.getrecursionlimit() * 2):
        deep = [deep]

    assert fingerprint_collection([deep, "tail"]).startswith("col_")
