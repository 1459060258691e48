# threshold_extension/stable_ids.py
from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable
from typing import Any, Optional


def _sha256_hex(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8")).hexdigest()


def _safe_repr(obj: Any) -> str:
    try:
        return repr(obj)
    except Exception:
        return f"<unrepresentable {type(obj).__qualname__}>"


def _jsonable(obj: Any, _path: Optional[set[int]] = None) -> Any:
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    if not isinstance(obj, (list, tuple, dict)):
        # Tag opaque values so "repr text" never collides with an equal plain string.
        return {"__repr__": _safe_repr(obj)}

    path = _path if _path is not None else set()
    marker = id(obj)
    if marker in path:
        return {"__cycle__": type(obj).__qualname__}
    path.add(marker)
    try:
        if isinstance(obj, dict):
            return {str(k): _jsonable(v, path) for k, v in obj.items()}
        return [_jsonable(item, path) for item in obj]
    finally:
        path.discard(marker)


def _canon(obj: Any) -> str:
    """
    Canonical JSON string (stable across runs) for hashing.
    """
    return json.dumps(_jsonable(obj), sort_keys=True, ensure_ascii=False, separators=(",", ":"))


def _render(item: Any) -> str:
    # Nesting deeper than the interpreter's recursion limit renders by type only.
    try:
        return _canon(item)
    except RecursionError:
        return _canon({"__opaque__": type(item).__qualname__})


def fingerprint_collection(items: Iterable[Any]) -> str:
    """
    Deterministic content identity of an ordered collection.

    Two collections share a fingerprint iff they hold equal elements (by canonical
    rendering) in the same order. The element count is hashed too so that
    ``[]`` and ``[[]]`` stay distinct. Rendering never raises: cycles, failing
    ``__repr__`` and pathological nesting degrade to tagged placeholders.
    """
    elements = [_render(item) for item in items]
    return "col_" + _sha256_hex(_canon({"n": len(elements), "items": elements}))


def fingerprint_element(item: Any) -> str:
    return "elm_" + _sha256_hex(_render(item))
