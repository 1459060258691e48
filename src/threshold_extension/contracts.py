# threshold_extension/contracts.py
from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from threshold_extension._compat import StrEnum

if TYPE_CHECKING:
    from threshold_extension.invariants import InvariantOutcome


class EmptyDestinationError(ValueError):
    """Raised when a threshold is requested from a destination with no elements."""

    def __init__(self, message: str = "cannot resolve a threshold: destination has no elements") -> None:
        super().__init__(message)


class InvariantViolationError(AssertionError):
    """Raised when post-extension invariant checks fail."""

    def __init__(self, outcomes: Sequence[InvariantOutcome]) -> None:
        self.outcomes = tuple(outcomes)
        codes = ", ".join(outcome.code for outcome in self.outcomes) or "unknown"
        super().__init__(f"extension invariants violated: {codes}")


# ------------------------------------------------------------------------------
# Keys / elements
# ------------------------------------------------------------------------------

KeyFunc = Callable[[Any], Any]


class _Missing:
    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Final[Any] = _Missing()


# ------------------------------------------------------------------------------
# Strategy selection
# ------------------------------------------------------------------------------


class StrategyTag(StrEnum):
    COPY_THEN_MUTATE = "copy_then_mutate"
    COLLECT_THEN_EXTEND = "collect_then_extend"
    SCALAR_ONLY = "scalar_only"


class CopyMode(StrEnum):
    SHALLOW = "shallow"
    DEEP = "deep"


class ThresholdSource(StrEnum):
    RESOLVED = "resolved"
    DEFAULT = "default"


# ------------------------------------------------------------------------------
# Report
# ------------------------------------------------------------------------------

_REPORT_CONFIG = ConfigDict(
    extra="forbid",
    use_enum_values=False,  # keep enums as enums in Python
    frozen=True,
)


class ExtensionReport(BaseModel):
    """Outcome of one extension call. Holds copies only, never the destination."""

    model_config = _REPORT_CONFIG

    strategy: StrategyTag
    threshold: Any
    threshold_source: ThresholdSource = ThresholdSource.RESOLVED
    original_length: int = Field(ge=0)
    appended_count: int = Field(ge=0)
    final_length: int = Field(ge=0)
    before_fingerprint: str
    after_fingerprint: str

    @field_validator("before_fingerprint", "after_fingerprint")
    @classmethod
    def _fingerprint_prefix(cls, value: str) -> str:
        if not value.startswith("col_"):
            raise ValueError("fingerprints must be collection fingerprints (col_ prefix)")
        return value

    @property
    def changed(self) -> bool:
        return self.appended_count > 0

    def as_payload(self) -> dict[str, Any]:
        payload = self.model_dump(mode="json")
        payload["changed"] = self.changed
        return payload
