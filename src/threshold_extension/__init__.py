"""Aliasing-safe threshold extension of owned collections."""

from threshold_extension.contracts import (
    MISSING,
    CopyMode,
    EmptyDestinationError,
    ExtensionReport,
    InvariantViolationError,
    StrategyTag,
    ThresholdSource,
)
from threshold_extension.engine import extend, extended
from threshold_extension.resolver import copy_out_key, locate_maximum, resolve_threshold
from threshold_extension.settings import ExtensionSettings, get_settings, load_settings
from threshold_extension.stable_ids import fingerprint_collection
from threshold_extension.strategies import (
    STRATEGY_REGISTRY,
    CollectThenExtend,
    CopyThenMutate,
    ExtensionStrategy,
    ScalarOnly,
    get_strategy,
    register_strategy,
)

__all__ = [
    "MISSING",
    "STRATEGY_REGISTRY",
    "CollectThenExtend",
    "CopyMode",
    "CopyThenMutate",
    "EmptyDestinationError",
    "ExtensionReport",
    "ExtensionSettings",
    "ExtensionStrategy",
    "InvariantViolationError",
    "ScalarOnly",
    "StrategyTag",
    "ThresholdSource",
    "copy_out_key",
    "extend",
    "extended",
    "fingerprint_collection",
    "get_settings",
    "get_strategy",
    "load_settings",
    "locate_maximum",
    "register_strategy",
    "resolve_threshold",
]
