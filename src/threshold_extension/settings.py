# threshold_extension/settings.py
"""Runtime configuration loaded from environment variables (and an optional `.env`)."""

from __future__ import annotations

import os
from collections.abc import Mapping
from functools import lru_cache
from typing import Final

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from threshold_extension._compat import Self
from threshold_extension.contracts import CopyMode, StrategyTag

ENV_PREFIX: Final[str] = "ALIASEXT_"

ENV_FIELDS: Final[dict[str, str]] = {
    "ALIASEXT_STRATEGY": "default_strategy",
    "ALIASEXT_COPY_MODE": "copy_mode",
    "ALIASEXT_VERIFY_INVARIANTS": "verify_invariants",
    "ALIASEXT_LOG_LEVEL": "log_level",
}

LOG_LEVELS: Final[tuple[str, ...]] = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


class SettingsError(RuntimeError):
    """Raised when ALIASEXT_* environment values fail validation."""


class ExtensionSettings(BaseModel):
    """Typed runtime configuration."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    default_strategy: StrategyTag = StrategyTag.SCALAR_ONLY
    copy_mode: CopyMode = CopyMode.SHALLOW
    verify_invariants: bool = False
    log_level: str = Field(default="WARNING")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return level

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> Self:
        values = {field: environ[name] for name, field in ENV_FIELDS.items() if environ.get(name)}
        return cls.model_validate(values)


def load_settings(*, load_env: bool = True) -> ExtensionSettings:
    """Load and validate settings from `.env` and the process environment."""

    if load_env:
        load_dotenv()

    try:
        return ExtensionSettings.from_env(os.environ)
    except ValidationError as exc:
        names = ", ".join(sorted(name for name in ENV_FIELDS if os.environ.get(name)))
        raise SettingsError(f"Invalid {ENV_PREFIX}* configuration ({names}): {exc}") from exc


@lru_cache(maxsize=1)
def get_settings() -> ExtensionSettings:
    """Cached accessor for library settings."""

    return load_settings()
