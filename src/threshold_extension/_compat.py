from __future__ import annotations

from enum import Enum

from typing_extensions import Self


class StrEnum(str, Enum):  # noqa: UP042
    """Python 3.10-compatible StrEnum."""

    pass


__all__ = ["Self", "StrEnum"]
