"""
aliasext distribution import namespace.

This package re-exports the core `threshold_extension` package so callers can
write `import aliasext` and reach the public API directly.
"""

from importlib.metadata import PackageNotFoundError, version

# src/aliasext/__init__.py
from threshold_extension import *  # noqa: F401,F403
from threshold_extension import __all__ as _core_all

try:
    __version__ = version("aliasext")
except PackageNotFoundError:  # pragma: no cover - source checkout without an install
    __version__ = "0+unknown"

__all__ = ["__version__", *_core_all]
