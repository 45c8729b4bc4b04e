"""Exception types raised for caller mistakes.

Generation and search never raise for valid parameters; every runtime
failure (exhausted placement, no cave regions, unreachable goal) comes back
as data. These exceptions only cover invalid configuration.
"""

from __future__ import annotations


class DelveError(Exception):
    """Base class for all Delve errors."""


class InvalidConfigError(DelveError, ValueError):
    """Raised when generation parameters are out of range."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


__all__ = ["DelveError", "InvalidConfigError"]
