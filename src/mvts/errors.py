"""Exception types raised by the alignment and statistics layers."""

from __future__ import annotations


class InvalidArgumentError(ValueError):
    """Raised when a caller passes arguments outside an operation's contract."""


class DuplicateTimestampError(ValueError):
    """Raised when a point would land on an already occupied timestamp."""


__all__ = ["DuplicateTimestampError", "InvalidArgumentError"]
