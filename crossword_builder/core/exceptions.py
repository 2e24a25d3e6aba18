"""Custom exception hierarchy for crossword building."""

from __future__ import annotations

from typing import Optional

from .constants import PlacementRejection


class CrosswordError(Exception):
    """Base exception for builder failures."""


class InvalidSizeError(CrosswordError):
    """Raised when a grid dimension is outside the supported range."""


class OutOfBoundsError(CrosswordError):
    """Raised when a coordinate falls outside the grid."""

    def __init__(self, row: int, col: int, message: Optional[str] = None) -> None:
        self.row = row
        self.col = col
        super().__init__(message or f"Position ({row},{col}) is outside the grid")


class IllegalPlacementError(CrosswordError):
    """Raised when a word cannot be committed to the grid."""

    def __init__(self, reason: PlacementRejection, message: str) -> None:
        self.reason = reason
        super().__init__(message)


class UnknownWordError(CrosswordError):
    """Raised when a word id is not part of the puzzle."""
