"""Shared constants and enumerations for the crossword builder."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


MIN_GRID_SIZE = 5
MAX_GRID_SIZE = 25
MIN_WORD_LENGTH = 2
MAX_WORD_LENGTH = 25


class Direction(str, Enum):
    """Word orientations supported by the grid."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    @property
    def step(self) -> Tuple[int, int]:
        return (0, 1) if self is Direction.HORIZONTAL else (1, 0)

    def perpendicular(self) -> "Direction":
        return Direction.VERTICAL if self is Direction.HORIZONTAL else Direction.HORIZONTAL

    @classmethod
    def coerce(cls, value: object) -> Optional["Direction"]:
        """Return the matching direction, or ``None`` for anything else."""

        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class Strictness(str, Enum):
    """Grid validation strictness levels."""

    RELAXED = "relaxed"
    NORMAL = "normal"
    STRICT = "strict"


class DifficultyLevel(str, Enum):
    """Coarse buckets for the [0, 1] difficulty score."""

    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class PlacementRejection(str, Enum):
    """Reasons a word placement is refused."""

    TOO_SHORT = "too_short"
    INVALID_DIRECTION = "invalid_direction"
    OUT_OF_BOUNDS = "out_of_bounds"
    BLOCKED = "blocked"
    FULL_DUPLICATE = "full_duplicate"
    LETTER_CONFLICT = "letter_conflict"
    ISOLATED = "isolated"


ORTHOGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))


@dataclass(frozen=True)
class Bounds:
    """Simple rectangle bounds helper."""

    rows: int
    cols: int

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    @property
    def area(self) -> int:
        return self.rows * self.cols
