"""Data models supporting the crossword builder."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .constants import Direction, PlacementRejection


@dataclass
class Cell:
    """Represents a grid cell with its word references."""

    row: int
    col: int
    letter: str = ""
    number: Optional[int] = None
    blocked: bool = False
    word_ids: List[str] = field(default_factory=list)
    directions: List[Direction] = field(default_factory=list)
    is_start: bool = False
    is_end: bool = False
    is_intersection: bool = False
    # Saved answer for play mode; never read by the builder itself.
    game_value: Optional[str] = None

    def is_filled(self) -> bool:
        return bool(self.letter) and not self.blocked

    def clear(self) -> None:
        self.letter = ""
        self.number = None
        self.word_ids.clear()
        self.directions.clear()
        self.is_start = False
        self.is_end = False
        self.is_intersection = False


@dataclass
class Word:
    """A placed or candidate word."""

    id: str
    text: str
    clue: str
    direction: Direction
    start_row: int
    start_col: int
    number: Optional[int] = None
    difficulty: float = 0.0

    @property
    def length(self) -> int:
        return len(self.text)

    @property
    def cells(self) -> List[Tuple[int, int]]:
        dr, dc = self.direction.step
        return [(self.start_row + dr * i, self.start_col + dc * i) for i in range(self.length)]

    @property
    def end(self) -> Tuple[int, int]:
        dr, dc = self.direction.step
        offset = max(self.length - 1, 0)
        return self.start_row + dr * offset, self.start_col + dc * offset


@dataclass(frozen=True)
class LetterConflict:
    row: int
    col: int
    existing: str
    required: str


@dataclass
class PlacementCheck:
    """Outcome of a legality check; ``reason`` is set when refused."""

    ok: bool = False
    reason: Optional[PlacementRejection] = None
    message: str = ""
    intersections: List[Tuple[int, int]] = field(default_factory=list)
    conflicts: List[LetterConflict] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.ok


@dataclass(frozen=True)
class IntersectionCandidate:
    """A shared letter between a new word and an existing one."""

    new_index: int
    existing_index: int
    letter: str
    quality: float


@dataclass(frozen=True)
class PlacementOption:
    start_row: int
    start_col: int
    direction: Direction
    quality: float
    intersection: IntersectionCandidate


@dataclass
class AutoPlaceResult:
    placed: List[Word] = field(default_factory=list)
    skipped: List[Word] = field(default_factory=list)
