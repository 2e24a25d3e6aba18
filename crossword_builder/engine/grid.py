"""Grid representation and helper utilities."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from ..core.constants import MAX_GRID_SIZE, MIN_GRID_SIZE, Bounds
from ..core.exceptions import InvalidSizeError, OutOfBoundsError
from ..core.models import Cell
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


@dataclass
class GridConfig:
    """Configuration values driving the grid layout."""

    height: int
    width: int
    min_size: int = MIN_GRID_SIZE
    max_size: int = MAX_GRID_SIZE

    def bounds(self) -> Bounds:
        return Bounds(rows=self.height, cols=self.width)

    def validate(self) -> None:
        for label, value in (("width", self.width), ("height", self.height)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidSizeError(f"Grid {label} must be an integer, got {value!r}")
            if not self.min_size <= value <= self.max_size:
                raise InvalidSizeError(
                    f"Grid {label} {value} outside [{self.min_size}, {self.max_size}]"
                )


@dataclass
class GridStats:
    total_cells: int
    filled_cells: int
    blocked_cells: int
    intersections: int
    start_cells: int

    @property
    def density(self) -> float:
        return self.filled_cells / self.total_cells if self.total_cells else 0.0

    @property
    def blocked_ratio(self) -> float:
        return self.blocked_cells / self.total_cells if self.total_cells else 0.0


class CrosswordGrid:
    """Rectangular matrix of cells; only block/unblock mutate it directly.

    Letters and word references are written by
    :class:`~crossword_builder.engine.placement.PlacementEngine`.
    """

    def __init__(self, config: GridConfig) -> None:
        config.validate()
        self.config = config
        self.bounds = config.bounds()
        self.cells: List[List[Cell]] = [
            [Cell(row=r, col=c) for c in range(self.bounds.cols)] for r in range(self.bounds.rows)
        ]
        LOGGER.debug("Created %sx%s grid", self.bounds.rows, self.bounds.cols)

    @classmethod
    def create(cls, width: int, height: int) -> "CrosswordGrid":
        return cls(GridConfig(height=height, width=width))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Cell]]) -> "CrosswordGrid":
        """Adopt an existing matrix of cells, e.g. one loaded from storage."""

        if not rows or not rows[0]:
            raise InvalidSizeError("Cannot build a grid from an empty matrix")
        width = len(rows[0])
        for index, row in enumerate(rows):
            if len(row) != width:
                raise InvalidSizeError(
                    f"Row {index} has {len(row)} cells, expected {width}"
                )
        grid = cls(GridConfig(height=len(rows), width=width))
        for r, row in enumerate(rows):
            for c, cell in enumerate(row):
                if not isinstance(cell, Cell):
                    raise TypeError(f"Expected Cell at ({r},{c}), got {type(cell).__name__}")
                cell.row, cell.col = r, c
                grid.cells[r][c] = cell
        return grid

    # ------------------------------------------------------------------
    # Dimensions and access
    # ------------------------------------------------------------------
    @property
    def width(self) -> int:
        return self.bounds.cols

    @property
    def height(self) -> int:
        return self.bounds.rows

    def contains(self, row: int, col: int) -> bool:
        return self.bounds.contains(row, col)

    def cell(self, row: int, col: int) -> Cell:
        if not self.bounds.contains(row, col):
            raise OutOfBoundsError(row, col)
        return self.cells[row][col]

    get = cell

    def iter_cells(self) -> Iterator[Cell]:
        for row in self.cells:
            yield from row

    # ------------------------------------------------------------------
    # Cell manipulation
    # ------------------------------------------------------------------
    def block(self, row: int, col: int) -> None:
        cell = self.cell(row, col)
        if cell.word_ids:
            LOGGER.debug("Blocking (%s,%s) drops references %s", row, col, cell.word_ids)
        cell.clear()
        cell.blocked = True

    def unblock(self, row: int, col: int) -> None:
        self.cell(row, col).blocked = False

    def clone(self) -> "CrosswordGrid":
        return copy.deepcopy(self)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def has_words(self) -> bool:
        return any(cell.word_ids for cell in self.iter_cells())

    def filled_cells(self) -> List[Cell]:
        return [cell for cell in self.iter_cells() if cell.is_filled()]

    def word_positions(self) -> Dict[str, List[Tuple[int, int]]]:
        """Map every referenced word id to its cells in reading order."""

        positions: Dict[str, List[Tuple[int, int]]] = {}
        for cell in self.iter_cells():
            for word_id in cell.word_ids:
                positions.setdefault(word_id, []).append((cell.row, cell.col))
        return positions

    def stats(self) -> GridStats:
        filled = blocked = intersections = starts = 0
        for cell in self.iter_cells():
            if cell.blocked:
                blocked += 1
            elif cell.letter:
                filled += 1
            if len(cell.word_ids) >= 2:
                intersections += 1
            if cell.is_start:
                starts += 1
        return GridStats(
            total_cells=self.bounds.area,
            filled_cells=filled,
            blocked_cells=blocked,
            intersections=intersections,
            start_cells=starts,
        )

    def to_jsonable(self) -> Dict[str, Any]:
        def dump(cell: Cell) -> Dict[str, Any]:
            return {
                "letter": cell.letter,
                "number": cell.number,
                "blocked": cell.blocked,
                "word_ids": list(cell.word_ids),
                "directions": [direction.value for direction in cell.directions],
                "is_start": cell.is_start,
                "is_end": cell.is_end,
                "is_intersection": cell.is_intersection,
            }

        return {
            "width": self.width,
            "height": self.height,
            "cells": [[dump(cell) for cell in row] for row in self.cells],
        }

    def render_rows(self, empty: str = ".", blocked: str = "#") -> List[str]:
        lines = []
        for row in self.cells:
            chars: List[str] = []
            for cell in row:
                if cell.blocked:
                    chars.append(blocked)
                else:
                    chars.append(cell.letter or empty)
            lines.append("".join(chars))
        return lines

    def __repr__(self) -> str:
        return f"CrosswordGrid(height={self.height}, width={self.width})"


def find_number(grid: CrosswordGrid, row: int, col: int) -> Optional[int]:
    """Number of the start cell at ``(row, col)``, if one exists there."""

    if not grid.contains(row, col):
        return None
    cell = grid.cells[row][col]
    return cell.number if cell.is_start else None
