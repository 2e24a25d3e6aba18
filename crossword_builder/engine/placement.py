"""Placement legality, grid mutation and greedy batch placement."""

from __future__ import annotations

import dataclasses
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from ..core.constants import MIN_WORD_LENGTH, Direction, PlacementRejection
from ..core.exceptions import IllegalPlacementError
from ..core.models import (
    AutoPlaceResult,
    Cell,
    IntersectionCandidate,
    LetterConflict,
    PlacementCheck,
    PlacementOption,
    Word,
)
from ..data.normalization import clean_word
from ..data.scoring import intersection_quality, placement_key
from ..utils.logger import get_logger
from .grid import CrosswordGrid, find_number


LOGGER = get_logger(__name__)


def _direction_of(positions: Sequence[Tuple[int, int]]) -> Direction:
    if len(positions) > 1 and positions[0][0] == positions[-1][0]:
        return Direction.HORIZONTAL
    return Direction.VERTICAL


def _reject(reason: PlacementRejection, message: str, **extra) -> PlacementCheck:
    return PlacementCheck(ok=False, reason=reason, message=message, **extra)


class PlacementEngine:
    """Decides where words may go and writes them into a grid.

    ``can_place`` never mutates. ``place`` and ``remove`` either fully apply
    or leave the grid untouched.
    """

    # ------------------------------------------------------------------
    # Legality
    # ------------------------------------------------------------------
    def can_place(
        self,
        grid: CrosswordGrid,
        text: str,
        row: int,
        col: int,
        direction: Union[Direction, str],
    ) -> PlacementCheck:
        word = clean_word(text)
        if len(word) < MIN_WORD_LENGTH:
            return _reject(PlacementRejection.TOO_SHORT, f"Word {text!r} is shorter than {MIN_WORD_LENGTH}")
        orientation = Direction.coerce(direction)
        if orientation is None:
            return _reject(PlacementRejection.INVALID_DIRECTION, f"Unknown direction {direction!r}")
        if not grid.contains(row, col):
            return _reject(PlacementRejection.OUT_OF_BOUNDS, f"Anchor ({row},{col}) is outside the grid")

        dr, dc = orientation.step
        positions = [(row + dr * i, col + dc * i) for i in range(len(word))]
        for r, c in positions:
            if not grid.contains(r, c):
                return _reject(PlacementRejection.OUT_OF_BOUNDS, f"{word} runs past the grid at ({r},{c})")
        for r, c in positions:
            if grid.cells[r][c].blocked:
                return _reject(PlacementRejection.BLOCKED, f"{word} crosses blocked cell ({r},{c})")

        intersections: List[Tuple[int, int]] = []
        conflicts: List[LetterConflict] = []
        for index, (r, c) in enumerate(positions):
            existing = grid.cells[r][c].letter
            if not existing:
                continue
            if existing == word[index]:
                intersections.append((r, c))
            else:
                conflicts.append(LetterConflict(r, c, existing, word[index]))

        if len(intersections) == len(positions):
            return _reject(
                PlacementRejection.FULL_DUPLICATE,
                f"{word} would only repeat letters already on the grid",
                intersections=intersections,
            )
        if conflicts:
            first = conflicts[0]
            return _reject(
                PlacementRejection.LETTER_CONFLICT,
                f"{word} needs {first.required} at ({first.row},{first.col}) which holds {first.existing}",
                intersections=intersections,
                conflicts=conflicts,
            )
        if not intersections and grid.has_words():
            return _reject(PlacementRejection.ISOLATED, f"{word} does not cross any placed word")

        return PlacementCheck(ok=True, message="ok", intersections=intersections)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def place(self, grid: CrosswordGrid, word: Word) -> Word:
        """Commit ``word`` to ``grid`` or raise :class:`IllegalPlacementError`.

        A word starting on an existing start cell shares that cell's number.
        """

        check = self.can_place(grid, word.text, word.start_row, word.start_col, word.direction)
        if not check:
            LOGGER.warning("Refused %s at (%s,%s): %s", word.text, word.start_row, word.start_col, check.message)
            raise IllegalPlacementError(check.reason, check.message)

        text = clean_word(word.text)
        direction = Direction.coerce(word.direction)
        word.text = text
        word.direction = direction
        shared = find_number(grid, word.start_row, word.start_col)
        if shared is not None:
            word.number = shared
        elif word.number is None:
            word.number = self._max_number(grid) + 1

        positions = word.cells
        for index, (r, c) in enumerate(positions):
            cell = grid.cells[r][c]
            cell.letter = text[index]
            if word.id not in cell.word_ids:
                cell.word_ids.append(word.id)
            if direction not in cell.directions:
                cell.directions.append(direction)
            cell.is_intersection = len(cell.word_ids) >= 2

        first = grid.cells[positions[0][0]][positions[0][1]]
        first.is_start = True
        first.number = word.number
        last = grid.cells[positions[-1][0]][positions[-1][1]]
        last.is_end = True

        LOGGER.debug(
            "Placed %s #%s %s at (%s,%s) crossing %s",
            text,
            word.number,
            direction.value,
            word.start_row,
            word.start_col,
            check.intersections,
        )
        return word

    def remove(self, grid: CrosswordGrid, word_id: str) -> bool:
        """Retract ``word_id`` from every cell; ``False`` if it was never placed."""

        positions = grid.word_positions()
        touched = positions.pop(word_id, None)
        if not touched:
            return False

        for r, c in touched:
            cell = grid.cells[r][c]
            cell.word_ids.remove(word_id)
            if not cell.word_ids:
                cell.clear()
                continue
            self._recompute(cell, positions)

        LOGGER.debug("Removed %s from %s cells", word_id, len(touched))
        return True

    @staticmethod
    def _recompute(cell: Cell, positions: Dict[str, List[Tuple[int, int]]]) -> None:
        here = (cell.row, cell.col)
        directions: List[Direction] = []
        starts = ends = False
        for other_id in cell.word_ids:
            cells = positions.get(other_id, [])
            if not cells:
                continue
            direction = _direction_of(cells)
            if direction not in directions:
                directions.append(direction)
            starts = starts or cells[0] == here
            ends = ends or cells[-1] == here
        cell.directions[:] = directions
        cell.is_intersection = len(cell.word_ids) >= 2
        cell.is_start = starts
        cell.is_end = ends
        if not starts:
            cell.number = None

    @staticmethod
    def _max_number(grid: CrosswordGrid) -> int:
        return max((cell.number for cell in grid.iter_cells() if cell.number), default=0)

    def number_for(self, grid: CrosswordGrid, row: int, col: int, candidate: int) -> int:
        """Reuse the number of an existing start cell, else ``candidate``."""

        shared = find_number(grid, row, col)
        return shared if shared is not None else candidate

    # ------------------------------------------------------------------
    # Intersection search
    # ------------------------------------------------------------------
    def find_intersections(self, new_text: str, existing_word: Word) -> List[IntersectionCandidate]:
        new = clean_word(new_text)
        existing = existing_word.text
        candidates: List[IntersectionCandidate] = []
        for i, letter in enumerate(new):
            for j, other in enumerate(existing):
                if letter != other:
                    continue
                quality = intersection_quality(i, len(new), j, len(existing), letter)
                candidates.append(IntersectionCandidate(i, j, letter, quality))
        candidates.sort(key=lambda item: item.quality, reverse=True)
        return candidates

    @staticmethod
    def anchor_for(existing_word: Word, candidate: IntersectionCandidate) -> Tuple[int, int, Direction]:
        """Start position of a word crossing ``existing_word`` at ``candidate``."""

        i, j = candidate.new_index, candidate.existing_index
        if existing_word.direction == Direction.HORIZONTAL:
            return existing_word.start_row - i, existing_word.start_col + j, Direction.VERTICAL
        return existing_word.start_row + j, existing_word.start_col - i, Direction.HORIZONTAL

    def placement_options(
        self,
        grid: CrosswordGrid,
        text: str,
        placed_words: Iterable[Word],
    ) -> List[PlacementOption]:
        """Every legal crossing placement of ``text``, best first."""

        options: List[PlacementOption] = []
        seen = set()
        for existing in placed_words:
            for candidate in self.find_intersections(text, existing):
                row, col, direction = self.anchor_for(existing, candidate)
                if (row, col, direction) in seen:
                    continue
                if self.can_place(grid, text, row, col, direction):
                    seen.add((row, col, direction))
                    options.append(PlacementOption(row, col, direction, candidate.quality, candidate))
        options.sort(key=lambda item: item.quality, reverse=True)
        return options

    # ------------------------------------------------------------------
    # Batch placement
    # ------------------------------------------------------------------
    def auto_place(
        self,
        grid: CrosswordGrid,
        words: Sequence[Word],
        next_number: Optional[int] = None,
    ) -> AutoPlaceResult:
        """Greedy first-fit placement of ``words``.

        Words go longest first, rarer letters breaking ties. The first is
        centred horizontally; each following word takes the first legal
        crossing found against the words placed so far, in placement order.
        Words with no legal crossing are skipped, so the outcome is not
        guaranteed to be optimal.
        """

        result = AutoPlaceResult()
        if not words:
            return result
        number = next_number if next_number is not None else self._max_number(grid) + 1
        ordered = sorted(words, key=lambda item: placement_key(item.text))

        def commit(word: Word, row: int, col: int, direction: Direction) -> bool:
            nonlocal number
            assigned = self.number_for(grid, row, col, number)
            placed = dataclasses.replace(
                word,
                text=clean_word(word.text),
                direction=direction,
                start_row=row,
                start_col=col,
                number=assigned,
            )
            self.place(grid, placed)
            if assigned == number:
                number += 1
            result.placed.append(placed)
            return True

        first = ordered[0]
        first_text = clean_word(first.text)
        row = grid.height // 2
        col = (grid.width - len(first_text)) // 2
        if self.can_place(grid, first_text, row, col, Direction.HORIZONTAL):
            commit(first, row, col, Direction.HORIZONTAL)
        else:
            LOGGER.debug("Could not centre %s", first_text)
            result.skipped.append(first)

        for word in ordered[1:]:
            if not self._place_first_fit(grid, word, result.placed, commit):
                result.skipped.append(word)

        LOGGER.info(
            "Auto placement committed %s of %s words", len(result.placed), len(words)
        )
        return result

    def _place_first_fit(self, grid: CrosswordGrid, word: Word, placed: List[Word], commit) -> bool:
        text = clean_word(word.text)
        # Snapshot: commit appends to ``placed`` while we iterate.
        for existing in list(placed):
            for candidate in self.find_intersections(text, existing):
                row, col, direction = self.anchor_for(existing, candidate)
                if self.can_place(grid, text, row, col, direction):
                    return commit(word, row, col, direction)
        LOGGER.debug("No crossing found for %s", text)
        return False


__all__ = ["PlacementEngine"]
