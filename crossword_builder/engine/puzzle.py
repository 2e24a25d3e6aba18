"""A puzzle session: one grid, its words and the engine that edits them."""

from __future__ import annotations

import copy
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ..core.constants import Direction, PlacementRejection
from ..core.exceptions import IllegalPlacementError, UnknownWordError
from ..core.models import AutoPlaceResult, Word
from ..data.normalization import clean_word, collapse_whitespace
from ..data.scoring import word_difficulty, words_statistics
from ..utils.hashing import generate_word_id
from ..utils.logger import get_logger
from .grid import CrosswordGrid, GridConfig
from .placement import PlacementEngine


LOGGER = get_logger(__name__)


def make_word(
    text: str,
    clue: str = "",
    direction: Union[Direction, str] = Direction.HORIZONTAL,
    row: int = 0,
    col: int = 0,
    word_id: Optional[str] = None,
) -> Word:
    """Build a :class:`Word` with normalized text, a fresh id and its difficulty."""

    orientation = Direction.coerce(direction)
    if orientation is None:
        raise IllegalPlacementError(
            PlacementRejection.INVALID_DIRECTION, f"Unknown direction {direction!r}"
        )
    normalized = clean_word(text)
    return Word(
        id=word_id or generate_word_id(),
        text=normalized,
        clue=collapse_whitespace(clue) if clue else "",
        direction=orientation,
        start_row=row,
        start_col=col,
        difficulty=word_difficulty(normalized),
    )


class Puzzle:
    """Owns a grid and the words placed on it.

    Numbers come from a counter that only moves forward, so removing a word
    never renumbers the others. A word that starts on an existing start
    cell shares its number.
    """

    def __init__(
        self,
        grid: Optional[CrosswordGrid] = None,
        engine: Optional[PlacementEngine] = None,
        *,
        width: int = 15,
        height: int = 15,
    ) -> None:
        self.grid = grid or CrosswordGrid(GridConfig(height=height, width=width))
        self.engine = engine or PlacementEngine()
        self.words: Dict[str, Word] = {}
        self._next_number = max((c.number for c in self.grid.iter_cells() if c.number), default=0) + 1

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------
    def add_word(
        self,
        text: str,
        clue: str,
        direction: Union[Direction, str],
        row: int,
        col: int,
    ) -> Word:
        word = make_word(text, clue, direction, row, col)
        return self._commit(word)

    def _commit(self, word: Word) -> Word:
        word.number = self.engine.number_for(self.grid, word.start_row, word.start_col, self._next_number)
        self.engine.place(self.grid, word)
        if word.number == self._next_number:
            self._next_number += 1
        self.words[word.id] = word
        LOGGER.info("Added %s #%s (%s)", word.text, word.number, word.direction.value)
        return word

    def remove_word(self, word_id: str) -> Word:
        word = self.words.pop(word_id, None)
        if word is None:
            raise UnknownWordError(f"No word with id {word_id!r}")
        self.engine.remove(self.grid, word_id)
        LOGGER.info("Removed %s #%s", word.text, word.number)
        return word

    def move_word(
        self,
        word_id: str,
        row: int,
        col: int,
        direction: Optional[Union[Direction, str]] = None,
    ) -> Word:
        """Re-place a word; on failure the word goes back where it was.

        The cells the word occupied are snapshotted and written back on
        failure, so the restore never goes through the legality check again.
        """

        original = self.get(word_id)
        target = Direction.coerce(direction) if direction is not None else original.direction
        if target is None:
            raise IllegalPlacementError(
                PlacementRejection.INVALID_DIRECTION, f"Unknown direction {direction!r}"
            )

        saved = {(r, c): copy.deepcopy(self.grid.cells[r][c]) for r, c in original.cells}
        self.remove_word(word_id)
        try:
            moved = make_word(original.text, original.clue, target, row, col, word_id=original.id)
            return self._commit(moved)
        except IllegalPlacementError as exc:
            for (r, c), cell in saved.items():
                self.grid.cells[r][c] = cell
            self.words[original.id] = original
            LOGGER.warning("Move of %s failed, restored at (%s,%s): %s", original.text, original.start_row, original.start_col, exc)
            raise

    def auto_fill(self, entries: Iterable[Tuple[str, str]]) -> AutoPlaceResult:
        """Place ``(text, clue)`` pairs with the greedy batch placer."""

        candidates = [make_word(text, clue) for text, clue in entries]
        result = self.engine.auto_place(self.grid, candidates, next_number=self._next_number)
        for word in result.placed:
            self.words[word.id] = word
            if word.number is not None and word.number >= self._next_number:
                self._next_number = word.number + 1
        return result

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get(self, word_id: str) -> Word:
        try:
            return self.words[word_id]
        except KeyError:
            raise UnknownWordError(f"No word with id {word_id!r}") from None

    def words_by_direction(self) -> Dict[Direction, List[Word]]:
        grouped: Dict[Direction, List[Word]] = {Direction.HORIZONTAL: [], Direction.VERTICAL: []}
        for word in sorted(self.words.values(), key=lambda item: (item.number or 0, item.id)):
            grouped[word.direction].append(word)
        return grouped

    def statistics(self) -> Dict[str, Any]:
        return words_statistics(self.words.values())

    def __len__(self) -> int:
        return len(self.words)
