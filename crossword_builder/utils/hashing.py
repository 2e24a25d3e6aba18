"""Identifier and content hash helpers.

Validation reports are cached by content: two grids with the same letters,
blocked flags, numbers and word references hash to the same key regardless
of object identity.
"""

from __future__ import annotations

import hashlib
import itertools
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Iterable, Sequence

if TYPE_CHECKING:
    from ..core.models import Cell, Word

_WORD_COUNTER = itertools.count(1)


def generate_word_id() -> str:
    """Return a process-unique word id such as ``word_3_20240101T120000_1a2b3c4d``."""

    ts = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
    short_uuid = uuid.uuid4().hex[:8]
    return f"word_{next(_WORD_COUNTER)}_{ts}_{short_uuid}"


def _digest(payload: str) -> str:
    return hashlib.md5(payload.encode("utf-8")).hexdigest()


def grid_hash(rows: Sequence[Sequence[Cell]]) -> str:
    """Hash letters, blocked flags, numbers and word references row-major."""

    parts = []
    for row in rows:
        for cell in row:
            parts.append(
                "{letter}|{blocked}|{number}|{ids}".format(
                    letter=cell.letter or "",
                    blocked="B" if cell.blocked else "",
                    number=cell.number if cell.number is not None else "",
                    ids=",".join(cell.word_ids),
                )
            )
        parts.append("/")
    return _digest(";".join(parts))


def words_hash(words: Iterable[Word]) -> str:
    """Hash the word collection independently of its iteration order."""

    parts = []
    for word in sorted(words, key=lambda item: item.id):
        direction = getattr(word.direction, "value", word.direction)
        parts.append(
            "|".join(
                str(value)
                for value in (
                    word.id,
                    word.text,
                    direction,
                    word.start_row,
                    word.start_col,
                    word.number if word.number is not None else "",
                    word.clue or "",
                    f"{word.difficulty:.4f}",
                )
            )
        )
    return _digest(";".join(parts))


def cache_key(*parts: str) -> str:
    return "_".join(parts)


__all__ = ["cache_key", "generate_word_id", "grid_hash", "words_hash"]
