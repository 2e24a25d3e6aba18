"""Shared helpers for answer and clue normalization."""

from __future__ import annotations

import re

PUNCTUATION_FOLDS = {
    "‘": "'",
    "’": "'",
    "`": "'",
    "ʼ": "'",
    "–": "-",
    "—": "-",
}

WHITESPACE_RE = re.compile(r"\s+")


def fold_punctuation(text: str) -> str:
    """Map typographic apostrophes and dashes onto their ASCII forms."""

    return "".join(PUNCTUATION_FOLDS.get(char, char) for char in text)


def normalize_answer(text: str) -> str:
    """Return the trimmed, uppercased answer with separators preserved."""

    if not text:
        return ""
    return fold_punctuation(text.strip()).upper()


def clean_word(text: str) -> str:
    """Return the uppercase letters of ``text``, the form written to the grid."""

    if not text:
        return ""
    return "".join(char for char in text if char.isalpha()).upper()


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_RE.sub(" ", text).strip()


__all__ = [
    "PUNCTUATION_FOLDS",
    "clean_word",
    "collapse_whitespace",
    "fold_punctuation",
    "normalize_answer",
]
