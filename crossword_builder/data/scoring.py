"""Difficulty and intersection scoring shared by the engine and validators."""

from __future__ import annotations

import re
from collections import Counter
from typing import Any, Dict, Iterable, Tuple

from ..core.constants import DifficultyLevel, Direction
from ..core.models import Word
from .lexicon import (
    COMMON_LETTERS,
    CONSONANTS,
    CYRILLIC_LETTERS,
    LATIN_LETTERS,
    RARE_COMBINATIONS,
    RARE_LETTERS,
    UNCOMMON_LETTERS,
)
from .normalization import clean_word

CONSONANT_RUN_RE = re.compile(
    "[" + "".join(sorted(CONSONANTS)) + "]{3,}"
)


def count_rare_letters(word: str) -> int:
    return sum(1 for char in word if char in RARE_LETTERS)


def consonant_runs(word: str) -> int:
    """Number of maximal runs of three or more consonants."""

    return len(CONSONANT_RUN_RE.findall(word))


def rare_combinations(word: str) -> int:
    return sum(1 for combo in RARE_COMBINATIONS if combo in word)


def word_difficulty(text: str) -> float:
    """Score how hard ``text`` is to solve on a 0..1 scale.

    Length contributes up to 0.4, the share of rare letters up to 0.3, and
    each consonant cluster or rare letter pair adds another 0.1.
    """

    word = clean_word(text)
    if not word:
        return 0.0

    length = len(word)
    score = min(length / 15, 0.4)
    score += count_rare_letters(word) / length * 0.3
    score += consonant_runs(word) * 0.1
    score += rare_combinations(word) * 0.1
    return min(score, 1.0)


def difficulty_level(score: float) -> DifficultyLevel:
    if score <= 0.3:
        return DifficultyLevel.EASY
    if score <= 0.7:
        return DifficultyLevel.MEDIUM
    return DifficultyLevel.HARD


def word_rarity(text: str) -> int:
    """Ordering key for word lists: uncommon letters raise it, common lower it."""

    word = clean_word(text)
    score = 0
    for char in word:
        if char in UNCOMMON_LETTERS:
            score += 2
        elif char not in COMMON_LETTERS:
            score += 1
    return score


def intersection_quality(new_index: int, new_length: int, existing_index: int, existing_length: int, letter: str) -> float:
    """Prefer crossings near the middle of both words and on rare letters."""

    longest = max(new_length, existing_length)
    if longest <= 0:
        return 0.0
    centre_distance = (
        abs(new_index - new_length / 2) + abs(existing_index - existing_length / 2)
    ) / 2
    quality = 0.5 + (1 - centre_distance / longest) * 0.3
    if letter in RARE_LETTERS:
        quality += 0.2
    return min(quality, 1.0)


def placement_key(text: str) -> Tuple[int, int, str]:
    """Sort key for batch placement: longer first, then rarer, then alphabetical."""

    word = clean_word(text)
    return (-len(word), -word_rarity(word), word)


def average_difficulty(texts: Iterable[str]) -> float:
    scores = [word_difficulty(text) for text in texts]
    if not scores:
        return 0.0
    return sum(scores) / len(scores)


def words_statistics(words: Iterable[Word]) -> Dict[str, Any]:
    """Summary of a word collection: directions, lengths, languages and letters."""

    items = list(words)
    texts = [clean_word(word.text) for word in items]
    lengths = [len(text) for text in texts]
    horizontal = sum(1 for word in items if Direction.coerce(word.direction) is Direction.HORIZONTAL)

    languages = {"english": 0, "ukrainian": 0, "mixed": 0}
    for text in texts:
        latin = any(char in LATIN_LETTERS for char in text)
        cyrillic = any(char in CYRILLIC_LETTERS for char in text)
        if latin and cyrillic:
            languages["mixed"] += 1
        elif cyrillic:
            languages["ukrainian"] += 1
        elif latin:
            languages["english"] += 1

    letters = Counter(char for text in texts for char in text)
    return {
        "total": len(items),
        "horizontal": horizontal,
        "vertical": len(items) - horizontal,
        "total_letters": sum(lengths),
        "average_length": sum(lengths) / len(lengths) if lengths else 0.0,
        "min_length": min(lengths, default=0),
        "max_length": max(lengths, default=0),
        "average_difficulty": average_difficulty(texts),
        "average_rarity": sum(word_rarity(text) for text in texts) / len(texts) if texts else 0.0,
        "languages": languages,
        "letter_frequency": dict(letters.most_common()),
    }


__all__ = [
    "average_difficulty",
    "consonant_runs",
    "count_rare_letters",
    "difficulty_level",
    "intersection_quality",
    "placement_key",
    "rare_combinations",
    "word_difficulty",
    "word_rarity",
    "words_statistics",
]
