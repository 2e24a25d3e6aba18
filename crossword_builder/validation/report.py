"""Validation findings and the report returned by both validators."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class FindingCode(str, Enum):
    """Stable identifiers for validation findings; messages are free text."""

    CRITICAL = "critical"

    # Word structure
    NOT_A_STRING = "not_a_string"
    EMPTY_WORD = "empty_word"
    WORD_TOO_SHORT = "word_too_short"
    WORD_TOO_LONG = "word_too_long"
    INVALID_CHARACTERS = "invalid_characters"
    DOUBLE_SPACE = "double_space"
    EDGE_SEPARATOR = "edge_separator"
    VERY_LONG_WORD = "very_long_word"
    LOW_VARIETY = "low_variety"
    REPEATED_LETTERS = "repeated_letters"
    MIXED_ALPHABETS = "mixed_alphabets"
    UNKNOWN_ALPHABET = "unknown_alphabet"
    FEW_VOWELS = "few_vowels"
    VERY_DIFFICULT = "very_difficult"

    # Word context
    DUPLICATE_WORD = "duplicate_word"
    ANAGRAM = "anagram"
    SHARED_ROOT = "shared_root"
    ABBREVIATION = "abbreviation"
    AMBIGUOUS_WORD = "ambiguous_word"
    DIFFICULTY_TARGET = "difficulty_target"

    # Clue
    CLUE_NOT_STRING = "clue_not_string"
    CLUE_EMPTY = "clue_empty"
    CLUE_TOO_SHORT = "clue_too_short"
    CLUE_TOO_LONG = "clue_too_long"
    ANSWER_IN_CLUE = "answer_in_clue"
    CLUE_CONTAINS_PART = "clue_contains_part"
    CLUE_TOO_OBVIOUS = "clue_too_obvious"
    CLUE_TOO_VAGUE = "clue_too_vague"
    CLUE_GRAMMAR = "clue_grammar"
    LOW_RELEVANCE = "low_relevance"
    DIFFICULTY_MISMATCH = "difficulty_mismatch"

    # Grid structure
    INVALID_GRID = "invalid_grid"
    NOT_RECTANGULAR = "not_rectangular"
    MALFORMED_CELL = "malformed_cell"
    GRID_TOO_SMALL = "grid_too_small"
    GRID_TOO_LARGE = "grid_too_large"
    ASPECT_RATIO = "aspect_ratio"
    LARGE_AREA = "large_area"

    # Word collection
    MALFORMED_WORD = "malformed_word"
    TOO_FEW_WORDS = "too_few_words"
    TOO_MANY_WORDS = "too_many_words"
    DUPLICATE_NUMBER = "duplicate_number"

    # Placement and integrity
    WORD_OUT_OF_BOUNDS = "word_out_of_bounds"
    WORD_ON_BLOCKED = "word_on_blocked"
    LETTER_MISMATCH = "letter_mismatch"
    MISSING_REFERENCE = "missing_reference"
    ISOLATED_WORD = "isolated_word"
    FEW_INTERSECTIONS = "few_intersections"
    NUMBER_MISMATCH = "number_mismatch"
    ORPHAN_NUMBER = "orphan_number"
    UNKNOWN_REFERENCE = "unknown_reference"
    UNREFERENCED_LETTER = "unreferenced_letter"
    DISCONNECTED = "disconnected"
    LOW_DENSITY = "low_density"
    HIGH_DENSITY = "high_density"
    TOO_MANY_BLOCKED = "too_many_blocked"

    # Advisory
    ADVICE = "advice"


@dataclass(frozen=True)
class Finding:
    code: FindingCode
    message: str
    position: Optional[Tuple[int, int]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.position is not None:
            data["position"] = list(self.position)
        return data


def clamp_score(value: float) -> int:
    return max(0, min(100, int(round(value))))


@dataclass
class ValidationReport:
    """Errors make a subject invalid, warnings and suggestions do not.

    Validators freeze a report before returning it: cached reports are
    shared between callers, so their findings become tuples and further
    ``error``/``warn``/``suggest`` calls raise.
    """

    errors: List[Finding] = field(default_factory=list)
    warnings: List[Finding] = field(default_factory=list)
    suggestions: List[Finding] = field(default_factory=list)
    score: int = 0
    details: Dict[str, Any] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)
    frozen: bool = field(default=False, repr=False, compare=False)

    @property
    def valid(self) -> bool:
        return not self.errors

    def _ensure_open(self) -> None:
        if self.frozen:
            raise ValueError("Cannot add findings to a frozen report")

    def error(self, code: FindingCode, message: str, position: Optional[Tuple[int, int]] = None) -> None:
        self._ensure_open()
        self.errors.append(Finding(code, message, position))

    def warn(self, code: FindingCode, message: str, position: Optional[Tuple[int, int]] = None) -> None:
        self._ensure_open()
        self.warnings.append(Finding(code, message, position))

    def suggest(self, message: str, code: FindingCode = FindingCode.ADVICE) -> None:
        self._ensure_open()
        self.suggestions.append(Finding(code, message))

    def freeze(self) -> "ValidationReport":
        self.errors = tuple(self.errors)
        self.warnings = tuple(self.warnings)
        self.suggestions = tuple(self.suggestions)
        self.frozen = True
        return self

    def codes(self) -> List[FindingCode]:
        return [finding.code for finding in (*self.errors, *self.warnings, *self.suggestions)]

    def has(self, code: FindingCode) -> bool:
        return code in self.codes()

    @classmethod
    def critical(cls, exc: BaseException) -> "ValidationReport":
        report = cls()
        report.error(FindingCode.CRITICAL, f"Validation failed: {exc}")
        report.score = 0
        return report

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "score": self.score,
            "errors": [finding.to_dict() for finding in self.errors],
            "warnings": [finding.to_dict() for finding in self.warnings],
            "suggestions": [finding.to_dict() for finding in self.suggestions],
            "details": self.details,
            "metadata": self.metadata,
        }
