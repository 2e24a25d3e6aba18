"""Quality checks for a single answer and its clue.

Structural checks (type, length, alphabet) decide validity. Everything
else is heuristic: obviousness of the clue, semantic overlap, difficulty
balance. Those only add warnings and suggestions, and each is callable on
its own so it can be tuned and tested separately.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from ..core.constants import MAX_WORD_LENGTH, MIN_WORD_LENGTH, DifficultyLevel
from ..data.lexicon import (
    ABBREVIATIONS,
    AMBIGUOUS_WORDS,
    CLUE_CATEGORY_KEYWORDS,
    CLUE_TYPE_MARKERS,
    COMMON_LETTERS,
    COMMON_WORDS,
    CONSONANTS,
    CYRILLIC_LETTERS,
    HARD_TO_PRONOUNCE,
    LATIN_LETTERS,
    THEME_WORDS,
    VOWELS,
    WORD_CATEGORIES,
)
from ..data.normalization import clean_word, normalize_answer
from ..data.scoring import difficulty_level, word_difficulty
from ..utils.cache import LRUCache
from ..utils.logger import get_logger
from .report import FindingCode, ValidationReport, clamp_score


LOGGER = get_logger(__name__)

SEPARATORS = " -'"
REPEAT_RE = re.compile(r"(.)\1{2,}")
SPACE_BEFORE_PUNCT_RE = re.compile(r"\s[.!?,:;]")
DOUBLE_SPACE_RE = re.compile(r"\s{2,}")
BRACKETS_RE = re.compile(r"[()\[\]{}]")

DIFFICULTY_RANGES: Dict[DifficultyLevel, Tuple[float, float]] = {
    DifficultyLevel.EASY: (0.0, 0.3),
    DifficultyLevel.MEDIUM: (0.3, 0.7),
    DifficultyLevel.HARD: (0.7, 1.0),
}


@dataclass
class WordValidatorConfig:
    """Thresholds for word and clue checks."""

    min_word_length: int = MIN_WORD_LENGTH
    max_word_length: int = MAX_WORD_LENGTH
    long_word_length: int = 15
    min_clue_length: int = 5
    max_clue_length: int = 200
    max_repeating_chars: int = 3
    min_unique_ratio: float = 0.4
    obvious_clue_threshold: float = 0.8
    vague_clue_threshold: float = 0.1
    low_relevance_threshold: float = 0.3
    difficulty_gap: float = 0.4
    grammar_check: bool = True
    cache_size: int = 256


@dataclass
class WordContext:
    """What the word is checked against: the rest of the puzzle and its goals."""

    existing_words: Sequence[Any] = field(default_factory=list)
    theme: Optional[str] = None
    difficulty: Optional[Union[DifficultyLevel, str]] = None

    def existing_texts(self) -> List[str]:
        return [clean_word(getattr(item, "text", item) or "") for item in self.existing_words]

    def fingerprint(self) -> Tuple[Any, ...]:
        difficulty = getattr(self.difficulty, "value", self.difficulty)
        return (tuple(sorted(self.existing_texts())), self.theme or "", difficulty or "")


def word_parts(word: str, min_length: int = 3) -> List[str]:
    """All substrings of ``word`` with at least ``min_length`` characters."""

    parts = []
    for start in range(len(word) - min_length + 1):
        for end in range(start + min_length, len(word) + 1):
            parts.append(word[start:end])
    return parts


def are_anagrams(first: str, second: str) -> bool:
    return len(first) == len(second) and sorted(first) == sorted(second)


def share_root(first: str, second: str) -> bool:
    if len(first) < 4 or len(second) < 4:
        return False
    return first[: min(4, len(first) - 2)] == second[: min(4, len(second) - 2)]


def word_category(word: str) -> str:
    lowered = word.lower()
    for category, members in WORD_CATEGORIES.items():
        if lowered in members:
            return category
    return "general"


def clue_category(clue: str) -> str:
    lowered = clue.lower()
    for category, keywords in CLUE_CATEGORY_KEYWORDS.items():
        if any(keyword in lowered for keyword in keywords):
            return category
    return "general"


def clue_type(clue: str) -> str:
    lowered = clue.lower()
    for kind, markers in CLUE_TYPE_MARKERS.items():
        if any(marker in lowered for marker in markers):
            return kind
    if "?" in lowered and "(" in lowered and ")" in lowered:
        return "cryptic"
    return "general"


def clue_complexity(clue: str) -> float:
    words = clue.split()
    if not words:
        return 0.0
    score = min(len(clue) / 100, 0.3)
    score += sum(1 for item in words if len(item) > 8) / len(words) * 0.4
    if BRACKETS_RE.search(clue):
        score += 0.2
    if "?" in clue or "!" in clue:
        score += 0.1
    return min(score, 1.0)


def theme_relevance(word: str, theme: str) -> float:
    theme_words = THEME_WORDS.get(theme.lower(), [])
    if not theme_words:
        return 0.0
    lowered = word.lower()
    if lowered in theme_words:
        return 1.0
    partial = sum(1 for item in theme_words if item in lowered or lowered in item)
    return min(partial / len(theme_words), 1.0)


class WordQualityValidator:
    """Validates answers and clues, caching reports by content."""

    def __init__(self, config: Optional[WordValidatorConfig] = None) -> None:
        self.config = config or WordValidatorConfig()
        self._cache: LRUCache[ValidationReport] = LRUCache(self.config.cache_size)
        self._validations = 0

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------
    def validate(
        self,
        text: Any,
        clue: Any = "",
        context: Optional[WordContext] = None,
    ) -> ValidationReport:
        """Validate ``text`` and, when given, its ``clue``. Never raises."""

        self._validations += 1
        context = context or WordContext()
        try:
            key = (repr(text), repr(clue), context.fingerprint())
        except Exception:  # noqa: BLE001 - unhashable context still gets a report
            LOGGER.debug("Word report for %r is not cacheable", text)
            key = None

        if key is not None:
            cached = self._cache.get(key)
            if cached is not None:
                return cached

        report = ValidationReport()
        try:
            self._run_checks(text, clue, context, report)
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("Word validation failed for %r", text)
            report = ValidationReport.critical(exc)

        report.freeze()
        if key is not None:
            self._cache.put(key, report)
        return report

    def validate_batch(self, entries: Iterable[Union[Mapping[str, Any], Tuple[Any, ...]]]) -> List[ValidationReport]:
        """Validate ``{"word", "clue", "context"}`` mappings or ``(word, clue)`` pairs."""

        reports = []
        for entry in entries:
            if isinstance(entry, Mapping):
                reports.append(self.validate(entry.get("word"), entry.get("clue", ""), entry.get("context")))
            else:
                reports.append(self.validate(*entry))
        LOGGER.info("Validated batch of %s words", len(reports))
        return reports

    def quick_validate(self, text: Any, clue: Any = "") -> bool:
        """Structural checks only; the clue is accepted for call-site symmetry."""

        if not isinstance(text, str) or not text.strip():
            return False
        normalized = normalize_answer(text)
        letters = sum(1 for char in normalized if char.isalpha())
        if not self.config.min_word_length <= letters <= self.config.max_word_length:
            return False
        return all(char.isalpha() or char in SEPARATORS for char in normalized)

    def clear_cache(self) -> None:
        self._cache.clear()

    def stats(self) -> Dict[str, Any]:
        return {
            "total_validations": self._validations,
            "cache_hits": self._cache.hits,
            "cache_size": len(self._cache),
            "hit_rate": self._cache.hit_rate,
        }

    # ------------------------------------------------------------------
    # Structural checks
    # ------------------------------------------------------------------
    def check_structure(self, text: Any, report: ValidationReport) -> Optional[str]:
        """Record structural findings; return the letters, or ``None`` if invalid."""

        if not isinstance(text, str):
            report.error(FindingCode.NOT_A_STRING, f"Word must be a string, got {type(text).__name__}")
            return None
        if not text.strip():
            report.error(FindingCode.EMPTY_WORD, "Word is empty")
            return None

        normalized = normalize_answer(text)
        report.metadata["original_word"] = text
        report.metadata["normalized_word"] = normalized

        if "  " in normalized:
            report.warn(FindingCode.DOUBLE_SPACE, "Word contains doubled spaces")
        if normalized[0] in SEPARATORS or normalized[-1] in SEPARATORS:
            report.warn(FindingCode.EDGE_SEPARATOR, "Word starts or ends with a separator")

        invalid = sorted({char for char in normalized if not (char.isalpha() or char in SEPARATORS)})
        if invalid:
            report.error(FindingCode.INVALID_CHARACTERS, f"Word contains invalid characters: {''.join(invalid)}")

        letters = clean_word(normalized)
        report.metadata["letter_count"] = len(letters)
        if len(letters) < self.config.min_word_length:
            report.error(
                FindingCode.WORD_TOO_SHORT,
                f"Word has {len(letters)} letters (minimum {self.config.min_word_length})",
            )
        elif len(letters) > self.config.max_word_length:
            report.error(
                FindingCode.WORD_TOO_LONG,
                f"Word has {len(letters)} letters (maximum {self.config.max_word_length})",
            )
        elif len(letters) > self.config.long_word_length:
            report.warn(FindingCode.VERY_LONG_WORD, "Long word may be hard to place")

        if report.errors:
            return None

        unique_ratio = len(set(letters)) / len(letters)
        report.metadata["unique_ratio"] = unique_ratio
        if unique_ratio < self.config.min_unique_ratio:
            report.warn(FindingCode.LOW_VARIETY, f"Only {unique_ratio:.0%} of letters are distinct")

        runs = [match.group(0) for match in REPEAT_RE.finditer(letters)]
        longest = max((len(run) for run in runs), default=0)
        if longest > self.config.max_repeating_chars:
            report.warn(FindingCode.REPEATED_LETTERS, f"{longest} identical letters in a row")

        has_latin = any(char in LATIN_LETTERS for char in letters)
        has_cyrillic = any(char in CYRILLIC_LETTERS for char in letters)
        if has_latin and has_cyrillic:
            language = "mixed"
            report.warn(FindingCode.MIXED_ALPHABETS, "Word mixes Latin and Cyrillic letters")
        elif has_latin:
            language = "english"
        elif has_cyrillic:
            language = "ukrainian"
        else:
            language = "unknown"
            report.warn(FindingCode.UNKNOWN_ALPHABET, "Word uses an unsupported alphabet")
        report.metadata["primary_language"] = language
        return letters

    # ------------------------------------------------------------------
    # Advisory checks
    # ------------------------------------------------------------------
    def clue_obviousness(self, word: str, clue: str) -> float:
        """How much of the answer the clue gives away, 0..1."""

        answer = clean_word(word)
        upper_clue = clue.upper()
        score = 0.0
        if answer and answer in upper_clue:
            score += 0.8
        parts = word_parts(answer)
        if parts:
            found = sum(1 for part in parts if part in upper_clue)
            score += found / len(parts) * 0.6
        score += max(0.0, 1 - len(clue) / 50) * 0.3
        return min(score, 1.0)

    def semantic_relevance(self, word: str, clue: str) -> float:
        """Keyword and category overlap between answer and clue, 0..1."""

        lowered = clean_word(word).lower()
        lowered_clue = clue.lower()
        keywords = [lowered[:3], lowered[-3:]] if lowered else []
        matches = sum(1 for keyword in keywords if keyword and keyword in lowered_clue)
        relevance = matches * 0.3
        if word_category(lowered) == clue_category(lowered_clue):
            relevance += 0.5
        return min(relevance, 1.0)

    def check_clue_grammar(self, clue: str) -> List[str]:
        text = clue.strip()
        if not text:
            return []
        issues = []
        if not text.endswith("?") and not text[0].isupper():
            issues.append("does not start with a capital letter")
        if text[-1] not in ".!?…":
            issues.append("missing terminal punctuation")
        if DOUBLE_SPACE_RE.search(text):
            issues.append("doubled spaces")
        if SPACE_BEFORE_PUNCT_RE.search(text):
            issues.append("space before punctuation")
        return issues

    # ------------------------------------------------------------------
    # Check pipeline
    # ------------------------------------------------------------------
    def _run_checks(self, text: Any, clue: Any, context: WordContext, report: ValidationReport) -> None:
        letters = self.check_structure(text, report)
        if letters is None:
            report.score = clamp_score(self._score(report))
            return

        self._check_phonetics(letters, report)
        difficulty = self._check_difficulty(letters, report)
        self._check_uniqueness(letters, context, report)
        self._check_context(letters, difficulty, context, report)

        clue_text = None
        if clue is not None and clue != "":
            clue_text = self._check_clue(letters, report.metadata["normalized_word"], clue, report)

        self._check_meaning(letters, clue_text, report)
        self._check_balance(difficulty, clue_text, report)
        report.details["metrics"] = self._metrics(letters, clue_text)
        self._recommend(report)
        report.score = clamp_score(self._score(report))

    def _check_phonetics(self, letters: str, report: ValidationReport) -> None:
        vowels = sum(1 for char in letters if char in VOWELS)
        consonants = sum(1 for char in letters if char in CONSONANTS)
        total = vowels + consonants
        ratio = vowels / total if total else 0.0
        report.metadata["phonetics"] = {"vowels": vowels, "consonants": consonants, "vowel_ratio": ratio}
        if total and ratio < 0.2:
            report.warn(FindingCode.FEW_VOWELS, "Word is mostly consonants and may be hard to enter")
        elif ratio > 0.6:
            report.suggest("Vowel-rich word, easy to remember")
        is_palindrome = letters == letters[::-1]
        report.metadata["is_palindrome"] = is_palindrome
        if is_palindrome and len(letters) > 3:
            report.suggest("Palindrome, could be a nice feature of the puzzle")

    def _check_difficulty(self, letters: str, report: ValidationReport) -> float:
        difficulty = word_difficulty(letters)
        report.metadata["difficulty"] = difficulty
        report.metadata["difficulty_level"] = difficulty_level(difficulty).value
        if difficulty > 0.8:
            report.warn(FindingCode.VERY_DIFFICULT, "Word may be too hard for most solvers")
        elif difficulty < 0.2:
            report.suggest("Simple word, suitable for beginners")
        return difficulty

    def _check_uniqueness(self, letters: str, context: WordContext, report: ValidationReport) -> None:
        existing = context.existing_texts()
        if letters in existing:
            report.error(FindingCode.DUPLICATE_WORD, f"{letters} is already in the puzzle")

        anagrams = sorted({other for other in existing if other != letters and are_anagrams(letters, other)})
        roots = sorted({other for other in existing if other != letters and share_root(letters, other)})
        if anagrams:
            report.warn(FindingCode.ANAGRAM, f"Anagram of existing words: {', '.join(anagrams)}")
        if roots:
            report.warn(FindingCode.SHARED_ROOT, f"Shares a root with: {', '.join(roots)}")
        report.metadata["similar_words"] = sorted(set(anagrams) | set(roots))

        if letters in COMMON_WORDS:
            report.suggest("Common word, solvers will know it")
        if letters in ABBREVIATIONS:
            report.warn(FindingCode.ABBREVIATION, "Word is an abbreviation, make sure that is intended")

    def _check_context(self, letters: str, difficulty: float, context: WordContext, report: ValidationReport) -> None:
        if context.theme:
            relevance = theme_relevance(letters, context.theme)
            report.metadata["theme_relevance"] = relevance
            if relevance < 0.3:
                report.suggest(f"Weak link to the theme {context.theme!r}")
            elif relevance > 0.8:
                report.suggest(f"Fits the theme {context.theme!r} well")

        if context.difficulty:
            try:
                target = DifficultyLevel(str(getattr(context.difficulty, "value", context.difficulty)).upper())
            except ValueError:
                LOGGER.debug("Ignoring unknown difficulty target %r", context.difficulty)
                return
            low, high = DIFFICULTY_RANGES[target]
            if not low <= difficulty <= high:
                report.warn(
                    FindingCode.DIFFICULTY_TARGET,
                    f"Difficulty {difficulty:.2f} is outside the {target.value} range",
                )

    def _check_clue(self, letters: str, normalized: str, clue: Any, report: ValidationReport) -> Optional[str]:
        if not isinstance(clue, str):
            report.error(FindingCode.CLUE_NOT_STRING, f"Clue must be a string, got {type(clue).__name__}")
            return None
        text = clue.strip()
        report.metadata["normalized_clue"] = text
        if not text:
            report.warn(FindingCode.CLUE_EMPTY, "Clue is empty")
            return None

        report.metadata["clue_length"] = len(text)
        if len(text) < self.config.min_clue_length:
            report.warn(FindingCode.CLUE_TOO_SHORT, f"Clue has {len(text)} characters")
        elif len(text) > self.config.max_clue_length:
            report.warn(FindingCode.CLUE_TOO_LONG, f"Clue has {len(text)} characters")
        if 10 <= len(text) <= 50:
            report.suggest("Clue length is comfortable")
        elif len(text) > 100:
            report.suggest("Consider shortening the clue")

        obviousness = self.clue_obviousness(letters, text)
        report.metadata["clue_obviousness"] = obviousness
        if obviousness > self.config.obvious_clue_threshold:
            report.warn(FindingCode.CLUE_TOO_OBVIOUS, "Clue may be too obvious")
        elif obviousness < self.config.vague_clue_threshold:
            report.warn(FindingCode.CLUE_TOO_VAGUE, "Clue may be too vague")

        upper_clue = text.upper()
        if letters in upper_clue or normalized in upper_clue:
            report.error(FindingCode.ANSWER_IN_CLUE, "Clue contains the answer")
        else:
            parts = sorted({part for part in word_parts(letters, 4) if part in upper_clue})
            if parts:
                report.warn(FindingCode.CLUE_CONTAINS_PART, f"Clue contains parts of the answer: {', '.join(parts)}")

        report.metadata["clue_type"] = clue_type(text)

        if self.config.grammar_check:
            issues = self.check_clue_grammar(text)
            report.metadata["grammar_issues"] = issues
            if issues:
                report.warn(FindingCode.CLUE_GRAMMAR, f"Clue grammar: {', '.join(issues)}")
        return text

    def _check_meaning(self, letters: str, clue: Optional[str], report: ValidationReport) -> None:
        if clue:
            relevance = self.semantic_relevance(letters, clue)
            report.metadata["semantic_relevance"] = relevance
            if relevance < self.config.low_relevance_threshold:
                report.warn(FindingCode.LOW_RELEVANCE, "Weak link between answer and clue")
            elif relevance > 0.8:
                report.suggest("Strong link between answer and clue")

        ambiguous = letters in AMBIGUOUS_WORDS
        report.metadata["is_ambiguous"] = ambiguous
        if ambiguous and not clue:
            report.warn(FindingCode.AMBIGUOUS_WORD, "Word has several meanings, add a clue that picks one")

    def _check_balance(self, difficulty: float, clue: Optional[str], report: ValidationReport) -> None:
        complexity = clue_complexity(clue) if clue else 0.0
        overall = (difficulty + complexity) / 2
        report.metadata["clue_complexity"] = complexity
        report.metadata["overall_difficulty"] = overall
        if clue and abs(difficulty - complexity) > self.config.difficulty_gap:
            report.warn(FindingCode.DIFFICULTY_MISMATCH, "Answer and clue difficulty differ a lot")

    def _metrics(self, letters: str, clue: Optional[str]) -> Dict[str, float]:
        length = len(letters)
        unique = len(set(letters))

        readability = 0.5
        if length <= 6:
            readability += 0.2
        elif length > 12:
            readability -= 0.2
        if clue:
            words = clue.split()
            average = sum(len(item) for item in words) / len(words)
            if average <= 5:
                readability += 0.2
            elif average > 8:
                readability -= 0.2

        memorability = 0.5
        vowel_ratio = sum(1 for char in letters if char in VOWELS) / length
        if 0.3 <= vowel_ratio <= 0.5:
            memorability += 0.3
        repeated = sum(1 for char in set(letters) if letters.count(char) > 1)
        if 0 < repeated <= 2:
            memorability += 0.2

        accessibility = 0.5
        if not any(combo in letters for combo in HARD_TO_PRONOUNCE):
            accessibility += 0.3
        if letters in COMMON_WORDS:
            accessibility += 0.2

        common = sum(1 for char in letters if char in COMMON_LETTERS)
        friendliness = 0.5 + unique / length * 0.4 + common / length * 0.3

        return {
            "word_length": length,
            "clue_length": len(clue) if clue else 0,
            "unique_letters": unique,
            "readability": max(0.0, min(1.0, readability)),
            "memorability": max(0.0, min(1.0, memorability)),
            "accessibility": max(0.0, min(1.0, accessibility)),
            "crossword_friendliness": max(0.0, min(1.0, friendliness)),
            "intersection_potential": min(unique / 8, 1.0),
        }

    @staticmethod
    def _recommend(report: ValidationReport) -> None:
        if report.metadata.get("unique_ratio", 1.0) < 0.5:
            report.suggest("Words with more distinct letters cross more easily")
        kind = report.metadata.get("clue_type")
        if kind == "definition":
            report.suggest("Definition clue, the classic style")
        elif kind == "synonym":
            report.suggest("Synonym clue, quick to solve")
        elif kind == "cryptic":
            report.suggest("Cryptic clue, for experienced solvers")
        level = report.metadata.get("difficulty_level")
        if level == DifficultyLevel.EASY.value:
            report.suggest("Suits children's or learning puzzles")
        elif level == DifficultyLevel.HARD.value:
            report.suggest("Suits tournament puzzles")

    @staticmethod
    def _score(report: ValidationReport) -> float:
        score = 100.0
        score -= 30 * len(report.errors)
        score -= 10 * len(report.warnings)
        difficulty = report.metadata.get("difficulty")
        if difficulty is not None and 0.3 <= difficulty <= 0.7:
            score += 10
        if report.metadata.get("unique_ratio", 0.0) > 0.6:
            score += 5
        if report.metadata.get("semantic_relevance", 0.0) > 0.6:
            score += 10
        return score
