"""Whole-puzzle validation: structure, placement, connectivity and layout quality."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from ..core.constants import MAX_GRID_SIZE, MAX_WORD_LENGTH, MIN_GRID_SIZE, MIN_WORD_LENGTH, ORTHOGONAL_STEPS, Direction, Strictness
from ..core.models import Cell, Word
from ..engine.grid import CrosswordGrid
from ..utils.cache import LRUCache
from ..utils.hashing import cache_key, grid_hash, words_hash
from ..utils.logger import get_logger
from .report import FindingCode, ValidationReport, clamp_score


LOGGER = get_logger(__name__)

Rows = List[List[Cell]]
GridInput = Union[CrosswordGrid, Sequence[Sequence[Cell]]]
WordsInput = Union[Mapping[str, Word], Iterable[Word], None]


@dataclass
class GridValidatorConfig:
    """Rules applied by :class:`GridQualityValidator`."""

    min_grid_size: int = MIN_GRID_SIZE
    max_grid_size: int = MAX_GRID_SIZE
    min_word_length: int = MIN_WORD_LENGTH
    max_word_length: int = MAX_WORD_LENGTH
    min_words: int = 2
    max_words: int = 100
    min_density: float = 0.1
    max_density: float = 0.8
    max_blocked_ratio: float = 0.3
    min_intersections: float = 1.0
    max_isolated_cells: int = 0
    max_aspect_ratio: float = 2.0
    max_area: int = 400
    min_clue_length: int = 5
    strictness: Strictness = Strictness.NORMAL
    cache_size: int = 128


def _as_rows(grid: Any) -> Optional[Rows]:
    if isinstance(grid, CrosswordGrid):
        return grid.cells
    if grid is None or isinstance(grid, (str, bytes)):
        return None
    try:
        return [list(row) for row in grid]
    except TypeError:
        return None


def _as_words(words: WordsInput) -> List[Any]:
    if words is None:
        return []
    if isinstance(words, Mapping):
        return list(words.values())
    return list(words)


def _is_cell(cell: Any) -> bool:
    return (
        isinstance(cell, Cell)
        and isinstance(cell.letter, str)
        and isinstance(cell.word_ids, list)
        and isinstance(cell.directions, list)
        and isinstance(cell.blocked, bool)
    )


def _is_word(word: Any) -> bool:
    return (
        isinstance(word, Word)
        and isinstance(word.text, str)
        and isinstance(word.clue, str)
        and Direction.coerce(word.direction) is not None
        and isinstance(word.start_row, int)
        and isinstance(word.start_col, int)
    )


def _word_cells(word: Word) -> List[Tuple[int, int]]:
    dr, dc = Direction.coerce(word.direction).step
    return [(word.start_row + dr * i, word.start_col + dc * i) for i in range(len(word.text))]


def _has_letter(cell: Cell) -> bool:
    return bool(cell.letter) and not cell.blocked


def _number_duplicates(entries: List[Tuple[Tuple[int, int], Direction]]) -> int:
    """Entries beyond one start cell with at most one word per direction."""

    start, _ = Counter(position for position, _ in entries).most_common(1)[0]
    kept = {direction for position, direction in entries if position == start}
    return len(entries) - len(kept)


def connected_components(rows: Rows) -> List[List[Tuple[int, int]]]:
    """Groups of lettered, unblocked cells joined edge to edge."""

    height = len(rows)
    width = len(rows[0]) if rows else 0
    seen = [[False] * width for _ in range(height)]
    components: List[List[Tuple[int, int]]] = []
    for row in range(height):
        for col in range(width):
            if seen[row][col] or not _has_letter(rows[row][col]):
                continue
            component: List[Tuple[int, int]] = []
            stack = [(row, col)]
            seen[row][col] = True
            while stack:
                r, c = stack.pop()
                component.append((r, c))
                for dr, dc in ORTHOGONAL_STEPS:
                    nr, nc = r + dr, c + dc
                    if 0 <= nr < height and 0 <= nc < width and not seen[nr][nc] and _has_letter(rows[nr][nc]):
                        seen[nr][nc] = True
                        stack.append((nr, nc))
            components.append(component)
    return components


def symmetry(rows: Rows) -> Dict[str, float]:
    """Share of blocked flags that match under each mirror."""

    height = len(rows)
    width = len(rows[0]) if rows else 0
    matches = compared = 0
    for row in range(height // 2):
        mirror = height - 1 - row
        for col in range(width):
            compared += 1
            matches += rows[row][col].blocked == rows[mirror][col].blocked
    horizontal = matches / compared if compared else 0.0

    matches = compared = 0
    for col in range(width // 2):
        mirror = width - 1 - col
        for row in range(height):
            compared += 1
            matches += rows[row][col].blocked == rows[row][mirror].blocked
    vertical = matches / compared if compared else 0.0
    return {"horizontal": horizontal, "vertical": vertical}


def quadrant_counts(rows: Rows) -> Dict[str, int]:
    height = len(rows)
    width = len(rows[0]) if rows else 0
    mid_row, mid_col = height // 2, width // 2
    counts = {"top_left": 0, "top_right": 0, "bottom_left": 0, "bottom_right": 0}
    for row in range(height):
        for col in range(width):
            if not _has_letter(rows[row][col]):
                continue
            vertical = "top" if row < mid_row else "bottom"
            horizontal = "left" if col < mid_col else "right"
            counts[f"{vertical}_{horizontal}"] += 1
    return counts


def centre_fill(rows: Rows) -> float:
    height = len(rows)
    width = len(rows[0]) if rows else 0
    cells = filled = 0
    for row in range(int(height * 0.25), int(height * 0.75)):
        for col in range(int(width * 0.25), int(width * 0.75)):
            cells += 1
            filled += _has_letter(rows[row][col])
    return filled / cells if cells else 0.0


class GridQualityValidator:
    """Validates a grid together with its word collection.

    Reports are cached by content, so validating an unchanged puzzle twice
    returns the same report object.
    """

    def __init__(self, config: Optional[GridValidatorConfig] = None) -> None:
        self.config = config or GridValidatorConfig()
        self._cache: LRUCache[ValidationReport] = LRUCache(self.config.cache_size)
        self._validations = 0

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------
    def validate(
        self,
        grid: GridInput,
        words: WordsInput = None,
        strictness: Optional[Union[Strictness, str]] = None,
    ) -> ValidationReport:
        self._validations += 1
        level = self._strictness(strictness)
        try:
            key: Optional[str] = self.cache_key(grid, words, level)
        except Exception:  # noqa: BLE001 - malformed input is reported, not cached
            LOGGER.debug("Grid input is not hashable, skipping cache")
            key = None

        if key is not None:
            cached = self._cache.get(key)
            if cached is not None:
                LOGGER.debug("Grid report cache hit %s", key)
                return cached

        report = ValidationReport()
        try:
            self._run_checks(grid, words, level, report)
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("Grid validation failed")
            report = ValidationReport.critical(exc)

        report.freeze()
        if key is not None:
            self._cache.put(key, report)
        LOGGER.info(
            "Grid validated: valid=%s score=%s errors=%s warnings=%s",
            report.valid,
            report.score,
            len(report.errors),
            len(report.warnings),
        )
        return report

    def cache_key(self, grid: GridInput, words: WordsInput, strictness: Strictness) -> str:
        rows = _as_rows(grid)
        if rows is None:
            raise TypeError(f"Cannot hash grid of type {type(grid).__name__}")
        return cache_key(grid_hash(rows), words_hash(_as_words(words)), strictness.value)

    def quick_validate(self, grid: GridInput, words: WordsInput) -> bool:
        """Size, word count and bounds only."""

        try:
            rows = _as_rows(grid)
            word_list = _as_words(words)
            if not rows or not word_list:
                return False
            height, width = len(rows), len(rows[0])
            cfg = self.config
            if not (cfg.min_grid_size <= height <= cfg.max_grid_size and cfg.min_grid_size <= width <= cfg.max_grid_size):
                return False
            if not cfg.min_words <= len(word_list) <= cfg.max_words:
                return False
            for word in word_list:
                if not _is_word(word):
                    return False
                if any(not (0 <= r < height and 0 <= c < width) for r, c in _word_cells(word)):
                    return False
            return True
        except Exception:  # noqa: BLE001
            LOGGER.exception("Quick grid validation failed")
            return False

    def validate_single_word(self, grid: GridInput, word: Word) -> ValidationReport:
        """Check one word against the grid without touching the cache."""

        report = ValidationReport()
        try:
            if not _is_word(word):
                report.error(FindingCode.MALFORMED_WORD, "Word is malformed")
                return report
            rows = _as_rows(grid) or []
            height = len(rows)
            width = len(rows[0]) if rows else 0
            for index, (r, c) in enumerate(_word_cells(word)):
                if not (0 <= r < height and 0 <= c < width):
                    report.error(FindingCode.WORD_OUT_OF_BOUNDS, f"{word.text} leaves the grid", (r, c))
                    break
                cell = rows[r][c]
                if cell.blocked:
                    report.error(FindingCode.WORD_ON_BLOCKED, f"{word.text} crosses a blocked cell", (r, c))
                if cell.letter and cell.letter != word.text[index]:
                    report.error(FindingCode.LETTER_MISMATCH, f"Letter conflict at ({r},{c})", (r, c))
            report.score = 100 if report.valid else 0
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("Single word validation failed")
            report = ValidationReport.critical(exc)
        return report.freeze()

    def clear_cache(self) -> None:
        self._cache.clear()

    def stats(self) -> Dict[str, Any]:
        return {
            "total_validations": self._validations,
            "cache_hits": self._cache.hits,
            "cache_size": len(self._cache),
            "hit_rate": self._cache.hit_rate,
        }

    def _strictness(self, value: Optional[Union[Strictness, str]]) -> Strictness:
        if value is None:
            return self.config.strictness
        if isinstance(value, Strictness):
            return value
        try:
            return Strictness(str(value).lower())
        except ValueError:
            LOGGER.warning("Unknown strictness %r, using %s", value, self.config.strictness.value)
            return self.config.strictness

    # ------------------------------------------------------------------
    # Check pipeline
    # ------------------------------------------------------------------
    def _run_checks(self, grid: GridInput, words: WordsInput, strictness: Strictness, report: ValidationReport) -> None:
        report.metadata["strictness"] = strictness.value
        rows = _as_rows(grid)
        word_list = _as_words(words)

        well_formed = self._check_structure(rows, report)
        if well_formed:
            self._check_size(rows, strictness, report)
        valid_words = self._check_words(word_list, report)

        if well_formed:
            placed = self._check_placements(rows, valid_words, report)
            self._check_intersections(rows, placed, strictness, report)
            self._check_integrity(rows, valid_words, word_list, report)
            self._check_density(rows, report)
            self._check_connectivity(rows, report)
            self._analyze_quality(rows, valid_words, report)

        report.score = clamp_score(self._score(report))

    def _check_structure(self, rows: Optional[Rows], report: ValidationReport) -> bool:
        if rows is None:
            report.error(FindingCode.INVALID_GRID, "Grid must be a matrix of cells")
            return False
        if not rows or not rows[0]:
            report.error(FindingCode.INVALID_GRID, "Grid is empty")
            return False

        ok = True
        width = len(rows[0])
        for index, row in enumerate(rows):
            if len(row) != width:
                report.error(FindingCode.NOT_RECTANGULAR, f"Row {index} has {len(row)} cells, expected {width}")
                ok = False
        for r, row in enumerate(rows):
            for c, cell in enumerate(row):
                if not _is_cell(cell):
                    report.error(FindingCode.MALFORMED_CELL, f"Cell ({r},{c}) is malformed", (r, c))
                    ok = False
        return ok

    def _check_size(self, rows: Rows, strictness: Strictness, report: ValidationReport) -> None:
        cfg = self.config
        height, width = len(rows), len(rows[0])
        if height < cfg.min_grid_size or width < cfg.min_grid_size:
            report.error(FindingCode.GRID_TOO_SMALL, f"Grid {width}x{height} is below {cfg.min_grid_size}x{cfg.min_grid_size}")
        if height > cfg.max_grid_size or width > cfg.max_grid_size:
            report.error(FindingCode.GRID_TOO_LARGE, f"Grid {width}x{height} exceeds {cfg.max_grid_size}x{cfg.max_grid_size}")

        aspect = max(width, height) / min(width, height)
        report.details["grid_size"] = {"width": width, "height": height, "aspect_ratio": aspect}

        # Relaxed validation treats layout concerns as advice only.
        if aspect > cfg.max_aspect_ratio:
            message = f"Aspect ratio {aspect:.1f}:1 may be awkward to solve"
            if strictness is Strictness.RELAXED:
                report.suggest(message, FindingCode.ASPECT_RATIO)
            else:
                report.warn(FindingCode.ASPECT_RATIO, message)
        if width * height > cfg.max_area:
            message = "Large grid may be hard for beginners"
            if strictness is Strictness.RELAXED:
                report.suggest(message, FindingCode.LARGE_AREA)
            else:
                report.warn(FindingCode.LARGE_AREA, message)

    def _check_words(self, word_list: List[Any], report: ValidationReport) -> List[Word]:
        cfg = self.config
        count = len(word_list)
        if count < cfg.min_words:
            report.warn(FindingCode.TOO_FEW_WORDS, f"Only {count} words (minimum {cfg.min_words})")
        if count > cfg.max_words:
            report.warn(FindingCode.TOO_MANY_WORDS, f"{count} words (recommended at most {cfg.max_words})")

        valid: List[Word] = []
        texts = Counter()
        # An across and a down word starting on the same cell share a number.
        numbered: Dict[int, List[Tuple[Tuple[int, int], Direction]]] = {}
        for index, word in enumerate(word_list):
            if not _is_word(word):
                report.error(FindingCode.MALFORMED_WORD, f"Word {index + 1} is malformed")
                continue
            valid.append(word)
            if len(word.text) < cfg.min_word_length:
                report.error(FindingCode.WORD_TOO_SHORT, f"{word.text!r} is too short")
            if len(word.text) > cfg.max_word_length:
                report.error(FindingCode.WORD_TOO_LONG, f"{word.text!r} is too long")
            texts[word.text] += 1
            if word.number:
                numbered.setdefault(word.number, []).append(
                    ((word.start_row, word.start_col), Direction.coerce(word.direction))
                )
            if len(word.clue.strip()) < cfg.min_clue_length:
                report.warn(FindingCode.CLUE_TOO_SHORT, f"{word.text} has a very short clue")

        duplicate_words = sum(n - 1 for n in texts.values() if n > 1)
        duplicate_numbers = sum(_number_duplicates(entries) for entries in numbered.values())
        if duplicate_words:
            report.error(FindingCode.DUPLICATE_WORD, f"{duplicate_words} repeated words")
        if duplicate_numbers:
            report.warn(FindingCode.DUPLICATE_NUMBER, f"{duplicate_numbers} repeated numbers")
        report.details["words"] = {
            "count": count,
            "duplicates": {"words": duplicate_words, "numbers": duplicate_numbers},
        }
        return valid

    def _check_placements(self, rows: Rows, words: List[Word], report: ValidationReport) -> List[Word]:
        """Return the words whose span lies inside the grid."""

        height, width = len(rows), len(rows[0])
        out_of_bounds = conflicts = 0
        inside: List[Word] = []
        for word in words:
            cells = _word_cells(word)
            if any(not (0 <= r < height and 0 <= c < width) for r, c in cells):
                report.error(FindingCode.WORD_OUT_OF_BOUNDS, f"{word.text} leaves the grid", (word.start_row, word.start_col))
                out_of_bounds += 1
                continue
            inside.append(word)
            missing = 0
            for index, (r, c) in enumerate(cells):
                cell = rows[r][c]
                if cell.blocked:
                    report.error(FindingCode.WORD_ON_BLOCKED, f"{word.text} crosses blocked cell ({r},{c})", (r, c))
                    continue
                if cell.letter and cell.letter != word.text[index]:
                    report.error(
                        FindingCode.LETTER_MISMATCH,
                        f"({r},{c}) holds {cell.letter}, {word.text} expects {word.text[index]}",
                        (r, c),
                    )
                    conflicts += 1
                if word.id not in cell.word_ids:
                    missing += 1
            if missing:
                report.warn(
                    FindingCode.MISSING_REFERENCE,
                    f"{word.text} is not registered in {missing} of its cells",
                    (word.start_row, word.start_col),
                )
        report.details["placement"] = {"out_of_bounds": out_of_bounds, "conflicts": conflicts}
        return inside

    def _check_intersections(self, rows: Rows, words: List[Word], strictness: Strictness, report: ValidationReport) -> None:
        crossings = [
            {"position": [r, c], "word_ids": list(cell.word_ids), "letter": cell.letter}
            for r, row in enumerate(rows)
            for c, cell in enumerate(row)
            if len(cell.word_ids) >= 2
        ]
        isolated = []
        if len(words) > 1:
            for word in words:
                if not any(len(rows[r][c].word_ids) >= 2 for r, c in _word_cells(word)):
                    isolated.append(word.text)

        average = len(crossings) / len(words) if words else 0.0
        if strictness is Strictness.STRICT and average < self.config.min_intersections:
            report.warn(
                FindingCode.FEW_INTERSECTIONS,
                f"{average:.1f} intersections per word (recommended {self.config.min_intersections})",
            )
        if isolated:
            report.warn(FindingCode.ISOLATED_WORD, f"Words without intersections: {', '.join(isolated)}")
        report.details["intersections"] = {
            "total": len(crossings),
            "average_per_word": average,
            "isolated_words": len(isolated),
            "cells": crossings,
        }

    def _check_integrity(self, rows: Rows, words: List[Word], word_list: List[Any], report: ValidationReport) -> None:
        height, width = len(rows), len(rows[0])
        known = {getattr(word, "id", None) for word in word_list}
        issues = 0
        for word in words:
            r, c = word.start_row, word.start_col
            if word.number and 0 <= r < height and 0 <= c < width and rows[r][c].number != word.number:
                report.warn(FindingCode.NUMBER_MISMATCH, f"Number of {word.text} does not match the grid", (r, c))
                issues += 1

        unknown: Dict[str, Tuple[int, int]] = {}
        for r, row in enumerate(rows):
            for c, cell in enumerate(row):
                if cell.number and not cell.word_ids:
                    report.warn(FindingCode.ORPHAN_NUMBER, f"Cell numbered {cell.number} holds no word", (r, c))
                    issues += 1
                for word_id in cell.word_ids:
                    if word_id not in known and word_id not in unknown:
                        unknown[word_id] = (r, c)
        for word_id, position in unknown.items():
            report.warn(FindingCode.UNKNOWN_REFERENCE, f"Grid references unknown word {word_id}", position)
            issues += 1
        report.details["integrity_issues"] = issues

    def _check_density(self, rows: Rows, report: ValidationReport) -> None:
        cfg = self.config
        total = len(rows) * len(rows[0])
        blocked = sum(1 for row in rows for cell in row if cell.blocked)
        filled = sum(1 for row in rows for cell in row if _has_letter(cell))
        density = filled / total
        blocked_ratio = blocked / total
        if density < cfg.min_density:
            report.warn(FindingCode.LOW_DENSITY, f"Low fill density {density:.1%}")
        if density > cfg.max_density:
            report.warn(FindingCode.HIGH_DENSITY, f"High fill density {density:.1%}")
        if blocked_ratio > cfg.max_blocked_ratio:
            report.warn(FindingCode.TOO_MANY_BLOCKED, f"{blocked_ratio:.1%} of cells are blocked")
        report.details["density"] = {
            "filled": density,
            "blocked": blocked_ratio,
            "filled_cells": filled,
            "blocked_cells": blocked,
            "total_cells": total,
        }

    def _check_connectivity(self, rows: Rows, report: ValidationReport) -> None:
        components = connected_components(rows)
        unreferenced = [
            (r, c)
            for r, row in enumerate(rows)
            for c, cell in enumerate(row)
            if _has_letter(cell) and not cell.word_ids
        ]
        if len(components) > 1:
            report.warn(FindingCode.DISCONNECTED, f"{len(components)} separate groups of words")
        if len(unreferenced) > self.config.max_isolated_cells:
            report.warn(
                FindingCode.UNREFERENCED_LETTER,
                f"{len(unreferenced)} letters belong to no word",
                unreferenced[0],
            )
        report.details["connectivity"] = {
            "components": len(components),
            "isolated_cells": len(unreferenced),
            "largest_component": max((len(component) for component in components), default=0),
        }

    # ------------------------------------------------------------------
    # Quality analysis
    # ------------------------------------------------------------------
    def _analyze_quality(self, rows: Rows, words: List[Word], report: ValidationReport) -> None:
        height, width = len(rows), len(rows[0])
        quadrants = quadrant_counts(rows)
        imbalance = abs(
            quadrants["top_left"] + quadrants["bottom_right"] - quadrants["top_right"] - quadrants["bottom_left"]
        )
        quality = {
            "word_distribution": self._word_distribution(words),
            "letter_frequency": self._letter_frequency(rows),
            "symmetry": symmetry(rows),
            "complexity": self._complexity(rows, words),
            "aesthetics": {
                "balance": 1 - imbalance / (height * width),
                "centre_fill": centre_fill(rows),
                "quadrants": quadrants,
            },
        }
        report.details["quality"] = quality
        self._recommend(quality, report)

    @staticmethod
    def _word_distribution(words: List[Word]) -> Dict[str, Any]:
        horizontal = sum(1 for word in words if Direction.coerce(word.direction) is Direction.HORIZONTAL)
        vertical = len(words) - horizontal
        lengths = [len(word.text) for word in words]
        return {
            "total": len(words),
            "horizontal": horizontal,
            "vertical": vertical,
            "ratio": vertical / horizontal if horizontal else 0.0,
            "average_length": sum(lengths) / len(lengths) if lengths else 0.0,
            "length_range": {"min": min(lengths, default=0), "max": max(lengths, default=0)},
        }

    @staticmethod
    def _letter_frequency(rows: Rows) -> Dict[str, Any]:
        counts = Counter(cell.letter for row in rows for cell in row if _has_letter(cell))
        total = sum(counts.values())
        return {
            "total": total,
            "unique": len(counts),
            "most_common": [
                {"letter": letter, "count": count, "percentage": round(count / total * 100, 1)}
                for letter, count in counts.most_common(5)
            ],
            "distribution": dict(counts),
        }

    @staticmethod
    def _complexity(rows: Rows, words: List[Word]) -> Dict[str, float]:
        difficulty = sum(word.difficulty or 0.0 for word in words) / len(words) if words else 0.0
        crossings = [len(cell.word_ids) - 1 for row in rows for cell in row if len(cell.word_ids) > 1]
        intersection_density = sum(crossings) / len(crossings) if crossings else 0.0
        return {
            "word_difficulty": difficulty,
            "intersection_density": intersection_density,
            "overall": (difficulty + intersection_density) / 2,
        }

    @staticmethod
    def _recommend(quality: Dict[str, Any], report: ValidationReport) -> None:
        if quality["word_distribution"]["total"] and abs(quality["word_distribution"]["ratio"] - 1) > 0.3:
            report.suggest("Balance the number of horizontal and vertical words")
        sym = quality["symmetry"]
        if sym["horizontal"] > 0.8 or sym["vertical"] > 0.8:
            report.suggest("Good symmetry gives the grid an attractive look")
        elif sym["horizontal"] < 0.3 and sym["vertical"] < 0.3:
            report.suggest("Consider adding some symmetry to the layout")
        overall = quality["complexity"]["overall"]
        if overall < 0.3:
            report.suggest("Puzzle may be too easy, try harder words")
        elif overall > 0.8:
            report.suggest("Puzzle may be too hard for most solvers")
        if quality["aesthetics"]["centre_fill"] == 0:
            report.suggest("The centre of the grid is empty")

    def _score(self, report: ValidationReport) -> float:
        score = 100.0
        score -= 20 * len(report.errors)
        score -= 5 * len(report.warnings)
        quality = report.details.get("quality")
        if quality:
            score += (quality["symmetry"]["horizontal"] + quality["symmetry"]["vertical"]) * 5
            score += quality["aesthetics"]["balance"] * 10
            density = report.details.get("density")
            if density and not self.config.min_density <= density["filled"] <= self.config.max_density:
                score -= 10
        return score
