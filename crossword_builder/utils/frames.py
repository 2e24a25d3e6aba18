"""Tabular views of validation results (requires the optional pandas extra)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Tuple

if TYPE_CHECKING:
    from ..validation.report import ValidationReport

FRAME_COLUMNS = [
    "word",
    "valid",
    "score",
    "errors",
    "warnings",
    "suggestions",
    "difficulty",
    "difficulty_level",
    "clue_obviousness",
    "semantic_relevance",
]


def reports_to_frame(rows: Iterable[Tuple[str, ValidationReport]]):
    """Return one DataFrame row per ``(word, report)`` pair, best score first."""

    try:
        import pandas as pd
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError(
            "Word reports as a table require pandas. Install it via 'pip install crossword-builder[analysis]' or 'pip install pandas'."
        ) from exc

    records = []
    for word, report in rows:
        records.append(
            {
                "word": word,
                "valid": report.valid,
                "score": report.score,
                "errors": len(report.errors),
                "warnings": len(report.warnings),
                "suggestions": len(report.suggestions),
                "difficulty": report.metadata.get("difficulty"),
                "difficulty_level": report.metadata.get("difficulty_level"),
                "clue_obviousness": report.metadata.get("clue_obviousness"),
                "semantic_relevance": report.metadata.get("semantic_relevance"),
            }
        )
    frame = pd.DataFrame.from_records(records, columns=FRAME_COLUMNS)
    if not frame.empty:
        frame = frame.sort_values("score", ascending=False, kind="stable").reset_index(drop=True)
    return frame
