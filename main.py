"""CLI entrypoint for building and validating a crossword from a word list."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Tuple

from crossword_builder.core.constants import Strictness
from crossword_builder.core.exceptions import InvalidSizeError
from crossword_builder.engine.grid import CrosswordGrid, GridConfig
from crossword_builder.engine.puzzle import Puzzle
from crossword_builder.utils.logger import configure_logging, get_logger
from crossword_builder.utils.pretty import format_clues, format_report, pretty_print_grid
from crossword_builder.validation.grid_validator import GridQualityValidator, GridValidatorConfig
from crossword_builder.validation.word_validator import WordContext, WordQualityValidator, WordValidatorConfig


LOGGER = get_logger("crossword_builder.cli")


def parse_entry(raw: str) -> Tuple[str, str]:
    """Split ``WORD:Clue``; a bare ``WORD`` has an empty clue."""

    word, _, clue = raw.partition(":")
    return word.strip(), clue.strip()


def parse_words_file(path: Path) -> List[Tuple[str, str]]:
    """Read WORD:Clue entries, one per line. Blank lines and # comments are skipped."""
    entries: List[Tuple[str, str]] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        entries.append(parse_entry(line))
    return entries


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Place a word list on a crossword grid and report on its quality",
    )
    parser.add_argument("--height", type=int, default=15, help="Grid height in cells (5-25)")
    parser.add_argument("--width", type=int, default=15, help="Grid width in cells (5-25)")
    parser.add_argument(
        "--words",
        nargs="+",
        metavar="WORD",
        help="Words to place (format: WORD or WORD:Clue)",
    )
    parser.add_argument(
        "--words-file",
        type=Path,
        metavar="FILE",
        help="File with one WORD or WORD:Clue entry per line (# comments and blank lines ignored)",
    )
    parser.add_argument(
        "--strictness",
        type=str,
        choices=[level.value for level in Strictness],
        default=Strictness.NORMAL.value,
        help="Grid validation strictness",
    )
    parser.add_argument(
        "--cache-size",
        type=int,
        default=128,
        help="Maximum cached validation reports per validator",
    )
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument(
        "--word-report",
        action="store_true",
        help="Print a per-word quality table (requires pandas)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    entries: List[Tuple[str, str]] = []
    if args.words:
        entries.extend(parse_entry(raw) for raw in args.words)
    if args.words_file:
        entries.extend(parse_words_file(args.words_file))
    if not entries:
        parser.error("provide --words and/or --words-file")
    if args.cache_size < 1:
        parser.error("--cache-size must be positive")

    try:
        grid = CrosswordGrid(GridConfig(height=args.height, width=args.width))
    except InvalidSizeError as exc:
        parser.error(str(exc))

    word_validator = WordQualityValidator(WordValidatorConfig(cache_size=args.cache_size))
    grid_validator = GridQualityValidator(
        GridValidatorConfig(cache_size=args.cache_size, strictness=Strictness(args.strictness))
    )

    word_reports = []
    for index, (word, clue) in enumerate(entries):
        others = [other for position, (other, _) in enumerate(entries) if position != index]
        word_reports.append((word, word_validator.validate(word, clue, WordContext(existing_words=others))))
    accepted = [entry for entry, (_, report) in zip(entries, word_reports) if report.valid]
    LOGGER.info("%s of %s words passed validation", len(accepted), len(entries))

    puzzle = Puzzle(grid)
    result = puzzle.auto_fill(accepted)
    grid_report = grid_validator.validate(puzzle.grid, puzzle.words)

    pretty_print_grid(puzzle.grid, label="Grid", stream=sys.stderr)
    grouped = puzzle.words_by_direction()
    for direction, words in grouped.items():
        if words:
            print(f"{direction.value.capitalize()}:", file=sys.stderr)
            print(format_clues(words), file=sys.stderr)
    print(format_report(grid_report, title="Grid report"), file=sys.stderr)

    if args.word_report:
        from crossword_builder.utils.frames import reports_to_frame

        print(reports_to_frame(word_reports).to_string(index=False), file=sys.stderr)

    payload: Dict[str, Any] = {
        "grid": puzzle.grid.to_jsonable(),
        "words": [
            {
                "id": word.id,
                "text": word.text,
                "clue": word.clue,
                "number": word.number,
                "direction": word.direction.value,
                "start": [word.start_row, word.start_col],
                "difficulty": round(word.difficulty, 3),
            }
            for word in result.placed
        ],
        "skipped": [word.text for word in result.skipped],
        "rejected": [word for (word, report) in word_reports if not report.valid],
        "statistics": puzzle.statistics(),
        "grid_report": grid_report.to_dict(),
        "word_reports": {word: report.to_dict() for word, report in word_reports},
    }

    output_text = json.dumps(payload, ensure_ascii=False, indent=2)
    if args.output:
        args.output.write_text(output_text, encoding="utf-8")
    else:
        print(output_text)


if __name__ == "__main__":  # pragma: no cover
    main()
