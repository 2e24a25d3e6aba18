"""Pretty-print helpers for crossword grids and validation reports."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:
    from ..core.models import Cell, Word
    from ..engine.grid import CrosswordGrid
    from ..validation.report import ValidationReport


def cell_symbol(cell: Cell) -> str:
    if cell.blocked:
        return "#"
    return cell.letter or "."


def format_grid(grid: CrosswordGrid) -> str:
    width = grid.width
    header_cells = [f"{c:>2}" for c in range(width)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * (3 * width - 1))
    for r in range(grid.height):
        row_cells = [cell_symbol(grid.cell(r, c)) for c in range(width)]
        row_render = " ".join(f"{symbol:>2}" for symbol in row_cells)
        lines.append(f"{r:>2} | {row_render}")
    return "\n".join(lines)


def format_clues(words: Iterable[Word]) -> str:
    lines = []
    for word in sorted(words, key=lambda item: (item.direction.value, item.number or 0)):
        lines.append(f"  {word.number or '-':>3}. [{word.direction.value[0].upper()}] {word.clue} ({word.length})")
    return "\n".join(lines)


def format_report(report: ValidationReport, *, title: str = "Validation report") -> str:
    lines = [f"=== {title} ===", f"  Valid: {'yes' if report.valid else 'no'}", f"  Score: {report.score}/100"]
    for label, findings in (
        ("Errors", report.errors),
        ("Warnings", report.warnings),
        ("Suggestions", report.suggestions),
    ):
        if not findings:
            continue
        lines.append("")
        lines.append(f"--- {label} ---")
        for index, finding in enumerate(findings, start=1):
            where = f" @{finding.position}" if finding.position is not None else ""
            lines.append(f"  {index}. [{finding.code.value}] {finding.message}{where}")

    density = report.details.get("density")
    connectivity = report.details.get("connectivity")
    if density or connectivity:
        lines.append("")
        lines.append("--- Stats ---")
    if density:
        lines.append(f"  Density:       {density['filled'] * 100:.1f}% ({density['filled_cells']}/{density['total_cells']})")
    if connectivity:
        lines.append(f"  Components:    {connectivity['components']}")
    return "\n".join(lines)


def pretty_print_grid(grid: CrosswordGrid, *, label: Optional[str] = None, stream=None) -> None:
    """Print the crossword grid in a human-friendly format."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_grid(grid), file=stream)
