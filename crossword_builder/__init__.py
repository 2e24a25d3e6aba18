"""Crossword builder: placement engine and quality validators for word puzzles.

This package exposes the public API surface via:

- ``crossword_builder.engine.grid.CrosswordGrid``: the rectangular cell grid.
- ``crossword_builder.engine.placement.PlacementEngine``: placement legality,
  grid mutation and greedy batch placement.
- ``crossword_builder.engine.puzzle.Puzzle``: a session owning one grid and
  its words.
- ``crossword_builder.validation`` validators: word/clue quality and whole
  grid quality reports.

Rendering, persistence and user interaction live outside this package.
"""

from .engine.grid import CrosswordGrid, GridConfig
from .engine.placement import PlacementEngine
from .engine.puzzle import Puzzle, make_word
from .validation.grid_validator import GridQualityValidator, GridValidatorConfig
from .validation.report import FindingCode, ValidationReport
from .validation.word_validator import WordContext, WordQualityValidator, WordValidatorConfig

__all__ = [
    "CrosswordGrid",
    "GridConfig",
    "PlacementEngine",
    "Puzzle",
    "make_word",
    "GridQualityValidator",
    "GridValidatorConfig",
    "WordQualityValidator",
    "WordValidatorConfig",
    "WordContext",
    "ValidationReport",
    "FindingCode",
]

__version__ = "0.1.0"
