import importlib.util
import io
import unittest

from crossword_builder.core.constants import Direction
from crossword_builder.engine.grid import CrosswordGrid
from crossword_builder.engine.puzzle import Puzzle
from crossword_builder.utils.pretty import format_clues, format_grid, format_report, pretty_print_grid
from crossword_builder.validation.grid_validator import GridQualityValidator
from crossword_builder.validation.report import FindingCode, ValidationReport
from crossword_builder.validation.word_validator import WordQualityValidator


class ReportTests(unittest.TestCase):
    def test_validity_follows_errors(self) -> None:
        report = ValidationReport()
        report.warn(FindingCode.ANAGRAM, "Anagram of ACT")
        report.suggest("Nice word")
        self.assertTrue(report.valid)
        report.error(FindingCode.DUPLICATE_WORD, "Already used", (1, 2))
        self.assertFalse(report.valid)
        self.assertEqual(report.codes(), [FindingCode.DUPLICATE_WORD, FindingCode.ANAGRAM, FindingCode.ADVICE])

        data = report.to_dict()
        self.assertFalse(data["valid"])
        self.assertEqual(data["errors"][0], {"code": "duplicate_word", "message": "Already used", "position": [1, 2]})
        self.assertNotIn("position", data["warnings"][0])

    def test_critical_report(self) -> None:
        report = ValidationReport.critical(RuntimeError("boom"))
        self.assertEqual(report.score, 0)
        self.assertIn("boom", report.errors[0].message)


class PrettyTests(unittest.TestCase):
    def setUp(self) -> None:
        self.puzzle = Puzzle(CrosswordGrid.create(6, 6))
        self.puzzle.add_word("CAT", "Small pet.", Direction.HORIZONTAL, 1, 1)
        self.puzzle.add_word("CAR", "Road vehicle.", Direction.VERTICAL, 1, 1)
        self.puzzle.grid.block(5, 5)

    def test_format_grid(self) -> None:
        lines = format_grid(self.puzzle.grid).splitlines()
        self.assertEqual(len(lines), 2 + 6)
        self.assertIn(" C  A  T", lines[3])
        self.assertTrue(lines[-1].endswith(" #"))

    def test_format_clues(self) -> None:
        text = format_clues(self.puzzle.words.values())
        self.assertIn("1. [H] Small pet. (3)", text)
        self.assertIn("1. [V] Road vehicle. (3)", text)

    def test_format_report_and_print(self) -> None:
        report = GridQualityValidator().validate(self.puzzle.grid, self.puzzle.words)
        text = format_report(report, title="Grid")
        self.assertTrue(text.startswith("=== Grid ==="))
        self.assertIn("Components:    1", text)

        stream = io.StringIO()
        pretty_print_grid(self.puzzle.grid, label="Grid", stream=stream)
        self.assertTrue(stream.getvalue().startswith("Grid\n"))


@unittest.skipUnless(importlib.util.find_spec("pandas"), "pandas is not installed")
class FrameTests(unittest.TestCase):
    def test_reports_to_frame_sorts_by_score(self) -> None:
        from crossword_builder.utils.frames import FRAME_COLUMNS, reports_to_frame

        validator = WordQualityValidator()
        rows = [
            ("C4T", validator.validate("C4T")),
            ("CAT", validator.validate("CAT", "Small domestic pet.")),
        ]
        frame = reports_to_frame(rows)
        self.assertEqual(list(frame.columns), FRAME_COLUMNS)
        self.assertEqual(list(frame["word"]), ["CAT", "C4T"])
        self.assertEqual(frame.loc[0, "score"], 100)
        self.assertFalse(bool(frame.loc[1, "valid"]))

    def test_empty_input(self) -> None:
        from crossword_builder.utils.frames import reports_to_frame

        self.assertTrue(reports_to_frame([]).empty)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
