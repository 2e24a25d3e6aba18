import copy
import unittest

from crossword_builder.core.constants import Direction, PlacementRejection
from crossword_builder.core.exceptions import IllegalPlacementError
from crossword_builder.engine.grid import CrosswordGrid
from crossword_builder.engine.placement import PlacementEngine
from crossword_builder.engine.puzzle import make_word


def snapshot(grid: CrosswordGrid):
    return copy.deepcopy(grid.cells)


class CanPlaceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.grid = CrosswordGrid.create(7, 7)
        self.engine = PlacementEngine()

    def test_first_word_needs_no_intersection(self) -> None:
        check = self.engine.can_place(self.grid, "CAT", 0, 0, Direction.HORIZONTAL)
        self.assertTrue(check.ok)
        self.assertEqual(check.intersections, [])

    def test_rejections_in_order(self) -> None:
        cases = [
            ("A", 0, 0, Direction.HORIZONTAL, PlacementRejection.TOO_SHORT),
            ("CAT", 0, 0, "diagonal", PlacementRejection.INVALID_DIRECTION),
            ("CAT", 7, 0, Direction.HORIZONTAL, PlacementRejection.OUT_OF_BOUNDS),
            ("CAT", 0, 5, Direction.HORIZONTAL, PlacementRejection.OUT_OF_BOUNDS),
            ("CAT", 5, 0, Direction.VERTICAL, PlacementRejection.OUT_OF_BOUNDS),
        ]
        for text, row, col, direction, reason in cases:
            with self.subTest(text=text, row=row, col=col):
                check = self.engine.can_place(self.grid, text, row, col, direction)
                self.assertFalse(check)
                self.assertEqual(check.reason, reason)

    def test_accepts_direction_strings(self) -> None:
        self.assertTrue(self.engine.can_place(self.grid, "CAT", 0, 0, "vertical"))

    def test_blocked_cell_rejected(self) -> None:
        self.grid.block(0, 1)
        check = self.engine.can_place(self.grid, "CAT", 0, 0, Direction.HORIZONTAL)
        self.assertEqual(check.reason, PlacementRejection.BLOCKED)

    def test_letter_conflict(self) -> None:
        self.engine.place(self.grid, make_word("CAT", "Pet", Direction.HORIZONTAL, 0, 0, word_id="cat"))
        before = snapshot(self.grid)

        check = self.engine.can_place(self.grid, "DOG", 0, 0, Direction.HORIZONTAL)
        self.assertEqual(check.reason, PlacementRejection.LETTER_CONFLICT)
        self.assertEqual(check.conflicts[0].existing, "C")
        self.assertEqual(check.conflicts[0].required, "D")

        with self.assertRaises(IllegalPlacementError) as ctx:
            self.engine.place(self.grid, make_word("DOG", "Pet", Direction.HORIZONTAL, 0, 0))
        self.assertEqual(ctx.exception.reason, PlacementRejection.LETTER_CONFLICT)
        self.assertEqual(snapshot(self.grid), before)

    def test_full_duplicate_rejected(self) -> None:
        self.engine.place(self.grid, make_word("CAT", "Pet", Direction.HORIZONTAL, 0, 0, word_id="cat"))
        check = self.engine.can_place(self.grid, "CAT", 0, 0, Direction.HORIZONTAL)
        self.assertEqual(check.reason, PlacementRejection.FULL_DUPLICATE)

    def test_isolated_word_rejected_once_grid_has_words(self) -> None:
        self.engine.place(self.grid, make_word("CAT", "Pet", Direction.HORIZONTAL, 0, 0, word_id="cat"))
        check = self.engine.can_place(self.grid, "DOG", 4, 0, Direction.HORIZONTAL)
        self.assertEqual(check.reason, PlacementRejection.ISOLATED)

    def test_can_place_does_not_mutate(self) -> None:
        self.engine.place(self.grid, make_word("CAT", "Pet", Direction.HORIZONTAL, 2, 2, word_id="cat"))
        before = snapshot(self.grid)
        self.engine.can_place(self.grid, "CAR", 2, 2, Direction.VERTICAL)
        self.assertEqual(snapshot(self.grid), before)


class PlaceAndRemoveTests(unittest.TestCase):
    def setUp(self) -> None:
        self.grid = CrosswordGrid.create(7, 7)
        self.engine = PlacementEngine()

    def test_valid_intersection_marks_cell(self) -> None:
        cat = self.engine.place(self.grid, make_word("CAT", "Pet", Direction.HORIZONTAL, 2, 2, word_id="cat"))
        car = self.engine.place(self.grid, make_word("CAR", "Vehicle", Direction.VERTICAL, 2, 2, word_id="car"))

        cell = self.grid.cell(2, 2)
        self.assertTrue(cell.is_intersection)
        self.assertEqual(cell.word_ids, ["cat", "car"])
        self.assertEqual(cell.directions, [Direction.HORIZONTAL, Direction.VERTICAL])
        self.assertEqual(cat.number, car.number)
        self.assertTrue(self.grid.cell(2, 4).is_end)
        self.assertTrue(self.grid.cell(4, 2).is_end)

    def test_place_then_remove_round_trip(self) -> None:
        self.engine.place(self.grid, make_word("CAT", "Pet", Direction.HORIZONTAL, 2, 2, word_id="cat"))
        scenarios = [
            make_word("CAR", "Vehicle", Direction.VERTICAL, 2, 2, word_id="car"),
            make_word("STAR", "Sky light", Direction.VERTICAL, 1, 4, word_id="star"),
            make_word("MAP", "Atlas page", Direction.VERTICAL, 1, 3, word_id="map"),
        ]
        for word in scenarios:
            with self.subTest(word=word.text):
                before = snapshot(self.grid)
                self.engine.place(self.grid, word)
                self.assertNotEqual(snapshot(self.grid), before)
                self.assertTrue(self.engine.remove(self.grid, word.id))
                self.assertEqual(snapshot(self.grid), before)

    def test_remove_keeps_remaining_crossings(self) -> None:
        self.engine.place(self.grid, make_word("CAT", "Pet", Direction.HORIZONTAL, 2, 2, word_id="cat"))
        self.engine.place(self.grid, make_word("TEN", "Number", Direction.VERTICAL, 2, 4, word_id="ten"))
        self.engine.remove(self.grid, "cat")

        corner = self.grid.cell(2, 4)
        self.assertEqual(corner.letter, "T")
        self.assertEqual(corner.word_ids, ["ten"])
        self.assertEqual(corner.directions, [Direction.VERTICAL])
        self.assertFalse(corner.is_intersection)
        self.assertTrue(corner.is_start)
        self.assertFalse(corner.is_end)
        self.assertEqual(self.grid.cell(2, 2).letter, "")
        self.assertIsNone(self.grid.cell(2, 2).number)

    def test_remove_unknown_returns_false(self) -> None:
        self.assertFalse(self.engine.remove(self.grid, "missing"))

    def test_numbers_follow_start_cells(self) -> None:
        first = self.engine.place(self.grid, make_word("CAT", "Pet", Direction.HORIZONTAL, 2, 2, word_id="a"))
        second = self.engine.place(self.grid, make_word("TEN", "Number", Direction.VERTICAL, 2, 4, word_id="b"))
        self.assertEqual(first.number, 1)
        self.assertEqual(second.number, 2)
        self.assertEqual(self.grid.cell(2, 4).number, 2)
        self.assertEqual(self.engine.number_for(self.grid, 2, 2, 9), 1)
        self.assertEqual(self.engine.number_for(self.grid, 5, 5, 9), 9)


class IntersectionSearchTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = PlacementEngine()

    def test_find_intersections_lists_every_shared_letter(self) -> None:
        existing = make_word("BANANA", "Fruit", Direction.HORIZONTAL, 0, 0)
        candidates = self.engine.find_intersections("AXE", existing)
        self.assertEqual(len(candidates), 3)
        self.assertTrue(all(c.new_index == 0 and c.letter == "A" for c in candidates))
        qualities = [c.quality for c in candidates]
        self.assertEqual(qualities, sorted(qualities, reverse=True))
        self.assertTrue(all(0.5 <= q <= 1.0 for q in qualities))

    def test_rare_letters_score_higher(self) -> None:
        existing = make_word("AXA", "Test", Direction.HORIZONTAL, 0, 0)
        candidates = self.engine.find_intersections("AXA", existing)
        best = candidates[0]
        self.assertEqual(best.letter, "X")
        self.assertEqual((best.new_index, best.existing_index), (1, 1))

    def test_no_shared_letters(self) -> None:
        existing = make_word("DOG", "Pet", Direction.HORIZONTAL, 0, 0)
        self.assertEqual(self.engine.find_intersections("CAT", existing), [])


class AutoPlaceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.grid = CrosswordGrid.create(9, 9)
        self.engine = PlacementEngine()

    def test_longest_word_is_centred(self) -> None:
        words = [make_word("CAT", "Pet"), make_word("PLANET", "Orbiting body")]
        result = self.engine.auto_place(self.grid, words)

        first = result.placed[0]
        self.assertEqual(first.text, "PLANET")
        self.assertEqual((first.start_row, first.start_col), (4, 1))
        self.assertEqual(first.direction, Direction.HORIZONTAL)
        self.assertEqual(len(result.placed), 2)
        second = result.placed[1]
        self.assertEqual(second.direction, Direction.VERTICAL)
        self.assertTrue(self.grid.cell(4, 1 + "PLANET".index("A")).is_intersection)

    def test_unplaceable_words_are_skipped(self) -> None:
        words = [make_word("PLANET", "Orbiting body"), make_word("XYZZY", "Magic word")]
        result = self.engine.auto_place(self.grid, words)
        self.assertEqual([w.text for w in result.placed], ["PLANET"])
        self.assertEqual([w.text for w in result.skipped], ["XYZZY"])

    def test_too_long_first_word_blocks_the_batch(self) -> None:
        grid = CrosswordGrid.create(5, 5)
        words = [make_word("ELEPHANT", "Big animal"), make_word("ANT", "Insect")]
        result = self.engine.auto_place(grid, words)
        self.assertEqual(result.placed, [])
        self.assertEqual(len(result.skipped), 2)
        self.assertFalse(grid.has_words())

    def test_numbers_start_from_next_number(self) -> None:
        words = [make_word("PLANET", "Orbiting body"), make_word("TEA", "Drink")]
        result = self.engine.auto_place(self.grid, words, next_number=5)
        self.assertEqual([w.number for w in result.placed], [5, 6])

    def test_placement_options_are_legal_and_sorted(self) -> None:
        planet = make_word("PLANET", "Orbiting body", Direction.HORIZONTAL, 4, 1, word_id="p")
        self.engine.place(self.grid, planet)
        options = self.engine.placement_options(self.grid, "TEA", [planet])
        self.assertTrue(options)
        qualities = [option.quality for option in options]
        self.assertEqual(qualities, sorted(qualities, reverse=True))
        for option in options:
            self.assertTrue(
                self.engine.can_place(self.grid, "TEA", option.start_row, option.start_col, option.direction)
            )


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
