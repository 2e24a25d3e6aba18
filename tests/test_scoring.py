import unittest

from crossword_builder.core.constants import DifficultyLevel
from crossword_builder.data.normalization import clean_word, collapse_whitespace, normalize_answer
from crossword_builder.data.scoring import (
    average_difficulty,
    difficulty_level,
    intersection_quality,
    placement_key,
    word_difficulty,
    word_rarity,
    words_statistics,
)
from crossword_builder.engine.puzzle import make_word


class NormalizationTests(unittest.TestCase):
    def test_normalize_answer_keeps_separators(self) -> None:
        self.assertEqual(normalize_answer("  rock’n’roll "), "ROCK'N'ROLL")
        self.assertEqual(normalize_answer(""), "")

    def test_clean_word_keeps_letters_only(self) -> None:
        self.assertEqual(clean_word("ice-cream"), "ICECREAM")
        self.assertEqual(clean_word("м'ясо"), "МЯСО")
        self.assertEqual(clean_word(None), "")

    def test_collapse_whitespace(self) -> None:
        self.assertEqual(collapse_whitespace("  a \t b\n"), "a b")


class DifficultyTests(unittest.TestCase):
    def test_empty_word_scores_zero(self) -> None:
        self.assertEqual(word_difficulty(""), 0.0)
        self.assertEqual(average_difficulty([]), 0.0)

    def test_rare_letters_raise_difficulty(self) -> None:
        self.assertGreater(word_difficulty("QUIZ"), word_difficulty("QUIT"))
        self.assertGreater(word_difficulty("QUIT"), word_difficulty("SUIT"))

    def test_length_contribution_is_capped(self) -> None:
        self.assertAlmostEqual(word_difficulty("ABABABABABABABABAB"), 0.4)

    def test_score_is_capped_at_one(self) -> None:
        self.assertEqual(word_difficulty("XQZZXQ"), 1.0)

    def test_levels(self) -> None:
        self.assertEqual(difficulty_level(0.3), DifficultyLevel.EASY)
        self.assertEqual(difficulty_level(0.31), DifficultyLevel.MEDIUM)
        self.assertEqual(difficulty_level(0.7), DifficultyLevel.MEDIUM)
        self.assertEqual(difficulty_level(0.71), DifficultyLevel.HARD)

    def test_rarity_ordering(self) -> None:
        self.assertEqual(word_rarity("TEAR"), 0)
        self.assertGreater(word_rarity("JAZZ"), word_rarity("TEAR"))

    def test_placement_order_prefers_long_then_rare(self) -> None:
        words = ["tea", "CAT", "TEAR", "JAZZ", "PLANET"]
        self.assertEqual(sorted(words, key=placement_key), ["PLANET", "JAZZ", "TEAR", "CAT", "tea"])
        self.assertEqual(placement_key("tea"), (-3, 0, "TEA"))


class StatisticsTests(unittest.TestCase):
    def test_empty_collection(self) -> None:
        stats = words_statistics([])
        self.assertEqual(stats["total"], 0)
        self.assertEqual(stats["average_length"], 0.0)
        self.assertEqual((stats["min_length"], stats["max_length"]), (0, 0))
        self.assertEqual(stats["letter_frequency"], {})

    def test_languages_and_rarity(self) -> None:
        words = [make_word("JAZZ"), make_word("МЯСО", direction="vertical"), make_word("TEAR")]
        stats = words_statistics(words)
        self.assertEqual(stats["languages"], {"english": 2, "ukrainian": 1, "mixed": 0})
        self.assertEqual((stats["horizontal"], stats["vertical"]), (2, 1))
        self.assertAlmostEqual(stats["average_length"], 4.0)
        self.assertAlmostEqual(stats["average_difficulty"], average_difficulty(["JAZZ", "МЯСО", "TEAR"]))
        self.assertAlmostEqual(
            stats["average_rarity"], (word_rarity("JAZZ") + word_rarity("МЯСО") + word_rarity("TEAR")) / 3
        )


class IntersectionQualityTests(unittest.TestCase):
    def test_quality_is_bounded(self) -> None:
        for new_length in range(2, 7):
            for existing_length in range(2, 7):
                for i in range(new_length):
                    for j in range(existing_length):
                        for letter in ("A", "X"):
                            quality = intersection_quality(i, new_length, j, existing_length, letter)
                            self.assertGreaterEqual(quality, 0.5)
                            self.assertLessEqual(quality, 1.0)

    def test_centre_beats_edge(self) -> None:
        centre = intersection_quality(2, 5, 2, 5, "A")
        edge = intersection_quality(0, 5, 4, 5, "A")
        self.assertGreater(centre, edge)

    def test_rare_letter_bonus(self) -> None:
        self.assertAlmostEqual(
            intersection_quality(1, 4, 1, 4, "Z") - intersection_quality(1, 4, 1, 4, "A"), 0.2
        )

    def test_zero_length(self) -> None:
        self.assertEqual(intersection_quality(0, 0, 0, 0, "A"), 0.0)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
