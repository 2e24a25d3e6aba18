import unittest

from crossword_builder.validation.report import FindingCode
from crossword_builder.validation.word_validator import (
    WordContext,
    WordQualityValidator,
    WordValidatorConfig,
    are_anagrams,
    share_root,
    word_parts,
)


class Exploding:
    @property
    def text(self) -> str:
        raise RuntimeError("boom")


class HelperTests(unittest.TestCase):
    def test_word_parts(self) -> None:
        self.assertEqual(word_parts("CATS"), ["CAT", "CATS", "ATS"])
        self.assertEqual(word_parts("AB"), [])

    def test_anagrams_and_roots(self) -> None:
        self.assertTrue(are_anagrams("CAT", "ACT"))
        self.assertFalse(are_anagrams("CAT", "CATS"))
        self.assertTrue(share_root("PLANET", "PLANETS"))
        self.assertFalse(share_root("CAT", "CATS"))


class StructureTests(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = WordQualityValidator()

    def test_clean_word_with_good_clue(self) -> None:
        report = self.validator.validate("CAT", "Small domestic pet.")
        self.assertTrue(report.valid)
        self.assertEqual(report.warnings, ())
        self.assertEqual(report.score, 100)
        self.assertEqual(report.metadata["normalized_word"], "CAT")
        self.assertEqual(report.metadata["primary_language"], "english")
        self.assertIn("metrics", report.details)

    def test_structural_errors(self) -> None:
        cases = [
            (42, FindingCode.NOT_A_STRING),
            ("   ", FindingCode.EMPTY_WORD),
            ("A", FindingCode.WORD_TOO_SHORT),
            ("C4T", FindingCode.INVALID_CHARACTERS),
            ("A" * 26, FindingCode.WORD_TOO_LONG),
        ]
        for text, code in cases:
            with self.subTest(text=text):
                report = self.validator.validate(text)
                self.assertFalse(report.valid)
                self.assertTrue(report.has(code))
                self.assertLess(report.score, 100)

    def test_separators_are_allowed(self) -> None:
        report = self.validator.validate("ice-cream")
        self.assertTrue(report.valid)
        self.assertEqual(report.metadata["letter_count"], 8)

    def test_alphabet_detection(self) -> None:
        self.assertEqual(self.validator.validate("кіт").metadata["primary_language"], "ukrainian")
        mixed = self.validator.validate("CATкіт")
        self.assertTrue(mixed.has(FindingCode.MIXED_ALPHABETS))
        self.assertTrue(mixed.valid)

    def test_low_variety_and_repeats(self) -> None:
        report = self.validator.validate("AAAAAB")
        self.assertTrue(report.has(FindingCode.LOW_VARIETY))
        self.assertTrue(report.has(FindingCode.REPEATED_LETTERS))


class ContextTests(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = WordQualityValidator()

    def test_duplicate_is_an_error(self) -> None:
        report = self.validator.validate("cat", "Small domestic pet.", WordContext(existing_words=["CAT"]))
        self.assertFalse(report.valid)
        self.assertTrue(report.has(FindingCode.DUPLICATE_WORD))

    def test_anagram_is_a_warning(self) -> None:
        report = self.validator.validate("ACT", "Perform on stage.", WordContext(existing_words=["CAT"]))
        self.assertTrue(report.valid)
        self.assertTrue(report.has(FindingCode.ANAGRAM))
        self.assertEqual(report.metadata["similar_words"], ["CAT"])

    def test_difficulty_target(self) -> None:
        report = self.validator.validate("CAT", context=WordContext(difficulty="hard"))
        self.assertTrue(report.has(FindingCode.DIFFICULTY_TARGET))

    def test_theme_relevance(self) -> None:
        report = self.validator.validate("CAT", context=WordContext(theme="animals"))
        self.assertEqual(report.metadata["theme_relevance"], 1.0)

    def test_internal_failure_becomes_critical_report(self) -> None:
        with self.assertLogs("crossword_builder", level="ERROR"):
            report = self.validator.validate("CAT", context=WordContext(existing_words=[Exploding()]))
        self.assertFalse(report.valid)
        self.assertTrue(report.has(FindingCode.CRITICAL))
        self.assertEqual(report.score, 0)


class ClueTests(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = WordQualityValidator()

    def test_answer_inside_clue(self) -> None:
        report = self.validator.validate("CAT", "A cat is a pet.")
        self.assertFalse(report.valid)
        self.assertTrue(report.has(FindingCode.ANSWER_IN_CLUE))
        self.assertTrue(report.has(FindingCode.CLUE_TOO_OBVIOUS))

    def test_part_of_answer_inside_clue(self) -> None:
        report = self.validator.validate("PLANETS", "Each planet circles a star.")
        self.assertTrue(report.valid)
        self.assertTrue(report.has(FindingCode.CLUE_CONTAINS_PART))

    def test_non_string_clue(self) -> None:
        report = self.validator.validate("CAT", 12)
        self.assertTrue(report.has(FindingCode.CLUE_NOT_STRING))

    def test_grammar(self) -> None:
        self.assertEqual(
            self.validator.check_clue_grammar("small pet"),
            ["does not start with a capital letter", "missing terminal punctuation"],
        )
        self.assertEqual(
            self.validator.check_clue_grammar("Big  cat ."),
            ["doubled spaces", "space before punctuation"],
        )
        self.assertEqual(self.validator.check_clue_grammar("why?"), [])

        report = self.validator.validate("CAT", "small domestic pet")
        grammar = [f for f in report.warnings if f.code is FindingCode.CLUE_GRAMMAR]
        self.assertEqual(len(grammar), 1)

    def test_grammar_check_can_be_disabled(self) -> None:
        validator = WordQualityValidator(WordValidatorConfig(grammar_check=False))
        report = validator.validate("CAT", "small domestic pet")
        self.assertFalse(report.has(FindingCode.CLUE_GRAMMAR))

    def test_ambiguous_word_without_clue(self) -> None:
        self.assertTrue(self.validator.validate("BANK").has(FindingCode.AMBIGUOUS_WORD))


class CachingTests(unittest.TestCase):
    def test_identical_inputs_share_a_report(self) -> None:
        validator = WordQualityValidator()
        first = validator.validate("CAT", "Small domestic pet.")
        second = validator.validate("CAT", "Small domestic pet.")
        self.assertIs(first, second)
        self.assertIsNot(first, validator.validate("CAT", "Small domestic pet.", WordContext(theme="animals")))

        stats = validator.stats()
        self.assertEqual(stats["total_validations"], 3)
        self.assertEqual(stats["cache_hits"], 1)

        validator.clear_cache()
        self.assertIsNot(first, validator.validate("CAT", "Small domestic pet."))

    def test_shared_report_is_frozen(self) -> None:
        validator = WordQualityValidator()
        first = validator.validate("CAT", "Small domestic pet.")
        with self.assertRaises(ValueError):
            first.error(FindingCode.DUPLICATE_WORD, "Already used")

        second = validator.validate("CAT", "Small domestic pet.")
        self.assertIs(second, first)
        self.assertTrue(second.valid)
        self.assertEqual(second.errors, ())

    def test_cache_is_bounded(self) -> None:
        validator = WordQualityValidator(WordValidatorConfig(cache_size=2))
        for word in ("CAT", "DOG", "EMU"):
            validator.validate(word)
        self.assertEqual(validator.stats()["cache_size"], 2)

    def test_batch_and_quick_validate(self) -> None:
        validator = WordQualityValidator()
        reports = validator.validate_batch(
            [("CAT", "Small domestic pet."), {"word": "C4T", "clue": "Typo."}]
        )
        self.assertEqual([r.valid for r in reports], [True, False])

        self.assertTrue(validator.quick_validate("CAT"))
        self.assertTrue(validator.quick_validate("ice-cream"))
        self.assertFalse(validator.quick_validate("C4T"))
        self.assertFalse(validator.quick_validate("A"))
        self.assertFalse(validator.quick_validate(None))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
