"""Letter classes and small word lists used by the quality heuristics.

Both Latin and Ukrainian Cyrillic answers are supported, so every table
carries entries for the two alphabets.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, List, Tuple

RARE_LETTERS: FrozenSet[str] = frozenset("XZQЇЄҐЬ")

# Letters that count towards the "rarity" ordering of a word list.
UNCOMMON_LETTERS: FrozenSet[str] = frozenset("JKQXZЇЄҐЬФХЦЧШЩ")
COMMON_LETTERS: FrozenSet[str] = frozenset("AEIONRSTАОІЕНТРС")

VOWELS: FrozenSet[str] = frozenset("AEIOUYАЕЄИІЇОУЮЯ")
CONSONANTS: FrozenSet[str] = frozenset(
    "BCDFGHJKLMNPQRSTVWXZ" "БВГҐДЖЗЙКЛМНПРСТФХЦЧШЩ"
)

RARE_COMBINATIONS: Tuple[str, ...] = (
    "ЯЄ",
    "ЮЯ",
    "ЩЯ",
    "ЬЯ",
    "ZZ",
    "XQ",
    "QZ",
    "JX",
)

HARD_TO_PRONOUNCE: Tuple[str, ...] = ("ЩЯ", "ЗШ", "ШЧ", "ТСЯ", "SCHW", "TCHS")

LATIN_LETTERS: FrozenSet[str] = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
CYRILLIC_LETTERS: FrozenSet[str] = frozenset("АБВГҐДЕЄЖЗИІЇЙКЛМНОПРСТУФХЦЧШЩЬЮЯ")

COMMON_WORDS: FrozenSet[str] = frozenset(
    {
        "WATER", "HOUSE", "BREAD", "MILK", "HAND", "HEAD", "HEART", "LOVE",
        "LIFE", "WORLD", "DAY", "NIGHT", "ВОДА", "ХЛІБ", "МОЛОКО", "РУКА",
        "ГОЛОВА", "СЕРЦЕ", "ЛЮБОВ", "ЖИТТЯ", "СВІТ", "ДЕНЬ", "НІЧ",
    }
)

ABBREVIATIONS: FrozenSet[str] = frozenset(
    {"USA", "NATO", "UNESCO", "NASA", "UN", "EU", "США", "ЄС", "НАТО", "ООН"}
)

AMBIGUOUS_WORDS: FrozenSet[str] = frozenset(
    {"BANK", "BAT", "KEY", "PITCH", "SPRING", "CRANE", "КЛЮЧ", "БАНК", "КОСА", "МИША"}
)

THEME_WORDS: Dict[str, List[str]] = {
    "nature": ["tree", "flower", "forest", "river", "mountain"],
    "sport": ["football", "tennis", "swimming", "running", "gymnastics"],
    "food": ["bread", "milk", "meat", "vegetable", "fruit"],
    "animals": ["cat", "dog", "mouse", "bird", "fish"],
    "природа": ["дерево", "квітка", "ліс", "річка", "гора"],
    "спорт": ["футбол", "теніс", "плавання", "біг", "гімнастика"],
    "їжа": ["хліб", "молоко", "м'ясо", "овочі", "фрукти"],
    "тварини": ["кіт", "собака", "миша", "птах", "риба"],
}

WORD_CATEGORIES: Dict[str, FrozenSet[str]] = {
    "animals": frozenset({"cat", "dog", "mouse", "bird", "fish", "кіт", "собака", "миша"}),
    "food": frozenset({"bread", "milk", "meat", "хліб", "молоко", "м'ясо"}),
}

CLUE_CATEGORY_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "animals": ("animal", "pet", "beast", "тварина", "звір"),
    "food": ("food", "dish", "meal", "їжа", "продукт"),
}

CLUE_TYPE_MARKERS: Dict[str, Tuple[str, ...]] = {
    "definition": ("this is", "one who", "which", "це", "той", "який"),
    "synonym": ("synonym", "another word", "синонім", "інше слово"),
}
