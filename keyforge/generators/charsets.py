"""
Character Classes
==================

The named alphabets used for generation and for class detection during
analysis. ASCII classes are pairwise disjoint; the extended class is the
fixed table of accented letters and currency signs below, which is also
the alphabet credited to any non-ASCII character during entropy
estimation.
"""

from __future__ import annotations

import string
from typing import Iterable, Iterator

from keyforge.core.models import CharacterClass, CharacterClassName

SYMBOLS: str = "!@#$%^&*()_+-=[]{}|;:,.<>/?~"

# Ordered: draw order and display order both follow insertion order
EXTENDED_CHARACTERS: dict[str, str] = {
    "é": "é (e acute)",
    "è": "è (e grave)",
    "à": "à (a grave)",
    "ù": "ù (u grave)",
    "ç": "ç (c cedilla)",
    "ñ": "ñ (n tilde)",
    "ö": "ö (o umlaut)",
    "ü": "ü (u umlaut)",
    "€": "€ (euro sign)",
    "£": "£ (pound sign)",
    "¥": "¥ (yen sign)",
    "µ": "µ (micro sign)",
    "ø": "ø (o stroke)",
    "æ": "æ (ae ligature)",
}

EXTENDED_ALPHABET: str = "".join(EXTENDED_CHARACTERS)

# Generation order for mandatory characters
CANONICAL_ORDER: tuple[CharacterClassName, ...] = (
    CharacterClassName.LOWERCASE,
    CharacterClassName.UPPERCASE,
    CharacterClassName.DIGIT,
    CharacterClassName.SYMBOL,
    CharacterClassName.EXTENDED,
)

ASCII_CLASSES: frozenset[CharacterClassName] = frozenset(CANONICAL_ORDER[:4])


class CharacterClassSet:
    """Lookup of :class:`CharacterClass` by name.

    Usage::

        classes = CharacterClassSet()
        classes[CharacterClassName.DIGIT].alphabet   # '0123456789'
        classes.alphabet_for({CharacterClassName.LOWERCASE,
                              CharacterClassName.DIGIT})
    """

    def __init__(self) -> None:
        self._classes: dict[CharacterClassName, CharacterClass] = {
            CharacterClassName.LOWERCASE: CharacterClass(
                name=CharacterClassName.LOWERCASE,
                alphabet=string.ascii_lowercase,
            ),
            CharacterClassName.UPPERCASE: CharacterClass(
                name=CharacterClassName.UPPERCASE,
                alphabet=string.ascii_uppercase,
            ),
            CharacterClassName.DIGIT: CharacterClass(
                name=CharacterClassName.DIGIT,
                alphabet=string.digits,
            ),
            CharacterClassName.SYMBOL: CharacterClass(
                name=CharacterClassName.SYMBOL,
                alphabet=SYMBOLS,
            ),
            CharacterClassName.EXTENDED: CharacterClass(
                name=CharacterClassName.EXTENDED,
                alphabet=EXTENDED_ALPHABET,
            ),
        }

    def __getitem__(self, name: CharacterClassName) -> CharacterClass:
        return self._classes[name]

    def __iter__(self) -> Iterator[CharacterClass]:
        return (self._classes[name] for name in CANONICAL_ORDER)

    def ordered(self, names: Iterable[CharacterClassName]) -> list[CharacterClass]:
        """Return the classes named in *names*, in canonical order."""
        wanted = set(names)
        return [self._classes[n] for n in CANONICAL_ORDER if n in wanted]

    def alphabet_for(self, names: Iterable[CharacterClassName]) -> str:
        """Concatenate the alphabets of *names* in canonical order."""
        return "".join(c.alphabet for c in self.ordered(names))

    @staticmethod
    def label_for(char: str) -> str:
        """Human-readable label of an extended character, or the char itself."""
        return EXTENDED_CHARACTERS.get(char, char)
