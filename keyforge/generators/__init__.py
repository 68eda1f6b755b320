"""
KeyForge Generators
====================

Random source, character classes, dictionary handling and the secret
generator built on top of them.
"""

from keyforge.generators.charsets import (
    EXTENDED_ALPHABET,
    EXTENDED_CHARACTERS,
    SYMBOLS,
    CharacterClassSet,
)
from keyforge.generators.dictionary import DictionaryFilter, WordListCache
from keyforge.generators.random_source import RandomSource
from keyforge.generators.secret import SecretGenerator, password_spec

__all__ = [
    "EXTENDED_ALPHABET",
    "EXTENDED_CHARACTERS",
    "SYMBOLS",
    "CharacterClassSet",
    "DictionaryFilter",
    "RandomSource",
    "SecretGenerator",
    "WordListCache",
    "password_spec",
]
