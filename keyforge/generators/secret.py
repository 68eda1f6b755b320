"""
Secret Generator
=================

Produces random passwords and word-based passphrases.

Password mode draws one mandatory character from every enabled class
(plus, optionally, one extended character), fills the remainder from the
combined ASCII alphabet (lowercase when only the extended character
is requested), and shuffles the whole sequence so mandatory
characters land at uniformly random positions. When the requested length
is shorter than the number of mandatory characters the guarantees are
truncated rather than the length extended.

Passphrase mode picks distinct words from a filtered dictionary pool,
optionally capitalises them, joins them with a separator and appends a
digit, a symbol and an extended character.

References:
    - NIST SP 800-63B (2017), Section 5.1.1.2 -- memorized secrets.
    - Reinhold, A. G. (1995). The Diceware Passphrase Home Page.
"""

from __future__ import annotations

from typing import Optional

from keyforge.core.errors import InvalidConfigurationError, SelectionError
from keyforge.core.models import CharacterClassName, GenerationSpec, PassphraseSpec
from keyforge.generators.charsets import (
    ASCII_CLASSES,
    EXTENDED_ALPHABET,
    SYMBOLS,
    CharacterClassSet,
)
from keyforge.generators.dictionary import DictionaryFilter
from keyforge.generators.random_source import RandomSource
from shared.logger import ForgeLogger

logger = ForgeLogger("generator")

_DIGITS = "0123456789"


class SecretGenerator:
    """Generates passwords and passphrases from a :class:`RandomSource`.

    Usage::

        gen = SecretGenerator()
        pw = gen.generate_password(GenerationSpec(total_length=20))
        pp = gen.generate_passphrase(PassphraseSpec(), DictionaryFilter(cache))
    """

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        classes: Optional[CharacterClassSet] = None,
    ) -> None:
        self._rng = rng or RandomSource()
        self._classes = classes or CharacterClassSet()

    # ------------------------------------------------------------------ #
    #  Password mode
    # ------------------------------------------------------------------ #

    def generate_password(self, spec: GenerationSpec) -> str:
        """Generate a random password satisfying *spec*.

        Raises:
            InvalidConfigurationError: If the length is below 1, or if no
                class is enabled and no extended character is requested.
        """
        ascii_names = [n for n in spec.classes if n in ASCII_CLASSES]

        if spec.total_length < 1:
            raise InvalidConfigurationError("Password length must be at least 1.")
        if not ascii_names and not spec.guarantee_unicode:
            raise InvalidConfigurationError(
                "At least one character type must be selected for password generation."
            )

        enabled = self._classes.ordered(ascii_names)
        # extended-only requests are padded with lowercase letters
        fill_alphabet = (
            "".join(c.alphabet for c in enabled)
            or self._classes[CharacterClassName.LOWERCASE].alphabet
        )

        parts: list[str] = [self._rng.choose(c.alphabet) for c in enabled]
        if spec.guarantee_unicode:
            parts.append(self._rng.choose(EXTENDED_ALPHABET))

        if spec.total_length < len(parts):
            parts = parts[: spec.total_length]
        elif spec.total_length > len(parts):
            parts.extend(
                self._rng.choose(fill_alphabet)
                for _ in range(spec.total_length - len(parts))
            )

        self._rng.shuffle(parts)
        logger.debug(
            "Password generated",
            length=len(parts),
            classes=[c.name.value for c in enabled],
            unicode=spec.guarantee_unicode,
        )
        return "".join(parts)

    # ------------------------------------------------------------------ #
    #  Passphrase mode
    # ------------------------------------------------------------------ #

    def generate_passphrase(
        self,
        spec: PassphraseSpec,
        dictionary: DictionaryFilter,
    ) -> str:
        """Generate a passphrase from words served by *dictionary*.

        Raises:
            InvalidConfigurationError: Word count below 1 or inverted bounds.
            DictionaryError: Propagated from the filter.
            SelectionError: The pool is empty at selection time.
        """
        if spec.word_count < 1:
            raise InvalidConfigurationError("Word count must be at least 1.")
        if spec.min_word_length > spec.max_word_length:
            raise InvalidConfigurationError(
                f"Minimum word length ({spec.min_word_length}) exceeds "
                f"maximum word length ({spec.max_word_length})."
            )

        pool = dictionary.filter(
            spec.min_word_length,
            spec.max_word_length,
            required=spec.word_count,
        )
        if not pool:
            raise SelectionError("Could not select random words: candidate pool is empty.")

        words = self._rng.sample(pool, spec.word_count)
        if spec.capitalize:
            words = [w[:1].upper() + w[1:] for w in words]

        passphrase = spec.separator.join(words)
        if spec.append_digit:
            passphrase += self._rng.choose(_DIGITS)
        if spec.append_symbol:
            passphrase += self._rng.choose(SYMBOLS)
        if spec.append_unicode:
            passphrase += self._rng.choose(EXTENDED_ALPHABET)

        logger.debug(
            "Passphrase generated",
            words=len(words),
            pool=len(pool),
            length=len(passphrase),
        )
        return passphrase


def password_spec(
    length: int,
    *,
    lowercase: bool = True,
    uppercase: bool = True,
    digits: bool = True,
    symbols: bool = True,
    unicode: bool = True,
) -> GenerationSpec:
    """Build a :class:`GenerationSpec` from per-class toggles."""
    flags = {
        CharacterClassName.LOWERCASE: lowercase,
        CharacterClassName.UPPERCASE: uppercase,
        CharacterClassName.DIGIT: digits,
        CharacterClassName.SYMBOL: symbols,
    }
    return GenerationSpec(
        total_length=length,
        classes=frozenset(name for name, on in flags.items() if on),
        guarantee_unicode=unicode,
    )
