"""
Dictionary Loading & Filtering
===============================

Loads a newline-separated word list once, folds every entry to lowercase
ASCII letters, and serves length-filtered candidate pools to the
passphrase generator.

Normalization folds accented entries to their base letters (NFKD
decomposition, combining marks dropped), lowercases, and strips every
code point outside ``a-z``. With transliteration disabled only entries
that are already pure ASCII letters are accepted.

The loaded tuple lives in a :class:`WordListCache` owned by whoever
constructs it; the one-time load is guarded by a lock so concurrent
first callers read the file once.
"""

from __future__ import annotations

import re
import threading
import unicodedata
from pathlib import Path
from typing import Iterable, Optional, Sequence

from keyforge.core.errors import (
    DictionaryEmptyError,
    DictionaryUnavailableError,
    InsufficientWordsError,
)
from shared.logger import ForgeLogger

logger = ForgeLogger("dictionary")

_NON_LETTER = re.compile(r"[^a-z]")
_ASCII_WORD = re.compile(r"^[A-Za-z]+$")


def normalize_word(raw: str, *, transliterate: bool = True) -> Optional[str]:
    """Fold *raw* to lowercase ``a-z``; return ``None`` when nothing is left.

    >>> normalize_word("Éclair")
    'eclair'
    >>> normalize_word("don't")
    'dont'
    >>> normalize_word("Éclair", transliterate=False) is None
    True
    """
    word = raw.strip()
    if not word:
        return None

    if transliterate:
        folded = (
            unicodedata.normalize("NFKD", word)
            .encode("ascii", "ignore")
            .decode("ascii")
        )
        folded = _NON_LETTER.sub("", folded.lower())
        return folded or None

    if _ASCII_WORD.match(word):
        return word.lower()
    return None


def normalize_words(lines: Iterable[str], *, transliterate: bool = True) -> tuple[str, ...]:
    """Normalize every line, dropping blanks and entries that fold to nothing."""
    words: list[str] = []
    for line in lines:
        word = normalize_word(line, transliterate=transliterate)
        if word is not None:
            words.append(word)
    return tuple(words)


# ========================== WordListCache ==================================


class WordListCache:
    """Lazily loaded, read-only word list.

    ``get()`` reads the first readable path in *paths*, normalizes it and
    keeps the resulting tuple for the lifetime of the cache. A failed load
    leaves the cache empty so the next call tries again.

    Args:
        paths:          Candidate dictionary files, tried in order.
        transliterate:  Fold accented entries instead of rejecting them.
    """

    def __init__(
        self,
        paths: Sequence[str | Path],
        *,
        transliterate: bool = True,
    ) -> None:
        self._paths = [Path(p) for p in paths]
        self._transliterate = transliterate
        self._words: Optional[tuple[str, ...]] = None
        self._source: Optional[Path] = None
        self._lock = threading.Lock()

    @classmethod
    def from_words(cls, words: Iterable[str], *, transliterate: bool = True) -> WordListCache:
        """Build a cache pre-populated from an in-memory word list."""
        cache = cls([], transliterate=transliterate)
        cache._words = normalize_words(words, transliterate=transliterate)
        return cache

    @property
    def loaded(self) -> bool:
        return self._words is not None

    @property
    def source(self) -> Optional[Path]:
        """The file the word list was read from, once loaded."""
        return self._source

    def get(self) -> tuple[str, ...]:
        """Return the normalized word list, loading it on first use.

        Raises:
            DictionaryUnavailableError: If no candidate path is readable.
        """
        words = self._words
        if words is not None:
            return words

        with self._lock:
            if self._words is None:
                self._words = self._load()
            return self._words

    def _load(self) -> tuple[str, ...]:
        tried: list[str] = []
        for path in self._paths:
            try:
                with open(path, "r", encoding="utf-8", errors="replace") as fh:
                    with logger.timed(f"dictionary load {path}"):
                        words = normalize_words(fh, transliterate=self._transliterate)
            except OSError as exc:
                logger.debug("Dictionary candidate unreadable", path=str(path), error=str(exc))
                tried.append(str(path))
                continue

            self._source = path
            logger.info(
                "Dictionary loaded",
                path=str(path),
                words=len(words),
                transliterate=self._transliterate,
            )
            return words

        raise DictionaryUnavailableError(
            "No readable dictionary file found (tried: "
            + (", ".join(tried) if tried else "no paths configured")
            + ")"
        )


# ========================== DictionaryFilter ===============================


class DictionaryFilter:
    """Serves candidate pools of words within a length window.

    Usage::

        cache = WordListCache(["/usr/share/dict/words"])
        pool = DictionaryFilter(cache).filter(4, 8, required=4)
    """

    def __init__(self, cache: WordListCache) -> None:
        self._cache = cache

    @property
    def cache(self) -> WordListCache:
        return self._cache

    def filter(self, min_len: int, max_len: int, required: int = 1) -> tuple[str, ...]:
        """Return words whose length lies in ``[min_len, max_len]``.

        Raises:
            DictionaryEmptyError: No word qualifies.
            InsufficientWordsError: Some words qualify, fewer than *required*.
        """
        pool = tuple(w for w in self._cache.get() if min_len <= len(w) <= max_len)

        if not pool:
            raise DictionaryEmptyError(
                f"No suitable words found in the dictionary matching criteria "
                f"(length {min_len}-{max_len}, a-z only)."
            )
        if len(pool) < required:
            raise InsufficientWordsError(
                found=len(pool),
                required=required,
                min_length=min_len,
                max_length=max_len,
            )
        return pool
