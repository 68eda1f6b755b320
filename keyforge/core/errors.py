"""
KeyForge Exception Hierarchy
=============================

Every error KeyForge raises derives from :class:`ForgeError` so callers
(and the CLI) can catch the whole family in one place while still telling
the specific cases apart.

Generation errors are fatal to the generation call. Analysis errors are
absorbed into the report as per-estimator failures, except
:class:`OrchestratorUnavailableError`.
"""

from __future__ import annotations


class ForgeError(Exception):
    """Base class for all KeyForge errors."""


# ========================== Generation =====================================


class InvalidConfigurationError(ForgeError, ValueError):
    """Caller-supplied generation parameters violate a precondition
    (length below 1, no character class selected, inverted word bounds).
    """


class SelectionError(ForgeError):
    """No word could be selected because the candidate pool is empty."""


# ========================== Random Source ==================================


class RandomSourceError(ForgeError):
    """Misuse of :class:`~keyforge.generators.random_source.RandomSource`."""


class RangeError(RandomSourceError, ValueError):
    """Upper bound (or sample size) is not a positive integer."""


class EmptyInputError(RandomSourceError, IndexError):
    """Cannot draw from an empty sequence."""


# ========================== Dictionary =====================================


class DictionaryError(ForgeError):
    """Base class for word-source problems."""


class DictionaryUnavailableError(DictionaryError):
    """None of the configured dictionary files could be read."""


class DictionaryEmptyError(DictionaryError):
    """No word survives normalization and length filtering."""


class InsufficientWordsError(DictionaryError):
    """Some words qualify, but fewer than the passphrase needs.

    Distinguished from :class:`DictionaryEmptyError` so the caller can
    suggest loosening the length bounds instead of replacing the
    dictionary.
    """

    def __init__(
        self,
        found: int,
        required: int,
        min_length: int,
        max_length: int,
    ) -> None:
        self.found = found
        self.required = required
        self.min_length = min_length
        self.max_length = max_length
        super().__init__(
            f"Not enough suitable words in dictionary (need {required}, "
            f"found {found} matching {min_length}-{max_length} chars, a-z only). "
            f"Try widening the word length bounds or using a larger dictionary."
        )


# ========================== Analysis =======================================


class EstimatorFailure(ForgeError):
    """A single estimator could not produce a score.

    Always caught at the estimator boundary and recorded as a
    ``Failure`` outcome; never escapes an analysis call.
    """


class BackendError(EstimatorFailure):
    """The external analysis helper failed, returned nothing, or
    returned something that is not a JSON object.
    """


class OrchestratorUnavailableError(ForgeError):
    """The local policy estimator raised; the analysis cannot proceed."""


class BreachCheckError(ForgeError):
    """The breach range query could not be completed."""
