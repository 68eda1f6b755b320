"""
KeyForge Core Data Models
==========================

Pydantic models for secret generation and multi-source strength analysis.
Generation specs and analysis reports are immutable once built; the
per-estimator outcome is a tagged union so a success and a failure can
never be confused.

All models are serialisable to JSON for the report writer.

References:
    - NIST SP 800-63B (2017). Digital Identity Guidelines --
      Authentication and Lifecycle Management.
    - OWASP Authentication Cheat Sheet -- password complexity.
    - Pydantic v2 documentation -- discriminated unions.
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ===================================================================== #
#  Enumerations
# ===================================================================== #


class CharacterClassName(str, enum.Enum):
    """Named character classes, in canonical draw order."""

    LOWERCASE = "lowercase"
    UPPERCASE = "uppercase"
    DIGIT = "digit"
    SYMBOL = "symbol"
    EXTENDED = "extended"


class EstimatorKind(str, enum.Enum):
    """The closed set of strength estimators.

    POLICY_ENTROPY is computed locally; the other four are fed from the
    single external helper response.
    """

    POLICY_ENTROPY = "policy_entropy"
    HEURISTIC_CRACKABILITY = "heuristic_crackability"
    CHECKLIST_POLICY = "checklist_policy"
    NAMED_STRENGTH = "named_strength"
    RAW_ENTROPY = "raw_entropy"

    @property
    def display_name(self) -> str:
        return _KIND_DISPLAY[self.value]

    @property
    def is_external(self) -> bool:
        return self is not EstimatorKind.POLICY_ENTROPY


_KIND_DISPLAY: dict[str, str] = {
    "policy_entropy": "Basic Policy & Entropy",
    "heuristic_crackability": "Zxcvbn",
    "checklist_policy": "OWASP Checklist",
    "named_strength": "TAI Strength",
    "raw_entropy": "Raw Entropy",
}


# ===================================================================== #
#  Generation Models
# ===================================================================== #


class CharacterClass(BaseModel):
    """A named alphabet.

    Attributes:
        name: Class identifier.
        alphabet: Ordered member code points; never empty.
    """

    model_config = ConfigDict(frozen=True)

    name: CharacterClassName
    alphabet: str = Field(..., min_length=1)

    def __contains__(self, char: object) -> bool:
        return isinstance(char, str) and len(char) == 1 and char in self.alphabet

    def __len__(self) -> int:
        return len(self.alphabet)


class GenerationSpec(BaseModel):
    """Random password request.

    Attributes:
        total_length: Requested output length in code points.
        classes: ASCII classes that must each appear at least once.
        guarantee_unicode: Add one mandatory extended character.
    """

    model_config = ConfigDict(frozen=True)

    total_length: int
    classes: frozenset[CharacterClassName] = Field(
        default_factory=lambda: frozenset(
            {
                CharacterClassName.LOWERCASE,
                CharacterClassName.UPPERCASE,
                CharacterClassName.DIGIT,
                CharacterClassName.SYMBOL,
            }
        )
    )
    guarantee_unicode: bool = True


class PassphraseSpec(BaseModel):
    """Word-based passphrase request."""

    model_config = ConfigDict(frozen=True)

    word_count: int = 4
    separator: str = "-"
    min_word_length: int = 4
    max_word_length: int = 8
    capitalize: bool = True
    append_digit: bool = True
    append_symbol: bool = True
    append_unicode: bool = True


# ===================================================================== #
#  Analysis Models
# ===================================================================== #


class Success(BaseModel):
    """Estimator produced a native score.

    Attributes:
        native_score: The estimator's own scale (int score, bool, tier code,
            or bits). Consumed only by the normalizer.
        details: Auxiliary estimator output kept for display.
    """

    model_config = ConfigDict(frozen=True)

    status: Literal["success"] = "success"
    native_score: Any = None
    details: dict[str, Any] = Field(default_factory=dict)


class Failure(BaseModel):
    """Estimator could not produce a score."""

    model_config = ConfigDict(frozen=True)

    status: Literal["failure"] = "failure"
    reason: str


Outcome = Annotated[Union[Success, Failure], Field(discriminator="status")]


class EstimatorResult(BaseModel):
    """Outcome of one estimator for one secret."""

    model_config = ConfigDict(frozen=True)

    estimator: EstimatorKind
    outcome: Outcome

    @property
    def ok(self) -> bool:
        return isinstance(self.outcome, Success)

    @classmethod
    def success(
        cls,
        estimator: EstimatorKind,
        native_score: Any,
        details: Optional[dict[str, Any]] = None,
    ) -> EstimatorResult:
        return cls(
            estimator=estimator,
            outcome=Success(native_score=native_score, details=details or {}),
        )

    @classmethod
    def failure(cls, estimator: EstimatorKind, reason: str) -> EstimatorResult:
        return cls(estimator=estimator, outcome=Failure(reason=reason))


class NormalizedVerdict(BaseModel):
    """Estimator output mapped onto the shared 4-level scale.

    Attributes:
        level: 0 (weakest) .. 3 (strongest).
        label: Fixed label for the level.
        recommendation: Fixed advice text for this estimator and level.
    """

    model_config = ConfigDict(frozen=True)

    level: int = Field(..., ge=0, le=3)
    label: str
    recommendation: str


class BackendResponse(BaseModel):
    """The single response of the external analysis helper.

    Exactly one of *payload* / *error* is meaningful: a failed call
    carries ``error`` and every external estimator reports it.
    """

    model_config = ConfigDict(frozen=True)

    payload: Optional[dict[str, Any]] = None
    error: Optional[str] = None

    @classmethod
    def failed(cls, reason: str) -> BackendResponse:
        return cls(payload=None, error=reason)


class AnalysisReport(BaseModel):
    """Aggregate result of one analysis call.

    Always contains one entry per :class:`EstimatorKind`; verdicts exist
    only for successful estimators.
    """

    model_config = ConfigDict(frozen=True)

    secret_length: int
    results: dict[EstimatorKind, EstimatorResult]
    verdicts: dict[EstimatorKind, NormalizedVerdict] = Field(default_factory=dict)

    @property
    def successes(self) -> list[EstimatorResult]:
        return [r for r in self.results.values() if r.ok]

    @property
    def failures(self) -> list[EstimatorResult]:
        return [r for r in self.results.values() if not r.ok]

    @property
    def success_count(self) -> int:
        return len(self.successes)


class BreachResult(BaseModel):
    """Outcome of a k-anonymity breach range query.

    Attributes:
        checked: The remote service answered.
        pwned: The full hash suffix was found in the returned range.
        count: Number of breaches the secret appeared in.
        prefix: Hash prefix that was sent (the only data that left the host).
        error: Transport or protocol error, when ``checked`` is false.
        verdict: Strength-style verdict for display.
    """

    model_config = ConfigDict(frozen=True)

    checked: bool
    pwned: bool = False
    count: int = 0
    prefix: str = ""
    error: Optional[str] = None
    verdict: Optional[NormalizedVerdict] = None


# ===================================================================== #
#  Engine Result
# ===================================================================== #


class SecretMode(str, enum.Enum):
    PASSWORD = "password"
    PASSPHRASE = "passphrase"
    ANALYSIS = "analysis"


class ForgeResult(BaseModel):
    """Everything one CLI invocation produced.

    Attributes:
        mode: How the secret was obtained.
        secret: The generated or supplied secret.
        analysis: Strength report, if analysis was requested.
        breach: Breach lookup outcome, if requested.
        started_at: UTC start time.
        duration_seconds: Wall-clock duration of the whole run.
    """

    mode: SecretMode
    secret: str
    analysis: Optional[AnalysisReport] = None
    breach: Optional[BreachResult] = None
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    duration_seconds: float = 0.0
