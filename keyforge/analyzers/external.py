"""
External Estimators
====================

Four estimators whose scores come from the single analysis-helper
response. Each one owns a section (or, for raw entropy, two sections) of
the helper's JSON object and validates it with a pydantic model before
trusting any field.

Helper payload layout::

    {
      "zxcvbn":         {"score": 0..4, "feedback": {...}, ...},
      "owasp_npm":      {"strong": bool, "errors": [...], ...},
      "tai":            {"strengthCode": "STRONG", ...},
      "fast_entropy":   {"shannonEntropyBits": 61.2},
      "string_entropy": {"shannonEntropyBits": 58.0}
    }

Any section may be absent or replaced by ``{"error": "..."}``; the
owning estimator then reports a failure and the others are unaffected.

References:
    - Wheeler, D. L. (2016). zxcvbn: Low-Budget Password Strength
      Estimation. USENIX Security.
    - OWASP Password Strength Test (owasp-password-strength-test).
    - tai-password-strength -- trigraph and NIST entropy classifier.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, ValidationError

from keyforge.analyzers.base import Estimator
from keyforge.core.errors import EstimatorFailure
from keyforge.core.models import BackendResponse, EstimatorKind, EstimatorResult

# Payload keys
ZXCVBN_KEY = "zxcvbn"
OWASP_KEY = "owasp_npm"
TAI_KEY = "tai"
FAST_ENTROPY_KEY = "fast_entropy"
STRING_ENTROPY_KEY = "string_entropy"

PAYLOAD_KEYS: tuple[str, ...] = (
    ZXCVBN_KEY,
    OWASP_KEY,
    TAI_KEY,
    FAST_ENTROPY_KEY,
    STRING_ENTROPY_KEY,
)


# ===================================================================== #
#  Section Models
# ===================================================================== #


class _Section(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ZxcvbnFeedback(_Section):
    warning: Optional[str] = ""
    suggestions: list[str] = Field(default_factory=list)


class ZxcvbnSection(_Section):
    """Heuristic crackability output.

    Attributes:
        score: 0 (too guessable) .. 4 (very unguessable).
        guesses_log10: Estimated guesses, log10.
        feedback: Warning and suggestions.
        crack_times_display: Human-readable crack times per attack scenario.
    """

    score: StrictInt = Field(..., ge=0, le=4)
    guesses_log10: Optional[float] = None
    feedback: ZxcvbnFeedback = Field(default_factory=ZxcvbnFeedback)
    crack_times_display: dict[str, str] = Field(default_factory=dict)


class OwaspSection(_Section):
    """OWASP checklist output; error lists are optional."""

    strong: StrictBool
    errors: Optional[list[str]] = None
    required_test_errors: list[str] = Field(default_factory=list, alias="requiredTestErrors")
    optional_test_errors: list[str] = Field(default_factory=list, alias="optionalTestErrors")
    warnings: Optional[list[str]] = None
    is_passphrase: Optional[bool] = Field(default=None, alias="isPassphrase")


class TaiSection(_Section):
    """Named strength classifier output."""

    strength_code: StrictStr = Field(..., alias="strengthCode")
    strength_meaning: Optional[str] = Field(default=None, alias="strengthMeaning")
    charsets: dict[str, bool] = Field(default_factory=dict)
    nist_entropy_bits: Optional[float] = Field(default=None, alias="nistEntropyBits")
    shannon_entropy_bits: Optional[float] = Field(default=None, alias="shannonEntropyBits")
    trigraph_entropy_bits: Optional[float] = Field(default=None, alias="trigraphEntropyBits")
    common_password: Optional[bool] = Field(default=None, alias="commonPassword")


class EntropySection(_Section):
    shannon_entropy_bits: float = Field(..., ge=0, alias="shannonEntropyBits")


# ===================================================================== #
#  Shared Parsing
# ===================================================================== #


def parse_section(payload: dict[str, Any], key: str, model: type[BaseModel]) -> Any:
    """Validate ``payload[key]`` against *model*.

    Raises:
        EstimatorFailure: The section is missing, carries an ``error`` key,
            or fails validation.
    """
    if key not in payload or payload[key] is None:
        raise EstimatorFailure(f"'{key}' missing from helper output")

    section = payload[key]
    if isinstance(section, dict) and "error" in section:
        message = str(section["error"])
        details = section.get("details")
        if details:
            message = f"{message}: {details}"
        raise EstimatorFailure(message)

    try:
        return model.model_validate(section)
    except ValidationError as exc:
        raise EstimatorFailure(f"unparseable '{key}' section: {_first_error(exc)}") from exc


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    loc = ".".join(str(p) for p in first.get("loc", ())) or "<root>"
    more = f" (+{len(errors) - 1} more)" if len(errors) > 1 else ""
    return f"{loc}: {first.get('msg', 'invalid')}{more}"


class ExternalEstimator(Estimator):
    """Base for estimators fed from the helper response."""

    def _evaluate(
        self,
        secret: str,
        response: Optional[BackendResponse],
    ) -> EstimatorResult:
        if response is None:
            return EstimatorResult.failure(self.kind, "no helper response")
        if response.error is not None:
            return EstimatorResult.failure(self.kind, response.error)

        try:
            return self._from_payload(response.payload or {})
        except EstimatorFailure as exc:
            return EstimatorResult.failure(self.kind, str(exc))

    def _from_payload(self, payload: dict[str, Any]) -> EstimatorResult:
        raise NotImplementedError


# ===================================================================== #
#  Estimators
# ===================================================================== #


class HeuristicCrackabilityEstimator(ExternalEstimator):
    """zxcvbn-style pattern matching score (0..4)."""

    kind = EstimatorKind.HEURISTIC_CRACKABILITY

    def _from_payload(self, payload: dict[str, Any]) -> EstimatorResult:
        section: ZxcvbnSection = parse_section(payload, ZXCVBN_KEY, ZxcvbnSection)
        return EstimatorResult.success(
            self.kind,
            native_score=section.score,
            details={
                "score": section.score,
                "warning": section.feedback.warning or "",
                "suggestions": list(section.feedback.suggestions),
                "guesses_log10": section.guesses_log10,
                "crack_times_display": dict(section.crack_times_display),
            },
        )


class ChecklistPolicyEstimator(ExternalEstimator):
    """OWASP rule checklist: a boolean verdict plus failed-test messages."""

    kind = EstimatorKind.CHECKLIST_POLICY

    def _from_payload(self, payload: dict[str, Any]) -> EstimatorResult:
        section: OwaspSection = parse_section(payload, OWASP_KEY, OwaspSection)

        errors = (
            section.errors
            if section.errors is not None
            else section.required_test_errors + section.optional_test_errors
        )
        warnings = section.warnings or []
        return EstimatorResult.success(
            self.kind,
            native_score=section.strong,
            details={
                "strong": section.strong,
                "errors": list(errors),
                "warnings": list(warnings),
                "required_test_errors": list(section.required_test_errors),
                "optional_test_errors": list(section.optional_test_errors),
                "errors_count": len(errors),
                "warnings_count": len(warnings),
                "is_passphrase": section.is_passphrase,
            },
        )


class NamedStrengthClassifier(ExternalEstimator):
    """TAI named tier (VERY_WEAK .. VERY_STRONG)."""

    kind = EstimatorKind.NAMED_STRENGTH

    def _from_payload(self, payload: dict[str, Any]) -> EstimatorResult:
        section: TaiSection = parse_section(payload, TAI_KEY, TaiSection)
        return EstimatorResult.success(
            self.kind,
            native_score=section.strength_code,
            details={
                "strength_code": section.strength_code,
                "strength_meaning": section.strength_meaning or section.strength_code,
                "charsets": dict(section.charsets),
                "nist_entropy_bits": section.nist_entropy_bits,
                "shannon_entropy_bits": section.shannon_entropy_bits,
                "trigraph_entropy_bits": section.trigraph_entropy_bits,
                "common_password": section.common_password,
            },
        )


class RawEntropyEstimator(ExternalEstimator):
    """Raw entropy formulas; the weakest reported figure is the score."""

    kind = EstimatorKind.RAW_ENTROPY

    formulas: tuple[str, ...] = (FAST_ENTROPY_KEY, STRING_ENTROPY_KEY)

    def _from_payload(self, payload: dict[str, Any]) -> EstimatorResult:
        bits: dict[str, float] = {}
        problems: dict[str, str] = {}
        for key in self.formulas:
            try:
                section: EntropySection = parse_section(payload, key, EntropySection)
            except EstimatorFailure as exc:
                problems[key] = str(exc)
                continue
            bits[key] = section.shannon_entropy_bits

        if not bits:
            raise EstimatorFailure("; ".join(problems.values()))

        return EstimatorResult.success(
            self.kind,
            native_score=min(bits.values()),
            details={"bits": bits, "unavailable": problems},
        )
