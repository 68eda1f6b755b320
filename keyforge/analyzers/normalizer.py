"""
Strength Normalizer
====================

Maps each estimator's native scale onto one 4-level ordinal scale so the
results can be compared and rendered side by side:

    =====  ======  ===========================================
    Level  Label   Meaning
    =====  ======  ===========================================
    0      Weak    Avoid
    1      Okay    Usable only with caution / needs improving
    2      Good    Acceptable
    3      Strong  Recommended
    =====  ======  ===========================================

Dispatch is a table keyed by :class:`EstimatorKind`; the normalizer
refuses to construct if any kind is missing from the table.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Optional

from keyforge.core.models import (
    EstimatorKind,
    EstimatorResult,
    NormalizedVerdict,
    Success,
)

LABELS: tuple[str, str, str, str] = ("Weak", "Okay", "Good", "Strong")

TAI_LEVELS: dict[str, int] = {
    "VERY_WEAK": 0,
    "WEAK": 1,
    "REASONABLE": 2,
    "MEDIUM": 2,
    "STRONG": 3,
    "VERY_STRONG": 3,
}

# Raw entropy thresholds in bits (< 35, < 50, < 70, otherwise)
ENTROPY_THRESHOLDS: tuple[float, float, float] = (35.0, 50.0, 70.0)

RECOMMENDATIONS: dict[EstimatorKind, tuple[str, str, str, str]] = {
    EstimatorKind.POLICY_ENTROPY: (
        "Avoid (Fails basic policy)",
        "Passable, consider improving (Basic policy)",
        "Good (Meets most basic criteria)",
        "Excellent (Meets all basic criteria)",
    ),
    EstimatorKind.HEURISTIC_CRACKABILITY: (
        "Avoid (Zxcvbn score: Very Weak)",
        "Avoid (Zxcvbn score: Weak)",
        "Usable with caution (Zxcvbn score: Fair)",
        "Good to use (Zxcvbn score: Strong)",
    ),
    EstimatorKind.CHECKLIST_POLICY: (
        "Avoid (Fails OWASP npm tests)",
        "Consider improving (Fails few OWASP npm tests)",
        "Good (Passes OWASP npm tests, but has warnings)",
        "Excellent (Passes all OWASP npm tests)",
    ),
    EstimatorKind.NAMED_STRENGTH: (
        "Avoid (TAI: Very Weak)",
        "Not Recommended (TAI: Weak)",
        "Usable with caution (TAI: Reasonable)",
        "Good to use (TAI: Strong)",
    ),
    EstimatorKind.RAW_ENTROPY: (
        "Avoid (Raw entropy below 35 bits)",
        "Usable with caution (Raw entropy below 50 bits)",
        "Good to use (Raw entropy below 70 bits)",
        "Excellent (Raw entropy of 70 bits or more)",
    ),
}


# ===================================================================== #
#  Level Functions
# ===================================================================== #


def heuristic_level(score: int, details: Mapping[str, Any]) -> int:
    if score >= 3:
        return 3
    return max(0, int(score))


def policy_level(rules_passed: int, details: Mapping[str, Any]) -> int:
    if rules_passed < 3 or not details.get("meets_baseline", False):
        return 0
    if rules_passed == 3:
        return 1
    if rules_passed == 4:
        return 2
    return 3


def named_level(code: str, details: Mapping[str, Any]) -> int:
    return TAI_LEVELS.get(code, 0)


def checklist_level(strong: bool, details: Mapping[str, Any]) -> int:
    warnings = int(details.get("warnings_count", len(details.get("warnings", ()))))
    errors = int(details.get("errors_count", len(details.get("errors", ()))))
    if strong and warnings == 0:
        return 3
    if strong:
        return 2
    if 0 < errors <= 2:
        return 1
    return 0


def entropy_level(bits: float, details: Mapping[str, Any]) -> int:
    for level, threshold in enumerate(ENTROPY_THRESHOLDS):
        if bits < threshold:
            return level
    return 3


LevelFn = Callable[[Any, Mapping[str, Any]], int]

LEVEL_FUNCTIONS: dict[EstimatorKind, LevelFn] = {
    EstimatorKind.POLICY_ENTROPY: policy_level,
    EstimatorKind.HEURISTIC_CRACKABILITY: heuristic_level,
    EstimatorKind.CHECKLIST_POLICY: checklist_level,
    EstimatorKind.NAMED_STRENGTH: named_level,
    EstimatorKind.RAW_ENTROPY: entropy_level,
}


# ===================================================================== #
#  Normalizer
# ===================================================================== #


class StrengthNormalizer:
    """Converts successful estimator results into :class:`NormalizedVerdict`.

    Usage::

        normalizer = StrengthNormalizer()
        verdict = normalizer.normalize(result)   # None for a Failure
    """

    def __init__(
        self,
        levels: Optional[Mapping[EstimatorKind, LevelFn]] = None,
        recommendations: Optional[Mapping[EstimatorKind, tuple[str, str, str, str]]] = None,
    ) -> None:
        self._levels = dict(levels or LEVEL_FUNCTIONS)
        self._recommendations = dict(recommendations or RECOMMENDATIONS)

        for table_name, table in (
            ("level", self._levels),
            ("recommendation", self._recommendations),
        ):
            missing = [k.value for k in EstimatorKind if k not in table]
            if missing:
                raise ValueError(
                    f"{table_name} table does not cover estimator kinds: {', '.join(missing)}"
                )

    def normalize(self, result: EstimatorResult) -> Optional[NormalizedVerdict]:
        outcome = result.outcome
        if not isinstance(outcome, Success):
            return None

        level = self._levels[result.estimator](outcome.native_score, outcome.details)
        level = min(3, max(0, level))
        return self.verdict(result.estimator, level)

    def normalize_all(
        self,
        results: Iterable[EstimatorResult],
    ) -> dict[EstimatorKind, NormalizedVerdict]:
        verdicts: dict[EstimatorKind, NormalizedVerdict] = {}
        for result in results:
            verdict = self.normalize(result)
            if verdict is not None:
                verdicts[result.estimator] = verdict
        return verdicts

    def verdict(self, kind: EstimatorKind, level: int) -> NormalizedVerdict:
        """Build the fixed verdict for *kind* at *level*."""
        return NormalizedVerdict(
            level=level,
            label=LABELS[level],
            recommendation=self._recommendations[kind][level],
        )
