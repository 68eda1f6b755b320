"""
Basic Policy & Entropy Estimator
=================================

Local, dependency-free strength estimate combining a simple composition
policy with a combinatorial entropy figure.

Policy rules (six, one point each):

1. length >= 10 code points
2. contains a lowercase ASCII letter
3. contains an uppercase ASCII letter
4. contains an ASCII digit
5. contains a symbol from the generator's symbol set
6. contains any non-ASCII code point

The baseline is met when the length rule passes and at least three of
the five character classes are present.

Entropy is the combinatorial estimate ``L * log2(N)`` where ``N`` is the
size of the union of the detected classes' alphabets. A non-ASCII
character is credited with the extended-character table as its alphabet,
which is conservative for hand-typed input from a larger repertoire.

References:
    - OWASP Authentication Cheat Sheet -- password complexity.
    - NIST SP 800-63B (2017), Appendix A -- strength of memorized secrets.
    - Shannon, C. E. (1948). A Mathematical Theory of Communication.
"""

from __future__ import annotations

import math
import string
from typing import Any, Optional

from keyforge.analyzers.base import Estimator
from keyforge.core.models import BackendResponse, EstimatorKind, EstimatorResult
from keyforge.generators.charsets import EXTENDED_ALPHABET, SYMBOLS

MIN_LENGTH = 10
MIN_CLASSES = 3
TOTAL_RULES = 6

_PASS_MESSAGE = "Passes basic OWASP-like policy."
_FAIL_MESSAGE = (
    "Fails basic OWASP-like policy "
    "(min length 10 and at least 3 character types)."
)

_LOWER = frozenset(string.ascii_lowercase)
_UPPER = frozenset(string.ascii_uppercase)
_DIGIT = frozenset(string.digits)
_SYMBOL = frozenset(SYMBOLS)


class PolicyEntropyEstimator(Estimator):
    """Composition-policy and entropy estimator computed in-process.

    Usage::

        est = PolicyEntropyEstimator()
        est.measure("Password1!")["rules_passed"]   # 5
        est.evaluate("Password1!").outcome.native_score
    """

    kind = EstimatorKind.POLICY_ENTROPY

    def measure(self, secret: str) -> dict[str, Any]:
        """Compute the policy and entropy figures for *secret*.

        Unlike :meth:`evaluate` this may raise; the orchestrator treats an
        exception here as fatal.
        """
        length = len(secret)
        detected = {
            "lowercase": any(ch in _LOWER for ch in secret),
            "uppercase": any(ch in _UPPER for ch in secret),
            "digit": any(ch in _DIGIT for ch in secret),
            "symbol": any(ch in _SYMBOL for ch in secret),
            "unicode": any(ord(ch) > 0x7F for ch in secret),
        }
        distinct = sum(detected.values())
        rules_passed = int(length >= MIN_LENGTH) + distinct
        meets_baseline = length >= MIN_LENGTH and distinct >= MIN_CLASSES

        alphabet = self._alphabet(detected)
        entropy_bits = self._entropy(length, len(alphabet))

        return {
            "length": length,
            "classes_detected": detected,
            "distinct_classes": distinct,
            "rules_passed": rules_passed,
            "rules_total": TOTAL_RULES,
            "meets_baseline": meets_baseline,
            "compliance_message": _PASS_MESSAGE if meets_baseline else _FAIL_MESSAGE,
            "alphabet_size": len(alphabet),
            "entropy_bits": entropy_bits,
        }

    def result_from(self, measurement: dict[str, Any]) -> EstimatorResult:
        """Wrap a :meth:`measure` output as a successful result."""
        return EstimatorResult.success(
            self.kind,
            native_score=measurement["rules_passed"],
            details=measurement,
        )

    def _evaluate(
        self,
        secret: str,
        response: Optional[BackendResponse],
    ) -> EstimatorResult:
        return self.result_from(self.measure(secret))

    # ------------------------------------------------------------------ #
    #  Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _alphabet(detected: dict[str, bool]) -> frozenset[str]:
        chars: set[str] = set()
        if detected["lowercase"]:
            chars |= _LOWER
        if detected["uppercase"]:
            chars |= _UPPER
        if detected["digit"]:
            chars |= _DIGIT
        if detected["symbol"]:
            chars |= _SYMBOL
        if detected["unicode"]:
            chars |= set(EXTENDED_ALPHABET)
        return frozenset(chars)

    @staticmethod
    def _entropy(length: int, alphabet_size: int) -> float:
        if alphabet_size <= 1 or length == 0:
            return 0.0
        return round(length * math.log2(alphabet_size), 2)
