"""
Analysis Orchestrator
======================

Runs every strength estimator against one secret and assembles an
:class:`AnalysisReport`.

Sequence:

1. The local policy estimator runs first. If it raises, nothing useful
   can be reported and :class:`OrchestratorUnavailableError` is raised.
2. Exactly one backend call is made under a deadline. Timeouts,
   transport errors and unexpected exceptions all collapse into a
   :class:`BackendResponse` carrying an error string; nothing is retried.
3. The response is fanned out to the four external estimators, each of
   which reports success or failure independently.
4. Successful results are normalized onto the 4-level scale.

The report always holds exactly one result per estimator kind.
"""

from __future__ import annotations

import asyncio
from typing import Mapping, Optional

from keyforge.analyzers.base import Estimator
from keyforge.analyzers.external import (
    ChecklistPolicyEstimator,
    HeuristicCrackabilityEstimator,
    NamedStrengthClassifier,
    RawEntropyEstimator,
)
from keyforge.analyzers.normalizer import StrengthNormalizer
from keyforge.analyzers.policy import PolicyEntropyEstimator
from keyforge.collectors.backends import AnalysisBackend
from keyforge.core.errors import BackendError, OrchestratorUnavailableError
from keyforge.core.models import (
    AnalysisReport,
    BackendResponse,
    EstimatorKind,
    EstimatorResult,
)
from shared.logger import ForgeLogger

logger = ForgeLogger("orchestrator")

TIMEOUT_REASON = "timeout"


def default_estimators() -> dict[EstimatorKind, Estimator]:
    """One instance of every estimator, keyed by kind."""
    estimators: list[Estimator] = [
        PolicyEntropyEstimator(),
        HeuristicCrackabilityEstimator(),
        ChecklistPolicyEstimator(),
        NamedStrengthClassifier(),
        RawEntropyEstimator(),
    ]
    return {e.kind: e for e in estimators}


class AnalysisOrchestrator:
    """Coordinates the local estimator, the backend call and normalization.

    Usage::

        orchestrator = AnalysisOrchestrator(LibraryBackend(), timeout=5.0)
        report = await orchestrator.analyze("Password1!")
    """

    def __init__(
        self,
        backend: AnalysisBackend,
        *,
        timeout: float = 10.0,
        normalizer: Optional[StrengthNormalizer] = None,
        estimators: Optional[Mapping[EstimatorKind, Estimator]] = None,
    ) -> None:
        self._backend = backend
        self._timeout = timeout
        self._normalizer = normalizer or StrengthNormalizer()
        self._estimators = dict(estimators or default_estimators())

        missing = [k.value for k in EstimatorKind if k not in self._estimators]
        if missing:
            raise ValueError(f"No estimator registered for: {', '.join(missing)}")

        policy = self._estimators[EstimatorKind.POLICY_ENTROPY]
        if not isinstance(policy, PolicyEntropyEstimator):
            raise TypeError("POLICY_ENTROPY must be served by PolicyEntropyEstimator")
        self._policy: PolicyEntropyEstimator = policy

    @property
    def backend(self) -> AnalysisBackend:
        return self._backend

    @property
    def timeout(self) -> float:
        return self._timeout

    async def analyze(self, secret: str) -> AnalysisReport:
        """Evaluate *secret* with every estimator.

        Raises:
            OrchestratorUnavailableError: The local policy estimator failed.
        """
        with logger.operation("analyze"):
            try:
                measurement = self._policy.measure(secret)
            except Exception as exc:
                raise OrchestratorUnavailableError(
                    f"local policy estimator failed: {exc}"
                ) from exc

            results: dict[EstimatorKind, EstimatorResult] = {
                EstimatorKind.POLICY_ENTROPY: self._policy.result_from(measurement),
            }

            response = await self._call_backend(secret)

            for kind, estimator in self._estimators.items():
                if kind is EstimatorKind.POLICY_ENTROPY:
                    continue
                results[kind] = estimator.evaluate(secret, response)

            # canonical order regardless of registration order
            ordered = {kind: results[kind] for kind in EstimatorKind}
            verdicts = self._normalizer.normalize_all(ordered.values())

            report = AnalysisReport(
                secret_length=len(secret),
                results=ordered,
                verdicts=verdicts,
            )
            logger.info(
                "Analysis complete",
                length=len(secret),
                succeeded=report.success_count,
                failed=len(report.failures),
            )
            return report

    async def _call_backend(self, secret: str) -> BackendResponse:
        with logger.timed(f"backend call ({self._backend.name})"):
            try:
                payload = await asyncio.wait_for(
                    self._backend.fetch(secret),
                    timeout=self._timeout,
                )
            except asyncio.TimeoutError:
                logger.warning("Backend call timed out", timeout=self._timeout)
                return BackendResponse.failed(TIMEOUT_REASON)
            except BackendError as exc:
                logger.warning("Backend call failed", error=str(exc))
                return BackendResponse.failed(str(exc))
            except Exception as exc:
                logger.exception("Unexpected backend failure", backend=self._backend.name)
                return BackendResponse.failed(f"{type(exc).__name__}: {exc}")

        if not isinstance(payload, dict):
            return BackendResponse.failed(
                f"backend returned {type(payload).__name__}, expected a JSON object"
            )
        return BackendResponse(payload=payload)
