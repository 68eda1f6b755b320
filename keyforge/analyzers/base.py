"""
Estimator Base
===============

Every strength estimator is tagged with one :class:`EstimatorKind` and
exposes ``evaluate(secret, response=None)``. ``evaluate`` never raises:
anything that goes wrong inside an estimator is reported as a
:class:`~keyforge.core.models.Failure` outcome.
"""

from __future__ import annotations

from typing import ClassVar, Optional

from keyforge.core.models import BackendResponse, EstimatorKind, EstimatorResult
from shared.logger import ForgeLogger

logger = ForgeLogger("estimator")


class Estimator:
    """Base class for the five estimator variants."""

    kind: ClassVar[EstimatorKind]

    def evaluate(
        self,
        secret: str,
        response: Optional[BackendResponse] = None,
    ) -> EstimatorResult:
        try:
            return self._evaluate(secret, response)
        except Exception as exc:  # absorbed into the report
            logger.warning(
                "Estimator raised",
                estimator=self.kind.value,
                error=f"{type(exc).__name__}: {exc}",
            )
            return EstimatorResult.failure(self.kind, str(exc) or type(exc).__name__)

    def _evaluate(
        self,
        secret: str,
        response: Optional[BackendResponse],
    ) -> EstimatorResult:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value})"
