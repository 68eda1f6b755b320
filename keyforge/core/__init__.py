"""
KeyForge Core Module
=====================

Data models and the exception hierarchy shared by every KeyForge
component. The engine and orchestrator live in
:mod:`keyforge.core.engine` and :mod:`keyforge.core.orchestrator`.
"""

from keyforge.core.errors import ForgeError
from keyforge.core.models import (
    AnalysisReport,
    BackendResponse,
    BreachResult,
    CharacterClassName,
    EstimatorKind,
    EstimatorResult,
    ForgeResult,
    GenerationSpec,
    NormalizedVerdict,
    PassphraseSpec,
    SecretMode,
)

__all__ = [
    "AnalysisReport",
    "BackendResponse",
    "BreachResult",
    "CharacterClassName",
    "EstimatorKind",
    "EstimatorResult",
    "ForgeError",
    "ForgeResult",
    "GenerationSpec",
    "NormalizedVerdict",
    "PassphraseSpec",
    "SecretMode",
]
