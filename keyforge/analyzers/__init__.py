"""
KeyForge Analyzers
===================

The five strength estimators and the normalizer that maps their native
scales onto a shared 4-level verdict.
"""

from keyforge.analyzers.base import Estimator
from keyforge.analyzers.external import (
    ChecklistPolicyEstimator,
    HeuristicCrackabilityEstimator,
    NamedStrengthClassifier,
    RawEntropyEstimator,
)
from keyforge.analyzers.normalizer import StrengthNormalizer
from keyforge.analyzers.policy import PolicyEntropyEstimator

__all__ = [
    "ChecklistPolicyEstimator",
    "Estimator",
    "HeuristicCrackabilityEstimator",
    "NamedStrengthClassifier",
    "PolicyEntropyEstimator",
    "RawEntropyEstimator",
    "StrengthNormalizer",
]
