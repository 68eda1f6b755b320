"""
KeyForge Collectors
====================

Boundaries to the outside world: the analysis-helper transports and the
breach range lookup.
"""

from keyforge.collectors.backends import (
    AnalysisBackend,
    LibraryBackend,
    SubprocessBackend,
    build_backend,
)
from keyforge.collectors.breach import BreachChecker

__all__ = [
    "AnalysisBackend",
    "BreachChecker",
    "LibraryBackend",
    "SubprocessBackend",
    "build_backend",
]
