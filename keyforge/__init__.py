"""
KeyForge -- Secret Generator & Strength Analyzer
=================================================

Generates high-entropy passwords and word-based passphrases with
per-class inclusion guarantees, and evaluates any secret with several
independent strength estimators whose verdicts are normalized onto a
shared 4-level scale.

Modules:
    - keyforge.core.engine: Facade used by the CLI
    - keyforge.core.orchestrator: Multi-estimator analysis
    - keyforge.core.models: Pydantic data models
    - keyforge.generators: Random source, charsets, dictionary, generator
    - keyforge.analyzers: Strength estimators and normalizer
    - keyforge.collectors: Analysis helper transports and breach lookup
    - keyforge.output: Console and report output
    - keyforge.cli: Click-based command-line interface

References:
    - NIST SP 800-63B (2017). Digital Identity Guidelines.
    - Wheeler, D. L. (2016). zxcvbn: Low-Budget Password Strength
      Estimation. USENIX Security.
"""

__version__ = "1.0.0"
__tool_name__ = "keyforge"
