"""
KeyForge Engine
================

Facade over the generator, dictionary cache, analysis orchestrator and
breach checker. The CLI talks only to :class:`ForgeEngine`; the engine
turns configuration into concrete components and keeps the word-list
caches alive across calls.

Architecture follows the Facade pattern (Gamma et al., 1994).

References:
    - Gamma, E., Helm, R., Johnson, R., & Vlissides, J. (1994).
      Design Patterns: Elements of Reusable Object-Oriented Software.
"""

from __future__ import annotations

import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

import httpx

from keyforge.collectors.backends import AnalysisBackend, build_backend
from keyforge.collectors.breach import BreachChecker
from keyforge.core.models import (
    AnalysisReport,
    BreachResult,
    ForgeResult,
    PassphraseSpec,
    SecretMode,
)
from keyforge.core.orchestrator import AnalysisOrchestrator
from keyforge.generators.dictionary import DictionaryFilter, WordListCache
from keyforge.generators.secret import SecretGenerator, password_spec
from shared.config import ForgeConfig
from shared.logger import ForgeLogger, configure_logging


class ForgeEngine:
    """Orchestrates generation, analysis and breach lookups.

    Usage::

        engine = ForgeEngine()
        password = engine.generate_password(length=24)
        report = await engine.analyze(password)
        result = await engine.run(password, SecretMode.PASSWORD, breach=True)

    Attributes:
        config: KeyForge configuration instance.
        logger: Logger for the engine.
    """

    def __init__(
        self,
        config: Optional[ForgeConfig] = None,
        *,
        generator: Optional[SecretGenerator] = None,
        backend: Optional[AnalysisBackend] = None,
        breach_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config or ForgeConfig()
        settings = self.config.global_settings
        configure_logging(
            "DEBUG" if settings.debug else settings.log_level,
            log_file=settings.log_file,
            json_logs=settings.log_json,
        )
        self.logger = ForgeLogger("engine")

        self._generator = generator or SecretGenerator()
        self._backend = backend
        self._breach_transport = breach_transport
        self._orchestrator: Optional[AnalysisOrchestrator] = None

        self._caches: dict[tuple[tuple[str, ...], bool], WordListCache] = {}
        self._caches_lock = threading.Lock()

    # ------------------------------------------------------------------ #
    #  Generation
    # ------------------------------------------------------------------ #

    def generate_password(
        self,
        length: Optional[int] = None,
        *,
        lowercase: bool = True,
        uppercase: bool = True,
        digits: bool = True,
        symbols: Optional[bool] = None,
        unicode: Optional[bool] = None,
    ) -> str:
        """Generate a random password; unset options use configured defaults."""
        gen_cfg = self.config.generator
        spec = password_spec(
            length if length is not None else gen_cfg.default_length,
            lowercase=lowercase,
            uppercase=uppercase,
            digits=digits,
            symbols=gen_cfg.symbols_enabled if symbols is None else symbols,
            unicode=gen_cfg.add_unicode if unicode is None else unicode,
        )
        with self.logger.operation("generate_password"):
            password = self._generator.generate_password(spec)
            self.logger.info("Password generated", length=len(password))
        return password

    def generate_passphrase(
        self,
        *,
        word_count: Optional[int] = None,
        separator: Optional[str] = None,
        min_word_length: Optional[int] = None,
        max_word_length: Optional[int] = None,
        capitalize: Optional[bool] = None,
        append_digit: Optional[bool] = None,
        append_symbol: Optional[bool] = None,
        append_unicode: Optional[bool] = None,
        dictionary_paths: Optional[Sequence[str | Path]] = None,
    ) -> str:
        """Generate a passphrase; unset options use configured defaults."""
        gen_cfg = self.config.generator

        def pick(value, default):
            return default if value is None else value

        spec = PassphraseSpec(
            word_count=pick(word_count, gen_cfg.word_count),
            separator=pick(separator, gen_cfg.separator),
            min_word_length=pick(min_word_length, gen_cfg.min_word_length),
            max_word_length=pick(max_word_length, gen_cfg.max_word_length),
            capitalize=pick(capitalize, gen_cfg.capitalize),
            append_digit=pick(append_digit, gen_cfg.append_digit),
            append_symbol=pick(append_symbol, gen_cfg.append_symbol),
            append_unicode=pick(append_unicode, gen_cfg.append_unicode),
        )
        paths = dictionary_paths or gen_cfg.dictionary_paths
        dictionary = DictionaryFilter(self.word_cache(paths))

        with self.logger.operation("generate_passphrase"):
            passphrase = self._generator.generate_passphrase(spec, dictionary)
            self.logger.info(
                "Passphrase generated",
                words=spec.word_count,
                length=len(passphrase),
            )
        return passphrase

    def word_cache(self, paths: Sequence[str | Path]) -> WordListCache:
        """Return the cache for *paths*, creating it on first use."""
        key = (tuple(str(p) for p in paths), self.config.generator.transliterate)
        with self._caches_lock:
            cache = self._caches.get(key)
            if cache is None:
                cache = WordListCache(
                    list(key[0]),
                    transliterate=self.config.generator.transliterate,
                )
                self._caches[key] = cache
            return cache

    # ------------------------------------------------------------------ #
    #  Analysis
    # ------------------------------------------------------------------ #

    @property
    def orchestrator(self) -> AnalysisOrchestrator:
        if self._orchestrator is None:
            backend = self._backend or build_backend(self.config.analysis)
            self._orchestrator = AnalysisOrchestrator(
                backend,
                timeout=self.config.analysis.timeout,
            )
        return self._orchestrator

    async def analyze(self, secret: str) -> AnalysisReport:
        """Run every strength estimator against *secret*."""
        with self.logger.timed("strength analysis"):
            return await self.orchestrator.analyze(secret)

    async def check_breach(self, secret: str) -> BreachResult:
        """Look *secret* up in the breach corpus (k-anonymity)."""
        async with BreachChecker(
            self.config.breach,
            transport=self._breach_transport,
        ) as checker:
            return await checker.check(secret)

    async def run(
        self,
        secret: str,
        mode: SecretMode,
        *,
        analyze: bool = True,
        breach: bool = False,
    ) -> ForgeResult:
        """Analyse and/or breach-check *secret* and bundle the outcome."""
        start = time.monotonic()
        started_at = datetime.now(timezone.utc)

        report = await self.analyze(secret) if analyze else None
        breach_result = await self.check_breach(secret) if breach else None

        return ForgeResult(
            mode=mode,
            secret=secret,
            analysis=report,
            breach=breach_result,
            started_at=started_at,
            duration_seconds=round(time.monotonic() - start, 3),
        )
