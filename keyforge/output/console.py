"""
KeyForge Console Output
========================

Rich-based renderers for generated secrets, per-estimator strength bars,
the basic-policy breakdown and the breach lookup.

Every estimator is drawn as a four-segment bar (Weak / Okay / Good /
Strong) with only the achieved segment lit, followed by its
recommendation. Failed estimators show their reason instead of a bar.

References:
    - Rich Library Documentation. https://rich.readthedocs.io/
"""

from __future__ import annotations

from typing import Any, Optional

from rich.panel import Panel
from rich.text import Text

from keyforge.analyzers.normalizer import LABELS
from keyforge.core.models import (
    AnalysisReport,
    BreachResult,
    EstimatorKind,
    EstimatorResult,
    Failure,
    ForgeResult,
    NormalizedVerdict,
    SecretMode,
    Success,
)
from keyforge.generators.charsets import EXTENDED_CHARACTERS
from shared.console import ForgeConsole


# ===================================================================== #
#  Colour Maps
# ===================================================================== #

_LEVEL_STYLES: tuple[str, str, str, str] = (
    "forge.level0",
    "forge.level1",
    "forge.level2",
    "forge.level3",
)

_SEGMENT_WIDTH = 10


class ForgeConsoleOutput:
    """Console output formatters for KeyForge results.

    Usage::

        output = ForgeConsoleOutput(ForgeConsole())
        output.display_result(result)
    """

    def __init__(self, console: Optional[ForgeConsole] = None) -> None:
        self.console = console or ForgeConsole()
        self._rich = self.console.rich

    # ------------------------------------------------------------------ #
    #  Full result
    # ------------------------------------------------------------------ #

    def display_result(self, result: ForgeResult) -> None:
        """Render everything a single command produced."""
        if result.mode is not SecretMode.ANALYSIS:
            self.display_secret(result.secret, result.mode)
        if result.analysis is not None:
            self.display_analysis(result.analysis)
        if result.breach is not None:
            self.display_breach(result.breach)
        self.console.blank()
        self.console.info(f"Completed in {result.duration_seconds:.2f}s")

    # ------------------------------------------------------------------ #
    #  Generated secret
    # ------------------------------------------------------------------ #

    def display_secret(self, secret: str, mode: SecretMode) -> None:
        title = "Generated Passphrase" if mode is SecretMode.PASSPHRASE else "Generated Password"
        self.console.section(title)

        body = Text(secret, style="bold bright_white")
        extended = [EXTENDED_CHARACTERS[ch] for ch in dict.fromkeys(secret) if ch in EXTENDED_CHARACTERS]
        subtitle = f"{len(secret)} characters"
        if extended:
            subtitle += "  |  includes " + ", ".join(extended)

        self._rich.print(
            Panel(body, title=title, subtitle=subtitle, border_style="bright_cyan", padding=(1, 2))
        )

    # ------------------------------------------------------------------ #
    #  Strength analysis
    # ------------------------------------------------------------------ #

    def display_analysis(self, report: AnalysisReport) -> None:
        self.console.section("Strength Analysis")

        for kind in EstimatorKind:
            result = report.results.get(kind)
            if result is None:
                continue
            self._display_estimator(result, report.verdicts.get(kind))

        policy = report.results.get(EstimatorKind.POLICY_ENTROPY)
        if policy is not None and isinstance(policy.outcome, Success):
            self.display_policy_details(policy.outcome.details)

        total = len(report.results)
        message = f"{report.success_count}/{total} estimators produced a verdict"
        if report.success_count == total:
            self.console.success(message)
        else:
            self.console.warning(message)

    def _display_estimator(
        self,
        result: EstimatorResult,
        verdict: Optional[NormalizedVerdict],
    ) -> None:
        title = result.estimator.display_name
        outcome = result.outcome

        if isinstance(outcome, Failure) or verdict is None:
            reason = outcome.reason if isinstance(outcome, Failure) else "no verdict"
            self._rich.print(
                Panel(
                    Text(f"Unavailable: {reason}", style="forge.error"),
                    title=title,
                    border_style="red",
                )
            )
            return

        body = Text()
        body.append_text(self.strength_bar(verdict.level))
        body.append("\n")
        body.append(verdict.recommendation, style=_LEVEL_STYLES[verdict.level])

        extra = self._estimator_summary(result.estimator, outcome.details)
        if extra:
            body.append("\n")
            body.append(extra, style="forge.dim")

        self._rich.print(Panel(body, title=title, border_style="cyan"))

    @staticmethod
    def strength_bar(level: int) -> Text:
        """Four segments, only the achieved level lit."""
        bar = Text()
        for i, label in enumerate(LABELS):
            if i == level:
                bar.append(label.upper().center(_SEGMENT_WIDTH), style=_LEVEL_STYLES[level])
            else:
                bar.append(" " * _SEGMENT_WIDTH, style="on grey23")
            if i < len(LABELS) - 1:
                bar.append(" ")
        return bar

    @staticmethod
    def _estimator_summary(kind: EstimatorKind, details: dict[str, Any]) -> str:
        if kind is EstimatorKind.HEURISTIC_CRACKABILITY:
            parts = []
            if details.get("warning"):
                parts.append(f"Warning: {details['warning']}")
            for suggestion in details.get("suggestions", []):
                parts.append(f"Suggestion: {suggestion}")
            offline = details.get("crack_times_display", {}).get(
                "offline_slow_hashing_1e4_per_second"
            )
            if offline:
                parts.append(f"Offline slow-hash crack time: {offline}")
            return "\n".join(parts)
        if kind is EstimatorKind.CHECKLIST_POLICY:
            return "\n".join(f"- {e}" for e in details.get("errors", []))
        if kind is EstimatorKind.NAMED_STRENGTH:
            meaning = details.get("strength_meaning")
            return f"Tier: {meaning}" if meaning else ""
        if kind is EstimatorKind.RAW_ENTROPY:
            bits = details.get("bits", {})
            return "  ".join(f"{name}: {value:.2f} bits" for name, value in bits.items())
        return ""

    def display_policy_details(self, details: dict[str, Any]) -> None:
        rows: list[tuple[str, str]] = [("Length", str(details.get("length", 0)))]
        for name, present in details.get("classes_detected", {}).items():
            rows.append(
                (
                    f"{name.title()} detected",
                    "[green]Yes[/green]" if present else "[red]No[/red]",
                )
            )
        rows.extend(
            [
                (
                    "Rules passed",
                    f"{details.get('rules_passed', 0)}/{details.get('rules_total', 6)}",
                ),
                ("Compliance", str(details.get("compliance_message", ""))),
                ("Alphabet size", str(details.get("alphabet_size", 0))),
                ("Theoretical entropy", f"{details.get('entropy_bits', 0.0):.2f} bits"),
            ]
        )

        self.console.properties("Basic Policy & Entropy", rows)

    # ------------------------------------------------------------------ #
    #  Breach lookup
    # ------------------------------------------------------------------ #

    def display_breach(self, result: BreachResult) -> None:
        self.console.section("Breach Check (k-anonymity)")

        if not result.checked:
            status = Text(
                f"Error: Could not check breach status. {result.error or ''}".strip(),
                style="forge.warning",
            )
        elif result.pwned:
            plural = "es" if result.count > 1 else ""
            status = Text(
                f"Warning: Found in {result.count:,} known data breach{plural}!",
                style="forge.error",
            )
        else:
            status = Text(
                "Good: Not found in any known data breaches.",
                style="forge.success",
            )

        body = Text()
        body.append_text(status)
        if result.verdict is not None:
            body.append("\n")
            body.append(result.verdict.recommendation, style=_LEVEL_STYLES[result.verdict.level])
        body.append("\n")
        body.append(f"Hash prefix sent: {result.prefix}", style="forge.dim")

        self._rich.print(Panel(body, title="Have I Been Pwned", border_style="cyan"))
