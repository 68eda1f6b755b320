"""
KeyForge Report Generator
==========================

Machine-readable JSON output for a :class:`ForgeResult`: the (masked)
secret, every estimator outcome with its normalized verdict, and the
breach lookup. Native estimator scores are kept under ``details`` for
tooling but never replace the verdict.

The secret is masked to its first and last character unless masking is
disabled in the ``[analysis]`` configuration section.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from keyforge import __version__
from keyforge.core.models import AnalysisReport, EstimatorKind, ForgeResult, Success


def mask_secret(secret: str) -> str:
    """Show the first and last character with asterisks in between."""
    if len(secret) <= 2:
        return "*" * len(secret)
    return secret[0] + "*" * (len(secret) - 2) + secret[-1]


class ForgeReportGenerator:
    """Builds and writes JSON reports.

    Usage::

        gen = ForgeReportGenerator(mask=True)
        gen.generate_json(result, Path("output/keyforge.json"))
        text = gen.render_json(result)
    """

    def __init__(self, *, mask: bool = True, version: str = __version__) -> None:
        self._mask = mask
        self._version = version

    def build(self, result: ForgeResult) -> dict[str, Any]:
        secret = mask_secret(result.secret) if self._mask else result.secret
        report = result.analysis

        data: dict[str, Any] = {
            "report_metadata": {
                "generated_at": datetime.now(timezone.utc).isoformat(),
                "tool": "keyforge",
                "mode": result.mode.value,
                "version": self._version,
            },
            "summary": self._summary(result, report),
            "secret": {
                "value": secret,
                "masked": self._mask,
                "length": len(result.secret),
            },
            "estimators": self._estimators(report) if report is not None else [],
            "breach": (
                result.breach.model_dump(mode="json") if result.breach is not None else None
            ),
        }
        return data

    def render_json(self, result: ForgeResult) -> str:
        return json.dumps(self.build(result), indent=2, ensure_ascii=False, default=str)

    def generate_json(self, result: ForgeResult, output_path: Path) -> Path:
        """Write the JSON report to *output_path* and return the path."""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.render_json(result), encoding="utf-8")
        return output_path

    # ------------------------------------------------------------------ #
    #  Builders
    # ------------------------------------------------------------------ #

    @staticmethod
    def _summary(result: ForgeResult, report: Optional[AnalysisReport]) -> dict[str, Any]:
        summary: dict[str, Any] = {
            "analyzed": report is not None,
            "breach_checked": result.breach is not None and result.breach.checked,
            "duration_seconds": result.duration_seconds,
        }
        if report is not None:
            levels = [v.level for v in report.verdicts.values()]
            summary.update(
                {
                    "estimators_total": len(report.results),
                    "estimators_succeeded": report.success_count,
                    "estimators_failed": len(report.failures),
                    "lowest_level": min(levels) if levels else None,
                }
            )
        if result.breach is not None and result.breach.checked:
            summary["pwned"] = result.breach.pwned
        return summary

    @staticmethod
    def _estimators(report: AnalysisReport) -> list[dict[str, Any]]:
        entries: list[dict[str, Any]] = []
        for kind in EstimatorKind:
            result = report.results.get(kind)
            if result is None:
                continue
            entry: dict[str, Any] = {
                "estimator": kind.value,
                "name": kind.display_name,
                "status": result.outcome.status,
            }
            if isinstance(result.outcome, Success):
                entry["details"] = result.outcome.details
                verdict = report.verdicts.get(kind)
                entry["verdict"] = verdict.model_dump() if verdict is not None else None
            else:
                entry["reason"] = result.outcome.reason
            entries.append(entry)
        return entries
