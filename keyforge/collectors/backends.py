"""
Analysis Backends
==================

Transports that reach the external strength estimators. The orchestrator
makes exactly one ``fetch`` call per analysis and fans the resulting
payload out to every external estimator, so a backend only has to return
a JSON object keyed by section name.

Two transports are provided:

* :class:`SubprocessBackend` runs an external helper (by default a Node.js
  script wrapping tai-password-strength, owasp-password-strength-test and
  two entropy formulas) with the secret as its final argument and reads a
  single JSON object from stdout. Optionally the ``zxcvbn`` section is
  computed in-process when the helper does not produce one.
* :class:`LibraryBackend` calls the ``zxcvbn`` Python package directly and
  produces only the ``zxcvbn`` section.

Both raise :class:`~keyforge.core.errors.BackendError` for a total
failure. Timeouts are imposed by the caller; on cancellation the
subprocess transport kills and reaps its child.
"""

from __future__ import annotations

import asyncio
import json
import math
from typing import Any, Optional, Sequence

from zxcvbn import zxcvbn

from keyforge.core.errors import BackendError, InvalidConfigurationError
from keyforge.analyzers.external import ZXCVBN_KEY
from shared.config import AnalysisConfig
from shared.logger import ForgeLogger

logger = ForgeLogger("backend")

# stderr is kept only for diagnostics; bound it
_STDERR_LIMIT = 500


class AnalysisBackend:
    """Port to the external estimators."""

    name: str = "backend"

    async def fetch(self, secret: str) -> dict[str, Any]:
        """Return the helper payload for *secret*.

        Raises:
            BackendError: The helper could not produce a payload.
        """
        raise NotImplementedError


# ========================== zxcvbn (in-process) ============================


def zxcvbn_section(secret: str) -> dict[str, Any]:
    """Run zxcvbn and keep the JSON-safe fields the estimator reads."""
    raw = zxcvbn(secret)
    guesses = raw.get("guesses")
    guesses_log10 = raw.get("guesses_log10")
    if guesses_log10 is None and guesses:
        guesses_log10 = math.log10(float(guesses))

    feedback = raw.get("feedback") or {}
    return {
        "score": int(raw["score"]),
        "guesses_log10": float(guesses_log10) if guesses_log10 is not None else None,
        "feedback": {
            "warning": feedback.get("warning") or "",
            "suggestions": list(feedback.get("suggestions") or []),
        },
        "crack_times_display": {
            str(k): str(v) for k, v in (raw.get("crack_times_display") or {}).items()
        },
    }


class LibraryBackend(AnalysisBackend):
    """In-process transport: zxcvbn only, run in a worker thread."""

    name = "library"

    async def fetch(self, secret: str) -> dict[str, Any]:
        try:
            section = await asyncio.to_thread(zxcvbn_section, secret)
        except Exception as exc:
            raise BackendError(f"zxcvbn failed: {exc}") from exc
        return {ZXCVBN_KEY: section}


# ========================== Subprocess helper ==============================


class SubprocessBackend(AnalysisBackend):
    """Runs the analysis helper as a child process.

    The secret is passed as a single argv element, never through a shell.

    Args:
        command:      Helper argv prefix (e.g. ``["node", "analyze_helper.js"]``).
        local_zxcvbn: Fill in the ``zxcvbn`` section in-process when the
                      helper output lacks it.
    """

    name = "subprocess"

    def __init__(
        self,
        command: Sequence[str],
        *,
        local_zxcvbn: bool = True,
    ) -> None:
        if not command:
            raise InvalidConfigurationError("Analysis helper command is empty.")
        self._command = list(command)
        self._local_zxcvbn = local_zxcvbn

    @property
    def command(self) -> list[str]:
        return list(self._command)

    async def fetch(self, secret: str) -> dict[str, Any]:
        stdout, stderr, returncode = await self._run(secret)

        if returncode != 0:
            detail = stderr.strip()[:_STDERR_LIMIT] or stdout.strip()[:_STDERR_LIMIT]
            raise BackendError(
                f"analysis helper exited with status {returncode}"
                + (f": {detail}" if detail else "")
            )

        text = stdout.strip()
        if not text:
            raise BackendError("analysis helper returned empty output")

        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise BackendError(f"analysis helper output is not valid JSON: {exc.msg}") from exc

        if not isinstance(payload, dict):
            raise BackendError(
                f"analysis helper output is not a JSON object (got {type(payload).__name__})"
            )

        if self._local_zxcvbn and ZXCVBN_KEY not in payload:
            try:
                payload[ZXCVBN_KEY] = await asyncio.to_thread(zxcvbn_section, secret)
            except Exception as exc:
                payload[ZXCVBN_KEY] = {"error": f"zxcvbn failed: {exc}"}

        logger.debug("Helper payload received", sections=sorted(payload))
        return payload

    async def _run(self, secret: str) -> tuple[str, str, int]:
        try:
            proc = await asyncio.create_subprocess_exec(
                *self._command,
                secret,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise BackendError(
                f"could not start analysis helper '{self._command[0]}': {exc}"
            ) from exc

        try:
            out, err = await proc.communicate()
        except asyncio.CancelledError:
            await self._terminate(proc)
            raise

        returncode = proc.returncode if proc.returncode is not None else -1
        return (
            out.decode("utf-8", errors="replace"),
            err.decode("utf-8", errors="replace"),
            returncode,
        )

    @staticmethod
    async def _terminate(proc: asyncio.subprocess.Process) -> None:
        if proc.returncode is not None:
            return
        try:
            proc.kill()
        except ProcessLookupError:
            return
        await proc.wait()
        logger.warning("Analysis helper killed", pid=proc.pid)


# ========================== Factory ========================================


def build_backend(config: AnalysisConfig) -> AnalysisBackend:
    """Select the transport named by ``config.backend``."""
    kind = config.backend.lower()
    if kind == "subprocess":
        return SubprocessBackend(config.helper_command, local_zxcvbn=config.local_zxcvbn)
    if kind == "library":
        return LibraryBackend()
    raise InvalidConfigurationError(
        f"Unknown analysis backend '{config.backend}' (expected 'subprocess' or 'library')"
    )


__all__ = [
    "AnalysisBackend",
    "LibraryBackend",
    "SubprocessBackend",
    "build_backend",
    "zxcvbn_section",
]
