"""
KeyForge Console Interface
===========================

Rich console used by every KeyForge command for human-readable output.
It owns the colour theme, including the four strength-level styles
(``forge.level0`` .. ``forge.level3``) that the strength bars use, and
provides the banner, section rules, one-line status messages, a
two-column property table and a spinner.

In JSON mode without an output file the CLI builds the console with
``quiet=True`` so stdout carries nothing but the report.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterable, Iterator

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.status import Status
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

_FORGE_THEME = Theme(
    {
        "forge.section": "bold bright_magenta",
        "forge.success": "bold green",
        "forge.warning": "bold yellow",
        "forge.error": "bold red",
        "forge.info": "bold bright_blue",
        "forge.dim": "dim white",
        "forge.highlight": "bold bright_white",
        # strength levels, weakest first
        "forge.level0": "bold white on red",
        "forge.level1": "bold black on dark_orange",
        "forge.level2": "bold black on yellow",
        "forge.level3": "bold white on green",
    }
)

_BANNER_ART = r"""[bright_cyan]
  _  __            _____
 | |/ /___ _   _  |  ___|__  _ __ __ _  ___
 | ' // _ \ | | | | |_ / _ \| '__/ _` |/ _ \
 | . \  __/ |_| | |  _| (_) | | | (_| |  __/
 |_|\_\___|\__, | |_|  \___/|_|  \__, |\___|
           |___/                 |___/
[/bright_cyan]"""

_TAGLINE = "Secret Generator & Strength Analyzer"

# message kind -> (style, marker)
_MESSAGE_KINDS: dict[str, tuple[str, str]] = {
    "success": ("forge.success", "[✔] SUCCESS:"),
    "warning": ("forge.warning", "[⚠] WARNING:"),
    "error": ("forge.error", "[✘] ERROR:"),
    "info": ("forge.info", "[ℹ] INFO:"),
}


class ForgeConsole:
    """Themed output for the KeyForge CLI.

    Usage::

        con = ForgeConsole()
        con.banner("1.0.0")
        con.section("Generated Password")
        con.success("JSON report saved to: out.json")
    """

    def __init__(self, *, quiet: bool = False) -> None:
        self._console = Console(theme=_FORGE_THEME, quiet=quiet, highlight=False)

    @property
    def rich(self) -> Console:
        return self._console

    def banner(self, version: str) -> None:
        text = Text.from_markup(
            f"{_BANNER_ART}\n[forge.highlight]{_TAGLINE}[/forge.highlight]\n"
            f"[forge.dim]Version {version}[/forge.dim]"
        )
        self._console.print(
            Panel(Align.center(text), border_style="bright_cyan", padding=(1, 2))
        )

    def section(self, title: str) -> None:
        self._console.rule(f"  {title}  ", style="forge.section")
        self._console.print()

    def blank(self) -> None:
        self._console.print()

    # ------------------------------------------------------------------ #
    #  One-line messages
    # ------------------------------------------------------------------ #

    def _message(self, kind: str, message: str) -> None:
        style, marker = _MESSAGE_KINDS[kind]
        line = Text(marker + " ", style=style)
        line.append(message)
        self._console.print(line)

    def success(self, message: str) -> None:
        self._message("success", message)

    def warning(self, message: str) -> None:
        self._message("warning", message)

    def error(self, message: str) -> None:
        self._message("error", message)

    def info(self, message: str) -> None:
        self._message("info", message)

    # ------------------------------------------------------------------ #
    #  Tables and spinner
    # ------------------------------------------------------------------ #

    def properties(self, title: str, rows: Iterable[tuple[str, str]]) -> None:
        """Two-column ``Property | Value`` table; values may carry markup."""
        tbl = Table(
            title=title,
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=True,
        )
        tbl.add_column("Property", style="bold")
        tbl.add_column("Value")
        for name, value in rows:
            tbl.add_row(name, value)
        self._console.print(tbl)

    @contextmanager
    def status(self, message: str) -> Iterator[Status]:
        """Spinner shown while the estimators or breach lookup run."""
        with self._console.status(
            f"[forge.info]{message}[/forge.info]",
            spinner="dots",
            spinner_style="bright_cyan",
        ) as spinner:
            yield spinner
