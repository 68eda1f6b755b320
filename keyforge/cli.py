"""
KeyForge CLI
=============

Click-based command-line interface for the KeyForge secret generator and
strength analyzer.

Usage::

    python -m keyforge password --length 24
    python -m keyforge password --no-symbols --no-unicode --no-analyze
    python -m keyforge passphrase --words 5 --separator _ --breach
    python -m keyforge -o json -f report.json analyze "Password1!"

References:
    - Click Documentation. https://click.palletsprojects.com/
"""

from __future__ import annotations

import asyncio
import functools
import sys
from pathlib import Path
from typing import Any, Callable, Optional

import click

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from shared.config import ForgeConfig
from shared.console import ForgeConsole

from keyforge import __version__
from keyforge.core.engine import ForgeEngine
from keyforge.core.errors import ForgeError, InsufficientWordsError
from keyforge.core.models import ForgeResult, SecretMode
from keyforge.output.console import ForgeConsoleOutput
from keyforge.output.report import ForgeReportGenerator

# Bounds enforced on the command line
PASSWORD_LENGTH_RANGE = click.IntRange(10, 128)
WORD_COUNT_RANGE = click.IntRange(2, 10)
SEPARATORS = ["-", "_", " ", "."]


# ===================================================================== #
#  Async Runner Helper
# ===================================================================== #

def _run_async(coro):
    """Run an async coroutine from synchronous Click handlers."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop and loop.is_running():
        import concurrent.futures
        with concurrent.futures.ThreadPoolExecutor() as pool:
            future = pool.submit(asyncio.run, coro)
            return future.result()
    else:
        return asyncio.run(coro)


def _forge_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Turn :class:`ForgeError` into an error line and exit status 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        ctx = click.get_current_context()
        try:
            return func(*args, **kwargs)
        except ForgeError as exc:
            _report_error(ctx, exc)
            ctx.exit(1)

    return wrapper


def _report_error(ctx: click.Context, exc: ForgeError) -> None:
    console: ForgeConsole = ctx.obj["console"]
    message = str(exc)
    if ctx.obj["quiet"]:
        click.echo(f"Error: {message}", err=True)
        return
    console.error(message)
    if isinstance(exc, InsufficientWordsError):
        console.info(
            f"Only {exc.found} word(s) of {exc.min_length}-{exc.max_length} letters "
            f"are available; lower --words or widen the word length bounds."
        )


# ===================================================================== #
#  CLI Group
# ===================================================================== #

@click.group()
@click.version_option(__version__, prog_name="keyforge")
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to KeyForge configuration file (TOML).",
)
@click.option(
    "--output", "-o",
    type=click.Choice(["console", "json"]),
    default="console",
    help="Output format.",
)
@click.option(
    "--output-file", "-f",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output file path (for JSON output).",
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    default=False,
    help="Suppress banner and informational output.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[str],
    output: str,
    output_file: Optional[str],
    quiet: bool,
) -> None:
    """KeyForge -- Secret Generator & Strength Analyzer.

    Generate random passwords and passphrases, rate any secret with
    several independent strength estimators, and check it against the
    Pwned Passwords breach corpus without revealing it.
    """
    ctx.ensure_object(dict)

    try:
        forge_config = ForgeConfig.load(config)
    except tomllib.TOMLDecodeError as exc:
        raise click.BadParameter(f"invalid TOML: {exc}", param_hint="--config") from exc
    ctx.obj["config"] = forge_config
    ctx.obj["output_format"] = output
    ctx.obj["output_file"] = output_file
    ctx.obj["quiet"] = quiet

    console = ForgeConsole(quiet=quiet or (output == "json" and output_file is None))
    ctx.obj["console"] = console
    ctx.obj["engine"] = ForgeEngine(forge_config)
    ctx.obj["display"] = ForgeConsoleOutput(console)
    ctx.obj["reporter"] = ForgeReportGenerator(mask=forge_config.analysis.mask_secret)

    if not quiet and output == "console":
        console.banner(version=forge_config.global_settings.version)


def _handle_output(ctx: click.Context, result: ForgeResult) -> None:
    """Render *result* in the selected output format."""
    output_format = ctx.obj["output_format"]
    output_file = ctx.obj["output_file"]
    reporter: ForgeReportGenerator = ctx.obj["reporter"]
    console: ForgeConsole = ctx.obj["console"]
    display: ForgeConsoleOutput = ctx.obj["display"]

    if output_format == "console":
        display.display_result(result)
        return

    if output_file:
        path = reporter.generate_json(result, Path(output_file))
        console.success(f"JSON report saved to: {path}")
    else:
        click.echo(reporter.render_json(result))


def _finish(
    ctx: click.Context,
    secret: str,
    mode: SecretMode,
    analyze: bool,
    breach: Optional[bool],
) -> None:
    engine: ForgeEngine = ctx.obj["engine"]
    config: ForgeConfig = ctx.obj["config"]
    console: ForgeConsole = ctx.obj["console"]

    do_breach = config.breach.enabled if breach is None else breach
    if analyze or do_breach:
        with console.status("Evaluating secret..."):
            result = _run_async(
                engine.run(secret, mode, analyze=analyze, breach=do_breach)
            )
    else:
        result = ForgeResult(mode=mode, secret=secret)

    _handle_output(ctx, result)


# ===================================================================== #
#  Subcommands
# ===================================================================== #

@cli.command()
@click.option("--length", "-l", type=PASSWORD_LENGTH_RANGE, default=None,
              help="Password length (10-128; default from config).")
@click.option("--no-lowercase", is_flag=True, default=False, help="Exclude a-z.")
@click.option("--no-uppercase", is_flag=True, default=False, help="Exclude A-Z.")
@click.option("--no-digits", is_flag=True, default=False, help="Exclude 0-9.")
@click.option("--no-symbols", is_flag=True, default=False, help="Exclude symbols.")
@click.option("--unicode/--no-unicode", default=None,
              help="Guarantee one extended character (é, €, ø, ...).")
@click.option("--analyze/--no-analyze", default=True,
              help="Rate the generated password.")
@click.option("--breach/--no-breach", default=None,
              help="Check the password against Pwned Passwords.")
@click.pass_context
@_forge_errors
def password(
    ctx: click.Context,
    length: Optional[int],
    no_lowercase: bool,
    no_uppercase: bool,
    no_digits: bool,
    no_symbols: bool,
    unicode: Optional[bool],
    analyze: bool,
    breach: Optional[bool],
) -> None:
    """Generate a random password with per-class guarantees."""
    engine: ForgeEngine = ctx.obj["engine"]

    secret = engine.generate_password(
        length,
        lowercase=not no_lowercase,
        uppercase=not no_uppercase,
        digits=not no_digits,
        symbols=False if no_symbols else None,
        unicode=unicode,
    )
    _finish(ctx, secret, SecretMode.PASSWORD, analyze, breach)


@cli.command()
@click.option("--words", "-w", type=WORD_COUNT_RANGE, default=None,
              help="Number of words (2-10; default from config).")
@click.option("--separator", "-s", type=click.Choice(SEPARATORS), default=None,
              help="Word separator.")
@click.option("--min-word-length", type=click.IntRange(1, 64), default=None,
              help="Shortest acceptable word.")
@click.option("--max-word-length", type=click.IntRange(1, 64), default=None,
              help="Longest acceptable word.")
@click.option("--dictionary", "-d", type=click.Path(dir_okay=False), default=None,
              help="Word list to draw from (one word per line).")
@click.option("--capitalize/--no-capitalize", default=None, help="Capitalise each word.")
@click.option("--digit/--no-digit", default=None, help="Append a digit.")
@click.option("--symbol/--no-symbol", default=None, help="Append a symbol.")
@click.option("--unicode/--no-unicode", default=None, help="Append an extended character.")
@click.option("--analyze/--no-analyze", default=True,
              help="Rate the generated passphrase.")
@click.option("--breach/--no-breach", default=None,
              help="Check the passphrase against Pwned Passwords.")
@click.pass_context
@_forge_errors
def passphrase(
    ctx: click.Context,
    words: Optional[int],
    separator: Optional[str],
    min_word_length: Optional[int],
    max_word_length: Optional[int],
    dictionary: Optional[str],
    capitalize: Optional[bool],
    digit: Optional[bool],
    symbol: Optional[bool],
    unicode: Optional[bool],
    analyze: bool,
    breach: Optional[bool],
) -> None:
    """Generate a word-based passphrase from a dictionary."""
    engine: ForgeEngine = ctx.obj["engine"]

    secret = engine.generate_passphrase(
        word_count=words,
        separator=separator,
        min_word_length=min_word_length,
        max_word_length=max_word_length,
        capitalize=capitalize,
        append_digit=digit,
        append_symbol=symbol,
        append_unicode=unicode,
        dictionary_paths=[dictionary] if dictionary else None,
    )
    _finish(ctx, secret, SecretMode.PASSPHRASE, analyze, breach)


@cli.command()
@click.argument("secret")
@click.option("--breach/--no-breach", default=None,
              help="Also check the secret against Pwned Passwords.")
@click.pass_context
@_forge_errors
def analyze(ctx: click.Context, secret: str, breach: Optional[bool]) -> None:
    """Rate an existing SECRET with every strength estimator."""
    if not secret:
        raise click.BadParameter("secret must not be empty", param_hint="SECRET")
    _finish(ctx, secret, SecretMode.ANALYSIS, True, breach)


# ===================================================================== #
#  Entry Point
# ===================================================================== #

def main() -> None:
    """Main entry point for the KeyForge CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
