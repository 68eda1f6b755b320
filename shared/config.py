"""
KeyForge Configuration Management
==================================

Centralized configuration for the KeyForge secret generator and strength
analyzer, using Python dataclasses and TOML-based persistence.

Configuration is kept out of code and overridable per deployment
(Wiggins, 2011): dictionary locations, the external analysis helper
command, and the breach-check endpoint all differ between hosts.

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
    - NIST SP 800-63B (2017). Digital Identity Guidelines.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


# ---------------------------------------------------------------------------
# Default configuration file path relative to the KeyForge root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "config.toml"


# ========================== Section Configs ================================


@dataclass(frozen=False, slots=True)
class GeneratorConfig:
    """Configuration for secret generation.

    Password bounds mirror the web front end the generator was first
    written for (10..128 characters, default 64). Passphrase defaults
    produce four capitalised 4-8 letter words joined by ``-`` with a
    digit, symbol and extended character appended.
    """

    # Random password parameters
    default_length: int = 64
    min_length: int = 10
    max_length: int = 128
    symbols_enabled: bool = True
    add_unicode: bool = True

    # Passphrase parameters
    word_count: int = 4
    min_word_count: int = 2
    max_word_count: int = 10
    separator: str = "-"
    allowed_separators: list[str] = field(
        default_factory=lambda: ["-", "_", " ", "."]
    )
    min_word_length: int = 4
    max_word_length: int = 8
    capitalize: bool = True
    append_digit: bool = True
    append_symbol: bool = True
    append_unicode: bool = True

    # Word source
    dictionary_paths: list[str] = field(
        default_factory=lambda: ["/usr/share/dict/words", "/usr/dict/words"]
    )
    transliterate: bool = True


@dataclass(frozen=False, slots=True)
class AnalysisConfig:
    """Configuration for multi-source strength analysis.

    ``backend`` selects the transport used to reach the external
    estimators: ``"subprocess"`` runs ``helper_command`` with the secret
    appended as the final argument, ``"library"`` calls zxcvbn in-process.
    With ``local_zxcvbn`` the subprocess transport computes the zxcvbn
    section itself when the helper does not emit one.
    """

    backend: str = "subprocess"
    helper_command: list[str] = field(
        default_factory=lambda: ["node", "analyze_helper.js"]
    )
    local_zxcvbn: bool = True
    timeout: float = 10.0
    mask_secret: bool = True


@dataclass(frozen=False, slots=True)
class BreachConfig:
    """Configuration for the k-anonymity breach lookup.

    Reference:
        Troy Hunt (2018). Pwned Passwords V2 -- k-Anonymity range API.
    """

    enabled: bool = False
    api_url: str = "https://api.pwnedpasswords.com/range/"
    prefix_length: int = 5
    timeout: float = 10.0
    user_agent: str = "KeyForge/1.0"
    add_padding: bool = True


# =========================== Global Settings ===============================


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Global settings: logging verbosity and output locations."""

    log_level: str = "WARNING"
    log_file: str | None = None
    log_json: bool = False
    output_dir: str = "output"
    debug: bool = False
    version: str = "1.0.0"


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class ForgeConfig:
    """Master configuration aggregating every section.

    Usage:
        >>> config = ForgeConfig.load()                  # from default path
        >>> config = ForgeConfig.load("custom.toml")     # from custom path
        >>> config.generator.word_count
        4
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    breach: BreachConfig = field(default_factory=BreachConfig)

    # ------------------------------------------------------------------ #
    #  TOML Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls, path: str | Path | None = None) -> ForgeConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``config.toml`` in the
        project root.  Missing keys gracefully fall back to dataclass
        defaults -- no ``KeyError`` is raised.

        Args:
            path: Filesystem path to a TOML configuration file.
                  Defaults to ``<project_root>/config.toml``.

        Returns:
            A fully-populated :class:`ForgeConfig` instance.

        Raises:
            FileNotFoundError: If the specified path does not exist
                *and* was explicitly provided by the caller.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        return cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            generator=cls._build_section(GeneratorConfig, raw.get("generator", {})),
            analysis=cls._build_section(AnalysisConfig, raw.get("analysis", {})),
            breach=cls._build_section(BreachConfig, raw.get("breach", {})),
        )

    # ------------------------------------------------------------------ #
    #  Serialisation helpers
    # ------------------------------------------------------------------ #

    def to_dict(self) -> dict[str, Any]:
        """Serialise the entire configuration tree to a plain dictionary."""
        return asdict(self)

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate a dataclass *cls* using only the keys it declares.

        Unknown keys in the TOML source are silently ignored so that
        forward-compatible config files do not break older code.
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)
