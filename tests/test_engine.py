import asyncio

import httpx
import pytest

from keyforge.collectors.backends import AnalysisBackend
from keyforge.core.engine import ForgeEngine
from keyforge.core.errors import DictionaryUnavailableError
from keyforge.core.models import EstimatorKind, SecretMode
from shared.config import ForgeConfig


class FixedBackend(AnalysisBackend):
    name = "fixed"

    def __init__(self, payload):
        self.payload = payload

    async def fetch(self, secret):
        return self.payload


def _engine(payload=None, transport=None, **generator):
    config = ForgeConfig()
    for key, value in generator.items():
        setattr(config.generator, key, value)
    return ForgeEngine(
        config,
        backend=FixedBackend(payload or {}),
        breach_transport=transport,
    )


def test_password_uses_configured_defaults():
    engine = _engine(default_length=32, add_unicode=False, symbols_enabled=False)
    pw = engine.generate_password()
    assert len(pw) == 32
    assert pw.isalnum()
    assert pw.isascii()


def test_password_arguments_override_config():
    pw = _engine().generate_password(12, symbols=False, unicode=False, uppercase=False)
    assert len(pw) == 12
    assert all(c.islower() or c.isdigit() for c in pw)


def test_passphrase_from_configured_dictionary(words_file):
    engine = _engine(dictionary_paths=[str(words_file)])
    phrase = engine.generate_passphrase(
        word_count=3, separator=".", append_digit=False, append_symbol=False, append_unicode=False
    )
    words = phrase.split(".")
    assert len(words) == 3
    assert all(w[0].isupper() for w in words)


def test_word_cache_is_reused_per_path(words_file, tmp_path):
    engine = _engine()
    first = engine.word_cache([words_file])
    assert engine.word_cache([str(words_file)]) is first
    assert engine.word_cache([tmp_path / "other"]) is not first


def test_passphrase_without_dictionary_raises(tmp_path):
    engine = _engine(dictionary_paths=[str(tmp_path / "missing")])
    with pytest.raises(DictionaryUnavailableError):
        engine.generate_passphrase()


def test_run_bundles_analysis_and_breach(sample_payload):
    transport = httpx.MockTransport(lambda request: httpx.Response(404))
    engine = _engine(sample_payload, transport=transport)

    result = asyncio.run(engine.run("Password1!", SecretMode.ANALYSIS, breach=True))

    assert result.mode is SecretMode.ANALYSIS
    assert result.analysis.success_count == 5
    assert result.analysis.verdicts[EstimatorKind.RAW_ENTROPY].label == "Good"
    assert result.breach.checked and not result.breach.pwned
    assert result.duration_seconds >= 0


def test_run_can_skip_analysis():
    result = asyncio.run(_engine().run("abc", SecretMode.PASSWORD, analyze=False))
    assert result.analysis is None
    assert result.breach is None
