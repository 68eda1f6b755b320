import json
import sys
import textwrap
from pathlib import Path

import pytest

from keyforge.generators.dictionary import WordListCache

SAMPLE_PAYLOAD = {
    "zxcvbn": {
        "score": 4,
        "guesses_log10": 14.2,
        "feedback": {"warning": "", "suggestions": []},
        "crack_times_display": {"offline_slow_hashing_1e4_per_second": "centuries"},
    },
    "owasp_npm": {
        "strong": True,
        "errors": [],
        "requiredTestErrors": [],
        "optionalTestErrors": [],
        "isPassphrase": False,
    },
    "tai": {
        "strengthCode": "STRONG",
        "strengthMeaning": "Strong",
        "charsets": {"lower": True, "upper": True, "number": True},
        "nistEntropyBits": 34,
        "shannonEntropyBits": 41.5,
        "trigraphEntropyBits": 72.1,
        "commonPassword": False,
    },
    "fast_entropy": {"shannonEntropyBits": 78.4},
    "string_entropy": {"shannonEntropyBits": 61.0},
}


@pytest.fixture
def sample_payload():
    return json.loads(json.dumps(SAMPLE_PAYLOAD))


@pytest.fixture
def words_file(tmp_path):
    path = tmp_path / "words"
    path.write_text(
        "\n".join(
            [
                "apple", "Banana", "cherry", "dragon", "eagle", "forest",
                "garden", "harbor", "island", "jungle", "kitten", "lemon",
                "Éclair", "",  "don't", "x", "extraordinarily",
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def small_cache():
    return WordListCache.from_words(["cat", "dog", "elephant", "a", "sun", "moonlight"])


@pytest.fixture
def make_helper(tmp_path):
    """Write a fake analysis helper and return its argv prefix."""

    def _make(stdout="", exit_code=0, sleep=0.0, echo_secret=False):
        script = tmp_path / f"helper_{abs(hash((stdout, exit_code, sleep, echo_secret)))}.py"
        script.write_text(
            textwrap.dedent(
                f"""
                import json, sys, time
                time.sleep({sleep!r})
                out = {stdout!r}
                if {echo_secret!r}:
                    out = json.dumps({{"echo": sys.argv[-1], "argc": len(sys.argv)}})
                sys.stdout.write(out)
                sys.stderr.write("helper diagnostics")
                sys.exit({exit_code!r})
                """
            ),
            encoding="utf-8",
        )
        return [sys.executable, str(script)]

    return _make


@pytest.fixture
def config_file(tmp_path):
    def _write(text: str) -> Path:
        path = tmp_path / "keyforge.toml"
        path.write_text(textwrap.dedent(text), encoding="utf-8")
        return path

    return _write
