import pytest

import shared.config as config_mod
from shared.config import ForgeConfig


def test_defaults_when_default_file_is_absent(tmp_path, monkeypatch):
    monkeypatch.setattr(config_mod, "_DEFAULT_CONFIG_PATH", tmp_path / "config.toml")
    config = ForgeConfig.load()
    assert config.generator.default_length == 64
    assert config.generator.word_count == 4
    assert config.analysis.backend == "subprocess"
    assert config.analysis.timeout == 10.0
    assert config.breach.enabled is False
    assert config.breach.prefix_length == 5


def test_explicit_missing_path_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        ForgeConfig.load(tmp_path / "absent.toml")


def test_sections_override_defaults_and_ignore_unknown_keys(config_file):
    path = config_file(
        """
        [global]
        log_level = "DEBUG"

        [generator]
        word_count = 6
        separator = "_"
        dictionary_paths = ["/opt/words"]
        future_option = true

        [analysis]
        backend = "library"
        timeout = 2.5
        mask_secret = false

        [breach]
        enabled = true

        [unknown_section]
        anything = 1
        """
    )
    config = ForgeConfig.load(path)

    assert config.global_settings.log_level == "DEBUG"
    assert config.generator.word_count == 6
    assert config.generator.separator == "_"
    assert config.generator.dictionary_paths == ["/opt/words"]
    assert config.generator.max_word_length == 8
    assert config.analysis.backend == "library"
    assert config.analysis.timeout == 2.5
    assert config.analysis.mask_secret is False
    assert config.analysis.local_zxcvbn is True
    assert config.breach.enabled is True


def test_to_dict_round_trips_section_names():
    data = ForgeConfig().to_dict()
    assert set(data) == {"global_settings", "generator", "analysis", "breach"}
    assert data["analysis"]["helper_command"] == ["node", "analyze_helper.js"]
