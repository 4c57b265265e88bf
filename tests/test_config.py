"""Tests for TOML configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from labcore.config import CipherConfig, GlobalConfig, LabConfig


def test_defaults() -> None:
    config = LabConfig()
    assert config.cipher.filler == "X"
    assert config.cipher.strip_padding is True
    assert config.analysis.ic_monoalphabetic == 0.06
    assert config.metrics.sink == "memory"


def test_load_overrides_and_ignores_unknown_keys(tmp_path: Path) -> None:
    path = tmp_path / "lab.toml"
    path.write_text(
        "[global]\n"
        'log_level = "DEBUG"\n'
        "[cipher]\n"
        'filler = "Q"\n'
        "preserve_format = true\n"
        'enigma_rotors = "I II III"\n'
        "[analysis]\n"
        "max_key_length = 12\n"
        "[unknown_section]\n"
        "value = 1\n",
        encoding="utf-8",
    )
    config = LabConfig.load(path, env={})
    assert config.global_settings.log_level == "DEBUG"
    assert config.cipher.filler == "Q"
    assert config.cipher.preserve_format is True
    assert config.cipher.playfair_filler == "X"
    assert config.analysis.max_key_length == 12
    assert config.analysis.kasiski_min_length == 3
    assert config.metrics.enabled is True


def test_explicit_missing_path_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        LabConfig.load(tmp_path / "missing.toml")


def test_to_dict() -> None:
    data = LabConfig().to_dict()
    assert set(data) == {"global_settings", "cipher", "analysis", "metrics"}
    assert data["metrics"]["history_limit"] == 100


def test_environment_overrides_file(tmp_path: Path) -> None:
    path = tmp_path / "lab.toml"
    path.write_text('[metrics]\nsink = "memory"\n', encoding="utf-8")
    env = {
        "CRYPTOLAB_METRICS_SINK": "jsonl",
        "CRYPTOLAB_METRICS_HISTORY_LIMIT": "7",
        "CRYPTOLAB_CIPHER_PRESERVE_FORMAT": "yes",
        "CRYPTOLAB_ANALYSIS_IC_AMBIGUOUS": "0.05",
        "UNRELATED": "1",
    }
    config = LabConfig.load(path, env=env)
    assert config.metrics.sink == "jsonl"
    assert config.metrics.history_limit == 7
    assert config.cipher.preserve_format is True
    assert config.analysis.ic_ambiguous == 0.05


def test_bad_environment_value(tmp_path: Path) -> None:
    path = tmp_path / "lab.toml"
    path.write_text("", encoding="utf-8")
    with pytest.raises(ValueError, match="history_limit"):
        LabConfig.load(path, env={"CRYPTOLAB_METRICS_HISTORY_LIMIT": "many"})
    with pytest.raises(ValueError, match="boolean"):
        LabConfig.load(path, env={"CRYPTOLAB_METRICS_ENABLED": "maybe"})


@pytest.mark.parametrize(
    "toml",
    [
        '[cipher]\nfiller = "XY"\n',
        "[cipher]\nfiller = 5\n",
        '[cipher]\nplayfair_filler = "J"\n',
        '[global]\nlog_level = "LOUD"\n',
        "[analysis]\nic_ambiguous = 0.07\n",
        '[metrics]\nsink = "redis"\n',
    ],
)
def test_invalid_values_are_rejected(tmp_path: Path, toml: str) -> None:
    path = tmp_path / "lab.toml"
    path.write_text(toml, encoding="utf-8")
    with pytest.raises(ValueError):
        LabConfig.load(path, env={})


def test_debug_forces_debug_level() -> None:
    config = LabConfig()
    config.global_settings.debug = True
    assert config.global_settings.effective_log_level == "DEBUG"
    assert GlobalConfig(log_level="warning").log_level == "WARNING"


def test_lowercase_filler_is_normalised() -> None:
    assert CipherConfig(filler="q").filler == "Q"
