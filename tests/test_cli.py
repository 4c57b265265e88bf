"""End-to-end tests for the Click command line."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from cryptolab import __version__
from cryptolab.cli import cli


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "cryptolab.toml"
    path.write_text(
        "[global]\n"
        'log_level = "CRITICAL"\n'
        f'output_dir = "{(tmp_path / "reports").as_posix()}"\n'
        "[metrics]\n"
        'sink = "jsonl"\n'
        f'path = "{(tmp_path / "metrics.jsonl").as_posix()}"\n',
        encoding="utf-8",
    )
    return path


@pytest.fixture
def invoke(config_file: Path):
    runner = CliRunner()

    def _invoke(*args: str):
        return runner.invoke(cli, ["--config", str(config_file), *args], obj={})

    return _invoke


def test_version() -> None:
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_encrypt_quiet_prints_only_the_result(invoke) -> None:
    result = invoke("-q", "encrypt", "caesar", "Hello", "--key", "3")
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "KHOOR"


def test_decrypt_console(invoke) -> None:
    result = invoke("decrypt", "vigenere", "LXFOPVEFRNHR", "-k", "LEMON")
    assert result.exit_code == 0, result.output
    assert "ATTACKATDAWN" in result.output


def test_encrypt_json(invoke) -> None:
    result = invoke("-o", "json", "encrypt", "hill", "HELP", "--key", "3,3,2,5")
    assert result.exit_code == 0, result.output
    report = json.loads(result.output)
    assert report["command"] == "encrypt"
    assert report["payload"]["run"]["output_text"] == "HIAT"
    assert report["payload"]["run"]["visualization"]["determinant"] == 9


def test_invalid_key_exits_with_status_1(invoke) -> None:
    result = invoke("encrypt", "rail_fence", "HELLO", "--key", "9")
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_missing_key(invoke) -> None:
    result = invoke("encrypt", "vigenere", "HELLO")
    assert result.exit_code == 1


def test_placeholder_cipher(invoke) -> None:
    result = invoke("encrypt", "rsa", "HELLO")
    assert result.exit_code == 1
    assert "no transform" in result.output


def test_analyze_json(invoke) -> None:
    result = invoke("-o", "json", "analyze", "ATTACK AT DAWN " * 5)
    assert result.exit_code == 0, result.output
    report = json.loads(result.output)
    analysis = report["payload"]["analysis"]
    assert analysis["text_length"] == 60
    assert analysis["key_length"]["most_likely"] is not None
    assert report["severity_counts"]["MEDIUM"] >= 1


def test_analyze_console(invoke, english_text: str) -> None:
    result = invoke("analyze", english_text)
    assert result.exit_code == 0, result.output
    assert "Index of Coincidence" in result.output


def test_compare_html_report(invoke, tmp_path: Path, english_text: str) -> None:
    target = tmp_path / "compare.html"
    result = invoke(
        "-o", "html", "-f", str(target), "compare", english_text, "KHOOR ZRUOG " * 10
    )
    assert result.exit_code == 0, result.output
    html = target.read_text(encoding="utf-8")
    assert html.startswith("<!DOCTYPE html>")
    assert "Security Score" in html


def test_html_default_location(invoke, tmp_path: Path) -> None:
    result = invoke("-o", "html", "analyze", "HELLO WORLD")
    assert result.exit_code == 0, result.output
    assert (tmp_path / "reports" / "cryptolab_analyze.html").exists()


def test_ciphers(invoke) -> None:
    result = invoke("ciphers")
    assert result.exit_code == 0
    assert "caesar" in result.output

    listing = json.loads(invoke("-o", "json", "ciphers").output)
    names = [entry["name"] for entry in listing["payload"]["ciphers"]]
    assert "super_encryption" in names and "otp" in names


def test_metrics_persist_between_invocations(invoke) -> None:
    invoke("-q", "encrypt", "caesar", "HELLO", "--key", "3")
    invoke("-q", "decrypt", "caesar", "KHOOR", "--key", "3")

    result = invoke("metrics", "--format", "csv")
    assert result.exit_code == 0
    lines = result.output.strip().splitlines()
    assert lines[0].startswith("Algorithm,Operation")
    assert [line.split(",")[1] for line in lines[1:]] == ["encrypt", "decrypt"]

    invoke("metrics", "--clear")
    assert invoke("metrics", "--format", "csv").output.strip().splitlines()[1:] == []


def test_missing_config_file() -> None:
    result = CliRunner().invoke(cli, ["--config", "/nonexistent/cryptolab.toml", "ciphers"])
    assert result.exit_code == 2


def test_invalid_config_value(tmp_path: Path) -> None:
    path = tmp_path / "bad.toml"
    path.write_text('[cipher]\nfiller = "7"\n', encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(path), "ciphers"])
    assert result.exit_code == 2
    assert "filler" in result.output


def test_non_string_config_value_exits_with_status_2(tmp_path: Path) -> None:
    path = tmp_path / "bad.toml"
    path.write_text("[cipher]\nfiller = 5\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(path), "ciphers"])
    assert result.exit_code == 2
    assert "filler" in result.output


def test_metrics_json_is_clean_without_quiet(invoke) -> None:
    invoke("-q", "encrypt", "caesar", "HELLO", "--key", "3")
    result = invoke("metrics", "--format", "json")
    assert result.exit_code == 0, result.output
    json.loads(result.output)
