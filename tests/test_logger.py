"""Tests for the component logger."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from labcore.logger import LabLogger


def _read_lines(path: Path) -> list[dict]:
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_json_file_records_component_operation_and_context(tmp_path: Path) -> None:
    path = tmp_path / "logs" / "lab.jsonl"
    log = LabLogger("engine", log_file=path, json_logs=True, console_output=False)

    with log.operation("encrypt"):
        log.warning("Key rejected for %s", "hill", determinant=13)
    log.info("done")

    first, second = _read_lines(path)
    assert first["message"] == "Key rejected for hill"
    assert first["component"] == "engine"
    assert first["operation"] == "encrypt"
    assert first["context"] == {"determinant": 13}
    assert second["operation"] == "-"
    assert "context" not in second


def test_level_filtering(tmp_path: Path) -> None:
    path = tmp_path / "lab.jsonl"
    log = LabLogger("cli", log_level="warning", log_file=path, json_logs=True, console_output=False)
    log.info("hidden")
    log.error("shown")
    assert [entry["message"] for entry in _read_lines(path)] == ["shown"]


def test_operations_nest() -> None:
    log = LabLogger("nesting", console_output=False)
    with log.operation("compare"):
        with log.operation("analyze"):
            assert log.operation_name == "analyze"
        assert log.operation_name == "compare"
    assert log.operation_name is None


def test_timed_logs_duration(tmp_path: Path) -> None:
    path = tmp_path / "lab.log"
    log = LabLogger("timing", log_level="DEBUG", log_file=path, console_output=False)
    with log.timed("friedman test"):
        pass
    assert "friedman test took" in path.read_text(encoding="utf-8")


def test_exception_includes_traceback(tmp_path: Path) -> None:
    path = tmp_path / "lab.jsonl"
    log = LabLogger("errors", log_file=path, json_logs=True, console_output=False)
    try:
        raise ValueError("bad key")
    except ValueError:
        log.exception("Transform failed")
    assert "ValueError: bad key" in _read_lines(path)[0]["exc_info"]


def test_recreating_a_logger_replaces_handlers() -> None:
    LabLogger("dupes")
    log = LabLogger("dupes")
    assert log.underlying is logging.getLogger("cryptolab.dupes")
    assert len(log.underlying.handlers) == 1
