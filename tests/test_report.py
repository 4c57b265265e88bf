"""Tests for the run envelope and the JSON/HTML report writer."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from labcore.models import Finding, RunResult, Severity

from cryptolab.core.engine import CryptoLabEngine
from cryptolab.output.report import CryptoLabReportGenerator


@pytest.fixture
def reporter() -> CryptoLabReportGenerator:
    return CryptoLabReportGenerator()


class TestRunResult:
    def test_evidence_is_coerced_to_json(self) -> None:
        finding = Finding(
            severity=Severity.LOW, title="t", description="d", evidence={"ic": 0.05}
        )
        assert json.loads(finding.evidence) == {"ic": 0.05}

    def test_finalize_builds_summary(self) -> None:
        result = RunResult(
            command="analyze",
            findings=[
                Finding(severity=Severity.HIGH, title="a", description="x"),
                Finding(severity=Severity.INFO, title="b", description="y"),
            ],
        ).finalize()
        assert result.end_time is not None
        assert result.duration_seconds >= 0.0
        assert result.severity_counts == {"HIGH": 1, "MEDIUM": 0, "LOW": 0, "INFO": 1}
        assert "Findings: 2" in result.summary

    def test_explicit_summary(self) -> None:
        assert RunResult(command="encrypt").finalize("done").summary == "done"

    def test_css_class(self) -> None:
        assert Severity.MEDIUM.css_class == "severity-medium"


class TestJson:
    def test_to_json(self, reporter: CryptoLabReportGenerator, engine: CryptoLabEngine) -> None:
        run = engine.run("caesar", 3, "HELLO")
        result = RunResult(
            command="encrypt", target="caesar", payload={"run": run.model_dump(mode="json")}
        ).finalize()
        report = json.loads(reporter.to_json(result))
        assert report["report_metadata"]["tool"] == "cryptolab"
        assert report["command"] == "encrypt"
        assert report["payload"]["run"]["output_text"] == "KHOOR"
        assert report["duration_seconds"] >= 0.0

    def test_generate_json_creates_directories(
        self, reporter: CryptoLabReportGenerator, tmp_path: Path
    ) -> None:
        path = reporter.generate_json(
            RunResult(command="ciphers").finalize(), tmp_path / "out" / "r.json"
        )
        assert json.loads(path.read_text(encoding="utf-8"))["command"] == "ciphers"


class TestHtml:
    def test_comparison_report(
        self,
        reporter: CryptoLabReportGenerator,
        engine: CryptoLabEngine,
        english_text: str,
        tmp_path: Path,
    ) -> None:
        comparison = engine.compare(english_text, engine.encrypt("caesar", 3, english_text))
        result = RunResult(
            command="compare",
            target="<caesar>",
            findings=comparison.findings,
            payload={"comparison": comparison.model_dump(mode="json")},
        ).finalize()

        path = reporter.generate_html(result, tmp_path / "compare.html")
        html = path.read_text(encoding="utf-8")
        assert "Security Score" in html
        assert "Letter Frequencies" in html
        assert "&lt;caesar&gt;" in html
        assert "<caesar>" not in html
        assert 'class="badge severity-' in html

    def test_run_report_escapes_text(
        self, reporter: CryptoLabReportGenerator, engine: CryptoLabEngine
    ) -> None:
        run = engine.run("caesar", 1, "a<b>&c")
        result = RunResult(
            command="encrypt", payload={"run": run.model_dump(mode="json")}
        ).finalize()
        html = reporter.to_html(result, title="Caesar & friends")
        assert "Cipher Output" in html
        assert "a&lt;b&gt;&amp;c" in html
        assert "Caesar &amp; friends" in html
        assert "No findings." in html

    def test_empty_payload_has_no_raw_section(self, reporter: CryptoLabReportGenerator) -> None:
        html = reporter.to_html(RunResult(command="ciphers").finalize())
        assert "Raw Data" not in html
