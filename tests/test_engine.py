"""Tests for the CryptoLab engine facade."""

from __future__ import annotations

import pytest

from labcore.config import LabConfig
from labcore.logger import LabLogger
from labcore.models import Severity

from cryptolab.ciphers import VigenereCipher
from cryptolab.core.engine import CryptoLabEngine
from cryptolab.core.errors import InvalidKeyError, UnsupportedOperationError
from cryptolab.core.models import (
    AlphabetMapping,
    ICInterpretation,
    Mode,
    SecurityGrade,
    StagedVisualization,
)
from cryptolab.metrics.tracker import PerformanceTracker


class TestRun:
    def test_encrypt(self, engine: CryptoLabEngine) -> None:
        run = engine.run("caesar", 3, "Hello", "encrypt")
        assert run.output_text == "KHOOR"
        assert run.mode is Mode.ENCRYPT
        assert run.cipher == "caesar"
        assert isinstance(run.visualization, AlphabetMapping)

    def test_helpers(self, engine: CryptoLabEngine) -> None:
        ciphertext = engine.encrypt("vigenere", "LEMON", "attack at dawn")
        assert ciphertext == "LXFOPVEFRNHR"
        assert engine.decrypt("vigenere", "LEMON", ciphertext) == "ATTACKATDAWN"

    def test_accepts_cipher_instance(self, engine: CryptoLabEngine) -> None:
        run = engine.run(VigenereCipher("LEMON"), None, "ATTACKATDAWN", Mode.ENCRYPT)
        assert run.output_text == "LXFOPVEFRNHR"

    def test_without_visualization(self, engine: CryptoLabEngine) -> None:
        run = engine.run("rail_fence", 2, "HELLOWORLD", visualize=False)
        assert run.output_text == "HLOOLELWRD"
        assert run.visualization is None

    def test_staged_run_serialises_every_stage(self, engine: CryptoLabEngine) -> None:
        run = engine.run("double_transposition", "ZEBRAS:KEY", "ATTACK AT DAWN")
        assert isinstance(run.visualization, StagedVisualization)
        dumped = run.model_dump(mode="json")
        assert dumped["visualization"]["stages"][0]["key"] == "ZEBRAS"

    def test_records_metric(self, engine: CryptoLabEngine, tracker: PerformanceTracker) -> None:
        run = engine.run("caesar", 3, "Hello, World")
        assert run.metric is not None
        assert run.metric.algorithm == "caesar"
        assert run.metric.input_size == 10
        assert run.metric.output_size == 10
        assert tracker.metrics() == [run.metric]

    def test_without_tracker(self, quiet_logger) -> None:
        engine = CryptoLabEngine(logger=quiet_logger)
        assert engine.run("caesar", 1, "A").metric is None

    def test_failures_propagate_and_are_not_recorded(
        self, engine: CryptoLabEngine, tracker: PerformanceTracker
    ) -> None:
        with pytest.raises(InvalidKeyError):
            engine.run("rail_fence", 5, "HELLO")
        with pytest.raises(InvalidKeyError):
            engine.run("vigenere", "K3Y", "HELLO")
        with pytest.raises(UnsupportedOperationError):
            engine.run("des", None, "HELLO")
        with pytest.raises(UnsupportedOperationError):
            engine.run("enigma", "KEY", "HELLO")
        assert tracker.metrics() == []

    def test_config_options_reach_ciphers(self, quiet_logger) -> None:
        config = LabConfig()
        config.cipher.filler = "Q"
        config.cipher.preserve_format = True
        engine = CryptoLabEngine(config, logger=quiet_logger)
        assert engine.encrypt("columnar", "CBA", "ABCD") == "CQBQAD"
        assert engine.encrypt("caesar", 3, "Hi!") == "Kl!"

    def test_playfair_filler_is_separate(self, quiet_logger) -> None:
        config = LabConfig()
        config.cipher.filler = "Q"
        config.cipher.playfair_filler = "Z"
        cipher = CryptoLabEngine(config, logger=quiet_logger).build_cipher("playfair", "KEY")
        assert cipher.filler == "Z"

    def test_playfair_filler_ignores_name_case(self, quiet_logger) -> None:
        config = LabConfig()
        config.cipher.playfair_filler = "Z"
        engine = CryptoLabEngine(config, logger=quiet_logger)
        assert engine.build_cipher(" Playfair ", "KEY").filler == "Z"
        assert engine.build_cipher("PLAYFAIR", "KEY").filler == "Z"

    def test_rejected_key_is_left_to_the_caller_to_log(self, tmp_path) -> None:
        path = tmp_path / "engine.jsonl"
        logger = LabLogger(
            "engine-rejections", log_level="WARNING", log_file=path,
            json_logs=True, console_output=False,
        )
        with pytest.raises(InvalidKeyError):
            CryptoLabEngine(logger=logger).run("rail_fence", 9, "HELLO")
        assert (path.read_text(encoding="utf-8") if path.exists() else "") == ""


class TestAnalyze:
    def test_english(self, engine: CryptoLabEngine, english_text: str) -> None:
        report = engine.analyze(english_text)
        assert report.text_length > 300
        assert report.frequency.ic.interpretation is ICInterpretation.MONOALPHABETIC
        assert report.entropy_rate == pytest.approx(report.entropy.entropy / report.text_length)
        titles = [f.title for f in report.findings]
        assert any("frequency" in t.lower() or "frequencies" in t.lower() for t in titles)
        assert report.findings[0].severity in (Severity.HIGH, Severity.MEDIUM)

    def test_empty_text(self, engine: CryptoLabEngine) -> None:
        report = engine.analyze("1234")
        assert report.text_length == 0
        assert report.key_length is None
        assert report.friedman == []
        assert [f.title for f in report.findings] == ["No letters to analyse"]

    def test_short_sample_is_flagged(self, engine: CryptoLabEngine) -> None:
        report = engine.analyze("ATTACK AT DAWN")
        assert report.findings[0].title == "Short sample"

    def test_repeating_key_is_flagged(self, engine: CryptoLabEngine, english_text: str) -> None:
        ciphertext = VigenereCipher("LEMON").encrypt(english_text)
        report = engine.analyze(ciphertext)
        assert report.key_length is not None
        assert any(f.title == "Repeating key period detected" for f in report.findings)
        assert report.frequency.ic.value < engine.analyze(english_text).frequency.ic.value


class TestCompare:
    def test_vigenere_vs_caesar(self, engine: CryptoLabEngine, english_text: str) -> None:
        weak = engine.compare(english_text, engine.encrypt("caesar", 3, english_text))
        strong = engine.compare(
            english_text, engine.encrypt("vigenere", "CRYPTOGRAPHY", english_text)
        )
        assert strong.security.overall > weak.security.overall
        assert weak.security.grade in (SecurityGrade.D, SecurityGrade.F)
        assert weak.findings[0].title == f"Security grade {weak.security.grade.value}"
        assert any(f.title == "No entropy gain" for f in weak.findings)
        assert strong.entropy.delta > 0

    def test_reports_both_sides(self, engine: CryptoLabEngine) -> None:
        report = engine.compare("HELLO", "KHOOR")
        assert report.plaintext.text_length == report.ciphertext.text_length == 5
