"""Shared fixtures for the CryptoLab test suite."""

from __future__ import annotations

import pytest

from labcore.config import LabConfig
from labcore.logger import LabLogger

from cryptolab.core.engine import CryptoLabEngine
from cryptolab.metrics.sinks import InMemorySink
from cryptolab.metrics.tracker import PerformanceTracker

ENGLISH_SAMPLE = (
    "It was the best of times, it was the worst of times, it was the age of "
    "wisdom, it was the age of foolishness, it was the epoch of belief, it "
    "was the epoch of incredulity, it was the season of Light, it was the "
    "season of Darkness, it was the spring of hope, it was the winter of "
    "despair, we had everything before us, we had nothing before us, we were "
    "all going direct to Heaven, we were all going direct the other way. In "
    "short, the period was so far like the present period, that some of its "
    "noisiest authorities insisted on its being received, for good or for "
    "evil, in the superlative degree of comparison only."
)


@pytest.fixture
def english_text() -> str:
    return ENGLISH_SAMPLE


@pytest.fixture
def quiet_logger() -> LabLogger:
    return LabLogger("tests", log_level="CRITICAL", console_output=False)


@pytest.fixture
def tracker() -> PerformanceTracker:
    return PerformanceTracker(InMemorySink(limit=10))


@pytest.fixture
def engine(quiet_logger: LabLogger, tracker: PerformanceTracker) -> CryptoLabEngine:
    return CryptoLabEngine(LabConfig(), tracker=tracker, logger=quiet_logger)
