"""
CryptoLab Analyzers
====================

Cryptanalysis statistics over cleaned letter text. Each analyzer is a
stateless object whose methods are pure functions of their input.
"""

from cryptolab.analyzers.entropy import EntropyAnalyzer
from cryptolab.analyzers.frequency import ENGLISH_FREQUENCY, FrequencyAnalyzer
from cryptolab.analyzers.key_length import KeyLengthEstimator
from cryptolab.analyzers.scoring import SecurityScorer

__all__ = [
    "ENGLISH_FREQUENCY",
    "EntropyAnalyzer",
    "FrequencyAnalyzer",
    "KeyLengthEstimator",
    "SecurityScorer",
]
