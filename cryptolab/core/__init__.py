"""
CryptoLab Core Module
=====================

Contains the central engine, the key types, the error taxonomy and the
data models of the CryptoLab cipher engine.
"""

from cryptolab.core.engine import CryptoLabEngine
from cryptolab.core.errors import (
    CryptoLabError,
    InvalidInputError,
    InvalidKeyError,
    UnsupportedOperationError,
)
from cryptolab.core.keys import (
    CipherKey,
    DualKeywordKey,
    KeywordKey,
    MatrixKey,
    RailKey,
    ShiftKey,
    make_key,
    parse_key,
)
from cryptolab.core.models import (
    AnalysisReport,
    CipherRun,
    ComparisonReport,
    EntropyComparison,
    EntropyScore,
    FrequencyReport,
    FrequencyTable,
    IndexOfCoincidence,
    KeyLengthEstimate,
    Mode,
    PerformanceMetric,
    SecurityScore,
    VisualizationData,
)
from cryptolab.core.text import normalize

__all__ = [
    "AnalysisReport",
    "CipherKey",
    "CipherRun",
    "ComparisonReport",
    "CryptoLabEngine",
    "CryptoLabError",
    "DualKeywordKey",
    "EntropyComparison",
    "EntropyScore",
    "FrequencyReport",
    "FrequencyTable",
    "IndexOfCoincidence",
    "InvalidInputError",
    "InvalidKeyError",
    "KeyLengthEstimate",
    "KeywordKey",
    "MatrixKey",
    "Mode",
    "PerformanceMetric",
    "RailKey",
    "SecurityScore",
    "ShiftKey",
    "UnsupportedOperationError",
    "VisualizationData",
    "make_key",
    "normalize",
    "parse_key",
]
