"""
CryptoLab Core Data Models
===========================

Pydantic models for the CryptoLab cipher engine and cryptanalysis layer.
These models represent letter frequency tables, English-reference
comparisons, Index of Coincidence readings, entropy scores, key-length
estimates, analysis and comparison reports, per-cipher visualisation data
and performance metrics.

All models are serialisable to JSON and designed for consumption by both
the CLI output layer and HTML report generators. Every value is built
fresh per call and never mutated afterwards.

References:
    - Shannon, C. E. (1948). A Mathematical Theory of Communication.
      Bell System Technical Journal, 27(3), 379-423.
    - Friedman, W. F. (1922). The Index of Coincidence and Its
      Applications in Cryptanalysis. Riverbank Publication No. 22.
    - Kasiski, F. W. (1863). Die Geheimschriften und die
      Dechiffrir-Kunst. Berlin: E. S. Mittler und Sohn.
    - Pearson, K. (1900). On the criterion that a given system of
      deviations from the probable. Philosophical Magazine, 50(302).
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny

from labcore.models import Finding


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ===================================================================== #
#  Enumerations
# ===================================================================== #


class Mode(str, enum.Enum):
    """Direction of a cipher run."""

    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"


class CipherCategory(str, enum.Enum):
    """Catalog grouping of the supported ciphers."""

    SUBSTITUTION = "substitution"
    POLYGRAM = "polygram"
    TRANSPOSITION = "transposition"
    ADVANCED = "advanced"
    STREAM = "stream"
    MODERN = "modern"


class ICInterpretation(str, enum.Enum):
    """Likely cipher family suggested by the Index of Coincidence."""

    MONOALPHABETIC = "Monoalphabetic"
    AMBIGUOUS = "Mixed"
    POLYALPHABETIC = "Polyalphabetic"


class RandomnessLevel(str, enum.Enum):
    """Qualitative rating of normalised letter entropy.

    Buckets on the normalised value (``H / log2 26``)::

        >= 0.9  VERY_HIGH
        >= 0.7  HIGH
        >= 0.5  MEDIUM
        >= 0.3  LOW
        else    VERY_LOW
    """

    VERY_HIGH = "Very High"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    VERY_LOW = "Very Low"

    @property
    def quality(self) -> str:
        """Short verdict shown next to the rating."""
        return {
            "Very High": "Excellent",
            "High": "Good",
            "Medium": "Moderate",
            "Low": "Poor",
            "Very Low": "Very Poor",
        }[self.value]

    @property
    def description(self) -> str:
        return {
            "Very High": "Text appears highly random, likely well encrypted.",
            "High": "Good randomness, likely encrypted with a strong cipher.",
            "Medium": "Moderate randomness, may be weakly encrypted.",
            "Low": "Low randomness, likely plaintext or weak encryption.",
            "Very Low": "Looks like plaintext or very weak encryption.",
        }[self.value]


class EntropyQuality(str, enum.Enum):
    """Bucket for the relative entropy gain of ciphertext over plaintext."""

    EXCELLENT = "excellent"
    GOOD = "good"
    MODERATE = "moderate"
    POOR = "poor"


class SecurityGrade(str, enum.Enum):
    """Letter grade derived from the weighted security score."""

    A_PLUS = "A+"
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


# ===================================================================== #
#  Frequency Models
# ===================================================================== #


class LetterFrequency(BaseModel):
    """Occurrence statistics for one letter.

    Attributes:
        letter: Uppercase letter A-Z.
        count: Number of occurrences in the cleaned text.
        percentage: Share of the total, 0-100.
        frequency: Share of the total, 0-1.
    """

    model_config = ConfigDict(frozen=True)

    letter: str
    count: int = 0
    percentage: float = 0.0
    frequency: float = 0.0


class FrequencyTable(BaseModel):
    """Counts for all 26 letters, present even with zero count.

    Attributes:
        letters: One entry per letter, in alphabetical order.
        total: Number of letters in the cleaned text.
        unique_chars: Number of letters with a non-zero count.
    """

    model_config = ConfigDict(frozen=True)

    letters: list[LetterFrequency] = Field(default_factory=list)
    total: int = 0
    unique_chars: int = 0

    def counts(self) -> dict[str, int]:
        return {entry.letter: entry.count for entry in self.letters}

    def percentages(self) -> dict[str, float]:
        return {entry.letter: entry.percentage for entry in self.letters}

    def by_count(self) -> list[LetterFrequency]:
        """Entries sorted by descending count (alphabetical on ties)."""
        return sorted(self.letters, key=lambda e: (-e.count, e.letter))


class LetterComparison(BaseModel):
    """Observed vs. reference English frequency for one letter."""

    model_config = ConfigDict(frozen=True)

    letter: str
    actual: float
    expected: float
    difference: float
    ratio: float


class EnglishComparison(BaseModel):
    """Per-letter comparison against English plus a chi-squared score.

    Attributes:
        letters: Per-letter deltas, alphabetical.
        chi_squared: Pearson statistic over letter counts.
        p_value: Goodness-of-fit p-value (25 degrees of freedom).
        is_english_like: Whether the p-value fails to reject English.
    """

    model_config = ConfigDict(frozen=True)

    letters: list[LetterComparison] = Field(default_factory=list)
    chi_squared: float = 0.0
    p_value: float = 1.0
    is_english_like: bool = False


class IndexOfCoincidence(BaseModel):
    """IC reading. ``normalized`` is ``value * 26`` (1.0 = uniform)."""

    model_config = ConfigDict(frozen=True)

    value: float = 0.0
    normalized: float = 0.0
    interpretation: ICInterpretation = ICInterpretation.POLYALPHABETIC


class NGram(BaseModel):
    """Sliding-window n-gram with count and share of all windows."""

    model_config = ConfigDict(frozen=True)

    sequence: str
    count: int
    percentage: float


class FrequencyReport(BaseModel):
    """Complete frequency-analysis result for one text sample."""

    model_config = ConfigDict(frozen=True)

    table: FrequencyTable
    comparison: EnglishComparison
    ic: IndexOfCoincidence
    digraphs: list[NGram] = Field(default_factory=list)
    trigraphs: list[NGram] = Field(default_factory=list)
    most_common: list[LetterFrequency] = Field(default_factory=list)
    least_common: list[LetterFrequency] = Field(default_factory=list)


# ===================================================================== #
#  Entropy Models
# ===================================================================== #


class EntropyScore(BaseModel):
    """Shannon entropy of the cleaned letter stream.

    Attributes:
        entropy: Raw entropy in bits per letter, in ``[0, log2 26]``.
        max_entropy: ``log2 26`` (about 4.7004).
        normalized: ``entropy / max_entropy`` in ``[0, 1]``.
        percentage: ``normalized * 100``.
        rating: Qualitative randomness level.
    """

    model_config = ConfigDict(frozen=True)

    entropy: float = 0.0
    max_entropy: float = 0.0
    normalized: float = 0.0
    percentage: float = 0.0
    rating: RandomnessLevel = RandomnessLevel.VERY_LOW

    @property
    def quality(self) -> str:
        return self.rating.quality


class PositionalEntropy(BaseModel):
    """Entropy of the letters at one position modulo a key length."""

    model_config = ConfigDict(frozen=True)

    position: int
    length: int
    entropy: float
    normalized: float


class EntropyComparison(BaseModel):
    """Entropy gain of a ciphertext over its plaintext.

    Attributes:
        plaintext: Entropy score of the plaintext.
        ciphertext: Entropy score of the ciphertext.
        delta: ``H(cipher) - H(plain)`` in bits.
        percent_improvement: Relative gain of the normalised entropy, in
            percent of the plaintext value (0 when the plaintext is 0).
        quality: Bucket for *percent_improvement*.
        effectiveness: Normalised gain scaled to 0-100.
    """

    model_config = ConfigDict(frozen=True)

    plaintext: EntropyScore
    ciphertext: EntropyScore
    delta: float
    percent_improvement: float
    quality: EntropyQuality
    effectiveness: float


class RepeatedSequence(BaseModel):
    """A substring that occurs more than once, with its spacing."""

    model_config = ConfigDict(frozen=True)

    sequence: str
    positions: list[int]
    distances: list[int]


class KeyLengthCandidate(BaseModel):
    """A candidate period with the share of distances it divides."""

    model_config = ConfigDict(frozen=True)

    length: int
    count: int
    score: float


class KeyLengthEstimate(BaseModel):
    """Kasiski examination result.

    Attributes:
        repeated_sequences: Every repeated substring of length 3-6.
        gcd: Greatest common divisor of all distances.
        candidates: Ranked candidate key lengths (best first).
        most_likely: Length of the top candidate, if any.
    """

    model_config = ConfigDict(frozen=True)

    repeated_sequences: list[RepeatedSequence] = Field(default_factory=list)
    gcd: int = 0
    candidates: list[KeyLengthCandidate] = Field(default_factory=list)
    most_likely: Optional[int] = None


class FriedmanCandidate(BaseModel):
    """Average per-column IC when the text is split at *length*."""

    model_config = ConfigDict(frozen=True)

    length: int
    average_ic: float
    confidence: float


# ===================================================================== #
#  Reports
# ===================================================================== #


class SecurityScore(BaseModel):
    """Weighted 0-100 score of how little a ciphertext leaks.

    Attributes:
        overall: Weighted total.
        entropy_score: Entropy component (weight 40%).
        frequency_score: Chi-squared component (weight 30%).
        ic_score: IC closeness to random text (weight 30%).
        grade: Letter grade A+ .. F.
        recommendations: Suggested next steps.
    """

    model_config = ConfigDict(frozen=True)

    overall: float
    entropy_score: float
    frequency_score: float
    ic_score: float
    grade: SecurityGrade
    recommendations: list[str] = Field(default_factory=list)


class AnalysisReport(BaseModel):
    """Everything the statistics layer knows about one text sample."""

    model_config = ConfigDict(frozen=True)

    text_length: int
    frequency: FrequencyReport
    entropy: EntropyScore
    conditional_entropy: float = 0.0
    entropy_rate: float = 0.0
    key_length: Optional[KeyLengthEstimate] = None
    friedman: list[FriedmanCandidate] = Field(default_factory=list)
    findings: list[Finding] = Field(default_factory=list)


class ComparisonReport(BaseModel):
    """Plaintext vs. ciphertext reports plus the derived deltas."""

    model_config = ConfigDict(frozen=True)

    plaintext: AnalysisReport
    ciphertext: AnalysisReport
    entropy: EntropyComparison
    security: SecurityScore
    findings: list[Finding] = Field(default_factory=list)


# ===================================================================== #
#  Visualisation Data
# ===================================================================== #


class VisualizationData(BaseModel):
    """Record of intermediate transform state, for display only."""

    model_config = ConfigDict(frozen=True)

    cipher: str
    mode: Mode = Mode.ENCRYPT


class CharStep(BaseModel):
    """One letter passing through a keyed substitution."""

    model_config = ConfigDict(frozen=True)

    position: int
    input: str
    key: str
    shift: int
    output: str


class AlphabetMapping(VisualizationData):
    """Caesar plain/cipher alphabets and the per-letter steps."""

    shift: int
    plain_alphabet: str
    cipher_alphabet: str
    steps: list[CharStep] = Field(default_factory=list)


class KeyStreamVisualization(VisualizationData):
    """Vigenere/Beaufort/Autokey key stream aligned with the text."""

    key_stream: str
    steps: list[CharStep] = Field(default_factory=list)


class DigraphStep(BaseModel):
    """A Playfair pair, the rule applied to it, and the output pair."""

    model_config = ConfigDict(frozen=True)

    pair: str
    rule: str
    output: str


class PlayfairVisualization(VisualizationData):
    square: list[list[str]]
    prepared: str
    digraphs: list[DigraphStep] = Field(default_factory=list)


class HillBlockStep(BaseModel):
    """One block: letters, vector, matrix product and output letters."""

    model_config = ConfigDict(frozen=True)

    block: str
    vector: list[int]
    product: list[int]
    output: str


class HillVisualization(VisualizationData):
    matrix: list[list[int]]
    inverse: list[list[int]]
    determinant: int
    padded: str
    blocks: list[HillBlockStep] = Field(default_factory=list)


class ZigzagPoint(BaseModel):
    """Position of one plaintext letter on the fence."""

    model_config = ConfigDict(frozen=True)

    index: int
    rail: int
    char: str


class RailFenceVisualization(VisualizationData):
    """Fence grid (``""`` for empty cells) and the zigzag path."""

    rails: int
    fence: list[list[str]]
    path: list[ZigzagPoint] = Field(default_factory=list)


class TranspositionVisualization(VisualizationData):
    """Grid written row-major and the order its columns are read.

    Attributes:
        key: Keyword driving the column order.
        grid: Rows of the (padded) grid.
        column_order: Column indices in reading order.
        groups: Columns read together (singletons for columnar,
            shared key letters for Myszkowski).
    """

    key: str
    grid: list[list[str]]
    column_order: list[int]
    groups: list[list[int]] = Field(default_factory=list)


class StagedVisualization(VisualizationData):
    """Multi-pass ciphers: one visualisation per stage."""

    stages: list[SerializeAsAny[VisualizationData]] = Field(default_factory=list)


# ===================================================================== #
#  Runs & Metrics
# ===================================================================== #


class PerformanceMetric(BaseModel):
    """Timing record for one cipher operation.

    Attributes:
        algorithm: Cipher name.
        operation: ``encrypt`` / ``decrypt`` / ``analyze``.
        timestamp: UTC time the operation finished.
        execution_time_ms: Wall-clock duration in milliseconds.
        input_size: Characters consumed.
        output_size: Characters produced.
        throughput: Characters per second.
        efficiency: Heuristic 0-100 score (fast and large is better).
    """

    model_config = ConfigDict(frozen=True)

    algorithm: str
    operation: str = "encrypt"
    timestamp: datetime = Field(default_factory=_utcnow)
    execution_time_ms: float = 0.0
    input_size: int = 0
    output_size: int = 0
    throughput: float = 0.0
    efficiency: float = 0.0


class CipherRun(BaseModel):
    """Result of running one cipher over one text."""

    model_config = ConfigDict(frozen=True)

    cipher: str
    mode: Mode
    input_text: str
    output_text: str
    visualization: Optional[SerializeAsAny[VisualizationData]] = None
    metric: Optional[PerformanceMetric] = None


class CipherInfo(BaseModel):
    """Catalog entry describing one cipher."""

    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str
    category: CipherCategory
    key_kind: Optional[str] = None
    implemented: bool = True
    description: str = ""
