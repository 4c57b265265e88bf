"""
Security Scorer
================

Condenses a ciphertext's statistics into a single 0-100 score:

    score = 0.4 * entropy + 0.3 * frequency + 0.3 * IC

- entropy:   normalised letter entropy x 100
- frequency: bucketed chi-squared distance from English (scale of
             percentages, so independent of text length)
- IC:        closeness of the IC to random text (0.038) rather than
             English (0.067)
"""

from __future__ import annotations

from cryptolab.core.models import (
    EntropyScore,
    FrequencyReport,
    SecurityGrade,
    SecurityScore,
)

ENTROPY_WEIGHT: float = 0.4
FREQUENCY_WEIGHT: float = 0.3
IC_WEIGHT: float = 0.3

RANDOM_IC: float = 0.038
ENGLISH_IC: float = 0.067

# (upper bound on chi-squared, score); anything above the last bound scores 10
_CHI_BUCKETS: tuple[tuple[float, float], ...] = (
    (20.0, 100.0),
    (40.0, 80.0),
    (60.0, 60.0),
    (80.0, 40.0),
    (100.0, 20.0),
)

_GRADES: tuple[tuple[float, SecurityGrade], ...] = (
    (90.0, SecurityGrade.A_PLUS),
    (80.0, SecurityGrade.A),
    (70.0, SecurityGrade.B),
    (60.0, SecurityGrade.C),
    (50.0, SecurityGrade.D),
)


class SecurityScorer:
    """Weighted security score for a ciphertext sample."""

    def score(self, entropy: EntropyScore, frequency: FrequencyReport) -> SecurityScore:
        entropy_score = min(100.0, entropy.normalized * 100.0)
        frequency_score = self.frequency_score(
            frequency.comparison.chi_squared, frequency.table.total
        )
        ic_score = self.ic_score(frequency.ic.value)

        overall = (
            entropy_score * ENTROPY_WEIGHT
            + frequency_score * FREQUENCY_WEIGHT
            + ic_score * IC_WEIGHT
        )
        return SecurityScore(
            overall=round(overall, 2),
            entropy_score=entropy_score,
            frequency_score=frequency_score,
            ic_score=ic_score,
            grade=self.grade(overall),
            recommendations=self.recommendations(overall),
        )

    @staticmethod
    def frequency_score(chi_squared: float, total: int) -> float:
        """Bucket the chi-squared statistic rescaled to percentages.

        The count-based statistic grows linearly with text length; the
        buckets are defined on ``chi2 * 100 / n``.
        """
        if total == 0:
            return 0.0
        scaled = chi_squared * 100.0 / total
        for bound, points in _CHI_BUCKETS:
            if scaled < bound:
                return points
        return 10.0

    @staticmethod
    def ic_score(ic: float) -> float:
        distance = abs(ic - RANDOM_IC)
        return max(0.0, (1.0 - distance / abs(ENGLISH_IC - RANDOM_IC)) * 100.0)

    @staticmethod
    def grade(overall: float) -> SecurityGrade:
        for floor, grade in _GRADES:
            if overall >= floor:
                return grade
        return SecurityGrade.F

    @staticmethod
    def recommendations(overall: float) -> list[str]:
        if overall >= 80:
            return ["Excellent encryption quality. Strong resistance to frequency analysis."]
        if overall >= 60:
            return [
                "Good encryption quality.",
                "Consider using longer keys for better security.",
            ]
        if overall >= 40:
            return [
                "Moderate encryption quality. Vulnerable to statistical attacks.",
                "Combine substitution with transposition (super encryption).",
            ]
        return [
            "Weak encryption quality.",
            "Consider using stronger cipher algorithms.",
        ]
