"""
Entropy Analyzer
=================

Shannon entropy of the cleaned letter stream, normalised against the
26-letter maximum, plus bigram conditional entropy, entropy rate,
positional entropy and the plaintext/ciphertext comparison.

Entropy reference points (bits per letter):
    - English plaintext:             ~4.1-4.2
    - Monoalphabetic ciphertext:     same as its plaintext
    - Good polyalphabetic output:    approaching log2(26) ~ 4.70

Reference:
    Shannon, C. E. (1948). A Mathematical Theory of Communication.
    Bell System Technical Journal, 27(3), 379-423.
"""

from __future__ import annotations

import math

from labcore.math_utils import conditional_entropy, shannon_entropy

from cryptolab.core.errors import InvalidInputError
from cryptolab.core.models import (
    EntropyComparison,
    EntropyQuality,
    EntropyScore,
    PositionalEntropy,
    RandomnessLevel,
)
from cryptolab.core.text import ALPHABET_SIZE, normalize

MAX_ENTROPY: float = math.log2(ALPHABET_SIZE)

# Normalised-entropy floors for each randomness level, highest first
RANDOMNESS_THRESHOLDS: tuple[tuple[float, RandomnessLevel], ...] = (
    (0.9, RandomnessLevel.VERY_HIGH),
    (0.7, RandomnessLevel.HIGH),
    (0.5, RandomnessLevel.MEDIUM),
    (0.3, RandomnessLevel.LOW),
)

# Relative-improvement floors (percent, exclusive) for compare_entropy
IMPROVEMENT_EXCELLENT: float = 20.0
IMPROVEMENT_GOOD: float = 10.0
IMPROVEMENT_MODERATE: float = 0.0

# Normalised gain that counts as a fully effective cipher
IDEAL_IMPROVEMENT: float = 0.5


def rate_randomness(normalized: float) -> RandomnessLevel:
    for floor, level in RANDOMNESS_THRESHOLDS:
        if normalized >= floor:
            return level
    return RandomnessLevel.VERY_LOW


class EntropyAnalyzer:
    """Information-theoretic measurements over letters A-Z.

    Usage::

        analyzer = EntropyAnalyzer()
        score = analyzer.normalized_entropy(ciphertext)
        print(f"{score.entropy:.3f} bits ({score.rating.value})")
        delta = analyzer.compare_entropy(plaintext, ciphertext)
    """

    def entropy(self, text: str) -> float:
        """Shannon entropy in bits per letter, in ``[0, log2 26]``."""
        return min(shannon_entropy(normalize(text)), MAX_ENTROPY)

    def normalized_entropy(self, text: str) -> EntropyScore:
        h = self.entropy(text)
        normalized = h / MAX_ENTROPY
        return EntropyScore(
            entropy=h,
            max_entropy=MAX_ENTROPY,
            normalized=normalized,
            percentage=normalized * 100.0,
            rating=rate_randomness(normalized),
        )

    def conditional_entropy(self, text: str) -> float:
        """H(Y | X) over adjacent letter pairs.

        Low values mean the next letter is predictable from the current
        one, which is typical of natural language.
        """
        return conditional_entropy(normalize(text))

    def entropy_rate(self, text: str) -> float:
        """Total entropy divided by the number of letters (0 if empty)."""
        clean = normalize(text)
        if not clean:
            return 0.0
        return self.entropy(clean) / len(clean)

    def positional_entropy(self, text: str, key_length: int) -> list[PositionalEntropy]:
        """Entropy of every residue class ``i mod key_length``.

        With the right period of a polyalphabetic cipher each class is a
        monoalphabetic slice, so its entropy drops towards English levels.
        """
        if key_length < 1:
            raise InvalidInputError(f"key length must be >= 1, got {key_length}")
        clean = normalize(text)
        result = []
        for position in range(key_length):
            column = clean[position::key_length]
            h = self.entropy(column)
            result.append(
                PositionalEntropy(
                    position=position,
                    length=len(column),
                    entropy=h,
                    normalized=h / MAX_ENTROPY,
                )
            )
        return result

    def compare_entropy(self, plaintext: str, ciphertext: str) -> EntropyComparison:
        """How much the cipher raised the letter entropy.

        ``percent_improvement`` is relative to the plaintext's normalised
        entropy and is 0 when that is 0. Buckets: above 20% excellent,
        above 10% good, above 0% moderate, otherwise poor.
        """
        plain = self.normalized_entropy(plaintext)
        cipher = self.normalized_entropy(ciphertext)

        gain = cipher.normalized - plain.normalized
        improvement = gain / plain.normalized * 100.0 if plain.normalized > 0 else 0.0
        effectiveness = max(0.0, min(100.0, gain / IDEAL_IMPROVEMENT * 100.0))

        return EntropyComparison(
            plaintext=plain,
            ciphertext=cipher,
            delta=cipher.entropy - plain.entropy,
            percent_improvement=improvement,
            quality=self.classify_improvement(improvement),
            effectiveness=effectiveness,
        )

    @staticmethod
    def classify_improvement(percent: float) -> EntropyQuality:
        if percent > IMPROVEMENT_EXCELLENT:
            return EntropyQuality.EXCELLENT
        if percent > IMPROVEMENT_GOOD:
            return EntropyQuality.GOOD
        if percent > IMPROVEMENT_MODERATE:
            return EntropyQuality.MODERATE
        return EntropyQuality.POOR
