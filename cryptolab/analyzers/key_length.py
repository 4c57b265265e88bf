"""
Key Length Estimator
=====================

Two independent estimates of the period of a repeating-key cipher:

1. Kasiski examination: repeated substrings in the ciphertext usually
   come from the same plaintext fragment under the same key alignment,
   so the distances between them are multiples of the key length.
2. Friedman column test: split the text into ``L`` columns; at the true
   period every column is a Caesar shift of English and its IC rises
   towards 0.065.

References:
    - Kasiski, F. W. (1863). Die Geheimschriften und die
      Dechiffrir-Kunst. Berlin: E. S. Mittler und Sohn.
    - Friedman, W. F. (1922). The Index of Coincidence and Its
      Applications in Cryptanalysis. Riverbank Publication No. 22.
"""

from __future__ import annotations

from collections import Counter

from labcore.math_utils import find_factors, gcd_all, index_of_coincidence

from cryptolab.core.models import (
    FriedmanCandidate,
    KeyLengthCandidate,
    KeyLengthEstimate,
    RepeatedSequence,
)
from cryptolab.core.text import normalize

# Fewer cleaned letters than this gives no estimate
MIN_TEXT_LENGTH: int = 6

# Friedman column test
FRIEDMAN_MIN_TEXT_LENGTH: int = 20
FRIEDMAN_IC_FLOOR: float = 0.055
ENGLISH_COLUMN_IC: float = 0.065


class KeyLengthEstimator:
    """Estimate the key length of a periodic polyalphabetic cipher.

    Args:
        min_sequence: Shortest repeated substring considered.
        max_sequence: Longest repeated substring considered (also capped
            at half the text length).
        candidates: Number of ranked candidates returned.
    """

    def __init__(
        self,
        *,
        min_sequence: int = 3,
        max_sequence: int = 6,
        candidates: int = 5,
    ) -> None:
        self.min_sequence = min_sequence
        self.max_sequence = max_sequence
        self.candidates = candidates

    def find_repeated_sequences(self, clean: str) -> list[RepeatedSequence]:
        """Every substring of the configured lengths occurring twice or more.

        Distances are taken between consecutive occurrences. Order is by
        length, then by first occurrence.
        """
        upper = min(self.max_sequence, len(clean) // 2)
        repeated: list[RepeatedSequence] = []
        for length in range(self.min_sequence, upper + 1):
            positions: dict[str, list[int]] = {}
            for i in range(len(clean) - length + 1):
                positions.setdefault(clean[i:i + length], []).append(i)
            for seq, where in positions.items():
                if len(where) > 1:
                    distances = [b - a for a, b in zip(where, where[1:])]
                    repeated.append(
                        RepeatedSequence(sequence=seq, positions=where, distances=distances)
                    )
        return repeated

    def estimate_key_length(self, text: str, max_len: int = 20) -> KeyLengthEstimate | None:
        """Kasiski examination.

        Every distance votes for each of its factors in ``[2, max_len]``.
        A candidate's score is its vote count divided by the number of
        repeated sequences. Ties rank the shorter length first.

        Returns:
            The estimate, or ``None`` for fewer than 6 letters or when no
            substring repeats.
        """
        clean = normalize(text)
        if len(clean) < MIN_TEXT_LENGTH:
            return None

        repeated = self.find_repeated_sequences(clean)
        if not repeated:
            return None

        distances = [d for seq in repeated for d in seq.distances]
        votes: Counter[int] = Counter()
        for distance in distances:
            votes.update(f for f in find_factors(distance) if 2 <= f <= max_len)

        ranked = sorted(votes.items(), key=lambda kv: (-kv[1], kv[0]))
        candidates = [
            KeyLengthCandidate(length=length, count=count, score=count / len(repeated))
            for length, count in ranked[:self.candidates]
        ]
        return KeyLengthEstimate(
            repeated_sequences=repeated,
            gcd=gcd_all(distances),
            candidates=candidates,
            most_likely=candidates[0].length if candidates else None,
        )

    def friedman_key_lengths(self, text: str, max_len: int = 20) -> list[FriedmanCandidate]:
        """Rank periods by the average IC of their columns.

        Periods ``2 .. min(max_len, n // 4)`` are tried; only those whose
        average column IC exceeds 0.055 are kept, best first.
        """
        clean = normalize(text)
        if len(clean) < FRIEDMAN_MIN_TEXT_LENGTH:
            return []

        found: list[FriedmanCandidate] = []
        for length in range(2, min(max_len, len(clean) // 4) + 1):
            columns = [clean[offset::length] for offset in range(length)]
            average = sum(
                index_of_coincidence(Counter(col).values()) for col in columns
            ) / length
            if average > FRIEDMAN_IC_FLOOR:
                found.append(
                    FriedmanCandidate(
                        length=length,
                        average_ic=average,
                        confidence=min(100.0, average / ENGLISH_COLUMN_IC * 100.0),
                    )
                )
        found.sort(key=lambda c: -c.average_ic)
        return found[:self.candidates]
