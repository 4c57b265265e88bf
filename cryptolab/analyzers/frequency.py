"""
Frequency Analyzer
===================

Performs letter-level frequency analysis on text, computing frequency
tables, a chi-squared comparison against English, the Index of
Coincidence (IC) and sliding-window n-gram counts.

The frequency analysis pipeline:
1. Clean the text (uppercase, ``A-Z`` only)
2. Count all 26 letters
3. Chi-squared test against the English reference frequencies
4. Index of Coincidence and its interpretation
5. Digraph and trigraph counts

Cipher type classification based on IC (heuristic boundaries):
    - IC >= 0.06          : Monoalphabetic substitution or transposition
    - 0.045 <= IC < 0.06  : Mixed / ambiguous
    - IC < 0.045          : Polyalphabetic substitution
    - IC ~ 0.0385 (1/26)  : Uniformly random letters

References:
    - Friedman, W. F. (1922). The Index of Coincidence and Its
      Applications in Cryptanalysis. Riverbank Publication No. 22.
    - Pearson, K. (1900). On the criterion that a given system of
      deviations. Philosophical Magazine, 50(302), 157-175.
    - Lewand, R. E. (2000). Cryptological Mathematics. Mathematical
      Association of America.
"""

from __future__ import annotations

from collections import Counter

from labcore.math_utils import chi_squared_test, index_of_coincidence

from cryptolab.core.errors import InvalidInputError
from cryptolab.core.models import (
    EnglishComparison,
    FrequencyReport,
    FrequencyTable,
    ICInterpretation,
    IndexOfCoincidence,
    LetterComparison,
    LetterFrequency,
    NGram,
)
from cryptolab.core.text import ALPHABET, ALPHABET_SIZE, normalize

# Reference English letter frequencies, in percent (Lewand, 2000).
ENGLISH_FREQUENCY: dict[str, float] = {
    "E": 12.702, "T": 9.056, "A": 8.167, "O": 7.507, "I": 6.966, "N": 6.749,
    "S": 6.327, "H": 6.094, "R": 5.987, "D": 4.253, "L": 4.025, "C": 2.782,
    "U": 2.758, "M": 2.406, "W": 2.360, "F": 2.228, "G": 2.015, "Y": 1.974,
    "P": 1.929, "B": 1.492, "V": 0.978, "K": 0.772, "J": 0.153, "X": 0.150,
    "Q": 0.095, "Z": 0.074,
}

IC_MONOALPHABETIC: float = 0.06
IC_AMBIGUOUS: float = 0.045

# Significance level for the English goodness-of-fit test
ENGLISH_P_THRESHOLD: float = 0.05


class FrequencyAnalyzer:
    """Letter frequency statistics for classical cryptanalysis.

    Usage::

        analyzer = FrequencyAnalyzer()
        table = analyzer.calculate_frequency("Attack at dawn")
        ic = analyzer.index_of_coincidence(ciphertext)
        print(f"IC: {ic.value:.4f} ({ic.interpretation.value})")

    Args:
        ic_monoalphabetic: IC at or above which text looks monoalphabetic.
        ic_ambiguous: IC at or above which text is ambiguous.
        digraph_top_k: Digraphs kept by :meth:`report`.
        trigraph_top_k: Trigraphs kept by :meth:`report`.
    """

    # IC of English plaintext and of uniformly random letters
    IC_ENGLISH: float = 0.0667
    IC_RANDOM: float = 1.0 / ALPHABET_SIZE

    def __init__(
        self,
        *,
        ic_monoalphabetic: float = IC_MONOALPHABETIC,
        ic_ambiguous: float = IC_AMBIGUOUS,
        digraph_top_k: int = 20,
        trigraph_top_k: int = 15,
    ) -> None:
        self.ic_monoalphabetic = ic_monoalphabetic
        self.ic_ambiguous = ic_ambiguous
        self.digraph_top_k = digraph_top_k
        self.trigraph_top_k = trigraph_top_k

    # ------------------------------------------------------------------ #
    #  Letter counts
    # ------------------------------------------------------------------ #

    def calculate_frequency(self, text: str) -> FrequencyTable:
        """Count all 26 letters of the cleaned text.

        Every letter is present even with a zero count; percentages sum
        to 100 whenever the text has at least one letter.
        """
        clean = normalize(text)
        total = len(clean)
        counts = Counter(clean)

        letters = []
        for letter in ALPHABET:
            count = counts.get(letter, 0)
            share = count / total if total else 0.0
            letters.append(
                LetterFrequency(
                    letter=letter,
                    count=count,
                    percentage=share * 100.0,
                    frequency=share,
                )
            )
        return FrequencyTable(letters=letters, total=total, unique_chars=len(counts))

    def compare_with_english(self, text: str) -> EnglishComparison:
        """Compare the observed distribution with English.

        The chi-squared statistic is computed on counts, with expected
        count ``E_i = expected%_i / 100 * n`` for each of the 26 letters.
        """
        table = self.calculate_frequency(text)
        n = table.total

        letters = []
        observed: list[float] = []
        expected: list[float] = []
        for entry in table.letters:
            ref = ENGLISH_FREQUENCY[entry.letter]
            letters.append(
                LetterComparison(
                    letter=entry.letter,
                    actual=entry.percentage,
                    expected=ref,
                    difference=entry.percentage - ref,
                    ratio=entry.percentage / ref,
                )
            )
            observed.append(entry.count)
            expected.append(ref / 100.0 * n)

        if n == 0:
            return EnglishComparison(letters=letters)

        chi2, p_value = chi_squared_test(observed, expected)
        return EnglishComparison(
            letters=letters,
            chi_squared=chi2,
            p_value=p_value,
            is_english_like=p_value >= ENGLISH_P_THRESHOLD,
        )

    # ------------------------------------------------------------------ #
    #  Index of Coincidence
    # ------------------------------------------------------------------ #

    def index_of_coincidence(self, text: str) -> IndexOfCoincidence:
        """IC = sum f_i (f_i - 1) / (n (n - 1)); 0 when n < 2.

        Reference:
            Friedman, W. F. (1922). The Index of Coincidence and Its
            Applications in Cryptanalysis.
        """
        clean = normalize(text)
        value = index_of_coincidence(Counter(clean).values())
        return IndexOfCoincidence(
            value=value,
            normalized=value * ALPHABET_SIZE,
            interpretation=self.interpret_ic(value),
        )

    def interpret_ic(self, value: float) -> ICInterpretation:
        if value >= self.ic_monoalphabetic:
            return ICInterpretation.MONOALPHABETIC
        if value >= self.ic_ambiguous:
            return ICInterpretation.AMBIGUOUS
        return ICInterpretation.POLYALPHABETIC

    # ------------------------------------------------------------------ #
    #  N-grams
    # ------------------------------------------------------------------ #

    @staticmethod
    def find_ngrams(text: str, n: int, top_k: int = 10) -> list[NGram]:
        """Most frequent sliding-window n-grams of the cleaned text.

        Sorted by descending count; ties keep first-occurrence order.
        ``percentage`` is the share of all ``len - n + 1`` windows.
        """
        if n < 1:
            raise InvalidInputError(f"n-gram length must be >= 1, got {n}")
        clean = normalize(text)
        windows = len(clean) - n + 1
        if windows <= 0 or top_k <= 0:
            return []

        counts = Counter(clean[i:i + n] for i in range(windows))
        ranked = sorted(counts.items(), key=lambda kv: -kv[1])[:top_k]
        return [
            NGram(sequence=seq, count=count, percentage=count / windows * 100.0)
            for seq, count in ranked
        ]

    # ------------------------------------------------------------------ #
    #  Full report
    # ------------------------------------------------------------------ #

    def report(self, text: str) -> FrequencyReport:
        """Complete frequency analysis of one text sample."""
        table = self.calculate_frequency(text)
        present = [entry for entry in table.by_count() if entry.count > 0]
        return FrequencyReport(
            table=table,
            comparison=self.compare_with_english(text),
            ic=self.index_of_coincidence(text),
            digraphs=self.find_ngrams(text, 2, self.digraph_top_k),
            trigraphs=self.find_ngrams(text, 3, self.trigraph_top_k),
            most_common=present[:5],
            least_common=list(reversed(present[-5:])),
        )
