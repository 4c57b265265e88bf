"""
CryptoLab Mathematical Utilities
=================================

Central mathematics library providing entropy estimators, the chi-squared
goodness-of-fit test, coincidence statistics, divisor helpers and exact
modular matrix arithmetic used by the cipher transforms and analyzers.

Numeric kernels are backed by NumPy; anything that must be exact (matrix
determinants, modular inverses) is done on Python integers.

References (master list):
    [1] Shannon, C. E. (1948). A Mathematical Theory of Communication.
        Bell System Technical Journal, 27(3), 379-423.
    [2] Pearson, K. (1900). On the Criterion that a Given System of
        Deviations ... Philosophical Magazine, 50(302), 157-175.
    [3] Friedman, W. F. (1922). The Index of Coincidence and Its
        Applications in Cryptanalysis. Riverbank Publication No. 22.
    [4] Bareiss, E. H. (1968). Sylvester's Identity and Multistep
        Integer-Preserving Gaussian Elimination. Mathematics of
        Computation, 22(103), 565-578.
    [5] Hill, L. S. (1929). Cryptography in an Algebraic Alphabet.
        The American Mathematical Monthly, 36(6), 306-312.
"""

from __future__ import annotations

import math
from collections import Counter
from functools import reduce
from typing import Hashable, Iterable, Sequence

import numpy as np
from numpy.typing import NDArray


FloatArray = NDArray[np.floating]
IntArray = NDArray[np.integer]


# ========================== Entropy Measures ===============================


def shannon_entropy(symbols: Iterable[Hashable]) -> float:
    """Compute the Shannon entropy of a symbol sequence.

    .. math::

        H = -\\sum_x p(x) \\, \\log_2 p(x)

    Works on any iterable of hashable symbols: a string yields entropy in
    bits per character, a ``bytes`` object in bits per byte.

    Reference:
        Shannon, C. E. (1948). A Mathematical Theory of Communication.

    Args:
        symbols: Sequence of symbols to analyse.

    Returns:
        Shannon entropy in bits per symbol. Returns 0.0 for empty input.
    """
    counts = Counter(symbols)
    length = sum(counts.values())
    if length == 0:
        return 0.0

    probabilities = np.array(list(counts.values()), dtype=np.float64) / length
    entropy = float(-np.sum(probabilities * np.log2(probabilities)))
    # -0.0 for a single-symbol stream
    return max(entropy, 0.0)


def conditional_entropy(sequence: Sequence[Hashable]) -> float:
    """Compute the bigram conditional entropy H(Y | X).

    *X* is a symbol and *Y* the symbol that immediately follows it:

    .. math::

        H(Y|X) = -\\sum_{x,y} p(x,y) \\, \\log_2 \\frac{p(x,y)}{p(x)}

    where ``p(x)`` counts *x* only as the first element of a pair.

    Args:
        sequence: Ordered symbol sequence (usually cleaned text).

    Returns:
        Conditional entropy in bits. 0.0 when fewer than two symbols.
    """
    if len(sequence) < 2:
        return 0.0

    pairs = Counter(zip(sequence, sequence[1:]))
    firsts = Counter(sequence[:-1])
    total_pairs = len(sequence) - 1

    h = 0.0
    for (first, _), count in pairs.items():
        p_pair = count / total_pairs
        p_cond = count / firsts[first]
        h -= p_pair * math.log2(p_cond)
    return max(h, 0.0)


# ======================== Coincidence Statistics ===========================


def index_of_coincidence(counts: Iterable[int]) -> float:
    """Compute the Index of Coincidence from symbol counts.

    .. math::

        IC = \\frac{\\sum_i f_i (f_i - 1)}{N (N - 1)}

    Reference:
        Friedman, W. F. (1922). The Index of Coincidence and Its
        Applications in Cryptanalysis.

    Args:
        counts: Occurrence count of every symbol.

    Returns:
        IC in [0, 1]. Returns 0.0 when the total count is below 2.
    """
    freq = np.fromiter(counts, dtype=np.int64)
    n = int(freq.sum())
    if n < 2:
        return 0.0
    return float(np.sum(freq * (freq - 1))) / (n * (n - 1))


# ======================== Statistical Tests ================================


def chi_squared_test(
    observed: FloatArray | Sequence[float],
    expected: FloatArray | Sequence[float],
) -> tuple[float, float]:
    """Perform Pearson's chi-squared goodness-of-fit test.

    .. math::

        \\chi^2 = \\sum_i \\frac{(O_i - E_i)^2}{E_i}

    Categories whose expected value is zero are skipped. The p-value is
    computed with the regularised upper incomplete gamma function, matching
    ``scipy.stats.chi2.sf`` without requiring SciPy.

    Reference:
        Pearson, K. (1900). Philosophical Magazine, 50(302), 157-175.

    Args:
        observed: Observed counts (1-D array of length *k*).
        expected: Expected counts (1-D array of length *k*).

    Returns:
        Tuple of ``(chi2_statistic, p_value)``.

    Raises:
        ValueError: If arrays differ in shape or expected has negatives.
    """
    observed = np.asarray(observed, dtype=np.float64)
    expected = np.asarray(expected, dtype=np.float64)

    if observed.shape != expected.shape:
        raise ValueError(
            f"Array shapes must match: observed={observed.shape}, "
            f"expected={expected.shape}"
        )
    if np.any(expected < 0):
        raise ValueError("Expected values must be >= 0")

    mask = expected > 0
    chi2 = float(np.sum((observed[mask] - expected[mask]) ** 2 / expected[mask]))
    dof = int(mask.sum()) - 1

    if dof <= 0:
        return chi2, 1.0

    p_value = _upper_inc_gamma_reg(dof / 2.0, chi2 / 2.0)
    return chi2, p_value


# --------------- Incomplete gamma helpers (Numerical Recipes, Ch. 6) ------


def _upper_inc_gamma_reg(a: float, x: float) -> float:
    """Regularised upper incomplete gamma Q(a, x) = 1 - P(a, x).

    Uses series expansion for small *x* and the Lentz continued-fraction
    algorithm for large *x*.

    Reference:
        Press, W. H. et al. (2007). Numerical Recipes (3rd ed.).
        Cambridge University Press, Section 6.2.
    """
    if x <= 0.0 or a <= 0.0:
        return 1.0
    if x < a + 1.0:
        return 1.0 - _gamma_p_series(a, x)
    return _gamma_q_cf(a, x)


def _gamma_p_series(a: float, x: float) -> float:
    """Lower regularised incomplete gamma P(a, x) by series expansion."""
    ap = a
    delta = 1.0 / a
    total = delta
    for _ in range(300):
        ap += 1.0
        delta *= x / ap
        total += delta
        if abs(delta) < abs(total) * 1e-15:
            break
    return total * math.exp(-x + a * math.log(x) - math.lgamma(a))


def _gamma_q_cf(a: float, x: float) -> float:
    """Upper regularised incomplete gamma Q(a, x) by Lentz continued fraction."""
    tiny = 1e-30
    b = x + 1.0 - a
    c = 1.0 / tiny
    d = 1.0 / b
    f = d
    for i in range(1, 300):
        an = -i * (i - a)
        b += 2.0
        d = an * d + b
        if abs(d) < tiny:
            d = tiny
        c = b + an / c
        if abs(c) < tiny:
            c = tiny
        d = 1.0 / d
        delta = d * c
        f *= delta
        if abs(delta - 1.0) < 1e-15:
            break
    return f * math.exp(-x + a * math.log(x) - math.lgamma(a))


# ======================== Divisors =========================================


def find_factors(n: int) -> list[int]:
    """Return every positive divisor of *n* in ascending order.

    Args:
        n: Positive integer.

    Returns:
        Sorted list of divisors; empty for ``n <= 0``.
    """
    if n <= 0:
        return []

    factors: set[int] = set()
    for i in range(1, math.isqrt(n) + 1):
        if n % i == 0:
            factors.add(i)
            factors.add(n // i)
    return sorted(factors)


def gcd_all(values: Iterable[int]) -> int:
    """Greatest common divisor of every value (0 for an empty input)."""
    return reduce(math.gcd, values, 0)


# ======================== Modular Arithmetic ===============================


def mod_inverse(a: int, modulus: int) -> int:
    """Return the multiplicative inverse of *a* modulo *modulus*.

    Raises:
        ValueError: If ``gcd(a, modulus) != 1``.
    """
    a %= modulus
    if math.gcd(a, modulus) != 1:
        raise ValueError(f"{a} has no inverse modulo {modulus}")
    return pow(a, -1, modulus)


def integer_determinant(matrix: Sequence[Sequence[int]]) -> int:
    """Exact determinant of a square integer matrix.

    Uses fraction-free Bareiss elimination so every intermediate value
    stays an integer.

    Reference:
        Bareiss, E. H. (1968). Mathematics of Computation, 22(103).

    Raises:
        ValueError: If the matrix is not square.
    """
    m = [[int(v) for v in row] for row in matrix]
    n = len(m)
    if n == 0 or any(len(row) != n for row in m):
        raise ValueError("Matrix must be square and non-empty")

    sign = 1
    prev = 1
    for k in range(n - 1):
        if m[k][k] == 0:
            swap = next((i for i in range(k + 1, n) if m[i][k] != 0), None)
            if swap is None:
                return 0
            m[k], m[swap] = m[swap], m[k]
            sign = -sign
        for i in range(k + 1, n):
            for j in range(k + 1, n):
                m[i][j] = (m[i][j] * m[k][k] - m[i][k] * m[k][j]) // prev
        prev = m[k][k]
    return sign * m[n - 1][n - 1]


def adjugate(matrix: Sequence[Sequence[int]]) -> IntArray:
    """Adjugate (transposed cofactor matrix) of a square integer matrix."""
    arr = np.asarray(matrix, dtype=np.int64)
    n = arr.shape[0]
    if n == 1:
        return np.array([[1]], dtype=np.int64)

    cofactors = np.zeros((n, n), dtype=np.int64)
    for i in range(n):
        for j in range(n):
            minor = np.delete(np.delete(arr, i, axis=0), j, axis=1)
            cofactors[i, j] = (-1) ** (i + j) * integer_determinant(minor.tolist())
    return cofactors.T


def modular_matrix_inverse(
    matrix: Sequence[Sequence[int]], modulus: int = 26
) -> IntArray:
    """Inverse of a square integer matrix modulo *modulus*.

    .. math::

        K^{-1} = \\det(K)^{-1} \\cdot \\operatorname{adj}(K) \\pmod{m}

    Reference:
        Hill, L. S. (1929). Cryptography in an Algebraic Alphabet.

    Raises:
        ValueError: If the determinant is not coprime with *modulus*.
    """
    det_inv = mod_inverse(integer_determinant(matrix), modulus)
    return np.mod(det_inv * adjugate(matrix), modulus)


def matrix_vector_mod(
    matrix: IntArray | Sequence[Sequence[int]],
    vector: Sequence[int],
    modulus: int = 26,
) -> list[int]:
    """Multiply ``matrix @ vector`` and reduce every entry modulo *modulus*."""
    product = np.asarray(matrix, dtype=np.int64) @ np.asarray(vector, dtype=np.int64)
    return [int(v) for v in np.mod(product, modulus)]
