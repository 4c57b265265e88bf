"""
Text Normalisation
==================

All substitution and transposition ciphers operate on *clean text*: the
input uppercased with everything outside ``A-Z`` removed.
"""

from __future__ import annotations

import re
import string

ALPHABET = string.ascii_uppercase
ALPHABET_SIZE = len(ALPHABET)

_NON_LETTERS = re.compile(r"[^A-Z]")


def normalize(text: str) -> str:
    """Uppercase *text* and drop every character outside ``A-Z``.

    Idempotent: ``normalize(normalize(t)) == normalize(t)``.
    """
    return _NON_LETTERS.sub("", text.upper())


def to_indices(text: str) -> list[int]:
    """Map clean text to alphabet positions (``A`` -> 0)."""
    return [ord(ch) - 65 for ch in text]


def from_indices(indices: list[int]) -> str:
    """Map alphabet positions back to letters, reducing mod 26."""
    return "".join(ALPHABET[i % ALPHABET_SIZE] for i in indices)
