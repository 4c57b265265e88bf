"""
Polygram Ciphers
================

Ciphers that encrypt letters in fixed-size groups:

- Playfair: digraphs over a 5x5 key square (I and J share a cell).
- Hill: NxN key matrix multiplied with N-letter blocks modulo 26.

References:
    - Wheatstone, C. (1854). Playfair cipher, described in Kahn (1996).
    - Hill, L. S. (1929). Cryptography in an Algebraic Alphabet.
      The American Mathematical Monthly, 36(6), 306-312.
"""

from __future__ import annotations

from typing import Any

from labcore.math_utils import (
    integer_determinant,
    matrix_vector_mod,
    modular_matrix_inverse,
)

from cryptolab.ciphers.base import BaseCipher
from cryptolab.core.errors import InvalidInputError, InvalidKeyError
from cryptolab.core.keys import KeywordKey, MatrixKey
from cryptolab.core.models import (
    CipherCategory,
    DigraphStep,
    HillBlockStep,
    HillVisualization,
    Mode,
    PlayfairVisualization,
)
from cryptolab.core.text import ALPHABET_SIZE, from_indices, to_indices

PLAYFAIR_ALPHABET = "ABCDEFGHIKLMNOPQRSTUVWXYZ"
_SQUARE = 5


# ===================================================================== #
#  Playfair
# ===================================================================== #


class PlayfairCipher(BaseCipher):
    """Digraph substitution over a 5x5 keyed square.

    Plaintext preparation maps J to I, splits the text into pairs and
    inserts the filler between doubled letters and after an odd final
    letter. When the filler itself is doubled, ``Q`` stands in for it.

    Decryption removes those fillers again when ``strip_padding`` is set:
    a filler sitting between two identical letters at the second position
    of a digraph, and a filler closing the last digraph. J never comes
    back from I.
    """

    name = "playfair"
    display_name = "Playfair Cipher"
    category = CipherCategory.POLYGRAM
    key_type = KeywordKey
    description = "Digraph substitution over a 5x5 keyword square."

    def __init__(self, key: Any, *, filler: str = "X", strip_padding: bool = True) -> None:
        super().__init__(key, filler=filler, strip_padding=strip_padding)
        if self.filler == "J":
            raise InvalidKeyError("Playfair filler cannot be J")
        self.square = self._build_square(self.key.keyword)
        self._positions = {
            ch: (r, c)
            for r, row in enumerate(self.square)
            for c, ch in enumerate(row)
        }

    @staticmethod
    def _build_square(keyword: str) -> list[list[str]]:
        seen: list[str] = []
        for ch in keyword.replace("J", "I") + PLAYFAIR_ALPHABET:
            if ch not in seen:
                seen.append(ch)
        return [seen[i:i + _SQUARE] for i in range(0, len(seen), _SQUARE)]

    def _pad_for(self, ch: str) -> str:
        if ch != self.filler:
            return self.filler
        return "Q" if self.filler != "Q" else "Z"

    def prepare(self, clean: str) -> list[str]:
        """Split clean text into digraphs with filler letters inserted."""
        text = clean.replace("J", "I")
        pairs: list[str] = []
        i = 0
        while i < len(text):
            a = text[i]
            b = text[i + 1] if i + 1 < len(text) else None
            if b is None or a == b:
                pairs.append(a + self._pad_for(a))
                i += 1
            else:
                pairs.append(a + b)
                i += 2
        return pairs

    def _apply(self, pair: str, step: int) -> tuple[str, str]:
        (r1, c1), (r2, c2) = self._positions[pair[0]], self._positions[pair[1]]
        if r1 == r2:
            return (
                self.square[r1][(c1 + step) % _SQUARE]
                + self.square[r2][(c2 + step) % _SQUARE],
                "row",
            )
        if c1 == c2:
            return (
                self.square[(r1 + step) % _SQUARE][c1]
                + self.square[(r2 + step) % _SQUARE][c2],
                "column",
            )
        return self.square[r1][c2] + self.square[r2][c1], "rectangle"

    def _encrypt(self, clean: str) -> str:
        return "".join(self._apply(pair, 1)[0] for pair in self.prepare(clean))

    def _ciphertext_pairs(self, clean: str) -> list[str]:
        text = clean.replace("J", "I")
        if len(text) % 2:
            text = text[:-1]
        return [text[i:i + 2] for i in range(0, len(text), 2)]

    def _decrypt(self, clean: str) -> str:
        plain = "".join(
            self._apply(pair, -1)[0] for pair in self._ciphertext_pairs(clean)
        )
        return self._strip_fillers(plain) if self.strip_padding else plain

    def _strip_fillers(self, text: str) -> str:
        out: list[str] = []
        for i, ch in enumerate(text):
            if (
                i % 2 == 1
                and i + 1 < len(text)
                and text[i - 1] == text[i + 1]
                and ch == self._pad_for(text[i - 1])
            ):
                continue
            out.append(ch)
        if len(text) >= 2 and text[-1] == self._pad_for(text[-2]):
            out.pop()
        return "".join(out)

    def _visualize(self, clean: str, mode: Mode) -> PlayfairVisualization:
        if mode is Mode.ENCRYPT:
            pairs, step = self.prepare(clean), 1
        else:
            pairs, step = self._ciphertext_pairs(clean), -1
        digraphs = []
        for pair in pairs:
            output, rule = self._apply(pair, step)
            digraphs.append(DigraphStep(pair=pair, rule=rule, output=output))
        return PlayfairVisualization(
            cipher=self.name,
            mode=mode,
            square=[list(row) for row in self.square],
            prepared="".join(pairs),
            digraphs=digraphs,
        )


# ===================================================================== #
#  Hill
# ===================================================================== #


class HillCipher(BaseCipher):
    """Block cipher ``C = K . P (mod 26)`` with an invertible NxN matrix.

    Plaintext is padded with the filler to a multiple of N. Decryption
    multiplies by ``K^-1 = det(K)^-1 . adj(K) (mod 26)`` and strips the
    trailing filler letters from the final block.
    """

    name = "hill"
    display_name = "Hill Cipher"
    category = CipherCategory.POLYGRAM
    key_type = MatrixKey
    description = "Matrix multiplication mod 26 on fixed-size letter blocks."

    def __init__(self, key: Any, *, filler: str = "X", strip_padding: bool = True) -> None:
        super().__init__(key, filler=filler, strip_padding=strip_padding)
        self.matrix: list[list[int]] = self.key.matrix
        self.size: int = self.key.size
        self.determinant = integer_determinant(self.matrix) % ALPHABET_SIZE
        try:
            self.inverse = modular_matrix_inverse(self.matrix, ALPHABET_SIZE)
        except ValueError as exc:
            raise InvalidKeyError(f"Hill matrix is not invertible mod 26: {exc}") from exc

    def _pad(self, clean: str) -> str:
        remainder = len(clean) % self.size
        if remainder:
            clean += self.filler * (self.size - remainder)
        return clean

    def _blocks(self, text: str) -> list[str]:
        return [text[i:i + self.size] for i in range(0, len(text), self.size)]

    def _multiply(self, matrix: Any, text: str) -> str:
        out: list[int] = []
        for block in self._blocks(text):
            out.extend(matrix_vector_mod(matrix, to_indices(block), ALPHABET_SIZE))
        return from_indices(out)

    def _check_length(self, clean: str) -> None:
        if len(clean) % self.size:
            raise InvalidInputError(
                f"Hill ciphertext length {len(clean)} is not a multiple "
                f"of the block size {self.size}"
            )

    def _encrypt(self, clean: str) -> str:
        return self._multiply(self.matrix, self._pad(clean))

    def _decrypt(self, clean: str) -> str:
        self._check_length(clean)
        plain = self._multiply(self.inverse, clean)
        return self._strip_trailing_filler(plain, self.size)

    def _visualize(self, clean: str, mode: Mode) -> HillVisualization:
        if mode is Mode.ENCRYPT:
            text, matrix = self._pad(clean), self.matrix
        else:
            self._check_length(clean)
            text, matrix = clean, self.inverse
        steps = []
        for block in self._blocks(text):
            vector = to_indices(block)
            product = matrix_vector_mod(matrix, vector, ALPHABET_SIZE)
            steps.append(
                HillBlockStep(
                    block=block,
                    vector=vector,
                    product=product,
                    output=from_indices(product),
                )
            )
        return HillVisualization(
            cipher=self.name,
            mode=mode,
            matrix=[list(row) for row in self.matrix],
            inverse=[[int(v) for v in row] for row in self.inverse],
            determinant=self.determinant,
            padded=text,
            blocks=steps,
        )
