"""
Transposition Ciphers
=====================

Ciphers that reorder letters without changing them. All of them are
expressed as a *reading order*: the list of plaintext indices in the
order they appear in the ciphertext. Encryption gathers along that order
and decryption scatters back, so each pair is exactly inverse for a given
length.

- Rail fence: zigzag across ``rails`` rows, read rail by rail.
- Columnar: row-major grid of width ``len(key)``, columns read in the
  stable alphabetical order of the key letters.
- Myszkowski: like columnar, but columns sharing a key letter form one
  group that is read row by row across the group.
- Double transposition: two columnar passes.

References:
    - Gaines, H. F. (1956). Cryptanalysis: A Study of Ciphers and Their
      Solution. Dover, Ch. 4-9.
    - Myszkowski, E. (1902). Cryptographie indechiffrable.
"""

from __future__ import annotations

from typing import Any, Iterable

from cryptolab.ciphers.base import BaseCipher
from cryptolab.core.errors import InvalidInputError, InvalidKeyError
from cryptolab.core.keys import DualKeywordKey, KeywordKey, RailKey
from cryptolab.core.models import (
    CipherCategory,
    Mode,
    RailFenceVisualization,
    StagedVisualization,
    TranspositionVisualization,
    ZigzagPoint,
)


def gather(text: str, order: Iterable[int]) -> str:
    """Read *text* in the given index order."""
    return "".join(text[i] for i in order)


def scatter(text: str, order: list[int]) -> str:
    """Inverse of :func:`gather`: put ``text[j]`` back at ``order[j]``."""
    out = [""] * len(order)
    for j, index in enumerate(order):
        out[index] = text[j]
    return "".join(out)


# ===================================================================== #
#  Rail fence
# ===================================================================== #


class RailFenceCipher(BaseCipher):
    """Zigzag transposition.

    Decryption rebuilds rail boundaries from the text length alone by
    walking the zigzag twice: once to count letters per rail, once to
    deal the ciphertext back out in plaintext order.
    """

    name = "rail_fence"
    display_name = "Rail Fence Cipher"
    category = CipherCategory.TRANSPOSITION
    key_type = RailKey
    description = "Write letters in a zigzag over N rails and read rail by rail."
    option_names = ()

    def __init__(self, key: Any) -> None:
        super().__init__(key)
        self.rails: int = self.key.rails

    def rail_sequence(self, length: int) -> list[int]:
        """Rail index of every position along the zigzag."""
        sequence: list[int] = []
        rail, step = 0, 1
        for _ in range(length):
            sequence.append(rail)
            if rail == 0:
                step = 1
            elif rail == self.rails - 1:
                step = -1
            rail += step
        return sequence

    def _check_length(self, clean: str) -> None:
        if self.rails >= len(clean):
            raise InvalidKeyError(
                f"rails ({self.rails}) must be less than the text length "
                f"({len(clean)})"
            )

    def _encrypt(self, clean: str) -> str:
        self._check_length(clean)
        sequence = self.rail_sequence(len(clean))
        fence: list[list[str]] = [[] for _ in range(self.rails)]
        for ch, rail in zip(clean, sequence):
            fence[rail].append(ch)
        return "".join("".join(row) for row in fence)

    def _decrypt(self, clean: str) -> str:
        self._check_length(clean)
        sequence = self.rail_sequence(len(clean))

        counts = [0] * self.rails
        for rail in sequence:
            counts[rail] += 1

        rows: list[list[str]] = []
        start = 0
        for count in counts:
            rows.append(list(clean[start:start + count]))
            start += count

        cursors = [0] * self.rails
        out: list[str] = []
        for rail in sequence:
            out.append(rows[rail][cursors[rail]])
            cursors[rail] += 1
        return "".join(out)

    def _visualize(self, clean: str, mode: Mode) -> RailFenceVisualization:
        plaintext = clean
        if clean:
            self._check_length(clean)
            if mode is Mode.DECRYPT:
                plaintext = self._decrypt(clean)
        sequence = self.rail_sequence(len(plaintext))
        fence = [[""] * len(plaintext) for _ in range(self.rails)]
        path = []
        for index, (ch, rail) in enumerate(zip(plaintext, sequence)):
            fence[rail][index] = ch
            path.append(ZigzagPoint(index=index, rail=rail, char=ch))
        return RailFenceVisualization(
            cipher=self.name, mode=mode, rails=self.rails, fence=fence, path=path
        )


# ===================================================================== #
#  Columnar family
# ===================================================================== #


class ColumnarCipher(BaseCipher):
    """Keyed columnar transposition.

    Args:
        key: Keyword whose letters order the columns.
        pad: Complete the last row with the filler letter. Without
            padding the grid is irregular and the ciphertext has exactly
            the plaintext length.
        filler: Padding letter.
        strip_padding: Drop trailing filler from the last row on decrypt.
    """

    name = "columnar"
    display_name = "Columnar Transposition"
    category = CipherCategory.TRANSPOSITION
    key_type = KeywordKey
    description = "Write row by row, read columns in alphabetical key order."
    option_names = ("filler", "strip_padding")

    def __init__(
        self,
        key: Any,
        *,
        pad: bool = True,
        filler: str = "X",
        strip_padding: bool = True,
    ) -> None:
        super().__init__(key, filler=filler, strip_padding=strip_padding)
        self.keyword: str = self.key.keyword
        self.width = len(self.keyword)
        self.pad = pad

    def column_groups(self) -> list[list[int]]:
        """Columns read together, in reading order.

        Columnar reads one column at a time; ties between equal key
        letters are broken left to right.
        """
        order = sorted(range(self.width), key=lambda i: (self.keyword[i], i))
        return [[col] for col in order]

    def reading_order(self, length: int) -> list[int]:
        """Plaintext indices in ciphertext order for a text of *length*."""
        rows = -(-length // self.width)
        order: list[int] = []
        for group in self.column_groups():
            for row in range(rows):
                for col in group:
                    index = row * self.width + col
                    if index < length:
                        order.append(index)
        return order

    def _padded(self, clean: str) -> str:
        if not self.pad:
            return clean
        remainder = len(clean) % self.width
        if remainder:
            clean += self.filler * (self.width - remainder)
        return clean

    def _encrypt(self, clean: str) -> str:
        text = self._padded(clean)
        return gather(text, self.reading_order(len(text)))

    def _decrypt(self, clean: str) -> str:
        if self.pad and len(clean) % self.width:
            raise InvalidInputError(
                f"ciphertext length {len(clean)} is not a multiple of the "
                f"key length {self.width}"
            )
        plain = scatter(clean, self.reading_order(len(clean)))
        if self.pad:
            plain = self._strip_trailing_filler(plain, self.width)
        return plain

    def _visualize(self, clean: str, mode: Mode) -> TranspositionVisualization:
        text = self._padded(clean) if mode is Mode.ENCRYPT else clean
        if mode is Mode.DECRYPT and text:
            text = scatter(text, self.reading_order(len(text)))
        grid = [
            list(text[i:i + self.width]) for i in range(0, len(text), self.width)
        ]
        groups = self.column_groups()
        return TranspositionVisualization(
            cipher=self.name,
            mode=mode,
            key=self.keyword,
            grid=grid,
            column_order=[col for group in groups for col in group],
            groups=groups,
        )


class MyszkowskiCipher(ColumnarCipher):
    """Columnar variant where repeated key letters share a group.

    Groups are taken in alphabetical order of their letter; inside a
    group the grid is read row by row, left to right across the group's
    columns. With no repeated letters this is exactly columnar.
    """

    name = "myszkowski"
    display_name = "Myszkowski Transposition"
    description = "Columnar transposition that reads columns with equal key letters together."

    def column_groups(self) -> list[list[int]]:
        groups: list[list[int]] = []
        for letter in sorted(set(self.keyword)):
            groups.append([i for i, ch in enumerate(self.keyword) if ch == letter])
        return groups


class DoubleTranspositionCipher(BaseCipher):
    """Two columnar passes, the second key defaulting to the first.

    The first pass pads the grid; the second works on an irregular grid
    so its inverse is exact. Decryption undoes the second pass first.
    """

    name = "double_transposition"
    display_name = "Double Transposition"
    category = CipherCategory.TRANSPOSITION
    key_type = DualKeywordKey
    description = "Apply columnar transposition twice."

    def __init__(self, key: Any, *, filler: str = "X", strip_padding: bool = True) -> None:
        super().__init__(key, filler=filler, strip_padding=strip_padding)
        self.first = ColumnarCipher(
            self.key.first, filler=filler, strip_padding=strip_padding
        )
        self.second = ColumnarCipher(self.key.second, pad=False)

    def _encrypt(self, clean: str) -> str:
        return self.second.encrypt(self.first.encrypt(clean))

    def _decrypt(self, clean: str) -> str:
        return self.first.decrypt(self.second.decrypt(clean))

    def _visualize(self, clean: str, mode: Mode) -> StagedVisualization:
        if mode is Mode.ENCRYPT:
            middle = self.first.encrypt(clean)
            stages = [
                self.first.visualize(clean, mode),
                self.second.visualize(middle, mode),
            ]
        else:
            middle = self.second.decrypt(clean)
            stages = [
                self.second.visualize(clean, mode),
                self.first.visualize(middle, mode),
            ]
        return StagedVisualization(cipher=self.name, mode=mode, stages=stages)
