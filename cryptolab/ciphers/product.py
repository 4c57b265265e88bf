"""
Product Cipher
==============

Super encryption: a Vigenere substitution followed by a columnar
transposition. Substitution hides letter identity, transposition hides
position, so the combination defeats both frequency analysis and
anagramming on their own.

Reference:
    - Shannon, C. E. (1949). Communication Theory of Secrecy Systems.
      Bell System Technical Journal, 28(4), 656-715.
"""

from __future__ import annotations

from typing import Any

from cryptolab.ciphers.base import BaseCipher
from cryptolab.ciphers.substitution import VigenereCipher
from cryptolab.ciphers.transposition import ColumnarCipher
from cryptolab.core.keys import DualKeywordKey
from cryptolab.core.models import CipherCategory, Mode, StagedVisualization


class SuperEncryptionCipher(BaseCipher):
    """Vigenere with the first keyword, then columnar with the second.

    The transposition stage uses an irregular grid (no padding), which
    keeps the round trip exact for every plaintext.
    """

    name = "super_encryption"
    display_name = "Super Encryption"
    category = CipherCategory.ADVANCED
    key_type = DualKeywordKey
    description = "Vigenere substitution followed by columnar transposition."
    option_names = ()

    def __init__(self, key: Any) -> None:
        super().__init__(key)
        self.substitution = VigenereCipher(self.key.first)
        self.transposition = ColumnarCipher(self.key.second, pad=False)

    def _encrypt(self, clean: str) -> str:
        return self.transposition.encrypt(self.substitution.encrypt(clean))

    def _decrypt(self, clean: str) -> str:
        return self.substitution.decrypt(self.transposition.decrypt(clean))

    def _visualize(self, clean: str, mode: Mode) -> StagedVisualization:
        if mode is Mode.ENCRYPT:
            middle = self.substitution.encrypt(clean)
            stages = [
                self.substitution.visualize(clean, mode),
                self.transposition.visualize(middle, mode),
            ]
        else:
            middle = self.transposition.decrypt(clean)
            stages = [
                self.transposition.visualize(clean, mode),
                self.substitution.visualize(middle, mode),
            ]
        return StagedVisualization(cipher=self.name, mode=mode, stages=stages)
