"""
Catalog Placeholders
====================

Stream and modern ciphers that appear in the catalog without a
transform. Constructing them succeeds so they can be listed; every
operation raises :class:`UnsupportedOperationError`.
"""

from __future__ import annotations

from typing import Any, NoReturn

from cryptolab.ciphers.base import BaseCipher
from cryptolab.core.errors import UnsupportedOperationError
from cryptolab.core.models import CipherCategory, CipherInfo, Mode


class PlaceholderCipher(BaseCipher):
    option_names = ()

    def __init__(self, key: Any = None) -> None:
        super().__init__(key)

    def _unsupported(self) -> NoReturn:
        raise UnsupportedOperationError(
            f"{self.display_name} is listed in the catalog but has no transform"
        )

    def encrypt(self, text: str) -> str:
        self._unsupported()

    def decrypt(self, text: str) -> str:
        self._unsupported()

    def visualize(self, text: str, mode: Mode | str = Mode.ENCRYPT) -> NoReturn:
        self._unsupported()

    def _encrypt(self, clean: str) -> str:
        self._unsupported()

    def _decrypt(self, clean: str) -> str:
        self._unsupported()

    def _visualize(self, clean: str, mode: Mode) -> NoReturn:
        self._unsupported()

    @classmethod
    def info(cls) -> CipherInfo:
        return super().info().model_copy(update={"implemented": False})


class OneTimePadCipher(PlaceholderCipher):
    name = "otp"
    display_name = "One-Time Pad"
    category = CipherCategory.STREAM
    description = "XOR with a truly random key as long as the message."


class LCGCipher(PlaceholderCipher):
    name = "lcg"
    display_name = "Linear Congruential Generator"
    category = CipherCategory.STREAM
    description = "Stream cipher keyed by an LCG sequence."


class BBSCipher(PlaceholderCipher):
    name = "bbs"
    display_name = "Blum Blum Shub"
    category = CipherCategory.STREAM
    description = "Stream cipher keyed by the BBS generator."


class DESCipher(PlaceholderCipher):
    name = "des"
    display_name = "DES"
    category = CipherCategory.MODERN
    description = "Data Encryption Standard, 16-round Feistel network."


class RSACipher(PlaceholderCipher):
    name = "rsa"
    display_name = "RSA"
    category = CipherCategory.MODERN
    description = "Public-key encryption based on integer factorisation."
