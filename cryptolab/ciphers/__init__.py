"""
CryptoLab Ciphers
=================

Classical cipher transforms. Every cipher derives from
:class:`~cryptolab.ciphers.base.BaseCipher` and is reachable through the
registry by its catalog name.
"""

from cryptolab.ciphers.base import BaseCipher
from cryptolab.ciphers.placeholders import PlaceholderCipher
from cryptolab.ciphers.polygram import HillCipher, PlayfairCipher
from cryptolab.ciphers.product import SuperEncryptionCipher
from cryptolab.ciphers.registry import CIPHERS, get_cipher, get_cipher_class, list_ciphers
from cryptolab.ciphers.substitution import (
    AutokeyCipher,
    BeaufortCipher,
    CaesarCipher,
    VigenereCipher,
    rot13,
)
from cryptolab.ciphers.transposition import (
    ColumnarCipher,
    DoubleTranspositionCipher,
    MyszkowskiCipher,
    RailFenceCipher,
)

__all__ = [
    "AutokeyCipher",
    "BaseCipher",
    "BeaufortCipher",
    "CIPHERS",
    "CaesarCipher",
    "ColumnarCipher",
    "DoubleTranspositionCipher",
    "HillCipher",
    "MyszkowskiCipher",
    "PlaceholderCipher",
    "PlayfairCipher",
    "RailFenceCipher",
    "SuperEncryptionCipher",
    "VigenereCipher",
    "get_cipher",
    "get_cipher_class",
    "list_ciphers",
    "rot13",
]
