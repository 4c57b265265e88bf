"""
Cipher Registry
===============

Maps catalog names to cipher classes. The registry is a plain immutable
mapping built at import time; it holds classes, never instances.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any

from cryptolab.ciphers.base import BaseCipher
from cryptolab.ciphers.placeholders import (
    BBSCipher,
    DESCipher,
    LCGCipher,
    OneTimePadCipher,
    RSACipher,
)
from cryptolab.ciphers.polygram import HillCipher, PlayfairCipher
from cryptolab.ciphers.product import SuperEncryptionCipher
from cryptolab.ciphers.substitution import (
    AutokeyCipher,
    BeaufortCipher,
    CaesarCipher,
    VigenereCipher,
)
from cryptolab.ciphers.transposition import (
    ColumnarCipher,
    DoubleTranspositionCipher,
    MyszkowskiCipher,
    RailFenceCipher,
)
from cryptolab.core.errors import UnsupportedOperationError
from cryptolab.core.keys import parse_key
from cryptolab.core.models import CipherInfo

_CIPHER_CLASSES: tuple[type[BaseCipher], ...] = (
    CaesarCipher,
    VigenereCipher,
    BeaufortCipher,
    AutokeyCipher,
    PlayfairCipher,
    HillCipher,
    RailFenceCipher,
    ColumnarCipher,
    MyszkowskiCipher,
    DoubleTranspositionCipher,
    SuperEncryptionCipher,
    OneTimePadCipher,
    LCGCipher,
    BBSCipher,
    DESCipher,
    RSACipher,
)

CIPHERS = MappingProxyType({cls.name: cls for cls in _CIPHER_CLASSES})


def get_cipher_class(name: str) -> type[BaseCipher]:
    """Look up a cipher class by catalog name (case-insensitive).

    Raises:
        UnsupportedOperationError: If *name* is not in the catalog.
    """
    try:
        return CIPHERS[name.strip().lower()]
    except KeyError:
        raise UnsupportedOperationError(
            f"Unknown cipher {name!r}. Available: {', '.join(CIPHERS)}"
        ) from None


def get_cipher(name: str, key: Any = None, **options: Any) -> BaseCipher:
    """Instantiate the cipher *name* with *key*.

    *key* may be a key model, a bare value (``3``, ``"LEMON"``, a nested
    matrix list) or, for CLI use, the key's string form. Options the
    cipher does not take (e.g. ``filler`` for Vigenere) are ignored.

    Raises:
        UnsupportedOperationError: Unknown cipher name.
        InvalidKeyError: The key fails validation.
    """
    cls = get_cipher_class(name)
    if isinstance(key, str) and cls.key_type is not None:
        key = parse_key(cls.key_type.model_fields["kind"].default, key)
    return cls.from_options(key, **options)


def list_ciphers() -> list[CipherInfo]:
    """Catalog entries for every registered cipher, in catalog order."""
    return [cls.info() for cls in _CIPHER_CLASSES]
