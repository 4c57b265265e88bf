"""Tests for the cipher registry and catalog placeholders."""

from __future__ import annotations

import pytest

from cryptolab.ciphers import CIPHERS, CaesarCipher, get_cipher, get_cipher_class, list_ciphers
from cryptolab.core.errors import InvalidKeyError, UnsupportedOperationError
from cryptolab.core.models import CipherCategory

PLACEHOLDERS = ["otp", "lcg", "bbs", "des", "rsa"]


def test_catalog_contents() -> None:
    names = [info.name for info in list_ciphers()]
    assert names[:4] == ["caesar", "vigenere", "beaufort", "autokey"]
    assert set(PLACEHOLDERS) <= set(names)
    assert len(names) == len(CIPHERS) == 16


def test_registry_is_read_only() -> None:
    with pytest.raises(TypeError):
        CIPHERS["rot13"] = CaesarCipher  # type: ignore[index]


def test_lookup_is_case_insensitive() -> None:
    assert get_cipher_class(" Caesar ") is CaesarCipher


def test_unknown_cipher() -> None:
    with pytest.raises(UnsupportedOperationError, match="Unknown cipher"):
        get_cipher("enigma", "KEY")


def test_string_keys_are_parsed() -> None:
    assert get_cipher("caesar", "3").encrypt("ABC") == "DEF"
    assert get_cipher("hill", "3,3,2,5").encrypt("HELP") == "HIAT"


def test_invalid_string_key() -> None:
    with pytest.raises(InvalidKeyError):
        get_cipher("rail_fence", "1")


def test_options_not_taken_are_ignored() -> None:
    cipher = get_cipher("vigenere", "KEY", filler="Q", preserve_format=True)
    assert cipher.encrypt("a b") == "KF"


def test_filler_option() -> None:
    cipher = get_cipher("columnar", "CBA", filler="Q")
    assert cipher.encrypt("ABCD") == "CQBQAD"


def test_info() -> None:
    info = {i.name: i for i in list_ciphers()}
    assert info["hill"].key_kind == "matrix"
    assert info["hill"].category is CipherCategory.POLYGRAM
    assert info["super_encryption"].key_kind == "dual_keyword"
    assert info["caesar"].implemented


@pytest.mark.parametrize("name", PLACEHOLDERS)
def test_placeholders_are_listed_but_unsupported(name: str) -> None:
    info = next(i for i in list_ciphers() if i.name == name)
    assert not info.implemented
    assert info.key_kind is None

    cipher = get_cipher(name)
    with pytest.raises(UnsupportedOperationError):
        cipher.encrypt("HELLO")
    with pytest.raises(UnsupportedOperationError):
        cipher.decrypt("HELLO")
    with pytest.raises(NotImplementedError):
        cipher.visualize("HELLO")
