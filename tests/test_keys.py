"""Tests for clean-text normalisation and typed cipher keys."""

from __future__ import annotations

import pytest

from cryptolab.core.errors import CryptoLabError, InvalidKeyError
from cryptolab.core.keys import (
    DualKeywordKey,
    KeywordKey,
    MatrixKey,
    RailKey,
    ShiftKey,
    coerce_key,
    make_key,
    parse_key,
)
from cryptolab.core.text import from_indices, normalize, to_indices


class TestNormalize:
    def test_strips_non_letters_and_uppercases(self) -> None:
        assert normalize("Hello, World! 123") == "HELLOWORLD"

    @pytest.mark.parametrize("text", ["", "abc", "Ünïcode & digits 42", "ATTACK AT DAWN"])
    def test_idempotent(self, text: str) -> None:
        assert normalize(normalize(text)) == normalize(text)

    def test_indices(self) -> None:
        assert to_indices("AZ") == [0, 25]
        assert from_indices([0, 25, 26, -1]) == "AZAZ"


class TestKeyValidation:
    def test_shift_range(self) -> None:
        assert make_key("shift", shift=25).shift == 25
        with pytest.raises(InvalidKeyError):
            make_key("shift", shift=26)

    def test_keyword_is_cleaned(self) -> None:
        key = make_key("keyword", keyword=" lemon ")
        assert isinstance(key, KeywordKey)
        assert key.keyword == "LEMON"

    @pytest.mark.parametrize("word", ["", "LEM0N", "two words"])
    def test_keyword_rejects_non_letters(self, word: str) -> None:
        with pytest.raises(InvalidKeyError):
            make_key("keyword", keyword=word)

    def test_matrix_must_be_invertible_mod_26(self) -> None:
        with pytest.raises(InvalidKeyError):
            make_key("matrix", matrix=[[2, 4], [6, 8]])

    def test_matrix_must_be_square(self) -> None:
        with pytest.raises(InvalidKeyError):
            make_key("matrix", matrix=[[1, 2, 3], [4, 5, 6]])

    def test_matrix_size(self) -> None:
        key = make_key("matrix", matrix=[[3, 3], [2, 5]])
        assert isinstance(key, MatrixKey)
        assert key.size == 2

    def test_rails_minimum(self) -> None:
        assert make_key("rails", rails=2).rails == 2
        with pytest.raises(InvalidKeyError):
            make_key("rails", rails=1)

    def test_dual_keyword_second_defaults_to_first(self) -> None:
        key = make_key("dual_keyword", first="zebra")
        assert isinstance(key, DualKeywordKey)
        assert (key.first, key.second) == ("ZEBRA", "ZEBRA")

    def test_unknown_kind(self) -> None:
        with pytest.raises(InvalidKeyError):
            make_key("otp", value=1)

    def test_errors_share_a_base(self) -> None:
        with pytest.raises(CryptoLabError):
            make_key("shift", shift=-1)
        with pytest.raises(ValueError):
            make_key("shift", shift=-1)

    def test_keys_are_frozen(self) -> None:
        key = ShiftKey(shift=3)
        with pytest.raises(Exception):
            key.shift = 4  # type: ignore[misc]


class TestParseKey:
    def test_shift_and_rails(self) -> None:
        assert parse_key("shift", "3") == ShiftKey(shift=3)
        assert parse_key("rails", " 4 ") == RailKey(rails=4)

    def test_non_integer_shift(self) -> None:
        with pytest.raises(InvalidKeyError):
            parse_key("shift", "three")

    def test_matrix(self) -> None:
        key = parse_key("matrix", "3,3,2,5")
        assert key.matrix == [[3, 3], [2, 5]]

    def test_matrix_needs_square_count(self) -> None:
        with pytest.raises(InvalidKeyError):
            parse_key("matrix", "1,2,3")

    @pytest.mark.parametrize("raw", ["LEMON:ZEBRA", "lemon,zebra"])
    def test_dual_keyword(self, raw: str) -> None:
        key = parse_key("dual_keyword", raw)
        assert (key.first, key.second) == ("LEMON", "ZEBRA")


class TestCoerceKey:
    def test_bare_values(self) -> None:
        assert coerce_key(3, ShiftKey) == ShiftKey(shift=3)
        assert coerce_key("key", KeywordKey).keyword == "KEY"
        assert coerce_key(("ab", "cd"), DualKeywordKey).second == "CD"

    def test_wrong_kind(self) -> None:
        with pytest.raises(InvalidKeyError):
            coerce_key(ShiftKey(shift=3), KeywordKey)

    def test_missing_key(self) -> None:
        with pytest.raises(InvalidKeyError):
            coerce_key(None, KeywordKey)
