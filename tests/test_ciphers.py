"""Known-answer, round-trip and edge-case tests for the cipher catalog."""

from __future__ import annotations

import pytest

from cryptolab.ciphers import (
    AutokeyCipher,
    BeaufortCipher,
    CaesarCipher,
    ColumnarCipher,
    DoubleTranspositionCipher,
    HillCipher,
    MyszkowskiCipher,
    PlayfairCipher,
    RailFenceCipher,
    SuperEncryptionCipher,
    VigenereCipher,
    get_cipher,
    rot13,
)
from cryptolab.ciphers.transposition import gather, scatter
from cryptolab.core.errors import InvalidInputError, InvalidKeyError
from cryptolab.core.models import (
    AlphabetMapping,
    HillVisualization,
    KeyStreamVisualization,
    Mode,
    PlayfairVisualization,
    RailFenceVisualization,
    StagedVisualization,
    TranspositionVisualization,
)
from cryptolab.core.text import normalize

PLAINTEXT = "We are discovered, save yourself"

ROUND_TRIP_CASES = [
    ("caesar", 3),
    ("caesar", 0),
    ("vigenere", "LEMON"),
    ("beaufort", "FORTIFICATION"),
    ("autokey", "QUEENLY"),
    ("playfair", "PLAYFAIREXAMPLE"),
    ("hill", [[3, 3], [2, 5]]),
    ("hill", [[6, 24, 1], [13, 16, 10], [20, 17, 15]]),
    ("rail_fence", 3),
    ("columnar", "ZEBRAS"),
    ("myszkowski", "TOMATO"),
    ("double_transposition", ("ZEBRAS", "TOMATO")),
    ("double_transposition", "KEY"),
    ("super_encryption", ("LEMON", "ZEBRA")),
]


@pytest.mark.parametrize(("name", "key"), ROUND_TRIP_CASES)
def test_round_trip(name: str, key: object) -> None:
    cipher = get_cipher(name, key)
    ciphertext = cipher.encrypt(PLAINTEXT)
    assert ciphertext.isalpha() and ciphertext.isupper()
    assert cipher.decrypt(ciphertext) == normalize(PLAINTEXT)


@pytest.mark.parametrize(("name", "key"), ROUND_TRIP_CASES)
def test_empty_input(name: str, key: object) -> None:
    cipher = get_cipher(name, key)
    assert cipher.encrypt("") == ""
    assert cipher.decrypt("!! 123 ??") == ""


class TestSubstitution:
    def test_caesar_known_answer(self) -> None:
        assert CaesarCipher(3).encrypt("HELLO") == "KHOOR"
        assert CaesarCipher(3).decrypt("khoor") == "HELLO"

    def test_caesar_preserve_format(self) -> None:
        cipher = CaesarCipher(3, preserve_format=True)
        assert cipher.encrypt("Hello, World!") == "Khoor, Zruog!"
        assert cipher.decrypt("Khoor, Zruog!") == "Hello, World!"

    def test_rot13_is_an_involution(self) -> None:
        assert rot13("Hello") == "Uryyb"
        assert rot13(rot13("Why did the chicken?")) == "Why did the chicken?"

    def test_vigenere_known_answer(self) -> None:
        assert VigenereCipher("LEMON").encrypt("attack at dawn") == "LXFOPVEFRNHR"

    def test_tabula_recta(self) -> None:
        square = VigenereCipher.tabula_recta()
        assert len(square) == 26
        assert square[0].startswith("ABC")
        assert square[25].startswith("ZAB")

    def test_beaufort_is_reciprocal(self) -> None:
        cipher = BeaufortCipher("FORTIFICATION")
        ciphertext = cipher.encrypt("DEFEND THE EAST WALL OF THE CASTLE")
        assert ciphertext == "CKMPVCPVWPIWUJOGIUAPVWRIWUUK"
        assert cipher.encrypt(ciphertext) == "DEFENDTHEEASTWALLOFTHECASTLE"

    def test_autokey_known_answer(self) -> None:
        cipher = AutokeyCipher("QUEENLY")
        assert cipher.encrypt("ATTACK AT DAWN") == "QNXEPVYTWTWP"
        assert cipher.decrypt("QNXEPVYTWTWP") == "ATTACKATDAWN"

    def test_caesar_visualization(self) -> None:
        view = CaesarCipher(3).visualize("ab")
        assert isinstance(view, AlphabetMapping)
        assert view.cipher_alphabet.startswith("DEF")
        assert [step.output for step in view.steps] == ["D", "E"]

    def test_key_stream_visualization(self) -> None:
        view = VigenereCipher("LEMON").visualize("ATTACKATDAWN")
        assert isinstance(view, KeyStreamVisualization)
        assert view.key_stream == "LEMONLEMONLE"
        assert "".join(step.output for step in view.steps) == "LXFOPVEFRNHR"

    def test_autokey_decrypt_visualization_shows_plaintext_stream(self) -> None:
        view = AutokeyCipher("QUEENLY").visualize("QNXEPVYTWTWP", Mode.DECRYPT)
        assert view.key_stream == "QUEENLYATTAC"


class TestPlayfair:
    def test_square(self) -> None:
        cipher = PlayfairCipher("PLAYFAIREXAMPLE")
        assert cipher.square[0] == ["P", "L", "A", "Y", "F"]
        assert all("J" not in row for row in cipher.square)

    def test_keyword_with_space_is_rejected(self) -> None:
        with pytest.raises(InvalidKeyError, match="only letters"):
            PlayfairCipher("PLAYFAIR EXAMPLE")

    def test_known_answer(self) -> None:
        cipher = PlayfairCipher("PLAYFAIREXAMPLE")
        ciphertext = cipher.encrypt("Hide the gold in the tree stump")
        assert ciphertext == "BMODZBXDNABEKUDMUIXMMOUVIF"

    def test_prepare_inserts_fillers(self) -> None:
        cipher = PlayfairCipher("KEY")
        assert cipher.prepare("HELLO") == ["HE", "LX", "LO"]
        assert cipher.prepare("ABC") == ["AB", "CX"]

    def test_doubled_filler_uses_q(self) -> None:
        assert PlayfairCipher("KEY").prepare("XX") == ["XQ", "XQ"]

    def test_fillers_are_stripped(self) -> None:
        cipher = PlayfairCipher("KEY")
        assert cipher.decrypt(cipher.encrypt("HELLO")) == "HELLO"

    def test_strip_padding_disabled(self) -> None:
        cipher = PlayfairCipher("KEY", strip_padding=False)
        assert cipher.decrypt(cipher.encrypt("HELLO")) == "HELXLO"

    def test_j_becomes_i(self) -> None:
        cipher = PlayfairCipher("KEY")
        assert cipher.decrypt(cipher.encrypt("JAM")) == "IAM"

    def test_filler_cannot_be_j(self) -> None:
        with pytest.raises(InvalidKeyError):
            PlayfairCipher("KEY", filler="J")

    def test_odd_ciphertext_drops_last_letter(self) -> None:
        cipher = PlayfairCipher("KEY", strip_padding=False)
        even = cipher.encrypt("ABCD")
        assert cipher.decrypt(even + "Q") == cipher.decrypt(even)

    def test_visualization_rules(self) -> None:
        view = PlayfairCipher("PLAYFAIREXAMPLE").visualize("HIDE")
        assert isinstance(view, PlayfairVisualization)
        assert len(view.square) == 5
        assert [d.pair for d in view.digraphs] == ["HI", "DE"]
        assert {d.rule for d in view.digraphs} <= {"row", "column", "rectangle"}


class TestHill:
    def test_known_answer(self) -> None:
        assert HillCipher([[3, 3], [2, 5]]).encrypt("HELP") == "HIAT"

    def test_pads_and_strips(self) -> None:
        cipher = HillCipher([[3, 3], [2, 5]])
        ciphertext = cipher.encrypt("ACT")
        assert len(ciphertext) == 4
        assert cipher.decrypt(ciphertext) == "ACT"

    def test_non_invertible_matrix(self) -> None:
        with pytest.raises(InvalidKeyError):
            HillCipher([[2, 4], [6, 8]])

    def test_ciphertext_length_must_fit_blocks(self) -> None:
        with pytest.raises(InvalidInputError):
            HillCipher([[3, 3], [2, 5]]).decrypt("ABC")

    def test_inverse(self) -> None:
        cipher = HillCipher([[3, 3], [2, 5]])
        assert cipher.determinant == 9
        assert [[int(v) for v in row] for row in cipher.inverse] == [[15, 17], [20, 9]]

    def test_visualization(self) -> None:
        view = HillCipher([[3, 3], [2, 5]]).visualize("HELP")
        assert isinstance(view, HillVisualization)
        assert [b.output for b in view.blocks] == ["HI", "AT"]
        assert view.blocks[0].vector == [7, 4]


class TestRailFence:
    def test_known_answer(self) -> None:
        assert RailFenceCipher(2).encrypt("HELLOWORLD") == "HLOOLELWRD"
        assert RailFenceCipher(2).decrypt("HLOOLELWRD") == "HELLOWORLD"

    def test_three_rails(self) -> None:
        cipher = RailFenceCipher(3)
        assert cipher.encrypt("WEAREDISCOVEREDFLEEATONCE") == "WECRLTEERDSOEEFEAOCAIVDEN"

    @pytest.mark.parametrize("rails", [5, 6])
    def test_rails_must_be_shorter_than_text(self, rails: int) -> None:
        with pytest.raises(InvalidKeyError):
            RailFenceCipher(rails).encrypt("HELLO")

    def test_rail_sequence(self) -> None:
        assert RailFenceCipher(3).rail_sequence(6) == [0, 1, 2, 1, 0, 1]

    def test_visualization(self) -> None:
        view = RailFenceCipher(2).visualize("HLOOLELWRD", Mode.DECRYPT)
        assert isinstance(view, RailFenceVisualization)
        assert "".join(view.fence[0]) == "HLOOL"
        assert [p.rail for p in view.path[:3]] == [0, 1, 0]


class TestColumnar:
    def test_known_answer(self) -> None:
        assert ColumnarCipher("CBA").encrypt("ABCDEF") == "CFBEAD"

    def test_padding(self) -> None:
        cipher = ColumnarCipher("CBA")
        assert cipher.encrypt("ABCD") == "CXBXAD"
        assert cipher.decrypt("CXBXAD") == "ABCD"

    def test_padded_decrypt_length(self) -> None:
        with pytest.raises(InvalidInputError):
            ColumnarCipher("CBA").decrypt("ABCD")

    def test_unpadded_is_exact(self) -> None:
        cipher = ColumnarCipher("ZEBRAS", pad=False)
        ciphertext = cipher.encrypt("WEAREDISCOVERED")
        assert len(ciphertext) == 15
        assert cipher.decrypt(ciphertext) == "WEAREDISCOVERED"

    def test_myszkowski_known_answer(self) -> None:
        cipher = MyszkowskiCipher("TOMATO", pad=False)
        assert cipher.encrypt("WEAREDISCOVEREDFLEEATONCE") == "ROFOACDTEDSEEEACWEIVRLENE"

    def test_myszkowski_equals_columnar_with_unique_letters(self) -> None:
        text = "THEQUICKBROWNFOXJUMPSOVERTHELAZYDOG"
        assert MyszkowskiCipher("ZEBRAS").encrypt(text) == ColumnarCipher("ZEBRAS").encrypt(text)

    def test_myszkowski_groups(self) -> None:
        assert MyszkowskiCipher("TOMATO").column_groups() == [[3], [2], [1, 5], [0, 4]]

    def test_transposition_visualization(self) -> None:
        view = ColumnarCipher("CBA").visualize("ABCDEF")
        assert isinstance(view, TranspositionVisualization)
        assert view.grid == [["A", "B", "C"], ["D", "E", "F"]]
        assert view.column_order == [2, 1, 0]

    def test_gather_scatter_inverse(self) -> None:
        order = [3, 0, 4, 1, 2]
        assert scatter(gather("ABCDE", order), order) == "ABCDE"


class TestProductCiphers:
    def test_double_transposition_second_key_defaults(self) -> None:
        cipher = DoubleTranspositionCipher("KEY")
        assert cipher.second.keyword == "KEY"
        inner = ColumnarCipher("KEY")
        outer = ColumnarCipher("KEY", pad=False)
        assert cipher.encrypt("ATTACKATDAWN") == outer.encrypt(inner.encrypt("ATTACKATDAWN"))

    def test_super_encryption_stages(self) -> None:
        cipher = SuperEncryptionCipher(("LEMON", "ZEBRA"))
        expected = ColumnarCipher("ZEBRA", pad=False).encrypt(
            VigenereCipher("LEMON").encrypt("ATTACKATDAWN")
        )
        assert cipher.encrypt("ATTACKATDAWN") == expected

    def test_super_encryption_keeps_trailing_filler_letters(self) -> None:
        cipher = SuperEncryptionCipher(("LEMON", "ZEBRA"))
        assert cipher.decrypt(cipher.encrypt("RELAX")) == "RELAX"

    def test_staged_visualization(self) -> None:
        view = SuperEncryptionCipher(("LEMON", "ZEBRA")).visualize("ATTACKATDAWN")
        assert isinstance(view, StagedVisualization)
        assert [stage.cipher for stage in view.stages] == ["vigenere", "columnar"]
        dumped = view.model_dump()
        assert "key_stream" in dumped["stages"][0]
