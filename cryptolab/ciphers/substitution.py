"""
Substitution Ciphers
====================

Caesar, Vigenere, Beaufort and Autokey. Each maps one letter to one
letter using a shift taken from a key stream:

- Caesar: constant shift.
- Vigenere: repeating keyword, ``c = p + k``.
- Beaufort: repeating keyword, ``c = k - p`` (reciprocal).
- Autokey: keyword followed by the plaintext itself.

References:
    - Kahn, D. (1996). The Codebreakers (rev. ed.). Scribner, Ch. 4.
    - Vigenere, B. de (1586). Traicte des Chiffres.
"""

from __future__ import annotations

from typing import Any

from cryptolab.ciphers.base import BaseCipher
from cryptolab.core.keys import KeywordKey, ShiftKey
from cryptolab.core.models import (
    AlphabetMapping,
    CharStep,
    CipherCategory,
    KeyStreamVisualization,
    Mode,
)
from cryptolab.core.text import ALPHABET, ALPHABET_SIZE


def _shift_letter(ch: str, shift: int) -> str:
    return ALPHABET[(ord(ch) - 65 + shift) % ALPHABET_SIZE]


# ===================================================================== #
#  Caesar
# ===================================================================== #


class CaesarCipher(BaseCipher):
    """Constant shift over the alphabet.

    With ``preserve_format=True`` the cipher works on raw text instead of
    clean text: case is kept and non-letters pass through unchanged.
    """

    name = "caesar"
    display_name = "Caesar Cipher"
    category = CipherCategory.SUBSTITUTION
    key_type = ShiftKey
    description = "Shift every letter a fixed number of places."
    option_names = ("preserve_format",)

    def __init__(self, key: Any, *, preserve_format: bool = False) -> None:
        super().__init__(key)
        self.shift: int = self.key.shift
        self.preserve_format = preserve_format

    def encrypt(self, text: str) -> str:
        if self.preserve_format:
            return self._shift_raw(text, self.shift)
        return super().encrypt(text)

    def decrypt(self, text: str) -> str:
        if self.preserve_format:
            return self._shift_raw(text, -self.shift)
        return super().decrypt(text)

    def _encrypt(self, clean: str) -> str:
        return "".join(_shift_letter(ch, self.shift) for ch in clean)

    def _decrypt(self, clean: str) -> str:
        return "".join(_shift_letter(ch, -self.shift) for ch in clean)

    @staticmethod
    def _shift_raw(text: str, shift: int) -> str:
        out = []
        for ch in text:
            if "A" <= ch <= "Z":
                out.append(_shift_letter(ch, shift))
            elif "a" <= ch <= "z":
                out.append(_shift_letter(ch.upper(), shift).lower())
            else:
                out.append(ch)
        return "".join(out)

    def _visualize(self, clean: str, mode: Mode) -> AlphabetMapping:
        shift = self.shift if mode is Mode.ENCRYPT else -self.shift
        steps = [
            CharStep(
                position=i,
                input=ch,
                key=ALPHABET[self.shift],
                shift=shift % ALPHABET_SIZE,
                output=_shift_letter(ch, shift),
            )
            for i, ch in enumerate(clean)
        ]
        return AlphabetMapping(
            cipher=self.name,
            mode=mode,
            shift=self.shift,
            plain_alphabet=ALPHABET,
            cipher_alphabet=ALPHABET[self.shift:] + ALPHABET[:self.shift],
            steps=steps,
        )


def rot13(text: str) -> str:
    """ROT13: Caesar with shift 13, keeping case and punctuation."""
    return CaesarCipher(13, preserve_format=True).encrypt(text)


# ===================================================================== #
#  Keyword stream ciphers
# ===================================================================== #


class _KeywordStreamCipher(BaseCipher):
    key_type = KeywordKey
    option_names = ()

    def __init__(self, key: Any) -> None:
        super().__init__(key)
        self.keyword: str = self.key.keyword

    def _key_stream(self, clean: str) -> str:
        reps = len(clean) // len(self.keyword) + 1
        return (self.keyword * reps)[:len(clean)]

    @staticmethod
    def _combine(ch: str, k: str, mode: Mode) -> str:
        raise NotImplementedError

    def _encrypt(self, clean: str) -> str:
        stream = self._key_stream(clean)
        return "".join(self._combine(c, k, Mode.ENCRYPT) for c, k in zip(clean, stream))

    def _decrypt(self, clean: str) -> str:
        stream = self._key_stream(clean)
        return "".join(self._combine(c, k, Mode.DECRYPT) for c, k in zip(clean, stream))

    def _visualize(self, clean: str, mode: Mode) -> KeyStreamVisualization:
        output = self.transform(clean, mode)
        stream = self._stream_for_display(clean, output, mode)
        steps = [
            CharStep(
                position=i,
                input=c,
                key=k,
                shift=ord(k) - 65,
                output=o,
            )
            for i, (c, k, o) in enumerate(zip(clean, stream, output))
        ]
        return KeyStreamVisualization(
            cipher=self.name, mode=mode, key_stream=stream, steps=steps
        )

    def _stream_for_display(self, clean: str, output: str, mode: Mode) -> str:
        return self._key_stream(clean)


class VigenereCipher(_KeywordStreamCipher):
    """Repeating-keyword polyalphabetic shift."""

    name = "vigenere"
    display_name = "Vigenere Cipher"
    category = CipherCategory.SUBSTITUTION
    description = "Shift each letter by the matching letter of a repeating keyword."

    @staticmethod
    def _combine(ch: str, k: str, mode: Mode) -> str:
        shift = ord(k) - 65
        return _shift_letter(ch, shift if mode is Mode.ENCRYPT else -shift)

    @staticmethod
    def tabula_recta() -> list[str]:
        """The 26x26 Vigenere square, one shifted alphabet per row."""
        return [ALPHABET[i:] + ALPHABET[:i] for i in range(ALPHABET_SIZE)]


class BeaufortCipher(_KeywordStreamCipher):
    """Reciprocal cipher: ``c = (k - p) mod 26`` in both directions."""

    name = "beaufort"
    display_name = "Beaufort Cipher"
    category = CipherCategory.SUBSTITUTION
    description = "Subtract each letter from the keyword letter; self-inverse."

    @staticmethod
    def _combine(ch: str, k: str, mode: Mode) -> str:
        return ALPHABET[(ord(k) - ord(ch)) % ALPHABET_SIZE]


class AutokeyCipher(_KeywordStreamCipher):
    """Key stream is the keyword followed by the plaintext.

    Decryption is inherently sequential: each recovered plaintext letter
    extends the key stream for the letters after it.
    """

    name = "autokey"
    display_name = "Autokey Cipher"
    category = CipherCategory.SUBSTITUTION
    description = "Vigenere whose key continues with the plaintext itself."

    def _encrypt(self, clean: str) -> str:
        stream = (self.keyword + clean)[:len(clean)]
        return "".join(
            _shift_letter(c, ord(k) - 65) for c, k in zip(clean, stream)
        )

    def _decrypt(self, clean: str) -> str:
        stream = list(self.keyword)
        plain: list[str] = []
        for i, ch in enumerate(clean):
            p = _shift_letter(ch, -(ord(stream[i]) - 65))
            plain.append(p)
            stream.append(p)
        return "".join(plain)

    def _stream_for_display(self, clean: str, output: str, mode: Mode) -> str:
        plaintext = clean if mode is Mode.ENCRYPT else output
        return (self.keyword + plaintext)[:len(clean)]


__all__ = [
    "AutokeyCipher",
    "BeaufortCipher",
    "CaesarCipher",
    "VigenereCipher",
    "rot13",
]
