"""
Cipher Base Class
==================

Every cipher in the catalog derives from :class:`BaseCipher`. The base
class validates the key once at construction, normalises input to clean
text, short-circuits empty input to ``""`` and dispatches to the
subclass hooks ``_encrypt`` / ``_decrypt`` / ``_visualize``.
"""

from __future__ import annotations

import abc
from typing import Any, ClassVar, Optional

from cryptolab.core.errors import InvalidKeyError
from cryptolab.core.keys import coerce_key
from cryptolab.core.models import (
    CipherCategory,
    CipherInfo,
    Mode,
    VisualizationData,
)
from cryptolab.core.text import normalize


class BaseCipher(abc.ABC):
    """Abstract cipher operating on clean ``A-Z`` text.

    Subclasses set the class attributes and implement the three hooks.
    The hooks always receive non-empty clean text.

    Attributes:
        name: Catalog identifier, e.g. ``"vigenere"``.
        display_name: Human-readable name.
        category: Catalog grouping.
        key_type: Key model the constructor expects (``None`` for none).
        option_names: Keyword options the constructor accepts.
    """

    name: ClassVar[str] = ""
    display_name: ClassVar[str] = ""
    category: ClassVar[CipherCategory] = CipherCategory.SUBSTITUTION
    key_type: ClassVar[Optional[type]] = None
    description: ClassVar[str] = ""
    option_names: ClassVar[tuple[str, ...]] = ("filler", "strip_padding")

    def __init__(
        self,
        key: Any = None,
        *,
        filler: str = "X",
        strip_padding: bool = True,
    ) -> None:
        self.key = coerce_key(key, self.key_type) if self.key_type else key
        filler = normalize(filler)
        if len(filler) != 1:
            raise InvalidKeyError("filler must be a single letter A-Z")
        self.filler = filler
        self.strip_padding = strip_padding

    # ------------------------------------------------------------------ #
    #  Public API
    # ------------------------------------------------------------------ #

    def encrypt(self, text: str) -> str:
        clean = normalize(text)
        if not clean:
            return ""
        return self._encrypt(clean)

    def decrypt(self, text: str) -> str:
        clean = normalize(text)
        if not clean:
            return ""
        return self._decrypt(clean)

    def transform(self, text: str, mode: Mode | str) -> str:
        """Run :meth:`encrypt` or :meth:`decrypt` by *mode*."""
        if Mode(mode) is Mode.ENCRYPT:
            return self.encrypt(text)
        return self.decrypt(text)

    def visualize(
        self, text: str, mode: Mode | str = Mode.ENCRYPT
    ) -> VisualizationData:
        """Record the intermediate state of transforming *text*."""
        return self._visualize(normalize(text), Mode(mode))

    @classmethod
    def from_options(cls, key: Any, **options: Any) -> BaseCipher:
        """Construct, ignoring options this cipher does not take."""
        accepted = {k: v for k, v in options.items() if k in cls.option_names}
        return cls(key, **accepted)

    @classmethod
    def info(cls) -> CipherInfo:
        kind = cls.key_type.model_fields["kind"].default if cls.key_type else None
        return CipherInfo(
            name=cls.name,
            display_name=cls.display_name,
            category=cls.category,
            key_kind=kind,
            implemented=True,
            description=cls.description,
        )

    # ------------------------------------------------------------------ #
    #  Hooks
    # ------------------------------------------------------------------ #

    @abc.abstractmethod
    def _encrypt(self, clean: str) -> str: ...

    @abc.abstractmethod
    def _decrypt(self, clean: str) -> str: ...

    @abc.abstractmethod
    def _visualize(self, clean: str, mode: Mode) -> VisualizationData: ...

    # ------------------------------------------------------------------ #
    #  Shared helpers
    # ------------------------------------------------------------------ #

    def _strip_trailing_filler(self, text: str, block: int) -> str:
        """Drop filler letters added to complete the last block.

        At most ``block - 1`` letters are removed. A plaintext that
        genuinely ends with the filler letter loses it.
        """
        if not self.strip_padding or block < 2:
            return text
        limit = len(text) - (block - 1)
        end = len(text)
        while end > limit and end > 0 and text[end - 1] == self.filler:
            end -= 1
        return text[:end]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r})"
