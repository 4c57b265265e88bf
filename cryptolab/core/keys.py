"""
Cipher Key Types
=================

Typed, validated key structs for every cipher family. ``CipherKey`` is a
pydantic discriminated union on the ``kind`` field, so a key travels as a
single value yet always carries a known shape.

Keys are validated at construction. Callers should build them through
:func:`make_key` / :func:`parse_key`, which convert pydantic's
``ValidationError`` into :class:`~cryptolab.core.errors.InvalidKeyError`.
"""

from __future__ import annotations

import math
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from labcore.math_utils import integer_determinant

from cryptolab.core.errors import InvalidKeyError
from cryptolab.core.text import ALPHABET_SIZE


def _clean_keyword(value: Any, label: str = "keyword") -> str:
    if not isinstance(value, str):
        raise ValueError(f"{label} must be a string")
    word = value.strip().upper()
    if not word:
        raise ValueError(f"{label} must not be empty")
    if not all("A" <= ch <= "Z" for ch in word):
        raise ValueError(f"{label} must contain only letters A-Z, got {value!r}")
    return word


class _KeyBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class ShiftKey(_KeyBase):
    """Numeric shift in ``[0, 25]`` (Caesar)."""

    kind: Literal["shift"] = "shift"
    shift: int

    @field_validator("shift")
    @classmethod
    def _check_range(cls, v: int) -> int:
        if not 0 <= v < ALPHABET_SIZE:
            raise ValueError(f"shift must be in [0, 25], got {v}")
        return v


class KeywordKey(_KeyBase):
    """Alphabetic keyword, normalised to uppercase on ingestion."""

    kind: Literal["keyword"] = "keyword"
    keyword: str

    @field_validator("keyword", mode="before")
    @classmethod
    def _check_letters(cls, v: Any) -> str:
        return _clean_keyword(v)


class MatrixKey(_KeyBase):
    """Square NxN integer matrix, invertible modulo 26 (Hill)."""

    kind: Literal["matrix"] = "matrix"
    matrix: list[list[int]]

    @field_validator("matrix")
    @classmethod
    def _check_matrix(cls, v: list[list[int]]) -> list[list[int]]:
        n = len(v)
        if n == 0 or any(len(row) != n for row in v):
            raise ValueError("matrix must be square and non-empty")
        reduced = [[cell % ALPHABET_SIZE for cell in row] for row in v]
        det = integer_determinant(reduced) % ALPHABET_SIZE
        if math.gcd(det, ALPHABET_SIZE) != 1:
            raise ValueError(
                f"matrix is not invertible mod 26 (determinant {det} "
                f"shares a factor with 26)"
            )
        return reduced

    @property
    def size(self) -> int:
        return len(self.matrix)


class DualKeywordKey(_KeyBase):
    """Pair of keywords; *second* defaults to *first* when omitted."""

    kind: Literal["dual_keyword"] = "dual_keyword"
    first: str
    second: str = ""

    @model_validator(mode="before")
    @classmethod
    def _default_second(cls, data: Any) -> Any:
        if isinstance(data, dict):
            second = data.get("second")
            if second is None or (isinstance(second, str) and not second.strip()):
                data = {**data, "second": data.get("first")}
        return data

    @field_validator("first", mode="before")
    @classmethod
    def _check_first(cls, v: Any) -> str:
        return _clean_keyword(v, "first keyword")

    @field_validator("second", mode="before")
    @classmethod
    def _check_second(cls, v: Any) -> str:
        return _clean_keyword(v, "second keyword")


class RailKey(_KeyBase):
    """Rail count for the rail fence cipher (``rails >= 2``)."""

    kind: Literal["rails"] = "rails"
    rails: int

    @field_validator("rails")
    @classmethod
    def _check_rails(cls, v: int) -> int:
        if v < 2:
            raise ValueError(f"rails must be >= 2, got {v}")
        return v


CipherKey = Annotated[
    Union[ShiftKey, KeywordKey, MatrixKey, DualKeywordKey, RailKey],
    Field(discriminator="kind"),
]

KEY_KINDS: dict[str, type[_KeyBase]] = {
    "shift": ShiftKey,
    "keyword": KeywordKey,
    "matrix": MatrixKey,
    "dual_keyword": DualKeywordKey,
    "rails": RailKey,
}

_KEY_ADAPTER: TypeAdapter[Any] = TypeAdapter(CipherKey)


# ------------------------------------------------------------------ #
#  Factories
# ------------------------------------------------------------------ #


def _describe(exc: ValidationError) -> str:
    messages = []
    for err in exc.errors():
        msg = str(err.get("msg", "invalid value"))
        messages.append(msg.removeprefix("Value error, "))
    return "; ".join(messages)


def make_key(kind: str, **fields: Any) -> CipherKey:
    """Build and validate a key of the given *kind*.

    Example::

        make_key("shift", shift=3)
        make_key("matrix", matrix=[[3, 3], [2, 5]])

    Raises:
        InvalidKeyError: On an unknown kind or any validation failure.
    """
    if kind not in KEY_KINDS:
        raise InvalidKeyError(f"Unknown key kind: {kind!r}")
    try:
        return _KEY_ADAPTER.validate_python({"kind": kind, **fields})
    except ValidationError as exc:
        raise InvalidKeyError(_describe(exc)) from exc


def parse_key(kind: str, raw: str) -> CipherKey:
    """Parse a key from its command-line string form.

    Formats:
        - ``shift``: an integer, e.g. ``"3"``
        - ``keyword``: letters, e.g. ``"LEMON"``
        - ``matrix``: row-major integers separated by commas or spaces;
          the count must be a perfect square, e.g. ``"3,3,2,5"``
        - ``dual_keyword``: two keywords separated by ``:`` or ``,``,
          e.g. ``"LEMON:ZEBRA"``; a single keyword is used for both
        - ``rails``: an integer, e.g. ``"3"``

    Raises:
        InvalidKeyError: When *raw* does not match the expected format.
    """
    raw = raw.strip()
    if kind in ("shift", "rails"):
        try:
            number = int(raw)
        except ValueError as exc:
            raise InvalidKeyError(f"{kind} key must be an integer, got {raw!r}") from exc
        field_name = "shift" if kind == "shift" else "rails"
        return make_key(kind, **{field_name: number})
    if kind == "keyword":
        return make_key(kind, keyword=raw)
    if kind == "matrix":
        try:
            values = [int(tok) for tok in raw.replace(",", " ").split()]
        except ValueError as exc:
            raise InvalidKeyError(f"matrix key must be integers, got {raw!r}") from exc
        n = math.isqrt(len(values))
        if n == 0 or n * n != len(values):
            raise InvalidKeyError(
                f"matrix key needs a square number of entries, got {len(values)}"
            )
        rows = [values[i * n:(i + 1) * n] for i in range(n)]
        return make_key(kind, matrix=rows)
    if kind == "dual_keyword":
        sep = ":" if ":" in raw else ","
        first, _, second = raw.partition(sep)
        return make_key(kind, first=first, second=second or None)
    raise InvalidKeyError(f"Unknown key kind: {kind!r}")


def coerce_key(key: Any, expected: type[_KeyBase]) -> Any:
    """Return *key* as an instance of *expected*.

    Accepts an instance of *expected* directly, a mapping of its fields,
    or a bare value for single-field keys (``3`` for a shift, ``"KEY"``
    for a keyword, a nested list for a matrix).

    Raises:
        InvalidKeyError: If the key has the wrong kind or fails validation.
    """
    if isinstance(key, expected):
        return key
    kind = expected.model_fields["kind"].default
    if isinstance(key, _KeyBase):
        raise InvalidKeyError(
            f"expected a {kind!r} key, got {getattr(key, 'kind', '?')!r}"
        )
    if isinstance(key, dict):
        return make_key(kind, **{k: v for k, v in key.items() if k != "kind"})
    if expected is DualKeywordKey:
        if isinstance(key, (tuple, list)) and 1 <= len(key) <= 2:
            return make_key(kind, first=key[0], second=key[1] if len(key) > 1 else None)
        return make_key(kind, first=key)
    value_field = next(name for name in expected.model_fields if name != "kind")
    return make_key(kind, **{value_field: key})
