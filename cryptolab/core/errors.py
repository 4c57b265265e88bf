"""
CryptoLab Error Taxonomy
=========================

Every failure the cipher engine reports derives from
:class:`CryptoLabError`. The concrete classes also subclass the matching
builtin (``ValueError`` / ``NotImplementedError``) so generic callers can
catch them without importing this module.
"""

from __future__ import annotations


class CryptoLabError(Exception):
    """Base class for all CryptoLab errors."""


class InvalidKeyError(CryptoLabError, ValueError):
    """A key failed its type, format, range or invertibility checks."""


class InvalidInputError(CryptoLabError, ValueError):
    """Input text cannot be processed by the requested transform."""


class UnsupportedOperationError(CryptoLabError, NotImplementedError):
    """The cipher is listed in the catalog but has no transform."""
