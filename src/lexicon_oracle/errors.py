# SPDX-License-Identifier: Apache-2.0
"""Exception types raised by the oracle."""

from __future__ import annotations

from collections.abc import Sequence


class OracleError(Exception):
    """Base class for oracle failures."""


class VocabularyUnavailable(OracleError, RuntimeError):
    """The vocabulary failed to load or is empty, so nothing can be generated."""

    def __init__(self, message: str = "Oracle: dictionary not loaded or empty") -> None:
        super().__init__(message)


class ExternalGeneratorError(OracleError, RuntimeError):
    """The external text generator could not be reached or returned garbage."""


class ConstraintViolation(OracleError, ValueError):
    """External output contained words outside the allowed vocabulary."""

    def __init__(self, offending: Sequence[str]) -> None:
        self.offending = tuple(offending)
        if self.offending:
            message = "Disallowed words in external output: " + ", ".join(self.offending)
        else:
            message = "External output contained no usable words"
        super().__init__(message)


__all__ = [
    "ConstraintViolation",
    "ExternalGeneratorError",
    "OracleError",
    "VocabularyUnavailable",
]
