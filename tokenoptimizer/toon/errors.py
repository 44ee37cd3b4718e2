# -*- coding: utf-8 -*-
"""Location: ./tokenoptimizer/toon/errors.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

TOON error hierarchy.

Every error derives from ``ToonError``, itself a ``ValueError`` so callers
that only know about malformed data can keep catching ``ValueError``.

Examples:
    >>> err = SchemaArityMismatchError("expected 2 values but got 3", line=4, column=3)
    >>> str(err)
    'expected 2 values but got 3 (line 4, column 3)'
    >>> isinstance(err, ToonDecodeError), isinstance(err, ValueError)
    (True, True)
    >>> str(InvalidInputError("TOON text cannot be empty"))
    'TOON text cannot be empty'
"""

# Standard
from typing import Optional


class ToonError(ValueError):
    """Base class for TOON codec errors."""


class InvalidInputError(ToonError):
    """Raised when a public entry point receives missing or empty input."""


class ToonDecodeError(ToonError):
    """Raised when TOON text cannot be parsed.

    Attributes:
        message: Description of the problem.
        line: 1-based line where the problem was detected, if known.
        column: 1-based column where the problem was detected, if known.
    """

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None) -> None:
        """Initialize the decode error.

        Args:
            message: Description of the problem.
            line: 1-based line number.
            column: 1-based column number.
        """
        self.message = message
        self.line = line
        self.column = column
        if line is not None and column is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)


class MalformedArrayHeaderError(ToonDecodeError):
    """Raised for an unterminated ``[count]``/``{schema}`` header or a non-digit count."""


class SchemaArityMismatchError(ToonDecodeError):
    """Raised when a tabular row does not have one value per schema column."""


class UnexpectedStructureError(ToonDecodeError):
    """Raised for any other cursor state inconsistent with the TOON grammar."""
