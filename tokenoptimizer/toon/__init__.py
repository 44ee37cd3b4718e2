# -*- coding: utf-8 -*-
"""Location: ./tokenoptimizer/toon/__init__.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

TOON (Token-Oriented Object Notation) codec.

A compact, indentation-based encoding of the JSON data model that keeps
LLM token counts low while converting back to the original value tree.
"""

from tokenoptimizer.toon.decoder import coerce_scalar, parse, parse_object
from tokenoptimizer.toon.encoder import serialize
from tokenoptimizer.toon.errors import (
    InvalidInputError,
    MalformedArrayHeaderError,
    SchemaArityMismatchError,
    ToonDecodeError,
    ToonError,
    UnexpectedStructureError,
)
from tokenoptimizer.toon.values import kind_of, ValueKind

__all__ = [
    "serialize",
    "parse",
    "parse_object",
    "coerce_scalar",
    "kind_of",
    "ValueKind",
    "ToonError",
    "InvalidInputError",
    "ToonDecodeError",
    "MalformedArrayHeaderError",
    "SchemaArityMismatchError",
    "UnexpectedStructureError",
]
