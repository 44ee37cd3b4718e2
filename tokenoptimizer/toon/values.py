# -*- coding: utf-8 -*-
"""Location: ./tokenoptimizer/toon/values.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

TOON value model.

A value tree is built from the JSON-shaped Python types: ``None`` (Null),
``bool`` (Bool), ``int``/``float`` (Number), ``str`` (String), ``list``
(Array) and ``dict`` (Object, insertion ordered). ``kind_of`` maps a value
onto its variant so the encoder can dispatch over every variant explicitly.

Examples:
    >>> kind_of(None), kind_of(True), kind_of(1.5)
    (<ValueKind.NULL: 'null'>, <ValueKind.BOOL: 'bool'>, <ValueKind.NUMBER: 'number'>)
    >>> kind_of({"a": [1]})
    <ValueKind.OBJECT: 'object'>
    >>> parse_number("42"), parse_number("-2.5"), parse_number("1e3"), parse_number("nan")
    (42, -2.5, 1000.0, None)
    >>> format_number(3), format_number(3.0), format_number(float("inf"))
    ('3', '3.0', 'null')
"""

# Standard
from enum import Enum
import math
import re
from typing import Any, Dict, List, Optional, Union

# First-Party
from tokenoptimizer.toon.constants import FALSE_LITERAL, NULL_LITERAL, TRUE_LITERAL

# JSON-compatible types
JsonPrimitive = Union[str, int, float, bool, None]
JsonObject = Dict[str, Any]
JsonArray = List[Any]
JsonValue = Union[JsonPrimitive, JsonArray, JsonObject]

# Strict number literals; Python's int()/float() alone would also accept "nan", "inf" and "1_000".
_INTEGER_RE = re.compile(r"^[-+]?[0-9]+$")
_DECIMAL_RE = re.compile(r"^[-+]?(?:[0-9]+\.[0-9]*|\.[0-9]+|[0-9]+)(?:[eE][-+]?[0-9]+)?$")
_NUMERIC_CHARS = frozenset("0123456789.-+")


class ValueKind(str, Enum):
    """Variants of the TOON value tree.

    Examples:
        >>> ValueKind("array")
        <ValueKind.ARRAY: 'array'>
        >>> ValueKind.STRING.value
        'string'
    """

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


SCALAR_KINDS = frozenset({ValueKind.NULL, ValueKind.BOOL, ValueKind.NUMBER, ValueKind.STRING})


def kind_of(value: Any) -> ValueKind:
    """Classify a value into its variant.

    Args:
        value: Candidate value tree node.

    Returns:
        The variant of ``value``.

    Raises:
        TypeError: If ``value`` is not a JSON-shaped Python value.

    Examples:
        >>> kind_of("x")
        <ValueKind.STRING: 'string'>
        >>> kind_of(0)
        <ValueKind.NUMBER: 'number'>
        >>> kind_of(object())
        Traceback (most recent call last):
            ...
        TypeError: Object of type object is not a TOON value
    """
    if value is None:
        return ValueKind.NULL
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, list):
        return ValueKind.ARRAY
    if isinstance(value, dict):
        return ValueKind.OBJECT
    raise TypeError(f"Object of type {type(value).__name__} is not a TOON value")


def is_scalar(value: Any) -> bool:
    """Check whether a value is Null, Bool, Number or String.

    Args:
        value: Value to check.

    Returns:
        True for scalar variants.

    Examples:
        >>> is_scalar("a"), is_scalar([]), is_scalar(None)
        (True, False, True)
    """
    return kind_of(value) in SCALAR_KINDS


def is_reserved_literal(text: str) -> bool:
    """Check whether bare text would be read back as null or a boolean.

    Args:
        text: Candidate bare token.

    Returns:
        True for ``null`` and case-insensitive ``true``/``false``.

    Examples:
        >>> is_reserved_literal("null"), is_reserved_literal("TRUE"), is_reserved_literal("Null")
        (True, True, False)
    """
    return text == NULL_LITERAL or text.lower() in (TRUE_LITERAL, FALSE_LITERAL)


def looks_numeric(text: str) -> bool:
    """Check whether a string could be confused with a number.

    A string made only of digits, ``.``, ``-`` and ``+`` counts, as does any
    valid number literal such as ``1e5``.

    Args:
        text: Candidate string.

    Returns:
        True if the string needs quoting to stay a string.

    Examples:
        >>> looks_numeric("42"), looks_numeric("1.2.3"), looks_numeric("1e5"), looks_numeric("v1")
        (True, True, True, False)
    """
    if not text:
        return False
    if all(c in _NUMERIC_CHARS for c in text):
        return True
    return parse_number(text) is not None


def parse_number(text: str) -> Optional[Union[int, float]]:
    """Parse a strict integer or decimal literal.

    Args:
        text: Token to parse.

    Returns:
        ``int`` for integer literals, ``float`` for decimal literals, None otherwise.
    """
    if _INTEGER_RE.match(text):
        return int(text)
    if _DECIMAL_RE.match(text):
        return float(text)
    return None


def format_number(value: Union[int, float]) -> str:
    """Render a number in canonical text form.

    Integers use ``str``; finite floats use ``repr`` so the decimal form
    survives a round trip; NaN and infinities have no literal and become ``null``.

    Args:
        value: Number to render.

    Returns:
        Canonical text.
    """
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return NULL_LITERAL
        return repr(value)
    return str(value)


def format_bool(value: bool) -> str:
    """Render a boolean literal.

    Args:
        value: Boolean to render.

    Returns:
        ``true`` or ``false``.
    """
    return TRUE_LITERAL if value else FALSE_LITERAL
