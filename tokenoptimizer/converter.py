# -*- coding: utf-8 -*-
"""Location: ./tokenoptimizer/converter.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Conversions between host objects, JSON text and TOON text.

Examples:
    >>> json_to_toon('{"name": "Ann", "tags": ["x", "y"]}')
    'name: Ann\\ntags[2]: x,y'
    >>> toon_to_json("name: Ann\\ntags[2]: x,y")
    '{"name":"Ann","tags":["x","y"]}'
"""

# Standard
from typing import Any, Optional, Type

# Third-Party
from pydantic import BaseModel

# First-Party
from tokenoptimizer.json_codec import from_value_tree, parse_json_text, to_value_tree, write_json_text
from tokenoptimizer.toon import parse, serialize
from tokenoptimizer.toon.errors import InvalidInputError


def to_toon(obj: Any) -> str:
    """Convert a host object to TOON text.

    Args:
        obj: Value tree or host object (pydantic model, dataclass, ...).

    Returns:
        TOON text.

    Raises:
        InvalidInputError: If ``obj`` is None or has no JSON form.

    Examples:
        >>> print(to_toon({"point": {"x": 1, "y": 2}}))
        point:
          x: 1
          y: 2
    """
    if obj is None:
        raise InvalidInputError("Object cannot be None")
    return serialize(to_value_tree(obj))


def json_to_toon(text: str) -> str:
    """Convert JSON text to TOON text.

    Args:
        text: JSON document.

    Returns:
        TOON text.

    Raises:
        InvalidInputError: If the text is None, blank or not valid JSON.
    """
    return serialize(parse_json_text(text))


def from_toon(text: str, model: Optional[Type[BaseModel]] = None) -> Any:
    """Parse TOON text into a value tree, or into a pydantic model.

    Args:
        text: TOON document.
        model: Optional pydantic model to validate the result into.

    Returns:
        The value tree, or a model instance when ``model`` is given.

    Raises:
        InvalidInputError: If the text is None or blank.
        ToonDecodeError: If the text is not valid TOON.

    Examples:
        >>> from_toon("ids[3]: 1,2,3")
        {'ids': [1, 2, 3]}
    """
    _require_text(text)
    return from_value_tree(parse(text), model)


def toon_to_json(text: str, indent: bool = False) -> str:
    """Convert TOON text to JSON text.

    Args:
        text: TOON document.
        indent: Pretty-print the JSON output.

    Returns:
        JSON text.

    Raises:
        InvalidInputError: If the text is None or blank, or holds an integer JSON cannot carry.
        ToonDecodeError: If the text is not valid TOON.

    Examples:
        >>> print(toon_to_json("a: 1", indent=True))
        {
          "a": 1
        }
    """
    _require_text(text)
    return write_json_text(parse(text), indent=indent)


def _require_text(text: str) -> None:
    """Reject missing or blank TOON input.

    Args:
        text: Candidate TOON document.

    Raises:
        InvalidInputError: If the text is None or blank.
    """
    if text is None:
        raise InvalidInputError("TOON text cannot be None")
    if not text.strip():
        raise InvalidInputError("TOON text cannot be empty")
