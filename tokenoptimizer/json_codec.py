# -*- coding: utf-8 -*-
"""Location: ./tokenoptimizer/json_codec.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

JSON collaborator for the TOON codec.

Converts host objects and JSON text to and from the value tree consumed by
the TOON serializer and produced by the TOON parser. orjson does the heavy
lifting; pydantic models are dumped in JSON mode and can be rebuilt from a
value tree.

Examples:
    >>> to_value_tree({"ids": (1, 2), 3: "three"})
    {'ids': [1, 2], '3': 'three'}
    >>> write_json_text(parse_json_text('{"a": [1, 2.5, null]}'))
    '{"a":[1,2.5,null]}'
"""

# Standard
from decimal import Decimal
import logging
from typing import Any, Optional, Type, TypeVar

# Third-Party
import orjson
from pydantic import BaseModel

# First-Party
from tokenoptimizer.toon.errors import InvalidInputError
from tokenoptimizer.toon.values import JsonValue

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _default(obj: Any) -> Any:
    """Serialize types orjson does not handle natively.

    Args:
        obj: Object orjson could not serialize.

    Returns:
        A JSON-compatible replacement.

    Raises:
        TypeError: If the object has no JSON representation.
    """
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    if isinstance(obj, Decimal):
        return float(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def to_value_tree(obj: Any) -> JsonValue:
    """Convert a host object into a value tree.

    Dataclasses, datetimes, enums and UUIDs are handled by orjson; pydantic
    models, sets and decimals by ``_default``. Non-string keys are stringified.

    Args:
        obj: Object to convert.

    Returns:
        Value tree made of dict/list/str/int/float/bool/None.

    Raises:
        InvalidInputError: If the object (or a nested part) is not JSON serializable,
            including integers outside the 64-bit range.

    Examples:
        >>> from pydantic import BaseModel
        >>> class User(BaseModel):
        ...     name: str
        ...     age: int
        >>> to_value_tree([User(name="ann", age=3)])
        [{'name': 'ann', 'age': 3}]
    """
    try:
        return orjson.loads(orjson.dumps(obj, default=_default, option=orjson.OPT_NON_STR_KEYS))
    except orjson.JSONEncodeError as e:
        raise InvalidInputError(f"Cannot convert to JSON: {e}") from e


def from_value_tree(value: JsonValue, model: Optional[Type[ModelT]] = None) -> Any:
    """Convert a value tree back into a host object.

    Args:
        value: Value tree, typically produced by the TOON parser.
        model: Optional pydantic model to validate the tree into.

    Returns:
        The model instance when ``model`` is given, otherwise the tree itself.

    Raises:
        pydantic.ValidationError: If the tree does not fit ``model``.

    Examples:
        >>> from pydantic import BaseModel
        >>> class Point(BaseModel):
        ...     x: int
        ...     y: int
        >>> from_value_tree({"x": 1, "y": 2}, Point)
        Point(x=1, y=2)
    """
    if model is None:
        return value
    return model.model_validate(value)


def parse_json_text(text: str) -> JsonValue:
    """Parse JSON text into a value tree.

    Args:
        text: JSON document.

    Returns:
        Decoded value tree.

    Raises:
        InvalidInputError: If the text is None, blank or not valid JSON.
    """
    if text is None:
        raise InvalidInputError("JSON text cannot be None")
    if not text.strip():
        raise InvalidInputError("JSON text cannot be empty")
    try:
        return orjson.loads(text)
    except orjson.JSONDecodeError as e:
        logger.debug(f"Rejected invalid JSON input: {e}")
        raise InvalidInputError(f"Invalid JSON: {e}") from e


def write_json_text(value: JsonValue, indent: bool = False) -> str:
    """Write a value tree as JSON text.

    Args:
        value: Value tree.
        indent: Pretty-print with two-space indentation instead of compact output.

    Returns:
        JSON text.

    Raises:
        InvalidInputError: If the tree holds an integer outside the 64-bit range.
    """
    option = orjson.OPT_INDENT_2 if indent else 0
    try:
        return orjson.dumps(value, default=_default, option=option).decode()
    except orjson.JSONEncodeError as e:
        raise InvalidInputError(f"Cannot write JSON: {e}") from e
