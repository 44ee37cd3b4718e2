# -*- coding: utf-8 -*-
"""Unit tests for the TOON value model helpers."""

import math
from dataclasses import dataclass

import pytest

from tokenoptimizer.toon.values import (
    format_bool,
    format_number,
    is_reserved_literal,
    is_scalar,
    kind_of,
    looks_numeric,
    parse_number,
    ValueKind,
)


class TestKindOf:
    """Test classification of values into variants."""

    def test_scalars(self):
        """Every scalar type maps to its own variant."""
        assert kind_of(None) is ValueKind.NULL
        assert kind_of(False) is ValueKind.BOOL
        assert kind_of(0) is ValueKind.NUMBER
        assert kind_of(-1.5) is ValueKind.NUMBER
        assert kind_of("") is ValueKind.STRING

    def test_bool_is_not_a_number(self):
        """bool is checked before int."""
        assert kind_of(True) is ValueKind.BOOL

    def test_containers(self):
        """Lists are arrays and dicts are objects."""
        assert kind_of([]) is ValueKind.ARRAY
        assert kind_of({}) is ValueKind.OBJECT

    def test_unsupported_type(self):
        """Non-JSON values are rejected."""

        @dataclass
        class Point:
            x: int

        with pytest.raises(TypeError, match="Point"):
            kind_of(Point(1))
        with pytest.raises(TypeError):
            kind_of((1, 2))

    def test_is_scalar(self):
        """Only containers are non-scalar."""
        assert all(is_scalar(v) for v in (None, True, 1, 1.0, "x"))
        assert not is_scalar([1])
        assert not is_scalar({"a": 1})


class TestNumbers:
    """Test number parsing and formatting."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("0", 0),
            ("42", 42),
            ("-17", -17),
            ("+5", 5),
            ("007", 7),
            ("3.14", 3.14),
            ("-0.5", -0.5),
            (".5", 0.5),
            ("1e3", 1000.0),
            ("2.5E-2", 0.025),
        ],
    )
    def test_parse_valid(self, text, expected):
        """Integer and decimal literals parse to the matching type."""
        value = parse_number(text)
        assert value == expected
        assert type(value) is type(expected)

    @pytest.mark.parametrize("text", ["", "nan", "inf", "-Infinity", "1_000", "1.2.3", "0x10", "12a", "-", "e5", " 1", "\u0663", "\uff11\uff12", "1.\u0665"])
    def test_parse_invalid(self, text):
        """Anything that is not a strict literal is not a number."""
        assert parse_number(text) is None

    def test_format_integers_and_floats(self):
        """Integers and floats keep their distinct text forms."""
        assert format_number(3) == "3"
        assert format_number(-12) == "-12"
        assert format_number(3.0) == "3.0"
        assert format_number(0.1) == "0.1"
        assert format_number(10**20) == "100000000000000000000"

    def test_format_float_round_trips(self):
        """The rendered form parses back to the same float."""
        for value in (0.1, 1e-7, 1e16, -2.5, 123456.789):
            assert parse_number(format_number(value)) == value

    def test_format_non_finite(self):
        """NaN and infinities have no literal and become null."""
        assert format_number(math.nan) == "null"
        assert format_number(math.inf) == "null"
        assert format_number(-math.inf) == "null"

    def test_format_bool(self):
        """Booleans render in lowercase."""
        assert format_bool(True) == "true"
        assert format_bool(False) == "false"


class TestLiterals:
    """Test detection of strings that need protecting."""

    def test_reserved_literals(self):
        """null is case-sensitive, booleans are not."""
        assert is_reserved_literal("null")
        assert is_reserved_literal("true")
        assert is_reserved_literal("False")
        assert not is_reserved_literal("NULL")
        assert not is_reserved_literal("yes")

    @pytest.mark.parametrize("text", ["42", "-1", "3.14", "1.2.3", "+-", "1e5", "-2E+3", ".5"])
    def test_looks_numeric(self, text):
        """Number-like strings are detected."""
        assert looks_numeric(text)

    @pytest.mark.parametrize("text", ["", "v1", "1a", "hello", "e", "1 2"])
    def test_does_not_look_numeric(self, text):
        """Ordinary strings are not number-like."""
        assert not looks_numeric(text)
