"""
Reference Evaluator Tests
=========================

The evaluator is the oracle the other tests compare generated code
against, so its integer semantics are pinned down here.
"""

import pytest

from arithc.parser import parse_source
from arithc.evaluator import (
    INT64_MIN,
    INT64_MAX,
    evaluate,
    truncating_divide,
    wrap_int64,
)
from arithc.errors import EvaluationError


def value_of(source: str) -> int:
    return evaluate(parse_source(source))


class TestArithmetic:
    """Values of well-formed expressions."""

    @pytest.mark.parametrize("source,expected", [
        ("42", 42),
        ("2+3*4", 14),
        ("8-3-2", 3),
        ("(2+3)*4", 20),
        ("7/2", 3),
        ("8/4/2", 1),
        ("1-2", -1),
        ("(0-7)/2", -3),
        ("7/(0-2)", -3),
        ("(0-7)/(0-2)", 3),
        ("10/3*3", 9),
        ("2*(3+4)*5", 70),
        (" 1 +\t2 ", 3),
    ])
    def test_values(self, source, expected):
        assert value_of(source) == expected

    def test_product_wraps_to_64_bits(self):
        big = 2**31 - 1
        assert value_of(f"{big}*{big}*{big}") == wrap_int64(big**3)

    def test_long_chain(self):
        assert value_of("+".join(["1"] * 5000)) == 5000

    def test_long_mixed_chain(self):
        """Repeatedly multiplying and dividing by 3 returns the starting value."""
        assert value_of("2" + "*3/3" * 3000) == 2


class TestDivision:
    """Division truncates toward zero and faults like IDIV."""

    def test_truncation_toward_zero(self):
        assert truncating_divide(7, 2) == 3
        assert truncating_divide(-7, 2) == -3
        assert truncating_divide(7, -2) == -3
        assert truncating_divide(-7, -2) == 3

    def test_division_by_zero(self):
        with pytest.raises(EvaluationError):
            value_of("1/0")

    def test_division_by_computed_zero(self):
        with pytest.raises(EvaluationError):
            value_of("5/(2-2)")

    def test_quotient_overflow(self):
        with pytest.raises(EvaluationError):
            truncating_divide(INT64_MIN, -1)


class TestWrapping:
    """Two's-complement reduction."""

    def test_in_range_unchanged(self):
        assert wrap_int64(0) == 0
        assert wrap_int64(-1) == -1
        assert wrap_int64(INT64_MAX) == INT64_MAX

    def test_overflow_wraps_negative(self):
        assert wrap_int64(INT64_MAX + 1) == INT64_MIN

    def test_large_values_reduce(self):
        assert wrap_int64(2**64 + 5) == 5
