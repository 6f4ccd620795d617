"""Tests for numeric helpers and grammar patterns."""

import math

import pytest

from csscalc.util import (
    REG_FN_CALC,
    REG_FN_VAR,
    REG_TYPE_DIM,
    divide,
    format_number,
    parse_number,
    round_to_precision,
)


class TestFormatNumber:
    def test_integral_float_drops_fraction(self):
        assert format_number(3.0) == "3"

    def test_fraction(self):
        assert format_number(0.5) == "0.5"

    def test_negative_zero(self):
        assert format_number(-0.0) == "0"

    def test_small_values_use_exponent(self):
        assert format_number(1e-7) == "1e-7"

    def test_small_values_above_threshold_are_positional(self):
        assert format_number(1.5e-6) == "0.0000015"

    def test_large_values_use_exponent(self):
        assert format_number(1e21) == "1e+21"

    def test_large_integral_uses_shortest_digits(self):
        assert format_number(1.2345678901234568e20) == "123456789012345680000"
        assert format_number(1e16) == "10000000000000000"

    def test_negative_integral(self):
        assert format_number(-3.0) == "-3"

    def test_full_precision_kept(self):
        assert format_number(0.1 + 0.2) == "0.30000000000000004"

    def test_non_finite(self):
        assert format_number(math.nan) == "NaN"
        assert format_number(math.inf) == "Infinity"
        assert format_number(-math.inf) == "-Infinity"


class TestRoundToPrecision:
    def test_hex_keeps_six_digits(self):
        assert round_to_precision(1 / 3, 16) == 0.333333

    def test_zero_bit_rounds_half_up(self):
        assert round_to_precision(2.5) == 3
        assert round_to_precision(-2.5) == -2

    def test_low_bit_keeps_four_digits(self):
        assert round_to_precision(1.23456789, 4) == 1.235

    def test_mid_bit_keeps_five_digits(self):
        assert round_to_precision(1.23456789, 10) == 1.2346

    def test_rejects_non_finite(self):
        with pytest.raises(TypeError):
            round_to_precision(math.inf, 16)

    def test_rejects_bad_bit(self):
        with pytest.raises(ValueError):
            round_to_precision(1.0, 17)


class TestParseNumber:
    def test_number_text(self):
        assert parse_number("1.5") == 1.5
        assert parse_number("-2") == -2.0

    def test_non_number_text(self):
        assert parse_number("1px") is None
        assert parse_number("+") is None

    def test_python_numbers(self):
        assert parse_number(4) == 4.0
        assert parse_number(math.inf) is None
        assert parse_number(True) is None


class TestDivide:
    def test_regular(self):
        assert divide(1.0, 4.0) == 0.25

    def test_signed_infinity(self):
        assert divide(1.0, 0.0) == math.inf
        assert divide(1.0, -0.0) == -math.inf
        assert divide(-1.0, 0.0) == -math.inf

    def test_zero_over_zero(self):
        assert math.isnan(divide(0.0, 0.0))


class TestPatterns:
    def test_dimension_units(self):
        assert REG_TYPE_DIM.match("1.5rem").groups() == ("1.5", "rem")
        assert REG_TYPE_DIM.match("90deg").groups() == ("90", "deg")
        assert REG_TYPE_DIM.match("1s") is None

    def test_math_function_detection(self):
        assert REG_FN_CALC.search("calc(1px)")
        assert REG_FN_CALC.search("1px max(1px, 2px)")
        assert not REG_FN_CALC.search("1px solid red")

    def test_var_detection(self):
        assert REG_FN_VAR.search("var(--a)")
        assert REG_FN_VAR.search("calc(var(--a) + 1px)")
        assert not REG_FN_VAR.search("calc(1px)")
