"""Tests for pixel resolution of dimension tokens."""

import warnings

import pytest

from csscalc.cache import NullObject
from csscalc.dimension import resolve_dimension, resolve_length_in_pixels
from csscalc.errors import CalcTypeError, UnresolvedValueError
from csscalc.tokens import tokenize
from csscalc.warning_policy import CalcWarning, WarningPolicy


def _dim(text):
    return tokenize(text)[0]


class TestResolveLengthInPixels:
    def test_absolute(self):
        assert resolve_length_in_pixels(1.0, "in") == 96.0

    def test_points(self):
        assert resolve_length_in_pixels(2.0, "pt") == pytest.approx(8 / 3)

    def test_dimension_map(self):
        assert resolve_length_in_pixels(2.0, "em", {"dimension": {"em": 16}}) == 32.0

    def test_map_wins_over_table(self):
        assert resolve_length_in_pixels(1.0, "in", {"dimension": {"in": 100}}) == 100.0

    def test_unknown_is_nan(self):
        assert resolve_length_in_pixels(1.0, "vw") != resolve_length_in_pixels(1.0, "vw")

    def test_bad_callback_value_is_nan(self):
        value = resolve_length_in_pixels(1.0, "vw", {"dimension_callback": lambda unit: "wide"})
        assert value != value

    def test_angle_ignores_callback(self):
        value = resolve_length_in_pixels(90.0, "deg", {"dimension_callback": lambda unit: 16})
        assert value != value

    def test_angle_ignores_dimension_map(self):
        value = resolve_length_in_pixels(90.0, "deg", {"dimension": {"deg": 2}})
        assert value != value

    def test_callback_miss_falls_back_to_table(self):
        opts = {"dimension_callback": {"em": 16}.get}
        assert resolve_length_in_pixels(1.0, "in", opts) == 96.0
        assert resolve_length_in_pixels(2.0, "em", opts) == 32.0


class TestResolveDimension:
    def test_px_passthrough(self):
        assert resolve_dimension(_dim("10px")) == "10px"

    def test_inches(self):
        assert resolve_dimension(_dim("1in")) == "96px"

    def test_rounded(self):
        assert resolve_dimension(_dim("1cm")) == "37.7953px"

    def test_relative_unit_with_map(self):
        assert resolve_dimension(_dim("2em"), {"dimension": {"em": 16}}) == "32px"

    def test_relative_unit_with_callback(self):
        assert resolve_dimension(_dim("3vw"), {"dimension_callback": lambda unit: 10}) == "30px"

    def test_unresolved_length_warns(self):
        with pytest.warns(CalcWarning, match="W01") as record:
            result = resolve_dimension(_dim("1em"))
        assert len(record) == 1
        assert record[0].message.value == "1em"
        assert isinstance(result, NullObject)

    def test_angle_with_callback_kept(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            result = resolve_dimension(_dim("90deg"), {"dimension_callback": lambda unit: 16})
        assert isinstance(result, NullObject)

    def test_absolute_length_with_callback_miss(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            result = resolve_dimension(_dim("1in"), {"dimension_callback": lambda unit: None})
        assert result == "96px"

    def test_angle_not_resolved_silently(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            result = resolve_dimension(_dim("90deg"))
        assert isinstance(result, NullObject)

    def test_suppressed(self):
        policy = WarningPolicy(suppress=frozenset({"W01"}))
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            result = resolve_dimension(_dim("1em"), {"warning_policy": policy})
        assert isinstance(result, NullObject)

    def test_warn_as_error(self):
        policy = WarningPolicy(warn_as_error=frozenset({"W01"}))
        with pytest.raises(UnresolvedValueError, match="1em"):
            resolve_dimension(_dim("1em"), {"warning_policy": policy})

    def test_rejects_non_token(self):
        with pytest.raises(CalcTypeError):
            resolve_dimension("1px")

    def test_rejects_other_token(self):
        with pytest.raises(TypeError):
            resolve_dimension(tokenize(" ")[0])
