"""Tests for the number and list coercion helpers in workout_response_parser.utils."""

from workout_response_parser.utils import (
    as_list,
    coerce_float,
    coerce_int,
    to_float,
    to_int,
    upper_from_range,
)


class TestToInt:
    """Tests for to_int function."""

    def test_valid_integer_string(self):
        assert to_int("42") == 42

    def test_negative_integer_string(self):
        assert to_int("-7") == -7

    def test_none_returns_none(self):
        assert to_int(None) is None

    def test_invalid_string_returns_none(self):
        assert to_int("abc") is None

    def test_float_string_returns_none(self):
        assert to_int("3.14") is None


class TestToFloat:
    """Tests for to_float function."""

    def test_valid_float_string(self):
        assert to_float("0.75") == 0.75

    def test_none_returns_none(self):
        assert to_float(None) is None

    def test_invalid_string_returns_none(self):
        assert to_float("high") is None


class TestUpperFromRange:
    """Tests for upper_from_range function."""

    def test_simple_range(self):
        assert upper_from_range("8-12") == 12

    def test_en_dash_range(self):
        assert upper_from_range("10–15") == 15

    def test_spaced_range(self):
        assert upper_from_range("6 - 8") == 8

    def test_single_number_returns_none(self):
        assert upper_from_range("12") is None

    def test_non_numeric_upper_returns_none(self):
        assert upper_from_range("8-many") is None


class TestCoerceInt:
    """Tests for coerce_int, used on model-supplied counts and durations."""

    def test_int_passes_through(self):
        assert coerce_int(30) == 30

    def test_float_is_truncated(self):
        assert coerce_int(45.9) == 45

    def test_numeric_string(self):
        assert coerce_int("60") == 60

    def test_string_with_unit(self):
        assert coerce_int("45 seconds") == 45

    def test_range_uses_upper_bound(self):
        assert coerce_int("8-12") == 12

    def test_boolean_is_rejected(self):
        assert coerce_int(True) is None

    def test_non_numeric_string(self):
        assert coerce_int("a few") is None

    def test_other_types(self):
        assert coerce_int(None) is None
        assert coerce_int([3]) is None


class TestCoerceFloat:
    """Tests for coerce_float function."""

    def test_int_becomes_float(self):
        assert coerce_float(1) == 1.0

    def test_numeric_string(self):
        assert coerce_float("0.85") == 0.85

    def test_boolean_is_rejected(self):
        assert coerce_float(False) is None

    def test_garbage_string(self):
        assert coerce_float("very sure") is None


class TestAsList:
    """Tests for as_list function."""

    def test_none_is_empty(self):
        assert as_list(None) == []

    def test_list_is_copied(self):
        original = ["a", "b"]
        result = as_list(original)
        assert result == original
        assert result is not original

    def test_tuple_becomes_list(self):
        assert as_list(("a",)) == ["a"]

    def test_string_is_wrapped(self):
        assert as_list("dumbbells") == ["dumbbells"]

    def test_blank_string_is_empty(self):
        assert as_list("   ") == []

    def test_mapping_is_empty(self):
        assert as_list({"a": 1}) == []
