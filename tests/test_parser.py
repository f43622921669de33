"""Unit tests for the expression Parser."""

from decimal import Decimal

import pytest

from unitcode.common.exceptions import ExpressionSyntaxError, UnrecognizedUnitError
from unitcode.model import Expression, Factor
from unitcode.parsing import TokenizerOptions, parse
from unitcode.parsing.parser import MAX_NESTING_DEPTH


class TestAcceptedShapes:
    """Test expressions the grammar accepts."""

    def test_single_factor(self, definitions):
        expression = parse("kg", definitions)
        assert expression.is_simple
        assert expression.numerator[0].base.symbol == "kg"

    def test_numerator_product(self, definitions):
        expression = parse("kg m^2", definitions)
        assert len(expression.numerator) == 2
        assert expression.denominator is None

    def test_single_denominator(self, definitions):
        expression = parse("kg m^2/s^3", definitions)
        assert isinstance(expression.denominator, Factor)
        assert expression.denominator.exponent == Decimal("3")

    def test_parenthesized_denominator(self, definitions):
        expression = parse("W/(m K)", definitions)
        assert isinstance(expression.denominator, Expression)
        assert [f.base.symbol for f in expression.denominator.numerator] == ["m", "K"]

    def test_nested_division_in_parentheses(self, definitions):
        expression = parse("m/(s/K)", definitions)
        inner = expression.denominator
        assert isinstance(inner, Expression)
        assert inner.denominator.base.symbol == "K"

    def test_parenthesized_numerator_group(self, definitions):
        expression = parse("(m/s) K", definitions)
        assert isinstance(expression.numerator[0], Expression)
        assert expression.numerator[1].base.symbol == "K"

    def test_number_numerator(self, definitions):
        expression = parse("1/s", definitions)
        assert expression.numerator[0].base.value == Decimal("1")

    def test_bytes_input(self, definitions):
        expression = parse("µm/s".encode("latin-1"), definitions)
        assert expression.numerator[0].base.scale == -6

    def test_legacy_option(self, definitions):
        expression = parse("m2/s", definitions, TokenizerOptions(legacy_exponents=True))
        assert expression.numerator[0].exponent == Decimal("2")

    def test_factors_in_order(self, definitions):
        expression = parse("kg (m/s)/(K mol)", definitions)
        symbols = [f.base.symbol for f in expression.factors()]
        assert symbols == ["kg", "m", "s", "K", "mol"]


class TestRejectedShapes:
    """Test grammar violations and the offsets they report."""

    @pytest.mark.parametrize("text,offset", [
        ("W/m/K", 3),
        ("W/m K", 4),
        ("W/m K^-1", 4),
        ("W/m (K)", 4),
        ("W/(m/K/s)", 6),
    ])
    def test_nothing_after_denominator(self, definitions, text, offset):
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            parse(text, definitions)
        assert exc_info.value.offset == offset
        assert "denominator" in exc_info.value.message

    def test_unmatched_close(self, definitions):
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            parse("m)", definitions)
        assert exc_info.value.offset == 1

    def test_unclosed_group_reports_opening(self, definitions):
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            parse("kg (m s", definitions)
        assert exc_info.value.offset == 3
        assert "never closed" in exc_info.value.message

    def test_empty_input(self, definitions):
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            parse("   ", definitions)
        assert exc_info.value.offset == 3

    def test_empty_group(self, definitions):
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            parse("()", definitions)
        assert exc_info.value.offset == 1

    def test_missing_denominator(self, definitions):
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            parse("m/", definitions)
        assert exc_info.value.offset == 2

    def test_leading_slash(self, definitions):
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            parse("/m", definitions)
        assert exc_info.value.offset == 0

    def test_slash_before_close(self, definitions):
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            parse("(m/)", definitions)
        assert exc_info.value.offset == 3

    def test_tokenizer_errors_propagate(self, definitions):
        with pytest.raises(UnrecognizedUnitError) as exc_info:
            parse("W/(m furlong)", definitions)
        assert exc_info.value.offset == 5


class TestNestingDepth:
    """Deep parentheses are rejected with an offset instead of overflowing the stack."""

    def test_deepest_accepted_nesting(self, definitions):
        expression = parse("(" * MAX_NESTING_DEPTH + "m" + ")" * MAX_NESTING_DEPTH, definitions)
        assert [f.base.symbol for f in expression.factors()] == ["m"]

    def test_one_level_too_deep(self, definitions):
        text = "(" * (MAX_NESTING_DEPTH + 1) + "m" + ")" * (MAX_NESTING_DEPTH + 1)
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            parse(text, definitions)
        assert exc_info.value.offset == MAX_NESTING_DEPTH
        assert "nested deeper" in exc_info.value.message

    def test_very_deep_nesting(self, definitions):
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            parse("(" * 5000 + "m" + ")" * 5000, definitions)
        assert exc_info.value.offset == MAX_NESTING_DEPTH

    def test_deep_denominators(self, definitions):
        with pytest.raises(ExpressionSyntaxError):
            parse("m/(" * 2000 + "s" + ")" * 2000, definitions)
