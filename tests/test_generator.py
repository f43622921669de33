"""Unit tests for the text Generator."""

from decimal import Decimal
from itertools import product

import pytest

from unitcode.generation import Generator, GeneratorOptions, NumberFormat, Spacing, format_number, generate
from unitcode.model import Expression, Factor, canonicalize
from unitcode.model.nodes import Number
from unitcode.parsing import parse


class TestFormatNumber:
    """Test number rendering."""

    @pytest.mark.parametrize("value,expected", [
        ("1500", "1.5e3"),
        ("0.001", "1e-3"),
        ("-0.0025", "-2.5e-3"),
        ("100", "1e2"),
        ("7", "7"),
        ("0", "0"),
        ("12.5", "1.25e1"),
    ])
    def test_scientific(self, value, expected):
        assert format_number(Decimal(value), NumberFormat.SCIENTIFIC) == expected

    @pytest.mark.parametrize("value,expected", [
        ("1.5e3", "1500"),
        ("1e-3", "0.001"),
        ("2.50", "2.50"),
        ("-0", "0"),
    ])
    def test_plain(self, value, expected):
        assert format_number(Decimal(value)) == expected

    def test_extreme_magnitude_stays_short(self):
        assert format_number(Decimal("1e999999999")) == "1e999999999"
        assert format_number(Decimal("-2.5e-100")) == "-2.5e-100"

    def test_scientific_keeps_every_digit(self):
        value = Decimal("123456789012345678901234567890123")
        assert format_number(value, NumberFormat.SCIENTIFIC) == "1.23456789012345678901234567890123e32"


class TestOptions:
    """Test option handling."""

    def test_defaults(self):
        options = GeneratorOptions()
        assert options.use_caret_for_exponents
        assert options.preferred_number_format is NumberFormat.PLAIN
        assert options.spacing is Spacing.CANONICAL
        assert not options.tokenizer_options.legacy_exponents

    def test_string_values_coerced(self):
        options = GeneratorOptions(preferred_number_format="scientific", spacing="minimal")
        assert options.preferred_number_format is NumberFormat.SCIENTIFIC
        assert options.spacing is Spacing.MINIMAL

    def test_invalid_value(self):
        with pytest.raises(ValueError):
            GeneratorOptions(spacing="tight")

    def test_legacy_tokenizer_options(self):
        options = GeneratorOptions(use_caret_for_exponents=False)
        assert options.tokenizer_options.legacy_exponents


class TestGenerate:
    """Test rendering of trees."""

    def test_canonical_spacing(self, definitions):
        assert generate(parse("kg   m^2 /s^3", definitions), definitions) == "kg m^2/s^3"

    def test_parenthesized_denominator(self, definitions):
        assert generate(parse("W/( m  K )", definitions), definitions) == "W/(m K)"

    def test_numerator_group(self, definitions):
        assert generate(parse("(m/s) K", definitions), definitions) == "(m/s) K"

    def test_simple_group_unwrapped(self, definitions):
        tree = parse("m", definitions)
        nested = Expression((tree,), Expression((parse("s", definitions).numerator[0],)))
        assert generate(nested, definitions) == "m/s"

    def test_factor_input(self, definitions):
        factor = parse("km^2", definitions).numerator[0]
        assert generate(factor, definitions) == "km^2"

    def test_marks(self, definitions):
        text = "{chem:CO2} {currency: USD}/{a{b}c}"
        assert generate(parse(text, definitions), definitions) == "{chem: CO2} {currency: USD}/{a{b}c}"

    def test_legacy_exponents(self, definitions):
        options = GeneratorOptions(use_caret_for_exponents=False)
        assert generate(parse("kg m^2/s^-1", definitions), definitions, options) == "kg m2/s-1"

    def test_legacy_keeps_caret_where_needed(self, definitions):
        options = GeneratorOptions(use_caret_for_exponents=False)
        assert generate(parse("m^0.5 10^3", definitions), definitions, options) == "m^0.5 10^3"

    def test_legacy_whole_decimal_exponent(self, definitions):
        options = GeneratorOptions(use_caret_for_exponents=False)
        assert generate(parse("m^2.0", definitions), definitions, options) == "m2"

    def test_scientific_numbers(self, definitions):
        options = GeneratorOptions(preferred_number_format="scientific")
        assert generate(parse("1500 m", definitions), definitions, options) == "1.5e3 m"

    def test_minimal_spacing_joins_safe_pairs(self, definitions):
        options = GeneratorOptions(spacing="minimal")
        assert generate(parse("{chem: CO2} mol", definitions), definitions, options) == "{chem: CO2}mol"
        assert generate(parse("2 m", definitions), definitions, options) == "2m"

    def test_minimal_spacing_keeps_needed_spaces(self, definitions):
        options = GeneratorOptions(spacing="minimal")
        # 'kgm' is one letter run and does not resolve
        assert generate(parse("kg m", definitions), definitions, options) == "kg m"
        # '23' would be one number
        assert generate(parse("2 3", definitions), definitions, options) == "2 3"

    def test_minimal_spacing_legacy_number_after_unit(self, definitions):
        options = GeneratorOptions(use_caret_for_exponents=False, spacing="minimal")
        # 'm2' would read as m squared
        assert generate(parse("m 2", definitions), definitions, options) == "m 2"

    def test_large_exponent(self, definitions):
        assert generate(parse("m^1e100", definitions), definitions) == "m^1e100"

    def test_generator_reusable(self, definitions):
        generator = Generator(definitions)
        assert generator.generate(parse("m", definitions)) == "m"
        assert generator.generate(parse("s", definitions)) == "s"


ROUND_TRIP_TEXTS = [
    "kg m^2/s^3",
    "W/(m K)",
    "m/(s/K)",
    "(m/s) K",
    "1.5e3 m",
    "10^-3 g",
    "km^0.5",
    "µm/s",
    "{chem: CO2} mol^-1",
    "{currency: USD}/h",
    "{widget}^2 2",
    "-2.5 eV",
    "1e999 m",
]

ALL_OPTIONS = [
    GeneratorOptions(caret, number_format, spacing)
    for caret, number_format, spacing in product(
        (True, False), tuple(NumberFormat), tuple(Spacing)
    )
]


class TestRoundTrip:
    """Generated text must parse back to an equivalent canonical form."""

    @pytest.mark.parametrize("options", ALL_OPTIONS, ids=str)
    @pytest.mark.parametrize("text", ROUND_TRIP_TEXTS)
    def test_round_trip(self, definitions, text, options):
        expression = parse(text, definitions)
        generated = generate(expression, definitions, options)
        reparsed = parse(generated, definitions, options.tokenizer_options)
        assert canonicalize(reparsed) == canonicalize(expression)

    def test_number_literal_not_reused(self, definitions):
        factor = Factor(Number(Decimal("1500"), "1.5e3"))
        assert generate(Expression((factor,)), definitions) == "1500"
