"""Text generator for unit expression trees."""
import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Tuple, Union

from unitcode.common.exceptions import UnitCodeError
from unitcode.definitions.table import DefinitionsTable
from unitcode.model.nodes import (
    Expression,
    Factor,
    FactorBase,
    Number,
    OtherMark,
    PrefixedUnit,
    decimal_literal,
    scientific_literal,
)
from unitcode.parsing.tokenizer import Tokenizer, TokenizerOptions

logger = logging.getLogger(__name__)


class NumberFormat(str, Enum):
    """How numbers and exponents are written"""
    PLAIN = "plain"
    SCIENTIFIC = "scientific"


class Spacing(str, Enum):
    """How numerator factors are separated"""
    MINIMAL = "minimal"
    CANONICAL = "canonical"


@dataclass(frozen=True)
class GeneratorOptions:
    """Rendering options.

    use_caret_for_exponents: False writes integral unit and mark exponents
        in the legacy concatenated form ('m2'); numbers and fractional
        exponents keep the caret.
    preferred_number_format: plain ('1500') or scientific ('1.5e3').
    spacing: canonical puts one space between numerator factors; minimal
        drops it wherever the text still tokenizes the same way.
    """
    use_caret_for_exponents: bool = True
    preferred_number_format: NumberFormat = NumberFormat.PLAIN
    spacing: Spacing = Spacing.CANONICAL

    def __post_init__(self):
        object.__setattr__(self, "preferred_number_format", NumberFormat(self.preferred_number_format))
        object.__setattr__(self, "spacing", Spacing(self.spacing))

    @property
    def tokenizer_options(self) -> TokenizerOptions:
        """Tokenizer options able to read back text rendered with these options"""
        return TokenizerOptions(legacy_exponents=not self.use_caret_for_exponents)


def format_number(value: Decimal, number_format: NumberFormat = NumberFormat.PLAIN) -> str:
    """Render a number in the number grammar.

    Scientific form uses a single leading digit and omits a zero exponent:
    1500 -> '1.5e3', 0.001 -> '1e-3', 7 -> '7'.
    """
    if number_format is NumberFormat.PLAIN or value == 0:
        return decimal_literal(value)
    return scientific_literal(value)


class Generator:
    """Renders Expression trees back to text.

    The definitions table is only consulted in minimal spacing mode, to check
    that two factors written without a space still tokenize as two factors.
    """

    def __init__(self, definitions: DefinitionsTable, options: Optional[GeneratorOptions] = None):
        self.definitions = definitions
        self.options = options or GeneratorOptions()

    def generate(self, expression: Union[Expression, Factor]) -> str:
        """Render a tree to text. Never fails for a well-formed tree."""
        if isinstance(expression, Factor):
            return self._factor(expression)
        text = self._expression(expression)
        logger.debug(f"generated {text!r}")
        return text

    def _number(self, value: Decimal) -> str:
        return format_number(value, self.options.preferred_number_format)

    def _base(self, base: FactorBase) -> str:
        if isinstance(base, Number):
            return self._number(base.value)
        if isinstance(base, PrefixedUnit):
            return base.symbol
        if isinstance(base, OtherMark):
            return "{" + base.raw + "}"
        raise TypeError(f"Unsupported factor base: {base!r}")

    def _factor(self, factor: Factor) -> str:
        text = self._base(factor.base)
        exponent = factor.exponent
        if exponent is None:
            return text

        concatenate = (
            not self.options.use_caret_for_exponents
            and not isinstance(factor.base, Number)
            and exponent == exponent.to_integral_value()
        )
        if concatenate:
            return text + decimal_literal(exponent.to_integral_value())
        return f"{text}^{self._number(exponent)}"

    def _item(self, item: Union[Factor, Expression]) -> str:
        if isinstance(item, Factor):
            return self._factor(item)
        if item.is_simple:
            return self._factor(item.numerator[0])
        return "(" + self._expression(item) + ")"

    def _expression(self, expression: Expression) -> str:
        text = self._join([self._item(item) for item in expression.numerator])

        denominator = expression.denominator
        if denominator is None:
            return text
        if isinstance(denominator, Factor):
            return f"{text}/{self._factor(denominator)}"
        if denominator.is_simple:
            return f"{text}/{self._factor(denominator.numerator[0])}"
        return f"{text}/({self._expression(denominator)})"

    def _join(self, parts: List[str]) -> str:
        text = parts[0]
        for previous, part in zip(parts, parts[1:]):
            if self.options.spacing is Spacing.MINIMAL and self._can_abut(previous, part):
                text += part
            else:
                text += " " + part
        return text

    def _signature(self, text: str) -> Optional[List[Tuple]]:
        try:
            tokenizer = Tokenizer(text, self.definitions, self.options.tokenizer_options)
            return [(token.kind, token.factor) for token in tokenizer]
        except UnitCodeError:
            return None

    def _can_abut(self, left: str, right: str) -> bool:
        left_tokens = self._signature(left)
        right_tokens = self._signature(right)
        if left_tokens is None or right_tokens is None:
            return False
        return self._signature(left + right) == left_tokens + right_tokens


def generate(
    expression: Union[Expression, Factor],
    definitions: DefinitionsTable,
    options: Optional[GeneratorOptions] = None
) -> str:
    """Render an expression tree to text.

    Args:
        expression: Tree to render
        definitions: Table used to check that minimal spacing stays unambiguous
        options: Rendering options

    Returns:
        Text that parses back to an equivalent canonical form
    """
    return Generator(definitions, options).generate(expression)
