"""AST nodes for unit expressions"""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple, Union

from unitcode.definitions.table import Prefix, Unit


# Plain literals are only written for magnitudes within 10^±PLAIN_LITERAL_LIMIT
PLAIN_LITERAL_LIMIT = 64


def scientific_literal(value: Decimal) -> str:
    """Render a Decimal with one leading digit: 1500 -> '1.5e3', 7 -> '7'."""
    sign, digits, exponent = value.as_tuple()
    digit_text = "".join(str(d) for d in digits).rstrip("0")
    if not digit_text:
        return "0"
    power = exponent + len(digits) - 1

    text = ("-" if sign else "") + digit_text[0]
    if len(digit_text) > 1:
        text += "." + digit_text[1:]
    if power:
        text += f"e{power}"
    return text


def decimal_literal(value: Decimal) -> str:
    """Render a Decimal as a literal of the number grammar.

    Plain notation is used unless the magnitude is extreme, where the plain
    form would have to spell out every zero.
    """
    if value and abs(value.adjusted()) > PLAIN_LITERAL_LIMIT:
        return scientific_literal(value)
    text = format(value, "f")
    return "0" if text in ("-0", "0") else text


class AtomKind(str, Enum):
    """Kind of atom an expression is built from"""
    UNIT = "unit"
    CHEMICAL = "chemical"
    CURRENCY = "currency"
    USER = "user"


@dataclass(frozen=True)
class Number:
    """Bare numeric factor. text keeps the literal as it was written."""
    value: Decimal
    text: str = field(default="", compare=False)

    @property
    def literal(self) -> str:
        return self.text or decimal_literal(self.value)


@dataclass(frozen=True)
class PrefixedUnit:
    """Unit with zero or more prefixes applied, e.g. 'km' or 'kg'."""
    prefixes: Tuple[Prefix, ...]
    unit: Unit

    def __post_init__(self):
        object.__setattr__(self, "prefixes", tuple(self.prefixes))

    @property
    def symbol(self) -> str:
        return "".join(p.symbol for p in self.prefixes) + self.unit.symbol

    @property
    def scale(self) -> int:
        return sum(p.scale for p in self.prefixes)


@dataclass(frozen=True)
class OtherMark:
    """Bracketed chemical, currency or user-defined atom.

    payload is the identifying part: the formula for chemical marks, the
    code for currency marks and the whole bracket content for user marks.
    """
    kind: AtomKind
    payload: str

    def __post_init__(self):
        if self.kind is AtomKind.UNIT:
            raise ValueError("an other-mark cannot be of kind 'unit'")

    @property
    def raw(self) -> str:
        """Bracket content that classifies back to this mark."""
        if self.kind is AtomKind.CHEMICAL:
            return f"chem: {self.payload}"
        if self.kind is AtomKind.CURRENCY:
            return f"currency: {self.payload}"
        return self.payload


FactorBase = Union[Number, PrefixedUnit, OtherMark]


@dataclass(frozen=True)
class Factor:
    """Leaf of the tree: one base optionally raised to an exponent."""
    base: FactorBase
    exponent: Optional[Decimal] = None


@dataclass(frozen=True)
class Expression:
    """Product of numerator items, optionally divided by one denominator.

    A numerator item is a Factor or a parenthesized Expression. The
    denominator is a single Factor or a parenthesized Expression.
    """
    numerator: Tuple[Union[Factor, "Expression"], ...]
    denominator: Optional[Union[Factor, "Expression"]] = None

    def __post_init__(self):
        object.__setattr__(self, "numerator", tuple(self.numerator))
        if not self.numerator:
            raise ValueError("an expression needs at least one numerator item")

    @property
    def is_simple(self) -> bool:
        """True when the expression is a single factor with no denominator."""
        return (
            self.denominator is None
            and len(self.numerator) == 1
            and isinstance(self.numerator[0], Factor)
        )

    def factors(self):
        """Iterate over every Factor in the tree, left to right."""
        for item in self.numerator:
            if isinstance(item, Factor):
                yield item
            else:
                yield from item.factors()
        if isinstance(self.denominator, Factor):
            yield self.denominator
        elif self.denominator is not None:
            yield from self.denominator.factors()


Node = Union[Factor, Expression]
