"""Polish-notation serialization of expression trees.

Used to write expected trees in conformance fixtures. The form is
structural: it mirrors the tree, not its canonical meaning.

    (/ N D)       division
    (* a b ...)   numerator with more than one item
    (^ f e)       factor raised to an exponent
    (@ k M g)     unit with prefixes applied, prefixes first
    g  12.5       bare units and numbers as written
    {chem: CO2}   marks in braces
"""
from decimal import Decimal
from typing import List, Tuple, Union

from unitcode.common.exceptions import DefinitionsError, ExpressionSyntaxError, UnrecognizedUnitError
from unitcode.definitions.table import DefinitionsTable
from unitcode.model.nodes import (
    Expression,
    Factor,
    FactorBase,
    Number,
    OtherMark,
    PrefixedUnit,
    decimal_literal,
)
from unitcode.parsing.parser import MAX_NESTING_DEPTH
from unitcode.parsing.tokenizer import NUMBER_PATTERN, classify_mark, find_mark_end

# Each parenthesis level of the text adds at most a division and a product,
# and a leaf adds at most an exponent and a prefix application
MAX_POLISH_DEPTH = 2 * MAX_NESTING_DEPTH + 2


def _base_to_polish(base: FactorBase) -> str:
    if isinstance(base, Number):
        return base.literal
    if isinstance(base, PrefixedUnit):
        if not base.prefixes:
            return base.unit.symbol
        symbols = [p.symbol for p in base.prefixes] + [base.unit.symbol]
        return f"(@ {' '.join(symbols)})"
    if isinstance(base, OtherMark):
        return "{" + base.raw + "}"
    raise TypeError(f"Unsupported factor base: {base!r}")


def to_polish(node: Union[Expression, Factor]) -> str:
    """Serialize a tree to Polish notation"""
    if isinstance(node, Factor):
        text = _base_to_polish(node.base)
        if node.exponent is not None:
            text = f"(^ {text} {decimal_literal(node.exponent)})"
        return text

    if len(node.numerator) == 1:
        numerator = to_polish(node.numerator[0])
    else:
        numerator = "(* " + " ".join(to_polish(item) for item in node.numerator) + ")"

    if node.denominator is None:
        return numerator
    return f"(/ {numerator} {to_polish(node.denominator)})"


def _read_tokens(text: str) -> List[Tuple[str, int]]:
    tokens = []
    pos = 0
    while pos < len(text):
        char = text[pos]
        if char.isspace():
            pos += 1
        elif char in "()":
            tokens.append((char, pos))
            pos += 1
        elif char == "{":
            end = find_mark_end(text, pos)
            tokens.append((text[pos:end + 1], pos))
            pos = end + 1
        else:
            start = pos
            while pos < len(text) and not text[pos].isspace() and text[pos] not in "(){":
                pos += 1
            tokens.append((text[start:pos], start))
    return tokens


class _PolishReader:
    """Reads Polish notation back into a tree"""

    def __init__(self, text: str, definitions: DefinitionsTable):
        self.text = text
        self.definitions = definitions
        self.tokens = _read_tokens(text)
        self.index = 0
        self.depth = 0

    def _next(self) -> Tuple[str, int]:
        if self.index >= len(self.tokens):
            raise ExpressionSyntaxError("unexpected end of Polish expression", len(self.text))
        token = self.tokens[self.index]
        self.index += 1
        return token

    def _expect_close(self) -> None:
        token, offset = self._next()
        if token != ")":
            raise ExpressionSyntaxError(f"expected ')', got {token!r}", offset)

    def read(self) -> Expression:
        node = self._node()
        if self.index != len(self.tokens):
            raise ExpressionSyntaxError("trailing input", self.tokens[self.index][1])
        return node if isinstance(node, Expression) else Expression((node,))

    def _node(self) -> Union[Expression, Factor]:
        token, offset = self._next()
        if token == "(":
            if self.depth >= MAX_POLISH_DEPTH:
                raise ExpressionSyntaxError(
                    f"operators nested deeper than {MAX_POLISH_DEPTH} levels", offset
                )
            self.depth += 1
            node = self._operation()
            self.depth -= 1
            return node
        if token == ")":
            raise ExpressionSyntaxError("unexpected ')'", offset)
        return Factor(self._atom(token, offset))

    def _operation(self) -> Union[Expression, Factor]:
        operator, op_offset = self._next()
        if operator == "*":
            return self._product(op_offset)
        if operator == "/":
            return self._division()
        if operator == "^":
            return self._power(op_offset)
        if operator == "@":
            factor = Factor(self._prefixed(op_offset))
            self._expect_close()
            return factor
        raise ExpressionSyntaxError(f"unknown operator {operator!r}", op_offset)

    def _product(self, offset: int) -> Expression:
        items = []
        while self.index < len(self.tokens) and self.tokens[self.index][0] != ")":
            items.append(self._node())
        self._expect_close()
        if not items:
            raise ExpressionSyntaxError("empty product", offset)
        return Expression(tuple(items))

    def _division(self) -> Expression:
        numerator = self._node()
        denominator = self._node()
        self._expect_close()
        if isinstance(numerator, Expression) and numerator.denominator is None:
            items = numerator.numerator
        else:
            items = (numerator,)
        return Expression(items, denominator)

    def _power(self, offset: int) -> Factor:
        base = self._node()
        if not isinstance(base, Factor) or base.exponent is not None:
            raise ExpressionSyntaxError("only a plain factor can take an exponent", offset)
        token, exp_offset = self._next()
        if not NUMBER_PATTERN.fullmatch(token):
            raise ExpressionSyntaxError(f"invalid exponent {token!r}", exp_offset)
        self._expect_close()
        return Factor(base.base, Decimal(token))

    def _prefixed(self, offset: int) -> PrefixedUnit:
        symbols = []
        while self.index < len(self.tokens) and self.tokens[self.index][0] != ")":
            symbols.append(self._next())
        if len(symbols) < 2:
            raise ExpressionSyntaxError("'@' needs at least one prefix and a unit", offset)

        prefixes = []
        for symbol, sym_offset in symbols[:-1]:
            prefix = self.definitions.lookup_prefix(symbol)
            if prefix is None:
                raise DefinitionsError(f"unknown prefix {symbol!r}", sym_offset)
            prefixes.append(prefix)

        symbol, sym_offset = symbols[-1]
        unit = self.definitions.lookup_unit(symbol)
        if unit is None:
            raise UnrecognizedUnitError(symbol, sym_offset, self.definitions.suggest_units(symbol))
        return PrefixedUnit(tuple(prefixes), unit)

    def _atom(self, token: str, offset: int) -> FactorBase:
        if token.startswith("{"):
            return classify_mark(token[1:-1], self.definitions, offset)
        if NUMBER_PATTERN.fullmatch(token):
            return Number(Decimal(token), token)
        unit = self.definitions.lookup_unit(token)
        if unit is None:
            raise UnrecognizedUnitError(token, offset, self.definitions.suggest_units(token))
        return PrefixedUnit((), unit)


def parse_polish(text: str, definitions: DefinitionsTable) -> Expression:
    """Read a Polish-notation tree.

    Raises:
        ExpressionSyntaxError: If the text is not well-formed
        UnrecognizedUnitError, DefinitionsError: For unknown symbols
    """
    return _PolishReader(text, definitions).read()
