"""Recursive-descent parser for unit expressions.

Grammar:

    Expression  := Item+ ('/' Denominator)?
    Item        := Factor | '(' Expression ')'
    Denominator := Factor | '(' Expression ')'

Nothing may follow a denominator inside the same Expression: 'W/m/K' and
'W/m K' are rejected, 'W/(m K)' is accepted. Parentheses start a fresh
Expression, so the restriction applies again inside them.
"""
import logging
from typing import Optional, Union

from unitcode.common.exceptions import ExpressionSyntaxError
from unitcode.definitions.table import DefinitionsTable
from unitcode.model.nodes import Expression, Factor
from unitcode.parsing.tokenizer import Token, TokenKind, Tokenizer, TokenizerOptions

logger = logging.getLogger(__name__)

# Deepest parenthesis nesting accepted before the input is rejected
MAX_NESTING_DEPTH = 100


class Parser:
    """Builds an Expression from a tokenizer with one token of lookahead"""

    def __init__(self, tokenizer: Tokenizer):
        self.tokenizer = tokenizer
        self._lookahead: Optional[Token] = None
        self._depth = 0

    def _peek(self) -> Token:
        if self._lookahead is None:
            self._lookahead = self.tokenizer.next_token()
        return self._lookahead

    def _advance(self) -> Token:
        token = self._peek()
        self._lookahead = None
        return token

    def parse(self) -> Expression:
        """Parse the whole input.

        Raises:
            ExpressionSyntaxError: If the input violates the grammar
            MalformedNumberError, UnrecognizedUnitError,
            UnterminatedMarkError, DefinitionsError: From the tokenizer
        """
        expression = self._expression()
        token = self._peek()
        if token.kind is TokenKind.RPAREN:
            raise ExpressionSyntaxError("')' without matching '('", token.offset)
        if token.kind is not TokenKind.END:
            raise ExpressionSyntaxError(f"unexpected '{token.kind.value}'", token.offset)
        return expression

    def _expression(self) -> Expression:
        items = []
        while True:
            token = self._peek()
            if token.kind is TokenKind.FACTOR:
                items.append(self._advance().factor)
            elif token.kind is TokenKind.LPAREN:
                items.append(self._group())
            else:
                break

        if not items:
            token = self._peek()
            if token.kind is TokenKind.END:
                raise ExpressionSyntaxError("expected a factor, got end of input", token.offset)
            raise ExpressionSyntaxError(f"expected a factor before '{token.kind.value}'", token.offset)

        denominator = None
        if self._peek().kind is TokenKind.SLASH:
            self._advance()
            denominator = self._denominator()

            token = self._peek()
            if token.kind is TokenKind.SLASH:
                raise ExpressionSyntaxError(
                    "'/' after a denominator; put the denominator in parentheses",
                    token.offset
                )
            if token.kind in (TokenKind.FACTOR, TokenKind.LPAREN):
                raise ExpressionSyntaxError(
                    "factor after a denominator; put the denominator in parentheses",
                    token.offset
                )

        return Expression(tuple(items), denominator)

    def _group(self) -> Expression:
        opening = self._advance()
        if self._depth >= MAX_NESTING_DEPTH:
            raise ExpressionSyntaxError(
                f"parentheses nested deeper than {MAX_NESTING_DEPTH} levels", opening.offset
            )

        self._depth += 1
        expression = self._expression()
        token = self._peek()
        if token.kind is not TokenKind.RPAREN:
            raise ExpressionSyntaxError("'(' is never closed", opening.offset)
        self._advance()
        self._depth -= 1
        return expression

    def _denominator(self) -> Union[Factor, Expression]:
        token = self._peek()
        if token.kind is TokenKind.FACTOR:
            return self._advance().factor
        if token.kind is TokenKind.LPAREN:
            return self._group()
        if token.kind is TokenKind.END:
            raise ExpressionSyntaxError("expected a denominator, got end of input", token.offset)
        raise ExpressionSyntaxError(f"expected a denominator before '{token.kind.value}'", token.offset)


def parse(
    text: Union[str, bytes],
    definitions: DefinitionsTable,
    options: Optional[TokenizerOptions] = None
) -> Expression:
    """Parse unit expression text into an Expression tree.

    Args:
        text: Expression text; bytes are decoded as Latin-1
        definitions: Table used to resolve prefixes, units and currencies
        options: Tokenizer options (legacy exponent mode)

    Returns:
        Expression

    Raises:
        UnitCodeError subclass carrying the offset of the failure
    """
    expression = Parser(Tokenizer(text, definitions, options)).parse()
    logger.debug(f"parsed {text!r} into {expression}")
    return expression
