"""Tokenizer for unit expressions"""
import logging
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Iterator, List, Optional, Tuple, Union

from unitcode.common.exceptions import (
    DefinitionsError,
    ExpressionSyntaxError,
    MalformedNumberError,
    UnrecognizedUnitError,
    UnterminatedMarkError,
)
from unitcode.definitions.table import DefinitionsTable
from unitcode.model.nodes import AtomKind, Factor, Number, OtherMark, PrefixedUnit
from unitcode.parsing.resolution import resolve_symbol

logger = logging.getLogger(__name__)

NUMBER_PATTERN = re.compile(r"-?[0-9]+(?:\.[0-9]*)?(?:[eE]-?[0-9]+)?")
CHEMICAL_MARK_PATTERN = re.compile(r"^chem:\s*(\S.*?)\s*$", re.DOTALL)
CURRENCY_MARK_PATTERN = re.compile(r"^currency:(.*)$", re.DOTALL)
CURRENCY_CODE_PATTERN = re.compile(r"^[A-Z]{3}$")

TEXT_ENCODING = "latin-1"


class TokenKind(Enum):
    """Kinds of tokens produced by the tokenizer"""
    FACTOR = "factor"
    SLASH = "/"
    LPAREN = "("
    RPAREN = ")"
    END = "end"


@dataclass(frozen=True)
class Token:
    """Token with the offset it starts at. factor is set for FACTOR tokens."""
    kind: TokenKind
    offset: int
    factor: Optional[Factor] = None


@dataclass(frozen=True)
class TokenizerOptions:
    """Tokenizer behavior switches.

    legacy_exponents accepts exponents written straight after a unit symbol
    or a closing brace, without a caret ('m2', 's-1').
    """
    legacy_exponents: bool = False


STRUCTURAL = {
    "/": TokenKind.SLASH,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}


def _is_digit(char: str) -> bool:
    # str.isdigit() also accepts superscripts such as '²'
    return len(char) == 1 and "0" <= char <= "9"


def decode_text(text: Union[str, bytes]) -> str:
    """Decode external Latin-1 text; str input is returned as is"""
    if isinstance(text, bytes):
        return text.decode(TEXT_ENCODING)
    return text


def scan_number(text: str, pos: int) -> Tuple[Number, int]:
    """Scan a number starting at pos.

    Returns:
        (Number, end position)

    Raises:
        MalformedNumberError: If no valid number starts at pos
    """
    match = NUMBER_PATTERN.match(text, pos)
    if not match:
        raise MalformedNumberError(f"expected a number, got {text[pos:pos + 10]!r}", pos)

    end = match.end()
    if end < len(text):
        following = text[end]
        if following == ".":
            raise MalformedNumberError("unexpected '.' after number", end)
        if following in "eE" and text[end + 1:end + 2] == "-":
            raise MalformedNumberError("missing digits in number exponent", end)

    literal = match.group(0)
    try:
        value = Decimal(literal)
    except InvalidOperation as e:
        raise MalformedNumberError(f"invalid number {literal!r}", pos) from e
    return Number(value, literal), end


def scan_exponent(text: str, pos: int, legacy: bool = False) -> Tuple[Optional[Decimal], int]:
    """Scan an optional exponent following a factor.

    Caret exponents ('^2') are always accepted; bare numbers ('2') only
    when legacy is set.

    Returns:
        (exponent or None, end position)
    """
    if pos < len(text) and text[pos] == "^":
        if not (_is_digit(text[pos + 1:pos + 2]) or text[pos + 1:pos + 2] == "-"):
            raise MalformedNumberError("missing exponent after '^'", pos + 1)
        number, end = scan_number(text, pos + 1)
        return number.value, end

    if legacy and pos < len(text):
        starts_number = _is_digit(text[pos]) or (
            text[pos] == "-" and _is_digit(text[pos + 1:pos + 2])
        )
        if starts_number:
            number, end = scan_number(text, pos)
            return number.value, end

    return None, pos


def classify_mark(payload: str, definitions: DefinitionsTable, offset: Optional[int] = None) -> OtherMark:
    """Classify bracket content as a chemical, currency or user mark.

    Chemical and currency readings take priority over the user reading. A
    payload starting with 'currency:' is always a currency mark, so a
    malformed or unlisted code is an error rather than a user mark.

    Raises:
        DefinitionsError: If the currency code is malformed or not in the table
    """
    chemical = CHEMICAL_MARK_PATTERN.match(payload)
    if chemical:
        return OtherMark(AtomKind.CHEMICAL, chemical.group(1))

    currency = CURRENCY_MARK_PATTERN.match(payload)
    if currency:
        code = currency.group(1).strip()
        if not CURRENCY_CODE_PATTERN.match(code):
            raise DefinitionsError(f"'{code}' is not a three-letter upper-case currency code", offset)
        if not definitions.is_currency_code(code):
            raise DefinitionsError(f"'{code}' is not a listed currency code", offset)
        return OtherMark(AtomKind.CURRENCY, code)

    return OtherMark(AtomKind.USER, payload)


def find_mark_end(text: str, pos: int) -> int:
    """Return the index of the '}' matching the '{' at pos.

    Raises:
        UnterminatedMarkError: If the brace is never closed
    """
    depth = 0
    for index in range(pos, len(text)):
        char = text[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    raise UnterminatedMarkError("missing closing '}'", pos)


class Tokenizer:
    """Turns unit expression text into tokens, one at a time.

    The tokenizer keeps a cursor into the text; next_token() returns the
    token at the cursor and advances past it. Whitespace between tokens is
    skipped, whitespace inside a factor ends it.
    """

    def __init__(
        self,
        text: Union[str, bytes],
        definitions: DefinitionsTable,
        options: Optional[TokenizerOptions] = None
    ):
        self.text = decode_text(text)
        self.definitions = definitions
        self.options = options or TokenizerOptions()
        self.pos = 0

    def _skip_whitespace(self) -> None:
        text, pos = self.text, self.pos
        while pos < len(text) and text[pos].isspace():
            pos += 1
        self.pos = pos

    def next_token(self) -> Token:
        """Produce the next token and advance the cursor.

        Raises:
            MalformedNumberError, UnrecognizedUnitError,
            UnterminatedMarkError, DefinitionsError, ExpressionSyntaxError
        """
        self._skip_whitespace()
        start = self.pos
        if start >= len(self.text):
            return Token(TokenKind.END, start)

        char = self.text[start]
        if char in STRUCTURAL:
            self.pos = start + 1
            return Token(STRUCTURAL[char], start)

        if _is_digit(char) or char == "-":
            base, end = scan_number(self.text, start)
            legacy = False
        elif char == "{":
            base, end = self._scan_mark(start)
            legacy = self.options.legacy_exponents
        elif char.isalpha():
            base, end = self._scan_unit(start)
            legacy = self.options.legacy_exponents
        else:
            raise ExpressionSyntaxError(f"unexpected character {char!r}", start)

        exponent, end = scan_exponent(self.text, end, legacy)
        self.pos = end
        token = Token(TokenKind.FACTOR, start, Factor(base, exponent))
        logger.debug(f"token at {start}: {token.factor}")
        return token

    def _scan_mark(self, start: int) -> Tuple[OtherMark, int]:
        end = find_mark_end(self.text, start)
        payload = self.text[start + 1:end]
        return classify_mark(payload, self.definitions, start), end + 1

    def _scan_unit(self, start: int) -> Tuple[PrefixedUnit, int]:
        end = start
        while end < len(self.text) and self.text[end].isalpha():
            end += 1
        symbol = self.text[start:end]

        resolved = resolve_symbol(self.definitions, symbol)
        if resolved is None:
            raise UnrecognizedUnitError(symbol, start, self.definitions.suggest_units(symbol))
        prefixes, unit = resolved
        return PrefixedUnit(prefixes, unit), end

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to, not including, the end marker."""
        while True:
            token = self.next_token()
            if token.kind is TokenKind.END:
                return
            yield token


def tokenize(
    text: Union[str, bytes],
    definitions: DefinitionsTable,
    options: Optional[TokenizerOptions] = None
) -> List[Token]:
    """Tokenize a whole expression (end marker excluded)"""
    return list(Tokenizer(text, definitions, options))
