"""Definitions table of prefixes, units and currency codes."""

import json
import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, ValidationError
from rapidfuzz import fuzz, process

from unitcode.common.exceptions import DefinitionsError

logger = logging.getLogger(__name__)

DEFAULT_DEFINITIONS_PATH = Path(__file__).parent.parent / "data" / "definitions.json"

CURRENCY_CODE_PATTERN = re.compile(r"^[A-Z]{3}$")


@dataclass(frozen=True)
class Prefix:
    """Decimal prefix such as 'k' (10^3)."""
    symbol: str
    scale: int
    name: str = ""


@dataclass(frozen=True)
class Unit:
    """Named unit atom. No physical dimension is attached."""
    symbol: str
    name: str = ""


class PrefixEntry(BaseModel):
    """Schema for a prefix entry in the definitions document"""
    symbol: str = Field(..., min_length=1)
    scale: int
    name: str = ""


class UnitEntry(BaseModel):
    """Schema for a unit entry in the definitions document"""
    symbol: str = Field(..., min_length=1)
    name: str = ""


class DefinitionsDocument(BaseModel):
    """Schema for the canonical definitions document"""
    prefixes: List[PrefixEntry] = Field(default_factory=list)
    units: List[UnitEntry] = Field(default_factory=list)
    currency_codes: List[str] = Field(default_factory=list)


def _index(entries: Tuple, kind: str, key: Callable[[Any], str]) -> Dict[str, Any]:
    index: Dict[str, Any] = {}
    for entry in entries:
        symbol = key(entry)
        if symbol in index:
            raise DefinitionsError(f"duplicate {kind} definition '{symbol}'")
        index[symbol] = entry
    return index


def _check_symbol(symbol: str, kind: str) -> None:
    # The tokenizer only ever reads letter runs, so anything else is unreachable.
    if not symbol or not symbol.isalpha():
        raise DefinitionsError(f"{kind} symbol {symbol!r} must be a non-empty run of letters")


class DefinitionsTable:
    """Ordered, read-only catalogs of prefixes, units and currency codes.

    Listing order is the ambiguity-resolution priority: whenever more than
    one entry could explain a piece of input, the first listed entry wins.
    A table is never mutated after construction, so one instance can be
    shared by any number of concurrent parses.
    """

    def __init__(
        self,
        prefixes: Iterable[Prefix] = (),
        units: Iterable[Unit] = (),
        currency_codes: Iterable[str] = ()
    ):
        """Build a table, rejecting duplicate symbols within a catalog.

        Args:
            prefixes: Prefixes in priority order
            units: Units in priority order
            currency_codes: ISO-style currency codes

        Raises:
            DefinitionsError: If any catalog holds a duplicate or invalid symbol
        """
        prefixes = tuple(prefixes)
        units = tuple(units)
        currency_codes = tuple(currency_codes)

        for prefix in prefixes:
            _check_symbol(prefix.symbol, "prefix")
        for unit in units:
            _check_symbol(unit.symbol, "unit")
        for code in currency_codes:
            if not CURRENCY_CODE_PATTERN.match(code):
                raise DefinitionsError(f"currency code {code!r} must be three upper-case letters")

        self._prefix_index: Dict[str, Prefix] = _index(prefixes, "prefix", lambda p: p.symbol)
        self._unit_index: Dict[str, Unit] = _index(units, "unit", lambda u: u.symbol)
        self._currency_index = frozenset(_index(currency_codes, "currency code", lambda c: c))
        self._prefixes = prefixes
        self._units = units
        self._currency_codes = currency_codes

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DefinitionsTable":
        """Build a table from a parsed definitions document.

        Raises:
            DefinitionsError: If the document is malformed or has duplicates
        """
        try:
            document = DefinitionsDocument(**data)
        except (ValidationError, TypeError) as e:
            raise DefinitionsError(f"invalid definitions document: {e}") from e

        return cls(
            prefixes=[Prefix(p.symbol, p.scale, p.name) for p in document.prefixes],
            units=[Unit(u.symbol, u.name) for u in document.units],
            currency_codes=document.currency_codes,
        )

    @property
    def prefixes(self) -> Tuple[Prefix, ...]:
        return self._prefixes

    @property
    def units(self) -> Tuple[Unit, ...]:
        return self._units

    @property
    def currency_codes(self) -> Tuple[str, ...]:
        return self._currency_codes

    def lookup_unit(self, symbol: str) -> Optional[Unit]:
        return self._unit_index.get(symbol)

    def lookup_prefix(self, symbol: str) -> Optional[Prefix]:
        return self._prefix_index.get(symbol)

    def is_currency_code(self, symbol: str) -> bool:
        return symbol in self._currency_index

    def units_ending(self, symbol: str) -> Iterator[Tuple[Unit, str]]:
        """Yield (unit, remainder) for every unit that is a suffix of symbol.

        Units are yielded in table order; remainder is the part of symbol
        left of the unit and may be empty.
        """
        for unit in self._units:
            if symbol.endswith(unit.symbol):
                yield unit, symbol[:len(symbol) - len(unit.symbol)]

    def prefixes_starting(self, text: str, pos: int = 0) -> Iterator[Prefix]:
        """Yield, in table order, every prefix that text[pos:] starts with."""
        for prefix in self._prefixes:
            if text.startswith(prefix.symbol, pos):
                yield prefix

    def suggest_units(self, symbol: str, limit: int = 3) -> List[str]:
        """Return unit symbols that look like a misspelling of symbol"""
        if not symbol or not self._units:
            return []
        matches = process.extract(
            symbol,
            [unit.symbol for unit in self._units],
            scorer=fuzz.ratio,
            limit=limit,
            score_cutoff=50,
        )
        return [match[0] for match in matches]

    def extended(self, other: "DefinitionsTable") -> "DefinitionsTable":
        """Return a new table with other's entries appended after ours.

        Entries of the extension come last and therefore lose every tie
        against the entries already listed here.

        Raises:
            DefinitionsError: If other redefines a symbol of this table
        """
        return DefinitionsTable(
            prefixes=self._prefixes + other.prefixes,
            units=self._units + other.units,
            currency_codes=self._currency_codes + other.currency_codes,
        )

    def __repr__(self) -> str:
        return (
            f"<DefinitionsTable({len(self._prefixes)} prefixes, "
            f"{len(self._units)} units, {len(self._currency_codes)} currency codes)>"
        )


def load_definitions(path: Union[str, Path]) -> DefinitionsTable:
    """Load a definitions table from a JSON document.

    Array order in the document is kept as priority order.

    Args:
        path: Path to the definitions JSON file

    Returns:
        DefinitionsTable

    Raises:
        FileNotFoundError: If the file does not exist
        DefinitionsError: If the document is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Definitions file not found: {path}")

    logger.info(f"Loading definitions from {path}")

    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise DefinitionsError(f"definitions file {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise DefinitionsError(f"definitions file {path} must contain a JSON object")

    table = DefinitionsTable.from_dict(data)
    logger.info(f"Loaded {table!r}")
    return table


@lru_cache(maxsize=1)
def default_definitions() -> DefinitionsTable:
    """Get the bundled canonical definitions table"""
    return load_definitions(DEFAULT_DEFINITIONS_PATH)
