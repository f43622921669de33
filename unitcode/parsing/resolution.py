"""Resolution of letter runs into prefixes and a unit.

The rule is an ordered-list scan with a first-match-wins contract:

1. A unit whose symbol equals the whole run wins outright, so 'kg' is the
   kilogram even though 'k' + 'g' would also decompose.
2. Otherwise units are scanned in table order; the first unit that is a
   suffix of the run and leaves a remainder made entirely of prefix symbols
   wins. Ties are broken by unit order, never by prefix length.
3. Otherwise the run is not a unit.
"""
from typing import List, Optional, Tuple

from unitcode.definitions.table import DefinitionsTable, Prefix, Unit


def decompose_prefixes(definitions: DefinitionsTable, text: str) -> Optional[Tuple[Prefix, ...]]:
    """Split text into a sequence of one or more prefix symbols.

    Prefixes are tried in table order at each position, left to right; the
    first complete decomposition found is returned.

    Returns:
        Tuple of prefixes, or None if text cannot be decomposed
    """
    if not text:
        return None

    # choice[pos] is the first prefix, in table order, that starts at pos and
    # leaves a decomposable rest; positions are filled right to left
    end = len(text)
    choice: List[Optional[Prefix]] = [None] * end
    decomposable = [False] * end + [True]
    for pos in range(end - 1, -1, -1):
        for prefix in definitions.prefixes_starting(text, pos):
            if decomposable[pos + len(prefix.symbol)]:
                choice[pos] = prefix
                decomposable[pos] = True
                break

    if not decomposable[0]:
        return None

    prefixes = []
    pos = 0
    while pos < end:
        prefix = choice[pos]
        prefixes.append(prefix)
        pos += len(prefix.symbol)
    return tuple(prefixes)


def resolve_symbol(definitions: DefinitionsTable, symbol: str) -> Optional[Tuple[Tuple[Prefix, ...], Unit]]:
    """Resolve a letter run into (prefixes, unit).

    Args:
        definitions: Table providing units and prefixes in priority order
        symbol: Letter run taken from the input

    Returns:
        (prefixes, unit) or None if no resolution exists
    """
    unit = definitions.lookup_unit(symbol)
    if unit is not None:
        return (), unit

    for unit, remainder in definitions.units_ending(symbol):
        prefixes = decompose_prefixes(definitions, remainder)
        if prefixes:
            return prefixes, unit

    return None
