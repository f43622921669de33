"""Definitions module for prefixes, units and currency codes."""

from .table import (
    DefinitionsTable,
    Prefix,
    Unit,
    load_definitions,
    default_definitions,
    DEFAULT_DEFINITIONS_PATH,
)

__all__ = [
    'DefinitionsTable',
    'Prefix',
    'Unit',
    'load_definitions',
    'default_definitions',
    'DEFAULT_DEFINITIONS_PATH',
]
