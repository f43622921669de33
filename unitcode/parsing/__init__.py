"""Parsing module for unit expression text."""

from .resolution import resolve_symbol, decompose_prefixes
from .tokenizer import (
    Token,
    TokenKind,
    Tokenizer,
    TokenizerOptions,
    tokenize,
    classify_mark,
)
from .parser import Parser, parse

__all__ = [
    'resolve_symbol',
    'decompose_prefixes',
    'Token',
    'TokenKind',
    'Tokenizer',
    'TokenizerOptions',
    'tokenize',
    'classify_mark',
    'Parser',
    'parse',
]
