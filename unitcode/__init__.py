"""Textual encoding of physical, chemical, currency and user-defined units."""
from unitcode.common.exceptions import (
    UnitCodeError,
    MalformedNumberError,
    UnrecognizedUnitError,
    UnterminatedMarkError,
    DefinitionsError,
    ExpressionSyntaxError,
    CanonicalizationError,
    UnrepresentableUnitError,
)
from unitcode.definitions import DefinitionsTable, Prefix, Unit, load_definitions, default_definitions
from unitcode.model import (
    AtomKind,
    Atom,
    CanonicalForm,
    Expression,
    Factor,
    canonicalize,
    equivalent,
)
from unitcode.model.polish import to_polish, parse_polish
from unitcode.parsing import TokenizerOptions, tokenize, parse
from unitcode.generation import GeneratorOptions, generate

__version__ = "0.1.0"

__all__ = [
    "UnitCodeError",
    "MalformedNumberError",
    "UnrecognizedUnitError",
    "UnterminatedMarkError",
    "DefinitionsError",
    "ExpressionSyntaxError",
    "CanonicalizationError",
    "UnrepresentableUnitError",
    "DefinitionsTable",
    "Prefix",
    "Unit",
    "load_definitions",
    "default_definitions",
    "AtomKind",
    "Atom",
    "CanonicalForm",
    "Expression",
    "Factor",
    "canonicalize",
    "equivalent",
    "to_polish",
    "parse_polish",
    "TokenizerOptions",
    "tokenize",
    "parse",
    "GeneratorOptions",
    "generate",
]
