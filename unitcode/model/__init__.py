"""Expression tree model and canonicalization."""

from .nodes import (
    AtomKind,
    Number,
    PrefixedUnit,
    OtherMark,
    Factor,
    Expression,
)
from .canonical import (
    Atom,
    Coefficient,
    CanonicalForm,
    canonicalize,
    equivalent,
)

__all__ = [
    'AtomKind',
    'Number',
    'PrefixedUnit',
    'OtherMark',
    'Factor',
    'Expression',
    'Atom',
    'Coefficient',
    'CanonicalForm',
    'canonicalize',
    'equivalent',
]
