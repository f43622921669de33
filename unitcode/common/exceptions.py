"""Custom exceptions for unit expression handling"""
from typing import List, Optional


class UnitCodeError(Exception):
    """Base exception for unit code errors"""

    def __init__(self, message: str, offset: Optional[int] = None):
        super().__init__(f"offset {offset}: {message}" if offset is not None else message)
        self.message = message
        self.offset = offset


class MalformedNumberError(UnitCodeError):
    """Raised when a number does not follow the number grammar"""
    pass


class UnrecognizedUnitError(UnitCodeError):
    """Raised when a symbol cannot be resolved into prefixes and a unit"""

    def __init__(
        self,
        symbol: str,
        offset: Optional[int] = None,
        suggestions: Optional[List[str]] = None
    ):
        message = f"unrecognized unit '{symbol}'"
        if suggestions:
            message += f" (did you mean: {', '.join(suggestions)}?)"
        super().__init__(message, offset)
        self.symbol = symbol
        self.suggestions = suggestions or []


class UnterminatedMarkError(UnitCodeError):
    """Raised when a '{' has no matching '}'"""
    pass


class DefinitionsError(UnitCodeError):
    """Raised for duplicate table entries or unlisted currency codes"""
    pass


class ExpressionSyntaxError(UnitCodeError):
    """Raised when the token stream violates the expression grammar"""
    pass


class CanonicalizationError(UnitCodeError):
    """Raised when a coefficient has no exact value (e.g. 0^-1)"""
    pass


class UnrepresentableUnitError(UnitCodeError):
    """Raised by native unit bridges for atoms they cannot represent"""
    pass
