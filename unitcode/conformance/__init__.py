"""Conformance test case format."""

from .fixtures import (
    ConformanceCase,
    DimensionVector,
    DIMENSION_LABELS,
    dimensions_of,
    load_cases,
    check_case,
)

__all__ = [
    'ConformanceCase',
    'DimensionVector',
    'DIMENSION_LABELS',
    'dimensions_of',
    'load_cases',
    'check_case',
]
