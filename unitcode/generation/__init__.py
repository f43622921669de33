"""Text generation for unit expression trees."""
from unitcode.generation.generator import (
    Generator,
    GeneratorOptions,
    NumberFormat,
    Spacing,
    format_number,
    generate,
)

__all__ = ["Generator", "GeneratorOptions", "NumberFormat", "Spacing", "format_number", "generate"]
