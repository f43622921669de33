"""Conformance test case format and per-case checks.

A case record carries an optional input string, an optional expected tree
in Polish notation, an optional expected output string (at least one of
input/output is required) and an optional dimension vector such as
'T-2L' or 'CM-1Ch-1'. Collecting and reporting cases is left to the runner.
"""
import json
import logging
import re
from dataclasses import dataclass
from fractions import Fraction
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, field_validator, model_validator

from unitcode.common.exceptions import UnitCodeError
from unitcode.definitions.table import DefinitionsTable
from unitcode.generation.generator import GeneratorOptions, generate
from unitcode.model.canonical import Atom, CanonicalForm, canonicalize
from unitcode.model.polish import parse_polish, to_polish
from unitcode.parsing.parser import parse

logger = logging.getLogger(__name__)

DIMENSION_LABELS = ("T", "L", "M", "I", "Θ", "N", "J", "Ch", "C")
DIMENSION_PATTERN = re.compile(r"(Ch|Th|[TLMIΘNJC])([+-]?[0-9]+)?")
# Θ has no Latin-1 encoding, so corpus files may spell it Th
DIMENSION_ALIASES = {"Th": "Θ"}

CORPUS_ENCODING = "latin-1"


@dataclass(frozen=True)
class DimensionVector:
    """Exponents over the labeled dimensions, zero entries dropped."""
    exponents: Tuple[Tuple[str, Fraction], ...] = ()

    @classmethod
    def from_mapping(cls, mapping: Dict[str, Union[int, Fraction]]) -> "DimensionVector":
        for label in mapping:
            if label not in DIMENSION_LABELS:
                raise ValueError(f"unknown dimension label {label!r}")
        return cls(tuple(
            (label, Fraction(mapping[label]))
            for label in DIMENSION_LABELS
            if mapping.get(label, 0) != 0
        ))

    @classmethod
    def parse(cls, text: str) -> "DimensionVector":
        """Parse a vector like 'T-2L'. A missing integer means 1.

        Raises:
            ValueError: On unknown labels, bad integers or repeated labels
        """
        mapping: Dict[str, int] = {}
        pos = 0
        text = text.strip()
        while pos < len(text):
            match = DIMENSION_PATTERN.match(text, pos)
            if not match:
                raise ValueError(f"invalid dimension vector {text!r} at offset {pos}")
            label = DIMENSION_ALIASES.get(match.group(1), match.group(1))
            exponent = match.group(2)
            if label in mapping:
                raise ValueError(f"dimension {label!r} appears twice in {text!r}")
            mapping[label] = int(exponent) if exponent else 1
            pos = match.end()
        return cls.from_mapping(mapping)

    def as_dict(self) -> Dict[str, Fraction]:
        return dict(self.exponents)

    def __mul__(self, other: "DimensionVector") -> "DimensionVector":
        merged = self.as_dict()
        for label, exponent in other.exponents:
            merged[label] = merged.get(label, Fraction(0)) + exponent
        return DimensionVector.from_mapping(merged)

    def __pow__(self, exponent: Fraction) -> "DimensionVector":
        return DimensionVector.from_mapping(
            {label: value * exponent for label, value in self.exponents}
        )

    def format(self) -> str:
        parts = []
        for label, exponent in self.exponents:
            parts.append(label if exponent == 1 else f"{label}{exponent}")
        return "".join(parts)

    def __str__(self) -> str:
        return self.format()


DimensionOracle = Callable[[Atom], DimensionVector]


def dimensions_of(form: CanonicalForm, dimension_of: DimensionOracle) -> DimensionVector:
    """Combine per-atom dimension vectors supplied by the caller"""
    result = DimensionVector()
    for atom, exponent in form.exponents:
        result = result * (dimension_of(atom) ** exponent)
    return result


class ConformanceCase(BaseModel):
    """Schema for a conformance test case"""
    input: Optional[str] = None
    ast: Optional[str] = None
    output: Optional[str] = None
    dimensions: Optional[str] = None

    @field_validator("dimensions")
    @classmethod
    def validate_dimensions(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            DimensionVector.parse(v)
        return v

    @model_validator(mode="after")
    def require_input_or_output(self) -> "ConformanceCase":
        if self.input is None and self.output is None:
            raise ValueError("a conformance case needs an input or an output")
        return self


def load_cases(path: Union[str, Path]) -> List[ConformanceCase]:
    """Load a JSON array of conformance cases from a Latin-1 file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a JSON array of valid cases
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Conformance corpus not found: {path}")

    with open(path, 'r', encoding=CORPUS_ENCODING) as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"Conformance corpus {path} must contain a JSON array")

    cases = [ConformanceCase(**record) for record in data]
    logger.info(f"Loaded {len(cases)} conformance cases from {path}")
    return cases


def check_case(
    case: ConformanceCase,
    definitions: DefinitionsTable,
    dimension_of: Optional[DimensionOracle] = None,
    options: Optional[GeneratorOptions] = None
) -> List[str]:
    """Check one case and describe every mismatch.

    Args:
        case: Case to check
        definitions: Table the case is written against
        dimension_of: Optional atom -> dimension oracle; dimension
            expectations are skipped without it
        options: Generator options used for the output comparison

    Returns:
        List of mismatch descriptions, empty when the case passes
    """
    options = options or GeneratorOptions()
    tokenizer_options = options.tokenizer_options
    failures: List[str] = []

    source = case.input if case.input is not None else case.output
    try:
        expression = parse(source, definitions, tokenizer_options)
        form = canonicalize(expression)
    except UnitCodeError as e:
        return [f"{source!r} failed to parse: {e}"]

    if case.ast is not None:
        try:
            expected_tree = parse_polish(case.ast, definitions)
        except UnitCodeError as e:
            return failures + [f"expected tree {case.ast!r} is invalid: {e}"]

        if case.input is not None:
            actual, expected = to_polish(expression), to_polish(expected_tree)
            if actual != expected:
                failures.append(f"tree mismatch: expected {expected}, got {actual}")
        elif canonicalize(expected_tree) != form:
            failures.append(f"output {case.output!r} is not equivalent to tree {case.ast}")

    if case.input is not None and case.output is not None:
        generated = generate(expression, definitions, options)
        try:
            expected_form = canonicalize(parse(case.output, definitions, tokenizer_options))
            generated_form = canonicalize(parse(generated, definitions, tokenizer_options))
        except UnitCodeError as e:
            failures.append(f"output comparison failed: {e}")
        else:
            if generated_form != expected_form:
                failures.append(f"output mismatch: expected {case.output!r}, generated {generated!r}")

    if case.dimensions is not None and dimension_of is not None:
        expected_dims = DimensionVector.parse(case.dimensions)
        actual_dims = dimensions_of(form, dimension_of)
        if actual_dims != expected_dims:
            failures.append(f"dimension mismatch: expected {expected_dims}, got {actual_dims}")

    return failures
