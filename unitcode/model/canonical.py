"""Canonical forms and equivalence of unit expressions"""
import math
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import Dict, NamedTuple, Tuple, Union

from unitcode.common.exceptions import CanonicalizationError
from unitcode.model.nodes import AtomKind, Expression, Factor, Number, OtherMark, PrefixedUnit

ZERO = Fraction(0)
ONE = Fraction(1)

# Integer powers are only expanded while the result stays below this many bits
MAX_POWER_BITS = 4096
# Largest decimal scale ('1e1000', '1e-1000') accepted for an exponent
MAX_EXPONENT_SCALE = 1000


class Atom(NamedTuple):
    """Identity of a merged atom: its kind plus unit symbol or mark payload."""
    kind: AtomKind
    name: str

    def __str__(self):
        if self.kind is AtomKind.UNIT:
            return self.name
        return f"{{{self.kind.value}: {self.name}}}"


def _split_decimal(n: int) -> Tuple[int, int, int]:
    """Return (rest, twos, fives) with n == rest * 2**twos * 5**fives."""
    if n == 0:
        return 0, 0, 0
    sign = -1 if n < 0 else 1
    n = abs(n)
    twos = (n & -n).bit_length() - 1
    n >>= twos
    fives = 0
    while n % 5 == 0:
        n //= 5
        fives += 1
    return sign * n, twos, fives


def exact_exponent(value: Decimal) -> Fraction:
    """Convert an exponent to a Fraction.

    Raises:
        CanonicalizationError: If the exponent's decimal scale is out of range
    """
    if not value.is_finite() or abs(value.as_tuple().exponent) > MAX_EXPONENT_SCALE:
        raise CanonicalizationError(f"exponent {value} is out of range")
    return Fraction(value)


@dataclass(frozen=True)
class Coefficient:
    """Exact numeric coefficient.

    The value is rational * 2**twos * 5**fives times every radical.
    rational keeps a numerator and denominator coprime to 10, so powers of
    ten coming from prefixes or exponent notation live in twos/fives and are
    never expanded. radicals holds (base, exponent) pairs with
    0 < exponent < 1, merged per base and sorted by base.
    """
    rational: Fraction = ONE
    twos: Fraction = ZERO
    fives: Fraction = ZERO
    radicals: Tuple[Tuple[Fraction, Fraction], ...] = ()

    @classmethod
    def power_of_ten(cls, exponent: Fraction) -> "Coefficient":
        exponent = Fraction(exponent)
        return cls(ONE, exponent, exponent)

    @classmethod
    def power(cls, base: Fraction, exponent: Fraction) -> "Coefficient":
        """Build base ** exponent exactly.

        Factors of 2 and 5 in base only scale twos/fives. The remaining part
        is expanded, which is refused once it would exceed MAX_POWER_BITS.

        Raises:
            CanonicalizationError: If zero is raised to a negative power, a
                negative base to a non-integral power, or the result is too
                large to evaluate
        """
        if exponent == 0:
            return cls()
        if base == 0:
            if exponent < 0:
                raise CanonicalizationError("zero raised to a negative power")
            return cls(ZERO)
        if exponent.denominator != 1 and base < 0:
            raise CanonicalizationError(
                f"negative base {base} raised to non-integral power {exponent}"
            )

        numerator, num_twos, num_fives = _split_decimal(base.numerator)
        denominator, den_twos, den_fives = _split_decimal(base.denominator)
        rest = Fraction(numerator, denominator)

        whole = math.floor(exponent)
        remainder = exponent - whole
        if abs(rest) != 1:
            bits = max(numerator.bit_length(), denominator.bit_length())
            if abs(whole) * bits > MAX_POWER_BITS:
                raise CanonicalizationError(f"{base}^{exponent} is too large to evaluate exactly")

        radicals = {rest: remainder} if remainder and rest != 1 else {}
        scaled = cls(ONE, (num_twos - den_twos) * exponent, (num_fives - den_fives) * exponent)
        return scaled._merged(rest ** whole, ZERO, ZERO, radicals)

    @classmethod
    def from_decimal(cls, value: Decimal, exponent: Fraction = ONE) -> "Coefficient":
        """Build value ** exponent without expanding the decimal scale of value."""
        sign, digits, scale = value.as_tuple()
        mantissa = int("".join(str(d) for d in digits))
        if sign:
            mantissa = -mantissa
        coefficient = cls.power(Fraction(mantissa), exponent)
        if coefficient.rational == 0:
            return coefficient
        return coefficient * cls.power_of_ten(scale * exponent)

    def _merged(
        self,
        rational: Fraction,
        twos: Fraction,
        fives: Fraction,
        radicals: Dict[Fraction, Fraction]
    ) -> "Coefficient":
        rational = self.rational * rational
        combined: Dict[Fraction, Fraction] = dict(self.radicals)
        for base, exponent in radicals.items():
            combined[base] = combined.get(base, ZERO) + exponent

        kept = []
        for base, exponent in combined.items():
            whole = math.floor(exponent)
            if whole:
                rational *= base ** whole
            remainder = exponent - whole
            if remainder:
                kept.append((base, remainder))

        if rational == 0:
            return Coefficient(ZERO)
        return Coefficient(rational, self.twos + twos, self.fives + fives, tuple(sorted(kept)))

    def __mul__(self, other: "Coefficient") -> "Coefficient":
        return self._merged(other.rational, other.twos, other.fives, dict(other.radicals))

    def reciprocal(self) -> "Coefficient":
        if self.rational == 0:
            raise CanonicalizationError("division by zero")
        result = Coefficient(1 / self.rational, -self.twos, -self.fives)
        for base, exponent in self.radicals:
            # base^-e == base^-1 * base^(1 - e)
            result = result._merged(1 / base, ZERO, ZERO, {base: 1 - exponent})
        return result

    def __float__(self) -> float:
        """Approximate value; OverflowError when it is out of float range."""
        value = float(self.rational)
        value *= 2.0 ** float(self.twos - self.fives) * 10.0 ** float(self.fives)
        for base, exponent in self.radicals:
            value *= float(base) ** float(exponent)
        return value

    def __str__(self) -> str:
        twos, fives = self.twos, self.fives
        if twos.denominator == 1 and fives.denominator == 1 and max(abs(twos), abs(fives)) <= 64:
            text = str(self.rational * Fraction(2) ** int(twos) * Fraction(5) ** int(fives))
        else:
            text = str(self.rational)
            if twos == fives:
                text += f" * 10^({twos})"
            else:
                if twos:
                    text += f" * 2^({twos})"
                if fives:
                    text += f" * 5^({fives})"
        for base, exponent in self.radicals:
            text += f" * {base}^({exponent})"
        return text


@dataclass(frozen=True)
class CanonicalForm:
    """Coefficient plus atom -> exponent mapping with zero exponents dropped.

    exponents is kept sorted by atom so that equal mappings compare equal
    regardless of the order atoms were merged in.
    """
    coefficient: Coefficient = Coefficient()
    exponents: Tuple[Tuple[Atom, Fraction], ...] = ()

    @classmethod
    def from_parts(cls, coefficient: Coefficient, exponents: Dict[Atom, Fraction]) -> "CanonicalForm":
        kept = tuple(sorted((atom, exp) for atom, exp in exponents.items() if exp != 0))
        return cls(coefficient, kept)

    def as_dict(self) -> Dict[Atom, Fraction]:
        return dict(self.exponents)

    def atoms_of_kind(self, kind: AtomKind) -> Dict[str, Fraction]:
        """Return name -> exponent for every atom of the given kind"""
        return {atom.name: exp for atom, exp in self.exponents if atom.kind is kind}

    def __mul__(self, other: "CanonicalForm") -> "CanonicalForm":
        merged = self.as_dict()
        for atom, exponent in other.exponents:
            merged[atom] = merged.get(atom, Fraction(0)) + exponent
        return CanonicalForm.from_parts(self.coefficient * other.coefficient, merged)

    def inverse(self) -> "CanonicalForm":
        return CanonicalForm.from_parts(
            self.coefficient.reciprocal(),
            {atom: -exponent for atom, exponent in self.exponents},
        )

    def to_dict(self) -> Dict:
        """JSON-friendly rendering"""
        return {
            "coefficient": str(self.coefficient),
            "atoms": [
                {"kind": atom.kind.value, "name": atom.name, "exponent": str(exponent)}
                for atom, exponent in self.exponents
            ],
        }

    def __str__(self) -> str:
        parts = [str(self.coefficient)]
        for atom, exponent in self.exponents:
            parts.append(str(atom) if exponent == 1 else f"{atom}^{exponent}")
        return " ".join(parts)


def _canonicalize_factor(factor: Factor) -> CanonicalForm:
    exponent = exact_exponent(factor.exponent) if factor.exponent is not None else ONE
    base = factor.base

    if isinstance(base, Number):
        return CanonicalForm(Coefficient.from_decimal(base.value, exponent))
    if isinstance(base, PrefixedUnit):
        return CanonicalForm.from_parts(
            Coefficient.power_of_ten(base.scale * exponent),
            {Atom(AtomKind.UNIT, base.unit.symbol): exponent},
        )
    if isinstance(base, OtherMark):
        return CanonicalForm.from_parts(Coefficient(), {Atom(base.kind, base.payload): exponent})
    raise TypeError(f"Unsupported factor base: {base!r}")


def canonicalize(node: Union[Expression, Factor, CanonicalForm]) -> CanonicalForm:
    """Reduce a tree to its canonical form.

    Numerator items are multiplied in; the denominator is canonicalized and
    then inverted before merging. A CanonicalForm is returned unchanged, so
    canonicalizing twice is the same as canonicalizing once.

    Raises:
        CanonicalizationError: If the coefficient has no exact value
    """
    if isinstance(node, CanonicalForm):
        return node
    if isinstance(node, Factor):
        return _canonicalize_factor(node)
    if isinstance(node, Expression):
        form = CanonicalForm()
        for item in node.numerator:
            form = form * canonicalize(item)
        if node.denominator is not None:
            form = form * canonicalize(node.denominator).inverse()
        return form
    raise TypeError(f"Cannot canonicalize {type(node).__name__}")


def equivalent(left: Union[Expression, Factor, CanonicalForm], right: Union[Expression, Factor, CanonicalForm]) -> bool:
    """Check whether two trees reduce to the same canonical form"""
    return canonicalize(left) == canonicalize(right)
