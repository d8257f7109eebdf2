from __future__ import annotations
from typing import Any, Iterator
import random

from errors import InvalidOperation
from polynomial import PolyRing, Polynomial
from rings import Field, RingKind


class QuotientField(Field):
    """Rational functions num/den over a polynomial ring, kept reduced."""

    kind = RingKind.QUOTIENT

    def __init__(self, ring: PolyRing) -> None:
        self.ring = ring
        self.characteristic = ring.characteristic
        self.is_finite = False
        self._engine = None
        self._zero = Quotient(ring.zero, ring.one, self)
        self._one = Quotient(ring.one, ring.one, self)

    @property
    def engine(self):
        if self._engine is None:
            from factory import gcd_engine
            self._engine = gcd_engine(self.ring.base_ring)
        return self._engine

    @property
    def zero(self) -> Quotient:
        return self._zero

    @property
    def one(self) -> Quotient:
        return self._one

    def from_int(self, n: int) -> Quotient:
        return Quotient(self.ring.from_int(n), self.ring.one, self)

    def from_poly(self, p: Polynomial) -> Quotient:
        return Quotient(p, self.ring.one, self)

    def gen(self, var: int | str) -> Quotient:
        return self.from_poly(self.ring.gen(var))

    def make(self, num: Polynomial, den: Polynomial) -> Quotient:
        """Reduced num/den with a normalized denominator."""
        if not den:
            raise InvalidOperation("zero denominator")
        if not num:
            return self._zero
        g = self.engine.gcd(num, den)
        if not g.is_one():
            num, den = num.divide(g), den.divide(g)
        base = self.ring.base_ring
        lbc = den.leading_base_coefficient()
        if base.is_field:
            if not base.is_one(lbc):
                inv = base.inverse(lbc)
                num, den = num.scale(inv), den.scale(inv)
        elif base.signum(lbc) < 0:
            num, den = -num, -den
        return Quotient(num, den, self)

    def inverse(self, a: Quotient) -> Quotient:
        if not a:
            raise InvalidOperation("division by zero")
        return self.make(a.den, a.num)

    def signum(self, a: Quotient) -> int:
        return a.num.signum()

    def sort_key(self, a: Quotient) -> Any:
        return (a.num.sort_key(), a.den.sort_key())

    def random(self, rng: random.Random, size: int = 100) -> Quotient:
        return self.from_poly(self.ring.random(rng, size))

    def elements(self) -> Iterator[Quotient]:
        for c in self.ring.base_ring.elements():
            yield Quotient(self.ring.from_coeff(c), self.ring.one, self)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, QuotientField) and other.ring == self.ring

    def __hash__(self) -> int:
        return hash(("frac", self.ring))

    def __repr__(self) -> str:
        return f"Frac({self.ring})"


class Quotient:
    __slots__ = ("num", "den", "field")

    def __init__(self, num: Polynomial, den: Polynomial, field: QuotientField) -> None:
        self.num = num
        self.den = den
        self.field = field

    def _q(self, other: Any) -> Quotient:
        if isinstance(other, Quotient):
            return other
        if isinstance(other, Polynomial):
            return self.field.from_poly(other)
        return Quotient(self.field.ring.from_coeff(other), self.field.ring.one, self.field)

    def __add__(self, other: Any) -> Quotient:
        o = self._q(other)
        if self.den == o.den:
            return self.field.make(self.num + o.num, self.den)
        return self.field.make(self.num * o.den + o.num * self.den, self.den * o.den)

    __radd__ = __add__

    def __sub__(self, other: Any) -> Quotient:
        o = self._q(other)
        if self.den == o.den:
            return self.field.make(self.num - o.num, self.den)
        return self.field.make(self.num * o.den - o.num * self.den, self.den * o.den)

    def __rsub__(self, other: Any) -> Quotient:
        return -self + other

    def __neg__(self) -> Quotient:
        return Quotient(-self.num, self.den, self.field)

    def __mul__(self, other: Any) -> Quotient:
        if isinstance(other, int):
            return self.field.make(self.num.scale(other), self.den) if other else self.field.zero
        o = self._q(other)
        return self.field.make(self.num * o.num, self.den * o.den)

    __rmul__ = __mul__

    def __truediv__(self, other: Any) -> Quotient:
        return self * self.field.inverse(self._q(other))

    def __pow__(self, n: int) -> Quotient:
        if n < 0:
            return self.field.inverse(self) ** (-n)
        return Quotient(self.num ** n, self.den ** n, self.field)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Quotient):
            return self.num == other.num and self.den == other.den
        if isinstance(other, int):
            return self.den.is_one() and self.num == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.num, self.den))

    def __bool__(self) -> bool:
        return bool(self.num)

    def __str__(self) -> str:
        if self.den.is_one():
            return str(self.num)
        return f"({self.num})/({self.den})"

    __repr__ = __str__
