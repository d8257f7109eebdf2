from __future__ import annotations
from typing import Any, Iterator
import random

from algebraic import AlgebraicField, AlgebraicNumber
from errors import InvalidOperation
from polynomial import PolyRing
from rings import Field, Ring, RingKind


class ComplexField(Field):
    """base[i] with i^2 = -1, for a base field of characteristic 0 (QQ or an algebraic extension)."""

    kind = RingKind.COMPLEX

    def __init__(self, base: Ring) -> None:
        if not base.is_field:
            raise InvalidOperation(f"complex numbers need a base field, got {base}")
        self.base = base
        self.characteristic = base.characteristic
        self.is_finite = base.is_finite
        self._zero = Complex(base.zero, base.zero, self)
        self._one = Complex(base.one, base.zero, self)

    @property
    def zero(self) -> Complex:
        return self._zero

    @property
    def one(self) -> Complex:
        return self._one

    @property
    def imag_unit(self) -> Complex:
        return Complex(self.base.zero, self.base.one, self)

    def from_int(self, n: int) -> Complex:
        return Complex(self.base.from_int(n), self.base.zero, self)

    def from_base(self, c: Any) -> Complex:
        return Complex(c, self.base.zero, self)

    def make(self, re: Any, im: Any) -> Complex:
        return Complex(self._coerce(re), self._coerce(im), self)

    def _coerce(self, c: Any) -> Any:
        return self.base.from_int(c) if isinstance(c, int) else c

    def inverse(self, a: Complex) -> Complex:
        if not a:
            raise InvalidOperation("division by zero")
        n = self.base.inverse(a.re * a.re + a.im * a.im)
        return Complex(a.re * n, -a.im * n, self)

    def signum(self, a: Complex) -> int:
        if a.re:
            return self.base.signum(a.re)
        return self.base.signum(a.im)

    def sort_key(self, a: Complex) -> Any:
        return (self.base.sort_key(a.re), self.base.sort_key(a.im))

    def random(self, rng: random.Random, size: int = 100) -> Complex:
        return Complex(self.base.random(rng, size), self.base.random(rng, size), self)

    def elements(self) -> Iterator[Complex]:
        for c in self.base.elements():
            yield self.from_base(c)

    def algebraic_field(self) -> AlgebraicField:
        """The same field presented as base[i]/(i^2 + 1)."""
        ring = PolyRing(self.base, ("i",))
        i = ring.gen(0)
        return AlgebraicField(i * i + 1)

    def to_algebraic(self, a: Complex, field: AlgebraicField) -> AlgebraicNumber:
        return field.from_poly(field.ring.from_dense([a.re, a.im]))

    def from_algebraic(self, a: AlgebraicNumber) -> Complex:
        re, im = (a.field.vector(a) + [self.base.zero, self.base.zero])[:2]
        return Complex(re, im, self)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ComplexField) and other.base == self.base

    def __hash__(self) -> int:
        return hash(("CC", self.base))

    def __repr__(self) -> str:
        return f"{self.base}[i]"


class Complex:
    __slots__ = ("re", "im", "field")

    def __init__(self, re: Any, im: Any, field: ComplexField) -> None:
        self.re = re
        self.im = im
        self.field = field

    def _parts(self, other: Any) -> tuple:
        if isinstance(other, Complex):
            return other.re, other.im
        return self.field._coerce(other), self.field.base.zero

    def __add__(self, other: Any) -> Complex:
        re, im = self._parts(other)
        return Complex(self.re + re, self.im + im, self.field)

    __radd__ = __add__

    def __sub__(self, other: Any) -> Complex:
        re, im = self._parts(other)
        return Complex(self.re - re, self.im - im, self.field)

    def __rsub__(self, other: Any) -> Complex:
        return -self + other

    def __neg__(self) -> Complex:
        return Complex(-self.re, -self.im, self.field)

    def __mul__(self, other: Any) -> Complex:
        re, im = self._parts(other)
        return Complex(self.re * re - self.im * im, self.re * im + self.im * re, self.field)

    __rmul__ = __mul__

    def __truediv__(self, other: Any) -> Complex:
        if not isinstance(other, Complex):
            other = self.field.from_base(self.field._coerce(other))
        return self * self.field.inverse(other)

    def __pow__(self, n: int) -> Complex:
        if n < 0:
            return self.field.inverse(self) ** (-n)
        result = self.field.one
        base = self
        while n:
            if n & 1:
                result = result * base
            n >>= 1
            if n:
                base = base * base
        return result

    def conjugate(self) -> Complex:
        return Complex(self.re, -self.im, self.field)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Complex):
            return self.re == other.re and self.im == other.im
        if isinstance(other, int):
            return not self.im and self.re == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.re, self.im))

    def __bool__(self) -> bool:
        return bool(self.re) or bool(self.im)

    def __str__(self) -> str:
        if not self.im:
            return str(self.re)
        if not self.re:
            return f"{self.im}i"
        return f"{self.re} + {self.im}i"

    __repr__ = __str__
