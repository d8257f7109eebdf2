from __future__ import annotations
from typing import Any, Iterator
import itertools
import random

from errors import InvalidOperation
from polynomial import PolyRing, Polynomial
from rings import Field, Ring, RingKind


class AlgebraicField(Field):
    """K[alpha]/(m(alpha)) for a monic irreducible univariate m over a field K."""

    kind = RingKind.ALGEBRAIC

    def __init__(self, modulus: Polynomial) -> None:
        if modulus.nvars != 1 or modulus.degree() < 1:
            raise InvalidOperation(f"minimal polynomial must be univariate of positive degree: {modulus}")
        if not modulus.ring.coeff.is_field:
            raise InvalidOperation(f"algebraic extension needs a field of coefficients, got {modulus.ring.coeff}")
        self.modulus = modulus.monic()
        self.ring: PolyRing = modulus.ring
        self.base: Ring = modulus.ring.coeff
        self.name = modulus.ring.vars[0]
        self.characteristic = self.base.characteristic
        self.is_finite = self.base.is_finite
        self._zero = AlgebraicNumber(self.ring.zero, self)
        self._one = AlgebraicNumber(self.ring.one, self)

    @property
    def degree(self) -> int:
        return self.modulus.degree()

    @property
    def zero(self) -> AlgebraicNumber:
        return self._zero

    @property
    def one(self) -> AlgebraicNumber:
        return self._one

    def from_int(self, n: int) -> AlgebraicNumber:
        return AlgebraicNumber(self.ring.from_int(n), self)

    def from_base(self, c: Any) -> AlgebraicNumber:
        return AlgebraicNumber(self.ring.from_coeff(c), self)

    def from_poly(self, p: Polynomial) -> AlgebraicNumber:
        return AlgebraicNumber(p.rem(self.modulus), self)

    def generator(self) -> AlgebraicNumber:
        return self.from_poly(self.ring.gen(0))

    def inverse(self, a: AlgebraicNumber) -> AlgebraicNumber:
        from gcd import extended_gcd
        if not a:
            raise InvalidOperation("division by zero")
        g, s, _ = extended_gcd(a.val, self.modulus)
        if not g.is_one():
            raise InvalidOperation(f"{a} is a zero divisor modulo {self.modulus}")
        return self.from_poly(s)

    def signum(self, a: AlgebraicNumber) -> int:
        return a.val.signum()

    def sort_key(self, a: AlgebraicNumber) -> Any:
        return a.val.sort_key()

    def random(self, rng: random.Random, size: int = 100) -> AlgebraicNumber:
        coeffs = [self.base.random(rng, size) for _ in range(self.degree)]
        return AlgebraicNumber(self.ring.from_dense(coeffs), self)

    def size(self) -> int:
        return self.base.size() ** self.degree

    def elements(self) -> Iterator[AlgebraicNumber]:
        if self.is_finite:
            for coeffs in itertools.product(list(self.base.elements()), repeat=self.degree):
                yield AlgebraicNumber(self.ring.from_dense(list(coeffs)), self)
        else:
            for c in self.base.elements():
                yield self.from_base(c)

    def vector(self, a: AlgebraicNumber) -> list:
        """Coordinates of a in the power basis 1, alpha, ..., alpha^(d-1)."""
        v = [self.base.zero] * self.degree
        for (k,), c in a.val.terms.items():
            v[k] = c
        return v

    def __eq__(self, other: object) -> bool:
        return isinstance(other, AlgebraicField) and other.modulus == self.modulus

    def __hash__(self) -> int:
        return hash(("alg", self.modulus))

    def __repr__(self) -> str:
        return f"{self.base}[{self.name}]/({self.modulus})"


class AlgebraicNumber:
    __slots__ = ("val", "field")

    def __init__(self, val: Polynomial, field: AlgebraicField) -> None:
        self.val = val
        self.field = field

    def _other(self, other: Any) -> Polynomial:
        if isinstance(other, AlgebraicNumber):
            if other.field != self.field:
                raise InvalidOperation(f"field mismatch: {self.field} vs {other.field}")
            return other.val
        return self.field.ring.from_coeff(other)

    def __add__(self, other: Any) -> AlgebraicNumber:
        return AlgebraicNumber(self.val + self._other(other), self.field)

    __radd__ = __add__

    def __sub__(self, other: Any) -> AlgebraicNumber:
        return AlgebraicNumber(self.val - self._other(other), self.field)

    def __rsub__(self, other: Any) -> AlgebraicNumber:
        return AlgebraicNumber(self._other(other) - self.val, self.field)

    def __neg__(self) -> AlgebraicNumber:
        return AlgebraicNumber(-self.val, self.field)

    def __mul__(self, other: Any) -> AlgebraicNumber:
        if not isinstance(other, AlgebraicNumber):
            return AlgebraicNumber(self.val.scale(other), self.field)
        return self.field.from_poly(self.val * self._other(other))

    __rmul__ = __mul__

    def __truediv__(self, other: Any) -> AlgebraicNumber:
        if not isinstance(other, AlgebraicNumber):
            other = self.field.from_base(other)
        return self * self.field.inverse(other)

    def __pow__(self, n: int) -> AlgebraicNumber:
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

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AlgebraicNumber):
            return self.field == other.field and self.val == other.val
        if isinstance(other, int):
            return self.val == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.val)

    def __bool__(self) -> bool:
        return bool(self.val)

    def __str__(self) -> str:
        return str(self.val)

    __repr__ = __str__
