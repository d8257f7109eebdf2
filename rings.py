from __future__ import annotations
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Tuple
import math
import random

from errors import InvalidOperation
from primes import is_prime


class RingKind(Enum):
    INTEGER = "integer"
    RATIONAL = "rational"
    MODULAR = "modular"
    ALGEBRAIC = "algebraic"
    COMPLEX = "complex"
    QUOTIENT = "quotient"
    POLYNOMIAL = "polynomial"


class Ring(ABC):
    """Capabilities every coefficient domain supplies.

    Elements are plain Python values (ints, Fractions, ModInt, ...) that
    support +, -, * and ** with non-negative int exponents and mix with
    Python ints. Everything beyond the operators goes through the ring.
    """

    kind: RingKind
    is_field: bool = False
    characteristic: int = 0
    is_finite: bool = False

    @property
    @abstractmethod
    def zero(self) -> Any: ...

    @property
    @abstractmethod
    def one(self) -> Any: ...

    @abstractmethod
    def from_int(self, n: int) -> Any: ...

    def is_one(self, a: Any) -> bool:
        return a == self.one

    def is_unit(self, a: Any) -> bool:
        return bool(a) and (self.is_one(a) or self.is_one(-a))

    @abstractmethod
    def inverse(self, a: Any) -> Any: ...

    @abstractmethod
    def exact_quotient(self, a: Any, b: Any) -> Any: ...

    @abstractmethod
    def gcd(self, a: Any, b: Any) -> Any: ...

    def signum(self, a: Any) -> int:
        return 0 if not a else 1

    def sort_key(self, a: Any) -> Any:
        return a

    def random(self, rng: random.Random, size: int = 100) -> Any:
        return self.from_int(rng.randrange(-size, size + 1))

    def size(self) -> int:
        """Number of elements; only meaningful for finite rings."""
        raise InvalidOperation(f"{self} is not finite")

    def elements(self):
        """Enumerate elements for evaluation-point search (finite prefix for infinite rings)."""
        n = 0
        while True:
            yield self.from_int(n)
            if n > 0:
                yield self.from_int(-n)
            n += 1


class GcdDomain(Ring):
    """Rings with a gcd on elements and exact division of multiples."""


class Field(Ring):
    is_field = True

    def is_unit(self, a: Any) -> bool:
        return bool(a)

    def exact_quotient(self, a: Any, b: Any) -> Any:
        return a * self.inverse(b)

    def gcd(self, a: Any, b: Any) -> Any:
        if not a and not b:
            return self.zero
        return self.one


class Modular(ABC):
    """Residue-class rings Z/m: reduction, lifting and symmetric representatives."""

    modulus: int

    def symmetric(self, a: Any) -> int:
        v = int(a) % self.modulus
        return v - self.modulus if v > self.modulus // 2 else v

    def lift(self, a: Any) -> int:
        return int(a) % self.modulus


class IntegerRing(GcdDomain):
    kind = RingKind.INTEGER

    @property
    def zero(self) -> int:
        return 0

    @property
    def one(self) -> int:
        return 1

    def from_int(self, n: int) -> int:
        return int(n)

    def is_unit(self, a: int) -> bool:
        return a == 1 or a == -1

    def inverse(self, a: int) -> int:
        if a == 1 or a == -1:
            return a
        raise InvalidOperation(f"{a} is not invertible in ZZ")

    def exact_quotient(self, a: int, b: int) -> int:
        if b == 0:
            raise InvalidOperation("division by zero")
        q, r = divmod(a, b)
        if r:
            raise InvalidOperation(f"{a} is not divisible by {b}")
        return q

    def gcd(self, a: int, b: int) -> int:
        return math.gcd(a, b)

    def signum(self, a: int) -> int:
        return (a > 0) - (a < 0)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, IntegerRing)

    def __hash__(self) -> int:
        return hash("ZZ")

    def __repr__(self) -> str:
        return "ZZ"


def egcd(a: int, b: int) -> Tuple[int, int, int]:
    """Return (g, s, t) with s*a + t*b = g = gcd(a, b)."""
    s0, s1, t0, t1 = 1, 0, 0, 1
    while b:
        q, r = divmod(a, b)
        a, b = b, r
        s0, s1 = s1, s0 - q * s1
        t0, t1 = t1, t0 - q * t1
    if a < 0:
        return -a, -s0, -t0
    return a, s0, t0


class ModInt:
    __slots__ = ("val", "ring")

    def __init__(self, val: int, ring: "ModularRing") -> None:
        self.val = val % ring.modulus
        self.ring = ring

    def _coerce(self, other: Any) -> int:
        if isinstance(other, ModInt):
            if other.ring.modulus != self.ring.modulus:
                raise InvalidOperation(f"modulus mismatch {self.ring.modulus} != {other.ring.modulus}")
            return other.val
        if isinstance(other, int):
            return other
        return NotImplemented

    def __add__(self, other: Any) -> ModInt:
        o = self._coerce(other)
        if o is NotImplemented:
            return NotImplemented
        return ModInt(self.val + o, self.ring)

    __radd__ = __add__

    def __sub__(self, other: Any) -> ModInt:
        o = self._coerce(other)
        if o is NotImplemented:
            return NotImplemented
        return ModInt(self.val - o, self.ring)

    def __rsub__(self, other: Any) -> ModInt:
        o = self._coerce(other)
        if o is NotImplemented:
            return NotImplemented
        return ModInt(o - self.val, self.ring)

    def __mul__(self, other: Any) -> ModInt:
        o = self._coerce(other)
        if o is NotImplemented:
            return NotImplemented
        return ModInt(self.val * o, self.ring)

    __rmul__ = __mul__

    def __truediv__(self, other: Any) -> ModInt:
        o = self._coerce(other)
        if o is NotImplemented:
            return NotImplemented
        return self * self.ring.inverse(ModInt(o, self.ring))

    def __neg__(self) -> ModInt:
        return ModInt(-self.val, self.ring)

    def __pow__(self, e: int) -> ModInt:
        if e < 0:
            return self.ring.inverse(self) ** (-e)
        return ModInt(pow(self.val, e, self.ring.modulus), self.ring)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ModInt):
            return self.val == other.val and self.ring.modulus == other.ring.modulus
        if isinstance(other, int):
            return (self.val - other) % self.ring.modulus == 0
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.val, self.ring.modulus))

    def __bool__(self) -> bool:
        return self.val != 0

    def __int__(self) -> int:
        return self.val

    def __index__(self) -> int:
        return self.val

    def __repr__(self) -> str:
        return str(self.val)


class ModularRing(Modular, Ring):
    """Z/m for any m > 1; a field exactly when m is prime."""

    kind = RingKind.MODULAR

    def __init__(self, modulus: int, field: bool | None = None) -> None:
        if modulus < 2:
            raise InvalidOperation(f"modulus must be at least 2, got {modulus}")
        self.modulus = modulus
        self.is_field = is_prime(modulus) if field is None else field
        self.characteristic = modulus
        self.is_finite = True
        self._zero = ModInt(0, self)
        self._one = ModInt(1, self)

    @property
    def zero(self) -> ModInt:
        return self._zero

    @property
    def one(self) -> ModInt:
        return self._one

    def from_int(self, n: int) -> ModInt:
        return ModInt(int(n), self)

    def is_unit(self, a: ModInt) -> bool:
        return math.gcd(int(a), self.modulus) == 1

    def inverse(self, a: ModInt) -> ModInt:
        g, s, _ = egcd(int(a) % self.modulus, self.modulus)
        if g != 1:
            raise InvalidOperation(f"{a} is not invertible modulo {self.modulus}")
        return ModInt(s, self)

    def exact_quotient(self, a: ModInt, b: ModInt) -> ModInt:
        if not b:
            raise InvalidOperation("division by zero")
        if self.is_unit(b):
            return a * self.inverse(b)
        g = math.gcd(int(b), self.modulus)
        if int(a) % g:
            raise InvalidOperation(f"{a} is not divisible by {b} modulo {self.modulus}")
        m = self.modulus // g
        return ModInt((int(a) // g) * pow(int(b) // g, -1, m), self)

    def gcd(self, a: ModInt, b: ModInt) -> ModInt:
        if not a and not b:
            return self.zero
        if self.is_field:
            return self.one
        return ModInt(math.gcd(int(a), int(b), self.modulus), self)

    def signum(self, a: ModInt) -> int:
        return 1 if a else 0

    def sort_key(self, a: ModInt) -> int:
        return a.val

    def random(self, rng: random.Random, size: int = 0) -> ModInt:
        return ModInt(rng.randrange(self.modulus), self)

    def size(self) -> int:
        return self.modulus

    def elements(self):
        for n in range(self.modulus):
            yield ModInt(n, self)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ModularRing) and other.modulus == self.modulus

    def __hash__(self) -> int:
        return hash(("GF", self.modulus))

    def __repr__(self) -> str:
        return f"{'GF' if self.is_field else 'ZZ/'}({self.modulus})"


ZZ = IntegerRing()


def GF(p: int) -> ModularRing:
    if not is_prime(p):
        raise InvalidOperation(f"{p} is not prime")
    return ModularRing(p, True)
