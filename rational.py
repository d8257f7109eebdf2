from __future__ import annotations
from fractions import Fraction
from typing import Any
import math
import random

from errors import InvalidOperation
from rings import Field, RingKind

class RationalField(Field):
	"""The field QQ with fractions.Fraction elements."""
	kind = RingKind.RATIONAL
	@property
	def zero(self) -> Fraction:
		return Fraction(0)
	@property
	def one(self) -> Fraction:
		return Fraction(1)
	def from_int(self, n: int) -> Fraction:
		return Fraction(int(n))
	def convert(self, num: int | Fraction | str, den: int | None = None) -> Fraction:
		if isinstance(num, Fraction):
			return num
		return Fraction(num, 1 if den is None else den)
	def inverse(self, a: Any) -> Fraction:
		if not a:
			raise InvalidOperation("division by zero")
		return 1 / Fraction(a)
	def signum(self, a: Any) -> int:
		return (a > 0) - (a < 0)
	def random(self, rng: random.Random, size: int = 100) -> Fraction:
		return Fraction(rng.randrange(-size, size + 1), rng.randrange(1, size + 1))
	def __eq__(self, other: object) -> bool:
		return isinstance(other, RationalField)
	def __hash__(self) -> int:
		return hash("QQ")
	def __repr__(self) -> str:
		return "QQ"

QQ = RationalField()

def common_denominator(values) -> int:
	"""Least common multiple of the denominators."""
	d = 1
	for v in values:
		d = d * v.denominator // math.gcd(d, v.denominator)
	return d

def to_string(a: Fraction) -> str:
	if a.denominator == 1:
		return str(a.numerator)
	return f"{a.numerator}/{a.denominator}"
