from __future__ import annotations
from typing import Iterable, List, Sequence, Tuple

# exponent vectors are plain tuples of non-negative ints, one entry per variable
Exp = Tuple[int, ...]

def zero_exp(n: int) -> Exp:
	return (0,) * n

def unit_exp(n: int, i: int, e: int = 1) -> Exp:
	v = [0] * n
	v[i] = e
	return tuple(v)

def total_degree(e: Exp) -> int:
	return sum(e)

def add(a: Exp, b: Exp) -> Exp:
	return tuple(x + y for x, y in zip(a, b))

def sub(a: Exp, b: Exp) -> Exp:
	return tuple(x - y for x, y in zip(a, b))

def scale(a: Exp, k: int) -> Exp:
	return tuple(x * k for x in a)

def divides(a: Exp, b: Exp) -> bool:
	"""True if the monomial a divides the monomial b."""
	return all(x <= y for x, y in zip(a, b))

def multiple_of(a: Exp, b: Exp) -> bool:
	return divides(b, a)

def lcm(a: Exp, b: Exp) -> Exp:
	return tuple(max(x, y) for x, y in zip(a, b))

def gcd(a: Exp, b: Exp) -> Exp:
	return tuple(min(x, y) for x, y in zip(a, b))

def max_vector(exps: Iterable[Exp], n: int) -> Exp:
	m = [0] * n
	for e in exps:
		for i, x in enumerate(e):
			if x > m[i]:
				m[i] = x
	return tuple(m)

def min_vector(exps: Iterable[Exp], n: int) -> Exp:
	m: List[int] | None = None
	for e in exps:
		if m is None:
			m = list(e)
			continue
		for i, x in enumerate(e):
			if x < m[i]:
				m[i] = x
	return tuple(m) if m is not None else zero_exp(n)

def dependency(e: Exp) -> List[int]:
	"""Indices of the variables occurring with positive exponent."""
	return [i for i, x in enumerate(e) if x]

def subst(e: Exp, i: int, value: int) -> Exp:
	return e[:i] + (value,) + e[i + 1:]

def to_string(e: Exp, names: Sequence[str]) -> str:
	parts = []
	for name, x in zip(names, e):
		if x == 1:
			parts.append(name)
		elif x:
			parts.append(f"{name}^{x}")
	return "*".join(parts)
