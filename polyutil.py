"""Conversions between polynomial rings and the substitutions the engines share."""
from __future__ import annotations
from fractions import Fraction
from math import comb, isqrt
from typing import Any, Dict, Sequence, Tuple

import monomial
from errors import InvalidOperation
from monomial import Exp
from polynomial import PolyRing, Polynomial
from rational import QQ, common_denominator
from rings import ZZ, ModularRing


# -- integer / modular / rational coefficient maps ---------------------------

def to_modular(P: Polynomial, ring: ModularRing) -> Polynomial:
    mring = P.ring.with_coeff(ring)
    return Polynomial(mring, {e: ring.from_int(int(c)) for e, c in P.terms.items()})


def to_integer(P: Polynomial, symmetric: bool = True) -> Polynomial:
    """Integer representatives of a modular polynomial."""
    R = P.ring.coeff
    f = R.symmetric if symmetric else R.lift
    return Polynomial(P.ring.with_coeff(ZZ), {e: f(c) for e, c in P.terms.items()})


def mod_coeffs(P: Polynomial, m: int, symmetric: bool = True) -> Polynomial:
    """Reduce the coefficients of an integer polynomial modulo m."""
    half = m // 2
    terms = {}
    for e, c in P.terms.items():
        c %= m
        if symmetric and c > half:
            c -= m
        terms[e] = c
    return Polynomial(P.ring, terms)


def integer_from_rational(P: Polynomial) -> Tuple[Fraction, Polynomial]:
    """Split a rational polynomial as c * Q with Q a primitive integer polynomial, lc(Q) > 0."""
    zring = P.ring.with_coeff(ZZ)
    if not P:
        return Fraction(0), zring.zero
    d = common_denominator(P.terms.values())
    Q = Polynomial(zring, {e: int(c * d) for e, c in P.terms.items()})
    g = integer_content(Q)
    if Q.signum() < 0:
        g = -g
    Q = Polynomial(zring, {e: c // g for e, c in Q.terms.items()})
    return Fraction(g, d), Q


def rational_from_integer(P: Polynomial) -> Polynomial:
    return Polynomial(P.ring.with_coeff(QQ), {e: Fraction(c) for e, c in P.terms.items()})


def integer_content(P: Polynomial) -> int:
    from math import gcd
    g = 0
    for c in P.terms.values():
        g = gcd(g, c)
        if g == 1:
            break
    return g


def max_norm(P: Polynomial) -> int:
    return max((abs(c) for c in P.terms.values()), default=0)


def coefficient_bound(P: Polynomial) -> int:
    """Mignotte-style bound on the coefficients of any integer factor of P."""
    degs = P.max_degree_vector()
    n = sum(degs)
    terms = len(P.terms)
    return (isqrt(terms) + 1) * 2 ** n * max_norm(P)


def chinese_remainder(cp: Polynomial, M: int, cm: Polynomial, p: int) -> Polynomial:
    """Combine integer images cp (mod M) and cm (mod p) into one modulo M*p, symmetric."""
    mi = pow(M % p, -1, p)
    Mp = M * p
    half = Mp // 2
    terms = {}
    for e in set(cp.terms) | set(cm.terms):
        a = cp.terms.get(e, 0)
        b = cm.terms.get(e, 0)
        c = (a + ((b - a) * mi % p) * M) % Mp
        terms[e] = c - Mp if c > half else c
    return Polynomial(cp.ring, terms)


# -- variables ----------------------------------------------------------------

def convert_vars(P: Polynomial, ring: PolyRing) -> Polynomial:
    """Re-express P in a ring with a superset (in any order) of its variables."""
    idx = [ring.index(v) for v in P.ring.vars]
    n = ring.nvars
    terms = {}
    for e, c in P.terms.items():
        ne = [0] * n
        for j, x in zip(idx, e):
            ne[j] = x
        terms[tuple(ne)] = c
    return Polynomial(ring, terms)


def restrict_vars(P: Polynomial, ring: PolyRing) -> Polynomial:
    """Inverse of convert_vars; fails if P uses a variable outside ring."""
    idx = [P.ring.index(v) for v in ring.vars]
    keep = set(idx)
    terms = {}
    for e, c in P.terms.items():
        if any(x for j, x in enumerate(e) if j not in keep):
            raise InvalidOperation(f"{P} uses variables outside {ring}")
        terms[tuple(e[j] for j in idx)] = c
    return Polynomial(ring, terms)


def embed_constant(c: Polynomial, ring: PolyRing) -> Polynomial:
    """Coefficient polynomial of the recursive view as a polynomial of the full ring."""
    k = ring.nvars - c.nvars
    pad = monomial.zero_exp(k)
    return Polynomial(ring, {pad + e: v for e, v in c.terms.items()})


def compose(P: Polynomial, var: int, Q: Polynomial) -> Polynomial:
    """Substitute the polynomial Q (same ring) for variable `var`."""
    powers: Dict[int, Polynomial] = {0: P.ring.one}
    result = P.ring.zero
    by_power: Dict[int, Dict[Exp, Any]] = {}
    for e, c in P.terms.items():
        by_power.setdefault(e[var], {})[monomial.subst(e, var, 0)] = c
    for k in sorted(by_power):
        if k not in powers:
            powers[k] = Q ** k
        result = result + Polynomial(P.ring, by_power[k]) * powers[k]
    return result


def shift_var(P: Polynomial, var: int, a: Any) -> Polynomial:
    """P with x_var replaced by x_var + a."""
    terms: Dict[Exp, Any] = {}
    for e, c in P.terms.items():
        k = e[var]
        for j in range(k + 1):
            v = c * comb(k, j)
            if k - j:
                v = v * a ** (k - j)
            ne = monomial.subst(e, var, j)
            w = terms.get(ne)
            terms[ne] = v if w is None else w + v
    return Polynomial(P.ring, terms)


def taylor_coefficient(P: Polynomial, var: int, a: Any, k: int) -> Polynomial:
    """Coefficient of (x_var - a)^k in P, as a polynomial free of x_var."""
    terms: Dict[Exp, Any] = {}
    for e, c in P.terms.items():
        d = e[var]
        if d < k:
            continue
        v = c * comb(d, k)
        if d - k:
            v = v * a ** (d - k)
        ne = monomial.subst(e, var, 0)
        w = terms.get(ne)
        terms[ne] = v if w is None else w + v
    return Polynomial(P.ring, terms)


# -- Kronecker substitution ---------------------------------------------------

def kronecker_radix(P: Polynomial) -> int:
    return 1 + max(P.max_degree_vector(), default=0)


def kronecker_substitute(P: Polynomial, radix: int) -> Polynomial:
    """x_i -> x^(radix^(n-1-i)), collapsing P into one variable named like the main variable."""
    n = P.nvars
    weights = [radix ** (n - 1 - i) for i in range(n)]
    uring = PolyRing(P.ring.coeff, (P.ring.vars[0],))
    terms: Dict[Exp, Any] = {}
    for e, c in P.terms.items():
        k = sum(w * x for w, x in zip(weights, e))
        terms[(k,)] = c
    return Polynomial(uring, terms)


def kronecker_back(U: Polynomial, ring: PolyRing, radix: int) -> Polynomial:
    n = ring.nvars
    terms: Dict[Exp, Any] = {}
    for (k,), c in U.terms.items():
        digits = []
        for _ in range(n):
            k, d = divmod(k, radix)
            digits.append(d)
        if k:
            raise InvalidOperation("exponent out of range for Kronecker back substitution")
        e = tuple(reversed(digits))
        w = terms.get(e)
        terms[e] = c if w is None else w + c
    return Polynomial(ring, terms)


def product(polys: Sequence[Polynomial], ring: PolyRing) -> Polynomial:
    result = ring.one
    for f in polys:
        result = result * f
    return result
