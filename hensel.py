"""p-adic Hensel lifting of modular factorizations of univariate integer polynomials."""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple
import logging

from config import DEFAULT_SETTINGS, Settings
from errors import NoLiftingError
from gcd import extended_gcd
from polynomial import Polynomial
from polyutil import mod_coeffs, to_integer, to_modular, product
from rings import ModularRing

logger = logging.getLogger(__name__)


@dataclass
class HenselApproximation:
    """A*B == C modulo `modulus`; Am, Bm are the same factors over Z/modulus."""

    A: Polynomial
    B: Polynomial
    Am: Polynomial
    Bm: Polynomial
    modulus: int


def lift_hensel_quadratic(C: Polynomial, M: int, A: Polynomial, B: Polynomial,
                          settings: Settings = DEFAULT_SETTINGS) -> HenselApproximation:
    """Lift C == A*B (mod p) until the modulus exceeds M, squaring the modulus each round.

    A carries lc(C) mod p and B is monic. The Bezout coefficients S, T with
    S*A + T*B == 1 are lifted together with the factors.
    """
    F = A.ring.coeff
    p = F.modulus
    g, s, t = extended_gcd(A, B)
    if not g.is_one():
        raise NoLiftingError(f"modular factors {A} and {B} are not coprime")
    a, b = to_integer(A), to_integer(B)
    s, t = to_integer(s), to_integer(t)
    m = p
    while m <= M:
        settings.check()
        m2 = m * m
        e = mod_coeffs(C - a * b, m2)
        q, r = (s * e).divmod(b)
        q, r = mod_coeffs(q, m2), mod_coeffs(r, m2)
        a = mod_coeffs(a + t * e + q * a, m2)
        b = mod_coeffs(b + r, m2)
        d = mod_coeffs(s * a + t * b - 1, m2)
        c, r = (s * d).divmod(b)
        c, r = mod_coeffs(c, m2), mod_coeffs(r, m2)
        s = mod_coeffs(s - r, m2)
        t = mod_coeffs(t - t * d - c * a, m2)
        m = m2
    if not b.lc == 1 or a.degree() + b.degree() != C.degree():
        raise NoLiftingError(f"lifted factors of {C} lost their degree")
    R = ModularRing(m, field=False)
    return HenselApproximation(a, b, to_modular(a, R), to_modular(b, R), m)


def bezout_coefficients(factors: List[Polynomial]) -> List[Polynomial]:
    """s_i with sum s_i * prod_{j != i} f_j == 1 over a field, deg s_i < deg f_i."""
    ring = factors[0].ring
    P = product(factors, ring)
    out = []
    for f in factors:
        cof = P.divide(f)
        g, s, _ = extended_gcd(cof.rem(f), f)
        if not g.is_one():
            raise NoLiftingError(f"modular factor {f} is not coprime to its cofactor")
        out.append(s.rem(f))
    return out


def lift_hensel_linear(C: Polynomial, factors: List[Polynomial], k: int,
                       settings: Settings = DEFAULT_SETTINGS) -> Tuple[List[Polynomial], int]:
    """Lift monic modular factors with C == lc(C) * prod f_i (mod p) to p**k, one power of p per round.

    Each round solves the Diophantine equation sum d_i * prod_{j != i} f_j == e
    modulo p for the scaled error e. Returns the integer factors (symmetric
    residues) and the final modulus.
    """
    F = factors[0].ring.coeff
    p = F.modulus
    s = bezout_coefficients(factors)
    lc = C.lc
    lcinv = pow(lc % p, -1, p)
    lifted = [to_integer(f) for f in factors]
    m = p
    for _ in range(1, k):
        settings.check()
        e = C - product(lifted, C.ring).scale(lc)
        if e:
            if any(c % m for c in e.terms.values()):
                raise NoLiftingError(f"{C} is not a product of the lifted factors modulo {m}")
            e = Polynomial(e.ring, {x: c // m * lcinv for x, c in e.terms.items()})
            em = to_modular(e, F)
            for i, (f, si) in enumerate(zip(factors, s)):
                d = (si * em).rem(f)
                lifted[i] = lifted[i] + to_integer(d).scale(m)
        m *= p
    return [mod_coeffs(f, m) for f in lifted], m


def lift_exponent(p: int, bound: int) -> int:
    """Smallest k with p**k > bound."""
    k, m = 1, p
    while m <= bound:
        m *= p
        k += 1
    return k
