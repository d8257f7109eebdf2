from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple
import logging

from config import DEFAULT_SETTINGS, Settings
from errors import InvalidOperation
from polynomial import PolyRing, Polynomial
from polyutil import embed_constant
from rings import Ring

logger = logging.getLogger(__name__)


def extended_gcd(a: Polynomial, b: Polynomial) -> Tuple[Polynomial, Polynomial, Polynomial]:
    """Univariate over a field: (g, s, t) with s*a + t*b = g, g monic."""
    ring = a.ring
    r0, r1 = a, b
    s0, s1 = ring.one, ring.zero
    t0, t1 = ring.zero, ring.one
    while r1:
        q, r = r0.divmod(r1)
        r0, r1 = r1, r
        s0, s1 = s1, s0 - q * s1
        t0, t1 = t1, t0 - q * t1
    if not r0:
        return r0, s0, t0
    inv = ring.coeff.inverse(r0.lc)
    return r0.scale(inv), s0.scale(inv), t0.scale(inv)


class GcdEngine(ABC):
    """gcd(P, S) divides both, unique up to a unit.

    Univariate polynomials are the base case. Multivariate ones are viewed
    as univariate in the main variable with polynomial coefficients, so every
    univariate routine below works over an arbitrary coefficient ring,
    including another PolyRing one level down.
    """

    name = "abstract"

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or DEFAULT_SETTINGS

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    # -- coefficients ------------------------------------------------------

    def coeff_gcd(self, R: Ring, a: Any, b: Any) -> Any:
        if isinstance(R, PolyRing):
            return self.gcd(a, b)
        return R.gcd(a, b)

    def base_content(self, P: Polynomial) -> Any:
        """gcd of the coefficients, signed so the primitive part has positive leading coefficient.

        Over a field the content is the leading coefficient, making the
        primitive part monic.
        """
        R = P.ring.coeff
        if not P:
            return R.zero
        if R.is_field:
            return P.lc
        g = R.zero
        for c in P.terms.values():
            g = self.coeff_gcd(R, g, c)
            if R.is_unit(g):
                g = R.one
                break
        if P.signum() < 0:
            g = -g
        return g

    def base_primitive_part(self, P: Polynomial) -> Polynomial:
        if not P:
            return P
        c = self.base_content(P)
        if P.ring.coeff.is_one(c):
            return P
        return P.divide_coeff(c)

    recursive_content = base_content
    recursive_primitive_part = base_primitive_part

    def content(self, P: Polynomial) -> Polynomial:
        """Content in the main variable, returned in P's ring."""
        if P.nvars <= 1:
            return P.ring.from_coeff(self.base_content(P)) if P else P
        c = self.recursive_content(P.to_recursive())
        return embed_constant(c, P.ring)

    def primitive_part(self, P: Polynomial) -> Polynomial:
        if not P:
            return P
        if P.nvars <= 1:
            return self.base_primitive_part(P)
        return P.ring.distribute(self.recursive_primitive_part(P.to_recursive()))

    def normalize(self, G: Polynomial) -> Polynomial:
        if not G:
            return G
        if G.ring.base_ring.is_field:
            return G.monic()
        return G.abs()

    # -- gcd ---------------------------------------------------------------

    def gcd(self, P: Polynomial, S: Polynomial) -> Polynomial:
        if not S:
            return P
        if not P:
            return S
        if P.ring != S.ring:
            raise InvalidOperation(f"ring mismatch: {P.ring} vs {S.ring}")
        if P.nvars <= 1:
            return self.base_gcd(P, S)
        D = self.recursive_univariate_gcd(P.to_recursive(), S.to_recursive())
        return P.ring.distribute(D)

    def base_gcd(self, P: Polynomial, S: Polynomial) -> Polynomial:
        return self.univariate_gcd(P, S)

    def recursive_univariate_gcd(self, P: Polynomial, S: Polynomial) -> Polynomial:
        return self.univariate_gcd(P, S)

    def univariate_gcd(self, P: Polynomial, S: Polynomial) -> Polynomial:
        if not S:
            return P
        if not P:
            return S
        R = P.ring.coeff
        if P.degree() < S.degree():
            P, S = S, P
        a = self.base_content(P)
        b = self.base_content(S)
        c = self.coeff_gcd(R, a, b)
        r = P.divide_coeff(a)
        q = S.divide_coeff(b)
        if r.degree() == 0 or q.degree() == 0:
            return self.normalize(P.ring.from_coeff(c))
        g = self.remainder_sequence(r, q)
        g = self.base_primitive_part(g)
        return self.normalize(g.scale(c))

    @abstractmethod
    def remainder_sequence(self, r: Polynomial, q: Polynomial) -> Polynomial:
        """Last nonzero remainder of a chain starting with deg r >= deg q > 0."""

    def lcm(self, P: Polynomial, S: Polynomial) -> Polynomial:
        if not P or not S:
            return P.ring.zero
        return self.normalize((P * S).divide(self.gcd(P, S)))

    def is_coprime(self, P: Polynomial, S: Polynomial) -> bool:
        return self.gcd(P, S).is_constant()

    # -- resultant ---------------------------------------------------------

    def resultant(self, P: Polynomial, S: Polynomial) -> Polynomial:
        """Resultant in the main variable, as a polynomial of P's ring free of it."""
        if P.ring != S.ring:
            raise InvalidOperation(f"ring mismatch: {P.ring} vs {S.ring}")
        if not P or not S:
            return P.ring.zero
        if P.nvars <= 1:
            return P.ring.from_coeff(self.univariate_resultant(P, S))
        res = self.univariate_resultant(P.to_recursive(), S.to_recursive())
        return embed_constant(res, P.ring)

    base_resultant = resultant

    def univariate_resultant(self, A: Polynomial, B: Polynomial) -> Any:
        """Subresultant resultant of two univariate polynomials over any domain."""
        R = A.ring.coeff
        if not A or not B:
            return R.zero
        s = 1
        if A.degree() < B.degree():
            A, B = B, A
            if A.degree() % 2 == 1 and B.degree() % 2 == 1:
                s = -s
        if B.degree() == 0:
            return B.lc ** A.degree() * s
        a = self.base_content(A)
        b = self.base_content(B)
        t = a ** B.degree() * b ** A.degree()
        A = A.divide_coeff(a)
        B = B.divide_coeff(b)
        g = h = R.one
        while True:
            delta = A.degree() - B.degree()
            if A.degree() % 2 == 1 and B.degree() % 2 == 1:
                s = -s
            rem = A.prem(B)
            A = B
            B = rem.divide_coeff(g * h ** delta) if rem else rem
            g = A.lc
            if delta == 1:
                h = g
            elif delta > 1:
                h = R.exact_quotient(g ** delta, h ** (delta - 1))
            if B.degree() <= 0:
                break
        if not B:
            return R.zero
        d = A.degree()
        h = R.exact_quotient(B.lc ** d, h ** (d - 1))
        return t * h * s

    # -- coprime splitting -------------------------------------------------

    def co_prime(self, polys: List[Polynomial]) -> List[Polynomial]:
        """Pairwise coprime list such that every input is a product of powers of its members."""
        out: List[Polynomial] = []
        for a in polys:
            out = self.co_prime_add(a, out)
        return out

    def co_prime_add(self, a: Polynomial, coprime: List[Polynomial]) -> List[Polynomial]:
        out = list(coprime)
        work = [a]
        while work:
            x = work.pop()
            if not x or x.is_constant():
                continue
            for j, y in enumerate(out):
                g = self.gcd(x, y)
                if not g.is_constant():
                    out.pop(j)
                    work.extend([self.normalize(g), self.normalize(x.divide(g)), self.normalize(y.divide(g))])
                    break
            else:
                out.append(self.normalize(self.primitive_part(x)))
        return out


class PrimitiveGcd(GcdEngine):
    """Primitive PRS: every remainder is reduced to its primitive part."""

    name = "primitive"

    def remainder_sequence(self, r: Polynomial, q: Polynomial) -> Polynomial:
        while q:
            x = r.sparse_prem(q)
            r, q = q, self.base_primitive_part(x)
        return r


class SimpleGcd(GcdEngine):
    """Euclid with pseudo-remainders, made monic when the coefficients form a field."""

    name = "simple"

    def remainder_sequence(self, r: Polynomial, q: Polynomial) -> Polynomial:
        field = r.ring.coeff.is_field
        while q:
            x = r.sparse_prem(q)
            if field and x:
                x = x.monic()
            r, q = q, x
        return r


class SubresGcd(GcdEngine):
    """Subresultant PRS; the (g, h) scale factors keep coefficient growth polynomial."""

    name = "subresultant"

    def remainder_sequence(self, r: Polynomial, q: Polynomial) -> Polynomial:
        R = r.ring.coeff
        g = h = R.one
        while q:
            delta = r.degree() - q.degree()
            x = r.prem(q)
            r = q
            if not x:
                q = x
                continue
            q = x.divide_coeff(g * h ** delta)
            g = r.lc
            if delta == 1:
                h = g
            elif delta > 1:
                h = R.exact_quotient(g ** delta, h ** (delta - 1))
        return r
