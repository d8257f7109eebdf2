"""Factorization of univariate polynomials over finite fields GF(q)."""
from __future__ import annotations
from typing import List, Tuple
import logging

import numpy as np

from errors import ExhaustionError, InvalidOperation
from factor import FactorizationEngine
from polynomial import Polynomial

logger = logging.getLogger(__name__)


def pow_mod(a: Polynomial, e: int, f: Polynomial) -> Polynomial:
    """a**e mod f by repeated squaring."""
    result = a.ring.one
    a = a.rem(f)
    while e:
        if e & 1:
            result = (result * a).rem(f)
        e >>= 1
        if e:
            a = (a * a).rem(f)
    return result


def frobenius_matrix(f: Polynomial) -> np.ndarray:
    """Row i holds the coefficients of x^(q*i) mod f, q the field size."""
    ring = f.ring
    F = ring.coeff
    n = f.degree()
    q = F.size()
    M = np.empty((n, n), dtype=object)
    xq = pow_mod(ring.gen(0), q, f)
    row = ring.one
    for i in range(n):
        coeffs = row.to_dense()
        for j in range(n):
            M[i, j] = coeffs[j] if j < len(coeffs) else F.zero
        row = (row * xq).rem(f)
    return M


def frobenius_apply(M: np.ndarray, h: Polynomial) -> Polynomial:
    """h**q mod f, given the Frobenius matrix of f and h reduced mod f."""
    F = h.ring.coeff
    n = M.shape[0]
    out = [F.zero] * n
    for (i,), c in h.terms.items():
        for j in range(n):
            v = M[i, j]
            if v:
                out[j] = out[j] + c * v
    return h.ring.from_dense(out)


class FiniteFieldFactor(FactorizationEngine):
    """Distinct-degree then equal-degree (Cantor-Zassenhaus) splitting over GF(q)."""

    def base_factors_squarefree(self, P: Polynomial) -> List[Polynomial]:
        if P.nvars != 1:
            raise InvalidOperation(f"{P} is not univariate")
        out: List[Polynomial] = []
        if P.degree() < 1:
            return [P]
        if not P.ring.coeff.is_one(P.lc):
            out.append(P.ring.from_coeff(P.lc))
            P = P.monic()
        if P.degree() == 1:
            out.append(P)
            return out
        rng = self.settings.rng()
        for g, d in self.distinct_degree(P):
            out.extend(self.equal_degree(g, d, rng))
        return out

    def distinct_degree(self, f: Polynomial) -> List[Tuple[Polynomial, int]]:
        """Products g_d of all irreducible factors of degree d, for the monic squarefree f."""
        x = f.ring.gen(0)
        M = frobenius_matrix(f)
        h = x.rem(f)
        rest = f
        out = []
        d = 0
        while rest.degree() >= 2 * (d + 1):
            self.settings.check()
            d += 1
            h = frobenius_apply(M, h)
            g = self.engine.gcd(rest, h - x)
            if not g.is_constant():
                g = g.monic()
                out.append((g, d))
                rest = rest.divide(g)
        if not rest.is_constant():
            out.append((rest.monic(), rest.degree()))
        logger.debug("distinct degree split of %s: %s", f, [(str(g), d) for g, d in out])
        return out

    def equal_degree(self, g: Polynomial, d: int, rng) -> List[Polynomial]:
        """Split g, a product of distinct monic irreducibles of degree d."""
        n = g.degree()
        if n == d:
            return [g]
        ring = g.ring
        F = ring.coeff
        q = F.size()
        p = F.characteristic
        for _ in range(self.settings.edf_retries):
            self.settings.check()
            a = ring.from_dense([F.random(rng) for _ in range(n)])
            if a.degree() < 1:
                continue
            if p == 2:
                k = (q.bit_length() - 1) * d
                t = c = a
                for _ in range(k - 1):
                    c = (c * c).rem(g)
                    t = t + c
                b = t
            else:
                b = pow_mod(a, (q ** d - 1) // 2, g) - ring.one
            h = self.engine.gcd(g, b)
            if 0 < h.degree() < n:
                h = h.monic()
                return self.equal_degree(h, d, rng) + self.equal_degree(g.divide(h), d, rng)
        raise ExhaustionError(f"equal degree splitting of {g} failed after {self.settings.edf_retries} tries",
                              g, ring)
