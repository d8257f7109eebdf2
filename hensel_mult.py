"""Multivariate Hensel lifting over a prime field, one variable at a time (Wang)."""
from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging

from config import DEFAULT_SETTINGS, Settings
from errors import NoLiftingError
from gcd import extended_gcd
from polynomial import Polynomial
from polyutil import product, taylor_coefficient

logger = logging.getLogger(__name__)


def replace_leading_coefficient(h: Polynomial, lc: Polynomial) -> Polynomial:
    """h with its leading coefficient in the main variable replaced by lc (free of the main variable)."""
    d = h.degree(0)
    terms = {e: c for e, c in h.terms.items() if e[0] != d}
    for e, c in lc.terms.items():
        terms[(d,) + e[1:]] = c
    return Polynomial(h.ring, terms)


class MultivariateLift:
    """Lifts univariate factors of f(x0, a1, ..., a_{n-1}) to factors of f over GF(p).

    The error of each partial lift is expanded in powers of (x_j - a_j); every
    Taylor coefficient gives a multivariate Diophantine equation, solved by
    the same evaluate-and-correct scheme one variable down.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or DEFAULT_SETTINGS
        self._bezout: Dict[Tuple[Polynomial, ...], List[Polynomial]] = {}

    def lift(self, f: Polynomial, H: Sequence[Polynomial], LC: Sequence[Polynomial],
             points: Sequence[Any]) -> List[Polynomial]:
        """Factors of f whose leading coefficients are LC and which reduce to H at the points.

        All inputs live in the full ring of f; H depends on x0 only, LC is free
        of x0, points[j - 1] is the value of x_j.
        """
        ring = f.ring
        n = ring.nvars
        images = [f] * n
        for j in range(n - 2, 0, -1):
            images[j] = images[j + 1].substitute(j + 1, points[j])
        d = max(f.degree(i) for i in range(1, n))
        H = list(H)
        for j in range(1, n):
            s = images[j]
            a = points[j - 1]
            G = list(H)
            for i, lc in enumerate(LC):
                for v in range(j + 1, n):
                    lc = lc.substitute(v, points[v - 1])
                H[i] = replace_leading_coefficient(H[i], lc)
            c = s - product(H, ring)
            m = ring.gen(j) - a
            M = ring.one
            for k in range(s.degree(j)):
                if not c:
                    break
                self.settings.check()
                M = M * m
                C = taylor_coefficient(c, j, a, k + 1)
                if C:
                    T = self.diophant(G, C, points[:j - 1], d)
                    H = [h + t * M for h, t in zip(H, T)]
                    c = s - product(H, ring)
            if c:
                raise NoLiftingError(f"lifting in {ring.vars[j]} left a nonzero error")
            logger.debug("lifted %d factors through %s", len(H), ring.vars[j])
        return H

    def diophant(self, F: Sequence[Polynomial], c: Polynomial, points: Sequence[Any], d: int) -> List[Polynomial]:
        """s_i with sum s_i * prod_{j != i} F_j == c, deg_x0 s_i < deg_x0 F_i."""
        if not points:
            return self.univariate_diophant(F, c)
        ring = c.ring
        v = len(points)
        a = points[-1]
        e = product(F, ring)
        B = [e.divide(f) for f in F]
        G = [f.substitute(v, a) for f in F]
        S = self.diophant(G, c.substitute(v, a), points[:-1], d)
        for s, b in zip(S, B):
            c = c - s * b
        m = ring.gen(v) - a
        M = ring.one
        for k in range(d):
            if not c:
                break
            M = M * m
            C = taylor_coefficient(c, v, a, k + 1)
            if C:
                T = [t * M for t in self.diophant(G, C, points[:-1], d)]
                S = [s + t for s, t in zip(S, T)]
                for t, b in zip(T, B):
                    c = c - t * b
        return S

    def univariate_diophant(self, F: Sequence[Polynomial], c: Polynomial) -> List[Polynomial]:
        key = tuple(F)
        s = self._bezout.get(key)
        if s is None:
            P = product(F, c.ring)
            s = []
            for f in F:
                g, si, _ = extended_gcd(P.divide(f).rem(f), f)
                if not g.is_one():
                    raise NoLiftingError(f"univariate images are not coprime at {f}")
                s.append(si)
            self._bezout[key] = s
        return [(c * si).rem(f) for si, f in zip(s, F)]
