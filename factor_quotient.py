from __future__ import annotations
from typing import Any, Dict, List, Tuple
import logging

from factor import FactorizationEngine
from polynomial import FactorMultiset, PolyRing, Polynomial
from quotient import QuotientField

logger = logging.getLogger(__name__)


class QuotientFactor(FactorizationEngine):
    """Factorization over K(t1, ..., tn).

    Denominators are cleared, the numerator is factored as a polynomial in
    x and the t's over K, and the factors involving x come back as monic
    polynomials with rational-function coefficients. Whatever is left over
    is a unit of K(t) and leads the result.
    """

    def __init__(self, ring: QuotientField, engine, sengine, settings=None) -> None:
        super().__init__(ring, engine, sengine, settings)
        self.field = ring

    def joint_ring(self, ring: PolyRing) -> PolyRing:
        T = self.field.ring
        tvars = []
        for v in T.vars:
            while v in ring.vars or v in tvars:
                v = v + "_"
            tvars.append(v)
        return PolyRing(T.coeff, ring.vars + tuple(tvars))

    def clear_denominators(self, P: Polynomial, big: PolyRing) -> Polynomial:
        eng = self.field.engine
        d = None
        for c in P.terms.values():
            d = c.den if d is None else eng.lcm(d, c.den)
        terms: Dict[Tuple[int, ...], Any] = {}
        for e, c in P.terms.items():
            num = c.num if c.den == d else c.num * d.divide(c.den)
            for te, v in num.terms.items():
                terms[e + te] = v
        return Polynomial(big, terms)

    def from_joint(self, f: Polynomial, ring: PolyRing) -> Polynomial:
        F = self.field
        n = ring.nvars
        groups: Dict[Tuple[int, ...], Dict[Tuple[int, ...], Any]] = {}
        for e, c in f.terms.items():
            groups.setdefault(e[:n], {})[e[n:]] = c
        return Polynomial(ring, {e: F.from_poly(Polynomial(F.ring, d)) for e, d in groups.items()})

    def factors(self, P: Polynomial) -> FactorMultiset:
        if not P or P.is_constant():
            return super().factors(P)
        from factory import factor_engine
        ring = P.ring
        big = self.joint_ring(ring)
        Q = self.clear_denominators(P, big)
        parts: List[Tuple[Polynomial, int]] = []
        for f, k in factor_engine(big.coeff, self.settings).factors(Q).items():
            if not any(f.degree(i) > 0 for i in range(ring.nvars)):
                continue
            parts.append((self.from_joint(f, ring).monic(), k))
        prod = ring.one
        for f, k in parts:
            prod = prod * f ** k
        unit = P.divide(prod)
        logger.debug("factored %s through %s, unit %s", P, big, unit)
        return self.normalize_factorization([(unit, 1)] + parts)

    def factors_squarefree(self, P: Polynomial) -> List[Polynomial]:
        return list(self.factors(P))

    def base_factors_squarefree(self, P: Polynomial) -> List[Polynomial]:
        return list(self.factors(P))
