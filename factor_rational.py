from __future__ import annotations
from typing import List
import logging

from factor import FactorizationEngine
from polynomial import FactorMultiset, Polynomial
from polyutil import integer_from_rational, rational_from_integer

logger = logging.getLogger(__name__)


class RationalFactor(FactorizationEngine):
    """Factorization over QQ through the integers.

    P = c * Q with Q primitive over ZZ; Q is factored by `integer` and the
    factors are brought back as primitive integral polynomials, c becoming
    the leading unit.
    """

    def __init__(self, ring, engine, sengine, integer: FactorizationEngine, settings=None) -> None:
        super().__init__(ring, engine, sengine, settings)
        self.integer = integer

    def factors(self, P: Polynomial) -> FactorMultiset:
        if not P or P.is_constant():
            return super().factors(P)
        c, Q = integer_from_rational(P)
        parts = [(P.ring.from_coeff(c), 1)]
        for f, k in self.integer.factors(Q).items():
            parts.append((rational_from_integer(f), k))
        logger.debug("factored %s over ZZ as %s", Q, parts)
        return self.normalize_factorization(parts)

    def factors_squarefree(self, P: Polynomial) -> List[Polynomial]:
        c, Q = integer_from_rational(P)
        out = [rational_from_integer(f) for f in self.integer.factors_squarefree(Q)]
        if c != 1:
            out.insert(0, P.ring.from_coeff(c))
        return out

    def base_factors_squarefree(self, P: Polynomial) -> List[Polynomial]:
        c, Q = integer_from_rational(P)
        out = [rational_from_integer(f) for f in self.integer.base_factors_squarefree(Q)]
        if c != 1:
            out.insert(0, P.ring.from_coeff(c))
        return out
