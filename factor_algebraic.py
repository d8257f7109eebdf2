"""Factorization over algebraic number fields (Trager) and over complex extensions."""
from __future__ import annotations
from typing import Iterator, List
import logging

from algebraic import AlgebraicField
from complexes import ComplexField
from errors import ExhaustionError, InvalidOperation
from factor import FactorizationEngine
from polynomial import FactorMultiset, PolyRing, Polynomial
from polyutil import compose, convert_vars, restrict_vars

logger = logging.getLogger(__name__)

MAX_NORM_SHIFTS = 64


def norm_shifts(limit: int = MAX_NORM_SHIFTS) -> Iterator[int]:
    """0, -1, -2, 1, 2, -3, 3, -4, 4, ..."""
    yield 0
    yield -1
    yield -2
    yield 1
    yield 2
    k = 3
    while 2 * k - 1 <= limit:
        yield -k
        yield k
        k += 1


class AlgebraicFactor(FactorizationEngine):
    """Trager's algorithm over L = K(alpha).

    A shift x -> x - k*alpha makes the norm N(x) = Res_y(P(x - k*y, y), m(y))
    squarefree over K; every irreducible factor N_i of N then gives the
    factor gcd(P, N_i(x + k*alpha)) of P.
    """

    def __init__(self, ring: AlgebraicField, engine, sengine, settings=None) -> None:
        super().__init__(ring, engine, sengine, settings)
        self.field = ring

    def base_factors_squarefree(self, P: Polynomial) -> List[Polynomial]:
        if P.nvars != 1:
            raise InvalidOperation(f"{P} is not univariate")
        L = self.field
        out: List[Polynomial] = []
        if P.degree() < 1:
            return [P]
        if not L.is_one(P.lc):
            out.append(P.ring.from_coeff(P.lc))
            P = P.monic()
        if P.degree() == 1:
            out.append(P)
            return out
        out.extend(self.trager(P))
        return out

    def trager(self, P: Polynomial) -> List[Polynomial]:
        from factory import engines
        L = self.field
        K = L.base
        base = engines(K, self.settings)
        xname = P.ring.vars[0]
        yname = L.name if L.name != xname else L.name + "_"
        R2 = PolyRing(K, (yname, xname))
        Rx = PolyRing(K, (xname,))
        lifted = self.to_bivariate(P, R2)
        M = convert_vars(PolyRing(K, (yname,)).from_dict(dict(L.modulus.terms)), R2)
        y, x = R2.gens()
        for k in norm_shifts():
            self.settings.check()
            B = compose(lifted, 1, x - y.scale(K.from_int(k))) if k else lifted
            N = restrict_vars(base.gcd.resultant(B, M), Rx)
            if N.degree() < 1 or not base.squarefree.is_squarefree(N):
                continue
            logger.debug("Trager norm of %s with shift %d: %s", P, k, N)
            return self.split_by_norm(P, N.monic(), k, base.factor)
        raise ExhaustionError(f"no shift gives a squarefree norm for {P}", P, P.ring)

    def to_bivariate(self, P: Polynomial, R2: PolyRing) -> Polynomial:
        terms = {}
        for (e,), c in P.terms.items():
            for (j,), v in c.val.terms.items():
                terms[(j, e)] = v
        return Polynomial(R2, terms)

    def split_by_norm(self, P: Polynomial, N: Polynomial, k: int, factor: FactorizationEngine) -> List[Polynomial]:
        L = self.field
        ring = P.ring
        Nf = factor.factors(N).nonconstant()
        if len(Nf) == 1:
            return [P]
        shift = ring.gen(0) + ring.from_coeff(L.generator() * k)
        out = []
        rest = P
        for Ni in Nf:
            if rest.degree() < 1:
                break
            NL = Ni.map_coeffs(ring, L.from_base)
            if k:
                NL = compose(NL, 0, shift)
            g = self.engine.gcd(NL, rest)
            if g.degree() > 0:
                g = g.monic()
                out.append(g)
                rest = rest.divide(g)
        if rest.degree() > 0:
            out.append(rest.monic())
        return out


class ComplexFactor(FactorizationEngine):
    """K[i] presented as K[i]/(i^2 + 1) and factored there by Trager."""

    def __init__(self, ring: ComplexField, engine, sengine, settings=None) -> None:
        super().__init__(ring, engine, sengine, settings)
        self.field = ring
        self.algebraic = ring.algebraic_field()

    def _engine(self) -> FactorizationEngine:
        from factory import factor_engine
        return factor_engine(self.algebraic, self.settings)

    def to_algebraic(self, P: Polynomial) -> Polynomial:
        C, L = self.field, self.algebraic
        return P.map_coeffs(P.ring.with_coeff(L), lambda c: C.to_algebraic(c, L))

    def from_algebraic(self, P: Polynomial, ring: PolyRing) -> Polynomial:
        return P.map_coeffs(ring, self.field.from_algebraic)

    def factors(self, P: Polynomial) -> FactorMultiset:
        if not P or P.is_constant():
            return super().factors(P)
        parts = [(self.from_algebraic(f, P.ring), k)
                 for f, k in self._engine().factors(self.to_algebraic(P)).items()]
        return self.normalize_factorization(parts)

    def base_factors_squarefree(self, P: Polynomial) -> List[Polynomial]:
        return [self.from_algebraic(f, P.ring)
                for f in self._engine().base_factors_squarefree(self.to_algebraic(P))]
