from __future__ import annotations
from abc import ABC, abstractmethod
from itertools import combinations
from typing import Dict, List, Optional, Tuple
import logging

import monomial
from config import Settings
from errors import InvalidOperation
from gcd import GcdEngine
from polynomial import FactorMultiset, PolyRing, Polynomial
from polyutil import (convert_vars, embed_constant, kronecker_back, kronecker_radix,
                      kronecker_substitute, product, restrict_vars)
from rings import Ring
from squarefree import SquarefreeEngine

logger = logging.getLogger(__name__)


class FactorizationEngine(ABC):
    """factors(P): irreducible factors with multiplicities, product equal to P.

    The generic driver splits off the unit, decomposes P into squarefree
    parts and hands each part to factors_squarefree. Univariate squarefree
    factorization is the ring-specific part; multivariate input falls back
    to Kronecker substitution unless an engine overrides
    multivariate_factors_squarefree.
    """

    def __init__(self, ring: Ring, engine: GcdEngine, sengine: SquarefreeEngine,
                 settings: Optional[Settings] = None) -> None:
        self.ring = ring
        self.engine = engine
        self.sengine = sengine
        self.settings = settings or engine.settings

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.ring})"

    # -- full factorization ------------------------------------------------

    def factors(self, P: Polynomial) -> FactorMultiset:
        result = FactorMultiset()
        if not P:
            return result
        if P.is_constant():
            result.add(P)
            return result
        unit, P = self.split_unit(P)
        parts = [(unit, 1)]
        for f, k in self.sengine.squarefree_factors(P).items():
            if f.is_constant():
                parts.append((f, k))
                continue
            for g in self.factors_squarefree(f):
                parts.append((g, k))
        return self.normalize_factorization(parts)

    def base_factors(self, P: Polynomial) -> FactorMultiset:
        if P.nvars != 1:
            raise InvalidOperation(f"{P} is not univariate")
        return self.factors(P)

    def split_unit(self, P: Polynomial) -> Tuple[Polynomial, Polynomial]:
        """(u, Q) with P = u*Q, u constant; Q monic over a field, primitive with positive lc otherwise."""
        R = P.ring.base_ring
        if R.is_field:
            c = P.leading_base_coefficient()
            if R.is_one(c):
                return P.ring.one, P
            return P.ring.from_coeff(c), P.monic()
        g = R.zero
        for c in P.terms.values():
            g = R.gcd(g, c)
            if R.is_unit(g):
                break
        if R.signum(g) != P.signum():
            g = -g
        return P.ring.from_coeff(g), P.divide_coeff(g)

    # -- squarefree input ----------------------------------------------------

    def factors_squarefree(self, P: Polynomial) -> List[Polynomial]:
        """Irreducible factors of a squarefree P, each once; a constant factor may lead."""
        if P.nvars == 1:
            return self.base_factors_squarefree(P)
        if not P:
            return []
        if P.total_degree() <= 1:
            return [P]
        ring = P.ring
        out: List[Polynomial] = []
        c = self.engine.content(P)
        if not c.is_one():
            if c.is_constant():
                out.append(c)
            else:
                inner = restrict_vars(c, ring.contract(1))
                out.extend(embed_constant(f, ring) for f in self.factors_squarefree(inner))
            P = P.divide(c)
            if P.is_constant():
                if not P.is_one():
                    out.append(P)
                return out
        m = monomial.min_vector(P.terms, ring.nvars)
        if any(m):
            for i, e in enumerate(m):
                out.extend([ring.gen(i)] * e)
            P = P.divide(ring.monomial(m))
            if P.is_constant():
                return out
        deps = P.dependency()
        if len(deps) < ring.nvars:
            sub = PolyRing(ring.coeff, tuple(ring.vars[i] for i in deps))
            out.extend(convert_vars(f, ring) for f in self.factors_squarefree(restrict_vars(P, sub)))
            return out
        if P.degree(0) == 1:
            out.append(P)
            return out
        out.extend(self.multivariate_factors_squarefree(P))
        return out

    @abstractmethod
    def base_factors_squarefree(self, P: Polynomial) -> List[Polynomial]:
        """Irreducible factors of a univariate squarefree P."""

    def multivariate_factors_squarefree(self, P: Polynomial) -> List[Polynomial]:
        """P primitive in the main variable and depending on every variable."""
        return self.kronecker_factors(P)

    def kronecker_factors(self, P: Polynomial) -> List[Polynomial]:
        """Factor through x_i -> x^(r^(n-1-i)) and recombine back-substituted univariate factors."""
        ring = P.ring
        radix = kronecker_radix(P)
        U = kronecker_substitute(P, radix)
        ulist: List[Polynomial] = []
        for g, k in self.base_factors(U).items():
            if not g.is_constant():
                ulist.extend([g] * k)
        logger.debug("Kronecker image of %s has %d factors", P, len(ulist))
        if len(ulist) <= 1:
            return [P]
        accepted: List[Polynomial] = []
        work: Tuple[Polynomial, ...] = tuple(ulist)
        u = P
        k = 1
        while 2 * k <= len(work):
            hit = self._kronecker_search(u, work, k, radix)
            if hit is None:
                k += 1
                continue
            trial, idx = hit
            accepted.append(trial)
            u = u.divide(trial)
            work = tuple(f for i, f in enumerate(work) if i not in idx)
        if not u.is_constant():
            accepted.append(u)
        elif not u.is_one():
            accepted.insert(0, u)
        return accepted

    def _kronecker_search(self, u: Polynomial, work: Tuple[Polynomial, ...], k: int,
                          radix: int) -> Optional[Tuple[Polynomial, set]]:
        lead, trail = u.leading_exp(), u.trailing_exp()
        degs = u.max_degree_vector()
        for idx in combinations(range(len(work)), k):
            self.settings.check()
            U = product([work[i] for i in idx], work[0].ring)
            trial = kronecker_back(U, u.ring, radix)
            if trial.is_constant():
                continue
            if not monomial.divides(trial.leading_exp(), lead) or not monomial.divides(trial.trailing_exp(), trail):
                continue
            if not monomial.divides(trial.max_degree_vector(), degs):
                continue
            trial = self.engine.normalize(trial)
            if u.is_divisible_by(trial):
                return trial, set(idx)
        return None

    # -- derived operations ------------------------------------------------

    def base_factors_radical(self, P: Polynomial) -> List[Polynomial]:
        return list(self.base_factors(P).nonconstant())

    def factors_radical(self, P: Polynomial) -> List[Polynomial]:
        """Distinct irreducible factors of P, multiplicities dropped."""
        return list(self.factors(P).nonconstant())

    def factors_product(self, factors: Dict[Polynomial, int]) -> Polynomial:
        if not factors:
            raise InvalidOperation("empty factorization has no ring")
        return FactorMultiset(factors).product()

    def is_squarefree(self, P: Polynomial) -> bool:
        return self.sengine.is_squarefree(P)

    def is_irreducible(self, P: Polynomial) -> bool:
        if not P or P.is_constant():
            return False
        F = self.factors(P).nonconstant()
        return len(F) == 1 and next(iter(F.values())) == 1

    def is_reducible(self, P: Polynomial) -> bool:
        return not self.is_irreducible(P)

    def is_factorization(self, P: Polynomial, factors: Dict[Polynomial, int]) -> bool:
        return self.sengine.is_factorization(P, factors)

    def normalize_factorization(self, factors) -> FactorMultiset:
        """Collect constants into one leading unit and move signs of the other factors into it."""
        items = factors.items() if isinstance(factors, dict) else factors
        items = list(items)
        if not items:
            return FactorMultiset()
        ring = items[0][0].ring
        unit = ring.one
        rest = FactorMultiset()
        for f, k in items:
            if f.is_constant():
                unit = unit * f ** k
                continue
            if f.signum() < 0:
                f = -f
                if k % 2:
                    unit = -unit
            rest.add(f, k)
        result = FactorMultiset()
        if not unit.is_one():
            result.add(unit)
        result.update(rest.sorted())
        return result
