from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple
import logging

import linalg
import monomial
from algebraic import AlgebraicField, AlgebraicNumber
from config import DEFAULT_SETTINGS, Settings
from errors import InvalidOperation
from gcd import GcdEngine
from polynomial import FactorMultiset, PolyRing, Polynomial
from polyutil import embed_constant, restrict_vars
from quotient import Quotient, QuotientField
from rings import Ring

logger = logging.getLogger(__name__)


class SquarefreeEngine(ABC):
    """squarefree_factors(P): squarefree factors with multiplicities, product equal to P.

    Constant parts (content, leading unit) come back as one constant factor
    of multiplicity one, listed first.
    """

    def __init__(self, engine: GcdEngine, settings: Optional[Settings] = None) -> None:
        self.engine = engine
        self.settings = settings or engine.settings or DEFAULT_SETTINGS

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.engine!r})"

    def squarefree_factors(self, P: Polynomial) -> FactorMultiset:
        result = FactorMultiset()
        if not P:
            return result
        if P.is_constant():
            result.add(P)
            return result
        parts = self.nonconstant_factors(P)
        prod = P.ring.one
        for f, k in parts:
            prod = prod * f ** k
        unit = P.divide(prod)
        if not unit.is_one():
            result.add(unit)
        for f, k in parts:
            result.add(f, k)
        return result.sorted()

    base_squarefree_factors = squarefree_factors

    @abstractmethod
    def nonconstant_factors(self, P: Polynomial) -> List[Tuple[Polynomial, int]]:
        """Normalized non-constant squarefree factors of a non-constant P."""

    def squarefree_part(self, P: Polynomial) -> Polynomial:
        if not P or P.is_constant():
            return P
        result = P.ring.one
        for f, _ in self.nonconstant_factors(P):
            result = result * f
        return self.engine.normalize(result)

    def is_squarefree(self, P: Polynomial) -> bool:
        if not P or P.is_constant():
            return True
        return all(k == 1 for _, k in self.nonconstant_factors(P))

    def is_factorization(self, P: Polynomial, factors: Dict[Polynomial, int]) -> bool:
        """True if the product of the factors equals P up to a unit."""
        prod = P.ring.one
        for f, k in factors.items():
            prod = prod * f ** k
        if not prod:
            return not P
        try:
            u = P.divide(prod)
        except InvalidOperation:
            return False
        return bool(u) and u.is_constant() and P.ring.coeff.is_unit(u.lc)


class SquarefreeChar0(SquarefreeEngine):
    """Yun's algorithm in characteristic 0, over fields and rings alike.

    Multivariate input is split into its content in the main variable,
    decomposed recursively, and a primitive part decomposed by Yun with
    the main-variable derivative.
    """

    def nonconstant_factors(self, P: Polynomial) -> List[Tuple[Polynomial, int]]:
        out: List[Tuple[Polynomial, int]] = []
        ring = P.ring
        if ring.nvars > 1:
            c = self.engine.content(P)
            if not c.is_constant():
                inner = restrict_vars(c, ring.contract(1))
                for f, k in self.nonconstant_factors(inner):
                    out.append((embed_constant(f, ring), k))
            P = P.divide(c)
        else:
            P = self.engine.primitive_part(P)
        if P.degree(0) > 0:
            out.extend(self._yun(P))
        return out

    def _yun(self, P: Polynomial) -> List[Tuple[Polynomial, int]]:
        gcd, norm = self.engine.gcd, self.engine.normalize
        dP = P.derivative(0)
        g = gcd(P, dP)
        if g.is_constant():
            return [(norm(P), 1)]
        w = P.divide(g)
        y = dP.divide(g)
        out = []
        i = 1
        while not w.is_constant():
            self.settings.check()
            z = y - w.derivative(0)
            h = gcd(w, z)
            if not h.is_constant():
                out.append((norm(h), i))
            w = w.divide(h)
            y = z.divide(h)
            i += 1
        return out


class SquarefreeCharP(SquarefreeEngine):
    """Musser's algorithm with all partial derivatives, plus p-th root extraction."""

    def nonconstant_factors(self, P: Polynomial) -> List[Tuple[Polynomial, int]]:
        acc: Dict[Polynomial, int] = {}
        self._collect(P, 1, acc)
        return list(acc.items())

    def _collect(self, T0: Polynomial, mult: int, acc: Dict[Polynomial, int]) -> None:
        gcd, norm = self.engine.gcd, self.engine.normalize
        p = T0.ring.characteristic
        while not T0.is_constant():
            self.settings.check()
            c = T0
            for i in range(T0.nvars):
                d = T0.derivative(i)
                if d:
                    c = gcd(c, d)
            c = norm(c)
            w = T0.divide(c)
            e = 1
            while not w.is_constant():
                y = gcd(w, c)
                z = w.divide(y)
                if not z.is_constant():
                    z = norm(z)
                    acc[z] = acc.get(z, 0) + e * mult
                e += 1
                w = y
                c = c.divide(y)
            if c.is_constant():
                return
            root = self.root_characteristic(c)
            if root is None:
                self._inseparable(c, mult, acc)
                return
            T0 = root
            mult *= p

    def _inseparable(self, c: Polynomial, mult: int, acc: Dict[Polynomial, int]) -> None:
        """c has vanishing derivatives but no p-th root: decompose c(x) = C(x^p) through C."""
        p = c.ring.characteristic
        C = Polynomial(c.ring, {tuple(x // p for x in e): v for e, v in c.terms.items()})
        parts = self.nonconstant_factors(C)
        if len(parts) == 1 and parts[0][1] == 1:
            logger.debug("no p-th root of %s over %s, kept as one factor", c, c.ring.coeff)
            c = self.engine.normalize(c)
            acc[c] = acc.get(c, 0) + mult
            return
        for f, k in parts:
            inflated = Polynomial(c.ring, {monomial.scale(e, p): v for e, v in f.terms.items()})
            self._collect(inflated, mult * k, acc)

    def root_characteristic(self, P: Polynomial) -> Optional[Polynomial]:
        """Q with Q^p == P, or None when P is not a p-th power."""
        p = P.ring.characteristic
        terms = {}
        for e, c in P.terms.items():
            if any(x % p for x in e):
                return None
            r = self.coefficient_root(c)
            if r is None:
                return None
            terms[tuple(x // p for x in e)] = r
        return Polynomial(P.ring, terms)

    @abstractmethod
    def coefficient_root(self, c: Any) -> Optional[Any]:
        """p-th root of a coefficient, None if it has none."""


class SquarefreeFiniteFieldCharP(SquarefreeCharP):
    """GF(q): every element is a p-th power, the root of a is a^(q/p)."""

    def __init__(self, engine: GcdEngine, field: Ring, settings: Optional[Settings] = None) -> None:
        super().__init__(engine, settings)
        self.field = field
        self._exponent = field.size() // field.characteristic

    def coefficient_root(self, c: Any) -> Any:
        if self._exponent == 1:
            return c
        return c ** self._exponent


class SquarefreeInfiniteFieldCharP(SquarefreeCharP):
    """Rational function fields K(t1, ..., tn) over a finite field K."""

    def __init__(self, engine: GcdEngine, field: QuotientField, settings: Optional[Settings] = None) -> None:
        super().__init__(engine, settings)
        self.field = field
        from factory import squarefree_engine
        self.base = squarefree_engine(field.ring.base_ring, settings)

    def coefficient_root(self, c: Quotient) -> Optional[Quotient]:
        num = self._poly_root(c.num)
        if num is None:
            return None
        den = self._poly_root(c.den)
        if den is None:
            return None
        return self.field.make(num, den)

    def _poly_root(self, P: Polynomial) -> Optional[Polynomial]:
        p = P.ring.characteristic
        terms = {}
        for e, v in P.terms.items():
            if any(x % p for x in e):
                return None
            r = self.base.coefficient_root(v)
            if r is None:
                return None
            terms[tuple(x // p for x in e)] = r
        return Polynomial(P.ring, terms)


class SquarefreeInfiniteAlgebraicFieldCharP(SquarefreeCharP):
    """Algebraic extensions L = K(alpha) of an infinite field K of characteristic p.

    A p-th root b = sum b_j alpha^j of a satisfies a = sum b_j^p (alpha^p)^j,
    a linear system over K in the unknowns b_j^p, whose solutions are then
    rooted in K.
    """

    def __init__(self, engine: GcdEngine, field: AlgebraicField, settings: Optional[Settings] = None) -> None:
        super().__init__(engine, settings)
        self.field = field
        from factory import squarefree_engine
        self.base = squarefree_engine(field.base, settings)

    def coefficient_root(self, a: AlgebraicNumber) -> Optional[AlgebraicNumber]:
        L = self.field
        K = L.base
        p = L.characteristic
        d = L.degree
        alpha_p = L.generator() ** p
        columns = []
        power = L.one
        for _ in range(d):
            columns.append(L.vector(power))
            power = power * alpha_p
        A = linalg.matrix(zip(*columns))
        try:
            x = linalg.solve(A, L.vector(a), K)
        except InvalidOperation:
            return None
        coeffs = []
        for v in x:
            r = self.base.coefficient_root(v) if v else K.zero
            if r is None:
                return None
            coeffs.append(r)
        return L.from_poly(L.ring.from_dense(coeffs))
