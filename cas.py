from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence, Union
import logging

from config import DEFAULT_SETTINGS, Settings
from factory import Engines, engines
from polynomial import FactorMultiset, PolyRing, Polynomial
from polynomial_parser import parse_polynomial, variables
from polyutil import convert_vars
from rings import ZZ, Ring

logger = logging.getLogger(__name__)

PolyLike = Union[str, Polynomial, "CAS.ExprResult"]


class CAS:
    """String-in, polynomial-out front end over one coefficient ring.

    Every input may be a string, a Polynomial or a parsed ExprResult.
    Strings parsed together share one variable list, so gcd("x^2-y^2", "x+y")
    works without building the ring by hand.
    """

    def __init__(self, ring: Ring = ZZ, settings: Optional[Settings] = None) -> None:
        self.ring = ring
        self.settings = settings or DEFAULT_SETTINGS
        self._engines: Optional[Engines] = None

    @property
    def engines(self) -> Engines:
        if self._engines is None:
            self._engines = engines(self.ring, self.settings)
        return self._engines

    class ExprResult:
        def __init__(self, poly: Polynomial) -> None:
            self._poly = poly

        @property
        def poly(self) -> Polynomial:
            return self._poly

        def eval(self, env: Dict[str, Any] | None = None) -> Any:
            """Value at env; variables missing from env stay symbolic."""
            env = env or {}
            p = self._poly
            for name, v in env.items():
                if name in p.ring.vars:
                    p = p.substitute(name, v)
            return p.lc if p.is_constant() else p

        def derivative(self, var: str) -> "CAS.ExprResult":
            return CAS.ExprResult(self._poly.derivative(var))

        def __str__(self) -> str:
            return str(self._poly)

        def __repr__(self) -> str:
            return f"ExprResult({self._poly})"

    # -- parsing -----------------------------------------------------------

    def ring_for(self, *exprs: str) -> PolyRing:
        names = set()
        for e in exprs:
            names.update(variables(e, self.ring))
        return PolyRing(self.ring, tuple(sorted(names)) or ("x",))

    def parse(self, expr: str, ring: PolyRing | None = None) -> "CAS.ExprResult":
        return CAS.ExprResult(parse_polynomial(expr, ring or self.ring_for(expr)))

    def _polys(self, *exprs: PolyLike) -> List[Polynomial]:
        strings = [e for e in exprs if isinstance(e, str)]
        ring = None
        for e in exprs:
            if isinstance(e, CAS.ExprResult):
                e = e.poly
            if isinstance(e, Polynomial):
                ring = e.ring
                break
        if ring is None:
            ring = self.ring_for(*strings)
        out = []
        for e in exprs:
            if isinstance(e, str):
                out.append(parse_polynomial(e, ring))
            elif isinstance(e, CAS.ExprResult):
                out.append(e.poly)
            elif isinstance(e, Polynomial):
                out.append(e)
            else:
                raise TypeError(f"Cannot use {type(e)} as a polynomial")
        return out

    # -- arithmetic ----------------------------------------------------------

    def eval(self, expr: PolyLike, env: Dict[str, Any] | None = None) -> Any:
        (p,) = self._polys(expr)
        return CAS.ExprResult(p).eval(env)

    def differentiate(self, expr: PolyLike, var: str) -> "CAS.ExprResult":
        (p,) = self._polys(expr)
        return CAS.ExprResult(p.derivative(var))

    def simplify(self, expr: PolyLike) -> str:
        (p,) = self._polys(expr)
        return str(p)

    def gcd(self, a: PolyLike, b: PolyLike, *rest: PolyLike) -> Polynomial:
        polys = self._polys(a, b, *rest)
        g = polys[0]
        for p in polys[1:]:
            g = self.engines.gcd.gcd(g, p)
        return self.engines.gcd.normalize(g)

    def lcm(self, a: PolyLike, b: PolyLike) -> Polynomial:
        p, q = self._polys(a, b)
        return self.engines.gcd.lcm(p, q)

    def resultant(self, a: PolyLike, b: PolyLike, var: str | None = None) -> Polynomial:
        """Resultant with respect to var (default: the first variable)."""
        p, q = self._polys(a, b)
        if var is not None and p.ring.index(var) != 0:
            names = (var,) + tuple(v for v in p.ring.vars if v != var)
            ring = PolyRing(p.ring.coeff, names)
            res = self.engines.gcd.resultant(convert_vars(p, ring), convert_vars(q, ring))
            return convert_vars(res, p.ring)
        return self.engines.gcd.resultant(p, q)

    def co_prime(self, exprs: Sequence[PolyLike]) -> List[Polynomial]:
        return self.engines.gcd.co_prime(self._polys(*exprs))

    # -- decompositions ------------------------------------------------------

    def squarefree(self, expr: PolyLike) -> FactorMultiset:
        (p,) = self._polys(expr)
        return self.engines.squarefree.squarefree_factors(p)

    def factor(self, expr: PolyLike) -> FactorMultiset:
        (p,) = self._polys(expr)
        result = self.engines.factor.factors(p)
        logger.debug("factor(%s) = %s", p, result)
        return result

    def is_irreducible(self, expr: PolyLike) -> bool:
        (p,) = self._polys(expr)
        return self.engines.factor.is_irreducible(p)

    def is_squarefree(self, expr: PolyLike) -> bool:
        (p,) = self._polys(expr)
        return self.engines.squarefree.is_squarefree(p)

    @staticmethod
    def format_factors(factors: FactorMultiset) -> str:
        return str(factors)
