from __future__ import annotations
from typing import Any, Dict, Optional
import logging
import math

from config import Settings
from errors import InvalidOperation
from gcd import SimpleGcd, SubresGcd
from polynomial import PolyRing, Polynomial
from polyutil import (chinese_remainder, coefficient_bound, integer_content, integer_from_rational,
                      rational_from_integer, to_integer, to_modular)
from primes import PrimeList, PrimeRange
from rings import GF

logger = logging.getLogger(__name__)


def _last_var_view(P: Polynomial) -> Polynomial:
    """P in x0..x(n-2) with coefficients univariate in the last variable."""
    ring = P.ring
    tring = PolyRing(ring.coeff, ring.vars[-1:])
    vring = PolyRing(tring, ring.vars[:-1])
    groups: Dict[tuple, Dict[tuple, Any]] = {}
    for e, c in P.terms.items():
        groups.setdefault(e[:-1], {})[e[-1:]] = c
    return Polynomial(vring, {o: Polynomial(tring, d) for o, d in groups.items()})


def _eval_view(H: Polynomial, d: Any) -> Polynomial:
    xring = PolyRing(H.ring.coeff.coeff, H.ring.vars)
    return Polynomial(xring, {e: c.evaluate_all((d,)) for e, c in H.terms.items()})


def _lift_view(G: Polynomial, vring: PolyRing) -> Polynomial:
    tring = vring.coeff
    return Polynomial(vring, {e: tring.from_coeff(c) for e, c in G.terms.items()})


class ModEvalGcd(SimpleGcd):
    """Multivariate gcd over a prime field by evaluating the last variable and interpolating.

    Falls back to the remainder sequence when the field runs out of usable points.
    """

    name = "modeval"

    def gcd(self, P: Polynomial, S: Polynomial) -> Polynomial:
        if not S:
            return P
        if not P:
            return S
        if P.ring != S.ring:
            raise InvalidOperation(f"ring mismatch: {P.ring} vs {S.ring}")
        if P.nvars <= 1:
            return self.base_gcd(P, S)
        ring = P.ring
        F = ring.coeff
        Pv, Sv = _last_var_view(P), _last_var_view(S)
        vring = Pv.ring
        tring = vring.coeff
        cP, cS = self.base_content(Pv), self.base_content(Sv)
        c = self.gcd(cP, cS)
        q, r = Pv.divide_coeff(cP), Sv.divide_coeff(cS)
        if q.is_constant() or r.is_constant():
            return self.normalize(ring.distribute(vring.from_coeff(c)))
        cc = self.gcd(q.lc, r.lc)
        qt = max(k.degree() for k in q.terms.values())
        rt = max(k.degree() for k in r.terms.values())
        bound = cc.degree() + min(qt, rt)
        qe, re = q.leading_exp(), r.leading_exp()
        qd_full, rd_full = ring.distribute(q), ring.distribute(r)
        t = tring.gen(0)

        best = None
        H: Optional[Polynomial] = None
        M = tring.one
        count = 0
        for i, d in enumerate(F.elements()):
            if i >= self.settings.modeval_points:
                break
            self.settings.check()
            ccd = cc.evaluate_all((d,))
            if not ccd:
                continue
            qd, rd = _eval_view(q, d), _eval_view(r, d)
            if qd.leading_exp() != qe or rd.leading_exp() != re:
                continue
            gd = self.gcd(qd, rd)
            if gd.is_constant():
                return self.normalize(ring.distribute(vring.from_coeff(c)))
            ge = gd.leading_exp()
            if best is not None and ge > best:
                logger.debug("unlucky evaluation point %s for %s", d, ring)
                continue
            if best is None or ge < best:
                H = None
            best = ge
            gd = gd.scale(ccd)
            stable = False
            if H is None:
                H = _lift_view(gd, vring)
                M = t - d
                count = 1
            else:
                Hd = _eval_view(H, d)
                if Hd == gd:
                    stable = True
                else:
                    inv = F.inverse(M.evaluate_all((d,)))
                    H = H + _lift_view(gd - Hd, vring) * M.scale(inv)
                M = M * (t - d)
                count += 1
            if stable or count > bound:
                G = ring.distribute(self.base_primitive_part(H))
                if qd_full.is_divisible_by(G) and rd_full.is_divisible_by(G):
                    return self.normalize(G * ring.distribute(vring.from_coeff(c)))
                if count > bound:
                    H = None
        logger.debug("evaluation points exhausted for %s, using remainder sequence", ring)
        return super().gcd(P, S)


class ModularGcd(SubresGcd):
    """Integer gcd from images modulo medium primes joined by Chinese remaindering."""

    name = "modular"

    def __init__(self, settings: Optional[Settings] = None) -> None:
        super().__init__(settings)
        self.modular_engine = ModEvalGcd(self.settings)

    def gcd(self, P: Polynomial, S: Polynomial) -> Polynomial:
        if not S:
            return P
        if not P:
            return S
        if P.ring != S.ring:
            raise InvalidOperation(f"ring mismatch: {P.ring} vs {S.ring}")
        ring = P.ring
        a, b = integer_content(P), integer_content(S)
        if P.signum() < 0:
            a = -a
        if S.signum() < 0:
            b = -b
        c = math.gcd(a, b)
        q, r = P.divide_coeff(a), S.divide_coeff(b)
        if q.is_constant() or r.is_constant():
            return ring.from_int(c)
        cc = math.gcd(q.lc, r.lc)
        bound = 2 * cc * max(coefficient_bound(q), coefficient_bound(r))
        qe, re = q.leading_exp(), r.leading_exp()

        best = None
        cp: Optional[Polynomial] = None
        M = 1
        for i, p in enumerate(PrimeList(PrimeRange.MEDIUM)):
            if i >= self.settings.crt_primes:
                break
            self.settings.check()
            if cc % p == 0:
                continue
            F = GF(p)
            qm, rm = to_modular(q, F), to_modular(r, F)
            if qm.leading_exp() != qe or rm.leading_exp() != re:
                continue
            gm = self.modular_engine.gcd(qm, rm)
            if gm.is_constant():
                return ring.from_int(c)
            ge = gm.leading_exp()
            if best is not None and ge > best:
                logger.debug("unlucky prime %d for %s", p, ring)
                continue
            if best is None or ge < best:
                cp = None
            best = ge
            gi = to_integer(gm.scale(F.from_int(cc)))
            if cp is None:
                cp, M = gi, p
                changed = True
            else:
                nxt = chinese_remainder(cp, M, gi, p)
                changed = nxt != cp
                cp, M = nxt, M * p
            if not changed or M > bound:
                x = cp.divide_coeff(integer_content(cp))
                x = x.abs()
                if q.is_divisible_by(x) and r.is_divisible_by(x):
                    return x.scale(c)
        logger.debug("prime budget exhausted for %s, using subresultant sequence", ring)
        return super().gcd(P, S)


class RationalGcd(SubresGcd):
    """Rational gcd through the integer one: clear denominators, then make the result monic."""

    name = "rational"

    def __init__(self, settings: Optional[Settings] = None) -> None:
        super().__init__(settings)
        self.integer_engine = ModularGcd(self.settings)

    def gcd(self, P: Polynomial, S: Polynomial) -> Polynomial:
        if not S:
            return P
        if not P:
            return S
        if P.ring != S.ring:
            raise InvalidOperation(f"ring mismatch: {P.ring} vs {S.ring}")
        if P.is_constant() or S.is_constant():
            return P.ring.one
        _, p = integer_from_rational(P)
        _, s = integer_from_rational(S)
        g = self.integer_engine.gcd(p, s)
        return Polynomial(P.ring, rational_from_integer(g).terms).monic()
