"""Factorization over the integers.

Univariate input goes through Zassenhaus: factor modulo a few small primes,
keep the prime with the fewest factors, Hensel-lift them and recombine
subsets by trial division. Multivariate input goes through Wang's EEZ
algorithm: evaluate all but the main variable at integers, factor the
univariate image, predistribute the leading coefficient and lift the
factors variable by variable. If the lift fails the Kronecker fallback
takes over.
"""
from __future__ import annotations
from itertools import combinations
from typing import Any, List, Optional, Sequence, Tuple
import logging
import math

from errors import ExhaustionError, InvalidOperation, NoLiftingError
from factor import FactorizationEngine
from gcd import extended_gcd
from hensel import lift_exponent, lift_hensel_linear, lift_hensel_quadratic
from hensel_mult import MultivariateLift
from polynomial import Polynomial
from polyutil import (coefficient_bound, convert_vars, embed_constant, integer_content, max_norm,
                      mod_coeffs, product, to_integer, to_modular)
from primes import factor_primes, next_prime
from rings import GF

logger = logging.getLogger(__name__)

# primes skipped because they divide lc(P) or break squarefreeness
MAX_UNLUCKY_PRIMES = 200


def primitive(P: Polynomial) -> Polynomial:
    """Primitive part with positive leading coefficient."""
    c = integer_content(P)
    if P.signum() < 0:
        c = -c
    return P if c == 1 else P.divide_coeff(c)


def non_divisors(E: Sequence[int], cs: int, ct: int) -> bool:
    """Wang's test: every E_i has a prime divisor not shared with cs*ct or any earlier E_j."""
    result = [cs * ct]
    for q in E:
        q = abs(q)
        for r in reversed(result):
            while r != 1:
                r = math.gcd(r, q)
                q //= r
            if q == 1:
                return False
        result.append(q)
    return True


class IntegerFactor(FactorizationEngine):

    # -- univariate: Zassenhaus -----------------------------------------

    def base_factors_squarefree(self, P: Polynomial) -> List[Polynomial]:
        if P.nvars != 1:
            raise InvalidOperation(f"{P} is not univariate")
        out: List[Polynomial] = []
        c = integer_content(P)
        if P.signum() < 0:
            c = -c
        if c != 1:
            out.append(P.ring.from_coeff(c))
            P = P.divide_coeff(c)
        if P.degree() < 1:
            return out
        if P.degree() == 1:
            out.append(P)
            return out
        if not P.constant_coefficient():
            x = P.ring.gen(0)
            out.append(x)
            P = P.divide(x)
            if P.degree() <= 1:
                out.append(P)
                return out
        out.extend(self.zassenhaus(P))
        return out

    def zassenhaus(self, P: Polynomial) -> List[Polynomial]:
        """Factors of a primitive squarefree P with lc > 0, deg P >= 2 and P(0) != 0."""
        n = P.degree()
        lc = P.lc
        best: Optional[Tuple[int, List[Polynomial]]] = None
        degset = None
        used = unlucky = 0
        primes = factor_primes()
        while used < self.settings.modular_primes:
            self.settings.check()
            p = next(primes)
            if lc % p == 0 or not self._squarefree_mod(P, p):
                unlucky += 1
                if unlucky > MAX_UNLUCKY_PRIMES:
                    raise ExhaustionError(f"no usable prime for {P}", P, P.ring)
                continue
            used += 1
            modular = self._modular_factors(to_modular(P, GF(p)))
            if len(modular) == 1:
                logger.debug("%s is irreducible modulo %d", P, p)
                return [P]
            ds = 1
            for f in modular:
                ds |= ds << f.degree()
            degset = ds if degset is None else degset & ds
            if degset == 1 | 1 << n:
                logger.debug("degree sets of %s leave only the trivial split", P)
                return [P]
            if best is None or len(modular) < len(best[1]):
                best = (p, modular)
        p, modular = best
        bound = 2 * abs(lc) * coefficient_bound(P)
        logger.debug("Zassenhaus for %s: prime %d, %d modular factors, bound %d", P, p, len(modular), bound)
        if len(modular) == 2 and self.settings.quadratic_hensel:
            try:
                return self._split_two(P, modular, bound)
            except NoLiftingError as exc:
                logger.debug("quadratic lift failed for %s: %s", P, exc)
        k = lift_exponent(p, bound)
        lifted, m = lift_hensel_linear(P, modular, k, self.settings)
        return self.recombine(P, lifted, m, degset)

    def _squarefree_mod(self, P: Polynomial, p: int) -> bool:
        Pm = to_modular(P, GF(p))
        g, _, _ = extended_gcd(Pm, Pm.derivative(0))
        return g.is_one()

    def _modular_factors(self, Pm: Polynomial) -> List[Polynomial]:
        from factory import factor_engine
        fe = factor_engine(Pm.ring.coeff, self.settings)
        return [f for f in fe.base_factors_squarefree(Pm) if not f.is_constant()]

    def _split_two(self, P: Polynomial, modular: List[Polynomial], bound: int) -> List[Polynomial]:
        F = modular[0].ring.coeff
        A = modular[0].scale(F.from_int(P.lc))
        approx = lift_hensel_quadratic(P, bound, A, modular[1], self.settings)
        g = primitive(approx.A)
        if 0 < g.degree() < P.degree() and P.is_divisible_by(g):
            return [g, P.divide(g)]
        return [P]

    def recombine(self, P: Polynomial, lifted: List[Polynomial], m: int, degset: int) -> List[Polynomial]:
        """Trial-divide lc(u) * (subset products mod m), smallest subsets first."""
        accepted: List[Polynomial] = []
        work: Tuple[Polynomial, ...] = tuple(lifted)
        u = P
        k = 1
        while 2 * k <= len(work):
            hit = self._search(u, work, k, m, degset)
            if hit is None:
                k += 1
                continue
            g, idx = hit
            accepted.append(g)
            u = u.divide(g)
            work = tuple(f for i, f in enumerate(work) if i not in idx)
        if u.degree() > 0:
            accepted.append(u)
        return accepted

    def _search(self, u: Polynomial, work: Tuple[Polynomial, ...], k: int, m: int,
                degset: int) -> Optional[Tuple[Polynomial, set]]:
        lc = u.lc
        half = m // 2
        tail = lc * u.constant_coefficient()
        for idx in combinations(range(len(work)), k):
            self.settings.check()
            deg = sum(work[i].degree() for i in idx)
            if not degset >> deg & 1:
                continue
            tc = lc
            for i in idx:
                tc = tc * work[i].constant_coefficient() % m
            if tc > half:
                tc -= m
            if not tc or tail % tc:
                continue
            g = primitive(mod_coeffs(product([work[i] for i in idx], u.ring).scale(lc), m))
            if u.is_divisible_by(g):
                return g, set(idx)
        return None

    # -- multivariate: Wang's EEZ ---------------------------------------

    def multivariate_factors_squarefree(self, P: Polynomial) -> List[Polynomial]:
        try:
            return self.wang(P)
        except NoLiftingError as exc:
            logger.warning("Wang lifting failed for %s (%s), falling back to Kronecker substitution", P, exc)
            return self.kronecker_factors(P)

    def wang(self, P: Polynomial) -> List[Polynomial]:
        lcP = P.to_recursive().lc
        ct = 1
        T: List[Polynomial] = []
        for t, _ in self.factors(lcP).items():
            if t.is_constant():
                ct *= t.lc
            else:
                T.append(t)
        config = self.evaluation_point(P, lcP, T, ct)
        if config is None:
            return [P]
        cs, _, E, H, A = config
        logger.debug("Wang point %s for %s: %d univariate factors", A, P, len(H))
        f, H, LC = self.lead_coefficients(P, T, cs, E, H, A)
        return self.verify(P, self.hensel(f, H, LC, A))

    def evaluation_point(self, P: Polynomial, lcP: Polynomial, T: List[Polynomial], ct: int):
        """Best (cs, image, E, H, A) among the first usable points, None if some image is irreducible."""
        n = P.nvars
        rng = self.settings.rng()
        seen = set()
        configs: List[Tuple[Any, ...]] = []
        r = None
        for attempt in range(self.settings.eval_point_budget):
            self.settings.check()
            radius = 1 + attempt // 8
            A = tuple(rng.randint(-radius, radius) for _ in range(n - 1))
            if A in seen:
                continue
            seen.add(A)
            trial = self.test_point(P, lcP, T, ct, A)
            if trial is None:
                continue
            cs, h, E = trial
            H = [g for g in self.base_factors_squarefree(h) if not g.is_constant()]
            if len(H) == 1:
                logger.debug("image of %s at %s is irreducible", P, A)
                return None
            if r is not None and len(H) > r:
                continue
            if r is None or len(H) < r:
                configs, r = [], len(H)
            configs.append((cs, h, E, H, A))
            if len(configs) >= self.settings.wang_trials:
                break
        if not configs:
            raise ExhaustionError(f"no usable evaluation point for {P} in {self.settings.eval_point_budget} tries",
                                  P, P.ring)
        return min(configs, key=lambda c: max_norm(c[1]))

    def test_point(self, P: Polynomial, lcP: Polynomial, T: List[Polynomial], ct: int, A: Tuple[int, ...]):
        if not lcP.evaluate_all(A):
            return None
        Q = P
        for i in range(P.nvars - 1, 0, -1):
            Q = Q.evaluate(i, A[i - 1])
        if not self.sengine.is_squarefree(Q):
            return None
        cs = integer_content(Q)
        if Q.signum() < 0:
            cs = -cs
        E = [t.evaluate_all(A) for t in T]
        if not non_divisors(E, cs, ct):
            return None
        return cs, Q.divide_coeff(cs), E

    def lead_coefficients(self, P: Polynomial, T: List[Polynomial], cs: int, E: List[int],
                          H: List[Polynomial], A: Tuple[int, ...]):
        """Wang's distribution of the factors of lc(P) over the univariate factors H."""
        sub = P.ring.contract(1)
        C = []
        J = [False] * len(E)
        for h in H:
            c = sub.one
            d = h.lc * cs
            for i in reversed(range(len(E))):
                k = 0
                e = E[i]
                while d % e == 0:
                    d //= e
                    k += 1
                if k:
                    c = c * T[i] ** k
                    J[i] = True
            C.append(c)
        if not all(J):
            raise NoLiftingError("leading coefficient factors could not be distributed")
        CC, HH = [], []
        for c, h in zip(C, H):
            d = c.evaluate_all(A)
            lc = h.lc
            if cs == 1:
                cc = lc // d
            else:
                g = math.gcd(lc, d)
                d, cc = d // g, lc // g
                h = h.scale(d)
                cs //= d
            CC.append(c.scale(cc))
            HH.append(h)
        if cs == 1:
            return P, HH, CC
        CC = [c.scale(cs) for c in CC]
        HH = [h.scale(cs) for h in HH]
        return P.scale(cs ** (len(H) - 1)), HH, CC

    def hensel(self, f: Polynomial, H: List[Polynomial], LC: List[Polynomial], A: Tuple[int, ...]) -> List[Polynomial]:
        ring = f.ring
        p = next_prime(2 * coefficient_bound(f))
        while not self._good_prime(H, p):
            p = next_prime(p)
        F = GF(p)
        Hm = [to_modular(convert_vars(h, ring), F) for h in H]
        LCm = [to_modular(embed_constant(c, ring), F) for c in LC]
        points = [F.from_int(a) for a in A]
        lifted = MultivariateLift(self.settings).lift(to_modular(f, F), Hm, LCm, points)
        return [primitive(to_integer(h)) for h in lifted]

    def _good_prime(self, H: List[Polynomial], p: int) -> bool:
        F = GF(p)
        Hm = [to_modular(h, F) for h in H]
        if any(not h.lc for h in Hm):
            return False
        for i, a in enumerate(Hm):
            g, _, _ = extended_gcd(a, a.derivative(0))
            if not g.is_one():
                return False
            for b in Hm[i + 1:]:
                g, _, _ = extended_gcd(a, b)
                if not g.is_one():
                    return False
        return True

    def verify(self, P: Polynomial, factors: List[Polynomial]) -> List[Polynomial]:
        u = P
        out = []
        for g in factors:
            if g.is_constant():
                continue
            if not u.is_divisible_by(g):
                raise NoLiftingError(f"lifted factor {g} does not divide {P}")
            u = u.divide(g)
            out.append(g)
        if not u.is_constant():
            raise NoLiftingError(f"lifted factors of {P} leave the cofactor {u}")
        if not u.is_one():
            out.insert(0, u)
        return out
