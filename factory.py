"""Engine selection by coefficient ring kind."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import logging

from config import DEFAULT_SETTINGS, Settings
from errors import UnsupportedDomain
from factor import FactorizationEngine
from factor_algebraic import AlgebraicFactor, ComplexFactor
from factor_integer import IntegerFactor
from factor_modular import FiniteFieldFactor
from factor_quotient import QuotientFactor
from factor_rational import RationalFactor
from gcd import GcdEngine, SubresGcd
from gcd_modular import ModEvalGcd, ModularGcd, RationalGcd
from polynomial import PolyRing
from rings import ZZ, Ring, RingKind
from squarefree import (SquarefreeChar0, SquarefreeEngine, SquarefreeFiniteFieldCharP,
                        SquarefreeInfiniteAlgebraicFieldCharP, SquarefreeInfiniteFieldCharP)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Engines:
    gcd: GcdEngine
    squarefree: SquarefreeEngine
    factor: FactorizationEngine


def _coefficients(ring: Ring) -> Ring:
    return ring.base_ring if isinstance(ring, PolyRing) else ring


def _is_prime_field(ring: Ring) -> bool:
    return ring.kind is RingKind.MODULAR and ring.is_field


def _is_finite_field(ring: Ring) -> bool:
    return _is_prime_field(ring) or ring.kind is RingKind.ALGEBRAIC and ring.is_finite


def gcd_engine(ring: Ring, settings: Optional[Settings] = None) -> GcdEngine:
    settings = settings or DEFAULT_SETTINGS
    ring = _coefficients(ring)
    kind = ring.kind
    if kind is RingKind.INTEGER:
        return ModularGcd(settings)
    if _is_finite_field(ring):
        return ModEvalGcd(settings)
    if kind is RingKind.RATIONAL:
        return RationalGcd(settings)
    if kind in (RingKind.ALGEBRAIC, RingKind.COMPLEX, RingKind.QUOTIENT):
        return SubresGcd(settings)
    raise UnsupportedDomain(f"no gcd engine for {ring}")


def squarefree_engine(ring: Ring, settings: Optional[Settings] = None) -> SquarefreeEngine:
    settings = settings or DEFAULT_SETTINGS
    ring = _coefficients(ring)
    gcd = gcd_engine(ring, settings)
    if ring.characteristic == 0:
        return SquarefreeChar0(gcd, settings)
    if ring.is_finite:
        return SquarefreeFiniteFieldCharP(gcd, ring, settings)
    if ring.kind is RingKind.QUOTIENT:
        return SquarefreeInfiniteFieldCharP(gcd, ring, settings)
    if ring.kind is RingKind.ALGEBRAIC:
        return SquarefreeInfiniteAlgebraicFieldCharP(gcd, ring, settings)
    raise UnsupportedDomain(f"no squarefree engine for {ring}")


def factor_engine(ring: Ring, settings: Optional[Settings] = None) -> FactorizationEngine:
    settings = settings or DEFAULT_SETTINGS
    ring = _coefficients(ring)
    gcd = gcd_engine(ring, settings)
    sqf = squarefree_engine(ring, settings)
    kind = ring.kind
    if kind is RingKind.INTEGER:
        return IntegerFactor(ring, gcd, sqf, settings)
    if kind is RingKind.RATIONAL:
        return RationalFactor(ring, gcd, sqf, factor_engine(ZZ, settings), settings)
    if _is_finite_field(ring):
        return FiniteFieldFactor(ring, gcd, sqf, settings)
    if kind is RingKind.ALGEBRAIC:
        return AlgebraicFactor(ring, gcd, sqf, settings)
    if kind is RingKind.COMPLEX:
        return ComplexFactor(ring, gcd, sqf, settings)
    if kind is RingKind.QUOTIENT:
        return QuotientFactor(ring, gcd, sqf, settings)
    raise UnsupportedDomain(f"no factorization engine for {ring}")


def engines(ring: Ring, settings: Optional[Settings] = None) -> Engines:
    """gcd, squarefree and factorization engines for polynomials over `ring`."""
    fe = factor_engine(ring, settings)
    logger.debug("engines for %s: %s, %s, %s", ring, fe.engine, fe.sengine, fe)
    return Engines(fe.engine, fe.sengine, fe)
