from __future__ import annotations
from typing import Any


class PolyError(Exception):
    """Base class for every failure raised by the polynomial engines."""


class InvalidOperation(PolyError, ValueError):
    """Ring or arity mismatch, zero division, inexact division, non-unit inverse."""


class NoLiftingError(PolyError, ArithmeticError):
    """A Hensel step met factors that are not coprime or do not lift."""


class ExhaustionError(PolyError, RuntimeError):
    def __init__(self, message: str, polynomial: Any = None, ring: Any = None) -> None:
        self.polynomial = polynomial
        self.ring = ring
        if polynomial is not None:
            message = f"{message} (polynomial {polynomial}"
            if ring is not None:
                message += f" over {ring}"
            message += ")"
        super().__init__(message)


class UnsupportedDomain(PolyError, TypeError):
    """No strategy is implemented for the coefficient ring."""


class Cancelled(PolyError):
    """The deadline attached to the computation expired."""
