from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional
import random
import time

from errors import Cancelled

DEFAULT_MODULAR_PRIMES = 5
DEFAULT_EVAL_POINT_BUDGET = 371
DEFAULT_WANG_TRIALS = 4
DEFAULT_EDF_RETRIES = 200
DEFAULT_MODEVAL_POINTS = 500
DEFAULT_CRT_PRIMES = 30
DEFAULT_SEED = 1729


class Deadline:
    """Cooperative cancellation token checked inside long-running loops."""

    def __init__(self, seconds: Optional[float] = None) -> None:
        self._expires = None if seconds is None else time.monotonic() + seconds
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def expired(self) -> bool:
        if self._cancelled:
            return True
        return self._expires is not None and time.monotonic() >= self._expires

    def check(self) -> None:
        if self.expired:
            raise Cancelled("computation cancelled or deadline exceeded")


NO_DEADLINE = Deadline()


@dataclass(frozen=True)
class Settings:
    modular_primes: int = DEFAULT_MODULAR_PRIMES
    eval_point_budget: int = DEFAULT_EVAL_POINT_BUDGET
    wang_trials: int = DEFAULT_WANG_TRIALS
    edf_retries: int = DEFAULT_EDF_RETRIES
    modeval_points: int = DEFAULT_MODEVAL_POINTS
    crt_primes: int = DEFAULT_CRT_PRIMES
    # quadratic lifting for two modular factors, linear otherwise
    quadratic_hensel: bool = True
    seed: Optional[int] = DEFAULT_SEED
    deadline: Deadline = field(default=NO_DEADLINE, compare=False)

    def rng(self) -> random.Random:
        return random.Random(self.seed)

    def check(self) -> None:
        self.deadline.check()


DEFAULT_SETTINGS = Settings()
