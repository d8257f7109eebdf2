from __future__ import annotations
from enum import Enum
from typing import Dict, Iterator, List
import random

# (bits, offsets): the listed primes are 2**bits - offset
_LOW = ((15, (19, 49, 51, 55, 61, 75, 81, 115, 121, 135)),
        (16, (15, 17, 39, 57, 87, 89, 99, 113, 117, 123)))
_MEDIUM = ((28, (57, 89, 95, 119, 125, 143, 165, 183, 213, 273)),
           (29, (3, 33, 43, 63, 73, 75, 93, 99, 121, 133)),
           (32, (5, 17, 65, 99, 107, 135, 153, 185, 209, 267)))
_LARGE = ((59, (55, 99, 225, 427, 517, 607, 649, 687, 861, 871)),
          (60, (93, 107, 173, 179, 257, 279, 369, 395, 399, 453)),
          (63, (25, 165, 259, 301, 375, 387, 391, 409, 457, 471)))

_WITNESSES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41)


def is_prime(n: int) -> bool:
    """Miller-Rabin; deterministic below 3.3e24, probabilistic above."""
    if n < 2:
        return False
    for p in _WITNESSES:
        if n % p == 0:
            return n == p
    d, s = n - 1, 0
    while d % 2 == 0:
        d //= 2
        s += 1
    witnesses = list(_WITNESSES)
    if n >= 3317044064679887385961981:
        rnd = random.Random(n)
        witnesses += [rnd.randrange(2, n - 1) for _ in range(20)]
    for a in witnesses:
        x = pow(a, d, n)
        if x == 1 or x == n - 1:
            continue
        for _ in range(s - 1):
            x = x * x % n
            if x == n - 1:
                break
        else:
            return False
    return True


def next_prime(n: int) -> int:
    """Smallest prime strictly greater than n."""
    c = max(n + 1, 2)
    while not is_prime(c):
        c += 1
    return c


class PrimeRange(Enum):
    SMALL = "small"
    LOW = "low"
    MEDIUM = "medium"
    LARGE = "large"


def _seed(r: PrimeRange) -> List[int]:
    if r is PrimeRange.SMALL:
        return [2, 3, 5, 7, 11, 13, 17, 19, 23, 29]
    table = {PrimeRange.LOW: _LOW, PrimeRange.MEDIUM: _MEDIUM, PrimeRange.LARGE: _LARGE}[r]
    return [2 ** bits - off for bits, offs in table for off in offs]


class PrimeList:
    """Read-only prime table of one range, extended past its seed on demand."""

    _cache: Dict[PrimeRange, List[int]] = {}

    def __init__(self, r: PrimeRange = PrimeRange.MEDIUM) -> None:
        self.range = r
        if r not in PrimeList._cache:
            PrimeList._cache[r] = _seed(r)
        self._val = PrimeList._cache[r]

    def __getitem__(self, i: int) -> int:
        while i >= len(self._val):
            self._val.append(next_prime(self._val[-1]))
        return self._val[i]

    def __iter__(self) -> Iterator[int]:
        i = 0
        while True:
            yield self[i]
            i += 1

    def __len__(self) -> int:
        return len(self._val)


def factor_primes(skip_small: int = 2) -> Iterator[int]:
    """Primes for modular factorization: small ones (minus the first few), then medium, then large."""
    for p in _seed(PrimeRange.SMALL)[skip_small:]:
        yield p
    yield from _seed(PrimeRange.MEDIUM)
    yield from PrimeList(PrimeRange.LARGE)
