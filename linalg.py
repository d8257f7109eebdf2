"""Exact Gaussian elimination on numpy object arrays over any field of this package."""
from __future__ import annotations
from typing import Any, List, Sequence, Tuple

import numpy as np

from errors import InvalidOperation
from rings import Ring


def matrix(rows: Sequence[Sequence[Any]]) -> np.ndarray:
    return np.array([list(r) for r in rows], dtype=object)


def row_reduce(A: np.ndarray, field: Ring) -> Tuple[np.ndarray, List[int]]:
    """Reduced row echelon form and pivot columns."""
    M = A.copy()
    nrows, ncols = M.shape
    pivots: List[int] = []
    r = 0
    for c in range(ncols):
        if r >= nrows:
            break
        piv = next((i for i in range(r, nrows) if M[i, c]), None)
        if piv is None:
            continue
        if piv != r:
            M[[r, piv]] = M[[piv, r]]
        M[r] = M[r] * field.inverse(M[r, c])
        for i in range(nrows):
            if i != r and M[i, c]:
                f = M[i, c]
                M[i] = M[i] - M[r] * f
        pivots.append(c)
        r += 1
    return M, pivots


def solve(A: np.ndarray, b: Sequence[Any], field: Ring) -> List[Any]:
    """One solution x of A x = b; free variables are set to zero."""
    nrows, ncols = A.shape
    aug = np.empty((nrows, ncols + 1), dtype=object)
    aug[:, :ncols] = A
    aug[:, ncols] = list(b)
    R, pivots = row_reduce(aug, field)
    if ncols in pivots:
        raise InvalidOperation("linear system is inconsistent")
    x = [field.zero] * ncols
    for row, c in enumerate(pivots):
        x[c] = R[row, ncols]
    return x
