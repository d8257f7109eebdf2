import pytest

import linalg
from errors import InvalidOperation
from rational import QQ
from rings import GF


class TestSolve:
    def test_prime_field(self):
        F = GF(5)
        A = linalg.matrix([[F.from_int(1), F.from_int(2)], [F.from_int(3), F.from_int(4)]])
        x = linalg.solve(A, [F.from_int(1), F.zero], F)
        assert A[0, 0] * x[0] + A[0, 1] * x[1] == 1
        assert A[1, 0] * x[0] + A[1, 1] * x[1] == 0

    def test_free_variables_are_zero(self):
        A = linalg.matrix([[QQ.one, QQ.one]])
        assert linalg.solve(A, [QQ.from_int(3)], QQ) == [3, 0]

    def test_inconsistent(self):
        A = linalg.matrix([[QQ.one, QQ.one], [QQ.one, QQ.one]])
        with pytest.raises(InvalidOperation):
            linalg.solve(A, [QQ.zero, QQ.one], QQ)

    def test_row_reduce_pivots(self):
        A = linalg.matrix([[QQ.zero, QQ.from_int(2)], [QQ.zero, QQ.from_int(4)]])
        R, pivots = linalg.row_reduce(A, QQ)
        assert pivots == [1]
        assert R[0, 1] == 1
