import pytest

from algebraic import AlgebraicField
from polynomial import poly_ring
from rational import QQ
from rings import ZZ


@pytest.fixture
def zz_xy():
    return poly_ring(ZZ, "x y")


@pytest.fixture
def qq_sqrt2():
    R, (a,) = poly_ring(QQ, "a")
    return AlgebraicField(a ** 2 - 2)


@pytest.fixture
def qq_i():
    R, (i,) = poly_ring(QQ, "i")
    return AlgebraicField(i ** 2 + 1)
