from fractions import Fraction

from algebraic import AlgebraicField
from factory import squarefree_engine
from polynomial import poly_ring
from quotient import QuotientField
from rational import QQ
from rings import GF, ZZ
from squarefree import SquarefreeChar0, SquarefreeFiniteFieldCharP, SquarefreeInfiniteAlgebraicFieldCharP


class TestCharacteristicZero:
    def test_cube(self):
        R, (x,) = poly_ring(ZZ, "x")
        F = squarefree_engine(ZZ).squarefree_factors((x + 1) ** 3)
        assert F == {x + 1: 3}

    def test_content_comes_first(self):
        R, (x,) = poly_ring(ZZ, "x")
        P = 2 * (x + 1) ** 2 * (x - 1)
        F = squarefree_engine(ZZ).squarefree_factors(P)
        assert list(F)[0] == 2
        assert F == {R.from_int(2): 1, x - 1: 1, x + 1: 2}
        assert F.product() == P

    def test_multivariate(self, zz_xy):
        R, (x, y) = zz_xy
        P = (x - y) ** 2 * (x * y + 1) * y ** 3
        engine = squarefree_engine(ZZ)
        assert isinstance(engine, SquarefreeChar0)
        F = engine.squarefree_factors(P)
        assert F.product() == P
        assert F[x - y] == 2
        assert F[y] == 3
        assert engine.is_factorization(P, F)

    def test_rational_part(self):
        R, (x,) = poly_ring(QQ, "x")
        P = (x - Fraction(1, 2)) ** 2 * 3
        sf = squarefree_engine(QQ)
        assert sf.squarefree_part(P) == x - Fraction(1, 2)
        assert not sf.is_squarefree(P)
        assert sf.is_squarefree(x ** 2 - 2)

    def test_rational_multivariate(self):
        R, (x, y, z) = poly_ring(QQ, "x y z")
        A = x + y - z
        B = x * y + z ** 2 + 1
        C = y ** 2 - Fraction(1, 3) * z
        P = A ** 2 * B * C * Fraction(3, 2)
        sf = squarefree_engine(QQ)
        F = sf.squarefree_factors(P)
        assert F.product() == P
        assert F[A] == 2
        assert sf.is_squarefree(B * C)

    def test_constants(self):
        R, (x,) = poly_ring(ZZ, "x")
        sf = squarefree_engine(ZZ)
        assert sf.squarefree_factors(R.zero) == {}
        assert sf.squarefree_factors(R.from_int(-4)) == {R.from_int(-4): 1}


class TestPositiveCharacteristic:
    def test_pth_power(self):
        R, (x,) = poly_ring(GF(3), "x")
        engine = squarefree_engine(GF(3))
        assert isinstance(engine, SquarefreeFiniteFieldCharP)
        F = engine.squarefree_factors((x + 1) ** 3 * (x + 2))
        assert F == {x + 2: 1, x + 1: 3}

    def test_mixed_multiplicities(self):
        R, (x,) = poly_ring(GF(2), "x")
        P = x ** 2 * (x + 1) ** 5
        F = squarefree_engine(GF(2)).squarefree_factors(P)
        assert F == {x: 2, x + 1: 5}

    def test_multivariate_pth_power(self):
        R, (x, y) = poly_ring(GF(3), "x y")
        P = (x + y) ** 3 * (x - y)
        F = squarefree_engine(GF(3)).squarefree_factors(P)
        assert F.product() == P
        assert F[x + y] == 3

    def test_rational_function_coefficients(self):
        T, (t,) = poly_ring(GF(3), "t")
        K = QuotientField(T)
        R, (x,) = poly_ring(K, "x")
        P = (x + K.gen("t")) ** 3
        F = squarefree_engine(K).squarefree_factors(P)
        assert F == {x + K.gen("t"): 3}

    def test_algebraic_extension_of_function_field(self):
        T, (t,) = poly_ring(GF(3), "t")
        K = QuotientField(T)
        A, (a,) = poly_ring(K, "a")
        L = AlgebraicField(a ** 2 - K.gen("t"))
        R, (x,) = poly_ring(L, "x")
        alpha = L.generator()
        engine = squarefree_engine(L)
        assert isinstance(engine, SquarefreeInfiniteAlgebraicFieldCharP)
        # the cube root of t*alpha = alpha^3 comes from a linear solve over K
        P = (x + alpha) ** 3 * (x + 1)
        F = engine.squarefree_factors(P)
        assert F == {x + alpha: 3, x + 1: 1}
