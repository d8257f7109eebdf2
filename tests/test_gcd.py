from fractions import Fraction

import pytest

from errors import InvalidOperation
from factory import gcd_engine
from gcd import PrimitiveGcd, SimpleGcd, SubresGcd, extended_gcd
from gcd_modular import ModEvalGcd, ModularGcd, RationalGcd
from polynomial import poly_ring
from rational import QQ
from rings import GF, ZZ


class TestIntegerGcd:
    def test_content_is_kept(self):
        R, (x,) = poly_ring(ZZ, "x")
        g = gcd_engine(ZZ).gcd(6 * x ** 2 - 6, 4 * x + 4)
        assert g == 2 * x + 2

    def test_multivariate(self, zz_xy):
        R, (x, y) = zz_xy
        P = (x + y) ** 2 * (x - y)
        S = (x + y) * (x + 2 * y)
        assert gcd_engine(ZZ).gcd(P, S) == x + y

    def test_zero_operands(self, zz_xy):
        R, (x, y) = zz_xy
        P = x * y + 1
        engine = gcd_engine(ZZ)
        assert engine.gcd(P, R.zero) == P
        assert engine.gcd(R.zero, P) == P

    def test_coprime(self, zz_xy):
        R, (x, y) = zz_xy
        assert gcd_engine(ZZ).gcd(x ** 2 + y, x + 1) == 1

    @pytest.mark.parametrize("engine", [PrimitiveGcd(), SimpleGcd(), SubresGcd(), ModularGcd()])
    def test_engines_agree(self, zz_xy, engine):
        R, (x, y) = zz_xy
        g = 3 * x ** 2 * y - 7 * y + x
        P = g * (x ** 3 - 2 * y ** 2 + 5)
        S = g * (x * y + 11)
        assert engine.gcd(P, S) == g

    def test_lcm(self):
        R, (x,) = poly_ring(ZZ, "x")
        assert gcd_engine(ZZ).lcm(x ** 2 - 1, x ** 2 + 2 * x + 1) == (x - 1) * (x + 1) ** 2

    def test_ring_mismatch(self, zz_xy):
        R, (x, y) = zz_xy
        S, (u,) = poly_ring(ZZ, "u")
        with pytest.raises(InvalidOperation):
            gcd_engine(ZZ).gcd(x + 1, u + 1)


class TestFieldGcd:
    def test_rational_gcd_is_monic(self):
        R, (x,) = poly_ring(QQ, "x")
        g = gcd_engine(QQ).gcd(x ** 2 - Fraction(1, 4), 2 * x - 1)
        assert g == x - Fraction(1, 2)

    def test_rational_multivariate_through_integers(self):
        R, (x, y, z) = poly_ring(QQ, "x y z")
        A = x + y - z
        B = x * y + z ** 2 + 1
        C = y ** 2 - Fraction(1, 3) * z
        engine = gcd_engine(QQ)
        assert isinstance(engine, RationalGcd)
        assert engine.gcd(A ** 2 * B, A * C * Fraction(2, 3)) == A
        assert engine.gcd(A * Fraction(1, 2), R.from_coeff(Fraction(5, 7))) == 1

    def test_modular_evaluation(self):
        R, (x, y) = poly_ring(GF(5), "x y")
        P = (x + y) * (x - y) * (y + 3)
        S = (x + y) * (x + 2)
        g = gcd_engine(GF(5)).gcd(P, S)
        assert isinstance(gcd_engine(GF(5)), ModEvalGcd)
        assert g == x + y

    def test_extended_gcd(self):
        R, (x,) = poly_ring(GF(7), "x")
        a, b = x ** 3 - 1, x ** 2 - 1
        g, s, t = extended_gcd(a, b)
        assert g == x - 1
        assert s * a + t * b == g

    def test_algebraic_coefficients(self, qq_sqrt2):
        R, (x,) = poly_ring(qq_sqrt2, "x")
        a = qq_sqrt2.generator()
        g = gcd_engine(qq_sqrt2).gcd(x ** 2 - 2, (x - a) * (x + 1))
        assert g == x - a


class TestResultant:
    def test_univariate(self):
        R, (x,) = poly_ring(ZZ, "x")
        assert gcd_engine(ZZ).resultant(x ** 2 - 2, x ** 2 - 3) == 1

    def test_common_root_gives_zero(self):
        R, (x,) = poly_ring(ZZ, "x")
        assert not gcd_engine(ZZ).resultant(x ** 2 - 1, x + 1)

    def test_eliminates_main_variable(self, zz_xy):
        R, (x, y) = zz_xy
        r = gcd_engine(ZZ).resultant(x - y, x + y)
        assert r == 2 * y


class TestCoPrime:
    def test_splits_into_coprime_base(self):
        R, (x,) = poly_ring(ZZ, "x")
        base = gcd_engine(ZZ).co_prime([x ** 2 - 1, x ** 2 + x])
        assert set(base) == {x - 1, x, x + 1}

    def test_skips_constants(self):
        R, (x,) = poly_ring(ZZ, "x")
        assert gcd_engine(ZZ).co_prime([R.from_int(3), x]) == [x]
