import pytest

from errors import NoLiftingError
from hensel import bezout_coefficients, lift_exponent, lift_hensel_linear, lift_hensel_quadratic
from hensel_mult import MultivariateLift, replace_leading_coefficient
from polynomial import poly_ring
from polyutil import mod_coeffs, product, to_modular
from rings import GF, ZZ


class TestUnivariateLifting:
    def test_quadratic(self):
        R, (x,) = poly_ring(ZZ, "x")
        C = (x - 3) * (x + 5)
        F = GF(7)
        approx = lift_hensel_quadratic(C, 100, to_modular(x - 3, F), to_modular(x + 5, F))
        assert approx.modulus > 100
        assert approx.A == x - 3
        assert approx.B == x + 5

    def test_quadratic_rejects_common_factor(self):
        R, (x,) = poly_ring(ZZ, "x")
        F = GF(7)
        with pytest.raises(NoLiftingError):
            lift_hensel_quadratic((x - 1) ** 2, 100, to_modular(x - 1, F), to_modular(x - 1, F))

    def test_linear(self):
        R, (x,) = poly_ring(ZZ, "x")
        C = x ** 4 - 1
        F = GF(5)
        modular = [to_modular(f, F) for f in (x - 1, x + 1, x - 2, x + 2)]
        k = lift_exponent(5, 50)
        lifted, m = lift_hensel_linear(C, modular, k)
        assert m == 5 ** k
        assert mod_coeffs(product(lifted, R), m) == C
        assert x - 1 in lifted and x + 1 in lifted

    def test_bezout(self):
        R, (x,) = poly_ring(GF(5), "x")
        fs = [x - 1, x + 1, x - 2]
        s = bezout_coefficients(fs)
        P = product(fs, R)
        total = R.zero
        for f, si in zip(fs, s):
            total = total + si * P.divide(f)
        assert total == 1

    @pytest.mark.parametrize("bound,k", [(4, 1), (5, 2), (24, 2), (25, 3)])
    def test_lift_exponent(self, bound, k):
        assert lift_exponent(5, bound) == k


class TestMultivariateLifting:
    def test_two_factors(self):
        F = GF(101)
        R, (x, y) = poly_ring(F, "x y")
        f = (x + y + 1) * (x - 2 * y)
        a = 3
        H = [h.substitute(1, a) for h in (x + y + 1, x - 2 * y)]
        lifted = MultivariateLift().lift(f, H, [R.one, R.one], [a])
        assert product(lifted, R) == f
        assert set(lifted) == {x + y + 1, x - 2 * y}

    def test_three_variables(self):
        F = GF(101)
        R, (x, y, z) = poly_ring(F, "x y z")
        g1, g2 = x * y + z, x + y * z + 2
        f = g1 * g2
        points = [2, 5]
        H = [g.substitute(1, 2).substitute(2, 5) for g in (g1, g2)]
        LC = [y, R.one]
        lifted = MultivariateLift().lift(f, H, LC, points)
        assert product(lifted, R) == f

    def test_replace_leading_coefficient(self, zz_xy):
        R, (x, y) = zz_xy
        assert replace_leading_coefficient(2 * x ** 2 + x, y + 1) == (y + 1) * x ** 2 + x
