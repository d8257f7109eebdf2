from fractions import Fraction

import pytest

from errors import InvalidOperation
from polynomial import FactorMultiset, PolyRing, poly_ring
from polynomial_parser import parse_polynomial, tokenize, variables
from polyutil import (compose, convert_vars, integer_from_rational, kronecker_back, kronecker_radix,
                      kronecker_substitute, mod_coeffs, restrict_vars, shift_var, taylor_coefficient)
from rational import QQ
from rings import GF, ZZ


class TestArithmetic:
    def test_basic_ops(self, zz_xy):
        R, (x, y) = zz_xy
        p = (x + y) ** 2
        assert p == x ** 2 + 2 * x * y + y ** 2
        assert p - p == R.zero
        assert (p * 3).lc == 3

    def test_degrees(self, zz_xy):
        R, (x, y) = zz_xy
        p = x ** 3 * y + y ** 4 + 1
        assert p.degree(0) == 3
        assert p.degree("y") == 4
        assert p.total_degree() == 4
        assert R.zero.degree() == -1
        assert p.leading_exp() == (3, 1)

    def test_ring_mismatch(self, zz_xy):
        R, (x, y) = zz_xy
        S, (u,) = poly_ring(ZZ, "u")
        with pytest.raises(InvalidOperation):
            x + u

    def test_exact_division(self, zz_xy):
        R, (x, y) = zz_xy
        assert (x ** 2 - y ** 2).divide(x - y) == x + y
        with pytest.raises(InvalidOperation):
            (x ** 2 + 1).divide(x - 1)
        with pytest.raises(InvalidOperation):
            x.divide(R.zero)

    def test_pseudo_division(self):
        R, (x,) = poly_ring(ZZ, "x")
        a, b = x ** 2 + 1, 2 * x + 1
        q, r = a.pseudo_divmod(b)
        assert a * 4 == q * b + r
        assert r.degree() < b.degree()

    def test_monic_needs_unit(self):
        R, (x,) = poly_ring(ZZ, "x")
        with pytest.raises(InvalidOperation):
            (2 * x + 1).monic()
        Q, (t,) = poly_ring(QQ, "t")
        assert (2 * t + 1).monic() == t + Fraction(1, 2)

    def test_evaluate_and_substitute(self, zz_xy):
        R, (x, y) = zz_xy
        p = x ** 2 * y + y + 3
        assert p.substitute("y", 2) == 2 * x ** 2 + 5
        e = p.evaluate("y", 2)
        assert e.ring.vars == ("x",)
        assert e.degree() == 2
        assert p.evaluate_all((1, 1)) == 5

    def test_recursive_round_trip(self, zz_xy):
        R, (x, y) = zz_xy
        p = 3 * x ** 2 * y + x * y ** 2 - 7
        rp = p.to_recursive()
        assert rp.ring.vars == ("x",)
        assert rp.lc == 3 * rp.ring.coeff.gen(0)
        assert R.distribute(rp) == p

    def test_derivative(self, zz_xy):
        R, (x, y) = zz_xy
        assert (x ** 3 * y).derivative("x") == 3 * x ** 2 * y
        assert (x ** 3 * y).derivative("y") == x ** 3

    def test_modular_coefficients_vanish(self):
        R, (x,) = poly_ring(GF(3), "x")
        assert (x + 1) ** 3 == x ** 3 + 1


class TestUtilities:
    def test_kronecker_round_trip(self, zz_xy):
        R, (x, y) = zz_xy
        p = x ** 2 * y - 3 * y ** 2 + x
        r = kronecker_radix(p)
        u = kronecker_substitute(p, r)
        assert u.nvars == 1
        assert kronecker_back(u, R, r) == p

    def test_convert_and_restrict(self, zz_xy):
        R, (x, y) = zz_xy
        S = PolyRing(ZZ, ("y", "z", "x"))
        p = x * y + 1
        q = convert_vars(p, S)
        assert q.ring == S
        assert restrict_vars(q, R) == p
        with pytest.raises(InvalidOperation):
            restrict_vars(convert_vars(p, S) + S.gen("z"), R)

    def test_compose_and_shift(self):
        R, (x,) = poly_ring(ZZ, "x")
        p = x ** 2 + 1
        assert compose(p, 0, x + 1) == x ** 2 + 2 * x + 2
        assert shift_var(p, 0, -1) == x ** 2 - 2 * x + 2

    def test_taylor_coefficient(self, zz_xy):
        R, (x, y) = zz_xy
        p = x * y ** 2
        # x*y^2 = x*((y-1) + 1)^2
        assert taylor_coefficient(p, 1, 1, 1) == 2 * x
        assert taylor_coefficient(p, 1, 1, 2) == x

    def test_integer_from_rational(self):
        R, (x,) = poly_ring(QQ, "x")
        c, q = integer_from_rational(x ** 2 * Fraction(-1, 2) + Fraction(1, 3))
        assert c == Fraction(-1, 6)
        assert q.ring.coeff == ZZ
        assert q == q.ring.gen(0) ** 2 * 3 - 2

    def test_mod_coeffs(self):
        R, (x,) = poly_ring(ZZ, "x")
        assert mod_coeffs(7 * x + 4, 5) == 2 * x - 1
        assert mod_coeffs(7 * x + 4, 5, symmetric=False) == 2 * x + 4


class TestFactorMultiset:
    def test_product_and_flatten(self):
        R, (x,) = poly_ring(ZZ, "x")
        F = FactorMultiset()
        F.add(x + 1, 2)
        F.add(x - 1)
        F.add(x + 1)
        assert F[x + 1] == 3
        assert F.product() == (x + 1) ** 3 * (x - 1)
        assert len(F.flatten()) == 4

    def test_sorted_puts_constants_first(self):
        R, (x,) = poly_ring(ZZ, "x")
        F = FactorMultiset({x ** 2 + 1: 1, R.from_int(-1): 1, x: 1})
        assert list(F.sorted())[0] == -1
        assert list(F.nonconstant().sorted()) == [x, x ** 2 + 1]


class TestParser:
    def test_tokens_and_implicit_multiplication(self):
        kinds = [t.kind for t in tokenize("2x(y+1)")]
        assert kinds == ["NUM", "*", "ID", "*", "(", "ID", "+", "NUM", ")"]

    def test_variables_sorted(self):
        assert variables("y^2 + x*z") == ["x", "y", "z"]

    def test_parse_into_collected_ring(self):
        p = parse_polynomial("x^2 - 2xy + y^2")
        x, y = p.ring.gens()
        assert p == (x - y) ** 2

    def test_parse_rationals(self):
        p = parse_polynomial("x^2 - 1/4", coeff=QQ)
        assert p.constant_coefficient() == Fraction(-1, 4)
        with pytest.raises(InvalidOperation):
            parse_polynomial("x/2")

    def test_precedence(self):
        R, (x,) = poly_ring(ZZ, "x")
        assert parse_polynomial("-x^2", R) == -(x ** 2)
        assert parse_polynomial("2**3 x", R) == 8 * x
        with pytest.raises(InvalidOperation):
            parse_polynomial("x^-1", R)

    def test_parse_modular_exponent(self):
        R, (x,) = poly_ring(GF(5), "x")
        assert parse_polynomial("x^5 - x", R) == x ** 5 - x

    def test_parse_algebraic_generator(self, qq_sqrt2):
        R, (x,) = poly_ring(qq_sqrt2, "x")
        p = parse_polynomial("x^2 - a^2", R)
        assert p == x ** 2 - 2

    def test_bad_input(self):
        with pytest.raises(InvalidOperation):
            parse_polynomial("x + (y")
        with pytest.raises(InvalidOperation):
            parse_polynomial("x ^ y")
        with pytest.raises(InvalidOperation):
            parse_polynomial("x $ 1")
