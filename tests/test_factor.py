from fractions import Fraction
import random

import pytest

import factor_integer
from algebraic import AlgebraicField
from complexes import ComplexField
from config import Settings
from errors import ExhaustionError, InvalidOperation
from factor_algebraic import norm_shifts
from factor_integer import IntegerFactor
from factor_modular import frobenius_matrix, pow_mod
from factory import factor_engine
from polynomial import poly_ring
from quotient import QuotientField
from rational import QQ
from rings import GF, ZZ


def nonconstant(F):
    return [f for f in F if not f.is_constant()]


class TestIntegers:
    def test_cyclotomic_split(self):
        R, (x,) = poly_ring(ZZ, "x")
        F = factor_engine(ZZ).factors(x ** 4 - 1)
        assert F == {x - 1: 1, x + 1: 1, x ** 2 + 1: 1}

    def test_unit_and_multiplicity(self):
        R, (x,) = poly_ring(ZZ, "x")
        P = -6 * (x - 2) ** 2 * (x ** 2 + x + 1)
        F = factor_engine(ZZ).factors(P)
        assert list(F)[0] == -6
        assert F[x - 2] == 2
        assert F.product() == P

    def test_irreducible_over_integers(self):
        R, (x,) = poly_ring(ZZ, "x")
        engine = factor_engine(ZZ)
        assert engine.is_irreducible(x ** 4 + 1)
        assert engine.is_irreducible(x ** 2 + x + 1)
        assert engine.is_reducible(x ** 2 - 1)
        assert not engine.is_irreducible(R.from_int(7))

    def test_many_modular_factors(self):
        R, (x,) = poly_ring(ZZ, "x")
        # Swinnerton-Dyer style: x^4 - 10x^2 + 1 is irreducible but splits modulo every prime
        engine = factor_engine(ZZ)
        assert engine.is_irreducible(x ** 4 - 10 * x ** 2 + 1)
        P = (x ** 4 - 10 * x ** 2 + 1) * (x ** 3 - 2)
        assert set(nonconstant(engine.factors(P))) == {x ** 4 - 10 * x ** 2 + 1, x ** 3 - 2}

    def test_linear_lifting_path(self):
        R, (x,) = poly_ring(ZZ, "x")
        P = (x - 1) * (x + 2) * (3 * x + 1) * (x ** 2 + 5)
        engine = factor_engine(ZZ, Settings(quadratic_hensel=False))
        F = engine.factors(P)
        assert set(nonconstant(F)) == {x - 1, x + 2, 3 * x + 1, x ** 2 + 5}

    def test_power_of_x(self):
        R, (x,) = poly_ring(ZZ, "x")
        F = factor_engine(ZZ).factors(x ** 3 + x ** 2)
        assert F == {x: 2, x + 1: 1}

    def test_difference_of_squares(self, zz_xy):
        R, (x, y) = zz_xy
        F = factor_engine(ZZ).factors(x ** 2 - y ** 2)
        assert F == {x - y: 1, x + y: 1}

    def test_wang_non_monic(self, zz_xy):
        R, (x, y) = zz_xy
        P = (x * y + 1) * (x + y + 2)
        F = factor_engine(ZZ).factors(P)
        assert set(nonconstant(F)) == {x * y + 1, x + y + 2}

    def test_content_in_other_variable(self, zz_xy):
        R, (x, y) = zz_xy
        P = (y ** 2 - 1) * (x ** 2 + y)
        F = factor_engine(ZZ).factors(P)
        assert set(nonconstant(F)) == {y - 1, y + 1, x ** 2 + y}

    def test_kronecker(self, zz_xy):
        R, (x, y) = zz_xy
        engine = factor_engine(ZZ)
        assert isinstance(engine, IntegerFactor)
        assert set(engine.kronecker_factors(x ** 2 - y ** 2)) == {x - y, x + y}

    def test_base_factors_rejects_multivariate(self, zz_xy):
        R, (x, y) = zz_xy
        with pytest.raises(InvalidOperation):
            factor_engine(ZZ).base_factors(x + y)


class TestRationals:
    def test_integral_primitive_factors(self):
        R, (x,) = poly_ring(QQ, "x")
        F = factor_engine(QQ).factors(x ** 2 - Fraction(1, 4))
        assert F == {R.from_coeff(Fraction(1, 4)): 1, 2 * x - 1: 1, 2 * x + 1: 1}

    def test_multivariate(self):
        R, (x, y) = poly_ring(QQ, "x y")
        P = (x - y) * (x + Fraction(1, 2) * y)
        F = factor_engine(QQ).factors(P)
        assert F.product() == P
        assert len(nonconstant(F)) == 2


class TestFiniteFields:
    def test_all_linear(self):
        R, (x,) = poly_ring(GF(5), "x")
        F = factor_engine(GF(5)).factors(x ** 5 - x)
        assert set(F) == {x, x + 1, x + 2, x + 3, x + 4}

    def test_sum_of_squares_splits(self):
        R, (x,) = poly_ring(GF(5), "x")
        F = factor_engine(GF(5)).factors(x ** 2 + 1)
        assert F == {x + 2: 1, x + 3: 1}

    def test_leading_unit(self):
        R, (x,) = poly_ring(GF(7), "x")
        F = factor_engine(GF(7)).factors(3 * x ** 2 - 3)
        assert list(F)[0] == 3
        assert set(nonconstant(F)) == {x - 1, x + 1}

    def test_characteristic_two_equal_degree(self):
        R, (x,) = poly_ring(GF(2), "x")
        a, b = x ** 3 + x + 1, x ** 3 + x ** 2 + 1
        F = factor_engine(GF(2)).factors(a * b)
        assert F == {a: 1, b: 1}

    def test_repeated_factors(self):
        R, (x,) = poly_ring(GF(3), "x")
        P = (x + 1) ** 3 * (x ** 2 + 1)
        F = factor_engine(GF(3)).factors(P)
        assert F == {x + 1: 3, x ** 2 + 1: 1}

    def test_multivariate(self):
        R, (x, y) = poly_ring(GF(5), "x y")
        F = factor_engine(GF(5)).factors(x ** 2 - y ** 2)
        assert set(F) == {x - y, x + y}

    def test_monomial_content_and_kronecker(self):
        R, (x, y, z) = poly_ring(GF(3), "x y z")
        P = (2 * x ** 3 * y * z ** 6 + x ** 2 * y ** 3 * z ** 5 + 2 * x ** 2 * y ** 2 * z ** 6
             + x ** 2 * y ** 2 * z ** 5 + 2 * x ** 2 * y * z ** 6 + x * y ** 3 * z ** 5
             + 2 * x * y ** 2 * z ** 6 + x * y ** 2 * z ** 5)
        q = x * z + 2 * y ** 2 + y * z + 2 * y
        engine = factor_engine(GF(3))
        F = engine.factors(P)
        assert F.product() == P
        assert dict(F.nonconstant()) == {x: 1, y: 1, z: 5, x + 1: 1, q: 1}
        assert set(engine.kronecker_factors((x + 1) * q)) == {x + 1, q}

    def test_extension_of_prime_field(self):
        A, (a,) = poly_ring(GF(2), "a")
        F4 = AlgebraicField(a ** 2 + a + 1)
        R, (x,) = poly_ring(F4, "x")
        w = F4.generator()
        F = factor_engine(F4).factors(x ** 2 + x + 1)
        assert F == {x + w: 1, x + w + 1: 1}

    def test_frobenius(self):
        R, (x,) = poly_ring(GF(3), "x")
        f = x ** 2 + 1
        M = frobenius_matrix(f)
        assert M.shape == (2, 2)
        assert pow_mod(x, 9, f) == x


class TestExtensions:
    def test_gaussian_split(self, qq_i):
        R, (x,) = poly_ring(qq_i, "x")
        i = qq_i.generator()
        F = factor_engine(qq_i).factors(x ** 2 + 1)
        assert set(F) == {x - i, x + i}

    def test_sqrt2_splits_x4_plus_1(self, qq_sqrt2):
        R, (x,) = poly_ring(qq_sqrt2, "x")
        P = x ** 4 + 1
        F = factor_engine(qq_sqrt2).factors(P)
        parts = nonconstant(F)
        assert len(parts) == 2
        assert all(f.degree() == 2 for f in parts)
        assert F.product() == P

    def test_irreducible_stays(self, qq_sqrt2):
        R, (x,) = poly_ring(qq_sqrt2, "x")
        assert factor_engine(qq_sqrt2).is_irreducible(x ** 2 - 3)

    def test_complex_field(self):
        C = ComplexField(QQ)
        R, (x,) = poly_ring(C, "x")
        i = C.imag_unit
        F = factor_engine(C).factors(x ** 2 + 1)
        assert set(F) == {x - i, x + i}

    def test_norm_shift_order(self):
        assert list(norm_shifts())[:7] == [0, -1, -2, 1, 2, -3, 3]

    def test_rational_function_field(self):
        T, (t,) = poly_ring(ZZ, "t")
        K = QuotientField(T)
        R, (x,) = poly_ring(K, "x")
        s = K.gen("t")
        F = factor_engine(K).factors(x ** 2 - s ** 2)
        assert set(nonconstant(F)) == {x - s, x + s}


class TestProperties:
    @pytest.mark.parametrize("ring", [ZZ, QQ, GF(7)])
    def test_product_and_stability(self, ring):
        R, (x, y) = poly_ring(ring, "x y")
        P = (x ** 2 + y) * (x - 3 * y) ** 2 * (x * y - 1) * 2
        engine = factor_engine(ring)
        F = engine.factors(P)
        assert F.product() == P
        assert engine.is_factorization(P, F)
        for f in nonconstant(F):
            assert engine.is_irreducible(f)
            assert nonconstant(engine.factors(f)) == [f]

    def test_radical(self):
        R, (x,) = poly_ring(ZZ, "x")
        engine = factor_engine(ZZ)
        assert set(engine.factors_radical((x - 1) ** 3 * (x + 1))) == {x - 1, x + 1}


class TestBudgets:
    def test_evaluation_points_exhausted(self, zz_xy):
        R, (x, y) = zz_xy
        engine = factor_engine(ZZ, Settings(eval_point_budget=0))
        with pytest.raises(ExhaustionError):
            engine.factors(x ** 2 - y ** 2)

    def test_equal_degree_retries_exhausted(self):
        R, (x,) = poly_ring(GF(5), "x")
        engine = factor_engine(GF(5), Settings(edf_retries=0))
        with pytest.raises(ExhaustionError):
            engine.factors(x ** 2 + 1)

    def test_unlucky_primes_exhausted(self, monkeypatch):
        monkeypatch.setattr(factor_integer, "MAX_UNLUCKY_PRIMES", 0)
        R, (x,) = poly_ring(ZZ, "x")
        # 5 divides the leading coefficient, so the first prime is unusable
        with pytest.raises(ExhaustionError):
            factor_engine(ZZ).factors(5 * x ** 2 + x + 1)


def random_factor(rng, x, y):
    f = x.ring.zero
    for _ in range(3):
        f = f + rng.randint(-4, 4) * x ** rng.randint(0, 2) * y ** rng.randint(0, 2)
    if f.is_constant():
        f = f + x
    return f


class TestRandomProducts:
    @pytest.mark.parametrize("ring", [ZZ, GF(3), GF(7)])
    @pytest.mark.parametrize("seed", range(4))
    def test_product_of_irreducibles(self, ring, seed):
        rng = random.Random(seed)
        R, (x, y) = poly_ring(ring, "x y")
        P = R.one
        for _ in range(3):
            P = P * random_factor(rng, x, y)
        engine = factor_engine(ring)
        F = engine.factors(P)
        assert F.product() == P
        assert engine.is_factorization(P, F)
        for f in nonconstant(F):
            assert nonconstant(engine.factors(f)) == [f]
