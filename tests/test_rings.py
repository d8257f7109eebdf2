from fractions import Fraction

import pytest

from errors import InvalidOperation
from primes import PrimeList, PrimeRange, factor_primes, is_prime, next_prime
from rational import QQ
from rings import GF, ZZ, ModularRing


class TestModular:
    def test_symmetric_and_lift(self):
        R = ModularRing(7)
        assert R.symmetric(R.from_int(5)) == -2
        assert R.symmetric(R.from_int(3)) == 3
        assert R.lift(R.from_int(-1)) == 6

    def test_inverse(self):
        F = GF(11)
        a = F.from_int(3)
        assert a * F.inverse(a) == 1

    def test_non_unit_inverse_raises(self):
        R = ModularRing(12)
        assert not R.is_field
        with pytest.raises(InvalidOperation):
            R.inverse(R.from_int(4))

    def test_gf_requires_prime(self):
        with pytest.raises(InvalidOperation):
            GF(9)

    def test_mixes_with_ints(self):
        F = GF(5)
        assert F.from_int(3) + 4 == 2
        assert 2 * F.from_int(3) == 1
        assert F.from_int(2) ** 4 == 1


class TestIntegerAndRational:
    def test_exact_quotient(self):
        assert ZZ.exact_quotient(12, -4) == -3
        with pytest.raises(InvalidOperation):
            ZZ.exact_quotient(7, 2)

    def test_units(self):
        assert ZZ.is_unit(-1)
        assert not ZZ.is_unit(2)
        assert QQ.is_unit(Fraction(2, 3))

    def test_rational_inverse(self):
        assert QQ.inverse(Fraction(-2, 3)) == Fraction(-3, 2)


class TestPrimes:
    @pytest.mark.parametrize("n,expected", [(2, True), (91, False), (97, True), (2 ** 31 - 1, True),
                                            (561, False), (2 ** 61 - 1, True)])
    def test_is_prime(self, n, expected):
        assert is_prime(n) is expected

    def test_next_prime(self):
        assert next_prime(13) == 17
        assert next_prime(1) == 2

    def test_prime_lists_hold_primes(self):
        low = PrimeList(PrimeRange.LOW)
        assert all(is_prime(low[i]) for i in range(5))
        assert low[0] < 2 ** 16

    def test_factor_primes_skip_two_and_three(self):
        it = factor_primes()
        assert [next(it) for _ in range(3)] == [5, 7, 11]
