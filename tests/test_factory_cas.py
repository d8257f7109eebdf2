import logging

import pytest

import main
from cas import CAS
from config import Deadline, Settings
from errors import Cancelled, UnsupportedDomain
from factor_algebraic import AlgebraicFactor
from factor_integer import IntegerFactor
from factor_modular import FiniteFieldFactor
from factor_rational import RationalFactor
from factory import engines, factor_engine, gcd_engine, squarefree_engine
from gcd_modular import ModEvalGcd, ModularGcd, RationalGcd
from polynomial import poly_ring
from rational import QQ
from rings import GF, ZZ, ModularRing


class TestDispatch:
    @pytest.mark.parametrize("ring,gcd_cls,factor_cls", [
        (ZZ, ModularGcd, IntegerFactor),
        (QQ, RationalGcd, RationalFactor),
        (GF(13), ModEvalGcd, FiniteFieldFactor),
    ])
    def test_engine_choice(self, ring, gcd_cls, factor_cls):
        e = engines(ring)
        assert type(e.gcd) is gcd_cls
        assert type(e.factor) is factor_cls
        assert e.factor.sengine is e.squarefree

    def test_polynomial_ring_uses_its_coefficients(self, zz_xy):
        R, _ = zz_xy
        assert isinstance(factor_engine(R), IntegerFactor)

    def test_algebraic(self, qq_sqrt2):
        assert isinstance(factor_engine(qq_sqrt2), AlgebraicFactor)

    def test_composite_modulus_unsupported(self):
        R = ModularRing(12)
        with pytest.raises(UnsupportedDomain):
            gcd_engine(R)
        with pytest.raises(UnsupportedDomain):
            squarefree_engine(R)
        with pytest.raises(UnsupportedDomain):
            factor_engine(R)

    def test_cancelled_deadline(self):
        d = Deadline()
        d.cancel()
        R, (x,) = poly_ring(ZZ, "x")
        engine = factor_engine(ZZ, Settings(deadline=d))
        with pytest.raises(Cancelled):
            engine.factors(x ** 8 - 1)


class TestCAS:
    def test_parse_and_eval(self):
        cas = CAS()
        p = cas.parse("x^2 + 2x + 1")
        assert cas.eval(p, {"x": 3}) == 16
        assert str(cas.differentiate(p, "x")) == "2*x + 2"

    def test_shared_ring_for_strings(self):
        cas = CAS()
        g = cas.gcd("x^2 - y^2", "x^2 + 2xy + y^2")
        x, y = g.ring.gens()
        assert g == x + y

    def test_variadic_gcd_and_lcm(self):
        cas = CAS()
        g = cas.gcd("6x^2 - 6", "4x + 4", "10x + 10")
        assert str(g) == "2*x + 2"
        assert str(cas.lcm("x^2 - 1", "x + 1")) == "x^2 - 1"

    def test_resultant_in_named_variable(self):
        cas = CAS()
        r = cas.resultant("x - y", "x + y", var="y")
        x, _ = r.ring.gens()
        assert r == -2 * x or r == 2 * x

    def test_factor_over_rationals(self):
        cas = CAS(QQ)
        F = cas.factor("x^2 - 1/4")
        assert len(F) == 3
        assert cas.is_squarefree("x^2 - 1/4")

    def test_factor_modular(self):
        cas = CAS(GF(2))
        assert not cas.is_irreducible("x^2 + 1")
        assert cas.is_irreducible("x^2 + x + 1")

    def test_format_factors(self):
        cas = CAS()
        text = cas.format_factors(cas.factor("x^4 - 1"))
        assert "(x^2 + 1)" in text
        assert text.count("*") == 2
        assert cas.format_factors(cas.squarefree("(x+1)^3")) == "(x + 1)^3"

    def test_co_prime(self):
        cas = CAS()
        assert len(cas.co_prime(["x^2 - 1", "x^2 + x"])) == 3


class TestMain:
    def test_default_polynomial(self, capsys):
        main.main([])
        out = capsys.readouterr().out
        assert "factors:" in out
        assert "(x^2 + 1)" in out

    def test_modular_option(self, capsys):
        main.main(["x^2 + 1", "--mod", "5"])
        out = capsys.readouterr().out
        assert "GF(5)" in out

    def test_verbose_logs(self, caplog):
        with caplog.at_level(logging.DEBUG):
            main.main(["x^2 - 4", "-v"])
        assert any(r.name == "cas" for r in caplog.records)
