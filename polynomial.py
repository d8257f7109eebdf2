from __future__ import annotations
from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import monomial
from errors import InvalidOperation
from monomial import Exp
from rings import GcdDomain, Ring, RingKind


@dataclass(frozen=True)
class PolyRing(GcdDomain):
    """Polynomials over `coeff` in the variables `vars`, lex order with vars[0] most significant.

    A PolyRing is itself a coefficient ring, which is how the recursive view
    (univariate polynomials with polynomial coefficients) is expressed.
    """

    coeff: Ring
    vars: Tuple[str, ...]

    kind = RingKind.POLYNOMIAL

    def __post_init__(self) -> None:
        object.__setattr__(self, "vars", tuple(self.vars))
        if len(set(self.vars)) != len(self.vars):
            raise InvalidOperation(f"duplicate variable names in {self.vars}")

    @property
    def nvars(self) -> int:
        return len(self.vars)

    @property
    def characteristic(self) -> int:  # type: ignore[override]
        return self.coeff.characteristic

    @property
    def base_ring(self) -> Ring:
        r = self.coeff
        while isinstance(r, PolyRing):
            r = r.coeff
        return r

    @property
    def zero(self) -> Polynomial:
        return Polynomial(self, {})

    @property
    def one(self) -> Polynomial:
        return self.from_coeff(self.coeff.one)

    def from_int(self, n: int) -> Polynomial:
        return self.from_coeff(self.coeff.from_int(n))

    def from_coeff(self, c: Any) -> Polynomial:
        return Polynomial(self, {monomial.zero_exp(self.nvars): self._coerce(c)})

    def _coerce(self, c: Any) -> Any:
        if isinstance(c, int):
            return self.coeff.from_int(c)
        return c

    def monomial(self, exp: Exp, c: Any = None) -> Polynomial:
        return Polynomial(self, {tuple(exp): self.coeff.one if c is None else self._coerce(c)})

    def gen(self, var: int | str) -> Polynomial:
        i = self.index(var)
        return self.monomial(monomial.unit_exp(self.nvars, i))

    def gens(self) -> List[Polynomial]:
        return [self.gen(i) for i in range(self.nvars)]

    def index(self, var: int | str) -> int:
        if isinstance(var, int):
            if not 0 <= var < self.nvars:
                raise InvalidOperation(f"variable index {var} out of range for {self}")
            return var
        try:
            return self.vars.index(var)
        except ValueError:
            raise InvalidOperation(f"unknown variable {var!r} in {self}") from None

    def from_dict(self, terms: Dict[Exp, Any]) -> Polynomial:
        for e in terms:
            if len(e) != self.nvars:
                raise InvalidOperation(f"exponent {e} does not match {self.nvars} variables")
        return Polynomial(self, {tuple(e): self._coerce(c) for e, c in terms.items()})

    def from_dense(self, coeffs: Sequence[Any], var: int = 0) -> Polynomial:
        """Univariate in `var` from coefficients listed lowest degree first."""
        terms = {}
        for k, c in enumerate(coeffs):
            terms[monomial.unit_exp(self.nvars, var, k)] = self._coerce(c)
        return Polynomial(self, terms)

    def contract(self, k: int = 1) -> PolyRing:
        """Ring of the variables left after removing the first k."""
        return PolyRing(self.coeff, self.vars[k:])

    def recursive_ring(self, k: int = 1) -> PolyRing:
        return PolyRing(self.contract(k), self.vars[:k])

    def remove_var(self, i: int) -> PolyRing:
        return PolyRing(self.coeff, self.vars[:i] + self.vars[i + 1:])

    def extend(self, names: Sequence[str]) -> PolyRing:
        return PolyRing(self.coeff, self.vars + tuple(names))

    def with_coeff(self, ring: Ring) -> PolyRing:
        return PolyRing(ring, self.vars)

    def distribute(self, rp: Polynomial) -> Polynomial:
        """Inverse of Polynomial.to_recursive: flatten a recursive polynomial into this ring."""
        terms: Dict[Exp, Any] = {}
        for outer, cp in rp.terms.items():
            for inner, c in cp.terms.items():
                terms[outer + inner] = c
        return Polynomial(self, terms)

    def is_unit(self, a: Polynomial) -> bool:
        return a.is_constant() and bool(a) and self.coeff.is_unit(a.lc)

    def inverse(self, a: Polynomial) -> Polynomial:
        if not self.is_unit(a):
            raise InvalidOperation(f"{a} is not invertible in {self}")
        return self.from_coeff(self.coeff.inverse(a.lc))

    def exact_quotient(self, a: Polynomial, b: Polynomial) -> Polynomial:
        return a.divide(b)

    def gcd(self, a: Polynomial, b: Polynomial) -> Polynomial:
        from factory import gcd_engine
        return gcd_engine(self.base_ring).gcd(a, b)

    def signum(self, a: Polynomial) -> int:
        return a.signum()

    def sort_key(self, a: Polynomial) -> Any:
        return a.sort_key()

    def random(self, rng, size: int = 100) -> Polynomial:
        return self.from_coeff(self.coeff.random(rng, size))

    def __repr__(self) -> str:
        return f"{self.coeff}[{', '.join(self.vars)}]"


def _try_quotient(R: Ring, a: Any, b: Any) -> Any:
    if R.is_field:
        return a * R.inverse(b)
    try:
        return R.exact_quotient(a, b)
    except InvalidOperation:
        return None


def _coeff_str(R: Ring, c: Any) -> str:
    if isinstance(c, Fraction):
        s = str(c.numerator) if c.denominator == 1 else f"{c.numerator}/{c.denominator}"
        return s if c.denominator == 1 else f"({s})"
    s = str(c)
    if any(ch in s[1:] for ch in " +-") or isinstance(c, Polynomial) and len(c.terms) > 1:
        return f"({s})"
    return s


class Polynomial:
    """Immutable sparse polynomial: exponent tuple -> nonzero coefficient."""

    __slots__ = ("ring", "terms", "_lead")

    def __init__(self, ring: PolyRing, terms: Optional[Dict[Exp, Any]] = None) -> None:
        self.ring = ring
        self.terms: Dict[Exp, Any] = {e: c for e, c in (terms or {}).items() if c}
        self._lead: Optional[Exp] = None

    # -- structure --------------------------------------------------------

    def __bool__(self) -> bool:
        return bool(self.terms)

    def is_zero(self) -> bool:
        return not self.terms

    def is_one(self) -> bool:
        return self.is_constant() and bool(self.terms) and self.ring.coeff.is_one(self.lc)

    def is_constant(self) -> bool:
        return all(not any(e) for e in self.terms)

    @property
    def nvars(self) -> int:
        return self.ring.nvars

    def items(self) -> List[Tuple[Exp, Any]]:
        """Terms in descending lex order."""
        return sorted(self.terms.items(), key=lambda t: t[0], reverse=True)

    def leading_exp(self) -> Exp:
        if not self.terms:
            return monomial.zero_exp(self.nvars)
        if self._lead is None:
            self._lead = max(self.terms)
        return self._lead

    degree_vector = leading_exp

    @property
    def lc(self) -> Any:
        if not self.terms:
            return self.ring.coeff.zero
        return self.terms[self.leading_exp()]

    def leading_base_coefficient(self) -> Any:
        c = self.lc
        while isinstance(c, Polynomial):
            c = c.lc
        return c

    def leading_term(self) -> Polynomial:
        if not self.terms:
            return self
        e = self.leading_exp()
        return Polynomial(self.ring, {e: self.terms[e]})

    def trailing_exp(self) -> Exp:
        if not self.terms:
            return monomial.zero_exp(self.nvars)
        return min(self.terms)

    def trailing_coefficient(self) -> Any:
        if not self.terms:
            return self.ring.coeff.zero
        return self.terms[self.trailing_exp()]

    def constant_coefficient(self) -> Any:
        return self.terms.get(monomial.zero_exp(self.nvars), self.ring.coeff.zero)

    def coefficient(self, exp: Exp) -> Any:
        return self.terms.get(tuple(exp), self.ring.coeff.zero)

    def degree(self, var: int | str = 0) -> int:
        """Degree in one variable; -1 for the zero polynomial."""
        if not self.terms:
            return -1
        i = self.ring.index(var)
        return max(e[i] for e in self.terms)

    def low_degree(self, var: int | str = 0) -> int:
        if not self.terms:
            return -1
        i = self.ring.index(var)
        return min(e[i] for e in self.terms)

    def total_degree(self) -> int:
        if not self.terms:
            return -1
        return max(sum(e) for e in self.terms)

    def max_degree_vector(self) -> Exp:
        return monomial.max_vector(self.terms, self.nvars)

    def dependency(self) -> List[int]:
        return monomial.dependency(self.max_degree_vector())

    def signum(self) -> int:
        return self.ring.coeff.signum(self.lc) if self.terms else 0

    def sort_key(self) -> Any:
        key = self.ring.coeff.sort_key
        return tuple((e, key(c)) for e, c in self.items())

    # -- arithmetic -------------------------------------------------------

    def _check(self, other: Polynomial) -> None:
        if other.ring != self.ring:
            raise InvalidOperation(f"ring mismatch: {self.ring} vs {other.ring}")

    def _is_scalar(self, other: Any) -> bool:
        if isinstance(other, Polynomial):
            if other.ring == self.ring:
                return False
            if other.ring == self.ring.coeff:
                return True
            raise InvalidOperation(f"ring mismatch: {self.ring} vs {other.ring}")
        return True

    def __add__(self, other: Any) -> Polynomial:
        if self._is_scalar(other):
            other = self.ring.from_coeff(other)
        terms = dict(self.terms)
        for e, c in other.terms.items():
            v = terms.get(e)
            terms[e] = c if v is None else v + c
        return Polynomial(self.ring, terms)

    __radd__ = __add__

    def __neg__(self) -> Polynomial:
        return Polynomial(self.ring, {e: -c for e, c in self.terms.items()})

    def __sub__(self, other: Any) -> Polynomial:
        if self._is_scalar(other):
            other = self.ring.from_coeff(other)
        terms = dict(self.terms)
        for e, c in other.terms.items():
            v = terms.get(e)
            terms[e] = -c if v is None else v - c
        return Polynomial(self.ring, terms)

    def __rsub__(self, other: Any) -> Polynomial:
        return (-self) + other

    def __mul__(self, other: Any) -> Polynomial:
        if self._is_scalar(other):
            return self.scale(other)
        if not self.terms or not other.terms:
            return self.ring.zero
        terms: Dict[Exp, Any] = {}
        for ea, ca in self.terms.items():
            for eb, cb in other.terms.items():
                e = tuple(x + y for x, y in zip(ea, eb))
                v = terms.get(e)
                terms[e] = ca * cb if v is None else v + ca * cb
        return Polynomial(self.ring, terms)

    __rmul__ = __mul__

    def __pow__(self, n: int) -> Polynomial:
        if n < 0:
            raise InvalidOperation("negative exponent")
        result = self.ring.one
        base = self
        while n:
            if n & 1:
                result = result * base
            n >>= 1
            if n:
                base = base * base
        return result

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Polynomial):
            return self.ring == other.ring and self.terms == other.terms
        if isinstance(other, int):
            if not self.terms:
                return other == 0
            return self.is_constant() and self.lc == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self.terms.items()))

    def scale(self, c: Any) -> Polynomial:
        if not c:
            return self.ring.zero
        return Polynomial(self.ring, {e: v * c for e, v in self.terms.items()})

    def shift(self, exp: Exp) -> Polynomial:
        """Multiply by the monomial x^exp."""
        return Polynomial(self.ring, {monomial.add(e, exp): c for e, c in self.terms.items()})

    def divide_coeff(self, c: Any) -> Polynomial:
        R = self.ring.coeff
        if not c:
            raise InvalidOperation("division by zero")
        if R.is_field:
            return self.scale(R.inverse(c))
        return Polynomial(self.ring, {e: R.exact_quotient(v, c) for e, v in self.terms.items()})

    def monic(self) -> Polynomial:
        """Divide by the leading base coefficient, which must be a unit."""
        if not self.terms:
            return self
        lbc = self.leading_base_coefficient()
        base = self.ring.base_ring
        if base.is_one(lbc):
            return self
        if not base.is_unit(lbc):
            raise InvalidOperation(f"leading coefficient {lbc} is not invertible")
        return self.scale(base.inverse(lbc))

    def abs(self) -> Polynomial:
        return -self if self.signum() < 0 else self

    # -- division ---------------------------------------------------------

    def divmod(self, b: Polynomial) -> Tuple[Polynomial, Polynomial]:
        """Division with remainder in lex order; exact quotient of coefficients where possible."""
        self._check(b)
        if not b:
            raise InvalidOperation("division by zero")
        R = self.ring.coeff
        be = b.leading_exp()
        bc = b.lc
        q: Dict[Exp, Any] = {}
        r: Dict[Exp, Any] = {}
        p = dict(self.terms)
        while p:
            e = max(p)
            c = p[e]
            f = _try_quotient(R, c, bc) if monomial.divides(be, e) else None
            if f is None:
                r[e] = p.pop(e)
                continue
            m = monomial.sub(e, be)
            q[m] = f
            for eb, cb in b.terms.items():
                k = monomial.add(eb, m)
                v = p.get(k, R.zero) - f * cb
                if v:
                    p[k] = v
                else:
                    p.pop(k, None)
        return Polynomial(self.ring, q), Polynomial(self.ring, r)

    def rem(self, b: Polynomial) -> Polynomial:
        return self.divmod(b)[1]

    def divide(self, b: Polynomial) -> Polynomial:
        """Exact division; InvalidOperation if b does not divide self."""
        self._check(b)
        if not b:
            raise InvalidOperation("division by zero")
        if b.is_constant():
            return self.divide_coeff(b.lc)
        R = self.ring.coeff
        be = b.leading_exp()
        bc = b.lc
        q: Dict[Exp, Any] = {}
        p = dict(self.terms)
        while p:
            e = max(p)
            if not monomial.divides(be, e):
                raise InvalidOperation(f"{b} does not divide {self}")
            f = R.exact_quotient(p[e], bc)
            m = monomial.sub(e, be)
            q[m] = f
            for eb, cb in b.terms.items():
                k = monomial.add(eb, m)
                v = p.get(k, R.zero) - f * cb
                if v:
                    p[k] = v
                else:
                    p.pop(k, None)
        return Polynomial(self.ring, q)

    def is_divisible_by(self, b: Polynomial) -> bool:
        try:
            self.divide(b)
        except InvalidOperation:
            return False
        return True

    def pseudo_divmod(self, b: Polynomial) -> Tuple[Polynomial, Polynomial]:
        """lc(b)^(deg a - deg b + 1) * a = q*b + r in the main variable."""
        self._check(b)
        if not b:
            raise InvalidOperation("division by zero")
        if self.nvars > 1:
            ra, rb = self.to_recursive(), b.to_recursive()
            q, r = ra.pseudo_divmod(rb)
            return self.ring.distribute(q), self.ring.distribute(r)
        d = b.degree()
        n = self.degree()
        if n < d:
            return self.ring.zero, self
        lcb = b.lc
        q = self.ring.zero
        r = self
        steps = n - d + 1
        while r and r.degree() >= d:
            t = self.ring.monomial((r.degree() - d,), r.lc)
            q = q * lcb + t
            r = r * lcb - b * t
            steps -= 1
        if steps > 0:
            f = lcb ** steps
            q, r = q * f, r * f
        return q, r

    def prem(self, b: Polynomial) -> Polynomial:
        return self.pseudo_divmod(b)[1]

    def sparse_prem(self, b: Polynomial) -> Polynomial:
        """Pseudo-remainder scaling by lc(b) only where the quotient is inexact."""
        self._check(b)
        if not b:
            raise InvalidOperation("division by zero")
        if self.nvars > 1:
            return self.ring.distribute(self.to_recursive().sparse_prem(b.to_recursive()))
        R = self.ring.coeff
        d = b.degree()
        lcb = b.lc
        r = self
        while r and r.degree() >= d:
            f = _try_quotient(R, r.lc, lcb)
            k = r.degree() - d
            if f is not None:
                r = r - b.shift((k,)).scale(f)
            else:
                r = r * lcb - b.shift((k,)).scale(r.lc)
        return r

    # -- calculus and evaluation -----------------------------------------

    def derivative(self, var: int | str = 0) -> Polynomial:
        i = self.ring.index(var)
        terms = {}
        for e, c in self.terms.items():
            if e[i]:
                terms[monomial.subst(e, i, e[i] - 1)] = c * e[i]
        return Polynomial(self.ring, terms)

    def substitute(self, var: int | str, value: Any) -> Polynomial:
        """Replace one variable by a coefficient, keeping the variable list."""
        i = self.ring.index(var)
        powers: Dict[int, Any] = {}
        terms: Dict[Exp, Any] = {}
        for e, c in self.terms.items():
            k = e[i]
            if k not in powers:
                powers[k] = value ** k if k else None
            v = c if not k else c * powers[k]
            ne = monomial.subst(e, i, 0)
            w = terms.get(ne)
            terms[ne] = v if w is None else w + v
        return Polynomial(self.ring, terms)

    def evaluate(self, var: int | str, value: Any) -> Polynomial:
        """Replace one variable by a coefficient and drop it from the ring."""
        i = self.ring.index(var)
        sub = self.substitute(i, value)
        return Polynomial(self.ring.remove_var(i), {e[:i] + e[i + 1:]: c for e, c in sub.terms.items()})

    def evaluate_all(self, values: Sequence[Any]) -> Any:
        R = self.ring.coeff
        total = R.zero
        for e, c in self.terms.items():
            v = c
            for x, k in zip(values, e):
                if k:
                    v = v * x ** k
            total = total + v
        return total

    def map_coeffs(self, ring: PolyRing, f: Callable[[Any], Any]) -> Polynomial:
        return Polynomial(ring, {e: f(c) for e, c in self.terms.items()})

    def to_recursive(self, k: int = 1) -> Polynomial:
        """View as a polynomial in the first k variables over the ring of the rest."""
        rr = self.ring.recursive_ring(k)
        inner = rr.coeff
        groups: Dict[Exp, Dict[Exp, Any]] = {}
        for e, c in self.terms.items():
            groups.setdefault(e[:k], {})[e[k:]] = c
        return Polynomial(rr, {o: Polynomial(inner, d) for o, d in groups.items()})

    def to_dense(self) -> List[Any]:
        """Coefficients of a univariate polynomial, lowest degree first."""
        if self.nvars != 1:
            raise InvalidOperation("to_dense needs a univariate polynomial")
        out = [self.ring.coeff.zero] * (self.degree() + 1)
        for (k,), c in self.terms.items():
            out[k] = c
        return out

    # -- printing ---------------------------------------------------------

    def to_string(self) -> str:
        if not self.terms:
            return "0"
        R = self.ring.coeff
        parts: List[str] = []
        for idx, (e, c) in enumerate(self.items()):
            neg = R.signum(c) < 0
            if neg:
                c = -c
            mono = monomial.to_string(e, self.ring.vars)
            if not mono:
                body = _coeff_str(R, c).strip("()") if isinstance(c, (int, Fraction)) else _coeff_str(R, c)
            elif R.is_one(c):
                body = mono
            else:
                body = f"{_coeff_str(R, c)}*{mono}"
            if idx == 0:
                parts.append(f"-{body}" if neg else body)
            else:
                parts.append(f" - {body}" if neg else f" + {body}")
        return "".join(parts)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Polynomial({self.to_string()!r}, {self.ring!r})"


def poly_ring(coeff: Ring, names: Iterable[str] | str) -> Tuple[PolyRing, List[Polynomial]]:
    """Build a ring and its generators, e.g. poly_ring(ZZ, "x y")."""
    if isinstance(names, str):
        names = names.replace(",", " ").split()
    ring = PolyRing(coeff, tuple(names))
    return ring, ring.gens()


class FactorMultiset(dict):
    """Factor -> multiplicity. Product of factor**multiplicity is the factored value."""

    def add(self, f: Polynomial, k: int = 1) -> None:
        self[f] = self.get(f, 0) + k

    def sorted(self) -> FactorMultiset:
        """Ascending polynomial order, constant factors first."""
        return FactorMultiset(sorted(self.items(), key=lambda t: (t[0].total_degree(), t[0].sort_key(), t[1])))

    def product(self, ring: Optional[PolyRing] = None) -> Polynomial:
        if ring is None:
            if not self:
                raise InvalidOperation("empty factor multiset needs a ring")
            ring = next(iter(self)).ring
        result = ring.one
        for f, k in self.items():
            result = result * f ** k
        return result

    def flatten(self) -> List[Polynomial]:
        out: List[Polynomial] = []
        for f, k in self.items():
            out.extend([f] * k)
        return out

    def nonconstant(self) -> FactorMultiset:
        return FactorMultiset((f, k) for f, k in self.items() if not f.is_constant())

    def __str__(self) -> str:
        if not self:
            return "1"
        parts = []
        for f, k in self.items():
            s = f"({f})" if len(f.terms) > 1 else str(f)
            parts.append(s if k == 1 else f"{s}^{k}")
        return " * ".join(parts)
