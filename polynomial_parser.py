from __future__ import annotations
from fractions import Fraction
import re
from typing import Any, List, Sequence

from errors import InvalidOperation
from polynomial import PolyRing, Polynomial
from rings import ZZ, Ring, RingKind

# Regex lexer + shunting-yard into polynomials over a chosen ring
_SCAN = re.compile(r"(?P<num>\d+(?:\.\d+)?)|(?P<name>[A-Za-z_]\w*)|(?P<op>\*\*|[-+*/^()])|(?P<bad>\S)")

OPERANDS = ('NUM', 'ID', ')')
PREFIX = ('+', '-', '*', '/', '^', '(', 'NEG')

class Tok:
	def __init__(self, kind: str, lex: str = "", num: Fraction | None = None):
		self.kind, self.lex, self.num = kind, lex, num

	def __repr__(self) -> str:
		return f"Tok({self.kind!r}, {self.lex!r})"

def _push(toks: List[Tok], t: Tok) -> None:
	# juxtaposition is multiplication: "2x", "x(y+1)", ")("
	if t.kind in ('NUM', 'ID', '(') and toks and toks[-1].kind in OPERANDS:
		toks.append(Tok('*', '*'))
	toks.append(t)

def tokenize(expr: str) -> List[Tok]:
	toks: List[Tok] = []
	for m in _SCAN.finditer(expr):
		kind = m.lastgroup
		lex = m.group()
		if kind == 'bad':
			raise InvalidOperation(f"Unexpected char {lex!r} in {expr!r}")
		if kind == 'num':
			_push(toks, Tok('NUM', lex, Fraction(lex)))
		elif kind == 'name':
			# "xy" is x*y; names with digits or underscores ("x1", "t_2") are kept whole
			parts = list(lex) if lex.isalpha() else [lex]
			for name in parts:
				_push(toks, Tok('ID', name))
		else:
			k = '^' if lex == '**' else lex
			unary = not toks or toks[-1].kind in PREFIX
			if unary and k == '+':
				continue
			if unary and k == '-':
				k = 'NEG'
			_push(toks, Tok(k, lex))
	return toks

# NEG binds tighter than * but looser than ^, so -x^2 is -(x^2)
prec = {'+': 1, '-': 1, '*': 2, '/': 2, 'NEG': 3, '^': 4}
right_assoc = {'NEG', '^'}

def _pops(t: Tok, top: Tok) -> bool:
	"""Whether the stacked operator `top` is applied before the incoming binary operator t."""
	if top.kind == '(':
		return False
	if t.kind in right_assoc:
		return prec[t.kind] < prec[top.kind]
	return prec[t.kind] <= prec[top.kind]

def to_rpn(toks: List[Tok]) -> List[Tok]:
	out: List[Tok] = []
	ops: List[Tok] = []
	for t in toks:
		if t.kind in ('NUM', 'ID'):
			out.append(t)
		elif t.kind in ('NEG', '('):
			ops.append(t)
		elif t.kind in prec:
			while ops and _pops(t, ops[-1]):
				out.append(ops.pop())
			ops.append(t)
		elif t.kind == ')':
			while ops and ops[-1].kind != '(':
				out.append(ops.pop())
			if not ops:
				raise InvalidOperation("Mismatched parens")
			ops.pop()
		else:
			raise InvalidOperation(f"Unknown token {t!r}")
	for t in reversed(ops):
		if t.kind == '(':
			raise InvalidOperation("Mismatched parens")
		out.append(t)
	return out


def coefficient(R: Ring, q: Fraction) -> Any:
	"""The rational number q as an element of R."""
	if q.denominator == 1:
		return R.from_int(q.numerator)
	if R.kind is RingKind.RATIONAL:
		return q
	if not R.is_field:
		raise InvalidOperation(f"{q} is not an element of {R}")
	return R.from_int(q.numerator) * R.inverse(R.from_int(q.denominator))


def constant_symbols(R: Ring) -> dict:
	"""Names that denote coefficients rather than variables: generators of extensions and of K(t)."""
	if R.kind is RingKind.ALGEBRAIC:
		return {R.name: R.generator()}
	if R.kind is RingKind.COMPLEX:
		return {'i': R.imag_unit}
	if R.kind is RingKind.QUOTIENT:
		return {v: R.gen(v) for v in R.ring.vars}
	return {}


def variables(expr: str, coeff: Ring = ZZ) -> List[str]:
	"""Variable names in expr, sorted, skipping the coefficient ring's own symbols."""
	consts = constant_symbols(coeff)
	return sorted({t.lex for t in tokenize(expr) if t.kind == 'ID' and t.lex not in consts})


def eval_rpn(rpn: List[Tok], ring: PolyRing) -> Polynomial:
	R = ring.coeff
	consts = constant_symbols(R)
	# entries are (polynomial, literal) with literal set for bare numbers, which exponents need
	stack: List[tuple] = []
	for t in rpn:
		if t.kind == 'NUM':
			stack.append((ring.from_coeff(coefficient(R, t.num)), t.num))
		elif t.kind == 'ID':
			if t.lex in ring.vars:
				stack.append((ring.gen(t.lex), None))
			elif t.lex in consts:
				stack.append((ring.from_coeff(consts[t.lex]), None))
			else:
				raise InvalidOperation(f"unknown variable {t.lex!r} in {ring}")
		elif t.kind == 'NEG':
			if not stack: raise InvalidOperation("neg missing operand")
			p, lit = stack.pop()
			stack.append((-p, None if lit is None else -lit))
		elif t.kind in ('+','-','*','/','^'):
			if len(stack) < 2: raise InvalidOperation("binary op missing operands")
			(b, blit), (a, _) = stack.pop(), stack.pop()
			if t.kind == '+': r = a + b
			elif t.kind == '-': r = a - b
			elif t.kind == '*': r = a * b
			elif t.kind == '/':
				# divisors must be constants
				if not b or not b.is_constant(): raise InvalidOperation("Division by non-constant not supported in polynomial parser")
				r = a.divide_coeff(b.lc)
			else:
				if blit is None or blit.denominator != 1 or blit < 0: raise InvalidOperation("Exponent must be non-negative integer")
				r = a ** int(blit)
			stack.append((r, None))
		else:
			raise InvalidOperation("Unknown RPN token")
	if len(stack) != 1: raise InvalidOperation("Invalid expression")
	return stack[-1][0]


def parse_polynomial(expr: str, ring: PolyRing | None = None, coeff: Ring = ZZ,
					 names: Sequence[str] | None = None) -> Polynomial:
	"""Parse expr into `ring`, or into coeff[names] with names collected from expr when omitted."""
	toks = tokenize(expr)
	if ring is None:
		if names is None:
			names = variables(expr, coeff) or ['x']
		ring = PolyRing(coeff, tuple(names))
	rpn = to_rpn(toks)
	return eval_rpn(rpn, ring)
