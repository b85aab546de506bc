"""Recursive descent grammar for whitespace-free arithmetic equations.

    Equation := Term (('+' | '-') Term)*
    Term     := Degree (('*' | '/') Degree)*
    Degree   := Exponent | number
    Exponent := number '^' Degree

Equations and terms are kept as flat alternating tuples of operands and
operators and are folded left to right by the evaluator; exponent chains nest
to the right, so `2^3^2` is `2^(3^2)`.

Exponent chains are parsed and evaluated with loops rather than recursion, so
`1^1^1^...` may be as long as memory allows.

Nodes only compare equal to nodes of the same type: a Term holding a single
number is not the same tree as an Equation holding that number.
"""
import logging
import math
from typing import Callable, Literal, NamedTuple, Tuple, Union

import numpy as np

from combinators import (
    NoMatch,
    all_consuming,
    alt,
    alternating_list,
    char,
    cut,
    double,
    mapped,
    separated_pair,
    verify,
)

log = logging.getLogger(__name__)


def same_node(a, b):
    return type(a) is type(b) and tuple.__eq__(a, b)


def different_node(a, b):
    return not same_node(a, b)


class Number(NamedTuple):
    value: float

    __eq__ = same_node
    __ne__ = different_node
    __hash__ = tuple.__hash__

    def __repr__(self):
        return f"Number({self.value!r})"


class Exponent(NamedTuple):
    base: float
    power: "Degree"

    __eq__ = same_node
    __ne__ = different_node
    __hash__ = tuple.__hash__


Degree = Union[Exponent, Number]


class Op(NamedTuple):
    op: str
    level: Literal["term", "equation"]
    fun: Callable

    def __call__(self, *args):
        return self.fun(*args)

    def __repr__(self):
        return f"op({self.op!r:})"


TIMES = Op("*", "term", np.multiply)
DIVIDE = Op("/", "term", np.true_divide)
PLUS = Op("+", "equation", np.add)
MINUS = Op("-", "equation", np.subtract)

TERM_OPS = {o.op: o for o in [TIMES, DIVIDE]}
EQUATION_OPS = {o.op: o for o in [PLUS, MINUS]}


class Term(tuple):
    """`Degree (op Degree)*` with `op` one of TERM_OPS, as one flat tuple."""

    __slots__ = ()
    operators = TERM_OPS
    operands = (Exponent, Number)
    __eq__ = same_node
    __ne__ = different_node
    __hash__ = tuple.__hash__

    def __repr__(self):
        return f"Term{tuple.__repr__(self)}"


class Equation(tuple):
    """`Term (op Term)*` with `op` one of EQUATION_OPS, as one flat tuple."""

    __slots__ = ()
    operators = EQUATION_OPS
    operands = (Term,)
    __eq__ = same_node
    __ne__ = different_node
    __hash__ = tuple.__hash__

    def __repr__(self):
        return f"Equation{tuple.__repr__(self)}"


def canonicalize_num(num):
    if not math.isfinite(num):
        return repr(num)
    return repr(integer if (integer := int(num)) == num else num)


def op_parser(ops):
    return alt(*(mapped(char(c), lambda _, o=o: o) for c, o in ops.items()))


parse_term_operator = op_parser(TERM_OPS)
parse_equation_operator = op_parser(EQUATION_OPS)
parse_number = mapped(double, Number)

_caret = char("^")
_power = cut(double)
_first_link = separated_pair(double, _caret, _power)


def parse_exponent(text, pos=0):
    """Parse `number ('^' number)+` into right-nested Exponents.

    `Exponent := number '^' Degree` unrolled into a loop, so that chain length
    isn't bounded by the recursion limit. A `^` without a number behind it is
    `Malformed`.

    >>> parse_exponent("2^3^2*4")
    (5, Exponent(base=2.0, power=Exponent(base=3.0, power=Number(2.0))))
    """
    pos, (base, power) = _first_link(text, pos)
    numbers = [base, power]
    while True:
        try:
            pos, _ = _caret(text, pos)
        except NoMatch:
            break
        pos, power = _power(text, pos)
        numbers.append(power)
    node = Number(numbers.pop())
    for base in reversed(numbers):
        node = Exponent(base, node)
    return pos, node


_degree = alt(parse_exponent, parse_number)


def parse_degree(text, pos=0):
    """
    >>> parse_degree("5")
    (1, Number(5.0))
    """
    return _degree(text, pos)


# An empty term is no term at all: that's what lets an equation leave a
# trailing `+` or `-` unconsumed instead of ending on an empty term.
parse_term = verify(
    mapped(alternating_list(parse_term_operator, parse_degree), Term), bool, "number"
)
parse_equation = mapped(alternating_list(parse_equation_operator, parse_term), Equation)


def _run(parser, text) -> Tuple[int, Equation]:
    end, equation = parser(text, 0)
    log.debug("parsed %d of %d characters into %d terms", end, len(text), (len(equation) + 1) // 2)
    return end, equation


_complete_equation = all_consuming(verify(parse_equation, bool, "number"))


def parse(text: str) -> Tuple[str, Equation]:
    """Parse as much of `text` as possible; return the rest and the equation.

    >>> parse("1+2+")
    ('+', Equation(Term(Number(1.0),), op('+'), Term(Number(2.0),)))
    >>> parse("x")
    ('x', Equation())
    """
    end, equation = _run(parse_equation, text)
    return text[end:], equation


def to_ast(text: str) -> Equation:
    """Parse all of `text` as a (non-empty) equation.

    >>> to_ast("2*3-1")
    Equation(Term(Number(2.0), op('*'), Number(3.0)), op('-'), Term(Number(1.0),))
    """
    _, equation = _run(_complete_equation, text)
    return equation


def unparse(node) -> str:
    """Render `node` back to source.

    >>> unparse(to_ast("1.5*2^-1-3"))
    '1.5*2^-1-3'
    """
    if isinstance(node, Number):
        return canonicalize_num(node.value)
    if isinstance(node, Exponent):
        bases = []
        while isinstance(node, Exponent):
            bases.append(canonicalize_num(node.base) + "^")
            node = node.power
        return "".join(bases) + unparse(node)
    if isinstance(node, Op):
        return node.op
    return "".join(map(unparse, node))
