"""Evaluate parsed equations to a float.

Arithmetic is done on numpy float64 scalars with floating point warnings
switched off, so results follow IEEE-754 and C's `pow` rather than python's
float semantics: 1/0 is inf rather than a ZeroDivisionError, and a negative
base raised to a fractional power is NaN rather than a complex number.
"""
import logging
import math

import numpy as np

from grammar import Equation, Exponent, Number, Op, Term, to_ast

log = logging.getLogger(__name__)


class MalformedExpression(AssertionError):
    """A tree handed to `evaluate` that the parser could never have built."""


def evaluate(node) -> float:
    """Evaluate an Equation, Term or Degree.

    >>> evaluate(to_ast("2+3*4"))
    14.0
    >>> evaluate(to_ast("2^3^2"))
    512.0
    >>> evaluate(to_ast("-1/0"))
    -inf
    >>> evaluate(Term())
    Traceback (most recent call last):
    ...
    evaluator.MalformedExpression: empty Term
    """
    with np.errstate(all="ignore"):
        ans = float(eval_node(node))
    if not math.isfinite(ans):
        log.debug("%s evaluated to %r", type(node).__name__, ans)
    return ans


def eval_node(node):
    if isinstance(node, Number):
        return np.float64(node.value)
    if isinstance(node, Exponent):
        return eval_exponent(node)
    if isinstance(node, (Term, Equation)):
        return fold(node)
    raise MalformedExpression(f"not an expression node: {node!r}")


def eval_exponent(node):
    """Fold the chain `b1^(b2^(...^power))` from the right, without recursing."""
    bases = []
    while isinstance(node, Exponent):
        if not isinstance(node.base, float):
            raise MalformedExpression(f"bad Exponent base {node.base!r}")
        bases.append(node.base)
        node = node.power
    if not isinstance(node, Number):
        raise MalformedExpression(f"bad Exponent power {node!r}")
    ans = np.float64(node.value)
    for base in reversed(bases):
        ans = np.power(np.float64(base), ans)
    return ans


def fold(node):
    """Left-fold the flat `operand (op operand)*` sequence `node`."""
    kind = type(node).__name__
    if not node:
        raise MalformedExpression(f"empty {kind}")
    if len(node) % 2 == 0:
        raise MalformedExpression(f"{kind} of even length {len(node)}")

    def operand(x):
        if not isinstance(x, node.operands):
            raise MalformedExpression(f"bad {kind} operand {x!r}")
        return eval_node(x)

    ans = operand(node[0])
    for op, x in zip(node[1::2], node[2::2]):
        if not isinstance(op, Op) or node.operators.get(op.op) != op:
            raise MalformedExpression(f"bad {kind} operator {op!r}")
        ans = op(ans, operand(x))
    return ans


def calculate(text: str) -> float:
    """Parse all of `text` and evaluate it.

    >>> calculate("1-2-3")
    -4.0
    >>> calculate("0/0")
    nan
    """
    return evaluate(to_ast(text))
