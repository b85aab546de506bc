"""Grammar Testing Strategy:

 1. Hand picked examples for each grammar level, with an eye on the two things
    that are easy to get wrong: precedence/associativity of the resulting tree,
    and which failures are recoverable (`NoMatch`) versus fatal (`Malformed`).
 2. Generative tests. Strings made by joining random numbers with random
    operators are always valid equations, so parsing them must consume all of
    the input. Random trees, printed with `unparse`, must parse back to the
    same tree.
"""
from itertools import chain

import pytest
from hypothesis import example, given, settings, strategies as st

from combinators import Malformed, NoMatch
from equations import random_equation
from grammar import *


def test_degree_falls_back_to_number():
    assert parse_degree("5") == (1, Number(5.0))
    assert parse_degree("5*2") == (1, Number(5.0))
    with pytest.raises(NoMatch):
        parse_exponent("5")


def test_exponent_is_right_associative():
    assert to_ast("2^3^2") == Equation(
        [Term([Exponent(2.0, Exponent(3.0, Number(2.0)))])]
    )
    _, exponent = parse_exponent("1^2^3")
    assert exponent.power == Exponent(2.0, Number(3.0))


def test_signs_belong_to_literals():
    assert parse_degree("-2^-1") == (5, Exponent(-2.0, Number(-1.0)))
    assert to_ast("1--2") == Equation([Term([Number(1.0)]), MINUS, Term([Number(-2.0)])])
    assert to_ast("2*-3") == Equation([Term([Number(2.0), TIMES, Number(-3.0)])])


def test_precedence():
    assert to_ast("1+2*3") == Equation(
        [Term([Number(1.0)]), PLUS, Term([Number(2.0), TIMES, Number(3.0)])]
    )
    assert to_ast("1*2+3") == Equation(
        [Term([Number(1.0), TIMES, Number(2.0)]), PLUS, Term([Number(3.0)])]
    )
    assert to_ast("2*3^2/4") == Equation(
        [Term([Number(2.0), TIMES, Exponent(3.0, Number(2.0)), DIVIDE, Number(4.0)])]
    )


def test_terms_and_equations_are_flat():
    eq = to_ast("1-2-3+4")
    assert len(eq) == 7
    assert eq[1::2] == (MINUS, MINUS, PLUS)
    assert all(isinstance(t, Term) and len(t) == 1 for t in eq[::2])


def test_operators():
    assert parse_term_operator("*", 0) == (1, TIMES)
    assert parse_term_operator("/", 0) == (1, DIVIDE)
    assert parse_equation_operator("+", 0) == (1, PLUS)
    assert parse_equation_operator("-", 0) == (1, MINUS)
    with pytest.raises(NoMatch):
        parse_term_operator("+", 0)
    with pytest.raises(NoMatch):
        parse_equation_operator("^", 0)


def test_trailing_operator_is_left_unconsumed():
    rest, eq = parse("1+2+")
    assert rest == "+"
    assert eq == to_ast("1+2")
    assert parse("3*4/") == ("/", to_ast("3*4"))
    assert parse("3*4-") == ("-", to_ast("3*4"))
    assert parse("1+2abc") == ("abc", to_ast("1+2"))


def test_nothing_to_parse():
    assert parse("") == ("", Equation())
    assert parse("+") == ("+", Equation())
    assert parse("*1") == ("*1", Equation())


def test_dangling_caret_is_fatal():
    for s, pos in [("2^", 2), ("1+2^", 4), ("1*2^*3", 4), ("2^3^", 4)]:
        with pytest.raises(Malformed) as exc_info:
            parse(s)
        assert exc_info.value.pos == pos
        assert exc_info.value.expected == "number"


def test_to_ast_wants_everything():
    with pytest.raises(Malformed) as exc_info:
        to_ast("1+2+")
    assert exc_info.value.pos == 3
    with pytest.raises(Malformed) as exc_info:
        to_ast("1+2)")
    assert exc_info.value.pos == 3
    with pytest.raises(NoMatch) as exc_info:
        to_ast("")
    assert (exc_info.value.pos, exc_info.value.expected) == (0, "number")


def test_long_exponent_chains():
    s = "1" + "^2" * 100_000
    rest, eq = parse(s)
    assert rest == ""
    assert unparse(eq) == s
    with pytest.raises(Malformed) as exc_info:
        parse(s + "^")
    assert exc_info.value.pos == len(s) + 1


def test_nodes_of_different_types_differ():
    assert Term([Number(1.0)]) != Equation([Number(1.0)])
    assert Number(2.0) != (2.0,)
    assert Exponent(2.0, Number(1.0)) != (2.0, Number(1.0))
    assert Term([Number(2.0)]) != Term([(2.0,)])
    assert to_ast("3") != Equation([Number(3.0)])
    assert Term([Number(1.0)]) == Term([Number(1.0)])
    assert hash(Number(1.0)) == hash(Number(1.0))


def test_unparse():
    assert unparse(to_ast("2^0.5*-1e-05-1e+16")) == "2^0.5*-1e-05-10000000000000000"
    assert unparse(Term([Number(1.0), DIVIDE, Number(3.0)])) == "1/3"


def test_random_equation_parses_completely():
    s = random_equation(10_000, seed=0)
    rest, eq = parse(s)
    assert rest == ""
    assert len(eq) % 2 == 1


numbers = st.integers(-(2**31), 2**31 - 1).map(str) | st.floats(
    allow_nan=False, allow_infinity=False
).map(repr)
operators = st.sampled_from(list("+-*/^"))


@given(numbers, st.lists(st.tuples(operators, numbers), max_size=50))
@example("0", [("^", "-0.0"), ("^", "1e-05")])
@example("1", [("-", "-1"), ("/", "0")])
def test_generated_strings_are_consumed(first, rest):
    s = first + "".join(op + num for op, num in rest)
    remaining, eq = parse(s)
    assert remaining == "", f"{s!r} left {remaining!r}"
    assert to_ast(s) == eq


finite = st.floats(allow_nan=False, allow_infinity=False)
degrees = st.recursive(
    finite.map(Number), lambda power: st.builds(Exponent, finite, power), max_leaves=8
)


def alternating(operand, ops, cls):
    return st.builds(
        lambda first, rest: cls([first, *chain.from_iterable(rest)]),
        operand,
        st.lists(st.tuples(st.sampled_from(ops), operand), max_size=5),
    )


terms = alternating(degrees, [TIMES, DIVIDE], Term)
equations = alternating(terms, [PLUS, MINUS], Equation)


@given(equations)
@settings(max_examples=200)
def test_unparse_roundtrips(eq):
    assert to_ast(unparse(eq)) == eq
