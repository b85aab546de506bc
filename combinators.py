"""Tiny parser combinators over a string and an offset into it.

A parser is any callable `p(text, pos)` that either returns `(new_pos, value)`
or raises one of two kinds of `ParseError`:

 - `NoMatch`: the parser does not apply at `pos`. Nothing was consumed, so the
   caller is free to try an alternative at the same position.
 - `Malformed`: the input was committed to (e.g. a number followed by `^`) but
   could not be completed. Nothing catches this; it aborts the whole parse.

Parsers work on offsets rather than on sliced remainders so that long inputs
don't get copied over and over.
"""
import re
from typing import Any, Callable, List, Tuple

Parser = Callable[[str, int], Tuple[int, Any]]


class ParseError(Exception):
    fatal = False

    def __init__(self, pos: int, expected: str):
        super().__init__(pos, expected)
        self.pos = pos
        self.expected = expected

    def __str__(self):
        return f"expected {self.expected} at column {self.pos + 1}"


class NoMatch(ParseError):
    """The alternative doesn't apply here; try the next one."""


class Malformed(ParseError):
    """A partial match was committed to, but its continuation failed."""

    fatal = True


def char(c: str) -> Parser:
    """Match the single character `c`.

    >>> char("^")("2^3", 1)
    (2, '^')
    """

    def p(text, pos):
        if text.startswith(c, pos):
            return pos + 1, c
        raise NoMatch(pos, repr(c))

    return p


FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def double(text: str, pos: int) -> Tuple[int, float]:
    """Scan the longest floating point literal starting at `pos`.

    >>> double("-1.5e3+2", 0)
    (6, -1500.0)
    >>> double("2^3", 0)
    (1, 2.0)
    >>> double("2e", 0)  # a dangling exponent marker is left alone
    (1, 2.0)
    """
    if m := FLOAT_RE.match(text, pos):
        return m.end(), float(m.group())
    raise NoMatch(pos, "number")


def alt(*parsers: Parser) -> Parser:
    """Try each of `parsers` in turn at the same position."""

    def p(text, pos):
        expected = []
        for parser in parsers:
            try:
                return parser(text, pos)
            except NoMatch as e:
                expected.append(e.expected)
        raise NoMatch(pos, " or ".join(dict.fromkeys(expected)))

    return p


def mapped(parser: Parser, fun: Callable) -> Parser:
    def p(text, pos):
        pos, value = parser(text, pos)
        return pos, fun(value)

    return p


def separated_pair(first: Parser, sep: Parser, second: Parser) -> Parser:
    """`first sep second`, keeping `(first, second)`."""

    def p(text, pos):
        pos, a = first(text, pos)
        pos, _ = sep(text, pos)
        pos, b = second(text, pos)
        return pos, (a, b)

    return p


def cut(parser: Parser) -> Parser:
    """Commit to `parser`: its `NoMatch` becomes `Malformed`."""

    def p(text, pos):
        try:
            return parser(text, pos)
        except NoMatch as e:
            raise Malformed(e.pos, e.expected) from None

    return p


def alternating_list(sep: Parser, item: Parser) -> Parser:
    """Parse `item (sep item)*` into a flat `[item, sep, item, ...]` list.

    Unlike a conventional separated list this never fails on a dangling
    separator: if no `item` follows a `sep`, the separator is left unconsumed
    and the list ends before it. A missing first item gives an empty list.

    >>> digits = mapped(double, int)
    >>> alternating_list(char(","), digits)("1,2,3,", 0)
    (5, [1, ',', 2, ',', 3])
    >>> alternating_list(char(","), digits)("x", 0)
    (0, [])
    """

    def p(text, pos):
        try:
            pos, first = item(text, pos)
        except NoMatch:
            return pos, []
        parts: List[Any] = [first]
        while True:
            try:
                after_sep, s = sep(text, pos)
            except NoMatch:
                return pos, parts
            if after_sep == pos:
                raise Malformed(pos, "a separator that consumes input")
            try:
                after_item, o = item(text, after_sep)
            except NoMatch:
                return pos, parts
            parts += (s, o)
            pos = after_item

    return p


def inside_parens(parser: Parser) -> Parser:
    """Run `parser` on the text between a `(` and its matching `)`.

    Whatever `parser` leaves of the parenthesized text is ignored; parsing
    continues after the closing paren.

    >>> inside_parens(double)("(1.5)^2", 0)
    (5, 1.5)
    >>> inside_parens(alternating_list(char("+"), double))("(1+2)*3", 0)
    (5, [1.0, '+', 2.0])
    """

    def p(text, pos):
        if not text.startswith("(", pos):
            raise NoMatch(pos, "'('")
        depth = 1
        for i in range(pos + 1, len(text)):
            c = text[i]
            if c == "(":
                depth += 1
            elif c == ")":
                depth -= 1
            if depth == 0:
                _, value = parser(text[:i], pos + 1)
                return i + 1, value
        raise NoMatch(len(text), "')'")

    return p


def verify(parser: Parser, predicate: Callable, expected: str) -> Parser:
    """Like `parser`, but a value failing `predicate` counts as `NoMatch`."""

    def p(text, pos):
        end, value = parser(text, pos)
        if not predicate(value):
            raise NoMatch(pos, expected)
        return end, value

    return p


def all_consuming(parser: Parser) -> Parser:
    """Run `parser` and insist that it consumed all of the input."""

    def p(text, pos):
        end, value = parser(text, pos)
        if end != len(text):
            raise Malformed(end, "end of input")
        return end, value

    return p


def format_error(text: str, err: ParseError) -> str:
    """Render `err` with the offending input and a caret under `err.pos`.

    >>> print(format_error("2^", Malformed(2, "number")))
    expected number at column 3
      2^
        ^
    """
    return f"{err}\n  {text}\n  {' ' * err.pos}^"
