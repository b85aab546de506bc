"""Command line calculator: read an equation, print what it evaluates to.

    $ calc "2 + 3*4" "2^3^2"
    2+3*4 = 14.0
    2^3^2 = 512.0

Without arguments, prompts for a single line on stdin. Set DEBUG (to anything)
in the environment, or pass -v, for debug logging.
"""
import argparse
import logging
import os
import sys
import timeit

from combinators import ParseError, format_error
from equations import random_equation
from evaluator import calculate, evaluate
from grammar import parse

DEBUG = bool(os.getenv("DEBUG", False))

log = logging.getLogger("calc")


def strip_whitespace(s):
    return "".join(s.split())


def bench(n, seed, number=5):
    equation = random_equation(n, seed)
    rest, tree = parse(equation)
    assert not rest, f"random equation not fully parsed, {len(rest)} chars left"
    parse_time = timeit.timeit(lambda: parse(equation), number=number) / number
    eval_time = timeit.timeit(lambda: evaluate(tree), number=number) / number
    print(f"{n} numbers, {len(equation)} chars")
    print(f"parse:    {parse_time * 1e3:.2f} ms")
    print(f"evaluate: {eval_time * 1e3:.2f} ms")


def main(argv=None):
    ap = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    ap.add_argument("equations", nargs="*", help="equations to evaluate")
    ap.add_argument("--bench", type=int, metavar="N", help="time parsing a random N-number equation")
    ap.add_argument("--seed", type=int, default=0, help="seed for --bench")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if DEBUG or args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.bench is not None:
        bench(args.bench, args.seed)
        return 0

    lines = args.equations
    if not lines:
        print("Enter equation: ", end="", flush=True)
        lines = [sys.stdin.readline()]

    status = 0
    for line in lines:
        equation = strip_whitespace(line)
        log.debug("evaluating %r", equation)
        try:
            ans = calculate(equation)
        except ParseError as e:
            print(f"{equation} = error: {e}")
            print(format_error(equation, e), file=sys.stderr)
            status = 1
        else:
            print(f"{equation} = {ans!r}")
    return status


if __name__ == "__main__":
    sys.exit(main())
