"""Random equations, for stress testing and benchmarking the parser."""
import numpy as np

OPERATORS = list("+-*/^")


def random_equation(n: int, seed: int = 0) -> str:
    """Return `n` random 32 bit integers joined by random operators.

    The same `n` and `seed` always give the same equation.

    >>> random_equation(3, seed=42) == random_equation(3, seed=42)
    True
    >>> random_equation(1, seed=7).lstrip("-").isdigit()
    True
    """
    if n < 1:
        raise ValueError(f"need at least one number, not {n}")
    rng = np.random.default_rng(seed)
    nums = rng.integers(-(2**31), 2**31, size=n)
    ops = rng.choice(OPERATORS, size=n - 1)
    return str(nums[0]) + "".join(op + str(x) for op, x in zip(ops, nums[1:]))
