"""Checked unsigned integer arithmetic.

Every function is stateless and operates on plain Python ints. Python ints do
not overflow, so the unsigned domains are enforced explicitly: token amounts
live in u64 and intermediate products in u128. Leaving a domain is always an
error, never a saturation or a wrap.

Division is floor division (`//`) on non-negative operands.
"""

from __future__ import annotations

import math

from ..errors import ArithmeticOverflow, DivisionByZero

U64_MAX: int = (1 << 64) - 1
U128_MAX: int = (1 << 128) - 1


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def _require_unsigned(name: str, value: int, bound: int) -> None:
    _require_int(name, value)
    if value < 0:
        raise ArithmeticOverflow(f"{name} is negative: {value}")
    if value > bound:
        raise ArithmeticOverflow(f"{name} exceeds bound {bound}: {value}")


def require_amount(name: str, value: int) -> int:
    """Validate a token amount: an int in [0, U64_MAX]."""
    _require_int(name, value)
    if value < 0:
        raise ArithmeticOverflow(f"{name} must be non-negative: {value}")
    if value > U64_MAX:
        raise ArithmeticOverflow(f"{name} does not fit in u64: {value}")
    return int(value)


def checked_add(a: int, b: int, *, bound: int = U128_MAX) -> int:
    _require_unsigned("a", a, bound)
    _require_unsigned("b", b, bound)
    out = a + b
    if out > bound:
        raise ArithmeticOverflow(f"addition overflow: {a} + {b} > {bound}")
    return out


def checked_sub(a: int, b: int, *, bound: int = U128_MAX) -> int:
    _require_unsigned("a", a, bound)
    _require_unsigned("b", b, bound)
    if b > a:
        raise ArithmeticOverflow(f"subtraction underflow: {a} - {b} < 0")
    return a - b


def checked_mul(a: int, b: int, *, bound: int = U128_MAX) -> int:
    _require_unsigned("a", a, bound)
    _require_unsigned("b", b, bound)
    out = a * b
    if out > bound:
        raise ArithmeticOverflow(f"multiplication overflow: {a} * {b} > {bound}")
    return out


def checked_div(a: int, b: int, *, bound: int = U128_MAX) -> int:
    """Floor division ``a // b``; ``b == 0`` raises DivisionByZero."""
    _require_unsigned("a", a, bound)
    _require_unsigned("b", b, bound)
    if b == 0:
        raise DivisionByZero(f"division by zero: {a} / 0")
    return a // b


def mul_div_floor(a: int, b: int, denominator: int, *, bound: int = U128_MAX) -> int:
    """``floor(a * b / denominator)`` with the product checked against ``bound``."""
    return checked_div(checked_mul(a, b, bound=bound), denominator, bound=bound)


def isqrt(n: int) -> int:
    """Floor integer square root. Exact for any size (no float rounding)."""
    _require_unsigned("n", n, U128_MAX)
    return math.isqrt(n)


def to_u64(value: int, *, name: str = "value") -> int:
    """Narrow an intermediate result back to the u64 amount domain."""
    return require_amount(name, value)
