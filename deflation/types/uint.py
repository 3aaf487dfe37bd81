"""
deflation.types.uint — u256 bounds and float-free percent arithmetic.

Python ints are unbounded, so the ledger enforces explicit caps to mirror a
256-bit token ledger: every amount entering the system must satisfy
0 <= n <= U256_MAX. Percent cuts are computed as multiply-then-floor-divide;
operands are range-checked and the division truncates.
"""

from __future__ import annotations

from ..errors import InvalidArgument

U256_MAX: int = (1 << 256) - 1
"""Maximum 256-bit unsigned integer."""


def is_u256(n: object) -> bool:
    """Return True iff n is an int (not bool) with 0 <= n <= U256_MAX."""
    return isinstance(n, int) and not isinstance(n, bool) and 0 <= n <= U256_MAX


def ensure_u256(name: str, value: object) -> int:
    """Validate `value` as a u256 amount; raise InvalidArgument otherwise."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidArgument(f"{name} must be int, got {type(value).__name__}", field_name=name)
    if value < 0:
        raise InvalidArgument(f"{name} must be non-negative", field_name=name)
    if value > U256_MAX:
        raise InvalidArgument(f"{name} exceeds u256", field_name=name)
    return value


def mul_div_floor(a: int, b: int, d: int) -> int:
    """
    floor(a * b / d) for u256 operands.

    The product is a plain Python int (at most 512 bits), so the full u256
    range of `a` and `b` is usable. Raises OverflowError when an operand leaves
    the u256 domain, ZeroDivisionError if d == 0.
    """
    if a < 0 or b < 0 or d < 0:
        raise ValueError("mul_div_floor operands must be non-negative")
    if a > U256_MAX or b > U256_MAX:
        raise OverflowError("mul_div_floor operand exceeds u256")
    if d == 0:
        raise ZeroDivisionError("mul_div_floor by zero")
    return (a * b) // d


def saturating_sub(a: int, b: int) -> int:
    """a - b clamped at 0."""
    return a - b if a > b else 0


__all__ = ["U256_MAX", "is_u256", "ensure_u256", "mul_div_floor", "saturating_sub"]
