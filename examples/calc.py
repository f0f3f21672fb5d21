"""
Sample functions for the embedded runtime.

    callbridge call calculate_tax "[100, 0.2]" --root examples
    callbridge repl --root examples
"""
from decimal import Decimal


def calculate_tax(amount: float, rate: float) -> float:
    return amount * rate


def hello(name: str) -> str:
    return f"{GREETING}, {name}!"


def totals(rows: list) -> list:
    """Sum each row of a nested list."""
    return [sum(row) for row in rows]


def precise_total(*amounts) -> Decimal:
    return sum((Decimal(str(amount)) for amount in amounts), Decimal(0))


def make_multiplier(factor: int):
    # Functions have no dynamic value form; calling this reports UnsupportedShape
    def multiply(x):
        return x * factor
    return multiply
