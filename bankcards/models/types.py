"""
Custom column types.

Money:
  Balances are handled in Python as Decimal with exactly two fraction digits
  and stored in the database as integer cents (e.g., 10.50 is stored as 1050).
  Integer storage means the database never sees a float, and arithmetic in
  Python stays exact because Decimal("0.10") + Decimal("0.20") == Decimal("0.30").
"""

from decimal import Decimal, ROUND_HALF_EVEN

from sqlalchemy import Integer
from sqlalchemy.types import TypeDecorator

CENT = Decimal("0.01")


def to_money(value: Decimal | int | str) -> Decimal:
    """Normalize a value to a Decimal with two fraction digits.

    Raises:
        ValueError: If the value has more than two fraction digits.
    """
    amount = Decimal(value)
    quantized = amount.quantize(CENT, rounding=ROUND_HALF_EVEN)
    if quantized != amount:
        raise ValueError(f"Amount {value} has more than 2 decimal places")
    return quantized


class Money(TypeDecorator):
    """Decimal(2 places) on the Python side, integer cents in the database."""

    impl = Integer
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return int(to_money(value) * 100)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return (Decimal(value) / 100).quantize(CENT)
