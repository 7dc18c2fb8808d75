"""Decimal money helpers

All monetary values are held as Decimal quantised to two places. Floats
never enter the arithmetic: values are converted through ``str`` first.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

MONEY_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")

Number = Union[Decimal, int, str, float]


def to_money(value: Number) -> Decimal:
    """Convert a number to a Decimal rounded half-up to cents"""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def is_settled(balance: Decimal) -> bool:
    """A balance at or below zero means nothing is owed"""
    return to_money(balance) <= ZERO


def amount_due(balance: Decimal) -> Decimal:
    """Outstanding amount; overpayment shows as zero due"""
    return max(to_money(balance), ZERO)
