# utils/money.py
"""Decimal helpers for currency amounts (two decimal places, half-up)."""
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

CENT = Decimal("0.01")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
     """Convert to Decimal without going through binary float artefacts."""
     if isinstance(value, Decimal):
          return value
     if isinstance(value, float):
          return Decimal(str(value))
     return Decimal(value)


def to_money(value: Number) -> Decimal:
     """Round to cents, half-up."""
     return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
