"""
Amount helpers.

USDC amounts travel as decimal strings in the token's smallest unit
(6 decimals); bridge parameters take them as unsigned 64-bit integers.
"""
import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from .exceptions import InvalidAmountError

USDC_DECIMALS = 6
U64_MAX = 2 ** 64 - 1

_UNSIGNED_RE = re.compile(r"\+?[0-9]+")


def parse_u64(value: Optional[str]) -> int:
    """
    Parse a smallest-unit amount string as an unsigned 64-bit integer.

    Args:
        value: Decimal digit string

    Returns:
        The parsed amount

    Raises:
        InvalidAmountError: If value is missing, not an unsigned integer, or
            does not fit in 64 bits
    """
    if value is None or not _UNSIGNED_RE.fullmatch(value):
        raise InvalidAmountError(value)
    amount = int(value)
    if amount > U64_MAX:
        raise InvalidAmountError(value)
    return amount


def parse_positive_u64(value: Optional[str]) -> int:
    """Like ``parse_u64`` but also rejects zero."""
    amount = parse_u64(value)
    if amount == 0:
        raise InvalidAmountError(value)
    return amount


def to_usdc_units(amount: str) -> str:
    """
    Convert a human USDC amount ("1.5") to smallest units ("1500000").

    Raises:
        InvalidAmountError: If the amount is negative, not a number, or has
            more than 6 decimal places
    """
    try:
        value = Decimal(amount)
    except (InvalidOperation, TypeError):
        raise InvalidAmountError(amount)
    if not value.is_finite() or value < 0:
        raise InvalidAmountError(amount)
    units = value.scaleb(USDC_DECIMALS)
    if units != units.to_integral_value():
        raise InvalidAmountError(amount)
    return str(int(units))


def from_usdc_units(units: str) -> str:
    """Convert smallest units ("1500000") to a human amount ("1.5")."""
    value = Decimal(parse_u64(units)).scaleb(-USDC_DECIMALS)
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
