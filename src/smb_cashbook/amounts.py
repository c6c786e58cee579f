# SMB CashBook - Bookkeeping dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Amount helpers for SMB CashBook.

All monetary values handled by the aggregation functions are
``decimal.Decimal`` values expressed in the reference currency. Records coming
from the backend are loosely typed (numbers, numeric strings, empty strings,
nulls), so every amount goes through ``coerce_amount()`` before it is summed.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def coerce_amount(value: Any) -> Decimal:
    """
    Normalize a raw numeric value to a finite Decimal.

    Malformed values never raise: ``None``, blank strings, booleans, NaN,
    infinities and anything that cannot be parsed as a number are coerced
    to ``Decimal(0)``.

    Floats are converted through ``str()`` so that ``0.1`` becomes
    ``Decimal("0.1")`` rather than its binary expansion.
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    else:
        raw = str(value).strip()
        if not raw:
            return ZERO
        try:
            result = Decimal(raw)
        except (InvalidOperation, ValueError):
            return ZERO

    if not result.is_finite():
        return ZERO
    return result


def is_valid_amount(value: Any) -> bool:
    """Return True if ``value`` parses as a finite number (used for logging)."""
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, (int, Decimal)):
        return not isinstance(value, Decimal) or value.is_finite()
    raw = str(value).strip()
    if not raw:
        return False
    try:
        return Decimal(raw).is_finite()
    except (InvalidOperation, ValueError):
        return False
