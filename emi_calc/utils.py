"""Utility functions for the EMI calculator.

Helpers for coercing user supplied numbers into ``Decimal`` and for parsing
the loosely formatted amounts people type into forms ("5,00,000", "500k").
"""

from __future__ import annotations

import math
from decimal import Decimal, DecimalException, InvalidOperation, getcontext
from typing import Union

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Coerce ``value`` to ``Decimal``.

    Floats go through ``str`` first so that ``0.1`` becomes ``Decimal("0.1")``
    rather than its binary expansion. NaN and infinities are rejected.
    """
    if isinstance(value, Decimal):
        result = value
    else:
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError(f"Invalid numeric value: {value}")
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValueError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return result


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas (both western and Indian grouping) and
    handles both integer and float-like strings. It raises ``ValueError`` if
    conversion fails.
    """
    cleaned = value.replace(",", "").replace("_", "").strip()
    return to_decimal(cleaned)


def parse_amount(value: str) -> Decimal:
    """Parse a money amount with optional ``k``/``m``/``l``/``cr`` suffixes.

    ``"500k"`` is 500 000, ``"1.2m"`` is 1 200 000, ``"4l"`` is four lakh
    (400 000) and ``"1cr"`` is one crore (10 000 000). A leading currency
    symbol is ignored.
    """
    text = value.strip().lower().lstrip("₹$").strip()
    factor = Decimal(1)
    for suffix, multiplier in (("cr", 10_000_000), ("k", 1_000), ("m", 1_000_000), ("l", 100_000)):
        if text.endswith(suffix):
            factor = Decimal(multiplier)
            text = text[: -len(suffix)]
            break
    if not text:
        raise ValueError(f"Invalid amount: {value}")
    amount = decimal_from_str(text)
    try:
        return amount * factor
    except DecimalException as exc:
        raise ValueError(f"Amount out of range: {value}") from exc


def parse_percent(value: str) -> Decimal:
    """Parse a percentage string such as ``"8.5"`` or ``"8.5%"``."""
    text = value.strip()
    if text.endswith("%"):
        text = text[:-1]
    try:
        return decimal_from_str(text)
    except ValueError as exc:
        raise ValueError(f"Invalid percentage: {value}") from exc


def parse_tenure(value: Union[str, int]) -> int:
    """Parse a tenure in months.

    Accepts plain integers and a ``y`` suffix for years (``"5y"`` is 60).
    """
    text = str(value).strip().lower()
    try:
        if text.endswith("y"):
            return int(Decimal(text[:-1]) * 12)
        return int(Decimal(text))
    except (DecimalException, ValueError) as exc:
        raise ValueError(f"Invalid tenure: {value}") from exc
