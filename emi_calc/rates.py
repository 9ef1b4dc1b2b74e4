"""Conversion between flat and reducing-balance annual rates.

The conversion uses the common rule of thumb

    reducing ≈ 2 × flat / (n + 1)

where ``n`` is the tenure in months. It is a linear approximation rather than
an exact inversion of the amortization formula; it exists so both rates can be
shown next to each other. The two functions are exact algebraic inverses of
each other.
"""

from __future__ import annotations

from decimal import Decimal

from .data_models import RatePair, RateType
from .utils import Number, to_decimal

TWO = Decimal(2)


def flat_to_reducing(flat_annual_percent: Number, tenure_months: int) -> Decimal:
    """Return the approximate reducing annual rate for a flat annual rate."""
    flat = to_decimal(flat_annual_percent)
    return TWO * flat / Decimal(tenure_months + 1)


def reducing_to_flat(reducing_annual_percent: Number, tenure_months: int) -> Decimal:
    """Return the approximate flat annual rate for a reducing annual rate."""
    reducing = to_decimal(reducing_annual_percent)
    return reducing * Decimal(tenure_months + 1) / TWO


def rate_pair_from(rate_type: RateType, annual_percent: Number, tenure_months: int) -> RatePair:
    """Build a ``RatePair`` where ``annual_percent`` is the source of truth.

    ``rate_type`` must be ``FLAT`` or ``REDUCING``; an EMI amount is not a rate
    and has to go through the solver first.
    """
    rate = to_decimal(annual_percent)
    if rate_type == RateType.FLAT:
        return RatePair(flat_annual_percent=rate, reducing_annual_percent=flat_to_reducing(rate, tenure_months))
    if rate_type == RateType.REDUCING:
        return RatePair(flat_annual_percent=reducing_to_flat(rate, tenure_months), reducing_annual_percent=rate)
    raise ValueError(f"Cannot build a rate pair from {rate_type!r}")
