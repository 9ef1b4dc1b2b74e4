"""Amortization schedules for a computed ``ResultBundle``.

Both generators are pure functions of the bundle: they keep no state between
calls and always return one row per month of the tenure, ordered by period.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Union

from .data_models import Convention, ResultBundle, ScheduleRow
from .engine import MONTHLY_PERCENT

ZERO = Decimal("0")


def generate_flat_schedule(bundle: ResultBundle) -> List[ScheduleRow]:
    """Return the flat-rate schedule.

    Flat interest does not depend on the outstanding balance, so the total
    flat interest is spread evenly over every month.
    """
    tenure = bundle.tenure_months
    emi = bundle.flat_emi
    monthly_interest = bundle.flat_total_interest / Decimal(tenure)
    remaining = bundle.principal
    rows: List[ScheduleRow] = []
    for period in range(1, tenure + 1):
        principal_paid = min(remaining, emi - monthly_interest)
        remaining = max(ZERO, remaining - principal_paid)
        rows.append(
            ScheduleRow(
                period=period,
                installment=emi,
                principal_component=principal_paid,
                interest_component=monthly_interest,
                remaining_balance=remaining,
            )
        )
    return rows


def generate_reducing_schedule(bundle: ResultBundle) -> List[ScheduleRow]:
    """Return the reducing-balance schedule.

    Interest each month is charged on the balance still outstanding. The
    balance is floored at zero because rounding can push the last period
    slightly negative.
    """
    emi = bundle.reducing_emi
    rate_per_month = bundle.rate_pair.reducing_annual_percent / MONTHLY_PERCENT
    remaining = bundle.principal
    rows: List[ScheduleRow] = []
    for period in range(1, bundle.tenure_months + 1):
        interest = remaining * rate_per_month
        principal_paid = emi - interest
        remaining = max(ZERO, remaining - principal_paid)
        rows.append(
            ScheduleRow(
                period=period,
                installment=emi,
                principal_component=principal_paid,
                interest_component=interest,
                remaining_balance=remaining,
            )
        )
    return rows


def generate_schedule(bundle: ResultBundle, convention: Union[Convention, str]) -> List[ScheduleRow]:
    """Expand ``bundle`` into the schedule for ``convention``."""
    convention = Convention(convention)
    if convention == Convention.FLAT:
        return generate_flat_schedule(bundle)
    return generate_reducing_schedule(bundle)
