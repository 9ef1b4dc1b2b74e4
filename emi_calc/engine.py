"""Core calculation engine for the EMI calculator.

This module implements the closed-form EMI formulas for flat-rate and
reducing-balance loans, and the inverse problem of recovering a reducing rate
from a target EMI. All arithmetic is done in ``Decimal``; nothing is rounded
here, rounding is a presentation concern.
"""

from __future__ import annotations

from decimal import Decimal, Overflow, getcontext, localcontext
from typing import Tuple

from .data_models import FlatEmi
from .utils import Number, to_decimal

getcontext().prec = 28  # increase precision for financial calculations

HUNDRED = Decimal(100)
TWELVE = Decimal(12)
MONTHLY_PERCENT = Decimal(1200)

# Bisection bracket for the monthly rate: 0 % to 1200 % a year.
SOLVER_LOWER_BOUND = Decimal(0)
SOLVER_UPPER_BOUND = Decimal(1)
SOLVER_ITERATIONS = 60

# Digits carried while evaluating the annuity factor.
WORKING_PRECISION = 60


def _check_term(tenure_months: int) -> None:
    if tenure_months <= 0:
        raise ValueError("Tenure must be at least 1 month")


def _calculate_annuity_payment(principal: Decimal, rate_per_month: Decimal, term: int) -> Decimal:
    """Return the annuity (equal installment) monthly payment for a loan.

    The formula is:

        payment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the monthly interest rate and
    ``n`` is the number of payments. When the interest rate is zero, the
    payment simplifies to ``P / n``.

    It is evaluated as ``P * i / (1 - (1 + i)^-n)`` in a wider context. A
    rate too small to move ``(1 + i)^n`` away from 1 at that precision pays
    ``P / n``, and a growth factor beyond the exponent range pays the
    interest-only limit ``P * i``.
    """
    _check_term(term)
    if rate_per_month == 0:
        return principal / Decimal(term)
    with localcontext() as ctx:
        ctx.prec = WORKING_PRECISION
        ctx.traps[Overflow] = False
        factor = (1 + rate_per_month) ** term
        if factor == 1:
            payment = None
        else:
            payment = principal * rate_per_month / (1 - 1 / factor)
    if payment is None:
        return principal / Decimal(term)
    return +payment


def flat_emi(principal: Number, flat_annual_percent: Number, tenure_months: int) -> FlatEmi:
    """Return the flat-rate EMI and the total interest over the tenure.

    Flat interest is charged on the original principal for the whole term:

        total_interest = P * (rate / 100) * (n / 12)
        emi = (P + total_interest) / n
    """
    _check_term(tenure_months)
    principal = to_decimal(principal)
    rate = to_decimal(flat_annual_percent)
    years = Decimal(tenure_months) / TWELVE
    total_interest = principal * (rate / HUNDRED) * years
    emi = (principal + total_interest) / Decimal(tenure_months)
    return FlatEmi(emi=emi, total_interest=total_interest)


def reducing_emi(principal: Number, reducing_annual_percent: Number, tenure_months: int) -> Decimal:
    """Return the reducing-balance EMI (standard amortization)."""
    rate_per_month = to_decimal(reducing_annual_percent) / HUNDRED / TWELVE
    return _calculate_annuity_payment(to_decimal(principal), rate_per_month, tenure_months)


def totals(emi: Number, principal: Number, tenure_months: int) -> Tuple[Decimal, Decimal]:
    """Return ``(total_payable, total_interest)`` for a level EMI."""
    total_payable = to_decimal(emi) * Decimal(tenure_months)
    return total_payable, total_payable - to_decimal(principal)


def solve_reducing_rate_from_emi(principal: Number, target_emi: Number, tenure_months: int) -> Decimal:
    """Return the reducing annual rate (percent) that yields ``target_emi``.

    The EMI grows monotonically with the monthly rate, so the rate is found by
    bisection over ``[SOLVER_LOWER_BOUND, SOLVER_UPPER_BOUND]``. The loop always
    runs ``SOLVER_ITERATIONS`` times, which narrows the bracket below 2^-60.

    A target at or below ``principal / n`` (the zero-interest EMI) has no
    positive-rate solution and returns 0 without searching. A target above the
    EMI at the upper bound converges to that bound.
    """
    _check_term(tenure_months)
    principal = to_decimal(principal)
    target = to_decimal(target_emi)

    if principal <= 0 or target <= principal / Decimal(tenure_months):
        return Decimal(0)

    low, high = SOLVER_LOWER_BOUND, SOLVER_UPPER_BOUND
    for _ in range(SOLVER_ITERATIONS):
        mid = (low + high) / 2
        if _calculate_annuity_payment(principal, mid, tenure_months) < target:
            low = mid
        else:
            high = mid
    return (low + high) / 2 * MONTHLY_PERCENT
