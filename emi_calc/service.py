"""Loan computation service.

``compute`` is the single entry point used by the CLI and the web app. It
normalizes the raw inputs, resolves both the flat and the reducing rate from
whichever value the caller supplied, and returns a fresh ``ResultBundle``.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import List, Optional

from .data_models import LoanInputs, RatePair, RateType, ResultBundle
from .engine import flat_emi, reducing_emi, solve_reducing_rate_from_emi, totals
from .exceptions import InvalidLoanInputs
from .rates import rate_pair_from, reducing_to_flat
from .settings import DEFAULT_SETTINGS, Settings
from .utils import to_decimal

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def normalize_inputs(inputs: LoanInputs, settings: Settings = DEFAULT_SETTINGS) -> LoanInputs:
    """Return ``inputs`` with every out-of-range field clamped.

    Clamping is silent by default. With ``settings.strict_inputs`` the
    violations are collected and raised as ``InvalidLoanInputs`` instead.
    """
    price = to_decimal(inputs.on_road_price)
    down = to_decimal(inputs.down_payment)
    value = to_decimal(inputs.rate_or_emi_value)
    tenure = int(inputs.tenure_months)
    rate_type = RateType(inputs.rate_type)
    problems: List[str] = []

    if tenure < 1:
        problems.append(f"tenure_months must be at least 1 (got {tenure})")
        tenure = 1
    if price < 0:
        problems.append(f"on_road_price must not be negative (got {price})")
        price = ZERO
    if down < 0:
        problems.append(f"down_payment must not be negative (got {down})")
        down = ZERO
    if down > price:
        problems.append(f"down_payment {down} exceeds on_road_price {price}")
        down = price
    if value < 0:
        problems.append(f"rate_or_emi_value must not be negative (got {value})")
        value = ZERO

    if problems:
        if settings.strict_inputs:
            raise InvalidLoanInputs(problems)
        for problem in problems:
            logger.debug("Clamped input: %s", problem)

    return replace(
        inputs,
        on_road_price=price,
        down_payment=down,
        tenure_months=tenure,
        rate_type=rate_type,
        rate_or_emi_value=value,
    )


def _resolve_rates(inputs: LoanInputs) -> RatePair:
    tenure = inputs.tenure_months
    if inputs.rate_type == RateType.EMI_AMOUNT:
        reducing = solve_reducing_rate_from_emi(inputs.principal, inputs.rate_or_emi_value, tenure)
        # Flat rate is re-approximated from the solved reducing rate.
        return RatePair(flat_annual_percent=reducing_to_flat(reducing, tenure), reducing_annual_percent=reducing)
    return rate_pair_from(inputs.rate_type, inputs.rate_or_emi_value, tenure)


def compute(inputs: LoanInputs, settings: Optional[Settings] = None) -> ResultBundle:
    """Compute both flat and reducing figures for ``inputs``.

    Parameters
    ----------
    inputs: LoanInputs
        Raw inputs. Out-of-range values are clamped (or rejected in strict
        mode, see :func:`normalize_inputs`).
    settings: Settings, optional
        Defaults to :data:`emi_calc.settings.DEFAULT_SETTINGS`.

    Returns
    -------
    ResultBundle
        A new immutable bundle. In EMI mode the flat EMI is recomputed from
        the approximated flat rate and will generally differ from the target.
    """
    settings = settings or DEFAULT_SETTINGS
    inputs = normalize_inputs(inputs, settings)
    principal = inputs.principal
    tenure = inputs.tenure_months

    rate_pair = _resolve_rates(inputs)
    flat = flat_emi(principal, rate_pair.flat_annual_percent, tenure)
    reducing = reducing_emi(principal, rate_pair.reducing_annual_percent, tenure)
    flat_total_payable = flat.emi * Decimal(tenure)
    reducing_total_payable, reducing_total_interest = totals(reducing, principal, tenure)

    logger.debug(
        "Computed %s loan: principal=%s tenure=%d flat=%s%% reducing=%s%%",
        inputs.rate_type.value,
        principal,
        tenure,
        rate_pair.flat_annual_percent,
        rate_pair.reducing_annual_percent,
    )

    return ResultBundle(
        principal=principal,
        tenure_months=tenure,
        rate_pair=rate_pair,
        flat_emi=flat.emi,
        reducing_emi=reducing,
        flat_total_interest=flat.total_interest,
        reducing_total_interest=reducing_total_interest,
        flat_total_payable=flat_total_payable,
        reducing_total_payable=reducing_total_payable,
        rate_type=inputs.rate_type,
        inputs=inputs,
    )
