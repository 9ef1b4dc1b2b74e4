"""Data models for the EMI calculator.

This module defines the dataclasses passed between the engine and the
presentation layers: the raw loan inputs, the flat/reducing rate pair, the
result bundle produced by a computation and individual schedule rows. Result
objects are frozen; a new calculation always produces a new bundle.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional


class RateType(str, Enum):
    """How ``LoanInputs.rate_or_emi_value`` should be interpreted."""

    FLAT = "flat"
    REDUCING = "reducing"
    EMI_AMOUNT = "emi"


class Convention(str, Enum):
    """Interest accrual convention used to expand a schedule."""

    FLAT = "flat"
    REDUCING = "reducing"


@dataclass(frozen=True)
class LoanInputs:
    """Raw loan inputs as supplied by the caller.

    Attributes
    ----------
    on_road_price: Decimal
        Full purchase price of the vehicle (or asset).
    down_payment: Decimal
        Amount paid upfront. Expected to be ``<= on_road_price``; the service
        clamps it when it is not.
    tenure_months: int
        Loan term in months, at least 1.
    rate_type: RateType
        Whether ``rate_or_emi_value`` is a flat annual percent, a reducing
        annual percent or a target monthly EMI.
    rate_or_emi_value: Decimal
        The rate (percent) or EMI amount, interpreted per ``rate_type``.
    """

    on_road_price: Decimal
    down_payment: Decimal
    tenure_months: int
    rate_type: RateType
    rate_or_emi_value: Decimal

    @property
    def principal(self) -> Decimal:
        """The financed amount, never negative."""
        return max(Decimal("0"), self.on_road_price - self.down_payment)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "on_road_price": str(self.on_road_price),
            "down_payment": str(self.down_payment),
            "tenure_months": self.tenure_months,
            "rate_type": self.rate_type.value,
            "rate_or_emi_value": str(self.rate_or_emi_value),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoanInputs":
        return cls(
            on_road_price=Decimal(str(data["on_road_price"])),
            down_payment=Decimal(str(data["down_payment"])),
            tenure_months=int(data["tenure_months"]),
            rate_type=RateType(data["rate_type"]),
            rate_or_emi_value=Decimal(str(data["rate_or_emi_value"])),
        )


@dataclass(frozen=True)
class RatePair:
    """Flat and reducing annual rates (percent) describing the same loan.

    One side is always the source of truth and the other is derived from it
    through :mod:`emi_calc.rates`, so both are populated together.
    """

    flat_annual_percent: Decimal
    reducing_annual_percent: Decimal


@dataclass(frozen=True)
class FlatEmi:
    emi: Decimal
    total_interest: Decimal


@dataclass(frozen=True)
class ResultBundle:
    """The figures for one calculation, both conventions side by side."""

    principal: Decimal
    tenure_months: int
    rate_pair: RatePair
    flat_emi: Decimal
    reducing_emi: Decimal
    flat_total_interest: Decimal
    reducing_total_interest: Decimal
    flat_total_payable: Decimal
    reducing_total_payable: Decimal
    rate_type: RateType = RateType.FLAT
    inputs: Optional[LoanInputs] = field(default=None, compare=False)

    @property
    def flat_rate(self) -> Decimal:
        return self.rate_pair.flat_annual_percent

    @property
    def reducing_rate(self) -> Decimal:
        return self.rate_pair.reducing_annual_percent

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to plain JSON types. Decimals are kept as strings."""
        data: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "rate_pair":
                data["flat_rate"] = str(value.flat_annual_percent)
                data["reducing_rate"] = str(value.reducing_annual_percent)
            elif f.name == "rate_type":
                data["rate_type"] = value.value
            elif f.name == "inputs":
                data["inputs"] = value.to_dict() if value is not None else None
            elif isinstance(value, Decimal):
                data[f.name] = str(value)
            else:
                data[f.name] = value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResultBundle":
        inputs = data.get("inputs")
        return cls(
            principal=Decimal(data["principal"]),
            tenure_months=int(data["tenure_months"]),
            rate_pair=RatePair(
                flat_annual_percent=Decimal(data["flat_rate"]),
                reducing_annual_percent=Decimal(data["reducing_rate"]),
            ),
            flat_emi=Decimal(data["flat_emi"]),
            reducing_emi=Decimal(data["reducing_emi"]),
            flat_total_interest=Decimal(data["flat_total_interest"]),
            reducing_total_interest=Decimal(data["reducing_total_interest"]),
            flat_total_payable=Decimal(data["flat_total_payable"]),
            reducing_total_payable=Decimal(data["reducing_total_payable"]),
            rate_type=RateType(data.get("rate_type", RateType.FLAT.value)),
            inputs=LoanInputs.from_dict(inputs) if inputs else None,
        )


@dataclass(frozen=True)
class ScheduleRow:
    """One month of an amortization schedule.

    ``remaining_balance`` is the balance after this month's installment and is
    never negative.
    """

    period: int
    installment: Decimal
    principal_component: Decimal
    interest_component: Decimal
    remaining_balance: Decimal
