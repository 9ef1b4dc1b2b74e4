"""Runtime configuration for the EMI calculator.

Settings are read from environment variables, the same way the web app reads
its secret key and asset version:

``EMI_CALC_STRICT_INPUTS``
    When truthy (``1``, ``true``, ``yes``, ``on``) out-of-range inputs raise
    :class:`~emi_calc.exceptions.InvalidLoanInputs` instead of being clamped.
``EMI_CALC_CURRENCY_SYMBOL``
    Symbol used for on-screen amounts. Defaults to the rupee sign.
``EMI_CALC_MAX_TENURE_MONTHS``
    Longest tenure the CLI and the web app will compute or expand into a
    schedule. Defaults to 1200 months (100 years).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(value: Optional[str]) -> bool:
    return bool(value) and value.strip().lower() in TRUTHY


@dataclass(frozen=True)
class Settings:
    strict_inputs: bool = False
    currency_symbol: str = "₹"
    max_tenure_months: int = 1200

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            strict_inputs=_env_flag(env.get("EMI_CALC_STRICT_INPUTS")),
            currency_symbol=env.get("EMI_CALC_CURRENCY_SYMBOL", cls.currency_symbol),
            max_tenure_months=int(env.get("EMI_CALC_MAX_TENURE_MONTHS") or cls.max_tenure_months),
        )


DEFAULT_SETTINGS = Settings()
