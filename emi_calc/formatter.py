"""Output helpers for the EMI calculator.

Two number formats are used on purpose. Amounts shown on screen use the
currency symbol, Indian digit grouping (``12,34,567``) and no decimals; the
CSV export uses bare numbers with exactly two decimals and no grouping so
that spreadsheets can parse it. Terminal output relies only on built-in
printing and string formatting.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Dict, Iterable, List, Optional, Union

from .data_models import Convention, ResultBundle, ScheduleRow
from .settings import DEFAULT_SETTINGS

CSV_HEADER = ["Month", "EMI", "Principal", "Interest", "Balance"]
TWO_PLACES = Decimal("0.01")


def _round(value: Decimal, exponent: Decimal) -> Decimal:
    """Round half up to ``exponent``, widening the precision for big amounts."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() - exponent.adjusted() + 2)
        return value.quantize(exponent, rounding=ROUND_HALF_UP)


def _group_indian(digits: str) -> str:
    """Insert Indian-style separators: last three digits, then pairs."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_currency(value: Optional[Union[Decimal, float, int]], symbol: Optional[str] = None) -> str:
    """Format an amount for display, e.g. ``₹5,70,000``.

    ``None`` and NaN render as zero.
    """
    if symbol is None:
        symbol = DEFAULT_SETTINGS.currency_symbol
    amount = Decimal(0) if value is None else Decimal(str(value))
    if amount.is_nan():
        amount = Decimal(0)
    whole = _round(amount, Decimal(1))
    sign = "-" if whole < 0 else ""
    return f"{sign}{symbol}{_group_indian(str(whole.copy_abs()))}"


def format_percent(value: Union[Decimal, float]) -> str:
    """Format a rate for badges and labels, e.g. ``8.50%``."""
    return f"{_round(Decimal(str(value)), TWO_PLACES)}%"


def _two_places(value: Decimal) -> str:
    return f"{_round(value, TWO_PLACES):.2f}"


def schedule_to_csv(rows: Iterable[ScheduleRow]) -> str:
    """Render schedule rows as CSV text with a ``Month,EMI,...`` header."""
    lines = [",".join(CSV_HEADER)]
    for row in rows:
        lines.append(
            ",".join(
                [
                    str(row.period),
                    _two_places(row.installment),
                    _two_places(row.principal_component),
                    _two_places(row.interest_component),
                    _two_places(row.remaining_balance),
                ]
            )
        )
    return "\n".join(lines) + "\n"


def schedule_filename(convention: Union[Convention, str]) -> str:
    return f"emi_schedule_{Convention(convention).value}.csv"


def serialize_schedule(rows: Iterable[ScheduleRow]) -> List[Dict[str, Any]]:
    """Convert schedule rows into JSON-serialisable dictionaries."""
    return [
        {
            "month": row.period,
            "emi": float(row.installment),
            "principal": float(row.principal_component),
            "interest": float(row.interest_component),
            "balance": float(row.remaining_balance),
        }
        for row in rows
    ]


def comparison_chart_data(bundle: ResultBundle) -> Dict[str, Any]:
    """Return the grouped bar chart comparing both conventions."""

    def series(*values: Decimal) -> List[float]:
        return [round(float(v), 2) for v in values]

    return {
        "labels": ["Monthly EMI", "Total Interest", "Total Payable"],
        "datasets": [
            {
                "label": f"Flat ({format_percent(bundle.flat_rate)})",
                "data": series(bundle.flat_emi, bundle.flat_total_interest, bundle.flat_total_payable),
            },
            {
                "label": f"Reducing ({format_percent(bundle.reducing_rate)})",
                "data": series(bundle.reducing_emi, bundle.reducing_total_interest, bundle.reducing_total_payable),
            },
        ],
    }


def print_summary(bundle: ResultBundle, symbol: Optional[str] = None) -> None:
    """Print both conventions side by side in a human‑readable format."""

    def money(value: Decimal) -> str:
        return format_currency(value, symbol)

    print("Summary")
    print("-" * 60)
    print(f"{'':20s} {'Flat':>18s} {'Reducing':>18s}")
    print(f"{'Rate (annual)':20s} {format_percent(bundle.flat_rate):>18s} {format_percent(bundle.reducing_rate):>18s}")
    print(f"{'Loan amount':20s} {money(bundle.principal):>18s} {money(bundle.principal):>18s}")
    print(f"{'Monthly EMI':20s} {money(bundle.flat_emi):>18s} {money(bundle.reducing_emi):>18s}")
    print(
        f"{'Total interest':20s} {money(bundle.flat_total_interest):>18s} "
        f"{money(bundle.reducing_total_interest):>18s}"
    )
    print(
        f"{'Total payable':20s} {money(bundle.flat_total_payable):>18s} "
        f"{money(bundle.reducing_total_payable):>18s}"
    )
    print(f"Tenure             : {bundle.tenure_months} months")
    print("-" * 60)


def print_schedule(rows: Iterable[ScheduleRow], symbol: Optional[str] = None) -> None:
    """Print the amortization schedule as a simple table."""
    print("\t".join(["Month", "EMI", "Principal", "Interest", "Balance"]))
    for row in rows:
        print(
            "\t".join(
                [
                    str(row.period),
                    format_currency(row.installment, symbol),
                    format_currency(row.principal_component, symbol),
                    format_currency(row.interest_component, symbol),
                    format_currency(row.remaining_balance, symbol),
                ]
            )
        )
