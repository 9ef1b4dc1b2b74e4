"""Command‑line interface for the EMI calculator.

This module uses the ``click`` library to implement a multi‑command
interface. Users can compare flat and reducing EMIs for a loan, print or
export the month-by-month schedule for either convention, or convert a rate
between the two conventions. Results can be printed to the terminal or
exported to JSON/CSV files.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from decimal import DecimalException
from pathlib import Path
from typing import Any, Dict, Optional

import click

from .data_models import Convention, LoanInputs, RateType, ResultBundle
from .exceptions import InvalidLoanInputs
from .formatter import (
    format_percent,
    print_schedule,
    print_summary,
    schedule_to_csv,
    serialize_schedule,
)
from .rates import rate_pair_from
from .schedule import generate_schedule
from .service import compute
from .settings import Settings
from .utils import parse_amount, parse_percent, parse_tenure

RATE_TYPE_CHOICES = [t.value for t in RateType]
CONVENTION_CHOICES = [c.value for c in Convention]

logger = logging.getLogger(__name__)


def _amount(value: Optional[str], name: str) -> Any:
    if value is None or not str(value).strip():
        return 0
    try:
        return parse_amount(str(value))
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint=name)


def build_inputs_from_options(
    price: str,
    down_payment: Optional[str],
    tenure: str,
    rate_type: str,
    value: str,
) -> LoanInputs:
    """Turn raw option strings into ``LoanInputs``.

    Blank amounts are treated as zero, matching what an empty form field
    means. Malformed values raise ``click.BadParameter``.
    """
    try:
        tenure_months = parse_tenure(tenure)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="tenure")
    kind = RateType(rate_type.lower())
    if kind == RateType.EMI_AMOUNT:
        rate_or_emi = _amount(value, "value")
    else:
        try:
            rate_or_emi = parse_percent(str(value)) if str(value).strip() else 0
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="value")
    return LoanInputs(
        on_road_price=_amount(price, "price"),
        down_payment=_amount(down_payment, "down-payment"),
        tenure_months=tenure_months,
        rate_type=kind,
        rate_or_emi_value=rate_or_emi,
    )


def compute_or_fail(inputs: LoanInputs, settings: Settings) -> ResultBundle:
    """Run :func:`~emi_calc.service.compute` for a front end.

    Tenures beyond ``settings.max_tenure_months`` are refused before anything
    is computed. Rejected inputs and figures outside the ``Decimal`` range
    surface as click exceptions, which both the CLI and the web app report.
    """
    if inputs.tenure_months > settings.max_tenure_months:
        raise click.BadParameter(
            f"Tenure must not exceed {settings.max_tenure_months} months", param_hint="tenure"
        )
    try:
        return compute(inputs, settings)
    except InvalidLoanInputs as exc:
        raise click.UsageError(str(exc))
    except DecimalException as exc:
        logger.debug("Decimal arithmetic failed", exc_info=True)
        raise click.ClickException(f"Calculation failed, the inputs are out of range ({type(exc).__name__})")


def export_to_json(path: Path, bundle: ResultBundle, convention: Optional[Convention] = None) -> None:
    """Export the bundle, and optionally one schedule, to a JSON file."""
    data: Dict[str, Any] = {"summary": bundle.to_dict()}
    if convention is not None:
        data["convention"] = convention.value
        data["schedule"] = serialize_schedule(generate_schedule(bundle, convention))
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, bundle: ResultBundle, convention: Convention) -> None:
    """Export one schedule to a CSV file."""
    with path.open("w", newline="", encoding="utf-8") as f:
        f.write(schedule_to_csv(generate_schedule(bundle, convention)))


def loan_options(func):
    """Attach the options shared by every loan command."""
    options = [
        click.option("--price", "-p", "price", required=True, help="On-road price (accepts 5,00,000 / 500k / 5l)"),
        click.option("--down-payment", "-d", "down_payment", default="0", help="Down payment amount"),
        click.option("--tenure", "-t", "tenure", required=True, help="Tenure in months (or years with a y suffix)"),
        click.option(
            "--rate-type",
            "rate_type",
            type=click.Choice(RATE_TYPE_CHOICES),
            default=RateType.FLAT.value,
            show_default=True,
            help="How to read --value: flat %, reducing % or a target EMI",
        ),
        click.option("--value", "-v", "value", required=True, help="Annual rate in percent, or the EMI amount"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option("--strict/--no-strict", "strict", default=None, help="Reject out-of-range inputs instead of clamping")
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, strict: Optional[bool], verbose: bool) -> None:
    """A command‑line EMI calculator comparing flat and reducing rates."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(asctime)s %(name)s %(message)s",
    )
    settings = Settings.from_env()
    if strict is not None:
        settings = dataclasses.replace(settings, strict_inputs=strict)
    ctx.obj = settings


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
@click.pass_obj
def summary(
    settings: Settings,
    price: str,
    down_payment: Optional[str],
    tenure: str,
    rate_type: str,
    value: str,
    output: Optional[str],
) -> None:
    """Compute and print flat and reducing figures side by side."""
    inputs = build_inputs_from_options(price, down_payment, tenure, rate_type, value)
    bundle = compute_or_fail(inputs, settings)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension")
        export_to_json(path, bundle)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(bundle, settings.currency_symbol)


@cli.command()
@loan_options
@click.option(
    "--convention",
    "-c",
    "convention",
    type=click.Choice(CONVENTION_CHOICES),
    default=Convention.REDUCING.value,
    show_default=True,
    help="Which schedule to expand",
)
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
@click.pass_obj
def schedule(
    settings: Settings,
    price: str,
    down_payment: Optional[str],
    tenure: str,
    rate_type: str,
    value: str,
    convention: str,
    output: Optional[str],
) -> None:
    """Compute and print the month-by-month schedule."""
    inputs = build_inputs_from_options(price, down_payment, tenure, rate_type, value)
    bundle = compute_or_fail(inputs, settings)
    chosen = Convention(convention)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, bundle, chosen)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, bundle, chosen)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Schedule exported to {path}")
    else:
        print_summary(bundle, settings.currency_symbol)
        print_schedule(generate_schedule(bundle, chosen), settings.currency_symbol)


@cli.command()
@click.option(
    "--from",
    "source",
    type=click.Choice(CONVENTION_CHOICES),
    default=Convention.FLAT.value,
    show_default=True,
    help="Convention of --rate",
)
@click.option("--rate", "-r", "rate", required=True, help="Annual rate in percent")
@click.option("--tenure", "-t", "tenure", required=True, help="Tenure in months (or years with a y suffix)")
def convert(source: str, rate: str, tenure: str) -> None:
    """Convert an annual rate between flat and reducing conventions."""
    try:
        rate_value = parse_percent(rate)
        tenure_months = max(1, parse_tenure(tenure))
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    try:
        pair = rate_pair_from(RateType(source), rate_value, tenure_months)
    except DecimalException as exc:
        raise click.ClickException(f"Conversion failed, the rate is out of range ({type(exc).__name__})")
    click.echo(f"Flat     : {format_percent(pair.flat_annual_percent)}")
    click.echo(f"Reducing : {format_percent(pair.reducing_annual_percent)}")


if __name__ == "__main__":
    cli()
