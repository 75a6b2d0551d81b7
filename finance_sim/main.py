"""Command-line interface for the financing simulator.

This module uses the ``click`` library to implement a multi-command
interface. Users can compute full amortization schedules, view summaries,
simulate balloon and student-loan products or compare leasing with
financing. Results can be printed to the terminal or exported to JSON.
"""

from __future__ import annotations

import functools
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Optional

import click

from .data_models import GracePeriodParameters, LeasingParameters, LoanParameters
from .engine import SYSTEMS
from .errors import FinanceSimError
from .formatter import print_comparison, print_grace_period, print_schedule, print_summary
from .logging_config import setup_logging
from .rates import CATEGORY_OFFSETS, adjusted_rate, default_rate
from .serialization import export_to_json
from .settings import get_settings
from .simulations import compare_leasing, simulate_balloon, simulate_financing, simulate_grace_period
from .utils import decimal_from_str, parse_amount, parse_percent


def _amount(value: Optional[str], name: str) -> Decimal:
    if value is None:
        return Decimal("0")
    try:
        return parse_amount(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint=name)


def _percent(value: str, name: str) -> Decimal:
    try:
        return parse_percent(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint=name)


def _number(value: str, name: str) -> Decimal:
    try:
        return decimal_from_str(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint=name)


def build_loan_parameters(
    principal: str,
    rate: str,
    term: int,
    down_payment: Optional[str] = None,
    fee: Optional[str] = None,
    iof: bool = False,
) -> LoanParameters:
    """Convert raw option strings into ``LoanParameters``."""
    return LoanParameters(
        principal=_amount(principal, "--principal"),
        periodic_rate=_percent(rate, "--rate"),
        number_of_periods=term,
        opening_fee=_amount(fee, "--fee"),
        include_tax=iof,
        down_payment=_amount(down_payment, "--down-payment"),
    )


def _write_or_none(output: Optional[str], result: Any) -> bool:
    """Export ``result`` when ``output`` is given; return whether it did."""
    if not output:
        return False
    path = Path(output)
    if path.suffix.lower() != ".json":
        raise click.BadParameter("Unsupported output format; use .json", param_hint="--output")
    export_to_json(path, result)
    click.echo(f"Result exported to {path}")
    return True


def _print_limited(schedule, max_rows: int) -> None:
    # Limit schedule length printed to avoid flooding the terminal
    if len(schedule) > max_rows:
        click.echo(f"Schedule has {len(schedule)} rows; showing first {max_rows} rows.")
        print_schedule(schedule[:max_rows])
    else:
        print_schedule(schedule)


def engine_errors(func: Callable) -> Callable:
    """Report engine validation errors as click errors."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except FinanceSimError as exc:
            raise click.ClickException(str(exc))

    return wrapper


def loan_options(func: Callable) -> Callable:
    """Options shared by the financing commands."""
    options = [
        click.option("--principal", "-p", "principal", required=True, help="Asset price or amount requested"),
        click.option("--rate", "-r", "rate", required=True, help="Monthly interest rate (percent)"),
        click.option("--term", "-t", "term", required=True, type=int, help="Number of monthly installments"),
        click.option("--down-payment", "-d", "down_payment", help="Down payment amount"),
        click.option("--fee", "fee", help="Credit opening fee (TAC) added to the financed amount"),
        click.option("--iof/--no-iof", "iof", default=False, help="Finance the IOF tax together with the loan"),
        click.option("--cet", "cet", is_flag=True, help="Also solve the effective total cost (CET)"),
        click.option("--output", "output", type=str, help="Output file path (.json)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option("--log-level", "log_level", help="Logging level (overrides FINANCE_SIM_LOG_LEVEL)")
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str]) -> None:
    """A command-line simulator for Brazilian consumer financing."""
    settings = get_settings()
    setup_logging(log_level or settings.log_level, settings.log_json)
    ctx.obj = settings


@cli.command()
@loan_options
@click.option("--system", "system", type=click.Choice(SYSTEMS), default="price", help="Amortization system")
@click.pass_obj
@engine_errors
def schedule(settings, principal, rate, term, down_payment, fee, iof, cet, output, system) -> None:
    """Compute and print the full amortization schedule."""
    params = build_loan_parameters(principal, rate, term, down_payment, fee, iof)
    result = simulate_financing(params, system=system, with_effective_rate=cet)
    if _write_or_none(output, result):
        return
    print_summary(result)
    _print_limited(result.schedule, settings.max_rows)


@cli.command()
@loan_options
@click.option("--system", "system", type=click.Choice(SYSTEMS), default="price", help="Amortization system")
@engine_errors
def summary(principal, rate, term, down_payment, fee, iof, cet, output, system) -> None:
    """Compute and print only the summary metrics for a financing."""
    params = build_loan_parameters(principal, rate, term, down_payment, fee, iof)
    result = simulate_financing(params, system=system, with_effective_rate=cet)
    if not _write_or_none(output, result):
        print_summary(result)


@cli.command()
@loan_options
@click.option("--balloon", "balloon", required=True, help="Share of the principal deferred to the final payment (percent)")
@click.option("--show-schedule", "show_schedule", is_flag=True, help="Print the schedule after the summary")
@click.pass_obj
@engine_errors
def balloon(settings, principal, rate, term, down_payment, fee, iof, cet, output, balloon, show_schedule) -> None:
    """Simulate a financing with a balloon (VFG) final installment."""
    params = build_loan_parameters(principal, rate, term, down_payment, fee, iof)
    result = simulate_balloon(params, _number(balloon, "--balloon"), with_effective_rate=cet)
    if _write_or_none(output, result):
        return
    print_summary(result)
    if show_schedule:
        _print_limited(result.schedule, settings.max_rows)


@cli.command("grace-period")
@click.option("--tuition", "tuition", required=True, help="Monthly tuition")
@click.option("--financed", "financed", default="100", show_default=True, help="Share of the tuition financed (percent)")
@click.option("--semesters", "semesters", required=True, type=int, help="Course duration in semesters")
@click.option("--annual-rate", "annual_rate", required=True, help="Nominal annual interest rate (percent)")
@click.option(
    "--multiplier",
    "multiplier",
    type=click.Choice(["1", "1.5", "2", "3"]),
    default="1",
    show_default=True,
    help="Amortization term as a multiple of the course duration",
)
@click.option("--income", "income", help="Monthly income, to report the share taken by the installment")
@click.option("--show-schedule", "show_schedule", is_flag=True, help="Print the amortization schedule")
@click.option("--output", "output", type=str, help="Output file path (.json)")
@click.pass_obj
@engine_errors
def grace_period(settings, tuition, financed, semesters, annual_rate, multiplier, income, show_schedule, output) -> None:
    """Simulate a FIES-style student loan with a grace period."""
    params = GracePeriodParameters(
        monthly_tuition=_amount(tuition, "--tuition"),
        financed_percentage=_number(financed, "--financed"),
        course_duration_semesters=semesters,
        annual_rate=_percent(annual_rate, "--annual-rate"),
        amortization_multiplier=Decimal(multiplier),
        monthly_income=_amount(income, "--income") if income else None,
    )
    result = simulate_grace_period(params)
    if _write_or_none(output, result):
        return
    print_grace_period(result)
    if show_schedule:
        _print_limited(result.schedule, settings.max_rows)


@cli.command()
@click.option("--price", "price", required=True, help="Vehicle price")
@click.option("--down-payment", "down_payment", default="20", show_default=True, help="Down payment (percent of price)")
@click.option("--financing-rate", "financing_rate", required=True, help="Monthly financing rate (percent)")
@click.option("--leasing-rate", "leasing_rate", required=True, help="Monthly leasing rate (percent)")
@click.option("--term", "-t", "term", required=True, type=int, help="Number of monthly installments")
@click.option("--residual", "residual", default="20", show_default=True, help="Residual value (percent of price)")
@click.option("--business", "business", is_flag=True, help="Apply the business tax deduction to the lease")
@click.option("--deduction-rate", "deduction_rate", default="25", show_default=True, help="Deductible share of lease payments (percent)")
@click.option("--output", "output", type=str, help="Output file path (.json)")
@engine_errors
def leasing(price, down_payment, financing_rate, leasing_rate, term, residual, business, deduction_rate, output) -> None:
    """Compare leasing a vehicle with financing it."""
    params = LeasingParameters(
        vehicle_price=_amount(price, "--price"),
        down_payment_percentage=_number(down_payment, "--down-payment"),
        financing_rate=_percent(financing_rate, "--financing-rate"),
        leasing_rate=_percent(leasing_rate, "--leasing-rate"),
        number_of_periods=term,
        residual_percentage=_number(residual, "--residual"),
        business_filer=business,
        tax_deduction_rate=_percent(deduction_rate, "--deduction-rate"),
    )
    result = compare_leasing(params)
    if not _write_or_none(output, result):
        print_comparison(result)


@cli.command()
@click.option("--category", "category", required=True, type=click.Choice(sorted(CATEGORY_OFFSETS)), help="Vehicle category")
@click.option("--used", "used", is_flag=True, help="The vehicle is used")
@click.option("--base-rate", "base_rate", help="Base monthly rate (percent); defaults to the vehicle type's reference rate")
@engine_errors
def rate(category, used, base_rate) -> None:
    """Print the monthly rate adjusted for a vehicle category."""
    if base_rate is None:
        base = default_rate(category.split("-", 1)[0])
    else:
        base = _percent(base_rate, "--base-rate")
    adjusted = adjusted_rate(category, used, base)
    click.echo(f"Base rate     : {base * 100:.2f}%")
    click.echo(f"Adjusted rate : {adjusted * 100:.2f}%")


if __name__ == "__main__":
    cli()
