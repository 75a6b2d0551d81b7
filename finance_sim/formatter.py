"""Output helpers for the command-line interface.

Render schedules and simulation summaries as plain text tables. Amounts are
shown with two decimals; rates are shown in percent.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional

from .data_models import (
    BalloonSimulationResult,
    EffectiveRate,
    GracePeriodSimulationResult,
    InstallmentRecord,
    LeasingComparisonResult,
    SimulationResult,
    TaxResult,
)


def _print_tax(tax: Optional[TaxResult]) -> None:
    if tax is None:
        return
    print(f"IOF                : {tax.amount:.2f}")
    print(f"  daily ({tax.days:3d} days) : {tax.daily_component:.2f}")
    print(f"  fixed            : {tax.fixed_component:.2f}")


def _print_effective_rate(rate: Optional[EffectiveRate]) -> None:
    if rate is None:
        return
    note = "" if rate.converged else " (approximate)"
    print(f"CET monthly        : {rate.monthly_rate:.2f}%{note}")
    print(f"CET annual         : {rate.annual_rate:.2f}%{note}")


def print_summary(result: SimulationResult) -> None:
    """Print the summary metrics of a financing simulation."""
    print("Summary")
    print("-" * 72)
    print(f"Net amount         : {result.net_amount:.2f}")
    print(f"Amount financed    : {result.financed_amount:.2f}")
    _print_tax(result.tax)
    label = "First installment" if result.system == "sac" else "Installment"
    print(f"{label:19s}: {result.installment_amount:.2f}")
    if isinstance(result, BalloonSimulationResult):
        print(f"Balloon ({result.balloon_percentage}%)    : {result.balloon_installment_amount:.2f}")
    print(f"Total paid         : {result.total_paid:.2f}")
    print(f"Total interest     : {result.total_interest:.2f}")
    _print_effective_rate(result.effective_rate)
    print(f"Payments           : {result.number_of_periods}")
    print("-" * 72)


def print_schedule(schedule: Iterable[InstallmentRecord]) -> None:
    """Print the amortization schedule as a simple table."""
    headers = ["Period", "Payment", "Interest", "Principal", "Balance"]
    print("\t".join(headers))
    for record in schedule:
        row = [
            str(record.index),
            f"{record.payment_amount:.2f}",
            f"{record.interest_portion:.2f}",
            f"{record.principal_portion:.2f}",
            f"{record.remaining_balance:.2f}",
        ]
        print("\t".join(row))


def print_grace_period(result: GracePeriodSimulationResult) -> None:
    """Print the phases and totals of a student-loan simulation."""
    print("Student loan")
    print("-" * 72)
    print(f"Financed per month : {result.financed_per_month:.2f}")
    print(f"Financed total     : {result.financed_total:.2f}")
    print(f"Course total       : {result.course_total:.2f}")
    print(f"Monthly rate       : {result.monthly_rate * 100:.4f}%")
    print(f"{'Phase':15s} {'Periods':>8s} {'Payment':>12s} {'Total':>14s}")
    for phase in result.phases:
        print(f"{phase.name:15s} {phase.periods:8d} {phase.payment:12.2f} {phase.total:14.2f}")
    print(f"Total paid         : {result.total_paid:.2f}")
    print(f"Total interest     : {result.total_interest:.2f}")
    print(f"Total duration     : {result.total_periods} months")
    if result.income_commitment is not None:
        print(f"Income commitment  : {result.income_commitment:.1f}%")
    print("-" * 72)


def print_comparison(result: LeasingComparisonResult) -> None:
    """Print leasing and financing side by side.

    The difference column is financing minus leasing, so a positive value
    means leasing is cheaper on that metric.
    """
    print("Comparison")
    print("=" * 72)
    print(f"{'Metric':20s} {'Leasing':>15s} {'Financing':>15s} {'Difference':>15s}")
    rows = [
        ("installment", result.leasing.installment_amount, result.financing.installment_amount),
        ("down_payment", result.down_payment, result.down_payment),
        ("installments_total", result.leasing.total_paid, result.financing.total_paid),
        ("residual_value", result.residual_value, Decimal("0")),
        ("total_cost", result.leasing_total_cost, result.financing_total_cost),
        ("net_cost", result.leasing_net_cost, result.financing_total_cost),
    ]
    for key, leasing, financing in rows:
        print(f"{key:20s} {leasing:15.2f} {financing:15.2f} {financing - leasing:15.2f}")
    print("=" * 72)
    print(f"Cheaper (gross)    : {result.gross_winner}")
    print(f"Cheaper (net)      : {result.net_winner}")
    print(f"Difference         : {result.difference_percentage:.2f}%")
