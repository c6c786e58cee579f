# SMB CashBook - Bookkeeping dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Derived metrics and summaries for SMB CashBook.

1. Profit metrics
   ---------------
   ``compute_metrics(incomes, expenses)`` returns a DerivedMetrics with:

       gross_profit  = sum(income.amount)
       ebitda        = sum(income.amount * income.tax_percent / 100)
       net_profit    = gross_profit - sum(expense.amount) - ebitda

   The tax component is computed entry by entry because the tax percentage
   may differ between incomes. A missing tax percentage counts as 0.

2. Period-over-period change
   --------------------------
   ``percent_change(current, previous)`` returns 0 when ``previous`` is
   exactly zero, otherwise ``(current - previous) / previous * 100``. The
   zero check happens on the exact Decimal value, so a tiny previous value
   is never mistaken for zero and a zero previous value never produces an
   infinite change.

3. Summaries
   ----------
   - ``compare_periods()``     : current vs previous period (home screen).
   - ``summarize_cashflow()``  : totals and daily averages of a cash-flow
                                 series.
   - ``cashflow_sources()``    : in-range totals per classification bucket.
   - ``summarize_net_profit()``: totals and daily average of a net-profit
                                 series.

Nothing in this module rounds; rounding is a display concern.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .amounts import HUNDRED, ZERO, coerce_amount
from .bucketing import effective_day, entry_tax
from .classification import CASHFLOW_BUCKETS, UNCLASSIFIED_BUCKET, classify
from .models import DailyBucket, DailyProfit, DateRange, DerivedMetrics, Entry

UP = "up"
DOWN = "down"
NO_CHANGE = "no_change"


@dataclass(frozen=True)
class PeriodComparison:
    """Current period metrics next to the previous period's."""

    current: DerivedMetrics
    previous: DerivedMetrics
    income_change_pct: Decimal
    expense_change_pct: Decimal
    net_profit_change_pct: Decimal

    @property
    def income_direction(self) -> str:
        return change_direction(self.income_change_pct)

    @property
    def expense_direction(self) -> str:
        return change_direction(self.expense_change_pct)

    @property
    def net_profit_direction(self) -> str:
        return change_direction(self.net_profit_change_pct)


@dataclass(frozen=True)
class CashFlowSummary:
    total_in: Decimal
    total_out: Decimal
    net: Decimal
    average_in: Decimal
    average_out: Decimal
    days: int


@dataclass(frozen=True)
class NetProfitSummary:
    total_income: Decimal
    total_expense: Decimal
    total_tax: Decimal
    total_net_profit: Decimal
    average_net_profit: Decimal
    days: int


def tax_component(incomes: Iterable[Entry]) -> Decimal:
    """Sum of the per-entry tax deductions of ``incomes``."""
    return sum((entry_tax(e) for e in incomes), ZERO)


def percent_change(current, previous) -> Decimal:
    """Percentage change from ``previous`` to ``current`` (0 if previous is 0)."""
    current_d = coerce_amount(current)
    previous_d = coerce_amount(previous)
    if previous_d == 0:
        return ZERO
    return (current_d - previous_d) / previous_d * HUNDRED


def change_direction(pct) -> str:
    """Classify a percentage change as 'up', 'down' or 'no_change'."""
    value = coerce_amount(pct)
    if value > 0:
        return UP
    if value < 0:
        return DOWN
    return NO_CHANGE


def compute_metrics(
    incomes: Iterable[Entry],
    expenses: Iterable[Entry],
    previous: Optional[DerivedMetrics] = None,
) -> DerivedMetrics:
    """
    Compute gross profit, tax component (EBITDA proxy) and net profit.

    Args:
        incomes: Income entries of the period.
        expenses: Expense entries of the period.
        previous: Optional metrics of the previous period. When provided,
            ``percent_change_vs_previous_period`` compares net profits;
            otherwise it is 0.

    Returns:
        A DerivedMetrics instance.
    """
    incomes = list(incomes)
    gross_profit = sum((coerce_amount(e.amount) for e in incomes), ZERO)
    ebitda = tax_component(incomes)
    total_expense = sum((coerce_amount(e.amount) for e in expenses), ZERO)
    net_profit = gross_profit - total_expense - ebitda

    change = ZERO
    if previous is not None:
        change = percent_change(net_profit, previous.net_profit)

    return DerivedMetrics(
        gross_profit=gross_profit,
        ebitda=ebitda,
        total_expense=total_expense,
        net_profit=net_profit,
        percent_change_vs_previous_period=change,
    )


def compare_periods(
    current_incomes: Iterable[Entry],
    current_expenses: Iterable[Entry],
    previous_incomes: Iterable[Entry],
    previous_expenses: Iterable[Entry],
) -> PeriodComparison:
    """Compare income, expense and net profit between two periods."""
    previous = compute_metrics(previous_incomes, previous_expenses)
    current = compute_metrics(current_incomes, current_expenses, previous=previous)

    return PeriodComparison(
        current=current,
        previous=previous,
        income_change_pct=percent_change(current.gross_profit, previous.gross_profit),
        expense_change_pct=percent_change(
            current.total_expense, previous.total_expense
        ),
        net_profit_change_pct=current.percent_change_vs_previous_period,
    )


def summarize_cashflow(daily: Sequence[DailyBucket]) -> CashFlowSummary:
    total_in = sum((d.cash_in for d in daily), ZERO)
    total_out = sum((d.cash_out for d in daily), ZERO)
    days = len(daily)

    return CashFlowSummary(
        total_in=total_in,
        total_out=total_out,
        net=total_in - total_out,
        average_in=total_in / days if days else ZERO,
        average_out=total_out / days if days else ZERO,
        days=days,
    )


def cashflow_sources(
    entries: Iterable[Entry], date_range: DateRange
) -> dict[str, Decimal]:
    """
    Total in-range amount per cash-flow source bucket.

    Every known bucket is present (zero when empty), in display order,
    followed by ``unclassified``.
    """
    totals: dict[str, Decimal] = {bucket: ZERO for bucket in CASHFLOW_BUCKETS}
    totals[UNCLASSIFIED_BUCKET] = ZERO

    for entry in entries:
        if not date_range.contains(effective_day(entry)):
            continue
        bucket = classify(entry).bucket
        totals[bucket] = totals.get(bucket, ZERO) + coerce_amount(entry.amount)

    return totals


def summarize_net_profit(daily: Sequence[DailyProfit]) -> NetProfitSummary:
    total_net = sum((d.net_profit for d in daily), ZERO)
    days = len(daily)

    return NetProfitSummary(
        total_income=sum((d.income for d in daily), ZERO),
        total_expense=sum((d.expense for d in daily), ZERO),
        total_tax=sum((d.tax for d in daily), ZERO),
        total_net_profit=total_net,
        average_net_profit=total_net / days if days else ZERO,
        days=days,
    )
