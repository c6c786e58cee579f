# SMB CashBook - Bookkeeping dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Daily bucketing of bookkeeping entries.

Two daily series are built here, both covering every calendar day of the
requested range (no gaps, ascending order, zero-filled when nothing happened):

- ``bucketize()`` : cash in / cash out per day, driving the cash-flow chart.
- ``bucketize_net_profit()`` : income, expense, tax component and net profit
  per day, driving the net-profit bar chart.

Entries dated outside the range, entries without a date and (for the
cash-flow series) unclassified entries are silently skipped. Amounts are
summed as Decimals with no rounding.
"""

from collections.abc import Iterable, Iterator
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

from .amounts import HUNDRED, ZERO, coerce_amount
from .classification import classify
from .models import DailyBucket, DailyProfit, DateRange, Direction, Entry


def days_between(start: date, end: date) -> int:
    """Number of whole days from ``start`` to ``end`` (negative if reversed)."""
    return (end - start).days


def iter_days(date_range: DateRange) -> Iterator[date]:
    """Yield every calendar day of ``date_range`` in ascending order."""
    current = date_range.start
    one_day = timedelta(days=1)
    while current <= date_range.end:
        yield current
        current += one_day


def effective_day(entry: Entry) -> Optional[date]:
    """Calendar day of an entry, tolerating datetimes and missing dates."""
    value = entry.occurred_on
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


def entry_tax(entry: Entry) -> Decimal:
    """Tax deduction of a single income entry: amount * tax_percent / 100."""
    return coerce_amount(entry.amount) * coerce_amount(entry.tax_percent) / HUNDRED


def bucketize(entries: Iterable[Entry], date_range: DateRange) -> list[DailyBucket]:
    """
    Build one cash-flow bucket per day of ``date_range``.

    Args:
        entries: Entries of any kind.
        date_range: Inclusive range; always yields ``date_range.days`` buckets.

    Returns:
        A new list of DailyBucket, in chronological order.
    """
    cash_in: dict[date, Decimal] = {}
    cash_out: dict[date, Decimal] = {}

    for entry in entries:
        day = effective_day(entry)
        if not date_range.contains(day):
            continue

        direction = classify(entry).direction
        if direction == Direction.CASH_IN:
            cash_in[day] = cash_in.get(day, ZERO) + coerce_amount(entry.amount)
        elif direction == Direction.CASH_OUT:
            cash_out[day] = cash_out.get(day, ZERO) + coerce_amount(entry.amount)

    return [
        DailyBucket(
            date=day,
            cash_in=cash_in.get(day, ZERO),
            cash_out=cash_out.get(day, ZERO),
        )
        for day in iter_days(date_range)
    ]


def bucketize_net_profit(
    incomes: Iterable[Entry],
    expenses: Iterable[Entry],
    date_range: DateRange,
) -> list[DailyProfit]:
    """
    Build one net-profit bucket per day of ``date_range``.

    For each day: ``net_profit = income - expense - tax`` where ``tax`` is
    the sum of the per-entry tax deductions of that day's incomes.
    """
    income: dict[date, Decimal] = {}
    tax: dict[date, Decimal] = {}
    expense: dict[date, Decimal] = {}

    for entry in incomes:
        day = effective_day(entry)
        if not date_range.contains(day):
            continue
        income[day] = income.get(day, ZERO) + coerce_amount(entry.amount)
        tax[day] = tax.get(day, ZERO) + entry_tax(entry)

    for entry in expenses:
        day = effective_day(entry)
        if not date_range.contains(day):
            continue
        expense[day] = expense.get(day, ZERO) + coerce_amount(entry.amount)

    out: list[DailyProfit] = []
    for day in iter_days(date_range):
        day_income = income.get(day, ZERO)
        day_expense = expense.get(day, ZERO)
        day_tax = tax.get(day, ZERO)
        out.append(
            DailyProfit(
                date=day,
                income=day_income,
                expense=day_expense,
                tax=day_tax,
                net_profit=day_income - day_expense - day_tax,
            )
        )
    return out
