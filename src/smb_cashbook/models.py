# SMB CashBook - Bookkeeping dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Value objects shared by the aggregation functions of SMB CashBook.

Every type defined here is an immutable dataclass. The aggregation functions
(classification, bucketing, aggregation, metrics, totals) only ever build new
instances and never modify the ones they receive, so a single fetched
snapshot can safely feed every dashboard section.

Amounts are ``decimal.Decimal`` values in the reference currency. Currency
conversion and rounding happen at the display boundary (``views.py``).
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Optional

from .amounts import ZERO

UNCATEGORIZED = "Uncategorized"


class EntryKind(str, Enum):
    """Kind of a bookkeeping record."""

    INCOME = "income"
    EXPENSE = "expense"
    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"


class Direction(str, Enum):
    """Effect of an entry on the liquid cash position."""

    CASH_IN = "cash_in"
    CASH_OUT = "cash_out"
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class Entry:
    """
    Generic financial record, normalized from one backend record.

    Attributes
    ----------
    kind :
        Income, expense, asset, liability or equity.
    amount :
        Amount in the reference currency.
    occurred_on :
        Effective date of the record (see ``normalization.py`` for the
        per-kind rule). ``None`` if the record carried no usable date.
    category :
        Raw category / type string of the record (may be missing).
    tax_percent :
        Tax percentage for income records; missing means 0.
    description :
        Free text, informational only.
    """

    kind: EntryKind
    amount: Decimal
    occurred_on: Optional[date]
    category: Optional[str] = None
    tax_percent: Optional[Decimal] = None
    description: str = ""


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar date range."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(
                f"Invalid date range: end {self.end} is before start {self.start}."
            )

    @property
    def days(self) -> int:
        """Number of calendar days in the range (both ends included)."""
        return (self.end - self.start).days + 1

    def contains(self, day: Optional[date]) -> bool:
        if day is None:
            return False
        return self.start <= day <= self.end

    def shifted_back(self) -> "DateRange":
        """Range of the same length ending the day before this one starts."""
        end = self.start - timedelta(days=1)
        return DateRange(start=end - timedelta(days=self.days - 1), end=end)


@dataclass(frozen=True)
class Classification:
    direction: Direction
    bucket: str


@dataclass(frozen=True)
class DailyBucket:
    """Cash-flow totals for one calendar day."""

    date: date
    cash_in: Decimal = ZERO
    cash_out: Decimal = ZERO


@dataclass(frozen=True)
class AggregatedBucket:
    """
    Cash-flow totals for a contiguous span of days.

    ``start`` and ``end`` are ``None`` only for the zero-valued padding
    bucket added for display (see ``aggregation.ensure_two_points``).
    """

    label: str
    cash_in: Decimal = ZERO
    cash_out: Decimal = ZERO
    start: Optional[date] = None
    end: Optional[date] = None


@dataclass(frozen=True)
class DailyProfit:
    """Income, expense, tax component and net profit for one calendar day."""

    date: date
    income: Decimal = ZERO
    expense: Decimal = ZERO
    tax: Decimal = ZERO
    net_profit: Decimal = ZERO


@dataclass(frozen=True)
class ProfitBar:
    """Net profit summed over a contiguous span of days (bar chart point)."""

    label: str
    net_profit: Decimal = ZERO
    start: Optional[date] = None
    end: Optional[date] = None


@dataclass(frozen=True)
class CategoryTotal:
    category: str
    total: Decimal


@dataclass(frozen=True)
class DerivedMetrics:
    """
    Summary scalars for a set of income and expense entries.

    ``ebitda`` is the tax component derived from each income's tax
    percentage (a simplified proxy, not the accounting EBITDA).
    """

    gross_profit: Decimal
    ebitda: Decimal
    total_expense: Decimal
    net_profit: Decimal
    percent_change_vs_previous_period: Decimal = ZERO


@dataclass(frozen=True)
class EntrySet:
    """All records of one account snapshot, grouped by kind."""

    incomes: tuple[Entry, ...] = field(default_factory=tuple)
    expenses: tuple[Entry, ...] = field(default_factory=tuple)
    assets: tuple[Entry, ...] = field(default_factory=tuple)
    liabilities: tuple[Entry, ...] = field(default_factory=tuple)
    equities: tuple[Entry, ...] = field(default_factory=tuple)

    def all(self) -> list[Entry]:
        return [
            *self.incomes,
            *self.expenses,
            *self.assets,
            *self.liabilities,
            *self.equities,
        ]

    def by_kind(self, kind: EntryKind) -> tuple[Entry, ...]:
        return {
            EntryKind.INCOME: self.incomes,
            EntryKind.EXPENSE: self.expenses,
            EntryKind.ASSET: self.assets,
            EntryKind.LIABILITY: self.liabilities,
            EntryKind.EQUITY: self.equities,
        }[kind]

    def __len__(self) -> int:
        return (
            len(self.incomes)
            + len(self.expenses)
            + len(self.assets)
            + len(self.liabilities)
            + len(self.equities)
        )
