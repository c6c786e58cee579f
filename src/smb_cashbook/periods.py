# SMB CashBook - Bookkeeping dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Period helpers for SMB CashBook.

This module defines a Period value object and helpers to derive reporting
periods from the dashboard quick filters (today, week, month, quarter, year),
from full calendar months (current month, last month) and from CLI
arguments.
"""

from calendar import monthrange
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from .bucketing import effective_day
from .models import DateRange, Entry

PERIOD_CHOICES: tuple[str, ...] = (
    "today",
    "week",
    "month",
    "quarter",
    "year",
    "current-month",
    "last-month",
)


@dataclass
class Period:
    """Represents a reporting period with a human-readable label."""

    start: date
    end: date
    label: str

    @property
    def date_range(self) -> DateRange:
        return DateRange(start=self.start, end=self.end)


def _today() -> date:
    """Return today's date as a date object (isolated for easier testing)."""
    return datetime.today().date()


def period_today() -> Period:
    today = _today()
    return Period(start=today, end=today, label="Today")


def period_week() -> Period:
    """Last seven days up to and including today."""
    today = _today()
    return Period(start=today - timedelta(days=7), end=today, label="Last 7 days")


def period_month() -> Period:
    """Month-to-date."""
    today = _today()
    return Period(start=today.replace(day=1), end=today, label="Month to date")


def period_quarter() -> Period:
    """Quarter-to-date."""
    today = _today()
    first_month = (today.month - 1) // 3 * 3 + 1
    start = date(today.year, first_month, 1)
    return Period(start=start, end=today, label="Quarter to date")


def period_year() -> Period:
    """Year-to-date."""
    today = _today()
    return Period(start=date(today.year, 1, 1), end=today, label="Year to date")


def period_current_month(today: Optional[date] = None) -> Period:
    """Full current calendar month, including days still to come."""
    today = today or _today()
    last_day = monthrange(today.year, today.month)[1]
    return Period(
        start=today.replace(day=1),
        end=date(today.year, today.month, last_day),
        label="Current month",
    )


def period_last_month(today: Optional[date] = None) -> Period:
    """Full previous calendar month."""
    today = today or _today()

    if today.month == 1:
        year = today.year - 1
        month = 12
    else:
        year = today.year
        month = today.month - 1

    last_day = monthrange(year, month)[1]
    return Period(
        start=date(year, month, 1),
        end=date(year, month, last_day),
        label="Last month",
    )


_PRESETS = {
    "today": period_today,
    "week": period_week,
    "month": period_month,
    "quarter": period_quarter,
    "year": period_year,
    "current-month": period_current_month,
    "last-month": period_last_month,
}


def period_from_name(name: str) -> Period:
    """Return the preset period called ``name`` (see PERIOD_CHOICES)."""
    try:
        factory = _PRESETS[name]
    except KeyError as exc:
        raise ValueError(f"Unknown period: {name!r}") from exc
    return factory()


def previous_period(period: Period) -> Period:
    """The period of equal length ending the day before ``period`` starts."""
    previous = period.date_range.shifted_back()
    return Period(
        start=previous.start,
        end=previous.end,
        label=f"Previous period ({previous.start} → {previous.end})",
    )


def determine_period_from_args(args, default: str = "month") -> Period:
    """
    Determine the reporting period to use based on CLI args.

    Priority (highest to lowest):

        1. args.period (one of PERIOD_CHOICES)
        2. args.from_date / args.to_date (custom period; a missing bound is
           taken from the default period)
        3. the default period
    """
    # 1) Predefined period wins over everything else
    if getattr(args, "period", None):
        return period_from_name(args.period)

    # 2) Custom from/to dates
    from_raw: Optional[str] = getattr(args, "from_date", None)
    to_raw: Optional[str] = getattr(args, "to_date", None)

    if from_raw or to_raw:
        fallback = period_from_name(default)
        start = date.fromisoformat(from_raw) if from_raw else fallback.start
        end = date.fromisoformat(to_raw) if to_raw else fallback.end

        if end < start:
            raise ValueError("Custom period end date cannot be before start date.")

        label = f"Custom period ({start} → {end})"
        return Period(start=start, end=end, label=label)

    # 3) Default preset
    return period_from_name(default)


def filter_entries_by_range(
    entries: Iterable[Entry], date_range: DateRange
) -> list[Entry]:
    """
    Keep only entries whose effective date falls within ``date_range``.

    Undated entries are dropped. The input is left untouched.
    """
    return [e for e in entries if date_range.contains(effective_day(e))]
