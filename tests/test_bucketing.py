from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from smb_cashbook.bucketing import (
    bucketize,
    bucketize_net_profit,
    days_between,
    effective_day,
    entry_tax,
    iter_days,
)
from smb_cashbook.models import DailyBucket, DateRange, Entry, EntryKind


def _entry(kind, amount, day, category=None, tax=None) -> Entry:
    return Entry(
        kind=kind,
        amount=Decimal(str(amount)),
        occurred_on=day,
        category=category,
        tax_percent=None if tax is None else Decimal(str(tax)),
    )


def test_three_day_range_with_one_income() -> None:
    """One income on Jan 2 gives three buckets with the income in the middle."""
    entries = [_entry(EntryKind.INCOME, 500, date(2025, 1, 2))]
    rng = DateRange(date(2025, 1, 1), date(2025, 1, 3))

    buckets = bucketize(entries, rng)

    assert buckets == [
        DailyBucket(date(2025, 1, 1), Decimal(0), Decimal(0)),
        DailyBucket(date(2025, 1, 2), Decimal(500), Decimal(0)),
        DailyBucket(date(2025, 1, 3), Decimal(0), Decimal(0)),
    ]


@pytest.mark.parametrize("length", [1, 2, 7, 31, 60, 366])
def test_bucket_count_matches_range_length(length) -> None:
    start = date(2024, 2, 1)
    end = start + timedelta(days=length - 1)
    rng = DateRange(start, end)

    assert len(bucketize([], rng)) == days_between(start, end) + 1
    assert len(bucketize_net_profit([], [], rng)) == length


def test_buckets_are_contiguous_and_ascending() -> None:
    rng = DateRange(date(2025, 2, 27), date(2025, 3, 2))
    days = [b.date for b in bucketize([], rng)]
    assert days == list(iter_days(rng))
    assert all(b - a == timedelta(days=1) for a, b in zip(days, days[1:]))


def test_out_of_range_and_undated_entries_are_skipped() -> None:
    rng = DateRange(date(2025, 1, 1), date(2025, 1, 2))
    entries = [
        _entry(EntryKind.INCOME, 10, date(2024, 12, 31)),
        _entry(EntryKind.INCOME, 20, date(2025, 1, 3)),
        _entry(EntryKind.INCOME, 40, None),
        _entry(EntryKind.INCOME, 5, date(2025, 1, 1)),
    ]
    buckets = bucketize(entries, rng)
    assert sum(b.cash_in for b in buckets) == Decimal(5)


def test_unclassified_entries_do_not_count() -> None:
    rng = DateRange(date(2025, 1, 1), date(2025, 1, 1))
    entries = [
        _entry(EntryKind.EQUITY, 1000, date(2025, 1, 1), category="dividend"),
        _entry(EntryKind.EQUITY, 300, date(2025, 1, 1), category="initial"),
        _entry(EntryKind.EQUITY, 100, date(2025, 1, 1), category="withdrawal"),
    ]
    [bucket] = bucketize(entries, rng)
    assert bucket.cash_in == Decimal(300)
    assert bucket.cash_out == Decimal(100)


def test_asset_scenario_cash_flow() -> None:
    day = date(2025, 1, 1)
    entries = [
        _entry(EntryKind.ASSET, 100, day, "bangunan"),
        _entry(EntryKind.ASSET, 50, day, "inventory"),
        _entry(EntryKind.ASSET, 30, day, "bangunan"),
    ]
    [bucket] = bucketize(entries, DateRange(day, day))
    assert bucket.cash_out == Decimal(130)
    assert bucket.cash_in == Decimal(50)


def test_bucketize_does_not_round() -> None:
    day = date(2025, 1, 1)
    entries = [
        _entry(EntryKind.INCOME, "0.1", day),
        _entry(EntryKind.INCOME, "0.2", day),
    ]
    [bucket] = bucketize(entries, DateRange(day, day))
    assert bucket.cash_in == Decimal("0.3")


def test_bucketize_is_deterministic_and_leaves_input_untouched() -> None:
    rng = DateRange(date(2025, 1, 1), date(2025, 1, 10))
    entries = [
        _entry(EntryKind.INCOME, 100, date(2025, 1, 3)),
        _entry(EntryKind.EXPENSE, 40, date(2025, 1, 3)),
        _entry(EntryKind.LIABILITY, 70, date(2025, 1, 8), "bank_loan"),
    ]
    snapshot = list(entries)

    assert bucketize(entries, rng) == bucketize(entries, rng)
    assert entries == snapshot


def test_effective_day_accepts_datetimes() -> None:
    entry = Entry(
        kind=EntryKind.INCOME,
        amount=Decimal(1),
        occurred_on=datetime(2025, 5, 6, 23, 59),
    )
    assert effective_day(entry) == date(2025, 5, 6)


def test_entry_tax_treats_missing_percent_as_zero() -> None:
    assert entry_tax(_entry(EntryKind.INCOME, 1000, date(2025, 1, 1))) == 0
    assert entry_tax(_entry(EntryKind.INCOME, 1000, date(2025, 1, 1), tax=10)) == 100


def test_net_profit_per_day() -> None:
    day1 = date(2025, 1, 1)
    day2 = date(2025, 1, 2)
    incomes = [_entry(EntryKind.INCOME, 1_000_000, day1, tax=10)]
    expenses = [
        _entry(EntryKind.EXPENSE, 200_000, day1),
        _entry(EntryKind.EXPENSE, 50_000, day2),
    ]

    daily = bucketize_net_profit(incomes, expenses, DateRange(day1, day2))

    assert daily[0].income == Decimal(1_000_000)
    assert daily[0].tax == Decimal(100_000)
    assert daily[0].net_profit == Decimal(700_000)
    assert daily[1].net_profit == Decimal(-50_000)


def test_invalid_range_is_rejected() -> None:
    with pytest.raises(ValueError):
        DateRange(date(2025, 1, 2), date(2025, 1, 1))
