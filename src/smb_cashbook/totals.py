# SMB CashBook - Bookkeeping dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Category breakdowns for the balance-sheet donut charts.

Entries are grouped by their raw category string. Missing or blank
categories are grouped under "Uncategorized" and never dropped. The output
keeps the order in which each category first appears in the input, so chart
colours assigned by position stay stable across refreshes of the same data.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .amounts import ZERO, coerce_amount
from .bucketing import effective_day
from .models import UNCATEGORIZED, CategoryTotal, DateRange, Entry


@dataclass(frozen=True)
class DonutChart:
    """Slices and grand total of one donut chart."""

    key: str
    title: str
    slices: list[CategoryTotal]
    total: Decimal


def category_key(category: Optional[str]) -> str:
    if category is None:
        return UNCATEGORIZED
    key = str(category)
    if not key.strip():
        return UNCATEGORIZED
    return key


def totals_by_category(entries: Iterable[Entry]) -> list[CategoryTotal]:
    """Sum amounts per category, in order of first occurrence."""
    totals: dict[str, Decimal] = {}
    for entry in entries:
        key = category_key(entry.category)
        totals[key] = totals.get(key, ZERO) + coerce_amount(entry.amount)

    return [CategoryTotal(category=k, total=v) for k, v in totals.items()]


def _in_range(entries: Iterable[Entry], date_range: Optional[DateRange]) -> list[Entry]:
    if date_range is None:
        return list(entries)
    return [e for e in entries if date_range.contains(effective_day(e))]


def balance_sheet_donuts(
    assets: Iterable[Entry],
    liabilities: Iterable[Entry],
    equities: Iterable[Entry],
    date_range: Optional[DateRange] = None,
) -> list[DonutChart]:
    """
    Build the asset donut and the combined liability & equity donut.

    The second donut lists liability slices first, then equity slices; the
    two groups are concatenated, not merged, even if a category name
    appears in both.

    Args:
        date_range: Optional filter. The dashboard shows balances over the
            whole history, so by default every entry is counted.
    """
    asset_slices = totals_by_category(_in_range(assets, date_range))
    liability_slices = totals_by_category(_in_range(liabilities, date_range))
    equity_slices = totals_by_category(_in_range(equities, date_range))
    combined = liability_slices + equity_slices

    return [
        DonutChart(
            key="assets",
            title="Total assets",
            slices=asset_slices,
            total=sum((s.total for s in asset_slices), ZERO),
        ),
        DonutChart(
            key="liabilities_equity",
            title="Liabilities & equity",
            slices=combined,
            total=sum((s.total for s in combined), ZERO),
        ),
    ]
