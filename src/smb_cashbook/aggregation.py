# SMB CashBook - Bookkeeping dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Down-sampling of daily series into a bounded number of chart points.

Chunking rule
-------------
A series of ``n`` days reduced to at most ``max_points`` points is split into
contiguous chunks of ``ceil(n / max_points)`` days, formed left to right. The
last chunk may be shorter and empty chunks are skipped, so the number of
points actually produced is ``ceil(n / ceil(n / max_points))``. No day is
dropped or counted twice, hence the sums of the aggregated points equal the
sums of the daily buckets.

Labels
------
- one day:                  ``d/m``          (e.g. ``2/1``)
- several days, same month: ``d1-d2/m``      (e.g. ``1-4/1``)
- several days, across months: ``d1/m1-d2/m2`` (e.g. ``29/1-3/2``)

Net-profit bars use the last day of their chunk (``d/m``) as label.

Padding
-------
A chart with a single point cannot draw a line or a meaningful bar axis, so
``ensure_two_points()`` / ``pad_profit_bars()`` append a zero-valued point.
This is a display accommodation: the padding never carries data.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from .amounts import ZERO
from .models import AggregatedBucket, DailyBucket, DailyProfit, ProfitBar

NO_DATA_LABEL = "No Data"

DEFAULT_MAX_POINTS = 12
DEFAULT_AGGREGATE_THRESHOLD = 50
DEFAULT_PROFIT_BARS = 5


@dataclass(frozen=True)
class CashFlowSeries:
    """Cash-flow points ready for a line chart."""

    points: list[AggregatedBucket]
    aggregated: bool


def format_day(day: date) -> str:
    return f"{day.day}/{day.month}"


def format_span(first: date, last: date) -> str:
    """Label for a chunk spanning ``first`` to ``last`` (inclusive)."""
    if first == last:
        return format_day(first)
    if first.month == last.month and first.year == last.year:
        return f"{first.day}-{last.day}/{first.month}"
    return f"{format_day(first)}-{format_day(last)}"


def chunk_size(length: int, max_points: int) -> int:
    """Number of days per chunk when reducing ``length`` days."""
    if max_points < 1:
        raise ValueError(f"max_points must be >= 1, got {max_points}.")
    return max(1, math.ceil(length / max_points))


def _chunks(items: Sequence, size: int, count: int) -> list[Sequence]:
    out = []
    for i in range(count):
        chunk = items[i * size : (i + 1) * size]
        if len(chunk) == 0:
            continue
        out.append(chunk)
    return out


def aggregate(daily: Sequence[DailyBucket], max_points: int) -> list[AggregatedBucket]:
    """
    Reduce a daily cash-flow series to at most ``max_points`` buckets.

    If the series already fits, each day becomes its own bucket. Otherwise
    days are merged into contiguous chunks (see module docstring). Sums of
    ``cash_in`` and ``cash_out`` are preserved exactly.

    Raises:
        ValueError: if ``max_points`` is lower than 1.
    """
    size = chunk_size(len(daily), max_points)

    if len(daily) <= max_points:
        return [
            AggregatedBucket(
                label=format_day(d.date),
                cash_in=d.cash_in,
                cash_out=d.cash_out,
                start=d.date,
                end=d.date,
            )
            for d in daily
        ]

    out: list[AggregatedBucket] = []
    for chunk in _chunks(daily, size, max_points):
        first = chunk[0].date
        last = chunk[-1].date
        out.append(
            AggregatedBucket(
                label=format_span(first, last),
                cash_in=sum((d.cash_in for d in chunk), ZERO),
                cash_out=sum((d.cash_out for d in chunk), ZERO),
                start=first,
                end=last,
            )
        )
    return out


def ensure_two_points(buckets: Sequence[AggregatedBucket]) -> list[AggregatedBucket]:
    """
    Return a copy of ``buckets`` holding at least two points.

    - empty series  → ``[No Data (0), "" (0)]``
    - single bucket → the bucket followed by a zero-valued ``""`` bucket
    """
    out = list(buckets)
    if not out:
        out.append(AggregatedBucket(label=NO_DATA_LABEL))
    if len(out) == 1:
        out.append(AggregatedBucket(label=""))
    return out


def prepare_cashflow_series(
    daily: Sequence[DailyBucket],
    max_points: int = DEFAULT_MAX_POINTS,
    threshold: int = DEFAULT_AGGREGATE_THRESHOLD,
) -> CashFlowSeries:
    """
    Build the cash-flow chart points for a daily series.

    Series up to ``threshold`` days are drawn day by day; longer series are
    aggregated to ``max_points`` buckets. ``aggregated`` is True only when
    days were actually merged.
    """
    if len(daily) > threshold:
        points = aggregate(daily, max_points)
        return CashFlowSeries(points=points, aggregated=len(points) < len(daily))
    return CashFlowSeries(points=aggregate(daily, max(len(daily), 1)), aggregated=False)


def aggregate_net_profit(
    daily: Sequence[DailyProfit],
    bars: int = DEFAULT_PROFIT_BARS,
) -> list[ProfitBar]:
    """
    Reduce a daily net-profit series to at most ``bars`` bars.

    Unlike ``aggregate()``, chunking always applies (a 3-day series gives
    three one-day bars) and each bar is labelled with its last day only.
    """
    size = chunk_size(len(daily), bars)

    out: list[ProfitBar] = []
    for chunk in _chunks(daily, size, bars):
        last = chunk[-1].date
        out.append(
            ProfitBar(
                label=format_day(last),
                net_profit=sum((d.net_profit for d in chunk), ZERO),
                start=chunk[0].date,
                end=last,
            )
        )
    return out


def pad_profit_bars(bars: Sequence[ProfitBar]) -> list[ProfitBar]:
    """Same padding rule as ``ensure_two_points()`` for net-profit bars."""
    out = list(bars)
    if not out:
        out.append(ProfitBar(label=NO_DATA_LABEL))
    if len(out) == 1:
        out.append(ProfitBar(label=""))
    return out
