# SMB CashBook - Bookkeeping dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Dashboard orchestration for SMB CashBook.

This module provides the high-level entry point used to compute every
dashboard section from one account snapshot in a single call.

Overview
--------
``build_dashboard(entry_set, period, options)`` computes:

1. Cash flow
   - one DailyBucket per day of the period (``bucketing.bucketize``),
   - the chart series, day by day or aggregated to ``max_points`` when the
     period is longer than ``aggregate_threshold`` days,
   - totals / daily averages and the breakdown per source.

2. Net profit
   - one DailyProfit per day of the period,
   - the bar series (``net_profit_bars`` bars, padded to two bars),
   - totals and daily average.

3. Profit metrics
   - gross profit, tax component, net profit for the period and the
     percentage change versus the previous period of equal length,
   - the current month versus last month comparison shown on the home
     screen.

4. Balance sheet
   - the asset donut and the combined liability & equity donut.

Separation of concerns
----------------------
- ``classification.py``, ``bucketing.py``, ``aggregation.py``,
  ``metrics.py`` and ``totals.py`` hold the pure computations.
- ``dashboard.py`` only selects the inputs of each computation (which
  entries, which date range) and assembles the results.
- ``views.py`` turns the results into DataFrames for display or export.

The entry set is never modified, so the same snapshot can be reused for
several dashboards (for example with different periods).
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from .aggregation import (
    DEFAULT_AGGREGATE_THRESHOLD,
    DEFAULT_MAX_POINTS,
    DEFAULT_PROFIT_BARS,
    CashFlowSeries,
    aggregate_net_profit,
    ensure_two_points,
    pad_profit_bars,
    prepare_cashflow_series,
)
from .bucketing import bucketize, bucketize_net_profit
from .config import AppConfig
from .metrics import (
    CashFlowSummary,
    NetProfitSummary,
    PeriodComparison,
    cashflow_sources,
    compare_periods,
    compute_metrics,
    summarize_cashflow,
    summarize_net_profit,
)
from .models import (
    DailyBucket,
    DailyProfit,
    DerivedMetrics,
    EntrySet,
    ProfitBar,
)
from .periods import (
    Period,
    filter_entries_by_range,
    period_current_month,
    period_last_month,
    previous_period,
)
from .totals import DonutChart, balance_sheet_donuts

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardOptions:
    cashflow_max_points: int = DEFAULT_MAX_POINTS
    cashflow_aggregate_threshold: int = DEFAULT_AGGREGATE_THRESHOLD
    net_profit_bars: int = DEFAULT_PROFIT_BARS

    @classmethod
    def from_config(cls, config: AppConfig) -> "DashboardOptions":
        return cls(
            cashflow_max_points=config.charts.cashflow_max_points,
            cashflow_aggregate_threshold=config.charts.cashflow_aggregate_threshold,
            net_profit_bars=config.charts.net_profit_bars,
        )


@dataclass(frozen=True)
class Dashboard:
    """Every dashboard section computed for one period."""

    period: Period
    cashflow_daily: list[DailyBucket]
    cashflow_series: CashFlowSeries
    cashflow_summary: CashFlowSummary
    cashflow_sources: dict[str, Decimal]
    net_profit_daily: list[DailyProfit]
    net_profit_bars: list[ProfitBar]
    net_profit_summary: NetProfitSummary
    metrics: DerivedMetrics
    previous_metrics: DerivedMetrics
    monthly_comparison: PeriodComparison
    donuts: list[DonutChart]


def build_dashboard(
    entry_set: EntrySet,
    period: Period,
    options: Optional[DashboardOptions] = None,
    today: Optional[date] = None,
) -> Dashboard:
    """
    Compute all dashboard sections for ``period``.

    Parameters
    ----------
    entry_set :
        Normalized snapshot of the account.
    period :
        Reporting period of the cash-flow and net-profit sections.
    options :
        Chart sizing options; defaults to DashboardOptions().
    today :
        Reference day for the month-over-month comparison; defaults to the
        current date.

    Returns
    -------
    Dashboard
    """
    if options is None:
        options = DashboardOptions()

    date_range = period.date_range
    all_entries = entry_set.all()

    # 1) Cash flow
    cashflow_daily = bucketize(all_entries, date_range)
    series = prepare_cashflow_series(
        cashflow_daily,
        max_points=options.cashflow_max_points,
        threshold=options.cashflow_aggregate_threshold,
    )
    series = CashFlowSeries(
        points=ensure_two_points(series.points), aggregated=series.aggregated
    )

    # 2) Net profit
    net_profit_daily = bucketize_net_profit(
        entry_set.incomes, entry_set.expenses, date_range
    )
    bars = pad_profit_bars(
        aggregate_net_profit(net_profit_daily, bars=options.net_profit_bars)
    )

    # 3) Metrics for the period, compared with the previous period
    prev = previous_period(period)
    previous_metrics = compute_metrics(
        filter_entries_by_range(entry_set.incomes, prev.date_range),
        filter_entries_by_range(entry_set.expenses, prev.date_range),
    )
    metrics = compute_metrics(
        filter_entries_by_range(entry_set.incomes, date_range),
        filter_entries_by_range(entry_set.expenses, date_range),
        previous=previous_metrics,
    )

    # 4) Current month vs last month (home screen summary)
    monthly = _monthly_comparison(entry_set, today)

    # 5) Balance-sheet donuts over the whole history
    donuts = balance_sheet_donuts(
        entry_set.assets, entry_set.liabilities, entry_set.equities
    )

    logger.debug(
        "Dashboard built for %s: %d days, %d chart points",
        period.label,
        len(cashflow_daily),
        len(series.points),
    )

    return Dashboard(
        period=period,
        cashflow_daily=cashflow_daily,
        cashflow_series=series,
        cashflow_summary=summarize_cashflow(cashflow_daily),
        cashflow_sources=cashflow_sources(all_entries, date_range),
        net_profit_daily=net_profit_daily,
        net_profit_bars=bars,
        net_profit_summary=summarize_net_profit(net_profit_daily),
        metrics=metrics,
        previous_metrics=previous_metrics,
        monthly_comparison=monthly,
        donuts=donuts,
    )


def _monthly_comparison(entry_set: EntrySet, today: Optional[date]) -> PeriodComparison:
    """Compare the full current calendar month with the previous one."""
    current = period_current_month(today)
    last = period_last_month(today)

    return compare_periods(
        filter_entries_by_range(entry_set.incomes, current.date_range),
        filter_entries_by_range(entry_set.expenses, current.date_range),
        filter_entries_by_range(entry_set.incomes, last.date_range),
        filter_entries_by_range(entry_set.expenses, last.date_range),
    )
