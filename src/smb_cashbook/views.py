# SMB CashBook - Bookkeeping dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
View utilities for SMB CashBook.

This module is the display boundary: it turns the Decimal results of the
aggregation functions into pandas DataFrames ready to be printed or exported
as CSV. It is the only place where amounts are converted to the display
currency and rounded.

Available views:

- cash flow:       one row per chart point (label, cash in, cash out, net),
- cash-flow sources: one row per classification bucket,
- net profit:      one row per bar (label, net profit),
- metrics:         gross profit, tax component, net profit, change,
- comparison:      current month vs last month (income, expense, net profit),
- donuts:          one row per slice with its share of the donut total.

It also provides the compact number formats used by the chart axes and
legends.
"""

from collections.abc import Mapping, Sequence
from decimal import Decimal

import pandas as pd

from .amounts import coerce_amount
from .metrics import PeriodComparison, change_direction
from .models import AggregatedBucket, DerivedMetrics, ProfitBar
from .totals import DonutChart


def to_display(amount, rate: float = 1.0, decimals: int = 0) -> float:
    """Convert a reference-currency amount for display and round it."""
    converted = coerce_amount(amount) * Decimal(str(rate))
    return round(float(converted), decimals)


def format_compact_number(value) -> str:
    """
    Format a large number with a T / B / M / K suffix and one decimal.

    Used for donut legends, e.g. 1_500_000 -> '1.5M'.
    """
    number = float(coerce_amount(value))
    magnitude = abs(number)
    for threshold, suffix in ((1e12, "T"), (1e9, "B"), (1e6, "M"), (1e3, "K")):
        if magnitude >= threshold:
            return f"{number / threshold:.1f}{suffix}"
    if number == int(number):
        return str(int(number))
    return str(number)


def format_axis_label(value) -> str:
    """
    Format a chart axis value: millions with one decimal, thousands with none.

    e.g. 2_500_000 -> '2.5M', 45_000 -> '45K', 900 -> '900'.
    """
    number = int(coerce_amount(value))
    if number >= 1_000_000:
        return f"{number / 1_000_000:.1f}M"
    if number >= 1_000:
        return f"{number / 1_000:.0f}K"
    return str(number)


def format_change(pct, decimals: int = 1) -> str:
    """Format a percentage change as '+12.3%', '-4.0%' or '0.0%'."""
    value = float(coerce_amount(pct))
    direction = change_direction(pct)
    if direction == "up":
        return f"+{value:.{decimals}f}%"
    if direction == "down":
        return f"-{abs(value):.{decimals}f}%"
    return f"{0:.{decimals}f}%"


def cashflow_to_dataframe(
    points: Sequence[AggregatedBucket], rate: float = 1.0, decimals: int = 0
) -> pd.DataFrame:
    """One row per cash-flow chart point: label, start, end, cash_in, cash_out, net."""
    rows: list[dict[str, object]] = []
    for p in points:
        rows.append(
            {
                "label": p.label,
                "start": p.start.isoformat() if p.start else "",
                "end": p.end.isoformat() if p.end else "",
                "cash_in": to_display(p.cash_in, rate, decimals),
                "cash_out": to_display(p.cash_out, rate, decimals),
                "net": to_display(p.cash_in - p.cash_out, rate, decimals),
            }
        )
    return pd.DataFrame(
        rows, columns=["label", "start", "end", "cash_in", "cash_out", "net"]
    )


def sources_to_dataframe(
    sources: Mapping[str, Decimal], rate: float = 1.0, decimals: int = 0
) -> pd.DataFrame:
    """One row per cash-flow source bucket, in the order given."""
    rows = [
        {"source": key, "amount": to_display(value, rate, decimals)}
        for key, value in sources.items()
    ]
    return pd.DataFrame(rows, columns=["source", "amount"])


def net_profit_to_dataframe(
    bars: Sequence[ProfitBar], rate: float = 1.0, decimals: int = 0
) -> pd.DataFrame:
    rows = [
        {
            "label": b.label,
            "start": b.start.isoformat() if b.start else "",
            "end": b.end.isoformat() if b.end else "",
            "net_profit": to_display(b.net_profit, rate, decimals),
        }
        for b in bars
    ]
    return pd.DataFrame(rows, columns=["label", "start", "end", "net_profit"])


def metrics_to_dataframe(
    metrics: DerivedMetrics, rate: float = 1.0, decimals: int = 0
) -> pd.DataFrame:
    """Key / value table of the derived metrics of one period."""
    rows = [
        {"key": "gross_profit", "value": to_display(metrics.gross_profit, rate, decimals)},
        {"key": "ebitda", "value": to_display(metrics.ebitda, rate, decimals)},
        {"key": "total_expense", "value": to_display(metrics.total_expense, rate, decimals)},
        {"key": "net_profit", "value": to_display(metrics.net_profit, rate, decimals)},
    ]
    df = pd.DataFrame(rows, columns=["key", "value"])
    df["display"] = [
        format_compact_number(v) for v in df["value"]
    ]
    change = pd.DataFrame(
        [
            {
                "key": "percent_change_vs_previous_period",
                "value": round(float(metrics.percent_change_vs_previous_period), 1),
                "display": format_change(metrics.percent_change_vs_previous_period),
            }
        ]
    )
    return pd.concat([df, change], ignore_index=True)


def comparison_to_dataframe(
    comparison: PeriodComparison, rate: float = 1.0, decimals: int = 0
) -> pd.DataFrame:
    """Current vs previous values with the formatted change and its direction."""
    items = [
        (
            "income",
            comparison.current.gross_profit,
            comparison.previous.gross_profit,
            comparison.income_change_pct,
        ),
        (
            "expense",
            comparison.current.total_expense,
            comparison.previous.total_expense,
            comparison.expense_change_pct,
        ),
        (
            "net_profit",
            comparison.current.net_profit,
            comparison.previous.net_profit,
            comparison.net_profit_change_pct,
        ),
    ]
    rows = [
        {
            "measure": name,
            "current": to_display(current, rate, decimals),
            "previous": to_display(previous, rate, decimals),
            "change": format_change(pct),
            "direction": change_direction(pct),
        }
        for name, current, previous, pct in items
    ]
    return pd.DataFrame(
        rows, columns=["measure", "current", "previous", "change", "direction"]
    )


def donut_to_dataframe(
    donut: DonutChart, rate: float = 1.0, decimals: int = 0
) -> pd.DataFrame:
    """
    One row per donut slice, in slice order.

    ``share_pct`` is the slice's share of the donut total (0 when the total
    is zero).
    """
    rows: list[dict[str, object]] = []
    for position, s in enumerate(donut.slices):
        share = (s.total / donut.total * 100) if donut.total else Decimal(0)
        rows.append(
            {
                "position": position,
                "category": s.category,
                "total": to_display(s.total, rate, decimals),
                "legend": format_compact_number(s.total * Decimal(str(rate))),
                "share_pct": round(float(share), 1),
            }
        )
    return pd.DataFrame(
        rows, columns=["position", "category", "total", "legend", "share_pct"]
    )
