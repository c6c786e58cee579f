from datetime import date
from decimal import Decimal

import pytest

from smb_cashbook.metrics import compare_periods, compute_metrics
from smb_cashbook.models import (
    AggregatedBucket,
    CategoryTotal,
    Entry,
    EntryKind,
    ProfitBar,
)
from smb_cashbook.totals import DonutChart
from smb_cashbook.views import (
    cashflow_to_dataframe,
    comparison_to_dataframe,
    donut_to_dataframe,
    format_axis_label,
    format_change,
    format_compact_number,
    metrics_to_dataframe,
    net_profit_to_dataframe,
    sources_to_dataframe,
    to_display,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (950, "950"),
        (1_500, "1.5K"),
        (2_500_000, "2.5M"),
        (3_000_000_000, "3.0B"),
        (4_200_000_000_000, "4.2T"),
        (Decimal("-1500000"), "-1.5M"),
    ],
)
def test_format_compact_number(value, expected) -> None:
    assert format_compact_number(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [(900, "900"), (45_000, "45K"), (2_500_000, "2.5M"), (0, "0")],
)
def test_format_axis_label(value, expected) -> None:
    assert format_axis_label(value) == expected


@pytest.mark.parametrize(
    "pct, expected",
    [
        (Decimal("12.34"), "+12.3%"),
        (Decimal("-4"), "-4.0%"),
        (Decimal("0"), "0.0%"),
    ],
)
def test_format_change(pct, expected) -> None:
    assert format_change(pct) == expected


def test_to_display_applies_rate_then_rounds() -> None:
    assert to_display(Decimal("1000000"), rate=0.5) == 500000
    assert to_display(Decimal("10.126"), decimals=2) == pytest.approx(10.13)


def test_cashflow_dataframe() -> None:
    points = [
        AggregatedBucket("1-4/1", Decimal(100), Decimal(40), date(2025, 1, 1), date(2025, 1, 4)),
        AggregatedBucket(""),
    ]
    df = cashflow_to_dataframe(points)

    assert list(df.columns) == ["label", "start", "end", "cash_in", "cash_out", "net"]
    assert df.loc[0, "net"] == 60
    assert df.loc[0, "start"] == "2025-01-01"
    assert df.loc[1, "start"] == ""


def test_sources_dataframe_keeps_order() -> None:
    df = sources_to_dataframe({"income": Decimal(10), "expense": Decimal(5)})
    assert df["source"].tolist() == ["income", "expense"]


def test_net_profit_dataframe() -> None:
    df = net_profit_to_dataframe([ProfitBar("5/1", Decimal(-20), date(2025, 1, 1), date(2025, 1, 5))])
    assert df.loc[0, "label"] == "5/1"
    assert df.loc[0, "net_profit"] == -20


def test_metrics_dataframe() -> None:
    income = Entry(EntryKind.INCOME, Decimal(1_000_000), date(2025, 1, 1), tax_percent=Decimal(10))
    expense = Entry(EntryKind.EXPENSE, Decimal(200_000), date(2025, 1, 1))
    df = metrics_to_dataframe(compute_metrics([income], [expense]))

    values = dict(zip(df["key"], df["value"]))
    assert values["gross_profit"] == 1_000_000
    assert values["ebitda"] == 100_000
    assert values["net_profit"] == 700_000
    assert df["display"].iloc[-1] == "0.0%"


def test_comparison_dataframe() -> None:
    cur = [Entry(EntryKind.INCOME, Decimal(150), date(2025, 2, 1))]
    prev = [Entry(EntryKind.INCOME, Decimal(100), date(2025, 1, 1))]
    df = comparison_to_dataframe(compare_periods(cur, [], prev, []))

    income = df[df["measure"] == "income"].iloc[0]
    assert income["change"] == "+50.0%"
    assert income["direction"] == "up"


def test_donut_dataframe_shares() -> None:
    donut = DonutChart(
        key="assets",
        title="Total assets",
        slices=[
            CategoryTotal("bangunan", Decimal(750_000)),
            CategoryTotal("inventory", Decimal(250_000)),
        ],
        total=Decimal(1_000_000),
    )
    df = donut_to_dataframe(donut)

    assert df["share_pct"].tolist() == [75.0, 25.0]
    assert df["legend"].tolist() == ["750.0K", "250.0K"]


def test_empty_donut() -> None:
    df = donut_to_dataframe(DonutChart("assets", "Total assets", [], Decimal(0)))
    assert df.empty
