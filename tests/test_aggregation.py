import math
from datetime import date, timedelta
from decimal import Decimal

import pytest

from smb_cashbook.aggregation import (
    NO_DATA_LABEL,
    aggregate,
    aggregate_net_profit,
    ensure_two_points,
    format_span,
    pad_profit_bars,
    prepare_cashflow_series,
)
from smb_cashbook.models import AggregatedBucket, DailyBucket, DailyProfit


def _daily(n: int, start: date = date(2025, 1, 1)) -> list[DailyBucket]:
    return [
        DailyBucket(
            date=start + timedelta(days=i),
            cash_in=Decimal(i + 1),
            cash_out=Decimal(i) / 2,
        )
        for i in range(n)
    ]


def test_forty_days_to_twelve_points() -> None:
    daily = _daily(40)

    out = aggregate(daily, 12)

    assert len(out) == math.ceil(40 / math.ceil(40 / 12)) == 10
    assert len(out) <= 12
    assert sum(b.cash_in for b in out) == sum(d.cash_in for d in daily)
    assert sum(b.cash_out for b in out) == sum(d.cash_out for d in daily)


@pytest.mark.parametrize("n", [0, 1, 5, 12, 13, 31, 50, 51, 90, 365])
@pytest.mark.parametrize("max_points", [1, 5, 12])
def test_aggregate_preserves_sums(n, max_points) -> None:
    daily = _daily(n)
    out = aggregate(daily, max_points)

    assert len(out) <= max_points
    assert sum((b.cash_in for b in out), Decimal(0)) == sum(
        (d.cash_in for d in daily), Decimal(0)
    )
    assert sum((b.cash_out for b in out), Decimal(0)) == sum(
        (d.cash_out for d in daily), Decimal(0)
    )


def test_short_series_keeps_one_point_per_day() -> None:
    out = aggregate(_daily(3), 12)
    assert [b.label for b in out] == ["1/1", "2/1", "3/1"]


def test_chunks_are_contiguous_and_cover_every_day() -> None:
    daily = _daily(40)
    out = aggregate(daily, 12)

    assert out[0].start == daily[0].date
    assert out[-1].end == daily[-1].date
    for prev, nxt in zip(out, out[1:]):
        assert nxt.start == prev.end + timedelta(days=1)


@pytest.mark.parametrize(
    "first, last, label",
    [
        (date(2025, 1, 2), date(2025, 1, 2), "2/1"),
        (date(2025, 1, 1), date(2025, 1, 4), "1-4/1"),
        (date(2025, 1, 29), date(2025, 2, 3), "29/1-3/2"),
    ],
)
def test_span_labels(first, last, label) -> None:
    assert format_span(first, last) == label


def test_max_points_must_be_positive() -> None:
    with pytest.raises(ValueError):
        aggregate(_daily(5), 0)


def test_aggregate_is_deterministic() -> None:
    daily = _daily(77)
    assert aggregate(daily, 12) == aggregate(daily, 12)


def test_series_up_to_threshold_is_not_aggregated() -> None:
    series = prepare_cashflow_series(_daily(50), max_points=12, threshold=50)
    assert not series.aggregated
    assert len(series.points) == 50


def test_series_above_threshold_is_aggregated() -> None:
    series = prepare_cashflow_series(_daily(51), max_points=12, threshold=50)
    assert series.aggregated
    assert len(series.points) <= 12


def test_ensure_two_points_pads_empty_and_single_series() -> None:
    empty = ensure_two_points([])
    assert [b.label for b in empty] == [NO_DATA_LABEL, ""]
    assert all(b.cash_in == 0 and b.cash_out == 0 for b in empty)

    single = [AggregatedBucket(label="1/1", cash_in=Decimal(5))]
    padded = ensure_two_points(single)
    assert [b.label for b in padded] == ["1/1", ""]
    assert padded[1].cash_in == 0
    # the input is left untouched
    assert len(single) == 1


def _profits(n: int) -> list[DailyProfit]:
    start = date(2025, 3, 1)
    return [
        DailyProfit(date=start + timedelta(days=i), net_profit=Decimal(10))
        for i in range(n)
    ]


def test_net_profit_bars_use_last_day_as_label() -> None:
    bars = aggregate_net_profit(_profits(10), bars=5)

    assert len(bars) == 5
    assert [b.label for b in bars] == ["2/3", "4/3", "6/3", "8/3", "10/3"]
    assert sum(b.net_profit for b in bars) == Decimal(100)


def test_single_day_net_profit_is_padded() -> None:
    bars = pad_profit_bars(aggregate_net_profit(_profits(1), bars=5))
    assert [b.label for b in bars] == ["1/3", ""]
    assert bars[1].net_profit == 0


def test_empty_net_profit_gives_no_data_bar() -> None:
    bars = pad_profit_bars(aggregate_net_profit([], bars=5))
    assert bars[0].label == NO_DATA_LABEL
    assert bars[0].net_profit == 0


def test_series_above_threshold_that_fits_is_not_flagged_aggregated() -> None:
    series = prepare_cashflow_series(_daily(60), max_points=100, threshold=50)
    assert not series.aggregated
    assert len(series.points) == 60
