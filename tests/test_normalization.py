import logging
from datetime import date
from decimal import Decimal

import pytest

from smb_cashbook.models import EntryKind
from smb_cashbook.normalization import (
    normalize_record,
    normalize_records,
    normalize_snapshot,
    parse_day,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2025-01-05", date(2025, 1, 5)),
        ("2025-01-05T10:30:00Z", date(2025, 1, 5)),
        ("2025-01-06T03:00:00+07:00", date(2025, 1, 5)),
        (date(2025, 2, 1), date(2025, 2, 1)),
        ("not a date", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_day(value, expected) -> None:
    assert parse_day(value) == expected


def test_income_record() -> None:
    entry = normalize_record(
        EntryKind.INCOME,
        {
            "id": 1,
            "amount": "1000000",
            "incomeTax": 10,
            "incomeDate": "2025-01-02",
            "createdAt": "2025-01-09T00:00:00Z",
            "category": "sales",
        },
    )

    assert entry.kind == EntryKind.INCOME
    assert entry.amount == Decimal(1_000_000)
    assert entry.tax_percent == Decimal(10)
    assert entry.occurred_on == date(2025, 1, 2)
    assert entry.category == "sales"


def test_date_falls_back_to_created_at() -> None:
    entry = normalize_record(
        EntryKind.ASSET,
        {"amount": 5, "assetCategory": "mesin", "createdAt": "2025-03-04T08:00:00Z"},
    )
    assert entry.occurred_on == date(2025, 3, 4)
    assert entry.category == "mesin"


@pytest.mark.parametrize(
    "kind, record, expected_day",
    [
        (EntryKind.EXPENSE, {"spendDate": "2025-01-01", "createdAt": "2025-02-01"}, date(2025, 1, 1)),
        (EntryKind.LIABILITY, {"dueDate": "2025-06-30", "createdAt": "2025-02-01"}, date(2025, 6, 30)),
        (EntryKind.EQUITY, {"equityDate": "2025-01-15", "createdAt": "2025-02-01"}, date(2025, 1, 15)),
    ],
)
def test_effective_date_rule_per_kind(kind, record, expected_day) -> None:
    assert normalize_record(kind, {"amount": 1, **record}).occurred_on == expected_day


def test_kind_specific_amount_and_category_fields() -> None:
    liability = normalize_record(
        EntryKind.LIABILITY,
        {"liabilityAmount": "250", "liabilityCategory": "bank_loan", "dueDate": "2025-01-01"},
    )
    equity = normalize_record(
        EntryKind.EQUITY,
        {"amount": 300, "equityType": "initial", "equityDate": "2025-01-01"},
    )

    assert liability.amount == Decimal(250)
    assert liability.category == "bank_loan"
    assert equity.category == "initial"


def test_malformed_values_are_coerced_and_logged(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="smb_cashbook.normalization"):
        entry = normalize_record(
            EntryKind.EXPENSE, {"id": 7, "amount": "abc", "spendDate": "someday"}
        )

    assert entry.amount == 0
    assert entry.occurred_on is None
    assert "invalid amount" in caplog.text
    assert "no usable date" in caplog.text


def test_tax_is_only_read_for_incomes() -> None:
    entry = normalize_record(EntryKind.EXPENSE, {"amount": 1, "tax": 10})
    assert entry.tax_percent is None


def test_non_mapping_records_are_skipped() -> None:
    entries = normalize_records(EntryKind.INCOME, [{"amount": 1}, "oops", None])
    assert len(entries) == 1


def test_snapshot_accepts_wrapped_sections() -> None:
    payload = {
        "incomes": {"data": {"incomes": [{"amount": 100, "incomeDate": "2025-01-01"}]}},
        "spends": {"data": [{"amount": 40, "spendDate": "2025-01-01"}]},
        "assets": [{"amount": 10, "assetCategory": "inventory"}],
    }

    entry_set = normalize_snapshot(payload)

    assert len(entry_set.incomes) == 1
    assert len(entry_set.expenses) == 1
    assert len(entry_set.assets) == 1
    assert entry_set.liabilities == ()
    assert entry_set.by_kind(EntryKind.ASSET) == entry_set.assets
    assert len(entry_set) == 3


def test_snapshot_rejects_invalid_payloads() -> None:
    with pytest.raises(ValueError):
        normalize_snapshot([])
    with pytest.raises(ValueError):
        normalize_snapshot({"incomes": "not a list"})


def test_snapshot_null_wrappers_are_empty_sections() -> None:
    payload = {
        "assets": {"data": None},
        "incomes": {"data": {"incomes": None}},
        "spends": {"data": [{"amount": 40, "spendDate": "2025-01-01"}]},
    }

    entry_set = normalize_snapshot(payload)

    assert entry_set.assets == ()
    assert entry_set.incomes == ()
    assert len(entry_set.expenses) == 1


@pytest.mark.parametrize("section", ["oops", 42, {"data": "oops"}])
def test_snapshot_rejects_wrong_section_types(section) -> None:
    with pytest.raises(ValueError):
        normalize_snapshot({"assets": section})


@pytest.mark.parametrize("amount", [0, "0", "", None])
def test_zero_asset_amount_falls_back_to_asset_value(amount) -> None:
    entry = normalize_record(
        EntryKind.ASSET,
        {"amount": amount, "assetValue": 500, "assetDate": "2025-01-01"},
    )
    assert entry.amount == Decimal(500)


def test_zero_amount_without_fallback_stays_zero() -> None:
    entry = normalize_record(
        EntryKind.ASSET, {"amount": 0, "assetValue": 0, "assetDate": "2025-01-01"}
    )
    assert entry.amount == 0
