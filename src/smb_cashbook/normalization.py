# SMB CashBook - Bookkeeping dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Normalization of backend records into Entry objects.

The bookkeeping backend returns one JSON list per record kind, each with its
own field names. This module is the single place where those shapes are
mapped onto the generic ``Entry`` used by the aggregation functions.

Effective date rule
-------------------
Each kind has exactly one rule; the first field present (and parseable)
wins:

    income     incomeDate, createdAt
    expense    spendDate, expenseDate, createdAt
    asset      assetDate, createdAt
    liability  dueDate, liabilityDate, createdAt
    equity     equityDate, createdAt

Timestamps are converted to UTC and reduced to their calendar day.

Amount and category fields
--------------------------
    income     amount                    category, type          tax: incomeTax, tax
    expense    amount                    category, spendingType, expenseType
    asset      amount, assetValue        assetCategory
    liability  amount, liabilityAmount   liabilityCategory
    equity     amount                    equityType

Malformed amounts become 0 and unparseable dates become ``None``; both are
reported through the module logger rather than raised.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any, Optional

import pandas as pd

from .amounts import coerce_amount, is_valid_amount
from .models import Entry, EntryKind, EntrySet

logger = logging.getLogger(__name__)

DATE_FIELDS: dict[EntryKind, tuple[str, ...]] = {
    EntryKind.INCOME: ("incomeDate", "createdAt"),
    EntryKind.EXPENSE: ("spendDate", "expenseDate", "createdAt"),
    EntryKind.ASSET: ("assetDate", "createdAt"),
    EntryKind.LIABILITY: ("dueDate", "liabilityDate", "createdAt"),
    EntryKind.EQUITY: ("equityDate", "createdAt"),
}

AMOUNT_FIELDS: dict[EntryKind, tuple[str, ...]] = {
    EntryKind.INCOME: ("amount",),
    EntryKind.EXPENSE: ("amount",),
    EntryKind.ASSET: ("amount", "assetValue"),
    EntryKind.LIABILITY: ("amount", "liabilityAmount"),
    EntryKind.EQUITY: ("amount",),
}

CATEGORY_FIELDS: dict[EntryKind, tuple[str, ...]] = {
    EntryKind.INCOME: ("category", "type"),
    EntryKind.EXPENSE: ("category", "spendingType", "expenseType"),
    EntryKind.ASSET: ("assetCategory",),
    EntryKind.LIABILITY: ("liabilityCategory",),
    EntryKind.EQUITY: ("equityType",),
}

TAX_FIELDS: tuple[str, ...] = ("incomeTax", "tax")

DESCRIPTION_FIELDS: tuple[str, ...] = (
    "description",
    "assetDescription",
    "liabilityDescription",
    "name",
    "assetName",
    "liabilityName",
    "equityName",
)

# Keys under which a snapshot payload may carry each kind.
SNAPSHOT_KEYS: dict[EntryKind, tuple[str, ...]] = {
    EntryKind.INCOME: ("incomes", "income"),
    EntryKind.EXPENSE: ("spends", "expenses", "spending", "expense"),
    EntryKind.ASSET: ("assets", "asset"),
    EntryKind.LIABILITY: ("liabilities", "liability"),
    EntryKind.EQUITY: ("equities", "equity"),
}


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _first_present(record: Mapping[str, Any], fields: Iterable[str]) -> Any:
    """Return the first non-missing value among ``fields`` (or None)."""
    for name in fields:
        value = record.get(name)
        if not _is_missing(value):
            return value
    return None


def _first_amount(record: Mapping[str, Any], fields: Iterable[str]) -> Any:
    """
    Return the first non-zero amount among ``fields``.

    A zero or blank ``amount`` falls back to the kind-specific field
    (``assetValue``, ``liabilityAmount``). If no field holds a non-zero
    amount, the first present value is returned.
    """
    fallback = None
    for name in fields:
        value = record.get(name)
        if _is_missing(value):
            continue
        if coerce_amount(value) != 0:
            return value
        if fallback is None:
            fallback = value
    return fallback


def parse_day(value: Any) -> Optional[date]:
    """
    Parse a date or timestamp into its UTC calendar day.

    Accepts ``date``/``datetime`` objects, ISO strings (with or without a
    time and offset) and pandas timestamps. Returns None if parsing fails.
    """
    if _is_missing(value):
        return None
    if isinstance(value, date) and not isinstance(value, datetime):
        return value

    try:
        ts = pd.to_datetime(value, utc=True, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None
    if pd.isna(ts):
        return None
    return ts.date()


def normalize_record(kind: EntryKind, record: Mapping[str, Any]) -> Entry:
    """Map one raw backend record of the given kind onto an Entry."""
    kind = EntryKind(kind)

    raw_date = _first_present(record, DATE_FIELDS[kind])
    occurred_on = parse_day(raw_date)
    if occurred_on is None:
        logger.warning(
            "%s record %r has no usable date (%r); excluded from time series.",
            kind.value,
            record.get("id"),
            raw_date,
        )

    raw_amount = _first_amount(record, AMOUNT_FIELDS[kind])
    if not is_valid_amount(raw_amount):
        logger.warning(
            "%s record %r has an invalid amount %r; counted as 0.",
            kind.value,
            record.get("id"),
            raw_amount,
        )

    category = _first_present(record, CATEGORY_FIELDS[kind])

    tax_percent = None
    if kind == EntryKind.INCOME:
        raw_tax = _first_present(record, TAX_FIELDS)
        if raw_tax is not None:
            tax_percent = coerce_amount(raw_tax)

    description = _first_present(record, DESCRIPTION_FIELDS)

    return Entry(
        kind=kind,
        amount=coerce_amount(raw_amount),
        occurred_on=occurred_on,
        category=None if category is None else str(category),
        tax_percent=tax_percent,
        description="" if description is None else str(description),
    )


def normalize_records(
    kind: EntryKind, records: Iterable[Mapping[str, Any]]
) -> list[Entry]:
    """Normalize every record of one kind, skipping non-mapping items."""
    out: list[Entry] = []
    for record in records:
        if not isinstance(record, Mapping):
            logger.warning("Ignoring non-object %s record: %r", kind, record)
            continue
        out.append(normalize_record(kind, record))
    return out


def _unwrap(value: Any) -> list[Any]:
    """
    Extract a list of records from a payload section.

    Backend responses are either bare lists or wrapped objects such as
    ``{"data": [...]}`` or ``{"data": {"incomes": [...]}}``. A wrapper
    holding no list (``{"data": null}``, ``{"data": {"incomes": null}}``)
    is an empty section.
    """
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, Mapping):
        inner = value.get("data")
        if inner is None:
            return []
        if isinstance(inner, list):
            return inner
        if isinstance(inner, Mapping):
            for candidate in inner.values():
                if isinstance(candidate, list):
                    return candidate
            return []
    raise ValueError(f"Expected a list of records, got {type(value).__name__}.")


def normalize_snapshot(payload: Mapping[str, Any]) -> EntrySet:
    """
    Normalize a full account snapshot into an EntrySet.

    Args:
        payload: Mapping with one section per kind (see ``SNAPSHOT_KEYS``).
            Missing sections are treated as empty.

    Raises:
        ValueError: if the payload or one of its sections is not a list of
            records.
    """
    if not isinstance(payload, Mapping):
        raise ValueError("Snapshot payload must be a JSON object.")

    by_kind: dict[EntryKind, tuple[Entry, ...]] = {}
    for kind, keys in SNAPSHOT_KEYS.items():
        section = None
        for key in keys:
            if key in payload:
                section = payload[key]
                break
        try:
            records = _unwrap(section)
        except ValueError as exc:
            raise ValueError(f"Invalid '{kind.value}' section in snapshot.") from exc
        by_kind[kind] = tuple(normalize_records(kind, records))

    entry_set = EntrySet(
        incomes=by_kind[EntryKind.INCOME],
        expenses=by_kind[EntryKind.EXPENSE],
        assets=by_kind[EntryKind.ASSET],
        liabilities=by_kind[EntryKind.LIABILITY],
        equities=by_kind[EntryKind.EQUITY],
    )
    logger.info("Normalized snapshot with %d entries.", len(entry_set))
    return entry_set
