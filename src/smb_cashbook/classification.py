# SMB CashBook - Bookkeeping dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Cash-flow classification of bookkeeping entries.

Each entry is mapped to a direction (cash in, cash out, or unclassified) and
to a source bucket used by the cash-flow breakdown:

    income         income entries (always cash in)
    expense        expense entries (always cash out)
    equity_in      capital contributions ('initial', 'additional')
    equity_out     owner withdrawals ('withdrawal')
    asset_out      acquisition of fixed or invested assets
    asset_in       realization of liquid or receivable assets
    liability_in   bank loan proceeds ('bank_loan')
    liability_out  every other liability (repayment / obligation)
    unclassified   anything else, excluded from cash-flow totals

Unclassified entries are still counted by the category breakdowns
(``totals.py``); only the cash-flow series ignore them.

Category strings are compared case-insensitively after trimming.
"""

from typing import Optional

from .models import Classification, Direction, Entry, EntryKind

# Category codes as stored by the backend (Indonesian / Malay labels).
EQUITY_IN_CATEGORIES: frozenset[str] = frozenset({"initial", "additional"})
EQUITY_OUT_CATEGORIES: frozenset[str] = frozenset({"withdrawal"})

ASSET_OUT_CATEGORIES: frozenset[str] = frozenset(
    {
        "bangunan",
        "mesin",
        "kendaraan",
        "peralatan",
        "investasi_tetap",
        "investasi_lancar",
    }
)
ASSET_IN_CATEGORIES: frozenset[str] = frozenset(
    {"inventory", "penghutang", "deposit", "cash_in_hand", "cash_in_bank"}
)

LIABILITY_IN_CATEGORIES: frozenset[str] = frozenset({"bank_loan"})

# Source buckets in display order.
CASHFLOW_BUCKETS: tuple[str, ...] = (
    "income",
    "expense",
    "equity_in",
    "equity_out",
    "asset_in",
    "asset_out",
    "liability_in",
    "liability_out",
)
UNCLASSIFIED_BUCKET = "unclassified"

_UNCLASSIFIED = Classification(Direction.UNCLASSIFIED, UNCLASSIFIED_BUCKET)


def normalize_category(category: Optional[str]) -> str:
    """Lowercase and trim a raw category; missing values become ''."""
    if category is None:
        return ""
    return str(category).strip().lower()


def classify(entry: Entry) -> Classification:
    """Return the cash-flow direction and source bucket of ``entry``."""
    kind = entry.kind
    category = normalize_category(entry.category)

    if kind == EntryKind.INCOME:
        return Classification(Direction.CASH_IN, "income")

    if kind == EntryKind.EXPENSE:
        return Classification(Direction.CASH_OUT, "expense")

    if kind == EntryKind.EQUITY:
        if category in EQUITY_IN_CATEGORIES:
            return Classification(Direction.CASH_IN, "equity_in")
        if category in EQUITY_OUT_CATEGORIES:
            return Classification(Direction.CASH_OUT, "equity_out")
        return _UNCLASSIFIED

    if kind == EntryKind.ASSET:
        if category in ASSET_OUT_CATEGORIES:
            return Classification(Direction.CASH_OUT, "asset_out")
        if category in ASSET_IN_CATEGORIES:
            return Classification(Direction.CASH_IN, "asset_in")
        return _UNCLASSIFIED

    if kind == EntryKind.LIABILITY:
        if category in LIABILITY_IN_CATEGORIES:
            return Classification(Direction.CASH_IN, "liability_in")
        return Classification(Direction.CASH_OUT, "liability_out")

    return _UNCLASSIFIED


def is_cash_in(entry: Entry) -> bool:
    return classify(entry).direction == Direction.CASH_IN


def is_cash_out(entry: Entry) -> bool:
    return classify(entry).direction == Direction.CASH_OUT
