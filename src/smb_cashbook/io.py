# SMB CashBook - Bookkeeping dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
I/O module for SMB CashBook.

This module reads account snapshots exported from the bookkeeping backend
and turns them into normalized entries.

Supported inputs
----------------

1) JSON snapshot
   --------------
   One JSON object holding the responses of the five list endpoints:

       {
         "incomes":     [...] or {"data": {"incomes": [...]}},
         "spends":      [...] or {"data": {"spends": [...]}},
         "assets":      [...] or {"data": [...]},
         "liabilities": [...] or {"data": [...]},
         "equities":    [...] or {"data": [...]}
       }

   Missing sections are treated as empty.

2) CSV export directory
   ---------------------
   One CSV file per record kind, named ``income.csv``, ``expense.csv``,
   ``asset.csv``, ``liability.csv`` and ``equity.csv``. Column names follow
   the backend field names (``amount``, ``incomeDate``, ``assetCategory``,
   ...). Missing files are treated as empty.

In both cases records go through ``normalization.normalize_records()``, so
the per-kind effective date rule is applied identically.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional, Union

import pandas as pd

from .models import Entry, EntryKind, EntrySet
from .normalization import normalize_records, normalize_snapshot

logger = logging.getLogger(__name__)

CSV_FILE_NAMES: dict[EntryKind, str] = {
    EntryKind.INCOME: "income.csv",
    EntryKind.EXPENSE: "expense.csv",
    EntryKind.ASSET: "asset.csv",
    EntryKind.LIABILITY: "liability.csv",
    EntryKind.EQUITY: "equity.csv",
}


def read_snapshot(path: Union[str, "os.PathLike[str]"]) -> EntrySet:
    """
    Read a JSON snapshot file and normalize it.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the file is not valid JSON or does not have the expected
        structure.
    """
    snapshot_path = Path(path)
    if not snapshot_path.is_file():
        raise FileNotFoundError(f"Snapshot file not found: {snapshot_path}")

    try:
        payload = json.loads(snapshot_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in snapshot file: {snapshot_path}") from exc

    logger.info("Reading snapshot %s", snapshot_path)
    return normalize_snapshot(payload)


def _records_from_frame(df: pd.DataFrame) -> list[dict[str, Any]]:
    """Convert a DataFrame into records, dropping NaN cells."""
    records: list[dict[str, Any]] = []
    for row in df.to_dict(orient="records"):
        records.append(
            {str(k).strip(): v for k, v in row.items() if not pd.isna(v)}
        )
    return records


def read_entries_csv(
    path: Union[str, "os.PathLike[str]"], kind: Union[EntryKind, str]
) -> list[Entry]:
    """
    Read a CSV export of one record kind and normalize it.

    All columns are read as strings so that amounts and dates are parsed
    by the normalization layer only (same rules as JSON snapshots).
    """
    entry_kind = EntryKind(kind)
    df = pd.read_csv(path, dtype=str, keep_default_na=True)
    entries = normalize_records(entry_kind, _records_from_frame(df))
    logger.info("Read %d %s entries from %s", len(entries), entry_kind.value, path)
    return entries


def read_csv_dir(path: Union[str, "os.PathLike[str]"]) -> EntrySet:
    """Read every known CSV export found in ``path``."""
    directory = Path(path)
    if not directory.is_dir():
        raise FileNotFoundError(f"CSV export directory not found: {directory}")

    by_kind: dict[EntryKind, tuple[Entry, ...]] = {}
    for kind, file_name in CSV_FILE_NAMES.items():
        csv_path = directory / file_name
        if not csv_path.is_file():
            logger.info("No %s found in %s, assuming no records.", file_name, directory)
            by_kind[kind] = ()
            continue
        by_kind[kind] = tuple(read_entries_csv(csv_path, kind))

    return EntrySet(
        incomes=by_kind[EntryKind.INCOME],
        expenses=by_kind[EntryKind.EXPENSE],
        assets=by_kind[EntryKind.ASSET],
        liabilities=by_kind[EntryKind.LIABILITY],
        equities=by_kind[EntryKind.EQUITY],
    )


def load_entry_set(
    snapshot: Optional[Union[str, "os.PathLike[str]"]] = None,
    csv_dir: Optional[Union[str, "os.PathLike[str]"]] = None,
) -> EntrySet:
    """
    Load entries from a JSON snapshot or a CSV export directory.

    The snapshot takes precedence when both are given.

    Raises
    ------
    ValueError
        If neither source is given.
    """
    if snapshot is not None:
        return read_snapshot(snapshot)
    if csv_dir is not None:
        return read_csv_dir(csv_dir)
    raise ValueError("No data source given: provide a snapshot file or a CSV directory.")
