# SMB CashBook - Bookkeeping dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
SMB CashBook
------------

The computation engine behind a mobile bookkeeping dashboard for small
businesses. It turns raw income, expense, asset, liability and equity
records into the numbers shown on the dashboard screens.

Main capabilities:
- classification of every record as cash in / cash out,
- day-by-day cash-flow and net-profit series over any reporting period,
- chart-sized aggregation of long series with human-readable labels,
- gross profit, tax component and net profit with period-over-period change,
- per-category totals for the balance-sheet donuts,
- JSON snapshot and CSV export readers, TOML configuration and a CLI.

Amounts are kept as exact decimals from ingestion to display; rounding and
currency conversion only happen in the view layer.


Version: 0.1.0

Usage:
    python -m smb_cashbook.cli --help
"""

from .aggregation import aggregate
from .bucketing import bucketize
from .classification import classify
from .metrics import compute_metrics, percent_change
from .totals import totals_by_category

__all__ = [
    "classify",
    "bucketize",
    "aggregate",
    "compute_metrics",
    "totals_by_category",
    "percent_change",
]

__version__ = "0.1.0"
