# SMB CashBook - Bookkeeping dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Command-Line Interface (CLI) for SMB CashBook.

This module wires together the main building blocks of SMB CashBook:

- global configuration (data source, currency, charts, display options),
- snapshot reading and record normalization,
- reporting period selection,
- dashboard computation (cash flow, net profit, metrics, balance sheet),
- view helpers (tabular rendering and CSV export).

The CLI is intentionally thin: it does not implement any bookkeeping logic
itself. It orchestrates the underlying modules based on command-line
arguments and the configuration file.


High-level pipeline
-------------------

1) Load the main TOML configuration (smb_cashbook_config.toml by default)
   using ``load_app_config()``.

2) Configure logging from ``[logging].level`` or ``--log-level``.

3) Resolve the data source: ``--snapshot`` / ``--csv-dir`` override the
   ``[data]`` section of the configuration. One of them is required.

4) Read and normalize the snapshot, determine the reporting period and
   build the dashboard with ``build_dashboard()``.

5) Convert each requested section into a DataFrame and render it as a
   console table and/or a CSV file depending on the display mode.


Scopes: what to render
----------------------

- ``summary``:    metrics of the period and the month-over-month comparison.
- ``cashflow``:   cash-flow chart points, totals and breakdown per source.
- ``net-profit``: net-profit bars and totals.
- ``balance``:    asset and liability & equity donuts.
- ``all`` (default): every section above.


Period selection
----------------

Predefined periods (``--period``): today, week (last 7 days), month
(month to date), quarter (quarter to date), year (year to date),
current-month and last-month (full calendar months).

Custom periods: ``--from-date YYYY-MM-DD`` and/or ``--to-date YYYY-MM-DD``.
A missing bound is taken from the default period of the configuration.
``--period`` wins over custom dates.


Display modes and output
------------------------

- ``table``: print DataFrames to stdout (``DataFrame.to_string``),
- ``csv``:   write CSV files only,
- ``both``:  do both.

CSV files are written to ``--output DIR`` (``data/output`` by default) with
a timestamp-based name, e.g. ``cashflow_YYYY-MM-DD-HH-MM-SS.csv``.


Examples
--------

1) Month-to-date dashboard from a JSON snapshot:

    python -m smb_cashbook.cli --snapshot data/snapshot.json

2) Year-to-date cash flow only, exported as CSV:

    python -m smb_cashbook.cli \\
        --csv-dir data/export --period year --scope cashflow --display-mode csv
"""

import argparse
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import pandas as pd

from . import __version__
from .config import DISPLAY_MODES, LOG_LEVELS, load_app_config
from .dashboard import Dashboard, DashboardOptions, build_dashboard
from .io import load_entry_set
from .periods import PERIOD_CHOICES, determine_period_from_args
from .views import (
    cashflow_to_dataframe,
    comparison_to_dataframe,
    donut_to_dataframe,
    format_change,
    metrics_to_dataframe,
    net_profit_to_dataframe,
    sources_to_dataframe,
    to_display,
)

logger = logging.getLogger(__name__)

SCOPES: tuple[str, ...] = ("summary", "cashflow", "net-profit", "balance", "all")


def _build_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for the CLI."""
    ap = argparse.ArgumentParser(
        prog="python -m smb_cashbook.cli",
        description=(
            "SMB CashBook - Bookkeeping dashboard engine for small businesses. "
            "Reads income, expense, asset, liability and equity records and "
            "renders the cash-flow, net-profit and balance-sheet dashboards."
        ),
    )

    ap.add_argument(
        "--version",
        action="store_true",
        help="Show the installed version of smb_cashbook and exit.",
    )
    ap.add_argument(
        "--config",
        dest="config_path",
        help=(
            "Path to the main TOML configuration file. "
            "If omitted, 'smb_cashbook_config.toml' in the current directory "
            "is used when present."
        ),
    )

    # Data source (overrides [data] from the configuration)
    source = ap.add_mutually_exclusive_group()
    source.add_argument(
        "--snapshot",
        dest="snapshot",
        help="JSON snapshot holding the five record lists.",
    )
    source.add_argument(
        "--csv-dir",
        dest="csv_dir",
        help="Directory holding income.csv, expense.csv, asset.csv, ... exports.",
    )

    # Period selection
    ap.add_argument(
        "--period",
        choices=list(PERIOD_CHOICES),
        help=(
            "Predefined reporting period. "
            "If not provided, the default period from config is used."
        ),
    )
    ap.add_argument(
        "--from-date",
        dest="from_date",
        help="Custom period start date (YYYY-MM-DD).",
    )
    ap.add_argument(
        "--to-date",
        dest="to_date",
        help="Custom period end date (YYYY-MM-DD).",
    )

    ap.add_argument(
        "--scope",
        choices=list(SCOPES),
        default="all",
        help=(
            "Select what to render: "
            "'summary' = metrics and month-over-month comparison; "
            "'cashflow' = cash-flow chart and sources; "
            "'net-profit' = net-profit bars; "
            "'balance' = balance-sheet donuts; "
            "'all' = everything."
        ),
    )

    # Display options
    ap.add_argument(
        "--display-mode",
        dest="display_mode",
        choices=list(DISPLAY_MODES),
        help=(
            "Override the display.mode setting from the configuration file. "
            "'table' prints results to stdout, "
            "'csv' writes CSV files only, "
            "'both' does both."
        ),
    )
    ap.add_argument(
        "--output",
        dest="output_dir",
        help=(
            "Output directory where CSV files will be written when display "
            "mode includes 'csv'. If omitted, 'data/output' is used."
        ),
    )
    ap.add_argument(
        "--log-level",
        dest="log_level",
        choices=list(LOG_LEVELS),
        help="Override the logging.level setting from the configuration file.",
    )

    return ap


def _parse_optional_date(value: Optional[str]) -> Optional[date]:
    """
    Parse an optional CLI date argument (YYYY-MM-DD).

    Raises
    ------
    SystemExit
        If the date format is invalid.
    """
    if value is None:
        return None

    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        msg = f"Invalid date format: {value!r}. Expected YYYY-MM-DD."
        raise SystemExit(msg) from exc


def _sections(
    dashboard: Dashboard, scope: str, rate: float, decimals: int
) -> list[tuple[str, str, pd.DataFrame]]:
    """Return (file stem, title, DataFrame) for every section in ``scope``."""
    sections: list[tuple[str, str, pd.DataFrame]] = []

    if scope in {"summary", "all"}:
        sections.append(
            (
                "metrics",
                "Profit metrics",
                metrics_to_dataframe(dashboard.metrics, rate, decimals),
            )
        )
        sections.append(
            (
                "monthly_comparison",
                "Current month vs last month",
                comparison_to_dataframe(dashboard.monthly_comparison, rate, decimals),
            )
        )

    if scope in {"cashflow", "all"}:
        sections.append(
            (
                "cashflow",
                "Cash flow",
                cashflow_to_dataframe(dashboard.cashflow_series.points, rate, decimals),
            )
        )
        sections.append(
            (
                "cashflow_sources",
                "Cash-flow sources",
                sources_to_dataframe(dashboard.cashflow_sources, rate, decimals),
            )
        )

    if scope in {"net-profit", "all"}:
        sections.append(
            (
                "net_profit",
                "Net profit",
                net_profit_to_dataframe(dashboard.net_profit_bars, rate, decimals),
            )
        )

    if scope in {"balance", "all"}:
        for donut in dashboard.donuts:
            sections.append(
                (
                    f"donut_{donut.key}",
                    f"{donut.title} (total {to_display(donut.total, rate, decimals)})",
                    donut_to_dataframe(donut, rate, decimals),
                )
            )

    return sections


def _print_headline(
    dashboard: Dashboard, rate: float, decimals: int, currency: str
) -> None:
    """Print the cash-flow and net-profit totals shown above the charts."""
    cf = dashboard.cashflow_summary
    np_summary = dashboard.net_profit_summary
    print(
        f"Cash in: {to_display(cf.total_in, rate, decimals)} {currency} | "
        f"Cash out: {to_display(cf.total_out, rate, decimals)} {currency} | "
        f"Net: {to_display(cf.net, rate, decimals)} {currency}"
    )
    print(
        f"Net profit: {to_display(np_summary.total_net_profit, rate, decimals)} "
        f"{currency} "
        f"({format_change(dashboard.metrics.percent_change_vs_previous_period)} "
        "vs previous period)"
    )


def main() -> None:
    """Entry point for the SMB CashBook CLI.

    This function parses command-line arguments, loads the configuration,
    reads the account snapshot, builds the dashboard for the selected
    period and renders the selected scope as console tables and/or CSV
    files.
    """
    parser = _build_parser()
    args = parser.parse_args()

    # --version: short-circuit and exit early.
    if args.version:
        print(f"smb_cashbook version {__version__}")
        return

    # 1) Load application configuration
    try:
        if args.config_path:
            config = load_app_config(args.config_path)
        else:
            config = load_app_config()
    except (FileNotFoundError, ValueError) as exc:
        parser.error(str(exc))

    # 2) Logging
    logging.basicConfig(
        level=args.log_level or config.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # 3) Data source: CLI overrides config
    snapshot: Optional[Path] = Path(args.snapshot) if args.snapshot else None
    csv_dir: Optional[Path] = Path(args.csv_dir) if args.csv_dir else None
    if snapshot is None and csv_dir is None:
        snapshot = config.data.snapshot
        csv_dir = config.data.csv_dir if snapshot is None else None
    if snapshot is None and csv_dir is None:
        parser.error(
            "No data source configured. "
            "Either set [data] in the config or provide --snapshot / --csv-dir."
        )

    # 4) Validate custom dates before period resolution
    _parse_optional_date(args.from_date)
    _parse_optional_date(args.to_date)

    try:
        period = determine_period_from_args(args, default=config.default_period)
    except ValueError as exc:
        parser.error(str(exc))

    try:
        entry_set = load_entry_set(snapshot=snapshot, csv_dir=csv_dir)
    except (FileNotFoundError, ValueError) as exc:
        parser.error(str(exc))

    print(
        f"Applied period: {period.label} "
        f"({period.start.isoformat()} → {period.end.isoformat()})"
    )
    print(f"Records loaded: {len(entry_set)}")
    if len(entry_set) == 0:
        print("Warning: the snapshot does not contain any record.")

    # 5) Build the dashboard
    dashboard = build_dashboard(
        entry_set, period, options=DashboardOptions.from_config(config)
    )

    rate = config.currency.display_rate
    decimals = config.decimals
    sections = _sections(dashboard, args.scope, rate, decimals)

    # 6) Resolve display mode: config value overridden by CLI if provided.
    display_mode = args.display_mode or config.display_mode
    logger.debug(
        "Rendering %d sections (scope=%s, mode=%s)",
        len(sections),
        args.scope,
        display_mode,
    )

    # 7) Render to console (table mode).
    if display_mode in {"table", "both"}:
        print()
        _print_headline(dashboard, rate, decimals, config.currency.display)
        for _, title, df in sections:
            print()
            print(f"=== {title} ===")
            if df.empty:
                print("(no data)")
            else:
                print(df.to_string(index=False))

    # 8) Render to CSV files (csv mode).
    if display_mode in {"csv", "both"}:
        output_dir = Path(args.output_dir) if args.output_dir else Path("data/output")
        output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")

        for stem, _, df in sections:
            path = output_dir / f"{stem}_{timestamp}.csv"
            df.to_csv(path, index=False)
            print(f"Wrote {path} ({len(df)} rows)")


if __name__ == "__main__":
    main()
