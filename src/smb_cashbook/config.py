# SMB CashBook - Bookkeeping dashboard engine for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Configuration helpers for SMB CashBook.

This module is responsible for:
- loading the application configuration from a TOML file,
- applying defaults for every optional setting,
- exposing typed dataclasses used by the rest of the application.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import tomllib  # Python 3.11+

from .aggregation import (
    DEFAULT_AGGREGATE_THRESHOLD,
    DEFAULT_MAX_POINTS,
    DEFAULT_PROFIT_BARS,
)
from .periods import PERIOD_CHOICES

DEFAULT_CONFIG_FILE = "smb_cashbook_config.toml"

DISPLAY_MODES: tuple[str, ...] = ("table", "csv", "both")
LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class DataConfig:
    """Where the account snapshot is read from (one of the two paths)."""

    snapshot: Optional[Path]
    csv_dir: Optional[Path]


@dataclass(frozen=True)
class CurrencyConfig:
    """
    Currency settings.

    All stored amounts are in ``reference``. ``display_rate`` converts one
    unit of the reference currency into the ``display`` currency and is only
    applied when rendering.
    """

    reference: str
    display: str
    display_rate: float


@dataclass(frozen=True)
class ChartConfig:
    cashflow_max_points: int
    cashflow_aggregate_threshold: int
    net_profit_bars: int


@dataclass(frozen=True)
class AppConfig:
    """
    Application-wide configuration for SMB CashBook.

    This aggregates:
    - the data source (JSON snapshot or CSV export directory),
    - currency settings,
    - the default reporting period,
    - chart sizing options,
    - display options for tables and CSV export,
    - the logging level.
    """

    data: DataConfig
    currency: CurrencyConfig
    default_period: str
    charts: ChartConfig
    display_mode: str
    decimals: int
    log_level: str


def _load_toml(path: Path) -> dict[str, Any]:
    """
    Load a TOML file and return its content as a dictionary.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if the TOML content cannot be parsed or is not a table.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Failed to parse TOML config file: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Invalid TOML root type in {path}, expected a table.")

    return data


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = raw.get(name) or {}
    if not isinstance(section, Mapping):
        return {}
    return section


def _positive_int(section: Mapping[str, Any], key: str, default: int, where: str) -> int:
    raw_value = section.get(key, default)
    try:
        value = int(raw_value)
    except (TypeError, ValueError) as exc:
        raise ValueError(
            f"Invalid value for '{where}.{key}' in the configuration. "
            "Expected an integer."
        ) from exc
    if value < 1:
        raise ValueError(f"'{where}.{key}' must be at least 1, got {value}.")
    return value


def _resolve_optional(base_dir: Path, raw: Any) -> Optional[Path]:
    if not raw:
        return None
    return (base_dir / str(raw)).resolve()


def load_app_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load the SMB CashBook application configuration from a TOML file.

    Expected top-level sections in the TOML file (all optional)
    -----------------------------------------------------------
    [data]
        ``snapshot`` (JSON file) or ``csv_dir`` (directory of CSV exports).

    [currency]
        ``reference``, ``display`` and ``display_rate``.

    [periods]
        ``default``: one of today, week, month, quarter, year,
        current-month, last-month.

    [cashflow]
        ``max_points`` and ``aggregate_threshold``.

    [net_profit]
        ``bars``.

    [display]
        ``mode`` (table, csv, both) and ``decimals``.

    [logging]
        ``level``.

    Notes
    -----
    - All file paths in the TOML are resolved relative to the directory of
      the TOML file itself.
    - When no path is given and the default file
      (smb_cashbook_config.toml in the working directory) does not exist,
      built-in defaults are returned.

    Raises
    ------
    FileNotFoundError
        If an explicitly given configuration file does not exist.
    ValueError
        If the file cannot be parsed or contains invalid values.
    """
    if config_path is None:
        config_file = Path(DEFAULT_CONFIG_FILE).resolve()
        raw = _load_toml(config_file) if config_file.is_file() else {}
    else:
        config_file = Path(config_path).resolve()
        raw = _load_toml(config_file)

    base_dir = config_file.parent

    # 1) Data source
    data_section = _section(raw, "data")
    data = DataConfig(
        snapshot=_resolve_optional(base_dir, data_section.get("snapshot")),
        csv_dir=_resolve_optional(base_dir, data_section.get("csv_dir")),
    )

    # 2) Currency
    currency_section = _section(raw, "currency")
    reference = str(currency_section.get("reference") or "IDR")
    display = str(currency_section.get("display") or reference)
    try:
        display_rate = float(currency_section.get("display_rate", 1.0))
    except (TypeError, ValueError) as exc:
        raise ValueError(
            "Invalid value for 'currency.display_rate' in the configuration. "
            "Expected a number."
        ) from exc

    # 3) Periods
    periods_section = _section(raw, "periods")
    default_period = str(periods_section.get("default", "month"))
    if default_period not in PERIOD_CHOICES:
        raise ValueError(
            f"Unknown default period {default_period!r}. "
            f"Expected one of: {', '.join(PERIOD_CHOICES)}."
        )

    # 4) Charts
    cashflow_section = _section(raw, "cashflow")
    net_profit_section = _section(raw, "net_profit")
    charts = ChartConfig(
        cashflow_max_points=_positive_int(
            cashflow_section, "max_points", DEFAULT_MAX_POINTS, "cashflow"
        ),
        cashflow_aggregate_threshold=_positive_int(
            cashflow_section,
            "aggregate_threshold",
            DEFAULT_AGGREGATE_THRESHOLD,
            "cashflow",
        ),
        net_profit_bars=_positive_int(
            net_profit_section, "bars", DEFAULT_PROFIT_BARS, "net_profit"
        ),
    )

    # 5) Display options
    display_section = _section(raw, "display")
    display_mode = str(display_section.get("mode", "table"))
    if display_mode not in DISPLAY_MODES:
        raise ValueError(
            f"Unknown display mode {display_mode!r}. "
            f"Expected one of: {', '.join(DISPLAY_MODES)}."
        )
    try:
        decimals = int(display_section.get("decimals", 0))
    except (TypeError, ValueError) as exc:
        raise ValueError(
            "Invalid value for 'display.decimals' in the configuration. "
            "Expected an integer."
        ) from exc
    if decimals < 0:
        raise ValueError(f"'display.decimals' must be at least 0, got {decimals}.")

    # 6) Logging
    logging_section = _section(raw, "logging")
    log_level = str(logging_section.get("level", "WARNING")).upper()
    if log_level not in LOG_LEVELS:
        log_level = "WARNING"

    return AppConfig(
        data=data,
        currency=CurrencyConfig(
            reference=reference, display=display, display_rate=display_rate
        ),
        default_period=default_period,
        charts=charts,
        display_mode=display_mode,
        decimals=decimals,
        log_level=log_level,
    )
