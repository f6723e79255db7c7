# Shop Capital - Finance tracking & dashboard for small retail shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Configuration helpers for Shop Capital.

This module is responsible for:
- loading the application configuration from a TOML file,
- validating its values,
- exposing typed dataclasses used by the rest of the application.

Expected sections (all optional)
--------------------------------
[database]
    engine = "sqlite"
    path   = "data/db/shop_capital.sqlite"

[currency]
    display       = "USD"   # or "MZN"
    exchange_rate = 64.0    # MZN per USD

[dashboard]
    window_months = 6

[inventory]
    low_stock_threshold  = 5
    clamp_negative_stock = false

[initial_capital]
    cash  = 5000.0   # used until a starting capital is saved in the database
    stock = 2000.0

[display]
    mode     = "table"  # "table" | "csv" | "both"
    decimals = 2
"""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:  # pragma: no cover - fallback for older Python
    import tomli as tomllib  # type: ignore[import]

from .currency import DEFAULT_EXCHANGE_RATE, SUPPORTED_CURRENCIES, CurrencyConverter
from .db import DatabaseConfig
from .inventory import DEFAULT_LOW_STOCK_THRESHOLD
from .models import DEFAULT_INITIAL_CAPITAL, InitialCapital, validate_initial_capital
from .periods import DEFAULT_WINDOW_MONTHS

DEFAULT_CONFIG_FILE = "shop_capital_config.toml"
DEFAULT_DB_PATH = "data/db/shop_capital.sqlite"
DISPLAY_MODES = ("table", "csv", "both")


@dataclass(frozen=True)
class DashboardConfig:
    """Options of the dashboard computation."""

    window_months: int = DEFAULT_WINDOW_MONTHS


@dataclass(frozen=True)
class InventoryConfig:
    """Options of the inventory helpers and of the add-sale stock hook."""

    low_stock_threshold: float = DEFAULT_LOW_STOCK_THRESHOLD
    clamp_negative_stock: bool = False


@dataclass(frozen=True)
class DisplayConfig:
    """Options of the CLI rendering."""

    mode: str = "table"
    decimals: int = 2


@dataclass(frozen=True)
class AppConfig:
    """
    Application-wide configuration for Shop Capital.

    This aggregates:
    - the database configuration (where the ledger is stored),
    - the display currency,
    - dashboard, inventory and display options,
    - the default starting capital used when none is stored yet.
    """

    database: DatabaseConfig
    currency: CurrencyConverter
    dashboard: DashboardConfig
    inventory: InventoryConfig
    display: DisplayConfig
    default_initial_capital: InitialCapital


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
    """Return a sub-table, or an empty mapping when missing or malformed."""
    section = raw.get(name) or {}
    if not isinstance(section, Mapping):
        return {}
    return section


def _as_float(value: Any, key: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(
            f"Invalid value for '{key}' in the configuration. Expected a number."
        ) from exc


def _as_int(value: Any, key: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(
            f"Invalid value for '{key}' in the configuration. Expected an integer."
        ) from exc


def parse_app_config(raw: Mapping[str, Any], base_dir: Path) -> AppConfig:
    """
    Build an AppConfig from raw TOML data.

    Args:
        raw: Parsed TOML root dictionary (may be empty).
        base_dir: Directory used to resolve relative paths.

    Raises:
        ValueError: if a value has the wrong type or is out of range.
    """
    # 1) Database
    database_section = _section(raw, "database")
    db_engine = str(database_section.get("engine") or "sqlite")
    db_path_raw = database_section.get("path") or DEFAULT_DB_PATH
    database = DatabaseConfig(
        engine=db_engine, path=(base_dir / str(db_path_raw)).resolve()
    )

    # 2) Currency
    currency_section = _section(raw, "currency")
    display_currency = str(currency_section.get("display") or "USD").upper()
    if display_currency not in SUPPORTED_CURRENCIES:
        raise ValueError(
            f"Invalid value for 'currency.display': {display_currency!r}. "
            f"Expected one of: {', '.join(SUPPORTED_CURRENCIES)}."
        )
    exchange_rate = _as_float(
        currency_section.get("exchange_rate", DEFAULT_EXCHANGE_RATE),
        "currency.exchange_rate",
    )
    currency = CurrencyConverter(
        currency=display_currency,  # type: ignore[arg-type]
        exchange_rate=exchange_rate,
    )

    # 3) Dashboard
    dashboard_section = _section(raw, "dashboard")
    window_months = _as_int(
        dashboard_section.get("window_months", DEFAULT_WINDOW_MONTHS),
        "dashboard.window_months",
    )
    if window_months < 1:
        raise ValueError("'dashboard.window_months' must be at least 1.")

    # 4) Inventory
    inventory_section = _section(raw, "inventory")
    inventory = InventoryConfig(
        low_stock_threshold=_as_float(
            inventory_section.get("low_stock_threshold", DEFAULT_LOW_STOCK_THRESHOLD),
            "inventory.low_stock_threshold",
        ),
        clamp_negative_stock=bool(inventory_section.get("clamp_negative_stock", False)),
    )

    # 5) Default starting capital
    capital_section = _section(raw, "initial_capital")
    default_capital = InitialCapital(
        cash=_as_float(
            capital_section.get("cash", DEFAULT_INITIAL_CAPITAL.cash),
            "initial_capital.cash",
        ),
        stock=_as_float(
            capital_section.get("stock", DEFAULT_INITIAL_CAPITAL.stock),
            "initial_capital.stock",
        ),
    )
    validate_initial_capital(default_capital)

    # 6) Display options
    display_section = _section(raw, "display")
    display_mode = str(display_section.get("mode", "table"))
    if display_mode not in DISPLAY_MODES:
        raise ValueError(
            f"Invalid value for 'display.mode': {display_mode!r}. "
            f"Expected one of: {', '.join(DISPLAY_MODES)}."
        )
    try:
        decimals = int(display_section.get("decimals", 2))
    except (TypeError, ValueError):
        decimals = 2

    return AppConfig(
        database=database,
        currency=currency,
        dashboard=DashboardConfig(window_months=window_months),
        inventory=inventory,
        display=DisplayConfig(mode=display_mode, decimals=decimals),
        default_initial_capital=default_capital,
    )


def load_app_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load the Shop Capital configuration from a TOML file.

    When `config_path` is None, 'shop_capital_config.toml' in the current
    directory is used if it exists; otherwise every setting takes its
    default value. An explicit path that does not exist is an error.

    All relative paths in the TOML are resolved against the directory of
    the TOML file itself.

    Raises:
        FileNotFoundError: if an explicit config file does not exist.
        ValueError: if the file cannot be parsed or holds invalid values.
    """
    if config_path is None:
        config_file = Path(DEFAULT_CONFIG_FILE).resolve()
        if not config_file.is_file():
            return parse_app_config({}, config_file.parent)
    else:
        config_file = Path(config_path).resolve()

    raw = _load_toml(config_file)
    return parse_app_config(raw, config_file.parent)
