# Shop Capital - Finance tracking & dashboard for small retail shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Command-Line Interface (CLI) for Shop Capital.

This module wires together the main building blocks of Shop Capital:

- application configuration (database, currency, dashboard, display),
- the ledger, loaded from the SQLite database,
- the ledger service (add / update / delete / import of records),
- the metrics engine (dashboard) and the monthly report aggregator,
- view helpers (tabular rendering in the display currency).

The CLI is intentionally thin: it does not implement financial logic
itself. It orchestrates the underlying modules based on command-line
arguments and configuration files.


Commands
--------

    dashboard                  Key figures, monthly series, capital history
                               and expense breakdown (default command).
    report                     One row per month of the whole history.
    sales list|add|update|delete|import
    expenses list|add|update|delete|import
    inventory list|add|update|delete|low-stock
    capital show|set

Global options must be given before the command:

    --config PATH              Main TOML configuration file.
    --today YYYY-MM-DD         Reference date ("now") of the dashboard.
    --currency USD|MZN         Override the display currency.
    --display-mode table|csv|both
    --output DIR               Directory of the CSV files (data/output).
    --verbose                  Show informational log messages.
    --version


Amounts
-------

Amounts typed on the command line (prices, expense amounts, capital) are
expressed in the display currency and converted to the canonical unit
(USD) before being stored. CSV imports are always read in the canonical
unit.


Display modes and output
------------------------

- ``table``: print results to stdout (pandas.DataFrame.to_string).
- ``csv``:   write CSV files only, no console tables.
- ``both``:  do both.

CSV files are written with a timestamp-based name, for example
``dashboard_monthly_YYYY-MM-DD-HH-MM-SS.csv``.


Examples
--------

    python -m shop_capital.cli dashboard
    python -m shop_capital.cli --currency MZN --display-mode both report
    python -m shop_capital.cli sales add --date 2025-03-14 --item "Soap" \\
        --quantity 2 --cost-price 10 --sale-price 25
    python -m shop_capital.cli sales add --date 2025-03-14 \\
        --inventory-item 1741950000000 --quantity 3
    python -m shop_capital.cli expenses add --date 2025-03-14 --type operating \\
        --description Rent --amount 150
    python -m shop_capital.cli expenses import data/input/expenses.csv
    python -m shop_capital.cli capital set --cash 5000 --stock 2000
"""

import argparse
import logging
from dataclasses import replace
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import pandas as pd

from . import __version__
from .config import DISPLAY_MODES, AppConfig, load_app_config
from .currency import SUPPORTED_CURRENCIES, CurrencyConverter
from .engine import compute_dashboard
from .inventory import low_stock_items, stock_valuation
from .ledger import Ledger
from .ledger_service import (
    change_initial_capital,
    edit_expense,
    edit_inventory_item,
    edit_sale,
    import_expenses_csv,
    import_sales_csv,
    open_ledger,
    record_expense,
    record_inventory_item,
    record_sale,
    remove_expense,
    remove_inventory_item,
    remove_sale,
)
from .models import (
    InitialCapital,
    LedgerError,
    NewExpense,
    NewInventoryItem,
    NewSale,
    normalize_expense_type,
)
from .reports import build_monthly_reports, total_capital_growth
from .views import (
    capital_history_df,
    dashboard_summary_df,
    expense_breakdown_df,
    expenses_df,
    inventory_df,
    monthly_reports_df,
    monthly_series_df,
    sales_df,
)

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = "data/output"


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _add_sale_fields(parser: argparse.ArgumentParser, *, required: bool) -> None:
    parser.add_argument("--date", help="Date of the sale (YYYY-MM-DD).")
    parser.add_argument("--item", dest="item_name", help="Name of the item sold.")
    parser.add_argument(
        "--quantity", type=float, required=required, help="Units sold (> 0)."
    )
    parser.add_argument(
        "--cost-price",
        dest="cost_price",
        type=float,
        help="Per-unit cost, in the display currency.",
    )
    parser.add_argument(
        "--sale-price",
        dest="sale_price",
        type=float,
        help="Per-unit sale price, in the display currency.",
    )


def _add_expense_fields(parser: argparse.ArgumentParser, *, required: bool) -> None:
    parser.add_argument("--date", help="Date of the expense (YYYY-MM-DD).")
    parser.add_argument(
        "--type",
        dest="expense_type",
        required=required,
        help="'Stock Purchase' (or 'stock') | 'Operating'.",
    )
    parser.add_argument("--description", help="Free text (e.g. 'Rent').")
    parser.add_argument(
        "--amount",
        type=float,
        required=required,
        help="Amount, in the display currency.",
    )


def _add_inventory_fields(parser: argparse.ArgumentParser, *, required: bool) -> None:
    parser.add_argument("--name", required=required, help="Item name.")
    parser.add_argument(
        "--quantity", type=float, required=required, help="Units in stock."
    )
    parser.add_argument(
        "--cost-price",
        dest="cost_price",
        type=float,
        required=required,
        help="Per-unit cost, in the display currency.",
    )
    parser.add_argument(
        "--selling-price",
        dest="selling_price",
        type=float,
        required=required,
        help="Per-unit selling price, in the display currency.",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for the CLI."""
    ap = argparse.ArgumentParser(
        prog="python -m shop_capital.cli",
        description=(
            "Shop Capital - Finance tracking & dashboard for small retail shops. "
            "Records sales, expenses and inventory, and renders the capital "
            "dashboard and monthly reports."
        ),
    )

    # Generic options
    ap.add_argument(
        "--version",
        action="store_true",
        help="Show the installed version of shop_capital and exit.",
    )
    ap.add_argument(
        "--config",
        dest="config_path",
        help=(
            "Path to the main TOML configuration file. "
            "If omitted, 'shop_capital_config.toml' in the current directory is "
            "used when present, otherwise defaults apply."
        ),
    )
    ap.add_argument(
        "--today",
        help="Reference date (YYYY-MM-DD) of the dashboard. Defaults to today.",
    )
    ap.add_argument(
        "--currency",
        choices=list(SUPPORTED_CURRENCIES),
        help="Override the display currency defined in the configuration.",
    )
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
            f"mode includes 'csv'. If omitted, '{DEFAULT_OUTPUT_DIR}' is used."
        ),
    )
    ap.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show informational log messages.",
    )

    subparsers = ap.add_subparsers(
        dest="command",
        metavar="command",
        help="Command to run (default: 'dashboard').",
    )

    # ------------------------------------------------------------------
    # dashboard / report
    # ------------------------------------------------------------------
    dashboard = subparsers.add_parser(
        "dashboard", help="Show the capital dashboard for the trailing months."
    )
    dashboard.add_argument(
        "--months",
        type=int,
        help="Number of months of the window (config: dashboard.window_months).",
    )

    subparsers.add_parser(
        "report", help="Show one summary row per month of the whole history."
    )

    # ------------------------------------------------------------------
    # sales
    # ------------------------------------------------------------------
    sales_parser = subparsers.add_parser("sales", help="Manage sales.")
    sales_sub = sales_parser.add_subparsers(
        dest="sales_command", metavar="sales-command"
    )

    sales_list = sales_sub.add_parser("list", help="List sales, newest first.")
    sales_list.add_argument("--limit", type=int, help="Show at most N sales.")

    sales_add = sales_sub.add_parser("add", help="Record a new sale.")
    _add_sale_fields(sales_add, required=True)
    sales_add.add_argument(
        "--inventory-item",
        dest="inventory_item_id",
        help=(
            "Id of the inventory item sold. Its quantity is decreased, and its "
            "name and prices are used when --item/--cost-price/--sale-price "
            "are omitted."
        ),
    )

    sales_update = sales_sub.add_parser(
        "update", help="Update a sale (only the given fields change)."
    )
    sales_update.add_argument("record_id", help="Id of the sale.")
    _add_sale_fields(sales_update, required=False)

    sales_delete = sales_sub.add_parser("delete", help="Delete a sale.")
    sales_delete.add_argument("record_id", help="Id of the sale.")

    sales_import = sales_sub.add_parser("import", help="Import sales from a CSV.")
    sales_import.add_argument(
        "csv_path",
        help="CSV with columns date, item_name, quantity, cost_price, sale_price.",
    )

    # ------------------------------------------------------------------
    # expenses
    # ------------------------------------------------------------------
    expenses_parser = subparsers.add_parser("expenses", help="Manage expenses.")
    expenses_sub = expenses_parser.add_subparsers(
        dest="expenses_command", metavar="expenses-command"
    )

    expenses_list = expenses_sub.add_parser("list", help="List expenses.")
    expenses_list.add_argument("--limit", type=int, help="Show at most N expenses.")

    expenses_add = expenses_sub.add_parser("add", help="Record a new expense.")
    _add_expense_fields(expenses_add, required=True)

    expenses_update = expenses_sub.add_parser(
        "update", help="Update an expense (only the given fields change)."
    )
    expenses_update.add_argument("record_id", help="Id of the expense.")
    _add_expense_fields(expenses_update, required=False)

    expenses_delete = expenses_sub.add_parser("delete", help="Delete an expense.")
    expenses_delete.add_argument("record_id", help="Id of the expense.")

    expenses_import = expenses_sub.add_parser(
        "import", help="Import expenses from a CSV."
    )
    expenses_import.add_argument(
        "csv_path", help="CSV with columns date, type, description, amount."
    )

    # ------------------------------------------------------------------
    # inventory
    # ------------------------------------------------------------------
    inventory_parser = subparsers.add_parser("inventory", help="Manage inventory.")
    inventory_sub = inventory_parser.add_subparsers(
        dest="inventory_command", metavar="inventory-command"
    )

    inventory_sub.add_parser("list", help="List inventory items.")

    inventory_add = inventory_sub.add_parser("add", help="Add an inventory item.")
    _add_inventory_fields(inventory_add, required=True)

    inventory_update = inventory_sub.add_parser(
        "update", help="Update an inventory item (only the given fields change)."
    )
    inventory_update.add_argument("record_id", help="Id of the item.")
    _add_inventory_fields(inventory_update, required=False)

    inventory_delete = inventory_sub.add_parser(
        "delete", help="Delete an inventory item."
    )
    inventory_delete.add_argument("record_id", help="Id of the item.")

    low_stock = inventory_sub.add_parser(
        "low-stock", help="List items whose quantity is below the threshold."
    )
    low_stock.add_argument(
        "--threshold",
        type=float,
        help="Low-stock threshold (config: inventory.low_stock_threshold).",
    )

    # ------------------------------------------------------------------
    # capital
    # ------------------------------------------------------------------
    capital_parser = subparsers.add_parser(
        "capital", help="Show or change the starting capital."
    )
    capital_sub = capital_parser.add_subparsers(
        dest="capital_command", metavar="capital-command"
    )
    capital_sub.add_parser("show", help="Show the starting capital.")
    capital_set = capital_sub.add_parser("set", help="Change the starting capital.")
    capital_set.add_argument(
        "--cash", type=float, required=True, help="Starting cash (display currency)."
    )
    capital_set.add_argument(
        "--stock",
        type=float,
        required=True,
        help="Starting stock value (display currency).",
    )

    return ap


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


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


def _from_display(config: AppConfig, amount: Optional[float]) -> Optional[float]:
    """Convert an amount typed on the command line to the canonical unit."""
    if amount is None:
        return None
    return config.currency.from_display(amount)


def _changes(**fields) -> dict:
    """Keep only the fields actually given on the command line."""
    return {key: value for key, value in fields.items() if value is not None}


def _render(
    args: argparse.Namespace,
    config: AppConfig,
    tables: list[tuple[str, str, pd.DataFrame]],
) -> None:
    """
    Render (title, file_stem, frame) tuples as console tables and/or CSV.

    The display mode comes from the configuration, overridden by
    --display-mode when given.
    """
    display_mode = args.display_mode or config.display.mode

    if display_mode in {"table", "both"}:
        for title, _, df in tables:
            print()
            print(f"=== {title} ===")
            if df.empty:
                print("(no rows)")
            else:
                print(df.to_string(index=False))

    if display_mode in {"csv", "both"}:
        output_dir = Path(args.output_dir or DEFAULT_OUTPUT_DIR)
        output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")

        for _, stem, df in tables:
            path = output_dir / f"{stem}_{timestamp}.csv"
            df.to_csv(path, index=False)
            print(f"Wrote {path} ({len(df)} rows)")


def _limit_rows(df: pd.DataFrame, limit: Optional[int]) -> pd.DataFrame:
    if limit is not None and limit >= 0:
        return df.head(limit)
    return df


# ---------------------------------------------------------------------------
# dashboard / report
# ---------------------------------------------------------------------------


def _handle_dashboard(args: argparse.Namespace, config, ledger: Ledger) -> None:
    """
    Handle the 'dashboard' command.

    This function:
    - determines the reference date (--today or the current date),
    - computes the dashboard metrics from a snapshot of the ledger,
    - renders the key figures, the monthly series, the capital history and
      the expense breakdown in the display currency.
    """
    today = _parse_optional_date(args.today) or date.today()
    months = getattr(args, "months", None)
    if months is None:
        months = config.dashboard.window_months
    if months < 1:
        raise SystemExit("--months must be at least 1.")

    metrics = compute_dashboard(ledger.snapshot(), today, months=months)
    converter = config.currency
    decimals = config.display.decimals

    print(
        f"Dashboard as of {metrics.as_of.isoformat()} "
        f"(amounts in {converter.currency})"
    )
    print(
        f"Total capital: {converter.format(metrics.total_capital)} "
        f"({metrics.growth_percentage:+.2f}% since start)"
    )

    summary = dashboard_summary_df(metrics, converter, decimals)
    monthly = monthly_series_df(metrics.monthly, converter, decimals)
    history = capital_history_df(metrics.capital_history, converter, decimals)
    breakdown = expense_breakdown_df(metrics.expense_breakdown, converter, decimals)

    _render(
        args,
        config,
        [
            ("Key figures", "dashboard_summary", summary),
            ("Monthly sales, expenses and profit", "dashboard_monthly", monthly),
            ("Capital history", "dashboard_capital", history),
            ("Expense breakdown", "dashboard_expenses", breakdown),
        ],
    )


def _handle_report(args: argparse.Namespace, config, ledger: Ledger) -> None:
    """Handle the 'report' command: monthly reports, newest first."""
    reports = build_monthly_reports(ledger.snapshot())
    converter = config.currency

    if not reports:
        print("No sales or expenses recorded yet.")
        return

    print(f"Monthly reports ({len(reports)} months, amounts in {converter.currency})")
    _render(
        args,
        config,
        [
            (
                "Monthly reports",
                "monthly_reports",
                monthly_reports_df(reports, converter, config.display.decimals),
            )
        ],
    )
    print()
    print(f"Total capital growth: {converter.format(total_capital_growth(reports))}")


# ---------------------------------------------------------------------------
# sales
# ---------------------------------------------------------------------------


def _handle_sales_add(args: argparse.Namespace, config, ledger: Ledger) -> None:
    item = None
    if args.inventory_item_id is not None:
        try:
            item = ledger.get_inventory_item(args.inventory_item_id)
        except KeyError:
            print(
                f"Warning: inventory item {args.inventory_item_id!r} not found; "
                "stock will not be updated."
            )

    item_name = args.item_name or (item.name if item else None)
    cost_price = _from_display(config, args.cost_price)
    sale_price = _from_display(config, args.sale_price)
    if item is not None:
        cost_price = item.cost_price if cost_price is None else cost_price
        sale_price = item.selling_price if sale_price is None else sale_price

    if item_name is None or cost_price is None or sale_price is None:
        raise SystemExit(
            "--item, --cost-price and --sale-price are required unless "
            "--inventory-item refers to an existing item."
        )

    new_sale = NewSale(
        date=_parse_optional_date(args.date) or date.today(),
        item_name=item_name,
        quantity=args.quantity,
        cost_price=cost_price,
        sale_price=sale_price,
    )
    sale = record_sale(
        config, ledger, new_sale, inventory_item_id=args.inventory_item_id
    )

    print(f"Sale recorded: #{sale.id}")
    print(f"  date:       {sale.date.isoformat()}")
    print(f"  item:       {sale.item_name}")
    print(f"  quantity:   {sale.quantity:g}")
    print(f"  revenue:    {config.currency.format(sale.revenue)}")
    print(f"  profit:     {config.currency.format(sale.profit)}")


def _handle_sales_update(args: argparse.Namespace, config, ledger: Ledger) -> None:
    current = ledger.get_sale(args.record_id)
    changes = _changes(
        date=_parse_optional_date(args.date),
        item_name=args.item_name,
        quantity=args.quantity,
        cost_price=_from_display(config, args.cost_price),
        sale_price=_from_display(config, args.sale_price),
    )
    sale = edit_sale(config, ledger, replace(current, **changes))
    print(f"Sale #{sale.id} updated (profit: {config.currency.format(sale.profit)}).")


def _handle_sales_command(args: argparse.Namespace, config, ledger: Ledger) -> None:
    """Dispatch function for the 'sales' subcommands."""
    subcmd = getattr(args, "sales_command", None)
    converter = config.currency
    decimals = config.display.decimals

    if subcmd == "list":
        df = _limit_rows(sales_df(ledger.sales, converter, decimals), args.limit)
        _render(args, config, [("Sales", "sales", df)])
    elif subcmd == "add":
        _handle_sales_add(args, config, ledger)
    elif subcmd == "update":
        _handle_sales_update(args, config, ledger)
    elif subcmd == "delete":
        sale = remove_sale(config, ledger, args.record_id)
        print(f"Sale #{sale.id} deleted ({sale.item_name}, {sale.date.isoformat()}).")
    elif subcmd == "import":
        csv_path = Path(args.csv_path)
        if not csv_path.is_file():
            raise SystemExit(f"CSV file not found: {csv_path}")
        print(f"Importing sales from {csv_path} into the database...")
        stored = import_sales_csv(config, ledger, csv_path)
        print(f"Imported {len(stored)} sale(s).")
    else:
        print(
            "No sales subcommand specified. "
            "Available subcommands are: 'list', 'add', 'update', 'delete', 'import'."
        )


# ---------------------------------------------------------------------------
# expenses
# ---------------------------------------------------------------------------


def _handle_expenses_add(args: argparse.Namespace, config, ledger: Ledger) -> None:
    new_expense = NewExpense(
        date=_parse_optional_date(args.date) or date.today(),
        type=normalize_expense_type(args.expense_type),
        description=args.description or "",
        amount=_from_display(config, args.amount),
    )
    expense = record_expense(config, ledger, new_expense)

    print(f"Expense recorded: #{expense.id}")
    print(f"  date:         {expense.date.isoformat()}")
    print(f"  type:         {expense.type}")
    print(f"  description:  {expense.description}")
    print(f"  amount:       {config.currency.format(expense.amount)}")


def _handle_expenses_update(args: argparse.Namespace, config, ledger: Ledger) -> None:
    current = ledger.get_expense(args.record_id)
    changes = _changes(
        date=_parse_optional_date(args.date),
        type=normalize_expense_type(args.expense_type) if args.expense_type else None,
        description=args.description,
        amount=_from_display(config, args.amount),
    )
    expense = edit_expense(config, ledger, replace(current, **changes))
    print(f"Expense #{expense.id} updated.")


def _handle_expenses_command(args: argparse.Namespace, config, ledger: Ledger) -> None:
    """Dispatch function for the 'expenses' subcommands."""
    subcmd = getattr(args, "expenses_command", None)
    converter = config.currency
    decimals = config.display.decimals

    if subcmd == "list":
        df = _limit_rows(expenses_df(ledger.expenses, converter, decimals), args.limit)
        _render(args, config, [("Expenses", "expenses", df)])
    elif subcmd == "add":
        _handle_expenses_add(args, config, ledger)
    elif subcmd == "update":
        _handle_expenses_update(args, config, ledger)
    elif subcmd == "delete":
        expense = remove_expense(config, ledger, args.record_id)
        print(
            f"Expense #{expense.id} deleted "
            f"({expense.type}, {expense.date.isoformat()})."
        )
    elif subcmd == "import":
        csv_path = Path(args.csv_path)
        if not csv_path.is_file():
            raise SystemExit(f"CSV file not found: {csv_path}")
        print(f"Importing expenses from {csv_path} into the database...")
        stored = import_expenses_csv(config, ledger, csv_path)
        print(f"Imported {len(stored)} expense(s).")
    else:
        print(
            "No expenses subcommand specified. "
            "Available subcommands are: 'list', 'add', 'update', 'delete', 'import'."
        )


# ---------------------------------------------------------------------------
# inventory
# ---------------------------------------------------------------------------


def _handle_inventory_command(args: argparse.Namespace, config, ledger: Ledger) -> None:
    """Dispatch function for the 'inventory' subcommands."""
    subcmd = getattr(args, "inventory_command", None)
    converter = config.currency
    decimals = config.display.decimals
    threshold = config.inventory.low_stock_threshold

    if subcmd == "list":
        df = inventory_df(
            ledger.inventory, converter, decimals, low_stock_threshold=threshold
        )
        _render(args, config, [("Inventory", "inventory", df)])
        print()
        valuation = converter.format(stock_valuation(ledger.inventory))
        print(f"Stock value at cost: {valuation}")
    elif subcmd == "add":
        item = record_inventory_item(
            config,
            ledger,
            NewInventoryItem(
                name=args.name,
                quantity=args.quantity,
                cost_price=_from_display(config, args.cost_price),
                selling_price=_from_display(config, args.selling_price),
            ),
        )
        print(f"Inventory item added: #{item.id} ({item.name}, qty {item.quantity:g})")
    elif subcmd == "update":
        current = ledger.get_inventory_item(args.record_id)
        changes = _changes(
            name=args.name,
            quantity=args.quantity,
            cost_price=_from_display(config, args.cost_price),
            selling_price=_from_display(config, args.selling_price),
        )
        item = edit_inventory_item(config, ledger, replace(current, **changes))
        print(f"Inventory item #{item.id} updated.")
    elif subcmd == "delete":
        item = remove_inventory_item(config, ledger, args.record_id)
        print(f"Inventory item #{item.id} deleted ({item.name}).")
    elif subcmd == "low-stock":
        if args.threshold is not None:
            threshold = args.threshold
        items = low_stock_items(ledger.inventory, threshold)
        if not items:
            print(f"No item below {threshold:g} units.")
            return
        df = inventory_df(items, converter, decimals, low_stock_threshold=threshold)
        _render(args, config, [(f"Items below {threshold:g} units", "low_stock", df)])
    else:
        print(
            "No inventory subcommand specified. Available subcommands are: "
            "'list', 'add', 'update', 'delete', 'low-stock'."
        )


# ---------------------------------------------------------------------------
# capital
# ---------------------------------------------------------------------------


def _handle_capital_command(args: argparse.Namespace, config, ledger: Ledger) -> None:
    """Dispatch function for the 'capital' subcommands."""
    subcmd = getattr(args, "capital_command", None)
    converter = config.currency

    if subcmd == "set":
        capital = change_initial_capital(
            config,
            ledger,
            InitialCapital(
                cash=_from_display(config, args.cash),
                stock=_from_display(config, args.stock),
            ),
        )
        print("Starting capital updated:")
    elif subcmd in {None, "show"}:
        capital = ledger.initial_capital
        print("Starting capital:")
    else:
        print("Available capital subcommands are: 'show', 'set'.")
        return

    print(f"  cash:   {converter.format(capital.cash)}")
    print(f"  stock:  {converter.format(capital.stock)}")
    print(f"  total:  {converter.format(capital.total)}")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the Shop Capital CLI.

    This function parses command-line arguments, loads the application
    configuration, loads the ledger from the database and runs the selected
    command. Invalid input and unknown record ids end the program with an
    error message.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    # --version: short-circuit and exit early.
    if args.version:
        print(f"shop_capital version {__version__}")
        return

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # 1) Load application configuration (database, currency, display, ...)
    try:
        config = load_app_config(args.config_path)
    except (FileNotFoundError, ValueError) as exc:
        raise SystemExit(f"Configuration error: {exc}") from exc

    if args.currency:
        converter = CurrencyConverter(args.currency, config.currency.exchange_rate)
        config = replace(config, currency=converter)

    # 2) Load the ledger (falls back to an empty one on unreadable data)
    command = args.command or "dashboard"
    ledger = open_ledger(config)

    if command in {"dashboard", "report"} and not (ledger.sales or ledger.expenses):
        print(
            "Warning: no sales or expenses recorded yet - use 'sales add' or "
            "'sales import' to record data."
        )
    logger.info(
        "Loaded %d sale(s), %d expense(s), %d inventory item(s) from %s",
        len(ledger.sales),
        len(ledger.expenses),
        len(ledger.inventory),
        config.database.path,
    )

    # 3) Run the command
    handlers = {
        "dashboard": _handle_dashboard,
        "report": _handle_report,
        "sales": _handle_sales_command,
        "expenses": _handle_expenses_command,
        "inventory": _handle_inventory_command,
        "capital": _handle_capital_command,
    }
    try:
        handlers[command](args, config, ledger)
    except LedgerError as exc:
        raise SystemExit(f"Error: {exc}") from exc
    except ValueError as exc:
        raise SystemExit(f"Invalid input: {exc}") from exc


if __name__ == "__main__":
    main()
