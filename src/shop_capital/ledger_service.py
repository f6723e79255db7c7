# Shop Capital - Finance tracking & dashboard for small retail shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.


"""
High-level services for recording, editing and importing shop records.

This module sits between:
- the in-memory `Ledger` (ledger.py) and the SQLite helpers (db.py), and
- user-facing layers such as the CLI.

Every operation follows the same steps:

1) validate the user input (models.validate_*),
2) apply the change to the in-memory ledger,
3) persist the change (upsert or delete by id).

The ledger is mutated first, so an unknown id is reported as
RecordNotFoundError before anything is written.

Design notes
------------
- The metrics engine never reads the database: callers take a
  `ledger.snapshot()` after the service call and pass it to the engine.
- When `record_sale` decrements an inventory item, the updated item is
  persisted together with the sale.
"""

import logging
from typing import Optional

from .config import AppConfig
from .db import DatabaseConfig, load_ledger
from .db import (
    delete_expense as _db_delete_expense,
)
from .db import (
    delete_inventory_item as _db_delete_inventory_item,
)
from .db import (
    delete_sale as _db_delete_sale,
)
from .db import (
    save_expense as _db_save_expense,
)
from .db import (
    save_initial_capital as _db_save_initial_capital,
)
from .db import (
    save_inventory_item as _db_save_inventory_item,
)
from .db import (
    save_sale as _db_save_sale,
)
from .io import (
    PathLike,
    expenses_from_frame,
    read_expenses_csv,
    read_sales_csv,
    sales_from_frame,
)
from .ledger import Ledger
from .models import (
    Expense,
    InitialCapital,
    InventoryItem,
    NewExpense,
    NewInventoryItem,
    NewSale,
    Sale,
    validate_expense,
    validate_initial_capital,
    validate_inventory_item,
    validate_sale,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _get_db_config(app_config: AppConfig) -> DatabaseConfig:
    """Convenience helper to access the database configuration."""
    return app_config.database


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def open_ledger(app_config: AppConfig) -> Ledger:
    """
    Load the ledger described by the application configuration.

    The default starting capital and the stock clamping option come from
    the configuration. Unreadable stored state never raises: see
    `db.load_ledger`.
    """
    return load_ledger(
        _get_db_config(app_config),
        default_initial_capital=app_config.default_initial_capital,
        clamp_stock_at_zero=app_config.inventory.clamp_negative_stock,
    )


# ---------------------------------------------------------------------------
# Sales
# ---------------------------------------------------------------------------


def record_sale(
    app_config: AppConfig,
    ledger: Ledger,
    new_sale: NewSale,
    inventory_item_id: Optional[str] = None,
) -> Sale:
    """
    Validate, record and persist a new sale.

    Parameters
    ----------
    app_config:
        Global application configuration.
    ledger:
        In-memory ledger to update.
    new_sale:
        Sale fields provided by the user.
    inventory_item_id:
        Optional id of the inventory item being sold. Its quantity is
        decreased by the quantity sold and the item is saved as well.

    Returns
    -------
    Sale
        The stored sale, with its id and profit.

    Raises
    ------
    ValueError
        If the sale fields are invalid.
    """
    validate_sale(new_sale)

    db_cfg = _get_db_config(app_config)
    sale = ledger.add_sale(new_sale, inventory_item_id=inventory_item_id)
    _db_save_sale(db_cfg, sale)

    if inventory_item_id is not None:
        try:
            item = ledger.get_inventory_item(inventory_item_id)
        except KeyError:
            # Unknown item: the ledger already logged it, nothing to persist.
            pass
        else:
            _db_save_inventory_item(db_cfg, item)

    return sale


def edit_sale(app_config: AppConfig, ledger: Ledger, sale: Sale) -> Sale:
    """
    Replace a sale by id; its profit is recomputed.

    Raises
    ------
    ValueError
        If the sale fields are invalid.
    RecordNotFoundError
        If no sale has this id.
    """
    validate_sale(sale)
    updated = ledger.update_sale(sale)
    _db_save_sale(_get_db_config(app_config), updated)
    return updated


def remove_sale(app_config: AppConfig, ledger: Ledger, sale_id: str) -> Sale:
    """Delete a sale by id. Raises RecordNotFoundError if unknown."""
    removed = ledger.delete_sale(sale_id)
    _db_delete_sale(_get_db_config(app_config), sale_id)
    return removed


# ---------------------------------------------------------------------------
# Expenses
# ---------------------------------------------------------------------------


def record_expense(
    app_config: AppConfig, ledger: Ledger, new_expense: NewExpense
) -> Expense:
    """Validate, record and persist a new expense."""
    validate_expense(new_expense)
    expense = ledger.add_expense(new_expense)
    _db_save_expense(_get_db_config(app_config), expense)
    return expense


def edit_expense(app_config: AppConfig, ledger: Ledger, expense: Expense) -> Expense:
    validate_expense(expense)
    updated = ledger.update_expense(expense)
    _db_save_expense(_get_db_config(app_config), updated)
    return updated


def remove_expense(app_config: AppConfig, ledger: Ledger, expense_id: str) -> Expense:
    removed = ledger.delete_expense(expense_id)
    _db_delete_expense(_get_db_config(app_config), expense_id)
    return removed


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------


def record_inventory_item(
    app_config: AppConfig, ledger: Ledger, new_item: NewInventoryItem
) -> InventoryItem:
    """Validate, record and persist a new inventory item."""
    validate_inventory_item(new_item)
    item = ledger.add_inventory_item(new_item)
    _db_save_inventory_item(_get_db_config(app_config), item)
    return item


def edit_inventory_item(
    app_config: AppConfig, ledger: Ledger, item: InventoryItem
) -> InventoryItem:
    validate_inventory_item(item)
    updated = ledger.update_inventory_item(item)
    _db_save_inventory_item(_get_db_config(app_config), updated)
    return updated


def remove_inventory_item(
    app_config: AppConfig, ledger: Ledger, item_id: str
) -> InventoryItem:
    removed = ledger.delete_inventory_item(item_id)
    _db_delete_inventory_item(_get_db_config(app_config), item_id)
    return removed


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def change_initial_capital(
    app_config: AppConfig, ledger: Ledger, capital: InitialCapital
) -> InitialCapital:
    """
    Replace the starting capital (explicit settings action).

    Raises
    ------
    ValueError
        If cash or stock is negative.
    """
    validate_initial_capital(capital)
    ledger.set_initial_capital(capital)
    _db_save_initial_capital(_get_db_config(app_config), capital)
    logger.info(
        "Starting capital set to cash=%s, stock=%s", capital.cash, capital.stock
    )
    return capital


# ---------------------------------------------------------------------------
# CSV import
# ---------------------------------------------------------------------------


def import_sales_csv(
    app_config: AppConfig, ledger: Ledger, path: PathLike
) -> list[Sale]:
    """
    Import every sale of a CSV file.

    The whole file is read and validated first (see `io.read_sales_csv`);
    nothing is recorded if one row is invalid. Imported sales never touch
    the inventory.

    Returns
    -------
    list[Sale]
        The stored sales, in file order.
    """
    new_sales = sales_from_frame(read_sales_csv(path))
    for new_sale in new_sales:
        validate_sale(new_sale)

    db_cfg = _get_db_config(app_config)
    stored: list[Sale] = []
    for new_sale in new_sales:
        sale = ledger.add_sale(new_sale)
        _db_save_sale(db_cfg, sale)
        stored.append(sale)

    logger.info("Imported %d sale(s) from %s", len(stored), path)
    return stored


def import_expenses_csv(
    app_config: AppConfig, ledger: Ledger, path: PathLike
) -> list[Expense]:
    """Import every expense of a CSV file (validated as a whole first)."""
    new_expenses = expenses_from_frame(read_expenses_csv(path))
    for new_expense in new_expenses:
        validate_expense(new_expense)

    db_cfg = _get_db_config(app_config)
    stored: list[Expense] = []
    for new_expense in new_expenses:
        expense = ledger.add_expense(new_expense)
        _db_save_expense(db_cfg, expense)
        stored.append(expense)

    logger.info("Imported %d expense(s) from %s", len(stored), path)
    return stored
