# Shop Capital - Finance tracking & dashboard for small retail shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.


"""
Database layer for Shop Capital.

This module stores the ledger in a SQLite file and loads it back. It is
responsible for:

- Initializing the database schema.
- Loading the full ledger (sales, expenses, inventory, starting capital).
- Applying add/update (upsert) and delete by id for every record type.
- Saving the starting capital.

------------------------------------------------------------------------------
Schema Overview
------------------------------------------------------------------------------

1) sales
   - id                TEXT    PRIMARY KEY
   - date              TEXT    NOT NULL  -- ISO date "YYYY-MM-DD"
   - item_name         TEXT    NOT NULL
   - quantity          REAL    NOT NULL
   - cost_price_cents  INTEGER NOT NULL  -- per unit
   - sale_price_cents  INTEGER NOT NULL  -- per unit
   - updated_at        TEXT    NOT NULL  -- UTC timestamp of last write

   Profit is not stored: it is recomputed from prices and quantity when the
   ledger is loaded.

2) expenses
   - id            TEXT    PRIMARY KEY
   - date          TEXT    NOT NULL
   - type          TEXT    NOT NULL  -- "Stock Purchase" | "Operating"
   - description   TEXT
   - amount_cents  INTEGER NOT NULL
   - updated_at    TEXT    NOT NULL

3) inventory_items
   - id                   TEXT    PRIMARY KEY
   - name                 TEXT    NOT NULL
   - quantity             REAL    NOT NULL  -- may be negative when oversold
   - cost_price_cents     INTEGER NOT NULL
   - selling_price_cents  INTEGER NOT NULL
   - updated_at           TEXT    NOT NULL

4) initial_capital
   - id          INTEGER PRIMARY KEY CHECK (id = 1)  -- single row
   - cash_cents  INTEGER NOT NULL
   - stock_cents INTEGER NOT NULL
   - updated_at  TEXT    NOT NULL

------------------------------------------------------------------------------
Loading and fallbacks
------------------------------------------------------------------------------

- Records are returned newest first (reverse insertion order). An upsert
  keeps the original position of the record.
- A row that cannot be parsed is skipped and logged as a warning.
- A database that cannot be read at all gives an empty ledger with the
  default starting capital, also logged as a warning. Loading never fails
  because of stored state.

------------------------------------------------------------------------------
SQLite Notes
------------------------------------------------------------------------------

- Amounts are stored as integer cents of the canonical unit.
- All timestamps are stored as ISO-8601 text (UTC).
- Each write runs in its own short transaction (single writer).
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import TypeVar

from .ledger import Ledger
from .models import (
    DEFAULT_INITIAL_CAPITAL,
    EXPENSE_TYPES,
    Expense,
    InitialCapital,
    InventoryItem,
    Sale,
    compute_profit,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DatabaseConfig:
    """
    Database configuration for Shop Capital.

    Attributes
    ----------
    engine:
        Database engine identifier. Only "sqlite" is supported.
    path:
        Path to the SQLite database file.
    """

    engine: str
    path: Path


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _ensure_sqlite(cfg: DatabaseConfig) -> None:
    """Raise if the configuration does not refer to a supported engine."""
    if cfg.engine.lower() != "sqlite":
        msg = (
            f"Unsupported database engine: {cfg.engine!r}. "
            "Only 'sqlite' is supported for now."
        )
        raise ValueError(msg)


def _connect(cfg: DatabaseConfig) -> sqlite3.Connection:
    """
    Open a SQLite connection.

    The caller is responsible for closing the connection.
    """
    _ensure_sqlite(cfg)
    return sqlite3.connect(cfg.path)


def _create_schema_if_needed(conn: sqlite3.Connection) -> None:
    """
    Create tables and indexes if they do not exist yet.

    This function is idempotent and can be called multiple times safely.
    """
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS sales (
            id                TEXT    PRIMARY KEY,
            date              TEXT    NOT NULL,  -- ISO date 'YYYY-MM-DD'
            item_name         TEXT    NOT NULL,
            quantity          REAL    NOT NULL,
            cost_price_cents  INTEGER NOT NULL,
            sale_price_cents  INTEGER NOT NULL,
            updated_at        TEXT    NOT NULL
        );
        """
    )

    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS expenses (
            id            TEXT    PRIMARY KEY,
            date          TEXT    NOT NULL,
            type          TEXT    NOT NULL,
            description   TEXT,
            amount_cents  INTEGER NOT NULL,
            updated_at    TEXT    NOT NULL
        );
        """
    )

    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS inventory_items (
            id                   TEXT    PRIMARY KEY,
            name                 TEXT    NOT NULL,
            quantity             REAL    NOT NULL,
            cost_price_cents     INTEGER NOT NULL,
            selling_price_cents  INTEGER NOT NULL,
            updated_at           TEXT    NOT NULL
        );
        """
    )

    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS initial_capital (
            id           INTEGER PRIMARY KEY CHECK (id = 1),
            cash_cents   INTEGER NOT NULL,
            stock_cents  INTEGER NOT NULL,
            updated_at   TEXT    NOT NULL
        );
        """
    )

    # Indexes
    conn.execute("CREATE INDEX IF NOT EXISTS idx_sales_date ON sales(date);")
    conn.execute("CREATE INDEX IF NOT EXISTS idx_expenses_date ON expenses(date);")

    conn.commit()


def _to_cents(amount: float) -> int:
    return int(round(amount * 100))


def _from_cents(cents) -> float:
    return int(cents) / 100.0


def _now_utc_iso() -> str:
    """Return the current UTC datetime as ISO string."""
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _upsert(cfg: DatabaseConfig, table: str, values: dict[str, object]) -> None:
    """Insert a row, or update it in place when its id already exists."""
    init_database(cfg)

    values = {**values, "updated_at": _now_utc_iso()}
    columns = list(values)
    assignments = ", ".join(f"{c} = excluded.{c}" for c in columns if c != "id")

    conn = _connect(cfg)
    try:
        conn.execute(
            f"""
            INSERT INTO {table} ({", ".join(columns)})
            VALUES ({", ".join("?" for _ in columns)})
            ON CONFLICT(id) DO UPDATE SET {assignments};
            """,
            [values[c] for c in columns],
        )
        conn.commit()
    finally:
        conn.close()


def _delete(cfg: DatabaseConfig, table: str, record_id: str) -> bool:
    """Delete a row by id. Return True if a row was removed."""
    init_database(cfg)

    conn = _connect(cfg)
    try:
        cur = conn.execute(f"DELETE FROM {table} WHERE id = ?;", (record_id,))
        conn.commit()
        return cur.rowcount > 0
    finally:
        conn.close()


def _row_to_sale(row: tuple) -> Sale:
    sale_id, iso_date, item_name, quantity, cost_cents, sale_cents = row
    cost_price = _from_cents(cost_cents)
    sale_price = _from_cents(sale_cents)
    quantity = float(quantity)
    return Sale(
        id=str(sale_id),
        date=date.fromisoformat(iso_date),
        item_name=str(item_name),
        quantity=quantity,
        cost_price=cost_price,
        sale_price=sale_price,
        profit=compute_profit(sale_price, cost_price, quantity),
    )


def _row_to_expense(row: tuple) -> Expense:
    expense_id, iso_date, expense_type, description, amount_cents = row
    if expense_type not in EXPENSE_TYPES:
        raise ValueError(f"Unknown expense type {expense_type!r}")
    return Expense(
        id=str(expense_id),
        date=date.fromisoformat(iso_date),
        type=expense_type,
        description=description or "",
        amount=_from_cents(amount_cents),
    )


def _row_to_inventory_item(row: tuple) -> InventoryItem:
    item_id, name, quantity, cost_cents, selling_cents = row
    return InventoryItem(
        id=str(item_id),
        name=str(name),
        quantity=float(quantity),
        cost_price=_from_cents(cost_cents),
        selling_price=_from_cents(selling_cents),
    )


def _parse_rows(
    rows: Iterable[tuple], parse: Callable[[tuple], T], table: str
) -> list[T]:
    """Parse rows, skipping (and logging) the ones that are malformed."""
    records: list[T] = []
    for row in rows:
        try:
            records.append(parse(row))
        except (TypeError, ValueError) as exc:
            logger.warning(
                "Skipping unreadable row in %s (id=%r): %s", table, row[0], exc
            )
    return records


def _load_initial_capital(
    conn: sqlite3.Connection, default: InitialCapital
) -> InitialCapital:
    row = conn.execute(
        "SELECT cash_cents, stock_cents FROM initial_capital WHERE id = 1;"
    ).fetchone()
    if row is None:
        return default
    try:
        return InitialCapital(cash=_from_cents(row[0]), stock=_from_cents(row[1]))
    except (TypeError, ValueError) as exc:
        logger.warning("Unreadable starting capital, using default: %s", exc)
        return default


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def init_database(cfg: DatabaseConfig) -> None:
    """
    Initialize the database schema if needed.

    - Creates the SQLite file (and its parent directory) if it does not exist.
    - Creates tables and indexes if they are missing.
    - This function is idempotent: calling it multiple times is safe.

    Raises
    ------
    ValueError
        If cfg.engine is not supported.
    sqlite3.Error
        If schema creation fails.
    """
    cfg.path.parent.mkdir(parents=True, exist_ok=True)

    conn = _connect(cfg)
    try:
        _create_schema_if_needed(conn)
    finally:
        conn.close()


def load_ledger(
    cfg: DatabaseConfig,
    *,
    default_initial_capital: InitialCapital = DEFAULT_INITIAL_CAPITAL,
    clamp_stock_at_zero: bool = False,
) -> Ledger:
    """
    Load the full ledger from the database.

    Parameters
    ----------
    cfg:
        Database configuration.
    default_initial_capital:
        Starting capital used when none has been saved yet, or when the
        stored state cannot be read.
    clamp_stock_at_zero:
        Forwarded to the Ledger (inventory hook of add_sale).

    Returns
    -------
    Ledger
        The loaded ledger. If the database cannot be read, an empty ledger
        with `default_initial_capital` is returned and a warning is logged.
    """
    _ensure_sqlite(cfg)

    try:
        init_database(cfg)
        conn = _connect(cfg)
        try:
            sales_rows = conn.execute(
                """
                SELECT id, date, item_name, quantity,
                       cost_price_cents, sale_price_cents
                  FROM sales
                 ORDER BY rowid DESC;
                """
            ).fetchall()
            expense_rows = conn.execute(
                """
                SELECT id, date, type, description, amount_cents
                  FROM expenses
                 ORDER BY rowid DESC;
                """
            ).fetchall()
            inventory_rows = conn.execute(
                """
                SELECT id, name, quantity, cost_price_cents, selling_price_cents
                  FROM inventory_items
                 ORDER BY rowid DESC;
                """
            ).fetchall()
            initial_capital = _load_initial_capital(conn, default_initial_capital)
        finally:
            conn.close()
    except sqlite3.DatabaseError as exc:
        logger.warning(
            "Could not read database %s, starting from an empty ledger: %s",
            cfg.path,
            exc,
        )
        return Ledger(
            initial_capital=default_initial_capital,
            clamp_stock_at_zero=clamp_stock_at_zero,
        )

    return Ledger(
        sales=_parse_rows(sales_rows, _row_to_sale, "sales"),
        expenses=_parse_rows(expense_rows, _row_to_expense, "expenses"),
        inventory=_parse_rows(
            inventory_rows, _row_to_inventory_item, "inventory_items"
        ),
        initial_capital=initial_capital,
        clamp_stock_at_zero=clamp_stock_at_zero,
    )


def save_sale(cfg: DatabaseConfig, sale: Sale) -> None:
    """Insert or replace a sale (by id)."""
    _upsert(
        cfg,
        "sales",
        {
            "id": sale.id,
            "date": sale.date.isoformat(),
            "item_name": sale.item_name,
            "quantity": float(sale.quantity),
            "cost_price_cents": _to_cents(sale.cost_price),
            "sale_price_cents": _to_cents(sale.sale_price),
        },
    )


def delete_sale(cfg: DatabaseConfig, sale_id: str) -> bool:
    return _delete(cfg, "sales", sale_id)


def save_expense(cfg: DatabaseConfig, expense: Expense) -> None:
    """Insert or replace an expense (by id)."""
    _upsert(
        cfg,
        "expenses",
        {
            "id": expense.id,
            "date": expense.date.isoformat(),
            "type": expense.type,
            "description": expense.description,
            "amount_cents": _to_cents(expense.amount),
        },
    )


def delete_expense(cfg: DatabaseConfig, expense_id: str) -> bool:
    return _delete(cfg, "expenses", expense_id)


def save_inventory_item(cfg: DatabaseConfig, item: InventoryItem) -> None:
    """Insert or replace an inventory item (by id)."""
    _upsert(
        cfg,
        "inventory_items",
        {
            "id": item.id,
            "name": item.name,
            "quantity": float(item.quantity),
            "cost_price_cents": _to_cents(item.cost_price),
            "selling_price_cents": _to_cents(item.selling_price),
        },
    )


def delete_inventory_item(cfg: DatabaseConfig, item_id: str) -> bool:
    return _delete(cfg, "inventory_items", item_id)


def save_initial_capital(cfg: DatabaseConfig, capital: InitialCapital) -> None:
    """Store the starting capital (single row)."""
    _upsert(
        cfg,
        "initial_capital",
        {
            "id": 1,
            "cash_cents": _to_cents(capital.cash),
            "stock_cents": _to_cents(capital.stock),
        },
    )
