# Shop Capital - Finance tracking & dashboard for small retail shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
In-memory ledger for Shop Capital.

The ledger holds every sale, expense and inventory item of the shop, plus
the single InitialCapital baseline. It is the only mutable state of the
application: the metrics engine and the report aggregator only ever read
an immutable `LedgerSnapshot`.

Responsibilities
----------------
1) Record lifecycle
   - `add_*` assigns a fresh unique id and stores the record (newest first).
   - `update_*` replaces a whole record by id (sales get their profit
     recomputed from the replacement's prices and quantity).
   - `delete_*` removes a record by id.
   - Unknown ids on update/delete raise RecordNotFoundError; an id already
     in use raises DuplicateIdError.

2) Inventory side effect
   - `add_sale(..., inventory_item_id=...)` decrements the quantity of the
     referenced inventory item by the quantity sold. The link is not kept
     on the sale. An unknown item id leaves the inventory untouched and is
     logged as a warning.
   - Quantities may go negative when an item is oversold, unless the
     ledger is created with `clamp_stock_at_zero=True`.

3) Snapshots
   - `snapshot()` returns frozen tuples of records and the current
     InitialCapital, so a computation never mixes pre- and post-mutation
     state.
   - `LedgerSnapshot.sales_frame()` / `expenses_frame()` expose the records
     as pandas DataFrames for the aggregation code.

Ids
---
Ids are string tokens derived from the current time in milliseconds, bumped
until unique within the ledger. They only need to be distinct, not ordered.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Optional

import pandas as pd

from .models import (
    DEFAULT_INITIAL_CAPITAL,
    DuplicateIdError,
    Expense,
    InitialCapital,
    InventoryItem,
    NewExpense,
    NewInventoryItem,
    NewSale,
    RecordNotFoundError,
    Sale,
)

logger = logging.getLogger(__name__)

SALES_COLUMNS = [
    "id",
    "date",
    "item_name",
    "quantity",
    "cost_price",
    "sale_price",
    "profit",
    "revenue",
]

EXPENSES_COLUMNS = ["id", "date", "type", "description", "amount"]

INVENTORY_COLUMNS = [
    "id",
    "name",
    "quantity",
    "cost_price",
    "selling_price",
    "unit_profit",
]


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


def _finalize_frame(
    df: pd.DataFrame, float_columns: Iterable[str], *, with_date: bool = True
) -> pd.DataFrame:
    """Give a (possibly empty) frame stable dtypes and derived year/month."""
    for col in float_columns:
        df[col] = df[col].astype(float)
    if with_date:
        df["date"] = pd.to_datetime(df["date"])
        df["year"] = df["date"].dt.year.astype(int)
        df["month"] = df["date"].dt.month.astype(int)
    return df


@dataclass(frozen=True)
class LedgerSnapshot:
    """
    Immutable view of the ledger at one point in time.

    This is the only input of the metrics engine and the report aggregator
    (together with a reference date).
    """

    sales: tuple[Sale, ...] = ()
    expenses: tuple[Expense, ...] = ()
    inventory: tuple[InventoryItem, ...] = ()
    initial_capital: InitialCapital = DEFAULT_INITIAL_CAPITAL

    def sales_frame(self) -> pd.DataFrame:
        """
        Sales as a DataFrame.

        Columns: id, date (datetime64[ns]), item_name, quantity, cost_price,
        sale_price, profit, revenue (sale_price * quantity), year, month.
        """
        df = pd.DataFrame(
            [
                (
                    s.id,
                    s.date,
                    s.item_name,
                    s.quantity,
                    s.cost_price,
                    s.sale_price,
                    s.profit,
                    s.revenue,
                )
                for s in self.sales
            ],
            columns=SALES_COLUMNS,
        )
        return _finalize_frame(
            df, ("quantity", "cost_price", "sale_price", "profit", "revenue")
        )

    def expenses_frame(self) -> pd.DataFrame:
        """
        Expenses as a DataFrame.

        Columns: id, date (datetime64[ns]), type, description, amount, year,
        month.
        """
        df = pd.DataFrame(
            [(e.id, e.date, e.type, e.description, e.amount) for e in self.expenses],
            columns=EXPENSES_COLUMNS,
        )
        return _finalize_frame(df, ("amount",))

    def inventory_frame(self) -> pd.DataFrame:
        """Inventory items as a DataFrame (no date columns)."""
        df = pd.DataFrame(
            [
                (
                    i.id,
                    i.name,
                    i.quantity,
                    i.cost_price,
                    i.selling_price,
                    i.unit_profit,
                )
                for i in self.inventory
            ],
            columns=INVENTORY_COLUMNS,
        )
        return _finalize_frame(
            df,
            ("quantity", "cost_price", "selling_price", "unit_profit"),
            with_date=False,
        )


# ---------------------------------------------------------------------------
# Ledger
# ---------------------------------------------------------------------------


def _find_index(records: list, record_id: str) -> Optional[int]:
    for index, record in enumerate(records):
        if record.id == record_id:
            return index
    return None


class Ledger:
    """
    Mutable collection of the shop's records.

    Parameters
    ----------
    sales, expenses, inventory:
        Initial records (e.g. loaded from the database), newest first.
    initial_capital:
        Starting capital. Defaults to cash=5000, stock=2000.
    clamp_stock_at_zero:
        When True, the inventory hook of `add_sale` never lowers an item's
        quantity below zero.

    Raises
    ------
    DuplicateIdError
        If the initial records contain the same id twice.
    """

    def __init__(
        self,
        sales: Iterable[Sale] = (),
        expenses: Iterable[Expense] = (),
        inventory: Iterable[InventoryItem] = (),
        initial_capital: InitialCapital = DEFAULT_INITIAL_CAPITAL,
        *,
        clamp_stock_at_zero: bool = False,
    ) -> None:
        self._sales: list[Sale] = list(sales)
        self._expenses: list[Expense] = list(expenses)
        self._inventory: list[InventoryItem] = list(inventory)
        self._initial_capital = initial_capital
        self.clamp_stock_at_zero = clamp_stock_at_zero

        for kind, records in (
            ("sale", self._sales),
            ("expense", self._expenses),
            ("inventory item", self._inventory),
        ):
            seen: set[str] = set()
            for record in records:
                if record.id in seen:
                    raise DuplicateIdError(f"Duplicate {kind} id {record.id!r}.")
                seen.add(record.id)

    # -- read access --------------------------------------------------------

    @property
    def sales(self) -> tuple[Sale, ...]:
        return tuple(self._sales)

    @property
    def expenses(self) -> tuple[Expense, ...]:
        return tuple(self._expenses)

    @property
    def inventory(self) -> tuple[InventoryItem, ...]:
        return tuple(self._inventory)

    @property
    def initial_capital(self) -> InitialCapital:
        return self._initial_capital

    def snapshot(self) -> LedgerSnapshot:
        """Return an immutable copy of the current ledger state."""
        return LedgerSnapshot(
            sales=tuple(self._sales),
            expenses=tuple(self._expenses),
            inventory=tuple(self._inventory),
            initial_capital=self._initial_capital,
        )

    def get_sale(self, sale_id: str) -> Sale:
        return self._sales[self._require_index(self._sales, sale_id, "Sale")]

    def get_expense(self, expense_id: str) -> Expense:
        return self._expenses[
            self._require_index(self._expenses, expense_id, "Expense")
        ]

    def get_inventory_item(self, item_id: str) -> InventoryItem:
        return self._inventory[
            self._require_index(self._inventory, item_id, "Inventory item")
        ]

    # -- ids ----------------------------------------------------------------

    def _new_id(self, records: list) -> str:
        """Timestamp-based token, bumped until unused in `records`."""
        used = {record.id for record in records}
        candidate = time.time_ns() // 1_000_000
        while str(candidate) in used:
            candidate += 1
        return str(candidate)

    @staticmethod
    def _require_index(records: list, record_id: str, kind: str) -> int:
        index = _find_index(records, record_id)
        if index is None:
            raise RecordNotFoundError(f"{kind} {record_id!r} not found.")
        return index

    # -- sales --------------------------------------------------------------

    def add_sale(
        self, new_sale: NewSale, inventory_item_id: Optional[str] = None
    ) -> Sale:
        """
        Record a sale and, optionally, take it out of the inventory.

        Parameters
        ----------
        new_sale:
            Sale fields provided by the user.
        inventory_item_id:
            Optional id of the inventory item being sold. Its quantity is
            decreased by the quantity sold. Unknown ids are ignored (with a
            warning).

        Returns
        -------
        Sale
            The stored sale, with its id and profit.
        """
        sale = Sale.from_new(self._new_id(self._sales), new_sale)
        self._sales.insert(0, sale)

        if inventory_item_id is not None:
            self._decrement_stock(inventory_item_id, sale.quantity)

        return sale

    def _decrement_stock(self, item_id: str, quantity: float) -> None:
        index = _find_index(self._inventory, item_id)
        if index is None:
            logger.warning(
                "Inventory item %r not found, stock left unchanged for this sale.",
                item_id,
            )
            return

        item = self._inventory[index]
        remaining = item.quantity - quantity
        if remaining < 0:
            if self.clamp_stock_at_zero:
                logger.warning(
                    "Inventory item %r oversold by %s, quantity clamped at 0.",
                    item_id,
                    -remaining,
                )
                remaining = 0.0
            else:
                logger.warning(
                    "Inventory item %r oversold, quantity is now %s.",
                    item_id,
                    remaining,
                )
        self._inventory[index] = replace(item, quantity=remaining)

    def update_sale(self, sale: Sale) -> Sale:
        """Replace the sale with the same id; its profit is recomputed."""
        index = self._require_index(self._sales, sale.id, "Sale")
        updated = sale.recomputed()
        self._sales[index] = updated
        return updated

    def delete_sale(self, sale_id: str) -> Sale:
        index = self._require_index(self._sales, sale_id, "Sale")
        return self._sales.pop(index)

    # -- expenses -----------------------------------------------------------

    def add_expense(self, new_expense: NewExpense) -> Expense:
        expense = Expense.from_new(self._new_id(self._expenses), new_expense)
        self._expenses.insert(0, expense)
        return expense

    def update_expense(self, expense: Expense) -> Expense:
        index = self._require_index(self._expenses, expense.id, "Expense")
        self._expenses[index] = expense
        return expense

    def delete_expense(self, expense_id: str) -> Expense:
        index = self._require_index(self._expenses, expense_id, "Expense")
        return self._expenses.pop(index)

    # -- inventory ----------------------------------------------------------

    def add_inventory_item(self, new_item: NewInventoryItem) -> InventoryItem:
        item = InventoryItem.from_new(self._new_id(self._inventory), new_item)
        self._inventory.insert(0, item)
        return item

    def update_inventory_item(self, item: InventoryItem) -> InventoryItem:
        index = self._require_index(self._inventory, item.id, "Inventory item")
        self._inventory[index] = item
        return item

    def delete_inventory_item(self, item_id: str) -> InventoryItem:
        index = self._require_index(self._inventory, item_id, "Inventory item")
        return self._inventory.pop(index)

    # -- settings -----------------------------------------------------------

    def set_initial_capital(self, capital: InitialCapital) -> InitialCapital:
        """Replace the starting capital (explicit settings action)."""
        self._initial_capital = capital
        return capital
