# Shop Capital - Finance tracking & dashboard for small retail shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Domain records for Shop Capital.

This module defines the value objects shared by every layer of the
application (ledger, engine, reports, persistence, CLI):

- `Sale`            : one sale of an item, with its derived profit,
- `Expense`         : one expense, either a stock purchase or an operating cost,
- `InventoryItem`   : one item kept in stock,
- `InitialCapital`  : the starting cash and stock baseline.

For each record with an id, a `New*` dataclass carries the fields a user
provides at creation time (the id, and for sales the profit, are assigned
by the ledger).

All amounts are expressed in the canonical unit (USD). Currency conversion
is a presentation concern handled by `currency.py`.

Validation
----------
The `validate_*` helpers form the input-validation boundary. They are
called by the CSV readers, the ledger service and the CLI before records
reach the ledger. The ledger and the engine themselves are permissive and
assume well-formed records.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Literal, Union

# ---------------------------------------------------------------------------
# Expense types
# ---------------------------------------------------------------------------

ExpenseType = Literal["Stock Purchase", "Operating"]
"""
Type alias for the category of an expense.

Values
------
- "Stock Purchase": money moved from cash into stock (capital-neutral).
- "Operating"     : running cost of the shop (reduces cash and capital).
"""

STOCK_PURCHASE: ExpenseType = "Stock Purchase"
OPERATING: ExpenseType = "Operating"
EXPENSE_TYPES: tuple[ExpenseType, ...] = (STOCK_PURCHASE, OPERATING)

# Breakdown key used for every stock purchase, whatever its description.
STOCK_CATEGORY = "Stock"

_EXPENSE_TYPE_ALIASES: dict[str, ExpenseType] = {
    "stock purchase": STOCK_PURCHASE,
    "stockpurchase": STOCK_PURCHASE,
    "stock_purchase": STOCK_PURCHASE,
    "stock": STOCK_PURCHASE,
    "operating": OPERATING,
    "operational": OPERATING,
}


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class LedgerError(Exception):
    """Base class for errors raised by ledger operations."""


class RecordNotFoundError(LedgerError, KeyError):
    """Raised when an update or delete targets an id that does not exist."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class DuplicateIdError(LedgerError, ValueError):
    """Raised when a record would be stored under an id already in use."""


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


def compute_profit(sale_price: float, cost_price: float, quantity: float) -> float:
    """Return the profit of a sale: (sale_price - cost_price) * quantity."""
    return (sale_price - cost_price) * quantity


@dataclass(frozen=True)
class NewSale:
    """Data required to record a new sale."""

    date: date
    item_name: str
    quantity: float
    cost_price: float
    sale_price: float


@dataclass(frozen=True)
class Sale:
    """
    A recorded sale.

    Attributes
    ----------
    id:
        Unique identifier assigned by the ledger. Never changes.
    date:
        Calendar date of the sale.
    item_name:
        Free-text name of the item sold.
    quantity:
        Number of units sold (> 0).
    cost_price, sale_price:
        Per-unit prices in the canonical unit.
    profit:
        (sale_price - cost_price) * quantity. Use `recomputed()` after a
        change of prices or quantity.
    """

    id: str
    date: date
    item_name: str
    quantity: float
    cost_price: float
    sale_price: float
    profit: float

    @classmethod
    def from_new(cls, sale_id: str, new_sale: NewSale) -> Sale:
        return cls(
            id=sale_id,
            date=new_sale.date,
            item_name=new_sale.item_name,
            quantity=new_sale.quantity,
            cost_price=new_sale.cost_price,
            sale_price=new_sale.sale_price,
            profit=compute_profit(
                new_sale.sale_price, new_sale.cost_price, new_sale.quantity
            ),
        )

    @property
    def revenue(self) -> float:
        """Gross value of the sale (sale_price * quantity)."""
        return self.sale_price * self.quantity

    def recomputed(self) -> Sale:
        """Return a copy whose profit matches its prices and quantity."""
        return replace(
            self,
            profit=compute_profit(self.sale_price, self.cost_price, self.quantity),
        )


@dataclass(frozen=True)
class NewExpense:
    """Data required to record a new expense."""

    date: date
    type: ExpenseType
    description: str
    amount: float


@dataclass(frozen=True)
class Expense:
    """A recorded expense."""

    id: str
    date: date
    type: ExpenseType
    description: str
    amount: float

    @classmethod
    def from_new(cls, expense_id: str, new_expense: NewExpense) -> Expense:
        return cls(
            id=expense_id,
            date=new_expense.date,
            type=new_expense.type,
            description=new_expense.description,
            amount=new_expense.amount,
        )

    @property
    def category(self) -> str:
        """Breakdown key: 'Stock' for stock purchases, else the description."""
        if self.type == STOCK_PURCHASE:
            return STOCK_CATEGORY
        return self.description


@dataclass(frozen=True)
class NewInventoryItem:
    """Data required to add an item to the inventory."""

    name: str
    quantity: float
    cost_price: float
    selling_price: float


@dataclass(frozen=True)
class InventoryItem:
    """An item kept in stock."""

    id: str
    name: str
    quantity: float
    cost_price: float
    selling_price: float

    @classmethod
    def from_new(cls, item_id: str, new_item: NewInventoryItem) -> InventoryItem:
        return cls(
            id=item_id,
            name=new_item.name,
            quantity=new_item.quantity,
            cost_price=new_item.cost_price,
            selling_price=new_item.selling_price,
        )

    @property
    def unit_profit(self) -> float:
        return self.selling_price - self.cost_price


@dataclass(frozen=True)
class InitialCapital:
    """Starting capital of the shop, split between cash and stock."""

    cash: float
    stock: float

    @property
    def total(self) -> float:
        return self.cash + self.stock


DEFAULT_INITIAL_CAPITAL = InitialCapital(cash=5000.0, stock=2000.0)

Record = Union[Sale, Expense, InventoryItem]


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------


def normalize_expense_type(raw: str) -> ExpenseType:
    """
    Map a user-provided expense type to one of the canonical values.

    Matching is case-insensitive and accepts a few common spellings
    ("stock", "StockPurchase", "stock_purchase", "operating", ...).

    Raises
    ------
    ValueError
        If the value does not name a known expense type.
    """
    key = str(raw).strip().lower()
    try:
        return _EXPENSE_TYPE_ALIASES[key]
    except KeyError as exc:
        raise ValueError(
            f"Invalid expense type: {raw!r}. "
            f"Expected one of: {', '.join(EXPENSE_TYPES)}."
        ) from exc


def _check_non_negative(value: float, field_name: str) -> None:
    if value < 0:
        raise ValueError(f"'{field_name}' cannot be negative (got {value}).")


def validate_sale(sale: NewSale | Sale) -> None:
    """Raise ValueError if the sale fields are not acceptable."""
    if not isinstance(sale.date, date):
        raise ValueError("Sale 'date' must be a calendar date.")
    if not str(sale.item_name).strip():
        raise ValueError("Sale 'item_name' cannot be empty.")
    if sale.quantity <= 0:
        raise ValueError(f"Sale 'quantity' must be > 0 (got {sale.quantity}).")
    _check_non_negative(sale.cost_price, "cost_price")
    _check_non_negative(sale.sale_price, "sale_price")


def validate_expense(expense: NewExpense | Expense) -> None:
    """Raise ValueError if the expense fields are not acceptable."""
    if not isinstance(expense.date, date):
        raise ValueError("Expense 'date' must be a calendar date.")
    if expense.type not in EXPENSE_TYPES:
        raise ValueError(
            f"Invalid expense type: {expense.type!r}. "
            f"Expected one of: {', '.join(EXPENSE_TYPES)}."
        )
    _check_non_negative(expense.amount, "amount")


def validate_inventory_item(item: NewInventoryItem | InventoryItem) -> None:
    """Raise ValueError if the inventory item fields are not acceptable."""
    if not str(item.name).strip():
        raise ValueError("Inventory item 'name' cannot be empty.")
    _check_non_negative(item.quantity, "quantity")
    _check_non_negative(item.cost_price, "cost_price")
    _check_non_negative(item.selling_price, "selling_price")


def validate_initial_capital(capital: InitialCapital) -> None:
    """Raise ValueError if the starting capital has a negative component."""
    _check_non_negative(capital.cash, "cash")
    _check_non_negative(capital.stock, "stock")
