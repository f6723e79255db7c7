# Shop Capital - Finance tracking & dashboard for small retail shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Core financial aggregation engine for Shop Capital.

This module turns a ledger snapshot (sales, expenses, starting capital) into
the metrics shown on the dashboard. Every function is a pure computation of
its inputs: the snapshot and an explicit reference date "now". Nothing here
reads the system clock, mutates the ledger or converts currencies.

The engine computes:

1. Today's totals
   ---------------
   - sales value   : sum of sale_price * quantity for sales dated today,
   - expenses      : sum of amounts for expenses dated today,
   - profit        : sum of sale profit for today minus today's expenses.

2. Capital position
   -----------------
   - total stock value       = initial stock + all stock purchases,
   - total profit            = sum of profit over all sales,
   - total operating expenses,
   - current cash            = initial cash + total profit
                               - operating expenses - stock purchases,
   - total capital           = current cash + total stock value,
   - capital growth (%)      = growth over the starting capital, 0 when the
                               starting capital is 0.

   Stock purchases move money from cash to stock, so the total capital
   always equals:
       initial cash + initial stock + total profit - operating expenses

3. Monthly series (trailing window, oldest first)
   -----------------------------------------------
   For each month bucket of the window:
   - expenses = sum of all expense amounts in the month,
   - profit   = sum of sale profit in the month - expenses,
   - sales    = sum of sale profit in the month + expenses.

   Note: `sales` is a display quantity rebuilt from profit and expenses.
   It is not the revenue of the month and must not be "corrected" into
   one. Revenue per month is available from `reports.py`.

4. Expense breakdown
   ------------------
   Expense amounts grouped by category ('Stock' for stock purchases, the
   description otherwise), in order of first appearance.

5. Capital history
   ----------------
   One capital value per bucket of the monthly series. The capital before
   the window is the starting capital plus the capital delta of every
   record dated before the first day of the oldest bucket; each bucket then
   adds its own capital delta.

   The capital delta of a set of records is
       sum of sale profit - sum of operating expenses
   Stock purchases do not change the capital. When a month has no stock
   purchase, its capital delta is its `profit`.

Key components
--------------
- MonthlyPoint, CapitalPoint, ExpenseCategory, TodayTotals, CapitalPosition :
    frozen dataclasses for each part of the result.
- DashboardMetrics :
    everything above, as returned by `compute_dashboard()`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

import pandas as pd

from .ledger import LedgerSnapshot
from .models import OPERATING, STOCK_PURCHASE, InitialCapital
from .periods import (
    DEFAULT_WINDOW_MONTHS,
    DateLike,
    MonthBucket,
    as_date,
    trailing_months,
)

# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TodayTotals:
    """Totals of the records dated on the reference day."""

    sales: float
    expenses: float
    profit: float


@dataclass(frozen=True)
class CapitalPosition:
    """
    Capital position over the whole history.

    Attributes
    ----------
    total_profit:
        Sum of profit over all sales.
    total_operating_expenses:
        Sum of all 'Operating' expenses.
    total_stock_purchases:
        Sum of all 'Stock Purchase' expenses.
    total_stock_value:
        Initial stock plus all stock purchases.
    current_cash:
        Initial cash + profit - operating expenses - stock purchases.
    total_capital:
        Current cash + total stock value.
    starting_capital:
        Initial cash + initial stock.
    growth_percentage:
        Growth of the capital over the starting capital, in percent
        (0 when the starting capital is 0).
    """

    total_profit: float
    total_operating_expenses: float
    total_stock_purchases: float
    total_stock_value: float
    current_cash: float
    total_capital: float
    starting_capital: float
    growth_percentage: float


@dataclass(frozen=True)
class MonthlyPoint:
    """One month of the trailing series."""

    bucket: MonthBucket
    sales: float
    expenses: float
    profit: float

    @property
    def month(self) -> str:
        return self.bucket.label

    @property
    def year(self) -> int:
        return self.bucket.year


@dataclass(frozen=True)
class CapitalPoint:
    """Running capital at the end of one month of the trailing series."""

    bucket: MonthBucket
    capital: float

    @property
    def month(self) -> str:
        return self.bucket.label


@dataclass(frozen=True)
class ExpenseCategory:
    """Total expenses for one breakdown category."""

    name: str
    value: float


@dataclass(frozen=True)
class DashboardMetrics:
    """All dashboard metrics computed for one reference date."""

    as_of: date
    today: TodayTotals
    capital: CapitalPosition
    monthly: tuple[MonthlyPoint, ...]
    expense_breakdown: tuple[ExpenseCategory, ...]
    capital_history: tuple[CapitalPoint, ...]

    @property
    def total_capital(self) -> float:
        return self.capital.total_capital

    @property
    def growth_percentage(self) -> float:
        return self.capital.growth_percentage


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _total(series: pd.Series) -> float:
    """Sum of a numeric Series as a Python float (0.0 when empty)."""
    return float(series.sum()) if not series.empty else 0.0


def capital_delta(sales: pd.DataFrame, expenses: pd.DataFrame) -> float:
    """Sale profit minus operating expenses for the given records."""
    operating = expenses.loc[expenses["type"] == OPERATING, "amount"]
    return _total(sales["profit"]) - _total(operating)


def _in_bucket(df: pd.DataFrame, bucket: MonthBucket) -> pd.DataFrame:
    return df.loc[(df["year"] == bucket.year) & (df["month"] == bucket.month)]


def _sum_by_month(df: pd.DataFrame, column: str) -> dict[tuple[int, int], float]:
    """Sum `column` per (year, month) key."""
    if df.empty:
        return {}
    grouped = df.groupby(["year", "month"])[column].sum()
    return {(int(y), int(m)): float(v) for (y, m), v in grouped.items()}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def compute_today_totals(snapshot: LedgerSnapshot, now: DateLike) -> TodayTotals:
    """Sales value, expenses and profit of the records dated on `now`."""
    today = pd.Timestamp(as_date(now))
    sales = snapshot.sales_frame()
    expenses = snapshot.expenses_frame()

    todays_sales = sales.loc[sales["date"] == today]
    todays_expenses = _total(expenses.loc[expenses["date"] == today, "amount"])

    return TodayTotals(
        sales=_total(todays_sales["revenue"]),
        expenses=todays_expenses,
        profit=_total(todays_sales["profit"]) - todays_expenses,
    )


def compute_growth_percentage(total_capital: float, starting_capital: float) -> float:
    """Capital growth in percent, 0 when the starting capital is 0."""
    if starting_capital == 0:
        return 0.0
    return (total_capital - starting_capital) / starting_capital * 100


def compute_capital_position(snapshot: LedgerSnapshot) -> CapitalPosition:
    """Capital position over the full (unbounded) history."""
    capital: InitialCapital = snapshot.initial_capital
    sales = snapshot.sales_frame()
    expenses = snapshot.expenses_frame()

    total_profit = _total(sales["profit"])
    total_stock_purchases = _total(
        expenses.loc[expenses["type"] == STOCK_PURCHASE, "amount"]
    )
    total_operating = _total(expenses.loc[expenses["type"] == OPERATING, "amount"])

    total_stock_value = capital.stock + total_stock_purchases
    current_cash = capital.cash + total_profit - total_operating - total_stock_purchases
    total_capital = current_cash + total_stock_value
    starting = capital.total

    return CapitalPosition(
        total_profit=total_profit,
        total_operating_expenses=total_operating,
        total_stock_purchases=total_stock_purchases,
        total_stock_value=total_stock_value,
        current_cash=current_cash,
        total_capital=total_capital,
        starting_capital=starting,
        growth_percentage=compute_growth_percentage(total_capital, starting),
    )


def compute_monthly_series(
    snapshot: LedgerSnapshot,
    now: DateLike,
    months: int = DEFAULT_WINDOW_MONTHS,
) -> list[MonthlyPoint]:
    """
    Monthly sales/expenses/profit for the trailing window, oldest first.

    The window always contains `months` buckets, even when they are empty.
    """
    sales_profit = _sum_by_month(snapshot.sales_frame(), "profit")
    expense_amount = _sum_by_month(snapshot.expenses_frame(), "amount")

    points: list[MonthlyPoint] = []
    for bucket in trailing_months(now, months):
        month_profit = sales_profit.get(bucket.key, 0.0)
        month_expenses = expense_amount.get(bucket.key, 0.0)
        points.append(
            MonthlyPoint(
                bucket=bucket,
                sales=month_profit + month_expenses,
                expenses=month_expenses,
                profit=month_profit - month_expenses,
            )
        )
    return points


def compute_expense_breakdown(snapshot: LedgerSnapshot) -> list[ExpenseCategory]:
    """
    Expense totals per category, in order of first appearance.

    Stock purchases are grouped under 'Stock'; operating expenses are
    grouped by their description.
    """
    totals: dict[str, float] = {}
    for expense in snapshot.expenses:
        totals[expense.category] = totals.get(expense.category, 0.0) + expense.amount
    return [ExpenseCategory(name=name, value=value) for name, value in totals.items()]


def compute_capital_history(
    snapshot: LedgerSnapshot,
    now: DateLike,
    months: int = DEFAULT_WINDOW_MONTHS,
) -> list[CapitalPoint]:
    """
    Running capital at the end of each month of the trailing window.

    The first point starts from the capital reached just before the window
    (starting capital plus the capital delta of all older records).
    """
    buckets = trailing_months(now, months)
    start = pd.Timestamp(buckets[0].start)

    sales = snapshot.sales_frame()
    expenses = snapshot.expenses_frame()

    running = snapshot.initial_capital.total + capital_delta(
        sales.loc[sales["date"] < start], expenses.loc[expenses["date"] < start]
    )

    history: list[CapitalPoint] = []
    for bucket in buckets:
        running += capital_delta(
            _in_bucket(sales, bucket), _in_bucket(expenses, bucket)
        )
        history.append(CapitalPoint(bucket=bucket, capital=running))
    return history


def compute_dashboard(
    snapshot: LedgerSnapshot,
    now: DateLike,
    months: int = DEFAULT_WINDOW_MONTHS,
) -> DashboardMetrics:
    """
    Compute every dashboard metric for the reference date `now`.

    Args:
        snapshot: Immutable ledger state (see `Ledger.snapshot()`).
        now: Reference date (or datetime) defining "today" and the window.
        months: Size of the trailing window, 6 by default.

    Returns:
        A DashboardMetrics instance. Computing it twice on the same
        snapshot and date gives identical results.
    """
    return DashboardMetrics(
        as_of=as_date(now),
        today=compute_today_totals(snapshot, now),
        capital=compute_capital_position(snapshot),
        monthly=tuple(compute_monthly_series(snapshot, now, months)),
        expense_breakdown=tuple(compute_expense_breakdown(snapshot)),
        capital_history=tuple(compute_capital_history(snapshot, now, months)),
    )
