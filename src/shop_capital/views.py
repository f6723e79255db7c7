# Shop Capital - Finance tracking & dashboard for small retail shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
View utilities for Shop Capital.

This module turns the results of the metrics engine, of the report
aggregator and the raw ledger records into pandas DataFrames ready for
console display or CSV export.

Every helper receives a `CurrencyConverter` and a number of decimals:
amounts are converted to the display currency and rounded here, after all
aggregation is done. Quantities and percentages are never converted.
"""

from collections.abc import Iterable, Sequence

import pandas as pd

from .currency import CurrencyConverter
from .engine import CapitalPoint, DashboardMetrics, ExpenseCategory, MonthlyPoint
from .inventory import DEFAULT_LOW_STOCK_THRESHOLD, is_low_stock
from .models import Expense, InventoryItem, Sale
from .reports import MonthlyReport

MONTHLY_COLUMNS = ["month", "year", "sales", "expenses", "profit"]
CAPITAL_HISTORY_COLUMNS = ["month", "year", "capital"]
BREAKDOWN_COLUMNS = ["category", "value"]
REPORT_COLUMNS = [
    "month_year",
    "sales",
    "expenses",
    "profit",
    "capital_growth",
    "capital_start",
    "capital_end",
]
SALES_VIEW_COLUMNS = [
    "id",
    "date",
    "item_name",
    "quantity",
    "cost_price",
    "sale_price",
    "profit",
]
EXPENSES_VIEW_COLUMNS = ["id", "date", "type", "description", "amount"]
INVENTORY_VIEW_COLUMNS = [
    "id",
    "name",
    "quantity",
    "cost_price",
    "selling_price",
    "unit_profit",
    "low_stock",
]


def _convert(
    df: pd.DataFrame,
    amount_columns: Sequence[str],
    converter: CurrencyConverter,
    decimals: int,
) -> pd.DataFrame:
    """Convert and round the amount columns of a frame (in place)."""
    for col in amount_columns:
        df[col] = [round(converter.to_display(float(v)), decimals) for v in df[col]]
    return df


def dashboard_summary_df(
    metrics: DashboardMetrics, converter: CurrencyConverter, decimals: int = 2
) -> pd.DataFrame:
    """
    Key figures of the dashboard, one row per metric.

    Columns: metric, value. Every value is an amount in the display currency,
    except "Capital growth %".
    """
    today = metrics.today
    capital = metrics.capital

    amounts = [
        ("Today's sales", today.sales),
        ("Today's expenses", today.expenses),
        ("Today's profit", today.profit),
        ("Total profit", capital.total_profit),
        ("Operating expenses", capital.total_operating_expenses),
        ("Stock purchases", capital.total_stock_purchases),
        ("Current cash", capital.current_cash),
        ("Stock value", capital.total_stock_value),
        ("Starting capital", capital.starting_capital),
        ("Total capital", capital.total_capital),
    ]

    rows = [
        {"metric": label, "value": round(converter.to_display(value), decimals)}
        for label, value in amounts
    ]
    rows.append(
        {
            "metric": "Capital growth %",
            "value": round(capital.growth_percentage, decimals),
        }
    )
    return pd.DataFrame(rows, columns=["metric", "value"])


def monthly_series_df(
    points: Iterable[MonthlyPoint], converter: CurrencyConverter, decimals: int = 2
) -> pd.DataFrame:
    """Monthly series of the dashboard, oldest month first."""
    df = pd.DataFrame(
        [(p.month, p.year, p.sales, p.expenses, p.profit) for p in points],
        columns=MONTHLY_COLUMNS,
    )
    return _convert(df, ("sales", "expenses", "profit"), converter, decimals)


def capital_history_df(
    points: Iterable[CapitalPoint], converter: CurrencyConverter, decimals: int = 2
) -> pd.DataFrame:
    df = pd.DataFrame(
        [(p.month, p.bucket.year, p.capital) for p in points],
        columns=CAPITAL_HISTORY_COLUMNS,
    )
    return _convert(df, ("capital",), converter, decimals)


def expense_breakdown_df(
    categories: Iterable[ExpenseCategory],
    converter: CurrencyConverter,
    decimals: int = 2,
) -> pd.DataFrame:
    df = pd.DataFrame(
        [(c.name, c.value) for c in categories], columns=BREAKDOWN_COLUMNS
    )
    return _convert(df, ("value",), converter, decimals)


def monthly_reports_df(
    reports: Iterable[MonthlyReport], converter: CurrencyConverter, decimals: int = 2
) -> pd.DataFrame:
    """Monthly reports, newest month first (order of the input)."""
    df = pd.DataFrame(
        [
            (
                r.month_year,
                r.sales,
                r.expenses,
                r.profit,
                r.capital_growth,
                r.capital_start,
                r.capital_end,
            )
            for r in reports
        ],
        columns=REPORT_COLUMNS,
    )
    return _convert(df, REPORT_COLUMNS[1:], converter, decimals)


def sales_df(
    sales: Iterable[Sale], converter: CurrencyConverter, decimals: int = 2
) -> pd.DataFrame:
    df = pd.DataFrame(
        [
            (
                s.id,
                s.date.isoformat(),
                s.item_name,
                s.quantity,
                s.cost_price,
                s.sale_price,
                s.profit,
            )
            for s in sales
        ],
        columns=SALES_VIEW_COLUMNS,
    )
    return _convert(df, ("cost_price", "sale_price", "profit"), converter, decimals)


def expenses_df(
    expenses: Iterable[Expense], converter: CurrencyConverter, decimals: int = 2
) -> pd.DataFrame:
    df = pd.DataFrame(
        [
            (e.id, e.date.isoformat(), e.type, e.description, e.amount)
            for e in expenses
        ],
        columns=EXPENSES_VIEW_COLUMNS,
    )
    return _convert(df, ("amount",), converter, decimals)


def inventory_df(
    items: Iterable[InventoryItem],
    converter: CurrencyConverter,
    decimals: int = 2,
    *,
    low_stock_threshold: float = DEFAULT_LOW_STOCK_THRESHOLD,
) -> pd.DataFrame:
    """
    Inventory items with their per-unit profit and a low-stock flag.

    The low_stock column is True when the quantity is below
    `low_stock_threshold`.
    """
    df = pd.DataFrame(
        [
            (
                i.id,
                i.name,
                i.quantity,
                i.cost_price,
                i.selling_price,
                i.unit_profit,
                is_low_stock(i, low_stock_threshold),
            )
            for i in items
        ],
        columns=INVENTORY_VIEW_COLUMNS,
    )
    return _convert(
        df, ("cost_price", "selling_price", "unit_profit"), converter, decimals
    )
