# Shop Capital - Finance tracking & dashboard for small retail shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
I/O module for Shop Capital.

This module reads sales and expenses from CSV files and normalizes them into
a consistent structure. It is the validation boundary of the import path:
a file with a bad value is rejected as a whole, before anything reaches the
ledger.

Expected input formats
----------------------

Column names are case-insensitive; spaces and dashes are treated as
underscores, and the camelCase spellings of older exports are accepted.

1) Sales
   -----
       date, item_name, quantity, cost_price, sale_price

   - ``date``:       date of the sale (YYYY-MM-DD)
   - ``item_name``:  free text (aliases: ``item``, ``itemName``)
   - ``quantity``:   units sold, must be > 0
   - ``cost_price``: per-unit cost, must be >= 0 (alias: ``costPrice``)
   - ``sale_price``: per-unit price, must be >= 0 (alias: ``salePrice``)

2) Expenses
   --------
       date, type, description, amount

   - ``type``:        "Stock Purchase" or "Operating". Common spellings such
                      as "stock", "StockPurchase" or "operating" are
                      normalized.
   - ``description``: free text (alias: ``label``), may be empty
   - ``amount``:      must be >= 0

Any other columns present in the input file are ignored.

If the CSV structure does not match, or a value cannot be parsed, a clear
ValueError is raised.
"""

import os
from typing import Union

import pandas as pd

from .models import NewExpense, NewSale, normalize_expense_type

PathLike = Union[str, "os.PathLike[str]"]

SALES_CSV_COLUMNS = ["date", "item_name", "quantity", "cost_price", "sale_price"]
EXPENSES_CSV_COLUMNS = ["date", "type", "description", "amount"]

_COLUMN_ALIASES = {
    "item": "item_name",
    "itemname": "item_name",
    "costprice": "cost_price",
    "saleprice": "sale_price",
    "label": "description",
}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Lowercase column names and resolve the known aliases."""
    renamed = {}
    for col in df.columns:
        key = str(col).strip().lower().replace(" ", "_").replace("-", "_")
        renamed[col] = _COLUMN_ALIASES.get(key, key)
    return df.rename(columns=renamed)


def _require_columns(df: pd.DataFrame, required: list[str], kind: str) -> None:
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(
            f"Invalid {kind} CSV structure. Missing column(s): "
            f"{', '.join(missing)}.\nExpected: {', '.join(required)} "
            "(column names are case-insensitive)."
        )


def _parse_dates(series: pd.Series) -> pd.Series:
    # Strict parsing: invalid dates should fail loudly
    try:
        parsed = pd.to_datetime(series, errors="raise")
    except Exception as exc:  # noqa: BLE001
        raise ValueError("Invalid values in 'date' column.") from exc
    # Blank cells parse to NaT without raising
    if parsed.isna().any():
        raise ValueError("Invalid values in 'date' column.")
    return parsed.dt.normalize()


def _parse_numbers(df: pd.DataFrame, columns: list[str]) -> None:
    for col in columns:
        df[col] = pd.to_numeric(df[col], errors="coerce")
        if df[col].isna().any():
            raise ValueError(f"Invalid numeric values in '{col}' column.")


def _check_bounds(df: pd.DataFrame, column: str, *, strict: bool) -> None:
    bad = df[column] <= 0 if strict else df[column] < 0
    if bad.any():
        bound = "> 0" if strict else ">= 0"
        first = df.loc[bad, column].iloc[0]
        raise ValueError(f"Values in '{column}' column must be {bound} (got {first}).")


# ---------------------------------------------------------------------------
# Readers
# ---------------------------------------------------------------------------


def read_sales_csv(path: PathLike) -> pd.DataFrame:
    """
    Read sales from a CSV file and normalize them.

    Parameters
    ----------
    path:
        Path to the CSV file.

    Returns
    -------
    pandas.DataFrame
        A DataFrame with exactly these columns:

            - date        (datetime64[ns])
            - item_name   (str)
            - quantity    (float, > 0)
            - cost_price  (float, >= 0)
            - sale_price  (float, >= 0)

    Raises
    ------
    ValueError
        If a required column is missing, if a date or number cannot be
        parsed, or if a value is out of range.
    """
    df = _normalize_columns(pd.read_csv(path))
    _require_columns(df, SALES_CSV_COLUMNS, "sales")

    d = df[SALES_CSV_COLUMNS].copy()
    d["date"] = _parse_dates(d["date"])
    _parse_numbers(d, ["quantity", "cost_price", "sale_price"])
    _check_bounds(d, "quantity", strict=True)
    _check_bounds(d, "cost_price", strict=False)
    _check_bounds(d, "sale_price", strict=False)

    d["item_name"] = d["item_name"].fillna("").astype(str).str.strip()
    if (d["item_name"] == "").any():
        raise ValueError("Empty values in 'item_name' column.")

    for col in ("quantity", "cost_price", "sale_price"):
        d[col] = d[col].astype(float)

    return d.reset_index(drop=True)


def read_expenses_csv(path: PathLike) -> pd.DataFrame:
    """
    Read expenses from a CSV file and normalize them.

    Returns
    -------
    pandas.DataFrame
        Columns: date (datetime64[ns]), type ("Stock Purchase" or
        "Operating"), description (str), amount (float, >= 0).

    Raises
    ------
    ValueError
        If a required column is missing, if a value cannot be parsed, or if
        an expense type is unknown.
    """
    df = _normalize_columns(pd.read_csv(path))
    if "description" not in df.columns:
        df["description"] = ""
    _require_columns(df, EXPENSES_CSV_COLUMNS, "expenses")

    d = df[EXPENSES_CSV_COLUMNS].copy()
    d["date"] = _parse_dates(d["date"])
    _parse_numbers(d, ["amount"])
    _check_bounds(d, "amount", strict=False)

    d["type"] = [normalize_expense_type(value) for value in d["type"]]
    d["description"] = d["description"].fillna("").astype(str).str.strip()
    d["amount"] = d["amount"].astype(float)

    return d.reset_index(drop=True)


# ---------------------------------------------------------------------------
# Conversion to records
# ---------------------------------------------------------------------------


def sales_from_frame(df: pd.DataFrame) -> list[NewSale]:
    """Turn the output of `read_sales_csv` into NewSale records."""
    return [
        NewSale(
            date=row.date.date(),
            item_name=row.item_name,
            quantity=float(row.quantity),
            cost_price=float(row.cost_price),
            sale_price=float(row.sale_price),
        )
        for row in df.itertuples(index=False)
    ]


def expenses_from_frame(df: pd.DataFrame) -> list[NewExpense]:
    """Turn the output of `read_expenses_csv` into NewExpense records."""
    return [
        NewExpense(
            date=row.date.date(),
            type=row.type,
            description=row.description,
            amount=float(row.amount),
        )
        for row in df.itertuples(index=False)
    ]
