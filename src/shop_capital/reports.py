# Shop Capital - Finance tracking & dashboard for small retail shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Monthly reports for Shop Capital.

Unlike the dashboard series of `engine.py`, which only looks at a trailing
window, the monthly reports cover the entire history of the ledger. Every
calendar month that contains at least one sale or one expense produces one
row:

- sales          : revenue of the month (sum of sale_price * quantity),
- expenses       : sum of all expense amounts of the month,
- profit         : sum of sale profit of the month - expenses,
- capital_growth : capital delta of the month (sale profit - operating
                   expenses; stock purchases are capital-neutral),
- capital_start / capital_end : running capital before and after the month.

The running capital starts at the starting capital (cash + stock) and walks
the months chronologically. Rows are returned newest first.

Months are keyed by (year, month), so the same month name in two different
years always produces two rows. The sum of every `capital_growth` equals the
total capital of the engine minus the starting capital.
"""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from .engine import capital_delta
from .ledger import LedgerSnapshot
from .periods import MonthBucket


@dataclass(frozen=True)
class MonthlyReport:
    """Summary of one calendar month of activity."""

    bucket: MonthBucket
    sales: float
    expenses: float
    profit: float
    capital_growth: float
    capital_start: float
    capital_end: float

    @property
    def month_year(self) -> str:
        """Full label, e.g. 'March 2024'."""
        return self.bucket.long_label


def _months_with_activity(
    sales: pd.DataFrame, expenses: pd.DataFrame
) -> list[MonthBucket]:
    keys = set(zip(sales["year"], sales["month"])) | set(
        zip(expenses["year"], expenses["month"])
    )
    return sorted(MonthBucket(year=int(y), month=int(m)) for y, m in keys)


def build_monthly_reports(snapshot: LedgerSnapshot) -> list[MonthlyReport]:
    """
    Build one report row per month present in the ledger.

    Args:
        snapshot: Immutable ledger state.

    Returns:
        MonthlyReport rows, newest first. An empty ledger gives an empty list.
    """
    sales = snapshot.sales_frame()
    expenses = snapshot.expenses_frame()

    running = snapshot.initial_capital.total
    chronological: list[MonthlyReport] = []

    for bucket in _months_with_activity(sales, expenses):
        month_sales = sales.loc[
            (sales["year"] == bucket.year) & (sales["month"] == bucket.month)
        ]
        month_expenses = expenses.loc[
            (expenses["year"] == bucket.year) & (expenses["month"] == bucket.month)
        ]

        expenses_total = float(month_expenses["amount"].sum())
        delta = capital_delta(month_sales, month_expenses)

        capital_start = running
        running += delta

        chronological.append(
            MonthlyReport(
                bucket=bucket,
                sales=float(month_sales["revenue"].sum()),
                expenses=expenses_total,
                profit=float(month_sales["profit"].sum()) - expenses_total,
                capital_growth=delta,
                capital_start=capital_start,
                capital_end=running,
            )
        )

    chronological.reverse()
    return chronological


def total_capital_growth(reports: list[MonthlyReport]) -> float:
    """Sum of the capital growth of every report row."""
    return sum(report.capital_growth for report in reports)
