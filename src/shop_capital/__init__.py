# Shop Capital - Finance tracking & dashboard for small retail shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Shop Capital
------------

A Python application that tracks the finances of a small retail shop
(sales, expenses, inventory and a starting capital baseline) and derives
the metrics shown on its dashboard and monthly reports.

Main capabilities:
- an in-memory ledger of sales, expenses and inventory items with
  add / replace / delete by id and read-only snapshots,
- a trailing-month bucketer keyed by (year, month),
- a metrics engine (today's totals, 6-month series, expense breakdown,
  capital position, capital history and growth percentage),
- a monthly report aggregator over the full history,
- SQLite persistence with safe fallbacks,
- CSV import of sales and expenses,
- display-time currency conversion (USD canonical, MZN display),
- a command-line interface.

All amounts are stored in a single canonical unit (USD). Currency
conversion is applied only when results are presented.

Version: 0.2.0

Usage:
    python -m shop_capital.cli --help
"""

__all__ = ["engine", "ledger", "models", "periods", "reports"]

__version__ = "0.2.0"
