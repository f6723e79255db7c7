# Shop Capital - Finance tracking & dashboard for small retail shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Inventory helpers for Shop Capital.

These helpers are display-oriented: they never feed the capital figures of
the engine, where the stock value is driven by stock purchases only.
"""

from collections.abc import Iterable

from .models import InventoryItem

DEFAULT_LOW_STOCK_THRESHOLD = 5


def unit_profit(item: InventoryItem) -> float:
    """Profit made on one unit: selling_price - cost_price."""
    return item.unit_profit


def is_low_stock(
    item: InventoryItem, threshold: float = DEFAULT_LOW_STOCK_THRESHOLD
) -> bool:
    """True when the item quantity is strictly below the threshold."""
    return item.quantity < threshold


def low_stock_items(
    items: Iterable[InventoryItem],
    threshold: float = DEFAULT_LOW_STOCK_THRESHOLD,
) -> list[InventoryItem]:
    """Items whose quantity is below the threshold, lowest quantity first."""
    low = [item for item in items if is_low_stock(item, threshold)]
    return sorted(low, key=lambda item: (item.quantity, item.name))


def stock_valuation(items: Iterable[InventoryItem]) -> float:
    """Value of the items on hand at cost (negative quantities count as 0)."""
    return sum(max(item.quantity, 0.0) * item.cost_price for item in items)
