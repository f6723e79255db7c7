# Shop Capital - Finance tracking & dashboard for small retail shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Display currency for Shop Capital.

Amounts are always stored and aggregated in the canonical unit (USD). This
module converts finished figures to the currency chosen for display and
formats them. It is applied by the view layer after aggregation, never
before.

Supported display currencies
----------------------------
- "USD" : canonical unit, no conversion, formatted as "$1,234.56".
- "MZN" : Mozambican metical, amount * exchange_rate, formatted as
          "1.234,56 MT".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

DisplayCurrency = Literal["USD", "MZN"]

CANONICAL_CURRENCY: DisplayCurrency = "USD"
SUPPORTED_CURRENCIES: tuple[DisplayCurrency, ...] = ("USD", "MZN")
DEFAULT_EXCHANGE_RATE = 64.0

_SYMBOLS: dict[str, str] = {"USD": "$", "MZN": "MT"}


@dataclass(frozen=True)
class CurrencyConverter:
    """
    Conversion between the canonical unit and the display currency.

    Attributes
    ----------
    currency:
        Display currency code.
    exchange_rate:
        Units of MZN per USD. Ignored when the display currency is USD.
    """

    currency: DisplayCurrency = CANONICAL_CURRENCY
    exchange_rate: float = DEFAULT_EXCHANGE_RATE

    def __post_init__(self) -> None:
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValueError(
                f"Unsupported display currency: {self.currency!r}. "
                f"Expected one of: {', '.join(SUPPORTED_CURRENCIES)}."
            )
        if self.exchange_rate <= 0:
            raise ValueError(
                f"Exchange rate must be > 0 (got {self.exchange_rate})."
            )

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self.currency]

    def to_display(self, amount: float) -> float:
        """Convert a canonical (USD) amount to the display currency."""
        if self.currency == "MZN":
            return amount * self.exchange_rate
        return amount

    def from_display(self, amount: float) -> float:
        """Convert an amount typed in the display currency back to USD."""
        if self.currency == "MZN":
            return amount / self.exchange_rate
        return amount

    def format(self, amount: float) -> str:
        """Convert a canonical amount and format it for display."""
        value = self.to_display(amount)
        sign = "-" if value < 0 else ""
        grouped = f"{abs(value):,.2f}"
        if self.currency == "MZN":
            # Portuguese grouping: '.' for thousands, ',' for decimals.
            grouped = grouped.replace(",", " ").replace(".", ",").replace(" ", ".")
            return f"{sign}{grouped} {self.symbol}"
        return f"{sign}{self.symbol}{grouped}"
