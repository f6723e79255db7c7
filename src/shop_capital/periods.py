# Shop Capital - Finance tracking & dashboard for small retail shops
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Month buckets and trailing windows for Shop Capital.

This module defines the MonthBucket value object and the helpers used to
answer two questions for a reference "now":

1) which calendar-month bucket does a given date fall into,
2) which are the N consecutive month buckets ending at the current month
   (oldest first).

Buckets are keyed by (year, month index). The short month name ("Mar") is a
display label only, so two months with the same name in different years
never share a bucket, whatever the window size. Month names are fixed
English names and do not depend on the process locale.
"""

from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass
from datetime import date, datetime
from typing import Union

DEFAULT_WINDOW_MONTHS = 6

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

DateLike = Union[date, datetime]


@dataclass(frozen=True, order=True)
class MonthBucket:
    """A calendar month, ordered chronologically by (year, month)."""

    year: int
    month: int

    @property
    def key(self) -> tuple[int, int]:
        return (self.year, self.month)

    @property
    def label(self) -> str:
        """Short month name, e.g. 'Mar'."""
        return MONTH_NAMES[self.month - 1][:3]

    @property
    def long_label(self) -> str:
        """Full month name and year, e.g. 'March 2024'."""
        return f"{MONTH_NAMES[self.month - 1]} {self.year}"

    @property
    def start(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def end(self) -> date:
        return date(self.year, self.month, monthrange(self.year, self.month)[1])

    def shift(self, months: int) -> MonthBucket:
        """Return the bucket `months` months later (earlier if negative)."""
        index = self.year * 12 + (self.month - 1) + months
        return MonthBucket(year=index // 12, month=index % 12 + 1)


def as_date(value: DateLike) -> date:
    """Return the calendar date of a date or datetime value."""
    if isinstance(value, datetime):
        return value.date()
    return value


def month_bucket(value: DateLike) -> MonthBucket:
    """Bucket containing the given date."""
    d = as_date(value)
    return MonthBucket(year=d.year, month=d.month)


def trailing_months(
    now: DateLike, count: int = DEFAULT_WINDOW_MONTHS
) -> list[MonthBucket]:
    """
    Return the `count` consecutive month buckets ending at the month of `now`.

    The current month plus the `count - 1` previous ones, oldest first.

    Raises
    ------
    ValueError
        If count is lower than 1.
    """
    if count < 1:
        raise ValueError(f"Window size must be at least 1 month (got {count}).")

    current = month_bucket(now)
    return [current.shift(-offset) for offset in range(count - 1, -1, -1)]


def window_start(now: DateLike, count: int = DEFAULT_WINDOW_MONTHS) -> date:
    """First day of the oldest bucket of the trailing window."""
    return trailing_months(now, count)[0].start
