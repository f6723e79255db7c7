from datetime import date, datetime

import pytest

from shop_capital.periods import (
    MonthBucket,
    month_bucket,
    trailing_months,
    window_start,
)


def test_month_bucket_labels_and_bounds():
    bucket = month_bucket(date(2024, 2, 17))

    assert bucket == MonthBucket(2024, 2)
    assert bucket.label == "Feb"
    assert bucket.long_label == "February 2024"
    assert bucket.start == date(2024, 2, 1)
    assert bucket.end == date(2024, 2, 29)  # leap year


def test_month_bucket_accepts_datetime():
    assert month_bucket(datetime(2024, 3, 31, 23, 59)) == MonthBucket(2024, 3)


def test_trailing_months_crosses_year_boundary():
    buckets = trailing_months(date(2024, 2, 10))

    assert [b.key for b in buckets] == [
        (2023, 9),
        (2023, 10),
        (2023, 11),
        (2023, 12),
        (2024, 1),
        (2024, 2),
    ]
    assert [b.label for b in buckets] == ["Sep", "Oct", "Nov", "Dec", "Jan", "Feb"]


def test_trailing_months_never_collides_across_years():
    buckets = trailing_months(date(2024, 5, 1), count=24)

    assert len(buckets) == 24
    assert len({b.key for b in buckets}) == 24
    assert buckets == sorted(buckets)
    # Same month name, two different years
    assert MonthBucket(2022, 6) in buckets and MonthBucket(2023, 6) in buckets


def test_trailing_months_rejects_empty_window():
    with pytest.raises(ValueError):
        trailing_months(date(2024, 5, 1), count=0)


def test_window_start_is_first_day_of_oldest_bucket():
    assert window_start(date(2024, 8, 31)) == date(2024, 3, 1)
    assert window_start(date(2024, 8, 31), count=1) == date(2024, 8, 1)


def test_shift_both_directions():
    assert MonthBucket(2024, 1).shift(-1) == MonthBucket(2023, 12)
    assert MonthBucket(2023, 12).shift(1) == MonthBucket(2024, 1)
    assert MonthBucket(2024, 6).shift(-18) == MonthBucket(2022, 12)
