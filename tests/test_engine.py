from datetime import date, datetime

import pytest

from shop_capital.engine import (
    compute_capital_history,
    compute_capital_position,
    compute_dashboard,
    compute_expense_breakdown,
    compute_growth_percentage,
    compute_monthly_series,
    compute_today_totals,
)
from shop_capital.ledger import Ledger
from shop_capital.models import (
    OPERATING,
    STOCK_PURCHASE,
    InitialCapital,
    NewExpense,
    NewSale,
)

TODAY = date(2024, 3, 14)


def sale(day, quantity=2, cost=10.0, price=25.0, name="Soap") -> NewSale:
    return NewSale(
        date=day, item_name=name, quantity=quantity, cost_price=cost, sale_price=price
    )


def expense(day, amount, kind=OPERATING, description="Rent") -> NewExpense:
    return NewExpense(date=day, type=kind, description=description, amount=amount)


def make_basic_ledger() -> Ledger:
    """One sale (2 x 10 -> 25) and one operating expense of 15, both today."""
    ledger = Ledger(initial_capital=InitialCapital(cash=5000.0, stock=2000.0))
    ledger.add_sale(sale(TODAY))
    ledger.add_expense(expense(TODAY, 15.0))
    return ledger


def test_today_totals_basic_scenario():
    totals = compute_today_totals(make_basic_ledger().snapshot(), TODAY)

    assert totals.sales == pytest.approx(50.0)
    assert totals.expenses == pytest.approx(15.0)
    assert totals.profit == pytest.approx(15.0)


def test_today_totals_ignore_other_days():
    ledger = make_basic_ledger()
    ledger.add_sale(sale(date(2024, 3, 13), quantity=10))

    totals = compute_today_totals(ledger.snapshot(), datetime(2024, 3, 14, 18, 30))

    assert totals.sales == pytest.approx(50.0)


def test_capital_position_basic_scenario():
    position = compute_capital_position(make_basic_ledger().snapshot())

    assert position.total_profit == pytest.approx(30.0)
    assert position.current_cash == pytest.approx(5015.0)
    assert position.total_stock_value == pytest.approx(2000.0)
    assert position.total_capital == pytest.approx(7015.0)
    assert position.growth_percentage == pytest.approx(15.0 / 7000.0 * 100)


def test_stock_purchase_moves_cash_into_stock():
    ledger = make_basic_ledger()
    ledger.add_expense(expense(TODAY, 500.0, kind=STOCK_PURCHASE, description="Order"))

    position = compute_capital_position(ledger.snapshot())

    assert position.current_cash == pytest.approx(4515.0)
    assert position.total_stock_value == pytest.approx(2500.0)
    assert position.total_capital == pytest.approx(7015.0)


def test_capital_identity_holds():
    ledger = Ledger(initial_capital=InitialCapital(cash=1200.0, stock=300.0))
    ledger.add_sale(sale(date(2023, 11, 2), quantity=3, cost=4.0, price=9.5))
    ledger.add_sale(sale(date(2024, 1, 20), quantity=1, cost=12.0, price=7.0))
    ledger.add_expense(expense(date(2023, 12, 5), 80.0, kind=STOCK_PURCHASE))
    ledger.add_expense(expense(date(2024, 2, 1), 42.5))

    position = compute_capital_position(ledger.snapshot())

    expected = (
        1200.0 + 300.0 + position.total_profit - position.total_operating_expenses
    )
    assert position.total_capital == pytest.approx(expected)


def test_empty_ledger():
    metrics = compute_dashboard(Ledger().snapshot(), TODAY)

    assert metrics.today.sales == 0 and metrics.today.profit == 0
    assert metrics.total_capital == pytest.approx(7000.0)
    assert metrics.growth_percentage == 0.0
    months = [p.month for p in metrics.monthly]
    assert months == ["Oct", "Nov", "Dec", "Jan", "Feb", "Mar"]
    assert all(p.sales == p.expenses == p.profit == 0 for p in metrics.monthly)
    assert metrics.expense_breakdown == ()
    assert all(p.capital == pytest.approx(7000.0) for p in metrics.capital_history)


def test_zero_starting_capital_gives_zero_growth():
    ledger = Ledger(initial_capital=InitialCapital(cash=0.0, stock=0.0))
    ledger.add_sale(sale(TODAY))

    position = compute_capital_position(ledger.snapshot())

    assert position.total_capital == pytest.approx(30.0)
    assert position.growth_percentage == 0.0
    assert compute_growth_percentage(10.0, 0.0) == 0.0


def test_monthly_series_preserves_sales_quirk():
    ledger = Ledger()
    ledger.add_sale(sale(date(2024, 2, 3)))  # profit 30
    ledger.add_expense(expense(date(2024, 2, 10), 12.0))

    series = compute_monthly_series(ledger.snapshot(), TODAY)
    february = series[-2]

    assert february.month == "Feb" and february.year == 2024
    assert february.sales == pytest.approx(42.0)  # profit + expenses
    assert february.expenses == pytest.approx(12.0)
    assert february.profit == pytest.approx(18.0)


def test_monthly_series_does_not_merge_same_month_of_another_year():
    ledger = Ledger()
    ledger.add_sale(sale(date(2023, 3, 10)))  # outside the window

    series = compute_monthly_series(ledger.snapshot(), TODAY)

    assert series[-1].month == "Mar"
    assert series[-1].profit == 0.0


def test_expense_breakdown_groups_by_category_in_first_seen_order():
    ledger = Ledger()
    # The ledger stores newest first, so add in reverse of the expected order.
    ledger.add_expense(expense(date(2024, 3, 3), 5.0, description="Rent"))
    ledger.add_expense(expense(date(2024, 3, 2), 100.0, kind=STOCK_PURCHASE))
    ledger.add_expense(expense(date(2024, 3, 1), 20.0, description="Rent"))
    ledger.add_expense(expense(date(2024, 3, 1), 50.0, kind=STOCK_PURCHASE))

    breakdown = compute_expense_breakdown(ledger.snapshot())

    assert [(c.name, c.value) for c in breakdown] == [("Stock", 150.0), ("Rent", 25.0)]


def test_capital_history_ends_at_total_capital():
    ledger = Ledger()
    ledger.add_sale(sale(date(2023, 1, 5), quantity=10))  # before the window
    ledger.add_expense(expense(date(2023, 6, 1), 40.0))  # before the window
    ledger.add_sale(sale(date(2024, 1, 15)))
    ledger.add_expense(expense(date(2024, 2, 1), 300.0, kind=STOCK_PURCHASE))
    ledger.add_expense(expense(date(2024, 3, 1), 25.0))
    snapshot = ledger.snapshot()

    history = compute_capital_history(snapshot, TODAY)
    position = compute_capital_position(snapshot)

    assert len(history) == 6
    # Records before the window are folded into the first point.
    assert history[0].capital == pytest.approx(7000.0 + 150.0 - 40.0)
    assert history[-1].capital == pytest.approx(position.total_capital)


def test_capital_history_steps_match_monthly_profit_without_stock_purchases():
    ledger = Ledger()
    ledger.add_sale(sale(date(2024, 1, 15)))
    ledger.add_expense(expense(date(2024, 2, 1), 12.0))
    snapshot = ledger.snapshot()

    history = compute_capital_history(snapshot, TODAY)
    series = compute_monthly_series(snapshot, TODAY)

    previous = snapshot.initial_capital.total
    for point, month in zip(history, series):
        assert point.capital - previous == pytest.approx(month.profit)
        previous = point.capital


def test_dashboard_is_idempotent():
    snapshot = make_basic_ledger().snapshot()
    assert compute_dashboard(snapshot, TODAY) == compute_dashboard(snapshot, TODAY)


def test_dashboard_window_size_is_configurable():
    metrics = compute_dashboard(make_basic_ledger().snapshot(), TODAY, months=12)

    assert len(metrics.monthly) == 12
    assert len(metrics.capital_history) == 12
    assert metrics.monthly[0].bucket.key == (2023, 4)
