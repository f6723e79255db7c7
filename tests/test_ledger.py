import logging
from dataclasses import replace
from datetime import date

import pytest

from shop_capital.ledger import Ledger
from shop_capital.models import (
    OPERATING,
    DuplicateIdError,
    Expense,
    InitialCapital,
    NewExpense,
    NewInventoryItem,
    NewSale,
    RecordNotFoundError,
)


def make_sale(quantity=2, cost=10.0, price=25.0, day=date(2024, 3, 14)) -> NewSale:
    return NewSale(
        date=day, item_name="Soap", quantity=quantity, cost_price=cost, sale_price=price
    )


def test_new_ledger_uses_default_capital():
    ledger = Ledger()
    assert ledger.initial_capital == InitialCapital(cash=5000.0, stock=2000.0)
    assert ledger.sales == () and ledger.expenses == () and ledger.inventory == ()


def test_add_sale_assigns_unique_ids_newest_first():
    ledger = Ledger()
    sales = [ledger.add_sale(make_sale()) for _ in range(50)]

    assert len({s.id for s in sales}) == 50
    assert ledger.sales[0] == sales[-1]


def test_update_sale_recomputes_profit_and_keeps_id():
    ledger = Ledger()
    sale = ledger.add_sale(make_sale())

    updated = ledger.update_sale(replace(sale, quantity=4))

    assert updated.id == sale.id
    assert updated.profit == pytest.approx(60.0)
    assert ledger.get_sale(sale.id).profit == pytest.approx(60.0)


def test_unknown_ids_raise_record_not_found():
    ledger = Ledger()
    ghost = Expense("nope", date(2024, 1, 1), OPERATING, "Rent", 1.0)

    with pytest.raises(RecordNotFoundError):
        ledger.delete_sale("nope")
    with pytest.raises(RecordNotFoundError):
        ledger.update_expense(ghost)
    with pytest.raises(KeyError):
        ledger.get_inventory_item("nope")


def test_duplicate_ids_are_rejected():
    expense = Expense("1", date(2024, 1, 1), OPERATING, "Rent", 1.0)
    with pytest.raises(DuplicateIdError):
        Ledger(expenses=[expense, expense])


def test_delete_removes_only_the_target():
    ledger = Ledger()
    first = ledger.add_expense(NewExpense(date(2024, 1, 1), OPERATING, "Rent", 10.0))
    second = ledger.add_expense(NewExpense(date(2024, 1, 2), OPERATING, "Power", 5.0))

    removed = ledger.delete_expense(first.id)

    assert removed == first
    assert ledger.expenses == (second,)


def test_add_sale_decrements_inventory():
    ledger = Ledger()
    item = ledger.add_inventory_item(NewInventoryItem("Soap", 10, 10.0, 25.0))

    ledger.add_sale(make_sale(quantity=3), inventory_item_id=item.id)

    assert ledger.get_inventory_item(item.id).quantity == 7


def test_add_sale_with_unknown_item_is_a_logged_no_op(caplog):
    ledger = Ledger()
    item = ledger.add_inventory_item(NewInventoryItem("Soap", 10, 10.0, 25.0))

    with caplog.at_level(logging.WARNING, logger="shop_capital.ledger"):
        sale = ledger.add_sale(make_sale(quantity=3), inventory_item_id="missing")

    assert ledger.sales == (sale,)
    assert ledger.get_inventory_item(item.id).quantity == 10
    assert "not found" in caplog.text


def test_overselling_goes_negative_unless_clamped():
    permissive = Ledger()
    item = permissive.add_inventory_item(NewInventoryItem("Soap", 2, 10.0, 25.0))
    permissive.add_sale(make_sale(quantity=5), inventory_item_id=item.id)
    assert permissive.get_inventory_item(item.id).quantity == -3

    clamped = Ledger(clamp_stock_at_zero=True)
    item = clamped.add_inventory_item(NewInventoryItem("Soap", 2, 10.0, 25.0))
    clamped.add_sale(make_sale(quantity=5), inventory_item_id=item.id)
    assert clamped.get_inventory_item(item.id).quantity == 0


def test_snapshot_is_isolated_from_later_mutations():
    ledger = Ledger()
    ledger.add_sale(make_sale())
    snapshot = ledger.snapshot()

    ledger.add_sale(make_sale())
    ledger.set_initial_capital(InitialCapital(cash=1.0, stock=1.0))

    assert len(snapshot.sales) == 1
    assert snapshot.initial_capital.total == 7000.0


def test_snapshot_frames_have_year_and_month():
    ledger = Ledger()
    ledger.add_sale(make_sale(day=date(2023, 12, 31)))
    ledger.add_expense(NewExpense(date(2024, 1, 1), OPERATING, "Rent", 10.0))
    snapshot = ledger.snapshot()

    sales = snapshot.sales_frame()
    expenses = snapshot.expenses_frame()

    assert sales[["year", "month"]].values.tolist() == [[2023, 12]]
    assert expenses[["year", "month"]].values.tolist() == [[2024, 1]]
    assert float(sales["revenue"].iloc[0]) == pytest.approx(50.0)


def test_empty_snapshot_frames_keep_their_columns():
    snapshot = Ledger().snapshot()

    assert snapshot.sales_frame().empty
    assert {"profit", "revenue", "year", "month"} <= set(snapshot.sales_frame().columns)
    assert {"amount", "type", "year", "month"} <= set(snapshot.expenses_frame().columns)
    assert "unit_profit" in snapshot.inventory_frame().columns
