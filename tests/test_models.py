from datetime import date

import pytest

from shop_capital.models import (
    OPERATING,
    STOCK_PURCHASE,
    DuplicateIdError,
    Expense,
    InitialCapital,
    InventoryItem,
    NewExpense,
    NewInventoryItem,
    NewSale,
    RecordNotFoundError,
    Sale,
    compute_profit,
    normalize_expense_type,
    validate_expense,
    validate_initial_capital,
    validate_inventory_item,
    validate_sale,
)


def test_sale_from_new_computes_profit_and_revenue():
    new_sale = NewSale(
        date=date(2024, 3, 14),
        item_name="Soap",
        quantity=2,
        cost_price=10.0,
        sale_price=25.0,
    )
    sale = Sale.from_new("1", new_sale)

    assert sale.id == "1"
    assert sale.profit == pytest.approx(30.0)
    assert sale.revenue == pytest.approx(50.0)


def test_sale_recomputed_follows_prices():
    sale = Sale("1", date(2024, 3, 14), "Soap", 2, 10.0, 25.0, profit=999.0)
    assert sale.recomputed().profit == pytest.approx(30.0)


def test_compute_profit_can_be_negative():
    assert compute_profit(5.0, 8.0, 3) == pytest.approx(-9.0)


def test_expense_category_groups_stock_purchases():
    stock = Expense("1", date(2024, 3, 1), STOCK_PURCHASE, "Wholesale order", 500.0)
    rent = Expense("2", date(2024, 3, 1), OPERATING, "Rent", 100.0)

    assert stock.category == "Stock"
    assert rent.category == "Rent"


def test_inventory_item_unit_profit():
    item = InventoryItem.from_new("7", NewInventoryItem("Rice", 10, 1.5, 2.0))
    assert item.id == "7"
    assert item.unit_profit == pytest.approx(0.5)


def test_initial_capital_total():
    assert InitialCapital(cash=5000.0, stock=2000.0).total == 7000.0


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Stock Purchase", STOCK_PURCHASE),
        ("stock", STOCK_PURCHASE),
        ("StockPurchase", STOCK_PURCHASE),
        (" stock_purchase ", STOCK_PURCHASE),
        ("Operating", OPERATING),
        ("OPERATING", OPERATING),
    ],
)
def test_normalize_expense_type(raw, expected):
    assert normalize_expense_type(raw) == expected


def test_normalize_expense_type_rejects_unknown_values():
    with pytest.raises(ValueError, match="Invalid expense type"):
        normalize_expense_type("Salary")


def test_validate_sale_rejects_bad_values():
    good = NewSale(date(2024, 1, 1), "Soap", 1, 1.0, 2.0)
    validate_sale(good)

    with pytest.raises(ValueError, match="quantity"):
        validate_sale(NewSale(date(2024, 1, 1), "Soap", 0, 1.0, 2.0))
    with pytest.raises(ValueError, match="cost_price"):
        validate_sale(NewSale(date(2024, 1, 1), "Soap", 1, -1.0, 2.0))
    with pytest.raises(ValueError, match="sale_price"):
        validate_sale(NewSale(date(2024, 1, 1), "Soap", 1, 1.0, -2.0))
    with pytest.raises(ValueError, match="item_name"):
        validate_sale(NewSale(date(2024, 1, 1), "  ", 1, 1.0, 2.0))
    with pytest.raises(ValueError, match="date"):
        validate_sale(NewSale("2024-01-01", "Soap", 1, 1.0, 2.0))  # type: ignore


def test_validate_expense_inventory_and_capital():
    validate_expense(NewExpense(date(2024, 1, 1), OPERATING, "Rent", 0.0))
    with pytest.raises(ValueError):
        validate_expense(NewExpense(date(2024, 1, 1), OPERATING, "Rent", -1.0))
    salary = NewExpense(date(2024, 1, 1), "Salary", "x", 1.0)  # type: ignore
    with pytest.raises(ValueError):
        validate_expense(salary)

    with pytest.raises(ValueError):
        validate_inventory_item(NewInventoryItem("", 1, 1.0, 1.0))
    with pytest.raises(ValueError):
        validate_initial_capital(InitialCapital(cash=-1.0, stock=0.0))


def test_error_hierarchy():
    assert issubclass(RecordNotFoundError, KeyError)
    assert issubclass(DuplicateIdError, ValueError)
    assert str(RecordNotFoundError("Sale 'x' not found.")) == "Sale 'x' not found."
