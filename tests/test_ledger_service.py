from dataclasses import replace
from datetime import date

import pytest

from shop_capital.config import parse_app_config
from shop_capital.ledger_service import (
    change_initial_capital,
    edit_expense,
    edit_inventory_item,
    edit_sale,
    import_expenses_csv,
    import_sales_csv,
    open_ledger,
    record_expense,
    record_inventory_item,
    record_sale,
    remove_expense,
    remove_inventory_item,
    remove_sale,
)
from shop_capital.models import (
    OPERATING,
    InitialCapital,
    NewExpense,
    NewInventoryItem,
    NewSale,
    RecordNotFoundError,
)

SOAP_SALE = NewSale(date(2024, 3, 14), "Soap", 2, 10.0, 25.0)


def make_config(tmp_path, **inventory):
    raw = {"database": {"path": "shop.sqlite"}}
    if inventory:
        raw["inventory"] = inventory
    return parse_app_config(raw, tmp_path)


def test_recorded_sales_are_persisted(tmp_path):
    config = make_config(tmp_path)
    ledger = open_ledger(config)

    sale = record_sale(config, ledger, SOAP_SALE)

    reloaded = open_ledger(config)
    assert reloaded.get_sale(sale.id) == sale


def test_record_sale_persists_the_inventory_decrement(tmp_path):
    config = make_config(tmp_path, clamp_negative_stock=True)
    ledger = open_ledger(config)
    item = record_inventory_item(
        config, ledger, NewInventoryItem("Soap", 2, 10.0, 25.0)
    )

    record_sale(
        config,
        ledger,
        NewSale(date(2024, 3, 14), "Soap", 5, 10.0, 25.0),
        inventory_item_id=item.id,
    )

    assert open_ledger(config).get_inventory_item(item.id).quantity == 0


def test_invalid_input_is_rejected_before_anything_changes(tmp_path):
    config = make_config(tmp_path)
    ledger = open_ledger(config)

    with pytest.raises(ValueError):
        record_sale(config, ledger, NewSale(date(2024, 3, 14), "Soap", 0, 1.0, 2.0))
    with pytest.raises(ValueError):
        change_initial_capital(config, ledger, InitialCapital(cash=-1.0, stock=0.0))

    assert ledger.sales == ()
    assert open_ledger(config).sales == ()


def test_edit_and_remove_round_trip(tmp_path):
    config = make_config(tmp_path)
    ledger = open_ledger(config)
    sale = record_sale(config, ledger, SOAP_SALE)
    expense = record_expense(
        config, ledger, NewExpense(date(2024, 3, 14), OPERATING, "Rent", 15.0)
    )
    item = record_inventory_item(config, ledger, NewInventoryItem("Oil", 9, 3.0, 4.0))

    edited = edit_sale(config, ledger, replace(sale, sale_price=30.0))
    edit_expense(config, ledger, replace(expense, amount=20.0))
    edit_inventory_item(config, ledger, replace(item, quantity=1))

    reloaded = open_ledger(config)
    assert edited.profit == pytest.approx(40.0)
    assert reloaded.get_sale(sale.id).profit == pytest.approx(40.0)
    assert reloaded.get_expense(expense.id).amount == 20.0
    assert reloaded.get_inventory_item(item.id).quantity == 1

    remove_sale(config, ledger, sale.id)
    remove_expense(config, ledger, expense.id)
    remove_inventory_item(config, ledger, item.id)

    reloaded = open_ledger(config)
    assert reloaded.sales == () and reloaded.expenses == () and reloaded.inventory == ()


def test_unknown_ids_raise(tmp_path):
    config = make_config(tmp_path)
    ledger = open_ledger(config)

    with pytest.raises(RecordNotFoundError):
        remove_sale(config, ledger, "missing")


def test_change_initial_capital_is_persisted(tmp_path):
    config = make_config(tmp_path)
    ledger = open_ledger(config)

    change_initial_capital(config, ledger, InitialCapital(cash=100.0, stock=50.0))

    assert ledger.initial_capital.total == 150.0
    assert open_ledger(config).initial_capital == InitialCapital(cash=100.0, stock=50.0)


def test_csv_imports(tmp_path):
    config = make_config(tmp_path)
    ledger = open_ledger(config)
    sales_csv = tmp_path / "sales.csv"
    sales_csv.write_text(
        "date,item,quantity,costPrice,salePrice\n"
        "2024-03-01,Soap,2,10,25\n"
        "2024-03-02,Rice,1,1,3\n",
        encoding="utf-8",
    )
    expenses_csv = tmp_path / "expenses.csv"
    expenses_csv.write_text(
        "date,type,description,amount\n2024-03-01,stock,Order,500\n",
        encoding="utf-8",
    )

    sales = import_sales_csv(config, ledger, sales_csv)
    expenses = import_expenses_csv(config, ledger, expenses_csv)

    assert [s.item_name for s in sales] == ["Soap", "Rice"]
    assert expenses[0].category == "Stock"
    reloaded = open_ledger(config)
    assert len(reloaded.sales) == 2 and len(reloaded.expenses) == 1


def test_invalid_csv_imports_nothing(tmp_path):
    config = make_config(tmp_path)
    ledger = open_ledger(config)
    path = tmp_path / "sales.csv"
    path.write_text(
        "date,item_name,quantity,cost_price,sale_price\n"
        "2024-03-01,Soap,2,10,25\n"
        "2024-03-02,Rice,-1,1,3\n",
        encoding="utf-8",
    )

    with pytest.raises(ValueError):
        import_sales_csv(config, ledger, path)

    assert ledger.sales == ()


def test_blank_date_in_csv_imports_nothing(tmp_path):
    config = make_config(tmp_path)
    ledger = open_ledger(config)
    path = tmp_path / "sales.csv"
    path.write_text(
        "date,item_name,quantity,cost_price,sale_price\n"
        "2024-03-01,Soap,1,1,2\n"
        ",Rice,1,1,2\n",
        encoding="utf-8",
    )

    with pytest.raises(ValueError, match="date"):
        import_sales_csv(config, ledger, path)

    assert ledger.sales == ()
    assert open_ledger(config).sales == ()
