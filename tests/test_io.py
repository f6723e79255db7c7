from datetime import date

import pytest

from shop_capital.io import (
    SALES_CSV_COLUMNS,
    expenses_from_frame,
    read_expenses_csv,
    read_sales_csv,
    sales_from_frame,
)
from shop_capital.models import OPERATING, STOCK_PURCHASE


def write_csv(tmp_path, name: str, text: str):
    path = tmp_path / name
    path.write_text(text.strip() + "\n", encoding="utf-8")
    return path


def test_read_sales_csv_canonical_columns(tmp_path):
    path = write_csv(
        tmp_path,
        "sales.csv",
        """
date,item_name,quantity,cost_price,sale_price
2024-03-14,Soap,2,10,25
2024-03-15,Rice,1.5,1.2,2
""",
    )

    df = read_sales_csv(path)

    assert list(df.columns) == SALES_CSV_COLUMNS
    assert df["quantity"].tolist() == [2.0, 1.5]

    sales = sales_from_frame(df)
    assert sales[0].date == date(2024, 3, 14)
    assert sales[0].item_name == "Soap"
    assert sales[1].cost_price == pytest.approx(1.2)


def test_read_sales_csv_accepts_camel_case_and_extra_columns(tmp_path):
    path = write_csv(
        tmp_path,
        "sales.csv",
        """
Date,ItemName,Quantity,CostPrice,SalePrice,Profit
2024-03-14,Soap,2,10,25,30
""",
    )

    df = read_sales_csv(path)

    assert "profit" not in df.columns
    assert df.loc[0, "item_name"] == "Soap"


@pytest.mark.parametrize(
    "row, message",
    [
        ("not-a-date,Soap,2,10,25", "date"),
        ("2024-03-14,Soap,two,10,25", "quantity"),
        ("2024-03-14,Soap,0,10,25", "quantity"),
        ("2024-03-14,Soap,2,-1,25", "cost_price"),
        ("2024-03-14,Soap,2,10,-25", "sale_price"),
        ("2024-03-14,,2,10,25", "item_name"),
        (",Soap,2,10,25", "date"),
    ],
)
def test_read_sales_csv_rejects_bad_values(tmp_path, row, message):
    path = write_csv(
        tmp_path, "sales.csv", "date,item,quantity,cost_price,sale_price\n" + row
    )
    with pytest.raises(ValueError, match=message):
        read_sales_csv(path)


def test_read_sales_csv_missing_columns(tmp_path):
    path = write_csv(tmp_path, "sales.csv", "date,item_name\n2024-03-14,Soap")
    with pytest.raises(ValueError, match="Missing column"):
        read_sales_csv(path)


def test_read_expenses_csv_normalizes_types(tmp_path):
    path = write_csv(
        tmp_path,
        "expenses.csv",
        """
date,type,description,amount
2024-03-01,stock,Wholesale,500
2024-03-02,Operating,Rent,120.5
2024-03-03,StockPurchase,,80
""",
    )

    df = read_expenses_csv(path)

    assert df["type"].tolist() == [STOCK_PURCHASE, OPERATING, STOCK_PURCHASE]
    assert df["description"].tolist() == ["Wholesale", "Rent", ""]

    expenses = expenses_from_frame(df)
    assert expenses[1].amount == pytest.approx(120.5)
    assert expenses[2].date == date(2024, 3, 3)


def test_read_expenses_csv_rejects_unknown_type_and_negative_amount(tmp_path):
    unknown = write_csv(
        tmp_path, "a.csv", "date,type,description,amount\n2024-03-01,Salary,Bob,10"
    )
    negative = write_csv(
        tmp_path, "b.csv", "date,type,description,amount\n2024-03-01,Operating,Rent,-1"
    )

    with pytest.raises(ValueError, match="expense type"):
        read_expenses_csv(unknown)
    with pytest.raises(ValueError, match="amount"):
        read_expenses_csv(negative)


def test_read_expenses_csv_rejects_blank_dates(tmp_path):
    path = write_csv(
        tmp_path,
        "expenses.csv",
        "date,type,description,amount\n2024-03-01,Operating,Rent,10\n,Operating,Rent,5",
    )
    with pytest.raises(ValueError, match="date"):
        read_expenses_csv(path)


def test_read_expenses_csv_description_is_optional(tmp_path):
    path = write_csv(tmp_path, "e.csv", "date,type,amount\n2024-03-01,operating,10")
    df = read_expenses_csv(path)
    assert df["description"].tolist() == [""]
