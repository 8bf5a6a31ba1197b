import io
import pandas as pd
import pytest
from coffeehub.services.catalog import CatalogStore
from coffeehub.services.product_import import (
    import_products, products_from_dataframe, products_from_sample_database, read_product_sheet,
)

SAMPLE = {
    "Category": [{"id": 0, "title": "Espresso"}, {"id": 1, "title": "Latte"}],
    "Popular": [{"title": "Caramel Latte", "price": 1.5, "picUrl": ["a.jpg", "b.jpg"], "rating": 4.8}],
    "Special": [{"title": "Seasonal", "price": 2}],
    "Items": [
        {"title": "Doppio", "price": 1, "categoryId": "0", "description": "Double shot"},
        {"title": "Mystery", "price": 1, "categoryId": "9"},
    ],
}


def test_sample_database_mapping():
    rows = products_from_sample_database(SAMPLE, price_rate=24000)
    assert [(r["name"], r["category"]) for r in rows] == [
        ("Caramel Latte", "Popular"),
        ("Seasonal", "Special"),
        ("Doppio", "Espresso"),
        ("Mystery", "Other"),
    ]
    first = rows[0]
    assert first["price"] == 36000
    assert first["image_url"] == "a.jpg"
    assert first["stock"] == 100
    assert first["is_available"] is True
    assert first["rating"] == 4.8
    assert rows[1]["image_url"] == ""
    assert rows[2]["description"] == "Double shot"


def test_dataframe_rows_drop_missing_values():
    df = pd.DataFrame([
        {"name": "Latte", "price": 35000, "category": "Coffee"},
        {"name": "Mocha", "price": 45000, "category": None},
    ])
    rows = products_from_dataframe(df)
    assert rows[0] == {"name": "Latte", "price": 35000, "category": "Coffee"}
    assert "category" not in rows[1]


def test_dataframe_requires_name_and_price():
    with pytest.raises(ValueError, match="Missing columns: price"):
        products_from_dataframe(pd.DataFrame([{"name": "Latte"}]))


def test_csv_sheet_and_unknown_extension():
    df = read_product_sheet(io.StringIO("name,price\nLatte,35000\n"), "menu.csv")
    assert list(df.columns) == ["name", "price"]
    with pytest.raises(ValueError, match="Unsupported file type"):
        read_product_sheet(io.StringIO(""), "menu.txt")


def test_import_counts_invalid_rows(app):
    catalog = CatalogStore()
    imported, failed = import_products(catalog, [
        {"name": "Latte", "price": 35000},
        {"name": "", "price": 1},
        {"name": "Free", "price": -5},
    ])
    assert (imported, failed) == (1, 2)
    assert [p.name for p in catalog.list()] == ["Latte"]
