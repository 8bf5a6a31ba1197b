"""Seeding the catalog from the bundled sample database or a spreadsheet."""
import json
import logging
from typing import Iterable, List, Tuple
import pandas as pd
from pydantic import ValidationError as SchemaError
from coffeehub.schemas.product import ProductCreate

logger = logging.getLogger(__name__)

DEFAULT_STOCK = 100
REQUIRED_COLUMNS = {"name", "price"}


def _sample_to_row(item: dict, category: str, price_rate: float) -> dict:
    pictures = item.get("picUrl") or []
    return {
        "name": item.get("title") or "Unknown Product",
        "description": item.get("description") or "",
        "price": float(item.get("price") or 0.0) * price_rate,
        "image_url": pictures[0] if pictures else "",
        "category": category,
        "stock": DEFAULT_STOCK,
        "is_available": True,
        "extra": item.get("extra"),
        "rating": item.get("rating") or 0.0,
    }


def products_from_sample_database(data: dict, price_rate: float) -> List[dict]:
    """Popular and Special entries keep those names as category; Items map
    their ``categoryId`` through the Category titles, falling back to Other."""
    rows = []
    for item in data.get("Popular") or []:
        rows.append(_sample_to_row(item, "Popular", price_rate))
    for item in data.get("Special") or []:
        rows.append(_sample_to_row(item, "Special", price_rate))
    categories = {
        str(c.get("id")): (c.get("title") or "Other") for c in (data.get("Category") or [])
    }
    for item in data.get("Items") or []:
        category = categories.get(str(item.get("categoryId")), "Other")
        rows.append(_sample_to_row(item, category, price_rate))
    return rows


def load_sample_database(path: str, price_rate: float) -> List[dict]:
    with open(path, encoding="utf-8") as fh:
        return products_from_sample_database(json.load(fh), price_rate)


def read_product_sheet(file, filename: str) -> pd.DataFrame:
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if ext == "csv":
        return pd.read_csv(file)
    if ext in ("xls", "xlsx"):
        return pd.read_excel(file)
    raise ValueError("Unsupported file type")


def products_from_dataframe(df: pd.DataFrame) -> List[dict]:
    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(f"Missing columns: {', '.join(sorted(missing))}")
    df = df.astype(object).where(pd.notna(df), None)
    return [
        {k: v for k, v in row.items() if v is not None}
        for row in df.to_dict(orient="records")
    ]


def validate_rows(rows: Iterable[dict]) -> Tuple[List[dict], int]:
    """Keep the rows that make valid products; count the rest."""
    valid, failed = [], 0
    for row in rows:
        try:
            valid.append(ProductCreate(**row).model_dump())
        except (SchemaError, TypeError) as e:
            failed += 1
            logger.warning("Skipping product row %r: %s", row.get("name"), e)
    return valid, failed


def import_products(store, rows: Iterable[dict]) -> Tuple[int, int]:
    """Add every valid row to the catalog; returns (imported, failed)."""
    valid, failed = validate_rows(rows)
    imported = store.add_many(valid) if valid else 0
    logger.info("Imported %d product(s), %d failed", imported, failed)
    return imported, failed
