"""Client-side narrowing and ordering of a catalog snapshot."""
from enum import Enum
from typing import List, Optional, Sequence
from pydantic import BaseModel, Field, model_validator

DEFAULT_MAX_PRICE = 150000.0


class SortBy(str, Enum):
    NONE = "NONE"
    PRICE_ASC = "PRICE_ASC"
    PRICE_DESC = "PRICE_DESC"
    NAME_ASC = "NAME_ASC"
    NAME_DESC = "NAME_DESC"


class FilterParams(BaseModel):
    category: str = ""
    search_query: str = Field(default="", alias="q")
    sort_by: SortBy = SortBy.NONE
    min_price: float = 0.0
    max_price: float = DEFAULT_MAX_PRICE
    available_only: bool = False

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _check_range(self):
        if self.min_price > self.max_price:
            raise ValueError("min_price must not exceed max_price")
        return self


def _contains(text: Optional[str], query: str) -> bool:
    return query in (text or "").lower()


def apply_filters(products: Sequence, params: FilterParams) -> List:
    """Category, search, price range, availability, then sort.

    Works on anything with ``name``, ``description``, ``category``, ``price``
    and ``is_available`` attributes. The input is never modified.
    """
    filtered = list(products)

    if params.category.strip():
        category = params.category.lower()
        filtered = [p for p in filtered if (p.category or "").lower() == category]

    if params.search_query.strip():
        query = params.search_query.lower()
        filtered = [
            p for p in filtered
            if _contains(p.name, query)
            or _contains(p.description, query)
            or _contains(p.category, query)
        ]

    filtered = [p for p in filtered if params.min_price <= p.price <= params.max_price]

    if params.available_only:
        filtered = [p for p in filtered if p.is_available]

    if params.sort_by == SortBy.PRICE_ASC:
        filtered = sorted(filtered, key=lambda p: p.price)
    elif params.sort_by == SortBy.PRICE_DESC:
        filtered = sorted(filtered, key=lambda p: p.price, reverse=True)
    elif params.sort_by == SortBy.NAME_ASC:
        filtered = sorted(filtered, key=lambda p: p.name)
    elif params.sort_by == SortBy.NAME_DESC:
        filtered = sorted(filtered, key=lambda p: p.name, reverse=True)
    return filtered


def admin_search(products: Sequence, query: str) -> List:
    if not query.strip():
        return list(products)
    needle = query.lower()
    return [p for p in products if _contains(p.name, needle) or _contains(p.category, needle)]


class ProductFilter:
    """Holds the last catalog snapshot and the active filter parameters.

    Every setter recomputes ``visible`` from scratch.
    """

    def __init__(self, products: Sequence = (), params: Optional[FilterParams] = None):
        self._products = list(products)
        self.params = params or FilterParams()
        self.visible: List = []
        self._recompute()

    def _recompute(self):
        self.visible = apply_filters(self._products, self.params)
        return self.visible

    def set_products(self, products: Sequence) -> List:
        self._products = list(products)
        return self._recompute()

    def search(self, query: str) -> List:
        self.params = self.params.model_copy(update={"search_query": query})
        return self._recompute()

    def filter_by_category(self, category: str) -> List:
        self.params = self.params.model_copy(update={"category": category})
        return self._recompute()

    def apply_advanced(self, sort_by: SortBy = SortBy.NONE, min_price: float = 0.0,
                       max_price: float = DEFAULT_MAX_PRICE, available_only: bool = False) -> List:
        self.params = FilterParams(
            category=self.params.category,
            search_query=self.params.search_query,
            sort_by=sort_by,
            min_price=min_price,
            max_price=max_price,
            available_only=available_only,
        )
        return self._recompute()
