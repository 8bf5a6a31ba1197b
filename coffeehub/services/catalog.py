import logging
from typing import Callable, List, Optional
from sqlalchemy.exc import SQLAlchemyError
from models import db
from models.product import Product
from coffeehub.errors import StoreError
from coffeehub.utils.db import transactional
from coffeehub.utils.observable import Observable

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = (
    "name", "description", "price", "image_url", "category",
    "stock", "is_available", "rating", "extra",
)


class CatalogStore:
    """Products table behind the catalog operations.

    Writes commit immediately; listeners registered through ``stream`` get a
    fresh snapshot after every successful write.
    """

    def __init__(self):
        self._changes: Observable[None] = Observable()

    def list(self) -> List[Product]:
        try:
            return Product.query.order_by(Product.created_at.desc()).all()
        except SQLAlchemyError as e:
            raise StoreError("Could not load the menu", store="catalog") from e

    def stream(self, listener: Callable[[List[Product]], None]) -> Callable[[], None]:
        listener(self.list())
        return self._changes.subscribe(lambda _: listener(self.list()))

    def get(self, product_id: str) -> Optional[Product]:
        try:
            return db.session.get(Product, product_id)
        except SQLAlchemyError as e:
            logger.error("Failed to load product %s: %s", product_id, e)
            return None

    def search(self, text: str) -> List[Product]:
        """Products whose name starts with ``text``, by name."""
        escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        try:
            return (
                Product.query.filter(Product.name.ilike(f"{escaped}%", escape="\\"))
                .order_by(Product.name.asc())
                .all()
            )
        except SQLAlchemyError as e:
            raise StoreError("Could not search products", store="catalog") from e

    def search_stream(self, text: str, listener: Callable[[List[Product]], None]) -> Callable[[], None]:
        listener(self.search(text))
        return self._changes.subscribe(lambda _: listener(self.search(text)))

    def count(self) -> int:
        try:
            return Product.query.count()
        except SQLAlchemyError as e:
            raise StoreError("Could not count products", store="catalog") from e

    def add(self, data: dict) -> str:
        product = Product(**{k: v for k, v in data.items() if k in PRODUCT_FIELDS})
        try:
            with transactional("Failed to add product"):
                db.session.add(product)
        except SQLAlchemyError as e:
            raise StoreError("Failed to add product", store="catalog") from e
        logger.info("Product %s added", product.id)
        self._changes.emit(None)
        return product.id

    def add_many(self, rows: List[dict]) -> int:
        products = [
            Product(**{k: v for k, v in row.items() if k in PRODUCT_FIELDS}) for row in rows
        ]
        try:
            with transactional("Failed to import products"):
                db.session.add_all(products)
        except SQLAlchemyError as e:
            raise StoreError("Failed to import products", store="catalog") from e
        self._changes.emit(None)
        return len(products)

    def update(self, product_id: str, data: dict) -> Product:
        product = self.get(product_id)
        if product is None:
            raise LookupError(f"Product {product_id} not found")
        for key, value in data.items():
            if key in PRODUCT_FIELDS:
                setattr(product, key, value)
        try:
            with transactional("Failed to update product"):
                pass
        except SQLAlchemyError as e:
            raise StoreError("Failed to update product", store="catalog") from e
        self._changes.emit(None)
        return product

    def delete(self, product_id: str) -> dict:
        """Delete a product and return what it looked like."""
        product = self.get(product_id)
        if product is None:
            raise LookupError(f"Product {product_id} not found")
        snapshot = product.to_dict()
        try:
            with transactional("Failed to delete product"):
                db.session.delete(product)
        except SQLAlchemyError as e:
            raise StoreError("Failed to delete product", store="catalog") from e
        logger.info("Product %s deleted", product_id)
        self._changes.emit(None)
        return snapshot

    def delete_all(self) -> int:
        try:
            with transactional("Failed to clear products"):
                deleted = Product.query.delete()
        except SQLAlchemyError as e:
            raise StoreError("Failed to clear products", store="catalog") from e
        self._changes.emit(None)
        return deleted
