from flask import current_app
from coffeehub.services.catalog import CatalogStore
from coffeehub.services.image_storage import ImageStorage
from coffeehub.services.orders import OrderStore

EXTENSION_KEY = "coffeehub_stores"


class Stores:
    """Process-wide store adapters, one set per Flask app."""

    def __init__(self, image_dir: str):
        self.catalog = CatalogStore()
        self.orders = OrderStore()
        self.images = ImageStorage(image_dir)


def init_stores(app) -> Stores:
    stores = Stores(app.config["PRODUCT_IMAGE_DIR"])
    app.extensions[EXTENSION_KEY] = stores
    return stores


def get_stores() -> Stores:
    return current_app.extensions[EXTENSION_KEY]
