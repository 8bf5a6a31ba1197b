"""Per-customer shopping cart.

The store owns the list of line items. Every mutation builds a new list,
writes it to its key-value slot, and only then publishes it, so a listener
never sees state that is not yet durable.
"""
import json
import logging
import uuid
from typing import Callable, List, Optional
from pydantic import ValidationError as SchemaError
from coffeehub.metrics import CART_MUTATIONS
from coffeehub.schemas.cart import CartLineItem
from coffeehub.services.kv_store import KeyValueStore
from coffeehub.utils.observable import Observable

logger = logging.getLogger(__name__)

CART_ITEMS_KEY = "cart_items"


def cart_namespace(user_id: str) -> str:
    return f"cart:{user_id}"


def new_line_id() -> str:
    return f"cart_{uuid.uuid4().hex}"


class CartStore:
    def __init__(self, storage: KeyValueStore):
        self._storage = storage
        self._changes: Observable[List[CartLineItem]] = Observable()
        self._items: List[CartLineItem] = self._load()

    @classmethod
    def for_user(cls, user_id: str) -> "CartStore":
        return cls(KeyValueStore(cart_namespace(user_id)))

    def _decode(self, raw: Optional[str]) -> List[CartLineItem]:
        if not raw:
            return []
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("cart payload is not a list")
            return [CartLineItem(**entry) for entry in data]
        except (ValueError, TypeError, SchemaError) as e:
            logger.warning("Discarding unreadable cart in %s: %s", self._storage.namespace, e)
            return []

    def _load(self) -> List[CartLineItem]:
        return self._decode(self._storage.get(CART_ITEMS_KEY))

    def _mutate(self, operation: str,
                change: Callable[[List[CartLineItem]], Optional[List[CartLineItem]]]) -> None:
        """Apply ``change`` to the persisted list, write it, then publish it.

        The list is re-read inside the write transaction, so other stores open
        on the same cart never lose each other's lines. ``change`` returns
        None for a no-op.
        """
        outcome = {}

        def apply(raw):
            current = self._decode(raw)
            updated = change(list(current))
            outcome["items"] = current if updated is None else updated
            outcome["changed"] = updated is not None
            if updated is None:
                return None
            return json.dumps([item.model_dump(mode="json") for item in updated])

        self._storage.update(CART_ITEMS_KEY, apply)
        self._items = outcome["items"]
        if outcome["changed"]:
            CART_MUTATIONS.labels(operation).inc()
            self._changes.emit(list(self._items))

    @property
    def items(self) -> List[CartLineItem]:
        """The cart as currently persisted."""
        self._items = self._load()
        return list(self._items)

    def subscribe(self, listener: Callable[[List[CartLineItem]], None]) -> Callable[[], None]:
        """Register ``listener``; it is called now with the current items and after every change."""
        unsubscribe = self._changes.subscribe(listener)
        listener(list(self._items))
        return unsubscribe

    def add_item(self, item: CartLineItem) -> None:
        def change(items):
            for index, existing in enumerate(items):
                if existing.product_id == item.product_id and existing.size == item.size:
                    items[index] = existing.model_copy(
                        update={"quantity": existing.quantity + item.quantity}
                    )
                    return items
            items.append(item.model_copy(update={"id": new_line_id()}))
            return items

        self._mutate("add", change)

    def remove_item(self, product_id: str) -> None:
        # Keyed on product id only: every size of the product goes.
        self._mutate("remove", lambda items: [i for i in items if i.product_id != product_id])

    def update_quantity(self, product_id: str, quantity: int) -> None:
        if quantity < 1:
            return

        def change(items):
            for index, existing in enumerate(items):
                if existing.product_id == product_id:
                    items[index] = existing.model_copy(update={"quantity": quantity})
                    return items
            return None

        self._mutate("update", change)

    def clear(self) -> None:
        self._mutate("clear", lambda items: [])

    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)
