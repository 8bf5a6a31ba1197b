from typing import Callable, Iterable, Optional
from pydantic import BaseModel
from coffeehub.schemas.cart import CartLineItem

DELIVERY_FEE = 10000.0
TAX_RATE = 0.10


class PriceSummary(BaseModel):
    subtotal: float
    delivery_fee: float
    tax: float
    total: float


def cart_subtotal(items: Iterable[CartLineItem]) -> float:
    return sum(item.price * item.quantity for item in items)


def summarize(items: Iterable[CartLineItem], delivery_fee: float = DELIVERY_FEE,
              tax_rate: float = TAX_RATE) -> PriceSummary:
    """Subtotal, flat delivery fee, tax on the subtotal and grand total.

    The delivery fee is charged regardless of cart contents, so an empty cart
    totals exactly the fee.
    """
    subtotal = cart_subtotal(items)
    tax = subtotal * tax_rate
    return PriceSummary(
        subtotal=subtotal,
        delivery_fee=delivery_fee,
        tax=tax,
        total=subtotal + delivery_fee + tax,
    )


class PriceWatcher:
    """Keeps the price summary of a cart store current."""

    def __init__(self, cart_store, delivery_fee: float = DELIVERY_FEE, tax_rate: float = TAX_RATE):
        self.delivery_fee = delivery_fee
        self.tax_rate = tax_rate
        self.summary: Optional[PriceSummary] = None
        self._unsubscribe: Callable[[], None] = cart_store.subscribe(self._recompute)

    def _recompute(self, items):
        self.summary = summarize(items, self.delivery_fee, self.tax_rate)

    def close(self):
        self._unsubscribe()
