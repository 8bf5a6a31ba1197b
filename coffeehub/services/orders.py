import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence
from sqlalchemy.exc import SQLAlchemyError
from models import db
from models.order import Order, OrderItem, OrderStatus, OrderStatusLog
from coffeehub.auth.session import UserSession
from coffeehub.errors import StoreError, ValidationError
from coffeehub.metrics import ORDERS_PLACED, ORDER_TRANSITIONS
from coffeehub.schemas.cart import CartLineItem
from coffeehub.schemas.order import CustomerInfo
from coffeehub.services import order_status
from coffeehub.services.pricing import DELIVERY_FEE, TAX_RATE, summarize
from coffeehub.telemetry import get_tracer
from coffeehub.utils.db import transactional
from coffeehub.utils.observable import Observable

logger = logging.getLogger(__name__)


class OrderStore:
    """Orders table behind the order operations."""

    def __init__(self):
        self._changes: Observable[None] = Observable()

    def create(self, order: Order) -> str:
        try:
            with transactional("Failed to create order"):
                db.session.add(order)
                db.session.flush()
                db.session.add(OrderStatusLog(
                    order_id=order.id, status=order.status, updated_by=order.customer_id,
                ))
        except SQLAlchemyError as e:
            raise StoreError("Failed to place order", store="orders") from e
        self._changes.emit(None)
        return order.id

    def update_status(self, order_id: str, status: OrderStatus, updated_by: str) -> Order:
        order = self.get(order_id)
        if order is None:
            raise LookupError(f"Order {order_id} not found")
        try:
            with transactional("Failed to update order status"):
                order.status = status.value
                db.session.add(OrderStatusLog(order_id=order.id, status=status.value, updated_by=updated_by))
        except SQLAlchemyError as e:
            raise StoreError("Failed to update order", store="orders") from e
        self._changes.emit(None)
        return order

    def get(self, order_id: str) -> Optional[Order]:
        try:
            return db.session.get(Order, order_id)
        except SQLAlchemyError as e:
            logger.error("Failed to load order %s: %s", order_id, e)
            return None

    def by_customer(self, customer_id: str) -> List[Order]:
        try:
            return (
                Order.query.filter_by(customer_id=customer_id)
                .order_by(Order.timestamp.desc())
                .all()
            )
        except SQLAlchemyError as e:
            raise StoreError("Could not load your orders", store="orders") from e

    def all(self, status: Optional[OrderStatus] = None) -> List[Order]:
        query = Order.query
        if status is not None:
            query = query.filter_by(status=status.value)
        try:
            return query.order_by(Order.timestamp.desc()).all()
        except SQLAlchemyError as e:
            raise StoreError("Could not load orders", store="orders") from e

    def pending(self) -> List[Order]:
        try:
            return (
                Order.query.filter_by(status=OrderStatus.PENDING.value)
                .order_by(Order.timestamp.asc())
                .all()
            )
        except SQLAlchemyError as e:
            raise StoreError("Could not load pending orders", store="orders") from e

    def stream_by_customer(self, customer_id: str, listener: Callable[[List[Order]], None]) -> Callable[[], None]:
        listener(self.by_customer(customer_id))
        return self._changes.subscribe(lambda _: listener(self.by_customer(customer_id)))

    def stream_all(self, listener: Callable[[List[Order]], None]) -> Callable[[], None]:
        listener(self.all())
        return self._changes.subscribe(lambda _: listener(self.all()))


def build_order(cart_items: Sequence[CartLineItem], customer: CustomerInfo, user_session: UserSession,
                delivery_fee: float = DELIVERY_FEE, tax_rate: float = TAX_RATE,
                now: Optional[datetime] = None) -> Order:
    """Map cart lines one to one onto a new PENDING order."""
    prices = summarize(cart_items, delivery_fee, tax_rate)
    return Order(
        customer_id=user_session.user_id,
        customer_name=customer.customer_name,
        customer_phone=customer.customer_phone,
        items=[
            OrderItem(
                position=position,
                product_id=line.product_id,
                product_name=line.product_name,
                size=line.size.value,
                quantity=line.quantity,
                price=line.price,
                image_url=line.product_image,
            )
            for position, line in enumerate(cart_items)
        ],
        subtotal=prices.subtotal,
        delivery_fee=prices.delivery_fee,
        tax=prices.tax,
        total=prices.total,
        payment_method=customer.payment_method.value,
        is_paid=False,
        status=OrderStatus.PENDING.value,
        timestamp=now or datetime.utcnow(),
        notes=customer.notes,
    )


def create_order(store: OrderStore, cart_items: Sequence[CartLineItem], customer: CustomerInfo,
                 user_session: UserSession, delivery_fee: float = DELIVERY_FEE,
                 tax_rate: float = TAX_RATE) -> str:
    """Place an order for the given cart lines.

    The cart itself is left alone; clearing it after success is the caller's
    job.
    """
    if not cart_items:
        raise ValidationError("Your cart is empty")
    with get_tracer().start_as_current_span("order.create") as span:
        order = build_order(cart_items, customer, user_session, delivery_fee, tax_rate)
        span.set_attribute("order.lines", len(cart_items))
        order_id = store.create(order)
        span.set_attribute("order.id", order_id)
    ORDERS_PLACED.labels(order.payment_method).inc()
    logger.info("Order %s placed with %d line(s)", order_id, len(cart_items))
    _notify(order_id, order.customer_id, order.status)
    return order_id


def update_order_status(store: OrderStore, order_id: str, target, user_session: UserSession) -> Order:
    order = store.get(order_id)
    if order is None:
        raise LookupError(f"Order {order_id} not found")
    target = OrderStatus(target)
    if not order_status.can_transition(order.status, target):
        raise ValidationError(f"Cannot move order from {order.status} to {target.value}")
    order = store.update_status(order_id, target, updated_by=user_session.user_id)
    ORDER_TRANSITIONS.labels(target.value).inc()
    logger.info("Order %s moved to %s", order_id, target.value)
    _notify(order.id, order.customer_id, order.status)
    return order


def advance_order(store: OrderStore, order_id: str, user_session: UserSession) -> Order:
    order = store.get(order_id)
    if order is None:
        raise LookupError(f"Order {order_id} not found")
    target = order_status.next_status(order.status)
    if target is None:
        raise ValidationError(f"Order is already {order.status}")
    return update_order_status(store, order_id, target, user_session)


def cancel_order(store: OrderStore, order_id: str, user_session: UserSession) -> Order:
    return update_order_status(store, order_id, OrderStatus.CANCELLED, user_session)


def _notify(order_id: str, customer_id: str, status: str) -> None:
    from coffeehub.tasks.notifications import notify_order_status_task
    try:
        notify_order_status_task.delay(order_id, customer_id, status)
    except Exception as e:
        logger.warning("Could not queue notification for order %s: %s", order_id, e)
