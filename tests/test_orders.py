import pytest
from coffeehub.auth.session import UserSession
from coffeehub.errors import StoreError, ValidationError
from coffeehub.schemas.cart import CartLineItem
from coffeehub.schemas.order import CustomerInfo
from coffeehub.services import orders as order_service
from coffeehub.services.orders import (
    OrderStore, advance_order, build_order, cancel_order, create_order, update_order_status,
)
from sqlalchemy.orm import Session
from models import db
from models.order import Order, OrderItem, OrderStatus, OrderStatusLog


CUSTOMER = CustomerInfo(customer_name=" Ana ", customer_phone="0812345678", notes=" no sugar ")
ALICE = UserSession(user_id="cust-1", role="customer", name="Ana")
ADMIN = UserSession(user_id="admin-1", role="admin")


def cart_lines():
    return [
        CartLineItem(id="cart_1", product_id="p1", product_name="Latte", product_image="/img/latte.jpg",
                     size="Medium", quantity=3, price=30000),
        CartLineItem(id="cart_2", product_id="p2", product_name="Mocha", size="Large", quantity=1, price=45000),
    ]


@pytest.fixture
def store(app):
    return OrderStore()


def place(store, user=ALICE):
    return create_order(store, cart_lines(), CUSTOMER, user)


def test_build_order_maps_lines_one_to_one():
    order = build_order(cart_lines(), CUSTOMER, ALICE)
    assert [(i.product_id, i.size, i.quantity, i.price) for i in order.items] == [
        ("p1", "Medium", 3, 30000),
        ("p2", "Large", 1, 45000),
    ]
    assert order.items[0].image_url == "/img/latte.jpg"
    assert order.subtotal == 135000
    assert order.tax == pytest.approx(13500)
    assert order.total == pytest.approx(135000 + 10000 + 13500)
    assert order.status == OrderStatus.PENDING.value
    assert order.is_paid is False
    assert order.customer_name == "Ana"
    assert order.notes == "no sugar"


def test_create_order_persists_with_status_log(store):
    order_id = place(store)
    order = store.get(order_id)
    assert order.customer_id == "cust-1"
    assert [i.product_name for i in order.items] == ["Latte", "Mocha"]
    logs = OrderStatusLog.query.filter_by(order_id=order_id).all()
    assert [log.status for log in logs] == ["PENDING"]


def test_empty_cart_is_rejected_without_effect(store):
    with pytest.raises(ValidationError, match="Your cart is empty"):
        create_order(store, [], CUSTOMER, ALICE)
    assert Order.query.count() == 0


def test_store_failure_surfaces_as_store_error(store, monkeypatch):
    def broken_commit(self):
        raise order_service.SQLAlchemyError("disk full")

    monkeypatch.setattr(Session, "commit", broken_commit)
    with pytest.raises(StoreError):
        place(store)


def test_advance_walks_the_chain(store):
    order_id = place(store)
    statuses = [advance_order(store, order_id, ADMIN).status for _ in range(3)]
    assert statuses == ["PREPARING", "READY", "COMPLETED"]
    with pytest.raises(ValidationError, match="already COMPLETED"):
        advance_order(store, order_id, ADMIN)
    logs = OrderStatusLog.query.filter_by(order_id=order_id).order_by(OrderStatusLog.id).all()
    assert [log.status for log in logs] == ["PENDING", "PREPARING", "READY", "COMPLETED"]
    assert logs[-1].updated_by == "admin-1"


def test_cancel_only_from_pending(store):
    first = place(store)
    assert cancel_order(store, first, ADMIN).status == "CANCELLED"

    second = place(store)
    advance_order(store, second, ADMIN)
    with pytest.raises(ValidationError, match="Cannot move order from PREPARING to CANCELLED"):
        cancel_order(store, second, ADMIN)


def test_illegal_jump_is_rejected(store):
    order_id = place(store)
    with pytest.raises(ValidationError):
        update_order_status(store, order_id, OrderStatus.COMPLETED, ADMIN)
    assert store.get(order_id).status == "PENDING"


def test_unknown_order(store):
    with pytest.raises(LookupError):
        advance_order(store, "missing", ADMIN)


def test_customer_history_and_pending_queue(store):
    first = place(store)
    second = place(store)
    other = place(store, UserSession(user_id="cust-2", role="customer"))
    advance_order(store, second, ADMIN)

    history = [o.id for o in store.by_customer("cust-1")]
    assert sorted(history) == sorted([first, second])
    assert other not in history
    assert {o.id for o in store.pending()} == {first, other}
    assert [o.id for o in store.all(OrderStatus.PREPARING)] == [second]
    assert len(store.all()) == 3


def test_streams_push_fresh_snapshots(store):
    seen = []
    unsubscribe = store.stream_by_customer("cust-1", lambda orders: seen.append(len(orders)))
    place(store)
    place(store, UserSession(user_id="cust-2", role="customer"))
    unsubscribe()
    place(store)
    assert seen == [0, 1, 1]


def test_notification_is_queued(store, monkeypatch):
    calls = []
    from coffeehub.tasks import notifications
    monkeypatch.setattr(notifications.notify_order_status_task, "delay",
                        lambda *args: calls.append(args))
    order_id = place(store)
    advance_order(store, order_id, ADMIN)
    assert calls == [
        (order_id, "cust-1", "PENDING"),
        (order_id, "cust-1", "PREPARING"),
    ]


@pytest.mark.parametrize("payload, message", [
    ({"customer_name": "  ", "customer_phone": "0812345678"}, "Please enter your name"),
    ({"customer_name": "Ana", "customer_phone": ""}, "Please enter your phone number"),
    ({"customer_name": "Ana", "customer_phone": "12345"}, "Please enter a valid phone number"),
])
def test_customer_info_validation(payload, message):
    from pydantic import ValidationError as SchemaError
    with pytest.raises(SchemaError, match=message):
        CustomerInfo(**payload)


def test_stream_all_sees_every_customer(store):
    seen = []
    unsubscribe = store.stream_all(lambda orders: seen.append(len(orders)))
    order_id = place(store)
    place(store, UserSession(user_id="cust-2", role="customer"))
    advance_order(store, order_id, ADMIN)
    unsubscribe()
    assert seen == [0, 1, 2, 2]


def test_order_reads_raise_store_error_when_tables_are_gone(app):
    store = OrderStore()
    for model in (OrderStatusLog, OrderItem, Order):
        model.__table__.drop(db.engine)
    for read in (store.all, store.pending, lambda: store.by_customer("cust-1")):
        with pytest.raises(StoreError) as exc:
            read()
        assert exc.value.store == "orders"
