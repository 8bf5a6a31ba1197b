import logging
from flask import Blueprint, current_app, g
from flask_limiter.util import get_remote_address
from extensions import limiter
from coffeehub.version import API_PREFIX
from coffeehub.errors import StoreError, ValidationError
from coffeehub.schemas.order import CustomerInfo
from coffeehub.services.cart_store import CartStore
from coffeehub.services.order_status import next_status
from coffeehub.services.orders import create_order
from coffeehub.stores import get_stores
from coffeehub.utils import auth_required, current_session, error, ok, role_required, validate_schema

logger = logging.getLogger(__name__)

order_bp = Blueprint("orders", __name__, url_prefix=f"{API_PREFIX}/orders")


@order_bp.before_request
@auth_required
def _require_login():
    return None


def order_payload(order):
    data = order.to_dict()
    upcoming = next_status(order.status)
    data["next_status"] = upcoming.value if upcoming else None
    return data


@order_bp.route("", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["ORDER_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many orders from this IP",
)
@role_required(["customer:place_order", "admin"])
@validate_schema(CustomerInfo)
def place_order():
    """Check out the caller's cart; the cart is cleared only once the order is stored."""
    customer: CustomerInfo = g.validated_data
    user_session = current_session()
    cart = CartStore.for_user(user_session.user_id)
    try:
        order_id = create_order(
            get_stores().orders,
            cart.items,
            customer,
            user_session,
            delivery_fee=current_app.config["DELIVERY_FEE"],
            tax_rate=current_app.config["TAX_RATE"],
        )
    except ValidationError as e:
        return error(str(e), status=400)

    message = f"Order placed successfully! Order ID: {order_id}"
    # The order is committed from here on; later failures must not report it as lost.
    try:
        cart.clear()
    except StoreError as e:
        logger.warning("Order %s placed but cart for %s was not cleared: %s", order_id, user_session.user_id, e)
    order = get_stores().orders.get(order_id)
    if order is None:
        logger.warning("Order %s placed but could not be read back", order_id)
        return ok({"id": order_id}, message=message, status=201)
    return ok(order_payload(order), message=message, status=201)


@order_bp.route("", methods=["GET"])
@role_required(["customer:view_own_orders", "admin"])
def order_history():
    orders = get_stores().orders.by_customer(current_session().user_id)
    return ok({"orders": [order_payload(o) for o in orders]})


@order_bp.route("/<order_id>", methods=["GET"])
@role_required(["customer:view_own_orders", "admin"])
def get_order(order_id):
    user_session = current_session()
    order = get_stores().orders.get(order_id)
    if order is None or (order.customer_id != user_session.user_id and not user_session.is_admin):
        return error("Order not found", status=404)
    return ok(order_payload(order))
