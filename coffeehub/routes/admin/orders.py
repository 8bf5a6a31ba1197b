from flask import g, request
from coffeehub.errors import ValidationError
from coffeehub.routes.orders import order_payload
from coffeehub.schemas.order import StatusUpdateRequest
from coffeehub.services.orders import advance_order, cancel_order, update_order_status
from coffeehub.stores import get_stores
from coffeehub.utils import current_session, error, ok, validate_schema
from models.order import OrderStatus
from . import admin_bp


@admin_bp.route("/orders", methods=["GET"])
def list_orders():
    status = request.args.get("status")
    if status:
        try:
            status = OrderStatus(status.upper())
        except ValueError:
            return error("Invalid status", status=400)
    orders = get_stores().orders.all(status or None)
    return ok({"orders": [order_payload(o) for o in orders]})


@admin_bp.route("/orders/pending", methods=["GET"])
def list_pending_orders():
    orders = get_stores().orders.pending()
    return ok({"orders": [order_payload(o) for o in orders]})


def _transition(action, *args):
    try:
        order = action(get_stores().orders, *args, current_session())
    except LookupError:
        return error("Order not found", status=404)
    except ValidationError as e:
        return error(str(e), status=409)
    return ok(order_payload(order), message="Order status updated")


@admin_bp.route("/orders/<order_id>/advance", methods=["POST"])
def advance(order_id):
    return _transition(advance_order, order_id)


@admin_bp.route("/orders/<order_id>/cancel", methods=["POST"])
def cancel(order_id):
    return _transition(cancel_order, order_id)


@admin_bp.route("/orders/<order_id>/status", methods=["POST"])
@validate_schema(StatusUpdateRequest)
def set_status(order_id):
    req: StatusUpdateRequest = g.validated_data
    return _transition(update_order_status, order_id, req.status)
