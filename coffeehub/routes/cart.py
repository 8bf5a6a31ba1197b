from flask import Blueprint, current_app, g
from coffeehub.version import API_PREFIX
from coffeehub.schemas.cart import AddToCartRequest, CartLineItem, RemoveFromCartRequest, UpdateQuantityRequest
from coffeehub.services.cart_store import CartStore
from coffeehub.services.pricing import PriceWatcher
from coffeehub.stores import get_stores
from coffeehub.utils import auth_required, current_session, error, ok, role_required, validate_schema

cart_bp = Blueprint("cart", __name__, url_prefix=f"{API_PREFIX}/cart")


@cart_bp.before_request
@auth_required
@role_required(["customer:manage_cart", "admin"])
def _require_login():
    return None


def open_cart():
    """The caller's cart plus a price watcher subscribed to it."""
    cart = CartStore.for_user(current_session().user_id)
    watcher = PriceWatcher(
        cart,
        delivery_fee=current_app.config["DELIVERY_FEE"],
        tax_rate=current_app.config["TAX_RATE"],
    )
    return cart, watcher


def cart_payload(cart, watcher):
    return {
        "items": [item.to_dict() for item in cart.items],
        "item_count": cart.item_count(),
        "totals": watcher.summary.model_dump(),
    }


@cart_bp.route("", methods=["GET"])
def view_cart():
    cart, watcher = open_cart()
    return ok(cart_payload(cart, watcher))


@cart_bp.route("/count", methods=["GET"])
def cart_count():
    cart, _ = open_cart()
    return ok({"item_count": cart.item_count()})


@cart_bp.route("/add", methods=["POST"])
@validate_schema(AddToCartRequest)
def add_to_cart():
    req: AddToCartRequest = g.validated_data
    product = get_stores().catalog.get(req.product_id)
    if product is None:
        return error("Product not found", status=404)
    if not product.is_available:
        return error("Product is not available", status=400)
    cart, watcher = open_cart()
    cart.add_item(CartLineItem(
        product_id=product.id,
        product_name=product.name,
        product_image=product.image_url,
        size=req.size,
        quantity=req.quantity,
        price=product.price,
    ))
    return ok(cart_payload(cart, watcher), message="Item added to cart")


@cart_bp.route("/update", methods=["POST"])
@validate_schema(UpdateQuantityRequest)
def update_quantity():
    req: UpdateQuantityRequest = g.validated_data
    cart, watcher = open_cart()
    cart.update_quantity(req.product_id, req.quantity)
    return ok(cart_payload(cart, watcher), message="Cart quantity updated")


@cart_bp.route("/remove", methods=["POST"])
@validate_schema(RemoveFromCartRequest)
def remove_item():
    req: RemoveFromCartRequest = g.validated_data
    cart, watcher = open_cart()
    cart.remove_item(req.product_id)
    return ok(cart_payload(cart, watcher), message="Item removed")


@cart_bp.route("/clear", methods=["POST"])
def clear_cart():
    cart, watcher = open_cart()
    cart.clear()
    return ok(cart_payload(cart, watcher), message="Cart cleared")
