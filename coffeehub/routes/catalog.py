from flask import Blueprint, current_app, request
from pydantic import ValidationError as SchemaError
from coffeehub.version import API_PREFIX
from coffeehub.services.product_filter import FilterParams, ProductFilter
from coffeehub.stores import get_stores
from coffeehub.utils import auth_required, role_required, ok, error, validation_error_response, clean_errors

catalog_bp = Blueprint("catalog", __name__, url_prefix=f"{API_PREFIX}/products")


@catalog_bp.before_request
@auth_required
@role_required(["customer:browse_catalog", "admin"])
def _require_login():
    return None


@catalog_bp.route("", methods=["GET"])
def list_products():
    """Catalog snapshot narrowed by category, search, price range and availability."""
    args = request.args.to_dict()
    args.setdefault("max_price", current_app.config["DEFAULT_MAX_PRICE"])
    try:
        params = FilterParams(**args)
    except SchemaError as ve:
        return validation_error_response(clean_errors(ve))
    visible = ProductFilter(get_stores().catalog.list(), params).visible
    return ok({
        "products": [p.to_dict() for p in visible],
        "count": len(visible),
        "filters": params.model_dump(mode="json"),
    })


@catalog_bp.route("/search", methods=["GET"])
def search_products():
    text = request.args.get("q", "").strip()
    if not text:
        return error("Missing search query 'q'", status=400)
    products = get_stores().catalog.search(text)
    return ok({"products": [p.to_dict() for p in products]})


@catalog_bp.route("/<product_id>", methods=["GET"])
def get_product(product_id):
    product = get_stores().catalog.get(product_id)
    if product is None:
        return error("Product not found", status=404)
    return ok(product.to_dict())
