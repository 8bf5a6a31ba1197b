import logging
from flask import current_app, g, request
from werkzeug.utils import secure_filename
from coffeehub.schemas.product import ProductCreate, ProductUpdate
from coffeehub.services.product_filter import admin_search
from coffeehub.services.product_import import import_products, products_from_dataframe, read_product_sheet
from coffeehub.stores import get_stores
from coffeehub.tasks.images import delete_product_image_task
from coffeehub.utils import error, ok, validate_schema
from . import admin_bp

logger = logging.getLogger(__name__)


@admin_bp.route("/products", methods=["GET"])
def list_products():
    products = admin_search(get_stores().catalog.list(), request.args.get("q", ""))
    return ok({"products": [p.to_dict() for p in products]})


@admin_bp.route("/products", methods=["POST"])
@validate_schema(ProductCreate)
def add_product():
    req: ProductCreate = g.validated_data
    product_id = get_stores().catalog.add(req.model_dump())
    return ok({"id": product_id}, message="Product added successfully", status=201)


@admin_bp.route("/products/<product_id>", methods=["PUT"])
@validate_schema(ProductUpdate)
def update_product(product_id):
    req: ProductUpdate = g.validated_data
    try:
        product = get_stores().catalog.update(product_id, req.changes())
    except LookupError:
        return error("Product not found", status=404)
    return ok(product.to_dict(), message="Product updated successfully")


@admin_bp.route("/products/<product_id>", methods=["DELETE"])
def delete_product(product_id):
    stores = get_stores()
    try:
        deleted = stores.catalog.delete(product_id)
    except LookupError:
        return error("Product not found", status=404)
    if deleted["image_url"]:
        # Image cleanup never blocks the delete.
        try:
            delete_product_image_task.delay(deleted["image_url"], stores.images.base_dir)
        except Exception as e:
            logger.warning("Image cleanup for %s not queued: %s", product_id, e)
    return ok({"id": product_id}, message="Product deleted successfully")


@admin_bp.route("/products/<product_id>/image", methods=["POST"])
def upload_product_image(product_id):
    stores = get_stores()
    product = stores.catalog.get(product_id)
    if product is None:
        return error("Product not found", status=404)
    file = request.files.get("file")
    if not file:
        return error("No file uploaded", status=400)
    previous = product.image_url
    path = stores.images.save(file.read(), product_id)
    product = stores.catalog.update(product_id, {"image_url": path})
    if previous and previous != path:
        try:
            stores.images.delete(previous)
        except OSError as e:
            logger.warning("Old image %s not removed: %s", previous, e)
    return ok(product.to_dict(), message="Image saved")


@admin_bp.route("/products/bulk-upload", methods=["POST"])
def bulk_upload_products():
    file = request.files.get("file")
    if not file:
        return error("No file uploaded", status=400)
    filename = secure_filename(file.filename or "")
    try:
        rows = products_from_dataframe(read_product_sheet(file, filename))
    except ValueError as e:
        return error(str(e), status=400)
    imported, failed = import_products(get_stores().catalog, rows)
    current_app.logger.info("Bulk upload %s: %d imported, %d failed", filename, imported, failed)
    return ok({"imported": imported, "failed": failed}, message=f"{imported} products uploaded")
