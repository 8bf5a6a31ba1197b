from coffeehub.routes import (
    catalog_bp,
    cart_bp,
    order_bp,
    session_bp,
    admin_bp,
)


def register_api_v1(app):
    """Register blueprint routes under the API version prefix."""
    app.register_blueprint(catalog_bp)
    app.register_blueprint(cart_bp)
    app.register_blueprint(order_bp)
    app.register_blueprint(session_bp)
    app.register_blueprint(admin_bp)
