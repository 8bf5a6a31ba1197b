from .catalog import catalog_bp
from .cart import cart_bp
from .orders import order_bp
from .session import session_bp
from .admin import admin_bp


__all__ = [
    'catalog_bp',
    'cart_bp',
    'order_bp',
    'session_bp',
    'admin_bp',
]
