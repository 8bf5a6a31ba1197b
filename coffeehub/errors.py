import logging
from flask import Blueprint
from werkzeug.exceptions import HTTPException
from coffeehub.utils.responses import error

logger = logging.getLogger(__name__)

errors_bp = Blueprint("errors_bp", __name__)


class ValidationError(Exception):
    """Rejected input; raised before any state is touched."""


class StoreError(Exception):
    """An external store (catalog, orders, session, images) failed.

    ``store`` labels which adapter failed; the message is safe to show.
    """

    def __init__(self, message, store="store"):
        super().__init__(message)
        self.store = store


@errors_bp.app_errorhandler(HTTPException)
def handle_http_exception(e):
    msg = e.description or getattr(e, "name", "HTTP Error")
    return error(msg, status=e.code, code=e.code)


@errors_bp.app_errorhandler(StoreError)
def handle_store_error(e):
    logger.error("%s store failure: %s", e.store, e)
    return error(str(e), status=503, code=503)


@errors_bp.app_errorhandler(Exception)
def handle_unexpected_exception(e):
    logger.exception("Unhandled exception")
    return error(
        "An unexpected error occurred. Please try again later.",
        status=500,
        code=500,
    )
