from flask import Blueprint, g
from coffeehub.version import API_PREFIX
from coffeehub.schemas.session import RememberMeRequest, SessionSaveRequest
from coffeehub.services.session_store import SessionStore
from coffeehub.utils import auth_required, current_session, ok, validate_schema

session_bp = Blueprint("session", __name__, url_prefix=f"{API_PREFIX}/session")


@session_bp.before_request
@auth_required
def _require_login():
    return None


def _store():
    return SessionStore.for_user(current_session().user_id)


@session_bp.route("", methods=["GET"])
def get_session():
    return ok(_store().to_dict())


@session_bp.route("", methods=["PUT"])
@validate_schema(SessionSaveRequest)
def save_session():
    """Persist the token's identity as the signed-in session."""
    req: SessionSaveRequest = g.validated_data
    store = _store()
    store.save_from(current_session(), remember_me=req.remember_me)
    return ok(store.to_dict(), message="Session saved")


@session_bp.route("/remember-me", methods=["POST"])
@validate_schema(RememberMeRequest)
def set_remember_me():
    req: RememberMeRequest = g.validated_data
    store = _store()
    store.set_remember_me(req.enabled)
    return ok(store.to_dict())


@session_bp.route("", methods=["DELETE"])
def clear_session():
    store = _store()
    store.clear()
    return ok(store.to_dict(), message="Session cleared")
