from .responses import ok, error, validation_error_response
from .auth import auth_required, role_required, current_session
from .validation import validate_schema, json_body, clean_errors
from .db import transactional
from .jwt import create_access_token, decode_token, TokenError
from .observable import Observable

__all__ = [
    'ok',
    'error',
    'validation_error_response',
    'auth_required',
    'role_required',
    'current_session',
    'validate_schema',
    'json_body',
    'clean_errors',
    'transactional',
    'create_access_token',
    'decode_token',
    'TokenError',
    'Observable',
]
