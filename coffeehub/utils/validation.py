from functools import wraps
from flask import request, g
from pydantic import ValidationError
from .responses import validation_error_response


def clean_errors(ve: ValidationError):
    return ve.errors(include_url=False, include_context=False, include_input=False)


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def validate_schema(schema):
    """Decorator to validate request JSON against a Pydantic schema."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                obj = schema(**json_body())
            except ValidationError as ve:
                return validation_error_response(clean_errors(ve))
            g.validated_data = obj
            return fn(*args, **kwargs)
        return wrapper

    return decorator
