"""Helpers shared by the JSON blueprints."""

from flask import request

from collectdesk.errors import ValidationError


def json_body() -> dict:
    """Return the request's JSON object, or raise a validation error."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def str_field(body: dict, key: str) -> str:
    """Return ``body[key]`` if it is a string, otherwise an empty string."""
    value = body.get(key)
    return value if isinstance(value, str) else ""
