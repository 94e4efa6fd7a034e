from flask import request


def json_body() -> dict:
    """Request JSON as a dict; anything else (missing, malformed, array, scalar) is empty."""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}
