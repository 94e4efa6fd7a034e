from functools import wraps

from flask import current_app, jsonify
from flask_jwt_extended import get_current_user, verify_jwt_in_request

from ..extensions import db
from ..models.user import User

INVALID_TOKEN = "Invalid or expired token"
MISSING_HEADER = "No authorization header"
MISSING_HEADER_REASON = "Missing Authorization Header"


def init_jwt_callbacks(jwt):
    """Resolve bearer identities to users and shape auth failures as 401 JSON."""

    @jwt.user_lookup_loader
    def _load_user(_jwt_header, jwt_data):
        return db.session.get(User, jwt_data["sub"])

    @jwt.user_lookup_error_loader
    def _user_lookup_error(_jwt_header, jwt_data):
        current_app.logger.warning("JWT user not found: %s", jwt_data.get("sub"))
        return jsonify({"error": INVALID_TOKEN}), 401

    @jwt.unauthorized_loader
    def _unauthorized(reason):
        # a present but non-Bearer header also starts with "Missing"
        if reason == MISSING_HEADER_REASON:
            return jsonify({"error": MISSING_HEADER}), 401
        current_app.logger.warning("JWT unauthorized: %s", reason)
        return jsonify({"error": INVALID_TOKEN}), 401

    @jwt.invalid_token_loader
    def _invalid_token(reason):
        current_app.logger.warning("JWT invalid token: %s", reason)
        return jsonify({"error": INVALID_TOKEN}), 401

    @jwt.expired_token_loader
    def _expired_token(_jwt_header, jwt_payload):
        current_app.logger.info("JWT expired for user %s", jwt_payload.get("sub"))
        return jsonify({"error": INVALID_TOKEN}), 401


def auth_required(view):
    """Require a valid bearer token and pass the resolved user as the first argument."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        return view(get_current_user(), *args, **kwargs)

    return wrapper
