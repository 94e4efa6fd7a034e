from flask import Blueprint, current_app, jsonify

from ...common.http import json_body
from ...errors import EmailAlreadyRegistered
from ...extensions import db
from ...services import auth_service
from ..auth import auth_required

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/auth/signup", methods=["POST"])
def signup():
    """Create an account and return an access token.
    ---
    tags:
      - Auth
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [email, password]
          properties:
            email:
              type: string
            password:
              type: string
    responses:
      201:
        description: "{accessToken, user}"
      400:
        description: Invalid input
      409:
        description: Email already registered
    """
    payload = json_body()
    try:
        user = auth_service.register_user(payload.get("email"), payload.get("password"))
        token = auth_service.issue_token(user)
        return jsonify({"accessToken": token, "user": user.to_dict()}), 201
    except EmailAlreadyRegistered as e:
        return _err(e, 409)
    except ValueError as e:
        return _err(e, 400)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Signup failed")
        return _err("Internal server error", 500)


@auth_bp.route("/auth/login", methods=["POST"])
def login():
    """Exchange email and password for an access token."""
    payload = json_body()
    if not payload.get("email") or not payload.get("password"):
        return _err("Missing required fields: email and password", 400)

    user = auth_service.authenticate(payload.get("email"), payload.get("password"))
    if user is None:
        return _err("Invalid email or password", 401)
    return jsonify({"accessToken": auth_service.issue_token(user), "user": user.to_dict()}), 200


@auth_bp.route("/auth/me", methods=["GET"])
@auth_required
def me(user):
    return jsonify({"user": user.to_dict()}), 200


def _err(msg, status=400):
    return jsonify({"error": str(msg)}), status
