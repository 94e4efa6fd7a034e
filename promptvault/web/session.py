"""Session accessor for the UI.

The bearer token issued at sign-in lives in the signed Flask session. Views
never read it themselves: `login_required` resolves it to a user and passes
that user to the view explicitly.
"""
import hmac
import secrets
from functools import wraps

from flask import abort, current_app, flash, redirect, request, session, url_for

from ..services import auth_service

TOKEN_KEY = "access_token"
CSRF_KEY = "csrf_token"


def store_token(token: str):
    session[TOKEN_KEY] = token


def current_token() -> str | None:
    return session.get(TOKEN_KEY)


def clear_token():
    session.pop(TOKEN_KEY, None)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        token = current_token()
        user = auth_service.resolve_token(token)
        if user is None:
            if token:
                clear_token()
                flash("Your session has expired. Please sign in again.", "warning")
            return redirect(url_for("web.login", next=request.path))
        return view(user, *args, **kwargs)

    return wrapper


def generate_csrf_token() -> str:
    """Return the session's CSRF token, creating it on first use."""
    if CSRF_KEY not in session:
        session[CSRF_KEY] = secrets.token_hex(32)
    return session[CSRF_KEY]


def validate_csrf():
    """Abort with 403 unless the form or X-CSRF-Token header carries the session token."""
    token = request.form.get(CSRF_KEY) or request.headers.get("X-CSRF-Token")
    expected = session.get(CSRF_KEY)
    if not token or not expected or not hmac.compare_digest(token, expected):
        current_app.logger.warning("CSRF validation failed for %s %s", request.method, request.path)
        abort(403)
