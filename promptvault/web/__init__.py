from flask import Blueprint, request

from .session import generate_csrf_token, validate_csrf

web_bp = Blueprint("web", __name__, template_folder="templates")
web_bp.add_app_template_global(generate_csrf_token, "csrf_token")


@web_bp.before_request
def check_csrf():
    # every state-changing form post carries the session token
    if request.method == "POST":
        validate_csrf()


from . import views  # noqa: E402,F401
