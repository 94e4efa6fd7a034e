import os

from flask import Flask, json, jsonify, request
from flask_cors import CORS
from flasgger import Flasgger
from werkzeug.exceptions import HTTPException

from .config import config
from .extensions import db, jwt, migrate
from .logging_config import configure_logging, init_request_logging

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


def create_app(config_name=None):
    """
    Application factory function.
    """
    if config_name is None:
        config_name = os.getenv('FLASK_CONFIG', 'default')

    app = Flask(__name__)
    app.config.from_object(config[config_name])

    configure_logging(
        log_level=app.config.get("LOG_LEVEL", "INFO"),
        is_debug=app.config.get("DEBUG", False)
    )
    init_request_logging(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    from .api.auth import init_jwt_callbacks
    init_jwt_callbacks(jwt)

    with app.app_context():
        # Models must be imported before create_all / migrations see them
        from . import models  # noqa: F401

        from .api.v1 import api_v1
        app.register_blueprint(api_v1, url_prefix='/api/v1')

        from .api.storage_routes import storage_bp
        app.register_blueprint(storage_bp)

        from .web import web_bp
        app.register_blueprint(web_bp)

    Flasgger(app)

    # Every API endpoint answers pre-flight checks with an allow-all response
    CORS(
        app,
        resources={r"/api/*": {"origins": "*"}},
        allow_headers=CORS_ALLOW_HEADERS,
        send_wildcard=True,
    )

    @app.errorhandler(HTTPException)
    def api_http_error(e):
        # API callers always get {"error": ...}; UI routes keep the HTML pages
        if request.path.startswith("/api/"):
            response = e.get_response()
            response.data = json.dumps({"error": e.description or e.name})
            response.content_type = "application/json"
            return response
        return e

    @app.route('/health')
    def health_check():
        return jsonify({"status": "healthy"}), 200

    @app.after_request
    def set_security_headers(response):
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        return response

    from .cli.commands import init_commands
    init_commands(app)

    return app
