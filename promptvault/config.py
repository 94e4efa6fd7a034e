import os
from datetime import timedelta

basedir = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "a-hard-to-guess-string"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SWAGGER = {"title": "Prompt Vault API", "uiversion": 3, "specs_route": "/api/docs/"}
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"

    # Bearer tokens are read from the Authorization header only.
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY") or SECRET_KEY
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=1)

    # Text-generation API
    GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY")
    GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-1.5-flash-latest")
    GEMINI_API_URL = os.environ.get(
        "GEMINI_API_URL", "https://generativelanguage.googleapis.com/v1beta"
    )

    # Timeouts and a single bounded retry for every upstream call.
    try:
        UPSTREAM_TIMEOUT = float(os.environ.get("UPSTREAM_TIMEOUT", "30"))
    except ValueError:
        UPSTREAM_TIMEOUT = 30.0
    try:
        UPSTREAM_RETRIES = int(os.environ.get("UPSTREAM_RETRIES", "1"))
    except ValueError:
        UPSTREAM_RETRIES = 1
    try:
        UPSTREAM_BACKOFF_MAX = float(os.environ.get("UPSTREAM_BACKOFF_MAX", "4"))
    except ValueError:
        UPSTREAM_BACKOFF_MAX = 4.0

    # Object storage for prompt outputs
    STORAGE_ROOT = os.environ.get("STORAGE_ROOT") or os.path.join(basedir, "..", "instance", "storage")
    STORAGE_BUCKET = os.environ.get("STORAGE_BUCKET", "prompt_outputs")
    STORAGE_PUBLIC_URL = os.environ.get("STORAGE_PUBLIC_URL")
    MAX_CONTENT_LENGTH = 25 * 1024 * 1024


class DevelopmentConfig(Config):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DEV_DATABASE_URL"
    ) or "sqlite:///" + os.path.join(basedir, "..", "database-dev.db")


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = (
        os.environ.get("TEST_DATABASE_URL") or "sqlite://"
    )  # In-memory database
    SECRET_KEY = "testing-secret-key-long-enough-for-hs256-signing"
    JWT_SECRET_KEY = SECRET_KEY
    GEMINI_API_KEY = "test-key"
    UPSTREAM_BACKOFF_MAX = 0


class ProductionConfig(Config):
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL"
    ) or "sqlite:///" + os.path.join(basedir, "..", "database.db")
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
    }


config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}
