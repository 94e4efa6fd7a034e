import pytest

from promptvault import create_app, db
from promptvault.services import auth_service


@pytest.fixture(scope='function')
def app(tmp_path):
    """
    Fixture that creates a test app instance with a new database
    and an empty object store under tmp_path.
    """
    app = create_app('testing')
    app.config.update(STORAGE_ROOT=str(tmp_path / "storage"))

    with app.app_context():
        db.create_all()

        yield app

        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture
def make_user(app):
    """Create a user and return (user, bearer headers)."""

    def _make(email="alice@example.com", password="correct-horse"):
        user = auth_service.register_user(email, password)
        token = auth_service.issue_token(user)
        return user, {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def gemini_response():
    """Build a successful generateContent body carrying `text`."""

    def _build(text):
        return {"candidates": [{"content": {"parts": [{"text": text}]}}]}

    return _build
