import structlog
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from ..errors import EmailAlreadyRegistered
from ..extensions import db
from ..models.user import User

log = structlog.get_logger()

MIN_PASSWORD_LENGTH = 8


def _normalize_email(email) -> str:
    return (email or "").strip().lower()


def register_user(email: str, password: str) -> User:
    email = _normalize_email(email)
    if not email or not password:
        raise ValueError("Missing required fields: email and password")
    if "@" not in email:
        raise ValueError("Invalid email address")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if User.query.filter_by(email=email).first():
        raise EmailAlreadyRegistered("Email already registered")

    user = User(email=email)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    log.info("user.registered", user_id=user.id)
    return user


def authenticate(email: str, password: str) -> User | None:
    user = User.query.filter_by(email=_normalize_email(email)).first()
    if user is None or not password or not user.check_password(password):
        log.info("user.login_failed")
        return None
    return user


def issue_token(user: User) -> str:
    return create_access_token(identity=user.id, additional_claims={"email": user.email})


def resolve_token(token: str | None) -> User | None:
    """Map a bearer token to its user; None for missing, bad or expired tokens."""
    if not token:
        return None
    try:
        claims = decode_token(token)
    except (PyJWTError, JWTExtendedException) as e:
        log.info("token.rejected", reason=str(e))
        return None
    return db.session.get(User, claims.get("sub"))
