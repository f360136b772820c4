"""Credentials for the tracking API: bcrypt password hashes and JWT bearer tokens.

Tokens carry the user id in the ``sub`` claim and expire after
``settings.jwt_expire_minutes``.
"""

from datetime import timedelta

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from timekeeper.db.models import UserModel
from timekeeper.repositories.user import user_repository
from timekeeper.settings import settings
from timekeeper.utils import get_logger, utc_now

logger = get_logger(__name__)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Sign ``data`` (which must hold ``sub``) with an ``exp`` claim."""
    lifetime = expires_delta or timedelta(minutes=settings.jwt_expire_minutes)
    claims = {**data, "exp": utc_now() + lifetime}
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> str | None:
    """User id from a valid, unexpired token; None for anything else."""
    try:
        claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.warning(f"Rejected bearer token: {e}")
        return None
    return claims.get("sub")


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against its bcrypt hash. A malformed hash never matches."""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError as e:
        logger.error(f"Stored password hash is unreadable: {e}")
        return False


def authenticate_user(db: Session, email: str, password: str) -> UserModel | None:
    """The user with this email and password, or None.

    Unknown email and wrong password both yield None so callers answer
    with the same 401.
    """
    user = user_repository.get_by_email(db, email)
    if user is None or not verify_password(password, user.hashed_password):
        return None
    return user
