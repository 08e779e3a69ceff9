import hmac
import logging
from typing import Optional

from fastapi import Header

from . import config
from .errors import AuthError, InvalidCredentials, Unauthenticated
from .utils.security import ADMIN_KIND, USER_KIND, verify_password, verify_token

logger = logging.getLogger(__name__)


def bearer_token(authorization: Optional[str]) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise Unauthenticated()
    token = authorization[len("Bearer "):].strip()
    if not token:
        raise Unauthenticated()
    return token


def _principal(authorization: Optional[str], kind: str) -> dict:
    try:
        return verify_token(bearer_token(authorization), kind)
    except AuthError as e:
        logger.info("Rejected %s token: %s", kind, type(e).__name__)
        raise


# Dependency for admin routes
def require_admin(authorization: Optional[str] = Header(default=None)) -> dict:
    return _principal(authorization, ADMIN_KIND)


# Dependency for customer routes
def require_user(authorization: Optional[str] = Header(default=None)) -> dict:
    return _principal(authorization, USER_KIND)


def authenticate_admin(email: str, password: str) -> dict:
    """Check the single configured admin account."""
    if email.lower() != config.ADMIN_EMAIL.lower():
        raise InvalidCredentials()

    if config.ADMIN_PASSWORD_HASH:
        valid = verify_password(password, config.ADMIN_PASSWORD_HASH)
    elif not config.is_production():
        # Development only: fall back to the default password
        valid = hmac.compare_digest(password.encode(), config.DEV_ADMIN_PASSWORD.encode())
    else:
        valid = False

    if not valid:
        logger.info("Failed admin login for %s", email)
        raise InvalidCredentials()

    return {"email": config.ADMIN_EMAIL, "role": "admin"}
