import hashlib
import hmac
import os
from typing import Optional

import jwt
import pendulum

from .. import config
from ..errors import InvalidSignature, InvalidTokenType, MalformedToken, TokenExpired

ADMIN_KIND = "admin"
USER_KIND = "user"

# Claim that marks each token kind, and the fields the kind must carry
KIND_MARKERS = {
    ADMIN_KIND: ("role", "admin"),
    USER_KIND: ("type", "user"),
}
KIND_REQUIRED_FIELDS = {
    ADMIN_KIND: ("email",),
    USER_KIND: ("id", "email"),
}


# Generates a 16-byte cryptographic salt as a hexadecimal string
def generate_salt() -> str:
    return os.urandom(16).hex()


# Returns "salt$digest", the digest being HMAC-SHA256 of the password keyed by the salt
def hash_password(password: str, salt: Optional[str] = None) -> str:
    salt = salt or generate_salt()
    digest = hmac.new(salt.encode(), password.encode(), hashlib.sha256).hexdigest()
    return f"{salt}${digest}"


def verify_password(password: str, stored: Optional[str]) -> bool:
    if not stored or "$" not in stored:
        return False
    salt = stored.split("$", 1)[0]
    return hmac.compare_digest(hash_password(password, salt).encode(), stored.encode())


# Validates the password against the length requirement
def is_password_valid(password: str) -> bool:
    return len(password) >= config.MIN_PASSWORD_LENGTH


def _timestamp(now: Optional[pendulum.DateTime]) -> float:
    return (now or pendulum.now("UTC")).timestamp()


def issue_token(claims: dict, kind: str, now: Optional[pendulum.DateTime] = None) -> str:
    """Sign a session token of the given kind, valid for TOKEN_TTL_DAYS."""
    issued = now or pendulum.now("UTC")
    marker, value = KIND_MARKERS[kind]
    payload = dict(claims)
    payload[marker] = value
    payload["iat"] = int(issued.timestamp())
    payload["exp"] = int(issued.add(days=config.TOKEN_TTL_DAYS).timestamp())
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def issue_admin_token(email: str, now: Optional[pendulum.DateTime] = None) -> str:
    return issue_token({"sub": email, "email": email}, ADMIN_KIND, now=now)


def issue_user_token(user, now: Optional[pendulum.DateTime] = None) -> str:
    return issue_token(
        {"sub": user.id, "id": user.id, "email": user.email, "name": user.name},
        USER_KIND,
        now=now,
    )


def _is_expired(claims: dict, now: Optional[pendulum.DateTime]) -> bool:
    exp = claims.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return False
    return _timestamp(now) >= exp


def _unverified_claims(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError:
        return None


def verify_token(token: str, kind: str, now: Optional[pendulum.DateTime] = None) -> dict:
    """Authoritative check of a session token.

    Order: signature, then structure and kind marker, then expiry
    (``now < exp``). Raises MalformedToken, InvalidSignature,
    InvalidTokenType or TokenExpired. A token that fails the signature check
    but whose claims are already past expiry is reported as TokenExpired.
    """
    if not token or not isinstance(token, str):
        raise MalformedToken()

    try:
        payload = jwt.decode(
            token,
            config.JWT_SECRET,
            algorithms=[config.JWT_ALGORITHM],
            options={"verify_exp": False, "verify_iat": False, "verify_nbf": False},
        )
    except jwt.InvalidSignatureError as e:
        claims = _unverified_claims(token)
        if claims is not None and _is_expired(claims, now):
            raise TokenExpired() from e
        raise InvalidSignature() from e
    except jwt.InvalidTokenError as e:
        raise MalformedToken() from e

    exp = payload.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        raise MalformedToken("Token has no expiry")

    marker, value = KIND_MARKERS[kind]
    if payload.get(marker) != value:
        raise InvalidTokenType()

    for name in KIND_REQUIRED_FIELDS[kind]:
        if not payload.get(name):
            raise MalformedToken(f"Token is missing '{name}'")

    if _is_expired(payload, now):
        raise TokenExpired()

    return payload
