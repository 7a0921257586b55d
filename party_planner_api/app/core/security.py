"""
Security helpers for password hashing and session tokens.

This module implements a lightweight JSON Web Token (JWT) mechanism
using HMAC-SHA256 signatures and base64url encoding.  Tokens carry the
user identifier (``sub``), the user's role and an expiration timestamp
(``exp``).  A secret key from the application settings is used to sign
and verify the token.  Passwords are hashed with PBKDF2-HMAC-SHA256
and a per-password random salt.

The ``get_current_user`` dependency is the authorization guard: it is
attached per route, so public routes simply do not declare it.
"""

import base64
import hashlib
import hmac
import json
import logging
import os
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings
from .errors import Forbidden, InvalidToken, MissingToken
from ..schemas.user import Role

logger = logging.getLogger(__name__)


def _b64_url_encode(data: bytes) -> str:
    """Base64-url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64-url encoded string, adding padding if necessary."""
    padding = '=' * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    """Compute HMAC-SHA256 signature of a message using the given secret."""
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(data: Dict[str, str], expires_delta: Optional[int] = None) -> str:
    """Create a signed JWT token with the given payload.

    The payload is extended with an ``exp`` field representing the
    expiration time as a UNIX timestamp.  Clients must include this
    token in the ``Authorization`` header as ``Bearer <token>``.

    Parameters
    ----------
    data : dict
        Claims to embed in the token (e.g. ``{"sub": user_id, "role": "organizer"}``).
    expires_delta : Optional[int]
        Lifetime of the token in seconds.  Defaults to
        ``settings.access_token_expire_minutes * 60``.
    """
    to_encode = data.copy()
    exp_seconds = expires_delta or settings.access_token_expire_minutes * 60
    to_encode["exp"] = int(time.time()) + exp_seconds
    header = {"alg": settings.algorithm, "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(',', ':')).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(',', ':')).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, settings.secret_key))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str) -> Optional[Dict[str, str]]:
    """Verify and decode a JWT token.

    Returns the payload dictionary when the signature matches and the
    token has not expired, otherwise ``None``.
    """
    try:
        parts = token.split('.')
        if len(parts) != 3:
            return None
        header_b64, payload_b64, signature_b64 = parts
        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        expected_sig = _sign(signing_input, settings.secret_key)
        actual_sig = _b64_url_decode(signature_b64)
        if not hmac.compare_digest(expected_sig, actual_sig):
            return None
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
        if data.get("exp") is None or int(data["exp"]) < int(time.time()):
            return None
        return data
    except (ValueError, TypeError, UnicodeDecodeError):
        # Malformed base64 / JSON; binascii.Error is a ValueError
        return None


def issue_session_token(user_id: str, role: Role, expires_delta: Optional[int] = None) -> str:
    """Issue the session token handed out at login."""
    return create_access_token({"sub": user_id, "role": role.value}, expires_delta=expires_delta)


@dataclass(frozen=True)
class CurrentUser:
    """Identity decoded from a valid session token."""

    user_id: str
    role: Role


security = HTTPBearer(auto_error=False)


def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)) -> CurrentUser:
    """Dependency that validates the bearer token and returns the caller.

    Raises ``MissingToken`` when no bearer token is sent and
    ``InvalidToken`` when the signature, expiry or claims are invalid.
    """
    if credentials is None:
        raise MissingToken()
    payload = decode_access_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        raise InvalidToken()
    try:
        role = Role(payload.get("role"))
    except ValueError:
        logger.warning("Token for %s carries unknown role %r", payload.get("sub"), payload.get("role"))
        raise InvalidToken()
    return CurrentUser(user_id=str(payload["sub"]), role=role)


def get_optional_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Optional[CurrentUser]:
    """Like ``get_current_user`` but returns ``None`` when no token is sent."""
    if credentials is None:
        return None
    return get_current_user(credentials)


def require_roles(*roles: Role) -> Callable[[CurrentUser], CurrentUser]:
    """Dependency factory to enforce that the current user has one of the specified roles.

    Use this in FastAPI endpoints via ``Depends(require_roles(Role.ORGANIZER))``.
    If the authenticated user does not hold any of the given roles a
    ``Forbidden`` error (HTTP 403) is raised.
    """

    def _role_dependency(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role not in roles:
            raise Forbidden("Insufficient permissions")
        return current_user

    return _role_dependency


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2-HMAC with SHA-256.

    A 16-byte random salt is generated for each password.  The
    resulting string contains the salt and hash separated by a
    ``$`` (salt in hex, then hash in hex).
    """
    salt = os.urandom(16)
    iterations = 100_000
    dk = hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'), salt, iterations)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a plain password against a stored salt+hash string.

    Accounts created through Google sign-in have no password and never
    match.
    """
    if not hashed_password or plain_password is None:
        return False
    try:
        salt_hex, hash_hex = hashed_password.split('$', 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    iterations = 100_000
    dk = hashlib.pbkdf2_hmac('sha256', plain_password.encode('utf-8'), salt, iterations)
    return hmac.compare_digest(dk, stored_hash)
