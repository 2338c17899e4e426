"""
Bearer tokens and password hashes for the Bookshelf API.

Tokens are compact HS256 JWTs signed with ``Settings.jwt_secret``; the
``sub`` claim is the user id and ``exp`` ends the token's life.  Decoding
distinguishes a missing, malformed or expired token so each gets its own
401 message.  Passwords are stored as salted PBKDF2-SHA256 digests.
"""

import base64
import binascii
import hashlib
import hmac
import json
import logging
import os
import time
from typing import Any, Dict, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .exceptions import (
    AuthError,
    InternalError,
    InvalidTokenError,
    MissingTokenError,
    TokenExpiredError,
)


logger = logging.getLogger(__name__)

PASSWORD_HASH_ITERATIONS = 100_000


def _b64_url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    # Tokens are emitted without "=" padding.
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(
    data: Dict[str, Any],
    secret: str,
    expires_delta: int = 3600,
    now: Optional[float] = None,
) -> str:
    """Sign ``data`` as an HS256 token valid for ``expires_delta`` seconds.

    ``iat`` and ``exp`` are added to the claims.  Login passes
    ``{"sub": str(user_id)}`` and the configured lifetime; ``now`` lets
    tests issue tokens in the past.
    """
    issued_at = int(now if now is not None else time.time())
    to_encode = data.copy()
    to_encode["iat"] = issued_at
    to_encode["exp"] = issued_at + expires_delta
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, secret))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str, secret: str, now: Optional[float] = None) -> Dict[str, Any]:
    """Verify and decode a JWT token.

    Splits the token into header, payload and signature, verifies the
    HMAC signature and checks the ``exp`` field.

    Raises
    ------
    InvalidTokenError
        If the token is malformed or its signature does not match.
    TokenExpiredError
        If the signature is valid but ``exp`` lies in the past.
    """
    parts = token.split(".")
    if len(parts) != 3:
        raise InvalidTokenError()
    header_b64, payload_b64, signature_b64 = parts
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    try:
        actual_sig = _b64_url_decode(signature_b64)
        expected_sig = _sign(signing_input, secret)
        # Constant-time comparison to prevent timing attacks
        if not hmac.compare_digest(expected_sig, actual_sig):
            raise InvalidTokenError()
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except (binascii.Error, ValueError, UnicodeDecodeError):
        raise InvalidTokenError()
    if not isinstance(data, dict):
        raise InvalidTokenError()
    try:
        expires_at = int(data["exp"])
    except (KeyError, TypeError, ValueError):
        raise InvalidTokenError()
    current = now if now is not None else time.time()
    if expires_at < current:
        raise TokenExpiredError()
    return data


def verify_token(token: str, secret: str, now: Optional[float] = None) -> int:
    """Return the user id carried by a valid token.

    Raises ``AuthError`` subclasses for invalid or expired tokens and
    for payloads without a usable ``sub`` claim.
    """
    payload = decode_access_token(token, secret, now=now)
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise AuthError("Invalid token payload")


security = HTTPBearer(auto_error=False)


def get_current_user_id(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> int:
    """Dependency that returns the id of the authenticated user.

    Requests without a ``Bearer`` authorization header fail with
    ``MissingTokenError``; invalid or expired tokens fail with the
    corresponding ``AuthError`` subclass.  All of them are rendered as
    401 responses.  Anything else that goes wrong while checking the
    token is reported as an ``InternalError``.
    """
    if credentials is None:
        raise MissingTokenError()
    settings = request.app.state.settings
    try:
        return verify_token(credentials.credentials, settings.jwt_secret)
    except AuthError as exc:
        logger.warning("Rejected token on %s: %s", request.url.path, exc.message)
        raise
    except Exception as exc:
        logger.exception("Unexpected failure while verifying token")
        raise InternalError("Internal server error") from exc


def hash_password(password: str) -> str:
    """Return ``"<salt hex>$<pbkdf2-sha256 hex>"`` for storage in ``users.password``."""
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PASSWORD_HASH_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a login password against the stored value; malformed values never match."""
    try:
        salt_hex, hash_hex = hashed_password.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except (AttributeError, ValueError):
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PASSWORD_HASH_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)
