# citizen_portal/core/security.py
from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.crypto.digest import pbkdf2_hmac
from passlib.utils import consteq

from citizen_portal.core.enums import TokenErrorKind

logger = logging.getLogger(__name__)


# -------------------------
# Credential store
# -------------------------
SALT_BYTES = 16
PBKDF2_DIGEST = "sha256"
PBKDF2_ROUNDS = 29000
SEPARATOR = ":"


def _digest(password: str, salt: str) -> str:
    return pbkdf2_hmac(
        PBKDF2_DIGEST,
        password.encode("utf-8"),
        salt.encode("ascii"),
        PBKDF2_ROUNDS,
    ).hex()


def hash_password(password: str) -> str:
    """Return ``salt:digest`` with a fresh random salt."""
    salt = secrets.token_hex(SALT_BYTES)
    return f"{salt}{SEPARATOR}{_digest(password, salt)}"


def verify_password(password: str, stored: str | None) -> bool:
    if not stored or SEPARATOR not in stored:
        return False

    salt, _, expected = stored.partition(SEPARATOR)
    if not salt or not expected:
        return False

    try:
        actual = _digest(password, salt)
    except (UnicodeError, ValueError):
        return False

    return consteq(actual, expected)


# -------------------------
# Token issuer
# -------------------------
TOKEN_CLAIMS = ("id", "name", "email")


class TokenError(Exception):
    def __init__(self, kind: TokenErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


class TokenIssuer:
    """
    Signs and validates session tokens.

    The secret is injected at construction; tokens carry ``id``, ``name``
    and ``email`` and only expire when ``expire_minutes`` is given.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expire_minutes: Optional[int] = None,
    ):
        if not secret:
            raise ValueError("Token secret must not be empty")
        self.secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, claims: Dict[str, Any]) -> str:
        payload = {k: claims.get(k) for k in TOKEN_CLAIMS}
        if self.expire_minutes:
            payload["exp"] = datetime.now(timezone.utc) + timedelta(minutes=self.expire_minutes)
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def validate(self, token: str) -> Dict[str, Any]:
        if not token or not isinstance(token, str):
            raise TokenError(TokenErrorKind.malformed, "Token is empty")

        try:
            jwt.get_unverified_header(token)
        except JWTError as e:
            raise TokenError(TokenErrorKind.malformed, f"Malformed token: {e}") from e

        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError as e:
            raise TokenError(TokenErrorKind.expired, "Token has expired") from e
        except JWTError as e:
            raise TokenError(TokenErrorKind.invalid_signature, f"Invalid token: {e}") from e

        if not isinstance(payload, dict) or not payload.get("id"):
            raise TokenError(TokenErrorKind.malformed, "Token is missing the id claim")

        return {k: payload.get(k) for k in TOKEN_CLAIMS}
