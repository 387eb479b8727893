"""
Security helpers for password hashing and bearer token authentication.

``CredentialManager`` hashes and verifies passwords (PBKDF2-HMAC with
SHA-256 and a random per-password salt) and issues and verifies compact
JSON Web Tokens signed with HMAC-SHA256.  The signing secret and token
lifetime are fixed when the manager is constructed; the application
builds exactly one manager at startup and keeps it on ``app.state``.

The FastAPI dependencies at the bottom of the module turn a request's
``Authorization: Bearer <token>`` header into the acting user.
"""

import base64
import hashlib
import hmac
import json
import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import Settings
from .db import get_cursor
from .errors import (
    AuthFailure,
    AuthenticationError,
    IntegrityError,
    PolicyError,
    TokenExpired,
    TokenInvalid,
)
from . import store
from ..schemas.user import UserSummary


PASSWORD_MIN_LENGTH = 3
PBKDF2_ITERATIONS = 100_000


def _b64_url_encode(data: bytes) -> str:
    """Base64-url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode a base64-url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


@dataclass(frozen=True)
class TokenIdentity:
    """Identity claims carried by a verified token."""

    user_id: int
    username: str


class CredentialManager:
    """Password hashing and token signing bound to one secret."""

    def __init__(self, secret_key: str, token_lifetime_seconds: int = 3600, algorithm: str = "HS256") -> None:
        if algorithm != "HS256":
            raise ValueError(f"Unsupported token algorithm: {algorithm}")
        self._secret = secret_key.encode("utf-8")
        self.token_lifetime_seconds = token_lifetime_seconds
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: Settings) -> "CredentialManager":
        return cls(
            secret_key=settings.secret_key,
            token_lifetime_seconds=settings.access_token_expire_minutes * 60,
            algorithm=settings.algorithm,
        )

    # ------------------------------------------------------------------
    # Passwords
    # ------------------------------------------------------------------

    def hash_password(self, password: str) -> str:
        """Hash a password using PBKDF2-HMAC with SHA-256.

        A 16-byte random salt is generated for each call.  The result
        contains the salt and the derived key in hex, separated by
        ``$``.

        Raises
        ------
        PolicyError
            If the password is shorter than three characters.
        """
        if password is None or len(password) < PASSWORD_MIN_LENGTH:
            raise PolicyError()
        salt = os.urandom(16)
        dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
        return f"{salt.hex()}${dk.hex()}"

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Check a plain password against a stored ``salt$hash`` string.

        Returns ``False`` on mismatch.  A stored value that cannot be
        parsed is an ``IntegrityError``: it means the credential on file
        is corrupt, not that the caller typed the wrong password.
        """
        try:
            salt_hex, hash_hex = hashed_password.split("$", 1)
            salt = bytes.fromhex(salt_hex)
            stored_hash = bytes.fromhex(hash_hex)
        except (AttributeError, ValueError) as exc:
            raise IntegrityError("stored password hash is malformed") from exc
        if not salt or not stored_hash:
            raise IntegrityError("stored password hash is malformed")
        dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
        return hmac.compare_digest(dk, stored_hash)

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def _sign(self, message: bytes) -> bytes:
        return hmac.new(self._secret, message, hashlib.sha256).digest()

    def issue_token(self, user_id: int, username: str, expires_delta: Optional[int] = None) -> str:
        """Create a signed token for the given user.

        Parameters
        ----------
        user_id : int
            Id of the authenticated user, stored in the ``id`` claim.
        username : str
            Stored in the ``username`` claim.
        expires_delta : Optional[int]
            Lifetime in seconds.  Defaults to the manager's configured
            lifetime (one hour unless overridden).
        """
        lifetime = self.token_lifetime_seconds if expires_delta is None else expires_delta
        claims = {"id": user_id, "username": username, "exp": int(time.time()) + lifetime}
        header = {"alg": self.algorithm, "typ": "JWT"}
        header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
        payload_b64 = _b64_url_encode(json.dumps(claims, separators=(",", ":")).encode("utf-8"))
        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        signature_b64 = _b64_url_encode(self._sign(signing_input))
        return f"{header_b64}.{payload_b64}.{signature_b64}"

    def verify_token(self, token: str) -> TokenIdentity:
        """Verify a token's signature and expiry and return its identity.

        Raises
        ------
        TokenInvalid
            The token is malformed, uses another algorithm or its
            signature does not match.
        TokenExpired
            The signature is valid but the ``exp`` claim has passed.
        """
        parts = token.split(".")
        if len(parts) != 3:
            raise TokenInvalid("token must have three segments")
        header_b64, payload_b64, signature_b64 = parts
        try:
            header = json.loads(_b64_url_decode(header_b64))
            actual_sig = _b64_url_decode(signature_b64)
        except (ValueError, UnicodeDecodeError) as exc:
            raise TokenInvalid("token is not valid base64url JSON") from exc
        if not isinstance(header, dict) or header.get("alg") != self.algorithm:
            raise TokenInvalid("unexpected token algorithm")

        expected_sig = self._sign(f"{header_b64}.{payload_b64}".encode("utf-8"))
        if not hmac.compare_digest(expected_sig, actual_sig):
            raise TokenInvalid("signature mismatch")

        try:
            claims: Dict[str, Any] = json.loads(_b64_url_decode(payload_b64))
            user_id = int(claims["id"])
            username = str(claims["username"])
            expires_at = int(claims["exp"])
        except (ValueError, UnicodeDecodeError, KeyError, TypeError) as exc:
            raise TokenInvalid("token claims are incomplete") from exc
        if expires_at < int(time.time()):
            raise TokenExpired("token has expired")
        return TokenIdentity(user_id=user_id, username=username)


# ---------------------------------------------------------------------------
# Request authentication
# ---------------------------------------------------------------------------

bearer_scheme = HTTPBearer(auto_error=False)


def resolve_acting_user(token: Optional[str], credentials: CredentialManager) -> Optional[UserSummary]:
    """Resolve a bearer token to the acting user.

    No token means an anonymous caller (``None``).  A token that fails
    verification raises ``AuthenticationError``; the expired and invalid
    cases share one message but keep their own ``reason``.  A valid token
    whose user no longer exists also resolves to ``None``.
    """
    logger = logging.getLogger(__name__)
    if not token:
        return None
    try:
        identity = credentials.verify_token(token)
    except TokenExpired as exc:
        logger.info("Rejected expired token: %s", exc)
        raise AuthenticationError(AuthFailure.TOKEN_EXPIRED) from exc
    except TokenInvalid as exc:
        logger.info("Rejected invalid token: %s", exc)
        raise AuthenticationError(AuthFailure.TOKEN_INVALID) from exc

    with get_cursor() as cursor:
        user = store.users.find_by_id(cursor, identity.user_id)
    if user is None:
        logger.warning("Token for user %s refers to a missing account", identity.user_id)
        return None
    return UserSummary(id=user["id"], username=user["username"], name=user["name"])


def get_credential_manager(request: Request) -> CredentialManager:
    """Return the credential manager created at application startup."""
    return request.app.state.credentials


def get_acting_user(
    authorization: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    credentials: CredentialManager = Depends(get_credential_manager),
) -> Optional[UserSummary]:
    """Dependency yielding the acting user, or ``None`` for anonymous callers."""
    token = authorization.credentials if authorization else None
    return resolve_acting_user(token, credentials)


def require_user(acting_user: Optional[UserSummary] = Depends(get_acting_user)) -> UserSummary:
    """Dependency that rejects anonymous callers with a 401."""
    if acting_user is None:
        raise AuthenticationError(AuthFailure.MISSING)
    return acting_user
