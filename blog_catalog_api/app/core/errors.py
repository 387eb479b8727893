"""
Domain error taxonomy.

Services and validators raise these exceptions; the exception handlers
registered in ``app.main`` are the only place that turns them into HTTP
responses.  Each class carries the status code the boundary uses and
whether its message is safe to show to the caller verbatim.

Failures that look the same to callers today but are different
conditions internally (an expired vs. a forged token, a malformed vs. an
unknown id) keep their distinction in a ``reason`` enum so the boundary
can tell them apart later without touching the services.
"""

from enum import Enum
from typing import Optional


class BlogCatalogError(Exception):
    """Base class for all domain errors."""

    kind = "unhandled"
    status_code = 500
    public = False
    public_message = "internal server error"

    def __init__(self, message: str = "internal server error") -> None:
        super().__init__(message)
        self.message = message


class ValidationError(BlogCatalogError):
    """Submitted data fails a structural or semantic rule."""

    kind = "validation"
    status_code = 400
    public = True

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class PolicyError(ValidationError):
    """A raw password does not satisfy the password policy."""

    def __init__(self, reason: str = "password must be at least 3 characters") -> None:
        super().__init__("password", reason)


class BadIdReason(str, Enum):
    MALFORMED = "malformed"
    NOT_FOUND = "not_found"


class BadId(BlogCatalogError):
    """An id-addressed operation received an id that does not resolve."""

    kind = "bad_id"
    status_code = 400
    public = True

    def __init__(self, raw_id: object, reason: BadIdReason) -> None:
        super().__init__("bad id")
        self.raw_id = raw_id
        self.reason = reason


class AuthFailure(str, Enum):
    MISSING = "missing"
    TOKEN_INVALID = "token_invalid"
    TOKEN_EXPIRED = "token_expired"
    BAD_CREDENTIALS = "bad_credentials"


class AuthenticationError(BlogCatalogError):
    """The caller could not be authenticated."""

    kind = "authentication"
    status_code = 401
    public = True

    def __init__(self, reason: AuthFailure = AuthFailure.MISSING, message: Optional[str] = None) -> None:
        super().__init__(message or "token missing or invalid")
        self.reason = reason


class Unauthorized(BlogCatalogError):
    """The caller is authenticated but not allowed to act on the resource."""

    kind = "unauthorized"
    status_code = 403
    public = False
    public_message = "operation not permitted"


class IntegrityError(BlogCatalogError):
    """Stored data violates an internal invariant (e.g. a corrupt hash)."""

    kind = "integrity"
    status_code = 500
    public = False


class TokenError(Exception):
    """Base class for bearer token verification failures."""


class TokenInvalid(TokenError):
    """Token is malformed or its signature does not verify."""


class TokenExpired(TokenError):
    """Token signature is valid but its expiry has passed."""
