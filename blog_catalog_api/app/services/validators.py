"""
Structural checks applied to blogs and users before they are persisted.

Validators raise ``ValidationError`` with the offending field and a
human readable reason.  They return the cleaned value so that defaults
(``likes`` = 0) are applied exactly once, here.
"""

import sqlite3
from typing import Any, Dict

from ..core import store
from ..core.errors import ValidationError
from ..schemas.blog import BlogCreate, BlogUpdate
from ..schemas.user import UserCreate


USERNAME_MIN_LENGTH = 3
PASSWORD_MIN_LENGTH = 3


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def _check_likes(likes: Any) -> None:
    if likes is None:
        return
    if likes < 0:
        raise ValidationError("likes", "likes must not be negative")
    if likes > store.SQLITE_MAX_INTEGER:
        raise ValidationError("likes", "likes is too large")


def validate_blog(candidate: BlogCreate) -> BlogCreate:
    """Validate a new blog and fill in the ``likes`` default."""
    for field in ("title", "url"):
        if _is_blank(getattr(candidate, field)):
            raise ValidationError(field, f"{field} is required")
    _check_likes(candidate.likes)
    if candidate.likes is None:
        return candidate.model_copy(update={"likes": 0})
    return candidate


def validate_blog_patch(patch: BlogUpdate) -> Dict[str, Any]:
    """Validate a replacement and return only the fields the client sent."""
    changes = patch.model_dump(exclude_unset=True)
    for field in ("title", "url"):
        if field in changes and _is_blank(changes[field]):
            raise ValidationError(field, f"{field} is required")
    if "likes" in changes:
        if changes["likes"] is None:
            raise ValidationError("likes", "likes must be a number")
        _check_likes(changes["likes"])
    return changes


def validate_user(candidate: UserCreate, cursor: sqlite3.Cursor) -> UserCreate:
    """Validate a registration.

    The uniqueness lookup only catches the common case early.  Two
    concurrent registrations can both pass it; the UNIQUE constraint on
    ``users.username`` decides, and ``UserService`` reports that
    violation with the same message.
    """
    username = candidate.username or ""
    if len(username) < USERNAME_MIN_LENGTH:
        raise ValidationError("username", f"username must be at least {USERNAME_MIN_LENGTH} characters")
    if len(candidate.password or "") < PASSWORD_MIN_LENGTH:
        raise ValidationError("password", f"password must be at least {PASSWORD_MIN_LENGTH} characters")
    if store.users.find_by_field(cursor, "username", username) is not None:
        raise ValidationError("username", "username must be unique")
    return candidate
