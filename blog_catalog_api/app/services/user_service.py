"""
Business logic for users.

The ``UserService`` registers users, lists them with their blogs and
authenticates logins.  Passwords are hashed by the ``CredentialManager``
passed in by the caller; the hash never leaves this module.
"""

import logging
import sqlite3
from typing import Any, Dict, List, Optional, Union

from ..core import store
from ..core.db import get_cursor
from ..core.errors import AuthFailure, AuthenticationError, BadId, BadIdReason, ValidationError
from ..core.security import CredentialManager
from ..core.store import parse_id
from ..schemas.user import BlogSummary, LoginResponse, UserCreate, UserRead
from .validators import validate_user


def _to_read(user: Dict[str, Any], blogs: Dict[int, Dict[str, Any]]) -> UserRead:
    owned = [
        BlogSummary(id=blog["id"], title=blog["title"], author=blog["author"], url=blog["url"])
        for blog in (blogs.get(blog_id) for blog_id in user["owned_blogs"])
        if blog is not None
    ]
    return UserRead(id=user["id"], username=user["username"], name=user["name"], owned_blogs=owned)


class UserService:
    """Operations on user accounts."""

    @classmethod
    async def register_user(cls, candidate: UserCreate, credentials: CredentialManager) -> UserRead:
        """Register a new user.

        Validates the candidate, hashes the password and stores the user
        with an empty ``owned_blogs`` list.  A username taken by a
        concurrent registration is reported as a validation error, just
        like one caught by the validator's lookup.
        """
        logger = logging.getLogger(__name__)
        logger.info("Registering user %s", candidate.username)
        with get_cursor() as cursor:
            user = validate_user(candidate, cursor)
            password_hash = credentials.hash_password(user.password)
            try:
                user_id = store.users.insert(
                    cursor,
                    {
                        "username": user.username,
                        "name": user.name,
                        "password_hash": password_hash,
                        "owned_blogs": [],
                    },
                )
            except sqlite3.IntegrityError as exc:
                raise ValidationError("username", "username must be unique") from exc
        return UserRead(id=user_id, username=user.username, name=user.name, owned_blogs=[])

    @classmethod
    async def list_users(cls) -> List[UserRead]:
        """Return all users with their blogs expanded to summaries."""
        with get_cursor() as cursor:
            rows = store.users.find_all(cursor)
            blog_ids = {blog_id for row in rows for blog_id in row["owned_blogs"]}
            blogs = store.blogs.find_many(cursor, blog_ids)
        return [_to_read(row, blogs) for row in rows]

    @classmethod
    async def get_user(cls, user_id: Union[str, int]) -> UserRead:
        row_id = parse_id(user_id)
        with get_cursor() as cursor:
            row = store.users.find_by_id(cursor, row_id)
            if row is None:
                raise BadId(user_id, BadIdReason.NOT_FOUND)
            blogs = store.blogs.find_many(cursor, row["owned_blogs"])
        return _to_read(row, blogs)

    @classmethod
    async def authenticate(
        cls, username: str, password: str, credentials: CredentialManager
    ) -> Optional[Dict[str, Any]]:
        """Return the stored user if the password matches, else ``None``."""
        with get_cursor() as cursor:
            row = store.users.find_by_field(cursor, "username", username)
        if row is None:
            return None
        if not credentials.verify_password(password, row["password_hash"]):
            return None
        return row

    @classmethod
    async def login(cls, username: str, password: str, credentials: CredentialManager) -> LoginResponse:
        """Authenticate a user and issue a bearer token."""
        logger = logging.getLogger(__name__)
        user = await cls.authenticate(username, password, credentials)
        if user is None:
            logger.info("Failed login for %s", username)
            raise AuthenticationError(AuthFailure.BAD_CREDENTIALS, "invalid username or password")
        token = credentials.issue_token(user["id"], user["username"])
        logger.info("User %s logged in", username)
        return LoginResponse(token=token, username=user["username"], name=user["name"])
