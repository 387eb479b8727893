"""
Business logic for blogs.

``BlogService`` lists, creates, replaces and deletes blogs stored in
SQLite.  Creation and deletion touch two rows (the blog and its owner's
``owned_blogs`` list); both writes run inside a single transaction so a
failure between them leaves neither applied.
"""

import logging
import sqlite3
from typing import Any, Dict, List, Optional, Union

from ..core import store
from ..core.db import get_cursor
from ..core.errors import AuthFailure, AuthenticationError, BadId, BadIdReason, Unauthorized
from ..core.store import parse_id
from ..schemas.blog import BlogCreate, BlogRead, BlogUpdate
from ..schemas.user import UserSummary
from .validators import validate_blog, validate_blog_patch


def _summary(user: Optional[Dict[str, Any]]) -> Optional[UserSummary]:
    if user is None:
        return None
    return UserSummary(id=user["id"], username=user["username"], name=user["name"])


def _to_read(blog: Dict[str, Any], owner: Optional[Dict[str, Any]]) -> BlogRead:
    return BlogRead(
        id=blog["id"],
        title=blog["title"],
        author=blog["author"],
        url=blog["url"],
        likes=blog["likes"],
        owner=_summary(owner),
    )


class BlogService:
    """Operations on blog records."""

    @classmethod
    async def list_blogs(cls) -> List[BlogRead]:
        """Return every blog with its owner expanded to a user summary."""
        with get_cursor() as cursor:
            rows = store.blogs.find_all(cursor)
            owners = store.users.find_many(cursor, {row["owner_id"] for row in rows})
        return [_to_read(row, owners.get(row["owner_id"])) for row in rows]

    @classmethod
    async def get_blog(cls, blog_id: Union[str, int]) -> BlogRead:
        """Return a single blog.  Raises ``BadId`` if it does not exist."""
        row_id = parse_id(blog_id)
        with get_cursor() as cursor:
            row = store.blogs.find_by_id(cursor, row_id)
            if row is None:
                raise BadId(blog_id, BadIdReason.NOT_FOUND)
            owner = store.users.find_by_id(cursor, row["owner_id"])
        return _to_read(row, owner)

    @classmethod
    async def create_blog(cls, candidate: BlogCreate, acting_user: Optional[UserSummary]) -> BlogRead:
        """Create a blog owned by ``acting_user``.

        Anonymous callers are rejected with ``AuthenticationError``.
        The candidate is validated (``likes`` defaults to 0), inserted and
        its id appended to the owner's ``owned_blogs``.
        """
        logger = logging.getLogger(__name__)
        if acting_user is None:
            raise AuthenticationError(AuthFailure.MISSING)
        blog = validate_blog(candidate)
        with get_cursor() as cursor:
            # Insert first: the write opens the transaction, so the owner
            # row read below cannot change underneath us.
            try:
                blog_id = store.blogs.insert(
                    cursor,
                    {
                        "title": blog.title,
                        "author": blog.author,
                        "url": blog.url,
                        "likes": blog.likes,
                        "owner_id": acting_user.id,
                    },
                )
            except sqlite3.IntegrityError as exc:
                # owner_id foreign key: the account disappeared after the
                # token was resolved.
                raise AuthenticationError(AuthFailure.MISSING) from exc
            owner = store.users.find_by_id(cursor, acting_user.id)
            store.users.update(cursor, owner["id"], {"owned_blogs": owner["owned_blogs"] + [blog_id]})
            row = store.blogs.find_by_id(cursor, blog_id)
        logger.info("User %s created blog %s '%s'", acting_user.username, blog_id, blog.title)
        return _to_read(row, owner)

    @classmethod
    async def update_blog(cls, blog_id: Union[str, int], patch: BlogUpdate) -> BlogRead:
        """Replace the supplied mutable fields of a blog.

        ``title``, ``author``, ``url`` and ``likes`` may be replaced; the
        owner never changes.  Raises ``BadId`` when the id is malformed
        or unknown, in which case nothing is written.
        """
        logger = logging.getLogger(__name__)
        row_id = parse_id(blog_id)
        changes = validate_blog_patch(patch)
        with get_cursor() as cursor:
            row = store.blogs.update(cursor, row_id, changes)
            if row is None:
                raise BadId(blog_id, BadIdReason.NOT_FOUND)
            owner = store.users.find_by_id(cursor, row["owner_id"])
        logger.info("Blog %s updated: %s", row_id, ", ".join(sorted(changes)) or "no changes")
        return _to_read(row, owner)

    @classmethod
    async def delete_blog(cls, blog_id: Union[str, int], acting_user: Optional[UserSummary]) -> None:
        """Delete a blog on behalf of its owner.

        Raises ``AuthenticationError`` for anonymous callers, ``BadId``
        if the blog does not exist and ``Unauthorized`` if the caller is
        not the owner.  The blog id is also removed from the owner's
        ``owned_blogs``.
        """
        logger = logging.getLogger(__name__)
        if acting_user is None:
            raise AuthenticationError(AuthFailure.MISSING)
        row_id = parse_id(blog_id)
        with get_cursor() as cursor:
            row = store.blogs.find_by_id(cursor, row_id)
            if row is None:
                raise BadId(blog_id, BadIdReason.NOT_FOUND)
            if row["owner_id"] != acting_user.id:
                raise Unauthorized("only the owner may delete a blog")
            if not store.blogs.remove(cursor, row_id):
                # Removed by a concurrent request between the read and the delete.
                raise BadId(blog_id, BadIdReason.NOT_FOUND)
            owner = store.users.find_by_id(cursor, row["owner_id"])
            if owner is not None:
                remaining = [owned for owned in owner["owned_blogs"] if owned != row_id]
                store.users.update(cursor, owner["id"], {"owned_blogs": remaining})
        logger.info("User %s deleted blog %s", acting_user.username, row_id)
