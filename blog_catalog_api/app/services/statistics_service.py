"""
Aggregate statistics over a collection of blogs.

The module level functions are pure: they take any sequence of objects
with ``likes`` and ``author`` attributes (``BlogRead`` instances in the
application) and perform no I/O.  Aggregates that have no meaningful
value for an empty collection return ``None``.

Ties are resolved in favour of whatever was seen first: the first blog
in input order for ``favourite_blog``, and the first author encountered
for ``most_blogs`` and ``most_likes``.  Blogs without an author are
grouped under the empty string.
"""

from typing import Dict, Optional, Sequence, TypeVar

from ..schemas.statistics import AuthorBlogCount, AuthorLikes, BlogStatistics
from .blog_service import BlogService

B = TypeVar("B")


def _author_key(blog) -> str:
    return blog.author if blog.author is not None else ""


def total_likes(blogs: Sequence) -> int:
    """Sum of likes over all blogs; 0 for an empty sequence."""
    return sum(blog.likes for blog in blogs)


def favourite_blog(blogs: Sequence[B]) -> Optional[B]:
    """Blog with the most likes, or ``None`` when there are no blogs."""
    best = None
    for blog in blogs:
        if best is None or blog.likes > best.likes:
            best = blog
    return best


def _max_group(totals: Dict[str, int]) -> Optional[tuple[str, int]]:
    # dicts keep insertion order, so strict ">" keeps the first author on ties.
    best = None
    for author, value in totals.items():
        if best is None or value > best[1]:
            best = (author, value)
    return best


def most_blogs(blogs: Sequence) -> Optional[AuthorBlogCount]:
    """Author with the most blogs, or ``None`` when there are no blogs."""
    counts: Dict[str, int] = {}
    for blog in blogs:
        key = _author_key(blog)
        counts[key] = counts.get(key, 0) + 1
    best = _max_group(counts)
    if best is None:
        return None
    return AuthorBlogCount(author=best[0], blogs=best[1])


def most_likes(blogs: Sequence) -> Optional[AuthorLikes]:
    """Author whose blogs have the most likes in total, or ``None``."""
    likes: Dict[str, int] = {}
    for blog in blogs:
        key = _author_key(blog)
        likes[key] = likes.get(key, 0) + blog.likes
    best = _max_group(likes)
    if best is None:
        return None
    return AuthorLikes(author=best[0], likes=best[1])


class StatisticsService:
    """Computes catalogue statistics from the stored blogs."""

    @classmethod
    async def summarize(cls) -> BlogStatistics:
        blogs = await BlogService.list_blogs()
        return BlogStatistics(
            blog_count=len(blogs),
            total_likes=total_likes(blogs),
            favourite_blog=favourite_blog(blogs),
            most_blogs=most_blogs(blogs),
            most_likes=most_likes(blogs),
        )
