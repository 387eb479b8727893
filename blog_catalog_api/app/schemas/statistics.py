"""
Pydantic models for blog statistics.

Every aggregate except the total is optional: an empty catalogue has no
favourite blog and no most prolific author, which is reported as
``null`` rather than as a zero that could be mistaken for data.
"""

from typing import Optional

from pydantic import BaseModel

from .blog import BlogRead


class AuthorBlogCount(BaseModel):
    author: str
    blogs: int


class AuthorLikes(BaseModel):
    author: str
    likes: int


class BlogStatistics(BaseModel):
    blog_count: int
    total_likes: int
    favourite_blog: Optional[BlogRead] = None
    most_blogs: Optional[AuthorBlogCount] = None
    most_likes: Optional[AuthorLikes] = None
