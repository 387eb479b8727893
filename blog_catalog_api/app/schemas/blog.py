"""
Pydantic models for blog data.

``BlogBase`` holds the fields a client may send.  ``BlogCreate`` and
``BlogUpdate`` are the request bodies; ``BlogRead`` adds the id and the
expanded owner for responses.  Required-field rules (non-empty title and
url, non-negative likes) are enforced by ``services.validators`` rather
than by the schema, so that failures carry the domain error message.
"""

from typing import Optional

from pydantic import BaseModel, Field

from .user import UserSummary


class BlogBase(BaseModel):
    title: Optional[str] = Field(None, examples=["React patterns"])
    author: Optional[str] = Field(None, examples=["Michael Chan"])
    url: Optional[str] = Field(None, examples=["https://reactpatterns.com/"])
    likes: Optional[int] = Field(None, examples=[7])


class BlogCreate(BlogBase):
    """Schema for creating a blog.  ``likes`` defaults to 0 on validation."""
    pass


class BlogUpdate(BlogBase):
    """Schema for replacing the mutable fields of a blog.

    Only the fields present in the request body are replaced.  Clients
    commonly send the whole blog back with ``likes`` incremented, so
    extra keys such as ``id`` or ``owner`` are ignored.
    """
    pass


class BlogRead(BaseModel):
    """Schema for reading a blog from the API."""

    id: int
    title: str
    author: Optional[str] = None
    url: str
    likes: int = 0
    owner: Optional[UserSummary] = None

    model_config = {
        "from_attributes": True,
    }
