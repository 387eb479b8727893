"""
Pydantic models for user data.

Defines schemas for registering users, logging in and reading user
information.  The password hash is never part of a response schema.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class UserSummary(BaseModel):
    """Minimal user view embedded in blog listings."""

    id: int
    username: str
    name: Optional[str] = None

    model_config = {
        "from_attributes": True,
    }


class UserCreate(BaseModel):
    """Schema for registering a user.

    Fields are optional at the schema level so that missing values
    reach ``validate_user`` and produce the domain validation messages.
    """

    username: Optional[str] = Field(None, examples=["mluukkai"])
    name: Optional[str] = Field(None, examples=["Matti Luukkainen"])
    password: Optional[str] = Field(None, examples=["salainen"])


class UserLogin(BaseModel):
    username: str = Field(..., examples=["mluukkai"])
    password: str = Field(..., examples=["salainen"])


class LoginResponse(BaseModel):
    token: str
    username: str
    name: Optional[str] = None


class BlogSummary(BaseModel):
    """Minimal blog view embedded in user listings."""

    id: int
    title: str
    author: Optional[str] = None
    url: str


class UserRead(UserSummary):
    """Schema for reading a user from the API."""

    owned_blogs: List[BlogSummary] = Field(default_factory=list)
