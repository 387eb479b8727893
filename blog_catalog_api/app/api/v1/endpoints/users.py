"""
User endpoints for API v1.

Registration and listing are public.  The password hash is never part
of a response.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from blog_catalog_api.app.core.security import CredentialManager, get_credential_manager
from blog_catalog_api.app.schemas.user import UserCreate, UserRead
from blog_catalog_api.app.services.user_service import UserService


router = APIRouter()


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register_user(
    user: UserCreate,
    credentials: CredentialManager = Depends(get_credential_manager),
) -> UserRead:
    """Register a new user.

    Usernames must be unique and at least three characters long; the
    same minimum applies to passwords.
    """
    return await UserService.register_user(user, credentials)


@router.get("/", response_model=List[UserRead])
async def list_users() -> List[UserRead]:
    """Return all users with the blogs they own."""
    return await UserService.list_users()


@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: str) -> UserRead:
    return await UserService.get_user(user_id)
