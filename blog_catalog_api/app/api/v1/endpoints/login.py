"""
Login endpoint for API v1.

Exchanges a username and password for a bearer token valid for one
hour.  Clients send it back as ``Authorization: Bearer <token>``.
"""

from fastapi import APIRouter, Depends

from blog_catalog_api.app.core.security import CredentialManager, get_credential_manager
from blog_catalog_api.app.schemas.user import LoginResponse, UserLogin
from blog_catalog_api.app.services.user_service import UserService


router = APIRouter()


@router.post("", response_model=LoginResponse)
async def login(
    payload: UserLogin,
    credentials: CredentialManager = Depends(get_credential_manager),
) -> LoginResponse:
    return await UserService.login(payload.username, payload.password, credentials)
