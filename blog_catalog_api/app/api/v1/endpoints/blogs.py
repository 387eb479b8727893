"""
Blog endpoints for API v1.

Listing and reading blogs is public.  Creating and deleting require a
bearer token; replacing fields of a blog does not (it is how likes are
recorded).  Domain errors raised by ``BlogService`` are converted to
responses by the handlers registered in ``app.main``.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from blog_catalog_api.app.core.security import get_acting_user, require_user
from blog_catalog_api.app.schemas.blog import BlogCreate, BlogRead, BlogUpdate
from blog_catalog_api.app.schemas.user import UserSummary
from blog_catalog_api.app.services.blog_service import BlogService


router = APIRouter()


@router.get("/", response_model=List[BlogRead])
async def list_blogs() -> List[BlogRead]:
    """Return all blogs with their owners."""
    return await BlogService.list_blogs()


@router.get("/{blog_id}", response_model=BlogRead)
async def get_blog(blog_id: str) -> BlogRead:
    return await BlogService.get_blog(blog_id)


@router.post("/", response_model=BlogRead, status_code=status.HTTP_201_CREATED)
async def create_blog(
    blog: BlogCreate,
    current_user: UserSummary = Depends(require_user),
) -> BlogRead:
    """Create a blog owned by the authenticated user.

    ``likes`` defaults to 0 when omitted.  ``title`` and ``url`` are
    required.
    """
    return await BlogService.create_blog(blog, current_user)


@router.put("/{blog_id}", response_model=BlogRead)
async def update_blog(blog_id: str, updates: BlogUpdate) -> BlogRead:
    """Replace the fields present in the body (typically ``likes``)."""
    return await BlogService.update_blog(blog_id, updates)


@router.delete("/{blog_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_blog(
    blog_id: str,
    current_user: Optional[UserSummary] = Depends(get_acting_user),
) -> Response:
    """Delete a blog.  Only its owner may do so."""
    await BlogService.delete_blog(blog_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
