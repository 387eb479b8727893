"""
Top-level router for version 1 of the API.

This router aggregates the domain routers (blogs, users, login,
statistics) under a unified prefix.  When new domains are introduced,
include their routers here.
"""

from fastapi import APIRouter

from .endpoints import blogs, login, statistics, users

router = APIRouter()

router.include_router(blogs.router, prefix="/blogs", tags=["blogs"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(login.router, prefix="/login", tags=["login"])
router.include_router(statistics.router, prefix="/statistics", tags=["statistics"])
