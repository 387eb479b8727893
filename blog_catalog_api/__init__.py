"""
Top-level package for the Blog Catalog API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``blog_catalog_api.app.main:app``.
"""

__all__ = []
