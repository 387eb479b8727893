"""
Application package initializer.

The package is organised into ``core`` (configuration, database,
security, errors), ``schemas`` (request and response models),
``services`` (business logic) and ``api`` (versioned routers).
"""

from .main import app  # noqa: F401
