"""
HTTP transport for the Character Catalog.

Exposes the catalog over a FastAPI application; see ``create_app``.
"""

from .app import create_app

__all__ = ["create_app"]
