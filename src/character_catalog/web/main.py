"""
ASGI entry point.

Serve with an ASGI server pointed at ``character_catalog.web.main:app``.
"""

from .app import create_app

app = create_app()
