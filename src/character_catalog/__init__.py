"""
Character Catalog.

CRUD catalog of game characters with soft delete, filtered search and
per-character sprite assets.
"""

__version__ = "1.0.0"
