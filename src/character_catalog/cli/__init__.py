"""
Command-line interface for the Character Catalog.
"""

from .main import cli

__all__ = ["cli"]
