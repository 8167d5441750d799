"""
Asset storage for character sprites.
"""

from .asset_store import AssetStore, FileSystemAssetStore

__all__ = ["AssetStore", "FileSystemAssetStore"]
