"""
Binary asset storage for character sprites.

Provides the AssetStore interface used by the catalog and a filesystem
implementation that stores each upload under a random name, keeping the
original file extension.
"""

import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from ..core.exceptions import (
    AssetNotFoundError,
    AssetTooLargeError,
    InvalidInputError,
    StorageError,
)
from ..core.logging import get_logger

logger = get_logger(__name__)


class AssetStore(ABC):
    """Name-addressed binary blob store."""

    def validate(self, data: bytes, filename: Optional[str] = None) -> None:
        """Reject an upload that ``put`` would refuse, without storing anything.

        Raises:
            InvalidInputError: the upload is not acceptable
        """

    @abstractmethod
    def put(self, data: bytes, filename: Optional[str] = None) -> str:
        """Store ``data`` and return the generated asset name.

        Raises:
            StorageError: the asset could not be written
        """

    @abstractmethod
    def get(self, name: str) -> bytes:
        """Load an asset by name.

        Raises:
            AssetNotFoundError: no asset has this name
        """

    @abstractmethod
    def delete(self, name: str) -> bool:
        """Delete an asset; False when it did not exist."""

    def health_check(self) -> bool:
        """Check if the store is usable."""
        return True


def _validate_name(name: str) -> str:
    if not name or ".." in name or "/" in name or "\\" in name:
        raise InvalidInputError(
            f"Sorry! Filename contains invalid path sequence {name}",
            field="filename",
            value=name,
        )
    return name


def _extension_of(filename: Optional[str]) -> str:
    """Extension including the dot, or '' (hidden files have none)."""
    if not filename:
        return ""
    base = Path(filename).name
    dot = base.rfind(".")
    return base[dot:] if dot > 0 else ""


class FileSystemAssetStore(AssetStore):
    """Stores assets as files in a single upload directory."""

    def __init__(
        self, upload_dir: Union[str, Path], max_upload_bytes: Optional[int] = None
    ):
        self.upload_dir = Path(upload_dir).absolute()
        self.max_upload_bytes = max_upload_bytes
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(
                "Could not create the directory where the uploaded files will be stored.",
                component="FileSystemAssetStore",
            ) from e

    def resolve(self, name: str) -> Path:
        """On-disk location of an asset (which may not exist)."""
        return self.upload_dir / _validate_name(name)

    def validate(self, data: bytes, filename: Optional[str] = None) -> None:
        if filename is not None and ".." in filename:
            raise InvalidInputError(
                f"Sorry! Filename contains invalid path sequence {filename}",
                field="filename",
                value=filename,
            )
        if self.max_upload_bytes is not None and len(data) > self.max_upload_bytes:
            raise AssetTooLargeError(len(data), self.max_upload_bytes)

    def put(self, data: bytes, filename: Optional[str] = None) -> str:
        self.validate(data, filename)

        name = f"{uuid.uuid4()}{_extension_of(filename)}"
        target = self.upload_dir / name
        try:
            target.write_bytes(data)
        except OSError as e:
            raise StorageError(
                f"Could not store file {filename or name}. Please try again!",
                component="FileSystemAssetStore",
            ) from e

        logger.info("Stored asset", asset_name=name, size=len(data))
        return name

    def get(self, name: str) -> bytes:
        path = self.resolve(name)
        if not path.is_file():
            raise AssetNotFoundError(name)
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageError(
                f"Could not read file {name}", component="FileSystemAssetStore"
            ) from e

    def delete(self, name: str) -> bool:
        path = self.resolve(name)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(
                f"Could not delete file {name}", component="FileSystemAssetStore"
            ) from e

        logger.info("Deleted asset", asset_name=name)
        return True

    def health_check(self) -> bool:
        return self.upload_dir.is_dir()
