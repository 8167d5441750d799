"""
Pytest configuration and fixtures for the Character Catalog.
Only the asset store is mocked where a failure has to be simulated.
"""

import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from character_catalog.assets import FileSystemAssetStore
from character_catalog.characters import (
    CharacterCatalog,
    InMemoryCharacterStore,
    SQLiteCharacterStore,
)
from character_catalog.core.config import (
    AssetStorageConfig,
    Config,
    DatabaseConfig,
    Environment,
)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> Config:
    """Testing configuration pointing every path into the temp directory."""
    return Config(
        environment=Environment.TESTING,
        database=DatabaseConfig(path=temp_dir / "catalog.db"),
        storage=AssetStorageConfig(upload_dir=temp_dir / "uploads"),
    )


@pytest.fixture
def memory_store() -> InMemoryCharacterStore:
    return InMemoryCharacterStore()


@pytest.fixture
def sqlite_store(temp_dir: Path) -> Generator[SQLiteCharacterStore, None, None]:
    store = SQLiteCharacterStore(temp_dir / "characters.db")
    yield store
    store.close()


@pytest.fixture(params=["memory", "sqlite"])
def store(request: pytest.FixtureRequest, temp_dir: Path) -> Generator:
    """Each CharacterStore implementation in turn."""
    if request.param == "memory":
        yield InMemoryCharacterStore()
    else:
        sqlite = SQLiteCharacterStore(temp_dir / "characters.db")
        yield sqlite
        sqlite.close()


@pytest.fixture
def asset_store(temp_dir: Path) -> FileSystemAssetStore:
    return FileSystemAssetStore(temp_dir / "uploads", max_upload_bytes=1024)


@pytest.fixture
def catalog(
    memory_store: InMemoryCharacterStore, asset_store: FileSystemAssetStore
) -> CharacterCatalog:
    """Catalog over an in-memory store and a temp upload directory."""
    return CharacterCatalog(memory_store, asset_store, max_page_size=100)
