"""
Character catalog service.

Orchestrates the character store and the asset store to implement the
character lifecycle: create, read, search, update, sprite replacement,
soft delete and hard delete. This is the only place the lifecycle rules
are enforced.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from ..assets import AssetStore
from ..core.config import Config
from ..core.exceptions import (
    CatalogError,
    CharacterNotFoundError,
    InvalidInputError,
    StorageError,
)
from ..core.logging import ProcessingTimer, get_logger
from ..core.metrics import MetricsCollector
from .enums import CharacterType
from .models import STAT_FIELDS, Character, FilterSpec, apply_stat_defaults
from .pagination import DEFAULT_SORT_DIRECTION, DEFAULT_SORT_FIELD, Page, PageRequest
from .predicates import build_character_predicate, visible
from .schemas import CharacterCreate, CharacterRead, CharacterUpdate
from .store import CharacterStore

logger = get_logger(__name__)

# Fields that may never be cleared by an update
REQUIRED_FIELDS = frozenset({"name", "type", *STAT_FIELDS})

DEFAULT_PAGE_SIZE = 10
DEFAULT_SEARCH_PAGE_SIZE = 12


def _validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg', 'invalid value')}"


def to_read_model(character: Character) -> CharacterRead:
    """Project a stored character onto its externally visible shape."""
    return CharacterRead.model_validate(character)


class CharacterCatalog:
    """Character lifecycle service.

    Soft-deleted characters are invisible to every operation except
    ``hard_delete``. Concurrent writes to the same character are
    last-writer-wins; there is no version column or row locking.
    """

    def __init__(
        self,
        store: CharacterStore,
        asset_store: AssetStore,
        sprite_url_prefix: str = "/uploads/",
        max_page_size: Optional[int] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.store = store
        self.asset_store = asset_store
        self.sprite_url_prefix = sprite_url_prefix
        self.max_page_size = max_page_size
        self.metrics = metrics

    # Internal helpers

    def _record(self, operation: str, outcome: str = "success") -> None:
        if self.metrics is not None:
            self.metrics.record_operation(operation, outcome)

    def _load_visible(self, character_id: int) -> Character:
        character = self.store.find_visible_by_id(character_id)
        if character is None:
            self._record("lookup", "not_found")
            raise CharacterNotFoundError(character_id, component="CharacterCatalog")
        return character

    @staticmethod
    def _coerce(model: Any, data: Any) -> Any:
        if isinstance(data, model):
            return data
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise InvalidInputError(
                f"Invalid {model.__name__} payload: {_validation_message(e)}",
                component="CharacterCatalog",
            ) from e

    # Create

    def create(self, data: Union[CharacterCreate, Dict[str, Any]]) -> CharacterRead:
        """Create a character, applying the type and base-stat defaults."""
        request: CharacterCreate = self._coerce(CharacterCreate, data)

        character = Character(
            name=request.name,
            description=request.description,
            type=request.type or CharacterType.NPC,
            classification=request.classification,
            sprite_path=request.sprite_path,
            **{stat: getattr(request, stat) for stat in STAT_FIELDS},
        )
        apply_stat_defaults(character)
        character.is_deleted = False

        saved = self.store.save(character)
        self._record("create")
        logger.log_character_event(
            "created", saved.id, name=saved.name, type=saved.type.value
        )
        return to_read_model(saved)

    def create_as(
        self,
        data: Union[CharacterCreate, Dict[str, Any]],
        forced_type: CharacterType,
    ) -> CharacterRead:
        """Create a character whose type is forced, whatever the payload says.

        The caller's payload object is left untouched.
        """
        request: CharacterCreate = self._coerce(CharacterCreate, data)
        return self.create(request.model_copy(update={"type": forced_type}))

    def create_hero(self, data: Union[CharacterCreate, Dict[str, Any]]) -> CharacterRead:
        return self.create_as(data, CharacterType.HERO)

    def create_villain(
        self, data: Union[CharacterCreate, Dict[str, Any]]
    ) -> CharacterRead:
        return self.create_as(data, CharacterType.VILLAIN)

    # Read

    def get_all(self) -> List[CharacterRead]:
        """Every visible character, ordered by id."""
        return [to_read_model(c) for c in self.store.find_all_visible()]

    def get_page(
        self,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE,
        sort_by: Optional[str] = DEFAULT_SORT_FIELD,
        sort_direction: Optional[str] = DEFAULT_SORT_DIRECTION,
    ) -> Page[CharacterRead]:
        """One page of visible characters."""
        request = PageRequest.of(
            page, size, sort_by, sort_direction, max_size=self.max_page_size
        )
        items, total = self.store.find_visible_page(visible(), request)
        return Page.of([to_read_model(c) for c in items], request, total)

    def search(
        self,
        search_term: Optional[str] = None,
        filter_spec: Optional[FilterSpec] = None,
        page: int = 0,
        size: int = DEFAULT_SEARCH_PAGE_SIZE,
        sort_by: Optional[str] = DEFAULT_SORT_FIELD,
        sort_direction: Optional[str] = DEFAULT_SORT_DIRECTION,
    ) -> Page[CharacterRead]:
        """Search visible characters by name and attribute criteria.

        A missing filter behaves as an empty one.
        """
        request = PageRequest.of(
            page, size, sort_by, sort_direction, max_size=self.max_page_size
        )
        predicate = build_character_predicate(filter_spec or FilterSpec(), search_term)

        with ProcessingTimer(logger, "search", "CharacterCatalog"):
            items, total = self.store.find_visible_page(predicate, request)

        self._record("search")
        logger.debug(
            "Character search finished",
            search_term=search_term,
            total=total,
            page=request.page,
        )
        return Page.of([to_read_model(c) for c in items], request, total)

    def get_by_id(self, character_id: int) -> CharacterRead:
        """A visible character by id.

        Raises:
            CharacterNotFoundError: absent or soft-deleted
        """
        return to_read_model(self._load_visible(character_id))

    # Update

    def update(
        self, character_id: int, patch: Union[CharacterUpdate, Dict[str, Any]]
    ) -> CharacterRead:
        """Copy every field present in ``patch`` onto the stored character.

        Omitted fields keep their stored value; explicit nulls overwrite
        nullable fields. ``id``, ``is_deleted`` and the timestamps in the
        patch are ignored.

        Raises:
            CharacterNotFoundError: absent or soft-deleted
            InvalidInputError: the patch clears a required field
        """
        request: CharacterUpdate = self._coerce(CharacterUpdate, patch)
        character = self._load_visible(character_id)

        changes = request.changes()
        for field_name, value in changes.items():
            if value is None and field_name in REQUIRED_FIELDS:
                raise InvalidInputError(
                    f"Field '{field_name}' cannot be null",
                    field=field_name,
                    value=value,
                    component="CharacterCatalog",
                )
            setattr(character, field_name, value)

        saved = self.store.save(character)
        self._record("update")
        logger.log_character_event(
            "updated", saved.id, changed_fields=sorted(changes)
        )
        return to_read_model(saved)

    def update_sprite(
        self, character_id: int, data: Optional[bytes], filename: Optional[str] = None
    ) -> CharacterRead:
        """Replace a character's sprite.

        The upload is validated first, so a rejected file leaves the previous
        sprite alone. The previous sprite is then deleted on a best-effort
        basis: a failure there is logged and the upload continues. A failure
        storing the new sprite aborts before the character is touched.

        Raises:
            CharacterNotFoundError: absent or soft-deleted
            InvalidInputError: empty, oversized or unsafely named upload
            StorageError: the new sprite could not be stored
        """
        character = self._load_visible(character_id)

        if not data:
            raise InvalidInputError(
                "Sprite file cannot be empty",
                field="file",
                value=filename,
                component="CharacterCatalog",
            )

        try:
            self.asset_store.validate(data, filename)
        except InvalidInputError:
            self._record("update_sprite", "rejected")
            raise

        if character.sprite_path:
            old_name = character.sprite_path.rsplit("/", 1)[-1]
            try:
                deleted = self.asset_store.delete(old_name)
                logger.debug(
                    "Previous sprite removed", asset_name=old_name, deleted=deleted
                )
            except (StorageError, InvalidInputError) as e:
                logger.warning(
                    "Could not delete previous sprite, leaving it orphaned",
                    character_id=character_id,
                    asset_name=old_name,
                    error=str(e),
                )

        try:
            name = self.asset_store.put(data, filename)
        except CatalogError:
            self._record("update_sprite", "error")
            raise

        character.sprite_path = f"{self.sprite_url_prefix}{name}"
        saved = self.store.save(character)
        self._record("update_sprite")
        logger.log_character_event("sprite_updated", saved.id, sprite_path=saved.sprite_path)
        return to_read_model(saved)

    # Delete

    def soft_delete(self, character_id: int) -> None:
        """Hide a character from every read and update.

        Raises:
            CharacterNotFoundError: absent or already soft-deleted
        """
        character = self._load_visible(character_id)
        character.is_deleted = True
        self.store.save(character)
        self._record("soft_delete")
        logger.log_character_event("soft_deleted", character_id)

    def hard_delete(self, character_id: int) -> None:
        """Permanently remove a character, soft-deleted or not.

        The sprite asset, if any, is left in the asset store.

        Raises:
            CharacterNotFoundError: no row has this id
        """
        if not self.store.exists_by_id(character_id):
            self._record("hard_delete", "not_found")
            raise CharacterNotFoundError(character_id, component="CharacterCatalog")

        self.store.delete_by_id(character_id)
        self._record("hard_delete")
        logger.log_character_event("hard_deleted", character_id)

    # Health

    def health_check(self) -> Dict[str, Any]:
        """Liveness of both backing stores."""
        status: Dict[str, Any] = {"assets": self.asset_store.health_check()}
        try:
            status["characters"] = self.store.count_visible()
            status["database"] = True
        except StorageError as e:
            logger.error("Character store health check failed", error=str(e))
            status["database"] = False
        status["healthy"] = bool(status["database"] and status["assets"])
        return status


def create_catalog(config: Config) -> CharacterCatalog:
    """Build a catalog backed by SQLite and the filesystem from app config."""
    # Imported here so the service module does not depend on concrete backends
    from ..assets import FileSystemAssetStore
    from ..core.database import PoolConfig
    from ..core.metrics import get_metrics_collector
    from .sqlite_store import SQLiteCharacterStore

    store = SQLiteCharacterStore(
        config.database.path, PoolConfig.from_database_config(config.database)
    )
    asset_store = FileSystemAssetStore(
        config.storage.upload_dir, config.storage.max_upload_bytes
    )
    metrics = get_metrics_collector() if config.monitoring.metrics_enabled else None

    return CharacterCatalog(
        store,
        asset_store,
        sprite_url_prefix=config.storage.url_prefix,
        max_page_size=config.api.max_page_size,
        metrics=metrics,
    )
