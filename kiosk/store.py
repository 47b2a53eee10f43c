import json
import logging
from typing import Any, Callable, Mapping, Union

from pydantic import ValidationError

from . import settings
from .blob_store import BlobStore
from .schemas import Document

logger = logging.getLogger(__name__)

Updater = Callable[[Document], Union[Document, Mapping[str, Any]]]


def default_document() -> Document:
    return Document()


def _empty_layout() -> dict[str, Any]:
    return default_document().model_dump(mode="json", by_alias=True)


def deep_merge(target: Mapping[str, Any], source: Mapping[str, Any]) -> dict[str, Any]:
    """
    Merges `source` over `target` without mutating either.
    - Nested objects merge key by key; keys only in `target` survive.
    - Lists are concatenated, target first. Merging twice against the same
      non-empty default therefore duplicates entries; always merge against
      a genuinely empty layout.
    - Anything else: the `source` value wins.
    """
    output = dict(target)
    for key, source_value in source.items():
        target_value = target.get(key)
        if isinstance(target_value, dict) and isinstance(source_value, dict):
            output[key] = deep_merge(target_value, source_value)
        elif isinstance(target_value, list) and isinstance(source_value, list):
            output[key] = [*target_value, *source_value]
        else:
            output[key] = source_value
    return output


def migrate_document(raw: Mapping[str, Any]) -> dict[str, Any]:
    """
    Upgrades a raw document to the current shape. Idempotent.

    Older versions stored `otherExpenses` as a single number; it becomes a
    one-line expense list, or an empty list when the amount is not positive.
    """
    migrated = dict(raw)
    legacy = migrated.get("otherExpenses")
    if isinstance(legacy, (int, float)) and not isinstance(legacy, bool):
        migrated["otherExpenses"] = (
            [{"name": settings.LEGACY_EXPENSE_NAME, "amount": legacy}] if legacy > 0 else []
        )
    return migrated


class DocumentStore:
    """
    Owns the one persisted Document. Every change goes through `write`,
    which applies an updater to the current value and persists the result
    as one read-modify-write step.
    """

    def __init__(self, blob_store: BlobStore, key: str = settings.STORE_KEY):
        self.blob_store = blob_store
        self.key = key
        self._document = default_document()
        self._migrated = False
        self.migrate()

    def read(self) -> Document:
        """Returns a copy; mutating it does not touch the stored document."""
        return self._document.model_copy(deep=True)

    def write(self, updater: Updater) -> Document:
        # If the updater raises, nothing has been replaced yet.
        result = updater(self.read())
        if not isinstance(result, Document):
            result = Document.model_validate(result)
        self._document = result
        self._persist()
        return self.read()

    def migrate(self) -> None:
        """Loads, repairs and upgrades the persisted document. Runs once."""
        if self._migrated:
            return
        self._migrated = True

        raw = self._load_raw()
        if raw is None:
            return

        merged = deep_merge(_empty_layout(), raw)
        migrated = migrate_document(merged)
        try:
            self._document = Document.model_validate(migrated)
        except ValidationError as e:
            logger.error(f"❌ Stored document under '{self.key}' has an unusable shape. Using defaults.")
            logger.error(e)
            self._document = default_document()
            return

        if migrated != merged:
            logger.info("Migrated legacy 'otherExpenses' to the expense list format.")
            self._persist()

    def _load_raw(self) -> dict[str, Any] | None:
        try:
            data = self.blob_store.get(self.key)
        except OSError as e:
            logger.error(f"❌ Could not read '{self.key}': {e}. Using defaults.")
            return None
        if data is None:
            logger.info(f"No stored document under '{self.key}'. Starting fresh.")
            return None

        try:
            loaded = json.loads(data)
        except ValueError as e:
            logger.error(f"❌ Stored document under '{self.key}' is corrupt ({e}). Using defaults.")
            return None

        if not isinstance(loaded, dict):
            logger.error(f"❌ Stored document under '{self.key}' is not an object. Using defaults.")
            return None
        return loaded

    def _persist(self) -> None:
        try:
            data = self._document.model_dump_json(by_alias=True).encode("utf-8")
            self.blob_store.set(self.key, data)
        except (OSError, ValueError, TypeError) as e:
            # The in-memory value stays authoritative for this session.
            logger.error(f"❌ Could not persist '{self.key}': {e}")
