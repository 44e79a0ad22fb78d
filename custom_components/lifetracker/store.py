# File: store.py
"""Handles persistent data storage for the LifeTracker integration.

Uses Home Assistant's Storage helper to save and load tracker data, ensuring
the state is preserved across restarts. Records are grouped into collections
(habits, user stats, challenges, check-ins, ...) keyed by record id.

Document contract used by the managers:
- get(collection, record_id) -> record | None
- query(collection, field, value) -> list of records
- put(collection, record_id, record)  (upsert, full-document replace)
- delete(collection, record_id)

Reads return deep copies and writes store deep copies, so a caller always
read-modify-writes a whole record and never shares nested lists with the
cache.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.storage import Store

from . import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


class LifeTrackerStore:
    """Handles persistent storage operations for LifeTracker data.

    Thin wrapper around Home Assistant's Store API plus the document contract.
    """

    def __init__(
        self, hass: HomeAssistant, storage_key: str = const.STORAGE_KEY
    ) -> None:
        """Initialize the store.

        Args:
            hass: Home Assistant core object.
            storage_key: Key to identify storage location (default: const.STORAGE_KEY).

        """
        self.hass = hass
        self._store: Store = Store(hass, const.STORAGE_VERSION, storage_key)
        self._data: dict[str, Any] = {}  # In-memory data cache for quick access.

    @staticmethod
    def get_default_structure() -> dict[str, Any]:
        """Return canonical empty data structure for fresh installations."""
        structure: dict[str, Any] = {
            const.DATA_META: {const.DATA_META_SCHEMA_VERSION: const.SCHEMA_VERSION},
        }
        for collection in const.STORAGE_COLLECTIONS:
            structure[collection] = {}
        return structure

    async def async_initialize(self) -> None:
        """Load data from storage during startup.

        If no data exists, initializes with an empty structure. Collections
        missing from older files are added empty.
        """
        const.LOGGER.debug("DEBUG: LifeTrackerStore: Loading data from storage")
        existing_data = await self._store.async_load()

        if existing_data is None:
            const.LOGGER.info("INFO: No existing storage found. Initializing new data")
            self._data = LifeTrackerStore.get_default_structure()
            return

        self._data = existing_data
        for key, default in LifeTrackerStore.get_default_structure().items():
            self._data.setdefault(key, default)
        const.LOGGER.debug(
            "DEBUG: Loaded existing data from storage: %s",
            {
                collection: len(self._data.get(collection, {}))
                for collection in const.STORAGE_COLLECTIONS
            },
        )

    @property
    def data(self) -> dict[str, Any]:
        """Retrieve the in-memory data cache."""
        return self._data

    # -------------------------------------------------------------------------------------
    # Document contract
    # -------------------------------------------------------------------------------------

    def _collection(self, collection: str) -> dict[str, Any]:
        if collection not in const.STORAGE_COLLECTIONS:
            raise KeyError(f"Unknown collection: {collection}")
        return self._data.setdefault(collection, {})

    def get(self, collection: str, record_id: str) -> dict[str, Any] | None:
        """Return a copy of one record, or None if absent."""
        record = self._collection(collection).get(record_id)
        return copy.deepcopy(record) if record is not None else None

    def all(self, collection: str) -> list[dict[str, Any]]:
        """Return copies of every record in a collection, in insertion order."""
        return [copy.deepcopy(record) for record in self._collection(collection).values()]

    def query(self, collection: str, field: str, value: Any) -> list[dict[str, Any]]:
        """Return copies of the records whose field equals value, in insertion order."""
        return [
            copy.deepcopy(record)
            for record in self._collection(collection).values()
            if record.get(field) == value
        ]

    def put(self, collection: str, record_id: str, record: dict[str, Any]) -> None:
        """Upsert a record, replacing any previous document entirely."""
        self._collection(collection)[record_id] = copy.deepcopy(record)

    def delete(self, collection: str, record_id: str) -> bool:
        """Remove a record. Returns False if it did not exist."""
        return self._collection(collection).pop(record_id, None) is not None

    # -------------------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------------------

    async def async_save(self) -> None:
        """Write the cache to disk.

        Failures are logged, not raised. The in-memory cache stays current.
        """
        try:
            await self._store.async_save(self._data)
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Could not write %s: %s", self._store.path, err
            )
        except (TypeError, ValueError) as err:
            const.LOGGER.error(
                "ERROR: LifeTracker data is not JSON-serializable: %s", err
            )
        else:
            const.LOGGER.debug("DEBUG: Saved LifeTracker data to %s", self._store.path)

    async def async_reload(self) -> None:
        """Discard the in-memory cache and reload it from disk."""
        await self.async_initialize()

    async def async_delete_storage(self) -> None:
        """Delete the storage file completely from disk."""
        self._data = LifeTrackerStore.get_default_structure()
        try:
            await self._store.async_remove()
            const.LOGGER.info(
                "INFO: Storage file removed successfully: %s", self._store.path
            )
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to remove storage file %s: %s", self._store.path, err
            )
