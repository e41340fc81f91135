"""Shared plumbing for the in-memory stores.

Each store keeps a dict of pydantic records keyed by id, guarded by an
asyncio lock, with optional JSON-file persistence written after every
mutation and loaded on construction.
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Generic, Optional, Type, TypeVar

from pydantic import BaseModel

from alerto_triage.errors import StorageFailure
from alerto_triage.utils.logging import get_structured_logger

RecordT = TypeVar("RecordT", bound=BaseModel)


class InMemoryStore(Generic[RecordT]):
    """Keyed record storage with an asyncio lock and optional JSON file."""

    record_type: Type[RecordT]

    def __init__(self, persistence_path: Optional[str] = None) -> None:
        """Initialize the store.

        Args:
            persistence_path: Optional path to JSON file for persistence.
                            If None, storage is memory-only.
        """
        self._records: dict[str, RecordT] = {}
        self._lock = asyncio.Lock()
        self._persistence_path = Path(persistence_path) if persistence_path else None
        self._logger = get_structured_logger(type(self).__name__)
        if self._persistence_path and self._persistence_path.exists():
            self._load_from_file()

    def __len__(self) -> int:
        return len(self._records)

    def _save_to_file(self) -> None:
        """Write all records to the JSON file (synchronous).

        Raises:
            StorageFailure: If the file cannot be written.
        """
        if not self._persistence_path:
            return
        try:
            self._persistence_path.parent.mkdir(parents=True, exist_ok=True)
            data: dict[str, Any] = {
                key: record.model_dump(mode="json")
                for key, record in self._records.items()
            }
            with open(self._persistence_path, "w") as f:
                json.dump(data, f, indent=2, default=str)
        except OSError as e:
            self._logger.error("persistence_failed", error=str(e))
            raise StorageFailure(f"Failed to persist {self._persistence_path}: {e}") from e

    def _load_from_file(self) -> None:
        try:
            with open(self._persistence_path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self._logger.error("load_failed", error=str(e))
            raise StorageFailure(f"Failed to load {self._persistence_path}: {e}") from e

        self._records = {
            key: self.record_type.model_validate(raw) for key, raw in data.items()
        }
        self._logger.info("store_loaded", records=len(self._records))

    def _commit(self, key: str, record: RecordT) -> None:
        """Put a record and persist; restore the previous value if persisting fails.

        Must be called with the lock held.
        """
        previous = self._records.get(key)
        self._records[key] = record
        try:
            self._save_to_file()
        except StorageFailure:
            if previous is None:
                del self._records[key]
            else:
                self._records[key] = previous
            raise

    def _discard(self, key: str) -> bool:
        """Remove a record and persist; put it back if persisting fails.

        Must be called with the lock held.
        """
        previous = self._records.pop(key, None)
        if previous is None:
            return False
        try:
            self._save_to_file()
        except StorageFailure:
            self._records[key] = previous
            raise
        return True
