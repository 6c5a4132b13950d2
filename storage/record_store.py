"""Record store interface for persisted audit records."""

import copy
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from utils.errors import PersistenceError


class RecordStore(ABC):
    """
    Key-value-by-id storage for audit records.

    The orchestrator creates one record per audit in status ``processing``
    and updates it exactly once when the report is ready.
    """

    @abstractmethod
    def insert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Persist a new record and return it with its generated ``id``."""

    @abstractmethod
    def update(self, record_id: str, fields: Dict[str, Any]) -> None:
        """Apply ``fields`` to an existing record. Raises PersistenceError if missing."""

    @abstractmethod
    def get(self, record_id: str) -> Optional[Dict[str, Any]]:
        """Return the record, or None."""


class InMemoryRecordStore(RecordStore):
    """Process-local store for tests, the CLI and local runs."""

    def __init__(self):
        self.records: Dict[str, Dict[str, Any]] = {}

    def insert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        now = datetime.now(timezone.utc).isoformat()
        stored = copy.deepcopy(record)
        stored["id"] = str(uuid.uuid4())
        stored.setdefault("overall_score", None)
        stored["created_at"] = now
        stored["updated_at"] = now
        self.records[stored["id"]] = stored
        return copy.deepcopy(stored)

    def update(self, record_id: str, fields: Dict[str, Any]) -> None:
        if record_id not in self.records:
            raise PersistenceError("update", f"No audit record with id {record_id}")
        self.records[record_id].update(copy.deepcopy(fields))
        self.records[record_id]["updated_at"] = datetime.now(timezone.utc).isoformat()

    def get(self, record_id: str) -> Optional[Dict[str, Any]]:
        record = self.records.get(record_id)
        return copy.deepcopy(record) if record is not None else None
