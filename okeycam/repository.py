from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from threading import Lock
from typing import Literal
from uuid import UUID, uuid4

logger = logging.getLogger(__name__)

RecordType = Literal["capture", "score", "feedback"]

# A scan cycle is capture -> score -> feedback; each step may only hang off the one before it.
PARENT_TYPE: dict[RecordType, RecordType | None] = {
    "capture": None,
    "score": "capture",
    "feedback": "score",
}


class RecordNotFoundError(LookupError):
    def __init__(self, record_id: UUID, record_type: RecordType) -> None:
        super().__init__(f"{record_type} {record_id} not found or expired")
        self.record_id = record_id
        self.record_type = record_type


@dataclass
class StoredRecord:
    id: UUID
    type: RecordType
    created_at: datetime
    expires_at: datetime
    data: dict
    parent_id: UUID | None = None


class InMemoryRepository:
    """Records of one scan/feedback cycle, linked child to parent. Nothing survives a restart."""

    def __init__(self, ttl_hours: int = 24) -> None:
        self._ttl = timedelta(hours=ttl_hours)
        self._records: dict[UUID, StoredRecord] = {}
        self._lock = Lock()

    def _utcnow(self) -> datetime:
        return datetime.now(timezone.utc)

    def _sweep(self) -> None:
        now = self._utcnow()
        expired = [record_id for record_id, record in self._records.items() if record.expires_at <= now]
        for record_id in expired:
            del self._records[record_id]
        if expired:
            logger.debug("dropped %d expired records", len(expired))

    def _lookup(self, record_id: UUID, record_type: RecordType | None) -> StoredRecord | None:
        record = self._records.get(record_id)
        if record is None or (record_type is not None and record.type != record_type):
            return None
        return record

    def create(self, record_type: RecordType, data: dict, parent_id: UUID | None = None) -> StoredRecord:
        """Store a record; ``parent_id`` must name a live record of the preceding cycle step."""
        with self._lock:
            self._sweep()
            if parent_id is not None:
                parent_type = PARENT_TYPE[record_type]
                if parent_type is None or self._lookup(parent_id, parent_type) is None:
                    raise RecordNotFoundError(parent_id, parent_type or "capture")
            now = self._utcnow()
            record = StoredRecord(
                id=uuid4(),
                type=record_type,
                created_at=now,
                expires_at=now + self._ttl,
                data=data,
                parent_id=parent_id,
            )
            self._records[record.id] = record
            return record

    def get(self, record_id: UUID, record_type: RecordType | None = None) -> StoredRecord | None:
        with self._lock:
            self._sweep()
            return self._lookup(record_id, record_type)

    def require(self, record_id: UUID, record_type: RecordType) -> StoredRecord:
        record = self.get(record_id, record_type)
        if record is None:
            raise RecordNotFoundError(record_id, record_type)
        return record

    def lineage(self, record_id: UUID) -> list[StoredRecord]:
        """The record followed by its live ancestors, e.g. feedback, score, capture."""
        with self._lock:
            self._sweep()
            chain: list[StoredRecord] = []
            record = self._records.get(record_id)
            while record is not None:
                chain.append(record)
                record = self._records.get(record.parent_id) if record.parent_id else None
            return chain
