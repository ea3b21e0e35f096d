"""In-memory event store."""
import logging
from typing import Dict, List, Optional

from events.models import EventRecord
from storage.base import EventStore

logger = logging.getLogger(__name__)


class InMemoryEventStore(EventStore):
    """Event store backed by a dict, enumerated in key order."""

    def __init__(self):
        self._records: Dict[str, EventRecord] = {}

    def insert(self, event_id: str, record: EventRecord) -> None:
        self._records[event_id] = record

    def get(self, event_id: str) -> Optional[EventRecord]:
        return self._records.get(event_id)

    def remove(self, event_id: str) -> Optional[EventRecord]:
        return self._records.pop(event_id, None)

    def values(self) -> List[EventRecord]:
        logger.debug(f"Enumerating {len(self._records)} in-memory events")
        return [self._records[key] for key in sorted(self._records)]

    def __len__(self) -> int:
        return len(self._records)
