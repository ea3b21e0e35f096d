"""Store interface for event records."""
from abc import ABC, abstractmethod
from typing import List, Optional

from events.models import EventRecord


class EventStore(ABC):
    """Ordered key-value container mapping event ids to records."""

    @abstractmethod
    def insert(self, event_id: str, record: EventRecord) -> None:
        """Insert or overwrite the record stored at event_id."""

    @abstractmethod
    def get(self, event_id: str) -> Optional[EventRecord]:
        """Return the record at event_id, or None if absent."""

    @abstractmethod
    def remove(self, event_id: str) -> Optional[EventRecord]:
        """Delete and return the record at event_id, or None if absent."""

    @abstractmethod
    def values(self) -> List[EventRecord]:
        """Return every stored record in ascending id order."""
