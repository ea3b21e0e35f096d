"""Event service implementing record mutations and scan-based queries."""
import logging
import time
import uuid
from dataclasses import replace
from typing import Callable, List, Optional

from events.errors import (
    EventNotFoundError,
    EventServiceError,
    InternalError,
    InvalidInputError,
)
from events.models import EventPayload, EventRecord
from storage.base import EventStore

logger = logging.getLogger(__name__)


def generate_event_id() -> str:
    """Generate a unique identifier for a new event."""
    return str(uuid.uuid4())


class EventService:
    """
    Handlers for adding, updating, deleting and querying events.

    Every query is a linear scan over the store's values; only point
    lookups by id can fail with EventNotFoundError.
    """

    DEFAULT_MAX_PAGE_SIZE = 100

    def __init__(
        self,
        store: EventStore,
        id_factory: Callable[[], str] = generate_event_id,
        clock: Callable[[], int] = time.time_ns,
        max_page_size: int = DEFAULT_MAX_PAGE_SIZE
    ):
        """
        Initialize the service.

        Args:
            store: Store holding the event records
            id_factory: Callable returning a fresh unique id
            clock: Callable returning the current time in nanoseconds
            max_page_size: Largest page_size accepted by paginate_events
        """
        self.store = store
        self.id_factory = id_factory
        self.clock = clock
        self.max_page_size = max_page_size

    # Mutations

    def add_event(self, payload: EventPayload) -> EventRecord:
        """
        Create and store a new event.

        Args:
            payload: Fields for the new event

        Returns:
            The stored EventRecord, with updated_at unset

        Raises:
            InvalidInputError: If any payload field is empty
            InternalError: If the store fails unexpectedly
        """
        self._validate_payload(payload)

        try:
            record = EventRecord(
                id=self.id_factory(),
                title=payload.title,
                date=payload.date,
                start_time=payload.start_time,
                end_time=payload.end_time,
                location=payload.location,
                description=payload.description,
                created_at=self.clock(),
                updated_at=None
            )
            self.store.insert(record.id, record)
        except Exception as e:
            raise InternalError(f"Failed to add event: {e}") from e

        logger.info(f"Added event {record.id} '{record.title}'")
        return record

    def update_event(self, event_id: str, payload: EventPayload) -> EventRecord:
        """
        Replace all payload fields of an existing event.

        Args:
            event_id: Id of the event to update
            payload: New values for every payload field

        Returns:
            The updated EventRecord

        Raises:
            InvalidInputError: If any payload field is empty
            EventNotFoundError: If no event has this id
            InternalError: If the store fails unexpectedly
        """
        self._validate_payload(payload)
        return self._mutate(
            event_id,
            'update',
            title=payload.title,
            date=payload.date,
            start_time=payload.start_time,
            end_time=payload.end_time,
            location=payload.location,
            description=payload.description
        )

    def update_event_start_time(self, event_id: str, start_time: str) -> EventRecord:
        """Set only the start time of an existing event."""
        return self._mutate(event_id, 'start time update', start_time=start_time)

    def update_event_end_time(self, event_id: str, end_time: str) -> EventRecord:
        """Set only the end time of an existing event."""
        return self._mutate(event_id, 'end time update', end_time=end_time)

    def delete_event(self, event_id: str) -> EventRecord:
        """
        Remove an event from the store.

        Args:
            event_id: Id of the event to delete

        Returns:
            The deleted EventRecord

        Raises:
            EventNotFoundError: If no event has this id
            InternalError: If the store fails unexpectedly
        """
        try:
            record = self.store.remove(event_id)
        except Exception as e:
            raise InternalError(f"Failed to delete event: {e}") from e

        if record is None:
            raise EventNotFoundError(event_id)

        logger.info(f"Deleted event {event_id}")
        return record

    # Queries

    def get_event(self, event_id: str) -> EventRecord:
        """
        Look up a single event.

        Raises:
            EventNotFoundError: If no event has this id
        """
        record = self.store.get(event_id)
        if record is None:
            raise EventNotFoundError(event_id)
        return record

    def get_events(self) -> List[EventRecord]:
        return self.store.values()

    def search_events_by_date(self, date: str) -> List[EventRecord]:
        return [event for event in self.store.values() if event.date == date]

    def filter_events_by_location(self, location: str) -> List[EventRecord]:
        return [
            event for event in self.store.values()
            if event.location == location
        ]

    def paginate_events(self, page: int, page_size: int) -> List[EventRecord]:
        """
        Return one page of events in store order.

        Args:
            page: 1-based page number
            page_size: Number of events per page, at most max_page_size

        Returns:
            Events on the requested page (empty past the last page)

        Raises:
            InvalidInputError: If page or page_size is less than 1, or
                page_size exceeds max_page_size
        """
        if page < 1:
            raise InvalidInputError(f"page must be at least 1, got {page}")
        if page_size < 1:
            raise InvalidInputError(
                f"pageSize must be at least 1, got {page_size}"
            )
        if page_size > self.max_page_size:
            raise InvalidInputError(
                f"pageSize must be at most {self.max_page_size}, got {page_size}"
            )

        start_index = (page - 1) * page_size
        return self.store.values()[start_index:start_index + page_size]

    def get_upcoming_events(self, current_date: str) -> List[EventRecord]:
        return [
            event for event in self.store.values()
            if event.date >= current_date
        ]

    def search_events_by_title(self, title: str) -> List[EventRecord]:
        """Case-insensitive substring match on the event title."""
        needle = title.casefold()
        return [
            event for event in self.store.values()
            if needle in event.title.casefold()
        ]

    def filter_events_by_date_range(self, start_date: str, end_date: str) -> List[EventRecord]:
        """Events whose date falls within [start_date, end_date]."""
        return [
            event for event in self.store.values()
            if start_date <= event.date <= end_date
        ]

    def get_events_created_after(self, timestamp: int) -> List[EventRecord]:
        return [
            event for event in self.store.values()
            if event.created_at > timestamp
        ]

    def _mutate(self, event_id: str, action: str, **changes) -> EventRecord:
        """
        Apply field changes to a stored event and refresh updated_at.

        Args:
            event_id: Id of the event to change
            action: Short description used in log and error messages
            **changes: EventRecord fields to replace

        Returns:
            The updated EventRecord

        Raises:
            EventNotFoundError: If no event has this id
            InternalError: If the store fails unexpectedly
        """
        try:
            record = self.store.get(event_id)
            if record is None:
                raise EventNotFoundError(event_id)

            updated = replace(
                record,
                updated_at=self._next_timestamp(record),
                **changes
            )
            self.store.insert(record.id, updated)
        except EventServiceError:
            raise
        except Exception as e:
            raise InternalError(f"Failed to apply event {action}: {e}") from e

        logger.info(f"Applied {action} to event {event_id}")
        return updated

    def _next_timestamp(self, record: EventRecord) -> int:
        """Current time, never earlier than the record's last timestamp."""
        previous: Optional[int] = record.updated_at
        if previous is None:
            previous = record.created_at
        return max(self.clock(), previous)

    def _validate_payload(self, payload: EventPayload) -> None:
        """
        Validate that every payload field is non-empty.

        Raises:
            InvalidInputError: Naming the empty fields
        """
        empty = payload.empty_fields()
        if empty:
            logger.warning(f"Rejected event payload with empty fields: {empty}")
            raise InvalidInputError(
                f"Event payload has empty fields: {', '.join(empty)}"
            )
