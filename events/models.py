"""Data models for event records."""
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional

from events.errors import InvalidInputError


@dataclass(frozen=True)
class EventPayload:
    """Caller-supplied fields of an event."""
    title: str
    date: str
    start_time: str
    end_time: str
    location: str
    description: str

    WIRE_NAMES = {
        'title': 'title',
        'date': 'date',
        'start_time': 'startTime',
        'end_time': 'endTime',
        'location': 'location',
        'description': 'description',
    }

    @classmethod
    def from_dict(cls, data: Any) -> 'EventPayload':
        """
        Build a payload from its camelCase wire representation.

        Args:
            data: Mapping with title, date, startTime, endTime, location
                and description keys

        Returns:
            EventPayload instance

        Raises:
            InvalidInputError: If data is not a mapping, a key is missing
                or a value is not a string
        """
        if not isinstance(data, dict):
            raise InvalidInputError("Event payload must be an object")

        missing = [
            wire for wire in cls.WIRE_NAMES.values() if wire not in data
        ]
        if missing:
            raise InvalidInputError(
                f"Event payload missing fields: {', '.join(missing)}"
            )

        not_strings = [
            wire for wire in cls.WIRE_NAMES.values()
            if not isinstance(data[wire], str)
        ]
        if not_strings:
            raise InvalidInputError(
                f"Event payload fields must be strings: {', '.join(not_strings)}"
            )

        return cls(**{
            name: data[wire] for name, wire in cls.WIRE_NAMES.items()
        })

    def empty_fields(self) -> List[str]:
        """Return wire names of fields that are empty or whitespace only."""
        return [
            self.WIRE_NAMES[f.name] for f in fields(self)
            if not getattr(self, f.name).strip()
        ]


@dataclass(frozen=True)
class EventRecord:
    """Stored event, keyed by its generated id."""
    id: str
    title: str
    date: str
    start_time: str
    end_time: str
    location: str
    description: str
    created_at: int
    updated_at: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the record with camelCase keys for callers."""
        return {
            'id': self.id,
            'title': self.title,
            'date': self.date,
            'startTime': self.start_time,
            'endTime': self.end_time,
            'location': self.location,
            'description': self.description,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }
