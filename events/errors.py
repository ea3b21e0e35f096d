"""Error types raised by the event service."""


class EventServiceError(Exception):
    """Base class for failures surfaced to callers as a tagged error."""

    kind = 'InternalError'
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        """Render the error as a tagged variant, e.g. {'NotFound': '...'}."""
        return {self.kind: self.message}


class EventNotFoundError(EventServiceError):
    """Raised when a point lookup targets an id that is not stored."""

    kind = 'NotFound'
    http_status = 404

    def __init__(self, event_id: str):
        super().__init__(f"Event with id={event_id} not found")
        self.event_id = event_id


class InvalidInputError(EventServiceError):
    """Raised when a payload or argument fails validation."""

    kind = 'InvalidInput'
    http_status = 400


class InternalError(EventServiceError):
    """Wraps an unexpected fault raised while mutating the store."""

    kind = 'InternalError'
    http_status = 500
