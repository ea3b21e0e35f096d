"""AWS Lambda handler for the event records service."""
import json
import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

from events.errors import EventServiceError, InternalError, InvalidInputError
from events.models import EventPayload
from events.service import EventService
from events.settings import Settings
from storage.base import EventStore
from storage.dynamodb_store import DynamoDBEventStore
from storage.memory_store import InMemoryEventStore


# Attributes every LogRecord carries; anything else arrived via `extra`
_RESERVED_ATTRS = frozenset(
    logging.LogRecord('', 0, '', 0, '', None, None).__dict__
) | {'message', 'asctime'}


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON, including any `extra` fields."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key not in log_data:
                log_data[key] = value

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


QUERY = 'query'
UPDATE = 'update'

# Reused across invocations served by the same container
_service: Optional[EventService] = None


def build_store(settings: Settings) -> EventStore:
    """Create the store selected by STORE_BACKEND."""
    if settings.store_backend == 'memory':
        return InMemoryEventStore()
    return DynamoDBEventStore(
        table_name=settings.table_name,
        region_name=settings.aws_region
    )


def get_service(settings: Settings) -> EventService:
    """Return the container-wide service, building it on first use."""
    global _service
    if _service is None:
        _service = EventService(
            store=build_store(settings),
            max_page_size=settings.max_page_size
        )
    return _service


def reset_service() -> None:
    """Drop the cached service so the next invocation builds a fresh one."""
    global _service
    _service = None


def _require_str(arguments: Dict[str, Any], name: str) -> str:
    value = arguments.get(name)
    if not isinstance(value, str):
        raise InvalidInputError(f"Argument '{name}' must be a string")
    return value


def _require_int(arguments: Dict[str, Any], name: str) -> int:
    value = arguments.get(name)
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"Argument '{name}' must be an integer")
    return value


def _require_payload(arguments: Dict[str, Any]) -> EventPayload:
    return EventPayload.from_dict(arguments.get('payload'))


Handler = Callable[[EventService, Dict[str, Any]], Any]

OPERATIONS: Dict[str, Tuple[str, Handler]] = {
    'addEvent': (
        UPDATE,
        lambda svc, args: svc.add_event(_require_payload(args))
    ),
    'updateEvent': (
        UPDATE,
        lambda svc, args: svc.update_event(
            _require_str(args, 'id'), _require_payload(args)
        )
    ),
    'deleteEvent': (
        UPDATE,
        lambda svc, args: svc.delete_event(_require_str(args, 'id'))
    ),
    'updateEventStartTime': (
        UPDATE,
        lambda svc, args: svc.update_event_start_time(
            _require_str(args, 'id'), _require_str(args, 'startTime')
        )
    ),
    'updateEventEndTime': (
        UPDATE,
        lambda svc, args: svc.update_event_end_time(
            _require_str(args, 'id'), _require_str(args, 'endTime')
        )
    ),
    'getEvent': (
        QUERY,
        lambda svc, args: svc.get_event(_require_str(args, 'id'))
    ),
    'getEvents': (
        QUERY,
        lambda svc, args: svc.get_events()
    ),
    'searchEventsByDate': (
        QUERY,
        lambda svc, args: svc.search_events_by_date(_require_str(args, 'date'))
    ),
    'filterEventsByLocation': (
        QUERY,
        lambda svc, args: svc.filter_events_by_location(
            _require_str(args, 'location')
        )
    ),
    'paginateEvents': (
        QUERY,
        lambda svc, args: svc.paginate_events(
            _require_int(args, 'page'), _require_int(args, 'pageSize')
        )
    ),
    'getUpcomingEvents': (
        QUERY,
        lambda svc, args: svc.get_upcoming_events(
            _require_str(args, 'currentDate')
        )
    ),
    'searchEventsByTitle': (
        QUERY,
        lambda svc, args: svc.search_events_by_title(_require_str(args, 'title'))
    ),
    'filterEventsByDateRange': (
        QUERY,
        lambda svc, args: svc.filter_events_by_date_range(
            _require_str(args, 'startDate'), _require_str(args, 'endDate')
        )
    ),
    'getEventsCreatedAfter': (
        QUERY,
        lambda svc, args: svc.get_events_created_after(
            _require_int(args, 'timestamp')
        )
    ),
}


def dispatch(service: EventService, event: Dict[str, Any]) -> Tuple[str, str, Any]:
    """
    Resolve and run the operation named in the invocation payload.

    Args:
        service: EventService to run the operation against
        event: Invocation payload with 'operation' and 'arguments'

    Returns:
        Tuple of (operation name, operation kind, serialized result)

    Raises:
        InvalidInputError: If the operation is unknown or arguments are malformed
        EventServiceError: Any failure raised by the operation itself
    """
    operation = event.get('operation')
    if not isinstance(operation, str) or operation not in OPERATIONS:
        raise InvalidInputError(f"Unknown operation: {operation}")

    arguments = event.get('arguments') or {}
    if not isinstance(arguments, dict):
        raise InvalidInputError("Operation arguments must be an object")

    kind, handler = OPERATIONS[operation]
    result = handler(service, arguments)

    if isinstance(result, list):
        return operation, kind, [record.to_dict() for record in result]
    return operation, kind, result.to_dict()


def _error_response(operation: Any, error: EventServiceError) -> Dict[str, Any]:
    return {
        'statusCode': error.http_status,
        'body': json.dumps({
            'Err': error.to_dict(),
            'operation': operation
        })
    }


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Main Lambda handler function for the event records service.

    Args:
        event: Invocation payload, e.g.
            {"operation": "getEvent", "arguments": {"id": "..."}}
        context: Lambda context object

    Returns:
        Response dict with statusCode and a tagged Ok/Err body
    """
    start_time = time.time()
    operation = event.get('operation') if isinstance(event, dict) else None

    try:
        settings = Settings.from_env()
    except ValueError as e:
        setup_logging()
        logging.getLogger(__name__).error(f"Invalid configuration: {e}")
        return _error_response(
            operation, InternalError(f"Invalid configuration: {e}")
        )

    setup_logging(settings.log_level)
    logger = logging.getLogger(__name__)

    logger.info(
        f"Operation {operation} started",
        extra={'operation': operation, 'store_backend': settings.store_backend}
    )

    try:
        if not isinstance(event, dict):
            raise InvalidInputError("Invocation payload must be an object")

        service = get_service(settings)
        operation, kind, result = dispatch(service, event)

    except EventServiceError as e:
        duration = time.time() - start_time
        logger.warning(
            f"Operation {operation} failed with {e.kind}: {e.message}",
            extra={'duration_seconds': round(duration, 4), 'error_type': e.kind}
        )
        return _error_response(operation, e)

    except Exception as e:
        duration = time.time() - start_time
        logger.error(
            f"Operation {operation} failed unexpectedly: {str(e)}",
            extra={
                'duration_seconds': round(duration, 4),
                'error_type': type(e).__name__
            },
            exc_info=True
        )
        return _error_response(operation, InternalError(str(e)))

    duration = time.time() - start_time
    logger.info(
        f"Operation {operation} completed successfully",
        extra={'duration_seconds': round(duration, 4), 'kind': kind}
    )

    return {
        'statusCode': 200,
        'body': json.dumps({
            'Ok': result,
            'operation': operation,
            'kind': kind
        })
    }
