"""DynamoDB-backed event store."""
import logging
from typing import List, Optional

import boto3
from botocore.exceptions import ClientError

from events.models import EventRecord
from storage.base import EventStore

logger = logging.getLogger(__name__)


class DynamoDBEventStore(EventStore):
    """Event store persisting records in a DynamoDB table keyed by id."""

    def __init__(self, table_name: str, region_name: Optional[str] = None):
        """
        Initialize DynamoDB resource and table reference.

        Args:
            table_name: Name of the DynamoDB table
            region_name: AWS region (defaults to the boto3 session region)
        """
        self.table_name = table_name
        if region_name:
            self.dynamodb = boto3.resource('dynamodb', region_name=region_name)
        else:
            self.dynamodb = boto3.resource('dynamodb')
        self.table = self.dynamodb.Table(table_name)
        logger.info(f"Initialized DynamoDBEventStore for table: {table_name}")

    def insert(self, event_id: str, record: EventRecord) -> None:
        """
        Write a record, overwriting any item with the same id.

        Args:
            event_id: Key to store the record under
            record: EventRecord to write
        """
        item = self._record_to_item(record)
        item['id'] = event_id
        self.table.put_item(Item=item)

    def get(self, event_id: str) -> Optional[EventRecord]:
        """
        Fetch a single record by id.

        Args:
            event_id: Key of the record

        Returns:
            EventRecord or None if no item exists

        Raises:
            ValueError: If the stored item cannot be converted
        """
        # DynamoDB rejects empty key values; no such item can exist
        if not event_id:
            return None

        response = self.table.get_item(Key={'id': event_id})
        item = response.get('Item')
        if item is None:
            return None
        return self._load_stored_item(item)

    def remove(self, event_id: str) -> Optional[EventRecord]:
        """
        Delete a record and return its previous value.

        Args:
            event_id: Key of the record

        Returns:
            Deleted EventRecord or None if no item existed

        Raises:
            ValueError: If the deleted item cannot be converted
        """
        if not event_id:
            return None

        response = self.table.delete_item(
            Key={'id': event_id},
            ReturnValues='ALL_OLD'
        )
        item = response.get('Attributes')
        if not item:
            return None
        return self._load_stored_item(item)

    def values(self) -> List[EventRecord]:
        """
        Retrieve all records using a Scan operation.

        Returns:
            List of EventRecord objects sorted by id
        """
        logger.info(f"Scanning DynamoDB table {self.table_name} for all events")

        try:
            response = self.table.scan()
            items = response.get('Items', [])

            # Handle pagination
            while 'LastEvaluatedKey' in response:
                response = self.table.scan(
                    ExclusiveStartKey=response['LastEvaluatedKey']
                )
                items.extend(response.get('Items', []))
        except ClientError as e:
            logger.error(f"Error scanning DynamoDB table: {e}")
            raise

        records = []
        for item in items:
            record = self._item_to_record(item)
            if record:
                records.append(record)

        records.sort(key=lambda record: record.id)
        logger.info(f"Retrieved {len(records)} events from DynamoDB")
        return records

    def _item_to_record(self, item: dict) -> Optional[EventRecord]:
        """
        Convert DynamoDB item to EventRecord object.

        Args:
            item: DynamoDB item dictionary

        Returns:
            EventRecord object or None if conversion fails
        """
        try:
            return self._parse_item(item)
        except (KeyError, ValueError, TypeError) as e:
            logger.warning(f"Failed to convert item to EventRecord: {e}")
            return None

    def _load_stored_item(self, item: dict) -> EventRecord:
        """
        Convert an item fetched by key, failing loudly if it is malformed.

        Raises:
            ValueError: If the item is missing attributes or has bad values
        """
        try:
            return self._parse_item(item)
        except (KeyError, ValueError, TypeError) as e:
            logger.error(f"Stored event {item.get('id')} is malformed: {e!r}")
            raise ValueError(f"Stored event {item.get('id')} is malformed: {e!r}") from e

    def _parse_item(self, item: dict) -> EventRecord:
        updated_at = item.get('updated_at')
        return EventRecord(
            id=item['id'],
            title=item['title'],
            date=item['date'],
            start_time=item['start_time'],
            end_time=item['end_time'],
            location=item['location'],
            description=item['description'],
            created_at=int(item['created_at']),
            updated_at=int(updated_at) if updated_at is not None else None
        )

    def _record_to_item(self, record: EventRecord) -> dict:
        """
        Convert EventRecord object to DynamoDB item.

        Args:
            record: EventRecord object

        Returns:
            DynamoDB item dictionary
        """
        item = {
            'id': record.id,
            'title': record.title,
            'date': record.date,
            'start_time': record.start_time,
            'end_time': record.end_time,
            'location': record.location,
            'description': record.description,
            'created_at': record.created_at
        }

        # Absent until the first update
        if record.updated_at is not None:
            item['updated_at'] = record.updated_at

        return item
