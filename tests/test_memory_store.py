"""Unit tests for InMemoryEventStore."""
from events.models import EventRecord
from storage.memory_store import InMemoryEventStore


def make_record(event_id, title='Test Event'):
    return EventRecord(
        id=event_id,
        title=title,
        date='2024-01-10',
        start_time='09:00',
        end_time='10:00',
        location='Room A',
        description='Description',
        created_at=1
    )


def test_get_missing_returns_none():
    store = InMemoryEventStore()

    assert store.get('missing') is None
    assert store.remove('missing') is None


def test_insert_overwrites():
    """Test that inserting at an existing id replaces the record."""
    store = InMemoryEventStore()
    store.insert('a', make_record('a'))
    store.insert('a', make_record('a', title='Replaced'))

    assert len(store) == 1
    assert store.get('a').title == 'Replaced'


def test_remove_returns_record():
    store = InMemoryEventStore()
    record = make_record('a')
    store.insert('a', record)

    assert store.remove('a') == record
    assert store.get('a') is None


def test_values_in_key_order():
    """Test that values are enumerated in ascending id order."""
    store = InMemoryEventStore()
    for event_id in ['c', 'a', 'b']:
        store.insert(event_id, make_record(event_id))

    assert [record.id for record in store.values()] == ['a', 'b', 'c']
