"""Tests for the Supabase-backed stores."""

from datetime import date
from unittest.mock import MagicMock

import pytest

from app.core.exceptions import DatabaseError
from app.services.habits.repository import HabitStore, EventStore
from conftest import at


HABIT_ROW = {
    "id": 7,
    "user_id": "u1",
    "name": "Read",
    "priority": 1,
    "active": True,
    "created_at": "2024-01-02T10:00:00+00:00",
    "deleted_at": None,
}


def make_client(data=None, count=None, error=None):
    """Supabase client whose query builder chains and returns ``data``."""
    client = MagicMock()
    query = MagicMock()
    client.table.return_value = query
    for method in ("select", "eq", "gt", "gte", "lte", "or_", "order", "limit",
                   "insert", "update", "upsert", "delete"):
        getattr(query, method).return_value = query
    if error is not None:
        query.execute.side_effect = error
    else:
        query.execute.return_value = MagicMock(data=data or [], count=count)
    return client, query


class TestHabitStore:
    def test_find_one_maps_row(self):
        client, query = make_client([HABIT_ROW])
        habit = HabitStore(client).find_one("u1", name="Read", active=True)

        assert habit.id == "7"
        assert habit.created_at == at(2024, 1, 2, hour=10)
        query.eq.assert_any_call("user_id", "u1")
        query.eq.assert_any_call("name", "Read")

    def test_find_one_none(self):
        client, _ = make_client([])
        assert HabitStore(client).find_one("u1", id="7") is None

    def test_find_deleted_since_filter(self):
        client, query = make_client([HABIT_ROW])
        HabitStore(client).find("u1", deleted_since=date(2024, 1, 1))
        query.or_.assert_called_once_with("active.eq.true,deleted_at.gte.2024-01-01T00:00:00+00:00")

    def test_count_active(self):
        client, _ = make_client([], count=3)
        assert HabitStore(client).count_active("u1") == 3

    def test_save_many_single_upsert(self):
        client, query = make_client([HABIT_ROW])
        store = HabitStore(client)
        habit = store.find_one("u1", id="7")
        store.save_many([habit, habit])
        assert query.upsert.call_count == 1

    def test_wraps_errors(self):
        client, _ = make_client(error=RuntimeError("connection reset"))
        with pytest.raises(DatabaseError, match="connection reset"):
            HabitStore(client).find("u1")

    def test_insert_without_row(self):
        client, _ = make_client([])
        with pytest.raises(DatabaseError):
            HabitStore(client).insert({"user_id": "u1"})

    def test_bulk_update_counts(self):
        client, _ = make_client([HABIT_ROW])
        result = HabitStore(client).bulk_update([
            {"id": "7", "user_id": "u1", "set": {"priority": 2}},
            {"id": "8", "user_id": "u1", "set": {}},
        ])
        assert result.matched_count == 2
        assert result.modified_count == 1


class TestEventStore:
    def test_find_range(self):
        client, query = make_client([{"id": 1, "user_id": "u1", "habit_id": 7, "day": "2024-01-02"}])
        events = EventStore(client).find("u1", date(2024, 1, 1), date(2024, 1, 3))

        assert events[0].habit_id == "7"
        assert events[0].day == date(2024, 1, 2)
        query.gte.assert_called_once_with("day", "2024-01-01")
        query.lte.assert_called_once_with("day", "2024-01-03")

    def test_delete_wraps_errors(self):
        client, _ = make_client(error=RuntimeError("timeout"))
        with pytest.raises(DatabaseError):
            EventStore(client).delete("1")
