"""Shared fixtures: in-memory stores with the same interface as the Supabase ones."""

import itertools
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

from app.models.habit import Habit, CompletionEvent, BulkUpdateResult
from app.services.habits import OrderingManager, CompletionAggregator
from app.utils import dates


class MemoryHabitStore:
    def __init__(self):
        self.rows: Dict[str, Habit] = {}
        self._ids = itertools.count(1)

    def add(self, user_id, name, priority, created_at, active=True, deleted_at=None) -> Habit:
        habit = Habit(
            id=f"h{next(self._ids)}",
            user_id=user_id,
            name=name,
            priority=priority,
            active=active,
            created_at=created_at,
            deleted_at=deleted_at,
        )
        self.rows[habit.id] = habit
        return habit

    def _copy(self, habit: Habit) -> Habit:
        return habit.model_copy()

    def find_one(self, user_id: str, **filters: Any) -> Optional[Habit]:
        for habit in self.rows.values():
            if habit.user_id != user_id:
                continue
            if all(getattr(habit, k) == v for k, v in filters.items()):
                return self._copy(habit)
        return None

    def find(self, user_id, active=None, deleted_since=None, priority_above=None) -> List[Habit]:
        out = []
        for habit in self.rows.values():
            if habit.user_id != user_id:
                continue
            if active is not None and habit.active != active:
                continue
            if deleted_since is not None and not habit.active:
                if habit.deleted_at is None or dates.day_of(habit.deleted_at) < deleted_since:
                    continue
            if priority_above is not None and habit.priority <= priority_above:
                continue
            out.append(self._copy(habit))
        return sorted(out, key=lambda h: h.priority)

    def count_active(self, user_id: str) -> int:
        return sum(1 for h in self.rows.values() if h.user_id == user_id and h.active)

    def insert(self, habit_data: Dict[str, Any]) -> Habit:
        habit = Habit(id=f"h{next(self._ids)}", **habit_data)
        self.rows[habit.id] = habit
        return self._copy(habit)

    def save(self, habit: Habit) -> Habit:
        self.rows[habit.id] = self._copy(habit)
        return self._copy(habit)

    def save_many(self, habits: List[Habit]) -> List[Habit]:
        return [self.save(h) for h in habits]

    def bulk_update(self, ops) -> BulkUpdateResult:
        matched = modified = 0
        for op in ops:
            habit = self.rows.get(op["id"])
            if habit is None or habit.user_id != op["user_id"]:
                continue
            matched += 1
            if op["set"]:
                self.rows[habit.id] = habit.model_copy(update=op["set"])
                modified += 1
        return BulkUpdateResult(matched_count=matched, modified_count=modified)

    def active_priorities(self, user_id: str) -> List[int]:
        return sorted(h.priority for h in self.rows.values() if h.user_id == user_id and h.active)


class MemoryEventStore:
    def __init__(self):
        self.rows: Dict[str, CompletionEvent] = {}
        self._ids = itertools.count(1)

    def add(self, user_id, habit_id, day: date) -> CompletionEvent:
        return self.insert(user_id, habit_id, day)

    def find_one(self, user_id, habit_id, day) -> Optional[CompletionEvent]:
        for event in self.rows.values():
            if (event.user_id, event.habit_id, event.day) == (user_id, habit_id, day):
                return event
        return None

    def find(self, user_id, start_day, end_day) -> List[CompletionEvent]:
        return [
            e for e in self.rows.values()
            if e.user_id == user_id and start_day <= e.day <= end_day
        ]

    def insert(self, user_id, habit_id, day) -> CompletionEvent:
        event = CompletionEvent(id=f"e{next(self._ids)}", user_id=user_id, habit_id=habit_id, day=day)
        self.rows[event.id] = event
        return event

    def delete(self, event_id) -> None:
        self.rows.pop(event_id, None)


def at(year, month, day, hour=12):
    """Aware UTC timestamp helper"""
    return datetime(year, month, day, hour, tzinfo=timezone.utc)


@pytest.fixture
def habit_store():
    return MemoryHabitStore()


@pytest.fixture
def event_store():
    return MemoryEventStore()


@pytest.fixture
def manager(habit_store):
    return OrderingManager(habit_store)


@pytest.fixture
def aggregator(habit_store, event_store):
    return CompletionAggregator(habit_store, event_store)


@pytest.fixture
def clock(monkeypatch):
    """Freeze dates.now(); call clock.set(ts) to move it."""
    class Clock:
        current = at(2024, 1, 1)

        def set(self, ts):
            self.current = ts

    c = Clock()
    monkeypatch.setattr(dates, "now", lambda: c.current)
    return c


@pytest.fixture(autouse=True)
def utc_calendar(monkeypatch):
    """Compute calendar days in UTC regardless of the local .env"""
    from app.core.config import settings
    monkeypatch.setattr(settings, "APP_TIMEZONE", "UTC")
    monkeypatch.setattr(settings, "MAX_SUMMARY_DAYS", 366)
