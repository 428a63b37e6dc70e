"""
Habits Repository - Centralized database access layer
All Supabase queries for habits and completion events
"""
from datetime import date, datetime, time
from typing import List, Dict, Any, Optional
import logging

from app.core.exceptions import DatabaseError
from app.models.habit import Habit, CompletionEvent, BulkUpdateResult
from app.utils.dates import get_app_tz

logger = logging.getLogger(__name__)


def _start_of_day(day: date) -> str:
    """ISO timestamp for midnight of ``day`` in the application timezone"""
    return get_app_tz().localize(datetime.combine(day, time.min)).isoformat()


def _row(habit: Habit) -> Dict[str, Any]:
    return habit.model_dump(mode="json")


# ============================================================================
# HABITS TABLE
# ============================================================================

class HabitStore:
    """
    Habit rows scoped by owning user.

    Every query filters on ``user_id`` so nothing here can read or write
    another user's habits.
    """

    def __init__(self, client, table: str = "habits"):
        self.client = client
        self.table = table

    def _query(self):
        return self.client.table(self.table)

    def find_one(self, user_id: str, **filters: Any) -> Optional[Habit]:
        """
        Get a single habit matching equality filters

        Args:
            user_id: Owning user id
            **filters: Column equality filters (e.g. id=..., name=..., active=True)

        Returns:
            Habit or None if not found

        Raises:
            DatabaseError: If query fails
        """
        try:
            query = self._query().select("*").eq("user_id", user_id)
            for column, value in filters.items():
                query = query.eq(column, value)
            result = query.limit(1).execute()
            return Habit.model_validate(result.data[0]) if result.data else None
        except Exception as e:
            logger.error(f"Database error fetching habit for user {user_id} ({filters}): {e}")
            raise DatabaseError(f"Failed to fetch habit: {e}")

    def find(self, user_id: str, active: Optional[bool] = None,
             deleted_since: Optional[date] = None,
             priority_above: Optional[int] = None) -> List[Habit]:
        """
        Get a user's habits ordered by priority

        Args:
            user_id: Owning user id
            active: Only habits with this active flag
            deleted_since: Only habits still active or soft-deleted on/after this day
            priority_above: Only habits whose priority is strictly greater

        Returns:
            List of habits

        Raises:
            DatabaseError: If query fails
        """
        try:
            query = self._query().select("*").eq("user_id", user_id)
            if active is not None:
                query = query.eq("active", active)
            if deleted_since is not None:
                query = query.or_(f"active.eq.true,deleted_at.gte.{_start_of_day(deleted_since)}")
            if priority_above is not None:
                query = query.gt("priority", priority_above)
            result = query.order("priority").execute()
            return [Habit.model_validate(row) for row in result.data]
        except Exception as e:
            logger.error(f"Database error fetching habits for user {user_id}: {e}")
            raise DatabaseError(f"Failed to fetch habits: {e}")

    def count_active(self, user_id: str) -> int:
        """
        Count a user's active habits

        Raises:
            DatabaseError: If query fails
        """
        try:
            result = self._query()\
                .select("id", count="exact")\
                .eq("user_id", user_id)\
                .eq("active", True)\
                .execute()
            return result.count or 0
        except Exception as e:
            logger.error(f"Database error counting habits for user {user_id}: {e}")
            raise DatabaseError(f"Failed to count habits: {e}")

    def insert(self, habit_data: Dict[str, Any]) -> Habit:
        """
        Create a new habit

        Args:
            habit_data: Column values without an id

        Returns:
            Created habit

        Raises:
            DatabaseError: If insert fails
        """
        try:
            result = self._query().insert(habit_data).execute()
        except Exception as e:
            logger.error(f"Database error creating habit: {e}")
            raise DatabaseError(f"Failed to create habit: {e}")
        if not result.data:
            raise DatabaseError("Failed to create habit: no row returned")
        return Habit.model_validate(result.data[0])

    def save(self, habit: Habit) -> Habit:
        """
        Write every column of an existing habit

        Raises:
            DatabaseError: If update fails
        """
        update_data = _row(habit)
        habit_id = update_data.pop("id")
        try:
            result = self._query()\
                .update(update_data)\
                .eq("id", habit_id)\
                .eq("user_id", habit.user_id)\
                .execute()
        except Exception as e:
            logger.error(f"Database error updating habit {habit_id}: {e}")
            raise DatabaseError(f"Failed to update habit: {e}")
        if not result.data:
            raise DatabaseError(f"Failed to update habit {habit_id}: no row matched")
        return Habit.model_validate(result.data[0])

    def save_many(self, habits: List[Habit]) -> List[Habit]:
        """
        Write several existing habits in a single statement

        PostgREST runs a bulk upsert as one INSERT ... ON CONFLICT, so the
        rows change together or not at all.

        Raises:
            DatabaseError: If the upsert fails
        """
        if not habits:
            return []
        try:
            result = self._query().upsert([_row(h) for h in habits], on_conflict="id").execute()
            return [Habit.model_validate(row) for row in result.data]
        except Exception as e:
            logger.error(f"Database error saving {len(habits)} habits: {e}")
            raise DatabaseError(f"Failed to save habits: {e}")

    def bulk_update(self, ops: List[Dict[str, Any]]) -> BulkUpdateResult:
        """
        Apply independent per-habit updates

        Args:
            ops: Dicts with ``id``, ``user_id`` and ``set`` (columns to change)

        Returns:
            Number of ops that matched a row and number that changed one

        Raises:
            DatabaseError: If any update fails
        """
        matched = 0
        modified = 0
        for op in ops:
            try:
                result = self._query()\
                    .update(op["set"])\
                    .eq("id", op["id"])\
                    .eq("user_id", op["user_id"])\
                    .execute()
            except Exception as e:
                logger.error(f"Database error updating habit {op['id']}: {e}")
                raise DatabaseError(f"Failed to update habit: {e}")
            if result.data:
                matched += 1
                if op["set"]:
                    modified += 1
        return BulkUpdateResult(matched_count=matched, modified_count=modified)


# ============================================================================
# HABIT_COMPLETIONS TABLE
# ============================================================================

class EventStore:
    """Completion events keyed by (user, habit, day)"""

    def __init__(self, client, table: str = "habit_completions"):
        self.client = client
        self.table = table

    def _query(self):
        return self.client.table(self.table)

    def find_one(self, user_id: str, habit_id: str, day: date) -> Optional[CompletionEvent]:
        """
        Get the completion for a specific habit and day

        Returns:
            CompletionEvent or None if not found

        Raises:
            DatabaseError: If query fails
        """
        try:
            result = self._query()\
                .select("*")\
                .eq("user_id", user_id)\
                .eq("habit_id", habit_id)\
                .eq("day", day.isoformat())\
                .limit(1)\
                .execute()
            return CompletionEvent.model_validate(result.data[0]) if result.data else None
        except Exception as e:
            logger.error(f"Database error fetching completion for habit {habit_id} on {day}: {e}")
            raise DatabaseError(f"Failed to fetch completion: {e}")

    def find(self, user_id: str, start_day: date, end_day: date) -> List[CompletionEvent]:
        """
        Get a user's completions between two days inclusive

        Raises:
            DatabaseError: If query fails
        """
        try:
            result = self._query()\
                .select("*")\
                .eq("user_id", user_id)\
                .gte("day", start_day.isoformat())\
                .lte("day", end_day.isoformat())\
                .execute()
            return [CompletionEvent.model_validate(row) for row in result.data]
        except Exception as e:
            logger.error(f"Database error fetching completions for {start_day}..{end_day}: {e}")
            raise DatabaseError(f"Failed to fetch completions: {e}")

    def insert(self, user_id: str, habit_id: str, day: date) -> CompletionEvent:
        """
        Create a completion entry

        Raises:
            DatabaseError: If insert fails
        """
        try:
            result = self._query().insert({
                "user_id": user_id,
                "habit_id": habit_id,
                "day": day.isoformat()
            }).execute()
        except Exception as e:
            logger.error(f"Database error creating completion: {e}")
            raise DatabaseError(f"Failed to create completion: {e}")
        if not result.data:
            raise DatabaseError("Failed to create completion: no row returned")
        return CompletionEvent.model_validate(result.data[0])

    def delete(self, event_id: str) -> None:
        """
        Delete a completion entry

        Raises:
            DatabaseError: If delete fails
        """
        try:
            self._query().delete().eq("id", event_id).execute()
        except Exception as e:
            logger.error(f"Database error deleting completion {event_id}: {e}")
            raise DatabaseError(f"Failed to delete completion: {e}")
