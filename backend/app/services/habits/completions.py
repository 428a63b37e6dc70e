"""
Habit Completions - Daily status lists, toggles and range summaries
"""
from datetime import date
from typing import Dict, List, Optional, Set
import logging

from app.core.exceptions import HabitNotFoundError, InvalidInputError
from app.models.habit import Habit, HabitStatus, ToggleResult, DaySummary
from app.utils import dates
from .locks import user_lock
from .repository import HabitStore, EventStore

logger = logging.getLogger(__name__)


def existed_on(habit: Habit, day: date) -> bool:
    """
    Whether a habit counts toward ``day``

    A habit's lifecycle window is [created_at, deleted_at) measured in
    calendar days: it counts from the day it was created up to, but not
    including, the day it was soft-deleted.
    """
    if dates.day_of(habit.created_at) > day:
        return False
    return habit.deleted_at is None or dates.day_of(habit.deleted_at) > day


class CompletionAggregator:
    """Sole writer of completion events; reader of habit lifecycles"""

    def __init__(self, habits: HabitStore, events: EventStore):
        self.habits = habits
        self.events = events

    def list(self, user_id: str, day: dates.DayLike) -> List[HabitStatus]:
        """
        Get a user's active habits with completion state for one day

        Ordered by priority. Equal priorities (only possible after a bulk
        reorder broke density) put incomplete habits first.

        Raises:
            InvalidDateError: If the day cannot be parsed
            DatabaseError: If a store call fails
        """
        target = dates.parse_day(day)

        habits = self.habits.find(user_id, active=True)
        if not habits:
            return []

        done = {e.habit_id for e in self.events.find(user_id, target, target)}
        statuses = [
            HabitStatus(
                habit_id=h.id,
                name=h.name,
                priority=h.priority,
                is_completed=h.id in done
            )
            for h in habits
        ]
        statuses.sort(key=lambda s: (s.priority, s.is_completed))
        return statuses

    def toggle(self, user_id: str, habit_id: str, day: dates.DayLike, is_done: bool) -> ToggleResult:
        """
        Mark a habit done or not done on a day

        Idempotent: marking done twice keeps one event, and clearing a day
        with no event is a no-op.

        Raises:
            HabitNotFoundError: If the habit is absent or not owned
            InvalidDateError: If the day cannot be parsed
            DatabaseError: If a store call fails
        """
        if not habit_id:
            raise InvalidInputError("Habit ID is required")
        target = dates.parse_day(day)

        if not self.habits.find_one(user_id, id=habit_id):
            raise HabitNotFoundError("Habit not found or doesn't belong to this user")

        with user_lock(user_id):
            existing = self.events.find_one(user_id, habit_id, target)

            changed = False
            if is_done and existing is None:
                self.events.insert(user_id, habit_id, target)
                changed = True
            elif not is_done and existing is not None:
                self.events.delete(existing.id)
                changed = True

        if changed:
            logger.info(f"Habit {habit_id} marked {'done' if is_done else 'not done'} on {target} for user {user_id}")
        return ToggleResult(habit_id=habit_id, day=target, is_done=is_done, changed=changed)

    def summary(self, user_id: str, start: Optional[dates.DayLike],
                end: Optional[dates.DayLike]) -> List[DaySummary]:
        """
        Get per-day totals and completions for an inclusive range

        ``total_habits`` holds habits whose lifecycle window covers the day.
        ``completed_habits`` holds every habit with an event that day, even
        one no longer counted in the total: a completion stays a historical
        fact after the habit is deleted.

        Raises:
            InvalidDateError: If a bound cannot be parsed
            InvalidRangeError: If start is after end
            DatabaseError: If a store call fails
        """
        start_day, end_day = dates.parse_range(start, end)
        days = list(dates.iter_days(start_day, end_day))

        completed: Dict[date, Set[str]] = {d: set() for d in days}
        for event in self.events.find(user_id, start_day, end_day):
            completed.setdefault(event.day, set()).add(event.habit_id)

        # Habits deleted before the window can't count toward any day in it
        habits = self.habits.find(user_id, deleted_since=start_day)

        return [
            DaySummary(
                date=d,
                completed_habits=sorted(completed[d]),
                total_habits=[h.id for h in habits if existed_on(h, d)]
            )
            for d in days
        ]
