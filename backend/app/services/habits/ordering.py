"""
Habit Ordering - Dense per-user priority ranking

Active habits of a user always carry priorities 1..N with no gaps or
duplicates after create and remove. Bulk reorder is the exception: it
applies exactly what the caller sends and does not re-derive density.
"""
from typing import List
import logging

from app.core.exceptions import (
    HabitNotFoundError,
    HabitAlreadyExistsError,
    InvalidInputError
)
from app.models.habit import (
    CreateResult,
    ReorderEntry,
    ReorderEntryResult,
    BulkReorderResult
)
from app.utils import dates
from .locks import user_lock
from .repository import HabitStore

logger = logging.getLogger(__name__)


def _require_user(user_id: str) -> str:
    if not user_id or not str(user_id).strip():
        raise InvalidInputError("User ID is required")
    return str(user_id).strip()


def _clean_name(name: str) -> str:
    if not isinstance(name, str) or not name.strip():
        raise InvalidInputError("Valid habit name is required")
    return name.strip()


class OrderingManager:
    """Sole writer of a habit's priority, active flag and deletion time"""

    def __init__(self, habits: HabitStore):
        self.habits = habits

    def create(self, user_id: str, name: str) -> CreateResult:
        """
        Register a habit name for a user

        A new name is appended at priority N+1. A name that belongs to a
        soft-deleted habit reactivates that habit, also at N+1 rather than
        its old slot.

        Returns:
            CreateResult with the habit id and whether it was reactivated

        Raises:
            InvalidInputError: If user id or name is missing
            HabitAlreadyExistsError: If an active habit already has this name
            DatabaseError: If a store call fails
        """
        user_id = _require_user(user_id)
        name = _clean_name(name)

        with user_lock(user_id):
            if self.habits.find_one(user_id, name=name, active=True):
                raise HabitAlreadyExistsError(f"Habit '{name}' already exists for this user")

            priority = self.habits.count_active(user_id) + 1
            existing = self.habits.find_one(user_id, name=name, active=False)

            if existing:
                existing.active = True
                existing.deleted_at = None
                existing.priority = priority
                habit = self.habits.save(existing)
                logger.info(f"Reactivated habit {habit.id} '{name}' for user {user_id} at priority {priority}")
                return CreateResult(habit_id=habit.id, reactivated=True)

            habit = self.habits.insert({
                "user_id": user_id,
                "name": name,
                "priority": priority,
                "active": True,
                "created_at": dates.now().isoformat(),
                "deleted_at": None
            })
            logger.info(f"Created habit {habit.id} '{name}' for user {user_id} at priority {priority}")
            return CreateResult(habit_id=habit.id, reactivated=False)

    def remove(self, user_id: str, habit_id: str) -> int:
        """
        Soft-delete a habit and close the gap it leaves

        The removed habit keeps its priority. Every other active habit
        ranked below it moves up by one. Both changes go to the store in
        one write.

        Returns:
            Number of habits whose priority was shifted

        Raises:
            HabitNotFoundError: If the habit is absent, not owned or already removed
            DatabaseError: If a store call fails
        """
        user_id = _require_user(user_id)

        with user_lock(user_id):
            habit = self.habits.find_one(user_id, id=habit_id, active=True)
            if not habit:
                raise HabitNotFoundError("Habit not found or doesn't belong to this user")

            shifted = self.habits.find(user_id, active=True, priority_above=habit.priority)
            for other in shifted:
                other.priority -= 1

            habit.active = False
            habit.deleted_at = dates.now()
            self.habits.save_many([habit] + shifted)

        logger.info(
            f"Removed habit {habit_id} for user {user_id} at priority {habit.priority}, "
            f"compacted {len(shifted)} habits"
        )
        return len(shifted)

    def bulk_reorder(self, user_id: str, entries: List[ReorderEntry]) -> BulkReorderResult:
        """
        Apply per-habit priority and/or name changes

        Each entry stands alone: one failing entry does not stop the
        others. This does NOT check that the resulting priorities are a
        permutation of 1..N. Callers reordering a list must send every
        active habit with its new position, or the ranking can end up
        with gaps or duplicates.

        A new name must not belong to any other habit of the user, removed
        ones included, so re-registering a name reactivates exactly one
        habit.

        Returns:
            BulkReorderResult with matched/modified counts and per-entry status

        Raises:
            DatabaseError: If a store call fails
        """
        user_id = _require_user(user_id)

        owned = {h.id: h for h in self.habits.find(user_id)}
        names = {h.name: h.id for h in owned.values()}

        results: List[ReorderEntryResult] = []
        ops = []
        matched = 0

        for entry in entries:
            habit = owned.get(entry.habit_id)
            if habit is None:
                results.append(ReorderEntryResult(habit_id=entry.habit_id, status="not_found"))
                continue
            matched += 1

            changes = {}
            if entry.name is not None:
                new_name = entry.name.strip()
                if not new_name:
                    results.append(ReorderEntryResult(
                        habit_id=habit.id, status="invalid", message="Habit name cannot be empty"
                    ))
                    continue
                holder = names.get(new_name)
                if holder is not None and holder != habit.id:
                    results.append(ReorderEntryResult(
                        habit_id=habit.id, status="already_exists",
                        message=f"Habit '{new_name}' already exists for this user"
                    ))
                    continue
                if new_name != habit.name:
                    changes["name"] = new_name

            if entry.priority is not None and entry.priority != habit.priority:
                changes["priority"] = entry.priority

            if not changes:
                results.append(ReorderEntryResult(habit_id=habit.id, status="unchanged"))
                continue

            if "name" in changes:
                names.pop(habit.name, None)
                names[changes["name"]] = habit.id
            for column, value in changes.items():
                setattr(habit, column, value)

            ops.append({"id": habit.id, "user_id": user_id, "set": changes})
            results.append(ReorderEntryResult(habit_id=habit.id, status="updated"))

        written = self.habits.bulk_update(ops) if ops else None
        modified = written.modified_count if written else 0

        logger.info(f"Bulk reorder for user {user_id}: matched {matched}, modified {modified}")
        return BulkReorderResult(matched_count=matched, modified_count=modified, results=results)

    def rename(self, user_id: str, habit_id: str, name: str) -> ReorderEntryResult:
        """
        Rename one habit

        Raises:
            InvalidInputError: If the name is empty
            HabitNotFoundError: If the habit is absent or not owned
            HabitAlreadyExistsError: If another habit of the user has the name
        """
        name = _clean_name(name)
        outcome = self.bulk_reorder(user_id, [ReorderEntry(habit_id=habit_id, name=name)])
        entry = outcome.results[0]

        if entry.status == "not_found":
            raise HabitNotFoundError("Habit not found or doesn't belong to this user")
        if entry.status == "already_exists":
            raise HabitAlreadyExistsError(entry.message)
        if entry.status == "invalid":
            raise InvalidInputError(entry.message)
        return entry
