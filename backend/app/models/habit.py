"""
Pydantic models for habits and completion events
"""
from datetime import date, datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator

# Alias so models can have a field named "date"
Day = date


class Habit(BaseModel):
    """A user's habit as stored in the habits table"""
    id: str
    user_id: str
    name: str
    priority: int = Field(..., ge=1)
    active: bool = True
    created_at: datetime
    deleted_at: Optional[datetime] = None

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        """Store ids may come back as ints or UUIDs"""
        return str(v) if v is not None else v


class CompletionEvent(BaseModel):
    """A record that a habit was done on a given day"""
    id: str
    user_id: str
    habit_id: str
    day: date

    @field_validator("id", "user_id", "habit_id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v) if v is not None else v


class BulkUpdateResult(BaseModel):
    """Counts reported by a best-effort bulk update"""
    matched_count: int = 0
    modified_count: int = 0


# ============================================================================
# ENGINE RESULTS
# ============================================================================

class CreateResult(BaseModel):
    """Outcome of registering a habit name"""
    habit_id: str
    reactivated: bool = False


class HabitStatus(BaseModel):
    """A habit with its completion state for one day"""
    habit_id: str
    name: str
    priority: int
    is_completed: bool


class ToggleResult(BaseModel):
    """Outcome of a toggle request"""
    habit_id: str
    day: date
    is_done: bool
    changed: bool


class DaySummary(BaseModel):
    """Habits that existed and habits completed on one day"""
    date: Day
    completed_habits: List[str]
    total_habits: List[str]


class ReorderEntry(BaseModel):
    """One requested change in a bulk reorder"""
    habit_id: str = Field(..., min_length=1)
    priority: Optional[int] = Field(None, ge=1, description="New priority")
    name: Optional[str] = Field(None, description="New display name")


class ReorderEntryResult(BaseModel):
    """Per-entry outcome of a bulk reorder"""
    habit_id: str
    status: Literal["updated", "unchanged", "not_found", "already_exists", "invalid"]
    message: Optional[str] = None


class BulkReorderResult(BaseModel):
    """Outcome of a bulk reorder"""
    matched_count: int
    modified_count: int
    results: List[ReorderEntryResult]


# ============================================================================
# REQUEST BODIES
# ============================================================================

class CreateHabitRequest(BaseModel):
    """Request model for adding a new habit"""
    user_id: str = Field(..., min_length=1, description="Owning user id")
    name: str = Field(..., min_length=1, max_length=200, description="Habit name")


class RenameHabitRequest(BaseModel):
    """Request model for renaming a habit"""
    name: str = Field(..., min_length=1, max_length=200, description="New habit name")


class ReorderRequest(BaseModel):
    """
    Request model for bulk reordering.

    Entries are applied one by one. The server does not check that the
    submitted priorities form a permutation of 1..N; send the whole
    active list when reordering.
    """
    habits: List[ReorderEntry] = Field(..., min_length=1)


class ToggleRequest(BaseModel):
    """Request model for marking a habit done or not done on a day"""
    date: str = Field(..., description="Day as YYYY-MM-DD or an ISO timestamp")
    is_done: bool = Field(..., alias="isDone")

    model_config = {"populate_by_name": True}
