"""
Pydantic models for the application
"""
from app.models.habit import (
    Habit,
    CompletionEvent,
    BulkUpdateResult,
    CreateResult,
    HabitStatus,
    ToggleResult,
    DaySummary,
    ReorderEntry,
    ReorderEntryResult,
    BulkReorderResult,
    CreateHabitRequest,
    RenameHabitRequest,
    ReorderRequest,
    ToggleRequest
)

__all__ = [
    "Habit",
    "CompletionEvent",
    "BulkUpdateResult",
    "CreateResult",
    "HabitStatus",
    "ToggleResult",
    "DaySummary",
    "ReorderEntry",
    "ReorderEntryResult",
    "BulkReorderResult",
    "CreateHabitRequest",
    "RenameHabitRequest",
    "ReorderRequest",
    "ToggleRequest"
]
