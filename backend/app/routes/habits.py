"""
Habit Routes - Endpoints for habit management and summaries
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from app.core.dependencies import get_ordering_manager, get_completion_aggregator
from app.core.exceptions import HabitTrackerException
from app.models.habit import (
    CreateHabitRequest,
    RenameHabitRequest,
    ReorderRequest,
    ToggleRequest
)
from app.services.habits import OrderingManager, CompletionAggregator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/habits", tags=["habits"])


def to_http_exception(error: HabitTrackerException) -> HTTPException:
    """Map an application error to its stable status and code"""
    return HTTPException(
        status_code=error.status_code,
        detail={"code": error.code, "message": str(error)}
    )


def unexpected(action: str, error: Exception) -> HTTPException:
    logger.exception(f"Unexpected error {action}: {error}")
    return HTTPException(status_code=500, detail=f"Unexpected error: {str(error)}")


@router.get("/{user_id}")
def list_habits(
    user_id: str,
    date: str = Query(..., description="Day as YYYY-MM-DD or an ISO timestamp"),
    aggregator: CompletionAggregator = Depends(get_completion_aggregator)
):
    """Get active habits in priority order with completion state for a day"""
    try:
        habits = aggregator.list(user_id, date)
        return {"habits": [h.model_dump(mode="json") for h in habits]}
    except HabitTrackerException as e:
        raise to_http_exception(e)
    except Exception as e:
        raise unexpected("fetching habits", e)


@router.get("/{user_id}/summary")
def get_summary(
    user_id: str,
    start_date: str = Query(..., description="First day of the range"),
    end_date: str = Query(..., description="Last day of the range (inclusive)"),
    aggregator: CompletionAggregator = Depends(get_completion_aggregator)
):
    """Get per-day total and completed habits for an inclusive date range"""
    try:
        days = aggregator.summary(user_id, start_date, end_date)
        return {"summary": [d.model_dump(mode="json") for d in days]}
    except HabitTrackerException as e:
        raise to_http_exception(e)
    except Exception as e:
        raise unexpected("building summary", e)


@router.post("", status_code=201)
def create_habit(
    request: CreateHabitRequest,
    response: Response,
    manager: OrderingManager = Depends(get_ordering_manager)
):
    """Add a habit, or reactivate a removed habit with the same name"""
    try:
        result = manager.create(request.user_id, request.name)
        if result.reactivated:
            response.status_code = 200
        return {"id": result.habit_id, "reactivated": result.reactivated}
    except HabitTrackerException as e:
        raise to_http_exception(e)
    except Exception as e:
        raise unexpected("creating habit", e)


@router.put("/{user_id}/reorder")
def reorder_habits(
    user_id: str,
    request: ReorderRequest,
    manager: OrderingManager = Depends(get_ordering_manager)
):
    """
    Apply new priorities and/or names to several habits

    Entries are applied independently and reported one by one. Priorities
    are stored as sent: submit the full active list in its new order to
    keep the ranking gap-free.
    """
    try:
        return manager.bulk_reorder(user_id, request.habits).model_dump(mode="json")
    except HabitTrackerException as e:
        raise to_http_exception(e)
    except Exception as e:
        raise unexpected("reordering habits", e)


@router.put("/{user_id}/{habit_id}")
def rename_habit(
    user_id: str,
    habit_id: str,
    request: RenameHabitRequest,
    manager: OrderingManager = Depends(get_ordering_manager)
):
    """Rename a habit"""
    try:
        manager.rename(user_id, habit_id, request.name)
        return {"id": habit_id, "name": request.name.strip()}
    except HabitTrackerException as e:
        raise to_http_exception(e)
    except Exception as e:
        raise unexpected("renaming habit", e)


@router.post("/{user_id}/{habit_id}/toggle")
def toggle_habit(
    user_id: str,
    habit_id: str,
    request: ToggleRequest,
    aggregator: CompletionAggregator = Depends(get_completion_aggregator)
):
    """Mark a habit done or not done on a day"""
    try:
        result = aggregator.toggle(user_id, habit_id, request.date, request.is_done)
        return result.model_dump(mode="json")
    except HabitTrackerException as e:
        raise to_http_exception(e)
    except Exception as e:
        raise unexpected("toggling habit", e)


@router.delete("/{user_id}/{habit_id}")
def remove_habit(
    user_id: str,
    habit_id: str,
    manager: OrderingManager = Depends(get_ordering_manager)
):
    """Soft-delete a habit and close the gap in the ranking"""
    try:
        shifted = manager.remove(user_id, habit_id)
        return {
            "message": "Habit deleted successfully",
            "habitId": habit_id,
            "compacted": shifted
        }
    except HabitTrackerException as e:
        raise to_http_exception(e)
    except Exception as e:
        raise unexpected("deleting habit", e)
