"""Timecard router - the week table."""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from timesheet.database import get_database
from timesheet.errors import ValidationError
from timesheet.models.time_entry import TimeEntryCreate, WeekDelete, WeekSummary
from timesheet.routers.gates import require_user
from timesheet.services.timecard_service import TimecardService
from timesheet.services.transaction_service import TransactionService


router = APIRouter(prefix="/timecards", tags=["timecards"])


@router.post("/week")
async def upsert_week(
    entries: list[TimeEntryCreate],
    user_id: str = Depends(require_user),
    db=Depends(get_database),
):
    """
    Save the cells of a week table.

    Args:
        entries: Cells with hours in the user's time unit
        user_id: Current user ID (from token)
        db: Database connection

    Returns:
        Counts of inserted, updated and deleted entries

    Raises:
        HTTPException: If a task is empty or a project is not visible (400)
    """
    await TransactionService(db).log_method_call(user_id, "upsertWeek", entries)
    service = TimecardService(db)

    try:
        return await service.upsert_week(user_id=user_id, entries=entries)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.code,
        )


@router.delete("/week")
async def delete_week(
    week: WeekDelete,
    user_id: str = Depends(require_user),
    db=Depends(get_database),
):
    """
    Delete a task's entries for a week (permanent).

    Args:
        week: Project, task and inclusive date range
        user_id: Current user ID (from token)
        db: Database connection

    Returns:
        Dictionary with deleted_count
    """
    await TransactionService(db).log_method_call(user_id, "deleteTimeCardsForWeek", week)
    service = TimecardService(db)

    return await service.delete_week(user_id=user_id, week=week)


@router.get("/week", response_model=WeekSummary)
async def week_summary(
    date: Optional[datetime] = Query(None, description="Any day of the week, defaults to today"),
    user_id: str = Depends(require_user),
    db=Depends(get_database),
):
    """
    Totals for the week containing a date.

    Args:
        date: Reference date
        user_id: Current user ID (from token)
        db: Database connection

    Returns:
        Per task, per day and week totals in the user's time unit
    """
    service = TimecardService(db)

    return await service.week_summary(
        user_id=user_id,
        reference_date=date or datetime.utcnow(),
    )


@router.get("/tasks", response_model=list[str])
async def search_tasks(
    q: str = Query("", description="Search text"),
    limit: int = Query(10, ge=1, le=100),
    user_id: str = Depends(require_user),
    db=Depends(get_database),
):
    """
    Fuzzy search over the user's task names.

    Args:
        q: Search text
        limit: Maximum number of names
        user_id: Current user ID (from token)
        db: Database connection

    Returns:
        Task names, substring matches first, then similar names
    """
    service = TimecardService(db)

    return await service.search_tasks(user_id=user_id, query=q, limit=limit)
