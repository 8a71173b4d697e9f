"""Report router - the administrative time reports."""
from fastapi import APIRouter, Depends, HTTPException, status

from timesheet.database import get_database
from timesheet.models.report import (
    DailyHoursRow,
    DetailedTimeEntries,
    ReportRequest,
    TotalHoursRow,
    WorkingTimeEntry,
)
from timesheet.routers.gates import require_admin, require_user
from timesheet.services.report_service import ReportService
from timesheet.services.transaction_service import TransactionService


router = APIRouter(prefix="/reports", tags=["reports"])


def _bad_request(error: ValueError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=getattr(error, "code", str(error)),
    )


@router.post("/total-hours", response_model=list[TotalHoursRow])
async def total_hours_for_period(
    report_request: ReportRequest,
    user_id: str = Depends(require_admin),
    db=Depends(get_database),
):
    """
    Hours per user and project.

    Args:
        report_request: Project, customer, period, user and paging selection
        user_id: Current administrator ID (from token)
        db: Database connection

    Returns:
        List of rows with userId, projectId and totalHours

    Raises:
        HTTPException: If the caller is not an administrator (401/403) or
            the period is unknown (400)
    """
    await TransactionService(db).log_method_call(user_id, "totalHoursForPeriod", report_request)
    service = ReportService(db)

    try:
        return await service.total_hours_for_period(user_id, report_request)
    except ValueError as e:
        raise _bad_request(e)


@router.post("/daily-hours", response_model=list[DailyHoursRow])
async def daily_hours(
    report_request: ReportRequest,
    user_id: str = Depends(require_admin),
    db=Depends(get_database),
):
    """
    Hours per user, project and day.

    Args:
        report_request: Project, customer, period, user and paging selection
        user_id: Current administrator ID (from token)
        db: Database connection

    Returns:
        List of rows with userId, projectId, date and totalHours

    Raises:
        HTTPException: If the caller is not an administrator (401/403) or
            the period is unknown (400)
    """
    await TransactionService(db).log_method_call(user_id, "dailyHours", report_request)
    service = ReportService(db)

    try:
        return await service.daily_hours(user_id, report_request)
    except ValueError as e:
        raise _bad_request(e)


@router.post("/working-time", response_model=list[WorkingTimeEntry])
async def working_time(
    report_request: ReportRequest,
    user_id: str = Depends(require_admin),
    db=Depends(get_database),
):
    """
    Start, break and end times per user and day.

    Args:
        report_request: Project, customer, period, user and paging selection
        user_id: Current administrator ID (from token)
        db: Database connection

    Returns:
        List of reconstructed workdays

    Raises:
        HTTPException: If the caller is not an administrator (401/403) or
            the period is unknown (400)
    """
    await TransactionService(db).log_method_call(user_id, "workingTime", report_request)
    service = ReportService(db)

    try:
        return await service.working_time(user_id, report_request)
    except ValueError as e:
        raise _bad_request(e)


@router.post("/detailed-time-entries", response_model=DetailedTimeEntries)
async def detailed_time_entries(
    report_request: ReportRequest,
    user_id: str = Depends(require_user),
    db=Depends(get_database),
):
    """
    Paginated, searchable, sortable list of time entries.

    Args:
        report_request: Selection plus search, filters, sort and paging
        user_id: Current user ID (from token)
        db: Database connection

    Returns:
        One page of entries and the unpaginated total

    Raises:
        HTTPException: If the caller is not an active user (401), the period
            is unknown or a filter is unknown or invalid (400)
    """
    await TransactionService(db).log_method_call(user_id, "detailedTimeEntries", report_request)
    service = ReportService(db)

    try:
        return await service.detailed_time_entries(user_id, report_request)
    except ValueError as e:
        raise _bad_request(e)
