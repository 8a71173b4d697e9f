"""Report request and result model definitions."""
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, model_validator

from timesheet.models.time_entry import TimeEntry

ALL = "all"

# A single id, a list of ids, or the sentinel "all".
Selector = Union[str, list[str]]


def is_all(selector: Optional[Selector]) -> bool:
    """Return True when a selector means "no restriction"."""
    if selector is None:
        return True
    if isinstance(selector, list):
        return ALL in selector
    return selector == ALL


class DateRange(BaseModel):
    """Inclusive date boundaries."""

    start_date: datetime = Field(alias="startDate")
    end_date: datetime = Field(alias="endDate")

    model_config = {"populate_by_name": True}


class SortSpec(BaseModel):
    """Column index and order token from the entries table."""

    column: Optional[int] = None
    order: Optional[str] = None


class ReportRequest(BaseModel):
    """Parameters shared by all reports."""

    project_id: Selector = Field(ALL, alias="projectId")
    customer: Selector = ALL
    period: Optional[str] = ALL
    dates: Optional[DateRange] = None
    user_id: Selector = Field(ALL, alias="userId")
    search: Optional[str] = None
    filters: Optional[dict[str, Any]] = None
    sort: Optional[SortSpec] = None
    limit: int = Field(0, ge=0)
    page: Optional[int] = Field(None, ge=1)

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def custom_period_needs_dates(self):
        if self.period == "custom" and self.dates is None:
            raise ValueError("period 'custom' requires dates")
        return self


class TotalHoursRow(BaseModel):
    """Hours per user and project."""

    user_id: str = Field(alias="userId")
    project_id: str = Field(alias="projectId")
    total_hours: float = Field(alias="totalHours")

    model_config = {"populate_by_name": True}


class DailyHoursRow(BaseModel):
    """Hours per user, project and day."""

    user_id: str = Field(alias="userId")
    project_id: str = Field(alias="projectId")
    date: datetime
    total_hours: float = Field(alias="totalHours")

    model_config = {"populate_by_name": True}


class WorkingTimeEntry(BaseModel):
    """Reconstructed workday of one user."""

    date: datetime
    resource: Optional[str] = None
    start_time: str = Field(alias="startTime")
    break_start_time: str = Field(alias="breakStartTime")
    break_end_time: str = Field(alias="breakEndTime")
    end_time: str = Field(alias="endTime")
    total_time: float = Field(alias="totalTime")
    regular_working_time: float = Field(alias="regularWorkingTime")
    regular_working_time_difference: float = Field(alias="regularWorkingTimeDifference")

    model_config = {"populate_by_name": True}


class DetailedTimeEntries(BaseModel):
    """One page of time entries and the unpaginated count."""

    entries: list[TimeEntry]
    total: int
