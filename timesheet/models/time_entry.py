"""Time entry (timecard) model definitions."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class TimeEntryBase(BaseModel):
    """Base time entry fields."""

    project_id: str = Field(alias="projectId")
    task: str
    date: datetime
    hours: float = Field(ge=0)

    model_config = {"populate_by_name": True}


class TimeEntryCreate(TimeEntryBase):
    """One cell of the week table, hours given in the user's time unit."""

    pass


class WeekDelete(BaseModel):
    """Remove a task's entries for one week."""

    project_id: str = Field(alias="projectId")
    task: str
    start_date: datetime = Field(alias="startDate")
    end_date: datetime = Field(alias="endDate")

    model_config = {"populate_by_name": True}


class TimeEntry(TimeEntryBase):
    """Stored time entry as listed by the detailed entries report."""

    id: str = Field(alias="_id", serialization_alias="id")
    user_id: str = Field(alias="userId")
    state: Optional[str] = None


class WeekSummaryTask(BaseModel):
    """Hours of one project/task row of the week table."""

    project_id: str = Field(alias="projectId")
    task: str
    hours: dict[str, float]
    total: float

    model_config = {"populate_by_name": True}


class WeekSummary(BaseModel):
    """Weekly totals converted to the user's time unit."""

    start_date: datetime
    end_date: datetime
    days: list[str]
    tasks: list[WeekSummaryTask]
    day_totals: dict[str, float]
    week_total: float
