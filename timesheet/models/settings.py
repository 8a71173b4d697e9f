"""Resolved per-user settings."""
from enum import Enum

from pydantic import BaseModel, Field


class TimeUnit(str, Enum):
    """Unit the user enters and reads hours in."""

    HOURS = "h"
    DAYS = "d"
    MINUTES = "m"


class UserSettings(BaseModel):
    """Settings after applying user override, global value and default."""

    start_of_week: int = Field(alias="startOfWeek", ge=0, le=6)
    timeunit: TimeUnit
    hours_to_days: float = Field(alias="hoursToDays", gt=0)
    weekview_date_format: str = Field(alias="weekviewDateFormat")
    dateformat: str
    daily_start_time: str = Field(alias="dailyStartTime")
    break_start_time: str = Field(alias="breakStartTime")
    break_duration: float = Field(alias="breakDuration", ge=0)
    regular_working_time: float = Field(alias="regularWorkingTime", ge=0)
    add_break_to_working_time: bool = Field(alias="addBreakToWorkingTime")
    enable_transactions: bool = Field(alias="enableTransactions")

    model_config = {"populate_by_name": True, "frozen": True}
