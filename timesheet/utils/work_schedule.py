"""Reconstruct a workday schedule from a day's aggregated hours."""
from datetime import datetime, timedelta
from typing import Optional

from timesheet.models.report import WorkingTimeEntry
from timesheet.models.settings import UserSettings

TIME_FORMAT = "%H:%M"


def _parse_time(value: str) -> datetime:
    return datetime.strptime(value, TIME_FORMAT)


def map_working_time_entry(
    record: dict,
    resource: Optional[str],
    user_settings: UserSettings,
) -> WorkingTimeEntry:
    """
    Derive start, break and end times for one user and day.

    The day ends ``totalTime`` hours after the daily start time, plus the
    break duration when breaks count on top of working time. The break
    window is only reported when the day ends after the break would start.

    Args:
        record: Working time aggregation row ``{"_id": {"userId", "date"}, "totalTime"}``
        resource: Display name of the user
        user_settings: Settings resolved for that user

    Returns:
        WorkingTimeEntry with all times formatted as HH:mm
    """
    total_time = float(record["totalTime"])
    start_time = _parse_time(user_settings.daily_start_time)
    break_start = _parse_time(user_settings.break_start_time)
    break_end = break_start + timedelta(hours=user_settings.break_duration)

    end_time = start_time + timedelta(hours=total_time)
    if user_settings.add_break_to_working_time:
        end_time += timedelta(hours=user_settings.break_duration)

    has_break = end_time > break_start

    return WorkingTimeEntry(
        date=record["_id"]["date"],
        resource=resource,
        start_time=start_time.strftime(TIME_FORMAT),
        break_start_time=break_start.strftime(TIME_FORMAT) if has_break else "",
        break_end_time=break_end.strftime(TIME_FORMAT) if has_break else "",
        end_time=end_time.strftime(TIME_FORMAT),
        total_time=total_time,
        regular_working_time=user_settings.regular_working_time,
        regular_working_time_difference=total_time - user_settings.regular_working_time,
    )
