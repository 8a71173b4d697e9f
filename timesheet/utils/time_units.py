"""Conversion between stored hours and the user's time unit."""
from timesheet.models.settings import TimeUnit, UserSettings


def to_hours(value: float, user_settings: UserSettings) -> float:
    """Convert a value entered in the user's unit to hours."""
    if user_settings.timeunit == TimeUnit.DAYS:
        return value * user_settings.hours_to_days
    if user_settings.timeunit == TimeUnit.MINUTES:
        return value / 60
    return value


def time_in_user_unit(hours: float, user_settings: UserSettings) -> float:
    """Convert stored hours to the user's unit."""
    if user_settings.timeunit == TimeUnit.DAYS:
        return hours / user_settings.hours_to_days
    if user_settings.timeunit == TimeUnit.MINUTES:
        return hours * 60
    return hours
