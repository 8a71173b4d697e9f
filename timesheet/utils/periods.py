"""Resolve named report periods to concrete UTC date ranges."""
from datetime import datetime
from typing import Optional

import pendulum

from timesheet.errors import InvalidPeriod
from timesheet.models.report import DateRange

PERIODS = (
    "today",
    "yesterday",
    "this_week",
    "last_week",
    "this_month",
    "last_month",
    "this_year",
    "last_year",
    "last_7_days",
    "last_30_days",
)


def week_start(day: pendulum.DateTime, start_of_week: int = 1) -> pendulum.DateTime:
    """
    Return the first day of the week containing ``day``.

    Args:
        day: Any moment within the week
        start_of_week: Weekday index the week starts on (0 = Sunday, 1 = Monday)

    Returns:
        Start of day of the week's first day
    """
    # datetime.weekday() counts from Monday = 0
    offset = (day.weekday() - (start_of_week - 1)) % 7
    return day.subtract(days=offset).start_of("day")


def _day(moment: pendulum.DateTime) -> tuple:
    return moment.start_of("day"), moment.end_of("day")


def resolve_period(
    period: str,
    start_of_week: int = 1,
    now: Optional[datetime] = None,
) -> DateRange:
    """
    Convert a period token to inclusive start/end boundaries.

    "custom" and "all" are not periods in this sense: callers supply
    explicit dates for "custom" and skip date filtering for "all".

    Args:
        period: One of PERIODS
        start_of_week: Weekday index weeks start on
        now: Reference moment (defaults to the current time)

    Returns:
        DateRange in UTC

    Raises:
        InvalidPeriod: If the token is not recognized
    """
    if now is None:
        today = pendulum.now("UTC")
    else:
        today = pendulum.instance(now, tz="UTC").in_timezone("UTC")

    if period == "today":
        start, end = _day(today)
    elif period == "yesterday":
        start, end = _day(today.subtract(days=1))
    elif period in ("this_week", "last_week"):
        start = week_start(today, start_of_week)
        if period == "last_week":
            start = start.subtract(weeks=1)
        end = start.add(days=6).end_of("day")
    elif period == "this_month":
        start, end = today.start_of("month"), today.end_of("month")
    elif period == "last_month":
        previous = today.start_of("month").subtract(months=1)
        start, end = previous, previous.end_of("month")
    elif period == "this_year":
        start, end = today.start_of("year"), today.end_of("year")
    elif period == "last_year":
        previous = today.start_of("year").subtract(years=1)
        start, end = previous, previous.end_of("year")
    elif period == "last_7_days":
        start, end = today.subtract(days=6).start_of("day"), today.end_of("day")
    elif period == "last_30_days":
        start, end = today.subtract(days=29).start_of("day"), today.end_of("day")
    else:
        raise InvalidPeriod(period)

    return DateRange(start_date=start, end_date=end)
