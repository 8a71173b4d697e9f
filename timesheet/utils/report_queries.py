"""Translate report parameters into MongoDB pipelines and find queries.

Everything here is pure: project ids, date ranges and settings are resolved
by the caller and passed in.
"""
import re
from datetime import datetime
from typing import Optional

import pendulum

from timesheet.errors import ValidationError
from timesheet.models.filters import CustomerFilter, DateFilter, HoursFilter, StateFilter
from timesheet.models.report import DateRange, Selector, SortSpec, is_all
from timesheet.utils.periods import resolve_period

SORT_COLUMNS = {
    0: "projectId",
    1: "date",
    2: "task",
    3: "userId",
    4: "hours",
}
SORT_ORDERS = {"asc": 1, "desc": -1}
DEFAULT_SORT = {"date": -1}


def report_date_range(
    period: Optional[str],
    dates: Optional[DateRange],
    start_of_week: int = 1,
    now: Optional[datetime] = None,
) -> Optional[DateRange]:
    """
    Date boundaries for a report, or None when dates are not filtered.

    Raises:
        InvalidPeriod: If period is not "custom", "all" or a known token
    """
    if period == "custom":
        return dates
    if period and period != "all":
        return resolve_period(period, start_of_week=start_of_week, now=now)
    return None


def build_match(
    project_ids: list,
    date_range: Optional[DateRange],
    user_id: Selector,
) -> dict:
    """Selector restricting time entries to project, date and user scope."""
    match = {"projectId": {"$in": list(project_ids)}}
    if date_range is not None:
        match["date"] = {"$gte": date_range.start_date, "$lte": date_range.end_date}
    if not is_all(user_id):
        match["userId"] = {"$in": user_id} if isinstance(user_id, list) else user_id
    return match


def skip_for_page(limit: int, page: Optional[int]) -> int:
    """Number of entries before ``page`` (1-based)."""
    if page:
        return (page - 1) * limit
    return 0


def _pagination(pipeline: list, limit: int, page: Optional[int]) -> list:
    pipeline.append({"$skip": skip_for_page(limit, page)})
    if limit > 0:
        pipeline.append({"$limit": limit})
    return pipeline


def build_total_hours_pipeline(
    project_ids: list,
    date_range: Optional[DateRange],
    user_id: Selector,
    limit: int = 0,
    page: Optional[int] = None,
) -> list[dict]:
    """
    Hours per user and project for a period.

    Hours are cast to decimal before summing since stored values may be
    strings. The trailing date sort runs on grouped rows that carry no date
    and therefore leaves their order to the engine.
    """
    pipeline = [
        {"$addFields": {"convertedHours": {"$toDecimal": "$hours"}}},
        {"$match": build_match(project_ids, date_range, user_id)},
        {
            "$group": {
                "_id": {"userId": "$userId", "projectId": "$projectId"},
                "totalHours": {"$sum": "$convertedHours"},
            }
        },
        {"$sort": dict(DEFAULT_SORT)},
    ]
    return _pagination(pipeline, limit, page)


def build_daily_hours_pipeline(
    project_ids: list,
    date_range: Optional[DateRange],
    user_id: Selector,
    limit: int = 0,
    page: Optional[int] = None,
) -> list[dict]:
    """Hours per user, project and day."""
    pipeline = [
        {"$match": build_match(project_ids, date_range, user_id)},
        {
            "$group": {
                "_id": {"userId": "$userId", "projectId": "$projectId", "date": "$date"},
                "totalHours": {"$sum": "$hours"},
            }
        },
        {"$sort": dict(DEFAULT_SORT)},
    ]
    return _pagination(pipeline, limit, page)


def build_working_time_pipeline(
    project_ids: list,
    date_range: Optional[DateRange],
    user_id: Selector,
    limit: int = 0,
    page: Optional[int] = None,
) -> list[dict]:
    """
    Total time per user and day.

    Stage order is match, group, skip, sort, limit: rows are skipped before
    they are sorted.
    """
    pipeline = [
        {"$match": build_match(project_ids, date_range, user_id)},
        {
            "$group": {
                "_id": {"userId": "$userId", "date": "$date"},
                "totalTime": {"$sum": "$hours"},
            }
        },
        {"$skip": skip_for_page(limit, page)},
        {"$sort": dict(DEFAULT_SORT)},
    ]
    if limit > 0:
        pipeline.append({"$limit": limit})
    return pipeline


def task_search_regex(search: str) -> dict:
    """Case-insensitive substring match with regex metacharacters escaped."""
    return {"$regex": f".*{re.escape(search)}.*", "$options": "i"}


def build_sort(sort: Optional[SortSpec]) -> dict:
    """Map a table column index and order token to a sort mapping."""
    if sort is None:
        return dict(DEFAULT_SORT)
    field = SORT_COLUMNS.get(sort.column, "date")
    return {field: SORT_ORDERS.get(sort.order, -1)}


def parse_day(value: str, date_format: str) -> DateRange:
    """Full-day range for a date written in ``date_format`` (e.g. DD.MM.YYYY)."""
    try:
        day = pendulum.from_format(value, date_format, tz="UTC")
    except ValueError as e:
        raise ValidationError("notifications.invalid_date_filter", str(e)) from e
    return DateRange(start_date=day.start_of("day"), end_date=day.end_of("day"))


def translate_filters(
    filters: list,
    date_format: str,
    customer_project_ids: Optional[list] = None,
) -> dict:
    """
    Build the query fragment for parsed entry filters.

    Args:
        filters: Variants returned by ``parse_filters``
        date_format: Format single-day date filters are written in
        customer_project_ids: Visible projects of the filtered customer(s)

    Returns:
        Query mapping for all filters combined
    """
    query = {}
    for entry_filter in filters:
        if isinstance(entry_filter, CustomerFilter):
            query["projectId"] = {"$in": list(customer_project_ids or [])}
        elif isinstance(entry_filter, StateFilter):
            if entry_filter.state == "new":
                query["$or"] = [{"state": {"$exists": False}}, {"state": "new"}]
            else:
                query["state"] = entry_filter.state
        elif isinstance(entry_filter, DateFilter):
            if isinstance(entry_filter.date, str):
                day = parse_day(entry_filter.date, date_format)
            else:
                day = entry_filter.date
            query["date"] = {"$gte": day.start_date, "$lte": day.end_date}
        elif isinstance(entry_filter, HoursFilter):
            query["hours"] = entry_filter.hours
    return query


def build_detailed_time_entries_query(
    project_ids: list,
    date_range: Optional[DateRange],
    user_id: Selector,
    search: Optional[str] = None,
    sort: Optional[SortSpec] = None,
    limit: int = 0,
    page: Optional[int] = None,
    filters: Optional[list] = None,
    date_format: str = "DD.MM.YYYY",
    customer_project_ids: Optional[list] = None,
) -> tuple[dict, dict]:
    """
    Find query and options for the paginated time entry table.

    Returns:
        (query, options) where options holds sort, skip and optionally limit
    """
    query = build_match(project_ids, date_range, user_id)
    if search:
        query["task"] = task_search_regex(search)

    options = {
        "sort": build_sort(sort),
        "skip": skip_for_page(limit, page),
    }
    if limit > 0:
        options["limit"] = limit

    if filters:
        filter_query = translate_filters(filters, date_format, customer_project_ids)
        return {"$and": [query, filter_query]}, options
    return query, options
