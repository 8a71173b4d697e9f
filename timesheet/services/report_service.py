"""Report service - builds and runs the administrative reports."""
import logging
from decimal import Decimal
from typing import Optional

from bson import Decimal128

from timesheet.models.filters import CustomerFilter, parse_filters
from timesheet.models.report import (
    DailyHoursRow,
    DateRange,
    DetailedTimeEntries,
    ReportRequest,
    TotalHoursRow,
    WorkingTimeEntry,
)
from timesheet.models.settings import UserSettings
from timesheet.models.time_entry import TimeEntry
from timesheet.services.auth_service import AuthService
from timesheet.services.project_service import ProjectService
from timesheet.services.settings_service import SettingsProvider, resolve_user_settings
from timesheet.utils.report_queries import (
    build_daily_hours_pipeline,
    build_detailed_time_entries_query,
    build_total_hours_pipeline,
    build_working_time_pipeline,
    report_date_range,
)
from timesheet.utils.work_schedule import map_working_time_entry

logger = logging.getLogger(__name__)


def to_float(value) -> float:
    """Convert aggregated numbers (possibly Decimal128) to float."""
    if isinstance(value, Decimal128):
        value = value.to_decimal()
    if isinstance(value, Decimal):
        return float(value)
    return float(value or 0)


class ReportService:
    """Service for report query construction and execution."""

    def __init__(self, db, settings_provider: Optional[SettingsProvider] = None):
        """Initialize service with database connection."""
        self.db = db
        self.timecards = db["timecards"]
        self.auth = AuthService(db)
        self.projects = ProjectService(db)
        self.settings_provider = settings_provider or SettingsProvider(db)

    async def _scope(
        self,
        user_id: str,
        request: ReportRequest,
    ) -> tuple[list, Optional[DateRange], UserSettings]:
        """Resolve project ids, date range and the caller's settings."""
        user_settings = await self.settings_provider.get_user_settings(user_id)
        project_ids = await self.projects.resolve_scope(user_id, request.project_id, request.customer)
        date_range = report_date_range(
            request.period,
            request.dates,
            start_of_week=user_settings.start_of_week,
        )
        return project_ids, date_range, user_settings

    async def _aggregate(self, pipeline: list[dict]) -> list[dict]:
        logger.debug("Running report pipeline %s", pipeline)
        cursor = self.timecards.aggregate(pipeline)
        return await cursor.to_list(length=None)

    async def build_total_hours_pipeline(self, user_id: str, request: ReportRequest) -> list[dict]:
        """Pipeline for hours per user and project."""
        project_ids, date_range, _ = await self._scope(user_id, request)
        return build_total_hours_pipeline(
            project_ids, date_range, request.user_id, request.limit, request.page
        )

    async def build_daily_hours_pipeline(self, user_id: str, request: ReportRequest) -> list[dict]:
        """Pipeline for hours per user, project and day."""
        project_ids, date_range, _ = await self._scope(user_id, request)
        return build_daily_hours_pipeline(
            project_ids, date_range, request.user_id, request.limit, request.page
        )

    async def build_working_time_pipeline(self, user_id: str, request: ReportRequest) -> list[dict]:
        """Pipeline for total time per user and day."""
        project_ids, date_range, _ = await self._scope(user_id, request)
        return build_working_time_pipeline(
            project_ids, date_range, request.user_id, request.limit, request.page
        )

    async def build_detailed_time_entries_query(
        self,
        user_id: str,
        request: ReportRequest,
    ) -> tuple[dict, dict]:
        """
        Find query and options for the detailed entries table.

        Raises:
            ValidationError: If filters contain unknown keys or bad values
        """
        project_ids, date_range, user_settings = await self._scope(user_id, request)

        filters = parse_filters(request.filters) if request.filters else []
        customer_project_ids = None
        for entry_filter in filters:
            if isinstance(entry_filter, CustomerFilter):
                customer_project_ids = await self.projects.get_project_list_by_customer(
                    user_id, entry_filter.customer
                )

        return build_detailed_time_entries_query(
            project_ids,
            date_range,
            request.user_id,
            search=request.search,
            sort=request.sort,
            limit=request.limit,
            page=request.page,
            filters=filters,
            date_format=user_settings.dateformat,
            customer_project_ids=customer_project_ids,
        )

    async def total_hours_for_period(self, user_id: str, request: ReportRequest) -> list[TotalHoursRow]:
        """Run the total hours report."""
        rows = await self._aggregate(await self.build_total_hours_pipeline(user_id, request))
        return [
            TotalHoursRow(
                user_id=row["_id"]["userId"],
                project_id=row["_id"]["projectId"],
                total_hours=to_float(row["totalHours"]),
            )
            for row in rows
        ]

    async def daily_hours(self, user_id: str, request: ReportRequest) -> list[DailyHoursRow]:
        """Run the daily hours report."""
        rows = await self._aggregate(await self.build_daily_hours_pipeline(user_id, request))
        return [
            DailyHoursRow(
                user_id=row["_id"]["userId"],
                project_id=row["_id"]["projectId"],
                date=row["_id"]["date"],
                total_hours=to_float(row["totalHours"]),
            )
            for row in rows
        ]

    async def working_time(self, user_id: str, request: ReportRequest) -> list[WorkingTimeEntry]:
        """
        Run the working time report.

        Each row is mapped to a workday schedule using the settings of the
        user the row belongs to.
        """
        rows = await self._aggregate(await self.build_working_time_pipeline(user_id, request))
        global_values = await self.settings_provider.get_global_settings()

        users: dict = {}
        entries = []
        for row in rows:
            row_user_id = row["_id"]["userId"]
            if row_user_id not in users:
                users[row_user_id] = await self.auth.find_user_doc(row_user_id)
            user_doc = users[row_user_id] or {}
            profile = user_doc.get("profile") or {}
            entries.append(
                map_working_time_entry(
                    {"_id": row["_id"], "totalTime": to_float(row["totalTime"])},
                    profile.get("name"),
                    resolve_user_settings(global_values, profile),
                )
            )
        return entries

    async def detailed_time_entries(self, user_id: str, request: ReportRequest) -> DetailedTimeEntries:
        """Run the detailed time entries report."""
        query, options = await self.build_detailed_time_entries_query(user_id, request)
        logger.debug("Running detailed entries query %s %s", query, options)

        cursor = self.timecards.find(
            query,
            sort=list(options["sort"].items()),
            skip=options["skip"],
            limit=options.get("limit", 0),
        )
        docs = await cursor.to_list(length=None)
        total = await self.timecards.count_documents(query)

        entries = [
            TimeEntry.model_validate({**doc, "_id": str(doc["_id"]), "hours": to_float(doc.get("hours"))})
            for doc in docs
        ]
        return DetailedTimeEntries(entries=entries, total=total)
