"""Timecard service - week table saves, weekly totals and task search."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import pendulum

from timesheet.errors import ValidationError
from timesheet.models.settings import UserSettings
from timesheet.models.time_entry import (
    TimeEntryCreate,
    WeekDelete,
    WeekSummary,
    WeekSummaryTask,
)
from timesheet.services.project_service import ProjectService
from timesheet.services.settings_service import SettingsProvider
from timesheet.utils.periods import week_start
from timesheet.utils.similarity import calculate_similarity
from timesheet.utils.time_units import time_in_user_unit, to_hours

logger = logging.getLogger(__name__)

MIN_TASK_SIMILARITY = 0.5


def utc_midnight(value: datetime) -> datetime:
    """Calendar day of ``value`` as a naive UTC midnight datetime."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return datetime(value.year, value.month, value.day)


def prepare_week(entries: list[TimeEntryCreate], user_settings: UserSettings) -> list[dict]:
    """
    Validate, convert and merge the cells of one week table save.

    Hours are converted from the user's unit to hours and cells with the same
    project, task and day are summed.

    Raises:
        ValidationError: If any entry has an empty task
    """
    merged: dict[tuple, dict] = {}
    for entry in entries:
        task = entry.task.strip()
        if not task:
            raise ValidationError("notifications.enter_task")

        day = utc_midnight(entry.date)
        key = (entry.project_id, task, day)
        hours = to_hours(entry.hours, user_settings)
        if key in merged:
            merged[key]["hours"] += hours
        else:
            merged[key] = {
                "projectId": entry.project_id,
                "task": task,
                "date": day,
                "hours": hours,
            }
    return list(merged.values())


class TimecardService:
    """Service for the user's own time entries."""

    def __init__(self, db, settings_provider: Optional[SettingsProvider] = None):
        """Initialize service with database connection."""
        self.db = db
        self.timecards = db["timecards"]
        self.projects = ProjectService(db)
        self.settings_provider = settings_provider or SettingsProvider(db)

    async def upsert_week(self, user_id: str, entries: list[TimeEntryCreate]) -> dict:
        """
        Save the cells of a week table.

        Existing entries for the same user, project, task and day get their
        hours replaced; zero hours delete them.

        Args:
            user_id: User ID
            entries: Cells in the user's time unit

        Returns:
            Counts of inserted, updated and deleted entries

        Raises:
            ValidationError: If a task is empty or a project is not visible
        """
        user_settings = await self.settings_provider.get_user_settings(user_id)
        prepared = prepare_week(entries, user_settings)

        for project_id in {entry["projectId"] for entry in prepared}:
            if not await self.projects.is_visible(user_id, project_id):
                raise ValidationError("notifications.project_not_found")

        counts = {"inserted": 0, "updated": 0, "deleted": 0}
        now = datetime.utcnow()
        for entry in prepared:
            selector = {
                "userId": user_id,
                "projectId": entry["projectId"],
                "task": entry["task"],
                "date": entry["date"],
            }
            if entry["hours"] == 0:
                result = await self.timecards.delete_many(selector)
                counts["deleted"] += result.deleted_count
                continue

            existing = await self.timecards.find_one(selector)
            if existing:
                await self.timecards.update_one(
                    {"_id": existing["_id"]},
                    {"$set": {"hours": entry["hours"], "updated_at": now}},
                )
                counts["updated"] += 1
            else:
                await self.timecards.insert_one({
                    **selector,
                    "hours": entry["hours"],
                    "created_at": now,
                    "updated_at": now,
                })
                counts["inserted"] += 1

        logger.info("Saved week for %s: %s", user_id, counts)
        return counts

    async def delete_week(self, user_id: str, week: WeekDelete) -> dict:
        """
        Delete a task's entries between two dates (inclusive).

        Returns:
            Dictionary with deleted_count
        """
        result = await self.timecards.delete_many({
            "userId": user_id,
            "projectId": week.project_id,
            "task": week.task,
            "date": {"$gte": week.start_date, "$lte": week.end_date},
        })
        return {"deleted_count": result.deleted_count}

    async def week_summary(self, user_id: str, reference_date: datetime) -> WeekSummary:
        """
        Totals of the week containing ``reference_date``.

        Values are converted to the user's time unit.
        """
        user_settings = await self.settings_provider.get_user_settings(user_id)
        start = week_start(pendulum.instance(reference_date, tz="UTC"), user_settings.start_of_week)
        start_date = utc_midnight(start)
        end_date = start_date + timedelta(days=7) - timedelta(microseconds=1)
        days = [(start_date + timedelta(days=offset)).date().isoformat() for offset in range(7)]

        cursor = self.timecards.find({
            "userId": user_id,
            "date": {"$gte": start_date, "$lte": end_date},
        })
        docs = await cursor.to_list(length=None)

        rows: dict[tuple, dict] = {}
        day_totals = {day: 0.0 for day in days}
        for doc in docs:
            day = doc["date"].date().isoformat()
            hours = float(doc["hours"])
            row = rows.setdefault((doc["projectId"], doc["task"]), {day: 0.0 for day in days})
            row[day] += hours
            day_totals[day] += hours

        tasks = [
            WeekSummaryTask(
                project_id=project_id,
                task=task,
                hours={day: time_in_user_unit(value, user_settings) for day, value in row.items()},
                total=time_in_user_unit(sum(row.values()), user_settings),
            )
            for (project_id, task), row in sorted(rows.items())
        ]
        return WeekSummary(
            start_date=start_date,
            end_date=end_date,
            days=days,
            tasks=tasks,
            day_totals={day: time_in_user_unit(value, user_settings) for day, value in day_totals.items()},
            week_total=time_in_user_unit(sum(day_totals.values()), user_settings),
        )

    async def search_tasks(self, user_id: str, query: str, limit: int = 10) -> list[str]:
        """
        Rank the user's task names against a search string.

        Names containing the query come first; others need a similarity of
        at least MIN_TASK_SIMILARITY.
        """
        if not query:
            return []

        project_ids = await self.projects.get_project_list_by_id(user_id, "all")
        tasks = await self.timecards.distinct(
            "task",
            {"userId": user_id, "projectId": {"$in": project_ids}},
        )

        needle = query.lower()
        scored = []
        for task in tasks:
            contains = needle in task.lower()
            score = calculate_similarity(query, task)
            if contains or score >= MIN_TASK_SIMILARITY:
                scored.append((not contains, -score, task))
        scored.sort()
        return [task for _, _, task in scored[:limit]]
