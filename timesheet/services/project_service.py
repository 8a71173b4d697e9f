"""Project service - which projects a user may report on."""
from typing import Optional

from timesheet.models.project import Project
from timesheet.models.report import Selector, is_all


def visibility_selector(user_id: str, include_archived: bool = False) -> dict:
    """
    Projects the user owns, that are public, or whose team includes the user.

    Archived projects are excluded unless requested; a missing ``archived``
    field counts as not archived.
    """
    clauses = [{"$or": [{"userId": user_id}, {"public": True}, {"team": user_id}]}]
    if not include_archived:
        clauses.append({"$or": [{"archived": False}, {"archived": {"$exists": False}}]})
    return {"$and": clauses}


def _restrict(selector: dict, field: str, value: Selector) -> dict:
    if isinstance(value, list):
        selector[field] = {"$in": value}
    else:
        selector[field] = value
    return selector


def project_id_selector(user_id: str, project_id: Selector) -> dict:
    """Visible projects, narrowed to the given id(s) unless "all"."""
    selector = visibility_selector(user_id)
    if is_all(project_id):
        return selector
    return _restrict(selector, "_id", project_id)


def customer_selector(user_id: str, customer: Selector) -> dict:
    """Visible projects, narrowed to the given customer(s) unless "all"."""
    selector = visibility_selector(user_id)
    if is_all(customer):
        return selector
    return _restrict(selector, "customer", customer)


class ProjectService:
    """Service for resolving project scope."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.projects = db["projects"]

    async def _ids(self, selector: dict) -> list:
        cursor = self.projects.find(selector, {"_id": 1})
        docs = await cursor.to_list(length=None)
        return [doc["_id"] for doc in docs]

    async def list_projects(
        self,
        user_id: str,
        include_archived: bool = False,
    ) -> list[Project]:
        """
        List projects visible to a user.

        Args:
            user_id: User ID
            include_archived: Also return archived projects

        Returns:
            List of projects sorted by name
        """
        cursor = self.projects.find(visibility_selector(user_id, include_archived)).sort("name", 1)
        docs = await cursor.to_list(length=None)
        return [Project.model_validate(doc) for doc in docs]

    async def get_project_list_by_id(self, user_id: str, project_id: Selector) -> list:
        """
        Ids of visible projects among ``project_id``.

        Naming a project the user has no rights to does not make it visible;
        an empty list is returned when nothing matches.
        """
        return await self._ids(project_id_selector(user_id, project_id))

    async def get_project_list_by_customer(self, user_id: str, customer: Selector) -> list:
        """Ids of visible projects belonging to ``customer``."""
        return await self._ids(customer_selector(user_id, customer))

    async def resolve_scope(
        self,
        user_id: str,
        project_id: Selector,
        customer: Optional[Selector] = None,
    ) -> list:
        """
        Project ids a report covers.

        A customer selection other than "all" takes precedence over project ids.
        """
        if not is_all(customer):
            return await self.get_project_list_by_customer(user_id, customer)
        return await self.get_project_list_by_id(user_id, project_id)

    async def is_visible(self, user_id: str, project_id: str) -> bool:
        """Check a single project is visible to the user."""
        doc = await self.projects.find_one(project_id_selector(user_id, project_id), {"_id": 1})
        return doc is not None
