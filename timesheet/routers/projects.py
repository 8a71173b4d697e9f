"""Project endpoints."""
from fastapi import APIRouter, Depends, Query

from timesheet.database import get_database
from timesheet.models.project import Project
from timesheet.routers.gates import require_user
from timesheet.services.project_service import ProjectService


router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=list[Project])
async def list_projects(
    include_archived: bool = Query(False),
    user_id: str = Depends(require_user),
    db=Depends(get_database),
):
    """
    List projects visible to the authenticated user.

    - Owned, public, or shared through the project team
    - Archived projects only with include_archived=true

    Args:
        include_archived: Also list archived projects
        user_id: Current user ID (from token)
        db: Database connection

    Returns:
        List of projects sorted by name
    """
    service = ProjectService(db)
    return await service.list_projects(user_id=user_id, include_archived=include_archived)
