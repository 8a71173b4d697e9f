"""Settings endpoints."""
from fastapi import APIRouter, Depends

from timesheet.database import get_database
from timesheet.models.settings import UserSettings
from timesheet.routers.gates import require_user
from timesheet.services.settings_service import SettingsProvider


router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=UserSettings)
async def get_settings(
    user_id: str = Depends(require_user),
    db=Depends(get_database),
):
    """
    Settings of the current user.

    Args:
        user_id: Current user ID (from token)
        db: Database connection

    Returns:
        Profile overrides applied over global values and defaults
    """
    return await SettingsProvider(db).get_user_settings(user_id)
