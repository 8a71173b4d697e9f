"""Settings provider - resolves user overrides, global values and defaults."""
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId

from timesheet.models.settings import UserSettings

# Used when neither the user profile nor the globalsettings collection
# has a value.
GLOBAL_DEFAULTS: dict[str, Any] = {
    "startOfWeek": 1,
    "timeunit": "h",
    "hoursToDays": 8,
    "weekviewDateFormat": "ddd, DD.MM",
    "dateformat": "DD.MM.YYYY",
    "dailyStartTime": "09:00",
    "breakStartTime": "12:00",
    "breakDuration": 0.5,
    "regularWorkingTime": 8,
    "addBreakToWorkingTime": False,
    "enableTransactions": False,
}

# Never overridden per user.
GLOBAL_ONLY = frozenset({"addBreakToWorkingTime", "enableTransactions"})


def resolve_user_settings(global_values: dict, profile: Optional[dict]) -> UserSettings:
    """
    Apply a user's profile overrides on top of global values.

    Args:
        global_values: Global settings, already merged with GLOBAL_DEFAULTS
        profile: The user's profile document, if any

    Returns:
        Immutable UserSettings
    """
    values = {**GLOBAL_DEFAULTS, **global_values}
    for name, value in (profile or {}).items():
        if name in GLOBAL_DEFAULTS and name not in GLOBAL_ONLY and value not in (None, ""):
            values[name] = value
    return UserSettings.model_validate(values)


class SettingsProvider:
    """Read-only access to global and per-user settings."""

    def __init__(self, db):
        """Initialize provider with database connection."""
        self.db = db
        self.globalsettings = db["globalsettings"]
        self.users = db["users"]

    async def get_global_setting(self, name: str) -> Any:
        """
        Get one global setting.

        Returns:
            Stored value, else the default, else False
        """
        doc = await self.globalsettings.find_one({"name": name})
        if doc is not None:
            return doc["value"]
        return GLOBAL_DEFAULTS.get(name, False)

    async def get_global_settings(self) -> dict:
        """Get all known global settings with defaults filled in."""
        cursor = self.globalsettings.find({"name": {"$in": list(GLOBAL_DEFAULTS)}})
        docs = await cursor.to_list(length=None)
        values = dict(GLOBAL_DEFAULTS)
        values.update({doc["name"]: doc["value"] for doc in docs})
        return values

    async def get_user_settings(
        self,
        user_id: Optional[str] = None,
        user_doc: Optional[dict] = None,
    ) -> UserSettings:
        """
        Resolve settings for a user.

        Args:
            user_id: User ID, looked up when user_doc is not given
            user_doc: Already loaded user document

        Returns:
            UserSettings (global values only when the user is unknown)
        """
        if user_doc is None and user_id:
            try:
                user_doc = await self.users.find_one({"_id": ObjectId(user_id)})
            except InvalidId:
                user_doc = None

        global_values = await self.get_global_settings()
        profile = user_doc.get("profile") if user_doc else None
        return resolve_user_settings(global_values, profile)
