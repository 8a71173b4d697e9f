"""Authentication service - accounts, login and authorization gates."""
import logging
from datetime import datetime
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId

from timesheet.errors import AuthError
from timesheet.models.user import User
from timesheet.utils.auth import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


def primary_email(user_doc: dict) -> str:
    """First registered email address of a user document."""
    emails = user_doc.get("emails") or []
    return emails[0]["address"] if emails else ""


class AuthService:
    """Service for handling user authentication and authorization."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.users = db["users"]

    def _doc_to_user(self, doc: dict) -> User:
        """Convert database document to User model."""
        return User(
            _id=str(doc["_id"]),
            email=primary_email(doc),
            name=(doc.get("profile") or {}).get("name", ""),
            is_admin=bool(doc.get("isAdmin", False)),
            inactive=bool(doc.get("inactive", False)),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    async def register_user(self, email: str, password: str, name: str) -> User:
        """
        Register a new user.

        Args:
            email: User email address
            password: Plain text password
            name: Display name stored in the profile

        Returns:
            User object (without password)

        Raises:
            ValueError: If email is already registered
        """
        existing = await self.users.find_one({"emails.address": email})
        if existing:
            raise ValueError("Email already registered")

        now = datetime.utcnow()
        user_doc = {
            "emails": [{"address": email, "verified": False}],
            "hashed_password": hash_password(password),
            "profile": {"name": name},
            "isAdmin": False,
            "inactive": False,
            "created_at": now,
            "updated_at": now,
        }

        result = await self.users.insert_one(user_doc)
        user_doc["_id"] = result.inserted_id

        return self._doc_to_user(user_doc)

    async def login(self, email: str, password: str) -> str:
        """
        Login user and return JWT token.

        Raises:
            ValueError: If credentials are invalid or the account is inactive
        """
        user_doc = await self.users.find_one({"emails.address": email})
        if not user_doc or not verify_password(password, user_doc["hashed_password"]):
            raise ValueError("Invalid email or password")

        if user_doc.get("inactive"):
            raise ValueError("Account is inactive")

        return create_access_token(user_id=str(user_doc["_id"]))

    async def find_user_doc(self, user_id: Optional[str]) -> Optional[dict]:
        """
        Look up a raw user document.

        Returns:
            The document, or None for a missing or malformed id
        """
        if not user_id:
            return None
        try:
            object_id = ObjectId(user_id)
        except (InvalidId, TypeError):
            return None
        return await self.users.find_one({"_id": object_id})

    async def get_user_by_id(self, user_id: str) -> User:
        """
        Get user by ID.

        Raises:
            ValueError: If user not found
        """
        user_doc = await self.find_user_doc(user_id)
        if not user_doc:
            raise ValueError("User not found")

        return self._doc_to_user(user_doc)

    async def require_authenticated(self, user_id: Optional[str]) -> dict:
        """
        Gate: the caller must be a known, active user.

        Returns:
            The caller's user document

        Raises:
            AuthError: If the user is absent, unknown or inactive
        """
        user_doc = await self.find_user_doc(user_id)
        if not user_doc or user_doc.get("inactive"):
            logger.warning("Denied unauthenticated or inactive caller %r", user_id)
            raise AuthError()
        return user_doc

    async def require_admin(self, user_id: Optional[str]) -> dict:
        """
        Gate: the caller must be an active administrator.

        Raises:
            AuthError: If the caller fails the authentication gate or is not an admin
        """
        user_doc = await self.require_authenticated(user_id)
        if not user_doc.get("isAdmin"):
            logger.warning("Denied non-admin caller %s", user_id)
            raise AuthError(admin_required=True)
        return user_doc
