"""Transaction service - audit trail of invoked operations."""
import json
import logging
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel
from pymongo.errors import PyMongoError

from timesheet.models.transaction import Transaction
from timesheet.services.auth_service import AuthService
from timesheet.services.settings_service import SettingsProvider

logger = logging.getLogger(__name__)


def serialize_args(args: Any) -> str:
    """JSON text of an operation's arguments."""
    if isinstance(args, BaseModel):
        return args.model_dump_json(by_alias=True)
    if isinstance(args, list):
        args = [
            arg.model_dump(mode="json", by_alias=True) if isinstance(arg, BaseModel) else arg
            for arg in args
        ]
    return json.dumps(args, default=str)


def user_snapshot(user_doc: dict) -> str:
    """JSON snapshot of the acting user."""
    return json.dumps({
        "_id": str(user_doc["_id"]),
        "name": (user_doc.get("profile") or {}).get("name"),
        "emails": user_doc.get("emails", []),
        "isAdmin": bool(user_doc.get("isAdmin", False)),
    })


class TransactionService:
    """Service for recording operation calls when transactions are enabled."""

    def __init__(self, db, settings_provider: Optional[SettingsProvider] = None):
        """Initialize service with database connection."""
        self.db = db
        self.transactions = db["transactions"]
        self.auth = AuthService(db)
        self.settings_provider = settings_provider or SettingsProvider(db)

    async def log_method_call(
        self,
        user_id: Optional[str],
        method: str,
        args: Any,
    ) -> Optional[Transaction]:
        """
        Persist a transaction for an operation about to run.

        Database and serialization failures are logged and swallowed so the
        operation itself still runs.

        Args:
            user_id: Acting user ID
            method: Operation name
            args: Operation arguments (dict, pydantic model or list of models)

        Returns:
            The stored transaction, or None when logging is disabled or failed
        """
        try:
            if not await self.settings_provider.get_global_setting("enableTransactions"):
                return None

            user_doc = await self.auth.find_user_doc(user_id)
            if user_doc is None:
                logger.warning("No user %r to record transaction %s for", user_id, method)
                return None

            transaction = Transaction(
                user=user_snapshot(user_doc),
                method=method,
                args=serialize_args(args),
                timestamp=datetime.utcnow(),
            )
            await self.transactions.insert_one(transaction.model_dump())
            return transaction
        except (PyMongoError, TypeError, ValueError):
            logger.exception("Failed to record transaction for %s", method)
            return None
