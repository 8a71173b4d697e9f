"""Tests for TransactionService."""
import json

import pytest
from pymongo.errors import ServerSelectionTimeoutError


def enable_transactions(mock_db, enabled=True):
    mock_db["globalsettings"].find_one.return_value = {"name": "enableTransactions", "value": enabled}


@pytest.mark.asyncio
class TestLogMethodCall:
    """Tests for log_method_call."""

    async def test_disabled_by_default(self, mock_db, admin_doc):
        """Test nothing is written while the setting is off."""
        from timesheet.services.transaction_service import TransactionService

        mock_db["users"].find_one.return_value = admin_doc

        result = await TransactionService(mock_db).log_method_call(str(admin_doc["_id"]), "dailyHours", {})

        assert result is None
        mock_db["transactions"].insert_one.assert_not_called()

    async def test_records_call(self, mock_db, admin_doc):
        """Test the user snapshot, method and args are stored."""
        from timesheet.services.transaction_service import TransactionService

        enable_transactions(mock_db)
        mock_db["users"].find_one.return_value = admin_doc

        result = await TransactionService(mock_db).log_method_call(
            str(admin_doc["_id"]),
            "dailyHours",
            {"period": "this_month", "limit": 25},
        )

        assert result.method == "dailyHours"
        assert json.loads(result.args) == {"period": "this_month", "limit": 25}
        snapshot = json.loads(result.user)
        assert snapshot["_id"] == str(admin_doc["_id"])
        assert snapshot["name"] == "Ada Admin"
        assert snapshot["isAdmin"] is True
        stored = mock_db["transactions"].insert_one.call_args[0][0]
        assert stored["method"] == "dailyHours"
        assert stored["user"] == result.user

    async def test_serializes_models(self, mock_db, admin_doc):
        """Test pydantic arguments are stored with their wire names."""
        from timesheet.models.report import ReportRequest
        from timesheet.services.transaction_service import TransactionService

        enable_transactions(mock_db)
        mock_db["users"].find_one.return_value = admin_doc

        result = await TransactionService(mock_db).log_method_call(
            str(admin_doc["_id"]),
            "totalHoursForPeriod",
            ReportRequest(project_id="p1", period="this_week"),
        )

        assert json.loads(result.args)["projectId"] == "p1"

    async def test_unknown_user(self, mock_db):
        """Test an unknown caller is skipped."""
        from timesheet.services.transaction_service import TransactionService

        enable_transactions(mock_db)

        result = await TransactionService(mock_db).log_method_call("nobody", "dailyHours", {})

        assert result is None
        mock_db["transactions"].insert_one.assert_not_called()

    async def test_write_failure_swallowed(self, mock_db, admin_doc):
        """Test a database failure does not propagate."""
        from timesheet.services.transaction_service import TransactionService

        enable_transactions(mock_db)
        mock_db["users"].find_one.return_value = admin_doc
        mock_db["transactions"].insert_one.side_effect = ServerSelectionTimeoutError("down")

        result = await TransactionService(mock_db).log_method_call(str(admin_doc["_id"]), "dailyHours", {})

        assert result is None

    async def test_serialization_failure_swallowed(self, mock_db, make_user):
        """Test a user document that cannot be snapshotted does not propagate."""
        from timesheet.services.transaction_service import TransactionService

        enable_transactions(mock_db)
        doc = make_user()
        doc["emails"] = [{"address": "odd@example.com", "verified_at": object()}]
        mock_db["users"].find_one.return_value = doc

        result = await TransactionService(mock_db).log_method_call(str(doc["_id"]), "dailyHours", {})

        assert result is None
        mock_db["transactions"].insert_one.assert_not_called()

    async def test_serializes_model_lists(self, mock_db, admin_doc):
        """Test a list of cells is stored with wire names."""
        from datetime import datetime

        from timesheet.models.time_entry import TimeEntryCreate
        from timesheet.services.transaction_service import TransactionService

        enable_transactions(mock_db)
        mock_db["users"].find_one.return_value = admin_doc
        cells = [TimeEntryCreate(project_id="p1", task="Review", date=datetime(2024, 3, 11), hours=2)]

        result = await TransactionService(mock_db).log_method_call(str(admin_doc["_id"]), "upsertWeek", cells)

        assert json.loads(result.args) == [
            {"projectId": "p1", "task": "Review", "date": "2024-03-11T00:00:00", "hours": 2.0},
        ]
