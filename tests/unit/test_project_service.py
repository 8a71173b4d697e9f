"""Tests for ProjectService and project scope selectors."""
import pytest


def visible_to(project, user_id, include_archived=False):
    """Reference predicate mirroring the visibility selector."""
    allowed = (
        project.get("userId") == user_id
        or project.get("public") is True
        or user_id in project.get("team", [])
    )
    return allowed and (include_archived or not project.get("archived", False))


PROJECTS = [
    {"_id": "p1", "name": "Own", "userId": "u1"},
    {"_id": "p2", "name": "Other", "userId": "u2"},
    {"_id": "p3", "name": "Public", "userId": "u2", "public": True},
    {"_id": "p4", "name": "Team", "userId": "u2", "team": ["u1", "u3"]},
    {"_id": "p5", "name": "Archived", "userId": "u1", "archived": True},
    {"_id": "p6", "name": "Live", "userId": "u1", "archived": False},
]


class TestSelectors:
    """Tests for the selector builders."""

    def test_visibility_selector(self):
        """Test ownership, public and team access with archived excluded."""
        from timesheet.services.project_service import visibility_selector

        assert visibility_selector("u1") == {
            "$and": [
                {"$or": [{"userId": "u1"}, {"public": True}, {"team": "u1"}]},
                {"$or": [{"archived": False}, {"archived": {"$exists": False}}]},
            ]
        }

    def test_visibility_selector_include_archived(self):
        """Test the archived clause can be dropped."""
        from timesheet.services.project_service import visibility_selector

        selector = visibility_selector("u1", include_archived=True)

        assert len(selector["$and"]) == 1

    def test_project_id_selector_all(self):
        """Test "all" adds no id restriction."""
        from timesheet.services.project_service import project_id_selector, visibility_selector

        assert project_id_selector("u1", "all") == visibility_selector("u1")

    def test_project_id_selector_list(self):
        """Test named ids are intersected with the visibility predicate."""
        from timesheet.services.project_service import project_id_selector

        selector = project_id_selector("u1", ["p1", "p2"])

        assert selector["_id"] == {"$in": ["p1", "p2"]}
        assert "$and" in selector

    def test_project_id_selector_single(self):
        """Test a single id matches exactly."""
        from timesheet.services.project_service import project_id_selector

        assert project_id_selector("u1", "p1")["_id"] == "p1"

    def test_customer_selector(self):
        """Test customers narrow the visible projects."""
        from timesheet.services.project_service import customer_selector

        assert customer_selector("u1", ["c1", "c2"])["customer"] == {"$in": ["c1", "c2"]}
        assert customer_selector("u1", "c1")["customer"] == "c1"
        assert "customer" not in customer_selector("u1", "all")

    def test_reference_predicate(self):
        """Test which sample projects user u1 may see."""
        visible = [p["_id"] for p in PROJECTS if visible_to(p, "u1")]

        assert visible == ["p1", "p3", "p4", "p6"]


@pytest.mark.asyncio
class TestProjectService:
    """Tests for ProjectService lookups."""

    async def test_get_project_list_by_id(self, mock_db, make_cursor):
        """Test only visible named projects are returned."""
        from timesheet.services.project_service import ProjectService

        # The database applies the selector; it finds only the owned project.
        mock_db["projects"].find.return_value = make_cursor([{"_id": "p1"}])

        project_ids = await ProjectService(mock_db).get_project_list_by_id("u1", ["p1", "p2"])

        assert project_ids == ["p1"]
        selector, projection = mock_db["projects"].find.call_args[0]
        assert selector["_id"] == {"$in": ["p1", "p2"]}
        assert projection == {"_id": 1}

    async def test_no_matches_is_empty(self, mock_db):
        """Test no matches returns an empty list instead of failing."""
        from timesheet.services.project_service import ProjectService

        assert await ProjectService(mock_db).get_project_list_by_id("u1", ["nope"]) == []

    async def test_resolve_scope_prefers_customer(self, mock_db, make_cursor):
        """Test a customer selection overrides project ids."""
        from timesheet.services.project_service import ProjectService

        mock_db["projects"].find.return_value = make_cursor([{"_id": "p7"}])

        project_ids = await ProjectService(mock_db).resolve_scope("u1", ["p1"], "c1")

        assert project_ids == ["p7"]
        selector = mock_db["projects"].find.call_args[0][0]
        assert selector["customer"] == "c1"
        assert "_id" not in selector

    async def test_resolve_scope_all_customers(self, mock_db, make_cursor):
        """Test customer "all" falls back to project ids."""
        from timesheet.services.project_service import ProjectService

        mock_db["projects"].find.return_value = make_cursor([{"_id": "p1"}])

        await ProjectService(mock_db).resolve_scope("u1", "p1", "all")

        selector = mock_db["projects"].find.call_args[0][0]
        assert selector["_id"] == "p1"

    async def test_list_projects(self, mock_db, make_cursor):
        """Test visible projects are returned as models sorted by name."""
        from timesheet.services.project_service import ProjectService

        mock_db["projects"].find.return_value = make_cursor(
            [p for p in PROJECTS if visible_to(p, "u1")]
        )

        projects = await ProjectService(mock_db).list_projects("u1")

        assert [p.id for p in projects] == ["p1", "p3", "p4", "p6"]
        assert projects[2].team == ["u1", "u3"]
        mock_db["projects"].find.return_value.sort.assert_called_once_with("name", 1)

    async def test_is_visible(self, mock_db):
        """Test single project visibility checks."""
        from timesheet.services.project_service import ProjectService

        service = ProjectService(mock_db)
        assert await service.is_visible("u1", "p2") is False

        mock_db["projects"].find_one.return_value = {"_id": "p1"}
        assert await service.is_visible("u1", "p1") is True
