"""Tests for project endpoints: public reads, authenticated writes, ownership."""

from datetime import timedelta
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from src.ticprojects.core.config import get_settings
from src.ticprojects.core.security import create_access_token
from src.ticprojects.models import Project, ProjectFile
from tests.factories import ProjectFactory, ProjectFileFactory, utc_now

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]

VALID_PROJECT = {"title": "Solar Tracker", "description": "Arduino solar tracker build"}


async def _create(client: AsyncClient, user: dict, **fields) -> dict:
    response = await client.post(
        "/projects", data={**VALID_PROJECT, **fields}, headers=user["headers"]
    )
    assert response.status_code == 201, response.text
    return response.json()["project"]


async def _count(db_session: AsyncSession, model) -> int:
    result = await db_session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


@pytest.fixture
def small_upload_limit(engine, monkeypatch: pytest.MonkeyPatch) -> int:
    """Shrink the upload cap so oversized files are cheap to produce."""
    monkeypatch.setenv("MAX_UPLOAD_SIZE_BYTES", "1024")
    get_settings.cache_clear()
    return 1024


class TestProjectLifecycle:
    async def test_create_edit_delete_flow(self, client: AsyncClient, alice: dict) -> None:
        created = await client.post("/projects", data=VALID_PROJECT, headers=alice["headers"])
        assert created.status_code == 201
        body = created.json()
        assert body["message"] == "Project created successfully"
        project = body["project"]
        assert project["title"] == "Solar Tracker"
        assert project["author_id"] == alice["id"]
        assert project["author_name"] == "Alice"
        assert project["file_path"] is None

        listed = await client.get("/projects")
        assert listed.status_code == 200
        assert [p["id"] for p in listed.json()["projects"]] == [project["id"]]

        updated = await client.put(
            f"/projects/{project['id']}",
            json={"title": "Solar Tracker v2", "description": "Arduino solar tracker build"},
            headers=alice["headers"],
        )
        assert updated.status_code == 200
        assert updated.json()["message"] == "Project updated successfully"
        assert updated.json()["project"]["title"] == "Solar Tracker v2"

        deleted = await client.delete(f"/projects/{project['id']}", headers=alice["headers"])
        assert deleted.status_code == 200
        assert deleted.json() == {"message": "Project deleted successfully"}

        missing = await client.get(f"/projects/{project['id']}")
        assert missing.status_code == 404
        assert missing.json()["detail"] == "Project not found"

    async def test_get_project_is_public(self, client: AsyncClient, alice: dict) -> None:
        project = await _create(client, alice)

        response = await client.get(f"/projects/{project['id']}")

        assert response.status_code == 200
        assert response.json()["project"] == project

    async def test_get_unknown_project(self, client: AsyncClient, engine) -> None:
        response = await client.get("/projects/999999")

        assert response.status_code == 404
        assert response.json()["detail"] == "Project not found"

    async def test_list_empty(self, client: AsyncClient, engine) -> None:
        response = await client.get("/projects")

        assert response.status_code == 200
        assert response.json() == {"projects": []}


class TestProjectValidation:
    @pytest.mark.parametrize(
        ("fields", "message"),
        [
            ({"title": ""}, "Title and description are required"),
            ({"description": ""}, "Title and description are required"),
            ({"title": "AB"}, "Title must be at least 3 characters"),
            ({"description": "123456789"}, "Description must be at least 10 characters"),
        ],
    )
    async def test_create_rejects_invalid_fields(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        alice: dict,
        fields: dict,
        message: str,
    ) -> None:
        response = await client.post(
            "/projects", data={**VALID_PROJECT, **fields}, headers=alice["headers"]
        )

        assert response.status_code == 400
        assert response.json()["detail"] == message
        assert await _count(db_session, Project) == 0

    async def test_create_without_fields(
        self, client: AsyncClient, alice: dict
    ) -> None:
        response = await client.post("/projects", data={}, headers=alice["headers"])

        assert response.status_code == 400
        assert response.json()["detail"] == "Title and description are required"

    async def test_create_accepts_minimum_lengths(self, client: AsyncClient, alice: dict) -> None:
        project = await _create(client, alice, title="ABC", description="1234567890")

        assert project["title"] == "ABC"
        assert project["description"] == "1234567890"

    async def test_update_applies_same_rules(self, client: AsyncClient, alice: dict) -> None:
        project = await _create(client, alice)

        response = await client.put(
            f"/projects/{project['id']}",
            json={"title": "OK!", "description": "too short"},
            headers=alice["headers"],
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Description must be at least 10 characters"

        unchanged = await client.get(f"/projects/{project['id']}")
        assert unchanged.json()["project"]["title"] == project["title"]


class TestAuthentication:
    async def test_create_without_token(
        self, client: AsyncClient, db_session: AsyncSession
    ) -> None:
        response = await client.post("/projects", data=VALID_PROJECT)

        assert response.status_code == 401
        assert response.json()["detail"] == "No token provided"
        assert await _count(db_session, Project) == 0

    @pytest.mark.parametrize(
        "authorization",
        ["Bearer not-a-jwt", "Token abc", "Bearer "],
    )
    async def test_create_with_invalid_token(
        self, client: AsyncClient, engine, authorization: str
    ) -> None:
        response = await client.post(
            "/projects", data=VALID_PROJECT, headers={"Authorization": authorization}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid or expired token"

    async def test_create_with_expired_token(self, client: AsyncClient, alice: dict) -> None:
        token = create_access_token(alice["id"], alice["email"], timedelta(seconds=-1))

        response = await client.post(
            "/projects", data=VALID_PROJECT, headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid or expired token"

    async def test_token_for_unknown_identity(self, client: AsyncClient, engine) -> None:
        token = create_access_token(424242, "ghost@example.com")

        response = await client.post(
            "/projects", data=VALID_PROJECT, headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401

    async def test_update_and_delete_require_token(
        self, client: AsyncClient, alice: dict
    ) -> None:
        project = await _create(client, alice)

        update = await client.put(f"/projects/{project['id']}", json=VALID_PROJECT)
        delete = await client.delete(f"/projects/{project['id']}")

        assert update.status_code == 401
        assert delete.status_code == 401


class TestOwnership:
    async def test_other_identity_cannot_edit(
        self, client: AsyncClient, alice: dict, bob: dict
    ) -> None:
        project = await _create(client, alice)

        response = await client.put(
            f"/projects/{project['id']}",
            json={"title": "Hijacked", "description": "Taken over by someone else"},
            headers=bob["headers"],
        )

        assert response.status_code == 403
        assert response.json()["detail"] == "You can only edit your own projects"
        current = await client.get(f"/projects/{project['id']}")
        assert current.json()["project"]["title"] == "Solar Tracker"

    async def test_other_identity_cannot_delete(
        self, client: AsyncClient, alice: dict, bob: dict
    ) -> None:
        project = await _create(client, alice)

        response = await client.delete(f"/projects/{project['id']}", headers=bob["headers"])

        assert response.status_code == 403
        assert response.json()["detail"] == "You can only delete your own projects"
        assert (await client.get(f"/projects/{project['id']}")).status_code == 200

    async def test_forbidden_wins_over_invalid_fields(
        self, client: AsyncClient, alice: dict, bob: dict
    ) -> None:
        project = await _create(client, alice)

        response = await client.put(
            f"/projects/{project['id']}",
            json={"title": "", "description": ""},
            headers=bob["headers"],
        )

        assert response.status_code == 403

    async def test_edit_unknown_project(self, client: AsyncClient, alice: dict) -> None:
        response = await client.put(
            "/projects/999999", json=VALID_PROJECT, headers=alice["headers"]
        )

        assert response.status_code == 404

    async def test_delete_unknown_project(self, client: AsyncClient, alice: dict) -> None:
        response = await client.delete("/projects/999999", headers=alice["headers"])

        assert response.status_code == 404


class TestListing:
    async def test_newest_first_with_author_names(
        self, client: AsyncClient, db_session: AsyncSession, alice: dict, bob: dict
    ) -> None:
        now = utc_now()
        p1 = ProjectFactory.build(title="P1", author_id=alice["id"], created_at=now - timedelta(2))
        p2 = ProjectFactory.build(title="P2", author_id=bob["id"], created_at=now - timedelta(1))
        p3 = ProjectFactory.build(title="P3", author_id=alice["id"], created_at=now)
        db_session.add_all([p1, p2, p3])
        await db_session.commit()

        response = await client.get("/projects")

        projects = response.json()["projects"]
        assert [p["title"] for p in projects] == ["P3", "P2", "P1"]
        assert [p["author_name"] for p in projects] == ["Alice", "Bob", "Alice"]

    async def test_equal_timestamps_order_by_id(
        self, client: AsyncClient, db_session: AsyncSession, alice: dict
    ) -> None:
        same_time = utc_now()
        first = ProjectFactory.build(title="First", author_id=alice["id"], created_at=same_time)
        db_session.add(first)
        await db_session.flush()
        second = ProjectFactory.build(title="Second", author_id=alice["id"], created_at=same_time)
        db_session.add(second)
        await db_session.commit()

        response = await client.get("/projects")

        ids = [p["id"] for p in response.json()["projects"]]
        assert ids == sorted(ids)
        assert ids == [first.id, second.id]

    async def test_listing_includes_first_attachment(
        self, client: AsyncClient, db_session: AsyncSession, alice: dict
    ) -> None:
        project = ProjectFactory.build(author_id=alice["id"])
        db_session.add(project)
        await db_session.flush()
        db_session.add(ProjectFileFactory.build(project_id=project.id, file_path="/uploads/a.pdf"))
        await db_session.flush()
        db_session.add(ProjectFileFactory.build(project_id=project.id, file_path="/uploads/b.pdf"))
        await db_session.commit()

        response = await client.get("/projects")

        [listed] = response.json()["projects"]
        assert listed["file_path"] == "/uploads/a.pdf"


class TestAttachments:
    async def test_upload_is_stored_and_served(
        self, client: AsyncClient, db_session: AsyncSession, alice: dict, upload_dir: Path
    ) -> None:
        content = b"%PDF-1.4 solar tracker schematics"
        response = await client.post(
            "/projects",
            data=VALID_PROJECT,
            files={"file": ("Schematics.PDF", content, "application/pdf")},
            headers=alice["headers"],
        )

        assert response.status_code == 201
        file_path = response.json()["project"]["file_path"]
        assert file_path.startswith("/uploads/")
        assert file_path.endswith(".PDF")

        stored_name = file_path.removeprefix("/uploads/")
        assert (upload_dir / stored_name).read_bytes() == content
        assert await _count(db_session, ProjectFile) == 1

        served = await client.get(file_path)
        assert served.status_code == 200
        assert served.content == content

    async def test_oversized_upload_is_rejected(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        alice: dict,
        upload_dir: Path,
        small_upload_limit: int,
    ) -> None:
        response = await client.post(
            "/projects",
            data=VALID_PROJECT,
            files={"file": ("big.bin", b"x" * (small_upload_limit + 1), "application/octet-stream")},
            headers=alice["headers"],
        )

        assert response.status_code == 413
        assert await _count(db_session, Project) == 0
        assert await _count(db_session, ProjectFile) == 0
        assert list(upload_dir.iterdir()) == []

    async def test_upload_at_limit_is_accepted(
        self, client: AsyncClient, alice: dict, small_upload_limit: int
    ) -> None:
        response = await client.post(
            "/projects",
            data=VALID_PROJECT,
            files={"file": ("exact.bin", b"x" * small_upload_limit, "application/octet-stream")},
            headers=alice["headers"],
        )

        assert response.status_code == 201

    async def test_invalid_fields_store_no_file(
        self, client: AsyncClient, alice: dict, upload_dir: Path
    ) -> None:
        response = await client.post(
            "/projects",
            data={**VALID_PROJECT, "title": "AB"},
            files={"file": ("notes.txt", b"notes", "text/plain")},
            headers=alice["headers"],
        )

        assert response.status_code == 400
        assert list(upload_dir.iterdir()) == []

    async def test_delete_removes_attachment_rows_and_file(
        self, client: AsyncClient, db_session: AsyncSession, alice: dict, upload_dir: Path
    ) -> None:
        created = await client.post(
            "/projects",
            data=VALID_PROJECT,
            files={"file": ("notes.txt", b"notes", "text/plain")},
            headers=alice["headers"],
        )
        project = created.json()["project"]
        stored_name = project["file_path"].removeprefix("/uploads/")
        assert (upload_dir / stored_name).exists()

        response = await client.delete(f"/projects/{project['id']}", headers=alice["headers"])

        assert response.status_code == 200
        assert await _count(db_session, Project) == 0
        assert await _count(db_session, ProjectFile) == 0
        assert not (upload_dir / stored_name).exists()

    async def test_delete_succeeds_when_file_already_gone(
        self, client: AsyncClient, alice: dict, upload_dir: Path
    ) -> None:
        created = await client.post(
            "/projects",
            data=VALID_PROJECT,
            files={"file": ("notes.txt", b"notes", "text/plain")},
            headers=alice["headers"],
        )
        project = created.json()["project"]
        (upload_dir / project["file_path"].removeprefix("/uploads/")).unlink()

        response = await client.delete(f"/projects/{project['id']}", headers=alice["headers"])

        assert response.status_code == 200

    async def test_failed_commit_reports_create_failure(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        alice: dict,
        upload_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(
            AsyncSession,
            "commit",
            AsyncMock(side_effect=OperationalError("COMMIT", {}, Exception("disk I/O error"))),
        )

        response = await client.post(
            "/projects",
            data=VALID_PROJECT,
            files={"file": ("notes.txt", b"notes", "text/plain")},
            headers=alice["headers"],
        )

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to create project"
        assert await _count(db_session, Project) == 0
        assert list(upload_dir.iterdir()) == []
