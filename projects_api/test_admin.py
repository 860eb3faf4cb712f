"""
projects_api/test_admin.py

Admin endpoints: global listing with owner summaries and deletion of any
user's project. Non-admins are rejected after authentication.

Run:
    pytest projects_api/test_admin.py -v
"""

from conftest import auth_headers, create_project


class TestAdminList:
    def test_lists_projects_across_owners(self, client, user_a, user_b, admin):
        create_project(client, user_a["token"], title="Project of A")
        create_project(client, user_b["token"], title="Project of B")

        response = client.get("/admin/projects", headers=auth_headers(admin["token"]))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total"] == 2
        assert [p["title"] for p in data["items"]] == ["Project of B", "Project of A"]

    def test_items_carry_owner_summary(self, client, user_a, admin):
        create_project(client, user_a["token"], title="Owned Project")

        response = client.get("/admin/projects", headers=auth_headers(admin["token"]))

        item = response.json()["data"]["items"][0]
        assert item["owner_id"] == user_a["user"]["id"]
        assert item["owner"] == {
            "id": user_a["user"]["id"],
            "name": "User One",
            "email": "user1@example.com",
        }

    def test_pagination_applies(self, client, user_a, admin):
        for i in range(3):
            create_project(client, user_a["token"], title=f"Project {i}")

        response = client.get("/admin/projects?limit=2&offset=2", headers=auth_headers(admin["token"]))

        data = response.json()["data"]
        assert len(data["items"]) == 1
        assert data["items"][0]["title"] == "Project 0"
        assert data["total"] == 3
        assert data["limit"] == 2
        assert data["offset"] == 2

    def test_non_admin_is_forbidden(self, client, user_a):
        response = client.get("/admin/projects", headers=auth_headers(user_a["token"]))

        assert response.status_code == 403
        assert response.json()["error"] == {"code": "FORBIDDEN", "message": "Admin access required."}

    def test_unauthenticated_is_unauthorized(self, client):
        response = client.get("/admin/projects")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"


class TestAdminDelete:
    def test_admin_deletes_any_project(self, client, user_a, admin):
        project = create_project(client, user_a["token"])

        response = client.delete(f"/admin/projects/{project['id']}", headers=auth_headers(admin["token"]))

        assert response.status_code == 200
        assert response.json()["data"] == {"message": "Project deleted successfully"}

        response = client.get(f"/projects/{project['id']}", headers=auth_headers(user_a["token"]))
        assert response.status_code == 404

    def test_missing_project_is_not_found(self, client, admin):
        response = client.delete("/admin/projects/does-not-exist", headers=auth_headers(admin["token"]))

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_non_admin_cannot_use_admin_delete(self, client, user_a, user_b):
        project = create_project(client, user_a["token"])

        response = client.delete(f"/admin/projects/{project['id']}", headers=auth_headers(user_a["token"]))
        assert response.status_code == 403

        response = client.delete(f"/admin/projects/{project['id']}", headers=auth_headers(user_b["token"]))
        assert response.status_code == 403

        response = client.get(f"/projects/{project['id']}", headers=auth_headers(user_a["token"]))
        assert response.status_code == 200

