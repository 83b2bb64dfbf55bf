"""
Integration tests for workspace endpoints.
"""


def _personal_workspace(client, headers):
    return client.get("/api/workspaces", headers=headers).json()[0]


def test_list_includes_personal_workspace(client, auth_headers):
    workspaces = client.get("/api/workspaces", headers=auth_headers).json()

    assert len(workspaces) == 1
    assert workspaces[0]["name"] == "Personal Workspace"
    assert workspaces[0]["project_count"] == 0


def test_create_workspace_and_conflict(client, auth_headers):
    response = client.post("/api/workspaces", json={"name": "Marketing", "plan_type": "team"}, headers=auth_headers)
    assert response.status_code == 201
    assert response.json()["plan_type"] == "team"

    duplicate = client.post("/api/workspaces", json={"name": "  marketing "}, headers=auth_headers)
    assert duplicate.status_code == 409


def test_other_user_may_reuse_name(client, auth_headers, other_user_headers):
    assert client.post("/api/workspaces", json={"name": "Marketing"}, headers=auth_headers).status_code == 201
    assert client.post("/api/workspaces", json={"name": "Marketing"}, headers=other_user_headers).status_code == 201


def test_free_plan_workspace_cap(client, auth_headers):
    """Test a free user can own at most 3 workspaces."""
    assert client.post("/api/workspaces", json={"name": "Two"}, headers=auth_headers).status_code == 201
    assert client.post("/api/workspaces", json={"name": "Three"}, headers=auth_headers).status_code == 201

    response = client.post("/api/workspaces", json={"name": "Four"}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_state"
    assert response.json()["limit"] == 3


def test_pro_plan_raises_workspace_cap(client, auth_headers, test_user, set_plan):
    set_plan(test_user, "pro")
    for name in ("Two", "Three", "Four"):
        assert client.post("/api/workspaces", json={"name": name}, headers=auth_headers).status_code == 201


def test_workspace_detail(client, auth_headers):
    workspace = _personal_workspace(client, auth_headers)
    client.post("/api/projects", json={"title": "A", "content_type": "article", "content": "one two"},
                headers=auth_headers)
    client.post("/api/projects", json={"title": "B", "content_type": "email", "content": "three four five"},
                headers=auth_headers)

    response = client.get(f"/api/workspaces/{workspace['id']}", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["project_count"] == 2
    assert data["total_words"] == 5
    assert data["content_types"] == ["article", "email"]
    assert {p["title"] for p in data["projects"]} == {"A", "B"}


def test_update_workspace(client, auth_headers):
    workspace = _personal_workspace(client, auth_headers)

    response = client.put(
        f"/api/workspaces/{workspace['id']}",
        json={"name": "Renamed", "owner_id": "someone-else"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Renamed"
    assert response.json()["owner_id"] == workspace["owner_id"]


def test_cannot_delete_only_workspace(client, auth_headers):
    workspace = _personal_workspace(client, auth_headers)

    response = client.delete(f"/api/workspaces/{workspace['id']}", headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_state"


def test_cannot_delete_workspace_with_projects(client, auth_headers):
    second = client.post("/api/workspaces", json={"name": "Second"}, headers=auth_headers).json()
    client.post(
        "/api/projects",
        json={"title": "Keep me", "content_type": "article", "workspace_id": second["id"]},
        headers=auth_headers,
    )

    response = client.delete(f"/api/workspaces/{second['id']}", headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["project_count"] == 1


def test_delete_empty_workspace(client, auth_headers):
    second = client.post("/api/workspaces", json={"name": "Second"}, headers=auth_headers).json()

    assert client.delete(f"/api/workspaces/{second['id']}", headers=auth_headers).status_code == 204
    assert client.get(f"/api/workspaces/{second['id']}", headers=auth_headers).status_code == 404


def test_other_user_forbidden(client, auth_headers, other_user_headers):
    workspace = _personal_workspace(client, auth_headers)
    url = f"/api/workspaces/{workspace['id']}"

    assert client.get(url, headers=other_user_headers).status_code == 403
    assert client.put(url, json={"name": "Taken"}, headers=other_user_headers).status_code == 403
    assert client.delete(url, headers=other_user_headers).status_code == 403
    assert client.get(f"{url}/stats", headers=other_user_headers).status_code == 403


def test_workspace_stats(client, auth_headers):
    workspace = _personal_workspace(client, auth_headers)
    projects = [
        {"title": "A", "content_type": "article", "content": "one two three", "status": "completed"},
        {"title": "B", "content_type": "article", "content": "four", "status": "in_progress"},
        {"title": "C", "content_type": "social_post", "content": ""},
    ]
    for payload in projects:
        client.post("/api/projects", json=payload, headers=auth_headers)

    response = client.get(f"/api/workspaces/{workspace['id']}/stats", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {
        "total_projects": 3,
        "total_words": 4,
        "completed_projects": 1,
        "in_progress_projects": 1,
        "draft_projects": 1,
        "content_types": {"article": 2, "social_post": 1},
        "recent_activity": 3,
    }
