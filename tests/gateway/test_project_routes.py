"""项目路由测试"""


async def _create_project(client, headers, name):
    resp = await client.post("/api/projects", json={"name": name}, headers=headers)
    assert resp.status_code == 201
    return resp.json()["project"]


class TestProjects:
    async def test_list_sorted_by_name(self, client, owner, fake_supabase):
        await _create_project(client, owner["headers"], "Zeta")
        await _create_project(client, owner["headers"], "Alpha")
        fake_supabase.insert_row("projects", name="Other", user_id="someone-else")

        resp = await client.get("/api/projects", headers=owner["headers"])
        assert [p["name"] for p in resp.json()["projects"]] == ["Alpha", "Zeta"]

    async def test_name_is_trimmed(self, client, owner):
        project = await _create_project(client, owner["headers"], "  Launch  ")
        assert project["name"] == "Launch"

    async def test_blank_name_rejected(self, client, owner, fake_supabase):
        resp = await client.post("/api/projects", json={"name": "   "}, headers=owner["headers"])
        assert resp.status_code == 422
        assert resp.json()["error"]["fields"] == {"name": "Project name is required"}
        assert fake_supabase.tables["projects"] == []

    async def test_detail_includes_tasks(self, client, owner):
        project = await _create_project(client, owner["headers"], "Launch")
        await client.post(
            "/api/tasks",
            json={
                "name": "Ship it",
                "description": "Release build",
                "due_at": "2030-02-01T00:00:00+00:00",
                "priority": "med",
                "project_id": project["id"],
            },
            headers=owner["headers"],
        )
        await client.post(
            "/api/tasks",
            json={
                "name": "Unfiled",
                "description": "No project",
                "due_at": "2030-02-01T00:00:00+00:00",
                "priority": "med",
            },
            headers=owner["headers"],
        )

        data = (await client.get(f"/api/projects/{project['id']}", headers=owner["headers"])).json()
        assert data["project"]["name"] == "Launch"
        assert [t["name"] for t in data["tasks"]] == ["Ship it"]

    async def test_rename(self, client, owner):
        project = await _create_project(client, owner["headers"], "Launch")
        resp = await client.patch(
            f"/api/projects/{project['id']}",
            json={"name": "Relaunch"},
            headers=owner["headers"],
        )
        assert resp.json()["project"]["name"] == "Relaunch"

    async def test_delete_and_missing(self, client, owner):
        project = await _create_project(client, owner["headers"], "Launch")
        resp = await client.delete(f"/api/projects/{project['id']}", headers=owner["headers"])
        assert resp.json()["deleted"] is True

        resp = await client.get(f"/api/projects/{project['id']}", headers=owner["headers"])
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "PROJECT_NOT_FOUND"

    async def test_other_users_project_is_not_found(self, client, owner, fake_supabase):
        row = fake_supabase.insert_row("projects", name="Other", user_id="someone-else")
        resp = await client.patch(
            f"/api/projects/{row['id']}",
            json={"name": "Mine now"},
            headers=owner["headers"],
        )
        assert resp.status_code == 404
        assert fake_supabase.tables["projects"][0]["name"] == "Other"
