"""端到端：创建任务 -> 看板过滤 -> 搜索"""

from datetime import UTC, datetime, timedelta

from taskboard.core.board import TaskBoard
from taskboard.core.models import TaskFilterCriteria, task_from_record


class TestTaskBoardFlow:
    async def test_filter_then_search(self, client, owner, fake_supabase):
        due_at = datetime.now(UTC) + timedelta(days=2)
        resp = await client.post(
            "/api/tasks",
            json={
                "name": "Prepare quarterly report",
                "description": "Numbers for the board meeting",
                "due_at": due_at.isoformat(),
                "priority": "high",
            },
            headers=owner["headers"],
        )
        task_id = resp.json()["task"]["id"]

        board = TaskBoard(debounce_ms=10)
        assert await board.refresh(
            lambda: _fetch_rows(fake_supabase, owner["user"]["id"])
        )

        board.set_criteria(TaskFilterCriteria(priority="high", status="open"))
        assert [t.id for t in board.final_tasks] == [task_id]

        board.set_criteria(TaskFilterCriteria(priority="low", status="open"))
        assert board.final_tasks == []

        board.apply_search_now("quarterly")
        board.set_criteria(TaskFilterCriteria(priority="any", status="open"))
        assert [t.id for t in board.final_tasks] == [task_id]

    async def test_same_flow_over_http(self, client, owner):
        await client.post(
            "/api/tasks",
            json={
                "name": "Prepare quarterly report",
                "description": "Numbers for the board meeting",
                "due_at": (datetime.now(UTC) + timedelta(days=2)).isoformat(),
                "priority": "high",
            },
            headers=owner["headers"],
        )

        async def names(**params):
            resp = await client.get("/api/tasks", params=params, headers=owner["headers"])
            return [t["name"] for t in resp.json()["open"]]

        assert await names(priority="high", status="open") == ["Prepare quarterly report"]
        assert await names(priority="low", status="open") == []
        assert await names(priority="any", status="open", q="QUARTERLY") == [
            "Prepare quarterly report"
        ]


async def _fetch_rows(fake_supabase, user_id):
    return [
        task_from_record(row)
        for row in fake_supabase.tables["tasks"]
        if row["user_id"] == user_id
    ]
