"""全局 pytest 配置 -- 临时 SQLite 数据库 + 远程服务 MockTransport fixture"""

import itertools
import json
import uuid
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import aiosqlite
import httpx
import pytest
import pytest_asyncio

SERVICE_URL = "http://supabase.test"
ANON_KEY = "anon-test-key"


class FakeSupabase:
    """远程数据/认证服务的内存实现（PostgREST + GoTrue 子集）

    通过 httpx.MockTransport 挂接，记录收到的全部请求。
    """

    def __init__(self) -> None:
        self.users: dict[str, dict[str, Any]] = {}
        self.access_tokens: dict[str, str] = {}
        self.refresh_tokens: dict[str, str] = {}
        self.tables: dict[str, list[dict[str, Any]]] = {"tasks": [], "projects": []}
        self.requests: list[httpx.Request] = []
        self.failing_tables: set[str] = set()
        self.auto_confirm = True
        self.unavailable = False

    # --- 测试辅助 ---

    def add_user(self, email: str, password: str = "secret123") -> dict[str, Any]:
        user = {
            "id": str(uuid.uuid4()),
            "email": email,
            "password": password,
            "created_at": datetime.now(UTC).isoformat(),
        }
        self.users[email] = user
        return user

    def issue_session(self, user: dict[str, Any]) -> dict[str, Any]:
        access_token = f"access-{uuid.uuid4().hex}"
        refresh_token = f"refresh-{uuid.uuid4().hex}"
        self.access_tokens[access_token] = user["id"]
        self.refresh_tokens[refresh_token] = user["id"]
        return {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "token_type": "bearer",
            "expires_in": 3600,
            "expires_at": int(datetime.now(UTC).timestamp()) + 3600,
            "user": self._public_user(user),
        }

    def revoke(self, access_token: str) -> None:
        self.access_tokens.pop(access_token, None)

    def insert_row(self, table: str, **values: Any) -> dict[str, Any]:
        row = {
            "id": str(uuid.uuid4()),
            "created_at": datetime.now(UTC).isoformat(),
            **values,
        }
        self.tables[table].append(row)
        return row

    def requests_to(self, path_prefix: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.startswith(path_prefix)]

    # --- MockTransport handler ---

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.unavailable:
            return httpx.Response(503, json={"message": "upstream unavailable"})
        path = request.url.path
        if request.headers.get("apikey") != ANON_KEY:
            return httpx.Response(401, json={"message": "Invalid API key"})
        if path.startswith("/auth/v1/"):
            return self._handle_auth(request, path.removeprefix("/auth/v1/"))
        if path.startswith("/rest/v1"):
            return self._handle_rest(request, path.removeprefix("/rest/v1").strip("/"))
        return httpx.Response(404, json={"message": "not found"})

    def _public_user(self, user: dict[str, Any]) -> dict[str, Any]:
        return {"id": user["id"], "email": user["email"], "created_at": user["created_at"]}

    def _bearer(self, request: httpx.Request) -> str:
        return request.headers.get("authorization", "").removeprefix("Bearer ").strip()

    def _user_for_token(self, token: str) -> dict[str, Any] | None:
        user_id = self.access_tokens.get(token)
        if user_id is None:
            return None
        return next((u for u in self.users.values() if u["id"] == user_id), None)

    def _handle_auth(self, request: httpx.Request, endpoint: str) -> httpx.Response:
        body = json.loads(request.content) if request.content else {}
        grant_type = request.url.params.get("grant_type")

        if endpoint == "token" and grant_type == "password":
            user = self.users.get(body.get("email", ""))
            if user is None or user["password"] != body.get("password"):
                return httpx.Response(
                    400,
                    json={
                        "code": 400,
                        "error_code": "invalid_credentials",
                        "msg": "Invalid login credentials",
                    },
                )
            return httpx.Response(200, json=self.issue_session(user))

        if endpoint == "token" and grant_type == "refresh_token":
            user_id = self.refresh_tokens.pop(body.get("refresh_token", ""), None)
            user = next((u for u in self.users.values() if u["id"] == user_id), None)
            if user is None:
                return httpx.Response(
                    400,
                    json={"error_code": "refresh_token_not_found", "msg": "Invalid Refresh Token"},
                )
            return httpx.Response(200, json=self.issue_session(user))

        if endpoint == "signup":
            if body.get("email") in self.users:
                return httpx.Response(
                    422,
                    json={"error_code": "user_already_exists", "msg": "User already registered"},
                )
            user = self.add_user(body["email"], body["password"])
            if self.auto_confirm:
                return httpx.Response(200, json=self.issue_session(user))
            return httpx.Response(200, json=self._public_user(user))

        if endpoint == "logout":
            token = self._bearer(request)
            if token not in self.access_tokens:
                return httpx.Response(401, json={"msg": "invalid JWT"})
            user_id = self.access_tokens[token]
            self.revoke(token)
            self.refresh_tokens = {
                k: v for k, v in self.refresh_tokens.items() if v != user_id
            }
            return httpx.Response(204)

        if endpoint == "recover":
            return httpx.Response(200, json={})

        if endpoint == "user":
            user = self._user_for_token(self._bearer(request))
            if user is None:
                return httpx.Response(
                    401,
                    json={"error_code": "bad_jwt", "msg": "invalid JWT: token is expired"},
                )
            if request.method == "PUT":
                user["password"] = body.get("password", user["password"])
            return httpx.Response(200, json=self._public_user(user))

        return httpx.Response(404, json={"msg": "unknown auth endpoint"})

    def _handle_rest(self, request: httpx.Request, table: str) -> httpx.Response:
        if table == "":
            return httpx.Response(200, json={"swagger": "2.0"})
        if table in self.failing_tables:
            return httpx.Response(
                500,
                json={"code": "XX000", "message": "internal error"},
            )
        if table not in self.tables:
            return httpx.Response(
                404,
                json={"code": "42P01", "message": f'relation "{table}" does not exist'},
            )

        token = self._bearer(request)
        if token != ANON_KEY and token not in self.access_tokens:
            return httpx.Response(401, json={"code": "PGRST301", "message": "JWT expired"})

        filters: dict[str, str] = {}
        order: str | None = None
        limit: int | None = None
        for key, value in request.url.params.multi_items():
            if key == "select":
                continue
            if key == "order":
                order = value
            elif key == "limit":
                limit = int(value)
            else:
                filters[key] = value

        def matches(row: dict[str, Any]) -> bool:
            for column, condition in filters.items():
                if condition == "is.null":
                    if row.get(column) is not None:
                        return False
                elif str(row.get(column)) != condition.removeprefix("eq."):
                    return False
            return True

        rows = self.tables[table]

        if request.method == "GET":
            result = [dict(r) for r in rows if matches(r)]
            if order:
                column, _, direction = order.partition(".")
                result.sort(key=lambda r: str(r.get(column) or ""), reverse=direction == "desc")
            if limit is not None:
                result = result[:limit]
            return httpx.Response(200, json=result)

        body = json.loads(request.content) if request.content else {}

        if request.method == "POST":
            row = self.insert_row(table, **body)
            return httpx.Response(201, json=[dict(row)])

        if request.method == "PATCH":
            updated = []
            for row in rows:
                if matches(row):
                    row.update(body)
                    updated.append(dict(row))
            return httpx.Response(200, json=updated)

        if request.method == "DELETE":
            removed = [dict(r) for r in rows if matches(r)]
            self.tables[table] = [r for r in rows if not matches(r)]
            return httpx.Response(200, json=removed)

        return httpx.Response(405, json={"message": "method not allowed"})


@pytest_asyncio.fixture
async def tmp_db_path(tmp_path: Path) -> Path:
    """提供临时 SQLite 数据库路径"""
    return tmp_path / "sqlite" / "test.db"


@pytest_asyncio.fixture
async def db_conn(tmp_path: Path) -> AsyncGenerator[aiosqlite.Connection, None]:
    """提供已初始化的临时 SQLite 数据库连接"""
    from taskboard.core.store.sqlite_init import init_db

    conn = await aiosqlite.connect(str(tmp_path / "conn.db"))
    await init_db(conn)
    yield conn
    await conn.close()


@pytest.fixture
def supabase_env(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """设置必需环境变量"""
    values = {"SUPABASE_URL": SERVICE_URL, "SUPABASE_ANON_KEY": ANON_KEY}
    for key, value in values.items():
        monkeypatch.setenv(key, value)
    for key in ("SUPABASE_SERVICE_ROLE_KEY", "SUPABASE_JWT_SECRET"):
        monkeypatch.delenv(key, raising=False)
    return values


@pytest.fixture
def missing_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """清除必需环境变量"""
    for key in ("SUPABASE_URL", "SUPABASE_ANON_KEY"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest_asyncio.fixture
async def service_http(fake_supabase: FakeSupabase) -> AsyncGenerator[httpx.AsyncClient, None]:
    """挂接 FakeSupabase 的 httpx 客户端"""
    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_supabase.handler)) as http:
        yield http


# 固定参考时间（2024-06-12 周三 15:00 UTC），避免按日切分的用例依赖运行时刻
REFERENCE_NOW = datetime(2024, 6, 12, 15, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    return REFERENCE_NOW


@pytest.fixture
def make_task():
    """Task 构造工厂"""
    from taskboard.core.models import Task, TaskPriority, TaskStatus

    counter = itertools.count(1)

    def _make(
        name: str = "Task",
        description: str = "",
        due_at: datetime | None = None,
        status: TaskStatus = TaskStatus.OPEN,
        priority: TaskPriority = TaskPriority.MED,
        project_id: str | None = None,
        user_id: str = "user-1",
        created_at: datetime | None = None,
        task_id: str | None = None,
    ) -> Task:
        seq = next(counter)
        return Task(
            id=task_id or f"task-{seq}",
            name=name,
            description=description,
            created_at=created_at or REFERENCE_NOW - timedelta(days=1),
            due_at=due_at or REFERENCE_NOW + timedelta(days=1),
            status=status,
            priority=priority,
            project_id=project_id,
            user_id=user_id,
        )

    return _make


@pytest_asyncio.fixture
async def app_ctx(
    tmp_db_path: Path,
    supabase_env: dict[str, str],
    fake_supabase: FakeSupabase,
):
    """配置完整的 AppContext（远程服务挂接 FakeSupabase）"""
    from taskboard.gateway.context import create_app_context

    ctx = await create_app_context(
        db_path=str(tmp_db_path),
        transport=httpx.MockTransport(fake_supabase.handler),
    )
    yield ctx
    await ctx.aclose()


@pytest_asyncio.fixture
async def client(app_ctx) -> AsyncGenerator[httpx.AsyncClient, None]:
    """测试用 httpx AsyncClient（ASGITransport 不触发 lifespan，手动挂载 ctx）"""
    from taskboard.gateway.main import create_app

    app = create_app()
    app.state.ctx = app_ctx
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def owner(fake_supabase: FakeSupabase) -> dict[str, Any]:
    """已登录用户：user + session + 认证请求头"""
    user = fake_supabase.add_user("owner@example.com", "secret123")
    session = fake_supabase.issue_session(user)
    return {
        "user": user,
        "session": session,
        "headers": {"Authorization": f"Bearer {session['access_token']}"},
    }
