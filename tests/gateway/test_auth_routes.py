"""认证路由测试

测试内容：
1. 登录写入会话 cookie / 凭证错误
2. 注册（自动确认 / 需邮箱确认 / 密码校验）
3. 登出清除 cookie
4. 密码重置与修改
5. 会话状态查询
"""


class TestSignIn:
    async def test_sign_in_sets_cookies(self, client, fake_supabase):
        fake_supabase.add_user("ada@example.com", "secret123")
        resp = await client.post(
            "/api/auth/signin",
            json={"email": "ada@example.com", "password": "secret123"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["user"]["email"] == "ada@example.com"
        assert data["redirect_to"] == "/"
        assert resp.cookies.get("sb-access-token")
        assert resp.cookies.get("sb-refresh-token")

    async def test_invalid_credentials(self, client, fake_supabase):
        fake_supabase.add_user("ada@example.com", "secret123")
        resp = await client.post(
            "/api/auth/signin",
            json={"email": "ada@example.com", "password": "wrong"},
        )
        assert resp.status_code == 400
        error = resp.json()["error"]
        assert error["code"] == "invalid_credentials"
        assert error["message"] == "Invalid login credentials"

    async def test_missing_fields(self, client, fake_supabase):
        resp = await client.post("/api/auth/signin", json={"email": "ada@example.com"})
        assert resp.status_code == 422
        assert "password" in resp.json()["error"]["fields"]
        assert fake_supabase.requests_to("/auth/v1/token") == []


class TestSignUp:
    async def test_sign_up_auto_confirmed(self, client):
        resp = await client.post(
            "/api/auth/signup",
            json={
                "email": "new@example.com",
                "password": "secret123",
                "confirm_password": "secret123",
            },
        )
        assert resp.status_code == 201
        assert resp.json()["confirmation_required"] is False
        assert resp.cookies.get("sb-access-token")

    async def test_sign_up_requires_confirmation(self, client, fake_supabase):
        fake_supabase.auto_confirm = False
        resp = await client.post(
            "/api/auth/signup",
            json={
                "email": "new@example.com",
                "password": "secret123",
                "confirm_password": "secret123",
            },
        )
        assert resp.status_code == 201
        assert resp.json()["confirmation_required"] is True
        assert resp.cookies.get("sb-access-token") is None
        request = fake_supabase.requests_to("/auth/v1/signup")[0]
        assert request.url.params["redirect_to"].endswith("/signin")

    async def test_passwords_do_not_match(self, client, fake_supabase):
        resp = await client.post(
            "/api/auth/signup",
            json={
                "email": "new@example.com",
                "password": "secret123",
                "confirm_password": "secret124",
            },
        )
        assert resp.status_code == 422
        assert resp.json()["error"]["fields"] == {"confirm_password": "Passwords do not match"}
        assert fake_supabase.requests_to("/auth/v1/signup") == []

    async def test_password_too_short(self, client):
        resp = await client.post(
            "/api/auth/signup",
            json={"email": "new@example.com", "password": "abc", "confirm_password": "abc"},
        )
        assert resp.status_code == 422
        assert resp.json()["error"]["fields"] == {
            "password": "Password must be at least 6 characters"
        }

    async def test_duplicate_email(self, client, owner):
        resp = await client.post(
            "/api/auth/signup",
            json={
                "email": "owner@example.com",
                "password": "secret123",
                "confirm_password": "secret123",
            },
        )
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "user_already_exists"


class TestSignOut:
    async def test_sign_out_clears_session(self, client, fake_supabase):
        fake_supabase.add_user("ada@example.com", "secret123")
        await client.post(
            "/api/auth/signin",
            json={"email": "ada@example.com", "password": "secret123"},
        )
        assert (await client.get("/api/tasks")).status_code == 200

        resp = await client.post("/api/auth/signout")
        assert resp.status_code == 200
        assert resp.json()["redirect_to"] == "/signin"
        assert fake_supabase.access_tokens == {}

        resp = await client.get("/api/tasks")
        assert resp.status_code == 401

    async def test_sign_out_without_session(self, client):
        resp = await client.post("/api/auth/signout")
        assert resp.status_code == 200


class TestPasswordRecovery:
    async def test_reset_password_sends_redirect(self, client, fake_supabase, owner):
        resp = await client.post(
            "/api/auth/reset-password",
            json={"email": "owner@example.com"},
        )
        assert resp.status_code == 200
        assert resp.json()["status"] == "sent"
        request = fake_supabase.requests_to("/auth/v1/recover")[0]
        assert request.url.params["redirect_to"].endswith("/update-password")

    async def test_update_password(self, client, fake_supabase, owner):
        resp = await client.post(
            "/api/auth/update-password",
            json={"password": "brandnew", "confirm_password": "brandnew"},
            headers=owner["headers"],
        )
        assert resp.status_code == 200
        assert fake_supabase.users["owner@example.com"]["password"] == "brandnew"

    async def test_update_password_requires_session(self, client):
        resp = await client.post(
            "/api/auth/update-password",
            json={"password": "brandnew", "confirm_password": "brandnew"},
        )
        assert resp.status_code == 401
        assert resp.json()["error"]["redirect_to"] == "/signin"


class TestSessionStatus:
    async def test_anonymous(self, client):
        resp = await client.get("/api/auth/session")
        assert resp.json() == {"authenticated": False, "user": None}

    async def test_authenticated(self, client, owner):
        resp = await client.get("/api/auth/session", headers=owner["headers"])
        data = resp.json()
        assert data["authenticated"] is True
        assert data["user"]["id"] == owner["user"]["id"]
