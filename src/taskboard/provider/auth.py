"""AuthClient -- 认证服务（GoTrue）调用封装

登录、注册、登出、刷新会话、密码重置与修改，
以及会话变更事件订阅（on_auth_state_change）。
"""

from collections.abc import Callable
from typing import Any

import httpx
import structlog

from ..core.models import SessionEvent
from .client import CONNECTION_ERROR_TYPES, error_from_response
from .exceptions import AuthApiError, ServiceUnreachableError
from .models import AuthResponse, AuthSession, AuthUser

log = structlog.get_logger()

AuthStateListener = Callable[[SessionEvent, AuthSession | None], None]

# 会话已失效时的登出响应状态码
_STALE_SESSION_STATUS = (401, 403, 404)


class AuthClient:
    """认证服务客户端"""

    def __init__(self, http: httpx.AsyncClient, base_url: str, api_key: str) -> None:
        self._http = http
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._listeners: list[tuple[AuthStateListener, str | None]] = []

    @property
    def auth_url(self) -> str:
        return f"{self._base_url}/auth/v1"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
        access_token: str | None = None,
    ) -> Any:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {access_token or self._api_key}",
        }
        try:
            resp = await self._http.request(
                method,
                f"{self.auth_url}/{path}",
                json=json,
                params=params,
                headers=headers,
            )
        except CONNECTION_ERROR_TYPES as e:
            log.error("auth_request_failed", path=path, error=str(e), error_type=type(e).__name__)
            raise ServiceUnreachableError(self._base_url, e) from e

        if resp.status_code >= 500:
            error = error_from_response(resp)
            log.error("auth_service_error", path=path, status_code=resp.status_code)
            raise error
        if resp.status_code >= 400:
            error = error_from_response(resp)
            log.info(
                "auth_request_rejected",
                path=path,
                status_code=resp.status_code,
                code=error.code,
            )
            raise AuthApiError(str(error), status_code=resp.status_code, code=error.code)

        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    # --- 会话事件 ---

    def on_auth_state_change(
        self, listener: AuthStateListener, user_id: str | None = None
    ) -> Callable[[], None]:
        """订阅会话变更事件

        客户端在进程内共享：不指定 user_id 的订阅会收到所有用户的事件。
        指定 user_id 时只收到该用户的事件；无法确定用户的事件
        （未带 user_id 的登出、密码重置邮件）不会投递给它。

        Returns:
            取消订阅函数
        """
        entry = (listener, user_id)
        self._listeners.append(entry)

        def unsubscribe() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return unsubscribe

    def _emit(
        self,
        event: SessionEvent,
        session: AuthSession | None,
        user_id: str | None = None,
    ) -> None:
        if user_id is None and session is not None:
            user_id = session.user.id
        for listener, scope in list(self._listeners):
            if scope is not None and scope != user_id:
                continue
            try:
                listener(event, session)
            except Exception as e:
                log.warning("auth_listener_failed", auth_event=event.value, error=str(e))

    # --- 认证操作 ---

    async def get_user(self, access_token: str) -> AuthUser:
        """校验 access token 并返回对应用户

        Raises:
            AuthApiError: token 无效或已过期
        """
        body = await self._request("GET", "user", access_token=access_token)
        return AuthUser.model_validate(body)

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        body = await self._request(
            "POST",
            "token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        session = AuthSession.model_validate(body)
        log.info("user_signed_in", user_id=session.user.id)
        self._emit(SessionEvent.SIGNED_IN, session)
        return session

    async def sign_up(
        self,
        email: str,
        password: str,
        redirect_to: str | None = None,
    ) -> AuthResponse:
        """注册新用户；需邮箱确认时只返回 user"""
        params = {"redirect_to": redirect_to} if redirect_to else None
        body = await self._request(
            "POST",
            "signup",
            params=params,
            json={"email": email, "password": password},
        )
        if body and "access_token" in body:
            session = AuthSession.model_validate(body)
            log.info("user_signed_up", user_id=session.user.id, confirmed=True)
            self._emit(SessionEvent.SIGNED_IN, session)
            return AuthResponse(user=session.user, session=session)

        user_body = (body or {}).get("user", body)
        user = AuthUser.model_validate(user_body) if user_body else None
        log.info("user_signed_up", user_id=user.id if user else None, confirmed=False)
        return AuthResponse(user=user, session=None)

    async def sign_out(self, access_token: str, user_id: str | None = None) -> None:
        """登出；会话已失效时视为已登出

        Args:
            access_token: 当前会话 token
            user_id: 已知的当前用户，用于把 SIGNED_OUT 投递给该用户的订阅
        """
        try:
            await self._request("POST", "logout", access_token=access_token)
        except AuthApiError as e:
            if e.status_code not in _STALE_SESSION_STATUS:
                raise
            log.info("sign_out_session_already_invalid", status_code=e.status_code)
        self._emit(SessionEvent.SIGNED_OUT, None, user_id)

    async def refresh_session(self, refresh_token: str) -> AuthSession:
        body = await self._request(
            "POST",
            "token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )
        session = AuthSession.model_validate(body)
        self._emit(SessionEvent.TOKEN_REFRESHED, session)
        return session

    async def reset_password_for_email(self, email: str, redirect_to: str | None = None) -> None:
        """发送密码重置邮件"""
        params = {"redirect_to": redirect_to} if redirect_to else None
        await self._request("POST", "recover", params=params, json={"email": email})
        log.info("password_recovery_requested")
        self._emit(SessionEvent.PASSWORD_RECOVERY, None)

    async def update_user(self, access_token: str, password: str) -> AuthUser:
        """修改当前用户密码"""
        body = await self._request(
            "PUT",
            "user",
            json={"password": password},
            access_token=access_token,
        )
        user = AuthUser.model_validate(body)
        log.info("user_updated", user_id=user.id)
        self._emit(SessionEvent.USER_UPDATED, None, user.id)
        return user
