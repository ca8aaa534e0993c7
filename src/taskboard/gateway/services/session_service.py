"""身份解析 -- 从请求中解析调用者身份

access token 来源（按优先级）：
1. Authorization: Bearer <token>
2. sb-access-token cookie
token 无效时若带有 refresh token cookie，则尝试刷新会话。
"""

import structlog
from pydantic import BaseModel
from starlette.requests import Request
from starlette.responses import Response

from ...core.config import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE
from ...provider import AuthApiError, AuthClient, AuthSession

log = structlog.get_logger()


class Identity(BaseModel):
    """调用者身份"""

    user_id: str
    email: str | None = None
    access_token: str


def extract_access_token(request: Request) -> str | None:
    auth_header = request.headers.get("authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return request.cookies.get(ACCESS_TOKEN_COOKIE) or None


async def resolve_identity(request: Request, auth: AuthClient) -> Identity | None:
    """校验 access token，无效或缺失时返回 None

    远程服务不可达时异常向上传播，由调用方决定响应。
    """
    token = extract_access_token(request)
    if not token:
        return None
    try:
        user = await auth.get_user(token)
    except AuthApiError as e:
        log.info("session_invalid", status_code=e.status_code)
        return None
    return Identity(user_id=user.id, email=user.email, access_token=token)


async def refresh_identity(
    request: Request,
    auth: AuthClient,
) -> tuple[Identity, AuthSession] | None:
    """用 refresh token cookie 换取新会话"""
    refresh_token = request.cookies.get(REFRESH_TOKEN_COOKIE)
    if not refresh_token:
        return None
    try:
        session = await auth.refresh_session(refresh_token)
    except AuthApiError as e:
        log.info("session_refresh_rejected", status_code=e.status_code)
        return None
    identity = Identity(
        user_id=session.user.id,
        email=session.user.email,
        access_token=session.access_token,
    )
    log.info("session_refreshed", user_id=identity.user_id)
    return identity, session


def set_session_cookies(response: Response, session: AuthSession) -> None:
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        session.access_token,
        max_age=session.expires_in,
        httponly=True,
        samesite="lax",
        path="/",
    )
    if session.refresh_token:
        response.set_cookie(
            REFRESH_TOKEN_COOKIE,
            session.refresh_token,
            httponly=True,
            samesite="lax",
            path="/",
        )


def clear_session_cookies(response: Response) -> None:
    response.delete_cookie(ACCESS_TOKEN_COOKIE, path="/")
    response.delete_cookie(REFRESH_TOKEN_COOKIE, path="/")
