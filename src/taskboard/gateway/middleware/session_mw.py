"""SessionMiddleware -- 路由层会话守卫

受保护路径（/api/ 下除公开认证接口外的全部路径）要求有效会话：
- access token 有效：身份写入 request.state.identity
- access token 失效但 refresh token 可用：刷新会话并回写 cookie
- 否则返回 401
路由内部通过 require_identity 依赖再次校验。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ...provider import ProviderError
from ..services.session_service import refresh_identity, resolve_identity, set_session_cookies

log = structlog.get_logger()

# 无需会话的 /api/ 路径
PUBLIC_API_PATHS = frozenset(
    {
        "/api/auth/signin",
        "/api/auth/signup",
        "/api/auth/reset-password",
        "/api/auth/signout",
        "/api/auth/session",
    }
)


def is_protected_path(path: str) -> bool:
    return path.startswith("/api/") and path not in PUBLIC_API_PATHS


class SessionMiddleware(BaseHTTPMiddleware):
    """会话守卫中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not is_protected_path(request.url.path):
            return await call_next(request)

        ctx = getattr(request.app.state, "ctx", None)
        if ctx is None or ctx.clients is None:
            # 由配置守卫或路由依赖报告配置错误
            return await call_next(request)

        auth = ctx.clients.auth
        refreshed = None
        try:
            identity = await resolve_identity(request, auth)
            if identity is None:
                refreshed = await refresh_identity(request, auth)
                if refreshed is not None:
                    identity = refreshed[0]
        except ProviderError as e:
            log.error("session_check_failed", error=str(e), error_type=type(e).__name__)
            return JSONResponse(
                status_code=502,
                content={
                    "error": {
                        "code": "REMOTE_SERVICE_ERROR",
                        "message": "The authentication service request failed. Please try again.",
                    }
                },
            )

        if identity is None:
            return JSONResponse(
                status_code=401,
                content={
                    "error": {
                        "code": "NOT_AUTHENTICATED",
                        "message": "Not authenticated",
                        "redirect_to": "/signin",
                    }
                },
            )

        request.state.identity = identity
        structlog.contextvars.bind_contextvars(user_id=identity.user_id)
        response = await call_next(request)
        if refreshed is not None:
            set_session_cookies(response, refreshed[1])
        return response
