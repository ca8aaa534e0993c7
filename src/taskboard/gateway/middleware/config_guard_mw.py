"""ConfigGuardMiddleware -- 配置缺失时拦截请求

必需环境变量缺失或为空时，除 /health、/ready 与 /env-error 外的所有路径返回 503，
并提示前端跳转到配置错误页。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ...core.env import get_env_error_message, validate_env

log = structlog.get_logger()

# 配置缺失时仍然放行的路径
CONFIG_EXEMPT_PATHS = frozenset({"/health", "/ready", "/env-error"})


class ConfigGuardMiddleware(BaseHTTPMiddleware):
    """配置守卫中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in CONFIG_EXEMPT_PATHS:
            return await call_next(request)

        ctx = getattr(request.app.state, "ctx", None)
        env = ctx.env if ctx is not None else validate_env()
        if env.valid:
            return await call_next(request)

        log.warning("request_blocked_by_config", missing=env.missing, empty=env.empty)
        return JSONResponse(
            status_code=503,
            content={
                "error": {
                    "code": "CONFIGURATION_ERROR",
                    "message": get_env_error_message(env),
                    "redirect_to": "/env-error",
                }
            },
        )
