"""LoggingMiddleware -- 请求级日志

每个请求绑定 request_id（调用方通过 X-Request-ID 传入合法 ULID 时沿用，否则新建），
请求结束时按状态码选择日志级别，并带上耗时与调用者身份。
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from ulid import ULID

REQUEST_ID_HEADER = "X-Request-ID"

# 探活请求只记 debug
_QUIET_PATHS = frozenset({"/health", "/ready"})


def resolve_request_id(request: Request) -> str:
    incoming = request.headers.get(REQUEST_ID_HEADER, "")
    try:
        return str(ULID.from_str(incoming))
    except ValueError:
        return str(ULID())


class LoggingMiddleware(BaseHTTPMiddleware):
    """请求级日志中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = resolve_request_id(request)
        started = time.monotonic()
        quiet = request.url.path in _QUIET_PATHS

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        log = structlog.get_logger()
        if not quiet:
            await log.ainfo("request_started")

        response = await call_next(request)

        identity = getattr(request.state, "identity", None)
        fields = {
            "status_code": response.status_code,
            "duration_ms": int((time.monotonic() - started) * 1000),
            "user_id": identity.user_id if identity is not None else None,
        }
        if response.status_code >= 500:
            await log.aerror("request_completed", **fields)
        elif response.status_code >= 400:
            await log.awarning("request_completed", **fields)
        elif quiet:
            await log.adebug("request_completed", **fields)
        else:
            await log.ainfo("request_completed", **fields)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
