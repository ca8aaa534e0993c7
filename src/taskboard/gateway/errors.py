"""异常 -> HTTP 响应映射

统一错误体: {"error": {"code": ..., "message": ...}}
- 配置错误 503，认证错误 401，不存在（含越权）404，校验错误 422
- 远程调用失败 502（通用提示，细节只进日志）
- 其他未处理异常 500（通用错误面板）
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

from ..core.exceptions import (
    ChecklistItemNotFoundError,
    ConfigurationError,
    FieldValidationError,
    NotAuthenticatedError,
    RecordMappingError,
    RecordNotFoundError,
    RepositoryError,
)
from ..provider import AuthApiError, ProviderError

log = structlog.get_logger()

REMOTE_FAILURE_MESSAGE = "The data service request failed. Please try again."
INTERNAL_ERROR_MESSAGE = "Something went wrong. Please refresh the page."


def error_response(
    status_code: int,
    code: str,
    message: str,
    **extra,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message, **extra}},
    )


async def _configuration_error(request: Request, exc: ConfigurationError) -> JSONResponse:
    return error_response(503, "CONFIGURATION_ERROR", str(exc), redirect_to="/env-error")


async def _not_authenticated(request: Request, exc: NotAuthenticatedError) -> JSONResponse:
    return error_response(401, "NOT_AUTHENTICATED", str(exc), redirect_to="/signin")


async def _auth_api_error(request: Request, exc: AuthApiError) -> JSONResponse:
    status_code = 401 if exc.status_code in (None, 401, 403) else 400
    return error_response(status_code, exc.code or "AUTH_ERROR", str(exc))


async def _record_not_found(request: Request, exc: RecordNotFoundError) -> JSONResponse:
    return error_response(404, f"{exc.entity.upper()}_NOT_FOUND", str(exc))


async def _checklist_item_not_found(
    request: Request, exc: ChecklistItemNotFoundError
) -> JSONResponse:
    return error_response(404, "CHECKLIST_ITEM_NOT_FOUND", str(exc))


async def _field_validation(request: Request, exc: FieldValidationError) -> JSONResponse:
    return error_response(422, "VALIDATION_ERROR", "Invalid input", fields=exc.errors)


async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields: dict[str, str] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        fields[".".join(loc) or "body"] = err.get("msg", "invalid")
    return error_response(422, "VALIDATION_ERROR", "Invalid input", fields=fields)


async def _remote_failure(request: Request, exc: Exception) -> JSONResponse:
    log.error(
        "remote_call_failed",
        error=str(exc),
        error_type=type(exc).__name__,
    )
    return error_response(502, "REMOTE_SERVICE_ERROR", REMOTE_FAILURE_MESSAGE)


async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
    log.exception("unhandled_error", error_type=type(exc).__name__)
    return error_response(500, "INTERNAL_ERROR", INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    """注册异常处理器（按异常类 MRO 匹配，子类处理器优先）"""
    app.add_exception_handler(ConfigurationError, _configuration_error)
    app.add_exception_handler(NotAuthenticatedError, _not_authenticated)
    app.add_exception_handler(AuthApiError, _auth_api_error)
    app.add_exception_handler(RecordNotFoundError, _record_not_found)
    app.add_exception_handler(ChecklistItemNotFoundError, _checklist_item_not_found)
    app.add_exception_handler(FieldValidationError, _field_validation)
    app.add_exception_handler(RequestValidationError, _request_validation)
    app.add_exception_handler(RepositoryError, _remote_failure)
    app.add_exception_handler(RecordMappingError, _remote_failure)
    app.add_exception_handler(ProviderError, _remote_failure)
    app.add_exception_handler(Exception, _unhandled)
