"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，包含本地状态库与配置完整性；
         profile=full 时额外探测远程数据服务。
"""

import structlog
from fastapi import APIRouter, Query, Request
from starlette.responses import JSONResponse

from ...core.store import verify_wal_mode
from ..context import AppContext

log = structlog.get_logger()

router = APIRouter()

READY_PROFILES = ("core", "full")


async def _check_local_store(ctx: AppContext) -> str:
    """本地状态库：连接可用且 local_state 表可读"""
    if ctx.store_group is None:
        return "error: local store not initialized"
    try:
        cursor = await ctx.store_group.conn.execute("SELECT COUNT(*) FROM local_state")
        await cursor.fetchone()
    except Exception as e:
        return f"error: {e}"
    if not await verify_wal_mode(ctx.store_group.conn):
        log.info("local_store_not_wal")
    return "ok"


def _check_config(ctx: AppContext) -> str:
    if ctx.env.valid:
        return "ok"
    unset = ", ".join([*ctx.env.missing, *ctx.env.empty])
    return f"error: required environment variables not set: {unset}"


async def _check_remote_service(ctx: AppContext) -> str:
    if ctx.clients is None:
        return "skipped"
    try:
        healthy = await ctx.clients.health_check()
    except Exception as e:
        log.warning("health_check_error", error=str(e))
        healthy = False
    return "ok" if healthy else "unreachable"


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(
    request: Request,
    profile: str | None = Query(
        default=None,
        description="core（默认）仅本地检查；full 包含远程数据服务探测",
    ),
):
    """Readiness 检查

    检查项：
    1. sqlite: 本地状态库
    2. config: 必需环境变量
    3. remote_service: 仅 profile=full 时探测，否则为 skipped
    """
    effective_profile = profile if profile in READY_PROFILES else "core"
    ctx: AppContext = request.app.state.ctx

    checks = {
        "sqlite": await _check_local_store(ctx),
        "config": _check_config(ctx),
        "remote_service": (
            await _check_remote_service(ctx) if effective_profile == "full" else "skipped"
        ),
    }
    all_ok = all(value in ("ok", "skipped") for value in checks.values())

    return JSONResponse(
        status_code=200 if all_ok else 503,
        content={
            "status": "ready" if all_ok else "not_ready",
            "profile": effective_profile,
            "checks": checks,
        },
    )
