"""FastAPI 应用主文件

app 创建 + lifespan 管理：配置校验 + 本地存储初始化/关闭 + 远程客户端工厂 + 路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from .context import create_app_context
from .errors import register_exception_handlers
from .middleware.config_guard_mw import ConfigGuardMiddleware
from .middleware.logging_config import setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.session_mw import SessionMiddleware
from .routes import auth, deployment, env_error, health, projects, stats, tasks

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时构造 AppContext，关闭时释放连接"""
    ctx = await create_app_context()
    app.state.ctx = ctx
    log.info("app_context_initialized", config_valid=ctx.env.valid)

    yield

    await ctx.aclose()


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="Taskboard Gateway",
        version="0.1.0",
        description="Taskboard 任务/项目管理 API",
        lifespan=lifespan,
    )

    # 注册中间件（后注册的在外层：Logging -> ConfigGuard -> Session）
    app.add_middleware(SessionMiddleware)
    app.add_middleware(ConfigGuardMiddleware)
    app.add_middleware(LoggingMiddleware)

    setup_logging()
    register_exception_handlers(app)

    app.include_router(auth.router, tags=["auth"])
    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(projects.router, tags=["projects"])
    app.include_router(stats.router, tags=["stats"])
    app.include_router(deployment.router, tags=["deployment"])
    app.include_router(health.router, tags=["health"])
    app.include_router(env_error.router, tags=["env-error"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
