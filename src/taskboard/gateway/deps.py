"""依赖注入模块 -- 通过 FastAPI Depends 注入应用组件

AppContext 挂在 app.state 上，在 lifespan 中初始化/清理。
"""

from fastapi import Depends, Request

from ..core.checklist import ChecklistEngine
from ..core.exceptions import NotAuthenticatedError
from ..provider import AuthClient, ClientFactory
from .context import AppContext
from .services.project_service import ProjectService
from .services.session_service import Identity, resolve_identity
from .services.task_service import TaskService


def get_app_context(request: Request) -> AppContext:
    """从 app.state 获取 AppContext 实例"""
    return request.app.state.ctx


def get_client_factory(ctx: AppContext = Depends(get_app_context)) -> ClientFactory:
    return ctx.require_clients()


def get_auth_client(clients: ClientFactory = Depends(get_client_factory)) -> AuthClient:
    return clients.auth


def get_checklist_engine(ctx: AppContext = Depends(get_app_context)) -> ChecklistEngine:
    return ctx.checklist


async def require_identity(
    request: Request,
    auth: AuthClient = Depends(get_auth_client),
) -> Identity:
    """页面级会话校验（路由层中间件之外的第二道检查）

    Raises:
        NotAuthenticatedError: 没有有效会话
    """
    identity = getattr(request.state, "identity", None)
    if identity is None:
        identity = await resolve_identity(request, auth)
    if identity is None:
        raise NotAuthenticatedError()
    return identity


def get_task_service(
    identity: Identity = Depends(require_identity),
    clients: ClientFactory = Depends(get_client_factory),
) -> TaskService:
    return TaskService(clients.for_request(identity.access_token), identity.user_id)


def get_project_service(
    identity: Identity = Depends(require_identity),
    clients: ClientFactory = Depends(get_client_factory),
) -> ProjectService:
    return ProjectService(clients.for_request(identity.access_token), identity.user_id)
