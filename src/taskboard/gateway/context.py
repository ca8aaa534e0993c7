"""AppContext -- 应用上下文

进程启动时构造一次，挂在 app.state.ctx 上，按引用传给需要的组件；
不使用模块级单例。配置缺失时 clients 为 None，所有业务路由返回配置错误。
"""

import httpx
import structlog

from ..core.checklist import ChecklistEngine
from ..core.config import get_db_path, get_site_url
from ..core.env import EnvValidationResult, get_env_error_message, validate_env
from ..core.exceptions import ConfigurationError
from ..core.store import StoreGroup, create_store_group
from ..provider import ClientFactory, ServiceConfig, create_client_factory

log = structlog.get_logger()


class AppContext:
    """应用级共享组件"""

    def __init__(
        self,
        env: EnvValidationResult,
        store_group: StoreGroup | None,
        checklist: ChecklistEngine,
        clients: ClientFactory | None = None,
        site_url: str = "http://localhost:8000",
    ) -> None:
        self.env = env
        self.store_group = store_group
        self.checklist = checklist
        self.clients = clients
        self.site_url = site_url

    @property
    def config_error(self) -> str | None:
        """配置错误信息，配置完整时为 None"""
        if self.env.valid:
            return None
        return get_env_error_message(self.env)

    def require_clients(self) -> ClientFactory:
        if self.clients is None:
            raise ConfigurationError(self.config_error or "Remote service is not configured")
        return self.clients

    async def aclose(self) -> None:
        if self.clients is not None:
            await self.clients.aclose()
        if self.store_group is not None:
            await self.store_group.close()


async def create_app_context(
    db_path: str | None = None,
    service_config: ServiceConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AppContext:
    """校验配置并初始化本地存储、检查清单引擎与远程客户端工厂"""
    env = validate_env()
    store_group = await create_store_group(db_path or get_db_path())
    checklist = ChecklistEngine(store_group.state_store)

    clients: ClientFactory | None = None
    if env.valid:
        clients = create_client_factory(env, config=service_config, transport=transport)
    else:
        log.error("env_validation_failed", missing=env.missing, empty=env.empty)

    if env.optional_missing or env.optional_empty:
        log.info(
            "optional_env_unset",
            missing=env.optional_missing,
            empty=env.optional_empty,
        )

    return AppContext(
        env=env,
        store_group=store_group,
        checklist=checklist,
        clients=clients,
        site_url=get_site_url(),
    )
