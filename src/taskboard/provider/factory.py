"""ClientFactory -- 远程服务客户端工厂

启动时构造一次并挂在应用上下文上，不使用模块级单例：
- for_request(token): 服务端上下文，按请求绑定调用者身份
- anonymous / auth: 浏览器上下文，使用公开密钥
"""

import httpx
import structlog

from ..core.env import EnvValidationResult, get_env_error_message
from ..core.exceptions import ConfigurationError
from .auth import AuthClient
from .client import ServiceClient
from .config import ServiceConfig, load_service_config

log = structlog.get_logger()


class ClientFactory:
    """共享一个 httpx 连接池的客户端工厂"""

    def __init__(self, config: ServiceConfig, http: httpx.AsyncClient) -> None:
        self._config = config
        self._http = http
        api_key = config.anon_key.get_secret_value()
        self.auth = AuthClient(http, config.base_url, api_key)
        self.anonymous = ServiceClient(http, config.base_url, api_key)

    @property
    def config(self) -> ServiceConfig:
        return self._config

    def for_request(self, access_token: str) -> ServiceClient:
        """绑定调用者身份的数据服务客户端"""
        return ServiceClient(
            self._http,
            self._config.base_url,
            self._config.anon_key.get_secret_value(),
            access_token=access_token,
        )

    async def health_check(self) -> bool:
        return await self.anonymous.health_check()

    async def aclose(self) -> None:
        await self._http.aclose()


def create_client_factory(
    validation: EnvValidationResult,
    config: ServiceConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ClientFactory:
    """创建客户端工厂

    Args:
        validation: 启动时的环境变量校验结果
        config: 服务配置，None 时从环境变量加载
        transport: 自定义 httpx transport（测试时注入 MockTransport）

    Raises:
        ConfigurationError: 必需环境变量缺失或为空
    """
    if not validation.valid:
        raise ConfigurationError(get_env_error_message(validation))

    config = config or load_service_config()
    http = httpx.AsyncClient(timeout=config.timeout_s, transport=transport)
    log.info("client_factory_created", base_url=config.base_url, timeout_s=config.timeout_s)
    return ClientFactory(config, http)
