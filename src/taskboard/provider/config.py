"""ServiceConfig -- 远程服务配置加载

从环境变量加载远程数据/认证服务地址与密钥。
必需变量的存在性由 core.env.validate_env() 负责校验，此处只做读取。
"""

import os

import structlog
from pydantic import BaseModel, Field, SecretStr

log = structlog.get_logger()

_DEFAULT_TIMEOUT_S = 10


class ServiceConfig(BaseModel):
    """远程服务配置 -- 从环境变量加载

    环境变量:
        SUPABASE_URL: 服务基础 URL
        SUPABASE_ANON_KEY: 服务公开密钥（浏览器端可见）
        SUPABASE_SERVICE_ROLE_KEY: 服务端特权密钥（可选，不下发给客户端）
        TASKBOARD_SERVICE_TIMEOUT_S: 调用超时（秒，默认 10）
    """

    url: str = Field(default="", description="服务基础 URL")
    anon_key: SecretStr = Field(default=SecretStr(""), description="服务公开密钥")
    service_role_key: SecretStr | None = Field(
        default=None,
        description="服务端特权密钥（可选）",
    )
    timeout_s: int = Field(default=_DEFAULT_TIMEOUT_S, ge=1, description="调用超时（秒）")

    @property
    def base_url(self) -> str:
        return self.url.strip().rstrip("/")


def load_service_config() -> ServiceConfig:
    """从环境变量加载远程服务配置

    Returns:
        ServiceConfig 实例（必需变量缺失时对应字段为空串）
    """
    kwargs: dict = {}

    if val := os.environ.get("SUPABASE_URL"):
        kwargs["url"] = val

    if val := os.environ.get("SUPABASE_ANON_KEY"):
        kwargs["anon_key"] = SecretStr(val.strip())

    if val := os.environ.get("SUPABASE_SERVICE_ROLE_KEY"):
        kwargs["service_role_key"] = SecretStr(val.strip())

    if val := os.environ.get("TASKBOARD_SERVICE_TIMEOUT_S"):
        try:
            kwargs["timeout_s"] = int(val)
        except ValueError:
            log.warning(
                "invalid_timeout_config",
                env_var="TASKBOARD_SERVICE_TIMEOUT_S",
                value=val,
                fallback=_DEFAULT_TIMEOUT_S,
            )

    return ServiceConfig(**kwargs)
