"""Taskboard Provider -- 远程数据/认证服务调用层

公开接口导出。
"""

from .auth import AuthClient, AuthStateListener
from .client import ServiceClient
from .config import ServiceConfig, load_service_config
from .exceptions import AuthApiError, ProviderError, ServiceUnreachableError
from .factory import ClientFactory, create_client_factory
from .models import AuthResponse, AuthSession, AuthUser

__all__ = [
    "AuthUser",
    "AuthSession",
    "AuthResponse",
    "ServiceClient",
    "AuthClient",
    "AuthStateListener",
    "ClientFactory",
    "create_client_factory",
    "ServiceConfig",
    "load_service_config",
    "ProviderError",
    "ServiceUnreachableError",
    "AuthApiError",
]
