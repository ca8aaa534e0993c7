"""Provider 异常体系

远程数据服务（PostgREST）与认证服务（GoTrue）的调用失败统一包装为以下异常。
"""


class ProviderError(Exception):
    """Provider 包基础异常"""

    def __init__(
        self,
        message: str,
        recoverable: bool = True,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 是否可通过重试恢复
            status_code: 远程服务返回的 HTTP 状态码
            code: 远程服务返回的错误码（如 PostgREST 的 PGRST116）
        """
        super().__init__(message)
        self.recoverable = recoverable
        self.status_code = status_code
        self.code = code


class ServiceUnreachableError(ProviderError):
    """远程服务不可达（连接失败、超时、DNS 解析失败等）"""

    def __init__(self, service_url: str, original_error: Exception) -> None:
        """
        Args:
            service_url: 尝试连接的服务地址
            original_error: 原始异常
        """
        super().__init__(
            f"Remote service unreachable: {service_url} -- {original_error}",
            recoverable=True,
        )
        self.service_url = service_url
        self.original_error = original_error


class AuthApiError(ProviderError):
    """认证服务拒绝请求（凭证错误、会话失效、密码不合规等）

    不自动重试，需要用户重新认证。
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message, recoverable=False, status_code=status_code, code=code)
