"""远程仓储调用的错误包装

ProviderError 在每个调用点被捕获、记录，并转换为领域异常：
- 401 -> NotAuthenticatedError（会话在请求途中失效）
- 其他 -> RepositoryError（通用失败提示，不自动重试）
"""

from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from ...core.exceptions import NotAuthenticatedError, RepositoryError
from ...provider import ProviderError

log = structlog.get_logger()


@contextmanager
def remote_call(entity: str, operation: str, **fields) -> Iterator[None]:
    """包装一次远程仓储调用

    Args:
        entity: 实体名（Task / Project）
        operation: 操作名（fetch / create / update / delete）
        **fields: 附加日志字段
    """
    try:
        yield
    except ProviderError as e:
        log.error(
            "repository_call_failed",
            entity=entity,
            operation=operation,
            status_code=e.status_code,
            code=e.code,
            error=str(e),
            error_type=type(e).__name__,
            **fields,
        )
        if e.status_code == 401:
            raise NotAuthenticatedError() from e
        raise RepositoryError(f"Failed to {operation} {entity.lower()}") from e
