"""structlog 配置模块

dev 模式：pretty print 可读输出
json 模式：结构化 JSON 输出

会话 token、服务密钥与密码不进入日志：渲染前统一替换为掩码。
"""

import logging
import os
from collections.abc import MutableMapping
from typing import Any

import structlog

# 日志字段中出现即掩码的键名
SENSITIVE_LOG_KEYS = frozenset(
    {
        "access_token",
        "refresh_token",
        "password",
        "apikey",
        "anon_key",
        "service_role_key",
        "authorization",
    }
)

_MASK = "***"


def redact_secrets(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor：掩码敏感字段"""
    for key in event_dict.keys() & SENSITIVE_LOG_KEYS:
        if event_dict[key]:
            event_dict[key] = _MASK
    return event_dict


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """初始化 structlog 与标准库 logging

    Args:
        log_format: "json" 或 "dev"，None 时读取 TASKBOARD_LOG_FORMAT（默认 dev）
        log_level: 日志级别，None 时读取 TASKBOARD_LOG_LEVEL（默认 INFO）
    """
    log_format = log_format or os.environ.get("TASKBOARD_LOG_FORMAT", "dev")
    log_level = (log_level or os.environ.get("TASKBOARD_LOG_LEVEL", "INFO")).upper()

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_secrets,
    ]

    renderer: structlog.types.Processor
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
        pre_chain.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            foreign_pre_chain=pre_chain,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level, logging.INFO))

    # 远程调用与请求日志已由结构化事件覆盖
    for noisy in ("httpx", "httpcore", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
