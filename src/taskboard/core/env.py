"""环境变量校验 -- 启动时检查必需配置

必需变量缺失（未设置）或为空（仅含空白）均视为校验失败；
可选变量只做记录，不影响校验结果。
"""

import os
from collections.abc import Mapping

from pydantic import BaseModel, Field

from .exceptions import ConfigurationError

REQUIRED_ENV_VARS: tuple[str, ...] = ("SUPABASE_URL", "SUPABASE_ANON_KEY")
OPTIONAL_ENV_VARS: tuple[str, ...] = ("SUPABASE_SERVICE_ROLE_KEY", "SUPABASE_JWT_SECRET")


class EnvValidationResult(BaseModel):
    """环境变量校验结果"""

    valid: bool = Field(description="必需变量是否全部存在且非空")
    missing: list[str] = Field(default_factory=list, description="未设置的必需变量")
    empty: list[str] = Field(default_factory=list, description="为空的必需变量")
    optional_missing: list[str] = Field(default_factory=list)
    optional_empty: list[str] = Field(default_factory=list)


def _partition(keys: tuple[str, ...], environ: Mapping[str, str]) -> tuple[list[str], list[str]]:
    missing: list[str] = []
    empty: list[str] = []
    for key in keys:
        value = environ.get(key)
        if value is None:
            missing.append(key)
        elif value.strip() == "":
            empty.append(key)
    return missing, empty


def validate_env(environ: Mapping[str, str] | None = None) -> EnvValidationResult:
    """校验必需与可选环境变量

    Args:
        environ: 待校验的环境映射，None 时使用 os.environ

    Returns:
        EnvValidationResult
    """
    env = os.environ if environ is None else environ
    missing, empty = _partition(REQUIRED_ENV_VARS, env)
    optional_missing, optional_empty = _partition(OPTIONAL_ENV_VARS, env)
    return EnvValidationResult(
        valid=not missing and not empty,
        missing=missing,
        empty=empty,
        optional_missing=optional_missing,
        optional_empty=optional_empty,
    )


def get_env_error_message(result: EnvValidationResult) -> str:
    """将校验结果格式化为面向用户的错误信息"""
    messages: list[str] = []
    if result.missing:
        messages.append(
            f"Missing required environment variables: {', '.join(result.missing)}"
        )
    if result.empty:
        messages.append(
            f"Empty required environment variables: {', '.join(result.empty)}"
        )
    return "\n".join(messages)


def get_env(key: str, required: bool = True) -> str | None:
    """读取单个环境变量

    Raises:
        ConfigurationError: required=True 且变量未设置或为空
    """
    value = os.environ.get(key)
    if required and (value is None or value.strip() == ""):
        raise ConfigurationError(f"Required environment variable {key} is not set")
    return value
