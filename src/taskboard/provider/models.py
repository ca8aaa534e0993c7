"""数据模型 -- AuthUser + AuthSession + AuthResponse

字段命名对齐 GoTrue 的 JSON 响应。
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class AuthUser(BaseModel):
    """认证服务中的用户"""

    id: str = Field(description="用户 ID（调用者身份）")
    email: str | None = Field(default=None)
    created_at: datetime | None = None
    user_metadata: dict[str, Any] = Field(default_factory=dict)


class AuthSession(BaseModel):
    """登录会话（access token 有效期内可用）"""

    access_token: str
    refresh_token: str = ""
    token_type: str = "bearer"
    expires_in: int | None = Field(default=None, description="有效期（秒）")
    expires_at: int | None = Field(default=None, description="过期时间（Unix 秒）")
    user: AuthUser


class AuthResponse(BaseModel):
    """注册 / 登录结果

    邮箱需确认时注册只返回 user，session 为 None。
    """

    user: AuthUser | None = None
    session: AuthSession | None = None
