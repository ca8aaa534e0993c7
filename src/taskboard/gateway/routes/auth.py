"""认证路由

POST /api/auth/signin: 邮箱密码登录，写入会话 cookie
POST /api/auth/signup: 注册（需邮箱确认时不返回会话）
POST /api/auth/signout: 登出并清除 cookie
POST /api/auth/reset-password: 发送密码重置邮件
POST /api/auth/update-password: 修改密码（需要会话，通常来自重置邮件链接）
GET /api/auth/session: 当前会话状态
"""

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field
from starlette.responses import JSONResponse

from ...core.config import PASSWORD_MIN_LENGTH
from ...core.exceptions import FieldValidationError
from ...provider import AuthClient, AuthUser
from ..context import AppContext
from ..deps import get_app_context, get_auth_client, require_identity
from ..services.session_service import (
    Identity,
    clear_session_cookies,
    extract_access_token,
    resolve_identity,
    set_session_cookies,
)

router = APIRouter()


class SignInRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class SignUpRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str
    confirm_password: str


class ResetPasswordRequest(BaseModel):
    email: str = Field(min_length=1)


class UpdatePasswordRequest(BaseModel):
    password: str
    confirm_password: str


class UserResponse(BaseModel):
    id: str
    email: str | None = None


def validate_new_password(password: str, confirm_password: str) -> None:
    """两次输入一致且长度足够，否则抛出 FieldValidationError"""
    if password != confirm_password:
        raise FieldValidationError({"confirm_password": "Passwords do not match"})
    if len(password) < PASSWORD_MIN_LENGTH:
        raise FieldValidationError(
            {"password": f"Password must be at least {PASSWORD_MIN_LENGTH} characters"}
        )


def _user_payload(user: AuthUser) -> dict:
    return UserResponse(id=user.id, email=user.email).model_dump()


@router.post("/api/auth/signin")
async def sign_in(
    body: SignInRequest,
    auth: AuthClient = Depends(get_auth_client),
):
    session = await auth.sign_in_with_password(body.email.strip(), body.password)
    response = JSONResponse(content={"user": _user_payload(session.user), "redirect_to": "/"})
    set_session_cookies(response, session)
    return response


@router.post("/api/auth/signup")
async def sign_up(
    body: SignUpRequest,
    auth: AuthClient = Depends(get_auth_client),
    ctx: AppContext = Depends(get_app_context),
):
    validate_new_password(body.password, body.confirm_password)
    result = await auth.sign_up(
        body.email.strip(),
        body.password,
        redirect_to=f"{ctx.site_url}/signin",
    )
    response = JSONResponse(
        status_code=201,
        content={
            "user": _user_payload(result.user) if result.user else None,
            "confirmation_required": result.session is None,
        },
    )
    if result.session is not None:
        set_session_cookies(response, result.session)
    return response


@router.post("/api/auth/signout")
async def sign_out(
    request: Request,
    auth: AuthClient = Depends(get_auth_client),
):
    token = extract_access_token(request)
    if token:
        await auth.sign_out(token)
    response = JSONResponse(content={"status": "signed_out", "redirect_to": "/signin"})
    clear_session_cookies(response)
    return response


@router.post("/api/auth/reset-password")
async def reset_password(
    body: ResetPasswordRequest,
    auth: AuthClient = Depends(get_auth_client),
    ctx: AppContext = Depends(get_app_context),
):
    await auth.reset_password_for_email(
        body.email.strip(),
        redirect_to=f"{ctx.site_url}/update-password",
    )
    return {"status": "sent", "message": "Check your email for the password reset link."}


@router.post("/api/auth/update-password")
async def update_password(
    body: UpdatePasswordRequest,
    identity: Identity = Depends(require_identity),
    auth: AuthClient = Depends(get_auth_client),
):
    validate_new_password(body.password, body.confirm_password)
    user = await auth.update_user(identity.access_token, body.password)
    return {"user": _user_payload(user), "redirect_to": "/"}


@router.get("/api/auth/session")
async def get_session(
    request: Request,
    auth: AuthClient = Depends(get_auth_client),
):
    identity = await resolve_identity(request, auth)
    if identity is None:
        return {"authenticated": False, "user": None}
    return {
        "authenticated": True,
        "user": UserResponse(id=identity.user_id, email=identity.email).model_dump(),
    }
