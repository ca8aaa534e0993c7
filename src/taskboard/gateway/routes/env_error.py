"""配置错误页路由

GET /env-error: 必需配置缺失时前端跳转的页面数据；配置完整时提示返回首页。
"""

from fastapi import APIRouter, Request

from ...core.env import REQUIRED_ENV_VARS, get_env_error_message, validate_env

router = APIRouter()


@router.get("/env-error")
async def env_error(request: Request):
    ctx = getattr(request.app.state, "ctx", None)
    env = ctx.env if ctx is not None else validate_env()
    if env.valid:
        return {"valid": True, "message": "", "redirect_to": "/"}
    return {
        "valid": False,
        "message": get_env_error_message(env),
        "missing": env.missing,
        "empty": env.empty,
        "required": list(REQUIRED_ENV_VARS),
        "instructions": (
            "Set the required variables in the process environment "
            "and restart the service."
        ),
    }
