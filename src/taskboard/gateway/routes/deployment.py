"""部署检查清单路由

GET /api/deployment/checklist: 分类 + 检查项 + 完成状态 + 统计
PUT /api/deployment/checklist/items/{item_id}: 设置单项完成状态
POST /api/deployment/checklist/items/{item_id}/check: 执行单项自动检查
POST /api/deployment/checklist/checks: 顺序执行全部自动检查
POST /api/deployment/checklist/reset: 清空进度
POST /api/deployment/deploy: 部署门禁（必需项未全部完成时 409）
"""

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from starlette.responses import JSONResponse

from ...core.checklist import ChecklistEngine, get_categories_with_items
from ...core.models import ChecklistState
from ...core.stats import percentage
from ..deps import get_checklist_engine, require_identity
from ..services.session_service import Identity

log = structlog.get_logger()

router = APIRouter(dependencies=[Depends(require_identity)])


class ItemUpdateRequest(BaseModel):
    completed: bool


def _checklist_payload(engine: ChecklistEngine, state: ChecklistState) -> dict:
    categories = []
    for info, items in get_categories_with_items():
        completed = sum(1 for item in items if state.items.get(item.id, False))
        categories.append(
            {
                **info.model_dump(mode="json"),
                "completed_count": completed,
                "completion_percentage": percentage(completed, len(items)),
                "items": [
                    {
                        **item.model_dump(mode="json"),
                        "automated": item.automated,
                        "completed": state.items.get(item.id, False),
                    }
                    for item in items
                ],
            }
        )
    return {
        "state": state.model_dump(mode="json", by_alias=True),
        "stats": engine.compute_stats(state).model_dump(mode="json"),
        "categories": categories,
    }


@router.get("/api/deployment/checklist")
async def get_checklist(engine: ChecklistEngine = Depends(get_checklist_engine)):
    state = await engine.load()
    return _checklist_payload(engine, state)


@router.put("/api/deployment/checklist/items/{item_id}")
async def update_item(
    item_id: str,
    body: ItemUpdateRequest,
    engine: ChecklistEngine = Depends(get_checklist_engine),
):
    state = await engine.update(item_id, body.completed)
    return {
        "state": state.model_dump(mode="json", by_alias=True),
        "stats": engine.compute_stats(state).model_dump(mode="json"),
    }


@router.post("/api/deployment/checklist/items/{item_id}/check")
async def run_item_check(
    item_id: str,
    engine: ChecklistEngine = Depends(get_checklist_engine),
):
    result = await engine.run_automated_check(item_id)
    state = await engine.load()
    return {
        "result": result.model_dump(mode="json"),
        "state": state.model_dump(mode="json", by_alias=True),
        "stats": engine.compute_stats(state).model_dump(mode="json"),
    }


@router.post("/api/deployment/checklist/checks")
async def run_all_checks(engine: ChecklistEngine = Depends(get_checklist_engine)):
    results = await engine.run_all_automated_checks()
    state = await engine.load()
    return {
        "results": [r.model_dump(mode="json") for r in results],
        "state": state.model_dump(mode="json", by_alias=True),
        "stats": engine.compute_stats(state).model_dump(mode="json"),
    }


@router.post("/api/deployment/checklist/reset")
async def reset_checklist(engine: ChecklistEngine = Depends(get_checklist_engine)):
    state = await engine.reset()
    return _checklist_payload(engine, state)


@router.post("/api/deployment/deploy")
async def deploy(
    identity: Identity = Depends(require_identity),
    engine: ChecklistEngine = Depends(get_checklist_engine),
):
    """必需项全部完成才放行"""
    state = await engine.load()
    stats = engine.compute_stats(state)
    if not stats.is_ready_for_deployment:
        pending = engine.incomplete_critical_items(state)
        log.info("deploy_blocked", user_id=identity.user_id, pending_count=len(pending))
        return JSONResponse(
            status_code=409,
            content={
                "error": {
                    "code": "NOT_READY_FOR_DEPLOYMENT",
                    "message": "Complete all critical items before deploying",
                    "pending_items": [item.id for item in pending],
                },
                "stats": stats.model_dump(mode="json"),
            },
        )

    log.info("deploy_approved", user_id=identity.user_id)
    return {"status": "ready", "stats": stats.model_dump(mode="json")}
