"""ChecklistEngine -- 部署检查清单状态机

每个检查项只有 incomplete / complete 两个状态：
- 用户可双向切换
- 自动检查仅能驱动 incomplete -> complete，失败不会回退已完成项

持久化为尽力而为：读写失败只记录日志，引擎总是返回可用的状态。
"""

import inspect
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

import structlog
from pydantic import ValidationError

from ..config import CHECKLIST_STORAGE_KEY
from ..exceptions import ChecklistItemNotFoundError
from ..models import ChecklistItem, ChecklistState, CheckResult, CompletionStats
from ..stats import percentage
from ..store import StateStore
from .catalog import DEPLOYMENT_CHECKLIST

log = structlog.get_logger()


class ChecklistEngine:
    """部署检查清单引擎

    Args:
        store: 本地状态存储；None 表示存储不可用（只在内存中计算，不持久化）
        items: 检查项目录
        storage_key: 持久化键名
        clock: 当前时间来源（测试注入）
    """

    def __init__(
        self,
        store: StateStore | None = None,
        items: Sequence[ChecklistItem] = DEPLOYMENT_CHECKLIST,
        storage_key: str = CHECKLIST_STORAGE_KEY,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._items = tuple(items)
        self._by_id = {item.id: item for item in self._items}
        self._storage_key = storage_key
        self._clock = clock or (lambda: datetime.now(UTC))

    @property
    def items(self) -> tuple[ChecklistItem, ...]:
        return self._items

    @property
    def automated_items(self) -> list[ChecklistItem]:
        return [item for item in self._items if item.automated]

    def get_item(self, item_id: str) -> ChecklistItem:
        item = self._by_id.get(item_id)
        if item is None:
            raise ChecklistItemNotFoundError(item_id)
        return item

    def initialize(self) -> ChecklistState:
        """全部检查项置为未完成"""
        return ChecklistState(
            items={item.id: False for item in self._items},
            last_updated=self._clock(),
        )

    async def load(self) -> ChecklistState:
        """读取持久化状态

        存储为空 / 不可用 / 解析失败时回退到 initialize()；
        目录中新增而持久化状态中缺失的检查项补为未完成。
        """
        if self._store is None:
            return self.initialize()

        try:
            raw = await self._store.get(self._storage_key)
        except Exception as e:
            log.warning("checklist_load_failed", key=self._storage_key, error=str(e))
            return self.initialize()

        if not raw:
            return self.initialize()

        try:
            state = ChecklistState.model_validate_json(raw)
        except ValidationError as e:
            log.warning(
                "checklist_state_corrupted",
                key=self._storage_key,
                error_count=e.error_count(),
            )
            return self.initialize()

        for item in self._items:
            state.items.setdefault(item.id, False)
        return state

    async def save(self, state: ChecklistState) -> ChecklistState:
        """打上更新时间并持久化（写入失败只记录日志）"""
        state.last_updated = self._clock()
        if self._store is None:
            return state
        try:
            await self._store.set(
                self._storage_key,
                state.model_dump_json(by_alias=True),
            )
        except Exception as e:
            log.warning("checklist_save_failed", key=self._storage_key, error=str(e))
        return state

    async def update(self, item_id: str, completed: bool) -> ChecklistState:
        """设置单个检查项的完成状态（last write wins）"""
        self.get_item(item_id)
        state = await self.load()
        state.items[item_id] = completed
        state = await self.save(state)
        log.info("checklist_item_updated", item_id=item_id, completed=completed)
        return state

    async def reset(self) -> ChecklistState:
        """丢弃全部进度"""
        state = await self.save(self.initialize())
        log.info("checklist_reset", total_items=len(self._items))
        return state

    async def run_automated_check(self, item: ChecklistItem | str) -> CheckResult:
        """执行单个检查项的自动检查

        通过时标记为完成；失败或抛错时状态不变，结果带回给调用方展示。
        """
        if isinstance(item, str):
            item = self.get_item(item)
        if item.automated_check is None:
            return CheckResult(
                item_id=item.id,
                passed=False,
                error="Item has no automated check",
            )

        try:
            outcome = item.automated_check()
            if inspect.isawaitable(outcome):
                outcome = await outcome
        except Exception as e:
            log.warning("automated_check_error", item_id=item.id, error=str(e))
            return CheckResult(item_id=item.id, passed=False, error=str(e))

        if not outcome:
            log.info("automated_check_failed", item_id=item.id)
            return CheckResult(item_id=item.id, passed=False, error="Check failed")

        await self.update(item.id, True)
        return CheckResult(item_id=item.id, passed=True)

    async def run_all_automated_checks(self) -> list[CheckResult]:
        """顺序执行全部自动检查，单项失败不影响后续"""
        return [await self.run_automated_check(item) for item in self.automated_items]

    def compute_stats(self, state: ChecklistState) -> CompletionStats:
        """完成度统计（只统计目录中的检查项）"""
        completed = [item for item in self._items if state.items.get(item.id, False)]
        critical = [item for item in self._items if item.critical]
        completed_critical = [item for item in critical if state.items.get(item.id, False)]

        return CompletionStats(
            total_items=len(self._items),
            completed_items=len(completed),
            completion_percentage=percentage(len(completed), len(self._items)),
            critical_items=len(critical),
            completed_critical_items=len(completed_critical),
            critical_completion_percentage=percentage(len(completed_critical), len(critical)),
            is_ready_for_deployment=len(completed_critical) == len(critical),
        )

    def incomplete_critical_items(self, state: ChecklistState) -> list[ChecklistItem]:
        """尚未完成的必需项（部署门禁提示用）"""
        return [
            item
            for item in self._items
            if item.critical and not state.items.get(item.id, False)
        ]
