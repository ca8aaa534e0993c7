"""ServiceClient -- 远程数据服务（PostgREST）调用封装

每个实例绑定一个调用者身份（access token）；行级权限由远程服务按身份执行，
调用方仍需显式按 user_id 过滤。
"""

import time
from typing import Any

import httpx
import structlog

from .exceptions import ProviderError, ServiceUnreachableError

log = structlog.get_logger()

# 健康检查超时（硬编码，应快速响应）
HEALTH_CHECK_TIMEOUT_S = 5

# 连接类异常类型集合（包装为 ServiceUnreachableError）
CONNECTION_ERROR_TYPES = (
    ConnectionError,
    OSError,
    TimeoutError,
    httpx.TransportError,
)


def error_from_response(resp: httpx.Response) -> ProviderError:
    """将远程服务的错误响应转换为 ProviderError"""
    code: str | None = None
    try:
        body = resp.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        message = body.get("message") or body.get("msg") or body.get("error_description")
        code = body.get("error_code") or body.get("code")
        if code is not None:
            code = str(code)
    else:
        message = None

    return ProviderError(
        message=message or f"Remote service returned HTTP {resp.status_code}",
        recoverable=resp.status_code >= 500,
        status_code=resp.status_code,
        code=code,
    )


def _filter_params(filters: dict[str, Any] | None) -> dict[str, str]:
    """等值过滤 -> PostgREST 查询参数（None 转为 is.null）"""
    params: dict[str, str] = {}
    for column, value in (filters or {}).items():
        params[column] = "is.null" if value is None else f"eq.{value}"
    return params


class ServiceClient:
    """远程数据服务客户端

    封装表级 select / insert / update / delete，统一错误包装与日志。
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str,
        api_key: str,
        access_token: str | None = None,
    ) -> None:
        """
        Args:
            http: 共享的 httpx 连接池
            base_url: 服务基础 URL
            api_key: 服务公开密钥
            access_token: 调用者 access token，None 表示匿名调用
        """
        self._http = http
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._access_token = access_token

    @property
    def rest_url(self) -> str:
        return f"{self._base_url}/rest/v1"

    @property
    def is_authenticated(self) -> bool:
        return self._access_token is not None

    def _headers(self, prefer: str | None = None) -> dict[str, str]:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._access_token or self._api_key}",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    async def _request(
        self,
        method: str,
        table: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> httpx.Response:
        start_time = time.monotonic()
        try:
            resp = await self._http.request(
                method,
                f"{self.rest_url}/{table}",
                params=params,
                json=json,
                headers=self._headers(prefer),
            )
        except CONNECTION_ERROR_TYPES as e:
            log.error(
                "service_request_failed",
                method=method,
                table=table,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ServiceUnreachableError(self._base_url, e) from e

        duration_ms = int((time.monotonic() - start_time) * 1000)
        if resp.status_code >= 400:
            error = error_from_response(resp)
            log.error(
                "service_request_rejected",
                method=method,
                table=table,
                status_code=resp.status_code,
                code=error.code,
                error=str(error),
                duration_ms=duration_ms,
            )
            raise error

        log.debug(
            "service_request_completed",
            method=method,
            table=table,
            status_code=resp.status_code,
            duration_ms=duration_ms,
        )
        return resp

    async def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        """查询记录

        Args:
            table: 表名
            filters: 列名 -> 等值条件
            order_by: 排序列
            descending: 是否倒序
            limit: 最大返回条数
            columns: 返回列

        Returns:
            记录列表（JSON 对象）
        """
        params = {"select": columns, **_filter_params(filters)}
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"
        if limit is not None:
            params["limit"] = str(limit)
        resp = await self._request("GET", table, params=params)
        return resp.json()

    async def select_one(
        self,
        table: str,
        filters: dict[str, Any],
    ) -> dict[str, Any] | None:
        """按条件查询单条记录，不存在时返回 None"""
        rows = await self.select(table, filters=filters, limit=1)
        return rows[0] if rows else None

    async def insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        """插入单条记录，返回服务端生成的完整记录"""
        resp = await self._request(
            "POST",
            table,
            params={"select": "*"},
            json=record,
            prefer="return=representation",
        )
        rows = resp.json()
        if not rows:
            raise ProviderError(f"Insert into {table} returned no rows", recoverable=False)
        return rows[0]

    async def update(
        self,
        table: str,
        values: dict[str, Any],
        filters: dict[str, Any],
    ) -> list[dict[str, Any]]:
        """按条件部分更新，返回更新后的记录"""
        params = {"select": "*", **_filter_params(filters)}
        resp = await self._request(
            "PATCH",
            table,
            params=params,
            json=values,
            prefer="return=representation",
        )
        return resp.json()

    async def delete(
        self,
        table: str,
        filters: dict[str, Any],
    ) -> list[dict[str, Any]]:
        """按条件删除，返回被删除的记录"""
        params = {"select": "*", **_filter_params(filters)}
        resp = await self._request(
            "DELETE",
            table,
            params=params,
            prefer="return=representation",
        )
        return resp.json()

    async def health_check(self) -> bool:
        """检查远程数据服务可达性

        注意: 此方法不抛出异常，所有异常内部捕获并返回 False。
        """
        url = f"{self.rest_url}/"
        try:
            resp = await self._http.get(
                url,
                headers=self._headers(),
                timeout=HEALTH_CHECK_TIMEOUT_S,
            )
            return resp.status_code < 500
        except Exception as e:
            log.debug("health_check_failed", url=url, error=str(e))
            return False
