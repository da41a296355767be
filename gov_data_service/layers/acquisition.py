"""
Layer 1 – 数据获取层
封装 BLS / FRED / Census / EIA / NOAA 的 HTTP 调用，统一超时与错误包装，
向上层返回解析后的 JSON。
"""

import logging
from typing import Any, Dict, Optional

import httpx

from gov_data_service.config import settings

logger = logging.getLogger(__name__)


class DataSourceError(Exception):
    """上游数据源调用失败或响应不可用"""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(message)


def _describe(exc: Exception) -> str:
    return str(exc) or exc.__class__.__name__


def _clean(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """去掉值为 None 的查询参数"""
    return {k: v for k, v in (params or {}).items() if v is not None}


class AcquisitionLayer:
    """数据获取层：每次调用新建 AsyncClient，transport 可注入（测试用）"""

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        self._transport = transport
        self._timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT

    async def _request(
        self,
        source: str,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                resp = await client.request(
                    method, url, params=_clean(params), json=json_body, headers=headers
                )
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning(f"{source.upper()} 返回 HTTP {status}: {url}")
            raise DataSourceError(source, f"HTTP {status} from {source.upper()}") from exc
        except httpx.HTTPError as exc:
            logger.warning(f"{source.upper()} 请求失败: {_describe(exc)}")
            raise DataSourceError(source, f"request failed: {_describe(exc)}") from exc
        except ValueError as exc:
            logger.warning(f"{source.upper()} 响应不是合法 JSON: {url}")
            raise DataSourceError(source, "response is not valid JSON") from exc

    # ── BLS ───────────────────────────────────────────────

    async def bls_timeseries(self, payload: Dict[str, Any]) -> Any:
        """POST BLS v2 timeseries 接口（JSON 请求体）"""
        return await self._request(
            "bls",
            "POST",
            f"{settings.BLS_BASE_URL}/timeseries/data/",
            json_body=payload,
            headers={"Content-Type": "application/json"},
        )

    # ── FRED ──────────────────────────────────────────────

    async def fred_get(self, endpoint: str, params: Dict[str, Any]) -> Any:
        query = {"api_key": settings.FRED_API_KEY, "file_type": "json", **params}
        return await self._request(
            "fred", "GET", f"{settings.FRED_BASE_URL}/{endpoint}", params=query
        )

    # ── Census ────────────────────────────────────────────

    async def census_get(self, path: str, params: Dict[str, Any]) -> Any:
        query = dict(params)
        if settings.CENSUS_API_KEY:
            query["key"] = settings.CENSUS_API_KEY
        return await self._request(
            "census", "GET", f"{settings.CENSUS_BASE_URL}/{path}", params=query
        )

    # ── EIA ───────────────────────────────────────────────

    async def eia_get(self, route: str, params: Dict[str, Any]) -> Any:
        query = {"api_key": settings.EIA_API_KEY, **params}
        return await self._request(
            "eia", "GET", f"{settings.EIA_BASE_URL}/{route}/data", params=query
        )

    # ── NOAA ──────────────────────────────────────────────

    async def noaa_get(self, endpoint: str, params: Dict[str, Any]) -> Any:
        return await self._request(
            "noaa",
            "GET",
            f"{settings.NOAA_BASE_URL}/{endpoint}",
            params=params,
            headers={"token": settings.NOAA_API_TOKEN},
        )


# ── 模块级别单例 ──────────────────────────────────────────
_acquisition: Optional[AcquisitionLayer] = None


def get_acquisition_layer() -> AcquisitionLayer:
    global _acquisition
    if _acquisition is None:
        _acquisition = AcquisitionLayer()
    return _acquisition
