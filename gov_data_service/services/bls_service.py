"""
BLS 数据服务
Bureau of Labor Statistics v2 时间序列接口（POST JSON），结果统一为 TimeSeries
"""

import logging
from typing import Any, Dict, List, Optional

from gov_data_service.config import settings
from gov_data_service.layers.acquisition import DataSourceError, get_acquisition_layer
from gov_data_service.layers.cache import get_cache_layer, make_key
from gov_data_service.layers.processing import get_processing_layer

logger = logging.getLogger(__name__)

_CACHE_NS = "bls"

UNEMPLOYMENT_RATE = "LNS14000000"
CPI_ALL_URBAN = "CUUR0000SA0"

# 常用序列（用于跨数据源搜索）
COMMON_SERIES: Dict[str, str] = {
    "CUUR0000SA0": "Consumer Price Index - All Urban Consumers",
    "CUUR0000SAF1": "Consumer Price Index - Food",
    "CUUR0000SA0E": "Consumer Price Index - Energy",
    "LNS14000000": "Unemployment Rate",
    "LNS12000000": "Employment Level",
    "LNS11000000": "Civilian Labor Force Level",
    "WPUFD49207": "Producer Price Index - Finished Goods",
    "WPUFD49104": "Producer Price Index - Intermediate Materials",
    "CES0500000003": "Average Hourly Earnings - Total Private",
    "CES3000000003": "Average Hourly Earnings - Manufacturing",
}


class BlsService:
    """BLS 业务服务"""

    def __init__(self, acquisition=None, cache=None, processing=None):
        self._acq = acquisition or get_acquisition_layer()
        self._cache = cache or get_cache_layer()
        self._proc = processing or get_processing_layer()

    @staticmethod
    def _build_request(
        series_ids: List[str],
        start_year: Optional[str],
        end_year: Optional[str],
        calculations: bool,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"seriesid": list(series_ids)}
        if start_year:
            payload["startyear"] = str(start_year)
        if end_year:
            payload["endyear"] = str(end_year)
        if calculations:
            payload["calculations"] = True
        # catalog 元数据仅对注册用户开放
        if settings.BLS_API_KEY:
            payload["registrationkey"] = settings.BLS_API_KEY
            payload["catalog"] = True
        return payload

    async def _fetch(self, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        try:
            body = await self._acq.bls_timeseries(payload)
            if not isinstance(body, dict):
                raise DataSourceError("bls", "unexpected response shape")
            status = body.get("status")
            if status != "REQUEST_SUCCEEDED":
                detail = ", ".join(body.get("message") or []) or str(status)
                raise DataSourceError("bls", f"BLS API error: {detail}")
            results = body.get("Results")
            series_list = results.get("series") if isinstance(results, dict) else None
            if not series_list:
                raise DataSourceError("bls", "No data found for series")
            return [self._proc.bls_series_to_timeseries(s) for s in series_list]
        except Exception as exc:
            logger.error(f"BLS 数据获取失败: {exc}")
            raise DataSourceError("bls", f"Failed to fetch BLS data: {exc}") from exc

    # ── 单序列 ────────────────────────────────────────────

    async def get_series(
        self,
        series_id: str,
        start_year: Optional[str] = None,
        end_year: Optional[str] = None,
        calculations: bool = False,
    ) -> Dict[str, Any]:
        """获取单个 BLS 序列（时间正序）"""
        options = {"start_year": start_year, "end_year": end_year, "calculations": calculations}
        key = make_key(_CACHE_NS, "series", series_id, options)
        cached = await self._cache.get(key)
        if cached is not None:
            return cached

        payload = self._build_request([series_id], start_year, end_year, calculations)
        series = (await self._fetch(payload))[0]
        series["id"] = series_id

        await self._cache.set(key, series, ttl=settings.CACHE_TTL)
        return series

    # ── 批量 ──────────────────────────────────────────────

    async def get_multiple_series(
        self,
        series_ids: List[str],
        start_year: Optional[str] = None,
        end_year: Optional[str] = None,
        calculations: bool = False,
    ) -> List[Dict[str, Any]]:
        """一次请求多个序列，最多 BLS_MAX_SERIES 个"""
        if not series_ids:
            raise ValueError("seriesIds must not be empty")
        if len(series_ids) > settings.BLS_MAX_SERIES:
            raise ValueError(
                f"Maximum {settings.BLS_MAX_SERIES} series can be requested at once"
            )

        options = {"start_year": start_year, "end_year": end_year, "calculations": calculations}
        key = make_key(_CACHE_NS, "multiple", ",".join(series_ids), options)
        cached = await self._cache.get(key)
        if cached is not None:
            return cached

        payload = self._build_request(series_ids, start_year, end_year, calculations)
        series_list = await self._fetch(payload)

        await self._cache.set(key, series_list, ttl=settings.CACHE_TTL)
        return series_list


# ── 模块级别单例 ──────────────────────────────────────────
_bls_service: Optional[BlsService] = None


def get_bls_service() -> BlsService:
    global _bls_service
    if _bls_service is None:
        _bls_service = BlsService()
    return _bls_service
