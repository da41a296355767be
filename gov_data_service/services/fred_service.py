"""
FRED 数据服务
St. Louis Fed 经济数据：序列观测值、序列搜索
"""

import logging
from typing import Any, Dict, Optional

from gov_data_service.config import settings
from gov_data_service.layers.acquisition import DataSourceError, get_acquisition_layer
from gov_data_service.layers.cache import get_cache_layer, make_key
from gov_data_service.layers.processing import get_processing_layer

logger = logging.getLogger(__name__)

_CACHE_NS = "fred"

GDP = "GDP"
FED_FUNDS_RATE = "FEDFUNDS"

# 观测值接口不返回频率，已知序列在此登记
SERIES_FREQUENCY: Dict[str, str] = {
    GDP: "quarterly",
    FED_FUNDS_RATE: "monthly",
}


class FredService:
    """FRED 业务服务"""

    def __init__(self, acquisition=None, cache=None, processing=None):
        self._acq = acquisition or get_acquisition_layer()
        self._cache = cache or get_cache_layer()
        self._proc = processing or get_processing_layer()

    async def get_series_observations(self, series_id: str, **options: Any) -> Dict[str, Any]:
        """
        获取序列观测值（原始 FRED 响应）

        options: observation_start / observation_end / frequency / units 等 FRED 参数，
        值为 None 的参数不会发送。
        """
        options = {k: v for k, v in options.items() if v is not None}
        key = make_key(_CACHE_NS, "series", series_id, options)
        cached = await self._cache.get(key)
        if cached is not None:
            return cached

        try:
            payload = await self._acq.fred_get(
                "series/observations", {"series_id": series_id, **options}
            )
            if not isinstance(payload, dict) or not isinstance(payload.get("observations"), list):
                raise DataSourceError("fred", "response has no observations")
        except Exception as exc:
            logger.error(f"FRED 数据获取失败 ({series_id}): {exc}")
            raise DataSourceError("fred", f"Failed to fetch FRED data: {exc}") from exc

        await self._cache.set(key, payload, ttl=settings.CACHE_TTL)
        return payload

    async def get_series(self, series_id: str, **options: Any) -> Dict[str, Any]:
        """观测值转换为统一 TimeSeries，"." 缺失值记为 None"""
        payload = await self.get_series_observations(series_id, **options)
        frequency = options.get("frequency") or SERIES_FREQUENCY.get(series_id)
        return self._proc.fred_to_timeseries(series_id, payload, frequency)

    async def search_series(
        self, search_text: str, limit: int = 20, offset: int = 0
    ) -> Dict[str, Any]:
        """按关键词搜索 FRED 序列"""
        options = {"search_text": search_text, "limit": limit, "offset": offset}
        key = make_key(_CACHE_NS, "search", options)
        cached = await self._cache.get(key)
        if cached is not None:
            return cached

        try:
            payload = await self._acq.fred_get("series/search", options)
            if not isinstance(payload, dict):
                raise DataSourceError("fred", "unexpected response shape")
        except Exception as exc:
            logger.error(f"FRED 搜索失败 ({search_text}): {exc}")
            raise DataSourceError("fred", f"Failed to search FRED data: {exc}") from exc

        await self._cache.set(key, payload, ttl=settings.CACHE_TTL)
        return payload


# ── 模块级别单例 ──────────────────────────────────────────
_fred_service: Optional[FredService] = None


def get_fred_service() -> FredService:
    global _fred_service
    if _fred_service is None:
        _fred_service = FredService()
    return _fred_service
