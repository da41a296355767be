"""
NOAA 数据服务
NCEI Climate Data Online v2：气温、降水、极端气候与数据集列表
"""

import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

from gov_data_service.config import settings
from gov_data_service.layers.acquisition import DataSourceError, get_acquisition_layer
from gov_data_service.layers.cache import get_cache_layer, make_key
from gov_data_service.layers.processing import get_processing_layer
from gov_data_service.models.timeseries import NoaaData

logger = logging.getLogger(__name__)

_CACHE_NS = "noaa"

DEFAULT_DATASET = "GHCND"
DEFAULT_LOCATION = "FIPS:US"

_QUERIES: Dict[str, Dict[str, Any]] = {
    "temperature": {"datatypeid": "TAVG,TMAX,TMIN"},
    "precipitation": {"datatypeid": "PRCP"},
    "extremes": {
        "datatypeid": "TMAX,TMIN,PRCP",
        "sortfield": "date",
        "sortorder": "desc",
    },
}

DATA_TYPES = list(_QUERIES)


def default_date_range(today: Optional[date] = None) -> Tuple[str, str]:
    """CDO 日数据单次查询最长一年，默认取最近 365 天"""
    today = today or date.today()
    return (today - timedelta(days=365)).isoformat(), today.isoformat()


class NoaaService:
    """NOAA 业务服务"""

    def __init__(self, acquisition=None, cache=None, processing=None):
        self._acq = acquisition or get_acquisition_layer()
        self._cache = cache or get_cache_layer()
        self._proc = processing or get_processing_layer()

    async def get_data(
        self,
        data_type: str,
        startdate: Optional[str] = None,
        enddate: Optional[str] = None,
        locationid: Optional[str] = None,
        datasetid: Optional[str] = None,
    ) -> Dict[str, Any]:
        """按数据类型查询 /data 接口，返回 {metadata, results}"""
        query = _QUERIES.get(data_type)
        if query is None:
            raise ValueError(f"Invalid data type. Available: {', '.join(DATA_TYPES)}")

        default_start, default_end = default_date_range()
        options = {
            "startdate": startdate or default_start,
            "enddate": enddate or default_end,
            "locationid": locationid or DEFAULT_LOCATION,
            # 极端气候固定使用 GHCND 日数据
            "datasetid": DEFAULT_DATASET if data_type == "extremes" else (datasetid or DEFAULT_DATASET),
        }
        key = make_key(_CACHE_NS, data_type, options)
        cached = await self._cache.get(key)
        if cached is not None:
            return cached

        params = {**options, **query, "units": "standard", "limit": 1000}
        try:
            body = await self._acq.noaa_get("data", params)
            results = body.get("results") if isinstance(body, dict) else None
            if not isinstance(results, list):
                raise DataSourceError("noaa", f"No {data_type} data found in NOAA response")
            data = NoaaData(
                metadata=body.get("metadata") or {},
                results=self._proc.noaa_results_to_points(results),
            ).model_dump()
        except Exception as exc:
            logger.error(f"NOAA {data_type} 获取失败: {exc}")
            raise DataSourceError("noaa", f"Failed to fetch NOAA {data_type} data: {exc}") from exc

        await self._cache.set(key, data, ttl=settings.NOAA_CACHE_TTL)
        return data

    async def get_temperature_data(self, **options: Any) -> Dict[str, Any]:
        return await self.get_data("temperature", **options)

    async def get_precipitation_data(self, **options: Any) -> Dict[str, Any]:
        return await self.get_data("precipitation", **options)

    async def get_climate_extremes(self, **options: Any) -> Dict[str, Any]:
        return await self.get_data("extremes", **options)

    async def get_datasets(self) -> List[Dict[str, Any]]:
        """可用数据集列表（缓存 24 小时）"""
        key = make_key(_CACHE_NS, "datasets")
        cached = await self._cache.get(key)
        if cached is not None:
            return cached

        try:
            body = await self._acq.noaa_get("datasets", {"limit": 1000})
            datasets = body.get("results") if isinstance(body, dict) else None
            if not isinstance(datasets, list):
                raise DataSourceError("noaa", "No datasets found")
        except Exception as exc:
            logger.error(f"NOAA 数据集列表获取失败: {exc}")
            raise DataSourceError("noaa", f"Failed to fetch NOAA datasets: {exc}") from exc

        await self._cache.set(key, datasets, ttl=settings.METADATA_CACHE_TTL)
        return datasets


# ── 模块级别单例 ──────────────────────────────────────────
_noaa_service: Optional[NoaaService] = None


def get_noaa_service() -> NoaaService:
    global _noaa_service
    if _noaa_service is None:
        _noaa_service = NoaaService()
    return _noaa_service
