"""
Census 数据服务
U.S. Census Bureau 数据接口，默认使用上一年度的 vintage
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from gov_data_service.config import settings
from gov_data_service.layers.acquisition import DataSourceError, get_acquisition_layer
from gov_data_service.layers.cache import get_cache_layer, make_key
from gov_data_service.layers.processing import get_processing_layer, parse_numeric_value

logger = logging.getLogger(__name__)

_CACHE_NS = "census"

DEFAULT_DATASET = "acs/acs5"
TOTAL_POPULATION = "B01003_001E"


def _default_vintage() -> int:
    return date.today().year - 1


class CensusService:
    """Census 业务服务"""

    def __init__(self, acquisition=None, cache=None, processing=None):
        self._acq = acquisition or get_acquisition_layer()
        self._cache = cache or get_cache_layer()
        self._proc = processing or get_processing_layer()

    async def get_data(
        self,
        dataset: str,
        get: str,
        for_: Optional[str] = None,
        in_: Optional[str] = None,
        year: Optional[int] = None,
    ) -> List[List[Any]]:
        """查询 Census 数据集，返回原始二维数组（首行为表头）"""
        vintage = year or _default_vintage()
        options = {"get": get, "for": for_, "in": in_, "year": vintage}
        key = make_key(_CACHE_NS, "data", dataset, options)
        cached = await self._cache.get(key)
        if cached is not None:
            return cached

        try:
            rows = await self._acq.census_get(
                f"{vintage}/{dataset}", {"get": get, "for": for_, "in": in_}
            )
            if not isinstance(rows, list):
                raise DataSourceError("census", "unexpected response shape")
        except Exception as exc:
            logger.error(f"Census 数据获取失败 ({dataset}): {exc}")
            raise DataSourceError("census", f"Failed to fetch Census data: {exc}") from exc

        await self._cache.set(key, rows, ttl=settings.CACHE_TTL)
        return rows

    async def get_variables(self, dataset: str, group: Optional[str] = None) -> Dict[str, Any]:
        """获取数据集变量表（元数据，缓存 24 小时）"""
        vintage = _default_vintage()
        key = make_key(_CACHE_NS, "variables", dataset, group or "all", str(vintage))
        cached = await self._cache.get(key)
        if cached is not None:
            return cached

        try:
            payload = await self._acq.census_get(
                f"{vintage}/{dataset}/variables", {"group": group}
            )
            if not isinstance(payload, dict):
                raise DataSourceError("census", "unexpected response shape")
        except Exception as exc:
            logger.error(f"Census 变量表获取失败 ({dataset}): {exc}")
            raise DataSourceError("census", f"Failed to fetch Census variables: {exc}") from exc

        await self._cache.set(key, payload, ttl=settings.METADATA_CACHE_TTL)
        return payload

    async def get_population_by_state(self, limit: int = 10) -> List[Dict[str, Any]]:
        """各州总人口（ACS 5 年估计），返回 [{state, value}]"""
        rows = await self.get_data(
            DEFAULT_DATASET, f"NAME,{TOTAL_POPULATION}", for_="state:*"
        )
        try:
            records = self._proc.census_rows_to_records(rows)
        except (TypeError, ValueError) as exc:
            raise DataSourceError("census", f"Failed to fetch Census data: {exc}") from exc
        population = []
        for r in records[:limit]:
            value = parse_numeric_value(r.get(TOTAL_POPULATION))
            population.append({
                "state": r.get("NAME") or r.get("state"),
                "value": int(value) if value is not None else None,
            })
        return population


# ── 模块级别单例 ──────────────────────────────────────────
_census_service: Optional[CensusService] = None


def get_census_service() -> CensusService:
    global _census_service
    if _census_service is None:
        _census_service = CensusService()
    return _census_service
