"""
数据源目录服务
列出可用数据源，并在 BLS 常用序列 / EIA 数据集 / FRED 搜索结果中跨源检索
"""

import logging
from typing import Any, Dict, List, Optional

from gov_data_service.config import settings
from gov_data_service.layers.acquisition import DataSourceError
from gov_data_service.services.bls_service import COMMON_SERIES
from gov_data_service.services.eia_service import dataset_catalog
from gov_data_service.services.fred_service import get_fred_service

logger = logging.getLogger(__name__)

_SOURCES = [
    {
        "id": "bls",
        "name": "Bureau of Labor Statistics",
        "description": "Employment, unemployment, wages, and price data",
        "key_setting": "BLS_API_KEY",
        "key_required": False,
    },
    {
        "id": "fred",
        "name": "Federal Reserve Economic Data",
        "description": "Economic indicators and financial data",
        "key_setting": "FRED_API_KEY",
        "key_required": True,
    },
    {
        "id": "census",
        "name": "U.S. Census Bureau",
        "description": "Population, demographics, and economic census data",
        "key_setting": "CENSUS_API_KEY",
        "key_required": False,
    },
    {
        "id": "eia",
        "name": "U.S. Energy Information Administration",
        "description": "Electricity generation and energy price data",
        "key_setting": "EIA_API_KEY",
        "key_required": True,
    },
    {
        "id": "noaa",
        "name": "National Oceanic and Atmospheric Administration",
        "description": "Temperature, precipitation, and climate data",
        "key_setting": "NOAA_API_TOKEN",
        "key_required": True,
    },
]

SOURCE_IDS = [s["id"] for s in _SOURCES]


class CatalogService:
    """数据源目录与跨源搜索"""

    def __init__(self, fred=None):
        self._fred = fred or get_fred_service()

    def list_sources(self) -> List[Dict[str, Any]]:
        sources = []
        for s in _SOURCES:
            configured = bool(getattr(settings, s["key_setting"]))
            sources.append({
                "id": s["id"],
                "name": s["name"],
                "description": s["description"],
                "available": configured or not s["key_required"],
                "api_key_configured": configured,
            })
        return sources

    async def search(
        self, query: str, source: Optional[str] = None, limit: int = 20
    ) -> List[Dict[str, Any]]:
        """关键词检索；FRED 调用失败时只记录日志，返回其余来源的结果"""
        kw = query.lower()
        results: List[Dict[str, Any]] = []

        if source in (None, "bls"):
            results.extend(
                {"id": sid, "title": title, "source": "bls"}
                for sid, title in COMMON_SERIES.items()
                if kw in sid.lower() or kw in title.lower()
            )

        if source in (None, "eia"):
            results.extend(
                {"id": d["id"], "title": d["title"], "units": d["units"], "source": "eia"}
                for d in dataset_catalog()
                if kw in d["id"] or kw in d["title"].lower() or kw in d["description"].lower()
            )

        if source in (None, "fred"):
            try:
                payload = await self._fred.search_series(query, limit=limit)
                results.extend(
                    {
                        "id": s.get("id"),
                        "title": s.get("title"),
                        "units": s.get("units"),
                        "frequency": s.get("frequency"),
                        "source": "fred",
                    }
                    for s in payload.get("seriess") or []
                )
            except DataSourceError as exc:
                logger.warning(f"FRED 搜索不可用，跳过: {exc}")

        return results[:limit]


# ── 模块级别单例 ──────────────────────────────────────────
_catalog_service: Optional[CatalogService] = None


def get_catalog_service() -> CatalogService:
    global _catalog_service
    if _catalog_service is None:
        _catalog_service = CatalogService()
    return _catalog_service
