"""
EIA 数据服务
Energy Information Administration v2 接口：发电量（按燃料类型）与能源价格

上游不可用时（EIA_MOCK_FALLBACK 开启）返回内置示例数据，source 标记为 "mock"，
示例数据不写入缓存。
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from gov_data_service.config import settings
from gov_data_service.layers.acquisition import DataSourceError, get_acquisition_layer
from gov_data_service.layers.cache import get_cache_layer, make_key
from gov_data_service.layers.processing import get_processing_layer
from gov_data_service.models.timeseries import EiaSeriesData

logger = logging.getLogger(__name__)

_CACHE_NS = "eia"

_GENERATION_ROUTE = "electricity/electric-power-operational-data"
_MWH = "thousand megawatthours"
_MOCK_PERIODS = ["2024-01", "2024-02", "2024-03", "2024-04", "2024-05", "2024-06"]


def _generation(fuel: str, series_id: str, name: str, description: str, mock: List[float]) -> dict:
    return {
        "route": _GENERATION_ROUTE,
        "column": "generation",
        "facets": {"fueltypeid": fuel, "location": "US"},
        "series_id": series_id,
        "name": name,
        "units": _MWH,
        "description": description,
        "mock": mock,
    }


# ── 数据集注册表 ──────────────────────────────────────────
_DATASETS: Dict[str, Dict[str, Any]] = {
    "electricity": _generation(
        "ALL", "EIA_ELECTRICITY_GENERATION", "Total Electricity Generation",
        "Total electricity generation in the United States",
        [325000, 310000, 315000, 295000, 305000, 340000],
    ),
    "renewable": _generation(
        "AOR", "EIA_RENEWABLE_GENERATION", "Renewable Energy Generation",
        "Renewable energy generation (solar, wind, hydro, geothermal, biomass)",
        [45000, 48000, 52000, 58000, 62000, 68000],
    ),
    "solar": _generation(
        "SUN", "EIA_SOLAR_GENERATION", "Solar Energy Generation",
        "Solar photovoltaic and thermal energy generation",
        [8500, 11200, 15800, 18900, 22400, 24100],
    ),
    "wind": _generation(
        "WND", "EIA_WIND_GENERATION", "Wind Energy Generation",
        "Wind turbine energy generation",
        [38500, 35200, 32800, 29900, 26400, 25100],
    ),
    "coal": _generation(
        "COL", "EIA_COAL_GENERATION", "Coal Energy Generation",
        "Coal-fired power plant energy generation",
        [85500, 78200, 75800, 69900, 72400, 82100],
    ),
    "nuclear": _generation(
        "NUC", "EIA_NUCLEAR_GENERATION", "Nuclear Energy Generation",
        "Nuclear power plant energy generation",
        [67500, 71200, 69800, 65900, 68400, 72100],
    ),
    "gas-prices": {
        "route": "natural-gas/pri/sum",
        "column": "price",
        "facets": {"duoarea": "NUS"},
        "series_id": "EIA_NATURAL_GAS_PRICES",
        "name": "Natural Gas Prices",
        "units": "dollars per thousand cubic feet",
        "description": "U.S. natural gas wellhead prices",
        "mock": [2.85, 2.92, 2.78, 2.65, 2.58, 2.71],
    },
    "petroleum": {
        "route": "petroleum/pri/spt",
        "column": "price",
        "facets": {"duoarea": "NUS"},
        "series_id": "EIA_PETROLEUM_PRICES",
        "name": "Petroleum Prices",
        "units": "dollars per barrel",
        "description": "U.S. petroleum and crude oil prices",
        "mock": [78.50, 82.30, 75.80, 79.60, 81.20, 77.90],
    },
}

DATA_TYPES = list(_DATASETS)


def default_period_range(today: Optional[date] = None) -> Tuple[str, str]:
    """默认区间：上一年 1 月至今年 12 月"""
    today = today or date.today()
    return f"{today.year - 1}-01", f"{today.year}-12"


def dataset_catalog() -> List[Dict[str, str]]:
    """注册表摘要（跨数据源搜索用）"""
    return [
        {"id": data_type, "title": ds["name"], "units": ds["units"], "description": ds["description"]}
        for data_type, ds in _DATASETS.items()
    ]


class EiaService:
    """EIA 业务服务"""

    def __init__(self, acquisition=None, cache=None, processing=None):
        self._acq = acquisition or get_acquisition_layer()
        self._cache = cache or get_cache_layer()
        self._proc = processing or get_processing_layer()

    @staticmethod
    def _build_params(ds: Dict[str, Any], frequency: str, start: str, end: str) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "frequency": frequency,
            "data[]": ds["column"],
            "start": start,
            "end": end,
            "sort[0][column]": "period",
            "sort[0][direction]": "desc",
            "offset": 0,
            "length": 100,
        }
        for facet, value in ds["facets"].items():
            params[f"facets[{facet}][]"] = value
        return params

    @staticmethod
    def _mock(ds: Dict[str, Any]) -> Dict[str, Any]:
        return EiaSeriesData(
            series_id=ds["series_id"],
            name=f"{ds['name']} (Mock)",
            units=ds["units"],
            frequency="monthly",
            data=[{"period": p, "value": v} for p, v in zip(_MOCK_PERIODS, ds["mock"])],
            description=f"Mock {ds['name'].lower()} data (API unavailable)",
            source="mock",
        ).model_dump()

    async def get_series(
        self,
        data_type: str,
        frequency: str = "monthly",
        start: Optional[str] = None,
        end: Optional[str] = None,
    ) -> Dict[str, Any]:
        """获取指定数据集（按 period 正序）"""
        ds = _DATASETS.get(data_type)
        if ds is None:
            raise ValueError(f"Invalid data type. Available: {', '.join(DATA_TYPES)}")

        default_start, default_end = default_period_range()
        start = start or default_start
        end = end or default_end
        options = {"frequency": frequency, "start": start, "end": end}
        key = make_key(_CACHE_NS, data_type, options)
        cached = await self._cache.get(key)
        if cached is not None:
            return cached

        try:
            body = await self._acq.eia_get(
                ds["route"], self._build_params(ds, frequency, start, end)
            )
            response = body.get("response") if isinstance(body, dict) else None
            rows = response.get("data") if isinstance(response, dict) else None
            if not isinstance(rows, list):
                raise DataSourceError("eia", f"No {data_type} data found in EIA response")
            result = EiaSeriesData(
                series_id=ds["series_id"],
                name=ds["name"],
                units=ds["units"],
                frequency=frequency,
                data=self._proc.eia_rows_to_points(rows, ds["column"]),
                description=ds["description"],
            ).model_dump()
        except Exception as exc:
            if settings.EIA_MOCK_FALLBACK:
                logger.warning(f"EIA {data_type} 获取失败，返回示例数据: {exc}")
                return self._mock(ds)
            logger.error(f"EIA {data_type} 获取失败: {exc}")
            raise DataSourceError("eia", f"Failed to fetch EIA data: {exc}") from exc

        await self._cache.set(key, result, ttl=settings.EIA_CACHE_TTL)
        return result


# ── 模块级别单例 ──────────────────────────────────────────
_eia_service: Optional[EiaService] = None


def get_eia_service() -> EiaService:
    global _eia_service
    if _eia_service is None:
        _eia_service = EiaService()
    return _eia_service
