"""
FRED 数据路由
GET /api/fred/series/{series_id}   - 序列观测值（原始响应）
GET /api/fred/search               - 序列搜索
GET /api/fred/gdp                  - GDP
GET /api/fred/rates                - 联邦基金利率
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from gov_data_service.models.response import ApiResponse
from gov_data_service.services.fred_service import FED_FUNDS_RATE, GDP, get_fred_service

router = APIRouter(prefix="/api/fred", tags=["FRED"])


def _default_range() -> tuple:
    year = date.today().year
    return f"{year - 1}-01-01", f"{year}-12-31"


@router.get("/series/{series_id}", response_model=ApiResponse)
async def get_series(
    series_id: str,
    observation_start: Optional[str] = Query(default=None),
    observation_end: Optional[str] = Query(default=None),
    frequency: Optional[str] = Query(default=None),
    units: Optional[str] = Query(default=None),
):
    """获取 FRED 序列观测值"""
    try:
        data = await get_fred_service().get_series_observations(
            series_id,
            observation_start=observation_start,
            observation_end=observation_end,
            frequency=frequency,
            units=units,
        )
        return ApiResponse.ok(data=data)
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        )


@router.get("/search", response_model=ApiResponse)
async def search_series(
    search_text: Optional[str] = Query(default=None),
    limit: int = Query(default=20, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
):
    """按关键词搜索 FRED 序列"""
    if not search_text:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="search_text parameter is required",
        )
    try:
        data = await get_fred_service().search_series(search_text, limit=limit, offset=offset)
        return ApiResponse.ok(data=data)
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        )


async def _points(series_id: str, start: Optional[str], end: Optional[str], month_only: bool) -> list:
    default_start, default_end = _default_range()
    series = await get_fred_service().get_series(
        series_id,
        observation_start=start or default_start,
        observation_end=end or default_end,
    )
    return [
        {"date": p["date"][:7] if month_only else p["date"], "value": p["value"]}
        for p in series["data"]
    ]


@router.get("/gdp", response_model=ApiResponse)
async def get_gdp(
    observation_start: Optional[str] = Query(default=None),
    observation_end: Optional[str] = Query(default=None),
):
    """GDP 季度数据"""
    try:
        return ApiResponse.ok(data=await _points(GDP, observation_start, observation_end, False))
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        )


@router.get("/rates", response_model=ApiResponse)
async def get_rates(
    observation_start: Optional[str] = Query(default=None),
    observation_end: Optional[str] = Query(default=None),
):
    """联邦基金利率月度数据，日期格式 YYYY-MM"""
    try:
        return ApiResponse.ok(
            data=await _points(FED_FUNDS_RATE, observation_start, observation_end, True)
        )
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        )
