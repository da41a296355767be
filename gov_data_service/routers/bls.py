"""
BLS 数据路由
GET  /api/bls/series/{series_id}   - 单个序列
POST /api/bls/series               - 批量序列
GET  /api/bls/unemployment         - 失业率（LNS14000000）
GET  /api/bls/cpi                  - CPI（CUUR0000SA0）
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict, Field

from gov_data_service.models.response import ApiResponse
from gov_data_service.services.bls_service import (
    CPI_ALL_URBAN,
    UNEMPLOYMENT_RATE,
    get_bls_service,
)

router = APIRouter(prefix="/api/bls", tags=["BLS"])


class MultiSeriesRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    series_ids: List[str] = Field(alias="seriesIds")
    start_year: Optional[str] = Field(default=None, alias="startYear")
    end_year: Optional[str] = Field(default=None, alias="endYear")
    calculations: bool = False


def _default_years() -> tuple:
    year = date.today().year
    return str(year - 1), str(year)


@router.get("/series/{series_id}", response_model=ApiResponse)
async def get_series(
    series_id: str,
    start_year: Optional[str] = Query(default=None, alias="startYear"),
    end_year: Optional[str] = Query(default=None, alias="endYear"),
    calculations: bool = Query(default=False),
):
    """获取单个 BLS 序列"""
    try:
        data = await get_bls_service().get_series(
            series_id, start_year=start_year, end_year=end_year, calculations=calculations
        )
        return ApiResponse.ok(data=data)
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        )


@router.post("/series", response_model=ApiResponse)
async def get_multiple_series(body: MultiSeriesRequest):
    """批量获取 BLS 序列（最多 50 个）"""
    try:
        data = await get_bls_service().get_multiple_series(
            body.series_ids,
            start_year=body.start_year,
            end_year=body.end_year,
            calculations=body.calculations,
        )
        return ApiResponse.ok(data=data)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        )


async def _monthly_points(series_id: str, start_year: Optional[str], end_year: Optional[str]) -> list:
    default_start, default_end = _default_years()
    series = await get_bls_service().get_series(
        series_id, start_year=start_year or default_start, end_year=end_year or default_end
    )
    return [{"date": p["date"][:7], "value": p["value"]} for p in series["data"]]


@router.get("/unemployment", response_model=ApiResponse)
async def get_unemployment(
    start_year: Optional[str] = Query(default=None, alias="startYear"),
    end_year: Optional[str] = Query(default=None, alias="endYear"),
):
    """失业率月度数据，日期格式 YYYY-MM"""
    try:
        return ApiResponse.ok(data=await _monthly_points(UNEMPLOYMENT_RATE, start_year, end_year))
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        )


@router.get("/cpi", response_model=ApiResponse)
async def get_cpi(
    start_year: Optional[str] = Query(default=None, alias="startYear"),
    end_year: Optional[str] = Query(default=None, alias="endYear"),
):
    """居民消费价格指数月度数据，日期格式 YYYY-MM"""
    try:
        return ApiResponse.ok(data=await _monthly_points(CPI_ALL_URBAN, start_year, end_year))
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        )
