"""
NOAA 气候数据路由
GET /api/noaa/temperature        - 月均气温（最近 12 个月）
GET /api/noaa/precipitation      - 月均降水（最近 12 个月）
GET /api/noaa/extremes           - 极端气候记录
GET /api/noaa/datasets           - 可用数据集
GET /api/noaa/data/{data_type}   - 通用查询（temperature / precipitation / extremes）
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from gov_data_service.layers.processing import get_processing_layer
from gov_data_service.models.response import ApiResponse
from gov_data_service.services.noaa_service import get_noaa_service

router = APIRouter(prefix="/api/noaa", tags=["NOAA"])

_RECENT_MONTHS = 12
_EXTREMES_PER_TYPE = 10
_DATASETS_SHOWN = 20


@router.get("/temperature", response_model=ApiResponse)
async def get_temperature(
    startdate: Optional[str] = Query(default=None),
    enddate: Optional[str] = Query(default=None),
    locationid: Optional[str] = Query(default=None),
):
    """各站点气温按月平均，保留一位小数"""
    try:
        data = await get_noaa_service().get_temperature_data(
            startdate=startdate, enddate=enddate, locationid=locationid
        )
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        )
    monthly = get_processing_layer().monthly_average(data["results"], decimals=1)
    return ApiResponse.ok(
        data=monthly[-_RECENT_MONTHS:],
        metadata={
            "name": "Average Temperature",
            "units": "degrees Fahrenheit",
            "description": "Monthly average temperatures across the United States",
            "source": "noaa",
        },
    )


@router.get("/precipitation", response_model=ApiResponse)
async def get_precipitation(
    startdate: Optional[str] = Query(default=None),
    enddate: Optional[str] = Query(default=None),
    locationid: Optional[str] = Query(default=None),
):
    """各站点降水量按月平均，保留两位小数"""
    try:
        data = await get_noaa_service().get_precipitation_data(
            startdate=startdate, enddate=enddate, locationid=locationid
        )
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        )
    monthly = get_processing_layer().monthly_average(data["results"], decimals=2)
    return ApiResponse.ok(
        data=monthly[-_RECENT_MONTHS:],
        metadata={
            "name": "Precipitation",
            "units": "inches",
            "description": "Monthly average station precipitation across the United States",
            "source": "noaa",
        },
    )


@router.get("/extremes", response_model=ApiResponse)
async def get_extremes(
    startdate: Optional[str] = Query(default=None),
    enddate: Optional[str] = Query(default=None),
    locationid: Optional[str] = Query(default=None),
):
    """最高 / 最低气温与降水记录，每类最多 10 条（按日期倒序）"""
    try:
        data = await get_noaa_service().get_climate_extremes(
            startdate=startdate, enddate=enddate, locationid=locationid
        )
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        )
    groups = get_processing_layer().group_by_datatype(data["results"], limit=_EXTREMES_PER_TYPE)
    return ApiResponse.ok(
        data={
            "max_temp": groups.get("TMAX", []),
            "min_temp": groups.get("TMIN", []),
            "precipitation": groups.get("PRCP", []),
        },
        metadata={
            "name": "Climate Extremes",
            "units": "various",
            "description": "Recent climate extreme events in the United States",
            "source": "noaa",
        },
    )


@router.get("/datasets", response_model=ApiResponse)
async def get_datasets():
    """NOAA 可用数据集（前 20 个）"""
    try:
        datasets = await get_noaa_service().get_datasets()
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        )
    return ApiResponse.ok(
        data=datasets[:_DATASETS_SHOWN],
        metadata={
            "name": "NOAA Datasets",
            "description": "Available climate and weather datasets from NOAA",
            "source": "noaa",
            "total": len(datasets),
        },
    )


@router.get("/data/{data_type}", response_model=ApiResponse)
async def get_data(
    data_type: str,
    startdate: Optional[str] = Query(default=None),
    enddate: Optional[str] = Query(default=None),
    locationid: Optional[str] = Query(default=None),
):
    """按数据类型查询 NOAA 原始结果"""
    try:
        data = await get_noaa_service().get_data(
            data_type, startdate=startdate, enddate=enddate, locationid=locationid
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        )
    return ApiResponse.ok(data=data["results"], metadata=data["metadata"])
