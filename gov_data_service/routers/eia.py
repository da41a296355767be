"""
EIA 能源数据路由
GET /api/eia/electricity         - 总发电量
GET /api/eia/renewable           - 可再生能源发电量
GET /api/eia/gas-prices          - 天然气价格
GET /api/eia/data/{data_type}    - 通用查询（electricity / renewable / gas-prices / solar / wind / coal / nuclear / petroleum）
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from gov_data_service.models.response import ApiResponse
from gov_data_service.services.eia_service import get_eia_service

router = APIRouter(prefix="/api/eia", tags=["EIA"])


def _summary(data: dict) -> dict:
    return {
        "name": data["name"],
        "units": data["units"],
        "description": data["description"],
        "source": data["source"],
    }


async def _chart_points(data_type: str) -> ApiResponse:
    try:
        data = await get_eia_service().get_series(data_type)
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        )
    points = [{"date": p["period"], "value": p["value"]} for p in data["data"]]
    return ApiResponse.ok(data=points, metadata=_summary(data))


@router.get("/electricity", response_model=ApiResponse)
async def get_electricity():
    """全美总发电量"""
    return await _chart_points("electricity")


@router.get("/renewable", response_model=ApiResponse)
async def get_renewable():
    """可再生能源发电量"""
    return await _chart_points("renewable")


@router.get("/gas-prices", response_model=ApiResponse)
async def get_gas_prices():
    """天然气价格"""
    return await _chart_points("gas-prices")


@router.get("/data/{data_type}", response_model=ApiResponse)
async def get_data(
    data_type: str,
    frequency: str = Query(default="monthly"),
    start: Optional[str] = Query(default=None, description="起始期 YYYY-MM，默认上一年 1 月"),
    end: Optional[str] = Query(default=None, description="结束期 YYYY-MM，默认今年 12 月"),
):
    """按数据类型查询 EIA 数据"""
    try:
        data = await get_eia_service().get_series(data_type, frequency=frequency, start=start, end=end)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        )
    metadata = {"series_id": data["series_id"], "frequency": data["frequency"], **_summary(data)}
    return ApiResponse.ok(data=data["data"], metadata=metadata)
