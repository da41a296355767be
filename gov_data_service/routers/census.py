"""
Census 数据路由
GET /api/census/data                  - 数据集查询
GET /api/census/variables/{dataset}   - 变量表
GET /api/census/population            - 各州人口
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from gov_data_service.models.response import ApiResponse
from gov_data_service.services.census_service import DEFAULT_DATASET, get_census_service

router = APIRouter(prefix="/api/census", tags=["Census"])


@router.get("/data", response_model=ApiResponse)
async def get_data(
    get: Optional[str] = Query(default=None, description="逗号分隔的变量名，例如 NAME,B01003_001E"),
    for_: Optional[str] = Query(default=None, alias="for"),
    in_: Optional[str] = Query(default=None, alias="in"),
    dataset: str = Query(default=DEFAULT_DATASET),
    year: Optional[int] = Query(default=None, description="数据年份，默认上一年"),
):
    """查询 Census 数据集"""
    if not get:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="get parameter is required",
        )
    try:
        data = await get_census_service().get_data(dataset, get, for_=for_, in_=in_, year=year)
        return ApiResponse.ok(data=data)
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        )


@router.get("/variables/{dataset:path}", response_model=ApiResponse)
async def get_variables(dataset: str, group: Optional[str] = Query(default=None)):
    """获取数据集可用变量，dataset 可含斜杠（如 acs/acs5）"""
    try:
        data = await get_census_service().get_variables(dataset, group=group)
        return ApiResponse.ok(data=data)
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        )


@router.get("/population", response_model=ApiResponse)
async def get_population(limit: int = Query(default=10, ge=1, le=60)):
    """各州总人口"""
    try:
        data = await get_census_service().get_population_by_state(limit=limit)
        return ApiResponse.ok(data=data)
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        )
