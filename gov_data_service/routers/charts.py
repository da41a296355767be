"""
图表配置路由
POST /api/charts/config   - 生成图表配置
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from gov_data_service.models.response import ApiResponse
from gov_data_service.services.chart_service import get_chart_service

router = APIRouter(prefix="/api/charts", tags=["图表"])


class ChartConfigRequest(BaseModel):
    type: Optional[str] = None
    data: Optional[List[Any]] = None
    options: Optional[Dict[str, Any]] = None


@router.post("/config", response_model=ApiResponse)
async def generate_config(body: ChartConfigRequest):
    """根据图表类型与数据生成配置"""
    if not body.type or body.data is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Chart type and data are required",
        )
    try:
        config = get_chart_service().generate_config(body.type, body.data, body.options)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return ApiResponse.ok(data=config)
