"""
数据源目录路由
GET /api/data/sources   - 可用数据源
GET /api/data/search    - 跨数据源搜索
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from gov_data_service.models.response import ApiResponse
from gov_data_service.services.catalog_service import SOURCE_IDS, get_catalog_service

router = APIRouter(prefix="/api/data", tags=["数据源"])


@router.get("/sources", response_model=ApiResponse)
async def list_sources():
    """列出全部数据源及 API Key 配置情况"""
    return ApiResponse.ok(data=get_catalog_service().list_sources())


@router.get("/search", response_model=ApiResponse)
async def search(
    query: Optional[str] = Query(default=None),
    source: Optional[str] = Query(default=None, description=f"限定数据源: {', '.join(SOURCE_IDS)}"),
    limit: int = Query(default=20, ge=1, le=100),
):
    """按关键词搜索序列 / 数据集"""
    if not query:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Search query is required",
        )
    if source is not None and source not in SOURCE_IDS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown source '{source}'. Available: {', '.join(SOURCE_IDS)}",
        )
    results = await get_catalog_service().search(query, source=source, limit=limit)
    return ApiResponse.ok(
        data={
            "query": query,
            "source": source,
            "results": results,
            "total": len(results),
            "limit": limit,
        },
    )
