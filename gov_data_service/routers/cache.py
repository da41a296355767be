"""
缓存管理路由
GET    /api/cache/stats    - 缓存统计
DELETE /api/cache/{key}    - 删除单个条目
POST   /api/cache/clear    - 清空缓存
"""

from fastapi import APIRouter, HTTPException, status

from gov_data_service.layers.cache import get_cache_layer
from gov_data_service.models.response import ApiResponse

router = APIRouter(prefix="/api/cache", tags=["缓存管理"])


@router.get("/stats", response_model=ApiResponse)
async def cache_stats():
    """缓存条目数、过期条目数与文件大小"""
    return ApiResponse.ok(data=await get_cache_layer().stats())


@router.delete("/{key:path}", response_model=ApiResponse)
async def delete_entry(key: str):
    """删除指定缓存键"""
    if not await get_cache_layer().delete(key):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Cache key not found: {key}")
    return ApiResponse.ok(message=f"缓存已删除: {key}")


@router.post("/clear", response_model=ApiResponse)
async def clear_cache():
    """清空全部缓存条目"""
    removed = await get_cache_layer().clear()
    return ApiResponse.ok(data={"removed": removed}, message="缓存已清空")
