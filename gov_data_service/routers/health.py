"""健康检查路由"""

from datetime import datetime, timezone

from fastapi import APIRouter

from gov_data_service import __version__
from gov_data_service.db import check_health

router = APIRouter(tags=["健康检查"])

SERVICE_NAME = "gov-data-service"


@router.get("/health")
async def health():
    """服务健康检查"""
    return {
        "status": "OK",
        "timestamp": datetime.now(tz=timezone.utc).isoformat(),
        "service": SERVICE_NAME,
        "version": __version__,
        "cache": check_health(),
    }


@router.get("/healthz")
async def healthz():
    """Kubernetes liveness probe"""
    return {"status": "ok"}
