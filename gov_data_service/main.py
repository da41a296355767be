"""
政府统计数据聚合服务
独立 FastAPI 应用程序入口

启动方式:
    uvicorn gov_data_service.main:app --host 0.0.0.0 --port 3001
    python -m gov_data_service.main
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gov_data_service import __version__
from gov_data_service.config import settings
from gov_data_service.db import init_storage
from gov_data_service.routers import bls, cache, census, charts, data, eia, fred, health, noaa

# ── 日志配置 ──────────────────────────────────────────────
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def _error_body(error: str) -> dict:
    return {
        "success": False,
        "error": error or "Internal server error",
        "timestamp": datetime.now(tz=timezone.utc).isoformat(),
    }


# ── 生命周期管理 ──────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用启动/关闭生命周期钩子"""
    logger.info("=" * 60)
    logger.info(f"🚀 Gov Data Service v{__version__} 启动中")
    logger.info(f"   Port      : {settings.PORT}")
    logger.info(f"   Cache     : {settings.CACHE_FILE}")
    configured = [
        name for name, key in (
            ("BLS", settings.BLS_API_KEY),
            ("FRED", settings.FRED_API_KEY),
            ("Census", settings.CENSUS_API_KEY),
            ("EIA", settings.EIA_API_KEY),
            ("NOAA", settings.NOAA_API_TOKEN),
        ) if key
    ]
    logger.info(f"   API Keys  : {', '.join(configured) or '未配置'}")
    logger.info("=" * 60)

    # 缓存文件不可用时不阻断启动，请求直接走上游
    if not init_storage():
        logger.warning("⚠️ 缓存不可用，所有请求将直接访问上游数据源")

    yield

    logger.info("✅ 数据服务已关闭")


# ── 应用实例 ──────────────────────────────────────────────
app = FastAPI(
    title="Gov Data Service",
    description=(
        "美国政府统计数据聚合服务：\n"
        "- 📊 BLS 就业与物价\n"
        "- 🏦 FRED 宏观经济指标\n"
        "- 🏘️ Census 人口统计\n"
        "- ⚡ EIA 能源数据\n"
        "- 🌦️ NOAA 气候数据\n\n"
        "**分层架构**\n"
        "```\n"
        "Acquisition Layer  ← 调用各数据源 REST API\n"
        "Cache Layer        ← 单文件 JSON 缓存（TTL）\n"
        "Processing Layer   ← 数据归一化\n"
        "```"
    ),
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS 中间件 ───────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── 请求计时中间件 ─────────────────────────────────────────
@app.middleware("http")
async def add_process_time(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    response.headers["X-Process-Time"] = f"{(time.time() - start) * 1000:.1f}ms"
    return response


# ── 异常处理：统一为 {success, error, timestamp} ───────────
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} 失败: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content=_error_body(str(exc.detail)))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = [
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content=_error_body("; ".join(messages)))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"未处理的异常: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content=_error_body(str(exc)))


# ── 注册路由 ──────────────────────────────────────────────
app.include_router(health.router)
app.include_router(data.router)
app.include_router(bls.router)
app.include_router(fred.router)
app.include_router(census.router)
app.include_router(eia.router)
app.include_router(noaa.router)
app.include_router(charts.router)
app.include_router(cache.router)


# ── 根路由 ───────────────────────────────────────────────
@app.get("/", include_in_schema=False)
async def root():
    return {
        "message": "Government Data Visualization API",
        "version": __version__,
        "docs": "/docs",
        "endpoints": {
            "health": "/health",
            "data": "/api/data",
            "bls": "/api/bls",
            "fred": "/api/fred",
            "census": "/api/census",
            "charts": "/api/charts",
            "eia": "/api/eia",
            "noaa": "/api/noaa",
            "cache": "/api/cache",
        },
    }


# ── 直接运行入口 ──────────────────────────────────────────
if __name__ == "__main__":
    uvicorn.run(
        "gov_data_service.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
