"""
数据服务配置模块
从环境变量 / .env 读取各数据源 API Key、缓存与 HTTP 设置
"""

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DataServiceSettings(BaseSettings):
    """数据服务配置"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── 基础配置 ──────────────────────────────────────────
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3001)
    DEBUG: bool = Field(default=False)
    ALLOWED_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000"]
    )

    # ── 数据源 API Key ─────────────────────────────────────
    BLS_API_KEY: str = Field(default="")
    FRED_API_KEY: str = Field(default="")
    CENSUS_API_KEY: str = Field(default="")
    EIA_API_KEY: str = Field(default="")
    NOAA_API_TOKEN: str = Field(default="")

    # ── 数据源地址 ─────────────────────────────────────────
    BLS_BASE_URL: str = Field(default="https://api.bls.gov/publicAPI/v2")
    FRED_BASE_URL: str = Field(default="https://api.stlouisfed.org/fred")
    CENSUS_BASE_URL: str = Field(default="https://api.census.gov/data")
    EIA_BASE_URL: str = Field(default="https://api.eia.gov/v2")
    NOAA_BASE_URL: str = Field(default="https://www.ncdc.noaa.gov/cdo-web/api/v2")

    HTTP_TIMEOUT: float = Field(default=30.0)      # 上游请求超时（秒）
    BLS_MAX_SERIES: int = Field(default=50)        # BLS 单次最多请求序列数
    EIA_MOCK_FALLBACK: bool = Field(default=True)  # EIA 失败时返回内置示例数据

    # ── 缓存配置 ──────────────────────────────────────────
    CACHE_FILE: str = Field(default="./data/cache.json")
    CACHE_TTL: int = Field(default=3600)             # 通用 TTL（BLS / FRED / Census）
    EIA_CACHE_TTL: int = Field(default=7200)
    NOAA_CACHE_TTL: int = Field(default=14400)
    METADATA_CACHE_TTL: int = Field(default=86400)   # 变量表、数据集列表等元数据

    # ── 日志配置 ──────────────────────────────────────────
    LOG_LEVEL: str = Field(default="INFO")


@lru_cache
def get_settings() -> DataServiceSettings:
    """获取全局配置（单例）"""
    return DataServiceSettings()


settings = get_settings()
