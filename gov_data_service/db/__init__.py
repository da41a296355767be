"""
本地存储管理模块
确保数据目录与缓存文件存在，并提供存储健康检查
"""

import json
import logging
import os

from gov_data_service.config import settings

logger = logging.getLogger(__name__)


def init_storage() -> bool:
    """创建数据目录并初始化空缓存文件，返回是否成功"""
    path = settings.CACHE_FILE
    try:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        if not os.path.exists(path):
            with open(path, "w", encoding="utf-8") as fh:
                json.dump({}, fh)
        logger.info(f"✅ 文件缓存就绪: {path}")
        return True
    except OSError as exc:
        logger.warning(f"⚠️ 缓存文件初始化失败（缓存写入将被跳过）: {exc}")
        return False


def check_health() -> dict:
    """检查缓存文件可读写状态"""
    path = settings.CACHE_FILE
    if not os.path.exists(path):
        return {"status": "missing", "file": path}
    if not os.access(path, os.R_OK | os.W_OK):
        return {"status": "unhealthy", "file": path, "error": "permission denied"}
    return {"status": "healthy", "file": path, "size_bytes": os.path.getsize(path)}
