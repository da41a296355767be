"""
Layer 2 – 缓存层
单文件 JSON 键值缓存：{key: {"value": ..., "expires_at": epoch 秒}}

每次操作都会重新加载整个文件，写操作后整体回写。
过期条目只在读取时惰性删除，不做后台清理；没有文件锁，
多进程同时写同一个文件可能丢失更新。
"""

import hashlib
import json
import logging
import os
import tempfile
import time
from typing import Any, Dict, Optional

from gov_data_service.config import settings

logger = logging.getLogger(__name__)

_MAX_KEY_LENGTH = 200


def _now() -> float:
    return time.time()


def make_key(namespace: str, *parts: Any) -> str:
    """生成规范化缓存键，dict / list 参数按排序后的 JSON 写入"""
    normalized = [
        p if isinstance(p, str) else json.dumps(p, sort_keys=True, default=str)
        for p in parts
    ]
    raw = ":".join([namespace] + normalized)
    if len(raw) > _MAX_KEY_LENGTH:
        raw = namespace + ":" + hashlib.md5(raw.encode()).hexdigest()
    return raw


class CacheLayer:
    """基于单个 JSON 文件的 TTL 缓存"""

    def __init__(self, path: Optional[str] = None):
        self._path = path or settings.CACHE_FILE
        self._entries: Dict[str, Dict[str, Any]] = {}

    @property
    def path(self) -> str:
        return self._path

    # ── 文件读写 ──────────────────────────────────────────

    def _load(self) -> None:
        if not os.path.exists(self._path):
            self._entries = {}
            return
        try:
            with open(self._path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
            self._entries = data if isinstance(data, dict) else {}
        except (OSError, ValueError) as exc:
            logger.warning(f"缓存文件读取失败，按空缓存处理: {exc}")
            self._entries = {}

    def _save(self) -> bool:
        """先写同目录临时文件再替换，写入失败时原文件保持不变"""
        directory = os.path.dirname(self._path) or "."
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".cache-", suffix=".tmp", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self._entries, fh, ensure_ascii=False, indent=2, default=str)
            os.replace(tmp_path, self._path)
            return True
        except (OSError, TypeError, ValueError) as exc:
            logger.error(f"缓存文件写入失败: {exc}")
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            return False

    @staticmethod
    def _expired(entry: Dict[str, Any], now: float) -> bool:
        expires_at = entry.get("expires_at")
        return not isinstance(expires_at, (int, float)) or expires_at < now

    # ── 基本操作 ──────────────────────────────────────────

    async def get(self, key: str) -> Optional[Any]:
        self._load()
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._expired(entry, _now()):
            logger.debug(f"缓存已过期: {key}")
            del self._entries[key]
            self._save()
            return None
        logger.debug(f"缓存命中: {key}")
        return entry.get("value")

    async def set(self, key: str, value: Any, ttl: int = None) -> bool:
        if ttl is None:
            ttl = settings.CACHE_TTL
        self._load()
        self._entries[key] = {"value": value, "expires_at": _now() + ttl}
        ok = self._save()
        if ok:
            logger.debug(f"缓存写入: {key} (ttl={ttl}s)")
        return ok

    async def delete(self, key: str) -> bool:
        """删除条目（含已过期条目），键不存在时返回 False"""
        self._load()
        if self._entries.pop(key, None) is None:
            return False
        return self._save()

    async def exists(self, key: str) -> bool:
        self._load()
        entry = self._entries.get(key)
        return entry is not None and not self._expired(entry, _now())

    # ── 管理 ──────────────────────────────────────────────

    async def clear(self) -> int:
        """清空全部条目，返回删除数量"""
        self._load()
        count = len(self._entries)
        self._entries = {}
        self._save()
        return count

    async def stats(self) -> dict:
        self._load()
        now = _now()
        expired = sum(1 for e in self._entries.values() if self._expired(e, now))
        size = os.path.getsize(self._path) if os.path.exists(self._path) else 0
        return {
            "file": self._path,
            "entries": len(self._entries),
            "expired": expired,
            "size_bytes": size,
        }


# ── 模块级别单例 ──────────────────────────────────────────
_cache: Optional[CacheLayer] = None


def get_cache_layer() -> CacheLayer:
    global _cache
    if _cache is None:
        _cache = CacheLayer()
    return _cache
