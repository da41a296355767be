"""统一 API 响应模型"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field


def _now_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


class ApiResponse(BaseModel):
    """标准 API 响应封装：{success, data, error?, timestamp}"""
    success: bool = True
    data: Optional[Any] = None
    message: str = ""
    error: Optional[str] = None
    metadata: Optional[Any] = None
    timestamp: str = Field(default_factory=_now_iso)

    @classmethod
    def ok(
        cls, data: Any = None, message: str = "success", metadata: Any = None
    ) -> "ApiResponse":
        return cls(success=True, data=data, message=message, metadata=metadata)

    @classmethod
    def fail(cls, error: str, message: str = "failed") -> "ApiResponse":
        return cls(success=False, error=error, message=message)
