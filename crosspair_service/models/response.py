"""统一 API 响应模型"""

from typing import Any, Optional
from pydantic import BaseModel

from crosspair_service.errors import CrossPairError


class ApiResponse(BaseModel):
    """标准 API 响应封装，error_kind 供前端区分限流 / 参数错误等情况"""
    success: bool = True
    data: Optional[Any] = None
    message: str = ""
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None, message: str = "success") -> "ApiResponse":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, error: str, message: str = "failed", kind: Optional[str] = None) -> "ApiResponse":
        return cls(success=False, error=error, message=message, error_kind=kind)

    @classmethod
    def from_error(cls, exc: CrossPairError) -> "ApiResponse":
        return cls.fail(error=exc.message, kind=type(exc).__name__)
