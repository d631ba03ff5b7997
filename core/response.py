"""
统一响应格式定义

成功与失败都使用 ``{code, message, data, error}`` 信封；失败时 ``error``
携带稳定的错误名（如 AlreadyPaid）与错误类别，客户端按类别决定是否重试。
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, Field, field_serializer

from domain.common.exceptions import (
    AuthorizationException,
    BusinessException,
    CapacityException,
    DomainValidationException,
    NotFoundException,
    SettlementException,
    StateConflictException,
)
from shared.codes import BusinessCode


T = TypeVar("T")


class ErrorCategory(str, Enum):
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not-found"
    STATE_CONFLICT = "state-conflict"
    VALIDATION = "validation"
    CAPACITY = "capacity"
    SETTLEMENT = "settlement"
    REQUEST = "request"
    SYSTEM = "system"


# 顺序即匹配优先级
_EXCEPTION_CATEGORIES = (
    (AuthorizationException, ErrorCategory.AUTHORIZATION),
    (NotFoundException, ErrorCategory.NOT_FOUND),
    (StateConflictException, ErrorCategory.STATE_CONFLICT),
    (DomainValidationException, ErrorCategory.VALIDATION),
    (CapacityException, ErrorCategory.CAPACITY),
    (SettlementException, ErrorCategory.SETTLEMENT),
)


def error_category(exc: BusinessException) -> ErrorCategory:
    for base, category in _EXCEPTION_CATEGORIES:
        if isinstance(exc, base):
            return category
    return ErrorCategory.REQUEST


class ErrorDetail(BaseModel):
    type: str
    category: ErrorCategory = ErrorCategory.REQUEST
    details: Optional[dict] = None
    field: Optional[str] = None
    request_id: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_serializer("timestamp")
    def serialize_timestamp(self, timestamp: datetime) -> str:
        # UTC ISO8601，以 Z 结尾
        return timestamp.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


class Response(BaseModel, Generic[T]):
    """统一响应模型"""
    code: int
    message: str
    data: Optional[T] = None
    error: Optional[ErrorDetail] = None


def success_response(
    data: Any = None,
    message: str = "Success",
    code: int = BusinessCode.SUCCESS,
) -> Response:
    return Response(code=code, message=message, data=data)


def error_response(
    code: int,
    message: str,
    error_type: str,
    category: ErrorCategory = ErrorCategory.REQUEST,
    details: Optional[dict] = None,
    field: Optional[str] = None,
    request_id: Optional[str] = None,
) -> Response:
    """
    创建错误响应

    Args:
        code: 业务状态码
        message: 错误消息
        error_type: 稳定的错误名
        category: 错误类别
        details: 错误详情
        field: 出错字段
        request_id: 请求ID
    """
    return Response(
        code=code,
        message=message,
        error=ErrorDetail(
            type=error_type,
            category=category,
            details=details,
            field=field,
            request_id=request_id,
        ),
    )


def business_error_response(exc: BusinessException, request_id: Optional[str] = None) -> Response:
    """由业务异常构造错误响应"""
    return error_response(
        code=exc.code,
        message=exc.message,
        error_type=exc.error_type,
        category=error_category(exc),
        details=exc.details,
        field=exc.field,
        request_id=request_id,
    )
