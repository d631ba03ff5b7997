"""领域层业务异常定义，供领域与基础设施使用。

核心（core）层仅负责全局映射与异常处理，尽量避免领域层反向依赖核心层。
The category bases below mirror the error taxonomy of the marketplace:
authorization, not-found, state-conflict, validation, capacity and settlement.
"""
from __future__ import annotations

from typing import Optional
from shared.codes import BusinessCode


class BusinessException(Exception):
    """业务异常基类"""

    def __init__(
        self,
        code: int,
        message: str,
        error_type: str = "BusinessError",
        details: Optional[dict] = None,
        field: Optional[str] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.error_type = error_type
        self.details = details
        self.field = field
        super().__init__(self.message)


class AuthorizationException(BusinessException):
    """Caller is not the principal required by the operation."""

    def __init__(
        self,
        message: str = "Caller is not authorized",
        *,
        code: int = BusinessCode.FORBIDDEN,
        error_type: str = "NotAuthorized",
        caller: Optional[str] = None,
    ):
        details = {"caller": caller} if caller is not None else None
        super().__init__(code=code, message=message, error_type=error_type, details=details)


class NotFoundException(BusinessException):
    def __init__(
        self,
        message: str,
        *,
        code: int = BusinessCode.NOT_FOUND,
        error_type: str = "NotFound",
        details: Optional[dict] = None,
    ):
        super().__init__(code=code, message=message, error_type=error_type, details=details)


class StateConflictException(BusinessException):
    def __init__(
        self,
        message: str,
        *,
        code: int = BusinessCode.STATE_CONFLICT,
        error_type: str = "StateConflict",
        details: Optional[dict] = None,
    ):
        super().__init__(code=code, message=message, error_type=error_type, details=details)


class DomainValidationException(BusinessException):
    def __init__(
        self,
        message: str,
        *,
        code: int = BusinessCode.PARAM_VALIDATION_ERROR,
        error_type: str = "DomainValidationError",
        field: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(
            code=code,
            message=message,
            error_type=error_type,
            details=details,
            field=field,
        )


class CapacityException(BusinessException):
    def __init__(
        self,
        message: str,
        *,
        code: int = BusinessCode.CAPACITY_EXCEEDED,
        error_type: str = "CapacityExceeded",
        limit: Optional[int] = None,
    ):
        details = {"limit": limit} if limit is not None else None
        super().__init__(code=code, message=message, error_type=error_type, details=details)


class SettlementException(BusinessException):
    """A monetary transfer could not be completed; the enclosing operation is aborted."""

    def __init__(
        self,
        message: str,
        *,
        code: int,
        error_type: str,
        details: Optional[dict] = None,
    ):
        super().__init__(code=code, message=message, error_type=error_type, details=details)
