"""
Class registry exceptions.
"""
from __future__ import annotations

from typing import Optional

from domain.common.exceptions import (
    AuthorizationException,
    CapacityException,
    DomainValidationException,
    NotFoundException,
    StateConflictException,
)
from shared.codes.class_codes import ClassCode


class RegistryNotAuthorizedException(AuthorizationException):
    def __init__(self, caller: Optional[str] = None):
        super().__init__(
            "Only the registry owner may perform this operation",
            code=ClassCode.NOT_AUTHORIZED,
            error_type="NotAuthorized",
            caller=caller,
        )


class NotInstructorException(AuthorizationException):
    def __init__(self, caller: Optional[str] = None):
        super().__init__(
            "Only the class instructor may modify the class",
            code=ClassCode.NOT_INSTRUCTOR,
            error_type="NotInstructor",
            caller=caller,
        )


class ClassNotFoundException(NotFoundException):
    def __init__(self, class_id: int):
        super().__init__(
            f"Class {class_id} not found",
            code=ClassCode.CLASS_NOT_FOUND,
            error_type="ClassNotFound",
            details={"class_id": class_id},
        )


class ClassInactiveException(StateConflictException):
    def __init__(self, class_id: int):
        super().__init__(
            f"Class {class_id} is inactive",
            code=ClassCode.CLASS_INACTIVE,
            error_type="ClassInactive",
            details={"class_id": class_id},
        )


class InvalidClassStatusException(StateConflictException):
    def __init__(self, class_id: int):
        super().__init__(
            f"Class {class_id} is already canceled",
            code=ClassCode.INVALID_STATUS,
            error_type="InvalidClassStatus",
            details={"class_id": class_id},
        )


class PastStartTimeException(StateConflictException):
    def __init__(self, class_id: int, start_time: int):
        super().__init__(
            f"Class {class_id} already started at block {start_time}",
            code=ClassCode.PAST_START_TIME,
            error_type="PastStartTime",
            details={"class_id": class_id, "start_time": start_time},
        )


class ClassFieldException(DomainValidationException):
    """One of the editable class fields is out of range."""

    def __init__(self, field: str, code: ClassCode, error_type: str, message: str):
        super().__init__(message, code=code, error_type=error_type, field=field)


class MaxClassesExceededException(CapacityException):
    def __init__(self, limit: int):
        super().__init__(
            f"Registry reached the limit of {limit} classes",
            code=ClassCode.MAX_CLASSES_EXCEEDED,
            error_type="MaxClassesExceeded",
            limit=limit,
        )


class MaxInstructorClassesExceededException(CapacityException):
    def __init__(self, instructor: str, limit: int):
        super().__init__(
            f"{instructor} reached the limit of {limit} classes",
            code=ClassCode.MAX_INSTRUCTOR_CLASSES_EXCEEDED,
            error_type="MaxInstructorClassesExceeded",
            limit=limit,
        )


class MaxRegistrationsException(CapacityException):
    def __init__(self, class_id: int, capacity: int):
        super().__init__(
            f"Class {class_id} is full ({capacity} seats)",
            code=ClassCode.MAX_REGISTRATIONS,
            error_type="MaxRegistrations",
            limit=capacity,
        )
