"""
Attendance tracker exceptions.
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
from shared.codes.attendance_codes import AttendanceCode


class AttendanceNotAuthorizedException(AuthorizationException):
    def __init__(self, caller: Optional[str] = None):
        super().__init__(
            "Caller may not modify this attendance record",
            code=AttendanceCode.NOT_AUTHORIZED,
            error_type="NotAuthorized",
            caller=caller,
        )


class AttendanceNotInstructorException(AuthorizationException):
    def __init__(self, caller: Optional[str] = None):
        super().__init__(
            "Only the class instructor may mark a no-show",
            code=AttendanceCode.NOT_INSTRUCTOR,
            error_type="NotInstructor",
            caller=caller,
        )


class AttendanceClassNotFoundException(NotFoundException):
    def __init__(self, class_id: int):
        super().__init__(
            f"Class {class_id} not found",
            code=AttendanceCode.CLASS_NOT_FOUND,
            error_type="ClassNotFound",
            details={"class_id": class_id},
        )


class AttendanceNotFoundException(NotFoundException):
    def __init__(self, attendance_id: int):
        super().__init__(
            f"Attendance record {attendance_id} not found",
            code=AttendanceCode.ATTENDANCE_NOT_FOUND,
            error_type="AttendanceNotFound",
            details={"attendance_id": attendance_id},
        )


class AlreadyCheckedInException(StateConflictException):
    def __init__(self, participant: str, class_id: int):
        super().__init__(
            f"{participant} already checked in to class {class_id}",
            code=AttendanceCode.ALREADY_CHECKED_IN,
            error_type="AlreadyCheckedIn",
            details={"participant": participant, "class_id": class_id},
        )


class CheckoutNotAllowedException(StateConflictException):
    def __init__(self, attendance_id: int, status: str):
        super().__init__(
            f"Attendance {attendance_id} has status {status}",
            code=AttendanceCode.CHECKOUT_NOT_ALLOWED,
            error_type="CheckoutNotAllowed",
            details={"attendance_id": attendance_id, "status": status},
        )


class CheckinWindowClosedException(DomainValidationException):
    def __init__(self, class_id: int, block_height: int, opens: int, closes: int):
        super().__init__(
            f"Check-in for class {class_id} is open between blocks {opens} and {closes}",
            code=AttendanceCode.CHECKIN_WINDOW_CLOSED,
            error_type="CheckinWindowClosed",
            details={"class_id": class_id, "block_height": block_height, "opens": opens, "closes": closes},
        )


class MaxAttendanceExceededException(CapacityException):
    def __init__(self, class_id: int, limit: int):
        super().__init__(
            f"Class {class_id} reached the limit of {limit} check-ins",
            code=AttendanceCode.MAX_ATTENDANCE_EXCEEDED,
            error_type="MaxAttendanceExceeded",
            limit=limit,
        )
