"""
Attendance DTOs (Pydantic v2).
"""
from __future__ import annotations

from typing import Optional

from pydantic import field_validator

from .base import DTOBase, enum_value


class CheckInRequest(DTOBase):
    class_id: int


class AttendanceDTO(DTOBase):
    id: int
    class_id: int
    participant: str
    checkin_time: int
    checkout_time: Optional[int] = None
    status: str

    status_value = field_validator("status", mode="before")(enum_value)


class ClassAttendanceDTO(DTOBase):
    class_id: int
    attendance_ids: list[int]
    count: int


class ParticipantAttendanceDTO(DTOBase):
    participant: str
    class_id: int
    attendance_id: Optional[int] = None
    checked_in: bool = False
