"""Domain entity representing a participant's attendance of a class."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from domain.common.exceptions import DomainValidationException


class AttendanceStatus(str, Enum):
    CHECKED_IN = "checked-in"
    COMPLETED = "completed"
    NO_SHOW = "no-show"


@dataclass
class Attendance:
    id: Optional[int]
    class_id: int
    participant: str
    checkin_time: int
    checkout_time: Optional[int] = None
    status: AttendanceStatus = AttendanceStatus.CHECKED_IN

    @property
    def is_checked_in(self) -> bool:
        return self.status == AttendanceStatus.CHECKED_IN

    def _leave(self, status: AttendanceStatus) -> None:
        if not self.is_checked_in:
            raise DomainValidationException(
                f"无法从状态 {self.status.value} 转换为 {status.value}",
                field="status",
            )
        self.status = status

    def check_out(self, block_height: int) -> None:
        self._leave(AttendanceStatus.COMPLETED)
        self.checkout_time = block_height

    def mark_no_show(self) -> None:
        self._leave(AttendanceStatus.NO_SHOW)


@dataclass
class TrackerState:
    owner: str
    class_registry_address: str
    payment_processor_address: str
    next_attendance_id: int = 0
