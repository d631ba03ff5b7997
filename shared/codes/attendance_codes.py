"""
Attendance tracker specific codes (8xxxx).
"""
from __future__ import annotations

from enum import IntEnum


class AttendanceCode(IntEnum):
    NOT_AUTHORIZED = 80100
    CLASS_NOT_FOUND = 80101
    ATTENDANCE_NOT_FOUND = 80102
    ALREADY_CHECKED_IN = 80103
    CHECKIN_WINDOW_CLOSED = 80104
    MAX_ATTENDANCE_EXCEEDED = 80107
    CHECKOUT_NOT_ALLOWED = 80108
    NOT_INSTRUCTOR = 80109
