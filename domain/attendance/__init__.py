"""Attendance domain exports."""
from .entity import Attendance, AttendanceStatus
from .repository import AttendanceRepository

__all__ = ["Attendance", "AttendanceStatus", "AttendanceRepository"]
