"""Repository abstraction for attendance records."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from .entity import Attendance, TrackerState


class AttendanceRepository(ABC):
    @abstractmethod
    async def add(self, record: Attendance) -> Attendance:
        """Persist a check-in and index it by class and by (participant, class)."""

    @abstractmethod
    async def get_by_id(self, attendance_id: int) -> Optional[Attendance]: ...

    @abstractmethod
    async def update(self, record: Attendance) -> Attendance: ...

    @abstractmethod
    async def find_id(self, participant: str, class_id: int) -> Optional[int]: ...

    @abstractmethod
    async def list_ids_for_class(self, class_id: int) -> List[int]: ...

    @abstractmethod
    async def count_for_class(self, class_id: int) -> int: ...


class TrackerStateRepository(ABC):
    @abstractmethod
    async def load(self) -> TrackerState: ...

    @abstractmethod
    async def save(self, state: TrackerState) -> TrackerState: ...
