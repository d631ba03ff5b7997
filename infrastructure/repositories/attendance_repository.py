"""Attendance repository backed by the in-memory store."""
from __future__ import annotations

from dataclasses import asdict
from typing import List, Optional

from domain.attendance.entity import Attendance, AttendanceStatus, TrackerState
from domain.attendance.repository import AttendanceRepository, TrackerStateRepository
from infrastructure.database import InMemoryDatabase, STATE_KEY


class InMemoryAttendanceRepository(AttendanceRepository):
    def __init__(self, db: InMemoryDatabase):
        self.db = db

    def _to_entity(self, row: dict) -> Attendance:
        return Attendance(
            id=row["id"],
            class_id=row["class_id"],
            participant=row["participant"],
            checkin_time=row["checkin_time"],
            checkout_time=row["checkout_time"],
            status=AttendanceStatus(row["status"]),
        )

    def _to_row(self, entity: Attendance) -> dict:
        row = asdict(entity)
        row["status"] = entity.status.value
        return row

    async def add(self, record: Attendance) -> Attendance:
        if record.id is None:
            raise ValueError("Attendance id must be assigned before persisting")
        self.db.table("attendance")[record.id] = self._to_row(record)
        by_class = self.db.table("attendance_by_class")
        by_class[record.class_id] = [*by_class.get(record.class_id, []), record.id]
        # (participant, class_id) -> attendance id
        self.db.table("attendance_by_participant")[(record.participant, record.class_id)] = record.id
        return self._to_entity(self.db.table("attendance")[record.id])

    async def get_by_id(self, attendance_id: int) -> Optional[Attendance]:
        row = self.db.table("attendance").get(attendance_id)
        return self._to_entity(row) if row else None

    async def update(self, record: Attendance) -> Attendance:
        table = self.db.table("attendance")
        if record.id not in table:
            raise ValueError(f"Attendance with id {record.id} not found")
        table[record.id] = self._to_row(record)
        return self._to_entity(table[record.id])

    async def find_id(self, participant: str, class_id: int) -> Optional[int]:
        return self.db.table("attendance_by_participant").get((participant, class_id))

    async def list_ids_for_class(self, class_id: int) -> List[int]:
        return list(self.db.table("attendance_by_class").get(class_id, []))

    async def count_for_class(self, class_id: int) -> int:
        return len(self.db.table("attendance_by_class").get(class_id, []))


class InMemoryTrackerStateRepository(TrackerStateRepository):
    def __init__(self, db: InMemoryDatabase):
        self.db = db

    async def load(self) -> TrackerState:
        row = self.db.table("tracker_state").get(STATE_KEY)
        if row is None:
            raise RuntimeError("Attendance tracker state is not initialized")
        return TrackerState(**row)

    async def save(self, state: TrackerState) -> TrackerState:
        self.db.table("tracker_state")[STATE_KEY] = asdict(state)
        return await self.load()
