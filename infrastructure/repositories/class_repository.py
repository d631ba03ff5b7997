"""Class registry repository backed by the in-memory store."""
from __future__ import annotations

from dataclasses import asdict
from typing import List, Optional

from domain.class_registry.entity import ClassRecord, RegistryState
from domain.class_registry.repository import ClassRepository, RegistryStateRepository
from infrastructure.database import InMemoryDatabase, STATE_KEY


class InMemoryClassRepository(ClassRepository):
    def __init__(self, db: InMemoryDatabase):
        self.db = db

    async def add(self, record: ClassRecord) -> ClassRecord:
        if record.id is None:
            raise ValueError("Class id must be assigned before persisting")
        self.db.table("classes")[record.id] = asdict(record)
        by_instructor = self.db.table("classes_by_instructor")
        by_instructor[record.instructor] = [*by_instructor.get(record.instructor, []), record.id]
        return ClassRecord(**self.db.table("classes")[record.id])

    async def get_by_id(self, class_id: int) -> Optional[ClassRecord]:
        row = self.db.table("classes").get(class_id)
        return ClassRecord(**row) if row else None

    async def update(self, record: ClassRecord) -> ClassRecord:
        classes = self.db.table("classes")
        if record.id not in classes:
            raise ValueError(f"Class with id {record.id} not found")
        classes[record.id] = asdict(record)
        return ClassRecord(**classes[record.id])

    async def list_ids_by_instructor(self, instructor: str) -> List[int]:
        return list(self.db.table("classes_by_instructor").get(instructor, []))

    async def list_active_ids(self) -> List[int]:
        return [class_id for class_id, row in sorted(self.db.table("classes").items()) if row["active"]]


class InMemoryRegistryStateRepository(RegistryStateRepository):
    def __init__(self, db: InMemoryDatabase):
        self.db = db

    async def load(self) -> RegistryState:
        row = self.db.table("registry_state").get(STATE_KEY)
        if row is None:
            raise RuntimeError("Class registry state is not initialized")
        return RegistryState(**row)

    async def save(self, state: RegistryState) -> RegistryState:
        self.db.table("registry_state")[STATE_KEY] = asdict(state)
        return await self.load()
