"""Repository abstraction for class records."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from .entity import ClassRecord, RegistryState


class ClassRepository(ABC):
    @abstractmethod
    async def add(self, record: ClassRecord) -> ClassRecord:
        """Persist a new class and index it by instructor and as active."""

    @abstractmethod
    async def get_by_id(self, class_id: int) -> Optional[ClassRecord]:
        """Return a class by id."""

    @abstractmethod
    async def update(self, record: ClassRecord) -> ClassRecord:
        """Persist changes; inactive classes drop out of the active index."""

    @abstractmethod
    async def list_ids_by_instructor(self, instructor: str) -> List[int]:
        """Class ids created by the instructor, in creation order."""

    @abstractmethod
    async def list_active_ids(self) -> List[int]:
        """Ids of classes that have not been canceled."""


class RegistryStateRepository(ABC):
    @abstractmethod
    async def load(self) -> RegistryState: ...

    @abstractmethod
    async def save(self, state: RegistryState) -> RegistryState: ...
