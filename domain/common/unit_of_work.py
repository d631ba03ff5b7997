"""Unit of Work 抽象定义"""
from __future__ import annotations

from abc import ABC, abstractmethod

from domain.payment.repository import (
    DisputeRepository,
    PaymentRepository,
    ProcessorStateRepository,
)
from domain.class_registry.repository import ClassRepository, RegistryStateRepository
from domain.attendance.repository import AttendanceRepository, TrackerStateRepository


class AbstractUnitOfWork(ABC):
    """应用层事务边界控制抽象"""

    payment_repository: PaymentRepository
    dispute_repository: DisputeRepository
    processor_state_repository: ProcessorStateRepository
    class_repository: ClassRepository
    registry_state_repository: RegistryStateRepository
    attendance_repository: AttendanceRepository
    tracker_state_repository: TrackerStateRepository

    def __init__(self, *, readonly: bool = False) -> None:
        self._committed = False
        self._readonly = readonly

    async def __aenter__(self) -> "AbstractUnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc:
            await self.rollback()
        else:
            # 只在非只读且未显式提交时自动提交
            if not self._readonly and not self._committed:
                await self.commit()

    @abstractmethod
    async def commit(self) -> None:
        """提交事务"""
        ...

    @abstractmethod
    async def rollback(self) -> None:
        """回滚事务"""
