"""内存账本 Unit of Work 实现"""
from __future__ import annotations

from typing import Optional

from core.logging_config import get_logger
from domain.common.unit_of_work import AbstractUnitOfWork
from infrastructure.database import InMemoryDatabase, Snapshot
from infrastructure.external.settlement.ledger import InMemorySettlementLedger, LedgerSnapshot
from infrastructure.repositories.attendance_repository import (
    InMemoryAttendanceRepository,
    InMemoryTrackerStateRepository,
)
from infrastructure.repositories.class_repository import (
    InMemoryClassRepository,
    InMemoryRegistryStateRepository,
)
from infrastructure.repositories.payment_repository import (
    InMemoryDisputeRepository,
    InMemoryPaymentRepository,
    InMemoryProcessorStateRepository,
)


logger = get_logger(__name__)


class InMemoryUnitOfWork(AbstractUnitOfWork):
    """
    基于快照的 Unit of Work

    进入时对数据库与结算账本拍快照，回滚时整体恢复，
    因此任何一步失败都不会留下部分写入或部分转账。
    调用方负责用应用层互斥锁串行化写操作。
    """

    def __init__(
        self,
        db: InMemoryDatabase,
        ledger: Optional[InMemorySettlementLedger] = None,
        *,
        readonly: bool = False,
    ) -> None:
        super().__init__(readonly=readonly)
        self.db = db
        self.ledger = ledger
        self._db_snapshot: Optional[Snapshot] = None
        self._ledger_snapshot: Optional[LedgerSnapshot] = None

    async def __aenter__(self) -> "InMemoryUnitOfWork":
        self.payment_repository = InMemoryPaymentRepository(self.db)
        self.dispute_repository = InMemoryDisputeRepository(self.db)
        self.processor_state_repository = InMemoryProcessorStateRepository(self.db)
        self.class_repository = InMemoryClassRepository(self.db)
        self.registry_state_repository = InMemoryRegistryStateRepository(self.db)
        self.attendance_repository = InMemoryAttendanceRepository(self.db)
        self.tracker_state_repository = InMemoryTrackerStateRepository(self.db)
        # 仅在非只读模式下拍快照
        if not self._readonly:
            self._db_snapshot = self.db.snapshot()
            if self.ledger is not None:
                self._ledger_snapshot = self.ledger.snapshot()
        return self

    async def commit(self) -> None:
        self._db_snapshot = None
        self._ledger_snapshot = None
        self._committed = True

    async def rollback(self) -> None:
        if self._db_snapshot is not None:
            self.db.restore(self._db_snapshot)
            logger.debug("unit_of_work_rolled_back")
        if self._ledger_snapshot is not None and self.ledger is not None:
            self.ledger.restore(self._ledger_snapshot)
        self._db_snapshot = None
        self._ledger_snapshot = None
        self._committed = False
