"""
组合根 - 构建市场服务图（存储、时钟、结算账本、互斥锁与领域策略）

Every ledger and every piece of configuration lives on the returned
``Marketplace``; nothing is module-global, so tests build a fresh one per case.
"""
from __future__ import annotations

import asyncio
from dataclasses import asdict, dataclass, field

from core.config import Settings
from core.logging_config import get_logger
from domain.attendance.entity import TrackerState
from domain.attendance.service import AttendancePolicy, AttendanceTracker
from domain.class_registry.entity import RegistryState
from domain.class_registry.service import ClassRegistry, RegistryPolicy
from domain.payment.entity import ProcessorState
from domain.payment.service import PaymentProcessor, ProcessorPolicy
from infrastructure.clock import ManualBlockClock
from infrastructure.database import InMemoryDatabase, STATE_KEY
from infrastructure.external.settlement import get_settlement_gateway
from infrastructure.external.settlement.ledger import InMemorySettlementLedger
from infrastructure.unit_of_work import InMemoryUnitOfWork


logger = get_logger(__name__)


@dataclass
class Marketplace:
    settings: Settings
    db: InMemoryDatabase
    clock: ManualBlockClock
    ledger: InMemorySettlementLedger
    processor_policy: ProcessorPolicy
    registry_policy: RegistryPolicy
    attendance_policy: AttendancePolicy
    # 所有写操作共享的互斥锁：同一时刻只允许一个状态变更
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def uow(self, *, readonly: bool = False) -> InMemoryUnitOfWork:
        return InMemoryUnitOfWork(self.db, self.ledger, readonly=readonly)

    def class_registry(self, uow: InMemoryUnitOfWork) -> ClassRegistry:
        return ClassRegistry(
            uow.class_repository,
            uow.registry_state_repository,
            self.clock,
            self.registry_policy,
        )

    def payment_processor(self, uow: InMemoryUnitOfWork) -> PaymentProcessor:
        return PaymentProcessor(
            uow.payment_repository,
            uow.dispute_repository,
            uow.processor_state_repository,
            catalog=self.class_registry(uow),
            settlement=self.ledger,
            clock=self.clock,
            policy=self.processor_policy,
        )

    def attendance_tracker(self, uow: InMemoryUnitOfWork) -> AttendanceTracker:
        return AttendanceTracker(
            uow.attendance_repository,
            uow.tracker_state_repository,
            catalog=self.class_registry(uow),
            clock=self.clock,
            policy=self.attendance_policy,
        )

    def seed(self) -> None:
        """写入三个组件的初始状态行（按配置）"""
        payments = self.settings.payments
        self.db.table("processor_state")[STATE_KEY] = asdict(ProcessorState(
            owner=payments.owner,
            fee_vault_address=payments.fee_vault_address,
            class_registry_address=payments.class_registry_address,
            platform_fee_percent=payments.platform_fee_percent,
        ))
        classes = self.settings.classes
        self.db.table("registry_state")[STATE_KEY] = asdict(RegistryState(
            owner=classes.owner,
            platform_fee_recipient=classes.platform_fee_recipient,
        ))
        attendance = self.settings.attendance
        self.db.table("tracker_state")[STATE_KEY] = asdict(TrackerState(
            owner=attendance.owner,
            class_registry_address=attendance.class_registry_address,
            payment_processor_address=attendance.payment_processor_address,
        ))

    def reset(self) -> None:
        """
        清空全部账本并重新写入初始状态

        警告：仅用于测试与开发环境！
        """
        self.db.reset()
        self.ledger.reset()
        self.seed()


def build_marketplace(settings: Settings | None = None) -> Marketplace:
    if settings is None:
        settings = Settings()

    clock = ManualBlockClock(settings.chain.initial_block_height)
    ledger = get_settlement_gateway(settings.payments, clock)
    payments = settings.payments
    marketplace = Marketplace(
        settings=settings,
        db=InMemoryDatabase(),
        clock=clock,
        ledger=ledger,
        processor_policy=ProcessorPolicy(
            settlement_token=payments.settlement_token,
            neutral_principal=payments.neutral_principal,
        ),
        registry_policy=RegistryPolicy(
            max_classes=settings.classes.max_classes,
            max_classes_per_instructor=settings.classes.max_classes_per_instructor,
            max_title_length=settings.classes.max_title_length,
            max_description_length=settings.classes.max_description_length,
            max_capacity=settings.classes.max_capacity,
        ),
        attendance_policy=AttendancePolicy(
            checkin_window_blocks=settings.attendance.checkin_window_blocks,
            max_attendance_per_class=settings.attendance.max_attendance_per_class,
        ),
    )
    marketplace.seed()
    logger.info(
        "marketplace_built",
        block_height=clock.current_height(),
        platform_fee_percent=payments.platform_fee_percent,
        strict_balances=payments.strict_balances,
    )
    return marketplace
