"""
支付仓储实现 - 基于内存账本的数据访问
"""
from typing import Optional, List

from domain.payment.entity import (
    Dispute,
    DisputeOutcome,
    Payment,
    PaymentStatus,
    ProcessorState,
)
from domain.payment.repository import (
    DisputeRepository,
    PaymentRepository,
    ProcessorStateRepository,
)
from infrastructure.database import InMemoryDatabase, STATE_KEY
from core.logging_config import get_logger


logger = get_logger(__name__)


class InMemoryPaymentRepository(PaymentRepository):
    """支付仓储的内存实现"""

    def __init__(self, db: InMemoryDatabase):
        self.db = db

    def _to_entity(self, row: dict) -> Payment:
        """将存储行转换为领域实体"""
        return Payment(
            id=row["id"],
            class_id=row["class_id"],
            participant=row["participant"],
            amount=row["amount"],
            timestamp=row["timestamp"],
            instructor=row["instructor"],
            currency=row["currency"],
            status=PaymentStatus(row["status"]),
            refunded=row["refunded"],
        )

    def _to_row(self, entity: Payment) -> dict:
        """将领域实体转换为存储行"""
        return {
            "id": entity.id,
            "class_id": entity.class_id,
            "participant": entity.participant,
            "amount": entity.amount,
            "timestamp": entity.timestamp,
            "instructor": entity.instructor,
            "currency": entity.currency,
            "status": entity.status.value,
            "refunded": entity.refunded,
        }

    async def add(self, payment: Payment) -> Payment:
        if payment.id is None:
            raise ValueError("Payment id must be assigned before persisting")
        payments = self.db.table("payments")
        if payment.id in payments:
            raise ValueError(f"Payment with id {payment.id} already exists")
        payments[payment.id] = self._to_row(payment)
        by_class = self.db.table("payments_by_class")
        by_class[payment.class_id] = [*by_class.get(payment.class_id, []), payment.id]
        logger.debug(
            "payment_row_created",
            payment_id=payment.id,
            class_id=payment.class_id,
        )
        return self._to_entity(payments[payment.id])

    async def get_by_id(self, payment_id: int) -> Optional[Payment]:
        row = self.db.table("payments").get(payment_id)
        return self._to_entity(row) if row else None

    async def update(self, payment: Payment) -> Payment:
        payments = self.db.table("payments")
        if payment.id not in payments:
            raise ValueError(f"Payment with id {payment.id} not found")
        payments[payment.id] = self._to_row(payment)
        logger.debug("payment_row_updated", payment_id=payment.id, status=payment.status.value)
        return self._to_entity(payments[payment.id])

    async def list_ids_for_class(self, class_id: int) -> Optional[List[int]]:
        ids = self.db.table("payments_by_class").get(class_id)
        return list(ids) if ids is not None else None

    async def count_for_class(self, class_id: int) -> int:
        return len(self.db.table("payments_by_class").get(class_id, []))


class InMemoryDisputeRepository(DisputeRepository):
    def __init__(self, db: InMemoryDatabase):
        self.db = db

    def _to_entity(self, row: dict) -> Dispute:
        return Dispute(
            payment_id=row["payment_id"],
            reason=row["reason"],
            timestamp=row["timestamp"],
            resolver=row["resolver"],
            resolved=row["resolved"],
            outcome=DisputeOutcome(row["outcome"]),
        )

    async def get(self, payment_id: int) -> Optional[Dispute]:
        row = self.db.table("disputes").get(payment_id)
        return self._to_entity(row) if row else None

    async def save(self, dispute: Dispute) -> Dispute:
        disputes = self.db.table("disputes")
        disputes[dispute.payment_id] = {
            "payment_id": dispute.payment_id,
            "reason": dispute.reason,
            "timestamp": dispute.timestamp,
            "resolver": dispute.resolver,
            "resolved": dispute.resolved,
            "outcome": dispute.outcome.value,
        }
        return self._to_entity(disputes[dispute.payment_id])


class InMemoryProcessorStateRepository(ProcessorStateRepository):
    def __init__(self, db: InMemoryDatabase):
        self.db = db

    async def load(self) -> ProcessorState:
        row = self.db.table("processor_state").get(STATE_KEY)
        if row is None:
            raise RuntimeError("Payment processor state is not initialized")
        return ProcessorState(**row)

    async def save(self, state: ProcessorState) -> ProcessorState:
        self.db.table("processor_state")[STATE_KEY] = {
            "owner": state.owner,
            "fee_vault_address": state.fee_vault_address,
            "class_registry_address": state.class_registry_address,
            "platform_fee_percent": state.platform_fee_percent,
            "next_payment_id": state.next_payment_id,
            "total_fees_collected": state.total_fees_collected,
            "total_payments_processed": state.total_payments_processed,
        }
        return await self.load()
