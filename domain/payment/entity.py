"""
支付领域实体 - 支付聚合根与争议实体

Amounts are integer units of the settlement token; timestamps are block heights.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from domain.common.exceptions import DomainValidationException


class PaymentStatus(str, Enum):
    """支付状态枚举"""
    PAID = "paid"
    REFUNDED = "refunded"
    DISPUTED_REFUNDED = "disputed-refunded"


class DisputeOutcome(str, Enum):
    """争议结果枚举"""
    PENDING = "pending"
    REFUND = "refund"
    NO_REFUND = "no-refund"


@dataclass(frozen=True)
class ClassDetails:
    """Snapshot of a class as seen by the processor at call time."""

    class_id: int
    price: int
    instructor: str
    active: bool
    start_time: int


@dataclass(frozen=True)
class Transfer:
    """One executed monetary movement in the settlement journal."""

    sequence: int
    amount: int
    sender: str
    recipient: str
    block_height: int


@dataclass
class Payment:
    """
    支付聚合根 - 管理支付生命周期

    业务规则：
    1. 同一参与者对同一课程只能支付一次
    2. 金额必须大于0
    3. 只有 paid 状态的支付才能退款，退款为终态
    4. 退款金额不能超过支付金额
    """

    id: Optional[int]
    class_id: int
    participant: str
    amount: int
    timestamp: int
    instructor: str
    currency: str
    status: PaymentStatus = PaymentStatus.PAID
    refunded: bool = False

    def __post_init__(self):
        if self.amount <= 0:
            raise DomainValidationException(
                f"支付金额必须大于0: {self.amount}",
                field="amount",
            )

    @property
    def is_paid(self) -> bool:
        return self.status == PaymentStatus.PAID

    def can_refund(self, refund_amount: int) -> bool:
        return 0 < refund_amount <= self.amount

    def _settle(self, status: PaymentStatus) -> None:
        if not self.is_paid or self.refunded:
            raise DomainValidationException(
                f"无法从状态 {self.status.value} 转换为 {status.value}",
                field="status",
            )
        self.status = status
        self.refunded = True

    def mark_refunded(self) -> None:
        """Direct refund by the instructor (terminal)."""
        self._settle(PaymentStatus.REFUNDED)

    def mark_disputed_refunded(self) -> None:
        """Refund authorized by dispute resolution (terminal)."""
        self._settle(PaymentStatus.DISPUTED_REFUNDED)


@dataclass
class Dispute:
    """
    争议实体 - Payment 聚合的一部分，以 payment_id 为键

    A dispute is open while ``resolved`` is false; resolution happens exactly once.
    """

    payment_id: int
    reason: str
    timestamp: int
    resolver: str
    resolved: bool = False
    outcome: DisputeOutcome = DisputeOutcome.PENDING

    @property
    def is_open(self) -> bool:
        return not self.resolved

    def resolve(self, outcome: DisputeOutcome, resolver: str) -> None:
        if self.resolved:
            raise DomainValidationException("争议已解决", field="resolved")
        if outcome == DisputeOutcome.PENDING:
            raise DomainValidationException("争议结果不能为 pending", field="outcome")
        self.resolved = True
        self.resolver = resolver
        self.outcome = outcome


@dataclass
class ProcessorState:
    """Process-wide configuration and running totals of the payment processor."""

    owner: str
    fee_vault_address: str
    class_registry_address: str
    platform_fee_percent: int
    next_payment_id: int = 0
    total_fees_collected: int = 0
    total_payments_processed: int = 0


def split_fee(price: int, fee_percent: int) -> tuple[int, int]:
    """Return ``(fee, net)`` with ``fee = floor(price * pct / 100)`` and ``fee + net == price``."""
    fee = (price * fee_percent) // 100
    return fee, price - fee
