"""
支付领域服务 - 课程支付、退款与争议仲裁的业务规则
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .entity import (
    Dispute,
    DisputeOutcome,
    Payment,
    PaymentStatus,
    ProcessorState,
    split_fee,
)
from .events import (
    DisputeFiled,
    DisputeResolved,
    PaymentRecorded,
    PaymentRefunded,
    ProcessorConfigChanged,
)
from .exceptions import (
    AlreadyPaidException,
    AlreadyResolvedException,
    ClassNotActiveException,
    DisputeAlreadyFiledException,
    DisputeNotAllowedException,
    DisputeNotFoundException,
    DisputeOpenException,
    FeeTransferFailedException,
    InstructorTransferFailedException,
    InvalidCurrencyException,
    InvalidDisputeReasonException,
    InvalidFeePercentException,
    InvalidOutcomeException,
    InvalidPaymentStatusException,
    InvalidPrincipalException,
    InvalidRefundAmountException,
    InvalidTimestampException,
    MaxPaymentsExceededException,
    NotAuthorizedException,
    OnlyInstructorException,
    OnlyParticipantException,
    PaymentNotFoundException,
    RefundTransferFailedException,
    TransferRejected,
)
from .repository import DisputeRepository, PaymentRepository, ProcessorStateRepository
from domain.services.class_catalog import ClassCatalog
from domain.services.clock import BlockClock
from domain.services.settlement import SettlementGateway


# 固定规则，不随配置变化
MAX_FEE_PERCENT = 10
DISPUTE_WINDOW_BLOCKS = 144
MAX_PAYMENTS_PER_CLASS = 100


@dataclass(frozen=True)
class ProcessorPolicy:
    """Deployment-specific settlement parameters."""

    settlement_token: str = "STX"
    neutral_principal: str = "SP000000000000000000002Q6VF78"


class PaymentProcessor:
    """
    支付领域服务 - 编排支付状态机

    职责：
    1. 管理员配置（手续费比例、手续费金库、课程注册表引用）
    2. 课程支付：校验、手续费拆分、两笔转账、记账
    3. 讲师直接退款（存在未解决争议时禁止）
    4. 参与者发起争议、管理员仲裁
    5. 产生领域事件

    Every precondition is checked before the first mutation. Transfers happen
    before ledger writes; a rejected transfer propagates and the surrounding
    unit of work restores the store and the settlement journal.
    """

    def __init__(
        self,
        payment_repository: PaymentRepository,
        dispute_repository: DisputeRepository,
        state_repository: ProcessorStateRepository,
        catalog: ClassCatalog,
        settlement: SettlementGateway,
        clock: BlockClock,
        policy: ProcessorPolicy | None = None,
    ):
        self.payment_repository = payment_repository
        self.dispute_repository = dispute_repository
        self.state_repository = state_repository
        self.catalog = catalog
        self.settlement = settlement
        self.clock = clock
        self.policy = policy or ProcessorPolicy()
        self.events: List = []  # 领域事件收集

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    async def _require_owner(self, caller: str) -> ProcessorState:
        state = await self.state_repository.load()
        if caller != state.owner:
            raise NotAuthorizedException(caller)
        return state

    def _config_changed(self, setting: str, value: object) -> None:
        self.events.append(ProcessorConfigChanged(
            payment_id=None,
            block_height=self.clock.current_height(),
            setting=setting,
            value=str(value),
        ))

    async def set_fee_vault_address(self, caller: str, address: str) -> None:
        state = await self._require_owner(caller)
        if not address:
            raise InvalidPrincipalException("fee_vault_address")
        state.fee_vault_address = address
        await self.state_repository.save(state)
        self._config_changed("fee_vault_address", address)

    async def set_class_registry_address(self, caller: str, address: str) -> None:
        state = await self._require_owner(caller)
        if not address:
            raise InvalidPrincipalException("class_registry_address")
        state.class_registry_address = address
        await self.state_repository.save(state)
        self._config_changed("class_registry_address", address)

    async def set_platform_fee_percent(self, caller: str, percent: int) -> None:
        state = await self._require_owner(caller)
        if percent <= 0 or percent > MAX_FEE_PERCENT:
            raise InvalidFeePercentException(percent, MAX_FEE_PERCENT)
        state.platform_fee_percent = percent
        await self.state_repository.save(state)
        self._config_changed("platform_fee_percent", percent)

    # ------------------------------------------------------------------
    # Payment creation
    # ------------------------------------------------------------------
    async def _find_payment_by_participant(self, class_id: int, participant: str) -> Optional[Payment]:
        for payment_id in await self.payment_repository.list_ids_for_class(class_id) or []:
            payment = await self.payment_repository.get_by_id(payment_id)
            if payment is not None and payment.participant == participant:
                return payment
        return None

    async def pay_for_class(self, caller: str, class_id: int, currency: str) -> Payment:
        """
        课程支付

        业务规则（按顺序短路）：
        1. 币种必须是结算代币
        2. 课程必须存在
        3. 课程必须处于激活状态
        4. 课程开始高度不能早于当前区块高度
        5. 同一参与者不能重复支付
        6. 单课程支付数不能超过上限
        """
        if currency != self.policy.settlement_token:
            raise InvalidCurrencyException(currency, self.policy.settlement_token)

        details = await self.catalog.get_class_details(class_id)
        if not details.active:
            raise ClassNotActiveException(class_id)

        height = self.clock.current_height()
        if details.start_time < height:
            raise InvalidTimestampException(details.start_time, height)

        if await self._find_payment_by_participant(class_id, caller) is not None:
            raise AlreadyPaidException(class_id, caller)

        if await self.payment_repository.count_for_class(class_id) >= MAX_PAYMENTS_PER_CLASS:
            raise MaxPaymentsExceededException(class_id, MAX_PAYMENTS_PER_CLASS)

        state = await self.state_repository.load()
        fee, net = split_fee(details.price, state.platform_fee_percent)

        try:
            await self.settlement.transfer(fee, caller, state.fee_vault_address)
        except TransferRejected as exc:
            raise FeeTransferFailedException(exc) from exc
        try:
            await self.settlement.transfer(net, caller, details.instructor)
        except TransferRejected as exc:
            raise InstructorTransferFailedException(exc) from exc

        payment = Payment(
            id=state.next_payment_id,
            class_id=class_id,
            participant=caller,
            amount=details.price,
            timestamp=height,
            instructor=details.instructor,
            currency=currency,
        )
        created = await self.payment_repository.add(payment)

        state.next_payment_id += 1
        state.total_fees_collected += fee
        state.total_payments_processed += 1
        await self.state_repository.save(state)

        self.events.append(PaymentRecorded(
            payment_id=created.id,
            block_height=height,
            class_id=class_id,
            participant=caller,
            amount=details.price,
            fee=fee,
            net=net,
        ))
        return created

    # ------------------------------------------------------------------
    # Refunds and disputes
    # ------------------------------------------------------------------
    async def _get_payment(self, payment_id: int) -> Payment:
        payment = await self.payment_repository.get_by_id(payment_id)
        if payment is None:
            raise PaymentNotFoundException(payment_id)
        return payment

    async def _refund(self, payment: Payment, refund_amount: int) -> None:
        try:
            await self.settlement.transfer(refund_amount, payment.instructor, payment.participant)
        except TransferRejected as exc:
            raise RefundTransferFailedException(exc) from exc

    async def refund_payment(self, caller: str, payment_id: int, refund_amount: int) -> Payment:
        """
        讲师直接退款

        业务规则：
        1. 只有支付对应的讲师可以退款
        2. 只有 paid 状态可以退款（退款为终态）
        3. 退款金额不能超过原支付金额
        4. 存在未解决争议时禁止直接退款
        """
        payment = await self._get_payment(payment_id)
        if caller != payment.instructor:
            raise OnlyInstructorException(caller)
        if not payment.is_paid:
            raise InvalidPaymentStatusException(payment_id, payment.status.value)
        if not payment.can_refund(refund_amount):
            raise InvalidRefundAmountException(refund_amount, payment.amount)
        dispute = await self.dispute_repository.get(payment_id)
        if dispute is not None and dispute.is_open:
            raise DisputeOpenException(payment_id)

        await self._refund(payment, refund_amount)
        payment.mark_refunded()
        updated = await self.payment_repository.update(payment)

        self.events.append(PaymentRefunded(
            payment_id=payment_id,
            block_height=self.clock.current_height(),
            amount=refund_amount,
        ))
        return updated

    async def file_dispute(self, caller: str, payment_id: int, reason: str) -> Dispute:
        """参与者在争议窗口内发起争议（每笔支付最多一次）"""
        payment = await self._get_payment(payment_id)
        if caller != payment.participant:
            raise OnlyParticipantException(caller)

        height = self.clock.current_height()
        elapsed = height - payment.timestamp
        if elapsed >= DISPUTE_WINDOW_BLOCKS:
            raise DisputeNotAllowedException(payment_id, elapsed, DISPUTE_WINDOW_BLOCKS)
        if not reason:
            raise InvalidDisputeReasonException()
        if await self.dispute_repository.get(payment_id) is not None:
            raise DisputeAlreadyFiledException(payment_id)
        if not payment.is_paid:
            raise InvalidPaymentStatusException(payment_id, payment.status.value)

        dispute = Dispute(
            payment_id=payment_id,
            reason=reason,
            timestamp=height,
            resolver=self.policy.neutral_principal,
        )
        saved = await self.dispute_repository.save(dispute)
        self.events.append(DisputeFiled(payment_id=payment_id, block_height=height, reason=reason))
        return saved

    async def resolve_dispute(
        self,
        caller: str,
        payment_id: int,
        outcome: str,
        refund_amount: int = 0,
    ) -> Dispute:
        """
        管理员仲裁争议

        outcome=refund 时向参与者退款并将支付置为 disputed-refunded；
        outcome=no-refund 时不转账、支付状态不变，refund_amount 被忽略。
        """
        dispute = await self.dispute_repository.get(payment_id)
        if dispute is None:
            raise DisputeNotFoundException(payment_id)
        payment = await self._get_payment(payment_id)
        await self._require_owner(caller)
        if dispute.resolved:
            raise AlreadyResolvedException(payment_id)
        try:
            decided = DisputeOutcome(outcome)
        except ValueError:
            raise InvalidOutcomeException(str(outcome)) from None
        if decided == DisputeOutcome.PENDING:
            raise InvalidOutcomeException(decided.value)

        if decided == DisputeOutcome.REFUND:
            if not payment.can_refund(refund_amount):
                raise InvalidRefundAmountException(refund_amount, payment.amount)
            await self._refund(payment, refund_amount)
            payment.mark_disputed_refunded()
            await self.payment_repository.update(payment)
            self.events.append(PaymentRefunded(
                payment_id=payment_id,
                block_height=self.clock.current_height(),
                amount=refund_amount,
                via_dispute=True,
            ))

        dispute.resolve(decided, caller)
        saved = await self.dispute_repository.save(dispute)
        self.events.append(DisputeResolved(
            payment_id=payment_id,
            block_height=self.clock.current_height(),
            outcome=decided.value,
            resolver=caller,
        ))
        return saved

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------
    async def get_payment(self, payment_id: int) -> Optional[Payment]:
        return await self.payment_repository.get_by_id(payment_id)

    async def get_dispute(self, payment_id: int) -> Optional[Dispute]:
        return await self.dispute_repository.get(payment_id)

    async def get_payments_for_class(self, class_id: int) -> Optional[List[int]]:
        return await self.payment_repository.list_ids_for_class(class_id)

    async def get_payment_count_for_class(self, class_id: int) -> int:
        return await self.payment_repository.count_for_class(class_id)

    async def get_total_fees(self) -> int:
        return (await self.state_repository.load()).total_fees_collected

    async def get_total_payments(self) -> int:
        return (await self.state_repository.load()).total_payments_processed

    async def get_platform_fee_percent(self) -> int:
        return (await self.state_repository.load()).platform_fee_percent

    async def get_state(self) -> ProcessorState:
        return await self.state_repository.load()

    def clear_events(self) -> List:
        """清空并返回领域事件"""
        events = self.events.copy()
        self.events.clear()
        return events


__all__ = ["PaymentProcessor", "ProcessorPolicy", "PaymentStatus"]
