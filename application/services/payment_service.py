"""
Application service orchestrating payment use-cases.

Wraps the PaymentProcessor domain service: one serialized unit of work per
operation, DTOs in and out, domain events logged after commit.
"""
from __future__ import annotations

from application.dtos.payments import (
    ClassPaymentsDTO,
    DisputeDTO,
    PaymentDTO,
    ProcessorConfigDTO,
    ProcessorStatsDTO,
)
from application.services.base import SerializedService
from domain.payment.exceptions import DisputeNotFoundException, PaymentNotFoundException
from domain.payment.service import (
    DISPUTE_WINDOW_BLOCKS,
    MAX_PAYMENTS_PER_CLASS,
    PaymentProcessor,
)


class PaymentProcessorService(SerializedService):
    component = "payment_processor"

    # ------------------------------------------------------------------
    # Owner configuration
    # ------------------------------------------------------------------
    async def set_fee_vault_address(self, caller: str, address: str) -> ProcessorConfigDTO:
        await self._execute(
            "set_fee_vault_address",
            lambda p: p.set_fee_vault_address(caller, address),
            caller=caller,
        )
        return await self.get_config()

    async def set_class_registry_address(self, caller: str, address: str) -> ProcessorConfigDTO:
        await self._execute(
            "set_class_registry_address",
            lambda p: p.set_class_registry_address(caller, address),
            caller=caller,
        )
        return await self.get_config()

    async def set_platform_fee_percent(self, caller: str, percent: int) -> ProcessorConfigDTO:
        await self._execute(
            "set_platform_fee_percent",
            lambda p: p.set_platform_fee_percent(caller, percent),
            caller=caller,
            percent=percent,
        )
        return await self.get_config()

    # ------------------------------------------------------------------
    # Payment lifecycle
    # ------------------------------------------------------------------
    async def pay_for_class(self, caller: str, class_id: int, currency: str) -> PaymentDTO:
        payment = await self._execute(
            "pay_for_class",
            lambda p: p.pay_for_class(caller, class_id, currency),
            caller=caller,
            class_id=class_id,
        )
        return PaymentDTO.model_validate(payment)

    async def refund_payment(self, caller: str, payment_id: int, refund_amount: int) -> PaymentDTO:
        payment = await self._execute(
            "refund_payment",
            lambda p: p.refund_payment(caller, payment_id, refund_amount),
            caller=caller,
            payment_id=payment_id,
            refund_amount=refund_amount,
        )
        return PaymentDTO.model_validate(payment)

    async def file_dispute(self, caller: str, payment_id: int, reason: str) -> DisputeDTO:
        dispute = await self._execute(
            "file_dispute",
            lambda p: p.file_dispute(caller, payment_id, reason),
            caller=caller,
            payment_id=payment_id,
        )
        return DisputeDTO.model_validate(dispute)

    async def resolve_dispute(
        self, caller: str, payment_id: int, outcome: str, refund_amount: int = 0,
    ) -> DisputeDTO:
        dispute = await self._execute(
            "resolve_dispute",
            lambda p: p.resolve_dispute(caller, payment_id, outcome, refund_amount),
            caller=caller,
            payment_id=payment_id,
            outcome=outcome,
        )
        return DisputeDTO.model_validate(dispute)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    async def get_payment(self, payment_id: int) -> PaymentDTO:
        payment = await self._read(lambda p: p.get_payment(payment_id))
        if payment is None:
            raise PaymentNotFoundException(payment_id)
        return PaymentDTO.model_validate(payment)

    async def get_dispute(self, payment_id: int) -> DisputeDTO:
        dispute = await self._read(lambda p: p.get_dispute(payment_id))
        if dispute is None:
            raise DisputeNotFoundException(payment_id)
        return DisputeDTO.model_validate(dispute)

    async def get_payments_for_class(self, class_id: int) -> ClassPaymentsDTO:
        async def _collect(p: PaymentProcessor) -> ClassPaymentsDTO:
            return ClassPaymentsDTO(
                class_id=class_id,
                payment_ids=await p.get_payments_for_class(class_id),
                count=await p.get_payment_count_for_class(class_id),
            )

        return await self._read(_collect)

    async def get_stats(self) -> ProcessorStatsDTO:
        async def _collect(p: PaymentProcessor) -> ProcessorStatsDTO:
            return ProcessorStatsDTO(
                total_fees_collected=await p.get_total_fees(),
                total_payments_processed=await p.get_total_payments(),
                platform_fee_percent=await p.get_platform_fee_percent(),
            )

        return await self._read(_collect)

    async def get_config(self) -> ProcessorConfigDTO:
        async def _collect(p: PaymentProcessor) -> ProcessorConfigDTO:
            state = await p.get_state()
            return ProcessorConfigDTO(
                owner=state.owner,
                fee_vault_address=state.fee_vault_address,
                class_registry_address=state.class_registry_address,
                platform_fee_percent=state.platform_fee_percent,
                settlement_token=p.policy.settlement_token,
                dispute_window_blocks=DISPUTE_WINDOW_BLOCKS,
                max_payments_per_class=MAX_PAYMENTS_PER_CLASS,
            )

        return await self._read(_collect)
